"""Pool profiler — tracks objects currently checked out of a pool.

A ``PoolProfile`` is told when an object leaves a pool (``add``) and when
it comes back (``remove``).  The recording variant keeps a table of live
objects so leaks show up as entries that never go away; the null variant
does nothing.  The pool behaves identically with either.

Thread Safety:
    ``RecordingPoolProfile`` guards its table with a ``threading.Lock``.
    ``NullPoolProfile`` holds no state.

"""

from __future__ import annotations

import threading
import time
import traceback
from dataclasses import dataclass
from typing import Any, Protocol


class PoolProfile(Protocol):
    """Capability interface for pool instrumentation."""

    name: str

    def add(self, obj: object, skip: int = 0) -> None:
        """Record that *obj* was handed out."""
        ...

    def remove(self, obj: object) -> None:
        """Record that *obj* was returned."""
        ...

    def count(self) -> int:
        """Number of objects currently handed out."""
        ...

    def snapshot(self) -> dict[str, Any]:
        """JSON-ready view of the live objects."""
        ...


@dataclass(frozen=True, slots=True)
class ProfileEntry:
    """A live object in a recording profile.

    Attributes:
        acquired_ns: Monotonic timestamp of the ``add`` call.
        origin: ``file:line in function`` of the code that borrowed it.

    """

    acquired_ns: int
    origin: str


class RecordingPoolProfile:
    """Keeps one entry per live object, keyed by ``id(obj)``.

    Args:
        name: Profile name, usually the pool name.

    """

    __slots__ = ("_entries", "_lock", "name")

    def __init__(self, name: str) -> None:
        self.name = name
        self._entries: dict[int, ProfileEntry] = {}
        self._lock = threading.Lock()

    def add(self, obj: object, skip: int = 0) -> None:
        # skip counts frames above the caller (the pool's own frames)
        frames = traceback.extract_stack(limit=skip + 2)
        frame = frames[0]
        origin = f"{frame.filename}:{frame.lineno} in {frame.name}"
        entry = ProfileEntry(acquired_ns=time.monotonic_ns(), origin=origin)
        with self._lock:
            self._entries[id(obj)] = entry

    def remove(self, obj: object) -> None:
        with self._lock:
            self._entries.pop(id(obj), None)

    def count(self) -> int:
        with self._lock:
            return len(self._entries)

    def snapshot(self) -> dict[str, Any]:
        """Return the live entries, oldest first, with their ages."""
        now = time.monotonic_ns()
        with self._lock:
            entries = sorted(self._entries.values(), key=lambda e: e.acquired_ns)
        return {
            "name": self.name,
            "count": len(entries),
            "entries": [
                {
                    "age_ms": round((now - e.acquired_ns) / 1_000_000, 3),
                    "origin": e.origin,
                }
                for e in entries
            ],
        }


class NullPoolProfile:
    """No-op profile used when profiling is disabled."""

    __slots__ = ("name",)

    def __init__(self, name: str = "") -> None:
        self.name = name

    def add(self, obj: object, skip: int = 0) -> None:
        pass

    def remove(self, obj: object) -> None:
        pass

    def count(self) -> int:
        return 0

    def snapshot(self) -> dict[str, Any]:
        return {"name": self.name, "count": 0, "entries": []}
