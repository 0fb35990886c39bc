"""Event log — bounded, thread-safe store behind ``/debug/events``.

Keeps the most recent events in a ring buffer and counts everything ever
recorded, so the debug endpoint can report how much history was dropped.
Entries are whisker's own events next to whatever Pounce hands the
collector; both are frozen dataclasses carrying ``timestamp_ns``.

Thread Safety:
    Every method takes a single ``threading.Lock``.  Pounce worker threads
    append while request handlers query.

"""

import threading
from collections import Counter, deque
from dataclasses import fields, is_dataclass
from typing import Any


def event_record(event: Any) -> dict[str, Any]:
    """Flatten *event* into a JSON-friendly dict tagged with its type name."""
    record: dict[str, Any] = {"type": type(event).__name__}
    if is_dataclass(event):
        for field in fields(event):
            record[field.name] = getattr(event, field.name)
    else:
        record["repr"] = repr(event)
    return record


class EventLog:
    """Ring buffer of events with filtered, newest-first queries.

    Args:
        max_events: Number of events retained; older ones are discarded.

    """

    __slots__ = ("_events", "_lock", "_max_events", "_recorded")

    def __init__(self, max_events: int = 10_000) -> None:
        self._max_events = max_events
        self._events: deque[Any] = deque(maxlen=max_events)
        self._recorded = 0
        self._lock = threading.Lock()

    def append(self, event: Any) -> None:
        with self._lock:
            self._events.append(event)
            self._recorded += 1

    def query(
        self,
        *,
        event_type: type | str | None = None,
        since_ns: int = 0,
        path: str | None = None,
        limit: int = 100,
    ) -> list[Any]:
        """Return retained events matching every given filter, newest first.

        Args:
            event_type: Event class, or its name as shown in ``stats()``.
            since_ns: Skip events stamped before this monotonic time.
            path: Substring that the event's ``path`` must contain.
            limit: Maximum number of events returned.

        """
        if event_type is None or isinstance(event_type, str):
            type_name = event_type
        else:
            type_name = event_type.__name__

        with self._lock:
            snapshot = list(self._events)

        results: list[Any] = []
        for event in reversed(snapshot):
            if len(results) >= limit:
                break
            if type_name is not None and type(event).__name__ != type_name:
                continue
            if since_ns and getattr(event, "timestamp_ns", 0) < since_ns:
                continue
            if path is not None and path not in (getattr(event, "path", None) or ""):
                continue
            results.append(event)
        return results

    def stats(self) -> dict[str, Any]:
        """Retained, recorded and dropped counts plus a per-type breakdown."""
        with self._lock:
            snapshot = list(self._events)
            recorded = self._recorded

        return {
            "retained": len(snapshot),
            "recorded": recorded,
            "dropped": recorded - len(snapshot),
            "max_events": self._max_events,
            "by_type": dict(Counter(type(event).__name__ for event in snapshot)),
        }
