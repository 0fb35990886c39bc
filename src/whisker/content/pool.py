"""Buffer pool — reusable growable byte buffers.

Large synthetic payloads are built into ``PooledBuffer`` instances that go
back to a free list after the response is sent.  The next request picks up
an already-grown ``bytearray`` instead of allocating a fresh one.

The pool is a reuse optimisation, not a capacity limiter: ``acquire`` never
waits and never fails.  A miss simply creates a new buffer, and the free
list has no upper bound.

Thread Safety:
    The free list is guarded by a ``threading.Lock``.  A buffer itself is
    owned by exactly one borrower between ``acquire`` and ``release`` and is
    not locked.

"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from whisker.observability.profiler import NullPoolProfile

if TYPE_CHECKING:
    from whisker.observability.profiler import PoolProfile

DEFAULT_POOL_NAME = "buffer.pool"


class PooledBuffer:
    """A growable byte sequence with a write cursor.

    Writing past the current capacity grows the backing ``bytearray``;
    ``reset`` only moves the cursor back to zero, so capacity survives
    across borrows.

    """

    __slots__ = ("_data", "_length")

    def __init__(self) -> None:
        self._data = bytearray()
        self._length = 0

    def __len__(self) -> int:
        return self._length

    @property
    def capacity(self) -> int:
        """Bytes allocated in the backing store."""
        return len(self._data)

    def write(self, data: bytes | bytearray) -> int:
        """Append *data* at the cursor and return the number of bytes written."""
        n = len(data)
        end = self._length + n
        # Overwrites in place when capacity allows, grows otherwise.
        self._data[self._length:end] = data
        self._length = end
        return n

    def write_byte(self, value: int) -> None:
        """Append a single byte."""
        if self._length < len(self._data):
            self._data[self._length] = value
        else:
            self._data.append(value)
        self._length += 1

    def reset(self) -> None:
        """Truncate to zero length, keeping capacity."""
        self._length = 0

    def getvalue(self) -> bytes:
        """Copy of the written bytes."""
        return bytes(self._data[: self._length])

    def iter_chunks(self, chunk_size: int = 64 * 1024) -> Iterator[bytes]:
        """Yield the written bytes as copies of at most *chunk_size* bytes."""
        for start in range(0, self._length, chunk_size):
            end = min(start + chunk_size, self._length)
            yield bytes(self._data[start:end])


class BufferPool:
    """Free list of ``PooledBuffer`` instances plus a factory for misses.

    Args:
        name: Pool name, also used as the profile name.
        profile: Instrumentation hook.  Defaults to a ``NullPoolProfile``.
        factory: Creates a buffer on a pool miss.

    """

    __slots__ = ("_created", "_factory", "_free", "_in_use", "_lock", "name", "profile")

    def __init__(
        self,
        name: str = DEFAULT_POOL_NAME,
        *,
        profile: PoolProfile | None = None,
        factory: Callable[[], PooledBuffer] = PooledBuffer,
    ) -> None:
        self.name = name
        self.profile = profile if profile is not None else NullPoolProfile(name)
        self._factory = factory
        self._free: list[PooledBuffer] = []
        self._created = 0
        self._in_use = 0
        self._lock = threading.Lock()

    def acquire(self, *, skip: int = 0) -> PooledBuffer:
        """Return a recycled buffer, or a new one on a pool miss.

        *skip* is the number of extra frames between the borrower and this
        call, so a recording profile attributes the buffer to the borrower.
        """
        with self._lock:
            self._in_use += 1
            if self._free:
                buffer = self._free.pop()
            else:
                buffer = None
                self._created += 1
        if buffer is None:
            buffer = self._factory()
        self.profile.add(buffer, skip=skip + 1)
        return buffer

    def release(self, buffer: PooledBuffer) -> None:
        """Reset *buffer* and put it back on the free list.

        Must be called exactly once per ``acquire``.
        """
        buffer.reset()
        self.profile.remove(buffer)
        with self._lock:
            self._in_use -= 1
            self._free.append(buffer)

    @contextmanager
    def borrow(self) -> Iterator[PooledBuffer]:
        """Acquire a buffer for the duration of a ``with`` block.

        The buffer is released on every exit path, including exceptions
        and closing a generator suspended inside the block.
        """
        buffer = self.acquire(skip=2)
        try:
            yield buffer
        finally:
            self.release(buffer)

    def clear(self) -> int:
        """Drop all idle buffers and return how many were dropped."""
        with self._lock:
            count = len(self._free)
            self._free.clear()
            return count

    def stats(self) -> dict[str, Any]:
        """Return pool counters for inspection."""
        with self._lock:
            idle = len(self._free)
            created = self._created
            in_use = self._in_use
        return {
            "name": self.name,
            "created": created,
            "idle": idle,
            "in_use": in_use,
        }
