"""Health state — the status code advertised by ``/health``.

One integer, read by every health check and written rarely by an operator
(``POST /health``).  Any integer is accepted and later surfaced verbatim as
the response status, including values outside the usual HTTP range, so a
test can make the service look broken in unusual ways.

Thread Safety:
    Readers share a readers/writer lock; a write excludes readers and other
    writers for the duration of a single assignment.  Waiting writers block
    new readers so a stream of health checks cannot starve an operator.

"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from whisker._types import StatusCode

DEFAULT_HEALTH_CODE = 200


class _ReadWriteLock:
    """Writer-preferring readers/writer lock built on a ``Condition``."""

    __slots__ = ("_cond", "_readers", "_waiting_writers", "_writing")

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._waiting_writers = 0
        self._writing = False

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writing or self._waiting_writers:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._waiting_writers += 1
            while self._writing or self._readers:
                self._cond.wait()
            self._waiting_writers -= 1
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


class HealthState:
    """Process-wide mutable health code.

    Args:
        code: Initial code, healthy (200) by default.

    """

    __slots__ = ("_code", "_lock")

    def __init__(self, code: StatusCode = DEFAULT_HEALTH_CODE) -> None:
        self._code = code
        self._lock = _ReadWriteLock()

    def read(self) -> StatusCode:
        """Return the current code."""
        with self._lock.read():
            return self._code

    def write(self, code: StatusCode) -> StatusCode:
        """Replace the current code and return the previous one."""
        with self._lock.write():
            previous = self._code
            self._code = code
            return previous
