"""Request counters — total, in-flight, and peak in-flight requests.

Updated at the start and end of every handled request by the metrics
middleware, read at any time by ``/debug/vars``.

Thread Safety:
    Every update is a single step under one ``threading.Lock``.  Reads go
    through properties that load a single attribute without taking the
    lock, so inspection never waits behind request traffic.

"""

import threading
from typing import Final

TOTAL_REQUEST_COUNT: Final = "totalRequestCount"
CONCURRENT_REQUEST_COUNT: Final = "concurrentRequestCount"
MAX_CONCURRENT_REQUEST_COUNT: Final = "maxConcurrentRequestCount"


class RequestCounters:
    """Three independent counters with monotonic peak tracking."""

    __slots__ = ("_in_flight", "_lock", "_max_in_flight", "_total")

    def __init__(self) -> None:
        self._total = 0
        self._in_flight = 0
        self._max_in_flight = 0
        self._lock = threading.Lock()

    @property
    def total(self) -> int:
        """Requests started since process start."""
        return self._total

    @property
    def in_flight(self) -> int:
        """Requests started and not yet finished."""
        return self._in_flight

    @property
    def max_in_flight(self) -> int:
        """Highest in-flight value ever recorded."""
        return self._max_in_flight

    def on_start(self) -> int:
        """Count a new request and return the new in-flight value."""
        with self._lock:
            self._total += 1
            self._in_flight += 1
            return self._in_flight

    def update_max(self, candidate: int) -> bool:
        """Raise the peak to *candidate* if it is higher.

        Returns True when the peak changed.  A lower candidate from a slower
        caller never overwrites a higher peak.
        """
        with self._lock:
            if candidate > self._max_in_flight:
                self._max_in_flight = candidate
                return True
            return False

    def on_finish(self) -> int:
        """Mark a request finished and return the new in-flight value."""
        with self._lock:
            self._in_flight -= 1
            return self._in_flight

    def snapshot(self) -> dict[str, int]:
        """Return the counters under their published names."""
        return {
            TOTAL_REQUEST_COUNT: self._total,
            CONCURRENT_REQUEST_COUNT: self._in_flight,
            MAX_CONCURRENT_REQUEST_COUNT: self._max_in_flight,
        }
