"""Stack collector — bridges Pounce lifecycle events into whisker's event log.

Implements Pounce's ``LifecycleCollector`` protocol so it can be passed
directly to the Pounce server.  Also provides methods for recording the
events whisker's own handlers produce.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.
    Safe for concurrent use from multiple Pounce worker threads.

"""

from typing import Any

from whisker._types import FrameKind
from whisker.observability.events import HealthChanged, MessageEchoed, now_ns
from whisker.observability.log import EventLog


class StackCollector:
    """Unified event collector for the server.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    # ----- Pounce LifecycleCollector protocol -----

    def record(self, event: Any) -> None:
        """Record a Pounce lifecycle event.

        Pounce events are frozen dataclasses and are stored directly.

        """
        self._log.append(event)

    # ----- Whisker events -----

    def record_health_change(self, previous: int, current: int) -> None:
        """Record a write to the health state."""
        self._log.append(
            HealthChanged(previous=previous, current=current, timestamp_ns=now_ns())
        )

    def record_echo(self, kind: FrameKind, size: int, *, path: str = "/echo") -> None:
        """Record an echoed WebSocket frame."""
        self._log.append(
            MessageEchoed(kind=kind, size=size, path=path, timestamp_ns=now_ns())
        )
