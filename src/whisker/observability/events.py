"""Event model for whisker observability.

Defines the events whisker itself produces.  Pounce lifecycle events
(connection open, request, response, close) are stored as-is next to them.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass

from whisker._types import FrameKind


@dataclass(frozen=True, slots=True)
class HealthChanged:
    """The advertised health code was replaced through ``POST /health``.

    Attributes:
        previous: Code advertised before the write.
        current: Code advertised after the write.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    previous: int
    current: int
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class MessageEchoed:
    """A WebSocket frame was echoed back to its sender.

    Attributes:
        kind: ``"text"`` or ``"binary"``.
        size: Payload size in bytes.
        path: Request path of the WebSocket session.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    kind: FrameKind
    size: int
    path: str
    timestamp_ns: int


type WhiskerEvent = HealthChanged | MessageEchoed


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
