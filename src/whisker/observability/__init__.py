"""Observability — event log, lifecycle collector, and pool profiling.

Aggregates events from:
- **Pounce**: Connection lifecycle (open, request, response, disconnect, close)
- **Whisker**: Health changes and echoed WebSocket frames

All events are frozen dataclasses with nanosecond timestamps, safe for
concurrent production from multiple worker threads.

Quick Start:
    >>> from whisker.observability import StackCollector, EventLog
    >>> log = EventLog()
    >>> collector = StackCollector(log)
    >>> # Pass collector to Pounce as lifecycle_collector
    >>> collector.record_health_change(200, 503)

"""

from whisker.observability.collector import StackCollector
from whisker.observability.events import (
    HealthChanged,
    MessageEchoed,
    WhiskerEvent,
    now_ns,
)
from whisker.observability.log import EventLog
from whisker.observability.profiler import (
    NullPoolProfile,
    PoolProfile,
    RecordingPoolProfile,
)

__all__ = [
    "EventLog",
    "HealthChanged",
    "MessageEchoed",
    "NullPoolProfile",
    "PoolProfile",
    "RecordingPoolProfile",
    "StackCollector",
    "WhiskerEvent",
    "now_ns",
]
