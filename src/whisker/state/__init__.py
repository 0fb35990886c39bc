"""State — process-wide health code and request counters."""

from whisker.state.counters import (
    CONCURRENT_REQUEST_COUNT,
    MAX_CONCURRENT_REQUEST_COUNT,
    TOTAL_REQUEST_COUNT,
    RequestCounters,
)
from whisker.state.health import DEFAULT_HEALTH_CODE, HealthState

__all__ = [
    "CONCURRENT_REQUEST_COUNT",
    "DEFAULT_HEALTH_CODE",
    "MAX_CONCURRENT_REQUEST_COUNT",
    "TOTAL_REQUEST_COUNT",
    "HealthState",
    "RequestCounters",
]
