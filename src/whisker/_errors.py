"""Whisker error hierarchy.

All whisker-specific errors inherit from WhiskerError for easy catching.
The core components (pool, generator, health state, counters) never raise;
these errors belong to the configuration and request-parsing edges.
"""


class WhiskerError(Exception):
    """Base error for all whisker operations."""


class ConfigError(WhiskerError):
    """Invalid or missing configuration."""


class InputError(WhiskerError):
    """Malformed client input (query parameter or request body).

    Handlers turn this into a client-error response; it is never fatal
    to the process.

    Attributes:
        status: HTTP status code to answer with.

    """

    def __init__(self, message: str, *, status: int = 400) -> None:
        super().__init__(message)
        self.status = status
