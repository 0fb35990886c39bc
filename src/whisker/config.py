"""Whisker configuration.

WhiskerConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass

from whisker._errors import ConfigError


@dataclass(frozen=True, slots=True)
class WhiskerConfig:
    """Configuration for a Whisker server.

    Attributes:
        host: Bind address.
        port: Bind port.
        cert: Path to a PEM certificate.  TLS is enabled when both ``cert``
              and ``key`` are set.
        key: Path to the PEM private key matching ``cert``.
        metrics: Enable request accounting and the ``/debug/vars`` endpoint.
        profile_pool: Record live pooled buffers and expose them on
            ``/debug/pprof/buffer.pool``.
        workers: Number of Pounce workers (0 = auto-detect).
        max_data_size: Optional ceiling in bytes for ``/data`` payloads.
            ``None`` keeps the size unbounded.
        health_code: Status code advertised by ``/health`` at startup.
        echo_log: Print every echoed WebSocket frame to stderr.

    """

    host: str = "0.0.0.0"
    port: int = 80
    cert: str | None = None
    key: str | None = None
    metrics: bool = False
    profile_pool: bool = False
    workers: int = 1
    max_data_size: int | None = None
    health_code: int = 200
    echo_log: bool = True

    def __post_init__(self) -> None:
        if not 0 <= self.port <= 65535:
            msg = f"port must be between 0 and 65535 (got {self.port})"
            raise ConfigError(msg)
        if self.workers < 0:
            msg = f"workers must be >= 0 (got {self.workers})"
            raise ConfigError(msg)
        if self.max_data_size is not None and self.max_data_size < 0:
            msg = f"max_data_size must be >= 0 (got {self.max_data_size})"
            raise ConfigError(msg)
        if bool(self.cert) != bool(self.key):
            msg = "cert and key must both be set or both be omitted"
            raise ConfigError(msg)

    @property
    def tls(self) -> bool:
        """True when a certificate and key are configured."""
        return bool(self.cert and self.key)

    @property
    def url(self) -> str:
        """Base URL the server listens on."""
        scheme = "https" if self.tls else "http"
        return f"{scheme}://{self.host}:{self.port}"
