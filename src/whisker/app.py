"""Whisker application — wires the core services into Chirp and Pounce.

``create_app`` builds the full ASGI stack: Chirp routes behind the
WebSocket echo dispatcher, wrapped in request accounting when metrics
are enabled.  ``serve`` loads configuration and runs it
on a Pounce server.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from whisker.config import WhiskerConfig
from whisker.config_loader import load_config
from whisker.content.pool import DEFAULT_POOL_NAME, BufferPool
from whisker.observability import (
    EventLog,
    NullPoolProfile,
    RecordingPoolProfile,
    StackCollector,
)
from whisker.state.counters import RequestCounters
from whisker.state.health import HealthState

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from typing import Any

    from chirp import App

    type ASGIApp = Callable[[Any, Any, Any], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class Services:
    """Process-wide shared state handed to every handler.

    Attributes:
        config: Resolved configuration.
        pool: Buffer pool backing ``/data``.
        health: Mutable health status code.
        counters: Request counters (only fed when metrics are enabled).
        collector: Event collector, also given to Pounce.

    """

    config: WhiskerConfig
    pool: BufferPool
    health: HealthState
    counters: RequestCounters
    collector: StackCollector


def create_services(config: WhiskerConfig) -> Services:
    """Build the shared services for *config*."""
    if config.profile_pool:
        profile = RecordingPoolProfile(DEFAULT_POOL_NAME)
    else:
        profile = NullPoolProfile(DEFAULT_POOL_NAME)

    return Services(
        config=config,
        pool=BufferPool(DEFAULT_POOL_NAME, profile=profile),
        health=HealthState(config.health_code),
        counters=RequestCounters(),
        collector=StackCollector(EventLog()),
    )


def create_chirp_app(services: Services) -> App:
    """Create the Chirp app serving every HTTP route."""
    from chirp import App, AppConfig

    from whisker.routes import register_routes

    config = services.config
    app = App(config=AppConfig(host=config.host, port=config.port, debug=False))
    register_routes(app, services)
    return app


def create_app(
    config: WhiskerConfig | None = None,
    services: Services | None = None,
) -> ASGIApp:
    """Build the ASGI app: HTTP routes plus the ``/echo`` WebSocket.

    With metrics enabled the whole stack is wrapped in ``MetricsMiddleware``
    so every HTTP request and WebSocket session is counted.

    Args:
        config: Configuration; defaults to ``WhiskerConfig()``.
        services: Pre-built services, e.g. to inspect state in tests.
            Takes precedence over *config*.

    """
    from whisker.echo import EchoDispatcher
    from whisker.middleware import MetricsMiddleware

    if services is None:
        services = create_services(config if config is not None else WhiskerConfig())
    app: ASGIApp = EchoDispatcher(create_chirp_app(services), services)
    if services.config.metrics:
        app = MetricsMiddleware(app, services.counters)
    return app


def serve(root: str | Path = ".", **kwargs: object) -> None:
    """Run Whisker on a Pounce server.

    Args:
        root: Directory searched for ``whisker.yaml`` / ``whisker.toml``.
        **kwargs: Override WhiskerConfig fields.

    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    from whisker.banner import print_banner

    config = load_config(Path(root), **kwargs)
    services = create_services(config)
    app = create_app(services=services)

    print_banner(config)

    server_config = ServerConfig(
        host=config.host,
        port=config.port,
        workers=config.workers,
        ssl_certfile=config.cert,
        ssl_keyfile=config.key,
    )
    server = Server(server_config, app, lifecycle_collector=services.collector)
    server.run()

