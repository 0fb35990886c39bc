"""Routes — handler set and debug endpoints, registered on a Chirp app."""

from __future__ import annotations

from typing import TYPE_CHECKING

from whisker.routes.debug import register_metrics_endpoints, register_pool_profile_endpoint
from whisker.routes.handlers import HandlerSet

if TYPE_CHECKING:
    from chirp import App

    from whisker.app import Services

__all__ = ["HandlerSet", "register_routes"]


def register_routes(app: App, services: Services) -> HandlerSet:
    """Register every route on *app* and return the bound handler set."""
    handlers = HandlerSet(services)

    app.route("/", name="whisker:whoami")(handlers.whoami)
    app.route("/api", name="whisker:api")(handlers.api)
    app.route("/data", name="whisker:data")(handlers.data)
    app.route("/bench", name="whisker:bench")(handlers.bench)
    app.route("/echo", name="whisker:echo")(handlers.echo_http)
    app.route(
        "/health",
        methods=["GET", "HEAD", "POST"],
        name="whisker:health",
    )(handlers.health)

    if services.config.metrics:
        register_metrics_endpoints(app, services)
    if services.config.profile_pool:
        register_pool_profile_endpoint(app, services)

    return handlers
