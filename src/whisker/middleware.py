"""Metrics middleware — request accounting at the ASGI boundary.

Installed only when metrics are enabled; without it the app is called
directly and pays nothing.

Flow per connection scope::

    on_start()  -> update_max(in_flight)  -> app(scope, receive, send)  -> on_finish()

The app call covers the whole exchange: a streamed body has been sent (or
abandoned) by the time it returns, and a WebSocket session counts as one
request.  ``on_finish`` runs in a ``finally`` so disconnects and errors
never leave a request in flight.  Lifespan and worker hook scopes, and the
``/debug/*`` inspection routes, are not counted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, MutableMapping

    from whisker.state.counters import RequestCounters

    type Scope = MutableMapping[str, Any]
    type Receive = Callable[[], Awaitable[MutableMapping[str, Any]]]
    type Send = Callable[[MutableMapping[str, Any]], Awaitable[None]]
    type ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]

DEBUG_PREFIX = "/debug/"
COUNTED_SCOPES = frozenset({"http", "websocket"})


class MetricsMiddleware:
    """ASGI wrapper feeding a ``RequestCounters`` instance.

    Args:
        app: The ASGI app being measured.
        counters: Counters shared by every worker thread.

    """

    __slots__ = ("app", "counters")

    def __init__(self, app: ASGIApp, counters: RequestCounters) -> None:
        self.app = app
        self.counters = counters

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in COUNTED_SCOPES or scope.get("path", "").startswith(DEBUG_PREFIX):
            await self.app(scope, receive, send)
            return

        self.counters.update_max(self.counters.on_start())
        try:
            await self.app(scope, receive, send)
        finally:
            self.counters.on_finish()
