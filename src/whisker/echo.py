"""WebSocket echo — ASGI dispatch in front of the Chirp app.

Chirp routes HTTP only, so ``EchoDispatcher`` sits between Pounce and the
Chirp app.  WebSocket scopes are handled here; every other scope (http,
lifespan, Pounce worker hooks) passes through to Chirp unchanged.

Each received message is sent straight back with the same frame type.
Messages are independent: there is no session state beyond the socket.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Any

from whisker._types import FrameKind

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, MutableMapping

    from whisker.app import Services

    type Scope = MutableMapping[str, Any]
    type Message = MutableMapping[str, Any]
    type Receive = Callable[[], Awaitable[Message]]
    type Send = Callable[[Message], Awaitable[None]]
    type ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]

ECHO_PATH = "/echo"

# RFC 6455 close code 1008: policy violation
POLICY_VIOLATION = 1008


def format_binary(payload: bytes) -> str:
    """``b"\\x01\\x02"`` -> ``Received b:1,2,``."""
    return "Received b:" + "".join(f"{b}," for b in payload)


class EchoDispatcher:
    """ASGI callable that echoes WebSocket traffic on ``/echo``.

    Args:
        app: The Chirp app (or any ASGI app) serving everything else.
        services: Shared services; config and collector are used here.

    """

    __slots__ = ("_services", "app", "path")

    def __init__(self, app: ASGIApp, services: Services, *, path: str = ECHO_PATH) -> None:
        self.app = app
        self.path = path
        self._services = services

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "websocket":
            await self.app(scope, receive, send)
            return

        if scope.get("path") != self.path:
            await _reject(receive, send)
            return

        await self._echo(scope, receive, send)

    async def _echo(self, scope: Scope, receive: Receive, send: Send) -> None:
        message = await receive()
        if message["type"] != "websocket.connect":
            return
        await send({"type": "websocket.accept"})

        path = scope.get("path", self.path)
        while True:
            message = await receive()
            kind = message["type"]
            if kind == "websocket.disconnect":
                return
            if kind != "websocket.receive":
                continue

            text = message.get("text")
            if text is not None:
                await send({"type": "websocket.send", "text": text})
                self._observe("text", text.encode("utf-8"), path)
            else:
                data = message.get("bytes") or b""
                await send({"type": "websocket.send", "bytes": data})
                self._observe("binary", data, path)

    def _observe(self, kind: FrameKind, payload: bytes, path: str) -> None:
        if self._services.config.echo_log:
            print(format_binary(payload), file=sys.stderr)
        self._services.collector.record_echo(kind, len(payload), path=path)


async def _reject(receive: Receive, send: Send) -> None:
    """Close a WebSocket opened on a path nothing serves."""
    message = await receive()
    if message["type"] == "websocket.connect":
        await send({"type": "websocket.close", "code": POLICY_VIOLATION})
