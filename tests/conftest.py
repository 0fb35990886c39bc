"""Shared test fixtures for whisker."""

from __future__ import annotations

from typing import Any

import pytest

from whisker.app import Services, create_chirp_app, create_services
from whisker.config import WhiskerConfig


@pytest.fixture
def services() -> Services:
    """Services for a default configuration (metrics off, unbounded size)."""
    return create_services(WhiskerConfig(echo_log=False))


@pytest.fixture
def metrics_services() -> Services:
    """Services with metrics and pool profiling enabled."""
    return create_services(
        WhiskerConfig(metrics=True, profile_pool=True, echo_log=False),
    )


def make_services(**overrides: Any) -> Services:
    """Build services for a config with *overrides* applied."""
    overrides.setdefault("echo_log", False)
    return create_services(WhiskerConfig(**overrides))


def make_app(services: Services) -> Any:
    """Chirp app for *services*, ready for ``TestClient``."""
    return create_chirp_app(services)


class ASGIRecorder:
    """Scripted ``receive`` plus a recording ``send`` for raw ASGI tests.

    Args:
        messages: Messages handed out by ``receive`` in order.  Once they
            run out, ``receive`` reports a disconnect.

    """

    def __init__(self, messages: list[dict[str, Any]], *, disconnect: str) -> None:
        self._messages = list(messages)
        self._disconnect = disconnect
        self.sent: list[dict[str, Any]] = []

    async def receive(self) -> dict[str, Any]:
        if self._messages:
            return self._messages.pop(0)
        return {"type": self._disconnect}

    async def send(self, message: Any) -> None:
        self.sent.append(dict(message))


def websocket_scope(path: str = "/echo") -> dict[str, Any]:
    """Minimal ASGI WebSocket scope."""
    return {
        "type": "websocket",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "scheme": "ws",
        "path": path,
        "raw_path": path.encode("latin-1"),
        "query_string": b"",
        "root_path": "",
        "headers": [],
        "client": ("127.0.0.1", 50000),
        "server": ("testserver", 80),
        "subprotocols": [],
    }


def http_scope(path: str, *, query: str = "", method: str = "GET") -> dict[str, Any]:
    """Minimal ASGI HTTP scope, shaped like the one Chirp's test client builds."""
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "path": path,
        "raw_path": path.encode("latin-1"),
        "query_string": query.encode("latin-1"),
        "root_path": "",
        "headers": [],
        "server": ("testserver", 80),
        "client": ("127.0.0.1", 0),
    }


async def asgi_request(app: Any, scope: dict[str, Any], body: bytes = b"") -> ASGIRecorder:
    """Drive one HTTP exchange through *app* and return what it sent."""
    session = ASGIRecorder(
        [{"type": "http.request", "body": body, "more_body": False}],
        disconnect="http.disconnect",
    )
    await app(scope, session.receive, session.send)
    return session


def sent_status(session: ASGIRecorder) -> int:
    """Status code from the ``http.response.start`` message."""
    return next(m["status"] for m in session.sent if m["type"] == "http.response.start")


def sent_body(session: ASGIRecorder) -> bytes:
    """Concatenated ``http.response.body`` payloads."""
    return b"".join(m.get("body", b"") for m in session.sent if m["type"] == "http.response.body")
