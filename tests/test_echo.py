"""Tests for whisker.echo — WebSocket echo over raw ASGI messages."""

from __future__ import annotations

import io
import sys
from typing import Any
from unittest.mock import patch

import pytest

from whisker.echo import POLICY_VIOLATION, EchoDispatcher, format_binary
from whisker.observability.events import MessageEchoed

from .conftest import ASGIRecorder, make_services, websocket_scope


class _Downstream:
    """Stand-in for the Chirp app that records what it was given."""

    def __init__(self) -> None:
        self.scopes: list[dict[str, Any]] = []

    async def __call__(self, scope: Any, receive: Any, send: Any) -> None:
        self.scopes.append(scope)


def _session(*frames: dict[str, Any]) -> ASGIRecorder:
    messages = [{"type": "websocket.connect"}]
    messages.extend({"type": "websocket.receive", **frame} for frame in frames)
    return ASGIRecorder(messages, disconnect="websocket.disconnect")


class TestFormatBinary:
    def test_bytes_are_listed(self) -> None:
        assert format_binary(b"\x01\x02\x03") == "Received b:1,2,3,"

    def test_empty(self) -> None:
        assert format_binary(b"") == "Received b:"


class TestEchoDispatcher:
    """EchoDispatcher — echo on /echo, pass-through for everything else."""

    @pytest.mark.asyncio
    async def test_http_scope_passes_through(self) -> None:
        downstream = _Downstream()
        dispatcher = EchoDispatcher(downstream, make_services())
        scope = {"type": "http", "path": "/echo"}
        await dispatcher(scope, _session().receive, _session().send)
        assert downstream.scopes == [scope]

    @pytest.mark.asyncio
    async def test_lifespan_scope_passes_through(self) -> None:
        downstream = _Downstream()
        dispatcher = EchoDispatcher(downstream, make_services())
        await dispatcher({"type": "lifespan"}, _session().receive, _session().send)
        assert downstream.scopes[0]["type"] == "lifespan"

    @pytest.mark.asyncio
    async def test_text_frames_echo_as_text(self) -> None:
        dispatcher = EchoDispatcher(_Downstream(), make_services())
        session = _session({"text": "hello"}, {"text": "world"})
        await dispatcher(websocket_scope(), session.receive, session.send)

        assert session.sent == [
            {"type": "websocket.accept"},
            {"type": "websocket.send", "text": "hello"},
            {"type": "websocket.send", "text": "world"},
        ]

    @pytest.mark.asyncio
    async def test_binary_frames_echo_as_binary(self) -> None:
        dispatcher = EchoDispatcher(_Downstream(), make_services())
        session = _session({"bytes": b"\x00\xff"})
        await dispatcher(websocket_scope(), session.receive, session.send)

        assert session.sent[1] == {"type": "websocket.send", "bytes": b"\x00\xff"}

    @pytest.mark.asyncio
    async def test_empty_message_is_echoed(self) -> None:
        dispatcher = EchoDispatcher(_Downstream(), make_services())
        session = _session({"text": ""})
        await dispatcher(websocket_scope(), session.receive, session.send)

        assert session.sent[1] == {"type": "websocket.send", "text": ""}

    @pytest.mark.asyncio
    async def test_disconnect_without_messages(self) -> None:
        dispatcher = EchoDispatcher(_Downstream(), make_services())
        session = _session()
        await dispatcher(websocket_scope(), session.receive, session.send)

        assert session.sent == [{"type": "websocket.accept"}]

    @pytest.mark.asyncio
    async def test_other_path_is_closed(self) -> None:
        downstream = _Downstream()
        dispatcher = EchoDispatcher(downstream, make_services())
        session = _session({"text": "ignored"})
        await dispatcher(websocket_scope("/chat"), session.receive, session.send)

        assert session.sent == [{"type": "websocket.close", "code": POLICY_VIOLATION}]
        assert downstream.scopes == []

    @pytest.mark.asyncio
    async def test_echo_log_prints_bytes(self) -> None:
        dispatcher = EchoDispatcher(_Downstream(), make_services(echo_log=True))
        session = _session({"text": "hi"})
        buf = io.StringIO()
        with patch.object(sys, "stderr", buf):
            await dispatcher(websocket_scope(), session.receive, session.send)

        assert "Received b:104,105," in buf.getvalue()

    @pytest.mark.asyncio
    async def test_echo_log_off_is_silent(self) -> None:
        dispatcher = EchoDispatcher(_Downstream(), make_services(echo_log=False))
        session = _session({"text": "hi"})
        buf = io.StringIO()
        with patch.object(sys, "stderr", buf):
            await dispatcher(websocket_scope(), session.receive, session.send)

        assert buf.getvalue() == ""

    @pytest.mark.asyncio
    async def test_frames_are_recorded(self) -> None:
        services = make_services()
        dispatcher = EchoDispatcher(_Downstream(), services)
        session = _session({"text": "abc"}, {"bytes": b"\x01"})
        await dispatcher(websocket_scope(), session.receive, session.send)

        events = services.collector.log.query(event_type=MessageEchoed)
        assert [(e.kind, e.size) for e in reversed(events)] == [("text", 3), ("binary", 1)]
        assert all(e.path == "/echo" for e in events)

