"""Route handlers — the HTTP surface of the test double.

Each handler parses its input, calls into the core (buffer pool, content
generator, health state), and builds a Chirp response.  Malformed input
becomes a plain-text client error; nothing here is fatal to the process.
"""

from __future__ import annotations

import asyncio
import json
import sys
from collections.abc import AsyncIterator
from email.utils import formatdate
from typing import TYPE_CHECKING, Any

from chirp.http.request import Request
from chirp.http.response import Response, StreamingResponse

from whisker._errors import InputError
from whisker.content.generator import fill
from whisker.hostinfo import host_info_text, hostname, interface_addresses
from whisker.routes.params import (
    decode_status_code,
    parse_bool,
    parse_duration,
    parse_size,
    parse_unit,
    scale_size,
)

if TYPE_CHECKING:
    from whisker.app import Services

TEXT_PLAIN = "text/plain; charset=utf-8"
CHUNK_SIZE = 64 * 1024


def error_response(exc: InputError) -> Response:
    """Plain-text client error carrying the exception message."""
    return (
        Response(body=f"{exc}\n", status=exc.status, content_type=TEXT_PLAIN)
        .with_header("X-Content-Type-Options", "nosniff")
    )


def canonical_header(name: str) -> str:
    """``x-forwarded-for`` -> ``X-Forwarded-For``."""
    return "-".join(part.capitalize() for part in name.split("-"))


def format_address(addr: tuple[str, int] | None) -> str:
    """Render an ASGI ``(host, port)`` pair, bracketing IPv6 hosts."""
    if addr is None:
        return ""
    host, port = addr[0], addr[1]
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def header_map(request: Request) -> dict[str, list[str]]:
    """Group request headers by canonical name, keeping arrival order."""
    headers: dict[str, list[str]] = {}
    for raw_name, raw_value in request.headers.raw:
        name = canonical_header(raw_name.decode("latin-1"))
        headers.setdefault(name, []).append(raw_value.decode("latin-1"))
    return headers


async def dump_request(request: Request) -> str:
    """Render the request as it would appear on the wire (HTTP/1.x form)."""
    host = request.headers.get("host", "")
    lines = [f"{request.method} {request.url} HTTP/{request.http_version}", f"Host: {host}"]
    for raw_name, raw_value in request.headers.raw:
        if raw_name.lower() == b"host":
            continue
        name = canonical_header(raw_name.decode("latin-1"))
        lines.append(f"{name}: {raw_value.decode('latin-1')}")
    body = await request.body()
    return "\r\n".join(lines) + "\r\n\r\n" + body.decode("utf-8", errors="replace")


class HandlerSet:
    """Route handlers bound to the shared services.

    Args:
        services: Pool, health state, counters, and collector for this app.

    """

    __slots__ = ("_services",)

    def __init__(self, services: Services) -> None:
        self._services = services

    # ----- /data -----

    async def data(self, request: Request) -> Any:
        """Serve ``size * unit`` bytes of generated content."""
        try:
            size = scale_size(
                parse_size(request.query.get("size")),
                parse_unit(request.query.get("unit")),
            )
        except InputError as exc:
            return error_response(exc)

        ceiling = self._services.config.max_data_size
        if ceiling is not None and size > ceiling:
            msg = f"requested {size} bytes exceeds the configured maximum of {ceiling}"
            return error_response(InputError(msg, status=413))

        response = StreamingResponse(self._payload(size), content_type=TEXT_PLAIN)
        if parse_bool(request.query.get("attachment")):
            response = (
                response
                .with_header("Content-Disposition", "Attachment")
                .with_header("Last-Modified", formatdate(usegmt=True))
            )
        return response

    async def _payload(self, size: int) -> AsyncIterator[str]:
        """Borrow a buffer, fill it off the event loop, and stream it out.

        The fill runs in a worker thread so a multi-gigabyte payload does
        not stall other requests on this worker.  The buffer goes back to
        the pool when the stream is exhausted or closed.  Chirp does not
        ``aclose()`` an abandoned body after a mid-stream disconnect; the
        generator is then closed by asyncio's async-generator finalizer
        when it is collected, which runs the same release.
        """
        with self._services.pool.borrow() as buffer:
            filling = asyncio.ensure_future(asyncio.to_thread(fill, buffer, size))
            try:
                await asyncio.shield(filling)
            except asyncio.CancelledError:
                # the thread owns the buffer until fill returns
                await asyncio.wait([filling])
                raise
            for chunk in buffer.iter_chunks(CHUNK_SIZE):
                yield chunk.decode("ascii")

    # ----- /bench -----

    async def bench(self, request: Request) -> Response:
        """Smallest possible keep-alive response."""
        return Response(body="1", content_type="text/plain").with_header(
            "Connection", "keep-alive"
        )

    # ----- / -----

    async def whoami(self, request: Request) -> Response:
        """Host info, the caller's address, and a dump of the request.

        ``?wait=<duration>`` delays the answer, e.g. ``wait=2s``.
        """
        wait = parse_duration(request.query.get("wait"))
        if wait is not None and wait > 0:
            await asyncio.sleep(wait)

        body = (
            host_info_text()
            + f"RemoteAddr: {format_address(request.client)}\n"
            + await dump_request(request)
        )
        return Response(body=body, content_type=TEXT_PLAIN)

    # ----- /api -----

    async def api(self, request: Request) -> Response:
        """Host and request details as JSON."""
        payload = {
            "hostname": hostname(),
            "ip": interface_addresses(),
            "headers": header_map(request),
            "url": request.url,
            "host": request.headers.get("host", ""),
            "method": request.method,
        }
        return Response(
            body=json.dumps(payload) + "\n",
            content_type="application/json",
        )

    # ----- /health -----

    async def health(self, request: Request) -> Response:
        """GET/HEAD report the health code as the status; POST replaces it."""
        health = self._services.health
        if request.method != "POST":
            return Response(body="", status=health.read(), content_type=TEXT_PLAIN)

        try:
            code = decode_status_code(await request.body())
        except InputError as exc:
            return error_response(exc)

        print(f"Update health check status code [{code}]", file=sys.stderr)
        previous = health.write(code)
        self._services.collector.record_health_change(previous, code)
        return Response(body="", content_type=TEXT_PLAIN)

    # ----- /echo (plain HTTP) -----

    async def echo_http(self, request: Request) -> Response:
        """``/echo`` only speaks WebSocket; a plain request is a client error."""
        return error_response(
            InputError("websocket: the client is not using the websocket protocol")
        ).with_header("Sec-WebSocket-Version", "13")
