"""Shared type definitions for whisker."""

from typing import Literal

# Integer status code advertised by /health (not limited to 100-599)
type StatusCode = int

# Final, already scaled payload length in bytes
type ByteCount = int

# Kind of WebSocket frame echoed back to the client
type FrameKind = Literal["text", "binary"]
