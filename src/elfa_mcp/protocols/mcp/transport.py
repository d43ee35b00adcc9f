"""MCP server transports — newline-delimited JSON over two byte streams.

Each transport satisfies the :class:`ServerTransport` protocol, providing
``receive``, ``send``, and ``close`` methods. ``receive`` hands back raw
frames; parsing is left to the server so that a malformed frame can be
logged and dropped without tearing down the stream.
"""

from __future__ import annotations

import asyncio
import json
import sys
from typing import IO, Any, Protocol, runtime_checkable


@runtime_checkable
class ServerTransport(Protocol):
    """Abstract server-side transport for MCP JSON-RPC communication."""

    async def receive(self) -> bytes | None: ...
    async def send(self, data: dict[str, Any]) -> None: ...
    async def close(self) -> None: ...


def encode_line(data: dict[str, Any]) -> bytes:
    """Serialize one message as a single UTF-8 JSON line."""
    return (json.dumps(data, separators=(",", ":"), ensure_ascii=False) + "\n").encode("utf-8")


class StdioTransport:
    """Serves MCP over an inbound and an outbound binary stream (stdin/stdout by default).

    Reads run in a worker thread so the event loop stays free while waiting
    for input. Each outbound message is encoded up front and written with a
    single call followed by a flush, so lines are never interleaved or partial.
    """

    def __init__(self, stdin: IO[bytes] | None = None, stdout: IO[bytes] | None = None) -> None:
        self._stdin = stdin if stdin is not None else sys.stdin.buffer
        self._stdout = stdout if stdout is not None else sys.stdout.buffer
        self._closed = False

    async def receive(self) -> bytes | None:
        """Return the next frame without its newline, or ``None`` at end of input.

        Blank lines are skipped. A final line without a trailing newline is
        still returned as a frame.
        """
        while not self._closed:
            line = await asyncio.to_thread(self._stdin.readline)
            if not line:
                return None
            frame = line.strip()
            if frame:
                return frame
        return None

    async def send(self, data: dict[str, Any]) -> None:
        """Write one JSON line to the outbound stream."""
        if self._closed:
            msg = "Transport closed"
            raise RuntimeError(msg)
        self._stdout.write(encode_line(data))
        self._stdout.flush()

    async def close(self) -> None:
        """Stop reading; the underlying streams stay owned by the caller."""
        self._closed = True
