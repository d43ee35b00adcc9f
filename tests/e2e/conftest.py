"""Shared helpers for E2E stdio-session tests."""

from __future__ import annotations

import io
import json
from typing import Any

import httpx

from elfa_mcp.elfa.config import ConfigStore
from elfa_mcp.protocols.mcp.transport import StdioTransport


def make_session(*messages: Any) -> tuple[StdioTransport, io.BytesIO]:
    """Build a stdio transport whose input holds *messages* as JSON lines.

    Strings are written verbatim so tests can inject malformed frames.
    """
    lines = [m if isinstance(m, str) else json.dumps(m) for m in messages]
    stdout = io.BytesIO()
    return StdioTransport(io.BytesIO(("\n".join(lines) + "\n").encode()), stdout), stdout


def read_replies(stdout: io.BytesIO) -> list[dict[str, Any]]:
    return [json.loads(line) for line in stdout.getvalue().decode("utf-8").splitlines()]


def isolated_store() -> ConfigStore:
    """A config store that never reads the developer's real environment or ``.env`` files."""
    return ConfigStore.from_environment(env_paths=[], environ={})


def mock_elfa(routes: dict[str, Any], seen: list[httpx.Request]) -> httpx.MockTransport:
    """Return an httpx transport answering ``routes[path]`` with JSON, or 404."""

    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path in routes:
            return httpx.Response(200, json=routes[request.url.path])
        return httpx.Response(404, json={"error": "not found"})

    return httpx.MockTransport(_handler)
