"""Protocol layer for the JSON-RPC 2.0 / MCP server."""

from elfa_mcp.protocols.errors import (
    InternalError,
    MethodNotFoundError,
    ProtocolError,
    ToolNotFoundError,
)

__all__ = [
    "InternalError",
    "MethodNotFoundError",
    "ProtocolError",
    "ToolNotFoundError",
]
