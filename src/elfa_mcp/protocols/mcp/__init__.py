"""MCP protocol — Model Context Protocol server over stdio."""

from __future__ import annotations

from typing import TYPE_CHECKING

from elfa_mcp.protocols.mcp.models import (
    JsonRpcError,
    JsonRpcNotification,
    JsonRpcResponse,
    TextContent,
    ToolAnnotations,
    ToolDefinition,
    ToolResult,
)
from elfa_mcp.protocols.mcp.transport import ServerTransport, StdioTransport

if TYPE_CHECKING:
    from elfa_mcp.protocols.mcp.server import MCPServer as MCPServer

__all__ = [
    "JsonRpcError",
    "JsonRpcNotification",
    "JsonRpcResponse",
    "MCPServer",
    "ServerTransport",
    "StdioTransport",
    "TextContent",
    "ToolAnnotations",
    "ToolDefinition",
    "ToolResult",
]


def __getattr__(name: str) -> object:
    # The server depends on the tool catalogue, which depends on this package.
    if name == "MCPServer":
        from elfa_mcp.protocols.mcp.server import MCPServer

        return MCPServer
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
