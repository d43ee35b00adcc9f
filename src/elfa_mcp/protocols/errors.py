"""Shared error types for the protocol layer.

Each error maps to one JSON-RPC error object via :meth:`ProtocolError.to_error`.
"""

from __future__ import annotations

from typing import Any

from elfa_mcp.protocols.mcp.models import JsonRpcError

METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603


class ProtocolError(Exception):
    """Base error for all protocol-layer failures."""

    code: int = INTERNAL_ERROR

    def __init__(self, message: str, data: Any = None) -> None:
        self.message = message
        self.data = data
        super().__init__(message)

    def to_error(self) -> JsonRpcError:
        return JsonRpcError(code=self.code, message=self.message, data=self.data)


class MethodNotFoundError(ProtocolError):
    """The requested JSON-RPC method is not served."""

    code = METHOD_NOT_FOUND

    def __init__(self, method: Any) -> None:
        self.method = method
        super().__init__("Method not found", {"method": method})


class ToolNotFoundError(ProtocolError):
    """``tools/call`` named a tool that is not in the catalogue."""

    code = METHOD_NOT_FOUND

    def __init__(self, name: Any) -> None:
        self.name = name
        super().__init__("Tool not found", {"name": name})


class InternalError(ProtocolError):
    """Unexpected failure while answering a request."""

    code = INTERNAL_ERROR

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Internal error", {"message": detail})
