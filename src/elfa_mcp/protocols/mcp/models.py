"""MCP models — JSON-RPC 2.0 messages, tool definitions and tool results.

Implements the message format used by the Model Context Protocol for
tool discovery (``tools/list``) and execution (``tools/call``).
"""

from __future__ import annotations

import json
from typing import Any, Literal

from pydantic import BaseModel, Field

JSONRPC_VERSION = "2.0"

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response: exactly one of ``result`` or ``error`` is sent."""

    jsonrpc: str = JSONRPC_VERSION
    # Echoed exactly as received; any JSON number (1, 1.5) or string is valid.
    id: Any = None
    result: dict[str, Any] | None = None
    error: JsonRpcError | None = None

    def to_wire(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            error = self.error.model_dump()
            if error["data"] is None:
                del error["data"]
            payload["error"] = error
        else:
            payload["result"] = self.result if self.result is not None else {}
        return payload


class JsonRpcNotification(BaseModel):
    """A JSON-RPC 2.0 message without an ``id``; never answered."""

    jsonrpc: str = JSONRPC_VERSION
    method: str
    params: dict[str, Any] = Field(default_factory=dict)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump()


class ProgressParams(BaseModel):
    """Payload of a ``notifications/progress`` message."""

    model_config = {"populate_by_name": True}

    progress_token: str | int = Field(alias="progressToken")
    progress: float
    total: float | None = None
    message: str | None = None


def progress_notification(
    token: str | int, progress: float, total: float | None = None, message: str | None = None
) -> JsonRpcNotification:
    params = ProgressParams(progress_token=token, progress=progress, total=total, message=message)
    return JsonRpcNotification(
        method="notifications/progress",
        params=params.model_dump(by_alias=True, exclude_none=True),
    )


# ---------------------------------------------------------------------------
# MCP-specific payloads
# ---------------------------------------------------------------------------


class ToolAnnotations(BaseModel):
    """Behaviour hints shown to the calling agent."""

    model_config = {"populate_by_name": True, "frozen": True}

    title: str
    read_only_hint: bool = Field(default=True, alias="readOnlyHint")
    open_world_hint: bool = Field(default=False, alias="openWorldHint")


class ToolDefinition(BaseModel):
    """A tool definition as returned by ``tools/list``."""

    model_config = {"populate_by_name": True, "frozen": True}

    name: str = Field(pattern=r"^[A-Za-z0-9_-]{1,64}$")
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=dict, alias="inputSchema")
    annotations: ToolAnnotations

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class TextContent(BaseModel):
    """The only content item this server emits."""

    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """The result of executing a tool; payloads are always serialized to text."""

    model_config = {"populate_by_name": True}

    content: list[TextContent] = Field(default_factory=list)
    is_error: bool = Field(default=False, alias="isError")
    meta: dict[str, Any] | None = Field(default=None, alias="_meta")

    @classmethod
    def from_payload(
        cls, payload: Any, *, is_error: bool = False, meta: dict[str, Any] | None = None
    ) -> ToolResult:
        """Create a ToolResult with a single text part; non-strings are JSON-encoded."""
        text = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
        return cls(content=[TextContent(text=text)], is_error=is_error, meta=meta)

    @classmethod
    def error(cls, message: str, **extra: Any) -> ToolResult:
        return cls.from_payload({"error": True, "message": message, **extra}, is_error=True)

    @property
    def text(self) -> str:
        return "".join(part.text for part in self.content)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
