"""Tests for MCP / JSON-RPC models."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from elfa_mcp.protocols.mcp.models import (
    JsonRpcError,
    JsonRpcResponse,
    ToolAnnotations,
    ToolDefinition,
    ToolResult,
    progress_notification,
)


class TestJsonRpcResponse:
    def test_result_reply(self) -> None:
        reply = JsonRpcResponse(id=1, result={"tools": []})
        assert reply.to_wire() == {"jsonrpc": "2.0", "id": 1, "result": {"tools": []}}

    def test_empty_result_is_object(self) -> None:
        assert JsonRpcResponse(id="a").to_wire() == {"jsonrpc": "2.0", "id": "a", "result": {}}

    def test_error_reply_has_no_result(self) -> None:
        reply = JsonRpcResponse(id=2, error=JsonRpcError(code=-32601, message="Method not found", data={"method": "x"}))
        wire = reply.to_wire()
        assert "result" not in wire
        assert wire["error"] == {"code": -32601, "message": "Method not found", "data": {"method": "x"}}

    def test_error_without_data(self) -> None:
        wire = JsonRpcResponse(id=3, error=JsonRpcError(code=-32603, message="Internal error")).to_wire()
        assert wire["error"] == {"code": -32603, "message": "Internal error"}

    def test_null_method_is_kept_in_data(self) -> None:
        wire = JsonRpcResponse(id=4, error=JsonRpcError(code=-32601, message="m", data={"method": None})).to_wire()
        assert wire["error"]["data"] == {"method": None}


class TestProgressNotification:
    def test_wire_shape(self) -> None:
        wire = progress_notification("tok", 1, 3, "Calling ELFA").to_wire()
        assert wire == {
            "jsonrpc": "2.0",
            "method": "notifications/progress",
            "params": {"progressToken": "tok", "progress": 1.0, "total": 3.0, "message": "Calling ELFA"},
        }
        assert "id" not in wire

    def test_optional_fields_omitted(self) -> None:
        params = progress_notification(5, 0.5).params
        assert params == {"progressToken": 5, "progress": 0.5}


class TestToolDefinition:
    def test_wire_uses_camel_case(self) -> None:
        definition = ToolDefinition(
            name="ta_rsi",
            description="RSI",
            input_schema={"type": "object", "properties": {}},
            annotations=ToolAnnotations(title="TA: RSI"),
        )
        assert definition.to_wire() == {
            "name": "ta_rsi",
            "description": "RSI",
            "inputSchema": {"type": "object", "properties": {}},
            "annotations": {"title": "TA: RSI", "readOnlyHint": True, "openWorldHint": False},
        }

    @pytest.mark.parametrize("name", ["", "has space", "x" * 65, "dots.not.allowed"])
    def test_invalid_names(self, name: str) -> None:
        with pytest.raises(ValidationError):
            ToolDefinition(name=name, annotations=ToolAnnotations(title="t"))


class TestToolResult:
    def test_from_payload_serializes_json(self) -> None:
        result = ToolResult.from_payload({"ok": True, "key": "abc1…5678"})
        assert result.content[0].type == "text"
        assert json.loads(result.text) == {"ok": True, "key": "abc1…5678"}
        assert "…" in result.text

    def test_string_payload_kept_verbatim(self) -> None:
        assert ToolResult.from_payload("plain").text == "plain"

    def test_error_shape(self) -> None:
        result = ToolResult.error("boom")
        assert result.is_error
        assert json.loads(result.text) == {"error": True, "message": "boom"}

    def test_wire_omits_absent_meta(self) -> None:
        wire = ToolResult.from_payload({}).to_wire()
        assert wire == {"content": [{"type": "text", "text": "{}"}], "isError": False}

    def test_wire_includes_meta(self) -> None:
        wire = ToolResult.from_payload({}, is_error=True, meta={"status": 404}).to_wire()
        assert wire["isError"] is True
        assert wire["_meta"] == {"status": 404}
