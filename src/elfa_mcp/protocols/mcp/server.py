"""MCPServer — routes line-delimited JSON-RPC 2.0 messages to the tool catalogue.

Each inbound frame is one JSON value: a single message or a batch array.
Requests (messages carrying an ``id``) get exactly one reply; notifications
never do. A frame that is not valid JSON is logged and dropped because no
``id`` can be recovered from it.

Usage::

    server = MCPServer(registry)
    await server.serve(StdioTransport())
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from elfa_mcp import __version__
from elfa_mcp.protocols.errors import InternalError, MethodNotFoundError, ProtocolError
from elfa_mcp.protocols.mcp.models import JsonRpcNotification, JsonRpcResponse, ToolResult
from elfa_mcp.tools.base import ToolContext
from elfa_mcp.utils.telemetry import (
    ATTR_RPC_METHOD,
    ATTR_TOOL_IS_ERROR,
    ATTR_TOOL_NAME,
    get_tracer,
)

if TYPE_CHECKING:
    from elfa_mcp.protocols.mcp.transport import ServerTransport
    from elfa_mcp.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

DEFAULT_PROTOCOL_VERSION = "2025-03-26"
SERVER_NAME = "elfa-mcp-server"
INSTRUCTIONS = (
    "Use elfa_* for ELFA data (requires x-elfa-api-key). "
    "Use ta_* to compute RSI/Bollinger on price arrays."
)
CAPABILITIES: dict[str, Any] = {
    "logging": {},
    "prompts": {"listChanged": False},
    "resources": {"subscribe": False, "listChanged": False},
    "tools": {"listChanged": False},
}

MethodHandler = Callable[[dict[str, Any]], Awaitable[dict[str, Any]]]


class MCPServer:
    """JSON-RPC router for one connected host.

    Replies and progress notifications are written through the transport
    passed to :meth:`serve` (or :meth:`handle_frame`) as soon as they are
    ready; batch members are handled one after another in array order.
    """

    def __init__(self, registry: ToolRegistry, *, instructions: str = INSTRUCTIONS) -> None:
        self._registry = registry
        self._instructions = instructions
        self._transport: ServerTransport | None = None
        self._methods: dict[str, MethodHandler] = {
            "ping": self._ping,
            "initialize": self._initialize,
            "resources/list": self._resources_list,
            "resources/templates/list": self._resource_templates_list,
            "resources/read": self._resources_read,
            "prompts/list": self._prompts_list,
            "prompts/get": self._prompts_get,
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
            "logging/setLevel": self._logging_set_level,
            "completion/complete": self._completion_complete,
        }

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Stream handling
    # ------------------------------------------------------------------

    async def serve(self, transport: ServerTransport) -> None:
        """Read frames until end of input; a failing frame never stops the loop."""
        self._transport = transport
        logger.info("%s %s ready", SERVER_NAME, __version__)
        while True:
            frame = await transport.receive()
            if frame is None:
                break
            try:
                await self.handle_frame(frame, transport)
            except Exception:
                logger.exception("Unhandled error while processing frame")
        logger.info("Input closed; shutting down")

    async def handle_frame(self, frame: bytes | str, transport: ServerTransport) -> None:
        """Parse one frame and write every resulting reply."""
        self._transport = transport
        try:
            message = json.loads(frame)
        except (json.JSONDecodeError, UnicodeDecodeError):
            preview = frame[:100] if isinstance(frame, str) else frame[:100].decode("utf-8", "replace")
            logger.warning("Dropped non-JSON line from host: %s", preview)
            return

        messages = message if isinstance(message, list) else [message]
        for item in messages:
            try:
                reply = await self.handle_message(item)
                if reply is not None:
                    await transport.send(reply.to_wire())
            except Exception:
                logger.exception("Unhandled error while processing message %r", item)

    async def handle_message(self, message: Any) -> JsonRpcResponse | None:
        """Dispatch a single decoded message; returns ``None`` for notifications."""
        if not isinstance(message, dict):
            logger.warning("Ignoring non-object JSON-RPC message: %r", message)
            return None
        method = message.get("method")
        if "id" not in message:
            self._handle_notification(method, message.get("params"))
            return None

        request_id = message["id"]
        params = message.get("params")
        if not isinstance(params, dict):
            params = {}

        handler = self._methods.get(method) if isinstance(method, str) else None
        with _tracer.start_as_current_span(f"mcp.{method}") as span:
            span.set_attribute(ATTR_RPC_METHOD, str(method))
            try:
                if handler is None:
                    raise MethodNotFoundError(method)
                result = await handler(params)
                return JsonRpcResponse(id=request_id, result=result)
            except ProtocolError as exc:
                return JsonRpcResponse(id=request_id, error=exc.to_error())
            except Exception as exc:
                logger.exception("Internal error handling %s", method)
                return JsonRpcResponse(id=request_id, error=InternalError(str(exc)).to_error())

    def _handle_notification(self, method: Any, params: Any) -> None:
        if method == "notifications/initialized":
            logger.info("Client initialized")
        elif method == "notifications/cancelled":
            request_id = params.get("requestId") if isinstance(params, dict) else None
            logger.info("Client cancelled request %s; in-flight work is not aborted", request_id)
        else:
            logger.debug("Ignoring notification %s", method)

    async def _notify(self, notification: JsonRpcNotification) -> None:
        if self._transport is not None:
            await self._transport.send(notification.to_wire())

    # ------------------------------------------------------------------
    # Method handlers
    # ------------------------------------------------------------------

    async def _ping(self, params: dict[str, Any]) -> dict[str, Any]:
        return {}

    async def _initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        version = params.get("protocolVersion")
        if not isinstance(version, str) or not version:
            version = DEFAULT_PROTOCOL_VERSION
        return {
            "protocolVersion": version,
            "capabilities": CAPABILITIES,
            "serverInfo": {"name": SERVER_NAME, "version": __version__},
            "instructions": self._instructions,
        }

    async def _resources_list(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"resources": []}

    async def _resource_templates_list(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"resourceTemplates": []}

    async def _resources_read(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"contents": []}

    async def _prompts_list(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"prompts": []}

    async def _prompts_get(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"description": "Prompt not available", "messages": []}

    async def _tools_list(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"tools": [definition.to_wire() for definition in self._registry.definitions()]}

    async def _logging_set_level(self, params: dict[str, Any]) -> dict[str, Any]:
        return {}

    async def _completion_complete(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"completion": {"values": [], "total": 0, "hasMore": False}}

    async def _tools_call(self, params: dict[str, Any]) -> dict[str, Any]:
        """Run a tool; any failure inside the tool becomes an error ToolResult."""
        name = params.get("name")
        tool = self._registry.get(name)  # type: ignore[arg-type]
        arguments = params.get("arguments")
        meta = params.get("_meta")
        context = ToolContext(meta if isinstance(meta, dict) else {}, self._notify)

        with _tracer.start_as_current_span(f"mcp.tool.{tool.name}") as span:
            span.set_attribute(ATTR_TOOL_NAME, tool.name)
            logger.debug("Calling tool %s", tool.name)
            try:
                result = await tool(arguments if isinstance(arguments, dict) else {}, context)
            except Exception as exc:
                logger.exception("Tool %s raised", tool.name)
                result = ToolResult.error(str(exc) or type(exc).__name__)
            span.set_attribute(ATTR_TOOL_IS_ERROR, result.is_error)
        logger.debug("Tool %s finished (isError=%s)", tool.name, result.is_error)
        return result.to_wire()
