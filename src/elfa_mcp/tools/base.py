"""Tool base class and per-call context.

Every tool is a :class:`Tool` subclass with a pydantic ``Arguments`` model.
The model doubles as the tool's ``inputSchema`` and as its validator; a
validation failure becomes an error :class:`ToolResult` rather than an
exception.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from elfa_mcp.protocols.mcp.models import (
    JsonRpcNotification,
    ToolAnnotations,
    ToolDefinition,
    ToolResult,
    progress_notification,
)

logger = logging.getLogger(__name__)

Notifier = Callable[[JsonRpcNotification], Awaitable[None]]


class ToolArguments(BaseModel):
    """Base for argument models: camelCase on the wire, unknown fields ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class NoArguments(ToolArguments):
    pass


class ToolContext:
    """Call metadata plus a channel for ``notifications/progress``."""

    def __init__(self, meta: dict[str, Any] | None = None, notify: Notifier | None = None) -> None:
        self.meta = meta or {}
        self._notify = notify

    @property
    def progress_token(self) -> str | int | None:
        token = self.meta.get("progressToken")
        if isinstance(token, bool) or not isinstance(token, (str, int)):
            return None
        return token

    async def progress(self, progress: float, total: float | None = None, message: str | None = None) -> None:
        """Emit a progress notification if the caller supplied a token."""
        token = self.progress_token
        if token is None or token == "" or self._notify is None:
            return
        await self._notify(progress_notification(token, progress, total, message))


def format_validation_error(exc: ValidationError) -> str:
    parts: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "arguments"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


class Tool(ABC):
    """A named, schema-described operation exposed through ``tools/call``."""

    name: ClassVar[str]
    title: ClassVar[str]
    description: ClassVar[str]
    read_only: ClassVar[bool] = True
    open_world: ClassVar[bool] = False
    Arguments: ClassVar[type[ToolArguments]] = NoArguments

    def definition(self) -> ToolDefinition:
        schema = self.Arguments.model_json_schema(by_alias=True)
        schema.pop("title", None)
        schema.setdefault("properties", {})
        return ToolDefinition(
            name=self.name,
            description=self.description,
            input_schema=schema,
            annotations=ToolAnnotations(
                title=self.title,
                read_only_hint=self.read_only,
                open_world_hint=self.open_world,
            ),
        )

    async def __call__(self, arguments: dict[str, Any], context: ToolContext) -> ToolResult:
        """Validate *arguments* and run the tool."""
        try:
            args = self.Arguments.model_validate(arguments)
        except ValidationError as exc:
            logger.debug("Invalid arguments for %s: %s", self.name, exc)
            return ToolResult.error(f"Invalid arguments for {self.name}: {format_validation_error(exc)}")
        return await self.run(args, context)

    @abstractmethod
    async def run(self, args: Any, context: ToolContext) -> ToolResult:
        """Execute with validated arguments."""
