"""Administrative tools that inspect and change the live ELFA configuration."""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import Field

from elfa_mcp.elfa.config import (
    AUTHORIZATION_HEADER,
    ConfigStore,
    canonical_header,
    normalize_base_url,
)
from elfa_mcp.protocols.mcp.models import ToolResult
from elfa_mcp.tools.base import Tool, ToolArguments, ToolContext


class _AdminTool(Tool):
    read_only = False

    def __init__(self, store: ConfigStore) -> None:
        self._store = store


class SetAuthArguments(ToolArguments):
    key: str = Field(min_length=1, description="API key")
    header_name: str | None = Field(default=None, description="x-elfa-api-key or Authorization")
    scheme: str | None = Field(default=None, description="Scheme prefix, e.g. Bearer; empty sends the raw key")


class SetAuthTool(_AdminTool):
    name = "elfa_set_auth"
    title = "ELFA: Set Auth"
    description = "Set ELFA API auth. Params: key (string), headerName (Authorization|x-elfa-api-key), scheme (e.g., Bearer)."
    Arguments = SetAuthArguments

    async def run(self, args: SetAuthArguments, context: ToolContext) -> ToolResult:
        auth = self._store.config.auth
        update: dict[str, Any] = {"key": args.key}

        if args.header_name:
            header = canonical_header(args.header_name)
            if header is None:
                return ToolResult.from_payload(
                    {"ok": False, "message": "'headerName' must be x-elfa-api-key or Authorization"},
                    is_error=True,
                )
            update["header_name"] = header
            if header != auth.header_name and args.scheme is None:
                update["scheme"] = "Bearer" if header == AUTHORIZATION_HEADER else ""
        if args.scheme is not None:
            update["scheme"] = args.scheme.strip()

        config = self._store.config
        new_auth = auth.model_copy(update=update)
        self._store.replace(config.model_copy(update={"auth": new_auth}))
        return ToolResult.from_payload({"ok": True, **new_auth.masked()})


class SetBaseArguments(ToolArguments):
    base: str = Field(description="Base URL, e.g. https://api.elfa.ai")


class SetBaseTool(_AdminTool):
    name = "elfa_set_base"
    title = "ELFA: Set Base URL"
    description = "Set ELFA base URL (e.g., https://api.elfa.ai)."
    Arguments = SetBaseArguments

    async def run(self, args: SetBaseArguments, context: ToolContext) -> ToolResult:
        try:
            url = httpx.URL(args.base.strip())
        except httpx.InvalidURL:
            url = None
        if url is None or url.scheme not in ("http", "https") or not url.host:
            return ToolResult.from_payload({"ok": False, "message": "Invalid URL for 'base'"}, is_error=True)

        base = normalize_base_url(str(url))
        config = self._store.replace(self._store.config.model_copy(update={"base_url": base}))
        return ToolResult.from_payload({"ok": True, "base": config.base_url})


class ReloadEnvTool(_AdminTool):
    name = "elfa_reload_env"
    title = "ELFA: Reload .env"
    description = "Reload .env files from common locations."

    async def run(self, args: Any, context: ToolContext) -> ToolResult:
        self._store.reload()
        return ToolResult.from_payload({"ok": True, **self._store.status()})


class StatusTool(_AdminTool):
    name = "elfa_status"
    title = "ELFA: Status"
    description = "Show current ELFA config (key masked) and .env load info."
    read_only = True

    async def run(self, args: Any, context: ToolContext) -> ToolResult:
        return ToolResult.from_payload(self._store.status())
