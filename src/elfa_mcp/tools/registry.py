"""ToolRegistry — the fixed tool catalogue served by ``tools/list`` and ``tools/call``."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from elfa_mcp.protocols.errors import ToolNotFoundError
from elfa_mcp.tools.admin import ReloadEnvTool, SetAuthTool, SetBaseTool, StatusTool
from elfa_mcp.tools.analysis import BollingerTool, RsiTool, SummaryTool
from elfa_mcp.tools.data import (
    KeywordMentionsTool,
    QueryTool,
    TokenNewsTool,
    TrendingTokensTool,
    TrendingTool,
)

if TYPE_CHECKING:
    from elfa_mcp.elfa.client import ElfaClient
    from elfa_mcp.elfa.config import ConfigStore
    from elfa_mcp.protocols.mcp.models import ToolDefinition
    from elfa_mcp.tools.base import Tool


class ToolRegistry:
    """Immutable name-to-tool map built once at startup.

    Definitions are generated and validated on construction, so a bad tool
    name or a duplicate fails at startup rather than on the first call.
    """

    def __init__(self, tools: Iterable[Tool]) -> None:
        self._tools: dict[str, Tool] = {}
        definitions: list[ToolDefinition] = []
        for tool in tools:
            if tool.name in self._tools:
                msg = f"Duplicate tool name: {tool.name}"
                raise ValueError(msg)
            definitions.append(tool.definition())
            self._tools[tool.name] = tool
        self._definitions = tuple(definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def names(self) -> list[str]:
        return list(self._tools)

    def definitions(self) -> tuple[ToolDefinition, ...]:
        return self._definitions

    def get(self, name: str) -> Tool:
        """Look up a tool by its wire name."""
        tool = self._tools.get(name) if isinstance(name, str) else None
        if tool is None:
            raise ToolNotFoundError(name)
        return tool


def build_registry(store: ConfigStore, client: ElfaClient) -> ToolRegistry:
    """Assemble the full catalogue around one config store and one proxy client."""
    query = QueryTool(client)
    return ToolRegistry([
        SetAuthTool(store),
        SetBaseTool(store),
        ReloadEnvTool(store),
        StatusTool(store),
        query,
        TrendingTool(query),
        TrendingTokensTool(query),
        TokenNewsTool(query),
        KeywordMentionsTool(query),
        RsiTool(),
        BollingerTool(),
        SummaryTool(),
    ])
