"""Data tools — proxy ELFA v2 endpoints.

``elfa_query`` is the primitive: the endpoint-specific tools only whitelist
their arguments into a query object and delegate to it.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from pydantic import Field

from elfa_mcp.elfa.client import (
    DEFAULT_TIME_WINDOWS,
    KEYWORD_MENTIONS_PATH,
    TOKEN_NEWS_PATH,
    TRENDING_TOKENS_PATH,
    ElfaClient,
    apply_time_range,
)
from elfa_mcp.protocols.mcp.models import ToolResult
from elfa_mcp.tools.base import Tool, ToolArguments, ToolContext

logger = logging.getLogger(__name__)


class QueryArguments(ToolArguments):
    path: str = Field(description="ELFA path like /v2/...")
    method: str = Field(default="GET", description="HTTP method")
    query: dict[str, Any] | None = Field(default=None, description="Query params map")
    body: dict[str, Any] | None = Field(default=None, description="JSON body for non-GET")


class QueryTool(Tool):
    name = "elfa_query"
    title = "ELFA: Generic Query"
    description = "Generic ELFA proxy. Call any ELFA path with method/query/body. Returns JSON."
    open_world = True
    Arguments = QueryArguments

    def __init__(self, client: ElfaClient) -> None:
        self._client = client

    async def run(self, args: QueryArguments, context: ToolContext) -> ToolResult:
        if not args.path.startswith("/"):
            return ToolResult.error("'path' must start with '/'")

        await context.progress(1, 3, "Calling ELFA")
        response = await self._client.request(
            args.path,
            method=args.method or "GET",
            query=args.query,
            body=args.body,
        )
        await context.progress(2, 3, "Formatting result")
        if not response.ok:
            return ToolResult.from_payload(
                response.model_dump(exclude_none=True),
                is_error=True,
                meta={"status": response.status},
            )
        await context.progress(3, 3, "Done")
        return ToolResult.from_payload(response.model_dump(exclude_none=True))


class _EndpointTool(Tool):
    """Builds a whitelisted query for one fixed endpoint and delegates to ``elfa_query``."""

    open_world = True
    path: ClassVar[str]
    passthrough: ClassVar[tuple[str, ...]] = ()

    def __init__(self, query_tool: QueryTool) -> None:
        self._query_tool = query_tool

    def build_query(self, args: Any) -> dict[str, Any]:
        query: dict[str, Any] = {}
        for field in self.passthrough:
            value = getattr(args, field)
            if value is not None:
                query[type(args).model_fields[field].alias or field] = value
        return apply_time_range(
            query,
            start=args.start,
            end=args.end,
            time_window=args.timeframe,
            default_window=DEFAULT_TIME_WINDOWS[self.path],
        )

    async def run(self, args: Any, context: ToolContext) -> ToolResult:
        query = self.build_query(args)
        logger.debug("%s -> %s %s", self.name, self.path, query)
        return await self._query_tool.run(QueryArguments(path=self.path, method="GET", query=query), context)


class _TimeRangeArguments(ToolArguments):
    timeframe: str | None = Field(default=None, description="Relative window, e.g. 24h, 7d, 30d")
    start: str | int | None = Field(default=None, description="Range start; used only together with 'end'")
    end: str | int | None = Field(default=None, description="Range end; used only together with 'start'")
    chain: str | None = None
    limit: int | None = None
    cursor: str | None = None


class TrendingArguments(_TimeRangeArguments):
    page: int | None = None
    page_size: int | None = None
    min_mentions: int | None = None


class TrendingTokensTool(_EndpointTool):
    name = "elfa_trending_tokens"
    title = "ELFA: Trending Tokens"
    description = "Trending tokens aggregation. Params: timeframe, chain, limit, cursor."
    Arguments = TrendingArguments
    path = TRENDING_TOKENS_PATH
    passthrough = ("chain", "limit", "cursor", "page", "page_size", "min_mentions")


class TrendingTool(TrendingTokensTool):
    name = "elfa_trending"
    title = "ELFA: Trending (Alias)"
    description = "Alias to /v2/aggregations/trending-tokens (timeframe, chain, limit, cursor)."


class TokenNewsArguments(_TimeRangeArguments):
    symbols: str | None = Field(default=None, description="Comma-separated symbols, e.g. ETH,BTC")
    sources: str | None = None
    page: int | None = None
    page_size: int | None = None


class TokenNewsTool(_EndpointTool):
    name = "elfa_token_news"
    title = "ELFA: Token News"
    description = "Token news. Params: symbols (comma), chain, start, end, limit, cursor, sources."
    Arguments = TokenNewsArguments
    path = TOKEN_NEWS_PATH
    passthrough = ("symbols", "chain", "limit", "cursor", "sources", "page", "page_size")


class KeywordMentionsArguments(_TimeRangeArguments):
    keywords: list[str] | str | None = Field(default=None, description="Keywords as an array or comma-separated string")
    sources: str | None = None
    account_name: str | None = None
    search_type: str | None = Field(default=None, description="'or' / 'and'")


class KeywordMentionsTool(_EndpointTool):
    name = "elfa_keyword_mentions"
    title = "ELFA: Keyword Mentions"
    description = (
        "Multi-keyword mentions. Params: keywords (array|string), start, end, chain, limit, cursor, sources."
    )
    Arguments = KeywordMentionsArguments
    path = KEYWORD_MENTIONS_PATH
    passthrough = ("keywords", "chain", "limit", "cursor", "sources", "account_name", "search_type")

    def build_query(self, args: Any) -> dict[str, Any]:
        query = super().build_query(args)
        if isinstance(args.keywords, list):
            query["keywords"] = ",".join(args.keywords)
        return query
