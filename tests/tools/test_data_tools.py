"""Tests for the ELFA proxy tools with a mocked client."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from elfa_mcp.elfa.client import ElfaClient, ProxyResponse
from elfa_mcp.protocols.mcp.models import JsonRpcNotification
from elfa_mcp.tools.base import ToolContext
from elfa_mcp.tools.data import (
    KeywordMentionsTool,
    QueryTool,
    TokenNewsTool,
    TrendingTokensTool,
    TrendingTool,
)


@pytest.fixture()
def client() -> MagicMock:
    mock = MagicMock(spec=ElfaClient)
    mock.request = AsyncMock(return_value=ProxyResponse(ok=True, status=200, data={"data": []}))
    return mock


def _sent_query(client: MagicMock) -> dict[str, Any]:
    return client.request.await_args.kwargs["query"]


class TestQueryTool:
    async def test_success_returns_proxy_response(self, client: MagicMock) -> None:
        result = await QueryTool(client)({"path": "/v2/data/token-news", "query": {"symbols": "ETH"}}, ToolContext())

        assert not result.is_error
        assert json.loads(result.text) == {"ok": True, "status": 200, "data": {"data": []}}
        client.request.assert_awaited_once_with(
            "/v2/data/token-news", method="GET", query={"symbols": "ETH"}, body=None
        )

    async def test_upstream_error_sets_is_error_and_status_meta(self, client: MagicMock) -> None:
        client.request.return_value = ProxyResponse(ok=False, status=401, data={"error": "unauthorized"})

        result = await QueryTool(client)({"path": "/v2/x"}, ToolContext())

        assert result.is_error
        assert result.meta == {"status": 401}
        assert json.loads(result.text) == {"ok": False, "status": 401, "data": {"error": "unauthorized"}}

    async def test_transport_error_payload(self, client: MagicMock) -> None:
        client.request.return_value = ProxyResponse(ok=False, status=500, error="connection refused")

        result = await QueryTool(client)({"path": "/v2/x"}, ToolContext())

        assert result.is_error
        assert json.loads(result.text) == {"ok": False, "status": 500, "error": "connection refused"}

    @pytest.mark.parametrize("path", ["v2/x", "https://evil.test/v2/x"])
    async def test_relative_path_required(self, client: MagicMock, path: str) -> None:
        result = await QueryTool(client)({"path": path}, ToolContext())

        assert result.is_error
        client.request.assert_not_awaited()

    async def test_missing_path_is_invalid(self, client: MagicMock) -> None:
        result = await QueryTool(client)({}, ToolContext())

        assert result.is_error
        assert "path" in json.loads(result.text)["message"]

    async def test_progress_notifications(self, client: MagicMock) -> None:
        sent: list[JsonRpcNotification] = []

        async def _notify(notification: JsonRpcNotification) -> None:
            sent.append(notification)

        context = ToolContext({"progressToken": "tok-1"}, _notify)
        await QueryTool(client)({"path": "/v2/x"}, context)

        assert [n.method for n in sent] == ["notifications/progress"] * 3
        assert [n.params["progress"] for n in sent] == [1, 2, 3]
        assert all(n.params["progressToken"] == "tok-1" and n.params["total"] == 3 for n in sent)
        assert sent[-1].params["message"] == "Done"

    async def test_no_done_step_on_error(self, client: MagicMock) -> None:
        client.request.return_value = ProxyResponse(ok=False, status=404, data=None)
        sent: list[JsonRpcNotification] = []

        async def _notify(notification: JsonRpcNotification) -> None:
            sent.append(notification)

        await QueryTool(client)({"path": "/v2/x"}, ToolContext({"progressToken": 7}, _notify))

        assert [n.params["progress"] for n in sent] == [1, 2]

    async def test_no_progress_without_token(self, client: MagicMock) -> None:
        notify = AsyncMock()
        await QueryTool(client)({"path": "/v2/x"}, ToolContext({}, notify))
        notify.assert_not_awaited()


class TestTrending:
    async def test_default_window(self, client: MagicMock) -> None:
        await TrendingTokensTool(QueryTool(client))({}, ToolContext())

        assert client.request.await_args.args == ("/v2/aggregations/trending-tokens",)
        assert _sent_query(client) == {"timeWindow": "7d"}

    async def test_whitelists_arguments(self, client: MagicMock) -> None:
        arguments = {
            "timeframe": "24h",
            "chain": "solana",
            "limit": 5,
            "pageSize": 10,
            "minMentions": 3,
            "unexpected": "dropped",
        }
        await TrendingTokensTool(QueryTool(client))(arguments, ToolContext())

        assert _sent_query(client) == {
            "chain": "solana",
            "limit": 5,
            "pageSize": 10,
            "minMentions": 3,
            "timeWindow": "24h",
        }

    async def test_absolute_range_replaces_window(self, client: MagicMock) -> None:
        await TrendingTokensTool(QueryTool(client))(
            {"timeframe": "24h", "start": 1700000000, "end": 1700086400}, ToolContext()
        )
        assert _sent_query(client) == {"from": 1700000000, "to": 1700086400}

    async def test_alias_matches_trending_tokens(self, client: MagicMock) -> None:
        query = QueryTool(client)
        arguments = {"timeframe": "24h", "chain": "eth", "limit": 3}

        alias = await TrendingTool(query)(arguments, ToolContext())
        alias_call = client.request.await_args
        canonical = await TrendingTokensTool(query)(arguments, ToolContext())

        assert alias.to_wire() == canonical.to_wire()
        assert alias_call == client.request.await_args

    def test_alias_has_its_own_name(self, client: MagicMock) -> None:
        query = QueryTool(client)
        assert TrendingTool(query).definition().name == "elfa_trending"
        assert TrendingTokensTool(query).definition().name == "elfa_trending_tokens"


class TestTokenNews:
    async def test_symbols_and_default_window(self, client: MagicMock) -> None:
        await TokenNewsTool(QueryTool(client))({"symbols": "ETH,BTC", "sources": "x"}, ToolContext())

        assert client.request.await_args.args == ("/v2/data/token-news",)
        assert _sent_query(client) == {"symbols": "ETH,BTC", "sources": "x", "timeWindow": "30d"}

    async def test_only_start_falls_back_to_window(self, client: MagicMock) -> None:
        await TokenNewsTool(QueryTool(client))({"start": "1700000000"}, ToolContext())
        assert _sent_query(client) == {"timeWindow": "30d"}


class TestKeywordMentions:
    async def test_list_keywords_are_joined(self, client: MagicMock) -> None:
        await KeywordMentionsTool(QueryTool(client))(
            {"keywords": ["eth", "etf"], "searchType": "and", "accountName": "elfa"}, ToolContext()
        )

        assert client.request.await_args.args == ("/v2/data/keyword-mentions",)
        assert _sent_query(client) == {
            "keywords": "eth,etf",
            "accountName": "elfa",
            "searchType": "and",
            "timeWindow": "30d",
        }

    async def test_string_keywords_pass_through(self, client: MagicMock) -> None:
        await KeywordMentionsTool(QueryTool(client))({"keywords": "eth,etf"}, ToolContext())
        assert _sent_query(client)["keywords"] == "eth,etf"

    async def test_upstream_failure_propagates(self, client: MagicMock) -> None:
        client.request.return_value = ProxyResponse(ok=False, status=429, data={"error": "rate limited"})

        result = await KeywordMentionsTool(QueryTool(client))({"keywords": "eth"}, ToolContext())

        assert result.is_error
        assert result.meta == {"status": 429}
