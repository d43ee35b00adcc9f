"""ElfaClient — proxies calls to the ELFA v2 HTTP API.

Every call returns a :class:`ProxyResponse`; HTTP error statuses and transport
failures are reported in the result instead of being raised.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import BaseModel

from elfa_mcp.elfa.config import ConfigStore

logger = logging.getLogger(__name__)

TRENDING_TOKENS_PATH = "/v2/aggregations/trending-tokens"
TOKEN_NEWS_PATH = "/v2/data/token-news"
KEYWORD_MENTIONS_PATH = "/v2/data/keyword-mentions"

DEFAULT_TIME_WINDOWS = {
    TRENDING_TOKENS_PATH: "7d",
    TOKEN_NEWS_PATH: "30d",
    KEYWORD_MENTIONS_PATH: "30d",
}

_FALLBACK_ERROR = "request failed"
_SYNTHETIC_STATUS = 500


class ProxyResponse(BaseModel):
    """Normalized outcome of one upstream call."""

    ok: bool
    status: int
    data: Any = None
    error: str | None = None


def apply_time_range(
    query: dict[str, Any],
    *,
    start: Any = None,
    end: Any = None,
    time_window: str | None = None,
    default_window: str,
) -> dict[str, Any]:
    """Add either an absolute ``from``/``to`` range or a ``timeWindow``, never both."""
    query.pop("from", None)
    query.pop("to", None)
    query.pop("timeWindow", None)
    if start is not None and end is not None:
        query["from"] = start
        query["to"] = end
    else:
        query["timeWindow"] = time_window or default_window
    return query


def encode_query(query: Mapping[str, Any] | None) -> dict[str, str]:
    """Stringify query values the way the upstream expects them."""
    params: dict[str, str] = {}
    for key, value in (query or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            params[key] = "true" if value else "false"
        elif isinstance(value, (list, tuple)):
            params[key] = ",".join(str(item) for item in value)
        else:
            params[key] = str(value)
    return params


def _parse_body(raw: str) -> Any:
    if not raw:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return {"raw": raw}


def _error_message(exc: Exception) -> str:
    """Best available error text: upstream body, then exception message, then a fallback."""
    response = getattr(exc, "response", None)
    if isinstance(response, httpx.Response):
        try:
            body = response.json()
        except (ValueError, httpx.ResponseNotRead):
            body = None
        if isinstance(body, dict):
            for field in ("error", "message"):
                if body.get(field):
                    return str(body[field])
    return str(exc) or _FALLBACK_ERROR


class ElfaClient:
    """Async client bound to a :class:`ConfigStore`.

    The base URL and auth header are read from the store on every call, so
    admin changes take effect immediately.

    Usage::

        async with ElfaClient(store) as client:
            response = await client.request("/v2/data/token-news", query={"symbols": "ETH"})
    """

    def __init__(
        self,
        store: ConfigStore,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._store = store
        self._http = http_client
        self._owns_http = http_client is None

    async def __aenter__(self) -> ElfaClient:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()

    async def close(self) -> None:
        if self._http is not None and self._owns_http:
            await self._http.aclose()
            self._http = None

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient()
        return self._http

    def build_headers(self, *, has_body: bool = False) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        auth = self._store.config.auth
        if auth.key:
            headers[auth.header_name] = auth.header_value()
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers

    async def request(
        self,
        path: str,
        *,
        method: str = "GET",
        query: Mapping[str, Any] | None = None,
        body: Any = None,
    ) -> ProxyResponse:
        """Send one request to ``base_url + path`` and normalize the outcome."""
        config = self._store.config
        method = method.upper()
        send_body = body is not None and method != "GET"
        url = config.base_url + (path if path.startswith("/") else f"/{path}")
        params = encode_query(query)

        try:
            response = await self._client().request(
                method,
                url,
                params=params,
                headers=self.build_headers(has_body=send_body),
                content=json.dumps(body) if send_body else None,
                timeout=config.timeout,
            )
        except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError) as exc:
            message = _error_message(exc)
            logger.warning("ELFA %s %s failed: %s", method, path, message)
            return ProxyResponse(ok=False, status=_SYNTHETIC_STATUS, error=message)

        data = _parse_body(response.text)
        if not response.is_success:
            logger.warning("ELFA %s %s returned %d", method, path, response.status_code)
        return ProxyResponse(ok=response.is_success, status=response.status_code, data=data)
