"""Tests for the configuration admin tools."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from elfa_mcp.elfa.config import AuthConfig, ConfigStore, RuntimeConfig
from elfa_mcp.tools.admin import ReloadEnvTool, SetAuthTool, SetBaseTool, StatusTool
from elfa_mcp.tools.base import Tool, ToolContext


async def _call(tool: Tool, arguments: dict[str, Any]) -> tuple[dict[str, Any], bool]:
    result = await tool(arguments, ToolContext())
    return json.loads(result.text), result.is_error


@pytest.fixture()
def store() -> ConfigStore:
    return ConfigStore(RuntimeConfig(), env_paths=[], environ={})


class TestSetAuth:
    async def test_sets_key_and_masks_it(self, store: ConfigStore) -> None:
        payload, is_error = await _call(SetAuthTool(store), {"key": "abc12345678"})

        assert not is_error
        assert payload == {"ok": True, "headerName": "x-elfa-api-key", "scheme": "", "key": "abc1…5678"}
        assert store.config.auth.key == "abc12345678"

    async def test_switch_to_authorization_defaults_bearer(self, store: ConfigStore) -> None:
        payload, _ = await _call(SetAuthTool(store), {"key": "k", "headerName": "authorization"})

        assert payload["headerName"] == "Authorization"
        assert payload["scheme"] == "Bearer"
        assert store.config.auth.header_value() == "Bearer k"

    async def test_switch_back_clears_scheme(self) -> None:
        store = ConfigStore(RuntimeConfig(auth=AuthConfig(header_name="Authorization", scheme="Bearer", key="k")))
        await _call(SetAuthTool(store), {"key": "k2", "headerName": "X-Elfa-Api-Key"})

        assert store.config.auth.header_name == "x-elfa-api-key"
        assert store.config.auth.header_value() == "k2"

    async def test_explicit_scheme_wins(self, store: ConfigStore) -> None:
        payload, _ = await _call(SetAuthTool(store), {"key": "k", "headerName": "Authorization", "scheme": " Token "})
        assert payload["scheme"] == "Token"

    async def test_keeps_header_when_omitted(self) -> None:
        store = ConfigStore(RuntimeConfig(auth=AuthConfig(header_name="Authorization", scheme="Bearer", key="k")))
        await _call(SetAuthTool(store), {"key": "k2"})

        assert store.config.auth.header_name == "Authorization"
        assert store.config.auth.scheme == "Bearer"

    async def test_rejects_unknown_header(self, store: ConfigStore) -> None:
        before = store.config
        payload, is_error = await _call(SetAuthTool(store), {"key": "k", "headerName": "x-api-key"})

        assert is_error
        assert payload["ok"] is False
        assert store.config is before

    async def test_missing_key_is_invalid(self, store: ConfigStore) -> None:
        payload, is_error = await _call(SetAuthTool(store), {"key": ""})

        assert is_error
        assert payload["error"] is True
        assert "key" in payload["message"]


class TestSetBase:
    async def test_sets_normalized_base(self, store: ConfigStore) -> None:
        payload, is_error = await _call(SetBaseTool(store), {"base": "https://staging.example.com/"})

        assert not is_error
        assert payload == {"ok": True, "base": "https://staging.example.com"}
        assert store.config.base_url == "https://staging.example.com"

    @pytest.mark.parametrize("base", ["not a url", "ftp://example.com", "/v2/relative", "https://"])
    async def test_rejects_invalid_url(self, store: ConfigStore, base: str) -> None:
        payload, is_error = await _call(SetBaseTool(store), {"base": base})

        assert is_error
        assert payload == {"ok": False, "message": "Invalid URL for 'base'"}
        assert store.config.base_url == "https://api.elfa.ai"


class TestReloadAndStatus:
    async def test_status_reports_masked_config(self) -> None:
        store = ConfigStore(RuntimeConfig(auth=AuthConfig(key="abc12345678")))
        payload, is_error = await _call(StatusTool(store), {})

        assert not is_error
        assert payload == {
            "base": "https://api.elfa.ai",
            "loaded": False,
            "from": [],
            "vars": [],
            "auth": {"headerName": "x-elfa-api-key", "scheme": "", "key": "abc1…5678"},
        }

    async def test_reload_reads_env_files(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("ELFA_API_KEY=abc12345678\nELFA_HEADER=Authorization\n")
        store = ConfigStore(RuntimeConfig(), env_paths=[env_file], environ={})

        payload, is_error = await _call(ReloadEnvTool(store), {})

        assert not is_error
        assert payload["ok"] is True
        assert payload["loaded"] is True
        assert payload["from"] == [str(env_file)]
        assert payload["vars"] == ["ELFA_API_KEY", "ELFA_HEADER"]
        assert payload["auth"] == {"headerName": "Authorization", "scheme": "Bearer", "key": "abc1…5678"}

    def test_annotations(self, store: ConfigStore) -> None:
        assert StatusTool(store).definition().annotations.read_only_hint is True
        assert SetAuthTool(store).definition().annotations.read_only_hint is False
