"""Runtime configuration for the ELFA proxy: base URL, auth header and env-file info.

Configuration objects are frozen. Admin tools and env reloads never mutate a
field in place; they build a replacement and swap it into the shared
:class:`ConfigStore`. Every store operation is synchronous, so a swap can never
interleave with a dependent read inside one tool call. A handler that awaits
I/O between reading and replacing the config would need an ``asyncio.Lock``.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Literal

from dotenv import dotenv_values
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.elfa.ai"
DEFAULT_TIMEOUT = 30.0
ELFA_HEADER = "x-elfa-api-key"
AUTHORIZATION_HEADER = "Authorization"
KNOWN_VARS = ("ELFA_API_KEY", "ELFA_HEADER", "ELFA_AUTH_TYPE", "ELFA_BASE")

HeaderName = Literal["x-elfa-api-key", "Authorization"]


class AuthConfig(BaseModel):
    """Outbound auth header. An empty ``scheme`` sends the raw key."""

    model_config = {"frozen": True, "populate_by_name": True}

    header_name: HeaderName = Field(default=ELFA_HEADER, alias="headerName")
    scheme: str = ""
    key: str = ""

    def header_value(self) -> str:
        return f"{self.scheme} {self.key}" if self.scheme else self.key

    def masked(self) -> dict[str, str]:
        """Wire-safe view of the auth settings; the key is never shown raw."""
        return {"headerName": self.header_name, "scheme": self.scheme, "key": mask_key(self.key)}


class RuntimeConfig(BaseModel):
    """Settings read by every proxy call."""

    model_config = {"frozen": True}

    base_url: str = DEFAULT_BASE_URL
    auth: AuthConfig = Field(default_factory=AuthConfig)
    timeout: float = DEFAULT_TIMEOUT


class EnvInfo(BaseModel):
    """Which ``.env`` files were found and which known variables are set."""

    model_config = {"frozen": True, "populate_by_name": True}

    loaded: bool = False
    from_: list[str] = Field(default_factory=list, alias="from")
    vars: list[str] = Field(default_factory=list)


def mask_key(key: str) -> str:
    """Mask a secret: ``abc1…5678`` for long keys, asterisks plus the last two chars otherwise."""
    if not key:
        return ""
    if len(key) <= 8:
        return "*" * max(0, len(key) - 2) + key[-2:]
    return f"{key[:4]}…{key[-4:]}"


def normalize_base_url(base: str) -> str:
    return base.rstrip("/")


def canonical_header(name: str) -> HeaderName | None:
    """Map a case-insensitive header name to its canonical spelling."""
    lowered = name.strip().lower()
    if lowered == ELFA_HEADER:
        return ELFA_HEADER
    if lowered == AUTHORIZATION_HEADER.lower():
        return AUTHORIZATION_HEADER
    return None


def default_env_paths(cwd: Path | None = None) -> list[Path]:
    """Candidate ``.env`` locations, most specific first."""
    package_dir = Path(__file__).resolve().parent
    return [
        (cwd or Path.cwd()) / ".env",
        package_dir / ".env",
        package_dir.parent / ".env",
        package_dir.parent.parent / ".env",
    ]


def load_env(
    paths: Sequence[Path],
    environ: Mapping[str, str | None] | None = None,
) -> tuple[dict[str, str], EnvInfo]:
    """Merge ``.env`` files with the process environment without mutating it.

    The first file defining a variable wins; the real environment wins over
    every file.
    """
    merged: dict[str, str] = {}
    found: list[str] = []
    seen: set[Path] = set()
    for path in paths:
        if path in seen:
            continue
        seen.add(path)
        if not path.is_file():
            continue
        found.append(str(path))
        for name, value in dotenv_values(path).items():
            if value is not None and name not in merged:
                merged[name] = value

    env = os.environ if environ is None else environ
    for name, value in env.items():
        if value is not None:
            merged[name] = value

    info = EnvInfo(
        loaded=bool(found),
        from_=found,
        vars=[name for name in KNOWN_VARS if name in merged],
    )
    logger.info("env loaded=%s from=%s vars=%s", info.loaded, info.from_, info.vars)
    return merged, info


def auth_from_env(env: Mapping[str, str]) -> AuthConfig:
    """Build auth settings, preferring ``x-elfa-api-key`` unless ``Authorization`` is requested."""
    key = (env.get("ELFA_API_KEY") or env.get("ELFA_KEY") or "").strip()
    header = canonical_header(env.get("ELFA_HEADER") or ELFA_HEADER) or ELFA_HEADER
    if header == AUTHORIZATION_HEADER:
        scheme = env.get("ELFA_AUTH_TYPE") or "Bearer"
        return AuthConfig(header_name=AUTHORIZATION_HEADER, scheme=scheme, key=key)
    return AuthConfig(header_name=ELFA_HEADER, scheme="", key=key)


def config_from_env(env: Mapping[str, str], *, fallback_base: str = DEFAULT_BASE_URL) -> RuntimeConfig:
    timeout = DEFAULT_TIMEOUT
    raw_timeout = env.get("ELFA_TIMEOUT")
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError:
            logger.warning("Ignoring invalid ELFA_TIMEOUT=%r", raw_timeout)
    return RuntimeConfig(
        base_url=normalize_base_url(env.get("ELFA_BASE") or fallback_base),
        auth=auth_from_env(env),
        timeout=timeout,
    )


class ConfigStore:
    """Holds the single live :class:`RuntimeConfig` and its :class:`EnvInfo`.

    Usage::

        store = ConfigStore.from_environment()
        store.replace(store.config.model_copy(update={"base_url": "https://x"}))
        store.reload()
    """

    def __init__(
        self,
        config: RuntimeConfig | None = None,
        env_info: EnvInfo | None = None,
        *,
        env_paths: Sequence[Path] | None = None,
        environ: Mapping[str, str | None] | None = None,
    ) -> None:
        self._config = config or RuntimeConfig()
        self._env_info = env_info or EnvInfo()
        self._env_paths = list(env_paths) if env_paths is not None else None
        self._environ = environ

    @classmethod
    def from_environment(
        cls,
        *,
        env_paths: Sequence[Path] | None = None,
        environ: Mapping[str, str | None] | None = None,
    ) -> ConfigStore:
        store = cls(env_paths=env_paths, environ=environ)
        store.reload()
        return store

    @property
    def config(self) -> RuntimeConfig:
        return self._config

    @property
    def env_info(self) -> EnvInfo:
        return self._env_info

    def replace(self, config: RuntimeConfig) -> RuntimeConfig:
        self._config = config
        return config

    def reload(self) -> RuntimeConfig:
        """Rebuild config and env info from the environment and swap both in."""
        paths = self._env_paths if self._env_paths is not None else default_env_paths()
        env, info = load_env(paths, self._environ)
        self._config = config_from_env(env, fallback_base=self._config.base_url)
        self._env_info = info
        return self._config

    def status(self) -> dict[str, object]:
        """Snapshot for the status tool, with the key masked."""
        return {
            "base": self._config.base_url,
            "loaded": self._env_info.loaded,
            "from": list(self._env_info.from_),
            "vars": list(self._env_info.vars),
            "auth": self._config.auth.masked(),
        }
