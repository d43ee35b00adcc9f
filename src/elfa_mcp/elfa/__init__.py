"""ELFA API access: runtime configuration and the proxy client."""

from elfa_mcp.elfa.client import ElfaClient, ProxyResponse, apply_time_range, encode_query
from elfa_mcp.elfa.config import AuthConfig, ConfigStore, EnvInfo, RuntimeConfig, mask_key

__all__ = [
    "AuthConfig",
    "ConfigStore",
    "ElfaClient",
    "EnvInfo",
    "ProxyResponse",
    "RuntimeConfig",
    "apply_time_range",
    "encode_query",
    "mask_key",
]
