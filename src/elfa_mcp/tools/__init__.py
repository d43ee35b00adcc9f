"""Tool catalogue: admin, ELFA data and technical-analysis tools."""

from elfa_mcp.tools.base import Tool, ToolArguments, ToolContext
from elfa_mcp.tools.registry import ToolRegistry, build_registry

__all__ = [
    "Tool",
    "ToolArguments",
    "ToolContext",
    "ToolRegistry",
    "build_registry",
]
