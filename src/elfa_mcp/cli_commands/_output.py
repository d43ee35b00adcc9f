"""Shared CLI output formatters and logging setup.

``serve`` owns stdout for JSON-RPC, so log records always go to stderr.
"""

from __future__ import annotations

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

console = Console()
err_console = Console(stderr=True)


def configure_logging(level: str = "INFO") -> None:
    """Route all log records to stderr through rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False, rich_tracebacks=True)],
        force=True,
    )


def print_tools_table(tools: list[dict[str, Any]]) -> None:
    """Pretty-print the tool catalogue as a table."""
    table = Table(title="ELFA MCP Tools")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Title")
    table.add_column("Required")
    table.add_column("Read-only")
    table.add_column("Description")

    for tool in tools:
        schema = tool.get("inputSchema", {})
        annotations = tool.get("annotations", {})
        table.add_row(
            tool.get("name", "?"),
            annotations.get("title", ""),
            ", ".join(schema.get("required", [])) or "-",
            "yes" if annotations.get("readOnlyHint") else "no",
            _truncate(tool.get("description", "")),
        )

    console.print(table)


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
