"""ELFA MCP CLI entrypoint."""

from __future__ import annotations

import click

from elfa_mcp import __version__


@click.group()
@click.version_option(version=__version__, prog_name="elfa-mcp")
def main() -> None:
    """ELFA MCP: market-data and technical-analysis tools over JSON-RPC."""


# Register subcommands
from elfa_mcp.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
