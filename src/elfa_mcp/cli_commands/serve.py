"""``elfa-mcp serve`` — run the JSON-RPC tool server over stdin/stdout."""

from __future__ import annotations

import asyncio
import logging

import click

from elfa_mcp.cli_commands._output import configure_logging, err_console
from elfa_mcp.elfa.client import ElfaClient
from elfa_mcp.elfa.config import ConfigStore
from elfa_mcp.protocols.mcp.server import MCPServer
from elfa_mcp.protocols.mcp.transport import ServerTransport, StdioTransport
from elfa_mcp.tools.registry import build_registry

logger = logging.getLogger(__name__)


async def run_server(transport: ServerTransport, store: ConfigStore | None = None) -> None:
    """Wire config, proxy client and catalogue together and serve until EOF."""
    store = store or ConfigStore.from_environment()
    async with ElfaClient(store) as client:
        server = MCPServer(build_registry(store, client))
        try:
            await server.serve(transport)
        finally:
            await transport.close()


@click.command()
@click.option(
    "--log-level",
    envvar="ELFA_MCP_LOG_LEVEL",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
    help="Log level for stderr diagnostics.",
)
@click.option("--trace/--no-trace", default=False, help="Export tracing spans to stderr.")
@click.option("--otlp-endpoint", default=None, help="Export tracing spans via OTLP/gRPC.")
def serve(log_level: str, trace: bool, otlp_endpoint: str | None) -> None:
    """Serve the tool catalogue over line-delimited JSON-RPC on stdio."""
    configure_logging(log_level)

    if trace or otlp_endpoint:
        from elfa_mcp.utils.telemetry import configure_telemetry

        try:
            configure_telemetry(export_to_console=trace, otlp_endpoint=otlp_endpoint)
        except ImportError as exc:
            err_console.print(f"[yellow]Tracing disabled:[/yellow] {exc}")

    try:
        asyncio.run(run_server(StdioTransport()))
    except KeyboardInterrupt:
        logger.info("Interrupted")
