"""``elfa-mcp tools`` — inspect and run catalogue tools without a host."""

from __future__ import annotations

import asyncio
import json

import click

from elfa_mcp.cli_commands._output import configure_logging, console, print_tools_table
from elfa_mcp.elfa.client import ElfaClient
from elfa_mcp.elfa.config import ConfigStore
from elfa_mcp.protocols.errors import ToolNotFoundError
from elfa_mcp.protocols.mcp.models import ToolResult
from elfa_mcp.tools.base import ToolContext
from elfa_mcp.tools.registry import build_registry


@click.group()
def tools() -> None:
    """Inspect and run tools."""


@tools.command("list")
@click.option("--json", "as_json", is_flag=True, help="Print the catalogue as JSON.")
def list_tools(as_json: bool) -> None:
    """List every tool with its input schema."""
    store = ConfigStore()
    registry = build_registry(store, ElfaClient(store))
    definitions = [definition.to_wire() for definition in registry.definitions()]

    if as_json:
        console.print_json(json.dumps({"tools": definitions}))
        return
    print_tools_table(definitions)


@tools.command("call")
@click.argument("name")
@click.option("--args", "raw_args", default="{}", help="Tool arguments as a JSON object.")
def call_tool(name: str, raw_args: str) -> None:
    """Run tool NAME once in-process and print its result.

    Configuration is read from the environment and ``.env`` files exactly as
    ``serve`` does.
    """
    configure_logging("WARNING")
    try:
        arguments = json.loads(raw_args)
    except json.JSONDecodeError as exc:
        console.print(f"[red]Invalid --args JSON:[/red] {exc}")
        return
    if not isinstance(arguments, dict):
        console.print("[red]--args must be a JSON object[/red]")
        return

    async def _call() -> ToolResult:
        store = ConfigStore.from_environment()
        async with ElfaClient(store) as client:
            tool = build_registry(store, client).get(name)
            return await tool(arguments, ToolContext())

    try:
        result = asyncio.run(_call())
    except ToolNotFoundError:
        console.print(f"[red]Unknown tool:[/red] {name}")
        return

    console.print_json(json.dumps(result.to_wire()))
