"""``cloudmcp tools``: inspect the tool catalogue."""

from __future__ import annotations

import click

from cloudmcp.cli_commands._output import console, print_tools_table


@click.group()
def tools() -> None:
    """Inspect the registered tools."""


@tools.command("list")
@click.option("--service", default=None, help="Only show tools of this service (linode, cloudmcp).")
def list_tools(service: str | None) -> None:
    """List every tool the server registers."""
    from cloudmcp.tools import all_tool_specs

    specs = all_tool_specs()
    if service:
        specs = [spec for spec in specs if spec.service == service]

    if not specs:
        console.print("[yellow]No tools registered.[/yellow]")
        return

    print_tools_table(specs)
