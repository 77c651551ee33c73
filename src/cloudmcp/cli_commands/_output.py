"""Shared CLI output formatters."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from cloudmcp.core.config import CloudMCPConfig
    from cloudmcp.server.harness import ToolSpec
    from cloudmcp.transport.profiles import HTTPClientConfig

console = Console()
# stdout is the MCP channel while serving
err_console = Console(stderr=True)


def print_tools_table(specs: list[ToolSpec]) -> None:
    """Pretty-print the tool catalogue as a table."""
    table = Table(title=f"Registered Tools ({len(specs)})")
    table.add_column("Name", style="cyan")
    table.add_column("Service")
    table.add_column("Account", justify="center")
    table.add_column("Description")

    for spec in specs:
        table.add_row(
            spec.name,
            spec.service,
            "yes" if spec.needs_account else "-",
            _truncate(spec.description),
        )

    console.print(table)


def print_http_profile(name: str, config: HTTPClientConfig, warnings: list[str]) -> None:
    table = Table(title=f"HTTP profile: {name}")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", justify="right")

    for key, value in config.model_dump().items():
        table.add_row(key, str(value))

    console.print(table)
    print_warnings(warnings)


def print_warnings(warnings: list[str]) -> None:
    if not warnings:
        console.print("[green]No warnings.[/green]")
        return
    for warning in warnings:
        console.print(f"[yellow]warning:[/yellow] {warning}")


def print_config(config: CloudMCPConfig, path: str) -> None:
    """Print the configuration with every token masked."""
    system = config.system
    console.print(f"\n[bold]Configuration[/bold] ({path})")
    console.print(f"  Server name: {system.server_name}")
    console.print(f"  Default account: {system.default_account or '(none)'}")
    console.print(f"  Log level: {system.log_level} ({system.log_format})")
    console.print(f"  Cache TTL: {system.cache_ttl_seconds:g}s")
    console.print(f"  HTTP profile: {system.http_profile}")

    if not config.accounts:
        console.print("\n[yellow]No accounts configured.[/yellow]")
        return

    table = Table(title="Accounts")
    table.add_column("Name", style="cyan")
    table.add_column("Label")
    table.add_column("API URL")
    table.add_column("Token")

    for name, account in sorted(config.accounts.items()):
        marker = " (default)" if name == system.default_account else ""
        table.add_row(
            name + marker,
            account.label,
            account.effective_api_url,
            mask_token(account.token.get_secret_value()),
        )

    console.print(table)


def mask_token(token: str) -> str:
    """Keep the last four characters of a long token, hide the rest."""
    if len(token) <= 8:
        return "****"
    return "****" + token[-4:]


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
