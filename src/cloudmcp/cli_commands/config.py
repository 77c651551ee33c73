"""``cloudmcp config``: inspect the configuration document."""

from __future__ import annotations

import sys

import click

from cloudmcp.cli_commands._output import console, print_config


@click.group()
def config() -> None:
    """Inspect the configuration."""


@config.command("show")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="Configuration file (defaults to CLOUDMCP_CONFIG or the platform path).")
def show(config_path: str | None) -> None:
    """Print the configured accounts with tokens masked."""
    from cloudmcp.core.config import load_config
    from cloudmcp.core.errors import ConfigError

    try:
        store = load_config(config_path)
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        sys.exit(1)

    print_config(store.config, str(store.path))
