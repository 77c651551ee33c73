"""``cloudmcp serve``: run the MCP server over stdio."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import TYPE_CHECKING

import click

from cloudmcp.cli_commands._output import err_console
from cloudmcp.transport.profiles import PROFILE_NAMES

if TYPE_CHECKING:
    from cloudmcp.core.config import ConfigStore

logger = logging.getLogger(__name__)


@click.command()
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="Configuration file (defaults to CLOUDMCP_CONFIG or the platform path).")
@click.option("--log-level", default=None, help="Override the configured log level.")
@click.option("--http-profile", type=click.Choice(PROFILE_NAMES), default=None,
              help="Override the configured HTTP transport profile.")
def serve(config_path: str | None, log_level: str | None, http_profile: str | None) -> None:
    """Start the MCP server on stdin/stdout.

    Every configured account is verified before the server starts; any
    failure exits with status 1.
    """
    from cloudmcp.core.config import ConfigStore, load_config
    from cloudmcp.core.errors import AuthError, ConfigError, UpstreamError
    from cloudmcp.utils.logging import redact, secret_registry, setup_logging

    try:
        store = load_config(config_path)
    except ConfigError as exc:
        err_console.print(f"[red]Configuration error:[/red] {exc}")
        sys.exit(1)

    system = store.config.system
    updates = {
        key: value
        for key, value in (("log_level", log_level), ("http_profile", http_profile))
        if value
    }
    if updates:
        system = system.model_copy(update=updates)
        store = ConfigStore(store.path, store.config.model_copy(update={"system": system}))

    for secret in store.config.secrets():
        secret_registry.add(secret)
    setup_logging(system.log_level, system.log_format)
    if system.telemetry_enabled:
        _enable_telemetry(system.server_name)

    try:
        asyncio.run(_serve(store))
    except (ConfigError, AuthError, UpstreamError) as exc:
        err_console.print(f"[red]Startup error:[/red] {redact(str(exc))}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted")


async def _serve(store: ConfigStore) -> None:
    from cloudmcp.server.mcp_server import run_stdio
    from cloudmcp.server.service import Service

    async with await Service.create(store) as service:
        await run_stdio(service)


def _enable_telemetry(service_name: str) -> None:
    from cloudmcp.utils.telemetry import configure_telemetry

    try:
        configure_telemetry(service_name=service_name)
    except ImportError as exc:
        logger.warning("Telemetry disabled: %s", exc)
