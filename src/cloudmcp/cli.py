"""``cloudmcp`` command line: the MCP server plus offline inspection commands."""

from __future__ import annotations

import click

from cloudmcp import __version__
from cloudmcp.cli_commands import register_commands

_EPILOG = (
    "Configuration is read from $CLOUDMCP_CONFIG, else config.toml in the "
    "platform config directory. LINODE_TOKEN seeds a 'primary' account when "
    "the file has none."
)


@click.group(
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=_EPILOG,
)
@click.version_option(version=__version__, prog_name="cloudmcp")
def main() -> None:
    """Serve multi-account Linode tools to an MCP host over stdio."""


register_commands(main)
