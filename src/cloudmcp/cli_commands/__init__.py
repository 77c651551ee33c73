"""Subcommands of the ``cloudmcp`` group.

Command modules import the server stack, so they load only when the group is
assembled rather than when this package is imported.
"""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click

# (module, attribute) in help order.
_COMMANDS = (
    ("serve", "serve"),
    ("tools", "tools"),
    ("http_profile", "http_profile"),
    ("config", "config"),
)


def register_commands(cli: click.Group) -> None:
    for module_name, attr in _COMMANDS:
        module = importlib.import_module(f"{__name__}.{module_name}")
        cli.add_command(getattr(module, attr))
