"""``cloudmcp http-profile``: show and check the HTTP transport presets."""

from __future__ import annotations

import click

from cloudmcp.cli_commands._output import print_http_profile
from cloudmcp.transport.profiles import PROFILE_NAMES, recommend_config, validate_config

_PROFILE = click.Choice(PROFILE_NAMES)


@click.group("http-profile")
def http_profile() -> None:
    """Inspect HTTP transport profiles."""


@http_profile.command("show")
@click.argument("name", type=_PROFILE, default="default")
def show(name: str) -> None:
    """Print the settings of profile NAME and its warnings."""
    config = recommend_config(name)
    print_http_profile(name, config, validate_config(config))


@http_profile.command("validate")
@click.argument("name", type=_PROFILE)
def validate(name: str) -> None:
    """Exit non-zero when profile NAME has warnings."""
    from cloudmcp.cli_commands._output import print_warnings

    warnings = validate_config(recommend_config(name))
    print_warnings(warnings)
    if warnings:
        raise SystemExit(1)
