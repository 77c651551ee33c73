"""Tool catalogue: every module contributes a ``tools()`` list of ToolSpecs."""

from __future__ import annotations

from cloudmcp.server.harness import ToolSpec
from cloudmcp.tools import (
    account,
    billing,
    config_accounts,
    databases,
    domains,
    firewalls,
    images,
    instances,
    lke,
    longview,
    networking,
    nodebalancers,
    objectstorage,
    reference,
    stackscripts,
    support,
    system,
    volumes,
)

_MODULES = (
    system,
    account,
    billing,
    config_accounts,
    reference,
    instances,
    volumes,
    networking,
    images,
    firewalls,
    nodebalancers,
    domains,
    stackscripts,
    lke,
    databases,
    objectstorage,
    longview,
    support,
)


def all_tool_specs() -> list[ToolSpec]:
    specs: list[ToolSpec] = []
    for module in _MODULES:
        specs.extend(module.tools())
    return specs


__all__ = ["all_tool_specs"]
