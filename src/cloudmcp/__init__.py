"""CloudMCP: multi-account Linode control plane served over the Model Context Protocol."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from cloudmcp.accounts.registry import AccountRegistry as AccountRegistry
    from cloudmcp.server.service import Service as Service

_LAZY_EXPORTS = {
    "AccountRegistry": "cloudmcp.accounts.registry",
    "Service": "cloudmcp.server.service",
}


def __getattr__(name: str) -> object:
    module_path = _LAZY_EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'cloudmcp' has no attribute {name!r}")
