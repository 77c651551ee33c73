"""Version tools."""

from __future__ import annotations

from typing import Any

from cloudmcp.server.harness import ToolContext, ToolSpec
from cloudmcp.server.params import ParsedArgs
from cloudmcp.version import get_info


async def _current_name(ctx: ToolContext) -> str:
    current, _ = await ctx.registry.overview()
    return current or "none"


async def version(ctx: ToolContext, args: ParsedArgs) -> str:
    info = get_info()
    return f"{info}\n\n{info.build_info()}\n\nCurrent account: {await _current_name(ctx)}"


async def version_json(ctx: ToolContext, args: ParsedArgs) -> dict[str, Any]:
    return {
        "cloudmcp": get_info().to_document(),
        "current_account": await _current_name(ctx),
        "service": ctx.registry.store.config.system.server_name,
    }


def tools() -> list[ToolSpec]:
    return [
        ToolSpec(
            name="cloudmcp_version",
            description="Get CloudMCP version and build information",
            handler=version,
            needs_account=False,
            service="cloudmcp",
        ),
        ToolSpec(
            name="cloudmcp_version_json",
            description="Get CloudMCP version information in JSON format",
            handler=version_json,
            needs_account=False,
            service="cloudmcp",
        ),
    ]
