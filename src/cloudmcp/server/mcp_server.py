"""Binds a :class:`~cloudmcp.server.service.Service` to the MCP SDK's low-level server."""

from __future__ import annotations

import logging
from typing import Any

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from cloudmcp import __version__
from cloudmcp.core.errors import FrameworkError
from cloudmcp.server.service import Service
from cloudmcp.utils.logging import redact

logger = logging.getLogger(__name__)


def create_mcp_server(service: Service) -> Server:
    """An MCP server whose tools are the service's dispatcher."""
    server: Server = Server(service.name, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        logger.debug("list_tools called")
        return service.dispatcher.all_tools()

    # Arguments are validated by the tool's own parameter parser so that bad
    # input comes back as a tool error naming the field.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
        try:
            return await service.dispatcher.dispatch(name, arguments)
        except FrameworkError:
            logger.exception("Tool %s failed inside the framework", name)
            raise
        except Exception as exc:
            logger.exception("Tool %s raised %s", name, type(exc).__name__)
            raise FrameworkError(redact(f"{name}: {exc}")) from exc

    return server


async def run_stdio(service: Service) -> None:
    """Serve MCP over stdin/stdout until the host disconnects."""
    server = create_mcp_server(service)
    logger.info("Starting %s (stdio transport)", service.name)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
