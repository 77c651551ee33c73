"""``python -m cloudmcp``, for MCP hosts that launch servers by module."""

from cloudmcp.cli import main

main(prog_name="cloudmcp")
