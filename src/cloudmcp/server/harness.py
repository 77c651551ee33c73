"""The control flow every tool handler shares.

:func:`run_tool` parses the declared parameters, resolves the current
account, calls the handler, and renders its output.  Any
:class:`~cloudmcp.core.errors.ToolError` raised along the way becomes an
``isError`` result; everything else propagates to the MCP framework.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from mcp import types
from opentelemetry import trace

from cloudmcp.core.errors import FrameworkError, ToolError
from cloudmcp.server.formatting import compact_json
from cloudmcp.server.params import Param, ParsedArgs, parse_arguments, to_json_schema
from cloudmcp.utils.logging import redact
from cloudmcp.utils.telemetry import ATTR_ACCOUNT

if TYPE_CHECKING:
    from cloudmcp.accounts.registry import Account, AccountRegistry
    from cloudmcp.linode.api import LinodeAPI
    from cloudmcp.linode.cache import ReferenceCache

logger = logging.getLogger(__name__)

HandlerOutput = str | dict[str, Any] | list[Any]
Handler = Callable[["ToolContext", ParsedArgs], Awaitable[HandlerOutput]]


@dataclass
class ToolContext:
    """What a handler may touch during one invocation."""

    registry: AccountRegistry
    account: Account | None = None

    @property
    def current(self) -> Account:
        if self.account is None:
            raise FrameworkError("tool declared needs_account=False but asked for the account")
        return self.account

    @property
    def client(self) -> LinodeAPI:
        return self.current.client

    @property
    def cache(self) -> ReferenceCache:
        """The reference cache belonging to the current account's client."""
        return self.registry.caches.for_client(self.client)


@dataclass(frozen=True)
class ToolSpec:
    """A named tool: its description, parameters, and handler."""

    name: str
    description: str
    handler: Handler
    params: tuple[Param, ...] = field(default_factory=tuple)
    needs_account: bool = True
    service: str = "linode"

    @property
    def short_name(self) -> str:
        prefix = f"{self.service}_"
        return self.name[len(prefix):] if self.name.startswith(prefix) else self.name

    def input_schema(self) -> dict[str, Any]:
        return to_json_schema(self.params)

    def descriptor(self) -> types.Tool:
        return types.Tool(name=self.name, description=self.description, inputSchema=self.input_schema())


def text_result(text: str) -> types.CallToolResult:
    return types.CallToolResult(content=[types.TextContent(type="text", text=redact(text))])


def error_result(text: str) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=redact(text))],
        isError=True,
    )


def tool_error_result(spec: ToolSpec, exc: ToolError) -> types.CallToolResult:
    return error_result(f"[{spec.service}/{spec.short_name}] {exc}")


def render_output(output: HandlerOutput) -> str:
    if isinstance(output, str):
        return output
    try:
        return compact_json(output)
    except (TypeError, ValueError) as exc:
        raise FrameworkError(f"could not serialise tool output: {exc}") from exc


async def run_tool(
    spec: ToolSpec,
    registry: AccountRegistry,
    arguments: dict[str, Any] | None,
) -> types.CallToolResult:
    """Execute *spec* once against the current account."""
    try:
        args = parse_arguments(arguments, spec.params)
        if not spec.needs_account:
            output = await spec.handler(ToolContext(registry=registry), args)
        else:
            async with registry.use_current() as account:
                trace.get_current_span().set_attribute(ATTR_ACCOUNT, account.name)
                logger.debug("%s using account '%s'", spec.name, account.name)
                output = await spec.handler(ToolContext(registry=registry, account=account), args)
    except ToolError as exc:
        logger.info("%s failed: %s", spec.name, exc)
        return tool_error_result(spec, exc)
    return text_result(render_output(output))
