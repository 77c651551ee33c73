"""ToolDispatcher: routes tool invocations to the registered handler."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from mcp import types

from cloudmcp.core.errors import DuplicateToolError, UnknownToolError
from cloudmcp.server.harness import ToolSpec, error_result, run_tool
from cloudmcp.utils.telemetry import ATTR_TOOL_IS_ERROR, ATTR_TOOL_NAME, get_tracer

if TYPE_CHECKING:
    from cloudmcp.accounts.registry import AccountRegistry

logger = logging.getLogger(__name__)

_tracer = get_tracer(__name__)


class ToolDispatcher:
    """Maintains a name-to-:class:`ToolSpec` map and dispatches invocations.

    Usage::

        dispatcher = ToolDispatcher(registry)
        dispatcher.register_all(account_tools())

        tools = dispatcher.all_tools()                       # MCP descriptors
        result = await dispatcher.dispatch("linode_instances_list", {})
    """

    def __init__(self, registry: AccountRegistry) -> None:
        self._registry = registry
        self._tools: dict[str, ToolSpec] = {}

    def register(self, spec: ToolSpec) -> None:
        """Add *spec*; a name already taken is a programming error."""
        if spec.name in self._tools:
            raise DuplicateToolError(spec.name)
        self._tools[spec.name] = spec

    def register_all(self, specs: Iterable[ToolSpec]) -> None:
        for spec in specs:
            self.register(spec)

    def get(self, name: str) -> ToolSpec | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def specs(self) -> list[ToolSpec]:
        return list(self._tools.values())

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def all_tools(self) -> list[types.Tool]:
        """Descriptors (name, description, JSON schema) of every registered tool."""
        return [spec.descriptor() for spec in self._tools.values()]

    async def dispatch(self, name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
        """Route one invocation; unknown names yield an error result."""
        start = time.perf_counter()
        logger.info("call_tool: %s", name, extra={"tool": name})
        with _tracer.start_as_current_span("tool.call") as span:
            span.set_attribute(ATTR_TOOL_NAME, name)
            spec = self._tools.get(name)
            if spec is None:
                result = error_result(str(UnknownToolError(name)))
            else:
                result = await run_tool(spec, self._registry, arguments)
            is_error = bool(result.isError)
            span.set_attribute(ATTR_TOOL_IS_ERROR, is_error)

        latency_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "call_tool done: %s (%.1f ms)",
            name,
            latency_ms,
            extra={"tool": name, "latency_ms": round(latency_ms, 1), "status": "error" if is_error else "ok"},
        )
        return result
