"""Service: the composition root.

Builds the HTTP profile, the per-client reference caches, the account
registry (probing every configured account), and the dispatcher with the
whole tool catalogue registered.  Nothing here is process-global; the CLI
creates one :class:`Service` and hands it to the MCP binding.
"""

from __future__ import annotations

import logging
from types import TracebackType

from cloudmcp.accounts.registry import AccountRegistry, ClientFactory, default_client_factory
from cloudmcp.core.config import ConfigStore
from cloudmcp.linode.cache import CacheRegistry
from cloudmcp.server.dispatcher import ToolDispatcher
from cloudmcp.tools import all_tool_specs
from cloudmcp.transport.profiles import HTTPClientConfig, recommend_config, validate_config

logger = logging.getLogger(__name__)


def build_dispatcher(registry: AccountRegistry) -> ToolDispatcher:
    """A dispatcher with every tool registered; duplicate names abort."""
    dispatcher = ToolDispatcher(registry)
    dispatcher.register_all(all_tool_specs())
    return dispatcher


class Service:
    """One running CloudMCP instance."""

    def __init__(self, store: ConfigStore, registry: AccountRegistry, dispatcher: ToolDispatcher) -> None:
        self.store = store
        self.registry = registry
        self.dispatcher = dispatcher

    @classmethod
    async def create(
        cls,
        store: ConfigStore,
        *,
        http_config: HTTPClientConfig | None = None,
        client_factory: ClientFactory | None = None,
    ) -> Service:
        """Construct and fail fast: any account that fails verification aborts startup."""
        system = store.config.system
        if http_config is None:
            http_config = recommend_config(system.http_profile)
        for warning in validate_config(http_config):
            logger.warning("HTTP profile '%s': %s", system.http_profile, warning)

        caches = CacheRegistry(system.cache_ttl_seconds or None)
        registry = await AccountRegistry.from_config(
            store,
            client_factory=client_factory or default_client_factory(http_config),
            caches=caches,
        )
        try:
            dispatcher = build_dispatcher(registry)
        except Exception:
            await registry.aclose()
            raise
        logger.info("%s ready with %d tools", system.server_name, len(dispatcher))
        return cls(store, registry, dispatcher)

    @property
    def name(self) -> str:
        return self.store.config.system.server_name

    async def aclose(self) -> None:
        await self.registry.aclose()

    async def __aenter__(self) -> Service:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
