"""AccountRegistry: the tenants, their clients, and the current-account pointer.

One reader/writer lock guards the account map and the pointer together.
Every mutation takes the exclusive side once and, while holding it, verifies
the credential (when one is new), writes the configuration document, and
only then commits the in-memory change.  A failure at any step leaves the
registry and the document as they were.

Usage::

    registry = await AccountRegistry.from_config(store)
    account = await registry.current()
    await registry.switch("staging")
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass

from cloudmcp.core.config import AccountConfig, ConfigStore
from cloudmcp.core.errors import (
    AccountNotFoundError,
    AuthError,
    CannotRemoveDefaultError,
    InvalidArgumentError,
    NameConflictError,
    NoCurrentAccountError,
    UpstreamError,
)
from cloudmcp.core.locks import RWLock
from cloudmcp.linode.api import LinodeAPI
from cloudmcp.linode.cache import CacheRegistry
from cloudmcp.linode.client import LinodeClient
from cloudmcp.linode.models import Profile
from cloudmcp.transport.profiles import HTTPClientConfig
from cloudmcp.utils.logging import secret_registry

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str, str], LinodeAPI]


@dataclass(frozen=True)
class Account:
    """One configured tenant and the client bound to its credential."""

    name: str
    label: str
    client: LinodeAPI


def default_client_factory(http_config: HTTPClientConfig | None = None) -> ClientFactory:
    """Build ``(token, base_url) -> LinodeClient`` using one HTTP profile."""

    def factory(token: str, base_url: str) -> LinodeAPI:
        return LinodeClient.create(token, base_url=base_url, config=http_config)

    return factory


async def verify_credential(client: LinodeAPI) -> Profile:
    """Prove a credential with one ``GET /profile``.

    Raises:
        AuthError: The provider rejected the request with a 4xx status.
        UpstreamError: Any other failure (5xx, transport).
    """
    try:
        return await client.get_profile()
    except AuthError:
        raise
    except UpstreamError as exc:
        if 400 <= exc.status < 500:
            raise AuthError(exc.status, f"invalid token or API URL: {exc.message}") from exc
        raise


class AccountRegistry:
    """Owns every :class:`Account` and the name of the current one."""

    def __init__(
        self,
        store: ConfigStore,
        *,
        client_factory: ClientFactory | None = None,
        caches: CacheRegistry | None = None,
    ) -> None:
        self._store = store
        self._factory = client_factory or default_client_factory()
        self._caches = caches or CacheRegistry(store.config.system.cache_ttl_seconds or None)
        self._lock = RWLock()
        self._accounts: dict[str, Account] = {}
        self._current = ""
        # Clients in use by running handlers, and replaced ones awaiting close.
        self._leases: dict[int, int] = {}
        self._retired: dict[int, LinodeAPI] = {}

    @classmethod
    async def from_config(
        cls,
        store: ConfigStore,
        *,
        client_factory: ClientFactory | None = None,
        caches: CacheRegistry | None = None,
    ) -> AccountRegistry:
        """Build and :meth:`initialize` a registry from *store*'s snapshot."""
        registry = cls(store, client_factory=client_factory, caches=caches)
        await registry.initialize()
        return registry

    @property
    def store(self) -> ConfigStore:
        return self._store

    @property
    def caches(self) -> CacheRegistry:
        return self._caches

    async def initialize(self) -> None:
        """Load every configured account, probing each credential once.

        The configured default account becomes current.  Any verification failure
        closes the clients built so far and propagates.
        """
        config = self._store.config
        built: dict[str, Account] = {}
        async with self._lock.write():
            try:
                for name, acc in config.accounts.items():
                    token = acc.token.get_secret_value()
                    secret_registry.add(token)
                    client = self._factory(token, acc.effective_api_url)
                    built[name] = Account(name=name, label=acc.label, client=client)
                    profile = await verify_credential(client)
                    logger.info("Account '%s' verified (user %s)", name, profile.username)
            except Exception:
                for account in built.values():
                    await account.client.aclose()
                raise

            self._accounts = built
            self._current = config.system.default_account if built else ""
        logger.info(
            "Account registry ready: %d account(s), current '%s'", len(built), self._current
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list(self) -> dict[str, str]:
        """Snapshot of ``name -> label``."""
        async with self._lock.read():
            return {name: acc.label for name, acc in self._accounts.items()}

    async def overview(self) -> tuple[str, dict[str, str]]:
        """The current name and the ``name -> label`` map, read together."""
        async with self._lock.read():
            return self._current, {name: acc.label for name, acc in self._accounts.items()}

    async def get(self, name: str) -> Account:
        async with self._lock.read():
            account = self._accounts.get(name)
        if account is None:
            raise AccountNotFoundError(name)
        return account

    async def current(self) -> Account:
        async with self._lock.read():
            account = self._accounts.get(self._current) if self._current else None
            empty = not self._accounts
        if account is None:
            raise NoCurrentAccountError("registry is empty" if empty else "current account missing")
        return account

    @asynccontextmanager
    async def use_current(self) -> AsyncIterator[Account]:
        """Yield the current account, keeping its client open until the block exits.

        A client replaced by :meth:`update` or dropped by :meth:`remove` while
        leased is closed when its last user leaves.
        """
        async with self._lock.read():
            account = self._accounts.get(self._current) if self._current else None
            empty = not self._accounts
            if account is not None:
                key = id(account.client)
                self._leases[key] = self._leases.get(key, 0) + 1
        if account is None:
            raise NoCurrentAccountError("registry is empty" if empty else "current account missing")
        try:
            yield account
        finally:
            await self._release(account.client)

    async def _release(self, client: LinodeAPI) -> None:
        key = id(client)
        remaining = self._leases.get(key, 0) - 1
        if remaining > 0:
            self._leases[key] = remaining
            return
        self._leases.pop(key, None)
        retired = self._retired.pop(key, None)
        if retired is not None:
            logger.debug("Closing replaced client after its last in-flight call")
            await retired.aclose()

    async def _retire(self, client: LinodeAPI) -> None:
        """Close *client* now, or once the handlers still using it finish."""
        self._caches.drop(client)
        if self._leases.get(id(client)):
            self._retired[id(client)] = client
            return
        await client.aclose()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def switch(self, name: str) -> Account:
        """Point the current account at *name*; purely local, no profile fetch."""
        async with self._lock.write():
            account = self._accounts.get(name)
            if account is None:
                raise AccountNotFoundError(name)
            previous, self._current = self._current, name
        logger.info("Switched current account: '%s' -> '%s'", previous, name)
        return account

    async def add(self, name: str, label: str, token: str, base_url: str = "") -> Account:
        """Verify, persist, and register a new account."""
        name = name.strip()
        if not name:
            raise InvalidArgumentError("name", "account name is required")
        if not token.strip():
            raise InvalidArgumentError("token", "account token is required")

        secret_registry.add(token)
        async with self._lock.write():
            if name in self._accounts or name in self._store.config.accounts:
                raise NameConflictError(name)

            entry = AccountConfig(token=token, label=label, api_url=base_url)
            client = self._factory(token, entry.effective_api_url)
            try:
                await verify_credential(client)
                self._store.save(self._store.config.with_account(name, entry))
            except Exception:
                await client.aclose()
                raise

            account = Account(name=name, label=label, client=client)
            self._accounts[name] = account
            if not self._current:
                self._current = name
        logger.info("Account '%s' added", name)
        return account

    async def remove(self, name: str) -> None:
        """Drop *name* and close its client; the default account is refused."""
        async with self._lock.write():
            account = self._accounts.get(name)
            if account is None and name not in self._store.config.accounts:
                raise AccountNotFoundError(name)
            default = self._store.config.system.default_account
            if name == default:
                raise CannotRemoveDefaultError(name)

            self._store.save(self._store.config.without_account(name))
            self._accounts.pop(name, None)
            if self._current == name:
                self._current = default if default in self._accounts else ""

        if account is not None:
            await self._retire(account.client)
        logger.info("Account '%s' removed", name)

    async def update(
        self,
        name: str,
        *,
        label: str | None = None,
        token: str | None = None,
        base_url: str | None = None,
    ) -> Account:
        """Change an account's fields, replacing its client when the credential changes."""
        async with self._lock.write():
            existing = self._accounts.get(name)
            entry = self._store.config.accounts.get(name)
            if existing is None or entry is None:
                raise AccountNotFoundError(name)

            updated = entry.model_copy(
                update={
                    key: value
                    for key, value in (("label", label), ("api_url", base_url))
                    if value
                }
            )
            if token:
                updated = AccountConfig(token=token, label=updated.label, api_url=updated.api_url)
                secret_registry.add(token)

            new_client: LinodeAPI | None = None
            if token or (base_url and base_url != entry.api_url):
                new_client = self._factory(
                    updated.token.get_secret_value(), updated.effective_api_url
                )
            try:
                if new_client is not None:
                    await verify_credential(new_client)
                self._store.save(self._store.config.with_account(name, updated))
            except Exception:
                if new_client is not None:
                    await new_client.aclose()
                raise

            account = Account(
                name=name,
                label=updated.label,
                client=new_client if new_client is not None else existing.client,
            )
            self._accounts[name] = account

        if new_client is not None:
            await self._retire(existing.client)
        logger.info("Account '%s' updated", name)
        return account

    async def aclose(self) -> None:
        """Close every client; the registry is empty afterwards."""
        async with self._lock.write():
            accounts = list(self._accounts.values())
            self._accounts.clear()
            self._current = ""
            retired = list(self._retired.values())
            self._retired.clear()
            self._leases.clear()
        for account in accounts:
            await account.client.aclose()
        for client in retired:
            await client.aclose()
