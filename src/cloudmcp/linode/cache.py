"""Reference cache: the provider catalogues kept under one shared TTL.

One :class:`ReferenceCache` serves one provider client: accounts may point at
different base URLs, so catalogues are never shared between clients.
:class:`CacheRegistry` hands out the cache that belongs to a client.

Reads use double-checked refresh: look under the shared lock, and only on a
miss take the exclusive lock, look again, and fetch.  Concurrent misses
therefore cost a single upstream call.
"""

from __future__ import annotations

import logging
import time
import weakref
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

from pydantic import BaseModel

from cloudmcp.core.locks import RWLock
from cloudmcp.linode.api import CatalogueSource
from cloudmcp.linode.models import Kernel, LinodeType, Region
from cloudmcp.utils.telemetry import ATTR_CACHE_CATALOGUE, ATTR_CACHE_COUNT, get_tracer

logger = logging.getLogger(__name__)

_tracer = get_tracer(__name__)

DEFAULT_TTL_SECONDS = 30 * 60


class Catalogue(str, Enum):
    """The cached reference catalogues."""

    REGIONS = "regions"
    TYPES = "types"
    KERNELS = "kernels"


_FETCHERS: dict[Catalogue, Callable[[CatalogueSource], Awaitable[list[Any]]]] = {
    Catalogue.REGIONS: lambda client: client.list_regions(),
    Catalogue.TYPES: lambda client: client.list_types(),
    Catalogue.KERNELS: lambda client: client.list_kernels(),
}


class CacheStats(BaseModel):
    """Observability snapshot of a :class:`ReferenceCache`."""

    regions_cached: bool
    types_cached: bool
    kernels_cached: bool
    regions_count: int
    types_count: int
    kernels_count: int
    expiry: datetime | None
    is_expired: bool
    ttl_seconds: float


class ReferenceCache:
    """TTL cache of the three reference catalogues for one client.

    A single expiry governs all three catalogues: refreshing any of them
    restamps it.  ``clock`` is a monotonic seconds source (tests inject one).
    """

    def __init__(
        self,
        ttl_seconds: float | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds or DEFAULT_TTL_SECONDS
        self._clock = clock
        self._lock = RWLock()
        self._slots: dict[Catalogue, list[Any]] = {c: [] for c in Catalogue}
        self._expiry = 0.0

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def _is_expired(self) -> bool:
        return self._clock() >= self._expiry

    def _fresh_copy(self, catalogue: Catalogue) -> list[Any] | None:
        data = self._slots[catalogue]
        if data and not self._is_expired():
            return [record.model_copy(deep=True) for record in data]
        return None

    async def get(self, catalogue: Catalogue, client: CatalogueSource) -> list[Any]:
        """Return a copy of *catalogue*, fetching it from *client* when stale.

        Raises:
            UpstreamError: If the fetch fails; the cache is left unchanged.
        """
        async with self._lock.read():
            cached = self._fresh_copy(catalogue)
        if cached is not None:
            logger.debug("Reference cache hit: %s (%d)", catalogue.value, len(cached))
            return cached

        async with self._lock.write():
            # Another task may have refreshed while we waited.
            cached = self._fresh_copy(catalogue)
            if cached is not None:
                return cached

            with _tracer.start_as_current_span("cache.refresh") as span:
                span.set_attribute(ATTR_CACHE_CATALOGUE, catalogue.value)
                data = await _FETCHERS[catalogue](client)
                span.set_attribute(ATTR_CACHE_COUNT, len(data))

            self._slots[catalogue] = list(data)
            self._expiry = self._clock() + self._ttl
            logger.debug("Reference cache refreshed: %s (%d)", catalogue.value, len(data))
            return [record.model_copy(deep=True) for record in data]

    async def get_regions(self, client: CatalogueSource) -> list[Region]:
        return await self.get(Catalogue.REGIONS, client)

    async def get_types(self, client: CatalogueSource) -> list[LinodeType]:
        return await self.get(Catalogue.TYPES, client)

    async def get_kernels(self, client: CatalogueSource) -> list[Kernel]:
        return await self.get(Catalogue.KERNELS, client)

    async def invalidate(self, catalogue: Catalogue) -> None:
        """Empty one catalogue; the shared expiry is left as is."""
        async with self._lock.write():
            self._slots[catalogue] = []

    async def invalidate_all(self) -> None:
        """Empty every catalogue and reset the expiry so the next read refreshes."""
        async with self._lock.write():
            for catalogue in Catalogue:
                self._slots[catalogue] = []
            self._expiry = 0.0

    async def stats(self) -> CacheStats:
        async with self._lock.read():
            remaining = self._expiry - self._clock()
            expiry = (
                datetime.now(UTC) + timedelta(seconds=remaining) if self._expiry else None
            )
            return CacheStats(
                regions_cached=bool(self._slots[Catalogue.REGIONS]),
                types_cached=bool(self._slots[Catalogue.TYPES]),
                kernels_cached=bool(self._slots[Catalogue.KERNELS]),
                regions_count=len(self._slots[Catalogue.REGIONS]),
                types_count=len(self._slots[Catalogue.TYPES]),
                kernels_count=len(self._slots[Catalogue.KERNELS]),
                expiry=expiry,
                is_expired=remaining <= 0,
                ttl_seconds=self._ttl,
            )


class CacheRegistry:
    """Maps each provider client to its own :class:`ReferenceCache`.

    Entries are weakly keyed, so a client replaced on credential update takes
    its catalogues with it.
    """

    def __init__(
        self,
        ttl_seconds: float | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._caches: weakref.WeakKeyDictionary[Any, ReferenceCache] = weakref.WeakKeyDictionary()

    def for_client(self, client: CatalogueSource) -> ReferenceCache:
        cache = self._caches.get(client)
        if cache is None:
            cache = ReferenceCache(self._ttl, clock=self._clock)
            self._caches[client] = cache
        return cache

    def drop(self, client: CatalogueSource) -> None:
        self._caches.pop(client, None)

    def __len__(self) -> int:
        return len(self._caches)
