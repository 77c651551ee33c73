"""Linode REST client, typed reference records, and the reference cache."""

from cloudmcp.linode.api import CatalogueSource, LinodeAPI
from cloudmcp.linode.cache import CacheRegistry, CacheStats, Catalogue, ReferenceCache
from cloudmcp.linode.client import LinodeClient, ListOptions

__all__ = [
    "CacheRegistry",
    "CacheStats",
    "Catalogue",
    "CatalogueSource",
    "LinodeAPI",
    "LinodeClient",
    "ListOptions",
    "ReferenceCache",
]
