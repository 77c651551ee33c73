"""HTTP transport layer: tuned clients and credential injection."""

from cloudmcp.transport.auth import BearerAuth
from cloudmcp.transport.profiles import (
    PROFILE_NAMES,
    HTTPClientConfig,
    build_async_client,
    recommend_config,
    validate_config,
)

__all__ = [
    "PROFILE_NAMES",
    "BearerAuth",
    "HTTPClientConfig",
    "build_async_client",
    "recommend_config",
    "validate_config",
]
