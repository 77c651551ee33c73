"""Core layer: configuration, errors and locking."""

from cloudmcp.core.config import AccountConfig, CloudMCPConfig, ConfigStore, SystemConfig, load_config
from cloudmcp.core.errors import (
    AccountNotFoundError,
    AuthError,
    CannotRemoveDefaultError,
    CloudMCPError,
    ConfigError,
    DuplicateToolError,
    FrameworkError,
    InvalidArgumentError,
    NameConflictError,
    NoCurrentAccountError,
    ToolError,
    UnknownToolError,
    UpstreamError,
)
from cloudmcp.core.locks import RWLock

__all__ = [
    "AccountConfig",
    "AccountNotFoundError",
    "AuthError",
    "CannotRemoveDefaultError",
    "CloudMCPConfig",
    "CloudMCPError",
    "ConfigError",
    "ConfigStore",
    "DuplicateToolError",
    "FrameworkError",
    "InvalidArgumentError",
    "NameConflictError",
    "NoCurrentAccountError",
    "RWLock",
    "SystemConfig",
    "ToolError",
    "UnknownToolError",
    "UpstreamError",
    "load_config",
]
