"""Configuration document: a TOML file plus environment overrides.

The document looks like::

    [system]
    default_account = "primary"
    log_level = "info"

    [accounts.primary]
    token = "..."
    label = "Production"
    api_url = ""

:func:`load_config` reads it (a missing file yields an empty config) and
:class:`ConfigStore` rewrites it atomically when accounts change at runtime.
"""

from __future__ import annotations

import logging
import os
import sys
import tempfile
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

import tomli_w
from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator, model_validator

from cloudmcp.core.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.linode.com/v4"
DEFAULT_ENV_ACCOUNT = "primary"

# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class AccountConfig(BaseModel):
    """One tenant entry (``[accounts.<name>]``)."""

    token: SecretStr
    label: str = ""
    api_url: str = ""

    @field_validator("token")
    @classmethod
    def _token_not_empty(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            msg = "account has no token configured"
            raise ValueError(msg)
        return value

    @property
    def effective_api_url(self) -> str:
        return self.api_url or DEFAULT_API_URL


class SystemConfig(BaseModel):
    """Process-wide settings (``[system]``)."""

    server_name: str = "Cloud MCP Server"
    default_account: str = ""
    log_level: str = "info"
    log_format: Literal["text", "json"] = "text"
    cache_ttl_seconds: float = Field(default=1800.0, ge=0)
    http_profile: str = "default"
    telemetry_enabled: bool = False


class CloudMCPConfig(BaseModel):
    """The whole configuration document."""

    system: SystemConfig = Field(default_factory=SystemConfig)
    accounts: dict[str, AccountConfig] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_default_account(self) -> CloudMCPConfig:
        for name in self.accounts:
            if not name.strip():
                msg = "account names must not be empty"
                raise ValueError(msg)
        if not self.accounts:
            return self
        if not self.system.default_account:
            if len(self.accounts) > 1:
                msg = "system.default_account is required when several accounts are configured"
                raise ValueError(msg)
            self.system.default_account = next(iter(self.accounts))
        if self.system.default_account not in self.accounts:
            msg = (
                f"default account '{self.system.default_account}' "
                "not found in configured accounts"
            )
            raise ValueError(msg)
        return self

    def secrets(self) -> list[str]:
        """Every raw token in the document, for log redaction."""
        return [acc.token.get_secret_value() for acc in self.accounts.values()]

    def with_account(self, name: str, account: AccountConfig) -> CloudMCPConfig:
        """Return a copy with *name* inserted or replaced."""
        updated = self.model_copy(deep=True)
        updated.accounts[name] = account
        if not updated.system.default_account:
            updated.system.default_account = name
        return updated

    def without_account(self, name: str) -> CloudMCPConfig:
        """Return a copy with *name* removed."""
        updated = self.model_copy(deep=True)
        updated.accounts.pop(name, None)
        return updated

    def to_document(self) -> dict[str, Any]:
        """Serialise to the TOML document shape, tokens in clear."""
        return {
            "system": self.system.model_dump(),
            "accounts": {
                name: {
                    "token": acc.token.get_secret_value(),
                    "label": acc.label,
                    "api_url": acc.api_url,
                }
                for name, acc in self.accounts.items()
            },
        }


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


def default_config_dir(environ: Mapping[str, str] | None = None) -> Path:
    """Return the platform-specific configuration directory."""
    env = os.environ if environ is None else environ
    home = Path(env.get("HOME") or Path.home())
    if sys.platform == "win32":
        return Path(env.get("APPDATA", str(home))) / "CloudMCP"
    if sys.platform == "darwin":
        return home / "Library" / "Application Support" / "CloudMCP"
    xdg = env.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "cloudmcp"
    return home / ".config" / "cloudmcp"


def resolve_config_path(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path:
    """Explicit path, then ``CLOUDMCP_CONFIG``, then the platform default."""
    env = os.environ if environ is None else environ
    if path is not None:
        return Path(path).expanduser()
    if env.get("CLOUDMCP_CONFIG"):
        return Path(env["CLOUDMCP_CONFIG"]).expanduser()
    return default_config_dir(env) / "config.toml"


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

_SYSTEM_ENV_OVERRIDES: dict[str, str] = {
    "CLOUDMCP_DEFAULT_ACCOUNT": "default_account",
    "LOG_LEVEL": "log_level",
    "CLOUDMCP_LOG_LEVEL": "log_level",
    "CLOUDMCP_LOG_FORMAT": "log_format",
    "CLOUDMCP_HTTP_PROFILE": "http_profile",
    "CLOUDMCP_CACHE_TTL": "cache_ttl_seconds",
    "SERVER_NAME": "server_name",
}


def _read_document(path: Path) -> dict[str, Any]:
    if not path.exists():
        logger.info("No configuration file at %s; starting from an empty document", path)
        return {}
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        msg = f"failed to parse TOML config {path}: {exc}"
        raise ConfigError(msg) from exc


def _apply_environment(data: dict[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    system = dict(data.get("system") or {})
    accounts = dict(data.get("accounts") or {})

    for var, key in _SYSTEM_ENV_OVERRIDES.items():
        value = env.get(var)
        if value:
            system[key] = value

    token = env.get("LINODE_TOKEN")
    if token and not accounts:
        name = env.get("LINODE_ACCOUNT_NAME") or DEFAULT_ENV_ACCOUNT
        accounts[name] = {
            "token": token,
            "label": env.get("LINODE_ACCOUNT_LABEL", name),
            "api_url": env.get("LINODE_API_URL", ""),
        }
        system.setdefault("default_account", name)

    return {**data, "system": system, "accounts": accounts}


def load_config(
    path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> ConfigStore:
    """Load the configuration document and apply environment overrides.

    Raises:
        ConfigError: If the document is malformed or fails validation.
    """
    env = os.environ if environ is None else environ
    resolved = resolve_config_path(path, env)
    data = _apply_environment(_read_document(resolved), env)
    try:
        config = CloudMCPConfig.model_validate(data)
    except ValidationError as exc:
        msg = f"invalid configuration in {resolved}: {exc}"
        raise ConfigError(msg) from exc
    return ConfigStore(resolved, config)


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


class ConfigStore:
    """The in-memory configuration snapshot and the file that backs it.

    :meth:`save` writes to a temporary file in the same directory and renames
    it over the target, so readers never observe a half-written document.
    The in-memory snapshot only changes after the rename succeeds.
    """

    def __init__(self, path: Path, config: CloudMCPConfig) -> None:
        self._path = path
        self._config = config

    @property
    def path(self) -> Path:
        return self._path

    @property
    def config(self) -> CloudMCPConfig:
        return self._config

    def save(self, config: CloudMCPConfig) -> None:
        """Persist *config* and make it the current snapshot."""
        directory = self._path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True, mode=0o750)
            fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=".config-", suffix=".toml")
        except OSError as exc:
            msg = f"failed to prepare config directory {directory}: {exc}"
            raise ConfigError(msg) from exc

        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as fh:
                tomli_w.dump(config.to_document(), fh)
                fh.flush()
                os.fsync(fh.fileno())
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self._path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            msg = f"failed to write config {self._path}: {exc}"
            raise ConfigError(msg) from exc

        self._config = config
        logger.info("Configuration saved to %s", self._path)
