"""Tests for configuration loading and atomic persistence."""

from __future__ import annotations

import stat
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from cloudmcp.core.config import (
    DEFAULT_API_URL,
    AccountConfig,
    CloudMCPConfig,
    ConfigStore,
    SystemConfig,
    default_config_dir,
    load_config,
    resolve_config_path,
)
from cloudmcp.core.errors import ConfigError

TWO_ACCOUNTS = """
[system]
default_account = "primary"
log_level = "debug"

[accounts.primary]
token = "token-primary-0001"
label = "Production"

[accounts.staging]
token = "token-staging-0001"
label = "Staging"
api_url = "https://staging.example.test/v4"
"""


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


class TestLoadConfig:
    def test_missing_file_is_empty(self, config_path: Path) -> None:
        store = load_config(config_path, environ={})
        assert store.path == config_path
        assert store.config.accounts == {}
        assert store.config.system.server_name == "Cloud MCP Server"
        assert store.config.system.cache_ttl_seconds == 1800

    def test_reads_accounts(self, config_path: Path) -> None:
        store = load_config(_write(config_path, TWO_ACCOUNTS), environ={})
        config = store.config
        assert config.system.default_account == "primary"
        assert config.system.log_level == "debug"
        assert set(config.accounts) == {"primary", "staging"}
        assert config.accounts["primary"].effective_api_url == DEFAULT_API_URL
        assert config.accounts["staging"].effective_api_url == "https://staging.example.test/v4"
        assert config.accounts["primary"].token.get_secret_value() == "token-primary-0001"

    def test_token_hidden_in_repr(self, config_path: Path) -> None:
        store = load_config(_write(config_path, TWO_ACCOUNTS), environ={})
        assert "token-primary-0001" not in repr(store.config)

    def test_single_account_becomes_default(self, config_path: Path) -> None:
        _write(config_path, '[accounts.solo]\ntoken = "token-solo-0001"\n')
        assert load_config(config_path, environ={}).config.system.default_account == "solo"

    def test_several_accounts_need_default(self, config_path: Path) -> None:
        _write(
            config_path,
            '[accounts.a]\ntoken = "token-a-0001"\n[accounts.b]\ntoken = "token-b-0001"\n',
        )
        with pytest.raises(ConfigError, match="default_account is required"):
            load_config(config_path, environ={})

    def test_unknown_default_rejected(self, config_path: Path) -> None:
        _write(
            config_path,
            '[system]\ndefault_account = "ghost"\n[accounts.a]\ntoken = "token-a-0001"\n',
        )
        with pytest.raises(ConfigError, match="'ghost' not found"):
            load_config(config_path, environ={})

    def test_empty_token_rejected(self, config_path: Path) -> None:
        _write(config_path, '[accounts.a]\ntoken = "  "\n')
        with pytest.raises(ConfigError, match="no token"):
            load_config(config_path, environ={})

    def test_malformed_toml(self, config_path: Path) -> None:
        _write(config_path, "[system\nbroken")
        with pytest.raises(ConfigError, match="failed to parse TOML"):
            load_config(config_path, environ={})


class TestEnvironmentOverrides:
    def test_linode_token_bootstraps_account(self, config_path: Path) -> None:
        env = {
            "LINODE_TOKEN": "token-env-0001",
            "LINODE_ACCOUNT_LABEL": "From Env",
            "LINODE_API_URL": "https://alt.example.test/v4",
        }
        config = load_config(config_path, environ=env).config
        assert config.system.default_account == "primary"
        account = config.accounts["primary"]
        assert account.label == "From Env"
        assert account.api_url == "https://alt.example.test/v4"

    def test_linode_token_ignored_when_accounts_exist(self, config_path: Path) -> None:
        _write(config_path, TWO_ACCOUNTS)
        config = load_config(config_path, environ={"LINODE_TOKEN": "token-env-0001"}).config
        assert set(config.accounts) == {"primary", "staging"}

    def test_system_overrides(self, config_path: Path) -> None:
        _write(config_path, TWO_ACCOUNTS)
        env = {
            "CLOUDMCP_DEFAULT_ACCOUNT": "staging",
            "CLOUDMCP_LOG_LEVEL": "warning",
            "CLOUDMCP_HTTP_PROFILE": "low-latency",
            "CLOUDMCP_CACHE_TTL": "60",
        }
        system = load_config(config_path, environ=env).config.system
        assert system.default_account == "staging"
        assert system.log_level == "warning"
        assert system.http_profile == "low-latency"
        assert system.cache_ttl_seconds == 60.0


class TestPaths:
    def test_explicit_path_wins(self, tmp_path: Path) -> None:
        env = {"CLOUDMCP_CONFIG": str(tmp_path / "env.toml")}
        assert resolve_config_path(tmp_path / "cli.toml", env) == tmp_path / "cli.toml"

    def test_env_path(self, tmp_path: Path) -> None:
        env = {"CLOUDMCP_CONFIG": str(tmp_path / "env.toml")}
        assert resolve_config_path(None, env) == tmp_path / "env.toml"

    @pytest.mark.skipif(sys.platform != "linux", reason="XDG layout")
    def test_xdg_default(self, tmp_path: Path) -> None:
        env = {"HOME": str(tmp_path), "XDG_CONFIG_HOME": str(tmp_path / "xdg")}
        assert default_config_dir(env) == tmp_path / "xdg" / "cloudmcp"
        assert resolve_config_path(None, env) == tmp_path / "xdg" / "cloudmcp" / "config.toml"

    @pytest.mark.skipif(sys.platform != "linux", reason="XDG layout")
    def test_home_default(self, tmp_path: Path) -> None:
        env = {"HOME": str(tmp_path)}
        assert default_config_dir(env) == tmp_path / ".config" / "cloudmcp"


class TestSnapshots:
    def test_with_account_sets_default_when_empty(self) -> None:
        config = CloudMCPConfig().with_account("dev", AccountConfig(token="token-dev-0001"))
        assert config.system.default_account == "dev"
        assert "dev" in config.accounts

    def test_with_account_does_not_mutate(self) -> None:
        original = CloudMCPConfig()
        original.with_account("dev", AccountConfig(token="token-dev-0001"))
        assert original.accounts == {}

    def test_without_account(self) -> None:
        config = CloudMCPConfig(
            system=SystemConfig(default_account="a"),
            accounts={
                "a": AccountConfig(token="token-a-0001"),
                "b": AccountConfig(token="token-b-0001"),
            },
        )
        assert set(config.without_account("b").accounts) == {"a"}
        assert set(config.accounts) == {"a", "b"}

    def test_secrets(self) -> None:
        config = CloudMCPConfig(accounts={"a": AccountConfig(token="token-a-0001")})
        assert config.secrets() == ["token-a-0001"]


class TestConfigStore:
    def test_save_round_trips(self, config_path: Path) -> None:
        store = ConfigStore(config_path, CloudMCPConfig())
        updated = store.config.with_account(
            "dev", AccountConfig(token="token-dev-0001", label="Development")
        )
        store.save(updated)

        assert store.config is updated
        reloaded = load_config(config_path, environ={}).config
        assert reloaded.accounts["dev"].label == "Development"
        assert reloaded.accounts["dev"].token.get_secret_value() == "token-dev-0001"
        assert reloaded.system.default_account == "dev"

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    def test_file_mode_is_private(self, config_path: Path) -> None:
        store = ConfigStore(config_path, CloudMCPConfig())
        store.save(store.config.with_account("dev", AccountConfig(token="token-dev-0001")))
        assert stat.S_IMODE(config_path.stat().st_mode) == 0o600

    def test_no_temp_files_left(self, config_path: Path) -> None:
        store = ConfigStore(config_path, CloudMCPConfig())
        store.save(store.config.with_account("dev", AccountConfig(token="token-dev-0001")))
        assert [p.name for p in config_path.parent.iterdir()] == ["config.toml"]

    def test_unwritable_directory(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        store = ConfigStore(blocker / "config.toml", CloudMCPConfig())

        with pytest.raises(ConfigError, match="failed to prepare config directory"):
            store.save(store.config.with_account("dev", AccountConfig(token="token-dev-0001")))
        assert store.config.accounts == {}

    def test_failed_rename_keeps_snapshot_and_file(self, config_path: Path) -> None:
        store = ConfigStore(config_path, CloudMCPConfig())
        first = store.config.with_account("dev", AccountConfig(token="token-dev-0001"))
        store.save(first)
        before = config_path.read_bytes()

        second = first.with_account("ops", AccountConfig(token="token-ops-0001"))
        with patch("cloudmcp.core.config.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(ConfigError, match="disk full"):
                store.save(second)

        assert store.config is first
        assert config_path.read_bytes() == before
        assert [p.name for p in config_path.parent.iterdir()] == ["config.toml"]
