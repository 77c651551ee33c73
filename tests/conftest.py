"""Shared fixtures: configuration documents on disk and fake provider clients."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from cloudmcp.core.config import AccountConfig, CloudMCPConfig, ConfigStore, SystemConfig
from cloudmcp.core.errors import UpstreamError
from cloudmcp.linode.models import Profile

API_URL = "https://api.linode.test/v4"


class FakeClientFactory:
    """Stands in for ``default_client_factory``.

    Every call builds a ``MagicMock`` client whose ``get_profile`` succeeds,
    unless the token is in :attr:`rejected` (401) or :attr:`broken` (503).
    """

    def __init__(self) -> None:
        self.rejected: set[str] = set()
        self.broken: set[str] = set()
        self.built: list[tuple[str, str, MagicMock]] = []

    def __call__(self, token: str, base_url: str) -> MagicMock:
        client = MagicMock(name=f"client-{len(self.built)}")
        if token in self.rejected:
            client.get_profile = AsyncMock(
                side_effect=UpstreamError(401, "Invalid Token", operation="get profile")
            )
        elif token in self.broken:
            client.get_profile = AsyncMock(
                side_effect=UpstreamError(503, "Service Unavailable", operation="get profile")
            )
        else:
            client.get_profile = AsyncMock(
                return_value=Profile(username=f"user-{len(self.built)}", email="ops@example.com", uid=7)
            )
        client.aclose = AsyncMock()
        self.built.append((token, base_url, client))
        return client

    def client_for(self, token: str) -> MagicMock:
        """The most recent client built for *token*."""
        return [client for built_token, _, client in self.built if built_token == token][-1]


def _token_for(name: str) -> str:
    return f"token-{name}-0001"


@pytest.fixture
def fake_factory() -> FakeClientFactory:
    return FakeClientFactory()


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "cloudmcp" / "config.toml"


@pytest.fixture
def make_store(config_path: Path) -> Any:
    """Write a configuration document and return its :class:`ConfigStore`.

    ``make_store({"primary": "Production"}, default="primary")`` gives each
    account the token ``token-<name>-0001`` and the test API URL.
    """

    def _make(
        accounts: dict[str, str] | None = None,
        default: str = "",
        **system: Any,
    ) -> ConfigStore:
        config = CloudMCPConfig(
            system=SystemConfig(default_account=default, **system),
            accounts={
                name: AccountConfig(token=_token_for(name), label=label, api_url=API_URL)
                for name, label in (accounts or {}).items()
            },
        )
        store = ConfigStore(config_path, CloudMCPConfig())
        store.save(config)
        return store

    return _make
