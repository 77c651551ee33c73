"""CLI fixtures: isolate the commands from the developer's environment."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

_ENV_VARS = (
    "CLOUDMCP_CONFIG",
    "CLOUDMCP_DEFAULT_ACCOUNT",
    "CLOUDMCP_LOG_LEVEL",
    "CLOUDMCP_LOG_FORMAT",
    "CLOUDMCP_HTTP_PROFILE",
    "CLOUDMCP_CACHE_TTL",
    "LOG_LEVEL",
    "SERVER_NAME",
    "LINODE_TOKEN",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


@pytest.fixture
def no_logging_setup() -> Iterator[MagicMock]:
    """Keep ``serve`` from rewiring the ``cloudmcp`` logger during tests."""
    with patch("cloudmcp.utils.logging.setup_logging") as mock_setup:
        yield mock_setup
