"""Fixtures for tool tests: a Service over fake clients for two accounts."""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any
from unittest.mock import MagicMock

import pytest

from cloudmcp.server.service import Service

ToolCaller = Callable[..., Awaitable[tuple[bool, str]]]


@pytest.fixture
async def service(make_store: Any, fake_factory: Any) -> AsyncIterator[Service]:
    store = make_store({"primary": "Production", "development": "Development"}, default="primary")
    svc = await Service.create(store, client_factory=fake_factory)
    yield svc
    await svc.aclose()


@pytest.fixture
def client(service: Service, fake_factory: Any) -> MagicMock:
    """The primary account's client."""
    return fake_factory.client_for("token-primary-0001")


@pytest.fixture
def dev_client(service: Service, fake_factory: Any) -> MagicMock:
    return fake_factory.client_for("token-development-0001")


@pytest.fixture
def call(service: Service) -> ToolCaller:
    """Dispatch a tool and return ``(is_error, text)``."""

    async def _call(name: str, arguments: dict[str, Any] | None = None) -> tuple[bool, str]:
        result = await service.dispatcher.dispatch(name, arguments or {})
        return bool(result.isError), result.content[0].text

    return _call
