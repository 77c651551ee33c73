"""A respx-mocked provider API that answers per bearer token."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Iterator
from typing import Any

import httpx
import pytest
import respx

from cloudmcp.server.service import Service

API_URL = "https://api.linode.test/v4"


def _page(items: list[dict[str, Any]]) -> dict[str, Any]:
    return {"data": items, "page": 1, "pages": 1, "results": len(items)}


def _instance(instance_id: int, label: str) -> dict[str, Any]:
    return {
        "id": instance_id,
        "label": label,
        "status": "running",
        "region": "us-east",
        "type": "g6-nanode-1",
        "ipv4": [f"192.0.2.{instance_id}"],
    }


class FakeLinodeAPI:
    """Fixture data keyed by token, plus the routes that serve it."""

    def __init__(self, router: respx.MockRouter) -> None:
        self.instances: dict[str, list[dict[str, Any]]] = {
            "token-primary-0001": [_instance(10, "prod-web-01")],
            "token-development-0001": [_instance(20, "dev-test-01")],
            "token-staging-0001": [_instance(30, "stage-api-01")],
        }
        self.seen_tokens: list[str] = []
        self.router = router

        self.profile = router.get("/profile").mock(side_effect=self._profile)
        self.instances_route = router.get("/linode/instances").mock(side_effect=self._instances)
        self.regions = router.get("/regions").mock(
            return_value=httpx.Response(
                200, json=_page([{"id": "us-east", "label": "Newark, NJ", "country": "us", "status": "ok"}])
            )
        )
        self.types = router.get("/linode/types").mock(
            return_value=httpx.Response(
                200, json=_page([{"id": "g6-nanode-1", "label": "Nanode 1GB", "class": "nanode"}])
            )
        )
        self.kernels = router.get("/linode/kernels").mock(
            return_value=httpx.Response(200, json=_page([]))
        )
        self.images = router.get("/images").mock(
            return_value=httpx.Response(
                200,
                json=_page(
                    [
                        {
                            "id": "linode/ubuntu24.04",
                            "label": "Ubuntu 24.04 LTS",
                            "type": "manual",
                            "status": "available",
                            "size": 2500,
                            "is_public": True,
                            "regions": [{"region": "us-east", "status": "available"}],
                        }
                    ]
                ),
            )
        )

    @staticmethod
    def _token(request: httpx.Request) -> str:
        return request.headers.get("Authorization", "").removeprefix("Bearer ")

    def _profile(self, request: httpx.Request) -> httpx.Response:
        token = self._token(request)
        self.seen_tokens.append(token)
        if token not in self.instances:
            return httpx.Response(401, json={"errors": [{"reason": "Invalid Token"}]})
        name = token.split("-")[1]
        return httpx.Response(200, json={"username": name, "email": f"{name}@example.com", "uid": 1})

    def _instances(self, request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_page(self.instances.get(self._token(request), [])))


@pytest.fixture
def linode_api() -> Iterator[FakeLinodeAPI]:
    with respx.mock(base_url=API_URL, assert_all_called=False) as router:
        yield FakeLinodeAPI(router)


@pytest.fixture
async def start_service(make_store: Any, linode_api: FakeLinodeAPI) -> AsyncIterator[Callable[..., Any]]:
    """Start a :class:`Service` with real clients against the mocked API."""
    started: list[Service] = []

    async def _start(accounts: dict[str, str], default: str = "") -> Service:
        service = await Service.create(make_store(accounts, default=default))
        started.append(service)
        return service

    yield _start
    for service in started:
        await service.aclose()


@pytest.fixture
def tool_text() -> Callable[..., Any]:
    async def _call(service: Service, name: str, arguments: dict[str, Any] | None = None) -> tuple[bool, str]:
        result = await service.dispatcher.dispatch(name, arguments or {})
        return bool(result.isError), result.content[0].text

    return _call

