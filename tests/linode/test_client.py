"""Tests for LinodeClient against a respx-mocked API."""

from __future__ import annotations

import json
from collections.abc import AsyncIterator, Iterator

import httpx
import pytest
import respx

from cloudmcp.core.errors import UpstreamError
from cloudmcp.linode.client import LinodeClient, ListOptions
from cloudmcp.linode.models import LinodeType, Profile

API_URL = "https://api.linode.test/v4"
TOKEN = "token-client-0001"


def _page(items: list[dict], page: int = 1, pages: int = 1) -> dict:
    return {"data": items, "page": page, "pages": pages, "results": len(items)}


@pytest.fixture
def api() -> Iterator[respx.MockRouter]:
    with respx.mock(base_url=API_URL, assert_all_called=False) as mock:
        yield mock


@pytest.fixture
async def client(api: respx.MockRouter) -> AsyncIterator[LinodeClient]:
    linode = LinodeClient.create(TOKEN, base_url=API_URL)
    yield linode
    await linode.aclose()


class TestRequests:
    async def test_get_profile(self, api: respx.MockRouter, client: LinodeClient) -> None:
        route = api.get("/profile").mock(
            return_value=httpx.Response(200, json={"username": "alice", "email": "a@example.com", "uid": 9})
        )
        profile = await client.get_profile()

        assert isinstance(profile, Profile)
        assert profile.username == "alice"
        assert route.calls.last.request.headers["Authorization"] == f"Bearer {TOKEN}"
        assert route.calls.last.request.headers["User-Agent"].startswith("CloudMCP/")

    async def test_instance_action_posts(self, api: respx.MockRouter, client: LinodeClient) -> None:
        route = api.post("/linode/instances/42/reboot").mock(return_value=httpx.Response(200, json={}))
        await client.instance_action(42, "reboot", config_id=7)
        assert json.loads(route.calls.last.request.content) == {"config_id": 7}

    async def test_delete_with_empty_body(self, api: respx.MockRouter, client: LinodeClient) -> None:
        route = api.delete("/volumes/5").mock(return_value=httpx.Response(200))
        assert await client.delete_volume(5) is None
        assert route.called

    async def test_engine_paths(self, api: respx.MockRouter, client: LinodeClient) -> None:
        route = api.get("/databases/postgresql/instances/3/credentials").mock(
            return_value=httpx.Response(200, json={"username": "linroot", "password": "pw"})
        )
        creds = await client.get_engine_database_credentials("postgresql", 3)
        assert creds["username"] == "linroot"
        assert route.called

    async def test_base_url_exposed(self, client: LinodeClient) -> None:
        assert client.base_url == API_URL
        assert TOKEN not in repr(client)


class TestPagination:
    async def test_walks_every_page(self, api: respx.MockRouter, client: LinodeClient) -> None:
        def pages(request: httpx.Request) -> httpx.Response:
            page = int(request.url.params["page"])
            return httpx.Response(200, json=_page([{"id": page}], page=page, pages=3))

        route = api.get("/linode/instances").mock(side_effect=pages)
        instances = await client.list_instances()

        assert [i["id"] for i in instances] == [1, 2, 3]
        assert route.call_count == 3
        assert route.calls.last.request.url.params["page_size"] == "500"

    async def test_pinned_page(self, api: respx.MockRouter, client: LinodeClient) -> None:
        route = api.get("/volumes").mock(
            return_value=httpx.Response(200, json=_page([{"id": 1}], page=2, pages=5))
        )
        volumes = await client.list_volumes(ListOptions(page=2, page_size=25))

        assert len(volumes) == 1
        assert route.call_count == 1
        params = route.calls.last.request.url.params
        assert (params["page"], params["page_size"]) == ("2", "25")

    async def test_filter_header(self, api: respx.MockRouter, client: LinodeClient) -> None:
        route = api.get("/linode/stackscripts").mock(return_value=httpx.Response(200, json=_page([])))
        await client.list_stackscripts(ListOptions(filter={"mine": True}))
        assert route.calls.last.request.headers["X-Filter"] == '{"mine":true}'

    async def test_reference_models(self, api: respx.MockRouter, client: LinodeClient) -> None:
        api.get("/linode/types").mock(
            return_value=httpx.Response(
                200,
                json=_page([{"id": "g6-nanode-1", "label": "Nanode 1GB", "class": "nanode", "memory": 1024}]),
            )
        )
        types = await client.list_types()
        assert isinstance(types[0], LinodeType)
        assert types[0].type_class == "nanode"


class TestErrors:
    async def test_provider_error_reasons(self, api: respx.MockRouter, client: LinodeClient) -> None:
        api.get("/linode/instances/7").mock(
            return_value=httpx.Response(404, json={"errors": [{"reason": "Not found"}]})
        )
        with pytest.raises(UpstreamError) as exc_info:
            await client.get_instance(7)

        err = exc_info.value
        assert err.status == 404
        assert err.message == "Not found"
        assert str(err) == "get instance 7: Not found (HTTP 404)"
        assert TOKEN not in str(err)

    async def test_field_errors_joined(self, api: respx.MockRouter, client: LinodeClient) -> None:
        api.post("/volumes").mock(
            return_value=httpx.Response(
                400,
                json={"errors": [{"reason": "too small", "field": "size"}, {"reason": "bad region", "field": "region"}]},
            )
        )
        with pytest.raises(UpstreamError, match=r"too small \(size\); bad region \(region\)"):
            await client.create_volume({"size": 1})

    async def test_non_json_error_uses_reason_phrase(self, api: respx.MockRouter, client: LinodeClient) -> None:
        api.get("/regions").mock(return_value=httpx.Response(502, text="<html>bad gateway</html>"))
        with pytest.raises(UpstreamError) as exc_info:
            await client.list_regions()
        assert exc_info.value.status == 502
        assert exc_info.value.message == "Bad Gateway"

    async def test_transport_failure(self, api: respx.MockRouter, client: LinodeClient) -> None:
        api.get("/profile").mock(side_effect=httpx.ConnectError("connection refused"))
        with pytest.raises(UpstreamError) as exc_info:
            await client.get_profile()
        assert exc_info.value.status == 0
        assert "ConnectError" in exc_info.value.message

    async def test_timeout(self, api: respx.MockRouter, client: LinodeClient) -> None:
        api.get("/profile").mock(side_effect=httpx.ReadTimeout("slow"))
        with pytest.raises(UpstreamError, match="timed out"):
            await client.get_profile()

    async def test_invalid_json(self, api: respx.MockRouter, client: LinodeClient) -> None:
        api.get("/account").mock(return_value=httpx.Response(200, text="{not json"))
        with pytest.raises(UpstreamError, match="not valid JSON"):
            await client.get_account()


class TestObjectStorage:
    async def test_presigned_call_omits_token(self, api: respx.MockRouter, client: LinodeClient) -> None:
        url = "https://backups.us-east-1.objects.test/a.txt?X-Amz-Signature=abc"
        route = api.put(url).mock(return_value=httpx.Response(200))

        await client.send_presigned("PUT", url, content=b"hello", content_type="text/plain")

        request = route.calls.last.request
        assert "Authorization" not in request.headers
        assert request.headers["Content-Type"] == "text/plain"
        assert request.content == b"hello"

    async def test_presigned_failure_raises(self, api: respx.MockRouter, client: LinodeClient) -> None:
        url = "https://backups.us-east-1.objects.test/a.txt"
        api.delete(url).mock(return_value=httpx.Response(403, text="<Error>AccessDenied</Error>"))
        with pytest.raises(UpstreamError) as exc:
            await client.send_presigned("DELETE", url)
        assert exc.value.status == 403

    async def test_object_list_page(self, api: respx.MockRouter, client: LinodeClient) -> None:
        route = api.get("/object-storage/buckets/us-east-1/backups/object-list").mock(
            return_value=httpx.Response(200, json={"data": [{"name": "a.txt"}], "is_truncated": False})
        )

        page = await client.list_objects("us-east-1", "backups", {"prefix": "a"})

        assert page["data"] == [{"name": "a.txt"}]
        assert route.calls.last.request.url.params["prefix"] == "a"
        assert "page" not in route.calls.last.request.url.params

    async def test_bucket_access_put(self, api: respx.MockRouter, client: LinodeClient) -> None:
        route = api.put("/object-storage/buckets/us-east-1/backups/access").mock(
            return_value=httpx.Response(200, json={})
        )
        assert await client.update_bucket_access("us-east-1", "backups", {"acl": "private"}) is None
        assert json.loads(route.calls.last.request.content) == {"acl": "private"}


class TestMutationPaths:
    async def test_assign_ips(self, api: respx.MockRouter, client: LinodeClient) -> None:
        route = api.post("/networking/ips/assign").mock(return_value=httpx.Response(200, json={}))
        await client.assign_ips("us-east", [{"address": "192.0.2.9", "linode_id": 101}])
        assert json.loads(route.calls.last.request.content) == {
            "region": "us-east",
            "assignments": [{"address": "192.0.2.9", "linode_id": 101}],
        }

    async def test_nodebalancer_config_update(self, api: respx.MockRouter, client: LinodeClient) -> None:
        route = api.put("/nodebalancers/12/configs/40").mock(
            return_value=httpx.Response(200, json={"id": 40, "port": 80})
        )
        config = await client.update_nodebalancer_config(12, 40, {"port": 80})
        assert config["id"] == 40
        assert route.called

    async def test_database_credentials_reset(self, api: respx.MockRouter, client: LinodeClient) -> None:
        route = api.post("/databases/mysql/instances/4/credentials/reset").mock(
            return_value=httpx.Response(200, json={})
        )
        await client.reset_engine_database_credentials("mysql", 4)
        assert route.called

    async def test_account_transfer(self, api: respx.MockRouter, client: LinodeClient) -> None:
        api.get("/account/transfer").mock(return_value=httpx.Response(200, json={"quota": 1000, "used": 3}))
        transfer = await client.get_account_transfer()
        assert transfer["used"] == 3
