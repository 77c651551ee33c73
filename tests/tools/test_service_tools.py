"""Tests for the storage, networking, database, and support tools."""

from __future__ import annotations

import base64
from typing import Any
from unittest.mock import AsyncMock, MagicMock

from cloudmcp.linode.client import ListOptions
from cloudmcp.utils.logging import REDACTED

KEY = {
    "id": 11,
    "label": "backup-writer",
    "access_key": "AKIAEXAMPLE",
    "secret_key": "s3cr3t-value-xyz",
    "limited": True,
    "bucket_access": [{"region": "us-east", "bucket_name": "backups", "permissions": "read_write"}],
}


class TestObjectStorageKeys:
    async def test_list_masks_secret(self, call: Any, client: MagicMock) -> None:
        client.list_object_storage_keys = AsyncMock(return_value=[KEY])

        _, text = await call("linode_objectstorage_keys_list")

        assert f"  Secret Key: {REDACTED}" in text
        assert "s3cr3t-value-xyz" not in text
        assert "ID: 11 | backup-writer (limited)" in text
        assert "    - us-east/backups: read_write" in text

    async def test_get_shows_secret(self, call: Any, client: MagicMock) -> None:
        client.get_object_storage_key = AsyncMock(return_value=KEY)

        _, text = await call("linode_objectstorage_key_get", {"key_id": 11})

        assert text.startswith("Object Storage Key Details:")
        assert "Secret Key: s3cr3t-value-xyz" in text

    async def test_bucket_acl_choices(self, call: Any) -> None:
        is_error, text = await call("linode_objectstorage_bucket_create", {"label": "b", "acl": "open"})
        assert is_error
        assert text.startswith("[linode/objectstorage_bucket_create] must be one of private")


class TestLongview:
    async def test_list_masks_api_key(self, call: Any, client: MagicMock) -> None:
        client.list_longview_clients = AsyncMock(
            return_value=[{"id": 3, "label": "web", "api_key": "LV-KEY-123456"}]
        )
        _, text = await call("linode_longview_clients_list")
        assert f"API Key: {REDACTED}" in text
        assert "LV-KEY-123456" not in text

    async def test_get_shows_api_key(self, call: Any, client: MagicMock) -> None:
        client.get_longview_client = AsyncMock(
            return_value={"id": 3, "label": "web", "api_key": "LV-KEY-123456", "apps": {"nginx": True, "mysql": False}}
        )
        _, text = await call("linode_longview_client_get", {"client_id": 3})
        assert "API Key: LV-KEY-123456" in text
        assert "Apps: nginx" in text


class TestLKE:
    async def test_kubeconfig_decoded(self, call: Any, client: MagicMock) -> None:
        encoded = base64.b64encode(b"apiVersion: v1\nkind: Config\n").decode()
        client.get_lke_kubeconfig = AsyncMock(return_value={"kubeconfig": encoded})

        is_error, text = await call("linode_lke_kubeconfig", {"cluster_id": 8})

        assert not is_error
        assert text == "Kubeconfig for LKE cluster 8:\n\napiVersion: v1\nkind: Config\n"

    async def test_kubeconfig_invalid_base64(self, call: Any, client: MagicMock) -> None:
        client.get_lke_kubeconfig = AsyncMock(return_value={"kubeconfig": "not base64!!"})
        is_error, text = await call("linode_lke_kubeconfig", {"cluster_id": 8})
        assert is_error
        assert text == "[linode/lke_kubeconfig] get kubeconfig: kubeconfig is not valid base64 (HTTP 200)"

    async def test_cluster_get_with_pools(self, call: Any, client: MagicMock) -> None:
        client.get_lke_cluster = AsyncMock(
            return_value={"id": 8, "label": "prod", "k8s_version": "1.31", "control_plane": {"high_availability": True}}
        )
        client.list_lke_node_pools = AsyncMock(
            return_value=[
                {
                    "id": 1,
                    "count": 3,
                    "type": "g6-standard-2",
                    "nodes": [{"status": "ready"}, {"status": "ready"}, {"status": "not_ready"}],
                    "autoscaler": {"enabled": True, "min": 3, "max": 6},
                }
            ]
        )
        _, text = await call("linode_lke_cluster_get", {"cluster_id": 8})
        assert "Control Plane: high availability" in text
        assert "- Pool 1: 3 x g6-standard-2 (2/3 ready), autoscaler enabled (3-6 nodes)" in text


class TestDatabases:
    async def test_engine_specific_paths(self, call: Any, client: MagicMock) -> None:
        client.list_engine_databases = AsyncMock(return_value=[{"id": 1, "label": "pg", "engine": "postgresql"}])

        _, text = await call("linode_postgres_databases_list")

        client.list_engine_databases.assert_awaited_once_with("postgresql")
        assert text.startswith("Found 1 PostgreSQL databases:")

    async def test_credentials(self, call: Any, client: MagicMock) -> None:
        client.get_engine_database_credentials = AsyncMock(
            return_value={"username": "linroot", "password": "db-pass"}
        )
        _, text = await call("linode_mysql_database_credentials", {"database_id": 4})
        client.get_engine_database_credentials.assert_awaited_once_with("mysql", 4)
        assert text == "MySQL database 4 credentials:\nUsername: linroot\nPassword: db-pass"


class TestFirewalls:
    async def test_create_defaults_to_accept(self, call: Any, client: MagicMock) -> None:
        client.create_firewall = AsyncMock(return_value={"id": 20, "label": "edge", "status": "enabled"})

        _, text = await call("linode_firewall_create", {"label": "edge"})

        client.create_firewall.assert_awaited_once_with(
            {"label": "edge", "rules": {"inbound_policy": "ACCEPT", "outbound_policy": "ACCEPT"}}
        )
        assert text == "Firewall created successfully:\nID: 20\nLabel: edge\nStatus: enabled"


class TestStackScripts:
    async def test_defaults_to_own_scripts(self, call: Any, client: MagicMock) -> None:
        client.list_stackscripts = AsyncMock(return_value=[])
        _, text = await call("linode_stackscripts_list")
        client.list_stackscripts.assert_awaited_once_with(ListOptions(filter={"mine": True}))
        assert text == "No StackScripts found."

    async def test_include_public(self, call: Any, client: MagicMock) -> None:
        client.list_stackscripts = AsyncMock(return_value=[])
        await call("linode_stackscripts_list", {"include_public": True})
        client.list_stackscripts.assert_awaited_once_with(None)


class TestNetworking:
    async def test_ip_get_normalises_address(self, call: Any, client: MagicMock) -> None:
        client.get_ip = AsyncMock(return_value={"address": "2001:db8::1", "type": "ipv6", "public": True})

        _, text = await call("linode_ip_get", {"address": " 2001:DB8:0::1 "})

        client.get_ip.assert_awaited_once_with("2001:db8::1")
        assert "Linode ID: unassigned" in text

    async def test_ip_get_rejects_garbage(self, call: Any, client: MagicMock) -> None:
        client.get_ip = AsyncMock()
        is_error, text = await call("linode_ip_get", {"address": "300.1.1.1"})
        assert is_error
        assert text == "[linode/ip_get] invalid IP address: address"


class TestSupportAndVolumes:
    async def test_ticket_reply(self, call: Any, client: MagicMock) -> None:
        client.reply_support_ticket = AsyncMock(return_value={"id": 77, "created": "2024-06-01T08:00:00"})

        _, text = await call("linode_support_ticket_reply", {"ticket_id": 5, "description": "Any update?"})

        client.reply_support_ticket.assert_awaited_once_with(5, "Any update?")
        assert text == "Reply added to support ticket 5:\nReply ID: 77\nCreated: 2024-06-01 08:00:00"

    async def test_volume_attach(self, call: Any, client: MagicMock) -> None:
        client.attach_volume = AsyncMock(return_value={"id": 9, "label": "data"})

        _, text = await call("linode_volume_attach", {"volume_id": 9, "linode_id": 101})

        client.attach_volume.assert_awaited_once_with(9, {"linode_id": 101})
        assert text == "Volume 9 (data) attached to Linode 101 successfully"

    async def test_volume_size_minimum(self, call: Any) -> None:
        is_error, text = await call("linode_volume_create", {"label": "tiny", "size": 5})
        assert is_error
        assert text == "[linode/volume_create] must be at least 10: size"


class TestDomains:
    async def test_record_create(self, call: Any, client: MagicMock) -> None:
        client.create_domain_record = AsyncMock(
            return_value={"id": 500, "type": "A", "name": "www", "target": "192.0.2.10"}
        )

        _, text = await call(
            "linode_domain_record_create",
            {"domain_id": 3, "type": "A", "name": "www", "target": "192.0.2.10", "ttl_sec": 300},
        )

        client.create_domain_record.assert_awaited_once_with(
            3, {"type": "A", "name": "www", "target": "192.0.2.10", "ttl_sec": 300}
        )
        assert text == "Domain record created successfully:\nID: 500\nType: A\nName: www\nTarget: 192.0.2.10"

    async def test_record_type_checked(self, call: Any, client: MagicMock) -> None:
        client.create_domain_record = AsyncMock()
        is_error, text = await call(
            "linode_domain_record_create", {"domain_id": 3, "type": "BOGUS", "target": "x"}
        )
        assert is_error
        assert text.endswith(": type")
        client.create_domain_record.assert_not_awaited()

    async def test_list_apex_name(self, call: Any, client: MagicMock) -> None:
        client.list_domain_records = AsyncMock(
            return_value=[{"id": 1, "type": "MX", "name": "", "target": "mail.example.com"}]
        )
        _, text = await call("linode_domain_records_list", {"domain_id": 3})
        assert "ID: 1 | MX @" in text
        assert "TTL: default" in text


class TestNodeBalancers:
    async def test_get_transfer(self, call: Any, client: MagicMock) -> None:
        client.get_nodebalancer = AsyncMock(
            return_value={"id": 12, "label": "lb", "ipv4": "192.0.2.50", "transfer": {"in": 1024, "out": 0.5}}
        )

        _, text = await call("linode_nodebalancer_get", {"nodebalancer_id": 12})

        assert text.startswith("NodeBalancer Details:\nID: 12\nLabel: lb")
        assert "Transfer In: 1.0 GB" in text
        assert "Transfer Out: 512.0 KB" in text
        assert "IPv6: none" in text
