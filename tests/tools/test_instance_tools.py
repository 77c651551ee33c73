"""Tests for the instance tools."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

from cloudmcp.core.errors import UpstreamError
from cloudmcp.linode.models import LinodeType
from cloudmcp.utils.logging import REDACTED, redact

INSTANCE = {
    "id": 101,
    "label": "prod-web-01",
    "status": "running",
    "region": "us-east",
    "type": "g6-nanode-1",
    "image": "linode/ubuntu24.04",
    "ipv4": ["192.0.2.10"],
    "ipv6": "2001:db8::10/128",
    "created": "2024-03-01T10:00:00",
    "updated": "2024-03-02T11:30:00",
    "specs": {"vcpus": 1, "memory": 1024, "disk": 25600, "transfer": 1000},
    "backups": {"enabled": True},
    "watchdog_enabled": False,
    "tags": ["web", "prod"],
}


class TestInstancesList:
    async def test_annotates_type_labels(self, call: Any, client: MagicMock) -> None:
        client.list_instances = AsyncMock(return_value=[INSTANCE])
        client.list_types = AsyncMock(return_value=[LinodeType(id="g6-nanode-1", label="Nanode 1GB")])

        is_error, text = await call("linode_instances_list")

        assert not is_error
        assert text.startswith("Found 1 Linode instances:")
        assert "ID: 101 | prod-web-01" in text
        assert "Type: g6-nanode-1 (Nanode 1GB)" in text
        assert "IPv4: 192.0.2.10" in text

    async def test_type_labels_are_best_effort(self, call: Any, client: MagicMock) -> None:
        client.list_instances = AsyncMock(return_value=[INSTANCE])
        client.list_types = AsyncMock(side_effect=UpstreamError(503, "Service Unavailable"))

        is_error, text = await call("linode_instances_list")

        assert not is_error
        assert "Type: g6-nanode-1" in text
        assert "Nanode" not in text

    async def test_empty(self, call: Any, client: MagicMock) -> None:
        client.list_instances = AsyncMock(return_value=[])
        client.list_types = AsyncMock(return_value=[])

        _, text = await call("linode_instances_list")

        assert text == "No Linode instances found."
        client.list_types.assert_not_awaited()


class TestInstanceGet:
    async def test_details(self, call: Any, client: MagicMock) -> None:
        client.get_instance = AsyncMock(return_value=INSTANCE)

        _, text = await call("linode_instance_get", {"instance_id": 101})

        client.get_instance.assert_awaited_once_with(101)
        assert text.startswith("Instance Details:\nID: 101\nLabel: prod-web-01")
        assert "Created: 2024-03-01 10:00:00" in text
        assert "Backups: Enabled" in text
        assert "Watchdog: Disabled" in text
        assert "- Memory: 1.0 GB" in text
        assert "- Disk: 25.0 GB" in text
        assert text.endswith("Tags: web, prod")

    async def test_invalid_id(self, call: Any, client: MagicMock) -> None:
        client.get_instance = AsyncMock()
        is_error, text = await call("linode_instance_get", {"instance_id": 0})
        assert is_error
        assert text == "[linode/instance_get] must be at least 1: instance_id"
        client.get_instance.assert_not_awaited()

    async def test_not_found(self, call: Any, client: MagicMock) -> None:
        client.get_instance = AsyncMock(side_effect=UpstreamError(404, "Not found", operation="get instance 9"))
        is_error, text = await call("linode_instance_get", {"instance_id": 9})
        assert is_error
        assert text == "[linode/instance_get] get instance 9: Not found (HTTP 404)"


class TestInstanceMutations:
    async def test_create(self, call: Any, client: MagicMock) -> None:
        client.create_instance = AsyncMock(return_value=INSTANCE)

        is_error, text = await call(
            "linode_instance_create",
            {
                "region": "us-east",
                "type": "g6-nanode-1",
                "label": "prod-web-01",
                "root_pass": "Root-Pass-Value-42",
                "tags": ["web"],
            },
        )

        assert not is_error
        assert text.startswith("Instance created successfully:\nID: 101")
        client.create_instance.assert_awaited_once_with(
            {
                "region": "us-east",
                "type": "g6-nanode-1",
                "label": "prod-web-01",
                "root_pass": "Root-Pass-Value-42",
                "tags": ["web"],
            }
        )
        assert redact("pw=Root-Pass-Value-42") == f"pw={REDACTED}"

    async def test_delete(self, call: Any, client: MagicMock) -> None:
        client.delete_instance = AsyncMock(return_value=None)
        _, text = await call("linode_instance_delete", {"instance_id": 101})
        assert text == "Instance 101 deleted successfully"

    async def test_boot_with_config(self, call: Any, client: MagicMock) -> None:
        client.instance_action = AsyncMock(return_value=None)
        _, text = await call("linode_instance_boot", {"instance_id": 5, "config_id": 9})
        client.instance_action.assert_awaited_once_with(5, "boot", 9)
        assert text == "Instance 5 boot initiated successfully"

    async def test_shutdown(self, call: Any, client: MagicMock) -> None:
        client.instance_action = AsyncMock(return_value=None)
        _, text = await call("linode_instance_shutdown", {"instance_id": 5})
        client.instance_action.assert_awaited_once_with(5, "shutdown", None)
        assert text == "Instance 5 shutdown initiated successfully"
