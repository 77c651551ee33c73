"""Tests for the version tools."""

from __future__ import annotations

import json
import platform
from typing import Any

from cloudmcp import __version__


class TestVersionTools:
    async def test_text(self, call: Any) -> None:
        is_error, text = await call("cloudmcp_version")

        assert not is_error
        assert text.startswith(f"CloudMCP v{__version__}")
        assert "CloudMCP Build Information:" in text
        assert text.endswith("Current account: primary")

    async def test_json(self, call: Any) -> None:
        _, text = await call("cloudmcp_version_json")

        document = json.loads(text)
        assert document["current_account"] == "primary"
        assert document["service"] == "Cloud MCP Server"
        assert document["cloudmcp"]["version"] == __version__
        assert document["cloudmcp"]["go_version"] == platform.python_version()

    async def test_follows_switch(self, call: Any) -> None:
        await call("linode_account_switch", {"account_name": "development"})
        _, text = await call("cloudmcp_version_json")
        assert json.loads(text)["current_account"] == "development"
