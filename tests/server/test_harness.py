"""Tests for the tool handler harness."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from cloudmcp.accounts.registry import Account, AccountRegistry
from cloudmcp.core.errors import FrameworkError, NoCurrentAccountError, UpstreamError
from cloudmcp.server import params as p
from cloudmcp.server.harness import ToolContext, ToolSpec, error_result, run_tool
from cloudmcp.utils.logging import REDACTED, secret_registry


def _registry(account: Account | None = None) -> MagicMock:
    registry = MagicMock()
    if account is None:
        registry.current = AsyncMock(side_effect=NoCurrentAccountError("registry is empty"))
    else:
        registry.current = AsyncMock(return_value=account)

    @asynccontextmanager
    async def use_current() -> AsyncIterator[Account]:
        yield await registry.current()

    registry.use_current = use_current
    return registry


def _account() -> Account:
    return Account(name="primary", label="Production", client=MagicMock())


def _text(result: Any) -> str:
    return result.content[0].text


class TestToolSpec:
    def test_short_name(self) -> None:
        handler = AsyncMock()
        assert ToolSpec("linode_instances_list", "", handler).short_name == "instances_list"
        assert ToolSpec("cloudmcp_version", "", handler, service="cloudmcp").short_name == "version"
        assert ToolSpec("other", "", handler).short_name == "other"

    def test_descriptor(self) -> None:
        spec = ToolSpec(
            "linode_ip_get",
            "Get details of a specific IP address",
            AsyncMock(),
            params=(p.ip("address", required=True),),
        )
        tool = spec.descriptor()
        assert tool.name == "linode_ip_get"
        assert tool.description == "Get details of a specific IP address"
        assert tool.inputSchema["required"] == ["address"]


class TestRunTool:
    async def test_success_text(self) -> None:
        account = _account()
        handler = AsyncMock(return_value="Found 0 things")
        spec = ToolSpec("linode_things_list", "", handler)

        result = await run_tool(spec, _registry(account), {})

        assert not result.isError
        assert _text(result) == "Found 0 things"
        ctx, args = handler.await_args.args
        assert isinstance(ctx, ToolContext)
        assert ctx.current is account
        assert args == {}

    async def test_dict_output_is_json(self) -> None:
        spec = ToolSpec("cloudmcp_version_json", "", AsyncMock(return_value={"a": 1}), needs_account=False)
        result = await run_tool(spec, _registry(), None)
        assert _text(result) == '{"a":1}'

    async def test_account_free_tool_skips_registry(self) -> None:
        registry = _registry()
        handler = AsyncMock(return_value="ok")
        spec = ToolSpec("linode_account_list", "", handler, needs_account=False)

        result = await run_tool(spec, registry, {})

        assert _text(result) == "ok"
        registry.current.assert_not_awaited()
        ctx = handler.await_args.args[0]
        with pytest.raises(FrameworkError):
            _ = ctx.current

    async def test_parse_failure_before_account(self) -> None:
        registry = _registry(_account())
        handler = AsyncMock()
        spec = ToolSpec("linode_ip_get", "", handler, params=(p.ip("address", required=True),))

        result = await run_tool(spec, registry, {"address": "not-an-ip"})

        assert result.isError
        assert _text(result) == "[linode/ip_get] invalid IP address: address"
        registry.current.assert_not_awaited()
        handler.assert_not_awaited()

    async def test_no_current_account(self) -> None:
        handler = AsyncMock()
        spec = ToolSpec("linode_instances_list", "", handler)

        result = await run_tool(spec, _registry(), {})

        assert result.isError
        assert _text(result).startswith("[linode/instances_list] No current account")
        handler.assert_not_awaited()

    async def test_upstream_error_result_is_redacted(self) -> None:
        secret_registry.add("token-leaky-0001")
        handler = AsyncMock(side_effect=UpstreamError(500, "echo token-leaky-0001", operation="list instances"))
        spec = ToolSpec("linode_instances_list", "", handler)

        result = await run_tool(spec, _registry(_account()), {})

        assert result.isError
        assert "token-leaky-0001" not in _text(result)
        assert REDACTED in _text(result)
        assert "(HTTP 500)" in _text(result)

    async def test_unexpected_exception_propagates(self) -> None:
        spec = ToolSpec("linode_things_list", "", AsyncMock(side_effect=RuntimeError("bug")))
        with pytest.raises(RuntimeError):
            await run_tool(spec, _registry(_account()), {})

    async def test_unserialisable_output(self) -> None:
        loop: dict[str, Any] = {}
        loop["self"] = loop
        spec = ToolSpec("linode_things_list", "", AsyncMock(return_value=loop))
        with pytest.raises(FrameworkError, match="could not serialise"):
            await run_tool(spec, _registry(_account()), {})


    async def test_success_text_is_redacted(self) -> None:
        secret_registry.add("token-echoed-0001")
        spec = ToolSpec("linode_things_get", "", AsyncMock(return_value="Token: token-echoed-0001"))

        result = await run_tool(spec, _registry(_account()), {})

        assert not result.isError
        assert _text(result) == f"Token: {REDACTED}"


class TestCredentialChangeDuringCall:
    async def test_old_client_outlives_running_handler(self, make_store: Any, fake_factory: Any) -> None:
        registry = await AccountRegistry.from_config(
            make_store({"primary": "Production"}, default="primary"), client_factory=fake_factory
        )
        old_client = fake_factory.client_for("token-primary-0001")
        entered = asyncio.Event()
        proceed = asyncio.Event()

        async def handler(ctx: ToolContext, args: Any) -> str:
            entered.set()
            await proceed.wait()
            assert not ctx.client.aclose.await_count
            profile = await ctx.client.get_profile()
            return f"user {profile.username}"

        spec = ToolSpec("linode_profile_get", "", handler)
        call = asyncio.create_task(run_tool(spec, registry, {}))
        await entered.wait()

        await registry.update("primary", token="token-rotated-0002")
        old_client.aclose.assert_not_awaited()

        proceed.set()
        result = await call

        assert not result.isError
        assert _text(result) == "user user-0"
        old_client.aclose.assert_awaited_once()
        assert (await registry.current()).client is fake_factory.client_for("token-rotated-0002")
        await registry.aclose()


class TestErrorResult:
    def test_error_result(self) -> None:
        result = error_result("Unknown tool: x")
        assert result.isError
        assert result.content[0].type == "text"
