"""Current-account tools: ``linode_account_get``, ``linode_account_list``, ``linode_account_switch``."""

from __future__ import annotations

import logging

from cloudmcp.server import params as p
from cloudmcp.server.harness import ToolContext, ToolSpec
from cloudmcp.server.params import ParsedArgs

logger = logging.getLogger(__name__)


async def account_get(ctx: ToolContext, args: ParsedArgs) -> str:
    account = ctx.current
    profile = await ctx.client.get_profile()
    return (
        f"Account: {account.name} ({account.label})\n"
        f"Username: {profile.username}\n"
        f"Email: {profile.email}\n"
        f"UID: {profile.uid}\n"
        f"Restricted: {str(profile.restricted).lower()}"
    )


async def account_list(ctx: ToolContext, args: ParsedArgs) -> str:
    current, accounts = await ctx.registry.overview()
    lines = [f"Current account: {current or 'none'}", "", "Configured accounts:"]
    for name in sorted(accounts):
        if name == current:
            lines.append(f"* {name}: {accounts[name]} (current)")
        else:
            lines.append(f"  {name}: {accounts[name]}")
    return "\n".join(lines) + "\n"


async def account_switch(ctx: ToolContext, args: ParsedArgs) -> str:
    account = await ctx.registry.switch(args["account_name"])
    # The pointer has moved; a failed profile fetch is reported but not rolled back.
    profile = await account.client.get_profile()
    logger.info("Switched Linode account to '%s' (user %s)", account.name, profile.username)
    return (
        f"Successfully switched to account: {account.name} ({account.label})\n"
        f"Username: {profile.username}"
    )


def tools() -> list[ToolSpec]:
    return [
        ToolSpec(
            name="linode_account_get",
            description="Get current Linode account information",
            handler=account_get,
        ),
        ToolSpec(
            name="linode_account_list",
            description="List all configured Linode accounts",
            handler=account_list,
            needs_account=False,
        ),
        ToolSpec(
            name="linode_account_switch",
            description="Switch to a different Linode account",
            handler=account_switch,
            params=(p.string("account_name", "Name of the account to switch to", required=True),),
            needs_account=False,
        ),
    ]
