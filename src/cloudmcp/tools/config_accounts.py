"""Account configuration tools (``cloudmcp_account_*``).

These are the only tools that change the configured tenant set; each change
goes through :class:`~cloudmcp.accounts.registry.AccountRegistry`, which
persists the configuration document before committing in memory.
"""

from __future__ import annotations

from cloudmcp.core.config import DEFAULT_API_URL
from cloudmcp.server import params as p
from cloudmcp.server.harness import ToolContext, ToolSpec
from cloudmcp.server.params import ParsedArgs


async def account_list(ctx: ToolContext, args: ParsedArgs) -> str:
    store = ctx.registry.store
    config = store.config
    default = config.system.default_account
    lines = [f"Current default account: {default or 'none'}", "", "Configured accounts:"]
    for name in sorted(config.accounts):
        entry = config.accounts[name]
        marker = " (default)" if name == default else ""
        lines.append(f"- {name}: {entry.label}{marker}")
        lines.append(f"  API URL: {entry.api_url or DEFAULT_API_URL + ' (default)'}")
    lines.extend(["", f"Configuration file: {store.path}"])
    return "\n".join(lines)


async def account_add(ctx: ToolContext, args: ParsedArgs) -> str:
    name = args["name"].strip()
    await ctx.registry.add(name, args["label"], args["token"], args["apiurl"] or "")
    return (
        f"Account '{name}' ({args['label']}) added successfully.\n"
        f"Configuration saved to: {ctx.registry.store.path}\n"
        "The account is now available for use."
    )


async def account_remove(ctx: ToolContext, args: ParsedArgs) -> str:
    await ctx.registry.remove(args["name"])
    return (
        f"Account '{args['name']}' removed successfully.\n"
        f"Configuration saved to: {ctx.registry.store.path}"
    )


async def account_update(ctx: ToolContext, args: ParsedArgs) -> str:
    await ctx.registry.update(
        args["name"],
        label=args["label"] or None,
        token=args["token"] or None,
        base_url=args["apiurl"] or None,
    )
    return (
        f"Account '{args['name']}' updated successfully.\n"
        f"Configuration saved to: {ctx.registry.store.path}"
    )


def tools() -> list[ToolSpec]:
    return [
        ToolSpec(
            name="cloudmcp_account_list",
            description="List all configured Linode accounts from the configuration file",
            handler=account_list,
            needs_account=False,
            service="cloudmcp",
        ),
        ToolSpec(
            name="cloudmcp_account_add",
            description="Add a new Linode account to the configuration file",
            handler=account_add,
            params=(
                p.string("name", "Unique name for the account", required=True),
                p.string("token", "Linode API token", required=True),
                p.string("label", "Display label for the account", required=True),
                p.string("apiurl", "Custom API URL (defaults to the public Linode API)"),
            ),
            needs_account=False,
            service="cloudmcp",
        ),
        ToolSpec(
            name="cloudmcp_account_remove",
            description="Remove a Linode account from the configuration file",
            handler=account_remove,
            params=(p.string("name", "Name of the account to remove", required=True),),
            needs_account=False,
            service="cloudmcp",
        ),
        ToolSpec(
            name="cloudmcp_account_update",
            description="Update an existing Linode account in the configuration file",
            handler=account_update,
            params=(
                p.string("name", "Name of the account to update", required=True),
                p.string("token", "New Linode API token"),
                p.string("label", "New display label"),
                p.string("apiurl", "New API URL"),
            ),
            needs_account=False,
            service="cloudmcp",
        ),
    ]
