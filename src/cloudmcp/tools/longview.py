"""Longview monitoring client tools.

Listings mask each client's ``api_key``; a single-client fetch shows it.
"""

from __future__ import annotations

from cloudmcp.linode.client import Record
from cloudmcp.server import params as p
from cloudmcp.server.formatting import format_timestamp, redact_fields, render_details, render_list
from cloudmcp.server.harness import ToolContext, ToolSpec
from cloudmcp.server.params import ParsedArgs


def _stanza(client: Record) -> list[str]:
    masked = redact_fields(client, "api_key")
    return [
        f"ID: {masked.get('id')} | {masked.get('label')}",
        f"  API Key: {masked.get('api_key')} | Created: {format_timestamp(masked.get('created'))}",
    ]


async def clients_list(ctx: ToolContext, args: ParsedArgs) -> str:
    return render_list("Longview clients", await ctx.client.list_longview_clients(), _stanza)


async def client_get(ctx: ToolContext, args: ParsedArgs) -> str:
    client = await ctx.client.get_longview_client(args["client_id"])
    apps = client.get("apps") or {}
    enabled = [name for name, on in apps.items() if on]
    return render_details(
        "Longview Client",
        [
            ("ID", client.get("id")),
            ("Label", client.get("label")),
            ("API Key", client.get("api_key")),
            ("Install Code", client.get("install_code")),
            ("Apps", ", ".join(enabled) or "none"),
            ("Created", format_timestamp(client.get("created"))),
            ("Updated", format_timestamp(client.get("updated"))),
        ],
    )


async def client_create(ctx: ToolContext, args: ParsedArgs) -> str:
    client = await ctx.client.create_longview_client({"label": args["label"]} if args["label"] else {})
    return (
        "Longview client created successfully:\n"
        f"ID: {client.get('id')}\n"
        f"Label: {client.get('label')}\n"
        f"API Key: {client.get('api_key')}\n\n"
        "Use this API key to configure monitoring on your server."
    )


async def client_update(ctx: ToolContext, args: ParsedArgs) -> str:
    client = await ctx.client.update_longview_client(args["client_id"], {"label": args["label"]})
    return f"Longview client updated successfully:\nID: {client.get('id')}\nLabel: {client.get('label')}"


async def client_delete(ctx: ToolContext, args: ParsedArgs) -> str:
    await ctx.client.delete_longview_client(args["client_id"])
    return f"Longview client {args['client_id']} deleted successfully"


_CLIENT_ID = p.resource_id("client_id", "ID of the Longview client")


def tools() -> list[ToolSpec]:
    return [
        ToolSpec(
            name="linode_longview_clients_list",
            description="List all Longview monitoring clients (API keys masked)",
            handler=clients_list,
        ),
        ToolSpec(
            name="linode_longview_client_get",
            description="Get details of a specific Longview client",
            handler=client_get,
            params=(_CLIENT_ID,),
        ),
        ToolSpec(
            name="linode_longview_client_create",
            description="Create a new Longview monitoring client",
            handler=client_create,
            params=(p.string("label", "Client label"),),
        ),
        ToolSpec(
            name="linode_longview_client_update",
            description="Rename a Longview monitoring client",
            handler=client_update,
            params=(_CLIENT_ID, p.string("label", "New label", required=True)),
        ),
        ToolSpec(
            name="linode_longview_client_delete",
            description="Delete a Longview monitoring client",
            handler=client_delete,
            params=(_CLIENT_ID,),
        ),
    ]
