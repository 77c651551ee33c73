"""StackScript tools."""

from __future__ import annotations

from cloudmcp.linode.client import ListOptions, Record
from cloudmcp.server import params as p
from cloudmcp.server.formatting import format_timestamp, join, render_details, render_list
from cloudmcp.server.harness import ToolContext, ToolSpec
from cloudmcp.server.params import ParsedArgs
from cloudmcp.tools._common import pick

_FIELDS = ("label", "description", "images", "script", "is_public", "rev_note")


def _stanza(ss: Record) -> list[str]:
    visibility = "public" if ss.get("is_public") else "private"
    return [
        f"ID: {ss.get('id')} | {ss.get('label')} ({visibility})",
        f"  Author: {ss.get('username')} | Deployments: {ss.get('deployments_total', 0)}",
        f"  Images: {join(ss.get('images'))}",
    ]


async def stackscripts_list(ctx: ToolContext, args: ParsedArgs) -> str:
    # The public catalogue holds thousands of scripts; default to the account's own.
    opts = None if args["include_public"] else ListOptions(filter={"mine": True})
    return render_list("StackScripts", await ctx.client.list_stackscripts(opts), _stanza)


async def stackscript_get(ctx: ToolContext, args: ParsedArgs) -> str:
    ss = await ctx.client.get_stackscript(args["stackscript_id"])
    return render_details(
        "StackScript",
        [
            ("ID", ss.get("id")),
            ("Label", ss.get("label")),
            ("Description", ss.get("description") or ""),
            ("Author", ss.get("username")),
            ("Public", str(bool(ss.get("is_public"))).lower()),
            ("Images", join(ss.get("images"))),
            ("Deployments", f"{ss.get('deployments_active', 0)} active / {ss.get('deployments_total', 0)} total"),
            ("Revision Note", ss.get("rev_note") or ""),
            ("Created", format_timestamp(ss.get("created"))),
            ("Updated", format_timestamp(ss.get("updated"))),
        ],
        f"\nScript:\n{ss.get('script', '')}",
    )


async def stackscript_create(ctx: ToolContext, args: ParsedArgs) -> str:
    ss = await ctx.client.create_stackscript(pick(args, *_FIELDS))
    return f"StackScript created successfully:\nID: {ss.get('id')}\nLabel: {ss.get('label')}"


async def stackscript_update(ctx: ToolContext, args: ParsedArgs) -> str:
    ss = await ctx.client.update_stackscript(args["stackscript_id"], pick(args, *_FIELDS))
    return f"StackScript updated successfully:\nID: {ss.get('id')}\nLabel: {ss.get('label')}"


async def stackscript_delete(ctx: ToolContext, args: ParsedArgs) -> str:
    await ctx.client.delete_stackscript(args["stackscript_id"])
    return f"StackScript {args['stackscript_id']} deleted successfully"


_SS_ID = p.resource_id("stackscript_id", "ID of the StackScript")


def _fields(*, create: bool) -> tuple[p.Param, ...]:
    return (
        p.string("label", "Label", required=create),
        p.string("description", "Description"),
        p.string_array("images", "Compatible images, e.g. linode/ubuntu24.04", required=create),
        p.string("script", "Script body, starting with a shebang", required=create),
        p.boolean("is_public", "Publish to the public catalogue"),
        p.string("rev_note", "Revision note"),
    )


def tools() -> list[ToolSpec]:
    return [
        ToolSpec(
            name="linode_stackscripts_list",
            description="List StackScripts owned by the account",
            handler=stackscripts_list,
            params=(p.boolean("include_public", "Include the public catalogue", default=False),),
        ),
        ToolSpec(
            name="linode_stackscript_get",
            description="Get details of a specific StackScript",
            handler=stackscript_get,
            params=(_SS_ID,),
        ),
        ToolSpec(
            name="linode_stackscript_create",
            description="Create a new StackScript",
            handler=stackscript_create,
            params=_fields(create=True),
        ),
        ToolSpec(
            name="linode_stackscript_update",
            description="Update an existing StackScript",
            handler=stackscript_update,
            params=(_SS_ID, *_fields(create=False)),
        ),
        ToolSpec(
            name="linode_stackscript_delete",
            description="Delete a StackScript",
            handler=stackscript_delete,
            params=(_SS_ID,),
        ),
    ]
