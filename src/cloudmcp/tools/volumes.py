"""Block storage volume tools."""

from __future__ import annotations

from cloudmcp.linode.client import Record
from cloudmcp.server import params as p
from cloudmcp.server.formatting import format_timestamp, join, render_details, render_list
from cloudmcp.server.harness import ToolContext, ToolSpec
from cloudmcp.server.params import ParsedArgs
from cloudmcp.tools._common import pick, pick_changes


def _attachment(vol: Record) -> str:
    linode_id = vol.get("linode_id")
    if not linode_id:
        return "Not attached"
    label = vol.get("linode_label")
    return f"Linode {linode_id}" + (f" ({label})" if label else "")


def _stanza(vol: Record) -> list[str]:
    return [
        f"ID: {vol.get('id')} | {vol.get('label')}",
        f"  Size: {vol.get('size')} GB | Region: {vol.get('region')} | Status: {vol.get('status')}",
        f"  Attached to: {_attachment(vol)}",
    ]


async def volumes_list(ctx: ToolContext, args: ParsedArgs) -> str:
    return render_list("volumes", await ctx.client.list_volumes(), _stanza)


async def volume_get(ctx: ToolContext, args: ParsedArgs) -> str:
    vol = await ctx.client.get_volume(args["volume_id"])
    return render_details(
        "Volume",
        [
            ("ID", vol.get("id")),
            ("Label", vol.get("label")),
            ("Status", vol.get("status")),
            ("Size", f"{vol.get('size')} GB"),
            ("Region", vol.get("region")),
            ("Attached to", _attachment(vol)),
            ("Filesystem Path", vol.get("filesystem_path")),
            ("Tags", join(vol.get("tags"))),
            ("Created", format_timestamp(vol.get("created"))),
            ("Updated", format_timestamp(vol.get("updated"))),
        ],
    )


async def volume_create(ctx: ToolContext, args: ParsedArgs) -> str:
    vol = await ctx.client.create_volume(pick(args, "label", "size", "region", "linode_id", "tags"))
    return (
        "Volume created successfully:\n"
        f"ID: {vol.get('id')}\n"
        f"Label: {vol.get('label')}\n"
        f"Size: {vol.get('size')} GB\n"
        f"Region: {vol.get('region')}\n"
        f"Status: {vol.get('status')}"
    )


async def volume_update(ctx: ToolContext, args: ParsedArgs) -> str:
    vol = await ctx.client.update_volume(args["volume_id"], pick_changes(args, "label", "tags"))
    return (
        "Volume updated successfully:\n"
        f"ID: {vol.get('id')}\n"
        f"Label: {vol.get('label')}\n"
        f"Tags: {join(vol.get('tags'))}"
    )


async def volume_delete(ctx: ToolContext, args: ParsedArgs) -> str:
    await ctx.client.delete_volume(args["volume_id"])
    return f"Volume {args['volume_id']} deleted successfully"


async def volume_attach(ctx: ToolContext, args: ParsedArgs) -> str:
    vol = await ctx.client.attach_volume(
        args["volume_id"], pick(args, "linode_id", "persist_across_boots")
    )
    return (
        f"Volume {vol.get('id', args['volume_id'])} ({vol.get('label', '')}) "
        f"attached to Linode {args['linode_id']} successfully"
    )


async def volume_detach(ctx: ToolContext, args: ParsedArgs) -> str:
    await ctx.client.detach_volume(args["volume_id"])
    return f"Volume {args['volume_id']} detached successfully"


_VOLUME_ID = p.resource_id("volume_id", "ID of the volume")


def tools() -> list[ToolSpec]:
    return [
        ToolSpec(name="linode_volumes_list", description="List all block storage volumes", handler=volumes_list),
        ToolSpec(
            name="linode_volume_get",
            description="Get details of a specific volume",
            handler=volume_get,
            params=(_VOLUME_ID,),
        ),
        ToolSpec(
            name="linode_volume_create",
            description="Create a new volume",
            handler=volume_create,
            params=(
                p.string("label", "Display label for the volume", required=True),
                p.integer("size", "Size of the volume in GB (10-16384)", required=True, minimum=10),
                p.string("region", "Region where the volume will be created"),
                p.integer("linode_id", "Linode to attach the volume to", minimum=1),
                p.string_array("tags", "Tags to apply to the volume"),
            ),
        ),
        ToolSpec(
            name="linode_volume_update",
            description="Rename a volume or replace its tags",
            handler=volume_update,
            params=(_VOLUME_ID, p.string("label", "New label"), p.string_array("tags", "Replacement tags")),
        ),
        ToolSpec(
            name="linode_volume_delete",
            description="Delete a volume",
            handler=volume_delete,
            params=(_VOLUME_ID,),
        ),
        ToolSpec(
            name="linode_volume_attach",
            description="Attach volume to instance",
            handler=volume_attach,
            params=(
                _VOLUME_ID,
                p.resource_id("linode_id", "ID of the Linode to attach to"),
                p.boolean("persist_across_boots", "Keep the volume attached across reboots"),
            ),
        ),
        ToolSpec(
            name="linode_volume_detach",
            description="Detach volume from instance",
            handler=volume_detach,
            params=(_VOLUME_ID,),
        ),
    ]
