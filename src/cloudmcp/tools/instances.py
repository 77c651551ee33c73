"""Linode instance tools."""

from __future__ import annotations

import logging

from cloudmcp.core.errors import UpstreamError
from cloudmcp.linode.client import Record
from cloudmcp.server import params as p
from cloudmcp.server.formatting import format_bool, format_mb, format_timestamp, join, render_details, render_list
from cloudmcp.server.harness import Handler, ToolContext, ToolSpec
from cloudmcp.server.params import ParsedArgs
from cloudmcp.tools._common import ipv4_list, pick
from cloudmcp.utils.logging import secret_registry

logger = logging.getLogger(__name__)


async def _type_labels(ctx: ToolContext) -> dict[str, str]:
    try:
        types = await ctx.cache.get_types(ctx.client)
    except UpstreamError as exc:
        logger.warning("Instance type labels unavailable: %s", exc)
        return {}
    return {t.id: t.label for t in types}


async def instances_list(ctx: ToolContext, args: ParsedArgs) -> str:
    instances = await ctx.client.list_instances()
    labels = await _type_labels(ctx) if instances else {}

    def stanza(inst: Record) -> list[str]:
        type_id = inst.get("type") or ""
        type_text = f"{type_id} ({labels[type_id]})" if type_id in labels else type_id
        lines = [
            f"ID: {inst.get('id')} | {inst.get('label')}",
            f"  Status: {inst.get('status')} | Region: {inst.get('region')} | Type: {type_text}",
        ]
        if inst.get("ipv4"):
            lines.append(f"  IPv4: {ipv4_list(inst)}")
        return lines

    return render_list("Linode instances", instances, stanza)


async def instance_get(ctx: ToolContext, args: ParsedArgs) -> str:
    inst = await ctx.client.get_instance(args["instance_id"])
    specs = inst.get("specs") or {}
    backups = inst.get("backups") or {}
    spec_lines = (
        "\nSpecifications:\n"
        f"- CPUs: {specs.get('vcpus', 0)}\n"
        f"- Memory: {format_mb(specs.get('memory'))}\n"
        f"- Disk: {format_mb(specs.get('disk'))}\n"
        f"- Transfer: {specs.get('transfer', 0)} GB"
    )
    tags = f"Tags: {join(inst.get('tags'))}" if inst.get("tags") else ""
    return render_details(
        "Instance",
        [
            ("ID", inst.get("id")),
            ("Label", inst.get("label")),
            ("Status", inst.get("status")),
            ("Region", inst.get("region")),
            ("Type", inst.get("type")),
            ("Image", inst.get("image") or "none"),
            ("IPv4", ipv4_list(inst)),
            ("IPv6", inst.get("ipv6") or "none"),
            ("Created", format_timestamp(inst.get("created"))),
            ("Updated", format_timestamp(inst.get("updated"))),
            ("Backups", format_bool(backups.get("enabled"))),
            ("Watchdog", format_bool(inst.get("watchdog_enabled"))),
        ],
        spec_lines,
        tags,
    )


async def instance_create(ctx: ToolContext, args: ParsedArgs) -> str:
    if args["root_pass"]:
        secret_registry.add(args["root_pass"])
    body = pick(
        args,
        "region",
        "type",
        "label",
        "image",
        "root_pass",
        "authorized_keys",
        "stackscript_id",
        "backups_enabled",
        "private_ip",
        "tags",
    )
    inst = await ctx.client.create_instance(body)
    return (
        "Instance created successfully:\n"
        f"ID: {inst.get('id')}\n"
        f"Label: {inst.get('label')}\n"
        f"Status: {inst.get('status')}\n"
        f"Region: {inst.get('region')}\n"
        f"Type: {inst.get('type')}\n"
        f"IPv4: {ipv4_list(inst)}"
    )


async def instance_delete(ctx: ToolContext, args: ParsedArgs) -> str:
    await ctx.client.delete_instance(args["instance_id"])
    return f"Instance {args['instance_id']} deleted successfully"


def _action(action: str) -> Handler:
    async def handler(ctx: ToolContext, args: ParsedArgs) -> str:
        await ctx.client.instance_action(args["instance_id"], action, args.get("config_id"))
        return f"Instance {args['instance_id']} {action} initiated successfully"
    return handler


_INSTANCE_ID = p.resource_id("instance_id", "ID of the Linode instance")
_CONFIG_ID = p.integer("config_id", "Configuration profile to boot with", minimum=1)


def tools() -> list[ToolSpec]:
    return [
        ToolSpec(
            name="linode_instances_list",
            description="List all Linode instances",
            handler=instances_list,
        ),
        ToolSpec(
            name="linode_instance_get",
            description="Get details of a specific Linode instance",
            handler=instance_get,
            params=(_INSTANCE_ID,),
        ),
        ToolSpec(
            name="linode_instance_create",
            description="Create a new Linode instance",
            handler=instance_create,
            params=(
                p.string("region", "Region for the instance, e.g. us-east", required=True),
                p.string("type", "Instance type, e.g. g6-nanode-1", required=True),
                p.string("label", "Display label", required=True),
                p.string("image", "Image to deploy, e.g. linode/ubuntu24.04"),
                p.string("root_pass", "Root password for the deployed image"),
                p.string_array("authorized_keys", "SSH public keys for root"),
                p.integer("stackscript_id", "StackScript to run on first boot", minimum=1),
                p.boolean("backups_enabled", "Enable the backup service"),
                p.boolean("private_ip", "Allocate a private IPv4 address"),
                p.string_array("tags", "Tags to apply"),
            ),
        ),
        ToolSpec(
            name="linode_instance_delete",
            description="Delete a Linode instance",
            handler=instance_delete,
            params=(_INSTANCE_ID,),
        ),
        ToolSpec(
            name="linode_instance_boot",
            description="Boot a Linode instance",
            handler=_action("boot"),
            params=(_INSTANCE_ID, _CONFIG_ID),
        ),
        ToolSpec(
            name="linode_instance_shutdown",
            description="Shutdown a Linode instance",
            handler=_action("shutdown"),
            params=(_INSTANCE_ID,),
        ),
        ToolSpec(
            name="linode_instance_reboot",
            description="Reboot a Linode instance",
            handler=_action("reboot"),
            params=(_INSTANCE_ID, _CONFIG_ID),
        ),
    ]
