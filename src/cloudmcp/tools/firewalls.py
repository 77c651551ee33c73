"""Cloud Firewall tools."""

from __future__ import annotations

from cloudmcp.linode.client import Record
from cloudmcp.server import params as p
from cloudmcp.server.formatting import format_timestamp, join, render_details, render_list
from cloudmcp.server.harness import ToolContext, ToolSpec
from cloudmcp.server.params import ParsedArgs
from cloudmcp.tools._common import pick


def _rules_summary(fw: Record) -> str:
    rules = fw.get("rules") or {}
    inbound = rules.get("inbound") or []
    outbound = rules.get("outbound") or []
    return (
        f"inbound {len(inbound)} (policy {rules.get('inbound_policy', 'n/a')}), "
        f"outbound {len(outbound)} (policy {rules.get('outbound_policy', 'n/a')})"
    )


def _stanza(fw: Record) -> list[str]:
    return [
        f"ID: {fw.get('id')} | {fw.get('label')}",
        f"  Status: {fw.get('status')} | Rules: {_rules_summary(fw)}",
    ]


async def firewalls_list(ctx: ToolContext, args: ParsedArgs) -> str:
    return render_list("firewalls", await ctx.client.list_firewalls(), _stanza)


def _rule_lines(direction: str, rules: list[Record]) -> list[str]:
    lines = [f"{direction} Rules:"]
    if not rules:
        lines.append("  none")
    for rule in rules:
        addrs = rule.get("addresses") or {}
        sources = join([*(addrs.get("ipv4") or []), *(addrs.get("ipv6") or [])], empty="any")
        lines.append(
            f"  - {rule.get('label') or 'unnamed'}: {rule.get('action')} "
            f"{rule.get('protocol')} {rule.get('ports') or 'all'} from/to {sources}"
        )
    return lines


async def firewall_get(ctx: ToolContext, args: ParsedArgs) -> str:
    fw = await ctx.client.get_firewall(args["firewall_id"])
    rules = fw.get("rules") or {}
    return render_details(
        "Firewall",
        [
            ("ID", fw.get("id")),
            ("Label", fw.get("label")),
            ("Status", fw.get("status")),
            ("Inbound Policy", rules.get("inbound_policy")),
            ("Outbound Policy", rules.get("outbound_policy")),
            ("Tags", join(fw.get("tags"))),
            ("Created", format_timestamp(fw.get("created"))),
            ("Updated", format_timestamp(fw.get("updated"))),
        ],
        "\n".join(_rule_lines("Inbound", rules.get("inbound") or [])),
        "\n".join(_rule_lines("Outbound", rules.get("outbound") or [])),
    )


async def firewall_create(ctx: ToolContext, args: ParsedArgs) -> str:
    body = pick(args, "label", "rules", "tags")
    body.setdefault("rules", {"inbound_policy": "ACCEPT", "outbound_policy": "ACCEPT"})
    fw = await ctx.client.create_firewall(body)
    return f"Firewall created successfully:\nID: {fw.get('id')}\nLabel: {fw.get('label')}\nStatus: {fw.get('status')}"


async def firewall_update(ctx: ToolContext, args: ParsedArgs) -> str:
    fw = await ctx.client.update_firewall(args["firewall_id"], pick(args, "label", "tags", "status"))
    return f"Firewall updated successfully:\nID: {fw.get('id')}\nLabel: {fw.get('label')}\nStatus: {fw.get('status')}"


async def firewall_delete(ctx: ToolContext, args: ParsedArgs) -> str:
    await ctx.client.delete_firewall(args["firewall_id"])
    return f"Firewall {args['firewall_id']} deleted successfully"


async def firewall_rules_update(ctx: ToolContext, args: ParsedArgs) -> str:
    await ctx.client.update_firewall_rules(args["firewall_id"], args["rules"])
    return f"Firewall rules updated successfully for firewall {args['firewall_id']}"


async def firewall_device_create(ctx: ToolContext, args: ParsedArgs) -> str:
    device = await ctx.client.create_firewall_device(
        args["firewall_id"], {"id": args["device_id"], "type": args["device_type"]}
    )
    return (
        "Device assigned successfully:\n"
        f"Device ID: {device.get('id')} ({args['device_type']})\n"
        f"Firewall ID: {args['firewall_id']}"
    )


async def firewall_device_delete(ctx: ToolContext, args: ParsedArgs) -> str:
    await ctx.client.delete_firewall_device(args["firewall_id"], args["device_id"])
    return f"Device {args['device_id']} removed from firewall {args['firewall_id']} successfully"


_FIREWALL_ID = p.resource_id("firewall_id", "ID of the firewall")
_RULES_HELP = "Rules document: inbound/outbound lists plus inbound_policy/outbound_policy"


def tools() -> list[ToolSpec]:
    return [
        ToolSpec(name="linode_firewalls_list", description="List all firewalls", handler=firewalls_list),
        ToolSpec(
            name="linode_firewall_get",
            description="Get details of a specific firewall",
            handler=firewall_get,
            params=(_FIREWALL_ID,),
        ),
        ToolSpec(
            name="linode_firewall_create",
            description="Create a new firewall",
            handler=firewall_create,
            params=(
                p.string("label", "Label for the firewall", required=True),
                p.obj("rules", _RULES_HELP),
                p.string_array("tags", "Tags to apply"),
            ),
        ),
        ToolSpec(
            name="linode_firewall_update",
            description="Update an existing firewall",
            handler=firewall_update,
            params=(
                _FIREWALL_ID,
                p.string("label", "New label"),
                p.string("status", "enabled or disabled", choices=("enabled", "disabled")),
                p.string_array("tags", "Replacement tags"),
            ),
        ),
        ToolSpec(
            name="linode_firewall_delete",
            description="Delete a firewall",
            handler=firewall_delete,
            params=(_FIREWALL_ID,),
        ),
        ToolSpec(
            name="linode_firewall_rules_update",
            description="Update firewall rules",
            handler=firewall_rules_update,
            params=(_FIREWALL_ID, p.obj("rules", _RULES_HELP, required=True)),
        ),
        ToolSpec(
            name="linode_firewall_device_create",
            description="Assign a device to a firewall",
            handler=firewall_device_create,
            params=(
                _FIREWALL_ID,
                p.resource_id("device_id", "ID of the Linode or NodeBalancer"),
                p.string("device_type", "Device type", required=True, choices=("linode", "nodebalancer")),
            ),
        ),
        ToolSpec(
            name="linode_firewall_device_delete",
            description="Remove a device from a firewall",
            handler=firewall_device_delete,
            params=(_FIREWALL_ID, p.resource_id("device_id", "ID of the firewall device")),
        ),
    ]
