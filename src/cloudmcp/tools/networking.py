"""IP address, reserved IP, VLAN and IPv6 tools.

A reserved IP here is an address with no Linode attached: the
account keeps it until it is assigned or released.
"""

from __future__ import annotations

from cloudmcp.linode.client import Record
from cloudmcp.server import params as p
from cloudmcp.server.formatting import format_timestamp, join, render_details, render_list
from cloudmcp.server.harness import ToolContext, ToolSpec
from cloudmcp.server.params import ParsedArgs
from cloudmcp.tools._common import pick


def _ip_stanza(addr: Record) -> list[str]:
    visibility = "public" if addr.get("public") else "private"
    return [
        f"Address: {addr.get('address')} ({addr.get('type')}, {visibility})",
        f"  Linode: {addr.get('linode_id') or 'unassigned'} | Region: {addr.get('region')} | "
        f"RDNS: {addr.get('rdns') or 'none'}",
    ]


async def ips_list(ctx: ToolContext, args: ParsedArgs) -> str:
    return render_list("IP addresses", await ctx.client.list_ips(), _ip_stanza)


async def ip_get(ctx: ToolContext, args: ParsedArgs) -> str:
    addr = await ctx.client.get_ip(args["address"])
    return render_details(
        "IP Address",
        [
            ("Address", addr.get("address")),
            ("Type", addr.get("type")),
            ("Public", str(bool(addr.get("public"))).lower()),
            ("Gateway", addr.get("gateway")),
            ("Subnet Mask", addr.get("subnet_mask")),
            ("Prefix", addr.get("prefix")),
            ("Reverse DNS", addr.get("rdns") or "none"),
            ("Linode ID", addr.get("linode_id") or "unassigned"),
            ("Region", addr.get("region")),
        ],
    )


async def reserved_ip_allocate(ctx: ToolContext, args: ParsedArgs) -> str:
    addr = await ctx.client.allocate_ip(pick(args, "type", "public", "linode_id", "region"))
    visibility = "public" if addr.get("public") else "private"
    assignment = f"Linode {addr['linode_id']}" if addr.get("linode_id") else "unassigned"
    return (
        "Reserved IP allocated successfully:\n"
        f"Address: {addr.get('address')}\n"
        f"Type: {addr.get('type')} ({visibility})\n"
        f"Region: {addr.get('region')}\n"
        f"Assignment: {assignment}"
    )


def _assignment(addr: Record) -> str:
    linode_id = addr.get("linode_id")
    return f"Assigned to Linode {linode_id}" if linode_id else "Unassigned"


def _reserved_stanza(addr: Record) -> list[str]:
    visibility = "Public" if addr.get("public") else "Private"
    lines = [
        f"Address: {addr.get('address')} ({addr.get('type')} {visibility})",
        f"  Gateway: {addr.get('gateway')} | Prefix: {addr.get('prefix')}",
        f"  Region: {addr.get('region')} | {_assignment(addr)}",
    ]
    if addr.get("rdns"):
        lines.append(f"  RDNS: {addr['rdns']}")
    return lines


async def reserved_ips_list(ctx: ToolContext, args: ParsedArgs) -> str:
    unassigned = [a for a in await ctx.client.list_ips() if not a.get("linode_id")]
    return render_list("reserved IP addresses", unassigned, _reserved_stanza)


async def reserved_ip_get(ctx: ToolContext, args: ParsedArgs) -> str:
    addr = await ctx.client.get_ip(args["address"])
    return render_details(
        "Reserved IP",
        [
            ("Address", addr.get("address")),
            ("Type", addr.get("type")),
            ("Visibility", "Public" if addr.get("public") else "Private"),
            ("Gateway", addr.get("gateway")),
            ("Subnet Mask", addr.get("subnet_mask")),
            ("Prefix", addr.get("prefix")),
            ("Region", addr.get("region")),
            ("Reverse DNS", addr.get("rdns") or "none"),
            ("Assignment", _assignment(addr)),
        ],
    )


async def reserved_ip_assign(ctx: ToolContext, args: ParsedArgs) -> str:
    address = args["address"]
    region = args.get("region") or (await ctx.client.get_ip(address)).get("region")
    linode_id = args.get("linode_id")
    await ctx.client.assign_ips(region, [{"address": address, "linode_id": linode_id}])
    assignment = f"Assigned to Linode {linode_id}" if linode_id else "Unassigned"
    return f"IP address assignment updated:\nAddress: {address}\nAssignment: {assignment}"


async def reserved_ip_update(ctx: ToolContext, args: ParsedArgs) -> str:
    # An empty rdns resets the record to the provider default.
    addr = await ctx.client.update_ip(args["address"], {"rdns": args.get("rdns") or None})
    return (
        "IP address updated successfully:\n"
        f"Address: {addr.get('address')}\n"
        f"Reverse DNS: {addr.get('rdns') or 'default'}"
    )


def _vlan_stanza(vlan: Record) -> list[str]:
    return [
        f"Label: {vlan.get('label')} | Region: {vlan.get('region')}",
        f"  Linodes: {join(vlan.get('linodes'))} | Created: {format_timestamp(vlan.get('created'))}",
    ]


def _ipv6_stanza(rng: Record) -> list[str]:
    return [
        f"Range: {rng.get('range')}/{rng.get('prefix')} | Region: {rng.get('region')}",
        f"  Route Target: {rng.get('route_target') or 'none'}",
    ]


async def vlans_list(ctx: ToolContext, args: ParsedArgs) -> str:
    return render_list("VLANs", await ctx.client.list_vlans(), _vlan_stanza)


async def ipv6_pools_list(ctx: ToolContext, args: ParsedArgs) -> str:
    return render_list("IPv6 pools", await ctx.client.list_ipv6_pools(), _ipv6_stanza)


async def ipv6_ranges_list(ctx: ToolContext, args: ParsedArgs) -> str:
    return render_list("IPv6 ranges", await ctx.client.list_ipv6_ranges(), _ipv6_stanza)


_ADDRESS = p.ip("address", "The IPv4 or IPv6 address", required=True)


def tools() -> list[ToolSpec]:
    return [
        ToolSpec(name="linode_ips_list", description="List all IP addresses", handler=ips_list),
        ToolSpec(
            name="linode_ip_get",
            description="Get details of a specific IP address",
            handler=ip_get,
            params=(_ADDRESS,),
        ),
        ToolSpec(
            name="linode_reserved_ip_allocate",
            description="Allocate a new reserved IP address",
            handler=reserved_ip_allocate,
            params=(
                p.string("type", "Address type", required=True, choices=("ipv4",)),
                p.boolean("public", "Allocate a public address", default=True),
                p.integer("linode_id", "Linode to assign the address to", minimum=1),
                p.string("region", "Region for an unassigned reservation"),
            ),
        ),
        ToolSpec(
            name="linode_reserved_ips_list",
            description="List reserved (unassigned) IP addresses",
            handler=reserved_ips_list,
        ),
        ToolSpec(
            name="linode_reserved_ip_get",
            description="Get details of a specific reserved IP address",
            handler=reserved_ip_get,
            params=(_ADDRESS,),
        ),
        ToolSpec(
            name="linode_reserved_ip_assign",
            description="Assign a reserved IP to a Linode, or unassign it when linode_id is omitted",
            handler=reserved_ip_assign,
            params=(
                _ADDRESS,
                p.integer("linode_id", "Linode to assign the address to", minimum=1),
                p.string("region", "Region of the address (looked up when omitted)"),
            ),
        ),
        ToolSpec(
            name="linode_reserved_ip_update",
            description="Update the reverse DNS for a reserved IP",
            handler=reserved_ip_update,
            params=(_ADDRESS, p.string("rdns", "Reverse DNS name; omit to reset")),
        ),
        ToolSpec(name="linode_vlans_list", description="List all VLANs", handler=vlans_list),
        ToolSpec(name="linode_ipv6_pools_list", description="List all IPv6 pools", handler=ipv6_pools_list),
        ToolSpec(name="linode_ipv6_ranges_list", description="List all IPv6 ranges", handler=ipv6_ranges_list),
    ]
