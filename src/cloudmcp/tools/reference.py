"""Reference catalogue tools, served from the current account's cache."""

from __future__ import annotations

from cloudmcp.linode.models import Kernel, LinodeType, Region
from cloudmcp.server import params as p
from cloudmcp.server.formatting import format_bool, format_mb, join, render_details, render_list
from cloudmcp.server.harness import ToolContext, ToolSpec
from cloudmcp.server.params import ParsedArgs


def _region_stanza(region: Region) -> list[str]:
    return [
        f"ID: {region.id} | {region.label}",
        f"  Country: {region.country} | Status: {region.status}",
        f"  Capabilities: {join(region.capabilities)}",
    ]


def _price(linode_type: LinodeType) -> str:
    monthly = linode_type.price.monthly
    hourly = linode_type.price.hourly
    if monthly is None and hourly is None:
        return "n/a"
    return f"${monthly or 0:.2f}/mo (${hourly or 0:.4f}/hr)"


def _type_stanza(linode_type: LinodeType) -> list[str]:
    return [
        f"ID: {linode_type.id} | {linode_type.label}",
        f"  Class: {linode_type.type_class} | vCPUs: {linode_type.vcpus} | "
        f"Memory: {format_mb(linode_type.memory)} | Disk: {format_mb(linode_type.disk)}",
        f"  Transfer: {linode_type.transfer} GB | GPUs: {linode_type.gpus} | Price: {_price(linode_type)}",
    ]


def _kernel_stanza(kernel: Kernel) -> list[str]:
    flags = [f for f, on in (("kvm", kernel.kvm), ("deprecated", kernel.deprecated)) if on]
    return [
        f"ID: {kernel.id} | {kernel.label}",
        f"  Version: {kernel.version} | Architecture: {kernel.architecture} | Flags: {join(flags)}",
    ]


async def regions_list(ctx: ToolContext, args: ParsedArgs) -> str:
    regions = await ctx.cache.get_regions(ctx.client)
    if args["country"]:
        regions = [r for r in regions if r.country == args["country"]]
    return render_list("regions", regions, _region_stanza)


async def types_list(ctx: ToolContext, args: ParsedArgs) -> str:
    types = await ctx.cache.get_types(ctx.client)
    if args["type_class"]:
        types = [t for t in types if t.type_class == args["type_class"]]
    return render_list("instance types", types, _type_stanza)


async def kernels_list(ctx: ToolContext, args: ParsedArgs) -> str:
    kernels = await ctx.cache.get_kernels(ctx.client)
    if args["architecture"]:
        kernels = [k for k in kernels if k.architecture == args["architecture"]]
    if not args["include_deprecated"]:
        kernels = [k for k in kernels if not k.deprecated]
    return render_list("kernels", kernels, _kernel_stanza)


async def cache_stats(ctx: ToolContext, args: ParsedArgs) -> str:
    stats = await ctx.cache.stats()
    return render_details(
        "Reference Cache",
        [
            ("Account", ctx.current.name),
            ("Regions", f"{stats.regions_count} ({format_bool(stats.regions_cached, on='cached', off='empty')})"),
            ("Types", f"{stats.types_count} ({format_bool(stats.types_cached, on='cached', off='empty')})"),
            ("Kernels", f"{stats.kernels_count} ({format_bool(stats.kernels_cached, on='cached', off='empty')})"),
            ("Expiry", stats.expiry.isoformat() if stats.expiry else "never refreshed"),
            ("Expired", str(stats.is_expired).lower()),
            ("TTL", f"{stats.ttl_seconds:g}s"),
        ],
    )


def tools() -> list[ToolSpec]:
    return [
        ToolSpec(
            name="linode_regions_list",
            description="List available Linode regions (cached)",
            handler=regions_list,
            params=(p.string("country", "Only regions in this country code"),),
        ),
        ToolSpec(
            name="linode_types_list",
            description="List Linode instance types and prices (cached)",
            handler=types_list,
            params=(p.string("type_class", "Only types of this class, e.g. standard, dedicated"),),
        ),
        ToolSpec(
            name="linode_kernels_list",
            description="List available Linode kernels (cached)",
            handler=kernels_list,
            params=(
                p.string("architecture", "Only kernels for this architecture, e.g. x86_64"),
                p.boolean("include_deprecated", "Include deprecated kernels", default=False),
            ),
        ),
        ToolSpec(
            name="cloudmcp_cache_stats",
            description="Show reference cache statistics for the current account",
            handler=cache_stats,
            service="cloudmcp",
        ),
    ]
