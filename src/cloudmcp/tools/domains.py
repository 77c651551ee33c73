"""Domain and domain record tools."""

from __future__ import annotations

from cloudmcp.linode.client import Record
from cloudmcp.server import params as p
from cloudmcp.server.formatting import format_timestamp, join, render_details, render_list
from cloudmcp.server.harness import ToolContext, ToolSpec
from cloudmcp.server.params import ParsedArgs
from cloudmcp.tools._common import pick

_DOMAIN_FIELDS = (
    "domain",
    "type",
    "soa_email",
    "description",
    "master_ips",
    "axfr_ips",
    "ttl_sec",
    "refresh_sec",
    "retry_sec",
    "expire_sec",
    "tags",
    "group",
)
_RECORD_FIELDS = ("type", "name", "target", "priority", "weight", "port", "service", "protocol", "ttl_sec", "tag")


def _domain_stanza(domain: Record) -> list[str]:
    return [
        f"ID: {domain.get('id')} | {domain.get('domain')}",
        f"  Type: {domain.get('type')} | Status: {domain.get('status')} | SOA: {domain.get('soa_email') or 'none'}",
    ]


def _record_stanza(rec: Record) -> list[str]:
    return [
        f"ID: {rec.get('id')} | {rec.get('type')} {rec.get('name') or '@'}",
        f"  Target: {rec.get('target')} | TTL: {rec.get('ttl_sec') or 'default'}",
    ]


async def domains_list(ctx: ToolContext, args: ParsedArgs) -> str:
    return render_list("domains", await ctx.client.list_domains(), _domain_stanza)


async def domain_get(ctx: ToolContext, args: ParsedArgs) -> str:
    d = await ctx.client.get_domain(args["domain_id"])
    return render_details(
        "Domain",
        [
            ("ID", d.get("id")),
            ("Domain", d.get("domain")),
            ("Type", d.get("type")),
            ("Status", d.get("status")),
            ("SOA Email", d.get("soa_email") or "none"),
            ("Description", d.get("description") or ""),
            ("TTL", d.get("ttl_sec")),
            ("Refresh", d.get("refresh_sec")),
            ("Retry", d.get("retry_sec")),
            ("Expire", d.get("expire_sec")),
            ("Master IPs", join(d.get("master_ips"))),
            ("AXFR IPs", join(d.get("axfr_ips"))),
            ("Tags", join(d.get("tags"))),
            ("Created", format_timestamp(d.get("created"))),
            ("Updated", format_timestamp(d.get("updated"))),
        ],
    )


def _domain_summary(header: str, d: Record) -> str:
    return f"{header}\nID: {d.get('id')}\nDomain: {d.get('domain')}\nType: {d.get('type')}\nStatus: {d.get('status')}"


async def domain_create(ctx: ToolContext, args: ParsedArgs) -> str:
    d = await ctx.client.create_domain(pick(args, *_DOMAIN_FIELDS))
    return _domain_summary("Domain created successfully:", d)


async def domain_update(ctx: ToolContext, args: ParsedArgs) -> str:
    d = await ctx.client.update_domain(args["domain_id"], pick(args, *_DOMAIN_FIELDS))
    return _domain_summary("Domain updated successfully:", d)


async def domain_delete(ctx: ToolContext, args: ParsedArgs) -> str:
    await ctx.client.delete_domain(args["domain_id"])
    return f"Domain {args['domain_id']} deleted successfully"


async def domain_records_list(ctx: ToolContext, args: ParsedArgs) -> str:
    records = await ctx.client.list_domain_records(args["domain_id"])
    return render_list("domain records", records, _record_stanza)


async def domain_record_get(ctx: ToolContext, args: ParsedArgs) -> str:
    rec = await ctx.client.get_domain_record(args["domain_id"], args["record_id"])
    return render_details(
        "Domain Record",
        [
            ("ID", rec.get("id")),
            ("Type", rec.get("type")),
            ("Name", rec.get("name") or "@"),
            ("Target", rec.get("target")),
            ("Priority", rec.get("priority")),
            ("Weight", rec.get("weight")),
            ("Port", rec.get("port")),
            ("Service", rec.get("service")),
            ("Protocol", rec.get("protocol")),
            ("TTL", rec.get("ttl_sec")),
            ("Tag", rec.get("tag")),
            ("Created", format_timestamp(rec.get("created"))),
            ("Updated", format_timestamp(rec.get("updated"))),
        ],
    )


def _record_summary(header: str, rec: Record) -> str:
    return (
        f"{header}\nID: {rec.get('id')}\nType: {rec.get('type')}\n"
        f"Name: {rec.get('name') or '@'}\nTarget: {rec.get('target')}"
    )


async def domain_record_create(ctx: ToolContext, args: ParsedArgs) -> str:
    rec = await ctx.client.create_domain_record(args["domain_id"], pick(args, *_RECORD_FIELDS))
    return _record_summary("Domain record created successfully:", rec)


async def domain_record_update(ctx: ToolContext, args: ParsedArgs) -> str:
    rec = await ctx.client.update_domain_record(
        args["domain_id"], args["record_id"], pick(args, *_RECORD_FIELDS)
    )
    return _record_summary("Domain record updated successfully:", rec)


async def domain_record_delete(ctx: ToolContext, args: ParsedArgs) -> str:
    await ctx.client.delete_domain_record(args["domain_id"], args["record_id"])
    return f"Domain record {args['record_id']} deleted successfully from domain {args['domain_id']}"


_DOMAIN_ID = p.resource_id("domain_id", "ID of the domain")
_RECORD_ID = p.resource_id("record_id", "ID of the domain record")
_RECORD_TYPES = ("A", "AAAA", "NS", "MX", "CNAME", "TXT", "SRV", "PTR", "CAA")


def _domain_params(*, create: bool) -> tuple[p.Param, ...]:
    return (
        p.string("domain", "The domain name, e.g. example.com", required=create),
        p.string("type", "master or slave", required=create, choices=("master", "slave")),
        p.string("soa_email", "Start of Authority email (required for master)"),
        p.string("description", "Description"),
        p.string_array("master_ips", "Master name servers (slave domains)"),
        p.string_array("axfr_ips", "Addresses allowed to AXFR the zone"),
        p.integer("ttl_sec", "Default TTL in seconds", minimum=0),
        p.integer("refresh_sec", "Refresh interval in seconds", minimum=0),
        p.integer("retry_sec", "Retry interval in seconds", minimum=0),
        p.integer("expire_sec", "Expire time in seconds", minimum=0),
        p.string_array("tags", "Tags to apply"),
        p.string("group", "Deprecated grouping label"),
    )


def _record_params(*, create: bool) -> tuple[p.Param, ...]:
    return (
        p.string("type", "Record type", required=create, choices=_RECORD_TYPES),
        p.string("name", "Record name (hostname)"),
        p.string("target", "Record target", required=create),
        p.integer("priority", "Priority (MX, SRV)", minimum=0),
        p.integer("weight", "Weight (SRV)", minimum=0),
        p.integer("port", "Port (SRV)", minimum=0),
        p.string("service", "Service name (SRV)"),
        p.string("protocol", "Protocol (SRV)"),
        p.integer("ttl_sec", "TTL in seconds", minimum=0),
        p.string("tag", "Tag (CAA)"),
    )


def tools() -> list[ToolSpec]:
    return [
        ToolSpec(name="linode_domains_list", description="List all domains", handler=domains_list),
        ToolSpec(
            name="linode_domain_get",
            description="Get details of a specific domain",
            handler=domain_get,
            params=(_DOMAIN_ID,),
        ),
        ToolSpec(
            name="linode_domain_create",
            description="Create a new domain",
            handler=domain_create,
            params=_domain_params(create=True),
        ),
        ToolSpec(
            name="linode_domain_update",
            description="Update an existing domain",
            handler=domain_update,
            params=(_DOMAIN_ID, *_domain_params(create=False)),
        ),
        ToolSpec(
            name="linode_domain_delete",
            description="Delete a domain",
            handler=domain_delete,
            params=(_DOMAIN_ID,),
        ),
        ToolSpec(
            name="linode_domain_records_list",
            description="List all records for a domain",
            handler=domain_records_list,
            params=(_DOMAIN_ID,),
        ),
        ToolSpec(
            name="linode_domain_record_get",
            description="Get details of a specific domain record",
            handler=domain_record_get,
            params=(_DOMAIN_ID, _RECORD_ID),
        ),
        ToolSpec(
            name="linode_domain_record_create",
            description="Create a new domain record",
            handler=domain_record_create,
            params=(_DOMAIN_ID, *_record_params(create=True)),
        ),
        ToolSpec(
            name="linode_domain_record_update",
            description="Update a domain record",
            handler=domain_record_update,
            params=(_DOMAIN_ID, _RECORD_ID, *_record_params(create=False)),
        ),
        ToolSpec(
            name="linode_domain_record_delete",
            description="Delete a domain record",
            handler=domain_record_delete,
            params=(_DOMAIN_ID, _RECORD_ID),
        ),
    ]
