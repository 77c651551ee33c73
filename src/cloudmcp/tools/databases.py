"""Managed database tools (MySQL and PostgreSQL)."""

from __future__ import annotations

from cloudmcp.core.errors import InvalidArgumentError
from cloudmcp.linode.client import Record
from cloudmcp.server import params as p
from cloudmcp.server.formatting import format_mb, format_timestamp, join, render_details, render_list
from cloudmcp.server.harness import Handler, ToolContext, ToolSpec
from cloudmcp.server.params import ParsedArgs
from cloudmcp.tools._common import pick, pick_changes

_ENGINES = {"mysql": "MySQL", "postgresql": "PostgreSQL"}
_CLUSTER_SIZES = (1, 3)


def _db_stanza(db: Record) -> list[str]:
    return [
        f"ID: {db.get('id')} | {db.get('label')}",
        f"  Engine: {db.get('engine')} {db.get('version')} | Region: {db.get('region')} | "
        f"Type: {db.get('type')} | Status: {db.get('status')}",
    ]


async def databases_list(ctx: ToolContext, args: ParsedArgs) -> str:
    return render_list("databases", await ctx.client.list_databases(), _db_stanza)


def _engine_list(engine: str) -> Handler:
    async def handler(ctx: ToolContext, args: ParsedArgs) -> str:
        dbs = await ctx.client.list_engine_databases(engine)
        return render_list(f"{_ENGINES[engine]} databases", dbs, _db_stanza)

    return handler


def _engine_get(engine: str) -> Handler:
    async def handler(ctx: ToolContext, args: ParsedArgs) -> str:
        db = await ctx.client.get_engine_database(engine, args["database_id"])
        hosts = db.get("hosts") or {}
        updates = db.get("updates") or {}
        return render_details(
            f"{_ENGINES[engine]} Database",
            [
                ("ID", db.get("id")),
                ("Label", db.get("label")),
                ("Engine", f"{db.get('engine')} {db.get('version')}"),
                ("Region", db.get("region")),
                ("Type", db.get("type")),
                ("Status", db.get("status")),
                ("Cluster Size", db.get("cluster_size")),
                ("Primary Host", hosts.get("primary")),
                ("Secondary Host", hosts.get("secondary") or "none"),
                ("Port", db.get("port")),
                ("SSL Connection", str(bool(db.get("ssl_connection"))).lower()),
                ("Allow List", join(db.get("allow_list"))),
                ("Maintenance", f"{updates.get('frequency', 'n/a')} on day {updates.get('day_of_week', 'n/a')}"),
                ("Created", format_timestamp(db.get("created"))),
                ("Updated", format_timestamp(db.get("updated"))),
            ],
        )

    return handler


def _engine_credentials(engine: str) -> Handler:
    async def handler(ctx: ToolContext, args: ParsedArgs) -> str:
        creds = await ctx.client.get_engine_database_credentials(engine, args["database_id"])
        return (
            f"{_ENGINES[engine]} database {args['database_id']} credentials:\n"
            f"Username: {creds.get('username')}\n"
            f"Password: {creds.get('password')}"
        )

    return handler


def _engine_create(engine: str) -> Handler:
    async def handler(ctx: ToolContext, args: ParsedArgs) -> str:
        size = args.get("cluster_size")
        if size is not None and size not in _CLUSTER_SIZES:
            raise InvalidArgumentError("cluster_size", "must be 1 or 3")
        db = await ctx.client.create_engine_database(
            engine, pick(args, "label", "region", "type", "engine", "cluster_size", "allow_list")
        )
        return (
            f"{_ENGINES[engine]} database created successfully:\n"
            f"ID: {db.get('id')}\n"
            f"Label: {db.get('label')}\n"
            f"Engine: {db.get('engine')} {db.get('version')}\n"
            f"Region: {db.get('region')}\n"
            f"Type: {db.get('type')}\n"
            f"Status: {db.get('status')}\n"
            f"Primary Host: {(db.get('hosts') or {}).get('primary')}\n"
            f"Port: {db.get('port')}"
        )

    return handler


def _engine_update(engine: str) -> Handler:
    async def handler(ctx: ToolContext, args: ParsedArgs) -> str:
        db = await ctx.client.update_engine_database(
            engine, args["database_id"], pick_changes(args, "label", "allow_list")
        )
        return (
            f"{_ENGINES[engine]} database updated successfully:\n"
            f"ID: {db.get('id')}\n"
            f"Label: {db.get('label')}\n"
            f"Status: {db.get('status')}\n"
            f"Allow List: {join(db.get('allow_list'))}"
        )

    return handler


def _engine_delete(engine: str) -> Handler:
    async def handler(ctx: ToolContext, args: ParsedArgs) -> str:
        await ctx.client.delete_engine_database(engine, args["database_id"])
        return f"{_ENGINES[engine]} database {args['database_id']} deleted successfully"

    return handler


def _engine_credentials_reset(engine: str) -> Handler:
    async def handler(ctx: ToolContext, args: ParsedArgs) -> str:
        await ctx.client.reset_engine_database_credentials(engine, args["database_id"])
        return (
            f"{_ENGINES[engine]} database {args['database_id']} root password reset successfully.\n"
            "Retrieve the new credentials with the credentials tool."
        )

    return handler


def _engine_stanza(engine: Record) -> list[str]:
    return [f"ID: {engine.get('id')} | {engine.get('engine')} {engine.get('version')}"]


def _type_stanza(db_type: Record) -> list[str]:
    price = ((db_type.get("engines") or {}).get("mysql") or [{}])[0].get("price") or {}
    return [
        f"ID: {db_type.get('id')} | {db_type.get('label')}",
        f"  Class: {db_type.get('class')} | vCPUs: {db_type.get('vcpus')} | "
        f"Memory: {format_mb(db_type.get('memory'))} | Disk: {format_mb(db_type.get('disk'))}",
        f"  Price (1 node): ${price.get('monthly', 0)}/mo",
    ]


async def engines_list(ctx: ToolContext, args: ParsedArgs) -> str:
    return render_list("database engines", await ctx.client.list_database_engines(), _engine_stanza)


async def types_list(ctx: ToolContext, args: ParsedArgs) -> str:
    return render_list("database types", await ctx.client.list_database_types(), _type_stanza)


_DATABASE_ID = p.resource_id("database_id", "ID of the database")
_EXAMPLE_VERSIONS = {"mysql": "8", "postgresql": "16"}


def _engine_tools(engine: str, prefix: str) -> list[ToolSpec]:
    display = _ENGINES[engine]
    return [
        ToolSpec(
            name=f"linode_{prefix}_databases_list",
            description=f"List all {display} databases",
            handler=_engine_list(engine),
        ),
        ToolSpec(
            name=f"linode_{prefix}_database_get",
            description=f"Get details of a specific {display} database",
            handler=_engine_get(engine),
            params=(_DATABASE_ID,),
        ),
        ToolSpec(
            name=f"linode_{prefix}_database_credentials",
            description=f"Get root credentials for a {display} database",
            handler=_engine_credentials(engine),
            params=(_DATABASE_ID,),
        ),
        ToolSpec(
            name=f"linode_{prefix}_database_create",
            description=f"Create a new {display} database",
            handler=_engine_create(engine),
            params=(
                p.string("label", "Display label for the database", required=True),
                p.string("region", "Region for the database", required=True),
                p.string("type", "Node type, e.g. g6-nanode-1", required=True),
                p.string("engine", f"Engine and version, e.g. {engine}/{_EXAMPLE_VERSIONS[engine]}", required=True),
                p.integer("cluster_size", "Number of nodes (1 or 3)", minimum=1),
                p.string_array("allow_list", "IP addresses or CIDR ranges allowed to connect"),
            ),
        ),
        ToolSpec(
            name=f"linode_{prefix}_database_update",
            description=f"Update a {display} database's label or allow list",
            handler=_engine_update(engine),
            params=(
                _DATABASE_ID,
                p.string("label", "New label"),
                p.string_array("allow_list", "Replacement allow list"),
            ),
        ),
        ToolSpec(
            name=f"linode_{prefix}_database_delete",
            description=f"Delete a {display} database",
            handler=_engine_delete(engine),
            params=(_DATABASE_ID,),
        ),
        ToolSpec(
            name=f"linode_{prefix}_database_credentials_reset",
            description=f"Reset the root password of a {display} database",
            handler=_engine_credentials_reset(engine),
            params=(_DATABASE_ID,),
        ),
    ]


def tools() -> list[ToolSpec]:
    return [
        ToolSpec(
            name="linode_databases_list",
            description="List all databases (both MySQL and PostgreSQL)",
            handler=databases_list,
        ),
        *_engine_tools("mysql", "mysql"),
        *_engine_tools("postgresql", "postgres"),
        ToolSpec(
            name="linode_database_engines_list",
            description="List all available database engines",
            handler=engines_list,
        ),
        ToolSpec(
            name="linode_database_types_list",
            description="List all available database types",
            handler=types_list,
        ),
    ]
