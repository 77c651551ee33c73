"""NodeBalancer tools, including per-port configurations."""

from __future__ import annotations

from typing import Any

from cloudmcp.core.errors import InvalidArgumentError
from cloudmcp.linode.client import Record
from cloudmcp.server import params as p
from cloudmcp.server.formatting import format_bytes, format_timestamp, join, render_details, render_list
from cloudmcp.server.harness import ToolContext, ToolSpec
from cloudmcp.server.params import ParsedArgs
from cloudmcp.tools._common import pick, pick_changes
from cloudmcp.utils.logging import secret_registry


def _stanza(nb: Record) -> list[str]:
    return [
        f"ID: {nb.get('id')} | {nb.get('label')}",
        f"  Region: {nb.get('region')} | Hostname: {nb.get('hostname')}",
        f"  IPv4: {nb.get('ipv4')} | IPv6: {nb.get('ipv6') or 'none'}",
    ]


async def nodebalancers_list(ctx: ToolContext, args: ParsedArgs) -> str:
    return render_list("NodeBalancers", await ctx.client.list_nodebalancers(), _stanza)


async def nodebalancer_get(ctx: ToolContext, args: ParsedArgs) -> str:
    nb = await ctx.client.get_nodebalancer(args["nodebalancer_id"])
    transfer = nb.get("transfer") or {}
    return render_details(
        "NodeBalancer",
        [
            ("ID", nb.get("id")),
            ("Label", nb.get("label")),
            ("Region", nb.get("region")),
            ("Hostname", nb.get("hostname")),
            ("IPv4", nb.get("ipv4")),
            ("IPv6", nb.get("ipv6") or "none"),
            ("Client Connection Throttle", nb.get("client_conn_throttle")),
            ("Transfer In", format_bytes((transfer.get("in") or 0) * 1024 * 1024)),
            ("Transfer Out", format_bytes((transfer.get("out") or 0) * 1024 * 1024)),
            ("Tags", join(nb.get("tags"))),
            ("Created", format_timestamp(nb.get("created"))),
            ("Updated", format_timestamp(nb.get("updated"))),
        ],
    )


async def nodebalancer_create(ctx: ToolContext, args: ParsedArgs) -> str:
    nb = await ctx.client.create_nodebalancer(pick(args, "label", "region", "client_conn_throttle", "tags"))
    return (
        "NodeBalancer created successfully:\n"
        f"ID: {nb.get('id')}\n"
        f"Label: {nb.get('label')}\n"
        f"Region: {nb.get('region')}\n"
        f"Hostname: {nb.get('hostname')}\n"
        f"IPv4: {nb.get('ipv4')}"
    )


async def nodebalancer_update(ctx: ToolContext, args: ParsedArgs) -> str:
    nb = await ctx.client.update_nodebalancer(
        args["nodebalancer_id"], pick(args, "label", "client_conn_throttle", "tags")
    )
    return f"NodeBalancer updated successfully:\nID: {nb.get('id')}\nLabel: {nb.get('label')}"


async def nodebalancer_delete(ctx: ToolContext, args: ParsedArgs) -> str:
    await ctx.client.delete_nodebalancer(args["nodebalancer_id"])
    return f"NodeBalancer {args['nodebalancer_id']} deleted successfully"


_CONFIG_FIELDS = (
    "port",
    "protocol",
    "algorithm",
    "stickiness",
    "check",
    "check_interval",
    "check_timeout",
    "check_attempts",
    "check_path",
    "check_body",
    "check_passive",
    "proxy_protocol",
    "ssl_cert",
    "ssl_key",
)
_MAX_PORT = 65534


def _config_body(args: ParsedArgs, *, update: bool) -> dict[str, Any]:
    port = args.get("port")
    if port is not None and port > _MAX_PORT:
        raise InvalidArgumentError("port", f"must be at most {_MAX_PORT}")
    if args.get("ssl_key"):
        secret_registry.add(args["ssl_key"])
    return pick_changes(args, *_CONFIG_FIELDS) if update else pick(args, *_CONFIG_FIELDS)


def _config_summary(header: str, config: Record) -> str:
    return (
        f"{header}\n"
        f"Config ID: {config.get('id')}\n"
        f"Port: {config.get('port')}\n"
        f"Protocol: {config.get('protocol')}\n"
        f"Algorithm: {config.get('algorithm')}"
    )


async def config_create(ctx: ToolContext, args: ParsedArgs) -> str:
    config = await ctx.client.create_nodebalancer_config(
        args["nodebalancer_id"], _config_body(args, update=False)
    )
    return _config_summary("NodeBalancer configuration created successfully:", config)


async def config_update(ctx: ToolContext, args: ParsedArgs) -> str:
    config = await ctx.client.update_nodebalancer_config(
        args["nodebalancer_id"], args["config_id"], _config_body(args, update=True)
    )
    return _config_summary("NodeBalancer configuration updated successfully:", config)


async def config_delete(ctx: ToolContext, args: ParsedArgs) -> str:
    await ctx.client.delete_nodebalancer_config(args["nodebalancer_id"], args["config_id"])
    return (
        f"NodeBalancer configuration {args['config_id']} deleted successfully "
        f"from NodeBalancer {args['nodebalancer_id']}"
    )


_NB_ID = p.resource_id("nodebalancer_id", "ID of the NodeBalancer")
_THROTTLE = p.integer("client_conn_throttle", "Connections per second per client IP (0-20)", minimum=0)
_CONFIG_ID = p.resource_id("config_id", "ID of the configuration")


def _config_params(*, port_required: bool) -> tuple[p.Param, ...]:
    return (
        p.integer("port", "Port to balance (1-65534)", required=port_required, minimum=1),
        p.string("protocol", "Protocol", required=port_required, choices=("http", "https", "tcp")),
        p.string("algorithm", "Balancing algorithm", choices=("roundrobin", "leastconn", "source")),
        p.string("stickiness", "Session stickiness", choices=("none", "table", "http_cookie")),
        p.string("check", "Health check type", choices=("none", "connection", "http", "http_body")),
        p.integer("check_interval", "Seconds between health checks", minimum=2),
        p.integer("check_timeout", "Seconds to wait for a health check response", minimum=1),
        p.integer("check_attempts", "Failed checks before a node is marked down", minimum=1),
        p.string("check_path", "Path requested by http checks"),
        p.string("check_body", "Expected body for http_body checks"),
        p.boolean("check_passive", "Enable passive health checks"),
        p.string("proxy_protocol", "Proxy protocol version", choices=("none", "v1", "v2")),
        p.string("ssl_cert", "PEM certificate for https"),
        p.string("ssl_key", "PEM private key for https"),
    )


def tools() -> list[ToolSpec]:
    return [
        ToolSpec(name="linode_nodebalancers_list", description="List all NodeBalancers", handler=nodebalancers_list),
        ToolSpec(
            name="linode_nodebalancer_get",
            description="Get details of a specific NodeBalancer",
            handler=nodebalancer_get,
            params=(_NB_ID,),
        ),
        ToolSpec(
            name="linode_nodebalancer_create",
            description="Create a new NodeBalancer",
            handler=nodebalancer_create,
            params=(
                p.string("label", "Label for the NodeBalancer", required=True),
                p.string("region", "Region for the NodeBalancer", required=True),
                _THROTTLE,
                p.string_array("tags", "Tags to apply"),
            ),
        ),
        ToolSpec(
            name="linode_nodebalancer_update",
            description="Update an existing NodeBalancer",
            handler=nodebalancer_update,
            params=(_NB_ID, p.string("label", "New label"), _THROTTLE, p.string_array("tags", "Replacement tags")),
        ),
        ToolSpec(
            name="linode_nodebalancer_delete",
            description="Delete a NodeBalancer",
            handler=nodebalancer_delete,
            params=(_NB_ID,),
        ),
        ToolSpec(
            name="linode_nodebalancer_config_create",
            description="Create a new NodeBalancer configuration",
            handler=config_create,
            params=(_NB_ID, *_config_params(port_required=True)),
        ),
        ToolSpec(
            name="linode_nodebalancer_config_update",
            description="Update a NodeBalancer configuration",
            handler=config_update,
            params=(_NB_ID, _CONFIG_ID, *_config_params(port_required=False)),
        ),
        ToolSpec(
            name="linode_nodebalancer_config_delete",
            description="Delete a NodeBalancer configuration",
            handler=config_delete,
            params=(_NB_ID, _CONFIG_ID),
        ),
    ]
