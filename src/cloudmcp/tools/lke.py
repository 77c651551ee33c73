"""Linode Kubernetes Engine tools."""

from __future__ import annotations

import base64
import binascii

from cloudmcp.core.errors import UpstreamError
from cloudmcp.linode.client import Record
from cloudmcp.server import params as p
from cloudmcp.server.formatting import format_timestamp, join, render_details, render_list
from cloudmcp.server.harness import ToolContext, ToolSpec
from cloudmcp.server.params import ParsedArgs
from cloudmcp.tools._common import pick, pick_changes


def _control_plane(cluster: Record) -> str:
    ha = (cluster.get("control_plane") or {}).get("high_availability")
    return "high availability" if ha else "standard"


def _autoscaler(pool: Record) -> str:
    scaler = pool.get("autoscaler") or {}
    if not scaler.get("enabled"):
        return "disabled"
    return f"enabled ({scaler.get('min')}-{scaler.get('max')} nodes)"


def _cluster_stanza(cluster: Record) -> list[str]:
    return [
        f"ID: {cluster.get('id')} | {cluster.get('label')}",
        f"  Region: {cluster.get('region')} | Kubernetes: {cluster.get('k8s_version')} | "
        f"Status: {cluster.get('status')} | Control Plane: {_control_plane(cluster)}",
    ]


async def clusters_list(ctx: ToolContext, args: ParsedArgs) -> str:
    return render_list("LKE clusters", await ctx.client.list_lke_clusters(), _cluster_stanza)


async def cluster_get(ctx: ToolContext, args: ParsedArgs) -> str:
    cluster = await ctx.client.get_lke_cluster(args["cluster_id"])
    pools = await ctx.client.list_lke_node_pools(args["cluster_id"])
    pool_lines = ["", "Node Pools:"]
    if not pools:
        pool_lines.append("No node pools found.")
    for pool in pools:
        nodes = pool.get("nodes") or []
        ready = sum(1 for n in nodes if n.get("status") == "ready")
        pool_lines.append(
            f"- Pool {pool.get('id')}: {pool.get('count')} x {pool.get('type')} "
            f"({ready}/{len(nodes)} ready), autoscaler {_autoscaler(pool)}"
        )
    return render_details(
        "LKE Cluster",
        [
            ("ID", cluster.get("id")),
            ("Label", cluster.get("label")),
            ("Region", cluster.get("region")),
            ("Kubernetes Version", cluster.get("k8s_version")),
            ("Status", cluster.get("status")),
            ("Control Plane", _control_plane(cluster)),
            ("Tags", join(cluster.get("tags"))),
            ("Created", format_timestamp(cluster.get("created"))),
            ("Updated", format_timestamp(cluster.get("updated"))),
        ],
        "\n".join(pool_lines),
    )


async def cluster_create(ctx: ToolContext, args: ParsedArgs) -> str:
    cluster = await ctx.client.create_lke_cluster(
        pick(args, "label", "region", "k8s_version", "node_pools", "tags", "control_plane")
    )
    return (
        "LKE cluster created successfully:\n"
        f"ID: {cluster.get('id')}\n"
        f"Label: {cluster.get('label')}\n"
        f"Region: {cluster.get('region')}\n"
        f"Kubernetes Version: {cluster.get('k8s_version')}\n"
        f"Control Plane: {_control_plane(cluster)}\n"
        f"Status: {cluster.get('status')}"
    )


async def cluster_update(ctx: ToolContext, args: ParsedArgs) -> str:
    cluster = await ctx.client.update_lke_cluster(
        args["cluster_id"], pick_changes(args, "label", "k8s_version", "tags", "control_plane")
    )
    return (
        "LKE cluster updated successfully:\n"
        f"ID: {cluster.get('id')}\n"
        f"Label: {cluster.get('label')}\n"
        f"Kubernetes Version: {cluster.get('k8s_version')}\n"
        f"Control Plane: {_control_plane(cluster)}\n"
        f"Status: {cluster.get('status')}"
    )


async def cluster_delete(ctx: ToolContext, args: ParsedArgs) -> str:
    await ctx.client.delete_lke_cluster(args["cluster_id"])
    return f"LKE cluster {args['cluster_id']} deleted successfully"


async def kubeconfig(ctx: ToolContext, args: ParsedArgs) -> str:
    payload = await ctx.client.get_lke_kubeconfig(args["cluster_id"])
    encoded = payload.get("kubeconfig") or ""
    try:
        decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise UpstreamError(200, "kubeconfig is not valid base64", operation="get kubeconfig") from exc
    return f"Kubeconfig for LKE cluster {args['cluster_id']}:\n\n{decoded}"


async def nodepool_create(ctx: ToolContext, args: ParsedArgs) -> str:
    pool = await ctx.client.create_lke_node_pool(
        args["cluster_id"], pick(args, "type", "count", "autoscaler", "tags")
    )
    return (
        "Node pool created successfully:\n"
        f"Pool ID: {pool.get('id')}\n"
        f"Type: {pool.get('type')}\n"
        f"Count: {pool.get('count')}\n"
        f"Autoscaler: {_autoscaler(pool)}"
    )


async def nodepool_update(ctx: ToolContext, args: ParsedArgs) -> str:
    pool = await ctx.client.update_lke_node_pool(
        args["cluster_id"], args["pool_id"], pick_changes(args, "count", "autoscaler", "tags")
    )
    return (
        "Node pool updated successfully:\n"
        f"Pool ID: {pool.get('id')}\n"
        f"Type: {pool.get('type')}\n"
        f"Count: {pool.get('count')}\n"
        f"Autoscaler: {_autoscaler(pool)}"
    )


async def nodepool_delete(ctx: ToolContext, args: ParsedArgs) -> str:
    await ctx.client.delete_lke_node_pool(args["cluster_id"], args["pool_id"])
    return f"Node pool {args['pool_id']} deleted successfully from cluster {args['cluster_id']}"


_CLUSTER_ID = p.resource_id("cluster_id", "ID of the LKE cluster")
_POOL_ID = p.resource_id("pool_id", "ID of the node pool")


def tools() -> list[ToolSpec]:
    return [
        ToolSpec(name="linode_lke_clusters_list", description="List all LKE clusters", handler=clusters_list),
        ToolSpec(
            name="linode_lke_cluster_get",
            description="Get details of a specific LKE cluster",
            handler=cluster_get,
            params=(_CLUSTER_ID,),
        ),
        ToolSpec(
            name="linode_lke_cluster_create",
            description="Create a new LKE cluster",
            handler=cluster_create,
            params=(
                p.string("label", "Cluster label", required=True),
                p.string("region", "Region for the cluster", required=True),
                p.string("k8s_version", "Kubernetes version, e.g. 1.31", required=True),
                p.object_array("node_pools", "Node pools: [{type, count}]", required=True),
                p.string_array("tags", "Tags to apply"),
                p.obj("control_plane", "Control plane options, e.g. {high_availability: true}"),
            ),
        ),
        ToolSpec(
            name="linode_lke_cluster_update",
            description="Update an LKE cluster's label, version, tags or control plane",
            handler=cluster_update,
            params=(
                _CLUSTER_ID,
                p.string("label", "New label"),
                p.string("k8s_version", "Kubernetes version to upgrade to"),
                p.string_array("tags", "Replacement tags"),
                p.obj("control_plane", "Control plane options, e.g. {high_availability: true}"),
            ),
        ),
        ToolSpec(
            name="linode_lke_cluster_delete",
            description="Delete an LKE cluster",
            handler=cluster_delete,
            params=(_CLUSTER_ID,),
        ),
        ToolSpec(
            name="linode_lke_kubeconfig",
            description="Retrieve the kubeconfig for an LKE cluster",
            handler=kubeconfig,
            params=(_CLUSTER_ID,),
        ),
        ToolSpec(
            name="linode_lke_nodepool_create",
            description="Create a new node pool in an LKE cluster",
            handler=nodepool_create,
            params=(
                _CLUSTER_ID,
                p.string("type", "Instance type for the nodes", required=True),
                p.integer("count", "Number of nodes", required=True, minimum=1),
                p.obj("autoscaler", "Autoscaler settings: {enabled, min, max}"),
                p.string_array("tags", "Tags to apply"),
            ),
        ),
        ToolSpec(
            name="linode_lke_nodepool_update",
            description="Resize a node pool or change its autoscaler and tags",
            handler=nodepool_update,
            params=(
                _CLUSTER_ID,
                _POOL_ID,
                p.integer("count", "Number of nodes", minimum=1),
                p.obj("autoscaler", "Autoscaler settings: {enabled, min, max}"),
                p.string_array("tags", "Replacement tags"),
            ),
        ),
        ToolSpec(
            name="linode_lke_nodepool_delete",
            description="Delete a node pool from an LKE cluster",
            handler=nodepool_delete,
            params=(_CLUSTER_ID, _POOL_ID),
        ),
    ]
