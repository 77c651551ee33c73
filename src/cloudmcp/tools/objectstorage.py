"""Object Storage tools.

Key listings mask ``secret_key``; fetching or creating a single key shows it.
Object reads and writes go through pre-signed URLs, which are called
without the account token.
"""

from __future__ import annotations

from cloudmcp.linode.client import Record
from cloudmcp.server import params as p
from cloudmcp.server.formatting import format_bytes, format_timestamp, redact_fields, render_details, render_list
from cloudmcp.server.harness import ToolContext, ToolSpec
from cloudmcp.server.params import ParsedArgs
from cloudmcp.tools._common import pick, pick_changes


def _cluster_stanza(cluster: Record) -> list[str]:
    return [
        f"ID: {cluster.get('id')} | Region: {cluster.get('region')}",
        f"  Domain: {cluster.get('domain')} | Status: {cluster.get('status')}",
    ]


def _bucket_stanza(bucket: Record) -> list[str]:
    return [
        f"Label: {bucket.get('label')} | Cluster: {bucket.get('cluster')}",
        f"  Hostname: {bucket.get('hostname')} | Objects: {bucket.get('objects', 0)} | "
        f"Size: {format_bytes(bucket.get('size'))}",
    ]


def _access(key: Record) -> str:
    return "limited" if key.get("limited") else "full"


def _bucket_access_lines(key: Record) -> list[str]:
    if not key.get("limited"):
        return []
    return [
        f"    - {a.get('region') or a.get('cluster')}/{a.get('bucket_name')}: {a.get('permissions')}"
        for a in key.get("bucket_access") or []
    ]


def _key_stanza(key: Record) -> list[str]:
    masked = redact_fields(key, "secret_key")
    lines = [
        f"ID: {masked.get('id')} | {masked.get('label')} ({_access(masked)})",
        f"  Access Key: {masked.get('access_key')}",
        f"  Secret Key: {masked.get('secret_key')}",
    ]
    access = _bucket_access_lines(masked)
    if access:
        lines.extend(["  Bucket Access:", *access])
    return lines


async def clusters_list(ctx: ToolContext, args: ParsedArgs) -> str:
    clusters = await ctx.client.list_object_storage_clusters()
    return render_list("Object Storage clusters", clusters, _cluster_stanza)


async def buckets_list(ctx: ToolContext, args: ParsedArgs) -> str:
    return render_list("Object Storage buckets", await ctx.client.list_buckets(), _bucket_stanza)


async def bucket_get(ctx: ToolContext, args: ParsedArgs) -> str:
    bucket = await ctx.client.get_bucket(args["cluster"], args["bucket"])
    return render_details(
        "Object Storage Bucket",
        [
            ("Label", bucket.get("label")),
            ("Cluster", bucket.get("cluster")),
            ("Region", bucket.get("region")),
            ("Hostname", bucket.get("hostname")),
            ("Objects", bucket.get("objects", 0)),
            ("Size", format_bytes(bucket.get("size"))),
            ("Created", format_timestamp(bucket.get("created"))),
        ],
    )


async def bucket_create(ctx: ToolContext, args: ParsedArgs) -> str:
    bucket = await ctx.client.create_bucket(pick(args, "label", "cluster", "region", "acl", "cors_enabled"))
    return (
        "Object Storage bucket created successfully:\n"
        f"Label: {bucket.get('label')}\n"
        f"Cluster: {bucket.get('cluster')}\n"
        f"Hostname: {bucket.get('hostname')}"
    )


async def bucket_delete(ctx: ToolContext, args: ParsedArgs) -> str:
    await ctx.client.delete_bucket(args["cluster"], args["bucket"])
    return f"Object Storage bucket {args['bucket']} deleted successfully from {args['cluster']}"


async def keys_list(ctx: ToolContext, args: ParsedArgs) -> str:
    return render_list("Object Storage keys", await ctx.client.list_object_storage_keys(), _key_stanza)


def _key_detail(header: str, key: Record) -> str:
    lines = [
        header,
        f"ID: {key.get('id')}",
        f"Label: {key.get('label')}",
        f"Access Key: {key.get('access_key')}",
        f"Secret Key: {key.get('secret_key')}",
        f"Access: {_access(key)}",
    ]
    access = _bucket_access_lines(key)
    if access:
        lines.extend(["Bucket Access:", *access])
    return "\n".join(lines)


async def key_get(ctx: ToolContext, args: ParsedArgs) -> str:
    key = await ctx.client.get_object_storage_key(args["key_id"])
    return _key_detail("Object Storage Key Details:", key)


async def key_create(ctx: ToolContext, args: ParsedArgs) -> str:
    key = await ctx.client.create_object_storage_key(pick(args, "label", "bucket_access"))
    return _key_detail("Object Storage key created successfully:", key) + (
        "\n\nStore the secret key now; it is not shown again by the provider."
    )


async def key_delete(ctx: ToolContext, args: ParsedArgs) -> str:
    await ctx.client.delete_object_storage_key(args["key_id"])
    return f"Object Storage key {args['key_id']} revoked successfully"


async def bucket_update(ctx: ToolContext, args: ParsedArgs) -> str:
    await ctx.client.update_bucket_access(args["cluster"], args["bucket"], pick_changes(args, "acl", "cors_enabled"))
    return f"Object Storage bucket '{args['bucket']}' access updated successfully in '{args['cluster']}'"


async def key_update(ctx: ToolContext, args: ParsedArgs) -> str:
    key = await ctx.client.update_object_storage_key(args["key_id"], pick_changes(args, "label", "bucket_access"))
    return (
        "Object Storage key updated successfully:\n"
        f"ID: {key.get('id')}\n"
        f"Label: {key.get('label')}\n"
        f"Access: {_access(key)}"
    )


def _object_stanza(obj: Record) -> list[str]:
    if obj.get("size") is None:
        return [f"{obj.get('name')} (prefix)"]
    return [
        f"{obj.get('name')}",
        f"  Size: {format_bytes(obj.get('size'))} | Modified: {format_timestamp(obj.get('last_modified'))}",
    ]


async def objects_list(ctx: ToolContext, args: ParsedArgs) -> str:
    page = await ctx.client.list_objects(
        args["cluster"], args["bucket"], pick(args, "prefix", "delimiter", "marker", "page_size")
    )
    text = render_list("objects", page.get("data") or [], _object_stanza)
    if page.get("is_truncated"):
        text += f"\n\nMore objects available; pass marker '{page.get('next_marker')}' to continue."
    return text


async def object_create(ctx: ToolContext, args: ParsedArgs) -> str:
    body = {"method": "PUT", "name": args["name"], **pick(args, "content_type", "expires_in")}
    signed = await ctx.client.create_object_url(args["cluster"], args["bucket"], body)
    if args.get("content") is None:
        return f"Upload URL for '{args['name']}' (PUT):\n{signed.get('url')}"
    await ctx.client.send_presigned(
        "PUT", signed["url"], content=args["content"].encode(), content_type=args.get("content_type")
    )
    return f"Object '{args['name']}' uploaded successfully to bucket '{args['bucket']}'"


async def object_delete(ctx: ToolContext, args: ParsedArgs) -> str:
    signed = await ctx.client.create_object_url(
        args["cluster"], args["bucket"], {"method": "DELETE", "name": args["name"]}
    )
    await ctx.client.send_presigned("DELETE", signed["url"])
    return f"Object '{args['name']}' deleted successfully from bucket '{args['bucket']}'"


_CLUSTER = p.string("cluster", "Cluster ID, e.g. us-east-1", required=True)
_BUCKET = p.string("bucket", "Bucket label", required=True)
_KEY_ID = p.resource_id("key_id", "ID of the access key")
_ACL = p.string(
    "acl",
    "Canned ACL",
    choices=("private", "public-read", "authenticated-read", "public-read-write"),
)
_OBJECT_NAME = p.string("name", "Object key (path within the bucket)", required=True)


def tools() -> list[ToolSpec]:
    return [
        ToolSpec(
            name="linode_objectstorage_clusters_list",
            description="List all Object Storage clusters",
            handler=clusters_list,
        ),
        ToolSpec(
            name="linode_objectstorage_buckets_list",
            description="List all Object Storage buckets",
            handler=buckets_list,
        ),
        ToolSpec(
            name="linode_objectstorage_bucket_get",
            description="Get details of a specific Object Storage bucket",
            handler=bucket_get,
            params=(_CLUSTER, _BUCKET),
        ),
        ToolSpec(
            name="linode_objectstorage_bucket_create",
            description="Create a new Object Storage bucket",
            handler=bucket_create,
            params=(
                p.string("label", "Bucket label", required=True),
                p.string("cluster", "Cluster ID (legacy placement)"),
                p.string("region", "Region ID"),
                _ACL,
                p.boolean("cors_enabled", "Enable CORS"),
            ),
        ),
        ToolSpec(
            name="linode_objectstorage_bucket_delete",
            description="Delete an Object Storage bucket",
            handler=bucket_delete,
            params=(_CLUSTER, _BUCKET),
        ),
        ToolSpec(
            name="linode_objectstorage_bucket_update",
            description="Update an Object Storage bucket's ACL or CORS setting",
            handler=bucket_update,
            params=(_CLUSTER, _BUCKET, _ACL, p.boolean("cors_enabled", "Enable CORS")),
        ),
        ToolSpec(
            name="linode_objectstorage_objects_list",
            description="List objects in an Object Storage bucket, one page at a time",
            handler=objects_list,
            params=(
                _CLUSTER,
                _BUCKET,
                p.string("prefix", "Only list object keys starting with this prefix"),
                p.string("delimiter", "Group keys sharing a prefix up to this character, e.g. /"),
                p.string("marker", "Continue after this key (from a previous page)"),
                p.integer("page_size", "Objects per page", minimum=1),
            ),
        ),
        ToolSpec(
            name="linode_objectstorage_object_create",
            description=(
                "Upload a text object to a bucket, or return a pre-signed upload URL when no content is given"
            ),
            handler=object_create,
            params=(
                _CLUSTER,
                _BUCKET,
                _OBJECT_NAME,
                p.string("content", "Object content to upload"),
                p.string("content_type", "Content-Type of the object, e.g. text/plain"),
                p.integer("expires_in", "Seconds the pre-signed URL stays valid", minimum=1),
            ),
        ),
        ToolSpec(
            name="linode_objectstorage_object_delete",
            description="Delete an object from an Object Storage bucket",
            handler=object_delete,
            params=(_CLUSTER, _BUCKET, _OBJECT_NAME),
        ),
        ToolSpec(
            name="linode_objectstorage_keys_list",
            description="List all Object Storage keys (secret keys masked)",
            handler=keys_list,
        ),
        ToolSpec(
            name="linode_objectstorage_key_get",
            description="Get details of a specific Object Storage key",
            handler=key_get,
            params=(_KEY_ID,),
        ),
        ToolSpec(
            name="linode_objectstorage_key_create",
            description="Create a new Object Storage key",
            handler=key_create,
            params=(
                p.string("label", "Key label", required=True),
                p.object_array("bucket_access", "Limit access: [{cluster|region, bucket_name, permissions}]"),
            ),
        ),
        ToolSpec(
            name="linode_objectstorage_key_update",
            description="Update an Object Storage key's label or bucket access",
            handler=key_update,
            params=(
                _KEY_ID,
                p.string("label", "New label"),
                p.object_array("bucket_access", "Replacement bucket access list"),
            ),
        ),
        ToolSpec(
            name="linode_objectstorage_key_delete",
            description="Delete an Object Storage key",
            handler=key_delete,
            params=(_KEY_ID,),
        ),
    ]
