"""Image tools.

Image regions are annotated with their human label from the current
account's cached regions catalogue, so listing images costs one ``/images``
walk per call and one ``/regions`` walk per cache TTL.
"""

from __future__ import annotations

import logging
from typing import Any

from cloudmcp.core.errors import UpstreamError
from cloudmcp.linode.client import Record
from cloudmcp.server import params as p
from cloudmcp.server.formatting import format_mb, format_timestamp, join, render_list
from cloudmcp.server.harness import ToolContext, ToolSpec
from cloudmcp.server.params import ParsedArgs
from cloudmcp.tools._common import pick

logger = logging.getLogger(__name__)


async def _region_labels(ctx: ToolContext) -> dict[str, str]:
    try:
        regions = await ctx.cache.get_regions(ctx.client)
    except UpstreamError as exc:
        logger.warning("Region labels unavailable: %s", exc)
        return {}
    return {r.id: r.label for r in regions}


def _regions(image: Record, labels: dict[str, str]) -> list[dict[str, Any]]:
    return [
        {
            "region": entry.get("region"),
            "label": labels.get(entry.get("region") or "", ""),
            "status": entry.get("status"),
        }
        for entry in image.get("regions") or []
    ]


def _region_lines(image: Record, labels: dict[str, str]) -> list[str]:
    lines = []
    for entry in _regions(image, labels):
        name = f"{entry['region']} ({entry['label']})" if entry["label"] else entry["region"]
        lines.append(f"  {name}: {entry['status']}")
    return ["Regions:", *lines] if lines else []


async def _list_images(ctx: ToolContext, args: ParsedArgs) -> tuple[list[Record], dict[str, str]]:
    images = await ctx.client.list_images()
    if args["is_public"] is not None:
        images = [img for img in images if bool(img.get("is_public")) == args["is_public"]]
    labels = await _region_labels(ctx) if images else {}
    return images, labels


async def images_list(ctx: ToolContext, args: ParsedArgs) -> str:
    images, labels = await _list_images(ctx, args)

    def stanza(img: Record) -> list[str]:
        lines = [
            f"ID: {img.get('id')}",
            f"Label: {img.get('label')}",
            f"Description: {img.get('description') or ''}",
            f"Type: {img.get('type')}",
            f"Status: {img.get('status')}",
            f"Size: {img.get('size', 0)} MB",
            f"Public: {str(bool(img.get('is_public'))).lower()}",
            f"Created: {format_timestamp(img.get('created'))}",
            *_region_lines(img, labels),
        ]
        if img.get("tags"):
            lines.append(f"Tags: {join(img.get('tags'))}")
        return lines

    return render_list("images", images, stanza)


async def images_list_json(ctx: ToolContext, args: ParsedArgs) -> dict[str, Any]:
    images, labels = await _list_images(ctx, args)
    return {
        "count": len(images),
        "images": [
            {
                "id": img.get("id"),
                "label": img.get("label"),
                "description": img.get("description"),
                "type": img.get("type"),
                "status": img.get("status"),
                "size": img.get("size"),
                "is_public": bool(img.get("is_public")),
                "deprecated": bool(img.get("deprecated")),
                "created": img.get("created"),
                "regions": _regions(img, labels),
                "tags": img.get("tags") or [],
            }
            for img in images
        ],
    }


def _detail(img: Record, labels: dict[str, str], header: str) -> str:
    lines = [
        header,
        f"Image: {img.get('id')} ({img.get('label')})",
        f"Description: {img.get('description') or ''}",
        f"Type: {img.get('type')}",
        f"Status: {img.get('status')}",
        f"Size: {format_mb(img.get('size'))}",
        f"Total Size: {format_mb(img.get('total_size'))}",
        f"Public: {str(bool(img.get('is_public'))).lower()}",
        f"Deprecated: {str(bool(img.get('deprecated'))).lower()}",
        f"Created: {format_timestamp(img.get('created'))}",
        f"Created By: {img.get('created_by') or ''}",
    ]
    if img.get("expiry"):
        lines.append(f"Expires: {format_timestamp(img.get('expiry'))}")
    lines.extend(_region_lines(img, labels))
    if img.get("capabilities"):
        lines.append(f"Capabilities: {join(img.get('capabilities'))}")
    if img.get("tags"):
        lines.append(f"Tags: {join(img.get('tags'))}")
    return "\n".join(lines)


async def image_get(ctx: ToolContext, args: ParsedArgs) -> str:
    img = await ctx.client.get_image(args["image_id"])
    return _detail(img, await _region_labels(ctx), "Image Details:")


async def image_create(ctx: ToolContext, args: ParsedArgs) -> str:
    img = await ctx.client.create_image(pick(args, "disk_id", "label", "description", "cloud_init", "tags"))
    return _detail(img, {}, "Custom image created successfully:")


async def image_update(ctx: ToolContext, args: ParsedArgs) -> str:
    img = await ctx.client.update_image(args["image_id"], pick(args, "label", "description", "tags"))
    return _detail(img, {}, "Image updated successfully:")


async def image_delete(ctx: ToolContext, args: ParsedArgs) -> str:
    await ctx.client.delete_image(args["image_id"])
    return f"Image {args['image_id']} deleted successfully"


async def image_replicate(ctx: ToolContext, args: ParsedArgs) -> str:
    img = await ctx.client.replicate_image(args["image_id"], args["regions"])
    return _detail(img, await _region_labels(ctx), "Image replicated successfully:")


async def image_upload_create(ctx: ToolContext, args: ParsedArgs) -> str:
    upload = await ctx.client.create_image_upload(
        pick(args, "label", "region", "description", "cloud_init", "tags")
    )
    image = upload.get("image") or {}
    return (
        "Image upload URL created successfully:\n"
        f"Image ID: {image.get('id')}\n"
        f"Label: {image.get('label')}\n"
        f"Status: {image.get('status')}\n"
        f"Upload URL: {upload.get('upload_to')}"
    )


_IMAGE_ID = p.string("image_id", "ID of the image, e.g. private/12345", required=True)
_IS_PUBLIC = p.boolean("is_public", "Only public (true) or only private (false) images")


def tools() -> list[ToolSpec]:
    return [
        ToolSpec(
            name="linode_images_list",
            description="List all available Linode images",
            handler=images_list,
            params=(_IS_PUBLIC,),
        ),
        ToolSpec(
            name="linode_images_list_json",
            description="List all available Linode images as JSON",
            handler=images_list_json,
            params=(_IS_PUBLIC,),
        ),
        ToolSpec(
            name="linode_image_get",
            description="Get details of a specific image",
            handler=image_get,
            params=(_IMAGE_ID,),
        ),
        ToolSpec(
            name="linode_image_create",
            description="Create a custom image from a Linode disk",
            handler=image_create,
            params=(
                p.resource_id("disk_id", "ID of the disk to capture"),
                p.string("label", "Label for the image", required=True),
                p.string("description", "Description of the image"),
                p.boolean("cloud_init", "Image supports cloud-init"),
                p.string_array("tags", "Tags to apply"),
            ),
        ),
        ToolSpec(
            name="linode_image_update",
            description="Update an existing custom image",
            handler=image_update,
            params=(
                _IMAGE_ID,
                p.string("label", "New label"),
                p.string("description", "New description"),
                p.string_array("tags", "Replacement tags"),
            ),
        ),
        ToolSpec(
            name="linode_image_delete",
            description="Delete a custom image",
            handler=image_delete,
            params=(_IMAGE_ID,),
        ),
        ToolSpec(
            name="linode_image_replicate",
            description="Replicate a custom image to additional regions",
            handler=image_replicate,
            params=(_IMAGE_ID, p.string_array("regions", "Regions the image should exist in", required=True)),
        ),
        ToolSpec(
            name="linode_image_upload_create",
            description="Create an image upload URL for uploading a custom image file",
            handler=image_upload_create,
            params=(
                p.string("label", "Label for the image", required=True),
                p.string("region", "Region to upload to", required=True),
                p.string("description", "Description of the image"),
                p.boolean("cloud_init", "Image supports cloud-init"),
                p.string_array("tags", "Tags to apply"),
            ),
        ),
    ]
