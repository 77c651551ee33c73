"""Support ticket tools."""

from __future__ import annotations

from cloudmcp.linode.client import Record
from cloudmcp.server import params as p
from cloudmcp.server.formatting import format_timestamp, render_details, render_list
from cloudmcp.server.harness import ToolContext, ToolSpec
from cloudmcp.server.params import ParsedArgs
from cloudmcp.tools._common import pick


def _entity(ticket: Record) -> str:
    entity = ticket.get("entity") or {}
    if not entity:
        return "none"
    return f"{entity.get('type')} {entity.get('id')} ({entity.get('label')})"


def _stanza(ticket: Record) -> list[str]:
    return [
        f"ID: {ticket.get('id')} | {ticket.get('summary')}",
        f"  Status: {ticket.get('status')} | Opened: {format_timestamp(ticket.get('opened'))} | "
        f"Entity: {_entity(ticket)}",
    ]


async def tickets_list(ctx: ToolContext, args: ParsedArgs) -> str:
    return render_list("support tickets", await ctx.client.list_support_tickets(), _stanza)


async def ticket_get(ctx: ToolContext, args: ParsedArgs) -> str:
    ticket = await ctx.client.get_support_ticket(args["ticket_id"])
    return render_details(
        "Support Ticket",
        [
            ("ID", ticket.get("id")),
            ("Summary", ticket.get("summary")),
            ("Status", ticket.get("status")),
            ("Entity", _entity(ticket)),
            ("Opened By", ticket.get("opened_by")),
            ("Opened", format_timestamp(ticket.get("opened"))),
            ("Updated", format_timestamp(ticket.get("updated"))),
            ("Closed", format_timestamp(ticket.get("closed")) if ticket.get("closed") else None),
        ],
        f"\nDescription:\n{ticket.get('description', '')}",
    )


async def ticket_create(ctx: ToolContext, args: ParsedArgs) -> str:
    ticket = await ctx.client.create_support_ticket(
        pick(args, "summary", "description", "linode_id", "domain_id", "nodebalancer_id", "volume_id")
    )
    return (
        "Support ticket created successfully:\n"
        f"ID: {ticket.get('id')}\n"
        f"Summary: {ticket.get('summary')}\n"
        f"Status: {ticket.get('status')}"
    )


async def ticket_reply(ctx: ToolContext, args: ParsedArgs) -> str:
    reply = await ctx.client.reply_support_ticket(args["ticket_id"], args["description"])
    return (
        f"Reply added to support ticket {args['ticket_id']}:\n"
        f"Reply ID: {reply.get('id')}\n"
        f"Created: {format_timestamp(reply.get('created'))}"
    )


_TICKET_ID = p.resource_id("ticket_id", "ID of the support ticket")


def tools() -> list[ToolSpec]:
    return [
        ToolSpec(name="linode_support_tickets_list", description="List all support tickets", handler=tickets_list),
        ToolSpec(
            name="linode_support_ticket_get",
            description="Get details of a specific support ticket",
            handler=ticket_get,
            params=(_TICKET_ID,),
        ),
        ToolSpec(
            name="linode_support_ticket_create",
            description="Create a new support ticket",
            handler=ticket_create,
            params=(
                p.string("summary", "One-line summary", required=True),
                p.string("description", "Full description of the issue", required=True),
                p.integer("linode_id", "Related Linode", minimum=1),
                p.integer("domain_id", "Related domain", minimum=1),
                p.integer("nodebalancer_id", "Related NodeBalancer", minimum=1),
                p.integer("volume_id", "Related volume", minimum=1),
            ),
        ),
        ToolSpec(
            name="linode_support_ticket_reply",
            description="Add a reply to an existing support ticket",
            handler=ticket_reply,
            params=(_TICKET_ID, p.string("description", "Reply text", required=True)),
        ),
    ]
