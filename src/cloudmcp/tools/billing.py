"""Account billing and usage: invoices, payments, network transfer, region availability."""

from __future__ import annotations

from typing import Any

from cloudmcp.linode.client import Record
from cloudmcp.server import params as p
from cloudmcp.server.formatting import format_timestamp, join, render_details, render_list
from cloudmcp.server.harness import ToolContext, ToolSpec
from cloudmcp.server.params import ParsedArgs


def _usd(amount: Any) -> str:
    return f"${float(amount or 0):.2f}"


def _invoice_stanza(invoice: Record) -> list[str]:
    return [
        f"ID: {invoice.get('id')} | {invoice.get('label')}",
        f"  Date: {format_timestamp(invoice.get('date'))} | Total: {_usd(invoice.get('total'))} "
        f"(subtotal {_usd(invoice.get('subtotal'))}, tax {_usd(invoice.get('tax'))})",
    ]


async def invoices_list(ctx: ToolContext, args: ParsedArgs) -> str:
    return render_list("invoices", await ctx.client.list_invoices(), _invoice_stanza)


async def invoice_get(ctx: ToolContext, args: ParsedArgs) -> str:
    invoice = await ctx.client.get_invoice(args["invoice_id"])
    items = await ctx.client.list_invoice_items(args["invoice_id"])
    item_lines = ["", "Items:"]
    if not items:
        item_lines.append("No items found.")
    for item in items:
        period = f"{format_timestamp(item.get('from'))} to {format_timestamp(item.get('to'))}"
        item_lines.append(f"- {item.get('label')}: {_usd(item.get('total'))} ({period})")
    return render_details(
        "Invoice",
        [
            ("ID", invoice.get("id")),
            ("Label", invoice.get("label")),
            ("Date", format_timestamp(invoice.get("date"))),
            ("Subtotal", _usd(invoice.get("subtotal"))),
            ("Tax", _usd(invoice.get("tax"))),
            ("Total", _usd(invoice.get("total"))),
            ("Billing Source", invoice.get("billing_source")),
        ],
        "\n".join(item_lines),
    )


def _payment_stanza(payment: Record) -> list[str]:
    return [f"ID: {payment.get('id')} | {format_timestamp(payment.get('date'))} | {_usd(payment.get('usd'))}"]


async def payments_list(ctx: ToolContext, args: ParsedArgs) -> str:
    return render_list("payments", await ctx.client.list_payments(), _payment_stanza)


async def transfer_get(ctx: ToolContext, args: ParsedArgs) -> str:
    transfer = await ctx.client.get_account_transfer()
    quota = transfer.get("quota") or 0
    used = transfer.get("used") or 0
    percent = f"{used / quota * 100:.1f}%" if quota else "n/a"
    regional = [
        f"- {r.get('id')}: {r.get('used', 0)} GB used of {r.get('quota', 0)} GB"
        for r in transfer.get("region_transfers") or []
    ]
    return render_details(
        "Network Transfer",
        [
            ("Quota", f"{quota} GB"),
            ("Used", f"{used} GB ({percent})"),
            ("Billable", f"{transfer.get('billable') or 0} GB"),
        ],
        "\n".join(["", "Regional Pools:", *regional]) if regional else "",
    )


def _availability_stanza(entry: Record) -> list[str]:
    return [
        f"Region: {entry.get('region')}",
        f"  Available: {join(entry.get('available'))}",
        f"  Unavailable: {join(entry.get('unavailable'))}",
    ]


async def availability(ctx: ToolContext, args: ParsedArgs) -> str:
    entries = await ctx.client.list_account_availability()
    if args.get("region"):
        entries = [e for e in entries if e.get("region") == args["region"]]
    return render_list("region availability entries", entries, _availability_stanza)


def tools() -> list[ToolSpec]:
    return [
        ToolSpec(
            name="linode_account_invoices_list",
            description="List invoices on the current account",
            handler=invoices_list,
        ),
        ToolSpec(
            name="linode_account_invoice_get",
            description="Get an invoice with its line items",
            handler=invoice_get,
            params=(p.resource_id("invoice_id", "ID of the invoice"),),
        ),
        ToolSpec(
            name="linode_account_payments_list",
            description="List payments made on the current account",
            handler=payments_list,
        ),
        ToolSpec(
            name="linode_account_transfer_get",
            description="Get network transfer quota and usage for this billing cycle",
            handler=transfer_get,
        ),
        ToolSpec(
            name="linode_account_availability",
            description="Show which services are available to the account in each region",
            handler=availability,
            params=(p.string("region", "Only show this region"),),
        ),
    ]
