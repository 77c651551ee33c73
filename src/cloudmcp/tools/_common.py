"""Small helpers shared by the tool modules."""

from __future__ import annotations

from typing import Any

from cloudmcp.core.errors import InvalidArgumentError
from cloudmcp.server.params import ParsedArgs


def pick(args: ParsedArgs, *keys: str, rename: dict[str, str] | None = None) -> dict[str, Any]:
    """Request body made of the given arguments that were actually supplied."""
    rename = rename or {}
    return {rename.get(key, key): args[key] for key in keys if args.get(key) is not None}


def pick_changes(args: ParsedArgs, *keys: str) -> dict[str, Any]:
    """Like :func:`pick`, for updates: at least one of *keys* must be supplied."""
    body = pick(args, *keys)
    if not body:
        raise InvalidArgumentError(", ".join(keys), "at least one field to change is required")
    return body


def ipv4_list(record: dict[str, Any]) -> str:
    return ", ".join(record.get("ipv4") or []) or "none"
