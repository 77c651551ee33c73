"""Text rendering shared by every tool handler.

Lists open with ``Found N <kind>:``; single records open with
``<Kind> Details:`` followed by ``Key: Value`` lines.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from cloudmcp.utils.logging import REDACTED

_UNITS = ("B", "KB", "MB", "GB", "TB", "PB")


def format_bytes(size: int | float | None) -> str:
    """Render a byte count with a binary unit: ``1536 -> "1.5 KB"``."""
    if size is None:
        return "n/a"
    value = float(size)
    for unit in _UNITS:
        if abs(value) < 1024 or unit == _UNITS[-1]:
            if unit == "B":
                return f"{int(value)} B"
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} {_UNITS[-1]}"


def format_mb(megabytes: int | float | None) -> str:
    """Render a provider size given in MB (memory, disk)."""
    if megabytes is None:
        return "n/a"
    return format_bytes(float(megabytes) * 1024 * 1024)


def format_timestamp(value: str | datetime | None) -> str:
    """Normalise a provider timestamp to ``YYYY-MM-DD HH:MM:SS``."""
    if not value:
        return "n/a"
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return parsed.strftime("%Y-%m-%d %H:%M:%S")


def format_bool(value: Any, *, on: str = "Enabled", off: str = "Disabled") -> str:
    return on if value else off


def join(values: Iterable[Any] | None, *, empty: str = "none") -> str:
    items = [str(v) for v in values or () if v not in (None, "")]
    return ", ".join(items) if items else empty


def list_header(count: int, kind: str) -> str:
    return f"Found {count} {kind}:"


def details_header(kind: str) -> str:
    return f"{kind} Details:"


def empty_list(kind: str) -> str:
    return f"No {kind} found."


def key_values(pairs: Iterable[tuple[str, Any]]) -> list[str]:
    """``Key: Value`` lines, skipping pairs whose value is ``None``."""
    return [f"{key}: {value}" for key, value in pairs if value is not None]


def render_list(kind: str, items: list[Any], stanza: Any) -> str:
    """Header plus one blank-line-separated stanza per item.

    *stanza* maps one item to its list of lines.
    """
    if not items:
        return empty_list(kind)
    blocks = ["\n".join(stanza(item)) for item in items]
    return list_header(len(items), kind) + "\n\n" + "\n\n".join(blocks)


def render_details(kind: str, pairs: Iterable[tuple[str, Any]], *extra: str) -> str:
    lines = [details_header(kind), *key_values(pairs)]
    lines.extend(e for e in extra if e)
    return "\n".join(lines)


def redact_fields(record: Mapping[str, Any], *fields: str) -> dict[str, Any]:
    """Copy of *record* with the named fields masked (when present)."""
    masked = dict(record)
    for field in fields:
        if masked.get(field):
            masked[field] = REDACTED
    return masked


def compact_json(document: Any) -> str:
    return json.dumps(document, separators=(",", ":"), default=str)
