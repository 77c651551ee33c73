"""Tests for the shared text formatting helpers."""

from __future__ import annotations

from datetime import datetime

import pytest

from cloudmcp.server.formatting import (
    compact_json,
    format_bool,
    format_bytes,
    format_mb,
    format_timestamp,
    join,
    redact_fields,
    render_details,
    render_list,
)
from cloudmcp.utils.logging import REDACTED


class TestUnits:
    @pytest.mark.parametrize(
        ("size", "expected"),
        [(None, "n/a"), (512, "512 B"), (1536, "1.5 KB"), (1024**3, "1.0 GB"), (5 * 1024**5, "5.0 PB")],
    )
    def test_format_bytes(self, size: int | None, expected: str) -> None:
        assert format_bytes(size) == expected

    def test_format_mb(self) -> None:
        assert format_mb(1024) == "1.0 GB"
        assert format_mb(None) == "n/a"


class TestTimestamps:
    def test_iso_string(self) -> None:
        assert format_timestamp("2024-01-02T03:04:05") == "2024-01-02 03:04:05"

    def test_zulu(self) -> None:
        assert format_timestamp("2024-01-02T03:04:05Z") == "2024-01-02 03:04:05"

    def test_datetime(self) -> None:
        assert format_timestamp(datetime(2024, 5, 6, 7, 8, 9)) == "2024-05-06 07:08:09"

    def test_empty_and_unparseable(self) -> None:
        assert format_timestamp(None) == "n/a"
        assert format_timestamp("") == "n/a"
        assert format_timestamp("yesterday") == "yesterday"


class TestRendering:
    def test_empty_list(self) -> None:
        assert render_list("regions", [], lambda r: [r]) == "No regions found."

    def test_list(self) -> None:
        text = render_list("regions", ["a", "b"], lambda r: [f"ID: {r}", "  more"])
        assert text == "Found 2 regions:\n\nID: a\n  more\n\nID: b\n  more"

    def test_details_skip_none(self) -> None:
        text = render_details("Volume", [("ID", 5), ("Linode", None), ("Size", "20 GB")], "", "Tags: a")
        assert text == "Volume Details:\nID: 5\nSize: 20 GB\nTags: a"

    def test_join(self) -> None:
        assert join(["a", None, "", "b"]) == "a, b"
        assert join(None) == "none"
        assert join([], empty="-") == "-"

    def test_format_bool(self) -> None:
        assert format_bool(True) == "Enabled"
        assert format_bool(0, on="yes", off="no") == "no"

    def test_redact_fields(self) -> None:
        record = {"id": 1, "secret_key": "s3cr3t", "api_key": ""}
        masked = redact_fields(record, "secret_key", "api_key", "missing")
        assert masked == {"id": 1, "secret_key": REDACTED, "api_key": ""}
        assert record["secret_key"] == "s3cr3t"

    def test_compact_json(self) -> None:
        assert compact_json({"a": [1, 2], "b": None}) == '{"a":[1,2],"b":null}'
