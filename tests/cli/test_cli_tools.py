"""Tests for ``cloudmcp tools``, ``--version`` and the group help."""

from __future__ import annotations

from click.testing import CliRunner

from cloudmcp import __version__
from cloudmcp.cli import main


class TestToolsList:
    def test_list_all(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["tools", "list"])

        assert result.exit_code == 0
        assert "Registered Tools (" in result.output

    def test_filter_by_service(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["tools", "list", "--service", "cloudmcp"])

        assert result.exit_code == 0
        assert "cloudmcp_version" in result.output
        assert "linode_instances_list" not in result.output

    def test_unknown_service(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["tools", "list", "--service", "aws"])

        assert result.exit_code == 0
        assert "No tools registered." in result.output


class TestVersionOption:
    def test_version(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert f"cloudmcp, version {__version__}" in result.output


class TestGroupHelp:
    def test_short_help_flag(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["-h"])

        assert result.exit_code == 0
        for command in ("serve", "tools", "http-profile", "config"):
            assert command in result.output
        assert "LINODE_TOKEN" in result.output
