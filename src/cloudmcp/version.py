"""Build and runtime version information."""

from __future__ import annotations

import os
import platform
from collections.abc import Mapping

from pydantic import BaseModel

from cloudmcp import __version__

API_VERSION = "0.1.0"


class VersionInfo(BaseModel):
    version: str
    api_version: str
    build_date: str
    git_commit: str
    git_branch: str
    python_version: str
    platform: str
    features: dict[str, str]

    def __str__(self) -> str:
        return (
            f"CloudMCP v{self.version} (MCP: v{self.api_version}, "
            f"{self.platform}, {self.git_commit})"
        )

    def build_info(self) -> str:
        return (
            "CloudMCP Build Information:\n"
            f"  Version: {self.version}\n"
            f"  MCP Protocol: {self.api_version}\n"
            f"  Build Date: {self.build_date}\n"
            f"  Git Commit: {self.git_commit}\n"
            f"  Git Branch: {self.git_branch}\n"
            f"  Python Version: {self.python_version}\n"
            f"  Platform: {self.platform}"
        )

    def to_document(self) -> dict[str, object]:
        """The JSON shape reported by ``cloudmcp_version_json``.

        ``go_version`` is kept as the key name for client compatibility and
        carries the Python runtime version.
        """
        return {
            "version": self.version,
            "api_version": self.api_version,
            "build_date": self.build_date,
            "git_commit": self.git_commit,
            "git_branch": self.git_branch,
            "go_version": self.python_version,
            "platform": self.platform,
            "features": dict(self.features),
        }


def get_info(environ: Mapping[str, str] | None = None) -> VersionInfo:
    env = os.environ if environ is None else environ
    return VersionInfo(
        version=__version__,
        api_version=API_VERSION,
        build_date=env.get("CLOUDMCP_BUILD_DATE") or "unknown",
        git_commit=env.get("CLOUDMCP_GIT_COMMIT") or "dev",
        git_branch=env.get("CLOUDMCP_GIT_BRANCH") or "main",
        python_version=platform.python_version(),
        platform=f"{platform.system().lower()}/{platform.machine().lower()}",
        features={
            "tools": "accounts,reference,compute,storage,networking,databases,support",
            "logging": "structured",
            "protocol": "mcp",
            "mode": "multi-account",
        },
    )
