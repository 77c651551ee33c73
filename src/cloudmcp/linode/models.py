"""Typed views of the provider records the core itself reads.

Only the profile (credential check) and the three reference catalogues are
modelled; every other resource travels as the raw JSON mapping and is
formatted field-by-field by its tool handler.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _Record(BaseModel):
    model_config = ConfigDict(extra="allow")


class Profile(_Record):
    """``GET /profile``: the identity behind a token."""

    username: str = ""
    email: str = ""
    uid: int = 0
    restricted: bool = False


class Region(_Record):
    """One entry of ``GET /regions``."""

    id: str
    label: str = ""
    country: str = ""
    status: str = ""
    capabilities: list[str] = Field(default_factory=list)
    site_type: str = ""


class TypePrice(_Record):
    hourly: float | None = None
    monthly: float | None = None


class LinodeType(_Record):
    """One entry of ``GET /linode/types``."""

    id: str
    label: str = ""
    type_class: str = Field(default="", alias="class")
    disk: int = 0
    memory: int = 0
    vcpus: int = 0
    transfer: int = 0
    gpus: int = 0
    price: TypePrice = Field(default_factory=TypePrice)


class Kernel(_Record):
    """One entry of ``GET /linode/kernels``."""

    id: str
    label: str = ""
    version: str = ""
    architecture: str = ""
    kvm: bool = False
    deprecated: bool = False
    built: str | None = None


def parse_records(model: type[_Record], items: list[dict[str, Any]]) -> list[Any]:
    """Validate a list of raw JSON records into *model* instances."""
    return [model.model_validate(item) for item in items]
