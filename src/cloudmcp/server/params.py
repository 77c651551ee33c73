"""Declared tool parameters: one parser and one JSON-schema builder for all tools.

Each tool lists its :class:`Param` descriptors; :func:`parse_arguments` turns
the raw MCP argument mapping into a plain dict of typed values and
:func:`to_json_schema` derives the schema advertised to the host.  Every
failure is an :class:`~cloudmcp.core.errors.InvalidArgumentError` naming the
offending field.
"""

from __future__ import annotations

import ipaddress
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from cloudmcp.core.errors import InvalidArgumentError

ParsedArgs = dict[str, Any]


class ParamKind(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING_ARRAY = "string_array"
    OBJECT = "object"
    OBJECT_ARRAY = "object_array"
    IP = "ip"


@dataclass(frozen=True)
class Param:
    """One named tool argument."""

    name: str
    kind: ParamKind = ParamKind.STRING
    description: str = ""
    required: bool = False
    default: Any = None
    choices: tuple[str, ...] = ()
    minimum: int | None = None

    def schema(self) -> dict[str, Any]:
        prop: dict[str, Any]
        if self.kind is ParamKind.STRING_ARRAY:
            prop = {"type": "array", "items": {"type": "string"}}
        elif self.kind is ParamKind.OBJECT_ARRAY:
            prop = {"type": "array", "items": {"type": "object"}}
        elif self.kind is ParamKind.IP:
            prop = {"type": "string"}
        else:
            prop = {"type": self.kind.value}
        if self.description:
            prop["description"] = self.description
        if self.choices:
            prop["enum"] = list(self.choices)
        if self.minimum is not None:
            prop["minimum"] = self.minimum
        if self.default is not None:
            prop["default"] = self.default
        return prop


# Convenience constructors -------------------------------------------------


def string(name: str, description: str = "", *, required: bool = False, **kw: Any) -> Param:
    return Param(name, ParamKind.STRING, description, required, **kw)


def integer(name: str, description: str = "", *, required: bool = False, **kw: Any) -> Param:
    return Param(name, ParamKind.INTEGER, description, required, **kw)


def resource_id(name: str, description: str = "") -> Param:
    """A required positive integer identifier."""
    return Param(name, ParamKind.INTEGER, description, True, minimum=1)


def number(name: str, description: str = "", *, required: bool = False, **kw: Any) -> Param:
    return Param(name, ParamKind.NUMBER, description, required, **kw)


def boolean(name: str, description: str = "", *, required: bool = False, **kw: Any) -> Param:
    return Param(name, ParamKind.BOOLEAN, description, required, **kw)


def string_array(name: str, description: str = "", *, required: bool = False) -> Param:
    return Param(name, ParamKind.STRING_ARRAY, description, required)


def obj(name: str, description: str = "", *, required: bool = False) -> Param:
    return Param(name, ParamKind.OBJECT, description, required)


def object_array(name: str, description: str = "", *, required: bool = False) -> Param:
    return Param(name, ParamKind.OBJECT_ARRAY, description, required)


def ip(name: str, description: str = "", *, required: bool = False) -> Param:
    return Param(name, ParamKind.IP, description, required)


# Parsing ------------------------------------------------------------------


def _parse_integer(param: Param, value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidArgumentError(param.name, "expected an integer")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidArgumentError(param.name, "expected an integer")
        value = int(value)
    elif isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise InvalidArgumentError(param.name, "expected an integer") from None
    elif not isinstance(value, int):
        raise InvalidArgumentError(param.name, "expected an integer")
    if param.minimum is not None and value < param.minimum:
        raise InvalidArgumentError(param.name, f"must be at least {param.minimum}")
    return value


def _parse_value(param: Param, value: Any) -> Any:
    kind = param.kind
    if kind is ParamKind.STRING:
        if not isinstance(value, str):
            raise InvalidArgumentError(param.name, "expected a string")
        if param.required and not value.strip():
            raise InvalidArgumentError(param.name, "must not be empty")
        if param.choices and value not in param.choices:
            raise InvalidArgumentError(param.name, f"must be one of {', '.join(param.choices)}")
        return value
    if kind is ParamKind.INTEGER:
        return _parse_integer(param, value)
    if kind is ParamKind.NUMBER:
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise InvalidArgumentError(param.name, "expected a number")
        return value
    if kind is ParamKind.BOOLEAN:
        if not isinstance(value, bool):
            raise InvalidArgumentError(param.name, "expected a boolean")
        return value
    if kind is ParamKind.STRING_ARRAY:
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise InvalidArgumentError(param.name, "expected an array of strings")
        if param.required and not value:
            raise InvalidArgumentError(param.name, "must not be empty")
        return list(value)
    if kind is ParamKind.OBJECT:
        if not isinstance(value, dict):
            raise InvalidArgumentError(param.name, "expected an object")
        return dict(value)
    if kind is ParamKind.OBJECT_ARRAY:
        if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
            raise InvalidArgumentError(param.name, "expected an array of objects")
        return [dict(v) for v in value]
    if kind is ParamKind.IP:
        if not isinstance(value, str):
            raise InvalidArgumentError(param.name, "invalid IP address")
        try:
            return str(ipaddress.ip_address(value.strip()))
        except ValueError:
            raise InvalidArgumentError(param.name, "invalid IP address") from None
    raise InvalidArgumentError(param.name, f"unsupported parameter kind {kind.value}")


def parse_arguments(raw: Mapping[str, Any] | None, params: Sequence[Param]) -> ParsedArgs:
    """Extract every declared parameter from *raw*.

    Missing optional parameters take their default; undeclared keys are
    ignored.

    Raises:
        InvalidArgumentError: On the first missing, mistyped, or malformed field.
    """
    raw = raw or {}
    parsed: ParsedArgs = {}
    for param in params:
        value = raw.get(param.name)
        if value is None:
            if param.required:
                raise InvalidArgumentError(param.name, "missing required argument")
            parsed[param.name] = param.default
            continue
        parsed[param.name] = _parse_value(param, value)
    return parsed


def to_json_schema(params: Sequence[Param]) -> dict[str, Any]:
    """The ``inputSchema`` object advertised for a tool."""
    schema: dict[str, Any] = {
        "type": "object",
        "properties": {p.name: p.schema() for p in params},
    }
    required = [p.name for p in params if p.required]
    if required:
        schema["required"] = required
    return schema
