"""Closed enumerations and the unified field type registry.

TYPE_REGISTRY maps each semantic FieldType to its descriptor:
    - ir_name: type hint string handed to the storage collaborator
    - category: validation category for the request-validation collaborator
    - accepts: Python types a declared default may have
    - serialize: default value → JSON/msgpack-safe value

All type-aware logic (default checking, default serialization, input
shapes) delegates to this single registry. Operation, RelationKind and
FieldType are closed enums: adding a member is a deliberate change that
every exhaustive lookup has to follow.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any


class FieldType(str, Enum):
    """Semantic type of a declared field."""

    INTEGER = "integer"
    STRING = "string"
    TEXT = "text"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    JSON = "json"


# Spellings found in hand-written declarations.
FIELD_TYPE_ALIASES: dict[str, FieldType] = {
    "int": FieldType.INTEGER,
    "bool": FieldType.BOOLEAN,
}


class Operation(str, Enum):
    """Operations an access policy can grant."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    COUNT = "count"


# Canonical emission order.
OPERATIONS: tuple[Operation, ...] = tuple(Operation)


class RelationKind(str, Enum):
    BELONGS_TO = "belongsTo"
    HAS_MANY = "hasMany"


# belongsTo on one side pairs with hasMany on the other.
INVERSE_KIND: dict[RelationKind, RelationKind] = {
    RelationKind.BELONGS_TO: RelationKind.HAS_MANY,
    RelationKind.HAS_MANY: RelationKind.BELONGS_TO,
}


@dataclass(frozen=True, slots=True)
class TypeDescriptor:
    """Describes how a semantic field type maps to collaborator concerns."""

    ir_name: str  # "int", "str", "datetime" for the storage collaborator
    category: str  # "numeric", "string", "bool", "datetime", "generic"
    accepts: tuple[type, ...]  # allowed Python types of a declared default
    serialize: Callable[[Any], Any]  # default → JSON/msgpack-safe value


def _isoformat(value: Any) -> Any:
    return value.isoformat() if isinstance(value, date) else value


TYPE_REGISTRY: dict[FieldType, TypeDescriptor] = {
    FieldType.INTEGER: TypeDescriptor("int", "numeric", (int,), lambda v: v),
    FieldType.STRING: TypeDescriptor("str", "string", (str,), lambda v: v),
    FieldType.TEXT: TypeDescriptor("text", "string", (str,), lambda v: v),
    FieldType.BOOLEAN: TypeDescriptor("bool", "bool", (bool,), lambda v: v),
    # "now" and ISO strings are passed through to the collaborator.
    FieldType.DATE: TypeDescriptor("date", "datetime", (date, str), _isoformat),
    FieldType.DATETIME: TypeDescriptor("datetime", "datetime", (datetime, str), _isoformat),
    FieldType.JSON: TypeDescriptor(
        "json", "generic", (dict, list, str, int, float, bool), lambda v: v
    ),
}


def accepts_default(field_type: FieldType, value: Any) -> bool:
    """Check a declared default against the field type.

    bool is rejected for integer fields even though it subclasses int.
    """
    if value is None:
        return True
    if field_type is FieldType.INTEGER and isinstance(value, bool):
        return False
    return isinstance(value, TYPE_REGISTRY[field_type].accepts)


def serialize_default(field_type: FieldType, value: Any) -> Any:
    """Serialize a default value for the compiled artifact."""
    if value is None:
        return None
    return TYPE_REGISTRY[field_type].serialize(value)


__all__ = [
    "FieldType",
    "FIELD_TYPE_ALIASES",
    "Operation",
    "OPERATIONS",
    "RelationKind",
    "INVERSE_KIND",
    "TypeDescriptor",
    "TYPE_REGISTRY",
    "accepts_default",
    "serialize_default",
]
