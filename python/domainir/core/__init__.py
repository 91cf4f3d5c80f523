"""Closed enumerations and the field type registry."""

from domainir.core.types import (
    OPERATIONS,
    TYPE_REGISTRY,
    FieldType,
    Operation,
    RelationKind,
    TypeDescriptor,
)

__all__ = [
    "FieldType",
    "Operation",
    "OPERATIONS",
    "RelationKind",
    "TypeDescriptor",
    "TYPE_REGISTRY",
]
