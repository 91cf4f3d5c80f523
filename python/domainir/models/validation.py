"""Field and model descriptor validation.

validate_field() checks one field in isolation, validate_model() checks a
whole declaration as a unit. Both raise on the first broken invariant and
never modify the declaration they inspect, so a failed registration leaves
nothing behind.

parse_model() builds a Model from a mapping (a JSON declaration, for
instance) and reports pydantic validation failures through the same
exception types.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from domainir.core.types import FieldType, Operation, RelationKind, accepts_default
from domainir.exceptions import (
    CompositeKeyError,
    InvalidFieldError,
    InvalidModelError,
    OwnershipFieldMissingError,
)
from domainir.models.base import Model
from domainir.models.field import Field
from domainir.models.utils import _field_index_from_loc, _format_loc

# Lifecycle columns are looked up under these names unless overridden.
DEFAULT_LIFECYCLE_FIELDS = ("createdAt", "updatedAt", "deletedAt")


def validate_field(model_name: str, field: Field, *, composite_key: bool = False) -> None:
    """Validate a single field declaration.

    Raises:
        InvalidFieldError: name, type, auto-increment, rule or default problem
    """
    name = field.name
    if not name or not name.strip():
        raise InvalidFieldError(model_name, name, "field name must not be empty")

    if not isinstance(field.type, FieldType):
        raise InvalidFieldError(model_name, name, f"unknown field type {field.type!r}")

    if field.auto_increment:
        if field.type is not FieldType.INTEGER:
            raise InvalidFieldError(
                model_name, name, "autoIncrement requires an integer field"
            )
        if not field.primary_key or composite_key:
            raise InvalidFieldError(
                model_name, name, "autoIncrement is only valid on a sole primary key"
            )

    for index, rule in enumerate(field.validation):
        if rule.type in ("maxLength", "minLength"):
            if rule.value < 0:
                raise InvalidFieldError(
                    model_name,
                    name,
                    f"validation[{index}] {rule.type} must be a non-negative integer",
                )
        elif rule.type == "pattern":
            try:
                re.compile(rule.value)
            except re.error as exc:
                raise InvalidFieldError(
                    model_name,
                    name,
                    f"validation[{index}] pattern does not compile: {exc}",
                ) from exc

    max_lengths = [rule.value for rule in field.rules_of("maxLength")]
    min_lengths = [rule.value for rule in field.rules_of("minLength")]
    if max_lengths and min_lengths and min(max_lengths) < max(min_lengths):
        raise InvalidFieldError(model_name, name, "minLength exceeds maxLength")

    if not accepts_default(field.type, field.default):
        raise InvalidFieldError(
            model_name,
            name,
            f"default {field.default!r} is not a valid {field.type.value}",
        )


def validate_model(
    model: Model,
    *,
    lifecycle_fields: tuple[str, str, str] = DEFAULT_LIFECYCLE_FIELDS,
) -> None:
    """Validate a model declaration as a unit.

    Raises:
        InvalidFieldError: a field is invalid or its name is repeated
        CompositeKeyError: composite primary key is malformed
        OwnershipFieldMissingError: ownership names an unknown field
        InvalidModelError: any other broken invariant
    """
    name = model.name
    if not name or not name.strip():
        raise InvalidModelError(name, "model name must not be empty")
    if not model.fields:
        raise InvalidModelError(name, "model must declare at least one field")

    composite = model.primary_key is not None
    seen: set[str] = set()
    for field in model.fields:
        validate_field(name, field, composite_key=composite)
        if field.name in seen:
            raise InvalidFieldError(name, field.name, "duplicate field name")
        seen.add(field.name)

    _validate_primary_key(model, seen)
    _validate_relations(model, seen)
    _validate_lifecycle(model, lifecycle_fields)
    _validate_access(model)

    if model.ownership is not None and model.ownership.field not in seen:
        raise OwnershipFieldMissingError(name, model.ownership.field)


def _validate_primary_key(model: Model, field_names: set[str]) -> None:
    flagged = [f.name for f in model.fields if f.primary_key]

    if model.primary_key is None:
        if not flagged:
            raise InvalidModelError(model.name, "no primary key declared")
        if len(flagged) > 1:
            raise InvalidModelError(
                model.name,
                f"several fields marked primaryKey ({', '.join(flagged)}); "
                "declare a composite primaryKey instead",
            )
        return

    if flagged:
        raise CompositeKeyError(
            model.name,
            f"composite primaryKey cannot be combined with primaryKey fields "
            f"({', '.join(flagged)})",
        )
    key = model.primary_key
    if len(key) < 2:
        raise CompositeKeyError(model.name, "composite primaryKey needs at least two fields")
    if len(set(key)) != len(key):
        raise CompositeKeyError(model.name, "composite primaryKey repeats a field")
    for key_field in key:
        if key_field not in field_names:
            raise CompositeKeyError(
                model.name, f"composite primaryKey references unknown field '{key_field}'"
            )


def _validate_relations(model: Model, field_names: set[str]) -> None:
    seen: set[str] = set()
    for relation in model.relations:
        if not relation.name:
            raise InvalidModelError(model.name, "relation name must not be empty")
        if relation.name in seen:
            raise InvalidModelError(model.name, f"duplicate relation name '{relation.name}'")
        if relation.name in field_names:
            raise InvalidModelError(
                model.name, f"relation '{relation.name}' shadows a field of the same name"
            )
        if not relation.target:
            raise InvalidModelError(model.name, f"relation '{relation.name}' has no target")
        if relation.kind is RelationKind.BELONGS_TO and not relation.foreign_key:
            raise InvalidModelError(
                model.name, f"belongsTo relation '{relation.name}' must name a foreignKey"
            )
        seen.add(relation.name)


def _validate_lifecycle(model: Model, lifecycle_fields: tuple[str, str, str]) -> None:
    created_at, updated_at, deleted_at = lifecycle_fields
    managed: list[str] = []
    if model.config.timestamps:
        managed.extend([created_at, updated_at])
    if model.config.soft_delete:
        managed.append(deleted_at)

    for column in managed:
        declared = model.get_field(column)
        if declared is None:
            continue
        if declared.type is not FieldType.DATETIME:
            raise InvalidFieldError(
                model.name, column, "lifecycle column must be of type datetime"
            )
        if column == deleted_at and declared.is_required:
            raise InvalidFieldError(
                model.name, column, "softDelete column must not be required"
            )


def _validate_access(model: Model) -> None:
    for operation in Operation:
        for role in model.access.roles_for(operation):
            if not isinstance(role, str) or not role.strip():
                raise InvalidModelError(
                    model.name, f"access.{operation.value} contains an empty role name"
                )


def parse_model(data: Mapping[str, Any] | Model) -> Model:
    """Build a Model from a mapping, translating pydantic errors.

    Raises:
        InvalidFieldError: the first error lies inside fields[i]
        InvalidModelError: any other structural error
    """
    if isinstance(data, Model):
        return data
    if not isinstance(data, Mapping):
        raise InvalidModelError("<unknown>", f"expected a mapping, got {type(data).__name__}")

    name = str(data.get("name") or "<unnamed>")
    try:
        return Model.model_validate(dict(data))
    except ValidationError as exc:
        error = exc.errors()[0]
        loc = tuple(error.get("loc", ()))
        message = f"{_format_loc(loc)}: {error.get('msg', 'invalid value')}"
        index = _field_index_from_loc(loc)
        if index is not None:
            fields = data.get("fields") or []
            field_name = f"fields[{index}]"
            if index < len(fields) and isinstance(fields[index], Mapping):
                field_name = str(fields[index].get("name") or field_name)
            raise InvalidFieldError(name, field_name, message) from exc
        raise InvalidModelError(name, message) from exc


__all__ = [
    "DEFAULT_LIFECYCLE_FIELDS",
    "validate_field",
    "validate_model",
    "parse_model",
]
