"""Model declarations, validation and the registry.

Classes:
    Model: Declared domain entity. Provides:
        - Default table name derived from the model name
        - Ordered fields and relations
        - Optional composite primary key
        - Access policy, ownership rule, lifecycle config

    Field: Typed attribute of a Model:
        - type: integer, string, text, boolean, date, datetime, json
        - primary_key / auto_increment / required / unique / default
        - validation: required, maxLength, minLength, pattern, email, url

    Relation: belongsTo / hasMany edge to another model.
    AccessPolicy: roles allowed per operation.
    OwnershipRule: row-level filter tied to an owner field.
    LifecycleConfig: timestamps and softDelete columns.

    ModelRegistry: sealable catalog; register(), get(), list(), seal().

Validation:
    validate_field(): single field checks.
    validate_model(): whole declaration checks.
    parse_model(): mapping → Model, with domainir exceptions.

Example:
    from domainir.models import Field, Model, ModelRegistry

    registry = ModelRegistry()
    registry.register(
        Model(
            name="Foo",
            fields=[
                Field(name="id", type="integer", primary_key=True, auto_increment=True),
                Field(name="name", type="string", required=True),
            ],
        )
    )
    registry.seal()
"""

from .base import AccessPolicy, LifecycleConfig, Model, ModelEvents, OwnershipRule, Relation
from .field import (
    EmailRule,
    Field,
    MaxLengthRule,
    MinLengthRule,
    PatternRule,
    RequiredRule,
    UrlRule,
    ValidationRule,
)
from .loader import load_unit
from .registry import ModelRegistry, ModelSummary
from .validation import parse_model, validate_field, validate_model

__all__ = [
    "Model",
    "Field",
    "Relation",
    "AccessPolicy",
    "OwnershipRule",
    "LifecycleConfig",
    "ModelEvents",
    "ValidationRule",
    "RequiredRule",
    "MaxLengthRule",
    "MinLengthRule",
    "PatternRule",
    "EmailRule",
    "UrlRule",
    "ModelRegistry",
    "ModelSummary",
    "load_unit",
    "parse_model",
    "validate_field",
    "validate_model",
]
