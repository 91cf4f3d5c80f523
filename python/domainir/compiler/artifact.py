"""Compiled schema artifact.

Every type here is a frozen pydantic model. The artifact is the wire
contract between this package and its collaborators:

    CompiledSchema.to_dict()   → {"version": 1, "models": [...], "graph": [...]}
    CompiledSchema.to_json()   → same, as JSON text
    CompiledSchema.to_bytes()  → same, msgpack-encoded

Records use camelCase keys (primaryKey, accessPolicy, ownershipFilter,
foreignKey, ...) and omit keys whose value is None. Models are sorted by
name, so two processes compiling the same declarations emit identical bytes
whatever order they registered them in.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

import msgpack
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from domainir.compiler.graph import RelationGraph
from domainir.core.types import FieldType, Operation, RelationKind

ARTIFACT_VERSION = 1


class Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class CompiledField(Frozen):
    name: str
    type: FieldType
    required: bool
    unique: bool
    default: Any = None
    auto_increment: bool = False
    # Synthesized lifecycle column owned by the storage collaborator.
    managed: bool = False


class PrimaryKeyDescriptor(Frozen):
    fields: tuple[str, ...]
    composite: bool
    auto_increment: bool = False


class CompiledRelation(Frozen):
    name: str
    kind: RelationKind
    target: str
    target_table: str
    foreign_key: str | None = None
    inverse_side: str | None = None


class CompiledPolicy(Frozen):
    """Complete operation × role table. Anything absent is denied."""

    roles: tuple[str, ...]
    table: dict[str, dict[str, bool]]

    def allows(self, operation: Operation | str, role: str) -> bool:
        return self.table.get(Operation(operation).value, {}).get(role, False)

    def allowed_roles(self, operation: Operation | str) -> tuple[str, ...]:
        row = self.table.get(Operation(operation).value, {})
        return tuple(role for role, allowed in row.items() if allowed)


class OwnershipFilter(Frozen):
    """Row-level filter descriptor for the authorization collaborator."""

    owner_field: str
    auto_filter: bool
    applies_to: tuple[Operation, ...]
    admin_bypass: bool
    bypass_roles: tuple[str, ...] = ()

    def applies(self, operation: Operation | str) -> bool:
        return Operation(operation) in self.applies_to

    def bypasses(self, role: str) -> bool:
        return role in self.bypass_roles

    def filters(self, operation: Operation | str, role: str) -> bool:
        """True when a request by role for operation must be owner-filtered."""
        return self.applies(operation) and not self.bypasses(role)


class CompiledModel(Frozen):
    name: str
    module: str | None = None
    table: str
    storage: bool
    fields: tuple[CompiledField, ...]
    primary_key: PrimaryKeyDescriptor
    relations: tuple[CompiledRelation, ...] = ()
    access_policy: CompiledPolicy
    ownership_filter: OwnershipFilter | None = None
    events: dict[str, str] | None = None

    def get_field(self, name: str) -> CompiledField | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)


class InputField(Frozen):
    type: FieldType
    category: str
    required: bool
    rules: tuple[dict[str, Any], ...] = ()


class InputShape(Frozen):
    """Inbound payload shape for one model (validation-shape interface)."""

    model: str
    fields: dict[str, InputField]

    def required_fields(self) -> tuple[str, ...]:
        return tuple(name for name, field in self.fields.items() if field.required)


class CompileWarning(Frozen):
    """Advisory finding. Never blocks emission."""

    code: str
    model: str
    message: str


class CompiledSchema(Frozen):
    version: int = ARTIFACT_VERSION
    models: tuple[CompiledModel, ...]
    graph: RelationGraph
    roles: tuple[str, ...] = ()
    warnings: tuple[CompileWarning, ...] = ()
    input_shapes: dict[str, InputShape] = {}

    def get(self, name: str) -> CompiledModel | None:
        for model in self.models:
            if model.name == name:
                return model
        return None

    def names(self) -> tuple[str, ...]:
        return tuple(model.name for model in self.models)

    def storage_models(self) -> tuple[CompiledModel, ...]:
        return tuple(model for model in self.models if model.storage)

    def to_dict(self) -> dict[str, Any]:
        """Wire form: version, model records and relation edges."""
        return {
            "version": self.version,
            "models": [model.to_dict() for model in self.models],
            "graph": [
                edge.model_dump(mode="json", by_alias=True, exclude_none=True)
                for edge in self.graph.edges
            ],
        }

    def to_json(self, *, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def to_bytes(self) -> bytes:
        return msgpack.packb(self.to_dict(), use_bin_type=True)

    @property
    def fingerprint(self) -> str:
        """sha256 of to_bytes(); equal fingerprints mean identical artifacts."""
        return hashlib.sha256(self.to_bytes()).hexdigest()


__all__ = [
    "ARTIFACT_VERSION",
    "CompiledField",
    "PrimaryKeyDescriptor",
    "CompiledRelation",
    "CompiledPolicy",
    "OwnershipFilter",
    "CompiledModel",
    "InputField",
    "InputShape",
    "CompileWarning",
    "CompiledSchema",
]
