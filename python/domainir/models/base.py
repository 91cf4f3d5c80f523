"""Model declarations: relations, access policy, ownership and lifecycle.

A Model is declared once by the module that owns it and pushed into a
ModelRegistry by value:

    AuthUserRole = Model(
        name="AuthUserRole",
        module="auth",
        table_name="user_roles",
        fields=[
            Field(name="userId", type="integer", required=True),
            Field(name="roleId", type="integer", required=True),
        ],
        primary_key=["userId", "roleId"],
        relations=[
            Relation(name="user", kind="belongsTo", target="AuthUser",
                     foreign_key="userId", inverse_side="userRoles"),
        ],
        access=AccessPolicy(read=["admin"], create=["admin"]),
        config=LifecycleConfig(timestamps=True),
    )

Declarations are plain mutable pydantic models. The registry copies them on
the way in and on the way out, so later edits by the author never reach the
catalog.
"""

from __future__ import annotations

from pydantic import AliasChoices
from pydantic import Field as PydanticField

from domainir.core.types import Operation, RelationKind
from domainir.models.field import Declaration, Field
from domainir.models.utils import _to_snake_case


class Relation(Declaration):
    """Typed edge from the declaring model to a target model."""

    name: str
    kind: RelationKind = PydanticField(validation_alias=AliasChoices("kind", "type"))
    target: str
    foreign_key: str | None = None
    inverse_side: str | None = None
    description: str | None = None


class AccessPolicy(Declaration):
    """Roles allowed per operation. Missing operations deny everyone."""

    create: list[str] = PydanticField(default_factory=list)
    read: list[str] = PydanticField(default_factory=list)
    update: list[str] = PydanticField(default_factory=list)
    delete: list[str] = PydanticField(default_factory=list)
    count: list[str] = PydanticField(default_factory=list)

    def roles_for(self, operation: Operation) -> list[str]:
        return list(getattr(self, Operation(operation).value))

    def roles(self) -> set[str]:
        """Every role named by this policy."""
        named: set[str] = set()
        for operation in Operation:
            named.update(self.roles_for(operation))
        return named


def _default_owner_operations() -> list[Operation]:
    return [Operation.READ, Operation.UPDATE, Operation.DELETE]


class OwnershipRule(Declaration):
    """Row-level filter tied to an owner field."""

    field: str
    auto_filter: bool = False
    operations: list[Operation] = PydanticField(default_factory=_default_owner_operations)
    admin_bypass: bool = True


class LifecycleConfig(Declaration):
    """Columns the storage collaborator manages on behalf of the model."""

    timestamps: bool = False
    soft_delete: bool = False


class ModelEvents(Declaration):
    """Event names a collaborator emits after successful writes."""

    after_create: str | None = None
    after_update: str | None = None
    after_delete: str | None = None


class Model(Declaration):
    """Declared domain entity."""

    name: str
    module: str | None = None
    table_name: str | None = None
    fields: list[Field]
    relations: list[Relation] = PydanticField(default_factory=list)
    primary_key: list[str] | None = None
    access: AccessPolicy = PydanticField(default_factory=AccessPolicy)
    ownership: OwnershipRule | None = None
    config: LifecycleConfig = PydanticField(default_factory=LifecycleConfig)
    # False marks a validation-only model with no physical table.
    storage: bool = PydanticField(
        default=True, validation_alias=AliasChoices("storage", "generatePrisma")
    )
    description: str | None = None
    events: ModelEvents | None = None

    @property
    def table(self) -> str:
        return self.table_name or _to_snake_case(self.name)

    @property
    def is_composite(self) -> bool:
        return self.primary_key is not None

    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> Field | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def get_relation(self, name: str) -> Relation | None:
        for relation in self.relations:
            if relation.name == name:
                return relation
        return None

    def primary_key_fields(self) -> list[str]:
        """Names of the primary-key fields, composite or single."""
        if self.primary_key is not None:
            return list(self.primary_key)
        return [f.name for f in self.fields if f.primary_key]


__all__ = [
    "Model",
    "Relation",
    "AccessPolicy",
    "OwnershipRule",
    "LifecycleConfig",
    "ModelEvents",
]
