"""domainir: declarative domain models compiled into a validated schema.

Declare models once, register them through an explicit bootstrap, seal the
registry and compile it into an immutable artifact for the storage,
request-validation and authorization collaborators.

Example:
    from domainir import Field, Model, bootstrap

    MODELS = [
        Model(
            name="Foo",
            fields=[
                Field(name="id", type="integer", primary_key=True, auto_increment=True),
                Field(name="name", type="string", required=True),
            ],
            access={"read": ["user"], "create": ["admin"]},
        )
    ]

    context = bootstrap([lambda registry: registry.register_many(MODELS)])
    schema = context.compile()
    print(schema.to_json())
"""

from domainir.bootstrap import SchemaContext, bootstrap
from domainir.compiler import CompiledSchema, SchemaCompiler
from domainir.config import DomainIRSettings, get_settings
from domainir.core.types import FieldType, Operation, RelationKind
from domainir.exceptions import (
    CompositeKeyError,
    DanglingForeignKeyError,
    DanglingRelationError,
    DeclarationLoadError,
    DomainIRError,
    DuplicateModelError,
    InvalidFieldError,
    InvalidModelError,
    InverseRelationError,
    NotFoundError,
    OwnershipFieldMissingError,
    RegistryNotSealedError,
    RegistrySealedError,
    SchemaCompileError,
    TableConflictError,
)
from domainir.models import (
    AccessPolicy,
    Field,
    LifecycleConfig,
    Model,
    ModelEvents,
    ModelRegistry,
    OwnershipRule,
    Relation,
)

__version__ = "0.1.0"

__all__ = [
    "Model",
    "Field",
    "Relation",
    "AccessPolicy",
    "OwnershipRule",
    "LifecycleConfig",
    "ModelEvents",
    "ModelRegistry",
    "FieldType",
    "Operation",
    "RelationKind",
    "SchemaCompiler",
    "CompiledSchema",
    "SchemaContext",
    "bootstrap",
    "DomainIRSettings",
    "get_settings",
    "DomainIRError",
    "InvalidFieldError",
    "InvalidModelError",
    "DuplicateModelError",
    "RegistrySealedError",
    "RegistryNotSealedError",
    "NotFoundError",
    "DanglingRelationError",
    "DanglingForeignKeyError",
    "InverseRelationError",
    "CompositeKeyError",
    "OwnershipFieldMissingError",
    "TableConflictError",
    "SchemaCompileError",
    "DeclarationLoadError",
]
