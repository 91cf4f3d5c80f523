"""Exception hierarchy for domainir.

All domainir exceptions inherit from DomainIRError, allowing catch-all handling:

    try:
        context = bootstrap(["myapp.models.auth"])
        schema = context.compile()
    except DomainIRError as e:
        print(f"Schema error: {e}")

Exception hierarchy:
    DomainIRError (base)
    ├── RegistryError
    │   ├── DuplicateModelError      - model name already registered
    │   ├── RegistrySealedError      - register() after seal()
    │   ├── RegistryNotSealedError   - compile() before seal()
    │   └── NotFoundError            - get() on an unknown model
    ├── InvalidModelError            - model declaration breaks an invariant
    │   ├── InvalidFieldError        - field declaration breaks an invariant
    │   ├── CompositeKeyError        - bad composite primary key
    │   └── OwnershipFieldMissingError
    ├── RelationError                - collected at compile time
    │   ├── DanglingRelationError    - relation target not registered
    │   ├── DanglingForeignKeyError  - foreign key field missing
    │   └── InverseRelationError     - inverse side missing or inconsistent
    ├── TableConflictError           - two storage models share a table
    ├── SchemaCompileError           - aggregate of compile-time errors
    └── DeclarationLoadError         - a model-defining unit failed to load

Registration-time errors surface immediately to the caller. Compile-time
errors are collected and raised together as one SchemaCompileError.
"""

from __future__ import annotations

from collections.abc import Iterable


class DomainIRError(Exception):
    """Base exception for all domainir errors."""


class RegistryError(DomainIRError):
    """Raised for registry state and lookup problems."""


class DuplicateModelError(RegistryError):
    """Raised when a model name is registered twice."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Model '{name}' is already registered")


class RegistrySealedError(RegistryError):
    """Raised when registering into a sealed registry."""

    def __init__(self, name: str | None = None):
        self.name = name
        target = f" model '{name}'" if name else ""
        super().__init__(f"Registry is sealed, cannot register{target}")


class RegistryNotSealedError(RegistryError):
    """Raised when compiling a registry that still accepts registrations."""

    def __init__(self) -> None:
        super().__init__("Registry must be sealed before compiling")


class NotFoundError(RegistryError):
    """Raised when a model name is not in the registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Model '{name}' is not registered")


class InvalidModelError(DomainIRError):
    """Raised when a model declaration is invalid."""

    def __init__(self, model: str, reason: str):
        self.model = model
        self.reason = reason
        super().__init__(self._format())

    def _format(self) -> str:
        return f"Invalid model '{self.model}': {self.reason}"


class InvalidFieldError(InvalidModelError):
    """Raised when a single field declaration is invalid."""

    def __init__(self, model: str, field: str, reason: str):
        self.field = field
        super().__init__(model, reason)

    def _format(self) -> str:
        return f"Invalid field '{self.model}.{self.field}': {self.reason}"


class CompositeKeyError(InvalidModelError):
    """Raised when a composite primary key is malformed."""


class OwnershipFieldMissingError(InvalidModelError):
    """Raised when an ownership rule names a field the model lacks."""

    def __init__(self, model: str, field: str):
        self.field = field
        super().__init__(model, f"ownership field '{field}' does not exist")


class RelationError(DomainIRError):
    """Base for relation problems found while resolving the model graph."""

    def __init__(self, model: str, relation: str, message: str):
        self.model = model
        self.relation = relation
        super().__init__(message)


class DanglingRelationError(RelationError):
    """Raised when a relation targets an unregistered model."""

    def __init__(self, model: str, relation: str, target: str):
        self.target = target
        super().__init__(
            model,
            relation,
            f"Relation '{model}.{relation}' targets unknown model '{target}'",
        )


class DanglingForeignKeyError(RelationError):
    """Raised when a relation's foreign key field does not exist."""

    def __init__(self, model: str, relation: str, field: str, owner: str | None = None):
        self.field = field
        self.owner = owner or model
        super().__init__(
            model,
            relation,
            f"Relation '{model}.{relation}' uses foreign key '{field}' "
            f"which is not a field of '{self.owner}'",
        )


class InverseRelationError(RelationError):
    """Raised when a relation's inverse side is missing or disagrees."""

    def __init__(self, model: str, relation: str, target: str, inverse: str, reason: str):
        self.target = target
        self.inverse = inverse
        self.reason = reason
        super().__init__(
            model,
            relation,
            f"Relation '{model}.{relation}' inverse side '{target}.{inverse}': {reason}",
        )


class TableConflictError(DomainIRError):
    """Raised when two storage models map to the same table."""

    def __init__(self, table: str, models: Iterable[str]):
        self.table = table
        self.models = tuple(models)
        names = ", ".join(self.models)
        super().__init__(f"Table '{table}' is declared by several models: {names}")


class SchemaCompileError(DomainIRError):
    """Raised when compilation finds one or more fatal errors.

    Carries every error found in the pass, not only the first one.
    """

    def __init__(self, errors: Iterable[DomainIRError]):
        self.errors = tuple(errors)
        lines = "\n".join(f"  - {error}" for error in self.errors)
        super().__init__(f"Schema compilation failed with {len(self.errors)} error(s):\n{lines}")


class DeclarationLoadError(DomainIRError):
    """Raised when a model-defining unit cannot be loaded."""

    def __init__(self, unit: str, reason: str):
        self.unit = unit
        self.reason = reason
        super().__init__(f"Cannot load model unit '{unit}': {reason}")


__all__ = [
    "DomainIRError",
    "RegistryError",
    "DuplicateModelError",
    "RegistrySealedError",
    "RegistryNotSealedError",
    "NotFoundError",
    "InvalidModelError",
    "InvalidFieldError",
    "CompositeKeyError",
    "OwnershipFieldMissingError",
    "RelationError",
    "DanglingRelationError",
    "DanglingForeignKeyError",
    "InverseRelationError",
    "TableConflictError",
    "SchemaCompileError",
    "DeclarationLoadError",
]
