"""Schema compiler: sealed registry → CompiledSchema.

Pipeline:
    1. Snapshot the sealed registry and sort models by name.
    2. Resolve relations (errors collected, never raised one by one).
    3. Check that storage models do not share a table.
    4. Abort with SchemaCompileError if any fatal error was found.
    5. Compile policies, synthesize lifecycle columns on storage models and
       build one CompiledModel per declaration.
    6. Build input shapes, gather advisory warnings.

The result is computed once per compiler and cached: a sealed registry never
changes, so every later call (from any thread) sees the same artifact or the
same failure.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence

from domainir.compiler.artifact import (
    CompiledField,
    CompiledModel,
    CompiledRelation,
    CompiledSchema,
    CompileWarning,
    PrimaryKeyDescriptor,
)
from domainir.compiler.policy import collect_roles, compile_policy, policy_warnings
from domainir.compiler.relations import resolve_relations
from domainir.compiler.shapes import build_input_shapes
from domainir.config import DomainIRSettings, get_settings
from domainir.core.types import FieldType, serialize_default
from domainir.exceptions import (
    DomainIRError,
    RegistryNotSealedError,
    SchemaCompileError,
    TableConflictError,
)
from domainir.models.base import Model
from domainir.models.registry import ModelRegistry

logger = logging.getLogger(__name__)


class SchemaCompiler:
    """Compiles a sealed ModelRegistry into a CompiledSchema."""

    def __init__(self, registry: ModelRegistry, settings: DomainIRSettings | None = None):
        self.registry = registry
        self.settings = settings or get_settings()
        self._lock = threading.Lock()
        self._done = False
        self._schema: CompiledSchema | None = None
        self._errors: tuple[DomainIRError, ...] = ()

    def compile(self) -> CompiledSchema:
        """Return the compiled schema, computing it on first use.

        Raises:
            RegistryNotSealedError: the registry still accepts registrations
            SchemaCompileError: the model graph has fatal errors
        """
        if not self.registry.sealed:
            raise RegistryNotSealedError()

        if not self._done:
            with self._lock:
                if not self._done:
                    self._schema, self._errors = self._run()
                    self._done = True

        if self._errors:
            raise SchemaCompileError(self._errors)
        return self._schema  # type: ignore[return-value]

    def _run(self) -> tuple[CompiledSchema | None, tuple[DomainIRError, ...]]:
        models = sorted(self.registry.list(), key=lambda m: m.name)
        resolution = resolve_relations(
            models, strict_inverse=self.settings.strict_inverse_relations
        )

        errors: list[DomainIRError] = list(resolution.errors)
        errors.extend(_table_conflicts(models))
        if errors:
            logger.error("Schema compilation failed with %d error(s)", len(errors))
            for error in errors:
                logger.error("  %s", error)
            return None, tuple(errors)

        roles = collect_roles(
            models,
            extra_roles=self.settings.extra_roles,
            admin_role=self.settings.admin_role,
        )
        index = {model.name: model for model in models}
        compiled = tuple(self._compile_model(model, index, roles) for model in models)

        warnings: list[CompileWarning] = list(resolution.warnings)
        for model in models:
            warnings.extend(policy_warnings(model))
        for warning in warnings:
            logger.warning("[%s] %s: %s", warning.code, warning.model, warning.message)

        schema = CompiledSchema(
            models=compiled,
            graph=resolution.graph,
            roles=roles,
            warnings=tuple(warnings),
            input_shapes=build_input_shapes(models),
        )
        logger.info(
            "Compiled schema: %d model(s), %d relation edge(s), fingerprint %s",
            len(schema.models),
            len(schema.graph.edges),
            schema.fingerprint[:12],
        )
        return schema, ()

    def _compile_model(
        self,
        model: Model,
        index: dict[str, Model],
        roles: Sequence[str],
    ) -> CompiledModel:
        key_fields = model.primary_key_fields()
        composite = model.primary_key is not None

        fields: list[CompiledField] = []
        for field in model.fields:
            in_key = field.name in key_fields
            fields.append(
                CompiledField(
                    name=field.name,
                    type=field.type,
                    required=field.is_required or in_key,
                    unique=field.unique or (in_key and not composite),
                    default=serialize_default(field.type, field.default),
                    auto_increment=field.auto_increment,
                )
            )
        if model.storage:
            fields.extend(self._lifecycle_fields(model))

        sole_key = None if composite else model.get_field(key_fields[0])
        primary_key = PrimaryKeyDescriptor(
            fields=tuple(key_fields),
            composite=composite,
            auto_increment=bool(sole_key and sole_key.auto_increment),
        )

        relations = tuple(
            CompiledRelation(
                name=relation.name,
                kind=relation.kind,
                target=relation.target,
                target_table=index[relation.target].table,
                foreign_key=relation.foreign_key,
                inverse_side=relation.inverse_side,
            )
            for relation in model.relations
        )

        policy, owner_filter = compile_policy(model, roles, admin_role=self.settings.admin_role)

        events = None
        if model.events is not None:
            events = model.events.model_dump(by_alias=True, exclude_none=True) or None

        return CompiledModel(
            name=model.name,
            module=model.module,
            table=model.table,
            storage=model.storage,
            fields=tuple(fields),
            primary_key=primary_key,
            relations=relations,
            access_policy=policy,
            ownership_filter=owner_filter,
            events=events,
        )

    def _lifecycle_fields(self, model: Model) -> list[CompiledField]:
        """Managed columns the author did not declare, appended after declared ones."""
        created_at, updated_at, deleted_at = self.registry.lifecycle_fields
        declared = set(model.field_names())
        synthesized: list[CompiledField] = []

        if model.config.timestamps:
            for column in (created_at, updated_at):
                if column not in declared:
                    synthesized.append(
                        CompiledField(
                            name=column,
                            type=FieldType.DATETIME,
                            required=True,
                            unique=False,
                            managed=True,
                        )
                    )
        if model.config.soft_delete and deleted_at not in declared:
            synthesized.append(
                CompiledField(
                    name=deleted_at,
                    type=FieldType.DATETIME,
                    required=False,
                    unique=False,
                    managed=True,
                )
            )
        return synthesized


def _table_conflicts(models: Sequence[Model]) -> list[TableConflictError]:
    owners: dict[str, list[str]] = {}
    for model in models:
        if model.storage:
            owners.setdefault(model.table, []).append(model.name)
    return [
        TableConflictError(table, names)
        for table, names in sorted(owners.items())
        if len(names) > 1
    ]


def compile_registry(
    registry: ModelRegistry, settings: DomainIRSettings | None = None
) -> CompiledSchema:
    """One-shot helper: compile a sealed registry without keeping a compiler."""
    return SchemaCompiler(registry, settings).compile()


__all__ = ["SchemaCompiler", "compile_registry"]
