"""Catalog of declared models.

A ModelRegistry is an explicit instance handed to every consumer (usually
through a SchemaContext). Models live in an insertion-ordered arena with a
name → index map next to it; relations are resolved against that index only
after the registry is sealed.

Lifecycle:
    open    register() accepts new models
    sealed  register() raises RegistrySealedError; reads need no locking

Methods:
    register(model):
        Validate and store a copy. Raises DuplicateModelError if the name is
        taken (the existing entry is kept), RegistrySealedError once sealed,
        InvalidModelError / InvalidFieldError for bad declarations.

    register_many(models):
        Register in order, stopping at the first failure.

    get(name) -> Model:
        Return a copy of the model. Raises NotFoundError.

    list() -> tuple[Model, ...]:
        Return copies of every model, in registration order.

    summaries() -> tuple[ModelSummary, ...]:
        Catalog view for discovery/introspection collaborators.

    seal():
        One-way transition to read-only.

Example:
    registry = ModelRegistry()
    registry.register(AuthUser)
    registry.register(AuthRole)
    registry.seal()
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from domainir.exceptions import DuplicateModelError, NotFoundError, RegistrySealedError
from domainir.models.base import Model
from domainir.models.validation import (
    DEFAULT_LIFECYCLE_FIELDS,
    parse_model,
    validate_model,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ModelSummary:
    """Catalog entry returned by ModelRegistry.summaries()."""

    name: str
    module: str | None
    table: str
    storage: bool
    field_count: int
    relation_count: int
    description: str | None = None


class ModelRegistry:
    """Insertion-ordered, sealable catalog of Model declarations."""

    def __init__(self, *, lifecycle_fields: tuple[str, str, str] = DEFAULT_LIFECYCLE_FIELDS):
        self._models: list[Model] = []
        self._index: dict[str, int] = {}
        self._sealed = False
        self._lock = threading.Lock()
        self._lifecycle_fields = lifecycle_fields

    def register(self, model: Model | Mapping[str, Any]) -> None:
        """Validate a model and store a private copy."""
        declared = parse_model(model)
        if self._sealed:
            raise RegistrySealedError(declared.name)
        validate_model(declared, lifecycle_fields=self._lifecycle_fields)
        entry = declared.model_copy(deep=True)

        with self._lock:
            if self._sealed:
                raise RegistrySealedError(entry.name)
            if entry.name in self._index:
                raise DuplicateModelError(entry.name)
            self._index[entry.name] = len(self._models)
            self._models.append(entry)

        logger.debug(
            "Registered model %s (module=%s, table=%s)",
            entry.name,
            entry.module or "-",
            entry.table,
        )

    def register_many(self, models: Iterable[Model | Mapping[str, Any]]) -> None:
        for model in models:
            self.register(model)

    def seal(self) -> None:
        """Make the registry read-only. Calling it again is a no-op."""
        with self._lock:
            if self._sealed:
                return
            self._sealed = True
        logger.info("Model registry sealed with %d model(s)", len(self._models))

    @property
    def sealed(self) -> bool:
        return self._sealed

    @property
    def lifecycle_fields(self) -> tuple[str, str, str]:
        """Names of the createdAt, updatedAt and deletedAt columns."""
        return self._lifecycle_fields

    def get(self, name: str) -> Model:
        """Return a copy of the named model."""
        index = self._index.get(name)
        if index is None:
            raise NotFoundError(name)
        return self._models[index].model_copy(deep=True)

    def has(self, name: str) -> bool:
        return name in self._index

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __len__(self) -> int:
        return len(self._models)

    def names(self) -> tuple[str, ...]:
        return tuple(model.name for model in self._models)

    def list(self) -> tuple[Model, ...]:
        """Return copies of every registered model in registration order."""
        return tuple(model.model_copy(deep=True) for model in self._snapshot())

    def by_module(self, module: str) -> tuple[Model, ...]:
        return tuple(
            model.model_copy(deep=True) for model in self._snapshot() if model.module == module
        )

    def summaries(self) -> tuple[ModelSummary, ...]:
        return tuple(
            ModelSummary(
                name=model.name,
                module=model.module,
                table=model.table,
                storage=model.storage,
                field_count=len(model.fields),
                relation_count=len(model.relations),
                description=model.description,
            )
            for model in self._snapshot()
        )

    def _snapshot(self) -> tuple[Model, ...]:
        # Once sealed the arena never changes, so no lock is needed.
        if self._sealed:
            return tuple(self._models)
        with self._lock:
            return tuple(self._models)

    def __repr__(self) -> str:
        state = "sealed" if self._sealed else "open"
        return f"<ModelRegistry {state} models={len(self._models)}>"


__all__ = ["ModelRegistry", "ModelSummary"]
