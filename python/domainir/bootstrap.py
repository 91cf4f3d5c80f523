"""Explicit boot sequence.

    context = bootstrap(["myapp.models.auth", "myapp.models.cms"])
    schema = context.compile()

bootstrap() loads every unit in the order given, seals the registry and
returns a SchemaContext. Registration errors propagate immediately: a
process must not get as far as compiling with a malformed or duplicate
model. Consumers receive the context (or its registry) explicitly instead
of reaching for module-level state.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from domainir.compiler.artifact import CompiledSchema, InputShape
from domainir.compiler.emitter import SchemaCompiler
from domainir.config import DomainIRSettings, get_settings
from domainir.models.loader import Unit, load_unit
from domainir.models.registry import ModelRegistry

logger = logging.getLogger(__name__)


@dataclass
class SchemaContext:
    """Sealed registry plus the compiler bound to it."""

    registry: ModelRegistry
    settings: DomainIRSettings
    compiler: SchemaCompiler = field(init=False)

    def __post_init__(self) -> None:
        self.compiler = SchemaCompiler(self.registry, self.settings)

    def compile(self) -> CompiledSchema:
        return self.compiler.compile()

    def input_shapes(self) -> dict[str, InputShape]:
        return self.compile().input_shapes


def bootstrap(
    units: Iterable[Unit],
    *,
    settings: DomainIRSettings | None = None,
    registry: ModelRegistry | None = None,
) -> SchemaContext:
    """Register every unit in order, seal, and return the context."""
    settings = settings or get_settings()
    if registry is None:
        registry = ModelRegistry(lifecycle_fields=settings.lifecycle_fields)

    for unit in units:
        load_unit(unit, registry)

    registry.seal()
    logger.info("Bootstrap finished: %s", ", ".join(registry.names()) or "no models")
    return SchemaContext(registry=registry, settings=settings)


__all__ = ["SchemaContext", "bootstrap"]
