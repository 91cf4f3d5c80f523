"""Compilation of a sealed registry into the schema artifact.

Modules:
    relations: relation resolution and the relation graph checks
    policy:    access policy tables and ownership filters
    shapes:    input shapes for request validation
    emitter:   SchemaCompiler, which ties the passes together
    artifact:  frozen output types (CompiledSchema and friends)
"""

from domainir.compiler.artifact import (
    CompiledField,
    CompiledModel,
    CompiledPolicy,
    CompiledRelation,
    CompiledSchema,
    CompileWarning,
    InputField,
    InputShape,
    OwnershipFilter,
    PrimaryKeyDescriptor,
)
from domainir.compiler.emitter import SchemaCompiler, compile_registry
from domainir.compiler.graph import RelationEdge, RelationGraph
from domainir.compiler.relations import RelationResolution, resolve_relations

__all__ = [
    "SchemaCompiler",
    "compile_registry",
    "CompiledSchema",
    "CompiledModel",
    "CompiledField",
    "CompiledRelation",
    "CompiledPolicy",
    "OwnershipFilter",
    "PrimaryKeyDescriptor",
    "InputField",
    "InputShape",
    "CompileWarning",
    "RelationEdge",
    "RelationGraph",
    "RelationResolution",
    "resolve_relations",
]
