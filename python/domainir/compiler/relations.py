"""Relation resolution over the sealed model set.

Runs once per compile, after every model-defining unit has registered, so a
relation may target a model declared anywhere. Every problem in the graph is
collected in one pass:

    DanglingRelationError    target model is not registered
    DanglingForeignKeyError  belongsTo FK missing on the declaring model,
                             or hasMany FK missing on the target model
    InverseRelationError     inverseSide missing on the target, pointing
                             elsewhere, or not pairing belongsTo/hasMany

Inverse problems are fatal when strict_inverse is on and advisory
otherwise. Dependency cycles through belongsTo edges are always advisory.

A hasMany without inverseSide is only reported (missing_inverse_side) when
the target declares no relation naming it as inverse. Pairs whose inverse is
declared on the belongsTo side alone are common and stay quiet.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from domainir.compiler.artifact import CompileWarning
from domainir.compiler.graph import RelationEdge, RelationGraph
from domainir.core.types import INVERSE_KIND, RelationKind
from domainir.exceptions import (
    DanglingForeignKeyError,
    DanglingRelationError,
    InverseRelationError,
    RelationError,
)
from domainir.models.base import Model, Relation


@dataclass
class RelationResolution:
    graph: RelationGraph
    errors: list[RelationError] = field(default_factory=list)
    warnings: list[CompileWarning] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def resolve_relations(
    models: Sequence[Model],
    *,
    strict_inverse: bool = True,
) -> RelationResolution:
    """Resolve every relation of every model against the model set."""
    index = {model.name: model for model in models}
    edges: list[RelationEdge] = []
    errors: list[RelationError] = []
    warnings: list[CompileWarning] = []

    for model in sorted(models, key=lambda m: m.name):
        field_names = set(model.field_names())
        for relation in model.relations:
            fk = relation.foreign_key
            # belongsTo keys live on the declaring model, so they are checked
            # whether or not the target is registered.
            if relation.kind is RelationKind.BELONGS_TO and fk not in field_names:
                errors.append(DanglingForeignKeyError(model.name, relation.name, fk))

            target = index.get(relation.target)
            if target is None:
                errors.append(DanglingRelationError(model.name, relation.name, relation.target))
                continue

            if relation.kind is RelationKind.HAS_MANY and fk and target.get_field(fk) is None:
                errors.append(
                    DanglingForeignKeyError(model.name, relation.name, fk, owner=target.name)
                )

            edges.append(
                RelationEdge(
                    source=model.name,
                    relation=relation.name,
                    kind=relation.kind,
                    target=target.name,
                    foreign_key=fk,
                )
            )

            if relation.inverse_side:
                problem = _check_inverse(model, relation, target)
                if problem is not None:
                    inverse_error = InverseRelationError(
                        model.name, relation.name, target.name, relation.inverse_side, problem
                    )
                    if strict_inverse:
                        errors.append(inverse_error)
                    else:
                        warnings.append(
                            CompileWarning(
                                code="inverse_mismatch",
                                model=model.name,
                                message=str(inverse_error),
                            )
                        )
            elif relation.kind is RelationKind.HAS_MANY and not _has_counterpart(
                model, relation, target
            ):
                warnings.append(
                    CompileWarning(
                        code="missing_inverse_side",
                        model=model.name,
                        message=(
                            f"hasMany relation '{relation.name}' has no inverseSide and "
                            f"'{target.name}' declares no relation back to it"
                        ),
                    )
                )

    graph = RelationGraph(edges=tuple(edges))
    for cycle in graph.cycles(RelationKind.BELONGS_TO):
        warnings.append(
            CompileWarning(
                code="relation_cycle",
                model=cycle[0],
                message="belongsTo cycle: " + " -> ".join(cycle + (cycle[0],)),
            )
        )

    return RelationResolution(graph=graph, errors=errors, warnings=warnings)


def _check_inverse(model: Model, relation: Relation, target: Model) -> str | None:
    """Return a description of what is wrong with the inverse side, or None."""
    inverse = target.get_relation(relation.inverse_side)
    if inverse is None:
        return f"'{target.name}' declares no relation named '{relation.inverse_side}'"
    if inverse.target != model.name:
        return f"inverse relation targets '{inverse.target}' instead of '{model.name}'"
    expected = INVERSE_KIND[relation.kind]
    if inverse.kind is not expected:
        return (
            f"{relation.kind.value} must pair with {expected.value}, "
            f"found {inverse.kind.value}"
        )
    if inverse.foreign_key and relation.foreign_key and inverse.foreign_key != relation.foreign_key:
        return (
            f"foreign keys disagree ('{relation.foreign_key}' vs '{inverse.foreign_key}')"
        )
    return None


def _has_counterpart(model: Model, relation: Relation, target: Model) -> bool:
    return any(
        other.target == model.name and other.inverse_side == relation.name
        for other in target.relations
    )


__all__ = ["RelationResolution", "resolve_relations"]
