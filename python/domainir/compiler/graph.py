"""Directed relation graph exposed to collaborators (join planning, FK ordering)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from domainir.core.types import RelationKind


class RelationEdge(BaseModel):
    """One relation, drawn as an edge from the declaring model to its target."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    source: str
    relation: str
    kind: RelationKind
    target: str
    foreign_key: str | None = None


class RelationGraph(BaseModel):
    """Edges grouped by source model in name order, relations in declaration order."""

    model_config = ConfigDict(frozen=True)

    edges: tuple[RelationEdge, ...] = ()

    def targets_of(self, model: str) -> tuple[str, ...]:
        return tuple(sorted({e.target for e in self.edges if e.source == model}))

    def sources_of(self, model: str) -> tuple[str, ...]:
        return tuple(sorted({e.source for e in self.edges if e.target == model}))

    def edges_from(self, model: str) -> tuple[RelationEdge, ...]:
        return tuple(e for e in self.edges if e.source == model)

    def cycles(self, kind: RelationKind = RelationKind.BELONGS_TO) -> tuple[tuple[str, ...], ...]:
        """Find dependency cycles among edges of one kind.

        Each cycle is rotated to start at its smallest model name and
        reported once. Self-references count as one-model cycles.
        """
        adjacency: dict[str, list[str]] = {}
        for edge in self.edges:
            if edge.kind is kind:
                adjacency.setdefault(edge.source, []).append(edge.target)
        for targets in adjacency.values():
            targets.sort()

        found: set[tuple[str, ...]] = set()
        visited: set[str] = set()

        def visit(node: str, path: list[str], on_path: set[str]) -> None:
            visited.add(node)
            path.append(node)
            on_path.add(node)
            for nxt in adjacency.get(node, ()):
                if nxt in on_path:
                    cycle = path[path.index(nxt):]
                    start = cycle.index(min(cycle))
                    found.add(tuple(cycle[start:] + cycle[:start]))
                elif nxt not in visited:
                    visit(nxt, path, on_path)
            on_path.discard(node)
            path.pop()

        for node in sorted(adjacency):
            if node not in visited:
                visit(node, [], set())
        return tuple(sorted(found))


__all__ = ["RelationEdge", "RelationGraph"]
