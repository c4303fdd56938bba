"""Graph construction from a registry.

An edge ``u -> v`` means ``u`` must precede ``v``. ``after`` constraints
point into the constrained entry, ``before`` constraints point out of it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .exceptions import UnknownReference, UnknownReferenceError
from .registry import Registry

logger = logging.getLogger(__name__)


@dataclass
class OrderingGraph:
    """Adjacency sets over entry names. Payloads are not carried here."""

    nodes: tuple[str, ...]
    _successors: dict[str, set[str]] = field(default_factory=dict, repr=False)
    _predecessors: dict[str, set[str]] = field(default_factory=dict, repr=False)

    def successors(self, name: str) -> list[str]:
        return sorted(self._successors.get(name, ()))

    def predecessors(self, name: str) -> list[str]:
        return sorted(self._predecessors.get(name, ()))

    def in_degree(self, name: str) -> int:
        return len(self._predecessors.get(name, ()))

    def edges(self) -> list[tuple[str, str]]:
        return sorted(
            (source, target)
            for source, targets in self._successors.items()
            for target in targets
        )

    @property
    def edge_count(self) -> int:
        return sum(len(targets) for targets in self._successors.values())

    def __contains__(self, name: object) -> bool:
        return name in self._successors

    def __len__(self) -> int:
        return len(self.nodes)


def build_graph(registry: Registry) -> OrderingGraph:
    """Build the ordering graph for ``registry``.

    Every constraint is checked; all references to missing entries are
    raised together as one :class:`UnknownReferenceError`.
    """
    names = sorted(registry)
    successors: dict[str, set[str]] = {name: set() for name in names}
    predecessors: dict[str, set[str]] = {name: set() for name in names}
    unknown: list[UnknownReference] = []

    def add_edge(source: str, target: str) -> None:
        successors[source].add(target)
        predecessors[target].add(source)

    for name in names:
        entry = registry[name]
        for ref in sorted(entry.after):
            if ref not in successors:
                unknown.append(UnknownReference(name, ref))
                continue
            add_edge(ref, name)
        for ref in sorted(entry.before):
            if ref not in successors:
                unknown.append(UnknownReference(name, ref))
                continue
            add_edge(name, ref)

    if unknown:
        raise UnknownReferenceError(unknown)

    graph = OrderingGraph(tuple(names), successors, predecessors)
    logger.debug("Built ordering graph: %d nodes, %d edges", len(graph), graph.edge_count)
    return graph


def get_dependents(name: str, graph: OrderingGraph) -> list[str]:
    """Entries that must come directly after ``name`` (not transitive)."""
    return graph.successors(name)


def get_dependencies(name: str, graph: OrderingGraph) -> list[str]:
    """Entries that must come directly before ``name`` (not transitive)."""
    return graph.predecessors(name)
