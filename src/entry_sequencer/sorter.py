"""Deterministic topological sort (Kahn's algorithm).

The ready set is a binary heap of names, so whenever several entries are
free to go next the lexicographically smallest one is placed first. This
tie-break is what makes the output reproducible.
"""

from __future__ import annotations

import heapq

from .exceptions import InternalConsistencyError
from .graph import OrderingGraph


def topological_order(graph: OrderingGraph) -> list[str]:
    """Return every node of an acyclic ``graph`` in dependency order.

    Raises:
        InternalConsistencyError: the graph was not acyclic after all.
    """
    indegree = {name: graph.in_degree(name) for name in graph.nodes}
    heap = [name for name, degree in indegree.items() if degree == 0]
    heapq.heapify(heap)

    ordered: list[str] = []
    while heap:
        current = heapq.heappop(heap)
        ordered.append(current)
        for child in graph.successors(current):
            indegree[child] -= 1
            if indegree[child] == 0:
                heapq.heappush(heap, child)

    if len(ordered) != len(graph.nodes):
        raise InternalConsistencyError(len(ordered), len(graph.nodes))
    return ordered


def ordering_waves(graph: OrderingGraph) -> list[list[str]]:
    """Group nodes into waves of entries that become ready together.

    Wave ``n + 1`` holds the entries whose last predecessor was placed in
    wave ``n``. Concatenating the waves is a valid order, but not
    necessarily the one :func:`topological_order` produces.
    """
    indegree = {name: graph.in_degree(name) for name in graph.nodes}
    wave = sorted(name for name, degree in indegree.items() if degree == 0)

    waves: list[list[str]] = []
    placed = 0
    while wave:
        waves.append(wave)
        placed += len(wave)
        ready: list[str] = []
        for current in wave:
            for child in graph.successors(current):
                indegree[child] -= 1
                if indegree[child] == 0:
                    ready.append(child)
        wave = sorted(ready)

    if placed != len(graph.nodes):
        raise InternalConsistencyError(placed, len(graph.nodes))
    return waves
