"""Cycle detection over an ordering graph.

Iterative depth-first search with three-colour marking. Roots and
successors are visited in name order so the reported cycle is the same on
every run for the same input.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator

from .exceptions import CycleDetectedError
from .graph import OrderingGraph


class _Mark(Enum):
    UNVISITED = 0
    IN_PROGRESS = 1
    DONE = 2


def find_cycle(graph: OrderingGraph) -> list[str] | None:
    """Return one cycle as a closed path ``[Y, ..., X, Y]``, or None if acyclic."""
    marks = {name: _Mark.UNVISITED for name in graph.nodes}

    for root in graph.nodes:
        if marks[root] is not _Mark.UNVISITED:
            continue

        # path mirrors the nodes currently IN_PROGRESS, in traversal order.
        path: list[str] = [root]
        stack: list[Iterator[str]] = [iter(graph.successors(root))]
        marks[root] = _Mark.IN_PROGRESS

        while stack:
            node = path[-1]
            child = next(stack[-1], None)
            if child is None:
                marks[node] = _Mark.DONE
                path.pop()
                stack.pop()
                continue

            if marks[child] is _Mark.IN_PROGRESS:
                start = path.index(child)
                return path[start:] + [child]
            if marks[child] is _Mark.UNVISITED:
                marks[child] = _Mark.IN_PROGRESS
                path.append(child)
                stack.append(iter(graph.successors(child)))

    return None


def ensure_acyclic(graph: OrderingGraph) -> None:
    """Raise :class:`CycleDetectedError` if ``graph`` contains a cycle."""
    cycle = find_cycle(graph)
    if cycle is not None:
        raise CycleDetectedError(cycle)
