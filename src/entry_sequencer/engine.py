"""Resolution of a registry into one total order."""

from __future__ import annotations

import logging
from typing import Any, NamedTuple

from .cycles import ensure_acyclic
from .exceptions import OrderingError, SequencerError
from .graph import build_graph
from .registry import Registry
from .sorter import topological_order

logger = logging.getLogger(__name__)


class ResolvedEntry(NamedTuple):
    name: str
    payload: Any


def resolve(registry: Registry) -> list[ResolvedEntry]:
    """Resolve ``registry`` into ``(name, payload)`` pairs in dependency order.

    The registry is not modified.

    Raises:
        UnknownReferenceError: a constraint names a missing entry.
        CycleDetectedError: the constraints cannot all be satisfied.
    """
    graph = build_graph(registry)
    ensure_acyclic(graph)
    order = topological_order(graph)
    logger.debug("Resolved %d entries (source=%r)", len(order), registry.source)
    return [ResolvedEntry(name, registry[name].payload) for name in order]


def resolve_names(registry: Registry) -> list[str]:
    return [item.name for item in resolve(registry)]


def check(registry: Registry) -> list[SequencerError]:
    """Run resolution and return user-facing errors instead of raising.

    An empty list means the registry resolves cleanly. Engine defects
    still propagate.
    """
    try:
        resolve(registry)
    except OrderingError as exc:
        return [exc]
    return []
