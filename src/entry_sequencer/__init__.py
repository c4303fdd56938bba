"""Deterministic ordering of named entries with after/before constraints."""

from .models import (
    Entry,
    Placement,
    PlacementKind,
    after,
    anywhere,
    before,
    between,
    entries_after,
    entries_anywhere,
    entries_before,
    entries_between,
)
from .exceptions import (
    CycleDetectedError,
    DeclarationError,
    DuplicateNameError,
    InternalConsistencyError,
    InvalidEntryError,
    OrderingError,
    SequencerConfigError,
    SequencerError,
    UnknownReference,
    UnknownReferenceError,
)
from .registry import Registry, insert, merge, merge_all, new_registry
from .graph import OrderingGraph, build_graph, get_dependencies, get_dependents
from .cycles import ensure_acyclic, find_cycle
from .sorter import ordering_waves, topological_order
from .engine import ResolvedEntry, check, resolve, resolve_names
from .declarations import load_declarations, load_many

__all__ = [
    "CycleDetectedError",
    "DeclarationError",
    "DuplicateNameError",
    "Entry",
    "InternalConsistencyError",
    "InvalidEntryError",
    "OrderingError",
    "OrderingGraph",
    "Placement",
    "PlacementKind",
    "Registry",
    "ResolvedEntry",
    "SequencerConfigError",
    "SequencerError",
    "UnknownReference",
    "UnknownReferenceError",
    "after",
    "anywhere",
    "before",
    "between",
    "build_graph",
    "check",
    "ensure_acyclic",
    "entries_after",
    "entries_anywhere",
    "entries_before",
    "entries_between",
    "find_cycle",
    "get_dependencies",
    "get_dependents",
    "insert",
    "load_declarations",
    "load_many",
    "merge",
    "merge_all",
    "new_registry",
    "ordering_waves",
    "resolve",
    "resolve_names",
    "topological_order",
]
