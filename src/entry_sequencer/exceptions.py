"""Exception hierarchy for entry ordering.

Every user-facing failure derives from :class:`SequencerError`.
:class:`InternalConsistencyError` is kept outside that family on purpose:
it signals a defect in the engine, not a problem with the caller's input.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


class SequencerError(Exception):
    """Base exception for entry ordering errors."""
    pass


class InvalidEntryError(SequencerError, ValueError):
    """Entry name or constraint is not a non-empty string."""


class DuplicateNameError(SequencerError):
    """Two entries share the same name (via insert or merge)."""

    def __init__(self, name: str, sources: Sequence[str] | None = None):
        """Initialize DuplicateNameError.

        Args:
            name: The colliding entry name
            sources: Labels of both contributing registries, when known
        """
        self.name = name
        self.sources = tuple(sources) if sources else ()

        if len(self.sources) == 2:
            super().__init__(
                f"Duplicate entry name '{name}' "
                f"(declared in '{self.sources[0]}' and '{self.sources[1]}')"
            )
        else:
            super().__init__(f"Duplicate entry name '{name}'")


class OrderingError(SequencerError):
    """Base exception for failures while resolving an order."""


@dataclass(frozen=True, order=True)
class UnknownReference:
    """A constraint on ``entry`` that names a missing ``referenced`` entry."""

    entry: str
    referenced: str

    def __str__(self) -> str:
        return f"'{self.entry}' references unknown entry '{self.referenced}'"


class UnknownReferenceError(OrderingError):
    """One or more constraints reference entries absent from the registry."""

    def __init__(self, references: Sequence[UnknownReference]):
        self.references = tuple(sorted(references))
        details = "; ".join(str(ref) for ref in self.references)
        super().__init__(
            f"{len(self.references)} unknown reference(s): {details}"
        )


class CycleDetectedError(OrderingError):
    """The ordering constraints form a cycle."""

    def __init__(self, path: Sequence[str]):
        self.path = list(path)
        super().__init__(f"Ordering cycle detected: {' -> '.join(self.path)}")


class DeclarationError(SequencerError):
    """A declaration file could not be read or is malformed."""


class SequencerConfigError(SequencerError):
    """Raised when sequencer configuration is invalid."""


class InternalConsistencyError(RuntimeError):
    """The sorter ended early on a graph already proven acyclic.

    This is an engine bug; callers should not try to recover from it.
    """

    def __init__(self, placed: int, expected: int):
        self.placed = placed
        self.expected = expected
        super().__init__(
            f"Internal consistency failure: sorted {placed} of {expected} "
            f"entries on an acyclic graph"
        )
