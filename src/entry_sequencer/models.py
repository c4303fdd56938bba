"""Entry and placement data types.

An entry is a named payload plus a placement: the set of names it must
follow and the set of names it must precede. Both sets may be empty, in
which case the entry may appear anywhere.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any, Callable, Generic, Iterable, TypeVar

from .exceptions import InvalidEntryError

T = TypeVar("T")
U = TypeVar("U")


class PlacementKind(StrEnum):
    """Shape of an entry's ordering constraints."""

    ANYWHERE = "anywhere"
    AFTER = "after"
    BEFORE = "before"
    BETWEEN = "between"


def _check_name(value: object, *, field_name: str) -> str:
    if isinstance(value, str) and value:
        return value
    raise InvalidEntryError(f"Invalid entry: '{field_name}' must be a non-empty string, got {value!r}")


def _as_name_set(names: Iterable[str] | str | None, *, field_name: str) -> frozenset[str]:
    if names is None:
        return frozenset()
    # A bare string is one name, not a sequence of characters.
    if isinstance(names, str):
        names = [names]
    return frozenset(_check_name(name, field_name=field_name) for name in names)


@dataclass(frozen=True)
class Placement:
    """Names an entry must follow (``after``) and precede (``before``)."""

    after: frozenset[str] = field(default_factory=frozenset)
    before: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def of(
        cls,
        after: Iterable[str] | str | None = None,
        before: Iterable[str] | str | None = None,
    ) -> Placement:
        return cls(
            after=_as_name_set(after, field_name="after"),
            before=_as_name_set(before, field_name="before"),
        )

    @property
    def kind(self) -> PlacementKind:
        if self.after and self.before:
            return PlacementKind.BETWEEN
        if self.after:
            return PlacementKind.AFTER
        if self.before:
            return PlacementKind.BEFORE
        return PlacementKind.ANYWHERE

    @property
    def references(self) -> frozenset[str]:
        return self.after | self.before


ANYWHERE = Placement()


@dataclass(frozen=True)
class Entry(Generic[T]):
    """A named payload with its placement constraints.

    The payload is opaque to the engine; only ``name`` and ``placement``
    take part in ordering.
    """

    name: str
    payload: T
    placement: Placement = ANYWHERE

    def __post_init__(self) -> None:
        _check_name(self.name, field_name="name")

    @property
    def after(self) -> frozenset[str]:
        return self.placement.after

    @property
    def before(self) -> frozenset[str]:
        return self.placement.before

    def map_payload(self, fn: Callable[[T], U]) -> Entry[U]:
        """Return a copy of this entry with ``fn`` applied to the payload."""
        return replace(self, payload=fn(self.payload))  # type: ignore[return-value]

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"name": self.name, "data": self.payload}
        if self.after:
            d["after"] = sorted(self.after)
        if self.before:
            d["before"] = sorted(self.before)
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Entry[Any]:
        return cls(
            name=data.get("name"),  # type: ignore[arg-type]
            payload=data.get("data"),
            placement=Placement.of(after=data.get("after"), before=data.get("before")),
        )


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------

def anywhere(name: str, payload: T) -> Entry[T]:
    """Entry with no ordering constraint."""
    return Entry(name, payload)


def after(name: str, payload: T, names: Iterable[str] | str) -> Entry[T]:
    """Entry sequenced strictly after every entry in ``names``."""
    return Entry(name, payload, Placement.of(after=names))


def before(name: str, payload: T, names: Iterable[str] | str) -> Entry[T]:
    """Entry sequenced strictly before every entry in ``names``."""
    return Entry(name, payload, Placement.of(before=names))


def between(
    name: str,
    payload: T,
    *,
    after: Iterable[str] | str = (),
    before: Iterable[str] | str = (),
) -> Entry[T]:
    """Entry sequenced after ``after`` and before ``before``."""
    return Entry(name, payload, Placement.of(after=after, before=before))


def entries_between(
    tag: str,
    payloads: Iterable[T],
    *,
    after: Iterable[str] | str = (),
    before: Iterable[str] | str = (),
) -> list[Entry[T]]:
    """Chain ``payloads`` into entries named ``<tag>-0``, ``<tag>-1``, ...

    The first entry follows ``after``, every later entry follows its
    predecessor, and the last entry precedes ``before``.
    """
    _check_name(tag, field_name="tag")
    items = list(payloads)
    after_set = _as_name_set(after, field_name="after")
    before_set = _as_name_set(before, field_name="before")

    chain: list[Entry[T]] = []
    previous: frozenset[str] = after_set
    for index, payload in enumerate(items):
        is_last = index == len(items) - 1
        chain.append(
            Entry(
                f"{tag}-{index}",
                payload,
                Placement(after=previous, before=before_set if is_last else frozenset()),
            )
        )
        previous = frozenset({f"{tag}-{index}"})
    return chain


def entries_anywhere(tag: str, payloads: Iterable[T]) -> list[Entry[T]]:
    return entries_between(tag, payloads)


def entries_after(tag: str, payloads: Iterable[T], names: Iterable[str] | str) -> list[Entry[T]]:
    return entries_between(tag, payloads, after=names)


def entries_before(tag: str, payloads: Iterable[T], names: Iterable[str] | str) -> list[Entry[T]]:
    return entries_between(tag, payloads, before=names)
