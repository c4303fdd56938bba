"""Entry registry and merge facility.

A registry collects uniquely-named entries from one declaration site.
Registries from several sites are combined with :func:`merge` (or
:func:`merge_all`) before a single global order is resolved.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Iterator, Mapping

from .exceptions import DuplicateNameError
from .models import Entry, Placement

logger = logging.getLogger(__name__)


class Registry(Mapping[str, Entry[Any]]):
    """Read-only mapping of entry name to :class:`Entry`, populated by insert.

    ``source`` labels the declaration site; it is recorded per entry so a
    collision discovered in a later merge still names the original sites.
    """

    def __init__(self, source: str | None = None) -> None:
        self.source = source
        self._entries: dict[str, Entry[Any]] = {}
        self._sources: dict[str, str | None] = {}

    @classmethod
    def from_entries(cls, entries: Iterable[Entry[Any]], source: str | None = None) -> Registry:
        registry = cls(source)
        for entry in entries:
            registry.add(entry)
        return registry

    # Mapping protocol

    def __getitem__(self, name: str) -> Entry[Any]:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        label = f" source={self.source!r}" if self.source else ""
        return f"<Registry{label} entries={len(self._entries)}>"

    def names(self) -> list[str]:
        return list(self._entries)

    def entries(self) -> list[Entry[Any]]:
        return list(self._entries.values())

    def source_of(self, name: str) -> str | None:
        """Declaration-site label the entry ``name`` came from."""
        return self._sources.get(name)

    # Population

    def add(self, entry: Entry[Any]) -> Registry:
        """Record ``entry``; raise :class:`DuplicateNameError` if its name exists.

        The registry is untouched when the insert fails.
        """
        if entry.name in self._entries:
            raise DuplicateNameError(entry.name)
        self._entries[entry.name] = entry
        self._sources[entry.name] = self.source
        return self

    def insert(
        self,
        name: str,
        payload: Any,
        after: Iterable[str] | str = (),
        before: Iterable[str] | str = (),
    ) -> Registry:
        return self.add(Entry(name, payload, Placement.of(after=after, before=before)))

    def map_payloads(self, fn: Callable[[Any], Any]) -> Registry:
        """Return a new registry with ``fn`` applied to every payload."""
        mapped = Registry(self.source)
        for name, entry in self._entries.items():
            mapped._entries[name] = entry.map_payload(fn)
            mapped._sources[name] = self._sources[name]
        return mapped

    def _copy_into(self, target: Registry) -> None:
        target._entries.update(self._entries)
        target._sources.update(self._sources)


def new_registry(source: str | None = None) -> Registry:
    """Create an empty registry, optionally labelled with its declaration site."""
    return Registry(source)


def insert(
    registry: Registry,
    name: str,
    payload: Any,
    after: Iterable[str] | str = (),
    before: Iterable[str] | str = (),
) -> Registry:
    """Insert an entry into ``registry`` and return it."""
    return registry.insert(name, payload, after=after, before=before)


def merge(first: Registry, second: Registry, *, source: str | None = None) -> Registry:
    """Disjoint union of two registries as a new registry.

    Neither input is modified. The smallest colliding name, if any, is
    reported with both declaration-site labels when both are known.
    """
    collisions = sorted(set(first._entries) & set(second._entries))
    if collisions:
        name = collisions[0]
        first_source = first.source_of(name)
        second_source = second.source_of(name)
        sources = (first_source, second_source) if first_source and second_source else None
        raise DuplicateNameError(name, sources=sources)

    merged = Registry(source)
    first._copy_into(merged)
    second._copy_into(merged)
    logger.debug(
        "Merged registries %r and %r into %d entries",
        first.source,
        second.source,
        len(merged),
    )
    return merged


def merge_all(registries: Iterable[Registry], *, source: str | None = None) -> Registry:
    """Fold :func:`merge` over any number of registries."""
    merged = Registry(source)
    for registry in registries:
        merged = merge(merged, registry, source=source)
    return merged
