"""Load entry declarations from YAML files.

A declaration file contributes one registry::

    source: shell-init        # optional, defaults to the file path
    entries:
      loadEnv:
        data: "export FOO=1"
        before: [setPrompt]
      setPrompt:
        data: "PS1='> '"
        after: loadEnv

``entries`` may also be a list of mappings carrying an explicit ``name``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

from ruamel.yaml import YAML
from ruamel.yaml.constructor import DuplicateKeyError
from ruamel.yaml.error import YAMLError
from ruamel.yaml.nodes import MappingNode

from .exceptions import DeclarationError, DuplicateNameError, InvalidEntryError
from .models import Entry, Placement
from .registry import Registry, merge_all

logger = logging.getLogger(__name__)

_ENTRY_KEYS = {"name", "data", "after", "before"}


def _as_string_list(value: Any, *, field_name: str, path: Path) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise DeclarationError(f"{path}: '{field_name}' must be a string or a list of strings")
    result: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise DeclarationError(f"{path}: '{field_name}' must contain only strings")
        result.append(item)
    return result


def _parse_entry(name: Any, raw: Any, *, path: Path) -> Entry[Any]:
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise DeclarationError(f"{path}: entry '{name}' must be a mapping")

    unknown_keys = sorted(set(raw) - _ENTRY_KEYS)
    if unknown_keys:
        raise DeclarationError(f"{path}: entry '{name}' has unknown key(s): {', '.join(map(str, unknown_keys))}")

    after = _as_string_list(raw.get("after"), field_name=f"entries.{name}.after", path=path)
    before = _as_string_list(raw.get("before"), field_name=f"entries.{name}.before", path=path)
    try:
        return Entry(name, raw.get("data"), Placement.of(after=after, before=before))
    except InvalidEntryError as exc:
        raise DeclarationError(f"{path}: {exc}") from exc


def _iter_entries(raw_entries: Any, *, path: Path) -> Iterable[Entry[Any]]:
    if isinstance(raw_entries, dict):
        for name, raw in raw_entries.items():
            if isinstance(raw, dict) and "name" in raw and raw["name"] != name:
                raise DeclarationError(f"{path}: entry key '{name}' does not match name '{raw['name']}'")
            yield _parse_entry(name, raw, path=path)
        return

    if isinstance(raw_entries, list):
        for idx, raw in enumerate(raw_entries):
            if not isinstance(raw, dict):
                raise DeclarationError(f"{path}: entries[{idx}] must be a mapping")
            yield _parse_entry(raw.get("name"), raw, path=path)
        return

    raise DeclarationError(f"{path}: 'entries' must be a mapping or a list")


def _duplicate_entry_name(text: str) -> str | None:
    """First name declared twice under a mapping-form ``entries`` section."""
    root = YAML(typ="safe", pure=True).compose(text)
    if not isinstance(root, MappingNode):
        return None
    for key_node, value_node in root.value:
        if key_node.value != "entries" or not isinstance(value_node, MappingNode):
            continue
        seen: set[str] = set()
        for name_node, _ in value_node.value:
            if name_node.value in seen:
                return str(name_node.value)
            seen.add(name_node.value)
    return None


def load_declarations(path: Path | str) -> Registry:
    """Read one declaration file into a registry labelled with its source.

    Raises:
        DeclarationError: the file is unreadable or malformed.
        DuplicateNameError: an entry name is declared twice.
    """
    decl_path = Path(path)
    try:
        text = decl_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DeclarationError(f"Unable to read declaration file: {decl_path}") from exc

    yaml = YAML(typ="safe")
    try:
        raw = yaml.load(text) or {}
    except DuplicateKeyError as exc:
        name = _duplicate_entry_name(text)
        if name is not None:
            raise DuplicateNameError(name, sources=(str(decl_path), str(decl_path))) from exc
        raise DeclarationError(f"Invalid YAML in declaration file: {decl_path}: {exc}") from exc
    except YAMLError as exc:
        raise DeclarationError(f"Invalid YAML in declaration file: {decl_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise DeclarationError(f"{decl_path}: root must be a mapping")

    source = raw.get("source")
    if source is not None and not (isinstance(source, str) and source.strip()):
        raise DeclarationError(f"{decl_path}: 'source' must be a non-empty string")

    registry = Registry(source or str(decl_path))
    for entry in _iter_entries(raw.get("entries") or {}, path=decl_path):
        registry.add(entry)

    logger.debug("Loaded %d entries from %s", len(registry), decl_path)
    return registry


def load_many(paths: Iterable[Path | str]) -> Registry:
    """Load and merge several declaration files.

    Name collisions across files raise :class:`DuplicateNameError` naming
    both files.
    """
    return merge_all(load_declarations(path) for path in paths)
