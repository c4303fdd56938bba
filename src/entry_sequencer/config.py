"""Sequencer settings stored in ``sequencer.yaml``.

Only the command-line front-end reads these; the engine itself takes no
configuration. ``ENTRY_SEQUENCER_PATHS`` (``os.pathsep`` separated)
appends declaration paths after the ones listed in the file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .exceptions import SequencerConfigError

CONFIG_FILENAME = "sequencer.yaml"
PATHS_ENV_VAR = "ENTRY_SEQUENCER_PATHS"
OUTPUT_FORMATS = ("table", "json", "plain")


@dataclass(slots=True)
class SequencerConfig:
    """Settings from the ``sequencer:`` section of ``sequencer.yaml``."""

    declaration_paths: list[Path] = field(default_factory=list)
    output_format: str = "table"

    @classmethod
    def from_dict(cls, data: dict[str, object] | None, *, base_dir: Path) -> SequencerConfig:
        if not isinstance(data, dict):
            return cls()

        raw_paths = data.get("declarations", [])
        if isinstance(raw_paths, str):
            raw_paths = [raw_paths]
        if not isinstance(raw_paths, list) or any(not isinstance(p, str) for p in raw_paths):
            raise SequencerConfigError("'sequencer.declarations' must be a list of paths")

        output_format = data.get("format", "table")
        if output_format not in OUTPUT_FORMATS:
            raise SequencerConfigError(
                f"'sequencer.format' must be one of {', '.join(OUTPUT_FORMATS)}, got {output_format!r}"
            )

        return cls(
            declaration_paths=[base_dir / p for p in raw_paths if p.strip()],
            output_format=str(output_format),
        )


def _split_env_paths(env_value: str) -> list[Path]:
    if not env_value.strip():
        return []
    return [Path(chunk) for chunk in env_value.split(os.pathsep) if chunk.strip()]


def load_config(project_dir: Path | None = None) -> SequencerConfig:
    """Load settings from ``<project_dir>/sequencer.yaml`` plus the environment."""
    base_dir = project_dir or Path.cwd()
    config_path = base_dir / CONFIG_FILENAME

    config = SequencerConfig()
    if config_path.exists():
        yaml = YAML(typ="safe")
        try:
            payload = yaml.load(config_path.read_text(encoding="utf-8")) or {}
        except (OSError, YAMLError) as exc:
            raise SequencerConfigError(f"Failed to parse {config_path}: {exc}") from exc

        section = payload.get("sequencer") if isinstance(payload, dict) else None
        config = SequencerConfig.from_dict(section if isinstance(section, dict) else None, base_dir=base_dir)

    config.declaration_paths.extend(_split_env_paths(os.environ.get(PATHS_ENV_VAR, "")))
    return config
