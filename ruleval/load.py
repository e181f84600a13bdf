"""
Loading rulesets, data files and project configuration from disk.

Rulesets are plain data: any mapping a TOML, YAML or JSON document
produces is a valid input to the engine.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "ruleval.toml"

_TOML_SUFFIXES = {".toml"}
_YAML_SUFFIXES = {".yaml", ".yml"}
_JSON_SUFFIXES = {".json"}


def load_document(path: Path) -> Any:
    """Parse a TOML, YAML or JSON file, chosen by suffix."""
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")

    if suffix in _TOML_SUFFIXES:
        import tomllib

        return tomllib.loads(text)

    if suffix in _YAML_SUFFIXES:
        import yaml

        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if suffix in _JSON_SUFFIXES:
        return json.loads(text)

    raise ValueError(f"Unsupported file type '{path.suffix}' for {path} (expected .toml, .yaml, .yml or .json)")


def load_ruleset(path: Path) -> dict[str, Any]:
    data = load_document(path)
    if not isinstance(data, dict):
        raise ValueError(f"Ruleset file {path} must contain a mapping at the top level")
    return data


def load_data(path: Path) -> dict[str, Any]:
    """Load a data file whose top-level keys become static accessors."""
    data = load_document(path)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Data file {path} must contain a mapping at the top level")
    return data


@dataclass(frozen=True)
class EngineConfig:
    path: Path | None = None
    ignore: tuple[str, ...] = ()
    data_path: Path | None = None
    accessors: dict[str, Any] = field(default_factory=dict)


def load_config(path: Path) -> EngineConfig:
    """
    Load a ``ruleval.toml`` project config.

    Only the ``[ruleval]`` table is read:

        [ruleval]
        ignore = ["debug_flag"]
        data = "data.yaml"    # relative to the config file

        [ruleval.accessors]   # inline static values
        region = "eu"
    """
    import tomllib

    raw = tomllib.loads(path.read_text(encoding="utf-8"))
    section = raw.get("ruleval", {})
    if not isinstance(section, dict):
        raise ValueError(f"[ruleval] in {path} must be a table")

    ignore = section.get("ignore", [])
    if not isinstance(ignore, list) or not all(isinstance(i, str) for i in ignore):
        raise ValueError(f"ruleval.ignore in {path} must be a list of strings")

    data = section.get("data")
    if data is not None and (not isinstance(data, str) or not data.strip()):
        raise ValueError(f"ruleval.data in {path} must be a non-empty string path")
    data_path = (path.parent / data.strip()).resolve() if data is not None else None

    accessors = section.get("accessors", {})
    if not isinstance(accessors, dict):
        raise ValueError(f"[ruleval.accessors] in {path} must be a table")

    return EngineConfig(path=path, ignore=tuple(ignore), data_path=data_path, accessors=dict(accessors))


def find_config(start: Path) -> Path | None:
    """Find ``ruleval.toml`` by walking up from `start`."""
    cur = start.resolve()
    for p in (cur, *cur.parents):
        candidate = p / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
