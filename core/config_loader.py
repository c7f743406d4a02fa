"""Shared helpers for locating and loading configuration mappings."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, Mapping

import json
import tomllib

import yaml


ConfigLoader = Callable[[Any], Any]


FILE_LOADERS: Dict[str, ConfigLoader] = {
    ".toml": tomllib.load,
    ".json": json.load,
    ".yaml": yaml.safe_load,
    ".yml": yaml.safe_load,
}
"""Mapping of file suffixes to loader callables; only TOML is read as bytes."""


def load_config_file(path: Path) -> Mapping[str, Any]:
    """Decode ``path`` with the loader registered for its suffix.

    Empty YAML documents load as an empty mapping; any other non-mapping
    root is rejected.
    """

    suffix = path.suffix.lower()
    if suffix not in FILE_LOADERS:
        raise ValueError(
            f"Unsupported configuration file extension: {suffix}. "
            f"Supported: {', '.join(sorted(FILE_LOADERS))}"
        )

    if suffix == ".toml":
        with path.open("rb") as handle:
            data = FILE_LOADERS[suffix](handle)
    else:
        with path.open("r", encoding="utf-8") as handle:
            data = FILE_LOADERS[suffix](handle)

    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise TypeError(f"Configuration file '{path}' must contain a mapping at the root")
    return data


def collect_config_files(directory: Path) -> Dict[str, Path]:
    """Index the loadable files in ``directory`` by stem.

    A stem present in two formats (``config.toml`` and ``config.json``) is
    ambiguous and raises ``ValueError``.
    """

    found: Dict[str, Path] = {}
    for candidate in sorted(directory.iterdir()):
        if not candidate.is_file() or candidate.suffix.lower() not in FILE_LOADERS:
            continue
        previous = found.setdefault(candidate.stem, candidate)
        if previous is not candidate:
            raise ValueError(
                f"Configuration '{candidate.stem}' is defined twice: '{previous.name}' and '{candidate.name}'. "
                "Keep a single format per configuration entry."
            )
    return found


__all__ = [
    "ConfigLoader",
    "FILE_LOADERS",
    "collect_config_files",
    "load_config_file",
]
