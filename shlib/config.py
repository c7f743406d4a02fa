"""Configuration and package manifest loading."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

from core.config_loader import collect_config_files, load_config_file
from core.console import Console

from .libname import PackageDescriptor
from .platforms import LibraryNaming, naming_for


@dataclass(slots=True)
class ShlibConfig:
    log_level: str = "error"
    platform: str | None = None
    pkg_config_command: str | None = None
    platforms: Dict[str, LibraryNaming] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ShlibConfig":
        global_section = data.get("global", {})
        if not isinstance(global_section, Mapping):
            raise TypeError("[global] must be a table")
        log_level = str(global_section.get("log_level", "error")).lower()
        if log_level not in Console.LEVELS:
            raise ValueError(f"global.log_level must be one of: {', '.join(Console.LEVELS)}")
        platform_name = global_section.get("platform")

        pkg_config_section = data.get("pkg_config", {})
        if not isinstance(pkg_config_section, Mapping):
            raise TypeError("[pkg_config] must be a table")
        command = pkg_config_section.get("command")

        platforms_section = data.get("platforms", {})
        if not isinstance(platforms_section, Mapping):
            raise TypeError("[platforms] must be a table of platform names")
        platforms: Dict[str, LibraryNaming] = {}
        for name, value in platforms_section.items():
            if not isinstance(value, Mapping):
                raise TypeError(f"platforms.{name} must be a table")
            key = str(name).lower()
            platforms[key] = LibraryNaming.from_mapping(value, base=naming_for(key))

        return cls(
            log_level=log_level,
            platform=str(platform_name).lower() if platform_name else None,
            pkg_config_command=str(command) if command else None,
            platforms=platforms,
        )

    @classmethod
    def from_directory(cls, config_dir: Path) -> "ShlibConfig":
        if not config_dir.is_dir():
            return cls()
        files = collect_config_files(config_dir)
        path = files.get("config")
        if path is None:
            return cls()
        return cls.from_mapping(load_config_file(path))


def load_package_manifest(path: Path) -> List[PackageDescriptor]:
    """Read resolved packages from a manifest with a top-level ``packages`` list."""

    data = load_config_file(path)
    entries = data.get("packages")
    if entries is None:
        raise ValueError(f"Package manifest '{path}' has no 'packages' entry")
    if isinstance(entries, (str, bytes)) or not isinstance(entries, Sequence):
        raise TypeError(f"'packages' in '{path}' must be a list of records")
    return [PackageDescriptor.from_value(entry) for entry in entries]


__all__ = ["ShlibConfig", "load_package_manifest"]
