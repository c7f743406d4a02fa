"""Platform specific shared library file naming."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping
import platform


@dataclass(frozen=True, slots=True)
class LibraryNaming:
    prefix: str
    suffix: str

    def filename(self, name: str) -> str:
        return f"{self.prefix}{name}{self.suffix}"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, base: "LibraryNaming") -> "LibraryNaming":
        unknown = {str(key) for key in data if str(key) not in {"prefix", "suffix"}}
        if unknown:
            raise ValueError(f"Platform naming contains unknown keys: {', '.join(sorted(unknown))}")
        prefix = data.get("prefix", base.prefix)
        suffix = data.get("suffix", base.suffix)
        if not isinstance(prefix, str) or not isinstance(suffix, str):
            raise TypeError("Platform naming prefix and suffix must be strings")
        return cls(prefix=prefix, suffix=suffix)


UNIX_NAMING = LibraryNaming(prefix="lib", suffix=".so")

DEFAULT_NAMING: Dict[str, LibraryNaming] = {
    "linux": UNIX_NAMING,
    "freebsd": UNIX_NAMING,
    "openbsd": UNIX_NAMING,
    "netbsd": UNIX_NAMING,
    "darwin": LibraryNaming(prefix="lib", suffix=".dylib"),
    "windows": LibraryNaming(prefix="", suffix=".dll"),
}


def current_platform() -> str:
    return platform.system().lower()


def naming_for(platform_name: str | None = None, *, overrides: Mapping[str, LibraryNaming] | None = None) -> LibraryNaming:
    """Return the naming convention for ``platform_name`` (default: the running platform)."""

    key = (platform_name or current_platform()).lower()
    if overrides and key in overrides:
        return overrides[key]
    return DEFAULT_NAMING.get(key, UNIX_NAMING)


def shared_library_filename(
    name: str,
    platform_name: str | None = None,
    *,
    overrides: Mapping[str, LibraryNaming] | None = None,
) -> str:
    return naming_for(platform_name, overrides=overrides).filename(name)


__all__ = [
    "DEFAULT_NAMING",
    "LibraryNaming",
    "UNIX_NAMING",
    "current_platform",
    "naming_for",
    "shared_library_filename",
]
