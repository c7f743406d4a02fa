"""Shared library naming derived from command line package patterns.

A shared library built from several packages needs one file name. The name is
computed from the patterns the user typed together with the import paths they
resolved to:

* meta patterns (``std``, ``cmd``, ``all``) name the library directly and may
  not be combined with concrete package patterns;
* a single recursive wildcard such as ``./...`` names the library after the
  directory it is rooted at;
* anything else names the library after the distinct import paths, joined
  with commas.

Import paths are made filesystem safe by replacing ``/`` with ``-``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Mapping, Sequence


class MetaPattern(str, Enum):
    STD = "std"
    CMD = "cmd"
    ALL = "all"


_META_PATTERNS = frozenset(pattern.value for pattern in MetaPattern)
_WILDCARD_SUFFIX = "/..."


class LibraryNameError(ValueError):
    """Raised when no library name can be derived from the selection."""


class ConflictingSelectorsError(LibraryNameError):
    def __init__(self, meta: Sequence[str], concrete: Sequence[str]) -> None:
        super().__init__(
            "mixing of meta and non-meta packages is not allowed: "
            f"meta patterns {', '.join(meta)} cannot be combined with {', '.join(concrete)}"
        )
        self.meta = list(meta)
        self.concrete = list(concrete)


class NoSelectionError(LibraryNameError):
    def __init__(self, args: Sequence[str]) -> None:
        if args:
            message = f"patterns {', '.join(args)} matched no packages; nothing to name"
        else:
            message = "no package patterns or packages given; nothing to name"
        super().__init__(message)
        self.args_given = list(args)


@dataclass(frozen=True, slots=True)
class PackageDescriptor:
    """A resolved package; only its import path matters for naming."""

    import_path: str

    @classmethod
    def from_value(cls, value: Any) -> "PackageDescriptor":
        if isinstance(value, str):
            path = value.strip()
        elif isinstance(value, Mapping):
            raw = value.get("ImportPath", value.get("import_path"))
            if not isinstance(raw, str):
                raise TypeError("Package records must define a string 'ImportPath'")
            path = raw.strip()
        else:
            raise TypeError("Packages must be specified as import path strings or mappings")
        if not path:
            raise ValueError("Package import paths cannot be empty")
        return cls(import_path=path)


@dataclass(slots=True)
class ArgumentClassification:
    meta: List[str] = field(default_factory=list)
    concrete: List[str] = field(default_factory=list)

    @property
    def conflicting(self) -> bool:
        return bool(self.meta) and bool(self.concrete)


def is_meta_pattern(arg: str) -> bool:
    return arg in _META_PATTERNS


def classify_arguments(args: Iterable[str]) -> ArgumentClassification:
    """Partition ``args`` into meta and concrete patterns, keeping their order."""

    classification = ArgumentClassification()
    for arg in args:
        if is_meta_pattern(arg):
            classification.meta.append(arg)
        else:
            classification.concrete.append(arg)
    return classification


def is_local_pattern(pattern: str) -> bool:
    return pattern in {".", ".."} or pattern.startswith(("./", "../"))


def distinct_import_paths(packages: Iterable[PackageDescriptor]) -> List[str]:
    seen: set[str] = set()
    paths: List[str] = []
    for package in packages:
        if package.import_path not in seen:
            seen.add(package.import_path)
            paths.append(package.import_path)
    return paths


def common_import_prefix(paths: Sequence[str]) -> str:
    """Return the longest slash-delimited prefix shared by every path.

    Segments are compared whole, so ``gopkg.in/lib1`` and ``gopkg.in/lib2``
    share ``gopkg.in`` and never ``gopkg.in/li``.
    """

    if not paths:
        return ""
    common: List[str] = []
    for segments in zip(*(path.split("/") for path in paths)):
        first = segments[0]
        if not first or any(segment != first for segment in segments[1:]):
            break
        common.append(first)
    return "/".join(common)


def _to_name(path: str) -> str:
    return path.replace("/", "-")


def _wildcard_root(patterns: Sequence[str]) -> str | None:
    if len(patterns) != 1:
        return None
    pattern = patterns[0]
    if not pattern.endswith(_WILDCARD_SUFFIX):
        return None
    root = pattern[: -len(_WILDCARD_SUFFIX)]
    return root or None


def derive_library_name(args: Sequence[str], packages: Sequence[PackageDescriptor]) -> str:
    """Derive the bare shared library name for ``args`` resolved to ``packages``.

    Raises :class:`ConflictingSelectorsError` when meta patterns are mixed with
    concrete ones and :class:`NoSelectionError` when there is nothing to name.
    """

    classification = classify_arguments(args)
    if classification.meta:
        if classification.conflicting:
            raise ConflictingSelectorsError(classification.meta, classification.concrete)
        return ",".join(classification.meta)

    paths = distinct_import_paths(packages)

    root = _wildcard_root(classification.concrete)
    if root is not None:
        if not is_local_pattern(root):
            return _to_name(root)
        # A local root has no import path of its own here; the packages it
        # expanded to all live below it.
        prefix = common_import_prefix(paths)
        if prefix:
            return _to_name(prefix)

    if not paths:
        raise NoSelectionError(list(args))
    return ",".join(_to_name(path) for path in paths)


__all__ = [
    "ArgumentClassification",
    "ConflictingSelectorsError",
    "LibraryNameError",
    "MetaPattern",
    "NoSelectionError",
    "PackageDescriptor",
    "classify_arguments",
    "common_import_prefix",
    "derive_library_name",
    "distinct_import_paths",
    "is_local_pattern",
    "is_meta_pattern",
]
