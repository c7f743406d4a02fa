"""Shared library naming, pkg-config flag parsing and stale output cleanup."""

from .cleanup import maybe_remove_file, replace_file
from .libname import (
    ConflictingSelectorsError,
    LibraryNameError,
    MetaPattern,
    NoSelectionError,
    PackageDescriptor,
    derive_library_name,
)
from .pkgconfig import PkgConfigError, PkgConfigQuery, split_pkg_config_output
from .platforms import shared_library_filename
from .cli import main

__all__ = [
    "ConflictingSelectorsError",
    "LibraryNameError",
    "MetaPattern",
    "NoSelectionError",
    "PackageDescriptor",
    "PkgConfigError",
    "PkgConfigQuery",
    "derive_library_name",
    "main",
    "maybe_remove_file",
    "replace_file",
    "shared_library_filename",
    "split_pkg_config_output",
]
