"""Querying ``pkg-config`` and splitting its output into flags."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Mapping
import os

from core.command_runner import CommandError, CommandRunner
from core.console import Console


DEFAULT_PKG_CONFIG = "pkg-config"

_WHITESPACE = frozenset(b" \t\r\n")
_BACKSLASH = ord("\\")


class _ScanState(Enum):
    SKIPPING_WHITESPACE = "skipping-whitespace"
    IN_WORD = "in-word"
    ESCAPED = "escaped"


def split_pkg_config_output(out: bytes | str) -> List[str]:
    """Split ``pkg-config`` output into words the way a POSIX shell would.

    Backslash is the only escape character; quotes are not special. A
    trailing lone backslash is dropped.
    """

    data = out.encode("utf-8", "surrogateescape") if isinstance(out, str) else bytes(out)
    flags: List[str] = []
    word = bytearray()
    state = _ScanState.SKIPPING_WHITESPACE

    def close_word() -> None:
        if word:
            flags.append(word.decode("utf-8", "surrogateescape"))
            word.clear()

    for byte in data:
        if state is _ScanState.ESCAPED:
            word.append(byte)
            state = _ScanState.IN_WORD
        elif byte == _BACKSLASH:
            state = _ScanState.ESCAPED
        elif byte in _WHITESPACE:
            if state is _ScanState.IN_WORD:
                close_word()
            state = _ScanState.SKIPPING_WHITESPACE
        else:
            word.append(byte)
            state = _ScanState.IN_WORD

    close_word()
    return flags


class PkgConfigError(RuntimeError):
    """Raised when ``pkg-config`` arguments are invalid or the tool fails."""


@dataclass(slots=True)
class PkgConfigArguments:
    options: List[str] = field(default_factory=list)
    packages: List[str] = field(default_factory=list)


@dataclass(slots=True)
class PkgConfigFlags:
    cflags: List[str] = field(default_factory=list)
    ldflags: List[str] = field(default_factory=list)


def is_safe_package_name(name: str) -> bool:
    return bool(name) and name[0] not in "-@"


def partition_pkg_config_args(args: Iterable[str]) -> PkgConfigArguments:
    """Move ``--`` options ahead of package names and validate the names.

    ``pkg-config`` accepts options anywhere on its command line; a ``--``
    separator is added later so package names are never read as options.
    """

    parsed = PkgConfigArguments()
    for arg in args:
        if arg == "--":
            continue
        if arg.startswith("--"):
            parsed.options.append(arg)
        else:
            parsed.packages.append(arg)
    for name in parsed.packages:
        if not is_safe_package_name(name):
            raise PkgConfigError(f"invalid pkg-config package name: {name}")
    return parsed


def pkg_config_command(configured: str | None = None, env: Mapping[str, str] | None = None) -> str:
    environment = os.environ if env is None else env
    return environment.get("PKG_CONFIG") or configured or DEFAULT_PKG_CONFIG


class PkgConfigQuery:
    """Runs ``pkg-config`` for compiler and linker flags."""

    def __init__(
        self,
        runner: CommandRunner,
        *,
        command: str | None = None,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        console: Console | None = None,
    ) -> None:
        self._runner = runner
        self._command = pkg_config_command(command, env)
        self._cwd = cwd
        self._console = console

    @property
    def command(self) -> str:
        return self._command

    def cflags(self, args: Iterable[str]) -> List[str]:
        return self._query("--cflags", partition_pkg_config_args(args))

    def libs(self, args: Iterable[str]) -> List[str]:
        return self._query("--libs", partition_pkg_config_args(args))

    def flags(self, args: Iterable[str]) -> PkgConfigFlags:
        parsed = partition_pkg_config_args(args)
        return PkgConfigFlags(
            cflags=self._query("--cflags", parsed),
            ldflags=self._query("--libs", parsed),
        )

    def _query(self, mode: str, parsed: PkgConfigArguments) -> List[str]:
        if not parsed.packages:
            return []
        command = [self._command, mode, *parsed.options, "--", *parsed.packages]
        if self._console:
            self._console.debug(f"Running {self._runner.format_command(command)}")
        try:
            result = self._runner.run(command, cwd=self._cwd, note=mode.lstrip("-"))
        except CommandError as exc:
            output = exc.result.output.decode("utf-8", "replace").strip()
            raise PkgConfigError(
                f"{self._runner.format_command(command)} failed with exit code {exc.result.returncode}"
                + (f": {output}" if output else "")
            ) from exc
        flags = split_pkg_config_output(result.stdout)
        if self._console:
            self._console.debug(f"{mode} -> {flags}")
        return flags


__all__ = [
    "DEFAULT_PKG_CONFIG",
    "PkgConfigArguments",
    "PkgConfigError",
    "PkgConfigFlags",
    "PkgConfigQuery",
    "is_safe_package_name",
    "partition_pkg_config_args",
    "pkg_config_command",
    "split_pkg_config_output",
]
