"""Runners used to invoke external tools such as ``pkg-config``."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Sequence
import os
import shlex
import subprocess


@dataclass
class CommandResult:
    """Represents the outcome of an executed command.

    ``stdout`` and ``stderr`` hold raw bytes; tools like ``pkg-config`` emit
    bytes whose escaping is resolved later, not by the runner.
    """

    command: Sequence[str]
    returncode: int
    stdout: bytes = b""
    stderr: bytes = b""

    @property
    def output(self) -> bytes:
        return self.stdout + self.stderr


class CommandError(RuntimeError):
    """Raised when a command exits with a non-zero status."""

    def __init__(self, result: CommandResult):
        message = (
            f"Command failed with exit code {result.returncode}: {' '.join(map(shlex.quote, result.command))}\n"
            f"stdout: {result.stdout.decode('utf-8', 'replace')}\n"
            f"stderr: {result.stderr.decode('utf-8', 'replace')}"
        )
        super().__init__(message)
        self.result = result


class CommandRunner:
    """Abstract command runner interface."""

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        check: bool = True,
        note: str | None = None,
    ) -> CommandResult:
        raise NotImplementedError

    def format_command(self, command: Sequence[str]) -> str:
        return " ".join(shlex.quote(part) for part in command)


class SubprocessCommandRunner(CommandRunner):
    """Command runner that executes commands via :mod:`subprocess`."""

    @staticmethod
    def _merge_environment(env: Mapping[str, str] | None) -> Dict[str, str] | None:
        if env is None:
            return None
        merged = os.environ.copy()
        merged.update(env)
        return merged

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        check: bool = True,
        note: str | None = None,
    ) -> CommandResult:
        try:
            process = subprocess.run(
                list(command),
                cwd=str(cwd) if cwd else None,
                env=self._merge_environment(env),
                capture_output=True,
                check=False,
            )
        except FileNotFoundError as exc:
            result = CommandResult(command=command, returncode=127, stderr=str(exc).encode("utf-8"))
        else:
            result = CommandResult(
                command=command,
                returncode=process.returncode,
                stdout=process.stdout,
                stderr=process.stderr,
            )
        if check and result.returncode != 0:
            raise CommandError(result)
        return result


@dataclass(slots=True)
class RecordedCommand:
    command: List[str]
    cwd: str | None
    env: Dict[str, str]
    note: str | None


@dataclass
class RecordingCommandRunner(CommandRunner):
    """Command runner that records commands instead of executing them.

    ``responses`` maps a formatted command line to the stdout it should
    appear to produce; unknown commands succeed with empty output.
    """

    responses: Dict[str, bytes] = field(default_factory=dict)
    commands: List[RecordedCommand] = field(default_factory=list)

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        check: bool = True,
        note: str | None = None,
    ) -> CommandResult:
        self.commands.append(
            RecordedCommand(
                command=list(command),
                cwd=str(cwd) if cwd else None,
                env=dict(env) if env else {},
                note=note,
            )
        )
        stdout = self.responses.get(self.format_command(command), b"")
        return CommandResult(command=command, returncode=0, stdout=stdout)

    def iter_formatted(self) -> Iterable[str]:
        for record in self.commands:
            parts: List[str] = []
            if record.note:
                parts.append(f"{record.note}:")
            if record.cwd:
                parts.append(f"(cwd={record.cwd})")
            parts.append(self.format_command(record.command))
            yield " ".join(parts)


__all__ = [
    "CommandError",
    "CommandResult",
    "CommandRunner",
    "RecordedCommand",
    "RecordingCommandRunner",
    "SubprocessCommandRunner",
]
