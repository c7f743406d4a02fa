"""Level-filtered console output shared by the command line tools."""
from __future__ import annotations

from typing import TextIO
import sys


class Console:
    """Simple console output handler with configurable log level.

    Levels: none < error < info < debug
    """

    LEVELS = {
        "none": 0,
        "error": 1,
        "info": 2,
        "debug": 3,
    }

    def __init__(
        self,
        level: str = "error",
        dry_run: bool = False,
        *,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        if level not in self.LEVELS:
            choices = ", ".join(self.LEVELS)
            raise ValueError(f"Unknown log level '{level}'. Expected one of: {choices}")
        self.level_name = level
        self.level = self.LEVELS[level]
        self.dry_run = dry_run
        self._stdout = stdout
        self._stderr = stderr

    @property
    def out(self) -> TextIO:
        return self._stdout or sys.stdout

    @property
    def err(self) -> TextIO:
        return self._stderr or sys.stderr

    def info(self, message: str) -> None:
        if self.level >= self.LEVELS["info"]:
            print(f"[INFO] {message}", file=self.out)

    def error(self, message: str) -> None:
        if self.level >= self.LEVELS["error"]:
            print(f"[ERROR] {message}", file=self.err)

    def dry(self, message: str) -> None:
        if self.dry_run:
            print(f"[DRY] {message}", file=self.out)

    def debug(self, message: str) -> None:
        if self.level >= self.LEVELS["debug"]:
            print(f"[DEBUG] {message}", file=self.out)


__all__ = ["Console"]
