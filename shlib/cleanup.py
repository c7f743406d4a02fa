"""Removal of stale build outputs before they are rewritten."""
from __future__ import annotations

from pathlib import Path
import os
import shutil
import stat

from core.console import Console


def maybe_remove_file(path: str | os.PathLike[str], *, console: Console | None = None) -> bool:
    """Remove ``path`` only if it is a regular file.

    Devices, pipes, sockets, directories and symbolic links are left alone so
    a discard sink such as ``os.devnull`` survives being used as an output.
    Returns whether a file was removed; failures are never raised.
    """

    target = os.fspath(path)
    try:
        info = os.lstat(target)
    except OSError:
        return False

    if not stat.S_ISREG(info.st_mode):
        if console:
            console.debug(f"Keeping non-regular file: {target}")
        return False

    try:
        os.remove(target)
    except OSError as exc:
        if console:
            console.debug(f"Could not remove {target}: {exc}")
        return False

    if console:
        console.debug(f"Removed stale output: {target}")
    return True


def replace_file(dst: Path, src: Path, *, console: Console | None = None) -> None:
    """Write the contents of ``src`` to ``dst``, clearing a stale ``dst`` first.

    A freshly created ``dst`` gets the permission bits of ``src``; special
    destinations are written through.
    """

    maybe_remove_file(dst, console=console)
    mode = stat.S_IMODE(os.stat(src).st_mode)
    fd = os.open(dst, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    with os.fdopen(fd, "wb") as out, open(src, "rb") as source:
        shutil.copyfileobj(source, out)


__all__ = ["maybe_remove_file", "replace_file"]
