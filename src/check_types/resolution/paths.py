"""Path ancestry and file probing helpers used throughout resolution."""

from __future__ import annotations

import errno
import os
import stat
from collections.abc import Iterator
from pathlib import Path

_MISSING_ERRNOS = frozenset({errno.ENOENT, errno.ENOTDIR, errno.ENAMETOOLONG, errno.ELOOP})


class ProbeError(OSError):
    """Raised when probing a path fails for a reason other than absence."""

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(cause.errno, f"Could not probe {path}: {cause.strerror or cause}")
        self.path = path
        self.cause = cause


def normalize_path(path: Path | str) -> Path:
    """Return an absolute, lexically normalized path without touching the filesystem."""
    return Path(os.path.normpath(os.path.abspath(path)))


def parents(directory: Path) -> Iterator[Path]:
    """Yield a directory and each of its ancestors, ending at the filesystem root."""
    current = normalize_path(directory)
    while True:
        yield current
        parent = current.parent
        if parent == current:
            return
        current = parent


def probe_stat(path: Path) -> os.stat_result | None:
    """Stat a path, returning None when it does not exist."""
    try:
        return path.stat()
    except OSError as exc:
        if exc.errno in _MISSING_ERRNOS:
            return None
        raise ProbeError(path, exc) from exc


def is_file(path: Path | None) -> bool:
    """Return True when the path exists and is a regular file."""
    if path is None:
        return False
    result = probe_stat(path)
    if result is None:
        return False
    return stat.S_ISREG(result.st_mode)


def is_dir(path: Path) -> bool:
    """Return True when the path exists and is a directory."""
    result = probe_stat(path)
    if result is None:
        return False
    return stat.S_ISDIR(result.st_mode)
