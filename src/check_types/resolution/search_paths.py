"""Ordered search directories for bare specifiers."""

from __future__ import annotations

import os
import shutil
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path

from check_types.resolution.paths import normalize_path, parents

DEPENDENCY_DIRECTORY = "node_modules"


def dependency_dirs(start: Path, stop: Path | None = None) -> list[Path]:
    """Return one dependency directory per ancestor of start, nearest first.

    Walking ends after ``stop`` when it is an ancestor of ``start``, otherwise
    at the filesystem root. Ancestors that are themselves dependency
    directories are skipped.
    """
    stop_at = normalize_path(stop) if stop is not None else None
    output: list[Path] = []
    for directory in parents(start):
        if directory.name != DEPENDENCY_DIRECTORY:
            output.append(directory / DEPENDENCY_DIRECTORY)
        if directory == stop_at:
            break
    return output


def system_library_paths(
    environ: Mapping[str, str] | None = None,
    home: Path | None = None,
    runtime_executable: str | None = None,
) -> list[Path]:
    """Return the runtime-wide library directories, lowest precedence last.

    Mirrors the package runtime's defaults: entries of NODE_PATH, then
    ``~/.node_modules``, ``~/.node_libraries`` and ``<prefix>/lib/node``.
    """
    env = os.environ if environ is None else environ
    output: list[Path] = []
    for entry in env.get("NODE_PATH", "").split(os.pathsep):
        if entry:
            output.append(normalize_path(entry))
    home_dir = home
    if home_dir is None:
        raw_home = env.get("HOME") or env.get("USERPROFILE")
        home_dir = Path(raw_home) if raw_home else None
    if home_dir is not None:
        output.append(normalize_path(home_dir / ".node_modules"))
        output.append(normalize_path(home_dir / ".node_libraries"))
    executable = runtime_executable
    if executable is None:
        executable = shutil.which("node", path=env.get("PATH"))
    if executable:
        prefix = Path(os.path.realpath(executable)).parent.parent
        output.append(normalize_path(prefix / "lib" / "node"))
    return output


def global_library_paths(
    caller_directory: Path,
    candidates: Iterable[Path] | None = None,
    extra: Sequence[Path] = (),
) -> list[Path]:
    """Return the caller's library search directories minus its own ancestor chain."""
    own_chain = set(dependency_dirs(caller_directory))
    if candidates is None:
        candidates = [*dependency_dirs(caller_directory), *system_library_paths()]
    output = [path for path in candidates if normalize_path(path) not in own_chain]
    output.extend(normalize_path(path) for path in extra)
    return _dedupe(output)


def build_search_paths(
    containing_directory: Path,
    project_root: Path,
    global_paths: Sequence[Path],
    project_paths: Sequence[Path] | None = None,
) -> tuple[Path, ...]:
    """Return the ordered directories searched for bare specifiers.

    File-local dependency directories up to the project root come first, then
    the project root's ancestor chain, then the global directories.
    """
    local = dependency_dirs(containing_directory, stop=project_root)
    project = project_paths if project_paths is not None else dependency_dirs(project_root)
    return tuple(_dedupe([*local, *project, *global_paths]))


class SearchPathBuilder:
    """Session-scoped search path construction with memoized results."""

    def __init__(self, project_root: Path, global_paths: Sequence[Path]) -> None:
        self._project_root = normalize_path(project_root)
        self._project_paths = tuple(dependency_dirs(self._project_root))
        self._global_paths = tuple(global_paths)
        self._memo: dict[Path, tuple[Path, ...]] = {}

    @property
    def project_paths(self) -> tuple[Path, ...]:
        return self._project_paths

    @property
    def global_paths(self) -> tuple[Path, ...]:
        return self._global_paths

    def build(self, containing_directory: Path) -> tuple[Path, ...]:
        """Return search paths for files in a directory."""
        directory = normalize_path(containing_directory)
        cached = self._memo.get(directory)
        if cached is not None:
            return cached
        paths = build_search_paths(
            directory,
            self._project_root,
            self._global_paths,
            project_paths=self._project_paths,
        )
        self._memo[directory] = paths
        return paths


def _dedupe(paths: Iterable[Path]) -> list[Path]:
    seen: set[Path] = set()
    output: list[Path] = []
    for path in paths:
        if path in seen:
            continue
        seen.add(path)
        output.append(path)
    return output
