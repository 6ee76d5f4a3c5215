"""Nearest-config lookup and deterministic project file enumeration."""

from __future__ import annotations

import fnmatch
import os
from pathlib import Path

from check_types.project.tsconfig import ProjectConfig
from check_types.resolution.paths import is_file, normalize_path, parents
from check_types.resolution.search_paths import DEPENDENCY_DIRECTORY

TYPED_SCRIPT_SUFFIXES = (".ts", ".tsx")
PLAIN_SCRIPT_SUFFIXES = (".js", ".jsx")
_WILDCARD_CHARS = "*?["


def find_above(directory: Path, file_name: str) -> Path | None:
    """Return the nearest file with the given name in a directory or its ancestors."""
    for current in parents(directory):
        candidate = current / file_name
        if is_file(candidate):
            return candidate
    return None


def discover_project_files(config: ProjectConfig) -> list[Path]:
    """List the project's root files.

    Explicit ``files`` win. Otherwise the config directory is walked in sorted
    order, skipping hidden and dependency directories, and the ``include`` then
    ``exclude`` patterns are applied to config-relative paths.
    """
    if config.files is not None:
        return list(config.files)

    suffixes = TYPED_SCRIPT_SUFFIXES
    if config.compiler_options.allow_js:
        suffixes = TYPED_SCRIPT_SUFFIXES + PLAIN_SCRIPT_SUFFIXES
    include = config.include
    exclude = config.exclude or ()
    output: list[Path] = []
    for full_path in _walk_scripts(config.root_dir, suffixes):
        relative = full_path.relative_to(config.root_dir).as_posix()
        if include is not None and not any(matches_pattern(relative, item) for item in include):
            continue
        if any(matches_pattern(relative, item) for item in exclude):
            continue
        output.append(full_path)
    return output


def matches_pattern(relative_path: str, pattern: str) -> bool:
    """Return True when a config-relative path matches an include/exclude pattern.

    Patterns without wildcards name a file or a directory subtree. ``**/``
    also matches zero directories.
    """
    normalized = pattern.replace("\\", "/").strip()
    while normalized.startswith("./"):
        normalized = normalized[2:]
    normalized = normalized.rstrip("/")
    if not normalized:
        return True
    if not any(char in normalized for char in _WILDCARD_CHARS):
        return relative_path == normalized or relative_path.startswith(f"{normalized}/")
    if fnmatch.fnmatchcase(relative_path, normalized):
        return True
    collapsed = normalized.replace("**/", "")
    if collapsed != normalized and fnmatch.fnmatchcase(relative_path, collapsed):
        return True
    if normalized.endswith("/**"):
        return relative_path.startswith(f"{normalized[:-3]}/")
    return False


def _walk_scripts(root: Path, suffixes: tuple[str, ...]) -> list[Path]:
    """Walk tree deterministically, skipping hidden and dependency directories."""
    found: list[Path] = []
    stack: list[Path] = [normalize_path(root)]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as entries:
                ordered_entries = sorted(entries, key=lambda item: item.name)
        except OSError:
            continue
        for entry in reversed(ordered_entries):
            if entry.name.startswith("."):
                continue
            full_path = Path(entry.path)
            if entry.is_dir(follow_symlinks=False):
                if entry.name != DEPENDENCY_DIRECTORY:
                    stack.append(full_path)
                continue
            if not entry.is_file(follow_symlinks=False):
                continue
            if entry.name.lower().endswith(suffixes):
                found.append(full_path)
    found.sort()
    return found
