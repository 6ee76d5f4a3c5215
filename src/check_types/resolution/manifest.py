"""Package manifest loading."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from check_types.resolution.models import PackageDescriptor
from check_types.resolution.paths import ProbeError, is_file, normalize_path

MANIFEST_NAME = "package.json"
TYPE_ENTRY_FIELDS = ("types", "typings")
MAIN_ENTRY_FIELD = "main"


def load_package(directory: Path) -> PackageDescriptor | None:
    """Read the manifest in a directory.

    A missing manifest, unreadable JSON, or a non-object payload all count as
    "no manifest". Unexpected I/O failures propagate as ProbeError.
    """
    manifest_path = directory / MANIFEST_NAME
    if not is_file(manifest_path):
        return None
    try:
        raw = manifest_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise ProbeError(manifest_path, exc) from exc
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    if not isinstance(payload, dict):
        return None

    type_entry: Path | None = None
    for name in TYPE_ENTRY_FIELDS:
        value = payload.get(name)
        if isinstance(value, str) and value:
            type_entry = _entry_path(directory, value)
            break
    main_entry: Path | None = None
    main_value = payload.get(MAIN_ENTRY_FIELD)
    if isinstance(main_value, str) and main_value:
        main_entry = _entry_path(directory, main_value)
    return PackageDescriptor(directory=directory, main_entry=main_entry, type_entry=type_entry)


def _entry_path(directory: Path, value: str) -> Path:
    return normalize_path(directory / value)


@dataclass(slots=True)
class ManifestCache:
    """Per-directory manifest memo, never invalidated within a session."""

    _entries: dict[Path, PackageDescriptor | None] = field(default_factory=dict)

    def get(self, directory: Path) -> PackageDescriptor | None:
        """Return the descriptor for a directory, loading it on first request."""
        if directory in self._entries:
            return self._entries[directory]
        descriptor = load_package(directory)
        self._entries[directory] = descriptor
        return descriptor

    def __len__(self) -> int:
        return len(self._entries)
