"""Typed records produced by module resolution."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class Extension(Enum):
    """Kind of a resolved module, named by its file extension."""

    TS = ".ts"
    TSX = ".tsx"
    DTS = ".d.ts"
    JS = ".js"
    JSX = ".jsx"
    JSON = ".json"


# Probe order matters: typed sources are always tried before plain scripts.
TS_EXTENSIONS: tuple[Extension, ...] = (Extension.TS, Extension.TSX, Extension.DTS)
JS_EXTENSIONS: tuple[Extension, ...] = (Extension.JS, Extension.JSX, Extension.JSON)

_BY_SUFFIX_LENGTH = sorted(Extension, key=lambda item: len(item.value), reverse=True)


def extension_of(name: str | Path, guess: Extension | None = None) -> Extension | None:
    """Return the extension kind of a file name, or the guess when it has no known one."""
    lowered = str(name).lower()
    for extension in _BY_SUFFIX_LENGTH:
        if lowered.endswith(extension.value):
            return extension
    return guess


@dataclass(slots=True, frozen=True)
class ResolvedModule:
    """A successful specifier resolution."""

    resolved_path: Path
    extension: Extension
    is_external: bool


@dataclass(slots=True, frozen=True)
class PackageDescriptor:
    """Entry points read from a package manifest, already made absolute."""

    directory: Path
    main_entry: Path | None = None
    type_entry: Path | None = None
