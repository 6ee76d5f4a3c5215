"""Capability contracts between the session host and a type-checking engine."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol

from check_types.resolution.models import ResolvedModule


class DiagnosticCategory(Enum):
    """Severity bucket of an engine diagnostic."""

    WARNING = "warning"
    ERROR = "error"
    SUGGESTION = "suggestion"
    MESSAGE = "message"


@dataclass(slots=True, frozen=True)
class MessageChain:
    """Nested diagnostic message; the head carries the reported code and text."""

    message_text: str
    code: int
    category: DiagnosticCategory
    next: tuple[MessageChain, ...] = ()


@dataclass(slots=True, frozen=True)
class Diagnostic:
    """Single engine diagnostic, optionally anchored to a file span."""

    category: DiagnosticCategory
    code: int
    message: str | MessageChain
    file: Path | None = None
    start: int | None = None
    length: int | None = None


class ScriptSnapshot(Protocol):
    """Read-only view of one file's text."""

    def get_text(self, start: int, end: int) -> str:
        """Return the text in [start, end)."""

    def get_length(self) -> int:
        """Return the text length."""

    def dispose(self) -> None:
        """Release cached content."""


class LanguageServiceHost(Protocol):
    """Callbacks an engine uses to read project state."""

    def get_compilation_settings(self) -> dict[str, object]:
        """Return validated compiler options."""

    def get_script_file_names(self) -> list[str]:
        """Return the project's root file list."""

    def get_script_version(self, path: str) -> str:
        """Return the version of a file."""

    def get_script_snapshot(self, path: str) -> ScriptSnapshot | None:
        """Return a snapshot for a file, or None when it does not exist."""

    def get_default_lib_file_name(self, settings: dict[str, object]) -> str:
        """Return the bundled standard library declaration file for the settings."""

    def resolve_module_names(
        self,
        specifiers: Sequence[str],
        containing_file: str,
        settings: dict[str, object] | None = None,
    ) -> list[ResolvedModule | None]:
        """Resolve every specifier imported by a file, None for misses."""

    def get_current_directory(self) -> str:
        """Return the working directory used for relative names."""

    def get_new_line(self) -> str:
        """Return the configured newline sequence."""

    def log(self, message: str) -> None:
        """Record an informational engine message."""

    def trace(self, message: str) -> None:
        """Record an engine trace message."""

    def error(self, message: str) -> None:
        """Record an engine error message."""


class TypeCheckEngine(Protocol):
    """Opaque checker bound to one host."""

    def get_syntactic_diagnostics(self, path: str) -> list[Diagnostic]:
        """Return parse diagnostics for a file."""

    def get_semantic_diagnostics(self, path: str) -> list[Diagnostic]:
        """Return type diagnostics for a file."""

    def get_suggestion_diagnostics(self, path: str) -> list[Diagnostic]:
        """Return suggestion diagnostics for a file."""


EngineFactory = Callable[[LanguageServiceHost], TypeCheckEngine]
