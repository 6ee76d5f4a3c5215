"""Translation of engine diagnostics into lint reports."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from check_types.engine.base import Diagnostic, DiagnosticCategory, MessageChain
from check_types.resolution.paths import normalize_path

_LINE_BREAKS = ("\n", "\u2028", "\u2029")


@dataclass(slots=True, frozen=True)
class Location:
    """Report range with 1-based lines and 0-based columns."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int


@dataclass(slots=True, frozen=True)
class Report:
    """One lint finding, anchored to a range or to the visited node."""

    message: str
    category: DiagnosticCategory | None = None
    code: int | None = None
    location: Location | None = None
    node: object | None = None


class TextSource(Protocol):
    """Anything that can return the full text of a file."""

    def get_text(self, path: Path | str, start: int, end: int) -> str:
        """Return the text in [start, end) of a file."""

    def get_length(self, path: Path | str) -> int:
        """Return the length of a file."""


class LineMap:
    """Offset to line/character table for one text."""

    def __init__(self, text: str) -> None:
        starts = [0]
        length = len(text)
        index = 0
        while index < length:
            char = text[index]
            if char == "\r":
                if index + 1 < length and text[index + 1] == "\n":
                    index += 1
                starts.append(index + 1)
            elif char in _LINE_BREAKS:
                starts.append(index + 1)
            index += 1
        self._starts = starts
        self._length = length

    def line_and_character(self, offset: int) -> tuple[int, int]:
        """Return the 0-based line and character of an offset, clamped to the text."""
        position = min(max(offset, 0), self._length)
        line = bisect_right(self._starts, position) - 1
        return line, position - self._starts[line]


def format_message(diagnostic: Diagnostic) -> str:
    """Render ``TS<code>: <text>``; a message chain reports its head."""
    message = diagnostic.message
    if isinstance(message, MessageChain):
        return f"TS{message.code}: {message.message_text}"
    return f"TS{diagnostic.code}: {message}"


class DiagnosticTranslator:
    """Maps diagnostics to reports using each file's own position table."""

    def __init__(self, source: TextSource) -> None:
        self._source = source
        self._line_maps: dict[Path, LineMap] = {}

    def line_map(self, path: Path | str) -> LineMap:
        key = normalize_path(path)
        line_map = self._line_maps.get(key)
        if line_map is None:
            line_map = LineMap(self._source.get_text(key, 0, self._source.get_length(key)))
            self._line_maps[key] = line_map
        return line_map

    def translate(self, diagnostic: Diagnostic, node: object | None = None) -> Report:
        """Build a located report, or a node-anchored one when position data is missing."""
        message = format_message(diagnostic)
        file, start, length = diagnostic.file, diagnostic.start, diagnostic.length
        if file is None or start is None or length is None or length <= 0:
            return Report(
                message=message,
                category=diagnostic.category,
                code=diagnostic.code,
                node=node,
            )
        line_map = self.line_map(file)
        start_line, start_col = line_map.line_and_character(start)
        end_line, end_col = line_map.line_and_character(start + length)
        return Report(
            message=message,
            category=diagnostic.category,
            code=diagnostic.code,
            location=Location(
                start_line=start_line + 1,
                start_col=start_col,
                end_line=end_line + 1,
                end_col=end_col,
            ),
        )
