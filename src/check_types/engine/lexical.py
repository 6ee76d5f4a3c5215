"""Offset-preserving lexical scanning for script sources."""

from __future__ import annotations

import re
from dataclasses import dataclass

_IMPORT_KEYWORD_RE = re.compile(r"(?<![A-Za-z0-9_$.])(from|import|require)\b")
_QUOTES = ("'", '"')


@dataclass(slots=True, frozen=True)
class LexicalRules:
    """Markers used while masking non-code text."""

    line_comment_prefixes: tuple[str, ...] = ("//",)
    block_comment_pairs: tuple[tuple[str, str], ...] = (("/*", "*/"),)
    string_delimiters: tuple[str, ...] = ("'", '"', "`")
    escape_char: str = "\\"


@dataclass(slots=True, frozen=True)
class BraceScan:
    """Offsets of braces that could not be paired."""

    unmatched_closing: tuple[int, ...]
    unclosed_opening: tuple[int, ...]


@dataclass(slots=True, frozen=True)
class SpecifierSite:
    """A quoted module specifier and the span of its literal, quotes included."""

    specifier: str
    start: int
    length: int


def mask_comments_and_strings(text: str, rules: LexicalRules | None = None) -> str:
    """Mask comments and strings while preserving line count and character offsets."""
    active_rules = rules or LexicalRules()
    line_prefixes = tuple(
        sorted(
            (prefix for prefix in active_rules.line_comment_prefixes if prefix),
            key=len,
            reverse=True,
        )
    )
    block_pairs = tuple(
        sorted(
            ((start, end) for start, end in active_rules.block_comment_pairs if start and end),
            key=lambda pair: len(pair[0]),
            reverse=True,
        )
    )
    string_delimiters = tuple(
        sorted(
            (marker for marker in active_rules.string_delimiters if marker),
            key=len,
            reverse=True,
        )
    )

    chars = list(text)
    length = len(text)
    index = 0
    state: tuple[str, str] | None = None

    while index < length:
        if state is None:
            line_marker = _match_any(text, index, line_prefixes)
            if line_marker is not None:
                _blank(chars, index, len(line_marker))
                state = ("line_comment", line_marker)
                index += len(line_marker)
                continue

            block_marker = _match_block_start(text, index, block_pairs)
            if block_marker is not None:
                start_marker, end_marker = block_marker
                _blank(chars, index, len(start_marker))
                state = ("block_comment", end_marker)
                index += len(start_marker)
                continue

            string_marker = _match_any(text, index, string_delimiters)
            if string_marker is not None:
                _blank(chars, index, len(string_marker))
                state = ("string", string_marker)
                index += len(string_marker)
                continue

            index += 1
            continue

        mode, marker = state
        if mode == "line_comment":
            if text[index] == "\n":
                state = None
            else:
                chars[index] = " "
            index += 1
            continue

        closes = text.startswith(marker, index)
        if mode == "string" and closes:
            closes = not _is_escaped(text, index, active_rules.escape_char)
        if mode == "string" and not closes and text[index] == "\n" and marker != "`":
            # Unterminated single-line string ends at the newline.
            state = None
            index += 1
            continue
        if closes:
            _blank(chars, index, len(marker))
            state = None
            index += len(marker)
            continue
        if text[index] != "\n":
            chars[index] = " "
        index += 1

    return "".join(chars)


def scan_braces(masked_text: str, open_char: str = "{", close_char: str = "}") -> BraceScan:
    """Find unpaired braces in already-masked text."""
    if len(open_char) != 1 or len(close_char) != 1:
        raise ValueError("open_char and close_char must be single characters.")
    stack: list[int] = []
    unmatched: list[int] = []
    for offset, char in enumerate(masked_text):
        if char == open_char:
            stack.append(offset)
        elif char == close_char:
            if stack:
                stack.pop()
            else:
                unmatched.append(offset)
    return BraceScan(unmatched_closing=tuple(unmatched), unclosed_opening=tuple(stack))


def extract_specifiers(text: str, masked_text: str | None = None) -> list[SpecifierSite]:
    """Find quoted specifiers of import, export-from, dynamic import and require forms."""
    masked = masked_text if masked_text is not None else mask_comments_and_strings(text)
    sites: list[SpecifierSite] = []
    for match in _IMPORT_KEYWORD_RE.finditer(masked):
        keyword = match.group(1)
        index = _skip_whitespace(text, match.end())
        if index < len(text) and text[index] == "(":
            index = _skip_whitespace(text, index + 1)
        elif keyword == "require":
            continue
        if index >= len(text) or text[index] not in _QUOTES:
            continue
        site = _read_literal(text, index)
        if site is not None:
            sites.append(site)
    return sites


def _read_literal(text: str, start: int) -> SpecifierSite | None:
    quote = text[start]
    index = start + 1
    while index < len(text):
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char == "\n":
            return None
        if char == quote:
            return SpecifierSite(
                specifier=text[start + 1 : index], start=start, length=index - start + 1
            )
        index += 1
    return None


def _skip_whitespace(text: str, index: int) -> int:
    while index < len(text) and text[index].isspace():
        index += 1
    return index


def _blank(chars: list[str], index: int, count: int) -> None:
    for offset in range(count):
        chars[index + offset] = " "


def _match_any(text: str, index: int, markers: tuple[str, ...]) -> str | None:
    for marker in markers:
        if text.startswith(marker, index):
            return marker
    return None


def _match_block_start(
    text: str, index: int, pairs: tuple[tuple[str, str], ...]
) -> tuple[str, str] | None:
    for start, end in pairs:
        if text.startswith(start, index):
            return start, end
    return None


def _is_escaped(text: str, index: int, escape_char: str) -> bool:
    if not escape_char:
        return False
    count = 0
    cursor = index - 1
    while cursor >= 0 and text[cursor] == escape_char:
        count += 1
        cursor -= 1
    return count % 2 == 1
