"""Memoization of resolver results."""

from __future__ import annotations

from collections.abc import Callable, Hashable
from dataclasses import dataclass, field
from pathlib import Path

from check_types.resolution.models import ResolvedModule
from check_types.resolution.paths import normalize_path
from check_types.resolution.resolver import is_path_specifier

_MISSING = object()


@dataclass(slots=True, frozen=True)
class CacheStats:
    """Hit and miss counters for one cache."""

    hits: int
    misses: int
    entries: int


def resolution_key(directory: Path, specifier: str) -> Hashable:
    """Build the cache key for a lookup.

    Relative and absolute specifiers key on their absolute target, so "./a"
    from "/p" and "../p/a" from "/p/x" share an entry. Bare specifiers key on
    the importing directory, which fixes their search path.
    """
    if is_path_specifier(specifier):
        return ("relative", normalize_path(directory / specifier))
    return ("bare", normalize_path(directory), specifier)


@dataclass(slots=True)
class ResolutionCache:
    """Memoizes resolution outcomes, including misses."""

    _entries: dict[Hashable, ResolvedModule | None] = field(default_factory=dict)
    _hits: int = 0
    _misses: int = 0

    def get_or_resolve(
        self,
        directory: Path,
        specifier: str,
        compute: Callable[[], ResolvedModule | None],
    ) -> ResolvedModule | None:
        """Return the cached result for a lookup, computing it on first request."""
        key = resolution_key(directory, specifier)
        cached = self._entries.get(key, _MISSING)
        if cached is not _MISSING:
            self._hits += 1
            return cached  # type: ignore[return-value]
        self._misses += 1
        result = compute()
        self._entries[key] = result
        return result

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> CacheStats:
        return CacheStats(hits=self._hits, misses=self._misses, entries=len(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
