from __future__ import annotations

from pathlib import Path

from check_types.resolution import (
    ModuleResolver,
    ResolutionCache,
    ResolvedModule,
    resolution_key,
)


def test_repeated_lookup_is_served_from_cache(tmp_path: Path) -> None:
    (tmp_path / "b.d.ts").write_text("", encoding="utf-8")
    resolver = ModuleResolver()
    cache = ResolutionCache()
    calls: list[str] = []

    def compute() -> ResolvedModule | None:
        calls.append("x")
        return resolver.resolve(tmp_path, "./b")

    first = cache.get_or_resolve(tmp_path, "./b", compute)
    second = cache.get_or_resolve(tmp_path, "./b", compute)

    assert first is second
    assert calls == ["x"]
    assert cache.stats().hits == 1
    assert cache.stats().misses == 1


def test_relative_specifiers_share_entry_by_absolute_target(tmp_path: Path) -> None:
    (tmp_path / "sub").mkdir()

    assert resolution_key(tmp_path, "./sub/a") == resolution_key(tmp_path / "sub", "./a")
    assert resolution_key(tmp_path, "./a") == resolution_key(tmp_path / "sub", "../a")
    assert resolution_key(tmp_path, "dep") != resolution_key(tmp_path / "sub", "dep")


def test_misses_are_cached(tmp_path: Path) -> None:
    cache = ResolutionCache()
    calls: list[int] = []

    def compute() -> None:
        calls.append(1)
        return None

    assert cache.get_or_resolve(tmp_path, "./gone", compute) is None
    assert cache.get_or_resolve(tmp_path, "./gone", compute) is None
    assert calls == [1]
    assert len(cache) == 1


def test_resolve_is_idempotent_without_cache(tmp_path: Path) -> None:
    (tmp_path / "x.ts").write_text("", encoding="utf-8")
    resolver = ModuleResolver()

    first = resolver.resolve(tmp_path, "./x")
    second = resolver.resolve(tmp_path, "./x")

    assert first == second


def test_absolute_specifier_shares_key_with_relative_form(tmp_path: Path) -> None:
    assert resolution_key(tmp_path / "sub", str(tmp_path / "a")) == resolution_key(
        tmp_path, "./a"
    )


def test_clear_drops_entries_and_forces_recompute(tmp_path: Path) -> None:
    cache = ResolutionCache()
    calls: list[int] = []

    def compute() -> None:
        calls.append(1)
        return None

    cache.get_or_resolve(tmp_path, "dep", compute)
    cache.clear()

    assert len(cache) == 0
    cache.get_or_resolve(tmp_path, "dep", compute)
    assert calls == [1, 1]
    assert cache.stats().misses == 2
