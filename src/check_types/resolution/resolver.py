"""Multi-strategy module specifier resolution."""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path

from check_types.resolution.manifest import ManifestCache
from check_types.resolution.models import (
    JS_EXTENSIONS,
    TS_EXTENSIONS,
    Extension,
    PackageDescriptor,
    ResolvedModule,
    extension_of,
)
from check_types.resolution.paths import is_file, normalize_path

TYPES_DIRECTORY = "@types"
INDEX_NAME = "index"

# Script suffixes whose typed sibling is preferred, e.g. "./util.js" -> "./util.ts".
_SCRIPT_ALIASES = {".js": (Extension.TS, Extension.TSX, Extension.DTS), ".jsx": (Extension.TSX,)}


def is_relative(specifier: str) -> bool:
    """Return True for specifiers resolved against the importing directory."""
    return specifier.startswith(".")


def is_path_specifier(specifier: str) -> bool:
    """Return True for relative or absolute file specifiers, which never use search roots."""
    return is_relative(specifier) or os.path.isabs(specifier)


def mangle_types_name(specifier: str) -> str:
    """Map a scoped package name to its name under a types root.

    "@scope/pkg/sub" becomes "scope__pkg/sub"; unscoped names are unchanged.
    """
    if not specifier.startswith("@"):
        return specifier
    parts = specifier[1:].split("/", 2)
    if len(parts) < 2:
        return specifier
    mangled = f"{parts[0]}__{parts[1]}"
    if len(parts) == 3:
        return f"{mangled}/{parts[2]}"
    return mangled


class ModuleResolver:
    """Resolve specifiers to files using declaration-first probe ordering."""

    def __init__(self, manifests: ManifestCache | None = None) -> None:
        self._manifests = manifests if manifests is not None else ManifestCache()

    @property
    def manifests(self) -> ManifestCache:
        return self._manifests

    def resolve(
        self,
        directory: Path,
        specifier: str,
        search_paths: Sequence[Path] = (),
        type_roots: Sequence[Path] | None = None,
        types: Sequence[str] | None = None,
    ) -> ResolvedModule | None:
        """Resolve a specifier imported from a directory.

        Relative and absolute specifiers are probed against the directory and
        are never external. Bare specifiers are probed under every search path
        in order; when ``types`` is given, only the listed names are looked up
        in ambient type roots. With no explicit ``type_roots`` each search
        path's own ``@types`` directory is used.
        """
        if is_path_specifier(specifier):
            return self.resolve_relative(directory, specifier)
        return self.resolve_bare(specifier, search_paths, type_roots=type_roots, types=types)

    def resolve_relative(self, directory: Path, specifier: str) -> ResolvedModule | None:
        """Resolve a "./", "../" or absolute specifier."""
        target = normalize_path(directory / specifier)
        return self.find_module(target.parent, target.name)

    def resolve_bare(
        self,
        specifier: str,
        search_paths: Sequence[Path],
        type_roots: Sequence[Path] | None = None,
        types: Sequence[str] | None = None,
    ) -> ResolvedModule | None:
        """Resolve a package-style specifier through ordered search roots."""
        if is_path_specifier(specifier):
            return None
        check_types_packages = types is None or specifier in types
        for search_root in search_paths:
            roots: Sequence[Path] = ()
            if check_types_packages:
                roots = type_roots if type_roots is not None else (search_root / TYPES_DIRECTORY,)
            found = self.find_module(search_root, specifier, type_roots=roots, is_external=True)
            if found is not None:
                return found
        return None

    def find_module(
        self,
        directory: Path,
        name: str,
        type_roots: Sequence[Path] = (),
        is_external: bool = False,
    ) -> ResolvedModule | None:
        """Probe one base location in strict precedence order."""
        target = normalize_path(directory / name)

        found = self._find_typed_file(target, is_external)
        if found is not None:
            return found

        package = self._manifests.get(target)
        found = _find_type_entry(package, is_external)
        if found is not None:
            return found

        for root in type_roots:
            found = self.find_types(normalize_path(root / mangle_types_name(name)))
            if found is not None:
                return found

        index = target / INDEX_NAME
        found = _find_any(index, TS_EXTENSIONS, is_external)
        if found is not None:
            return found

        found = _find_exact(target, JS_EXTENSIONS, is_external)
        if found is not None:
            return found
        found = _find_any(target, JS_EXTENSIONS, is_external)
        if found is not None:
            return found

        if package is not None and package.main_entry is not None:
            main = package.main_entry
            if is_file(main):
                return ResolvedModule(
                    resolved_path=main,
                    extension=extension_of(main, Extension.JS) or Extension.JS,
                    is_external=is_external,
                )
            found = _find_any(main, JS_EXTENSIONS, is_external)
            if found is not None:
                return found

        return _find_any(index, JS_EXTENSIONS, is_external)

    def find_types(self, target: Path) -> ResolvedModule | None:
        """Probe a types package: a declaration file, a manifest type entry, or index.d.ts."""
        declaration = _with_suffix(target, Extension.DTS)
        if is_file(declaration):
            return ResolvedModule(
                resolved_path=declaration, extension=Extension.DTS, is_external=True
            )

        found = _find_type_entry(self._manifests.get(target), is_external=True)
        if found is not None:
            return found

        index = target / f"{INDEX_NAME}{Extension.DTS.value}"
        if is_file(index):
            return ResolvedModule(resolved_path=index, extension=Extension.DTS, is_external=True)
        return None

    def _find_typed_file(self, target: Path, is_external: bool) -> ResolvedModule | None:
        found = _find_any(target, TS_EXTENSIONS, is_external)
        if found is not None:
            return found
        found = _find_exact(target, TS_EXTENSIONS, is_external)
        if found is not None:
            return found
        aliases = _SCRIPT_ALIASES.get(target.suffix.lower())
        if aliases is not None:
            return _find_any(target.with_suffix(""), aliases, is_external)
        return None


def _with_suffix(target: Path, extension: Extension) -> Path:
    return Path(f"{target}{extension.value}")


def _find_type_entry(
    package: PackageDescriptor | None, is_external: bool
) -> ResolvedModule | None:
    if package is None or package.type_entry is None:
        return None
    if not is_file(package.type_entry):
        return None
    return ResolvedModule(
        resolved_path=package.type_entry,
        extension=extension_of(package.type_entry, Extension.DTS) or Extension.DTS,
        is_external=is_external,
    )


def _find_any(
    target: Path, extensions: Sequence[Extension], is_external: bool
) -> ResolvedModule | None:
    for extension in extensions:
        candidate = _with_suffix(target, extension)
        if is_file(candidate):
            return ResolvedModule(
                resolved_path=candidate, extension=extension, is_external=is_external
            )
    return None


def _find_exact(
    target: Path, extensions: Sequence[Extension], is_external: bool
) -> ResolvedModule | None:
    """Accept a specifier that already names a file with one of the extensions."""
    extension = extension_of(target.name)
    if extension is None or extension not in extensions:
        return None
    if not is_file(target):
        return None
    return ResolvedModule(resolved_path=target, extension=extension, is_external=is_external)
