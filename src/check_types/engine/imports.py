"""Lexical engine that checks module resolution of every import in a file."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from check_types.engine.base import Diagnostic, DiagnosticCategory, LanguageServiceHost
from check_types.engine.lexical import (
    SpecifierSite,
    extract_specifiers,
    mask_comments_and_strings,
    scan_braces,
)
from check_types.resolution.models import Extension, ResolvedModule

DECLARATION_OR_STATEMENT_EXPECTED = 1128
CLOSE_BRACE_EXPECTED = 1005
CANNOT_FIND_MODULE = 2307
JSON_MODULE_REQUIRES_FLAG = 2732
FILE_NOT_FOUND = 6053
IMPLICIT_ANY_MODULE = 7016


@dataclass(slots=True, frozen=True)
class _ImportCheck:
    site: SpecifierSite
    resolved: ResolvedModule | None


@dataclass(slots=True, frozen=True)
class _ScannedFile:
    path: Path
    text: str
    masked: str


class ImportCheckEngine:
    """Reports unbalanced braces and imports the host cannot resolve.

    Results are memoized per file for the engine's lifetime, matching the
    host's constant script versions.
    """

    def __init__(self, host: LanguageServiceHost) -> None:
        self._host = host
        self._scanned: dict[str, _ScannedFile | None] = {}
        self._imports: dict[str, list[_ImportCheck]] = {}

    @property
    def host(self) -> LanguageServiceHost:
        return self._host

    def get_syntactic_diagnostics(self, path: str) -> list[Diagnostic]:
        scanned = self._scan(path)
        if scanned is None:
            return [
                Diagnostic(
                    category=DiagnosticCategory.ERROR,
                    code=FILE_NOT_FOUND,
                    message=f"File '{path}' not found.",
                )
            ]
        braces = scan_braces(scanned.masked)
        output: list[Diagnostic] = []
        for offset in braces.unmatched_closing:
            output.append(
                Diagnostic(
                    category=DiagnosticCategory.ERROR,
                    code=DECLARATION_OR_STATEMENT_EXPECTED,
                    message="Declaration or statement expected.",
                    file=scanned.path,
                    start=offset,
                    length=1,
                )
            )
        for offset in braces.unclosed_opening:
            output.append(
                Diagnostic(
                    category=DiagnosticCategory.ERROR,
                    code=CLOSE_BRACE_EXPECTED,
                    message="'}' expected.",
                    file=scanned.path,
                    start=offset,
                    length=1,
                )
            )
        output.sort(key=lambda item: (item.start or 0, item.code))
        return output

    def get_semantic_diagnostics(self, path: str) -> list[Diagnostic]:
        scanned = self._scan(path)
        if scanned is None:
            return []
        settings = self._host.get_compilation_settings()
        strict_any = _implicit_any_is_error(settings)
        json_enabled = settings.get("resolveJsonModule") is True
        output: list[Diagnostic] = []
        for check in self._checked_imports(scanned):
            specifier = check.site.specifier
            resolved = check.resolved
            if resolved is None:
                output.append(
                    _at_site(
                        scanned.path,
                        check.site,
                        DiagnosticCategory.ERROR,
                        CANNOT_FIND_MODULE,
                        f"Cannot find module '{specifier}' or its corresponding type declarations.",
                    )
                )
                continue
            if resolved.extension is Extension.JSON and not json_enabled:
                output.append(
                    _at_site(
                        scanned.path,
                        check.site,
                        DiagnosticCategory.ERROR,
                        JSON_MODULE_REQUIRES_FLAG,
                        f"Cannot find module '{specifier}'. Consider using '--resolveJsonModule' "
                        "to import module with '.json' extension.",
                    )
                )
                continue
            if strict_any and _is_untyped_script(resolved):
                output.append(
                    _implicit_any(scanned.path, check.site, resolved, DiagnosticCategory.ERROR)
                )
        return output

    def get_suggestion_diagnostics(self, path: str) -> list[Diagnostic]:
        scanned = self._scan(path)
        if scanned is None:
            return []
        if _implicit_any_is_error(self._host.get_compilation_settings()):
            return []
        return [
            _implicit_any(scanned.path, check.site, check.resolved, DiagnosticCategory.SUGGESTION)
            for check in self._checked_imports(scanned)
            if check.resolved is not None and _is_untyped_script(check.resolved)
        ]

    def _scan(self, path: str) -> _ScannedFile | None:
        if path in self._scanned:
            return self._scanned[path]
        snapshot = self._host.get_script_snapshot(path)
        scanned: _ScannedFile | None = None
        if snapshot is not None:
            text = snapshot.get_text(0, snapshot.get_length())
            scanned = _ScannedFile(
                path=Path(path), text=text, masked=mask_comments_and_strings(text)
            )
        self._scanned[path] = scanned
        return scanned

    def _checked_imports(self, scanned: _ScannedFile) -> list[_ImportCheck]:
        key = str(scanned.path)
        cached = self._imports.get(key)
        if cached is not None:
            return cached
        sites = extract_specifiers(scanned.text, scanned.masked)
        unique = list(dict.fromkeys(site.specifier for site in sites))
        resolved = self._host.resolve_module_names(
            unique, key, self._host.get_compilation_settings()
        )
        by_specifier = dict(zip(unique, resolved, strict=True))
        checks = [_ImportCheck(site=site, resolved=by_specifier[site.specifier]) for site in sites]
        self._imports[key] = checks
        return checks


def _implicit_any_is_error(settings: dict[str, object]) -> bool:
    if "noImplicitAny" in settings:
        return settings["noImplicitAny"] is True
    return settings.get("strict") is True


def _is_untyped_script(resolved: ResolvedModule) -> bool:
    return resolved.extension in (Extension.JS, Extension.JSX)


def _implicit_any(
    path: Path,
    site: SpecifierSite,
    resolved: ResolvedModule,
    category: DiagnosticCategory,
) -> Diagnostic:
    return _at_site(
        path,
        site,
        category,
        IMPLICIT_ANY_MODULE,
        f"Could not find a declaration file for module '{site.specifier}'. "
        f"'{resolved.resolved_path}' implicitly has an 'any' type.",
    )


def _at_site(
    path: Path,
    site: SpecifierSite,
    category: DiagnosticCategory,
    code: int,
    message: str,
) -> Diagnostic:
    return Diagnostic(
        category=category,
        code=code,
        message=message,
        file=path,
        start=site.start,
        length=site.length,
    )
