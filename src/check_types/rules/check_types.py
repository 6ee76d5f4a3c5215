"""Lint rules that report type-checking engine diagnostics."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Protocol

from check_types.engine.base import Diagnostic, DiagnosticCategory
from check_types.resolution.paths import ProbeError, normalize_path
from check_types.rules.diagnostics import DiagnosticTranslator, Report
from check_types.session.registry import ConfigDecodeFailure, SessionRegistry
from check_types.session.snapshots import SourceDecodeError

CATEGORY_NAMES: dict[str, DiagnosticCategory] = {
    "errors": DiagnosticCategory.ERROR,
    "warnings": DiagnosticCategory.WARNING,
    "suggestions": DiagnosticCategory.SUGGESTION,
    "messages": DiagnosticCategory.MESSAGE,
}

RuleListener = dict[str, Callable[[object], None]]


class RuleContext(Protocol):
    """What a lint runtime provides to a rule while visiting one file."""

    def get_filename(self) -> str:
        """Return the path of the file being linted."""

    def report(self, report: Report) -> None:
        """Record a finding."""


@dataclass(slots=True, frozen=True)
class TypeCheckRule:
    """Reports engine diagnostics for the visited file, filtered by category."""

    sessions: SessionRegistry
    categories: frozenset[DiagnosticCategory] | None = None
    rule_type: str = "problem"

    def create(self, context: RuleContext) -> RuleListener:
        """Return node visitors keyed by node type."""
        return {"Program": lambda node: check_types(context, node, self.sessions, self.categories)}


def build_rule(
    sessions: SessionRegistry, categories: Iterable[str] | None = None
) -> TypeCheckRule:
    """Build a rule reporting the named categories, or every category when None."""
    if categories is None:
        return TypeCheckRule(sessions=sessions)
    selected: set[DiagnosticCategory] = set()
    for name in categories:
        category = CATEGORY_NAMES.get(name)
        if category is None:
            raise ValueError(f"Unknown diagnostic category: {name}")
        selected.add(category)
    return TypeCheckRule(sessions=sessions, categories=frozenset(selected))


def check_types(
    context: RuleContext,
    node: object,
    sessions: SessionRegistry,
    categories: frozenset[DiagnosticCategory] | None = None,
) -> None:
    """Report syntactic, semantic and suggestion diagnostics for the visited file.

    Files outside any project are skipped silently. A config that fails to
    decode yields a single report and no diagnostics for this visit, as does a
    file that cannot be read or decoded.
    """
    filename = str(normalize_path(context.get_filename()))
    try:
        session = sessions.session_for_file(filename)
        if session is None:
            return
        if isinstance(session, ConfigDecodeFailure):
            context.report(Report(message=session.message, node=node))
            return
        engine = session.engine
        translator = DiagnosticTranslator(session.host.snapshots)
        for collect in (
            engine.get_syntactic_diagnostics,
            engine.get_semantic_diagnostics,
            engine.get_suggestion_diagnostics,
        ):
            for diagnostic in _filtered(collect(filename), categories):
                context.report(translator.translate(diagnostic, node))
    except ProbeError as exc:
        context.report(Report(message=str(exc.strerror), node=node))
    except SourceDecodeError as exc:
        context.report(Report(message=str(exc), node=node))


def _filtered(
    diagnostics: list[Diagnostic], categories: frozenset[DiagnosticCategory] | None
) -> list[Diagnostic]:
    if categories is None:
        return diagnostics
    return [diagnostic for diagnostic in diagnostics if diagnostic.category in categories]
