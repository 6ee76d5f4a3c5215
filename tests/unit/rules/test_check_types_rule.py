from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from check_types.engine import (
    Diagnostic,
    DiagnosticCategory,
    ImportCheckEngine,
    LanguageServiceHost,
)
from check_types.resolution import ProbeError
from check_types.rules import Report, build_rule, build_rule_registry, check_types
from check_types.session import SessionRegistry


@dataclass(slots=True)
class CollectingContext:
    filename: Path
    reports: list[Report] = field(default_factory=list)

    def get_filename(self) -> str:
        return str(self.filename)

    def report(self, report: Report) -> None:
        self.reports.append(report)


class OneOfEachEngine:
    """Returns one diagnostic of every category."""

    def __init__(self, host: LanguageServiceHost) -> None:
        self.host = host

    def get_syntactic_diagnostics(self, path: str) -> list[Diagnostic]:
        return [Diagnostic(DiagnosticCategory.ERROR, 1005, "'}' expected.")]

    def get_semantic_diagnostics(self, path: str) -> list[Diagnostic]:
        return [
            Diagnostic(DiagnosticCategory.WARNING, 6133, "Unused."),
            Diagnostic(DiagnosticCategory.MESSAGE, 6000, "Note."),
        ]

    def get_suggestion_diagnostics(self, path: str) -> list[Diagnostic]:
        return [Diagnostic(DiagnosticCategory.SUGGESTION, 7016, "Implicit any.")]


class FailingEngine(OneOfEachEngine):
    def get_semantic_diagnostics(self, path: str) -> list[Diagnostic]:
        raise ProbeError(Path(path), PermissionError(13, "Permission denied"))


def _write(path: Path, text: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def _project(root: Path, options: str = "{}") -> Path:
    _write(root / "tsconfig.json", f'{{"compilerOptions": {options}}}')
    return _write(root / "src" / "main.ts", "export const a = 1;\n")


def test_default_rule_reports_all_categories_in_engine_order(tmp_path: Path) -> None:
    source = _project(tmp_path)
    context = CollectingContext(filename=source)
    node = object()

    check_types(context, node, SessionRegistry(engine_factory=OneOfEachEngine))

    assert [report.message for report in context.reports] == [
        "TS1005: '}' expected.",
        "TS6133: Unused.",
        "TS6000: Note.",
        "TS7016: Implicit any.",
    ]
    assert all(report.node is node for report in context.reports)


@pytest.mark.parametrize(
    ("rule_name", "expected_codes"),
    [
        ("type-errors", [1005]),
        ("type-warnings", [6133]),
        ("type-suggestions", [7016]),
        ("type-messages", [6000]),
    ],
)
def test_category_rules_filter_diagnostics(
    tmp_path: Path, rule_name: str, expected_codes: list[int]
) -> None:
    source = _project(tmp_path)
    rules = build_rule_registry(SessionRegistry(engine_factory=OneOfEachEngine))
    context = CollectingContext(filename=source)

    listener = rules.require(rule_name).create(context)
    listener["Program"](object())

    assert [report.code for report in context.reports] == expected_codes


def test_file_outside_any_project_is_skipped(tmp_path: Path) -> None:
    source = _write(tmp_path / "loose.ts")
    sessions = SessionRegistry(engine_factory=OneOfEachEngine, config_file_name="none.json")
    context = CollectingContext(filename=source)

    check_types(context, object(), sessions)

    assert context.reports == []
    assert len(sessions) == 0


def test_bad_config_yields_one_node_report(tmp_path: Path) -> None:
    source = _project(tmp_path, '{"target": 5}')
    context = CollectingContext(filename=source)
    node = object()

    check_types(context, node, SessionRegistry(engine_factory=OneOfEachEngine))

    (report,) = context.reports
    assert report.message.startswith("Could not parse tsconfig.json: ")
    assert "compilerOptions.target" in report.message
    assert report.node is node
    assert report.category is None


def test_probe_failure_is_reported_on_the_node(tmp_path: Path) -> None:
    source = _project(tmp_path)
    context = CollectingContext(filename=source)

    check_types(context, object(), SessionRegistry(engine_factory=FailingEngine))

    assert [report.code for report in context.reports[:1]] == [1005]
    assert "Permission denied" in context.reports[-1].message
    assert context.reports[-1].node is not None


def test_import_engine_reports_unresolved_import_location(tmp_path: Path) -> None:
    _write(tmp_path / "tsconfig.json", '{"compilerOptions": {}}')
    source = _write(tmp_path / "src" / "main.ts", "let a = 1;\nimport b from './nope';\n")
    context = CollectingContext(filename=source)
    rule = build_rule(SessionRegistry(engine_factory=ImportCheckEngine), ["errors"])

    rule.create(context)["Program"](object())

    (report,) = context.reports
    assert report.code == 2307
    assert report.location is not None
    assert (report.location.start_line, report.location.start_col) == (2, 14)


def test_undecodable_file_is_reported_on_the_node(tmp_path: Path) -> None:
    _write(tmp_path / "tsconfig.json", '{"compilerOptions": {}}')
    source = tmp_path / "bad.ts"
    source.write_bytes(b"const x = '\xff\xfe';")
    context = CollectingContext(filename=source)
    node = object()

    check_types(context, node, SessionRegistry(engine_factory=ImportCheckEngine))

    (report,) = context.reports
    assert report.message.startswith(f"Could not decode {source} as UTF-8")
    assert report.node is node
    assert report.category is None
