"""Command-line lint runner."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from check_types.config import CliOverrides, LintSettings, load_effective_settings
from check_types.engine import EngineFactory, ImportCheckEngine
from check_types.engine.base import DiagnosticCategory
from check_types.logging import JsonlEventLogger
from check_types.resolution.paths import normalize_path
from check_types.resolution.search_paths import global_library_paths
from check_types.rules import Report, RuleRegistry, build_rule_registry
from check_types.session import SessionRegistry


@dataclass(slots=True, frozen=True)
class ProgramNode:
    """Whole-file node handed to rule visitors."""

    path: Path
    type: str = "Program"


@dataclass(slots=True)
class FileContext:
    """Collects reports for one linted file."""

    filename: Path
    reports: list[Report] = field(default_factory=list)

    def get_filename(self) -> str:
        return str(self.filename)

    def report(self, report: Report) -> None:
        self.reports.append(report)


class LintRunner:
    """Runs the enabled rules over files with one shared session registry."""

    def __init__(
        self,
        settings: LintSettings,
        engine_factory: EngineFactory = ImportCheckEngine,
    ) -> None:
        self._settings = settings
        event_logger: JsonlEventLogger | None = None
        if settings.logging.event_log is not None:
            event_logger = JsonlEventLogger(path=settings.logging.event_log)
        self._sessions = SessionRegistry(
            engine_factory=engine_factory,
            global_paths=global_library_paths(
                Path(__file__).resolve().parent, extra=settings.project.library_paths
            ),
            config_file_name=settings.project.config_file_name,
            library_dir=settings.project.library_dir,
            event_logger=event_logger,
        )
        self._rules: RuleRegistry = build_rule_registry(self._sessions)

    @property
    def sessions(self) -> SessionRegistry:
        return self._sessions

    @property
    def rules(self) -> RuleRegistry:
        return self._rules

    def lint_file(self, path: Path | str) -> list[Report]:
        """Visit one file with every enabled rule and return its reports."""
        filename = normalize_path(Path(self._settings.root) / path)
        context = FileContext(filename=filename)
        node = ProgramNode(path=filename)
        for name in self._settings.rules.enabled:
            listener = self._rules.require(name).create(context)
            visit = listener.get(node.type)
            if visit is not None:
                visit(node)
        return context.reports

    def lint_files(self, paths: list[str], out_stream: TextIO) -> int:
        """Lint files in order, print reports, and return the process exit code."""
        exit_code = 0
        for raw_path in paths:
            filename = normalize_path(Path(self._settings.root) / raw_path)
            for report in self.lint_file(filename):
                out_stream.write(f"{format_report(filename, report)}\n")
                if report.category in (None, DiagnosticCategory.ERROR):
                    exit_code = 1
        out_stream.flush()
        return exit_code


def format_report(path: Path, report: Report) -> str:
    """Render ``path:line:col: category message``; node reports use 1:0."""
    line, column = 1, 0
    if report.location is not None:
        line, column = report.location.start_line, report.location.start_col
    category = report.category.value if report.category is not None else "error"
    return f"{path}:{line}:{column}: {category} {report.message}"


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for lint run configuration."""
    parser = argparse.ArgumentParser(prog="check-types")
    parser.add_argument("files", nargs="+")
    parser.add_argument("--root", required=False, default=".")
    parser.add_argument("--rule", action="append", required=False, default=None)
    parser.add_argument("--config-file-name", required=False, default=None)
    parser.add_argument("--library-path", action="append", required=False, default=None)
    parser.add_argument("--library-dir", required=False, default=None)
    parser.add_argument("--event-log", required=False, default=None)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the check-types command."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    overrides = CliOverrides(
        config_file_name=args.config_file_name,
        library_paths=(
            tuple(Path(item) for item in args.library_path)
            if args.library_path is not None
            else None
        ),
        library_dir=Path(args.library_dir) if args.library_dir is not None else None,
        rules=tuple(args.rule) if args.rule is not None else None,
        event_log=Path(args.event_log) if args.event_log is not None else None,
    )
    try:
        settings = load_effective_settings(Path(args.root), overrides)
    except ValueError as exc:
        parser.error(str(exc))
    runner = LintRunner(settings)
    return runner.lint_files(args.files, sys.stdout)


if __name__ == "__main__":
    raise SystemExit(main())
