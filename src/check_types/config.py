"""Lint tool settings loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

from check_types.project.tsconfig import CONFIG_FILE_NAME
from check_types.rules.registry import DEFAULT_RULE, RULE_NAMES

SETTINGS_FILE_NAME = "check_types.toml"


@dataclass(slots=True, frozen=True)
class ProjectSettings:
    """How projects are discovered and where global libraries live."""

    config_file_name: str
    library_paths: tuple[Path, ...]
    library_dir: Path | None = None


@dataclass(slots=True, frozen=True)
class RulesSettings:
    """Rules run for every linted file."""

    enabled: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class LoggingSettings:
    """Optional structured event log."""

    event_log: Path | None = None


@dataclass(slots=True, frozen=True)
class LintSettings:
    """Fully merged lint settings."""

    root: Path
    project: ProjectSettings
    rules: RulesSettings
    logging: LoggingSettings

    def to_public_dict(self) -> dict[str, object]:
        """Return a serializable settings snapshot."""
        return {
            "root": str(self.root),
            "project": {
                "config_file_name": self.project.config_file_name,
                "library_paths": [str(path) for path in self.project.library_paths],
                "library_dir": (
                    str(self.project.library_dir) if self.project.library_dir is not None else None
                ),
            },
            "rules": {"enabled": list(self.rules.enabled)},
            "logging": {
                "event_log": (
                    str(self.logging.event_log) if self.logging.event_log is not None else None
                ),
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    config_file_name: str | None = None
    library_paths: tuple[Path, ...] | None = None
    library_dir: Path | None = None
    rules: tuple[str, ...] | None = None
    event_log: Path | None = None


def default_settings(root: Path) -> LintSettings:
    """Build default settings for a working root."""
    return LintSettings(
        root=root.resolve(),
        project=ProjectSettings(config_file_name=CONFIG_FILE_NAME, library_paths=()),
        rules=RulesSettings(enabled=(DEFAULT_RULE,)),
        logging=LoggingSettings(),
    )


def load_settings_file(root: Path) -> dict[str, object]:
    """Load optional check_types.toml from the working root."""
    settings_path = root / SETTINGS_FILE_NAME
    if not settings_path.exists():
        return {}
    with settings_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{SETTINGS_FILE_NAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _tuple_of_strings(value: object, section: str, field: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Config field '{section}.{field}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"Config field '{section}.{field}' must contain only strings.")
        output.append(item)
    return tuple(output)


def _non_empty_string(value: object, section: str, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Config field '{section}.{field}' must be a non-empty string.")
    return value


def _validated_rules(names: tuple[str, ...], name: str) -> tuple[str, ...]:
    if not names:
        raise ValueError(f"Config field '{name}' must name at least one rule.")
    for rule in names:
        if rule not in RULE_NAMES:
            raise ValueError(f"Config field '{name}' names unknown rule '{rule}'.")
    return tuple(dict.fromkeys(names))


def merge_settings(
    base: LintSettings, payload: dict[str, object], overrides: CliOverrides
) -> LintSettings:
    """Merge defaults, the settings file, then CLI overrides."""
    project_payload = _get_table(payload, "project")
    rules_payload = _get_table(payload, "rules")
    logging_payload = _get_table(payload, "logging")

    config_file_name = base.project.config_file_name
    if "config_file_name" in project_payload:
        config_file_name = _non_empty_string(
            project_payload["config_file_name"], "project", "config_file_name"
        )
    library_paths = base.project.library_paths
    if "library_paths" in project_payload:
        raw_library_paths = _tuple_of_strings(
            project_payload["library_paths"], "project", "library_paths"
        )
        library_paths = tuple((base.root / item).resolve() for item in raw_library_paths)
    library_dir = base.project.library_dir
    if "library_dir" in project_payload:
        raw_library_dir = _non_empty_string(
            project_payload["library_dir"], "project", "library_dir"
        )
        library_dir = (base.root / raw_library_dir).resolve()

    enabled = base.rules.enabled
    if "enabled" in rules_payload:
        enabled = _validated_rules(
            _tuple_of_strings(rules_payload["enabled"], "rules", "enabled"), "rules.enabled"
        )

    event_log = base.logging.event_log
    if "event_log" in logging_payload:
        raw_event_log = _non_empty_string(logging_payload["event_log"], "logging", "event_log")
        event_log = (base.root / raw_event_log).resolve()

    merged = LintSettings(
        root=base.root,
        project=ProjectSettings(
            config_file_name=config_file_name,
            library_paths=library_paths,
            library_dir=library_dir,
        ),
        rules=RulesSettings(enabled=enabled),
        logging=LoggingSettings(event_log=event_log),
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(settings: LintSettings, overrides: CliOverrides) -> LintSettings:
    """Apply startup overrides at highest precedence."""
    enabled = settings.rules.enabled
    if overrides.rules is not None:
        enabled = _validated_rules(overrides.rules, "overrides.rules")
    config_file_name = settings.project.config_file_name
    if overrides.config_file_name is not None:
        config_file_name = _non_empty_string(
            overrides.config_file_name, "overrides", "config_file_name"
        )
    library_paths = settings.project.library_paths
    if overrides.library_paths is not None:
        library_paths = tuple(path.resolve() for path in overrides.library_paths)
    library_dir = overrides.library_dir or settings.project.library_dir
    event_log = overrides.event_log or settings.logging.event_log
    return LintSettings(
        root=settings.root,
        project=ProjectSettings(
            config_file_name=config_file_name,
            library_paths=library_paths,
            library_dir=library_dir.resolve() if library_dir is not None else None,
        ),
        rules=RulesSettings(enabled=enabled),
        logging=LoggingSettings(event_log=event_log.resolve() if event_log is not None else None),
    )


def load_effective_settings(root: Path, overrides: CliOverrides | None = None) -> LintSettings:
    """Load effective settings using merge order defaults -> settings file -> overrides."""
    resolved_root = root.resolve()
    base = default_settings(resolved_root)
    payload = load_settings_file(resolved_root)
    return merge_settings(base, payload, overrides or CliOverrides())
