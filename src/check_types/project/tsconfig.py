"""Project config (tsconfig.json) decoding and validation."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from check_types.resolution.paths import normalize_path

CONFIG_FILE_NAME = "tsconfig.json"

SCRIPT_TARGETS = (
    "ES3",
    "ES5",
    "ES2015",
    "ES2016",
    "ES2017",
    "ES2018",
    "ES2019",
    "ES2020",
    "ES2021",
    "ES2022",
    "ESNext",
    "JSON",
)
MODULE_KINDS = (
    "None",
    "CommonJS",
    "AMD",
    "UMD",
    "System",
    "ES2015",
    "ES2020",
    "ES2022",
    "ESNext",
    "Node16",
    "NodeNext",
)
MODULE_RESOLUTION_KINDS = ("Classic", "NodeJs", "Node16", "NodeNext", "Bundler")
JSX_EMITS = ("None", "Preserve", "React", "ReactNative", "ReactJSX", "ReactJSXDev")
NEW_LINE_KINDS = ("CarriageReturnLineFeed", "LineFeed")

_ENUM_ALIASES: dict[str, dict[str, str]] = {
    "target": {"es6": "ES2015"},
    "module": {"es6": "ES2015"},
    "moduleResolution": {"node": "NodeJs", "node10": "NodeJs"},
    "newLine": {"crlf": "CarriageReturnLineFeed", "lf": "LineFeed"},
    "jsx": {"react-native": "ReactNative", "react-jsx": "ReactJSX", "react-jsxdev": "ReactJSXDev"},
}

_BOOLEAN_OPTIONS = frozenset(
    {
        "allowJs",
        "allowSyntheticDefaultImports",
        "allowUmdGlobalAccess",
        "allowUnreachableCode",
        "allowUnusedLabels",
        "alwaysStrict",
        "checkJs",
        "composite",
        "declaration",
        "declarationMap",
        "disableSizeLimit",
        "downlevelIteration",
        "emitBOM",
        "emitDeclarationOnly",
        "emitDecoratorMetadata",
        "esModuleInterop",
        "experimentalDecorators",
        "forceConsistentCasingInFileNames",
        "importHelpers",
        "incremental",
        "inlineSourceMap",
        "inlineSources",
        "isolatedModules",
        "keyofStringsOnly",
        "noEmit",
        "noEmitHelpers",
        "noEmitOnError",
        "noErrorTruncation",
        "noFallthroughCasesInSwitch",
        "noImplicitAny",
        "noImplicitReturns",
        "noImplicitThis",
        "noImplicitUseStrict",
        "noLib",
        "noResolve",
        "noStrictGenericChecks",
        "noUnusedLocals",
        "noUnusedParameters",
        "preserveConstEnums",
        "preserveSymlinks",
        "removeComments",
        "resolveJsonModule",
        "skipDefaultLibCheck",
        "skipLibCheck",
        "sourceMap",
        "strict",
        "strictBindCallApply",
        "strictFunctionTypes",
        "strictNullChecks",
        "strictPropertyInitialization",
        "stripInternal",
        "suppressExcessPropertyErrors",
        "suppressImplicitAnyIndexErrors",
        "traceResolution",
    }
)
_STRING_OPTIONS = frozenset({"charset", "jsxFactory", "locale", "reactNamespace", "sourceRoot"})
_PATH_OPTIONS = frozenset(
    {
        "baseUrl",
        "declarationDir",
        "mapRoot",
        "out",
        "outDir",
        "outFile",
        "project",
        "rootDir",
        "tsBuildInfoFile",
    }
)
_NUMBER_OPTIONS = frozenset({"maxNodeModuleJsDepth"})
_STRING_LIST_OPTIONS = frozenset({"lib", "types"})
_PATH_LIST_OPTIONS = frozenset({"rootDirs", "typeRoots"})
_ENUM_OPTIONS: dict[str, tuple[str, ...]] = {
    "jsx": JSX_EMITS,
    "module": MODULE_KINDS,
    "moduleResolution": MODULE_RESOLUTION_KINDS,
    "newLine": NEW_LINE_KINDS,
    "target": SCRIPT_TARGETS,
}


class ConfigDecodeError(ValueError):
    """Raised when a project config cannot be parsed or fails validation."""

    def __init__(self, config_path: Path, reason: str) -> None:
        super().__init__(f"{config_path}: {reason}")
        self.config_path = config_path
        self.reason = reason


@dataclass(slots=True, frozen=True)
class CompilerOptions:
    """Validated compiler options keyed by their config names."""

    values: Mapping[str, object] = field(default_factory=dict)

    def get(self, name: str, default: object = None) -> object:
        return self.values.get(name, default)

    def _flag(self, name: str) -> bool:
        return self.values.get(name) is True

    @property
    def target(self) -> str | None:
        value = self.values.get("target")
        return value if isinstance(value, str) else None

    @property
    def new_line(self) -> str | None:
        value = self.values.get("newLine")
        return value if isinstance(value, str) else None

    @property
    def types(self) -> tuple[str, ...] | None:
        value = self.values.get("types")
        return tuple(value) if isinstance(value, list) else None

    @property
    def type_roots(self) -> tuple[Path, ...] | None:
        value = self.values.get("typeRoots")
        return tuple(Path(item) for item in value) if isinstance(value, list) else None

    @property
    def allow_js(self) -> bool:
        return self._flag("allowJs")

    @property
    def no_lib(self) -> bool:
        return self._flag("noLib")

    @property
    def no_implicit_any(self) -> bool:
        if "noImplicitAny" in self.values:
            return self._flag("noImplicitAny")
        return self._flag("strict")


@dataclass(slots=True, frozen=True)
class ProjectConfig:
    """Decoded project configuration rooted at the config file's directory."""

    config_path: Path
    root_dir: Path
    compiler_options: CompilerOptions
    files: tuple[Path, ...] | None = None
    include: tuple[str, ...] | None = None
    exclude: tuple[str, ...] | None = None


def load_project_config(config_path: Path) -> ProjectConfig:
    """Read and decode a project config file."""
    path = normalize_path(config_path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigDecodeError(path, f"Could not read config: {exc}") from exc
    return decode_config(text, path)


def decode_config(text: str, config_path: Path) -> ProjectConfig:
    """Decode config JSON text; relative paths resolve against the config directory."""
    path = normalize_path(config_path)
    root_dir = path.parent
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigDecodeError(path, f"Invalid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigDecodeError(path, "Config must contain a top-level object.")
    if "compilerOptions" not in payload:
        raise ConfigDecodeError(path, "Config field 'compilerOptions' is required.")
    raw_options = payload["compilerOptions"]
    if not isinstance(raw_options, dict):
        raise ConfigDecodeError(path, "Config field 'compilerOptions' must be an object.")

    try:
        options = decode_compiler_options(raw_options, root_dir)
        files = _optional_string_list(payload.get("files"), "files")
        include = _optional_string_list(payload.get("include"), "include")
        exclude = _optional_string_list(payload.get("exclude"), "exclude")
    except ValueError as exc:
        raise ConfigDecodeError(path, str(exc)) from exc

    resolved_files: tuple[Path, ...] | None = None
    if files is not None:
        resolved_files = tuple(normalize_path(root_dir / item) for item in files)
    return ProjectConfig(
        config_path=path,
        root_dir=root_dir,
        compiler_options=options,
        files=resolved_files,
        include=include,
        exclude=exclude,
    )


def decode_compiler_options(raw: Mapping[str, object], root_dir: Path) -> CompilerOptions:
    """Validate known options; unknown keys are ignored, null values are dropped."""
    values: dict[str, object] = {}
    for name in sorted(raw.keys()):
        value = raw[name]
        if value is None:
            continue
        decoder = _decoder_for(name, root_dir)
        if decoder is None:
            continue
        values[name] = decoder(value)
    return CompilerOptions(values=values)


def _decoder_for(name: str, root_dir: Path) -> Callable[[object], object] | None:
    field_name = f"compilerOptions.{name}"
    if name in _BOOLEAN_OPTIONS:
        return lambda value: _boolean(value, field_name)
    if name in _STRING_OPTIONS:
        return lambda value: _string(value, field_name)
    if name in _PATH_OPTIONS:
        return lambda value: str(normalize_path(root_dir / _string(value, field_name)))
    if name in _NUMBER_OPTIONS:
        return lambda value: _number(value, field_name)
    if name in _STRING_LIST_OPTIONS:
        return lambda value: list(_string_list(value, field_name))
    if name in _PATH_LIST_OPTIONS:
        return lambda value: [
            str(normalize_path(root_dir / item)) for item in _string_list(value, field_name)
        ]
    if name in _ENUM_OPTIONS:
        return lambda value: _enum(value, name, _ENUM_OPTIONS[name])
    if name == "paths":
        return lambda value: _paths_mapping(value, field_name)
    return None


def _boolean(value: object, name: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"Config field '{name}' must be a boolean.")
    return value


def _string(value: object, name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"Config field '{name}' must be a string.")
    return value


def _number(value: object, name: str) -> int | float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Config field '{name}' must be a number.")
    return value


def _string_list(value: object, name: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Config field '{name}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"Config field '{name}' must contain only strings.")
        output.append(item)
    return tuple(output)


def _optional_string_list(value: object, name: str) -> tuple[str, ...] | None:
    if value is None:
        return None
    return _string_list(value, name)


def _enum(value: object, name: str, choices: tuple[str, ...]) -> str:
    field_name = f"compilerOptions.{name}"
    if not isinstance(value, str):
        raise ValueError(f"Config field '{field_name}' must be a string.")
    lowered = value.lower()
    alias = _ENUM_ALIASES.get(name, {}).get(lowered)
    if alias is not None:
        return alias
    for choice in choices:
        if choice.lower() == lowered:
            return choice
    raise ValueError(f"Config field '{field_name}': '{value}' is not a valid option.")


def _paths_mapping(value: object, name: str) -> dict[str, list[str]]:
    if not isinstance(value, dict):
        raise ValueError(f"Config field '{name}' must be an object of string lists.")
    output: dict[str, list[str]] = {}
    for key in sorted(value.keys()):
        output[str(key)] = list(_string_list(value[key], f"{name}.{key}"))
    return output
