from __future__ import annotations

import json
from pathlib import Path

import pytest

from check_types.project import ConfigDecodeError, decode_config, load_project_config


def test_minimal_config_decodes(tmp_path: Path) -> None:
    config = decode_config('{"compilerOptions": {}}', tmp_path / "tsconfig.json")

    assert config.root_dir == tmp_path
    assert config.config_path == tmp_path / "tsconfig.json"
    assert dict(config.compiler_options.values) == {}
    assert config.files is None
    assert config.include is None


def test_enum_options_are_case_insensitive_with_aliases(tmp_path: Path) -> None:
    text = json.dumps(
        {
            "compilerOptions": {
                "target": "es2017",
                "module": "commonjs",
                "moduleResolution": "node",
                "jsx": "react",
                "newLine": "crlf",
            }
        }
    )

    options = decode_config(text, tmp_path / "tsconfig.json").compiler_options

    assert options.get("target") == "ES2017"
    assert options.get("module") == "CommonJS"
    assert options.get("moduleResolution") == "NodeJs"
    assert options.get("jsx") == "React"
    assert options.new_line == "CarriageReturnLineFeed"


def test_paths_resolve_against_config_directory(tmp_path: Path) -> None:
    text = json.dumps(
        {
            "compilerOptions": {"baseUrl": ".", "typeRoots": ["./typings"], "outDir": "dist"},
            "files": ["src/main.ts"],
            "exclude": ["dist"],
        }
    )

    config = decode_config(text, tmp_path / "tsconfig.json")

    assert config.compiler_options.get("baseUrl") == str(tmp_path)
    assert config.compiler_options.type_roots == (tmp_path / "typings",)
    assert config.compiler_options.get("outDir") == str(tmp_path / "dist")
    assert config.files == (tmp_path / "src" / "main.ts",)
    assert config.exclude == ("dist",)


def test_unknown_and_null_options_are_dropped(tmp_path: Path) -> None:
    text = json.dumps({"compilerOptions": {"notARealOption": 1, "strict": None, "noLib": True}})

    options = decode_config(text, tmp_path / "tsconfig.json").compiler_options

    assert dict(options.values) == {"noLib": True}
    assert options.no_lib is True


def test_no_implicit_any_follows_strict_unless_set(tmp_path: Path) -> None:
    strict = decode_config('{"compilerOptions": {"strict": true}}', tmp_path / "tsconfig.json")
    relaxed = decode_config(
        '{"compilerOptions": {"strict": true, "noImplicitAny": false}}',
        tmp_path / "tsconfig.json",
    )

    assert strict.compiler_options.no_implicit_any is True
    assert relaxed.compiler_options.no_implicit_any is False


@pytest.mark.parametrize(
    ("text", "fragment"),
    [
        ("{not json", "Invalid JSON"),
        ("[]", "top-level object"),
        ("{}", "'compilerOptions' is required"),
        ('{"compilerOptions": []}', "'compilerOptions' must be an object"),
        ('{"compilerOptions": {"strict": "yes"}}', "compilerOptions.strict"),
        ('{"compilerOptions": {"target": "es1999"}}', "not a valid option"),
        ('{"compilerOptions": {"lib": ["dom", 3]}}', "compilerOptions.lib"),
        ('{"compilerOptions": {}, "include": "src"}', "'include'"),
    ],
)
def test_decode_failures_name_config_and_reason(
    tmp_path: Path, text: str, fragment: str
) -> None:
    config_path = tmp_path / "tsconfig.json"

    with pytest.raises(ConfigDecodeError) as excinfo:
        decode_config(text, config_path)

    assert excinfo.value.config_path == config_path
    assert fragment in excinfo.value.reason
    assert str(config_path) in str(excinfo.value)


def test_load_project_config_reads_file(tmp_path: Path) -> None:
    (tmp_path / "tsconfig.json").write_text(
        '{"compilerOptions": {"allowJs": true}}', encoding="utf-8"
    )

    config = load_project_config(tmp_path / "tsconfig.json")

    assert config.compiler_options.allow_js is True


def test_missing_config_file_is_a_decode_failure(tmp_path: Path) -> None:
    with pytest.raises(ConfigDecodeError, match="Could not read config"):
        load_project_config(tmp_path / "tsconfig.json")
