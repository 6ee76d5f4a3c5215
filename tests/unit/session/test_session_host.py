from __future__ import annotations

import json
from pathlib import Path

import pytest

from check_types.logging import JsonlEventLogger
from check_types.project import ProjectConfig, decode_config
from check_types.resolution import Extension
from check_types.session import SessionHost, default_lib_file_name


def _write(path: Path, text: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def _config(root: Path, options: dict[str, object] | None = None) -> ProjectConfig:
    payload = {"compilerOptions": options or {}}
    return decode_config(json.dumps(payload), root / "tsconfig.json")


@pytest.mark.parametrize(
    ("target", "expected"),
    [
        (None, "lib.d.ts"),
        ("ES3", "lib.d.ts"),
        ("ES5", "lib.d.ts"),
        ("JSON", "lib.d.ts"),
        ("ES2015", "lib.es6.d.ts"),
        ("ES2016", "lib.es2016.full.d.ts"),
        ("ES2022", "lib.es2022.full.d.ts"),
        ("ESNext", "lib.esnext.full.d.ts"),
    ],
)
def test_default_lib_file_name_by_target(target: str | None, expected: str) -> None:
    assert default_lib_file_name(target) == expected


def test_settings_are_a_copy_of_decoded_options(tmp_path: Path) -> None:
    host = SessionHost(_config(tmp_path, {"strict": True, "target": "es5"}))

    settings = host.get_compilation_settings()
    settings["strict"] = False

    assert host.get_compilation_settings() == {"strict": True, "target": "ES5"}


def test_root_files_are_discovered_lazily_and_extended(tmp_path: Path) -> None:
    main = _write(tmp_path / "src" / "main.ts")
    host = SessionHost(_config(tmp_path))
    extra = _write(tmp_path / "src" / "late.ts")

    assert host.get_script_file_names() == [str(extra), str(main)]

    outside = _write(tmp_path / "scripts" / "tool.js")
    host.ensure_root_file(outside)
    host.ensure_root_file(main)

    assert host.get_script_file_names() == [str(extra), str(main), str(outside)]


def test_snapshot_is_none_for_missing_files(tmp_path: Path) -> None:
    source = _write(tmp_path / "a.ts", "let a;")
    host = SessionHost(_config(tmp_path))

    assert host.get_script_snapshot(str(tmp_path / "missing.ts")) is None
    snapshot = host.get_script_snapshot(str(source))
    assert snapshot is not None
    assert snapshot.get_text(0, 3) == "let"
    assert host.get_script_version(str(source)) == "1"


def test_resolve_module_names_keeps_order_and_misses(tmp_path: Path) -> None:
    util = _write(tmp_path / "src" / "util.ts")
    dep = _write(tmp_path / "node_modules" / "dep" / "index.d.ts")
    importer = _write(tmp_path / "src" / "main.ts")
    host = SessionHost(_config(tmp_path))

    resolved = host.resolve_module_names(["./util", "missing", "dep"], str(importer))

    assert resolved[0] is not None
    assert resolved[0].resolved_path == util
    assert resolved[0].is_external is False
    assert resolved[1] is None
    assert resolved[2] is not None
    assert resolved[2].resolved_path == dep
    assert resolved[2].extension is Extension.DTS
    assert resolved[2].is_external is True


def test_resolutions_are_cached_per_session(tmp_path: Path) -> None:
    importer = _write(tmp_path / "src" / "main.ts")
    host = SessionHost(_config(tmp_path))

    assert host.resolve_module_names(["./util"], str(importer)) == [None]
    _write(tmp_path / "src" / "util.ts")

    assert host.resolve_module_names(["./util"], str(importer)) == [None]
    assert host.resolution_cache.stats().hits == 1
    assert host.resolution_cache.stats().misses == 1


def test_explicit_settings_do_not_change_resolution(tmp_path: Path) -> None:
    importer = _write(tmp_path / "main.ts")
    _write(tmp_path / "typings" / "lib" / "index.d.ts")
    host = SessionHost(_config(tmp_path))

    resolved = host.resolve_module_names(
        ["lib"], str(importer), {"typeRoots": [str(tmp_path / "typings")]}
    )

    assert resolved == [None]


def test_configured_type_roots_are_used(tmp_path: Path) -> None:
    importer = _write(tmp_path / "main.ts")
    ambient = _write(tmp_path / "typings" / "lib" / "index.d.ts")
    host = SessionHost(_config(tmp_path, {"typeRoots": ["./typings"]}))

    resolved = host.resolve_module_names(["lib"], str(importer))

    assert resolved[0] is not None
    assert resolved[0].resolved_path == ambient


def test_default_library_directory_is_found_on_search_path(tmp_path: Path) -> None:
    lib_dir = tmp_path / "node_modules" / "typescript" / "lib"
    lib_dir.mkdir(parents=True)
    host = SessionHost(_config(tmp_path, {"target": "es2015"}))

    name = host.get_default_lib_file_name(host.get_compilation_settings())

    assert name == str(lib_dir / "lib.es6.d.ts")


def test_explicit_library_directory_wins(tmp_path: Path) -> None:
    host = SessionHost(_config(tmp_path), library_dir=tmp_path / "bundled")

    assert host.get_default_lib_file_name({}) == str(tmp_path / "bundled" / "lib.d.ts")


def test_library_name_without_directory(tmp_path: Path) -> None:
    host = SessionHost(_config(tmp_path))

    assert host.get_default_lib_file_name({"target": "ESNext"}) == "lib.esnext.full.d.ts"


def test_new_line_and_current_directory(tmp_path: Path) -> None:
    crlf = SessionHost(_config(tmp_path, {"newLine": "crlf"}), current_directory=tmp_path)
    default = SessionHost(_config(tmp_path))

    assert crlf.get_new_line() == "\r\n"
    assert default.get_new_line() == "\n"
    assert crlf.get_current_directory() == str(tmp_path)


def test_log_and_error_write_events(tmp_path: Path) -> None:
    logger = JsonlEventLogger(tmp_path / "events.jsonl")
    host = SessionHost(_config(tmp_path), event_logger=logger)

    host.log("starting")
    host.trace("ignored")
    host.error("broken")

    events = logger.read()
    assert [item["event"] for item in events] == ["host_log", "host_error"]
    assert events[0]["detail"] == {"message": "starting"}
    assert events[1]["ok"] is False
    assert events[1]["config_path"] == str(tmp_path / "tsconfig.json")
