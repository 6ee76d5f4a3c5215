from __future__ import annotations

import os
from pathlib import Path

from check_types.resolution import (
    SearchPathBuilder,
    build_search_paths,
    dependency_dirs,
    global_library_paths,
    system_library_paths,
)


def test_file_local_directories_precede_project_and_global(tmp_path: Path) -> None:
    project = tmp_path / "a"
    containing = project / "b" / "c"
    global_dir = tmp_path / "global" / "lib"

    paths = build_search_paths(containing, project, [global_dir])

    assert paths[:3] == (
        project / "b" / "c" / "node_modules",
        project / "b" / "node_modules",
        project / "node_modules",
    )
    assert paths[3] == tmp_path / "node_modules"
    assert paths[-1] == global_dir
    assert len(paths) == len(set(paths))


def test_dependency_directories_are_not_nested(tmp_path: Path) -> None:
    project = tmp_path / "proj"
    containing = project / "node_modules" / "lib"

    paths = build_search_paths(containing, project, [])

    assert paths[0] == containing / "node_modules"
    assert paths[1] == project / "node_modules"
    assert project / "node_modules" / "node_modules" not in paths


def test_file_outside_project_walks_to_root(tmp_path: Path) -> None:
    project = tmp_path / "proj"
    elsewhere = tmp_path / "other" / "deep"

    chain = dependency_dirs(elsewhere, stop=project)

    assert chain[0] == elsewhere / "node_modules"
    assert chain[-1].parent == chain[-1].parent.parent


def test_builder_memoizes_per_directory(tmp_path: Path) -> None:
    builder = SearchPathBuilder(tmp_path / "proj", [tmp_path / "g"])

    first = builder.build(tmp_path / "proj" / "src")
    second = builder.build(tmp_path / "proj" / "src" / ".")

    assert first is second
    assert builder.project_paths[0] == tmp_path / "proj" / "node_modules"
    assert builder.global_paths == (tmp_path / "g",)


def test_global_paths_drop_callers_own_chain(tmp_path: Path) -> None:
    caller = tmp_path / "tool" / "pkg"
    candidates = [
        caller / "node_modules",
        tmp_path / "tool" / "node_modules",
        tmp_path / "home" / ".node_modules",
    ]

    paths = global_library_paths(caller, candidates, extra=[tmp_path / "extra"])

    assert paths == [tmp_path / "home" / ".node_modules", tmp_path / "extra"]


def test_system_library_paths_follow_environment(tmp_path: Path) -> None:
    first = tmp_path / "np1"
    second = tmp_path / "np2"
    runtime = tmp_path / "prefix" / "bin" / "node"
    runtime.parent.mkdir(parents=True)
    runtime.write_text("", encoding="utf-8")

    paths = system_library_paths(
        environ={"NODE_PATH": f"{first}{os.pathsep}{second}"},
        home=tmp_path / "home",
        runtime_executable=str(runtime),
    )

    assert paths == [
        first,
        second,
        tmp_path / "home" / ".node_modules",
        tmp_path / "home" / ".node_libraries",
        tmp_path / "prefix" / "lib" / "node",
    ]
