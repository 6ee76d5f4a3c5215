"""Session host: the callback surface a type-checking engine drives."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from check_types.logging import JsonlEventLogger, SessionEvent, utc_timestamp
from check_types.project.discovery import discover_project_files
from check_types.project.tsconfig import ProjectConfig
from check_types.resolution.cache import ResolutionCache
from check_types.resolution.models import ResolvedModule
from check_types.resolution.paths import is_dir, is_file, normalize_path
from check_types.resolution.resolver import ModuleResolver
from check_types.resolution.search_paths import SearchPathBuilder
from check_types.session.snapshots import SCRIPT_VERSION, FileSnapshot, SnapshotCache

ENGINE_PACKAGE = "typescript"
ENGINE_LIBRARY_DIRECTORY = "lib"

_FULL_LIBRARY_TARGETS = frozenset(
    {"ES2016", "ES2017", "ES2018", "ES2019", "ES2020", "ES2021", "ES2022"}
)


def default_lib_file_name(target: str | None) -> str:
    """Return the standard library declaration file name for a script target."""
    if target is None or target in {"ES3", "ES5", "JSON"}:
        return "lib.d.ts"
    if target == "ES2015":
        return "lib.es6.d.ts"
    if target in _FULL_LIBRARY_TARGETS:
        return f"lib.{target.lower()}.full.d.ts"
    return "lib.esnext.full.d.ts"


class SessionHost:
    """Serves settings, files, snapshots and module resolution for one project."""

    def __init__(
        self,
        config: ProjectConfig,
        global_paths: Sequence[Path] = (),
        *,
        project_root: Path | None = None,
        resolver: ModuleResolver | None = None,
        resolution_cache: ResolutionCache | None = None,
        snapshots: SnapshotCache | None = None,
        root_files: Sequence[Path] | None = None,
        library_dir: Path | None = None,
        current_directory: Path | None = None,
        event_logger: JsonlEventLogger | None = None,
    ) -> None:
        self._config = config
        self._resolver = resolver or ModuleResolver()
        self._resolution_cache = (
            resolution_cache if resolution_cache is not None else ResolutionCache()
        )
        self._snapshots = snapshots if snapshots is not None else SnapshotCache()
        self._project_root = (
            normalize_path(project_root) if project_root is not None else config.root_dir
        )
        self._search_paths = SearchPathBuilder(self._project_root, global_paths)
        self._root_files: list[Path] | None = (
            [normalize_path(path) for path in root_files] if root_files is not None else None
        )
        self._library_dir = library_dir
        self._library_dir_located = library_dir is not None
        self._current_directory = current_directory
        self._event_logger = event_logger

    @property
    def config(self) -> ProjectConfig:
        return self._config

    @property
    def project_root(self) -> Path:
        return self._project_root

    @property
    def snapshots(self) -> SnapshotCache:
        return self._snapshots

    @property
    def resolution_cache(self) -> ResolutionCache:
        return self._resolution_cache

    @property
    def search_paths(self) -> SearchPathBuilder:
        return self._search_paths

    def get_compilation_settings(self) -> dict[str, object]:
        return dict(self._config.compiler_options.values)

    def get_script_file_names(self) -> list[str]:
        return [str(path) for path in self._root_file_list()]

    def ensure_root_file(self, path: Path | str) -> None:
        """Add a file to the root list when discovery did not pick it up."""
        normalized = normalize_path(path)
        files = self._root_file_list()
        if normalized not in files:
            files.append(normalized)

    def get_script_version(self, path: str) -> str:
        _ = path
        return SCRIPT_VERSION

    def get_script_snapshot(self, path: str) -> FileSnapshot | None:
        normalized = normalize_path(path)
        if normalized not in self._snapshots and not is_file(normalized):
            return None
        return self._snapshots.get_snapshot(normalized)

    def get_default_lib_file_name(self, settings: dict[str, object]) -> str:
        target = settings.get("target")
        name = default_lib_file_name(target if isinstance(target, str) else None)
        directory = self.default_library_directory()
        if directory is None:
            return name
        return str(directory / name)

    def default_library_directory(self) -> Path | None:
        """Locate the engine's bundled library directory on the project search path."""
        if not self._library_dir_located:
            self._library_dir_located = True
            for search_root in self._search_paths.build(self._project_root):
                candidate = search_root / ENGINE_PACKAGE / ENGINE_LIBRARY_DIRECTORY
                if is_dir(candidate):
                    self._library_dir = candidate
                    break
        return self._library_dir

    def resolve_module_names(
        self,
        specifiers: Sequence[str],
        containing_file: str,
        settings: dict[str, object] | None = None,
    ) -> list[ResolvedModule | None]:
        """Resolve specifiers imported by a file using this session's options.

        ``settings`` is accepted for engine compatibility; the session's own
        validated options always apply so cached results stay consistent.
        """
        _ = settings
        directory = normalize_path(containing_file).parent
        return [self.resolve_module(directory, specifier) for specifier in specifiers]

    def resolve_module(self, directory: Path, specifier: str) -> ResolvedModule | None:
        options = self._config.compiler_options
        return self._resolution_cache.get_or_resolve(
            directory,
            specifier,
            lambda: self._resolver.resolve(
                directory,
                specifier,
                search_paths=self._search_paths.build(directory),
                type_roots=options.type_roots,
                types=options.types,
            ),
        )

    def get_current_directory(self) -> str:
        if self._current_directory is not None:
            return str(self._current_directory)
        return str(Path.cwd())

    def get_new_line(self) -> str:
        if self._config.compiler_options.new_line == "CarriageReturnLineFeed":
            return "\r\n"
        return "\n"

    def log(self, message: str) -> None:
        self._record("host_log", ok=True, message=message)

    def trace(self, message: str) -> None:
        _ = message

    def error(self, message: str) -> None:
        self._record("host_error", ok=False, message=message)

    def _record(self, event: str, ok: bool, message: str) -> None:
        if self._event_logger is None:
            return
        self._event_logger.append(
            SessionEvent(
                timestamp=utc_timestamp(),
                event=event,
                config_path=str(self._config.config_path),
                ok=ok,
                detail={"message": message},
            )
        )

    def _root_file_list(self) -> list[Path]:
        if self._root_files is None:
            self._root_files = discover_project_files(self._config)
        return self._root_files
