"""Process-scoped registry of live type-checking sessions."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from check_types.engine.base import EngineFactory, TypeCheckEngine
from check_types.logging import JsonlEventLogger, SessionEvent, utc_timestamp
from check_types.project.discovery import find_above
from check_types.project.tsconfig import CONFIG_FILE_NAME, ConfigDecodeError, load_project_config
from check_types.resolution.manifest import ManifestCache
from check_types.resolution.paths import normalize_path
from check_types.resolution.resolver import ModuleResolver
from check_types.session.host import SessionHost


@dataclass(slots=True)
class Session:
    """Engine instance bound to one discovered project config."""

    config_path: Path
    host: SessionHost
    engine: TypeCheckEngine


@dataclass(slots=True, frozen=True)
class ConfigDecodeFailure:
    """A project config that could not be decoded on this attempt."""

    config_path: Path
    reason: str

    @property
    def message(self) -> str:
        return f"Could not parse {self.config_path.name}: {self.reason}"


@dataclass(slots=True)
class SessionRegistry:
    """Maps config paths to sessions, created lazily and never evicted.

    Failed decodes are not cached, so a later visit retries. A cached session
    is returned even when its config file has changed since.
    """

    engine_factory: EngineFactory
    global_paths: Sequence[Path] = ()
    config_file_name: str = CONFIG_FILE_NAME
    library_dir: Path | None = None
    event_logger: JsonlEventLogger | None = None
    _sessions: dict[Path, Session] = field(default_factory=dict)
    _manifests: ManifestCache = field(default_factory=ManifestCache)

    def find_config(self, file_path: Path | str) -> Path | None:
        """Return the nearest project config above a file, if any."""
        return find_above(normalize_path(file_path).parent, self.config_file_name)

    def session_for_file(self, file_path: Path | str) -> Session | ConfigDecodeFailure | None:
        """Return the session owning a file; None when no project encloses it."""
        normalized = normalize_path(file_path)
        config_path = self.find_config(normalized)
        if config_path is None:
            self._record("project_not_found", None, ok=True, detail={"file": str(normalized)})
            return None
        result = self.get_or_create(config_path, config_path.parent)
        if isinstance(result, Session):
            result.host.ensure_root_file(normalized)
        return result

    def get_or_create(
        self, config_path: Path, project_root: Path | None = None
    ) -> Session | ConfigDecodeFailure:
        """Return the cached session for a config, building it on first request."""
        key = normalize_path(config_path)
        cached = self._sessions.get(key)
        if cached is not None:
            return cached

        try:
            config = load_project_config(key)
        except ConfigDecodeError as exc:
            self._record("config_decode_failed", key, ok=False, detail={"reason": exc.reason})
            return ConfigDecodeFailure(config_path=key, reason=exc.reason)

        host = SessionHost(
            config,
            self.global_paths,
            project_root=project_root,
            resolver=ModuleResolver(self._manifests),
            library_dir=self.library_dir,
            event_logger=self.event_logger,
        )
        engine = self.engine_factory(host)
        session = Session(config_path=key, host=host, engine=engine)
        self._sessions[key] = session
        self._record("session_created", key, ok=True, detail={"root_dir": str(config.root_dir)})
        return session

    def get(self, config_path: Path) -> Session | None:
        return self._sessions.get(normalize_path(config_path))

    def config_paths(self) -> tuple[Path, ...]:
        """Return config paths of live sessions in creation order."""
        return tuple(self._sessions.keys())

    def __len__(self) -> int:
        return len(self._sessions)

    def _record(
        self, event: str, config_path: Path | None, ok: bool, detail: dict[str, object]
    ) -> None:
        if self.event_logger is None:
            return
        self.event_logger.append(
            SessionEvent(
                timestamp=utc_timestamp(),
                event=event,
                config_path=str(config_path) if config_path is not None else None,
                ok=ok,
                detail=detail,
            )
        )
