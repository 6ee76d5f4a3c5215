"""Lazily loaded file snapshots."""

from __future__ import annotations

from pathlib import Path

from check_types.resolution.paths import ProbeError, normalize_path

SCRIPT_VERSION = "1"


class SourceDecodeError(ValueError):
    """Raised when a source file is not valid UTF-8."""

    def __init__(self, path: Path, cause: UnicodeDecodeError) -> None:
        super().__init__(f"Could not decode {path} as UTF-8: {cause.reason}")
        self.path = path
        self.cause = cause


class FileSnapshot:
    """Text of one file as first read during a session."""

    def __init__(self, owner: SnapshotCache, path: Path) -> None:
        self._owner = owner
        self._path = path
        self._content: str | None = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def version(self) -> str:
        return SCRIPT_VERSION

    @property
    def is_loaded(self) -> bool:
        return self._content is not None

    def content(self) -> str:
        """Return the full text verbatim, line breaks included, reading it on first access."""
        if self._content is None:
            try:
                with self._path.open("r", encoding="utf-8", newline="") as handle:
                    self._content = handle.read()
            except UnicodeDecodeError as exc:
                raise SourceDecodeError(self._path, exc) from exc
            except OSError as exc:
                raise ProbeError(self._path, exc) from exc
        return self._content

    def get_text(self, start: int, end: int) -> str:
        """Return the text in [start, end)."""
        return self.content()[start:end]

    def get_length(self) -> int:
        return len(self.content())

    def get_change_range(self, old_snapshot: FileSnapshot) -> None:
        """No change ranges are tracked, so incremental parsing always re-parses."""
        _ = old_snapshot
        return None

    def dispose(self) -> None:
        """Drop the cached text and detach from the owning cache."""
        self._content = None
        self._owner.discard(self._path, self)


class SnapshotCache:
    """Per-session table of file snapshots keyed by normalized path."""

    def __init__(self) -> None:
        self._snapshots: dict[Path, FileSnapshot] = {}

    def get_snapshot(self, path: Path | str) -> FileSnapshot:
        """Return the snapshot for a path, creating it without reading the file."""
        key = normalize_path(path)
        snapshot = self._snapshots.get(key)
        if snapshot is None:
            snapshot = FileSnapshot(self, key)
            self._snapshots[key] = snapshot
        return snapshot

    def get_text(self, path: Path | str, start: int, end: int) -> str:
        return self.get_snapshot(path).get_text(start, end)

    def get_length(self, path: Path | str) -> int:
        return self.get_snapshot(path).get_length()

    def dispose(self, path: Path | str) -> None:
        """Dispose the snapshot for a path, if one exists."""
        snapshot = self._snapshots.get(normalize_path(path))
        if snapshot is not None:
            snapshot.dispose()

    def discard(self, path: Path, snapshot: FileSnapshot) -> None:
        if self._snapshots.get(path) is snapshot:
            del self._snapshots[path]

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        return normalize_path(path) in self._snapshots

    def __len__(self) -> int:
        return len(self._snapshots)
