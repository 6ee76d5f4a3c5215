"""Incremental type-checking sessions."""

from .host import SessionHost, default_lib_file_name
from .registry import ConfigDecodeFailure, Session, SessionRegistry
from .snapshots import SCRIPT_VERSION, FileSnapshot, SnapshotCache, SourceDecodeError

__all__ = [
    "ConfigDecodeFailure",
    "FileSnapshot",
    "SCRIPT_VERSION",
    "Session",
    "SessionHost",
    "SessionRegistry",
    "SnapshotCache",
    "SourceDecodeError",
    "default_lib_file_name",
]
