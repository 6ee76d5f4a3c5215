"""Project configuration and discovery."""

from .discovery import discover_project_files, find_above, matches_pattern
from .tsconfig import (
    CONFIG_FILE_NAME,
    CompilerOptions,
    ConfigDecodeError,
    ProjectConfig,
    decode_compiler_options,
    decode_config,
    load_project_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "CompilerOptions",
    "ConfigDecodeError",
    "ProjectConfig",
    "decode_compiler_options",
    "decode_config",
    "discover_project_files",
    "find_above",
    "load_project_config",
    "matches_pattern",
]
