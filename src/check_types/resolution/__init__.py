"""Module specifier resolution."""

from .cache import CacheStats, ResolutionCache, resolution_key
from .manifest import ManifestCache, load_package
from .models import (
    JS_EXTENSIONS,
    TS_EXTENSIONS,
    Extension,
    PackageDescriptor,
    ResolvedModule,
    extension_of,
)
from .paths import ProbeError, is_dir, is_file, normalize_path, parents
from .resolver import ModuleResolver, is_path_specifier, is_relative, mangle_types_name
from .search_paths import (
    DEPENDENCY_DIRECTORY,
    SearchPathBuilder,
    build_search_paths,
    dependency_dirs,
    global_library_paths,
    system_library_paths,
)

__all__ = [
    "CacheStats",
    "DEPENDENCY_DIRECTORY",
    "Extension",
    "JS_EXTENSIONS",
    "ManifestCache",
    "ModuleResolver",
    "PackageDescriptor",
    "ProbeError",
    "ResolutionCache",
    "ResolvedModule",
    "SearchPathBuilder",
    "TS_EXTENSIONS",
    "build_search_paths",
    "dependency_dirs",
    "extension_of",
    "global_library_paths",
    "is_dir",
    "is_file",
    "is_path_specifier",
    "is_relative",
    "load_package",
    "mangle_types_name",
    "normalize_path",
    "parents",
    "resolution_key",
    "system_library_paths",
]
