"""gosrcs - List the files needed to build a Go package and its local dependencies."""

from gosrcs.config import ListerConfig, load_config
from gosrcs.errors import (
    ConfigError,
    EmbedError,
    GosrcsError,
    GraphLoadError,
    ManifestError,
    PathError,
)
from gosrcs.graph import GoListFileProvider, GoListProvider, Module, Package
from gosrcs.resolution import (
    BuildUnit,
    LocalOverride,
    ResolutionContext,
    SourceFile,
    collect_sources,
    list_sources,
    resolve_embed,
)
from gosrcs.version import (
    GOSRCS_VERSION,
    GOSRCS_VERSION_MAJOR,
    GOSRCS_VERSION_MINOR,
    GOSRCS_VERSION_PATCH,
    get_version_info,
    get_version_string,
)

__version__ = GOSRCS_VERSION
__all__ = [
    "GOSRCS_VERSION",
    "GOSRCS_VERSION_MAJOR",
    "GOSRCS_VERSION_MINOR",
    "GOSRCS_VERSION_PATCH",
    "BuildUnit",
    "ConfigError",
    "EmbedError",
    "GoListFileProvider",
    "GoListProvider",
    "GosrcsError",
    "GraphLoadError",
    "ListerConfig",
    "LocalOverride",
    "ManifestError",
    "Module",
    "Package",
    "PathError",
    "ResolutionContext",
    "SourceFile",
    "collect_sources",
    "get_version_info",
    "get_version_string",
    "list_sources",
    "load_config",
    "resolve_embed",
]
