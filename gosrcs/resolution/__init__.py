"""Dependency closure and embed resolution."""

from .build_unit import BuildUnit, LocalOverride, local_overrides
from .context import ResolutionContext, SourceFile
from .embed import EmbedResolver, resolve_embed, valid_embed_pattern
from .sources import collect_sources, find_manifest_dir, list_sources

__all__ = [
    "BuildUnit",
    "EmbedResolver",
    "LocalOverride",
    "ResolutionContext",
    "SourceFile",
    "collect_sources",
    "find_manifest_dir",
    "list_sources",
    "local_overrides",
    "resolve_embed",
    "valid_embed_pattern",
]
