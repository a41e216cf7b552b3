"""Shared state of a single resolution run."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gosrcs.config import ListerConfig
from gosrcs.errors import PathError
from gosrcs.paths import to_slash

if TYPE_CHECKING:
    from gosrcs.resolution.build_unit import BuildUnit


@dataclass(frozen=True, order=True)
class SourceFile:
    """A required file, relative to the base directory with forward slashes.

    ``import_path`` is the owning package, or empty for manifest files.
    """

    path: str
    import_path: str = ""


@dataclass
class ResolutionContext:
    """State for one top-level resolution; discarded afterwards."""

    base_dir: str
    config: ListerConfig = field(default_factory=ListerConfig)
    entry_unit: BuildUnit | None = None
    # build units reached through overrides, keyed by the path they redirect
    units: dict[str, BuildUnit] = field(default_factory=dict)
    files: list[SourceFile] = field(default_factory=list)

    def relative(self, path: str) -> str:
        """Express an absolute path relative to the base directory."""
        try:
            rel = os.path.relpath(path, self.base_dir)
        except ValueError as e:
            # e.g. a different drive on Windows
            msg = f"cannot make path relative to {self.base_dir}"
            raise PathError(msg, path) from e
        return to_slash(rel)

    def add_file(self, path: str, import_path: str = "") -> None:
        """Record an absolute file path as required."""
        self.files.append(SourceFile(self.relative(path), import_path))

    def sorted_files(self) -> list[SourceFile]:
        """Required files, one per path, ordered by path.

        When several packages contribute the same path the smallest import
        path is kept, so the result does not depend on traversal order.
        """
        unique: dict[str, SourceFile] = {}
        for source in sorted(self.files):
            unique.setdefault(source.path, source)
        return list(unique.values())

    def sorted_paths(self) -> list[str]:
        """Required relative paths, unique and sorted."""
        return [source.path for source in self.sorted_files()]
