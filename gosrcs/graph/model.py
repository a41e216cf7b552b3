"""Package graph data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


@dataclass
class Module:
    """The build unit a package belongs to."""

    path: str
    dir: str
    version: str = ""
    main: bool = False
    replace_path: str = ""


@dataclass(eq=False)
class Package:
    """A resolved package and its direct imports.

    ``module`` is None for platform-provided packages (the standard library),
    which never contribute files. ``imports`` maps import path to the
    resolved package; the graph may contain cycles.
    """

    import_path: str
    dir: str
    module: Module | None = None
    go_files: list[str] = field(default_factory=list)
    other_files: list[str] = field(default_factory=list)
    embed_patterns: list[str] = field(default_factory=list)
    imports: dict[str, Package] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    @property
    def is_platform(self) -> bool:
        """Whether the package is provided by the toolchain rather than a module."""
        return self.module is None

    def files(self) -> list[str]:
        """Primary and auxiliary source files, absolute."""
        return [*self.go_files, *self.other_files]

    def __repr__(self) -> str:
        return f"Package({self.import_path!r})"


class PackageGraphProvider(Protocol):
    """Resolves a package directory into its transitive import graph."""

    def load(
        self,
        manifest_dir: str,
        package_dir: str,
        build_flags: list[str] | None = None,
    ) -> list[Package]:
        """Return the requested (top-level) packages with their imports linked."""
        ...
