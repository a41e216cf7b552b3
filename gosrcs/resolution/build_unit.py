"""Build units: source trees governed by one manifest."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from gosrcs.config import ListerConfig
from gosrcs.manifest import Manifest, read_manifest
from gosrcs.resolution.embed import resolve_embed

if TYPE_CHECKING:
    from gosrcs.graph import Package
    from gosrcs.resolution.context import ResolutionContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocalOverride:
    """A dependency redirected to a directory inside the source tree."""

    old_path: str
    directory: str  # absolute
    version: str = ""


def local_overrides(manifest: Manifest, root_dir: str) -> dict[str, LocalOverride]:
    """Extract the replacements that redirect a dependency to a local directory.

    Only replacements without a version and with a relative target count;
    everything else stays an ordinary external dependency.
    """
    overrides = {}
    for replacement in manifest.replacements:
        if not replacement.is_local or os.path.isabs(replacement.new_path):
            continue
        directory = os.path.normpath(os.path.join(root_dir, replacement.new_path))
        overrides[replacement.old_path] = LocalOverride(replacement.old_path, directory)
    return overrides


class BuildUnit:
    """A module: its identity, local overrides and the packages it already contributed."""

    def __init__(self, root_dir: str, manifest: Manifest, config: ListerConfig | None = None) -> None:
        self.root_dir = os.path.normpath(os.path.abspath(root_dir))
        self.manifest = manifest
        self.config = config or ListerConfig()
        self.path = manifest.module_path
        self.overrides = local_overrides(manifest, self.root_dir)
        self.processed: set[str] = set()

    @classmethod
    def load(cls, root_dir: str, config: ListerConfig | None = None) -> BuildUnit:
        """Read the manifest in ``root_dir`` and build the unit.

        Raises:
            ManifestError: If the manifest is missing, unreadable or malformed.

        """
        config = config or ListerConfig()
        manifest = read_manifest(os.path.join(root_dir, config.manifest_name))
        unit = cls(root_dir, manifest, config)
        logger.debug("loaded build unit %s at %s", unit.path, unit.root_dir)
        return unit

    def __repr__(self) -> str:
        return f"BuildUnit({self.path!r}, {self.root_dir!r})"

    def manifest_files(self) -> list[str]:
        """The manifest and, when present, its lock file."""
        files = [os.path.join(self.root_dir, self.config.manifest_name)]
        lock = os.path.join(self.root_dir, self.config.lock_name)
        if os.path.isfile(lock):
            files.append(lock)
        return files

    def add_manifest_files(self, context: ResolutionContext) -> None:
        """Record the manifest files; they have no owning package."""
        for file in self.manifest_files():
            context.add_file(file)

    def owns(self, package: Package) -> bool:
        """Whether ``package`` belongs to this unit."""
        module = package.module
        if module is None:
            return False
        if module.path == self.path:
            return True
        return bool(module.dir) and os.path.normpath(module.dir) == self.root_dir

    def process_package(self, package: Package, context: ResolutionContext) -> None:
        """Add ``package`` and everything it imports that lives in a local unit.

        Each package is processed once per unit. Platform packages and
        external dependencies without a local override are left out.
        """
        pending: list[tuple[BuildUnit, Package]] = [(self, package)]
        while pending:
            unit, pkg = pending.pop()
            if pkg.import_path in unit.processed:
                continue
            unit.processed.add(pkg.import_path)
            logger.debug("processing package %s in %s", pkg.import_path, unit.path)

            unit._add_package_files(pkg, context)

            for import_path in sorted(pkg.imports):
                imported = pkg.imports[import_path]
                target = unit._unit_for_import(imported, context)
                if target is None or imported.import_path in target.processed:
                    continue
                pending.append((target, imported))

    def _add_package_files(self, package: Package, context: ResolutionContext) -> None:
        files = package.files()
        if package.embed_patterns:
            embedded = resolve_embed(
                package.dir,
                package.embed_patterns,
                manifest_name=self.config.manifest_name,
                include_hidden_prefix=self.config.include_hidden_prefix,
            )
            files.extend(os.path.join(package.dir, *rel.split("/")) for rel in embedded)
        for file in files:
            context.add_file(file, package.import_path)

    def _unit_for_import(self, package: Package, context: ResolutionContext) -> BuildUnit | None:
        """Decide which unit an imported package is processed in, or None to leave it out."""
        if package.module is None:
            logger.debug("skipping platform package %s", package.import_path)
            return None
        if self.owns(package):
            return self

        entry = context.entry_unit
        if entry is not None and entry is not self and entry.owns(package):
            return entry

        override = self.overrides.get(package.module.path)
        if override is None:
            logger.debug("skipping external package %s (%s)", package.import_path, package.module.path)
            return None
        return self._override_unit(override, context)

    def _override_unit(self, override: LocalOverride, context: ResolutionContext) -> BuildUnit:
        unit = context.units.get(override.old_path)
        if unit is None:
            unit = BuildUnit.load(override.directory, self.config)
            # Overrides apply to everything reached through them
            unit.overrides = dict(self.overrides)
            unit.add_manifest_files(context)
            context.units[override.old_path] = unit
        return unit
