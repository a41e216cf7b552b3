"""Entry point: the files needed to build a package and its local dependencies."""

from __future__ import annotations

import logging
import os

from gosrcs.config import ListerConfig
from gosrcs.errors import GraphLoadError, ManifestError
from gosrcs.graph import GoListProvider, PackageGraphProvider
from gosrcs.resolution.build_unit import BuildUnit
from gosrcs.resolution.context import ResolutionContext, SourceFile

logger = logging.getLogger(__name__)


def find_manifest_dir(directory: str, manifest_name: str = "go.mod") -> str:
    """Return the nearest directory at or above ``directory`` holding a manifest.

    Raises:
        ManifestError: If no manifest exists up to the filesystem root.

    """
    directory = os.path.normpath(os.path.abspath(directory))
    while True:
        if os.path.exists(os.path.join(directory, manifest_name)):
            return directory
        parent = os.path.dirname(directory)
        if parent == directory:
            msg = f"{manifest_name} not found in any parent directory"
            raise ManifestError(msg)
        directory = parent


def collect_sources(
    package_dir: str,
    provider: PackageGraphProvider | None = None,
    config: ListerConfig | None = None,
) -> list[SourceFile]:
    """Collect the files required to build the package in ``package_dir``.

    Args:
        package_dir: Directory of the package to build.
        provider: Package graph provider; defaults to running ``go list``.
        config: Listing configuration.

    Returns:
        One SourceFile per required path, sorted by path.

    Raises:
        ManifestError: If a manifest is missing or malformed.
        GraphLoadError: If the package graph cannot be loaded.
        EmbedError: If an embed pattern cannot be resolved.
        PathError: If a file cannot be expressed relative to the base directory.

    """
    config = config or ListerConfig()
    package_dir = os.path.normpath(os.path.abspath(package_dir))
    logger.info("listing sources of %s", package_dir)

    manifest_dir = find_manifest_dir(package_dir, config.manifest_name)
    provider = provider or GoListProvider(config.go_command)
    packages = provider.load(manifest_dir, package_dir, config.build_flags())
    if not packages:
        msg = f"no packages found for dir: {package_dir}"
        raise GraphLoadError(msg)
    errors = [error for pkg in packages for error in pkg.errors]
    if errors:
        msg = "errors loading package"
        raise GraphLoadError(msg, errors)

    unit = BuildUnit.load(manifest_dir, config)
    base_dir = os.path.abspath(config.base_dir) if config.base_dir else unit.root_dir
    context = ResolutionContext(base_dir=os.path.normpath(base_dir), config=config, entry_unit=unit)

    unit.add_manifest_files(context)
    for pkg in packages:
        unit.process_package(pkg, context)

    files = context.sorted_files()
    logger.info("%d files required by %s", len(files), package_dir)
    return files


def list_sources(
    package_dir: str,
    provider: PackageGraphProvider | None = None,
    config: ListerConfig | None = None,
) -> list[str]:
    """Sorted, unique paths (relative to the base directory) required to build a package."""
    return [source.path for source in collect_sources(package_dir, provider, config)]
