"""Package graph provider backed by ``go list -json -deps``."""

from __future__ import annotations

import json
import logging
import os
import subprocess
from pathlib import Path
from typing import Any

from gosrcs.errors import GraphLoadError
from gosrcs.graph.model import Module, Package

logger = logging.getLogger(__name__)

GO_FILE_FIELDS = ("GoFiles", "CgoFiles")
OTHER_FILE_FIELDS = (
    "CFiles",
    "CXXFiles",
    "MFiles",
    "HFiles",
    "FFiles",
    "SFiles",
    "SwigFiles",
    "SwigCXXFiles",
    "SysoFiles",
)


def decode_go_list_stream(text: str) -> list[dict[str, Any]]:
    """Decode the concatenated JSON objects written by ``go list -json``."""
    decoder = json.JSONDecoder()
    records = []
    pos = 0
    end = len(text)
    while True:
        while pos < end and text[pos].isspace():
            pos += 1
        if pos >= end:
            break
        try:
            record, pos = decoder.raw_decode(text, pos)
        except json.JSONDecodeError as e:
            msg = f"cannot decode go list output: {e}"
            raise GraphLoadError(msg) from e
        if not isinstance(record, dict):
            msg = f"unexpected go list record of type {type(record).__name__}"
            raise GraphLoadError(msg)
        records.append(record)
    return records


def _module_from_record(data: dict[str, Any] | None) -> Module | None:
    if not data:
        return None
    replace = data.get("Replace") or {}
    return Module(
        path=data.get("Path", ""),
        dir=replace.get("Dir") or data.get("Dir", ""),
        version=data.get("Version", ""),
        main=bool(data.get("Main", False)),
        replace_path=replace.get("Path", ""),
    )


def _joined_files(record: dict[str, Any], names: tuple[str, ...]) -> list[str]:
    directory = record.get("Dir", "")
    return [os.path.join(directory, f) for name in names for f in record.get(name) or []]


def _package_errors(record: dict[str, Any]) -> list[str]:
    # DepsErrors repeat the Error of a dependency that is also in the stream
    error = record.get("Error")
    if not error:
        return []
    return [f"{record.get('ImportPath', '?')}: {error.get('Err', error)}"]


def build_graph(records: list[dict[str, Any]]) -> list[Package]:
    """Link decoded ``go list`` records into a package graph.

    Returns the packages that were requested (``DepOnly`` unset).

    Raises:
        GraphLoadError: If any package reports an error, an import cannot be
            found in the stream, or no package was requested.

    """
    packages: dict[str, Package] = {}
    roots: list[Package] = []
    errors: list[str] = []

    for record in records:
        import_path = record.get("ImportPath", "")
        directory = record.get("Dir", "")

        pkg = Package(
            import_path=import_path,
            dir=directory,
            module=None if record.get("Standard") else _module_from_record(record.get("Module")),
            go_files=_joined_files(record, GO_FILE_FIELDS),
            other_files=_joined_files(record, OTHER_FILE_FIELDS),
            embed_patterns=list(record.get("EmbedPatterns") or []),
            errors=_package_errors(record),
        )
        errors.extend(pkg.errors)
        packages[import_path] = pkg
        if not record.get("DepOnly"):
            roots.append(pkg)

    for record in records:
        pkg = packages[record.get("ImportPath", "")]
        import_map = record.get("ImportMap") or {}
        for path in record.get("Imports") or []:
            # cgo pseudo-package
            if path == "C" and path not in packages:
                continue
            target = packages.get(path)
            if target is None:
                errors.append(f"{pkg.import_path}: import {path} missing from package graph")
                continue
            # Source-level import path (before vendor/ImportMap rewriting)
            source_path = next((k for k, v in import_map.items() if v == path), path)
            pkg.imports[source_path] = target

    if errors:
        msg = "errors loading packages"
        raise GraphLoadError(msg, errors)
    if not roots:
        msg = "no packages found"
        raise GraphLoadError(msg)
    return roots


class GoListProvider:
    """Runs the go toolchain to resolve a package graph."""

    def __init__(self, go_command: str = "go", env: dict[str, str] | None = None) -> None:
        """Initialize provider.

        Args:
            go_command: The go executable to run.
            env: Extra environment variables for the go command.

        """
        self.go_command = go_command
        self.env = env

    def command(self, package_dir: str, build_flags: list[str] | None = None) -> list[str]:
        """Build the go list command line."""
        return [self.go_command, "list", "-e", "-json", "-deps", *(build_flags or []), package_dir]

    def load(
        self,
        manifest_dir: str,
        package_dir: str,
        build_flags: list[str] | None = None,
    ) -> list[Package]:
        """Resolve ``package_dir`` and its imports from within ``manifest_dir``."""
        cmd = self.command(package_dir, build_flags)
        logger.debug("running %s in %s", " ".join(cmd), manifest_dir)

        env = None
        if self.env:
            env = {**os.environ, **self.env}
        try:
            proc = subprocess.run(
                cmd,
                cwd=manifest_dir,
                env=env,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            msg = f"failed to run {self.go_command}"
            raise GraphLoadError(msg, [str(e)]) from e

        if proc.returncode != 0:
            msg = f"go list exited with status {proc.returncode}"
            raise GraphLoadError(msg, [line for line in proc.stderr.splitlines() if line])

        return build_graph(decode_go_list_stream(proc.stdout))


class GoListFileProvider:
    """Reads a package graph from saved ``go list -json -deps`` output."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(
        self,
        manifest_dir: str,
        package_dir: str,
        build_flags: list[str] | None = None,
    ) -> list[Package]:
        """Decode the saved output; the directories and flags are already baked in."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            msg = f"cannot read package graph {self.path}"
            raise GraphLoadError(msg, [str(e)]) from e
        return build_graph(decode_go_list_stream(text))
