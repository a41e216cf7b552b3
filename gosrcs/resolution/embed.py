"""Expansion of embed patterns into the files they select."""

from __future__ import annotations

import logging
import os
import stat

from gosrcs.errors import EmbedError
from gosrcs.paths import (
    is_bad_embed_name,
    quote_glob,
    to_slash,
    trim_file_path_prefix,
    valid_path,
    with_file_path_separator,
)
from gosrcs.pattern import BadPatternError, check_pattern, glob

logger = logging.getLogger(__name__)

INVALID_PATTERN = "invalid pattern syntax"


def valid_embed_pattern(pattern: str) -> bool:
    """Report whether a (prefix-stripped) pattern may be used for embedding."""
    return pattern != "." and valid_path(pattern)


class EmbedResolver:
    """Resolves the embed patterns of one package directory.

    Returned paths are slash-separated and relative to the package
    directory. The resolver only reads the filesystem.
    """

    def __init__(
        self,
        package_dir: str,
        manifest_name: str = "go.mod",
        include_hidden_prefix: str = "all:",
    ) -> None:
        self.package_dir = os.path.normpath(os.path.abspath(package_dir))
        self.manifest_name = manifest_name
        self.include_hidden_prefix = include_hidden_prefix

        # rel path -> id of the last pattern that listed it
        self.have: dict[str, int] = {}
        # directories already checked for module boundaries and bad names
        self.dir_ok: set[str] = set()

    def resolve(self, patterns: list[str]) -> list[str]:
        """Resolve every pattern; the first failing pattern aborts the call.

        Raises:
            EmbedError: Tagged with the offending pattern.

        """
        for pid, pattern in enumerate(patterns, start=1):
            try:
                listed = self._resolve_pattern(pattern, pid)
            except OSError as e:
                raise EmbedError(pattern, str(e)) from e
            logger.debug("embed pattern %s in %s: %d files", pattern, self.package_dir, len(listed))
        return sorted(self.have)

    def _resolve_pattern(self, pattern: str, pid: int) -> list[str]:
        glob_pattern = pattern
        include_hidden = False
        if self.include_hidden_prefix and pattern.startswith(self.include_hidden_prefix):
            glob_pattern = pattern[len(self.include_hidden_prefix) :]
            include_hidden = True

        try:
            check_pattern(glob_pattern)
        except BadPatternError:
            raise EmbedError(pattern, INVALID_PATTERN) from None
        if not valid_embed_pattern(glob_pattern):
            raise EmbedError(pattern, INVALID_PATTERN)

        full = quote_glob(with_file_path_separator(self.package_dir)) + glob_pattern.replace(
            "/",
            os.sep,
        )
        try:
            matches = glob(full)
        except BadPatternError as e:
            raise EmbedError(pattern, str(e)) from e

        listed: list[str] = []
        for file in matches:
            rel = to_slash(trim_file_path_prefix(file, self.package_dir))
            info = os.stat(file)
            what = "directory" if stat.S_ISDIR(info.st_mode) else "file"
            self._check_ancestors(pattern, file, rel, what)

            if stat.S_ISREG(info.st_mode):
                self._add(rel, pid, listed)
            elif stat.S_ISDIR(info.st_mode):
                if self._walk_directory(file, pid, include_hidden, listed) == 0:
                    msg = f"cannot embed directory {rel}: contains no embeddable files"
                    raise EmbedError(pattern, msg)
            else:
                raise EmbedError(pattern, f"cannot embed irregular file {rel}")

        if not listed:
            raise EmbedError(pattern, "no matching files found")
        return listed

    def _add(self, rel: str, pid: int, listed: list[str]) -> None:
        if self.have.get(rel) != pid:
            self.have[rel] = pid
            listed.append(rel)

    def _check_ancestors(self, pattern: str, file: str, rel: str, what: str) -> None:
        """Check that the match and its directories stay inside this unit and are shippable."""
        prefix_len = len(self.package_dir) + 1
        directory = file
        while len(directory) > prefix_len and directory not in self.dir_ok:
            if os.path.exists(os.path.join(directory, self.manifest_name)):
                raise EmbedError(pattern, f"cannot embed {what} {rel}: in different module")
            if directory != file:
                try:
                    info = os.lstat(directory)
                except OSError:
                    info = None
                if info is not None and not stat.S_ISDIR(info.st_mode):
                    msg = f"cannot embed {what} {rel}: in non-directory {directory[prefix_len:]}"
                    raise EmbedError(pattern, msg)
            self.dir_ok.add(directory)

            elem = os.path.basename(directory)
            if is_bad_embed_name(elem):
                if directory == file:
                    msg = f"cannot embed {what} {rel}: invalid name {elem}"
                else:
                    msg = f"cannot embed {what} {rel}: in invalid directory {elem}"
                raise EmbedError(pattern, msg)
            directory = os.path.dirname(directory)

    def _walk_directory(self, root: str, pid: int, include_hidden: bool, listed: list[str]) -> int:
        """Collect the regular files below ``root``, stopping at nested units.

        Bad names are skipped, and so are names starting with ``.`` or ``_``
        unless hidden files were requested. Symlinks are not followed.
        """
        count = 0
        pending = [root]
        while pending:
            directory = pending.pop()
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
            for entry in entries:
                name = entry.name
                if is_bad_embed_name(name) or (name[0] in "._" and not include_hidden):
                    continue
                if entry.is_dir(follow_symlinks=False):
                    if os.path.exists(os.path.join(entry.path, self.manifest_name)):
                        continue
                    pending.append(entry.path)
                elif entry.is_file(follow_symlinks=False):
                    count += 1
                    self._add(to_slash(trim_file_path_prefix(entry.path, self.package_dir)), pid, listed)
        return count


def resolve_embed(
    package_dir: str,
    patterns: list[str],
    manifest_name: str = "go.mod",
    include_hidden_prefix: str = "all:",
) -> list[str]:
    """Expand embed patterns into a sorted list of unique package-relative paths.

    Raises:
        EmbedError: If any pattern is invalid, matches nothing, or selects a
            file that cannot be shipped with the package.

    """
    resolver = EmbedResolver(package_dir, manifest_name, include_hidden_prefix)
    return resolver.resolve(list(patterns))
