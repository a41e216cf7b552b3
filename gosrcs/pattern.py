"""Glob pattern matching with Go module embed semantics.

Pattern syntax::

    '*'         any sequence of non-separator characters
    '?'         any single non-separator character
    '[' [ '^' ] { range } ']'
                character class (must be non-empty)
    c           matches character c (c != '*', '?', '\\', '[')
    '\\' c      matches character c

    range:  c (c != '\\', '-', ']') | '\\' c | lo '-' hi

Unlike :mod:`fnmatch`, malformed patterns are rejected and ``*`` also
matches names that begin with a dot.
"""

from __future__ import annotations

import os
import re
from functools import lru_cache

# Backslash is a separator on Windows, so it cannot escape there
_ESCAPE = os.sep != "\\"


class BadPatternError(ValueError):
    """Syntax error in pattern."""

    def __init__(self, pattern: str) -> None:
        super().__init__(f"syntax error in pattern: {pattern!r}")
        self.pattern = pattern


def _get_esc(pattern: str, i: int, escape: bool) -> tuple[str, int]:
    """Read one possibly escaped character inside a character class."""
    if i >= len(pattern) or pattern[i] in "-]":
        raise BadPatternError(pattern)
    if escape and pattern[i] == "\\":
        i += 1
        if i >= len(pattern):
            raise BadPatternError(pattern)
    c = pattern[i]
    i += 1
    if i >= len(pattern):
        # class never closed
        raise BadPatternError(pattern)
    return c, i


def _translate_class(pattern: str, i: int, escape: bool) -> tuple[str, int]:
    negated = False
    if i < len(pattern) and pattern[i] == "^":
        negated = True
        i += 1

    parts = []
    nrange = 0
    while True:
        if i < len(pattern) and pattern[i] == "]" and nrange > 0:
            i += 1
            break
        lo, i = _get_esc(pattern, i, escape)
        hi = lo
        if pattern[i] == "-":
            hi, i = _get_esc(pattern, i + 1, escape)
        nrange += 1
        if lo > hi:
            # empty range, matches nothing
            continue
        if lo == hi:
            parts.append(re.escape(lo))
        else:
            parts.append(f"{re.escape(lo)}-{re.escape(hi)}")

    if not parts:
        return ("." if negated else "(?!)"), i
    return ("[^" if negated else "[") + "".join(parts) + "]", i


@lru_cache(maxsize=256)
def _compile(pattern: str, sep: str, escape: bool) -> re.Pattern[str]:
    not_sep = f"[^{re.escape(sep)}]"
    out = []
    i = 0
    n = len(pattern)
    while i < n:
        c = pattern[i]
        i += 1
        if c == "*":
            while i < n and pattern[i] == "*":
                i += 1
            out.append(f"{not_sep}*")
        elif c == "?":
            out.append(not_sep)
        elif c == "[":
            cls, i = _translate_class(pattern, i, escape)
            out.append(cls)
        elif c == "\\" and escape:
            if i >= n:
                raise BadPatternError(pattern)
            out.append(re.escape(pattern[i]))
            i += 1
        else:
            out.append(re.escape(c))
    return re.compile("(?s:" + "".join(out) + r")\Z")


def check_pattern(pattern: str) -> None:
    """Raise BadPatternError if a slash-separated pattern is malformed."""
    _compile(pattern, "/", True)


def match(pattern: str, name: str) -> bool:
    """Report whether the slash-separated ``name`` matches the shell pattern."""
    return _compile(pattern, "/", True).match(name) is not None


def match_file(pattern: str, name: str) -> bool:
    """Like :func:`match` but for one platform path element."""
    return _compile(pattern, os.sep, _ESCAPE).match(name) is not None


def has_meta(path: str) -> bool:
    """Report whether ``path`` contains any of the magic characters."""
    magic = "*?[\\" if _ESCAPE else "*?["
    return any(c in magic for c in path)


def _clean_glob_dir(path: str) -> str:
    if path == "":
        return "."
    stripped = path.rstrip(os.sep)
    return stripped or path


def _join(directory: str, name: str) -> str:
    if directory == ".":
        return name
    return os.path.join(directory, name)


def _glob_in_dir(directory: str, pattern: str, matches: list[str]) -> None:
    # I/O errors are ignored, like a directory that is not there
    if not os.path.isdir(directory):
        return
    try:
        names = sorted(os.listdir(directory))
    except OSError:
        return
    for name in names:
        if match_file(pattern, name):
            matches.append(_join(directory, name))


def glob(pattern: str) -> list[str]:
    """Return the names of all files matching ``pattern``.

    The only possible error is BadPatternError, for malformed patterns.
    A pattern without metacharacters is returned as-is if it exists.
    """
    _compile(pattern, os.sep, _ESCAPE)

    if not has_meta(pattern):
        if os.path.lexists(pattern):
            return [pattern]
        return []

    directory, file = os.path.split(pattern)
    directory = _clean_glob_dir(directory)
    rest = os.path.splitdrive(directory)[1]

    matches: list[str] = []
    if not has_meta(rest):
        _glob_in_dir(directory, file, matches)
        return matches

    if directory == pattern:
        raise BadPatternError(pattern)
    for d in glob(directory):
        _glob_in_dir(d, file, matches)
    return matches
