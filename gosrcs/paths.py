"""Path comparison, trimming and quoting helpers.

Platform specific path semantics live here so the resolver can stay
platform agnostic. Comparisons are case-sensitive except for the volume
name (drive letter), and assume separators are already canonical
(as returned by ``os.path.normpath``).
"""

from __future__ import annotations

import os
import unicodedata

GLOB_META = "*?[]"

# Version control directories never make it into a module
VCS_DIRECTORIES = frozenset({".bzr", ".hg", ".git", ".svn"})

# ASCII punctuation allowed in file names besides letters and digits
_FILE_NAME_PUNCTUATION = "!#$%&()+,-.=@[]^_{}~ "

_WINDOWS_RESERVED = frozenset(
    {"CON", "PRN", "AUX", "NUL"}
    | {f"COM{i}" for i in range(1, 10)}
    | {f"LPT{i}" for i in range(1, 10)},
)


def _is_sep(c: str) -> bool:
    return c == os.sep or (os.altsep is not None and c == os.altsep)


def has_file_path_prefix(s: str, prefix: str) -> bool:
    """Report whether the filesystem path ``s`` begins with the elements in ``prefix``.

    ``/foo2`` is not prefixed by ``/foo``. The volume name is compared
    case-insensitively, the rest of the path is not.
    """
    sv, s = os.path.splitdrive(s)
    pv, prefix = os.path.splitdrive(prefix)
    if sv != pv:
        sv = sv.upper()
        pv = pv.upper()

    if sv != pv:
        return False
    if len(s) == len(prefix):
        return s == prefix
    if prefix == "":
        return True
    if len(s) > len(prefix):
        if _is_sep(prefix[-1]):
            return s.startswith(prefix)
        return _is_sep(s[len(prefix)]) and s[: len(prefix)] == prefix
    return False


def trim_file_path_prefix(s: str, prefix: str) -> str:
    """Return ``s`` without the leading path elements in ``prefix``.

    Joining the result to ``prefix`` produces ``s``. If ``s`` does not start
    with ``prefix`` it is returned unchanged; if it equals ``prefix`` the
    result is the empty string.
    """
    if prefix == "":
        # Trim("/tmp/foo", "") keeps the path absolute
        return s
    if not has_file_path_prefix(s, prefix):
        return s

    trimmed = s[len(prefix) :]
    if trimmed and _is_sep(trimmed[0]):
        bare_drive = os.name == "nt" and len(prefix) == 2 and prefix[1] == ":"
        if not bare_drive:
            trimmed = trimmed[1:]
    return trimmed


def with_file_path_separator(s: str) -> str:
    """Return ``s`` with a trailing path separator, or ``s`` unchanged if empty."""
    if s == "" or _is_sep(s[-1]):
        return s
    return s + os.sep


def quote_glob(s: str) -> str:
    """Return ``s`` with all glob metacharacters quoted.

    Backslash is left alone since it can appear in a Windows file path.
    """
    if not any(c in GLOB_META for c in s):
        return s
    return "".join("\\" + c if c in GLOB_META else c for c in s)


def to_slash(path: str) -> str:
    """Replace the platform separator with forward slashes."""
    if os.sep == "/":
        return path
    return path.replace(os.sep, "/")


def valid_path(name: str) -> bool:
    """Report whether ``name`` is an unrooted slash-separated path without ``.``/``..`` elements.

    The single name ``"."`` is valid and means the root itself.
    """
    if name == ".":
        return True
    return all(elem not in ("", ".", "..") for elem in name.split("/"))


def _file_name_char_ok(c: str) -> bool:
    if ord(c) < 0x80:
        return c.isalnum() or c in _FILE_NAME_PUNCTUATION
    return unicodedata.category(c).startswith("L")


def check_file_name(elem: str) -> str | None:
    """Check one element of a portable file path.

    Returns a description of the problem, or None when the name is acceptable.
    """
    if elem == "":
        return "empty path element"
    if elem.count(".") == len(elem):
        return f"invalid path element {elem!r}"
    if elem[-1] == ".":
        return "trailing dot in path element"
    for c in elem:
        if not _file_name_char_ok(c):
            return f"invalid char {c!r}"

    # Windows disallows a bunch of path elements, sadly.
    short = elem.split(".", 1)[0]
    if short.upper() in _WINDOWS_RESERVED:
        return f"{short} is a disallowed path element on Windows"
    return None


def is_bad_embed_name(name: str) -> bool:
    """Report whether a base name can't or won't be shipped inside a module."""
    if name == "" or name in VCS_DIRECTORIES:
        return True
    return check_file_name(name) is not None
