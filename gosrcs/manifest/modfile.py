"""Reader for go.mod manifests.

Only the directives that matter for file collection are interpreted:
``module`` (the unit identity), ``go`` and ``replace``. Every other verb
is accepted and skipped, in both its line and block form.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from gosrcs.errors import ManifestError

logger = logging.getLogger(__name__)

KNOWN_VERBS = frozenset(
    {
        "module",
        "go",
        "toolchain",
        "godebug",
        "require",
        "exclude",
        "replace",
        "retract",
        "tool",
        "ignore",
    },
)

REPLACE_USAGE = (
    "usage: replace module/path [v1.2.3] => other/module v1.4\n"
    "\t or replace module/path [v1.2.3] => ../local/directory"
)

_DRIVE_RE = re.compile(r"^[A-Za-z]:")
_HEX_RE = re.compile(r"[0-9A-Fa-f]+")
_OCTAL_RE = re.compile(r"[0-7]{3}")

_SIMPLE_ESCAPES = {
    "a": 0x07,
    "b": 0x08,
    "f": 0x0C,
    "n": 0x0A,
    "r": 0x0D,
    "t": 0x09,
    "v": 0x0B,
    "\\": 0x5C,
    '"': 0x22,
}
# escape letter -> number of hex digits
_HEX_ESCAPES = {"x": 2, "u": 4, "U": 8}


@dataclass
class Replacement:
    """One ``replace`` directive."""

    old_path: str
    new_path: str
    old_version: str = ""
    new_version: str = ""
    line: int = 0

    @property
    def is_local(self) -> bool:
        """Whether the replacement points at a directory rather than a module version."""
        return is_directory_path(self.new_path) and not self.new_version


@dataclass
class Manifest:
    """Parsed go.mod file."""

    file: str
    module_path: str
    go_version: str = ""
    replacements: list[Replacement] = field(default_factory=list)


def is_directory_path(path: str) -> bool:
    """Report whether a replacement target names a directory instead of a module.

    Both Unix and Windows spellings are accepted since go.mod files move
    between systems.
    """
    if path in (".", ".."):
        return True
    if path.startswith(("./", "../", "/", ".\\", "..\\", "\\")):
        return True
    return bool(_DRIVE_RE.match(path))


def _unquote(literal: str) -> str:
    """Interpret a double-quoted Go string literal, escapes included.

    Raises:
        ValueError: If the literal is malformed.

    """
    body = literal[1:-1]
    out = bytearray()
    i = 0
    n = len(body)
    while i < n:
        c = body[i]
        if c in '"\n':
            raise ValueError(literal)
        if c != "\\":
            out += c.encode("utf-8", "surrogateescape")
            i += 1
            continue
        if i + 1 >= n:
            raise ValueError(literal)
        esc = body[i + 1]
        i += 2
        if esc in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[esc])
        elif esc in _HEX_ESCAPES:
            size = _HEX_ESCAPES[esc]
            digits = body[i : i + size]
            if len(digits) != size or not _HEX_RE.fullmatch(digits):
                raise ValueError(literal)
            i += size
            value = int(digits, 16)
            if esc == "x":
                out.append(value)
            elif value > 0x10FFFF or 0xD800 <= value <= 0xDFFF:
                raise ValueError(literal)
            else:
                out += chr(value).encode("utf-8")
        elif "0" <= esc <= "7":
            # exactly three octal digits, at most \377
            digits = body[i - 1 : i + 2]
            if not _OCTAL_RE.fullmatch(digits) or int(digits, 8) > 0xFF:
                raise ValueError(literal)
            i += 2
            out.append(int(digits, 8))
        else:
            raise ValueError(literal)
    return out.decode("utf-8", "surrogateescape")


def _read_quoted(line: str, start: int, filename: str, lineno: int) -> tuple[str, int]:
    end = start + 1
    while end < len(line):
        if line[end] == "\\":
            end += 2
            continue
        if line[end] == '"':
            literal = line[start : end + 1]
            try:
                return _unquote(literal), end + 1
            except ValueError as e:
                msg = f"invalid quoted string {literal}"
                raise ManifestError(msg, filename, lineno) from e
        end += 1
    msg = "unterminated quoted string"
    raise ManifestError(msg, filename, lineno)


def _tokenize(line: str, filename: str, lineno: int) -> list[str]:
    """Split one go.mod line into tokens, dropping comments."""
    tokens = []
    i = 0
    n = len(line)
    while i < n:
        c = line[i]
        if c.isspace():
            i += 1
        elif line.startswith("//", i):
            break
        elif c in "()":
            tokens.append(c)
            i += 1
        elif line.startswith("=>", i):
            tokens.append("=>")
            i += 2
        elif c == '"':
            token, i = _read_quoted(line, i, filename, lineno)
            tokens.append(token)
        elif c == "`":
            end = line.find("`", i + 1)
            if end < 0:
                msg = "unterminated raw string"
                raise ManifestError(msg, filename, lineno)
            tokens.append(line[i + 1 : end])
            i = end + 1
        else:
            start = i
            while (
                i < n
                and not line[i].isspace()
                and line[i] not in '()"`'
                and not line.startswith("//", i)
                and not line.startswith("=>", i)
            ):
                i += 1
            tokens.append(line[start:i])
    return tokens


def _iter_directives(text: str, filename: str):
    """Yield ``(line, verb, args)`` for every directive, expanding blocks."""
    block_verb = None
    block_line = 0
    for lineno, raw in enumerate(text.splitlines(), start=1):
        tokens = _tokenize(raw, filename, lineno)
        if not tokens:
            continue

        if block_verb is not None:
            if tokens == [")"]:
                block_verb = None
                continue
            if "(" in tokens or ")" in tokens:
                msg = f"unexpected parenthesis in {block_verb} block"
                raise ManifestError(msg, filename, lineno)
            yield lineno, block_verb, tokens
            continue

        verb, args = tokens[0], tokens[1:]
        if args == ["(", ")"]:
            continue
        if args == ["("]:
            block_verb = verb
            block_line = lineno
            continue
        if "(" in args or ")" in args:
            msg = "unexpected parenthesis"
            raise ManifestError(msg, filename, lineno)
        yield lineno, verb, args

    if block_verb is not None:
        msg = f"unterminated {block_verb} block"
        raise ManifestError(msg, filename, block_line)


def _parse_replace(args: list[str], filename: str, lineno: int) -> Replacement:
    try:
        arrow = args.index("=>")
    except ValueError:
        raise ManifestError(REPLACE_USAGE, filename, lineno) from None

    old, new = args[:arrow], args[arrow + 1 :]
    if len(old) not in (1, 2) or len(new) not in (1, 2):
        raise ManifestError(REPLACE_USAGE, filename, lineno)

    replacement = Replacement(
        old_path=old[0],
        old_version=old[1] if len(old) == 2 else "",
        new_path=new[0],
        new_version=new[1] if len(new) == 2 else "",
        line=lineno,
    )
    if replacement.new_version and is_directory_path(replacement.new_path):
        msg = f"replacement module directory path {replacement.new_path!r} cannot have version"
        raise ManifestError(msg, filename, lineno)
    if not replacement.new_version and not is_directory_path(replacement.new_path):
        msg = (
            "replacement module without version must be directory path "
            "(rooted or starting with ./ or ../)"
        )
        raise ManifestError(msg, filename, lineno)
    return replacement


def parse_manifest(text: str, filename: str = "go.mod") -> Manifest:
    """Parse go.mod content.

    Raises:
        ManifestError: If the content is malformed or declares no module.

    """
    module_path = ""
    go_version = ""
    replacements = []

    for lineno, verb, args in _iter_directives(text, filename):
        if verb == "module":
            if len(args) != 1:
                msg = "usage: module module/path"
                raise ManifestError(msg, filename, lineno)
            if module_path:
                msg = "repeated module statement"
                raise ManifestError(msg, filename, lineno)
            module_path = args[0]
        elif verb == "go":
            if len(args) != 1:
                msg = "usage: go 1.23"
                raise ManifestError(msg, filename, lineno)
            go_version = args[0]
        elif verb == "replace":
            replacements.append(_parse_replace(args, filename, lineno))
        elif verb not in KNOWN_VERBS:
            logger.debug("%s:%d: skipping unknown directive %s", filename, lineno, verb)

    if not module_path:
        msg = "no module declaration"
        raise ManifestError(msg, filename)

    return Manifest(
        file=filename,
        module_path=module_path,
        go_version=go_version,
        replacements=replacements,
    )


def read_manifest(path: str | Path) -> Manifest:
    """Read and parse the go.mod file at ``path``."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        msg = f"failed to read manifest: {e}"
        raise ManifestError(msg, str(path)) from e
    return parse_manifest(text, str(path))
