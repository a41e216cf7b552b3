"""Exceptions raised while collecting package sources."""

from __future__ import annotations


class GosrcsError(Exception):
    """Base class for every failure that aborts a resolution."""


class ConfigError(GosrcsError):
    """Configuration file could not be read or holds unknown settings."""


class ManifestError(GosrcsError):
    """Manifest missing, unreadable or unparseable."""

    def __init__(self, message: str, path: str = "", line: int = 0) -> None:
        if path and line:
            text = f"{path}:{line}: {message}"
        elif path:
            text = f"{path}: {message}"
        else:
            text = message
        super().__init__(text)
        self.message = message
        self.path = path
        self.line = line


class GraphLoadError(GosrcsError):
    """The package graph provider failed or reported package errors."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = list(errors or [])
        if self.errors:
            message = f"{message}: " + "; ".join(self.errors)
        super().__init__(message)


class EmbedError(GosrcsError):
    """A problem with an embed pattern."""

    def __init__(self, pattern: str, message: str) -> None:
        super().__init__(f"pattern {pattern}: {message}")
        self.pattern = pattern
        self.message = message


class PathError(GosrcsError):
    """A path could not be relativized or inspected."""

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(f"{message}: {path}" if path else message)
        self.path = path
