"""Configuration for source listing."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

from gosrcs.errors import ConfigError

GO_COMMAND_ENV = "GOSRCS_GO"


@dataclass
class ListerConfig:
    """Configuration for a source listing run."""

    # Build unit files
    manifest_name: str = "go.mod"
    lock_name: str = "go.sum"

    # Embed patterns
    include_hidden_prefix: str = "all:"

    # Package graph provider
    go_command: str = "go"
    build_tags: list[str] = field(default_factory=list)

    # Output paths are relative to this directory (entry unit root when None)
    base_dir: str | None = None

    def build_flags(self) -> list[str]:
        """Flags passed to the package graph provider."""
        if not self.build_tags:
            return []
        return ["-tags", ",".join(self.build_tags)]

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "manifest_name": self.manifest_name,
            "lock_name": self.lock_name,
            "include_hidden_prefix": self.include_hidden_prefix,
            "go_command": self.go_command,
            "build_tags": list(self.build_tags),
            "base_dir": self.base_dir,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ListerConfig:
        """Create config from dictionary."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            msg = f"unknown configuration keys: {', '.join(unknown)}"
            raise ConfigError(msg)

        config = cls()
        if "manifest_name" in data:
            config.manifest_name = str(data["manifest_name"])
        if "lock_name" in data:
            config.lock_name = str(data["lock_name"])
        if "include_hidden_prefix" in data:
            config.include_hidden_prefix = str(data["include_hidden_prefix"])
        if "go_command" in data:
            config.go_command = str(data["go_command"])
        if "build_tags" in data:
            tags = data["build_tags"] or []
            if isinstance(tags, str):
                tags = [t for t in tags.split(",") if t]
            config.build_tags = [str(t) for t in tags]
        if "base_dir" in data:
            base_dir = data["base_dir"]
            config.base_dir = str(base_dir) if base_dir else None
        return config


def load_config(path: str | None = None) -> ListerConfig:
    """Load configuration from a YAML file and overlay it on the defaults.

    The ``GOSRCS_GO`` environment variable overrides ``go_command``.
    """
    data: dict = {}
    if path:
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            msg = f"cannot read configuration file {path}: {e}"
            raise ConfigError(msg) from e
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            msg = f"invalid configuration file {path}: {e}"
            raise ConfigError(msg) from e
        if not isinstance(data, dict):
            msg = f"configuration file {path} must contain a mapping"
            raise ConfigError(msg)

    config = ListerConfig.from_dict(data)

    env_go = os.environ.get(GO_COMMAND_ENV, "")
    if env_go:
        config.go_command = env_go
    return config
