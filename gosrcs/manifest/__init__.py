"""Manifest (go.mod) reading."""

from .modfile import Manifest, Replacement, is_directory_path, parse_manifest, read_manifest

__all__ = [
    "Manifest",
    "Replacement",
    "is_directory_path",
    "parse_manifest",
    "read_manifest",
]
