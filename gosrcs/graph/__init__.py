"""Package graph resolution."""

from .golist import (
    GoListFileProvider,
    GoListProvider,
    build_graph,
    decode_go_list_stream,
)
from .model import Module, Package, PackageGraphProvider

__all__ = [
    "GoListFileProvider",
    "GoListProvider",
    "Module",
    "Package",
    "PackageGraphProvider",
    "build_graph",
    "decode_go_list_stream",
]
