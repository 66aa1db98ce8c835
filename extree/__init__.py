"""
extree — directory trees annotated with per-extension statistics.

This package scans a directory, aggregates file counts and sizes per
extension for every subdirectory, and renders the result as a readable
Unicode tree:

- :func:`scan_tree` builds the statistics tree, flattening everything below
  a depth ceiling into the directory at that depth,
- :func:`condense_to_depth` folds an existing tree further,
- :func:`render_tree` / :func:`draw_tree` draw it.

The API is based on ``pathlib.Path`` and ``anytree`` nodes.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .scan import (
    DirectoryNode,
    MetadataError,
    TraversalError,
    condense_to_depth,
    prune_empty_nodes,
    scan_tree,
    sort_extensions,
)
from .stats import ExtensionStats, SortPolicy, extension_of, format_size, order_extensions
from .tree import draw_tree, render_tree

__all__ = [
    "DirectoryNode",
    "ExtensionStats",
    "MetadataError",
    "SortPolicy",
    "TraversalError",
    "condense_to_depth",
    "draw_tree",
    "extension_of",
    "format_size",
    "order_extensions",
    "prune_empty_nodes",
    "render_tree",
    "scan_tree",
    "sort_extensions",
]
