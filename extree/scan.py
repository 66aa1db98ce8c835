# extree/scan.py

"""
Directory scanning and condensation.

This module builds the statistics tree consumed by the renderer. Each
:class:`DirectoryNode` records, per extension, how many files it holds and
how many bytes they weigh. Nodes are ``anytree`` nodes, so the usual anytree
iterators (``PreOrderIter``, ``PostOrderIter``, ...) work on a scanned tree.

Scanning honours a depth ceiling: directories shallower than the ceiling get
one child node per subdirectory, while a directory at the ceiling absorbs
every file of its whole subtree and has no children. A tree can later be
folded further with :func:`condense_to_depth`.

Symbolic links are never followed nor counted.
"""


from __future__ import annotations

import errno
import logging
import os
from pathlib import Path
from typing import Callable

from anytree import NodeMixin, PostOrderIter, PreOrderIter

from extree.stats import ExtensionStats, SortPolicy, extension_of, order_extensions

logger = logging.getLogger(__name__)

SizeAccessor = Callable[[Path], int]


class TraversalError(OSError):
    """A directory could not be listed, or a name is not representable as text."""


class MetadataError(OSError):
    """A listed file vanished or became unreadable before its size was read."""


class DirectoryNode(NodeMixin):
    """
    A scanned directory and its per-extension statistics.

    Attributes
    ----------
    fs_path : pathlib.Path
        Absolute, resolved path of the directory.
    extensions : dict[str | None, ExtensionStats]
        Statistics keyed by extension, in insertion order until sorted with
        :meth:`sort_extensions`. Each extension appears at most once.
    children : tuple[DirectoryNode, ...]
        Immediate subdirectories, sorted by name (case-sensitive).
    depth : int
        Distance to the root of the tree (0 for the root), maintained by
        ``anytree`` from the parent link.
    """

    def __init__(
        self,
        path: Path,
        parent: DirectoryNode | None = None,
    ) -> None:
        self.fs_path = path
        self.extensions: dict[str | None, ExtensionStats] = {}
        self.parent = parent

    def __repr__(self) -> str:
        return f"DirectoryNode({str(self.fs_path)!r}, depth={self.depth}, extensions={len(self.extensions)})"

    @property
    def name(self) -> str:
        """Directory name, or the full path for a filesystem root such as ``/``."""
        return self.fs_path.name or str(self.fs_path)

    def add_file(self, extension: str | None, size: int) -> None:
        stats = self.extensions.get(extension)
        if stats is None:
            self.extensions[extension] = ExtensionStats(extension, 1, size)
        else:
            stats.add_file(size)

    def merge_stats(self, stats: ExtensionStats) -> None:
        """Sum ``stats`` into the matching entry, or append a copy of it."""
        own = self.extensions.get(stats.extension)
        if own is None:
            self.extensions[stats.extension] = stats.copy()
        else:
            own.merge(stats)

    def absorb_descendants(self) -> None:
        """
        Fold the statistics of every descendant into this node and drop them.

        Descendants are visited in pre-order, so extensions this node did not
        have yet are appended in the order they are first met.
        """

        for descendant in self.descendants:
            for stats in descendant.extensions.values():
                self.merge_stats(stats)
        self.children = ()

    def sort_extensions(self, policy: SortPolicy) -> None:
        ordered = order_extensions(self.extensions.values(), policy)
        self.extensions = {s.extension: s for s in ordered}

    def count_of(self, extension: str | None) -> int:
        """Number of files with ``extension`` directly recorded on this node."""
        stats = self.extensions.get(extension)
        return 0 if stats is None else stats.count

    def bytes_of(self, extension: str | None) -> int | None:
        """Cumulative size of ``extension`` on this node, ``None`` if absent."""
        stats = self.extensions.get(extension)
        return None if stats is None else stats.total_bytes

    @property
    def total_count(self) -> int:
        return sum(s.count for s in self.extensions.values())

    @property
    def total_bytes(self) -> int:
        return sum(s.total_bytes for s in self.extensions.values())

    @property
    def subtree_count(self) -> int:
        return sum(node.total_count for node in PreOrderIter(self))

    @property
    def subtree_bytes(self) -> int:
        return sum(node.total_bytes for node in PreOrderIter(self))

    @property
    def is_empty_subtree(self) -> bool:
        """``True`` when neither this node nor any descendant records a file."""
        return not any(node.extensions for node in PreOrderIter(self))


def is_dir(p: Path) -> bool:
    """
    Safely determine whether a path is a real (non-symlink) directory.

    Returns ``False`` if the status cannot be determined.
    """

    try:
        return not p.is_symlink() and p.is_dir()
    except OSError:
        return False


def is_regular_file(p: Path) -> bool:
    """Like :func:`is_dir`, for regular files."""
    try:
        return not p.is_symlink() and p.is_file()
    except OSError:
        return False


def lstat_size(p: Path) -> int:
    """Default metadata accessor: size in bytes, without following symlinks."""
    return p.lstat().st_size


def _traversal_error(exc: OSError, path: Path | str) -> TraversalError:
    return TraversalError(exc.errno, exc.strerror or str(exc), os.fspath(path))


def _raise_traversal(exc: OSError) -> None:
    raise _traversal_error(exc, exc.filename or "") from exc


def _checked_name(p: Path) -> str:
    """
    Return the name of ``p``, ensuring it can be represented as text.

    Undecodable bytes in a file name survive in Python strings as lone
    surrogates; such names cannot be classified nor displayed.
    """

    try:
        p.name.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise TraversalError(
            errno.EILSEQ, "Name cannot be represented as text", os.fspath(p)
        ) from exc
    return p.name


def _list_dir(d: Path) -> list[Path]:
    try:
        return list(d.iterdir())
    except OSError as exc:
        raise _traversal_error(exc, d) from exc


def _read_size(p: Path, size_of: SizeAccessor) -> int:
    try:
        return size_of(p)
    except OSError as exc:
        raise MetadataError(exc.errno, exc.strerror or str(exc), os.fspath(p)) from exc


def scan_tree(
    root: Path | str,
    depth_ceiling: int = 0,
    *,
    composite_extensions: bool = True,
    size_of: SizeAccessor | None = None,
) -> DirectoryNode:
    """
    Scan a directory and return its statistics tree.

    Directories shallower than ``depth_ceiling`` record the files they
    directly contain and get one child per subdirectory. A directory at the
    ceiling records every file of its entire subtree and gets no children,
    so ``depth_ceiling=0`` summarises everything in the root node alone.

    Symbolic links (to files or directories) are ignored at every level.

    Parameters
    ----------
    root : pathlib.Path | str
        Directory to scan. Resolved to an absolute path.
    depth_ceiling : int, default=0
        Depth at which subdirectories stop being materialised.
    composite_extensions : bool, default=True
        Classify ``a.tar.gz`` as ``tar.gz`` (``True``) or as ``gz``.
    size_of : Callable[[pathlib.Path], int], optional
        File size accessor. Defaults to ``lstat().st_size``. An ``OSError``
        raised by it skips the file with a warning.

    Returns
    -------
    DirectoryNode
        Root of the tree, at depth 0.

    Raises
    ------
    ValueError
        If ``depth_ceiling`` is negative.
    TraversalError
        If a directory cannot be listed, or a name cannot be represented as
        text. ``filename`` holds the offending path.
    """

    if depth_ceiling < 0:
        raise ValueError(f"Depth ceiling cannot be negative: {depth_ceiling}")

    root = Path(root).resolve()
    if not root.exists():
        raise TraversalError(errno.ENOENT, "No such file or directory", os.fspath(root))
    if not is_dir(root):
        raise TraversalError(errno.ENOTDIR, "Not a directory", os.fspath(root))

    if root.name:
        _checked_name(root)

    def classify(p: Path) -> str | None:
        return extension_of(_checked_name(p), composite=composite_extensions)

    def record(node: DirectoryNode, p: Path) -> None:
        extension = classify(p)
        try:
            size = _read_size(p, size_of or lstat_size)
        except MetadataError as exc:
            logger.warning("Skipping %s: %s", exc.filename, exc.strerror)
            return
        node.add_file(extension, size)

    def flatten(node: DirectoryNode) -> None:
        logger.debug("Flattening %s at depth %d", node.fs_path, node.depth)
        for dirpath, dirnames, filenames in node.fs_path.walk(on_error=_raise_traversal):
            for name in dirnames:
                _checked_name(dirpath / name)
            # Symlinks to directories are reported as file names and never walked.
            for name in filenames:
                p = dirpath / name
                if is_regular_file(p):
                    record(node, p)

    def rec(node: DirectoryNode) -> None:
        if node.depth >= depth_ceiling:
            flatten(node)
            return

        logger.debug("Scanning %s at depth %d", node.fs_path, node.depth)
        for entry in _list_dir(node.fs_path):
            if is_dir(entry):
                _checked_name(entry)
                rec(DirectoryNode(entry, parent=node))
            elif is_regular_file(entry):
                record(node, entry)

        node.children = sorted(node.children, key=lambda c: c.name)

    tree = DirectoryNode(root)
    rec(tree)
    return tree


def condense_to_depth(
    tree: DirectoryNode, target_depth: int, *, prune_empty: bool = False
) -> None:
    """
    Fold every statistic below ``target_depth`` into the node at that depth.

    Nodes at ``target_depth`` (or deeper, for a tree whose root already sits
    below it) absorb the statistics of their whole subtree and lose their
    children; shallower nodes keep their children. No file is lost: only the
    visible shape of the tree changes. Applying the same condensation twice
    is a no-op.

    Parameters
    ----------
    tree : DirectoryNode
        Tree to restructure in place.
    target_depth : int
        Depth of the cut line.
    prune_empty : bool, default=False
        Also detach every node that records no file in itself or beneath
        (see :func:`prune_empty_nodes`).

    Raises
    ------
    ValueError
        If ``target_depth`` is negative.
    """

    if target_depth < 0:
        raise ValueError(f"Target depth cannot be negative: {target_depth}")

    logger.debug("Condensing %s to depth %d", tree.fs_path, target_depth)

    def rec(node: DirectoryNode) -> None:
        if node.depth >= target_depth:
            node.absorb_descendants()
            return
        for child in node.children:
            rec(child)

    rec(tree)
    if prune_empty:
        prune_empty_nodes(tree)


def prune_empty_nodes(tree: DirectoryNode) -> None:
    """
    Detach every descendant that records no file in itself or beneath.

    The root of ``tree`` is kept even when empty.
    """

    # Post-order: a directory holding only empty directories becomes a leaf
    # by the time it is visited.
    for node in list(PostOrderIter(tree)):
        if node is not tree and not node.extensions and not node.children:
            node.parent = None


def sort_extensions(tree: DirectoryNode, policy: SortPolicy) -> None:
    """Order the extensions of every node of ``tree`` according to ``policy``."""
    for node in PreOrderIter(tree):
        node.sort_extensions(policy)
