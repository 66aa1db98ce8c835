# extree/tree.py

"""
Statistics tree rendering.

This module renders a scanned :class:`~extree.scan.DirectoryNode` tree as a
Unicode tree similar to the Unix ``tree`` command, with one line per
extension under each directory::

    project
    ├── py  ── 12 ──  48.21 kiB
    ├── N/A ──  1 ──      220 B
    └── docs
        └── md ── 3 ──   9.75 kiB

Within a directory, extension lines come first, then subdirectories in name
order. Extension columns are aligned per directory.

The main entry points are :func:`render_tree`, which returns (and optionally
writes) the lines, and :func:`draw_tree`, which returns them as one string.
"""


from __future__ import annotations

from typing import Callable

from extree.scan import DirectoryNode
from extree.stats import ExtensionStats, SortPolicy, format_size, order_extensions

TPIPE = "├── "
LPIPE = "└── "
BAR = "│   "
BLANK = "    "

SEPARATOR = " ── "
SIZE_WIDTH = 10


def vertical_bars(depth: int, skipped: frozenset[int]) -> str:
    """
    Build the indentation of an item drawn at ``depth``.

    Each ancestor level ``1 .. depth - 1`` contributes a vertical bar, or
    blanks when that level's directory was the last of its siblings.
    """

    return "".join(BLANK if i in skipped else BAR for i in range(1, depth))


def format_extension(
    stats: ExtensionStats, name_width: int, count_width: int, decimals: int = 2
) -> str:
    """
    Format an extension as ``NAME ── COUNT ── SIZE``.

    The name is left-aligned to ``name_width``, the count right-aligned to
    ``count_width`` and the size right-aligned to a fixed width.
    """

    return (
        f"{stats.label:<{name_width}}{SEPARATOR}"
        f"{stats.count:>{count_width}}{SEPARATOR}"
        f"{format_size(stats.total_bytes, decimals):>{SIZE_WIDTH}}"
    )


def render_tree(
    tree: DirectoryNode,
    policy: SortPolicy | None = None,
    show_empty: bool = False,
    *,
    write: Callable[[str], None] | None = None,
) -> list[str]:
    """
    Render a statistics tree as box-drawing lines.

    The root is printed bare. Every other item is prefixed by one indentation
    column per ancestor level and a ``├──`` or ``└──`` connector, the latter
    marking the last item of its level. The last extension of a directory
    only gets ``└──`` when no subdirectory is drawn after it.

    Parameters
    ----------
    tree : DirectoryNode
        Root of the tree to render. Not modified.
    policy : SortPolicy | None, optional
        Extension ordering applied to each directory. ``None`` keeps the
        order currently stored on the nodes.
    show_empty : bool, default=False
        Whether directories without any file in their subtree are drawn.
        Hidden directories do not count when deciding which sibling is last.
        The root is always drawn.
    write : Callable[[str], None] | None, optional
        Line writer receiving each line as soon as it is produced, e.g.
        ``print``.

    Returns
    -------
    list[str]
        Every rendered line, in order.
    """

    lines: list[str] = []

    def emit(line: str) -> None:
        lines.append(line)
        if write is not None:
            write(line)

    def item(text: str, last: bool, depth: int, skipped: frozenset[int]) -> None:
        emit(vertical_bars(depth, skipped) + (LPIPE if last else TPIPE) + text)

    def visible_children(node: DirectoryNode) -> list[DirectoryNode]:
        if show_empty:
            return list(node.children)
        return [c for c in node.children if not c.is_empty_subtree]

    def rec(node: DirectoryNode, depth: int, last: bool, skipped: frozenset[int]) -> None:
        """
        Draw ``node`` and its subtree.

        ``skipped`` holds the ancestor levels whose pipe must be left blank;
        it is extended, for this subtree only, when ``node`` is a last child.
        """

        if last:
            skipped = skipped | {depth}

        if depth == 0:
            emit(node.name)
        else:
            item(node.name, last, depth, skipped)

        children = visible_children(node)
        stats = list(node.extensions.values())
        if policy is not None:
            stats = order_extensions(stats, policy)

        name_width = max((len(s.label) for s in stats), default=0)
        count_width = max((len(str(s.count)) for s in stats), default=0)
        for i, s in enumerate(stats):
            is_last = not children and i == len(stats) - 1
            item(format_extension(s, name_width, count_width), is_last, depth + 1, skipped)

        for i, child in enumerate(children):
            rec(child, depth + 1, i == len(children) - 1, skipped)

    rec(tree, 0, True, frozenset())
    return lines


def draw_tree(
    tree: DirectoryNode,
    policy: SortPolicy | None = None,
    show_empty: bool = False,
) -> str:
    """Return :func:`render_tree` output as a single newline-joined string."""
    return "\n".join(render_tree(tree, policy, show_empty))
