# extree/cli.py

"""
Command-line interface.

Parses the command line into an :class:`ExtreeConfig`, then runs the usual
pipeline: scan, optional condensation, extension sorting, rendering.
Rendering only starts once the scan has completed, so a failing scan prints
nothing but the error.
"""


from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

from extree import __version__
from extree.scan import (
    TraversalError,
    condense_to_depth,
    prune_empty_nodes,
    scan_tree,
    sort_extensions,
)
from extree.stats import SortPolicy
from extree.tree import render_tree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtreeConfig:
    """Everything a run needs, independent of how it was obtained."""

    root: Path
    depth_ceiling: int = 0
    sort_policy: SortPolicy = SortPolicy.FILE_SIZE
    show_empty: bool = False
    condense_depth: int | None = None
    prune_empty: bool = False
    composite_extensions: bool = True


def non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative, got {value}")
    return value


def sort_policy(text: str) -> SortPolicy:
    try:
        return SortPolicy.parse(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="extree",
        description=(
            "Display a directory tree annotated with the number and cumulative "
            "size of files per extension."
        ),
    )
    parser.add_argument("directory", type=Path, help="Root directory to scan.")
    parser.add_argument(
        "-s",
        "--sort",
        type=sort_policy,
        default=SortPolicy.FILE_SIZE,
        metavar="{alphabetical,file-count,file-size}",
        help="Ordering of extensions (directories are always sorted by name). Default: file-size.",
    )
    parser.add_argument(
        "-d",
        "--depth",
        type=non_negative_int,
        default=0,
        help=(
            "Depth of recursion. Files below this depth are counted in the "
            "directory at this depth. Default: 0 (everything in the root)."
        ),
    )
    parser.add_argument(
        "-e", "--empty", action="store_true", help="Also print directories holding no file."
    )
    parser.add_argument(
        "-c",
        "--condense",
        type=non_negative_int,
        default=None,
        metavar="DEPTH",
        help="After scanning, fold every directory below DEPTH into its ancestor at DEPTH.",
    )
    parser.add_argument(
        "--prune-empty",
        action="store_true",
        help="Remove directories holding no file from the tree before printing.",
    )
    parser.add_argument(
        "--last-suffix",
        action="store_true",
        help="Classify 'a.tar.gz' as 'gz' instead of 'tar.gz'.",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose", action="count", default=0, help="Increase log verbosity (-vv for debug)."
    )
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log errors.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def config_from_args(args: argparse.Namespace) -> ExtreeConfig:
    return ExtreeConfig(
        root=args.directory,
        depth_ceiling=args.depth,
        sort_policy=args.sort,
        show_empty=args.empty,
        condense_depth=args.condense,
        prune_empty=args.prune_empty,
        composite_extensions=not args.last_suffix,
    )


def configure_logging(verbose: int = 0, quiet: bool = False) -> None:
    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def run(config: ExtreeConfig, write: Callable[[str], None] = print) -> int:
    """
    Execute one scan-and-render pass.

    Returns
    -------
    int
        ``0`` on success, ``1`` if the tree could not be scanned.
    """

    try:
        tree = scan_tree(
            config.root,
            config.depth_ceiling,
            composite_extensions=config.composite_extensions,
        )
    except TraversalError as exc:
        logger.error("Cannot scan %s: %s", exc.filename, exc.strerror)
        return 1

    if config.condense_depth is not None:
        condense_to_depth(tree, config.condense_depth, prune_empty=config.prune_empty)
    elif config.prune_empty:
        prune_empty_nodes(tree)

    sort_extensions(tree, config.sort_policy)
    logger.info(
        "Scanned %s: %d files, %d bytes", tree.fs_path, tree.subtree_count, tree.subtree_bytes
    )
    render_tree(tree, show_empty=config.show_empty, write=write)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose, args.quiet)
    return run(config_from_args(args))


if __name__ == "__main__":
    sys.exit(main())
