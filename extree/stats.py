# extree/stats.py

"""
Per-extension statistics.

This module holds the small value types shared by the scanner, the condenser
and the renderer:

- :class:`ExtensionStats`, the aggregate (file count and cumulative size) of
  one extension inside one directory,
- :class:`SortPolicy` and :func:`order_extensions`, which order a collection
  of statistics for display,
- :func:`extension_of`, the filename classification rule,
- :func:`format_size`, the human-readable byte formatter.
"""


from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

NO_EXTENSION_LABEL = "N/A"

_UNITS = ("kiB", "MiB", "GiB", "TiB")


@dataclass
class ExtensionStats:
    """
    Aggregate of every file sharing one extension.

    Attributes
    ----------
    extension : str | None
        The extension without its leading dot (``"tar.gz"``), or ``None`` for
        files without an extension.
    count : int
        Number of files seen with this extension. Always at least 1.
    total_bytes : int
        Cumulative size of those files, in bytes.
    """

    extension: str | None
    count: int = 1
    total_bytes: int = 0

    @property
    def label(self) -> str:
        """Display name of the extension (``N/A`` when there is none)."""
        return NO_EXTENSION_LABEL if self.extension is None else self.extension

    def add_file(self, size: int) -> None:
        self.count += 1
        self.total_bytes += size

    def merge(self, other: ExtensionStats) -> None:
        """
        Fold another aggregate of the same extension into this one.

        Raises
        ------
        ValueError
            If ``other`` describes a different extension.
        """

        if other.extension != self.extension:
            raise ValueError(
                f"Cannot merge {other.label!r} statistics into {self.label!r}"
            )
        self.count += other.count
        self.total_bytes += other.total_bytes

    def copy(self) -> ExtensionStats:
        return ExtensionStats(self.extension, self.count, self.total_bytes)


class SortPolicy(Enum):
    """Ordering applied to a directory's extensions (never to its children)."""

    ALPHABETICAL = "alphabetical"
    FILE_COUNT = "file-count"
    FILE_SIZE = "file-size"

    @classmethod
    def parse(cls, text: str) -> SortPolicy:
        """
        Resolve a user-facing policy name.

        Accepts the canonical values plus a few aliases (``alphabetically``,
        ``name``, ``count``, ``size``); matching ignores case and treats
        underscores as dashes.

        Raises
        ------
        ValueError
            If ``text`` names no known policy.
        """

        key = text.strip().lower().replace("_", "-")
        try:
            return _POLICY_ALIASES[key]
        except KeyError:
            choices = ", ".join(p.value for p in cls)
            raise ValueError(f"Unknown sort policy {text!r} (choose from {choices})") from None


_POLICY_ALIASES = {
    "alphabetical": SortPolicy.ALPHABETICAL,
    "alphabetically": SortPolicy.ALPHABETICAL,
    "name": SortPolicy.ALPHABETICAL,
    "file-count": SortPolicy.FILE_COUNT,
    "count": SortPolicy.FILE_COUNT,
    "file-size": SortPolicy.FILE_SIZE,
    "size": SortPolicy.FILE_SIZE,
}


def order_extensions(
    stats: Iterable[ExtensionStats], policy: SortPolicy
) -> list[ExtensionStats]:
    """
    Return ``stats`` ordered according to ``policy``.

    - ``ALPHABETICAL``: by extension name, case-sensitive (code point order).
      Files without an extension sort first, as if their extension were the
      empty string.
    - ``FILE_COUNT``: most files first.
    - ``FILE_SIZE``: largest cumulative size first.

    Every ordering is stable: entries with equal keys keep the order in which
    they were given.

    Parameters
    ----------
    stats : Iterable[ExtensionStats]
        Statistics to order. Not modified.
    policy : SortPolicy
        Ordering to apply.

    Returns
    -------
    list[ExtensionStats]
        A new list holding the same objects.
    """

    items = list(stats)
    if policy is SortPolicy.ALPHABETICAL:
        items.sort(key=lambda s: (s.extension is not None, s.extension or ""))
    elif policy is SortPolicy.FILE_COUNT:
        items.sort(key=lambda s: s.count, reverse=True)
    elif policy is SortPolicy.FILE_SIZE:
        items.sort(key=lambda s: s.total_bytes, reverse=True)
    else:
        raise ValueError(f"Unsupported sort policy: {policy!r}")
    return items


def extension_of(name: str, *, composite: bool = True) -> str | None:
    """
    Classify a filename by its extension.

    Leading dots are not extension separators, so dot-files such as
    ``.bashrc`` have no extension, and empty segments (``a..txt``) are
    ignored. In composite mode the last suffix is joined with the suffixes
    before it as long as they contain a letter (``archive.tar.gz`` →
    ``tar.gz``, ``IMG_2024.05.01.jpg`` → ``jpg``); otherwise only the last
    suffix counts (``gz``). A name ending with a bare dot has no extension.

    Parameters
    ----------
    name : str
        Bare file name, without any directory component.
    composite : bool, default=True
        Whether multi-part suffixes form a single extension.

    Returns
    -------
    str | None
        The extension without its leading dot, or ``None``.
    """

    parts = [p for p in name.lstrip(".").split(".")[1:] if p]
    if not parts:
        return None
    if not composite:
        return parts[-1]

    suffixes = [parts[-1]]
    for part in reversed(parts[:-1]):
        if not any(c.isalpha() for c in part):
            break
        suffixes.insert(0, part)
    return ".".join(suffixes)


def format_size(num_bytes: int, decimals: int = 2) -> str:
    """
    Render a byte count with binary (1024-based) units.

    Values below 1 kiB are printed as a whole number of bytes (``"1023 B"``);
    larger values are scaled to kiB, MiB, GiB or TiB and printed with
    ``decimals`` fractional digits (``"1.00 kiB"``). TiB is the largest unit.

    Raises
    ------
    ValueError
        If ``num_bytes`` is negative.
    """

    if num_bytes < 0:
        raise ValueError(f"Size cannot be negative: {num_bytes}")
    if num_bytes < 1024:
        return f"{num_bytes} B"

    value = num_bytes / 1024.0
    for unit in _UNITS[:-1]:
        if value < 1024.0:
            return f"{value:.{decimals}f} {unit}"
        value /= 1024.0
    return f"{value:.{decimals}f} {_UNITS[-1]}"
