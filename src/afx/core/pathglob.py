"""
Glob helpers shared by plugin sources and command links.

Two matching strategies are combined: a plain shell glob, where ``**``
behaves like ``*``, and a recursive glob, where ``**`` spans directories.
Wildcards match names starting with a dot in both.
"""

import glob as _glob
import os

TAR_SUFFIXES = (".tar.gz", ".tgz", ".tar.xz", ".txz", ".tar.bz2", ".tbz2", ".tar")
ARCHIVE_SUFFIXES = (".zip",) + TAR_SUFFIXES


def expand(value: str) -> str:
    """Expand ``~`` and environment variables in a path-like value."""
    return os.path.expanduser(os.path.expandvars(value))


def is_archive(path: str) -> bool:
    return path.endswith(ARCHIVE_SUFFIXES)


def join_home(home: str, pattern: str) -> str:
    """Resolve a pattern against a package home unless it is absolute."""
    if os.path.isabs(pattern):
        return pattern
    return os.path.join(home, pattern)


def glob(pattern: str) -> list[str]:
    """
    Match a pattern with both strategies.

    Returns the union of matches, de-duplicated in first-seen order
    (shell glob results first, then recursive glob results).
    """
    candidates = sorted(_glob.glob(pattern, include_hidden=True)) + sorted(
        _glob.glob(pattern, recursive=True, include_hidden=True)
    )

    seen: set[str] = set()
    unique: list[str] = []
    for path in candidates:
        if path not in seen:
            seen.add(path)
            unique.append(path)
    return unique
