"""Ignore patterns applied while copying a tree."""

from __future__ import annotations

import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import List, Sequence, Union

PathLike = Union[str, Path]


def parse_ignore(raw: str) -> List[str]:
    """Split a comma-separated list of globs, dropping empty entries."""
    return [entry.strip() for entry in raw.split(",") if entry.strip()]


def relative_path(root_path: PathLike, candidate_path: PathLike) -> str:
    """Return candidate_path relative to root_path using ``/`` separators."""
    root = os.fspath(root_path)
    candidate = os.fspath(candidate_path)
    if candidate.startswith(root):
        candidate = candidate[len(root) :]
    candidate = candidate.replace(os.sep, "/")
    return candidate.lstrip("/")


def _split(path: str) -> List[str]:
    return [part for part in path.replace(os.sep, "/").split("/") if part]


def _match_parts(parts: Sequence[str], pattern_parts: Sequence[str]) -> bool:
    """Match path segments against pattern segments; ``**`` spans any number of them."""
    if not pattern_parts:
        return not parts

    head = pattern_parts[0]
    if head == "**":
        return any(_match_parts(parts[i:], pattern_parts[1:]) for i in range(len(parts) + 1))
    if not parts:
        return False
    return fnmatchcase(parts[0], head) and _match_parts(parts[1:], pattern_parts[1:])


def glob_match(relative: str, pattern: str) -> bool:
    """Match a relative path against a shell glob, one segment at a time.

    ``*``, ``?`` and ``[...]`` never cross a ``/``. A ``**`` segment matches
    zero or more whole segments, so ``**/*.tmp`` matches ``a.tmp`` as well as
    ``notes/a.tmp``.
    """
    pattern_parts = _split(pattern)
    if not pattern_parts:
        return False
    return _match_parts(_split(relative), pattern_parts)


def is_ignored(relative: str, patterns: Sequence[str]) -> bool:
    """Check if a relative path matches any ignore pattern."""
    for pattern in patterns:
        if pattern and glob_match(relative, pattern):
            return True
    return False


def should_copy(root_path: PathLike, candidate_path: PathLike, patterns: Sequence[str]) -> bool:
    """Decide whether candidate_path should be copied.

    The candidate path relative to root_path is matched against every
    pattern with :func:`glob_match`. The root itself is always copied.

    Args:
        root_path: Root of the tree being copied.
        candidate_path: Entry inside that tree.
        patterns: Shell-glob patterns. Empty means copy everything.

    Returns:
        True if no pattern matches the relative path.
    """
    if not patterns:
        return True
    relative = relative_path(root_path, candidate_path)
    if not relative:
        return True
    return not is_ignored(relative, patterns)
