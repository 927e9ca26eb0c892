"""Recursive, filter-aware directory copy.

Both snapshot export and restore are built on :func:`copy_tree`. Entries are
checked against the ignore patterns relative to the source root, excluded
directories are never descended into, and existing files at the destination
are replaced while existing directories are merged.
"""

from __future__ import annotations

import logging
import os
import shutil
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from .errors import CopyError
from .ignore import should_copy

logger = logging.getLogger(__name__)


def copy_tree(
    src: Union[str, Path],
    dst: Union[str, Path],
    ignore_patterns: Sequence[str] = (),
) -> None:
    """Copy the tree at src into dst.

    Args:
        src: Source directory.
        dst: Destination directory, created if missing.
        ignore_patterns: Globs matched against paths relative to src.

    Raises:
        CopyError: If reading or writing a specific path fails. The copy
            stops at that path and whatever was already written stays.
    """
    src_root = Path(src)
    dst_root = Path(dst)
    if not src_root.is_dir():
        raise CopyError(src_root, NotADirectoryError(f"{src_root} is not a directory"))

    logger.debug("Copying tree %s -> %s", src_root, dst_root)
    _copy_directory(src_root, src_root, dst_root, ignore_patterns)


def _copy_directory(
    root: Path,
    src_dir: Path,
    dst_dir: Path,
    ignore_patterns: Sequence[str],
) -> None:
    try:
        dst_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise CopyError(dst_dir, e) from e

    try:
        with os.scandir(src_dir) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError as e:
        raise CopyError(src_dir, e) from e

    for entry in entries:
        src_path = Path(entry.path)
        if not should_copy(root, src_path, ignore_patterns):
            logger.debug("Skipping ignored path: %s", src_path)
            continue

        dst_path = dst_dir / entry.name
        try:
            is_link = entry.is_symlink()
            is_dir = not is_link and entry.is_dir()
        except OSError as e:
            raise CopyError(src_path, e) from e

        if is_link:
            _copy_symlink(src_path, dst_path)
        elif is_dir:
            _copy_directory(root, src_path, dst_path, ignore_patterns)
        else:
            _copy_file(src_path, dst_path)


def _unlink_symlink(dst_path: Path) -> None:
    # Links are replaced rather than written through; files are overwritten in place
    if dst_path.is_symlink():
        dst_path.unlink(missing_ok=True)


def _copy_file(src_path: Path, dst_path: Path) -> None:
    if dst_path.is_dir() and not dst_path.is_symlink():
        raise CopyError(dst_path, IsADirectoryError(f"{dst_path} is a directory"))
    try:
        _unlink_symlink(dst_path)
        shutil.copy2(src_path, dst_path)
    except OSError as e:
        raise CopyError(src_path, e) from e


def _copy_symlink(src_path: Path, dst_path: Path) -> None:
    try:
        target = os.readlink(src_path)
        if dst_path.is_symlink() or dst_path.is_file():
            dst_path.unlink(missing_ok=True)
        try:
            os.symlink(target, dst_path)
        except FileExistsError:
            # Another copy into the same destination got there first
            dst_path.unlink(missing_ok=True)
            os.symlink(target, dst_path)
    except OSError as e:
        raise CopyError(src_path, e) from e


def copy_trees(
    jobs: Sequence[Tuple[Path, Path, Sequence[str]]],
    max_workers: Optional[int] = None,
) -> None:
    """Run several tree copies concurrently and wait for all of them.

    Each job is a ``(src, dst, ignore_patterns)`` tuple. Copies run on a
    thread pool and every copy is awaited, even when one fails early. When
    one or more copies fail, each failure is logged and the first one in job
    order is raised. Trees already written are left in place.

    Args:
        jobs: Copies to run.
        max_workers: Thread pool size. Defaults to one thread per job.

    Raises:
        CopyError: The first failed copy, in job order.
    """
    if not jobs:
        return

    with ThreadPoolExecutor(max_workers=max_workers or len(jobs)) as executor:
        futures = [executor.submit(copy_tree, src, dst, patterns) for src, dst, patterns in jobs]

    errors: List[BaseException] = []
    for (src, dst, _), future in zip(jobs, futures):
        error = future.exception()
        if error is not None:
            logger.error("Copy %s -> %s failed: %s", src, dst, error)
            errors.append(error)

    if errors:
        if len(errors) > 1:
            logger.error("%d of %d copies failed", len(errors), len(jobs))
        raise errors[0]
