"""Snapshot export.

This module creates snapshot instances: one timestamped directory per export
under an archive root, holding one copy of each vault named after the vault's
identity::

    <archive_root>/
      <epoch-millis>/
        <vault-name>/...
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from rich.console import Console

from .copier import copy_trees
from .errors import ConfigurationError, CopyError
from .vault import Vault

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def now_millis() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class SnapshotResult:
    """Outcome of an export."""

    snapshot_dir_path: Path


class SnapshotExporter:
    """Creates snapshot instances of a set of vaults.

    Attributes:
        clock (Clock): Returns the current time in milliseconds, used to name
            snapshot instances
        max_workers (Optional[int]): Thread pool size for the vault copies
        console (Console): Rich console for output formatting
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        max_workers: Optional[int] = None,
        console: Optional[Console] = None,
    ) -> None:
        self.clock = clock or now_millis
        self.max_workers = max_workers
        self.console = console or Console()

    def snapshot_id(self) -> str:
        """Name for a new snapshot instance."""
        return str(self.clock())

    def export(
        self,
        vaults: Sequence[Vault],
        archive_root: Optional[Union[str, Path]],
        ignore_patterns: Sequence[str] = (),
    ) -> SnapshotResult:
        """Copy every vault into a new snapshot instance.

        Args:
            vaults: Vaults to snapshot. An empty list creates an empty
                snapshot instance.
            archive_root: Directory holding the snapshot instances. Created if
                missing.
            ignore_patterns: Globs excluded from every vault copy.

        Returns:
            SnapshotResult: Absolute path of the new snapshot instance.

        Raises:
            ConfigurationError: If no archive root was given. Nothing is
                created in that case.
            CopyError: If a vault copy failed. The other vaults are still
                copied and stay on disk.
        """
        if archive_root is None:
            raise ConfigurationError("no dest specified")

        root = Path(archive_root).expanduser().absolute()
        snapshot_dir_path = root / self.snapshot_id()
        for path in (root, snapshot_dir_path):
            try:
                path.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise CopyError(path, e) from e
        logger.info("Creating snapshot at %s", snapshot_dir_path)

        jobs = []
        for vault in vaults:
            logger.info("Backing up vault %s from %s", vault.id, vault.path)
            jobs.append((vault.path, snapshot_dir_path / vault.id, list(ignore_patterns)))
        copy_trees(jobs, max_workers=self.max_workers)

        self.console.print(f"[green]Snapshot created at {snapshot_dir_path}")
        return SnapshotResult(snapshot_dir_path)


def list_snapshots(archive_root: Union[str, Path]) -> List[Path]:
    """List snapshot instances under an archive root, newest first.

    Only directories with a numeric name are considered snapshot instances.
    A missing archive root has no snapshots.
    """
    root = Path(archive_root).expanduser()
    if not root.is_dir():
        return []

    snapshots = [p for p in root.iterdir() if p.is_dir() and p.name.isdigit()]
    snapshots.sort(key=lambda p: int(p.name), reverse=True)
    return snapshots


def latest_snapshot(archive_root: Union[str, Path]) -> Optional[Path]:
    """Return the newest snapshot instance under an archive root, if any."""
    snapshots = list_snapshots(archive_root)
    return snapshots[0] if snapshots else None


def snapshot_time(snapshot_dir: Path) -> datetime:
    """Creation time encoded in a snapshot instance name."""
    return datetime.fromtimestamp(int(snapshot_dir.name) / 1000)
