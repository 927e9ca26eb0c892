"""Restore functionality for vaultsnap."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

from rich.console import Console

from .copier import copy_trees
from .errors import NotFoundError
from .vault import Vault

logger = logging.getLogger(__name__)

# Version-control metadata is never restored
RESTORE_IGNORE = [".git"]

DEFAULT_VAULT_NAME = "vault"

MAPPING_FIRST = "first"
MAPPING_IDENTITY = "identity"
MAPPINGS = (MAPPING_FIRST, MAPPING_IDENTITY)


def resolve_vault(
    snapshot_dir: Path,
    vaults: Sequence[Vault],
    workspace_root: Union[str, Path],
    mapping: str = MAPPING_FIRST,
) -> Vault:
    """Pick the vault an archived vault directory is restored onto.

    Without configured vaults the destination is ``<workspace_root>/vault``.
    With the ``first`` mapping every archived directory goes to the first
    vault. With the ``identity`` mapping the vault with the same name as the
    archived directory is used, falling back to the first vault.
    """
    if not vaults:
        return Vault(Path(workspace_root) / DEFAULT_VAULT_NAME)

    if mapping == MAPPING_IDENTITY:
        for vault in vaults:
            if vault.id == snapshot_dir.name:
                return vault
        logger.warning(
            "No vault named '%s', restoring onto %s", snapshot_dir.name, vaults[0].path
        )

    return vaults[0]


class SnapshotImporter:
    """Restores a snapshot instance onto a set of vaults.

    Attributes:
        mapping (str): How archived vault directories are matched to vaults,
            ``first`` or ``identity``
        max_workers (Optional[int]): Thread pool size for the vault copies
        console (Console): Rich console for output formatting
    """

    def __init__(
        self,
        mapping: str = MAPPING_FIRST,
        max_workers: Optional[int] = None,
        console: Optional[Console] = None,
    ) -> None:
        if mapping not in MAPPINGS:
            raise ValueError(f"Unknown vault mapping '{mapping}', use one of {', '.join(MAPPINGS)}")
        self.mapping = mapping
        self.max_workers = max_workers
        self.console = console or Console()

    def vault_snapshots(self, archive_dir: Path) -> List[Path]:
        """Archived vault directories inside a snapshot instance."""
        return sorted(p for p in archive_dir.iterdir() if p.is_dir())

    def restore(
        self,
        archive_dir: Union[str, Path],
        vaults: Sequence[Vault],
        workspace_root: Union[str, Path],
    ) -> None:
        """Restore every archived vault directory in archive_dir.

        Files are copied over the destination vaults in place. Files that
        exist only at the destination are kept.

        Args:
            archive_dir: Snapshot instance to restore from.
            vaults: Configured vaults.
            workspace_root: Base for the default vault when none are configured.

        Raises:
            NotFoundError: If archive_dir does not exist. Nothing is written.
            CopyError: If a restore copy failed. The other copies still run
                and whatever they wrote stays.
        """
        src = Path(archive_dir).expanduser()
        if not src.is_dir():
            raise NotFoundError(f"no snapshot found at {src}")

        logger.info("Restoring snapshot from %s", src)

        jobs = []
        for snapshot_dir in self.vault_snapshots(src):
            vault = resolve_vault(snapshot_dir, vaults, workspace_root, self.mapping)
            logger.info("Restoring %s onto %s", snapshot_dir.name, vault.path)
            jobs.append((snapshot_dir, vault.path, RESTORE_IGNORE))
        copy_trees(jobs, max_workers=self.max_workers)

        self.console.print(f"[green]Restored snapshot {src.name}")
