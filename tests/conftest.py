"""Test configuration."""

from __future__ import annotations

import itertools
from pathlib import Path
from typing import Callable, Dict, Iterator

import pytest

from vaultsnap.core.export import SnapshotExporter
from vaultsnap.core.restore import SnapshotImporter
from vaultsnap.core.vault import Vault


def create_vault_files(vault_dir: Path) -> None:
    """Create a small vault tree with notes, assets and git metadata."""
    vault_dir.mkdir(parents=True, exist_ok=True)
    (vault_dir / "root.md").write_text("# root\n")
    (vault_dir / "root.schema.yml").write_text("version: 1\n")

    notes_dir = vault_dir / "notes" / "daily"
    notes_dir.mkdir(parents=True, exist_ok=True)
    (notes_dir / "2024.01.01.md").write_text("new year")
    (vault_dir / "notes" / "ideas.md").write_text("ideas")

    assets_dir = vault_dir / "assets"
    assets_dir.mkdir(exist_ok=True)
    (assets_dir / "logo.bin").write_bytes(bytes(range(256)))

    git_dir = vault_dir / ".git"
    (git_dir / "objects").mkdir(parents=True, exist_ok=True)
    (git_dir / "HEAD").write_text("ref: refs/heads/main\n")
    (git_dir / "objects" / "abc").write_text("blob")


def read_tree(root: Path) -> Dict[str, bytes]:
    """Map relative file paths under root to their contents."""
    return {
        path.relative_to(root).as_posix(): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


@pytest.fixture
def vault_factory(tmp_path: Path) -> Callable[[str], Vault]:
    """Create vaults with test files under tmp_path/workspace."""

    def _create(name: str) -> Vault:
        vault_dir = tmp_path / "workspace" / name
        create_vault_files(vault_dir)
        return Vault(vault_dir)

    return _create


@pytest.fixture
def vault(vault_factory: Callable[[str], Vault]) -> Vault:
    """A single vault named 'notes'."""
    return vault_factory("notes")


@pytest.fixture
def archive_root(tmp_path: Path) -> Path:
    """Archive root for snapshots (not created)."""
    return tmp_path / "snapshots"


@pytest.fixture
def clock() -> Iterator[int]:
    """Deterministic millisecond clock starting at 1700000000000."""
    return itertools.count(1700000000000)


@pytest.fixture
def exporter(clock: Iterator[int]) -> SnapshotExporter:
    """Snapshot exporter using the deterministic clock."""
    return SnapshotExporter(clock=lambda: next(clock))


@pytest.fixture
def importer() -> SnapshotImporter:
    """Snapshot importer with the default mapping."""
    return SnapshotImporter()


@pytest.fixture
def tree() -> Callable[[Path], Dict[str, bytes]]:
    """Return the read_tree helper."""
    return read_tree


@pytest.fixture
def make_vault_files() -> Callable[[Path], None]:
    """Return the create_vault_files helper."""
    return create_vault_files
