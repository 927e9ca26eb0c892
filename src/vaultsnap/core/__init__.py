"""Core functionality for vaultsnap."""

from .config import Config, ExportConfig, ImportConfig
from .copier import copy_tree, copy_trees
from .errors import ConfigurationError, CopyError, NotFoundError, SnapshotError
from .export import SnapshotExporter, SnapshotResult, latest_snapshot, list_snapshots
from .ignore import parse_ignore, should_copy
from .restore import SnapshotImporter
from .vault import Vault

__all__ = [
    "Config",
    "ConfigurationError",
    "CopyError",
    "ExportConfig",
    "ImportConfig",
    "NotFoundError",
    "SnapshotError",
    "SnapshotExporter",
    "SnapshotImporter",
    "SnapshotResult",
    "Vault",
    "copy_tree",
    "copy_trees",
    "latest_snapshot",
    "list_snapshots",
    "parse_ignore",
    "should_copy",
]
