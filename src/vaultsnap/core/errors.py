"""Errors raised by vaultsnap."""

from __future__ import annotations

from pathlib import Path
from typing import Union


class SnapshotError(Exception):
    """Base class for snapshot and restore failures."""


class ConfigurationError(SnapshotError):
    """No usable destination or source could be resolved from the settings."""


class NotFoundError(SnapshotError):
    """The archive directory given for a restore does not exist."""


class CopyError(SnapshotError):
    """A read or write failed at a specific path during a tree copy.

    Attributes:
        path (Path): Path where the failure happened
        cause (BaseException): Underlying error, usually an ``OSError``
    """

    def __init__(self, path: Union[str, Path], cause: BaseException) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Failed to copy {self.path}: {cause}")
