"""Vault value object."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Vault:
    """A content root to be archived or restored.

    Attributes:
        path (Path): Root directory of the vault. Strings are converted, and
            the path is made absolute with ``~`` expanded and ``..`` collapsed.
    """

    path: Path

    def __post_init__(self) -> None:
        path = Path(self.path).expanduser().absolute()
        object.__setattr__(self, "path", Path(os.path.normpath(path)))

    @property
    def id(self) -> str:
        """Identity of the vault, the last segment of its path."""
        return self.path.name
