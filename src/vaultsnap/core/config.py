"""Configuration management for vaultsnap."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .errors import ConfigurationError, NotFoundError
from .ignore import parse_ignore
from .restore import MAPPING_FIRST, MAPPINGS
from .vault import Vault

DEFAULT_CONFIG: Dict[str, Any] = {
    "vaults": [],
    "dest": "snapshots",
    "ignore": ".git",
    "mapping": MAPPING_FIRST,
}


@dataclass
class ExportConfig:
    """Fully resolved settings for an export."""

    dest: Path
    ignore: List[str] = field(default_factory=list)


@dataclass
class ImportConfig:
    """Fully resolved settings for an import."""

    src: Path


def resolve_path(path: Union[str, Path], workspace_root: Path) -> Path:
    """Resolve path against workspace_root unless it is already absolute."""
    resolved = Path(path).expanduser()
    if not resolved.is_absolute():
        resolved = workspace_root / resolved
    return resolved


class Config:
    """Configuration class for vaultsnap."""

    def __init__(self, workspace_root: Optional[Union[str, Path]] = None) -> None:
        """Initialize configuration.

        Args:
            workspace_root: Base for relative paths. Defaults to the current
                working directory.
        """
        self.config: Dict[str, Any] = {}
        self.workspace_root: Path = Path(workspace_root or Path.cwd()).expanduser().absolute()
        self.vaults: List[str] = []
        self.dest: Optional[str] = None
        self.ignore: str = ""
        self.src: Optional[str] = None
        self.mapping: str = MAPPING_FIRST
        self.load_config()

    def load_config(self, config_file: Optional[Path] = None) -> None:
        """Load configuration from file."""
        # Start with default configuration
        self._merge_config(DEFAULT_CONFIG)

        # If a config file is provided, load and merge it
        if config_file is not None:
            import yaml

            with open(config_file, "r") as f:
                user_config = yaml.safe_load(f)
            if user_config:
                self._merge_config(user_config)

    def _merge_config(self, config: Dict[str, Any]) -> None:
        """Merge configuration with current configuration."""
        if not isinstance(config, dict):
            raise ValueError("Configuration must be a dictionary")

        self.config.update(config)

        if "workspace_root" in config:
            if not isinstance(config["workspace_root"], str):
                raise ValueError("workspace_root must be a string")
            self.workspace_root = Path(config["workspace_root"]).expanduser().absolute()

        if "vaults" in config:
            if not isinstance(config["vaults"], list):
                raise ValueError("vaults must be a list")
            self.vaults = [str(v) for v in config["vaults"]]

        if "dest" in config:
            if config["dest"] is not None and not isinstance(config["dest"], str):
                raise ValueError("dest must be a string")
            self.dest = config["dest"]

        if "ignore" in config:
            ignore = config["ignore"]
            # Lists are accepted in YAML files and joined like the CLI form
            if isinstance(ignore, list):
                ignore = ",".join(str(entry) for entry in ignore)
            if not isinstance(ignore, str):
                raise ValueError("ignore must be a string or a list")
            self.ignore = ignore

        if "src" in config:
            if config["src"] is not None and not isinstance(config["src"], str):
                raise ValueError("src must be a string")
            self.src = config["src"]

        if "mapping" in config:
            if config["mapping"] not in MAPPINGS:
                raise ValueError(f"mapping must be one of {', '.join(MAPPINGS)}")
            self.mapping = config["mapping"]

    def load_from_dict(self, config_data: Dict[str, Any]) -> None:
        """Merge settings from a dictionary, skipping keys set to None.

        Example:
            ```python
            config = Config("~/notes")
            config.load_from_dict({"dest": "backups", "ignore": ".git,*.tmp"})
            ```
        """
        self._merge_config({k: v for k, v in config_data.items() if v is not None})

    def validate(self, check_paths: bool = True) -> List[str]:
        """Validate configuration.

        Args:
            check_paths: Also require the workspace root and every vault to be
                existing directories. Restores pass False because their
                vaults may not exist yet.

        Returns:
            List[str]: One message per problem found, empty when valid.
        """
        errors = []
        vaults = self.get_vaults()

        if check_paths:
            if not self.workspace_root.is_dir():
                errors.append(f"workspace root {self.workspace_root} is not a directory")

            for vault in vaults:
                if not vault.path.is_dir():
                    errors.append(f"vault {vault.path} is not a directory")

        names = [vault.id for vault in vaults]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        for name in duplicates:
            errors.append(f"more than one vault is named '{name}'")

        return errors

    def get_vaults(self) -> List[Vault]:
        """Configured vaults with paths resolved against the workspace root."""
        return [Vault(resolve_path(v, self.workspace_root)) for v in self.vaults]

    def export_config(self) -> ExportConfig:
        """Resolve the settings for an export.

        Raises:
            ConfigurationError: If no destination is set.
        """
        dest = self.dest
        if dest is None:
            dest = DEFAULT_CONFIG.get("dest")
            if dest is None:
                raise ConfigurationError("no dest specified")
        return ExportConfig(
            dest=resolve_path(dest, self.workspace_root),
            ignore=parse_ignore(self.ignore),
        )

    def import_config(self) -> ImportConfig:
        """Resolve the settings for an import.

        Raises:
            ConfigurationError: If no source is set.
            NotFoundError: If the source does not exist.
        """
        if self.src is None:
            raise ConfigurationError("no src specified")
        src = resolve_path(self.src, self.workspace_root)
        if not src.exists():
            raise NotFoundError(f"no snapshot found at {src}")
        return ImportConfig(src=src)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a raw configuration value."""
        return self.config.get(key, default)
