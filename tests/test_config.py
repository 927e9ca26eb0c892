"""Tests for configuration management."""

from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Dict

import pytest
import yaml

from vaultsnap.core import config as config_module
from vaultsnap.core.config import Config
from vaultsnap.core.errors import ConfigurationError, NotFoundError
from vaultsnap.core.vault import Vault


def create_temp_config(config_data: Dict) -> Path:
    """Create a temporary config file."""
    temp_file = NamedTemporaryFile(mode="w", suffix=".yaml", delete=False)
    with temp_file:
        yaml.safe_dump(config_data, temp_file, encoding="utf-8")
    return Path(temp_file.name)


def test_default_config(tmp_path: Path) -> None:
    """Test default configuration loading."""
    config = Config(tmp_path)
    assert config.workspace_root == tmp_path
    assert config.vaults == []
    assert config.dest == "snapshots"
    assert config.ignore == ".git"
    assert config.mapping == "first"

    export_config = config.export_config()
    assert export_config.dest == tmp_path / "snapshots"
    assert export_config.ignore == [".git"]


def test_workspace_defaults_to_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that the workspace root defaults to the working directory."""
    monkeypatch.chdir(tmp_path)
    assert Config().workspace_root == Path.cwd()


def test_load_config_file(tmp_path: Path) -> None:
    """Test loading configuration from file."""
    config_path = create_temp_config(
        {
            "workspace_root": str(tmp_path),
            "vaults": ["notes", "/abs/journal"],
            "dest": "backups",
            "ignore": [".git", "*.tmp"],
            "mapping": "identity",
        }
    )
    try:
        config = Config()
        config.load_config(config_path)
        assert config.workspace_root == tmp_path
        assert config.get_vaults() == [Vault(tmp_path / "notes"), Vault("/abs/journal")]
        assert config.export_config().dest == tmp_path / "backups"
        assert config.export_config().ignore == [".git", "*.tmp"]
        assert config.mapping == "identity"
    finally:
        config_path.unlink()


def test_load_from_dict_skips_none(tmp_path: Path) -> None:
    """Test that None values leave settings untouched."""
    config = Config(tmp_path)
    config.load_from_dict({"dest": None, "ignore": ".git,,node_modules"})
    assert config.dest == "snapshots"
    assert config.export_config().ignore == [".git", "node_modules"]


def test_empty_ignore(tmp_path: Path) -> None:
    """Test that an empty ignore string copies everything."""
    config = Config(tmp_path)
    config.load_from_dict({"ignore": ""})
    assert config.export_config().ignore == []


def test_absolute_dest(tmp_path: Path) -> None:
    """Test that absolute destinations are kept."""
    config = Config(tmp_path / "ws")
    config.load_from_dict({"dest": str(tmp_path / "elsewhere")})
    assert config.export_config().dest == tmp_path / "elsewhere"


def test_null_dest_uses_default(tmp_path: Path) -> None:
    """Test that an explicit null dest falls back to the default."""
    config = Config(tmp_path)
    config._merge_config({"dest": None})
    assert config.export_config().dest == tmp_path / "snapshots"


def test_no_dest_at_all(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that no dest and no default is a configuration error."""
    config = Config(tmp_path)
    config._merge_config({"dest": None})
    monkeypatch.delitem(config_module.DEFAULT_CONFIG, "dest")
    with pytest.raises(ConfigurationError, match="no dest specified"):
        config.export_config()


def test_import_config(tmp_path: Path) -> None:
    """Test resolving the import source."""
    (tmp_path / "snapshots" / "1").mkdir(parents=True)
    config = Config(tmp_path)
    config.load_from_dict({"src": "snapshots/1"})
    assert config.import_config().src == tmp_path / "snapshots" / "1"


def test_import_config_without_src(tmp_path: Path) -> None:
    """Test that import needs a source."""
    with pytest.raises(ConfigurationError, match="no src specified"):
        Config(tmp_path).import_config()


def test_import_config_missing_src(tmp_path: Path) -> None:
    """Test that a missing source is reported as not found."""
    config = Config(tmp_path)
    config.load_from_dict({"src": "snapshots/1"})
    with pytest.raises(NotFoundError, match="no snapshot found"):
        config.import_config()


def test_config_validation(tmp_path: Path) -> None:
    """Test configuration validation."""
    (tmp_path / "a" / "notes").mkdir(parents=True)
    (tmp_path / "b" / "notes").mkdir(parents=True)

    config = Config(tmp_path)
    config.load_from_dict({"vaults": ["a/notes"]})
    assert not config.validate()

    config.load_from_dict({"vaults": ["a/notes", "b/notes", "missing"]})
    errors = config.validate()
    assert any("missing is not a directory" in error for error in errors)
    assert "more than one vault is named 'notes'" in errors


def test_validate_without_path_checks(tmp_path: Path) -> None:
    """Test that check_paths=False only reports duplicate names."""
    config = Config(tmp_path / "missing-workspace")
    config.load_from_dict({"vaults": ["a/notes", "b/notes", "journal"]})

    assert config.validate(check_paths=False) == ["more than one vault is named 'notes'"]
    assert len(config.validate()) > 1


@pytest.mark.parametrize(
    "bad_config,message",
    [
        ({"vaults": "notes"}, "vaults must be a list"),
        ({"dest": 3}, "dest must be a string"),
        ({"ignore": 3}, "ignore must be a string or a list"),
        ({"mapping": "by-date"}, "mapping must be one of"),
        ({"workspace_root": ["a"]}, "workspace_root must be a string"),
    ],
)
def test_invalid_config(tmp_path: Path, bad_config: Dict, message: str) -> None:
    """Test handling of invalid configuration."""
    config = Config(tmp_path)
    with pytest.raises(ValueError, match=message):
        config._merge_config(bad_config)


def test_non_dict_config(tmp_path: Path) -> None:
    """Test that configuration must be a mapping."""
    with pytest.raises(ValueError, match="must be a dictionary"):
        Config(tmp_path)._merge_config(["dest"])  # type: ignore[arg-type]
