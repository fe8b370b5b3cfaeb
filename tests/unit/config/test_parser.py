"""Tests for ocinstall.config.parser module."""

from pathlib import Path

import pytest
import yaml

from ocinstall.config.parser import (
    ConfigError,
    load_installer_config,
    load_yaml,
    save_installer_config,
)
from ocinstall.config.schemas import InstallerConfig


class TestLoadYaml:
    """Tests for load_yaml function."""

    def test_loads_mapping(self, temp_dir: Path):
        """Loads a YAML mapping."""
        path = temp_dir / "config.yaml"
        path.write_text("base_perms: '664'\n")

        assert load_yaml(path) == {"base_perms": "664"}

    def test_empty_file_is_empty_mapping(self, temp_dir: Path):
        """Empty files load as an empty dict."""
        path = temp_dir / "config.yaml"
        path.write_text("")

        assert load_yaml(path) == {}

    def test_missing_file(self, temp_dir: Path):
        """Missing files raise ConfigError with the path."""
        path = temp_dir / "missing.yaml"

        with pytest.raises(ConfigError) as exc_info:
            load_yaml(path)

        assert exc_info.value.path == path

    def test_invalid_yaml(self, temp_dir: Path):
        """Malformed YAML raises ConfigError."""
        path = temp_dir / "config.yaml"
        path.write_text("chmod_targets: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_yaml(path)

    def test_non_mapping(self, temp_dir: Path):
        """Top-level lists are rejected."""
        path = temp_dir / "config.yaml"
        path.write_text("- config.php\n")

        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_yaml(path)


class TestLoadInstallerConfig:
    """Tests for load_installer_config function."""

    def test_none_returns_defaults(self):
        """No path means default config."""
        assert load_installer_config(None) == InstallerConfig()

    def test_loads_overrides(self, temp_dir: Path):
        """Values from YAML override the defaults."""
        path = temp_dir / "ocinstall.yaml"
        path.write_text(
            "preserved_targets:\n"
            "  - config.php\n"
            "  - image/catalog\n"
            "base_perms: '664'\n"
            f"temp_root: {temp_dir}\n"
        )

        config = load_installer_config(path)

        assert config.preserved_targets == ["config.php", "image/catalog"]
        assert config.base_perms == 0o664
        assert config.temp_root == temp_dir
        assert config.chmod_targets == InstallerConfig().chmod_targets

    def test_boolean_perms_rejected(self, temp_dir: Path):
        """base_perms: yes is a config error, not mode 1."""
        path = temp_dir / "ocinstall.yaml"
        path.write_text("base_perms: yes\n")

        with pytest.raises(ConfigError, match="Invalid installer config"):
            load_installer_config(path)

    def test_invalid_config(self, temp_dir: Path):
        """Schema violations raise ConfigError."""
        path = temp_dir / "ocinstall.yaml"
        path.write_text("chmod_targets:\n  - /absolute\n")

        with pytest.raises(ConfigError, match="Invalid installer config"):
            load_installer_config(path)


class TestSaveInstallerConfig:
    """Tests for save_installer_config function."""

    def test_writes_octal_perms(self, temp_dir: Path):
        """Permissions are written as an octal string."""
        path = temp_dir / "ocinstall.yaml"

        save_installer_config(path, InstallerConfig())

        data = yaml.safe_load(path.read_text())
        assert data["base_perms"] == "644"
        assert "temp_root" not in data

    def test_round_trips(self, temp_dir: Path):
        """A saved config loads back unchanged."""
        path = temp_dir / "nested" / "ocinstall.yaml"
        config = InstallerConfig(base_perms=0o600, temp_root=temp_dir)

        save_installer_config(path, config)

        assert load_installer_config(path) == config
