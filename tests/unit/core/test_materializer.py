"""Tests for ocinstall.core.materializer module."""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from ocinstall.core.errors import FilesystemOperationError
from ocinstall.core.materializer import ConfigMaterializer


@pytest.fixture
def materializer() -> ConfigMaterializer:
    """Get a ConfigMaterializer with the default config bases."""
    return ConfigMaterializer()


class TestCopyConfigFiles:
    """Tests for ConfigMaterializer.copy_config_files."""

    def test_creates_live_configs(self, materializer: ConfigMaterializer, install_root: Path):
        """Dist templates are copied to their live names."""
        (install_root / "config-dist.php").write_text("<?php // template")
        (install_root / "admin").mkdir()
        (install_root / "admin" / "config-dist.php").write_text("<?php // admin template")

        written = materializer.copy_config_files(install_root)

        assert written == [install_root / "config.php", install_root / "admin" / "config.php"]
        assert (install_root / "config.php").read_text() == "<?php // template"
        assert (install_root / "admin" / "config.php").read_text() == "<?php // admin template"
        assert (install_root / "config-dist.php").exists()

    def test_overwrites_existing_live_config(
        self, materializer: ConfigMaterializer, opencart_tree: Path
    ):
        """An existing config.php is replaced by the template."""
        materializer.copy_config_files(opencart_tree)

        assert (opencart_tree / "config.php").read_text() == "<?php // config template"

    def test_missing_template_is_logged(
        self, materializer: ConfigMaterializer, install_root: Path, caplog
    ):
        """Missing dist files are warned about and skipped."""
        (install_root / "config-dist.php").write_text("<?php")

        with caplog.at_level(logging.WARNING, logger="ocinstall.materializer"):
            written = materializer.copy_config_files(install_root)

        assert written == [install_root / "config.php"]
        assert not (install_root / "admin" / "config.php").exists()
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "admin/config-dist.php" in warnings[0].getMessage()

    def test_no_templates(self, materializer: ConfigMaterializer, install_root: Path):
        """Nothing is written when no templates exist."""
        assert materializer.copy_config_files(install_root) == []

    def test_custom_bases(self, install_root: Path):
        """Other config bases can be configured."""
        (install_root / "install").mkdir()
        (install_root / "install" / "config-dist.php").write_text("<?php")

        written = ConfigMaterializer(["install/config"]).copy_config_files(install_root)

        assert written == [install_root / "install" / "config.php"]

    def test_copy_failure_propagates(self, materializer: ConfigMaterializer, install_root: Path):
        """A failed copy raises a filesystem error."""
        (install_root / "config-dist.php").write_text("<?php")

        with patch(
            "ocinstall.core.materializer.copy_file",
            side_effect=OSError(30, "Read-only file system"),
        ):
            with pytest.raises(FilesystemOperationError) as exc_info:
                materializer.copy_config_files(install_root)

        assert exc_info.value.operation == "copy"
