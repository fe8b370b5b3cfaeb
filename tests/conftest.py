"""Shared fixtures for ocinstall tests."""

import shutil
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

from ocinstall.config.schemas import InstallerConfig


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory."""
    path = Path(tempfile.mkdtemp(prefix="ocinstall_test_")).resolve()
    yield path
    if path.exists():
        shutil.rmtree(path)


@pytest.fixture
def temp_root(temp_dir: Path) -> Path:
    """Directory standing in for the system temp dir."""
    root = temp_dir / "tmp"
    root.mkdir()
    return root


@pytest.fixture
def install_root(temp_dir: Path) -> Path:
    """Empty installation directory."""
    root = temp_dir / "shop"
    root.mkdir()
    return root


@pytest.fixture
def config(temp_root: Path) -> InstallerConfig:
    """Default configuration writing saved copies to temp_root."""
    return InstallerConfig(temp_root=temp_root)


@pytest.fixture
def opencart_tree(install_root: Path) -> Path:
    """Installation with user-modified configs, images and logs."""
    (install_root / "index.php").write_text("<?php // storefront")
    (install_root / "config.php").write_text("<?php define('DB_USERNAME', 'shop');")
    (install_root / "config-dist.php").write_text("<?php // config template")

    admin = install_root / "admin"
    admin.mkdir()
    (admin / "config.php").write_text("<?php define('DIR_ADMIN', 'admin');")
    (admin / "config-dist.php").write_text("<?php // admin config template")

    catalog = install_root / "image" / "catalog"
    catalog.mkdir(parents=True)
    (catalog / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n-logo")
    (install_root / "image" / "cache").mkdir()

    logs = install_root / "system" / "logs"
    logs.mkdir(parents=True)
    (logs / "error.log").write_text("PHP Notice: undefined index\n")
    (install_root / "system" / "download").mkdir()
    (install_root / "system" / "cache").mkdir()
    (install_root / "download").mkdir()

    return install_root


def write_release(root: Path, wrapper: str | None = "upload") -> Path:
    """Write a fresh OpenCart release, optionally inside a wrapper directory."""
    target = root / wrapper if wrapper else root
    target.mkdir(parents=True, exist_ok=True)
    (target / "index.php").write_text("<?php // new storefront")
    (target / "config-dist.php").write_text("<?php // new config template")
    (target / "admin").mkdir(exist_ok=True)
    (target / "admin" / "config-dist.php").write_text("<?php // new admin template")
    (target / "image" / "catalog").mkdir(parents=True, exist_ok=True)
    (target / "image" / "catalog" / "placeholder.png").write_bytes(b"placeholder")
    (target / "image" / "cache").mkdir(exist_ok=True)
    (target / "system" / "logs").mkdir(parents=True, exist_ok=True)
    (target / "system" / "cache").mkdir(exist_ok=True)
    (target / "system" / "download").mkdir(exist_ok=True)
    (target / "download").mkdir(exist_ok=True)
    return target


@pytest.fixture
def release_writer():
    """Helper that lays out a fresh release."""
    return write_release
