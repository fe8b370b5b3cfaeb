"""Install step orchestrator.

The external driver extracts the new release itself. It calls ``prepare``
before the fresh files land on disk and ``finalize`` once they have.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ocinstall.config.schemas import InstallerConfig
from ocinstall.core.materializer import ConfigMaterializer
from ocinstall.core.normalizer import ArchiveNormalizer
from ocinstall.core.permissions import PermissionSetter
from ocinstall.core.preserver import PreservationStore, PreservedEntry, StatePreserver
from ocinstall.utils.filesystem import normalize_install_path

logger = logging.getLogger("ocinstall.installer")


@dataclass
class FinalizeSummary:
    """What ``finalize`` changed."""

    rotated: bool = False
    configs_written: list[Path] = field(default_factory=list)
    restored: list[Path] = field(default_factory=list)
    permissions: dict[Path, int] = field(default_factory=dict)


class OpencartInstaller:
    """Runs the file-handling steps of an OpenCart install in order.

    All components share one PreservationStore so that save and restore
    address the same saved copies.
    """

    def __init__(self, config: InstallerConfig | None = None, log: logging.Logger | None = None):
        """Initialize the installer.

        Args:
            config: Installer configuration (defaults to the OpenCart defaults)
            log: Parent logger; each step logs to a child of it
        """
        self.config = config or InstallerConfig()
        self.logger = log or logger
        self.store = PreservationStore(self.config.temp_root)
        self.normalizer = ArchiveNormalizer(self.config.temp_root, self._child("normalizer"))
        self.preserver = StatePreserver(
            self.config.preserved_targets, self.store, self._child("preserver")
        )
        self.permission_setter = PermissionSetter(
            self.config.chmod_targets, self._child("permissions")
        )
        self.materializer = ConfigMaterializer(self.config.config_files, self._child("materializer"))

    def _child(self, name: str) -> logging.Logger | None:
        # Default loggers already live under ocinstall.*
        if self.logger is logger:
            return None
        return self.logger.getChild(name)

    def prepare(self, install_path: str | Path) -> list[Path]:
        """Save user-modified files before the fresh release is unpacked."""
        root = normalize_install_path(install_path)
        self.logger.info("Preparing install at %s", root)
        return self.preserver.save_modified_files(root)

    def finalize(self, install_path: str | Path, base_perms: int | None = None) -> FinalizeSummary:
        """Bring an unpacked release into shape.

        Steps run in this order: rotate the layout, copy dist configs,
        restore saved files, set permissions. Restoring after the dist copy
        keeps the user's configs.

        Args:
            install_path: Installation root
            base_perms: Override for the configured base permissions

        Returns:
            FinalizeSummary describing each step
        """
        root = normalize_install_path(install_path)
        perms = self.config.base_perms if base_perms is None else base_perms
        self.logger.info("Finalizing install at %s", root)

        summary = FinalizeSummary()
        summary.rotated = self.normalizer.rotate_installed_files(root)
        summary.configs_written = self.materializer.copy_config_files(root)
        summary.restored = self.preserver.restore_modified_files(root)
        summary.permissions = self.permission_setter.set_permissions(root, perms)

        self.logger.info(
            "Finalized %s: %d config(s) written, %d item(s) restored, %d node(s) chmodded",
            root,
            len(summary.configs_written),
            len(summary.restored),
            len(summary.permissions),
        )
        return summary

    def status(self, install_path: str | Path) -> list[PreservedEntry]:
        """List preserved targets with their saved-copy locations."""
        return self.store.entries(install_path, self.config.preserved_targets)

    def purge(self, install_path: str | Path) -> list[Path]:
        """Drop saved copies left behind by a save without a restore."""
        removed = self.store.purge(install_path, self.config.preserved_targets)
        self.logger.info("Removed %d saved item(s)", len(removed))
        return removed
