"""Copies distribution config templates to their live names."""

import logging
from pathlib import Path

from ocinstall.config.schemas import DEFAULT_CONFIG_FILES, DIST_SUFFIX, LIVE_SUFFIX
from ocinstall.core.errors import filesystem_operation
from ocinstall.utils.filesystem import copy_file, normalize_install_path


class ConfigMaterializer:
    """Turns ``<base>-dist.php`` into ``<base>.php`` for each config base.

    Live files are always overwritten, so this has to run before saved
    configs are restored.
    """

    def __init__(self, bases: list[str] | None = None, logger: logging.Logger | None = None):
        self.bases = list(bases) if bases is not None else list(DEFAULT_CONFIG_FILES)
        self.logger = logger or logging.getLogger("ocinstall.materializer")

    def copy_config_files(self, install_path: str | Path) -> list[Path]:
        """Copy each dist template over its live config.

        Args:
            install_path: Installation root

        Returns:
            Live config paths that were written

        Raises:
            FilesystemOperationError: If a copy fails
        """
        root = normalize_install_path(install_path)
        written = []

        for base in self.bases:
            source = root / f"{base}{DIST_SUFFIX}"
            target = root / f"{base}{LIVE_SUFFIX}"
            if not source.is_file():
                self.logger.warning("Config template `%s` doesn't exist, skipping it", source)
                continue

            self.logger.debug("Copying `%s` to `%s`", source, target)
            with filesystem_operation("copy", source):
                copy_file(source, target)
            written.append(target)

        return written
