"""Permission enforcement for writable OpenCart nodes."""

import logging
import stat
from pathlib import Path

from ocinstall.config.schemas import DEFAULT_BASE_PERMS, DEFAULT_CHMOD_TARGETS
from ocinstall.core.errors import filesystem_operation
from ocinstall.utils.filesystem import chmod_path, normalize_install_path

# Owner, group and other execute bits
DIRECTORY_EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


class PermissionSetter:
    """Applies a fixed mode to each chmod target, keeping directories traversable."""

    def __init__(self, targets: list[str] | None = None, logger: logging.Logger | None = None):
        self.targets = list(targets) if targets is not None else list(DEFAULT_CHMOD_TARGETS)
        self.logger = logger or logging.getLogger("ocinstall.permissions")

    @staticmethod
    def effective_mode(base_perms: int, is_dir: bool) -> int:
        """Get the mode for a node: directories also get all three execute bits."""
        return base_perms | DIRECTORY_EXEC_BITS if is_dir else base_perms

    def set_permissions(
        self, install_path: str | Path, base_perms: int = DEFAULT_BASE_PERMS
    ) -> dict[Path, int]:
        """Chmod every existing target, non-recursively.

        Args:
            install_path: Installation root
            base_perms: Permission bits for files; directories get ``| 0o111``

        Returns:
            Mapping of each changed path to the mode applied

        Raises:
            FilesystemOperationError: If a chmod fails
        """
        root = normalize_install_path(install_path)
        applied: dict[Path, int] = {}

        for relative in self.targets:
            path = root / relative
            is_file = path.is_file()
            is_dir = path.is_dir()
            if not is_file and not is_dir:
                self.logger.debug("Filesystem node %s not found", path)
                continue

            mode = self.effective_mode(base_perms, is_dir)
            self.logger.debug("Chmodding `%s` to `%s`", path, format(mode, "o"))
            with filesystem_operation("chmod", path):
                chmod_path(path, mode)
            applied[path] = mode

        return applied
