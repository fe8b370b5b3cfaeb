"""Archive layout normalization.

Unpacked OpenCart releases usually wrap the shop in a single top-level
folder (``upload/`` or ``opencart-x.y/upload``). The normalizer detects a
lone wrapper directory and promotes its contents to the install path.
"""

import logging
import os
import tempfile
import uuid
from pathlib import Path

from ocinstall.core.errors import filesystem_operation
from ocinstall.utils.filesystem import move_path, normalize_install_path, remove_path


class ArchiveNormalizer:
    """Flattens an install path that holds exactly one wrapper directory.

    Zero or several visible top-level directories mean the layout is taken as
    already flat; nothing is moved in either case.
    """

    TEMP_PREFIX = "ocinstall-"

    def __init__(self, temp_root: Path | None = None, logger: logging.Logger | None = None):
        """Initialize the normalizer.

        Args:
            temp_root: Directory for the scratch dir (defaults to the system temp dir)
            logger: Logger for diagnostics (defaults to ``ocinstall.normalizer``)
        """
        self.temp_root = temp_root
        self.logger = logger or logging.getLogger("ocinstall.normalizer")

    def find_wrapper(self, install_path: str | Path) -> Path | None:
        """Return the single visible subdirectory of install_path, if there is one."""
        root = normalize_install_path(install_path)
        with filesystem_operation("list", root):
            dirs = [p for p in root.iterdir() if p.is_dir() and not p.name.startswith(".")]

        if len(dirs) != 1:
            self.logger.debug(
                "Found %d top-level directories in `%s`, no rotation needed", len(dirs), root
            )
            return None
        return dirs[0]

    def rotate_installed_files(self, install_path: str | Path) -> bool:
        """Move the contents of a lone wrapper directory up to install_path.

        The install path is first moved aside into a scratch directory, the
        wrapper is then moved back into its place and the scratch directory
        (with any loose files that sat next to the wrapper) is removed.

        Args:
            install_path: Installation root

        Returns:
            True if the layout was rotated, False if it was left alone

        Raises:
            FilesystemOperationError: If any move or removal fails; the tree
                is left as it is at the point of failure
        """
        root = normalize_install_path(install_path)
        wrapper = self.find_wrapper(root)
        if wrapper is None:
            return False

        temp_dir = self._scratch_dir()
        moved_wrapper = temp_dir / wrapper.name
        self.logger.info("Rotating files out of `%s` using `%s`", wrapper.name, temp_dir)

        with filesystem_operation("move", root):
            move_path(root, temp_dir)
        with filesystem_operation("move", moved_wrapper):
            move_path(moved_wrapper, root)
        with filesystem_operation("remove", temp_dir):
            remove_path(temp_dir)

        self.logger.debug("Finished rotating `%s`", root)
        return True

    def _scratch_dir(self) -> Path:
        """Build a fresh, not yet existing scratch path."""
        base = self.temp_root if self.temp_root is not None else Path(tempfile.gettempdir())
        token = f"{os.getpid()}-{uuid.uuid4().hex[:12]}"
        return base / f"{self.TEMP_PREFIX}{token}"
