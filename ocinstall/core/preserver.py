"""Saving and restoring user-modified files across a reinstall.

Saved copies live directly under a shared temp root, named by the MD5 of
the absolute path they were taken from. Save and restore compute the name
from the same absolute path, so the temp file name is the only record.
"""

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path

from ocinstall.config.schemas import DEFAULT_PRESERVED_TARGETS
from ocinstall.core.errors import filesystem_operation
from ocinstall.utils.filesystem import (
    compute_path_hash,
    copy_directory,
    copy_file,
    move_path,
    normalize_install_path,
    path_exists,
    remove_path,
)


@dataclass(frozen=True)
class PreservedEntry:
    """A preserved target and where its saved copy lives."""

    relative: str
    source: Path
    saved: Path

    @property
    def is_saved(self) -> bool:
        return path_exists(self.saved)


class PreservationStore:
    """Maps absolute paths to their saved copies under the temp root."""

    def __init__(self, temp_root: Path | None = None):
        """Initialize the store.

        Args:
            temp_root: Directory holding saved copies (defaults to the system temp dir)
        """
        self.temp_root = temp_root if temp_root is not None else Path(tempfile.gettempdir())

    def key_for(self, path: Path) -> str:
        """Get the storage key for an absolute path."""
        return compute_path_hash(path)

    def path_for(self, path: Path) -> Path:
        """Get the saved-copy location for an absolute path."""
        return self.temp_root / self.key_for(path)

    def contains(self, path: Path) -> bool:
        """Check whether a saved copy exists for path."""
        return path_exists(self.path_for(path))

    def entries(self, install_path: str | Path, targets: list[str]) -> list[PreservedEntry]:
        """List the saved-copy location of each target under install_path."""
        root = normalize_install_path(install_path)
        result = []
        for relative in targets:
            source = root / relative
            result.append(PreservedEntry(relative, source, self.path_for(source)))
        return result

    def purge(self, install_path: str | Path, targets: list[str]) -> list[Path]:
        """Delete every saved copy belonging to install_path.

        Returns:
            Saved-copy paths that were removed
        """
        removed = []
        for entry in self.entries(install_path, targets):
            with filesystem_operation("remove", entry.saved):
                if remove_path(entry.saved):
                    removed.append(entry.saved)
        return removed


class StatePreserver:
    """Saves preserved targets before a reinstall and puts them back after."""

    def __init__(
        self,
        targets: list[str] | None = None,
        store: PreservationStore | None = None,
        logger: logging.Logger | None = None,
    ):
        """Initialize the preserver.

        Args:
            targets: Paths relative to the install path to preserve
            store: Saved-copy mapping (defaults to one over the system temp dir)
            logger: Logger for diagnostics (defaults to ``ocinstall.preserver``)
        """
        self.targets = list(targets) if targets is not None else list(DEFAULT_PRESERVED_TARGETS)
        self.store = store or PreservationStore()
        self.logger = logger or logging.getLogger("ocinstall.preserver")

    def save_modified_files(self, install_path: str | Path) -> list[Path]:
        """Copy each existing preserved target into the store.

        Args:
            install_path: Installation root

        Returns:
            Source paths that were saved

        Raises:
            FilesystemOperationError: If a copy fails
        """
        self.logger.info("Saving modified items")
        self.logger.debug("Items to search: %s", ", ".join(self.targets))
        saved = []

        for entry in self.store.entries(install_path, self.targets):
            # Dangling links count as missing
            if not entry.source.exists():
                self.logger.debug("Item `%s` is missing, skipping it", entry.source)
                continue

            self.logger.debug("Saving `%s` to `%s`", entry.source, entry.saved)
            with filesystem_operation("save", entry.source):
                if path_exists(entry.saved):
                    remove_path(entry.saved)
                if entry.source.is_dir():
                    copy_directory(entry.source, entry.saved)
                else:
                    copy_file(entry.source, entry.saved)
            saved.append(entry.source)

        self.logger.info("Finished saving modified items (%d saved)", len(saved))
        return saved

    def restore_modified_files(self, install_path: str | Path) -> list[Path]:
        """Move saved copies back over the freshly installed files.

        A freshly installed version of a target is deleted before the saved
        copy is moved in, so directories are replaced rather than merged.

        Args:
            install_path: Installation root

        Returns:
            Target paths that were restored

        Raises:
            FilesystemOperationError: If a removal or move fails
        """
        self.logger.info("Restoring modified items")
        self.logger.debug("Items to search: %s", ", ".join(self.targets))
        restored = []

        for entry in self.store.entries(install_path, self.targets):
            target = entry.source
            if not path_exists(entry.saved):
                self.logger.debug("Item `%s` is missing, skipping it", entry.saved)
                continue

            self.logger.debug("Restoring `%s` to `%s`", entry.saved, target)
            with filesystem_operation("remove", target):
                remove_path(target)
            with filesystem_operation("restore", target):
                move_path(entry.saved, target, overwrite=True)
            restored.append(target)

        self.logger.info("Finished restoring modified items (%d restored)", len(restored))
        return restored
