"""Filesystem utilities for ocinstall."""

import hashlib
import os
import shutil
from pathlib import Path


def normalize_install_path(path: str | Path) -> Path:
    """Normalize an installation root.

    Trailing separators are dropped and the path is resolved to an absolute
    path with symlinks followed, so the same directory always yields the same
    string (and the same hash) whichever link it was reached through.

    Args:
        path: Installation root as given by the caller

    Returns:
        Absolute installation root
    """
    raw = os.fspath(path)
    stripped = raw.rstrip("\\/") or raw[:1]
    if not stripped:
        raise ValueError("Install path must not be empty")
    return Path(stripped).resolve()


def path_exists(path: Path) -> bool:
    """Check whether anything (file, directory or dangling link) lives at path."""
    return path.exists() or path.is_symlink()


def ensure_directory(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists

    Returns:
        The directory path
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def copy_file(src: Path, dest: Path) -> Path:
    """Copy a single file, overwriting the destination.

    Args:
        src: Source file path
        dest: Destination file path

    Returns:
        Path to the copied file
    """
    ensure_directory(dest.parent)
    shutil.copy2(src, dest)
    return dest


def copy_directory(src: Path, dest: Path) -> Path:
    """Mirror a directory recursively.

    Args:
        src: Source directory path
        dest: Destination directory path

    Returns:
        Path to the copied directory
    """
    if path_exists(dest):
        remove_path(dest)
    ensure_directory(dest.parent)
    shutil.copytree(src, dest, symlinks=True)
    return dest


def remove_path(path: Path) -> bool:
    """Remove a file or a directory tree.

    Args:
        path: Path to remove

    Returns:
        True if something was removed, False if nothing was there
    """
    if not path_exists(path):
        return False
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()
    return True


def move_path(src: Path, dest: Path, overwrite: bool = False) -> Path:
    """Move a file or directory to an exact destination path.

    Unlike ``shutil.move`` this never moves *into* an existing directory.

    Args:
        src: Path to move
        dest: Destination path
        overwrite: Replace whatever currently lives at dest

    Returns:
        The destination path

    Raises:
        FileExistsError: If dest exists and overwrite is False
    """
    if path_exists(dest):
        if not overwrite:
            raise FileExistsError(f"Destination already exists: {dest}")
        remove_path(dest)
    ensure_directory(dest.parent)
    shutil.move(os.fspath(src), os.fspath(dest))
    return dest


def chmod_path(path: Path, mode: int) -> None:
    """Set permission bits on a single node (non-recursive)."""
    os.chmod(path, mode)


def compute_path_hash(path: Path, algorithm: str = "md5") -> str:
    """Hash the string form of a path.

    Args:
        path: Absolute path to hash
        algorithm: Hash algorithm (default: md5)

    Returns:
        Hex-encoded hash string
    """
    hasher = hashlib.new(algorithm)
    hasher.update(os.fspath(path).encode("utf-8"))
    return hasher.hexdigest()
