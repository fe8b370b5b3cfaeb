"""Errors raised by install steps."""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path


class InstallError(Exception):
    """Error during an install step."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        super().__init__(message)


class FilesystemOperationError(InstallError):
    """A copy, move, remove or chmod failed for a reason other than absence."""

    def __init__(self, operation: str, path: Path, cause: OSError):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Failed to {operation} {path}: {cause}", path)


@contextmanager
def filesystem_operation(operation: str, path: Path) -> Iterator[None]:
    """Re-raise OSError from the wrapped block as FilesystemOperationError."""
    try:
        yield
    except OSError as e:
        raise FilesystemOperationError(operation, path, e) from e
