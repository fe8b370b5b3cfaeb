"""Pydantic schemas for ocinstall configuration.

The defaults follow the OpenCart installation notes: which nodes need
writable permissions, which user-modified files survive a reinstall and
which config templates get copied into place.
"""

from pathlib import Path, PurePosixPath
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# =============================================================================
# Default Managed Paths
# =============================================================================

DEFAULT_CHMOD_TARGETS: tuple[str, ...] = (
    "download",
    "system/cache",
    "system/logs",
    "system/download",
    "image",
    "image/cache",
    "image/catalog",
    "config.php",
    "admin/config.php",
    "config-dist.php",
    "admin/config-dist.php",
)

DEFAULT_PRESERVED_TARGETS: tuple[str, ...] = (
    "config.php",
    "admin/config.php",
    "image",
    "system/logs",
    "system/download",
)

DEFAULT_CONFIG_FILES: tuple[str, ...] = (
    "config",
    "admin/config",
)

DEFAULT_BASE_PERMS = 0o644

DIST_SUFFIX = "-dist.php"
LIVE_SUFFIX = ".php"


def _parse_mode(value: Any) -> Any:
    """Accept "644", "0644" and "0o644" as octal permission strings."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid permission value: {value!r}")
    if isinstance(value, str):
        text = value.strip().lower()
        if text.startswith("0o"):
            text = text[2:]
        try:
            return int(text, 8)
        except ValueError as e:
            raise ValueError(f"Invalid octal permission string: {value!r}") from e
    return value


def _check_relative(entry: str) -> str:
    entry = entry.strip()
    if not entry:
        raise ValueError("Managed path entries must not be empty")
    posix = PurePosixPath(entry.replace("\\", "/"))
    if posix.is_absolute() or entry[:1] in ("/", "\\"):
        raise ValueError(f"Managed path must be relative to the install path: {entry}")
    if ".." in posix.parts:
        raise ValueError(f"Managed path must not leave the install path: {entry}")
    return posix.as_posix()


# =============================================================================
# Installer Configuration
# =============================================================================


class InstallerConfig(BaseModel):
    """Configuration for one install run.

    - chmod_targets: nodes whose permissions are enforced
    - preserved_targets: nodes saved before and restored after a reinstall
    - config_files: config bases, each copied from <base>-dist.php to <base>.php
    - base_perms: permissions applied to chmod targets (dirs also get 0o111)
    - temp_root: where saved copies and rotation scratch dirs live
    """

    model_config = ConfigDict(extra="forbid")

    chmod_targets: list[str] = Field(default_factory=lambda: list(DEFAULT_CHMOD_TARGETS))
    preserved_targets: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PRESERVED_TARGETS)
    )
    config_files: list[str] = Field(default_factory=lambda: list(DEFAULT_CONFIG_FILES))
    base_perms: int = DEFAULT_BASE_PERMS
    temp_root: Path | None = None

    @field_validator("chmod_targets", "preserved_targets", "config_files")
    @classmethod
    def validate_entries(cls, v: list[str]) -> list[str]:
        """Entries must be relative paths inside the install path."""
        return [_check_relative(entry) for entry in v]

    @field_validator("base_perms", mode="before")
    @classmethod
    def parse_base_perms(cls, v: Any) -> Any:
        """Allow octal strings in YAML."""
        return _parse_mode(v)

    @field_validator("base_perms")
    @classmethod
    def validate_base_perms(cls, v: int) -> int:
        """Permission bits must fit in 0o7777."""
        if not 0 <= v <= 0o7777:
            raise ValueError(f"Permission bits out of range: {oct(v)}")
        return v


def parse_mode(value: str | int) -> int:
    """Parse a permission value the same way the config does."""
    mode = _parse_mode(value)
    if not isinstance(mode, int) or not 0 <= mode <= 0o7777:
        raise ValueError(f"Invalid permission value: {value!r}")
    return mode
