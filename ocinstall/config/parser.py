"""Configuration file parsing utilities."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ocinstall.config.schemas import InstallerConfig


class ConfigError(Exception):
    """Error loading or parsing configuration."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        super().__init__(message)


def load_yaml(path: Path) -> dict[str, Any]:
    """Load and parse a YAML file.

    Args:
        path: Path to the YAML file

    Returns:
        Parsed YAML as a dictionary

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    if not path.exists():
        raise ConfigError(f"File not found: {path}", path)

    try:
        with open(path, encoding="utf-8") as f:
            result = yaml.safe_load(f)
            if result is None:
                return {}
            if not isinstance(result, dict):
                raise ConfigError(f"YAML file must contain a mapping: {path}", path)
            return result
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}", path) from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}", path) from e


def save_yaml(path: Path, data: dict[str, Any]) -> None:
    """Save data to a YAML file.

    Args:
        path: Path to write to
        data: Data to serialize
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)


def load_installer_config(path: Path | None = None) -> InstallerConfig:
    """Load installer configuration.

    Args:
        path: Path to a YAML config file, or None for the built-in defaults

    Returns:
        Parsed InstallerConfig

    Raises:
        ConfigError: If the file is missing or invalid
    """
    if path is None:
        return InstallerConfig()

    data = load_yaml(path)

    try:
        return InstallerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid installer config: {e}", path) from e


def save_installer_config(path: Path, config: InstallerConfig) -> None:
    """Save installer configuration as YAML.

    Permission bits are written as an octal string so they read back unchanged.
    """
    data = config.model_dump(exclude_none=True, mode="json")
    data["base_perms"] = format(config.base_perms, "o")
    save_yaml(path, data)
