"""Configuration model and persistence."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

__all__ = ["CONFIG_KEYS", "ConfigManager", "FsConfig", "default_config_dir"]

CONFIG_DIR_ENV = "FSGUARD_CONFIG_DIR"
CONFIG_FILE_NAME = "config.yaml"

# CLI key -> model field
CONFIG_KEYS = {
    "chunk-size": "chunk_size",
    "directory-mode": "directory_mode",
    "file-mode": "file_mode",
}


def default_config_dir() -> Path:
    """Resolve the configuration directory.

    Returns:
        ``$FSGUARD_CONFIG_DIR`` when set, otherwise ``~/.fsguard``.
    """
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override)
    return Path.home() / ".fsguard"


class FsConfig(BaseModel):
    """Tunable defaults for filesystem operations.

    Permission modes accept integers or octal strings (``"0755"``) and are
    written back as octal strings.
    """

    model_config = ConfigDict(populate_by_name=True)

    chunk_size: int = Field(default=8192, gt=0, alias="chunkSize")
    directory_mode: int = Field(default=0o775, alias="directoryMode")
    file_mode: int = Field(default=0o664, alias="fileMode")

    @field_validator("directory_mode", "file_mode", mode="before")
    @classmethod
    def _parse_mode(cls, value: Any) -> Any:
        if isinstance(value, str):
            return int(value, 8)
        return value

    @field_validator("directory_mode", "file_mode")
    @classmethod
    def _check_mode_range(cls, value: int) -> int:
        if not 0 <= value <= 0o777:
            raise ValueError(f"mode {value:o} must be between 0 and 0777")
        return value

    @field_serializer("directory_mode", "file_mode")
    def _serialize_mode(self, value: int) -> str:
        return format(value, "04o")


class ConfigManager:
    """Loads and saves the YAML configuration file."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize the config manager.

        Args:
            config_dir: Directory holding config.yaml. Defaults to ~/.fsguard.

        Note:
            Prefer using factory methods `create()` or `create_default()` for construction.
        """
        self.config_dir = config_dir or default_config_dir()
        self.config_file = self.config_dir / CONFIG_FILE_NAME

    @classmethod
    def create(cls, config_dir: Path) -> ConfigManager:
        """Create a config manager with a custom directory.

        Args:
            config_dir: Directory for the configuration file.

        Returns:
            Configured ConfigManager instance.
        """
        return cls(config_dir=config_dir)

    @classmethod
    def create_default(cls) -> ConfigManager:
        """Create a config manager with the default directory.

        Returns:
            ConfigManager configured with default paths.
        """
        return cls()

    def ensure_config_dir(self) -> None:
        """Create config directory if it doesn't exist."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

    def load(self) -> FsConfig:
        """Load configuration from disk.

        Returns:
            FsConfig with stored values, or defaults if no file exists.

        Raises:
            ValueError: If the file holds invalid values.
        """
        if not self.config_file.exists():
            return FsConfig()

        data = yaml.safe_load(self.config_file.read_text()) or {}
        return FsConfig.model_validate(data)

    def save(self, config: FsConfig) -> None:
        """Save configuration to disk.

        Args:
            config: FsConfig to save.
        """
        self.ensure_config_dir()
        data = config.model_dump(by_alias=True)
        self.config_file.write_text(yaml.safe_dump(data, sort_keys=False))

    def set_value(self, key: str, value: str) -> FsConfig:
        """Update one configuration key and persist it.

        Args:
            key: One of CONFIG_KEYS (e.g. ``chunk-size``).
            value: New value as typed on the command line.

        Returns:
            The updated configuration.

        Raises:
            ValueError: If the key is unknown or the value invalid.
        """
        if key not in CONFIG_KEYS:
            raise ValueError(f"Unknown configuration key: {key}")

        data = self.load().model_dump()
        data[CONFIG_KEYS[key]] = value
        config = FsConfig.model_validate(data)
        self.save(config)
        return config
