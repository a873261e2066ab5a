"""
Configuration for building and inspecting similarity stores.

Settings live in a small YAML file (``.pairstore.yml`` in the current or
home directory by default); ``PAIRSTORE_CONFIG`` points at an explicit file.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .errors import InvalidInputError

CONFIG_FILENAME = ".pairstore.yml"
CONFIG_ENV_VAR = "PAIRSTORE_CONFIG"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class StoreConfig:
    """
    Settings shared by the CLI and by callers building stores from files.
    """

    # Keep only the strongest N pairs; None keeps everything
    max_to_keep: Optional[int] = None

    log_level: str = "WARNING"

    # JSON-lines file logs instead of plain text
    log_json: bool = False

    # Directory for file logs; None disables file logging
    log_dir: Optional[str] = None

    # Field separator for triple files read by the CLI
    delimiter: str = ","

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.max_to_keep is not None:
            if isinstance(self.max_to_keep, bool) or not isinstance(self.max_to_keep, int) \
                    or self.max_to_keep < 1:
                raise InvalidInputError(
                    f"max_to_keep must be a positive integer, got {self.max_to_keep!r}",
                    field="max_to_keep", value=self.max_to_keep,
                )

        if str(self.log_level).upper() not in _LOG_LEVELS:
            raise InvalidInputError(
                f"log_level must be one of {', '.join(_LOG_LEVELS)}, got {self.log_level!r}",
                field="log_level", value=self.log_level,
            )
        self.log_level = str(self.log_level).upper()

        if not isinstance(self.log_json, bool):
            raise InvalidInputError(
                f"log_json must be true or false, got {self.log_json!r}",
                field="log_json", value=self.log_json,
            )

        if not isinstance(self.delimiter, str) or len(self.delimiter) != 1:
            raise InvalidInputError(
                f"delimiter must be a single character, got {self.delimiter!r}",
                field="delimiter", value=self.delimiter,
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "max_to_keep": self.max_to_keep,
            "log_level": self.log_level,
            "log_json": self.log_json,
            "log_dir": self.log_dir,
            "delimiter": self.delimiter,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoreConfig":
        """Create from dictionary representation."""
        return cls(
            max_to_keep=data.get("max_to_keep"),
            log_level=data.get("log_level", "WARNING"),
            log_json=data.get("log_json", False),
            log_dir=data.get("log_dir"),
            delimiter=data.get("delimiter", ","),
        )

    def save_to_file(self, file_path: Union[str, Path]) -> None:
        """Save configuration to YAML file."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    @classmethod
    def load_from_file(cls, file_path: Union[str, Path]) -> "StoreConfig":
        """Load configuration from YAML file."""
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        with open(file_path, "r") as f:
            data = yaml.safe_load(f)

        if data is not None and not isinstance(data, dict):
            raise InvalidInputError(f"Configuration file {file_path} must contain a mapping",
                                    field="config", value=str(file_path))
        return cls.from_dict(data or {})

    @classmethod
    def get_default_config_path(cls) -> Path:
        """Get the default configuration file path."""
        current_dir_config = Path(CONFIG_FILENAME)
        if current_dir_config.exists():
            return current_dir_config

        return Path.home() / CONFIG_FILENAME

    @classmethod
    def load_or_default(
        cls, config_path: Optional[Union[str, Path]] = None
    ) -> "StoreConfig":
        """
        Load configuration from file or return default if not found.

        Args:
            config_path: Optional path to configuration file

        Returns:
            StoreConfig instance
        """
        if config_path:
            config_path = Path(config_path)
            if config_path.exists():
                return cls.load_from_file(config_path)
        else:
            default_path = cls.get_default_config_path()
            if default_path.exists():
                return cls.load_from_file(default_path)

        return cls()


def resolve_config(config_path: Optional[Union[str, Path]] = None) -> StoreConfig:
    """
    Find the configuration the CLI should run with.

    An existing ``config_path`` wins, then the file named by
    ``PAIRSTORE_CONFIG``, then ``.pairstore.yml`` in the working or home
    directory. Defaults apply when none of them exists.
    """
    for candidate in (config_path, os.getenv(CONFIG_ENV_VAR)):
        if candidate and Path(candidate).exists():
            return StoreConfig.load_from_file(candidate)
    return StoreConfig.load_or_default()
