import json
import logging
import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .constants import DEFAULT_CONFIG, ENV_VARS, OUTPUT_FORMATS
from .helpers import merge_dicts

logger = logging.getLogger(__name__)


class Config:
    """Configuration management for responselog"""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize configuration.

        Args:
            config_path: Optional path to configuration file
        """
        self._config = deepcopy(DEFAULT_CONFIG)

        # Load configuration from file if provided
        if config_path:
            self.load_file(config_path)

        # Apply environment variables
        self.load_environment()

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value.

        Args:
            key: Configuration key (dot notation supported)
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split(".")
        value = self._config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default

            if value is None:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """Set configuration value.

        Args:
            key: Configuration key (dot notation supported)
            value: Value to set
        """
        keys = key.split(".")
        config = self._config

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def load_file(self, config_path: Union[str, Path]) -> None:
        """Load configuration from a JSON file.

        Args:
            config_path: Path to configuration file

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If file format is invalid
        """
        path = Path(config_path)

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path) as f:
            try:
                file_config = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid configuration file: {e}") from e

        if not isinstance(file_config, dict):
            raise ValueError(f"Invalid configuration file: {path} must hold a JSON object")
        self._config = merge_dicts(self._config, file_config)

    def load_environment(self) -> None:
        """Load configuration from environment variables"""
        for env_var, (config_key, type_func) in ENV_VARS.items():
            value = os.getenv(env_var)
            if value is not None:
                try:
                    self.set(config_key, type_func(value))
                except (ValueError, TypeError):
                    logger.warning(f"Invalid environment variable {env_var}: {value}")

    def update(self, config: Dict[str, Any]) -> None:
        """Update configuration with dictionary.

        Args:
            config: Configuration dictionary to merge
        """
        self._config = merge_dicts(self._config, config)

    def validate(self) -> bool:
        """Validate configuration.

        Returns:
            True if configuration is valid

        Raises:
            ValueError: If configuration is invalid
        """
        string_fields = [
            "parsing.source_tag",
            "aggregation.default_method",
            "output.format",
        ]
        for field in string_fields:
            value = self.get(field)
            if not isinstance(value, str) or not value:
                raise ValueError(f"Invalid value for {field}: expected non-empty string")

        chunk_size = self.get("parsing.chunk_size")
        if isinstance(chunk_size, bool) or not isinstance(chunk_size, int):
            raise ValueError("Invalid type for parsing.chunk_size: expected integer")
        if chunk_size < 1:
            raise ValueError("Invalid value for parsing.chunk_size: must be >= 1")

        value = self.get("parsing.ignore_blank_lines")
        if value is not None and not isinstance(value, bool):
            raise ValueError("Invalid type for parsing.ignore_blank_lines: expected boolean")

        if self.get("output.format") not in OUTPUT_FORMATS:
            raise ValueError(
                f"Invalid value for output.format: must be one of {', '.join(OUTPUT_FORMATS)}"
            )

        for field in ("middleware.skip_paths", "middleware.headers"):
            value = self.get(field, [])
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ValueError(f"Invalid type for {field}: expected list of strings")

        return True

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "Config":
        """Create configuration from dictionary.

        Args:
            config: Configuration dictionary

        Returns:
            New Config instance
        """
        instance = cls()
        instance.update(config)
        return instance

    def get_bool(self, key: str, default: Optional[bool] = None) -> Optional[bool]:
        """Get boolean configuration value.

        Args:
            key: Configuration key
            default: Default value if not found

        Returns:
            Boolean value or default
        """
        value = self.get(key, default)
        if isinstance(value, str):
            return value.lower() in ("true", "yes", "1", "on")
        return bool(value) if value is not None else default

    def get_list(self, key: str, default: Optional[list] = None) -> Optional[list]:
        """Get list configuration value.

        Args:
            key: Configuration key
            default: Default value if not found

        Returns:
            List value or default
        """
        value = self.get(key, default)
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return list(value) if value is not None else default
