"""YAML configuration file loader."""

from pathlib import Path
from typing import Any

import yaml

from src.core.exceptions.errors import ConfigurationError


class ConfigLoader:
    """Load a YAML configuration file into nested dictionaries.

    Expected layout::

        api:
          id: ...
          key: ...
          host_url: https://falconapi.crowdstrike.com/
        logging:
          level: DEBUG
    """

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path = config_path
        self._config: dict[str, Any] = {}

    def load(self, path: Path | None = None) -> dict[str, Any]:
        """Load configuration from a YAML file.

        Args:
            path: Path to YAML file. Uses config_path if not provided.

        Returns:
            Loaded configuration dictionary.

        Raises:
            ConfigurationError: If the file is missing, is not valid YAML, or
                does not contain a mapping at the top level.
        """
        load_path = path or self.config_path
        if not load_path:
            return {}

        try:
            with open(load_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise ConfigurationError(
                f"Configuration file not found: {load_path}",
                config_key=str(load_path),
            ) from e
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {load_path}",
                config_key=str(load_path),
                details={"error": str(e)},
            ) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration file must contain a mapping: {load_path}",
                config_key=str(load_path),
            )
        self._config = data
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dotted key, e.g. ``api.host_url``."""
        value: Any = self._config
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value

    def get_section(self, section: str) -> dict[str, Any]:
        """Get a top-level section, or an empty dict if absent or malformed."""
        result = self._config.get(section, {})
        return result if isinstance(result, dict) else {}

    @property
    def config(self) -> dict[str, Any]:
        """Return the loaded configuration."""
        return self._config
