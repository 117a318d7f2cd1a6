"""
Configuration loader for validation runs.

Handles loading from multiple sources with proper priority:
Explicit overrides > Environment Variables > Config File > Defaults
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from ..exceptions import ConfigError
from .models import HarnessConfig


class ConfigLoader:
    """
    Loads and merges configuration from multiple sources.

    Priority order (highest to lowest):
    1. Explicit overrides (passed directly to methods)
    2. Environment variables (MODELGUARD_*)
    3. Configuration file
    4. Default values
    """

    DEFAULT_CONFIG_DIR = Path.home() / ".config" / "modelguard"
    DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
    ENV_PREFIX = "MODELGUARD_"
    CONFIG_PATH_ENV = "MODELGUARD_CONFIG_PATH"

    # Keys whose environment values are comma-separated lists
    LIST_KEYS = frozenset(
        {"excluded_classes", "excluded_suffixes", "suppressed_warnings"}
    )

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration loader.

        Args:
            config_path: Path to configuration file. If None, uses default location.
        """
        self.config_path = (
            Path(config_path) if config_path else self._get_config_path_from_env()
        )

    @classmethod
    def _get_config_path_from_env(cls) -> Path:
        """Get configuration path from environment variable or default."""
        env_path = os.environ.get(cls.CONFIG_PATH_ENV)
        if env_path:
            return Path(env_path).expanduser()
        return cls.DEFAULT_CONFIG_FILE

    def load(self) -> HarnessConfig:
        """
        Load configuration from all sources and merge.

        Returns:
            Validated HarnessConfig object

        Raises:
            ConfigError: If configuration is invalid
        """
        try:
            config_dict: dict[str, Any] = {}

            if self.config_path.exists():
                file_config = self._load_file(self.config_path)
                config_dict.update(file_config)

            config_dict.update(self._load_from_env())

            return HarnessConfig.model_validate(config_dict)

        except ValidationError as e:
            raise ConfigError(f"Configuration validation failed: {e}", cause=e) from e
        except ConfigError:
            raise
        except Exception as e:
            raise ConfigError(f"Failed to load configuration: {e}", cause=e) from e

    def _load_file(self, path: Path) -> dict[str, Any]:
        """
        Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Configuration dictionary

        Raises:
            ConfigError: If file cannot be read or parsed
        """
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}", cause=e) from e
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}", cause=e) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"Config file {path} must contain a mapping, got {type(data).__name__}"
            )
        return data

    def _load_from_env(self) -> dict[str, Any]:
        """
        Load configuration from environment variables.

        Environment variable format:
        - MODELGUARD_NAMESPACE=com_example.models
        - MODELGUARD_EXCLUDED_CLASSES=pkg.mod.Legacy,pkg.mod.Other
        - MODELGUARD_SUPPRESSED_WARNINGS=null_fields,strict_hashcode
        - MODELGUARD_LOG_LEVEL=DEBUG

        Returns:
            Configuration dictionary
        """
        config: dict[str, Any] = {}

        for key, value in os.environ.items():
            if not key.startswith(self.ENV_PREFIX) or key == self.CONFIG_PATH_ENV:
                continue

            config_key = key[len(self.ENV_PREFIX) :].lower()
            config[config_key] = self._convert_env_value(config_key, value)

        return config

    def _convert_env_value(self, key: str, value: str) -> Any:
        """
        Convert environment variable string to the shape the model expects.

        Args:
            key: Configuration key (lowercase, prefix removed)
            value: Environment variable value as string

        Returns:
            List of stripped items for list keys, the string otherwise
        """
        if key in self.LIST_KEYS:
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    def merge_overrides(
        self,
        config: HarnessConfig,
        overrides: dict[str, Any],
    ) -> HarnessConfig:
        """
        Merge explicit overrides into configuration.

        Overrides have highest priority and replace all other sources.

        Args:
            config: Base configuration
            overrides: Values to apply (None values are ignored)

        Returns:
            New HarnessConfig with overrides applied
        """
        filtered = {key: value for key, value in overrides.items() if value is not None}
        if not filtered:
            return config

        config_dict = config.model_dump()
        config_dict.update(filtered)

        try:
            return HarnessConfig.model_validate(config_dict)
        except ValidationError as e:
            raise ConfigError(f"Configuration validation failed: {e}", cause=e) from e

    def create_default_config(self, force: bool = False) -> Path:
        """
        Create default configuration file with comments.

        Args:
            force: Overwrite existing file if True

        Returns:
            Path to created configuration file

        Raises:
            ConfigError: If file exists and force=False
        """
        if self.config_path.exists() and not force:
            raise ConfigError(
                f"Configuration file already exists at {self.config_path}. "
                "Use force=True to overwrite."
            )

        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(self.config_path, "w") as f:
                f.write(self._get_default_config_yaml())
        except OSError as e:
            raise ConfigError(
                f"Cannot write config file {self.config_path}: {e}", cause=e
            ) from e

        return self.config_path

    def _get_default_config_yaml(self) -> str:
        """
        Get default configuration as commented YAML.

        Returns:
            YAML string with inline documentation
        """
        return """\
# modelguard - Model Validation Configuration
# ===========================================

# Package to scan for enums and data classes (defaults to the package of
# the test class when unset)
# namespace: "myapp.models"

# Fully-qualified classes to skip
excluded_classes: []

# Classes whose name ends with any of these suffixes are skipped
excluded_suffixes:
  - Builder
  - Test
  - IT

# Equality contract checks to relax. Available:
#   ALL_FIELDS_SHOULD_BE_USED, INHERITED_DIRECTLY_FROM_OBJECT,
#   NONFINAL_FIELDS, STRICT_INHERITANCE, NULL_FIELDS, STRICT_HASHCODE,
#   UNHASHABLE
suppressed_warnings:
  - ALL_FIELDS_SHOULD_BE_USED
  - INHERITED_DIRECTLY_FROM_OBJECT
  - NONFINAL_FIELDS
  - STRICT_INHERITANCE

# Log level: DEBUG, INFO, WARNING, ERROR or CRITICAL
log_level: INFO
"""


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[dict[str, Any]] = None,
) -> HarnessConfig:
    """
    Convenience function to load configuration.

    Args:
        config_path: Path to configuration file
        overrides: Values to merge (highest priority)

    Returns:
        Validated HarnessConfig object

    Raises:
        ConfigError: If configuration is invalid
    """
    loader = ConfigLoader(config_path)
    config = loader.load()

    if overrides:
        config = loader.merge_overrides(config, overrides)

    return config


def create_default_config(
    config_path: Optional[Path] = None,
    force: bool = False,
) -> Path:
    """
    Create default configuration file.

    Args:
        config_path: Path to configuration file
        force: Overwrite existing file if True

    Returns:
        Path to created configuration file

    Raises:
        ConfigError: If file exists and force=False
    """
    loader = ConfigLoader(config_path)
    return loader.create_default_config(force=force)
