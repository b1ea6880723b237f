"""
Configuration management for sbnamespace.

Handles loading, validation, and access to configuration settings.
"""

import os
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, List
from enum import Enum

import yaml
from pydantic import BaseModel, Field, field_validator, ValidationError, ConfigDict

from sbnamespace.namespaces.constants import DEFAULT_TEST_NAME_PREFIXES

logger = logging.getLogger(__name__)


class LogLevel(str, Enum):
    """Valid log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Supported log output formats."""
    JSON = "json"
    TEXT = "text"


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.TEXT
    file: Optional[str] = None
    rotation_size: str = "10MB"
    rotation_count: int = Field(default=5, ge=0)
    module_levels: Optional[Dict[str, str]] = Field(
        default_factory=lambda: {"azure": "WARNING"},
        description="Per-module log levels, e.g., {'sbnamespace.namespaces.sweeper': 'DEBUG'}"
    )

    model_config = ConfigDict(use_enum_values=True)


class SweeperConfig(BaseModel):
    """Policy deciding which live namespaces count as test leftovers."""
    name_prefixes: List[str] = Field(
        default_factory=lambda: list(DEFAULT_TEST_NAME_PREFIXES),
        description="Case-insensitive name prefixes used by test-created namespaces"
    )
    required_tags: Dict[str, str] = Field(
        default_factory=dict,
        description="Tags a namespace must carry (with these values) to be swept"
    )

    @field_validator("name_prefixes")
    @classmethod
    def validate_prefixes(cls, v: List[str]) -> List[str]:
        """An empty prefix would match every namespace in the subscription."""
        cleaned = [p.strip() for p in v]
        if not cleaned:
            raise ValueError("At least one test name prefix is required")
        if any(not p for p in cleaned):
            raise ValueError("Test name prefixes cannot be empty")
        return cleaned


class SbNamespaceConfig(BaseModel):
    """Main sbnamespace configuration schema."""

    subscription_id: Optional[str] = Field(
        default=None,
        description="Azure subscription that holds the namespaces"
    )

    location: Optional[str] = Field(
        default=None,
        description="Default region used by sweeps when none is given"
    )

    sweeper: SweeperConfig = Field(default_factory=SweeperConfig)

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(use_enum_values=True)


class ConfigManager:
    """
    Manages sbnamespace configuration loading and validation.

    Configuration precedence (highest to lowest):
    1. CLI arguments
    2. Environment variables (SBNAMESPACE_*, then ARM_* fallbacks)
    3. Configuration file (YAML/JSON)
    4. Defaults
    """

    def __init__(self, environ: Optional[Dict[str, str]] = None):
        self._environ = environ
        self._config: Optional[SbNamespaceConfig] = None
        self._config_file: Optional[Path] = None

    def load(
        self,
        config_file: Optional[str] = None,
        cli_overrides: Optional[Dict[str, Any]] = None
    ) -> SbNamespaceConfig:
        """
        Load and validate configuration from multiple sources.

        Args:
            config_file: Path to configuration file (YAML or JSON)
            cli_overrides: Dictionary of CLI argument overrides

        Returns:
            Validated SbNamespaceConfig instance

        Raises:
            ValidationError: If configuration is invalid
            FileNotFoundError: If specified config file doesn't exist
        """
        logger.debug("Loading sbnamespace configuration")

        config_dict: Dict[str, Any] = {}

        if config_file:
            config_dict = self._load_from_file(config_file)
            self._config_file = Path(config_file)
            logger.info(f"Loaded configuration from file: {config_file}")

        env_config = self._load_from_env()
        config_dict = self._merge_configs(config_dict, env_config)
        if env_config:
            logger.debug(f"Applied {len(env_config)} environment variable overrides")

        if cli_overrides:
            cli_overrides = {k: v for k, v in cli_overrides.items() if v is not None}
            config_dict = self._merge_configs(config_dict, cli_overrides)
            logger.debug(f"Applied {len(cli_overrides)} CLI argument overrides")

        try:
            self._config = SbNamespaceConfig(**config_dict)
            logger.debug("Configuration validated successfully")
            return self._config
        except ValidationError as e:
            logger.error(f"Configuration validation failed: {e}")
            raise

    def _load_from_file(self, file_path: str) -> Dict[str, Any]:
        """Load configuration from YAML or JSON file."""
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        with open(path, 'r') as f:
            if path.suffix in ['.yaml', '.yml']:
                return yaml.safe_load(f) or {}
            elif path.suffix == '.json':
                return json.load(f)
            else:
                raise ValueError(f"Unsupported config file format: {path.suffix}")

    def _getenv(self, name: str) -> Optional[str]:
        environ = self._environ if self._environ is not None else os.environ
        return environ.get(name) or None

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config: Dict[str, Any] = {}

        if subscription := (self._getenv("SBNAMESPACE_SUBSCRIPTION_ID") or self._getenv("ARM_SUBSCRIPTION_ID")):
            config["subscription_id"] = subscription
        if location := (self._getenv("SBNAMESPACE_LOCATION") or self._getenv("ARM_TEST_LOCATION")):
            config["location"] = location

        if log_level := self._getenv("SBNAMESPACE_LOG_LEVEL"):
            config.setdefault("logging", {})["level"] = log_level.upper()
        if log_format := self._getenv("SBNAMESPACE_LOG_FORMAT"):
            config.setdefault("logging", {})["format"] = log_format.lower()
        if log_file := self._getenv("SBNAMESPACE_LOG_FILE"):
            config.setdefault("logging", {})["file"] = log_file

        if prefixes := self._getenv("SBNAMESPACE_TEST_PREFIXES"):
            config.setdefault("sweeper", {})["name_prefixes"] = [
                p.strip() for p in prefixes.split(",") if p.strip()
            ]

        return config

    def _merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two configuration dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def get_config(self) -> SbNamespaceConfig:
        """
        Get the loaded configuration.

        Raises:
            RuntimeError: If configuration hasn't been loaded
        """
        if self._config is None:
            raise RuntimeError("Configuration not loaded. Call load() first.")
        return self._config

    def reload(self) -> SbNamespaceConfig:
        """Reload configuration from the same sources."""
        config_file = str(self._config_file) if self._config_file else None
        return self.load(config_file=config_file)
