"""Configuration Manager for the medical-record service.

This module loads the runtime configuration of the medical-record core:
which domain-event publisher to wire in and how to log. Configuration comes
from ``VR_``-prefixed environment variables (optionally seeded from a project
``.env`` file) or from a JSON file.

Architecture:
    - Follows Hexagonal Architecture: Infrastructure layer isolated from domain
    - Type-safe configuration using Pydantic models
    - Fail-fast validation prevents runtime errors
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

logger = logging.getLogger(__name__)

SUPPORTED_PUBLISHERS = ("logging", "memory")
SUPPORTED_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_TRUE_VALUES = ("1", "true", "yes", "on")


class ConfigurationError(Exception):
    """Raised when the configuration cannot be loaded or is invalid."""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class RecordsConfig(BaseModel):
    """Runtime configuration of the medical-record core.

    Parameters:
        event_publisher: Publisher implementation ('logging' or 'memory')
        log_level: Root logging level
        log_json: Emit JSON log lines instead of human-readable ones
        service_name: Service name stamped on structured log lines
    """

    event_publisher: str = Field(default="logging", description="Domain event publisher (logging, memory)")
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=False, description="Use JSON log formatting")
    service_name: str = Field(default="vetrecords", description="Service name for structured logs")

    @field_validator("event_publisher")
    @classmethod
    def validate_event_publisher(cls, v: str) -> str:
        """Validate publisher type."""
        if v.lower() not in SUPPORTED_PUBLISHERS:
            raise ValueError(f"Unsupported event publisher: {v}. Supported: {list(SUPPORTED_PUBLISHERS)}")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate logging level."""
        if v.upper() not in SUPPORTED_LOG_LEVELS:
            raise ValueError(f"Unsupported log level: {v}. Supported: {list(SUPPORTED_LOG_LEVELS)}")
        return v.upper()


class ConfigManager:
    """Configuration manager for the medical-record core.

    Example Usage:
        ```python
        # Load from environment variables
        config = ConfigManager.from_environment()
        records_config = config.get_records_config()

        # Load from file
        config = ConfigManager.from_file("config.json")
        records_config = config.get_records_config()
        ```
    """

    def __init__(self, config_data: Dict[str, Any], source: Optional[str] = None):
        """Initialize configuration manager.

        Parameters:
            config_data: Configuration dictionary
            source: Where the configuration came from (for error messages)
        """
        self._config_data = config_data
        self._source = source
        self._records_config: Optional[RecordsConfig] = None

    @classmethod
    def from_environment(cls, env_path: Optional[Path] = None) -> 'ConfigManager':
        """Load configuration from environment variables.

        Environment Variables:
            - VR_EVENT_PUBLISHER: Domain event publisher (logging, memory)
            - VR_LOG_LEVEL: Logging level
            - VR_LOG_JSON: Use JSON log formatting (true/false)
            - VR_SERVICE_NAME: Service name for structured logs

        Parameters:
            env_path: Optional .env file; defaults to the project root .env

        Returns:
            ConfigManager instance
        """
        env_path = env_path or Path(__file__).parent.parent.parent / ".env"
        if env_path.exists():
            load_dotenv(env_path)
            logger.debug(f"Loaded environment variables from {env_path}")

        config_data: Dict[str, Any] = {}
        for key, variable in (
            ("event_publisher", "VR_EVENT_PUBLISHER"),
            ("log_level", "VR_LOG_LEVEL"),
            ("service_name", "VR_SERVICE_NAME"),
        ):
            value = os.getenv(variable)
            if value:
                config_data[key] = value

        log_json = os.getenv("VR_LOG_JSON")
        if log_json:
            config_data["log_json"] = log_json.strip().lower() in _TRUE_VALUES

        return cls({"records": config_data}, source="environment")

    @classmethod
    def from_file(cls, config_path: str) -> 'ConfigManager':
        """Load configuration from a JSON file.

        The file holds a ``records`` object with the RecordsConfig fields.

        Parameters:
            config_path: Path to configuration file

        Returns:
            ConfigManager instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If config file is not valid JSON
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file, 'r') as f:
                config_data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in configuration file: {str(e)}", source=config_path)

        return cls(config_data, source=config_path)

    def get_records_config(self) -> RecordsConfig:
        """Get the validated records configuration.

        Raises:
            ConfigurationError: If a value is invalid
        """
        if self._records_config is None:
            try:
                self._records_config = RecordsConfig(**self._config_data.get("records", {}))
            except PydanticValidationError as e:
                raise ConfigurationError(f"Invalid configuration: {e.errors()[0]['msg']}", source=self._source)
        return self._records_config

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key.

        Parameters:
            key: Configuration key (supports dot notation, e.g., "records.log_level")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split(".")
        value = self._config_data

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default

        return value if value is not None else default


# ============================================================================
# Convenience Functions
# ============================================================================

def get_records_config() -> RecordsConfig:
    """Convenience function to get the records configuration from environment."""
    return ConfigManager.from_environment().get_records_config()
