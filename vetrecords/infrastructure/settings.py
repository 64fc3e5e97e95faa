"""Application Settings and Configuration.

This module provides application-wide settings that combine configuration
from the configuration manager with application-specific defaults.
"""

from typing import Optional

from vetrecords.infrastructure.config_manager import ConfigManager, RecordsConfig

# Application metadata
APP_NAME = "vetrecords"
APP_VERSION = "1.0.0"


class Settings:
    """Application settings loaded lazily from the configuration manager.

    Nothing is read from the environment until a property is first accessed,
    so importing this module has no side effects.
    """

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        self._config_manager = config_manager
        self._records_config: Optional[RecordsConfig] = None
        self.app_name = APP_NAME
        self.app_version = APP_VERSION

    @property
    def config_manager(self) -> ConfigManager:
        """Get configuration manager instance.

        Returns:
            ConfigManager instance
        """
        if self._config_manager is None:
            self._config_manager = ConfigManager.from_environment()
        return self._config_manager

    @property
    def records_config(self) -> RecordsConfig:
        """Get the records configuration (loaded on first access)."""
        if self._records_config is None:
            self._records_config = self.config_manager.get_records_config()
        return self._records_config

    @property
    def event_publisher(self) -> str:
        return self.records_config.event_publisher

    @property
    def log_level(self) -> str:
        return self.records_config.log_level

    @property
    def log_json(self) -> bool:
        return self.records_config.log_json

    @property
    def service_name(self) -> str:
        return self.records_config.service_name

    def reload(self) -> None:
        """Forget cached configuration so the next access reloads it."""
        self._config_manager = None
        self._records_config = None


# Global settings instance
settings = Settings()
