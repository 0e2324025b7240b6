"""Configuration management for csapi."""

from src.core.config.loader import ConfigLoader
from src.core.config.settings import (
    DEFAULT_HOST_URL,
    DEFAULT_INTEL_URL,
    ApiSettings,
    LoggingSettings,
    Settings,
    get_settings,
)

__all__ = [
    "DEFAULT_HOST_URL",
    "DEFAULT_INTEL_URL",
    "ApiSettings",
    "ConfigLoader",
    "LoggingSettings",
    "Settings",
    "get_settings",
]
