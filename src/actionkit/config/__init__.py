"""Configuration module for actionkit."""

from actionkit.config.loader import ConfigLoader
from actionkit.config.models import ActionKitConfig, FormConfig, LoggingConfig, SettingsConfig

__all__ = ["ActionKitConfig", "ConfigLoader", "FormConfig", "LoggingConfig", "SettingsConfig"]
