"""Configuration helpers."""

from .settings import (
    AppConfig,
    ConfigError,
    Settings,
    load_app_config,
    load_json_template,
    load_settings,
)

__all__ = [
    "AppConfig",
    "ConfigError",
    "Settings",
    "load_app_config",
    "load_json_template",
    "load_settings",
]
