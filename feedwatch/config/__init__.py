"""Configuration management for feedwatch."""

from .defaults import DEFAULT_SOURCES
from .loader import Config, apply_env_overrides, load_config, load_sources, save_config, save_sources
from .models import (
    CATEGORIES,
    ConfigModel,
    DatabaseConfig,
    FetchConfig,
    LoggingConfig,
    ScrapeConfig,
    SourceConfig,
)

__all__ = [
    "CATEGORIES",
    "Config",
    "ConfigModel",
    "DatabaseConfig",
    "DEFAULT_SOURCES",
    "FetchConfig",
    "LoggingConfig",
    "ScrapeConfig",
    "SourceConfig",
    "apply_env_overrides",
    "load_config",
    "load_sources",
    "save_config",
    "save_sources",
]
