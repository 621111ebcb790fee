"""Configuration loader."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml
from pydantic import ValidationError

from .defaults import DEFAULT_SOURCES
from .models import ConfigModel, DatabaseConfig, SourceConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "feedwatch" / "config.yaml"

# Environment variables that override config file values
ENV_OVERRIDES: Dict[str, Tuple[str, str]] = {
    "FEEDWATCH_SCRAPE_INTERVAL_MINUTES": ("scrape", "interval_minutes"),
    "FEEDWATCH_MAX_AGE_MINUTES": ("scrape", "max_age_minutes"),
    "FEEDWATCH_DB_BACKEND": ("database", "backend"),
    "FEEDWATCH_SQLITE_PATH": ("database", "sqlite_path"),
    "FEEDWATCH_LOG_LEVEL": ("logging", "level"),
}


class Config:
    """Configuration manager."""

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """Initialize config manager."""
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH
        self.config_path = config_path
        self._config: Optional[ConfigModel] = None

    @property
    def config(self) -> ConfigModel:
        """Get loaded config."""
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    @property
    def sources_path(self) -> Path:
        """Get sources file path (next to the config file)."""
        return self.config_path.parent / "sources.yaml"

    def get_sources(self) -> List[SourceConfig]:
        """Get configured sources, falling back to the built-in registry."""
        if not self.sources_path.exists():
            logger.info("No sources file at %s, using built-in sources", self.sources_path)
            return list(DEFAULT_SOURCES)
        return load_sources(self.sources_path)

    def get_active_sources(self) -> List[SourceConfig]:
        """Get sources with those outside the enabled categories switched off."""
        categories = self.config.scrape.enabled_categories
        sources = self.get_sources()
        if categories is None:
            return sources
        return [
            s if s.category in categories else s.model_copy(update={"enabled": False})
            for s in sources
        ]

    def get_db_config(self) -> DatabaseConfig:
        """Get database configuration with secrets resolved."""
        db_config = self.config.database.model_copy()

        if db_config.password_env:
            password = os.environ.get(db_config.password_env)
            if password:
                db_config.password = password

        return db_config


def apply_env_overrides(data: Dict[str, Any], environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Overlay ``FEEDWATCH_*`` environment variables onto raw config data."""
    if environ is None:
        environ = os.environ

    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value:
            section_data = data.get(section) or {}
            section_data[key] = value
            data[section] = section_data
            logger.debug("Config %s.%s set from %s", section, key, env_name)

    return data


def load_config(config_path: Path) -> ConfigModel:
    """Load configuration from YAML file, then apply environment overrides."""
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path) as f:
            config_data = yaml.safe_load(f) or {}

        return ConfigModel(**apply_env_overrides(config_data))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}")
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}")


def load_sources(sources_path: Path) -> List[SourceConfig]:
    """Load sources from YAML file, skipping invalid entries and repeated names."""
    if not sources_path.exists():
        raise FileNotFoundError(f"Sources file not found: {sources_path}")

    try:
        with open(sources_path) as f:
            sources_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in sources file: {e}")

    if not sources_data or not sources_data.get("sources"):
        return []

    sources = []
    seen_names = set()
    for source_data in sources_data["sources"]:
        try:
            source = SourceConfig(**source_data)
        except ValidationError as e:
            logger.warning("Skipping invalid source %s: %s", source_data.get("name", "unknown"), e)
            continue
        if source.name in seen_names:
            logger.warning("Skipping duplicate source name: %s", source.name)
            continue
        seen_names.add(source.name)
        sources.append(source)

    return sources


def save_config(config: ConfigModel, config_path: Path) -> None:
    """Save configuration to YAML file."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        yaml.dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)


def save_sources(sources: List[SourceConfig], sources_path: Path) -> None:
    """Save sources to YAML file."""
    sources_path.parent.mkdir(parents=True, exist_ok=True)

    with open(sources_path, "w") as f:
        yaml.dump({"sources": [s.model_dump() for s in sources]}, f, default_flow_style=False, sort_keys=False)
