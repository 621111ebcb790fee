"""Configuration models."""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

CATEGORIES = {
    "international": "International news",
    "world": "World news",
    "business": "Business and finance",
    "technology": "Technology news",
    "pakistan": "Pakistan news",
    "sports": "Sports news",
    "politics": "Political news",
}


class DatabaseConfig(BaseModel):
    """Storage backend configuration."""

    backend: Literal["postgres", "sqlite"] = Field("sqlite", description="Storage backend")
    sqlite_path: str = Field("~/.local/share/feedwatch/news.db", description="SQLite database file")
    host: str = Field("localhost", description="Database host")
    port: int = Field(5432, description="Database port")
    database: str = Field("feedwatch", description="Database name")
    user: str = Field("feedwatch", description="Database user")
    password: Optional[str] = Field(None, description="Database password")
    password_env: Optional[str] = Field(None, description="Environment variable for password")


class ScrapeConfig(BaseModel):
    """Scrape loop parameters."""

    interval_minutes: float = Field(5, description="Minutes between cycle starts", gt=0)
    max_age_minutes: int = Field(5, description="Only keep articles newer than this", ge=1)
    include_undated: bool = Field(False, description="Keep articles without a usable date")
    max_consecutive_errors: int = Field(5, description="Failed cycles in a row before stopping", ge=1)
    cycle_timeout_seconds: float = Field(300, description="Cycle time limit (0 disables)", ge=0)
    max_articles_per_cycle: int = Field(0, description="Max new articles per cycle (0 = no limit)", ge=0)
    status_interval_minutes: float = Field(5, description="Minutes between status reports", ge=0)
    enabled_categories: Optional[List[str]] = Field(None, description="Only scrape these categories (None = all)")

    @field_validator("enabled_categories")
    @classmethod
    def validate_categories(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        """Check every category is one of the known labels."""
        if v is not None:
            unknown = [c for c in v if c not in CATEGORIES]
            if unknown:
                raise ValueError(f"Unknown categories: {', '.join(unknown)}")
        return v


class FetchConfig(BaseModel):
    """Feed fetching parameters."""

    timeout: float = Field(30.0, description="HTTP timeout in seconds", gt=0)
    max_attempts: int = Field(3, description="Attempts per feed before giving up", ge=1, le=10)
    base_delay: float = Field(2.0, description="Backoff base delay in seconds", ge=0)
    max_concurrent: int = Field(5, description="Feeds fetched in parallel", ge=1)
    user_agent: str = Field("feedwatch/1.0 (RSS reader)", description="HTTP User-Agent header")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field("INFO", description="Log level")
    show_new_articles: bool = Field(True, description="List new articles after each cycle")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class ConfigModel(BaseModel):
    """Main configuration model."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    scrape: ScrapeConfig = Field(default_factory=ScrapeConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class SourceConfig(BaseModel):
    """Feed source from sources.yaml."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Source name")
    url: str = Field(..., description="RSS feed URL")
    category: str = Field(..., description="Source category")
    enabled: bool = Field(True, description="Whether source is enabled")

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str) -> str:
        """Check the category is one of the known labels."""
        if v not in CATEGORIES:
            raise ValueError(f"Unknown category '{v}', expected one of: {', '.join(CATEGORIES)}")
        return v
