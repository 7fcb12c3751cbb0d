"""
Application settings using Pydantic.

Provides environment-based configuration loading with DASHLINT_ prefix.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Logging
    log_level: str = "WARNING"
    log_format: str = "console"  # console, json

    # Duration substituted for $__rate_interval before parsing
    rate_interval: str = "5m"

    # Targets with neither a query nor a panel reference pass when enabled
    allow_empty_targets: bool = False

    # Panel types checked in addition to the built-in allow-list
    extra_panel_types: list[str] = []

    # Lint configuration file looked up next to each dashboard
    lint_config_name: str = ".lint"

    # Output
    output_format: str = "table"  # table, json

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "DASHLINT_"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
