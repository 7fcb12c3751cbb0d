"""
dashlint configuration.

Pydantic-based settings read from DASHLINT_* environment variables and .env files.
"""

from dashlint.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
