"""Configuration module for TableSum.

Centralized configuration management using pydantic-settings.
"""

from config.settings import GlobalConfig, get_config

__all__ = ["GlobalConfig", "get_config"]
