#!/usr/bin/env python3
"""
Configuration management for the matching web application.
"""

from pathlib import Path
from functools import lru_cache

from core.config_loader import AppConfig, load_config


@lru_cache()
def get_config() -> AppConfig:
    """
    Get application configuration with caching.

    Loads config.yaml from the project root and applies environment variable
    overrides (DATABASE_URL, REDIS_URL, WEB_HOST, WEB_PORT).

    Returns:
        AppConfig: The application configuration.
    """
    return load_config(get_config_path())


def get_config_path() -> str:
    return str(get_project_root() / 'config.yaml')


def get_project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent.parent
