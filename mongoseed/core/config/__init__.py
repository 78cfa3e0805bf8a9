"""
Core configuration module for mongoseed.

Provides centralized configuration management with support for database settings, logging options, directory paths
and environment variable overrides.
"""

from mongoseed.core.config.config import Config, CoreConfig, CoreSettings, SettingsLike, get_config

__all__ = ["Config", "CoreConfig", "CoreSettings", "SettingsLike", "get_config"]
