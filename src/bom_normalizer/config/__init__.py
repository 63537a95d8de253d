"""
Configuration management for the BOM normalizer.
"""

from .config_manager import (
    ConfigManager, AppConfig, BomConfig, LoggingConfig, ScopeFilter,
    get_config_manager, reset_config_manager, get_config
)

__all__ = [
    "ConfigManager",
    "AppConfig",
    "BomConfig",
    "LoggingConfig",
    "ScopeFilter",
    "get_config_manager",
    "reset_config_manager",
    "get_config"
]
