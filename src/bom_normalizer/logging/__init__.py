"""
Logging system for the BOM normalizer.
"""

from .logger_config import (
    setup_logging, get_logging_stats, close_logging, LoggerConfig
)
from .log_formatter import StructuredFormatter, ColoredFormatter

__all__ = [
    "setup_logging",
    "get_logging_stats",
    "close_logging",
    "LoggerConfig",
    "StructuredFormatter",
    "ColoredFormatter"
]
