"""Core module initialization."""

from .config_manager import ConfigManager, InitializerConfig, LoggingConfig
from .logging_config import setup_logging, get_logger

__all__ = [
    "ConfigManager",
    "InitializerConfig",
    "LoggingConfig",
    "setup_logging",
    "get_logger",
]
