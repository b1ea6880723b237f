"""Core module initialization."""

from .config_manager import ConfigManager, SbNamespaceConfig, SweeperConfig, LoggingConfig
from .logging_config import setup_logging, get_logger

__all__ = [
    "ConfigManager",
    "SbNamespaceConfig",
    "SweeperConfig",
    "LoggingConfig",
    "setup_logging",
    "get_logger",
]
