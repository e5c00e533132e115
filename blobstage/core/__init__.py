"""
blobstage core: configuration and logging.
"""

from .config_manager import ConfigManager, BlobStageConfig, LoggingConfig, StorageConfig
from .logging_config import setup_logging, get_logger

__all__ = [
    "ConfigManager",
    "BlobStageConfig",
    "LoggingConfig",
    "StorageConfig",
    "setup_logging",
    "get_logger",
]
