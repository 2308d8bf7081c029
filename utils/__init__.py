"""
Utils Module
Shared logging setup and exception types
"""
from .logger import setup_logger
from .exceptions import (
    ShortcutSyncError,
    ConfigurationError,
    EntitySourceError,
    PhotoStoreError,
    IconDecodeError,
    PlatformError,
)

__all__ = [
    "setup_logger",
    "ShortcutSyncError",
    "ConfigurationError",
    "EntitySourceError",
    "PhotoStoreError",
    "IconDecodeError",
    "PlatformError",
]
