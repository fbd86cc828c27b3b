"""Configuration and logging infrastructure."""

from minbatch.core.config import (
    BatchingConfig,
    LoggingConfig,
    Settings,
    get_settings,
    reset_settings,
)
from minbatch.core.logging import get_contextual_logger, get_logger, setup_structured_logging

__all__ = [
    "BatchingConfig",
    "LoggingConfig",
    "Settings",
    "get_settings",
    "reset_settings",
    "get_logger",
    "get_contextual_logger",
    "setup_structured_logging",
]
