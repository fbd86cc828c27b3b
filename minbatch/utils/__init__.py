"""Utility package exports."""

from minbatch.utils.exceptions import (
    ConcurrentPullError,
    ConfigurationError,
    MinBatchError,
    SettingsValidationError,
)

__all__ = [
    "MinBatchError",
    "ConfigurationError",
    "SettingsValidationError",
    "ConcurrentPullError",
]
