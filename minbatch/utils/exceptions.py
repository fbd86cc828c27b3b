"""
Exception hierarchy for the min-batch stream adapters.

The batching adapters themselves never raise for threshold or element values;
failures coming from the wrapped sequence or the weight function propagate
unchanged. The exceptions below cover configuration loading and misuse of an
adapter instance.
"""

from typing import Any, Optional


class MinBatchError(Exception):
    """The base exception class for all errors raised by this package.

    Attributes:
        code: A string-based error code for programmatic identification.
        context: Optional additional information about the error.
    """

    def __init__(self, message: str, code: str = "E0000", context: Optional[Any] = None):
        """Initializes the MinBatchError.

        Args:
            message: A human-readable message describing the error.
            code: A unique, machine-readable code for the error.
            context: An optional dictionary for providing extra context.
        """
        super().__init__(message)
        self.code = code
        self.context = context


class ConfigurationError(MinBatchError):
    """Base class for all configuration-related errors.

    Raised when batching thresholds or logging options loaded from the
    environment cannot be turned into a usable configuration.
    """


class SettingsValidationError(ConfigurationError):
    """Raised when settings validation fails."""

    def __init__(self, message: str, context: Optional[Any] = None):
        """Initializes the SettingsValidationError.

        Args:
            message: Description of the settings validation issue.
            context: Optional additional context about the error.
        """
        super().__init__(message, code="SETTINGS_VALIDATION_ERROR", context=context)


class ConcurrentPullError(MinBatchError):
    """Raised when a batch is pulled while another pull is still in flight.

    An adapter is driven by exactly one consumer; overlapping pulls would
    interleave elements of the pending batch.
    """

    def __init__(self, adapter: str):
        """Initializes the ConcurrentPullError.

        Args:
            adapter: Name of the adapter type that was pulled concurrently.
        """
        super().__init__(
            f"{adapter} is already being pulled by another consumer",
            code="CONCURRENT_PULL",
            context={"adapter": adapter},
        )
