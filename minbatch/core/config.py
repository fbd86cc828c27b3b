"""
Configuration management for the min-batch adapters.

Batching thresholds and logging options can be supplied through environment
variables (or a ``.env`` file) and turned into an adapter with
``minbatch.services.ext.from_settings``. Adapters constructed directly never
read this configuration.
"""

from typing import Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

from minbatch.utils.exceptions import SettingsValidationError


class BatchingConfig(BaseSettings):
    """Batch closing thresholds.

    Attributes:
        min_batch_weight: Weight floor at which a pending batch is emitted.
        optimal_batch_size: Element count at which a pending batch is emitted
            even below the weight floor. ``None`` selects weight-threshold mode.
        log_batches: Emit a debug log entry for every batch.
    """

    min_batch_weight: int = Field(
        default=1,
        description="Accumulated weight at which a batch is closed",
        ge=0,
    )
    optimal_batch_size: Optional[int] = Field(
        default=None,
        description="Element count at which a batch is closed regardless of weight",
        ge=1,
    )
    log_batches: bool = Field(
        default=False,
        description="Log every emitted batch at debug level",
    )

    @property
    def optimal_mode(self) -> bool:
        return self.optimal_batch_size is not None

    class Config:
        """Pydantic configuration."""

        env_prefix = "MINBATCH_"
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


class LoggingConfig(BaseSettings):
    """Structured logging configuration.

    Attributes:
        log_level: Logging level.
        log_format: ``json`` for machine-readable output, ``console`` for
            human-readable key/value output.
    """

    log_level: str = Field(
        default="INFO",
        description="Logging level",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )
    log_format: str = Field(
        default="json",
        description="Log renderer",
        pattern=r"^(json|console)$",
    )

    class Config:
        """Pydantic configuration."""

        env_prefix = "MINBATCH_"
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


class Settings(BaseSettings):
    """Root settings object composing the batching and logging domains.

    Attributes:
        batching: Batch closing thresholds.
        logging: Structured logging configuration.
    """

    batching: BatchingConfig = Field(default_factory=BatchingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    class Config:
        """Pydantic configuration options for the Settings class."""

        env_prefix = "MINBATCH_"
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Returns the process-wide settings, loading them on first use.

    Returns:
        The singleton instance of the settings.

    Raises:
        SettingsValidationError: If the environment holds invalid values.
    """
    global _settings
    if _settings is None:
        try:
            _settings = Settings()
        except ValidationError as e:
            raise SettingsValidationError(
                "Invalid min-batch settings", context={"errors": e.errors()}
            ) from e
    return _settings


def reset_settings() -> None:
    """Drops the cached settings so the next ``get_settings`` reloads them."""
    global _settings
    _settings = None
