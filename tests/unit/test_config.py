"""Tests for environment settings and ``from_settings``.

This module verifies that batching thresholds are read from ``MINBATCH_*``
variables, that invalid values surface as ``SettingsValidationError`` and
that adapters built from settings honour them.
"""

import pytest
from pydantic import ValidationError

from minbatch import MinBatch, from_settings
from minbatch.core.config import BatchingConfig, LoggingConfig, Settings, get_settings
from minbatch.services.min_batch import MinBatchWithWeight
from minbatch.utils.exceptions import ConfigurationError, SettingsValidationError
from tests.fixtures.common_mocks import async_iter


@pytest.mark.unit
class TestSettings:
    """Loading and validating settings."""

    def test_defaults(self, clean_settings):
        settings = get_settings()

        assert settings.batching.min_batch_weight == 1
        assert settings.batching.optimal_batch_size is None
        assert not settings.batching.optimal_mode
        assert settings.logging.log_level == "INFO"
        assert settings.logging.log_format == "json"

    def test_reads_environment(self, clean_settings):
        clean_settings.setenv("MINBATCH_MIN_BATCH_WEIGHT", "1000")
        clean_settings.setenv("MINBATCH_OPTIMAL_BATCH_SIZE", "64")
        clean_settings.setenv("MINBATCH_LOG_LEVEL", "DEBUG")

        settings = get_settings()

        assert settings.batching.min_batch_weight == 1000
        assert settings.batching.optimal_batch_size == 64
        assert settings.batching.optimal_mode
        assert settings.logging.log_level == "DEBUG"

    def test_settings_are_cached(self, clean_settings):
        assert get_settings() is get_settings()

    def test_invalid_environment_raises_settings_error(self, clean_settings):
        clean_settings.setenv("MINBATCH_OPTIMAL_BATCH_SIZE", "0")

        with pytest.raises(SettingsValidationError) as exc_info:
            get_settings()

        assert isinstance(exc_info.value, ConfigurationError)
        assert exc_info.value.code == "SETTINGS_VALIDATION_ERROR"
        assert exc_info.value.context["errors"]

    def test_negative_weight_rejected(self):
        with pytest.raises(ValidationError):
            BatchingConfig(min_batch_weight=-1)

    def test_zero_weight_allowed(self):
        assert BatchingConfig(min_batch_weight=0).min_batch_weight == 0

    def test_unknown_log_format_rejected(self):
        with pytest.raises(ValidationError):
            LoggingConfig(log_format="xml")


@pytest.mark.unit
class TestFromSettings:
    """Adapters built from settings use the configured thresholds."""

    @pytest.mark.asyncio
    async def test_weight_threshold_from_settings(self):
        settings = Settings(batching=BatchingConfig(min_batch_weight=3))

        adapter = from_settings(async_iter([1, 2, 3, 4]), int, settings=settings)

        assert isinstance(adapter, MinBatch)
        assert [b async for b in adapter] == [[1, 2], [3], [4]]

    @pytest.mark.asyncio
    async def test_optimal_mode_from_settings(self):
        settings = Settings(batching=BatchingConfig(min_batch_weight=100, optimal_batch_size=2))

        adapter = from_settings(async_iter(range(5)), int, settings=settings, with_weight=True)

        assert isinstance(adapter, MinBatchWithWeight)
        assert [b async for b in adapter] == [([0, 1], 1), ([2, 3], 5), ([4], 4)]

    @pytest.mark.asyncio
    async def test_from_environment(self, clean_settings):
        clean_settings.setenv("MINBATCH_MIN_BATCH_WEIGHT", "2")

        adapter = from_settings(async_iter("abcde"))

        assert [b async for b in adapter] == [["a", "b"], ["c", "d"], ["e"]]
