"""Data models for batching."""

from minbatch.models.batch_models import (
    BatchPolicy,
    BatchStats,
    PollResult,
    PollState,
    WeightedBatch,
    WeightFn,
    unit_weight,
)

__all__ = [
    "BatchPolicy",
    "BatchStats",
    "PollResult",
    "PollState",
    "WeightedBatch",
    "WeightFn",
    "unit_weight",
]
