"""Batching adapter exports."""

from minbatch.services.accumulator import BatchAccumulator
from minbatch.services.ext import (
    from_settings,
    iter_min_batch,
    min_batch,
    min_batch_optimal,
    min_batch_with_weight,
)
from minbatch.services.min_batch import MinBatch, MinBatchIterator, MinBatchWithWeight

__all__ = [
    "BatchAccumulator",
    "MinBatch",
    "MinBatchWithWeight",
    "MinBatchIterator",
    "min_batch",
    "min_batch_with_weight",
    "min_batch_optimal",
    "iter_min_batch",
    "from_settings",
]
