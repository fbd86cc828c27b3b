"""
min-batch

Stream adapters that turn elements into batches of a minimal total weight,
so that parallel downstream tasks each get enough work to amortize dispatch
overhead.
"""

from minbatch.models.batch_models import BatchPolicy, PollResult, PollState, WeightedBatch
from minbatch.services import (
    MinBatch,
    MinBatchIterator,
    MinBatchWithWeight,
    from_settings,
    iter_min_batch,
    min_batch,
    min_batch_optimal,
    min_batch_with_weight,
)
from minbatch.utils.exceptions import ConcurrentPullError, MinBatchError

__version__ = "0.1.0"

__all__ = [
    "BatchPolicy",
    "PollResult",
    "PollState",
    "WeightedBatch",
    "MinBatch",
    "MinBatchWithWeight",
    "MinBatchIterator",
    "min_batch",
    "min_batch_with_weight",
    "min_batch_optimal",
    "iter_min_batch",
    "from_settings",
    "MinBatchError",
    "ConcurrentPullError",
]
