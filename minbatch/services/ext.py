"""Combinator entry points for building batching adapters."""

from typing import AsyncIterable, Iterable, Optional, TypeVar, Union

from minbatch.core.config import Settings, get_settings
from minbatch.models.batch_models import WeightFn, unit_weight
from minbatch.services.min_batch import MinBatch, MinBatchIterator, MinBatchWithWeight

T = TypeVar("T")


def min_batch(
    stream: AsyncIterable[T], min_batch_weight: int, weight_fn: WeightFn = unit_weight
) -> MinBatch[T]:
    """Groups ``stream`` into batches whose weight reaches ``min_batch_weight``.

    Args:
        stream: The inner sequence of elements.
        min_batch_weight: Weight floor at which a batch is emitted.
        weight_fn: Weight of a single element.

    Returns:
        An async iterator of lists.
    """
    return MinBatch(stream, min_batch_weight, weight_fn)


def min_batch_with_weight(
    stream: AsyncIterable[T], min_batch_weight: int, weight_fn: WeightFn = unit_weight
) -> MinBatchWithWeight[T]:
    """Like ``min_batch`` but yields ``(items, weight)`` pairs."""
    return MinBatchWithWeight(stream, min_batch_weight, weight_fn)


def min_batch_optimal(
    stream: AsyncIterable[T],
    min_batch_size: int,
    optimal_batch_size: int,
    weight_fn: WeightFn = unit_weight,
    with_weight: bool = False,
) -> Union[MinBatch[T], MinBatchWithWeight[T]]:
    """Groups ``stream`` using the min/optimal policy.

    A batch is emitted as soon as its weight reaches ``min_batch_size`` or it
    holds ``optimal_batch_size`` elements, whichever comes first.

    Args:
        stream: The inner sequence of elements.
        min_batch_size: Weight floor at which a batch is emitted.
        optimal_batch_size: Element count at which a batch is emitted.
        weight_fn: Weight of a single element.
        with_weight: Yield ``WeightedBatch`` items instead of lists.

    Returns:
        An async iterator of batches.
    """
    adapter = MinBatchWithWeight if with_weight else MinBatch
    return adapter(stream, min_batch_size, weight_fn, optimal_batch_size=optimal_batch_size)


def iter_min_batch(
    iterable: Iterable[T],
    min_batch_weight: int,
    weight_fn: WeightFn = unit_weight,
    optimal_batch_size: Optional[int] = None,
    with_weight: bool = False,
) -> MinBatchIterator[T]:
    """Blocking variant of ``min_batch`` for synchronous iterables."""
    return MinBatchIterator(
        iterable,
        min_batch_weight,
        weight_fn,
        optimal_batch_size=optimal_batch_size,
        emit_weight=with_weight,
    )


def from_settings(
    stream: AsyncIterable[T],
    weight_fn: WeightFn = unit_weight,
    settings: Optional[Settings] = None,
    with_weight: bool = False,
) -> Union[MinBatch[T], MinBatchWithWeight[T]]:
    """Builds an adapter from ``MINBATCH_*`` environment configuration.

    Args:
        stream: The inner sequence of elements.
        weight_fn: Weight of a single element.
        settings: Explicit settings; defaults to ``get_settings()``.
        with_weight: Yield ``WeightedBatch`` items instead of lists.

    Returns:
        An async iterator of batches.

    Raises:
        SettingsValidationError: If the environment holds invalid values.
    """
    config = (settings or get_settings()).batching
    adapter = MinBatchWithWeight if with_weight else MinBatch
    return adapter(
        stream,
        config.min_batch_weight,
        weight_fn,
        optimal_batch_size=config.optimal_batch_size,
        log_batches=config.log_batches,
    )
