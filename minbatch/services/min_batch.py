"""
Batching adapters that regroup a stream of elements into minimal-weight batches.

Downstream tasks that run in parallel should each receive at least
``min_batch_weight`` units of work, so that dispatch and context switching
overhead is amortized over CPU-intensive workloads. The producer does not need
to know anything about this policy: the adapters wrap any asynchronous (or,
for ``MinBatchIterator``, synchronous) iterable and re-emit its elements in
order, grouped into batches.

Two closing policies are supported:

* weight-threshold mode: a batch closes as soon as its accumulated weight
  reaches ``min_batch_weight``;
* min/optimal mode: additionally, a batch closes once it holds
  ``optimal_batch_size`` elements even if the weight floor was not reached.

When the source is exhausted the last, possibly under-threshold, batch is
emitted. When the source raises, the pending batch is discarded, the error
propagates to the consumer and the adapter is terminated.
"""

import asyncio
from abc import abstractmethod
from typing import (
    Any,
    AsyncIterable,
    AsyncIterator,
    Dict,
    Generic,
    Iterable,
    Iterator,
    List,
    Optional,
    TypeVar,
    Union,
)

from minbatch.core.logging import get_contextual_logger
from minbatch.interfaces.batch_stream_interface import IBatchStream
from minbatch.models.batch_models import (
    BatchPolicy,
    BatchStats,
    PollResult,
    PollState,
    WeightedBatch,
    WeightFn,
    unit_weight,
)
from minbatch.services.accumulator import BatchAccumulator
from minbatch.utils.exceptions import ConcurrentPullError

T = TypeVar("T")

_EXHAUSTED = object()


class _BaseMinBatch(IBatchStream, Generic[T]):
    """Drives a ``BatchAccumulator`` from an asynchronous iterable.

    Subclasses only decide the shape of the emitted item.
    """

    def __init__(
        self,
        stream: AsyncIterable[T],
        min_batch_weight: int,
        weight_fn: WeightFn = unit_weight,
        *,
        optimal_batch_size: Optional[int] = None,
        log_batches: bool = False,
    ) -> None:
        """Initializes the adapter.

        Args:
            stream: The inner sequence of elements.
            min_batch_weight: Weight floor at which a batch is emitted.
            weight_fn: Weight of a single element. Defaults to 1 per element.
            optimal_batch_size: Element count at which a batch is emitted even
                below the weight floor. ``None`` selects weight-threshold mode.
            log_batches: Log every emitted batch at debug level.
        """
        self.policy = BatchPolicy(min_batch_weight, optimal_batch_size)
        self._stream: AsyncIterator[T] = stream.__aiter__()
        self._acc: BatchAccumulator[T] = BatchAccumulator(self.policy, weight_fn)
        self._poll_task: Optional[asyncio.Future] = None
        self._pulling = False
        self._log_batches = log_batches
        self.logger = get_contextual_logger(
            __name__,
            adapter=type(self).__name__,
            min_batch_weight=min_batch_weight,
            optimal_batch_size=optimal_batch_size,
        )

    @abstractmethod
    def _wrap(self, batch: WeightedBatch) -> Any:
        """Shapes an emitted batch into the item handed to the consumer."""

    async def _fetch(self) -> Any:
        try:
            return await self._stream.__anext__()
        except StopAsyncIteration:
            return _EXHAUSTED

    async def __anext__(self) -> Any:
        if self._acc.exhausted:
            raise StopAsyncIteration
        if self._pulling:
            raise ConcurrentPullError(type(self).__name__)

        self._pulling = True
        try:
            while True:
                if self._poll_task is None:
                    self._poll_task = asyncio.ensure_future(self._fetch())
                task = self._poll_task
                # a cancelled pull leaves the fetch running for the next pull
                try:
                    outcome = await asyncio.shield(task)
                except asyncio.CancelledError:
                    if task.cancelled():
                        self._poll_task = None
                    raise
                except Exception as e:
                    self._poll_task = None
                    self._fail(e, "Inner stream failed, discarding pending batch")
                    raise
                self._poll_task = None

                batch = self._accept(outcome)
                if batch is not None:
                    return self._wrap(batch)
                if self._acc.exhausted:
                    raise StopAsyncIteration
        finally:
            self._pulling = False

    def try_next(self) -> PollResult:
        if self._acc.exhausted:
            return PollResult(PollState.EXHAUSTED)
        if self._pulling:
            raise ConcurrentPullError(type(self).__name__)

        while True:
            if self._poll_task is None:
                self._poll_task = asyncio.ensure_future(self._fetch())
            if not self._poll_task.done():
                return PollResult(PollState.PENDING)

            task, self._poll_task = self._poll_task, None
            try:
                outcome = task.result()
            except Exception as e:
                self._fail(e, "Inner stream failed, discarding pending batch")
                raise

            batch = self._accept(outcome)
            if batch is not None:
                return PollResult(PollState.READY, self._wrap(batch))
            if self._acc.exhausted:
                return PollResult(PollState.EXHAUSTED)

    def _accept(self, outcome: Any) -> Optional[WeightedBatch]:
        if outcome is _EXHAUSTED:
            batch = self._acc.finish()
            self.logger.debug("Inner stream exhausted", **self._acc.stats.as_dict())
        else:
            try:
                batch = self._acc.push(outcome)
            except Exception as e:
                self._fail(e, "Weight function failed, discarding pending batch")
                raise
        if batch is not None and self._log_batches:
            self.logger.debug("Batch emitted", batch_size=len(batch.items), batch_weight=batch.weight)
        return batch

    def _fail(self, error: Exception, message: str) -> None:
        dropped = self._acc.abort()
        self.logger.warning(
            message,
            dropped_elements=dropped,
            error=str(error),
            error_type=type(error).__name__,
        )

    async def aclose(self) -> None:
        if self._pulling:
            raise ConcurrentPullError(type(self).__name__)
        if self._poll_task is not None:
            task, self._poll_task = self._poll_task, None
            if task.done():
                # an element or error fetched ahead of a pull is dropped with the batch
                if not task.cancelled():
                    task.exception()
            else:
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
        dropped = self._acc.abort()
        self.logger.debug("Adapter closed", dropped_elements=dropped)
        close = getattr(self._stream, "aclose", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> "_BaseMinBatch[T]":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    @property
    def is_terminated(self) -> bool:
        return self._acc.exhausted

    @property
    def pending_size(self) -> int:
        return self._acc.pending_size

    @property
    def pending_weight(self) -> int:
        return self._acc.pending_weight

    def get_stats(self) -> Dict[str, Any]:
        return self._acc.stats.as_dict()

    def reset_stats(self) -> None:
        self._acc.stats = BatchStats()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._acc!r})"


class MinBatch(_BaseMinBatch[T]):
    """Emits each batch as a list of elements in arrival order.

    Usage:
        batches = MinBatch(blocks(), 3, lambda block: block.txs_count)
        async for batch in batches:
            await dispatch(batch)
    """

    def _wrap(self, batch: WeightedBatch) -> List[T]:
        return batch.items


class MinBatchWithWeight(_BaseMinBatch[T]):
    """Emits each batch as a ``WeightedBatch(items, weight)``.

    The weight is the accumulated weight at emission time, so consumers can
    size their work without calling the weight function again.
    """

    def _wrap(self, batch: WeightedBatch) -> WeightedBatch:
        return batch


class MinBatchIterator(Generic[T]):
    """Blocking counterpart of ``MinBatch`` for plain iterables.

    Applies the same closing policy to a synchronous iterable, for producers
    that are generators or thread-blocking readers rather than coroutines.
    """

    def __init__(
        self,
        iterable: Iterable[T],
        min_batch_weight: int,
        weight_fn: WeightFn = unit_weight,
        *,
        optimal_batch_size: Optional[int] = None,
        emit_weight: bool = False,
        log_batches: bool = False,
    ) -> None:
        """Initializes the iterator.

        Args:
            iterable: The inner sequence of elements.
            min_batch_weight: Weight floor at which a batch is emitted.
            weight_fn: Weight of a single element. Defaults to 1 per element.
            optimal_batch_size: Element count ceiling, or ``None``.
            emit_weight: Yield ``WeightedBatch`` items instead of lists.
            log_batches: Log every emitted batch at debug level.
        """
        self.policy = BatchPolicy(min_batch_weight, optimal_batch_size)
        self._iterator: Iterator[T] = iter(iterable)
        self._acc: BatchAccumulator[T] = BatchAccumulator(self.policy, weight_fn)
        self._emit_weight = emit_weight
        self._log_batches = log_batches
        self.logger = get_contextual_logger(
            __name__,
            adapter=type(self).__name__,
            min_batch_weight=min_batch_weight,
            optimal_batch_size=optimal_batch_size,
        )

    def __iter__(self) -> "MinBatchIterator[T]":
        return self

    def __next__(self) -> Union[List[T], WeightedBatch]:
        if self._acc.exhausted:
            raise StopIteration

        while True:
            try:
                item = next(self._iterator)
            except StopIteration:
                break
            except Exception as e:
                self._fail(e, "Inner iterable failed, discarding pending batch")
                raise
            try:
                batch = self._acc.push(item)
            except Exception as e:
                self._fail(e, "Weight function failed, discarding pending batch")
                raise
            if batch is not None:
                self._log_batch(batch)
                return self._wrap(batch)

        batch = self._acc.finish()
        self.logger.debug("Inner iterable exhausted", **self._acc.stats.as_dict())
        if batch is None:
            raise StopIteration
        self._log_batch(batch)
        return self._wrap(batch)

    def _fail(self, error: Exception, message: str) -> None:
        dropped = self._acc.abort()
        self.logger.warning(
            message,
            dropped_elements=dropped,
            error=str(error),
            error_type=type(error).__name__,
        )

    def _log_batch(self, batch: WeightedBatch) -> None:
        if self._log_batches:
            self.logger.debug("Batch emitted", batch_size=len(batch.items), batch_weight=batch.weight)

    def _wrap(self, batch: WeightedBatch) -> Union[List[T], WeightedBatch]:
        return batch if self._emit_weight else batch.items

    def close(self) -> None:
        """Discards the pending batch and closes the inner iterator if it can be closed."""
        self._acc.abort()
        close = getattr(self._iterator, "close", None)
        if close is not None:
            close()

    @property
    def is_terminated(self) -> bool:
        return self._acc.exhausted

    def get_stats(self) -> Dict[str, Any]:
        return self._acc.stats.as_dict()
