"""
Pending-batch state machine shared by every batching adapter.

The accumulator knows nothing about how elements arrive. Adapters feed it one
element at a time with ``push`` and call ``finish`` when their source is
exhausted; both return a ``WeightedBatch`` when one is ready to be emitted.
"""

from typing import Generic, List, Optional, TypeVar

from minbatch.models.batch_models import BatchPolicy, BatchStats, WeightedBatch, WeightFn

T = TypeVar("T")


class BatchAccumulator(Generic[T]):
    """Buffers elements and their running weight until the policy closes a batch.

    States: collecting (possibly empty pending batch) and exhausted. Once
    exhausted, ``push`` is never valid again and ``finish`` returns ``None``.

    Attributes:
        policy: Closing thresholds.
        weight_fn: Weight of a single element.
        stats: Counters for emitted batches.
    """

    def __init__(self, policy: BatchPolicy, weight_fn: WeightFn) -> None:
        self.policy = policy
        self.weight_fn = weight_fn
        self.stats = BatchStats()
        self._items: List[T] = []
        self._weight = 0
        self._exhausted = False

    @property
    def pending_size(self) -> int:
        return len(self._items)

    @property
    def pending_weight(self) -> int:
        return self._weight

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def push(self, item: T) -> Optional[WeightedBatch]:
        """Accepts one element and emits the pending batch if it is now closed.

        The weight function is called before the element is appended, so an
        exception raised by it leaves the pending batch untouched.

        Args:
            item: The next element of the inner sequence.

        Returns:
            The closed batch, or ``None`` if more elements are needed.
        """
        weight = self.weight_fn(item)
        self._items.append(item)
        self._weight += weight
        self.stats.elements_seen += 1
        if self.policy.should_close(self._weight, len(self._items)):
            return self._take()
        return None

    def finish(self) -> Optional[WeightedBatch]:
        """Marks the inner sequence exhausted and drains the pending batch.

        Returns:
            The final, possibly under-threshold batch, or ``None`` when
            nothing was pending.
        """
        if self._exhausted:
            return None
        self._exhausted = True
        if not self._items:
            return None
        self.stats.final_partial = True
        return self._take()

    def abort(self) -> int:
        """Discards the pending batch after an inner-sequence failure.

        Returns:
            The number of dropped elements.
        """
        dropped = len(self._items)
        self.stats.elements_dropped += dropped
        self._items = []
        self._weight = 0
        self._exhausted = True
        return dropped

    def _take(self) -> WeightedBatch:
        batch = WeightedBatch(self._items, self._weight)
        self.stats.record_batch(len(batch.items), batch.weight)
        # a fresh list, so emitted batches never alias the pending one
        self._items = []
        self._weight = 0
        return batch

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(policy={self.policy!r}, pending_size={self.pending_size}, "
            f"pending_weight={self._weight}, exhausted={self._exhausted})"
        )
