"""Models for weight-threshold batching."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, List, NamedTuple, Optional, TypeVar

T = TypeVar("T")

WeightFn = Callable[[T], int]


def unit_weight(_: Any) -> int:
    """Counts every element as one unit of weight."""
    return 1


@dataclass(frozen=True)
class BatchPolicy:
    """Closing thresholds for a pending batch.

    A batch closes as soon as its accumulated weight reaches
    ``min_batch_weight``. When ``optimal_batch_size`` is set, it also closes
    once it holds that many elements, even below the weight floor.

    Thresholds are not validated: zero is a legal, pass-through configuration.

    Attributes:
        min_batch_weight: Weight floor at which a batch is closed.
        optimal_batch_size: Element count ceiling, or ``None`` for
            weight-threshold mode.
    """

    min_batch_weight: int
    optimal_batch_size: Optional[int] = None

    def should_close(self, weight: int, size: int) -> bool:
        """Evaluates the closing predicate for a batch after an append."""
        if weight >= self.min_batch_weight:
            return True
        return self.optimal_batch_size is not None and size >= self.optimal_batch_size


class WeightedBatch(NamedTuple):
    """An emitted batch paired with its accumulated weight."""

    items: List[Any]
    weight: int


class PollState(str, Enum):
    """Outcome of a non-blocking pull."""

    READY = "ready"
    PENDING = "pending"
    EXHAUSTED = "exhausted"


@dataclass
class PollResult(Generic[T]):
    """Result of ``try_next`` on an adapter.

    Attributes:
        state: Whether a batch is ready, not yet available, or whether the
            adapter is exhausted.
        batch: The emitted batch when ``state`` is ``READY``, else ``None``.
    """

    state: PollState
    batch: Optional[Any] = None

    @property
    def is_ready(self) -> bool:
        return self.state is PollState.READY

    @property
    def is_pending(self) -> bool:
        return self.state is PollState.PENDING

    @property
    def is_exhausted(self) -> bool:
        return self.state is PollState.EXHAUSTED


@dataclass
class BatchStats:
    """Counters describing what an adapter has emitted so far.

    Statistics are informational and never influence batching decisions.

    Attributes:
        elements_seen: Elements accepted from the inner sequence.
        elements_emitted: Elements handed to the consumer inside batches.
        batches_emitted: Batches handed to the consumer.
        weight_emitted: Sum of the weights of all emitted batches.
        max_batch_size: Largest element count of an emitted batch.
        max_batch_weight: Largest weight of an emitted batch.
        final_partial: Whether the last batch was flushed on exhaustion.
        elements_dropped: Elements discarded because the inner sequence failed.
    """

    elements_seen: int = 0
    elements_emitted: int = 0
    batches_emitted: int = 0
    weight_emitted: int = 0
    max_batch_size: int = 0
    max_batch_weight: int = 0
    final_partial: bool = False
    elements_dropped: int = 0

    def record_batch(self, size: int, weight: int) -> None:
        self.elements_emitted += size
        self.batches_emitted += 1
        self.weight_emitted += weight
        self.max_batch_size = max(self.max_batch_size, size)
        self.max_batch_weight = max(self.max_batch_weight, weight)

    @property
    def avg_batch_size(self) -> float:
        if not self.batches_emitted:
            return 0.0
        return self.elements_emitted / self.batches_emitted

    def as_dict(self) -> dict:
        return {
            "elements_seen": self.elements_seen,
            "elements_emitted": self.elements_emitted,
            "batches_emitted": self.batches_emitted,
            "weight_emitted": self.weight_emitted,
            "max_batch_size": self.max_batch_size,
            "max_batch_weight": self.max_batch_weight,
            "avg_batch_size": self.avg_batch_size,
            "final_partial": self.final_partial,
            "elements_dropped": self.elements_dropped,
        }
