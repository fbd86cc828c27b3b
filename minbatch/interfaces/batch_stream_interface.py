"""
Interface for Batching Streams

Defines the contract for adapters that regroup an asynchronous sequence of
elements into weight-threshold batches.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from minbatch.models.batch_models import PollResult


class IBatchStream(ABC):
    """
    Interface for batching stream adapters.

    An adapter is itself an asynchronous iterator whose items are batches.
    It is driven by a single consumer at a time.
    """

    def __aiter__(self) -> "IBatchStream":
        return self

    @abstractmethod
    async def __anext__(self) -> Any:
        """
        Produce the next batch, suspending until one is complete.

        Returns:
            The next batch

        Raises:
            StopAsyncIteration: Once the inner sequence is exhausted and the
                final batch has been emitted
            ConcurrentPullError: If another pull is still in flight
        """
        pass

    @abstractmethod
    def try_next(self) -> PollResult:
        """
        Non-blocking pull.

        Must be called from code running on the event loop.

        Returns:
            READY with a batch, PENDING if the inner sequence has no element
            ready yet, or EXHAUSTED
        """
        pass

    @abstractmethod
    async def aclose(self) -> None:
        """
        Discard the pending batch and release the inner sequence.
        """
        pass

    @property
    @abstractmethod
    def is_terminated(self) -> bool:
        """True once no further batch will ever be produced."""
        pass

    @abstractmethod
    def get_stats(self) -> Dict[str, Any]:
        """
        Get batching statistics.

        Returns:
            Dictionary with counters like:
                - elements_seen: Elements accepted from the inner sequence
                - batches_emitted: Batches handed to the consumer
                - weight_emitted: Total weight of emitted batches
        """
        pass

    @abstractmethod
    def reset_stats(self) -> None:
        """Reset batching statistics."""
        pass
