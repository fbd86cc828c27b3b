"""Common async sources and element types used across multiple test files.

This module provides inner sequences for the batching adapters: plain async
generators, sources that suspend between elements, and sources that fail
part-way through.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, AsyncIterator, Iterable, List, Optional


@dataclass(frozen=True)
class BlockOfTxs:
    """A block carrying some number of transactions; weighted by ``txs_count``."""

    name: str
    txs_count: int


def txs_count(block: BlockOfTxs) -> int:
    return block.txs_count


def make_blocks(weights: Iterable[int], names: Optional[str] = None) -> List[BlockOfTxs]:
    """Builds blocks named a, b, c, ... with the given transaction counts."""
    names = names or "abcdefghijklmnopqrstuvwxyz"
    return [BlockOfTxs(name=names[i], txs_count=w) for i, w in enumerate(weights)]


async def async_iter(items: Iterable[Any]) -> AsyncIterator[Any]:
    """Yields ``items`` without ever suspending."""
    for item in items:
        yield item


class SlowSource:
    """Async iterator that suspends before every element.

    Attributes:
        pulls: Number of times ``__anext__`` was called, including the one
            that signalled exhaustion.
    """

    def __init__(self, items: Iterable[Any], delay: float = 0.0, fail_at: Optional[int] = None):
        """Initializes the source.

        Args:
            items: Elements to yield.
            delay: Seconds to sleep before each element; 0 yields control once.
            fail_at: Raise ``RuntimeError`` instead of yielding the element at
                this index.
        """
        self._items = list(items)
        self._delay = delay
        self._fail_at = fail_at
        self._index = 0
        self.pulls = 0
        self.closed = False

    def __aiter__(self) -> "SlowSource":
        return self

    async def __anext__(self) -> Any:
        self.pulls += 1
        await asyncio.sleep(self._delay)
        if self._fail_at is not None and self._index == self._fail_at:
            raise RuntimeError("synthetic failure")
        if self._index >= len(self._items):
            raise StopAsyncIteration
        item = self._items[self._index]
        self._index += 1
        return item

    async def aclose(self) -> None:
        self.closed = True


class GatedSource:
    """Async iterator fed by the test through an ``asyncio.Queue``.

    ``None`` pushed into the queue ends the stream.
    """

    def __init__(self) -> None:
        self.queue: asyncio.Queue = asyncio.Queue()

    def __aiter__(self) -> "GatedSource":
        return self

    async def __anext__(self) -> Any:
        item = await self.queue.get()
        if item is None:
            raise StopAsyncIteration
        return item

    def feed(self, *items: Any) -> None:
        for item in items:
            self.queue.put_nowait(item)


class FailingWeight:
    """Weight function that raises for one specific element."""

    def __init__(self, bad: Any):
        self.bad = bad
        self.calls = 0

    def __call__(self, item: Any) -> int:
        self.calls += 1
        if item == self.bad:
            raise ValueError(f"cannot weigh {item!r}")
        return 1
