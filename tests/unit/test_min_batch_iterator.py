"""Tests for the blocking ``MinBatchIterator``."""

import pytest

from minbatch import MinBatchIterator, WeightedBatch, iter_min_batch
from tests.fixtures.common_mocks import FailingWeight, make_blocks, txs_count


@pytest.mark.unit
class TestMinBatchIterator:
    """The synchronous adapter applies the same policy to plain iterables."""

    def test_blocks_of_transactions(self, blocks_1_to_4):
        batches = list(iter_min_batch(blocks_1_to_4, 3, txs_count))

        assert [[b.name for b in batch] for batch in batches] == [["a", "b"], ["c"], ["d"]]

    def test_min_optimal_mode(self):
        batches = list(iter_min_batch(range(8), 100, int, optimal_batch_size=3))

        assert batches == [[0, 1, 2], [3, 4, 5], [6, 7]]

    def test_with_weight(self):
        blocks = make_blocks([1, 2, 3, 1, 1, 1, 1])

        batches = list(iter_min_batch(blocks, 3, txs_count, with_weight=True))

        assert all(isinstance(batch, WeightedBatch) for batch in batches)
        assert [batch.weight for batch in batches] == [3, 3, 3, 1]

    def test_generator_source(self):
        def numbers():
            yield from range(5)

        assert list(MinBatchIterator(numbers(), 2)) == [[0, 1], [2, 3], [4]]

    def test_empty_iterable(self):
        iterator = MinBatchIterator([], 2)

        assert list(iterator) == []
        assert iterator.is_terminated

    def test_stays_exhausted(self):
        iterator = MinBatchIterator([1], 2)

        assert next(iterator) == [1]
        with pytest.raises(StopIteration):
            next(iterator)
        with pytest.raises(StopIteration):
            next(iterator)

    def test_inner_failure_discards_pending(self):
        def numbers():
            yield 1
            raise OSError("disk gone")

        iterator = MinBatchIterator(numbers(), 5)

        with pytest.raises(OSError):
            next(iterator)

        assert iterator.is_terminated
        assert iterator.get_stats()["elements_dropped"] == 1
        assert list(iterator) == []

    def test_weight_failure(self):
        iterator = MinBatchIterator(["a", "bad"], 5, FailingWeight(bad="bad"))

        with pytest.raises(ValueError):
            next(iterator)

        assert iterator.is_terminated

    def test_close_closes_generator(self):
        def numbers():
            yield from range(10)

        gen = numbers()
        iterator = MinBatchIterator(gen, 3)
        next(iterator)

        iterator.close()

        assert iterator.is_terminated
        assert list(gen) == []
