import pytest

from feetracker.utils.chunking import BlockRange, chunk_block_range


class TestChunkBlockRange:
    def test_splits_into_chunks(self):
        chunks = chunk_block_range(0, 25000, 10000)
        assert chunks == [
            BlockRange(0, 9999),
            BlockRange(10000, 19999),
            BlockRange(20000, 25000),
        ]

    def test_exact_multiple(self):
        chunks = chunk_block_range(1, 20000, 10000)
        assert chunks == [BlockRange(1, 10000), BlockRange(10001, 20000)]

    def test_single_block(self):
        assert chunk_block_range(42, 42, 10000) == [BlockRange(42, 42)]

    def test_chunks_are_contiguous_and_cover_range(self):
        chunks = chunk_block_range(3, 100, 7)
        assert chunks[0].from_block == 3
        assert chunks[-1].to_block == 100
        for prev, nxt in zip(chunks, chunks[1:]):
            assert nxt.from_block == prev.to_block + 1
        assert all(c.to_block - c.from_block + 1 <= 7 for c in chunks)

    def test_rejects_inverted_range(self):
        with pytest.raises(ValueError, match=r"fromBlock \(10\) must be less than or equal to toBlock \(5\)"):
            chunk_block_range(10, 5, 100)

    def test_rejects_negative_start(self):
        with pytest.raises(ValueError, match="must be non-negative"):
            chunk_block_range(-1, 5, 100)

    def test_rejects_non_positive_chunk_size(self):
        with pytest.raises(ValueError, match="Invalid chunk size"):
            chunk_block_range(0, 5, 0)
