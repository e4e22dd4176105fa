from typing import NamedTuple


class BlockRange(NamedTuple):
    from_block: int
    to_block: int  # inclusive


def chunk_block_range(from_block: int, to_block: int, chunk_size: int) -> list[BlockRange]:
    """Split [from_block, to_block] into contiguous chunks of at most chunk_size blocks."""
    if chunk_size <= 0:
        raise ValueError(f"Invalid chunk size: {chunk_size}. Must be a positive integer")
    if from_block < 0:
        raise ValueError(f"Invalid block range: fromBlock ({from_block}) must be non-negative")
    if from_block > to_block:
        raise ValueError(
            f"Invalid block range: fromBlock ({from_block}) must be less than or equal to toBlock ({to_block})"
        )

    chunks = []
    current = from_block
    while current <= to_block:
        end = min(current + chunk_size - 1, to_block)
        chunks.append(BlockRange(current, end))
        current = end + 1
    return chunks
