"""End-of-day block discovery feeding the block-number index.

For each UTC date the index stores the last block whose timestamp is strictly
before the following midnight.
"""

import logging
from dataclasses import replace
from datetime import UTC, date, datetime, time, timedelta
from typing import Iterator

from feetracker.domain.models.chain import BlockHeader
from feetracker.domain.models.documents import BlockNumberData
from feetracker.exceptions import BlockFinderError
from feetracker.infra.rpc.base import ChainProvider
from feetracker.store.file_manager import FileManager
from feetracker.utils.retry import RetryOptions, with_retry

logger = logging.getLogger(__name__)

BLOCKS_PER_SECOND = 4
SECONDS_PER_DAY = 86_400
BLOCKS_PER_DAY = BLOCKS_PER_SECOND * SECONDS_PER_DAY
FINALITY_BLOCKS = 1000  # Stay behind the head so indexed blocks are final
DEFAULT_DAYS_TO_SEARCH = 365
MINIMUM_VALID_BLOCK = 1


def _midnight(day: date) -> int:
    return int(datetime.combine(day, time.min, tzinfo=UTC).timestamp())


def _iso(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, tz=UTC).isoformat()


def dates_between(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def find_most_recent_block(day: str, index: BlockNumberData) -> int:
    """Block of the latest indexed date strictly before `day`, or 0."""
    most_recent = 0
    for indexed_day in sorted(index["blocks"]):
        if indexed_day >= day:
            break
        most_recent = index["blocks"][indexed_day]
    return most_recent


def get_search_bounds(day: date, index: BlockNumberData, safe_current_block: int) -> tuple[int, int]:
    lower = find_most_recent_block(day.isoformat(), index)
    days_to_search = DEFAULT_DAYS_TO_SEARCH if lower == 0 else 1
    upper = min(lower + days_to_search * BLOCKS_PER_DAY, safe_current_block)
    return max(MINIMUM_VALID_BLOCK, lower), upper


class BlockFinder:
    def __init__(
        self,
        file_manager: FileManager,
        provider: ChainProvider,
        retry_options: RetryOptions | None = None,
    ) -> None:
        self.file_manager = file_manager
        self.provider = provider
        self._retry_options = retry_options or RetryOptions()

    async def find_blocks_for_date_range(self, start_date: date, end_date: date) -> BlockNumberData:
        """Index every date in [start_date, end_date] whose day has fully finalized.

        The index is persisted after each newly resolved date, so an interrupted
        run keeps its progress.
        """
        if start_date > end_date:
            raise BlockFinderError("Start date must not be after end date", operation="find_blocks_for_date_range")

        existing = self.file_manager.find_block_numbers()
        if existing is not None:
            chain_id = existing["metadata"]["chain_id"]
        else:
            network = await with_retry(self.provider.get_network, self._options("findBlocks.getNetwork"))
            chain_id = network.chain_id
        index: BlockNumberData = {
            "metadata": {"chain_id": chain_id},
            "blocks": dict(existing["blocks"]) if existing else {},
        }

        safe_current_block = await self.get_safe_current_block()
        safe_head = await self._get_block(safe_current_block)

        for day in dates_between(start_date, end_date):
            day_str = day.isoformat()
            if day_str in index["blocks"]:
                continue
            if _midnight(day + timedelta(days=1)) > safe_head.timestamp:
                logger.info("Day %s has not finalized yet (safe head %d), stopping", day_str, safe_current_block)
                break

            lower, upper = get_search_bounds(day, index, safe_current_block)
            try:
                block_number = await self.find_end_of_day_block(day, lower, upper)
            except BlockFinderError:
                raise
            except Exception as e:
                raise BlockFinderError(
                    f"Failed to find block for {day_str}: {e}", operation="find_blocks_for_date_range", date=day_str
                ) from e

            index["blocks"][day_str] = block_number
            self.file_manager.write_block_numbers(index)
            logger.info("End-of-day block for %s: %d", day_str, block_number)

        return index

    async def get_safe_current_block(self) -> int:
        try:
            current = await with_retry(self.provider.get_block_number, self._options("findBlocks.getBlockNumber"))
        except Exception as e:
            raise BlockFinderError(
                f"Failed to get current block\n  Error: {e}\n  Check: Ensure the RPC URL is accessible",
                operation="get_safe_current_block",
            ) from e
        return max(current - FINALITY_BLOCKS, 0)

    async def find_end_of_day_block(self, day: date, lower: int, upper: int) -> int:
        """Binary search for the last block in [lower, upper] before the midnight ending `day`."""
        day_str = day.isoformat()
        if lower > upper:
            raise BlockFinderError(
                "Invalid search bounds: lower bound is greater than upper bound",
                operation="find_end_of_day_block", date=day_str,
            )

        target = _midnight(day + timedelta(days=1))
        day_start = _midnight(day)

        lower_block = await self._get_block(lower)
        upper_block = await self._get_block(upper)

        if lower_block.timestamp >= target:
            raise BlockFinderError(
                f"All blocks in range are after midnight\n"
                f"  Date: {day_str}\n"
                f"  Target: Before {_iso(target)}\n"
                f"  Search bounds: {lower} to {upper}\n"
                f"  Lower block {lower} timestamp: {_iso(lower_block.timestamp)}",
                operation="find_end_of_day_block", date=day_str,
            )
        if upper_block.timestamp < day_start:
            raise BlockFinderError(
                f"All blocks in range are before the target date\n"
                f"  Date: {day_str}\n"
                f"  Search bounds: {lower} to {upper}\n"
                f"  Upper block {upper} timestamp: {_iso(upper_block.timestamp)}",
                operation="find_end_of_day_block", date=day_str,
            )

        last_valid = -1
        low, high = lower, upper
        while low <= high:
            mid = (low + high) // 2
            block = await self._get_block(mid)
            if block.timestamp < target:
                last_valid = mid
                low = mid + 1
            else:
                high = mid - 1

        if last_valid == -1:
            raise BlockFinderError(
                f"Unable to find block before midnight for {day_str}",
                operation="find_end_of_day_block", date=day_str,
            )
        return last_valid

    async def _get_block(self, number: int) -> BlockHeader:
        block = await with_retry(lambda: self.provider.get_block(number), self._options(f"findBlocks.getBlock({number})"))
        if block is None:
            raise BlockFinderError(f"Block {number} not found", operation="get_block")
        return block

    def _options(self, operation_name: str) -> RetryOptions:
        return replace(self._retry_options, operation_name=operation_name)
