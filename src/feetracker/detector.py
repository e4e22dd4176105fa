"""Incremental distributor discovery driven by the block-number index."""

import copy
import logging
from dataclasses import replace
from datetime import date, datetime

from feetracker.domain.constants import DEFAULT_SCAN_CONFIG, ScanConfig
from feetracker.domain.models.documents import DistributorsData
from feetracker.exceptions import NotFoundError
from feetracker.infra.rpc.base import ChainProvider
from feetracker.scanner.block_range import scan_block_range
from feetracker.store.file_manager import FileManager
from feetracker.utils.retry import RetryOptions, with_retry

logger = logging.getLogger(__name__)


class DistributorDetector:
    def __init__(
        self,
        file_manager: FileManager,
        provider: ChainProvider,
        scan_config: ScanConfig = DEFAULT_SCAN_CONFIG,
        retry_options: RetryOptions | None = None,
    ) -> None:
        self.file_manager = file_manager
        self.provider = provider
        self._scan_config = scan_config
        self._retry_options = retry_options or RetryOptions()

    async def detect_distributors(self, end_date: date | datetime | str) -> DistributorsData:
        """Scan from the last scanned block up to the end-of-day block of `end_date`.

        Known distributors are never overwritten. The registry is written once,
        after the whole range has been scanned and merged.
        """
        date_str = end_date if isinstance(end_date, str) else self.file_manager.format_date(end_date)

        block_numbers = self.file_manager.find_block_numbers()
        if block_numbers is None:
            raise NotFoundError("Block numbers data not found")

        end_block = block_numbers["blocks"].get(date_str)
        if end_block is None:
            raise NotFoundError(f"Block number not found for date {date_str}")

        registry = self.file_manager.find_distributors()
        last_scanned = registry["metadata"].get("last_scanned_block", 0) if registry else 0

        if registry is not None and end_block <= last_scanned:
            logger.info("Registry already covers block %d (last scanned %d), nothing to do", end_block, last_scanned)
            return registry

        if registry is None:
            network = await with_retry(
                self.provider.get_network,
                replace(self._retry_options, operation_name="detectDistributors.getNetwork"),
            )
            merged = self.file_manager.empty_distributors(network.chain_id)
        else:
            merged = copy.deepcopy(registry)

        drafts = await scan_block_range(
            self.provider, last_scanned + 1, end_block, self._scan_config, self._retry_options
        )

        distributors = merged["distributors"]
        added = 0
        for draft in drafts:
            if draft.distributor_address in distributors:
                logger.debug("Skipping known distributor %s", draft.distributor_address)
                continue
            distributors[draft.distributor_address] = draft.to_document()
            added += 1

        merged["metadata"]["last_scanned_block"] = end_block
        self.file_manager.write_distributors(merged)
        logger.info(
            "Scanned blocks %d-%d for %s: %d new distributor(s), %d total",
            last_scanned + 1, end_block, date_str, added, len(distributors),
        )
        return merged

