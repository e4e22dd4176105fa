"""Chunked OwnerActs scan over a block range."""

import logging
from dataclasses import replace
from datetime import UTC, datetime

from feetracker.domain.constants import DEFAULT_SCAN_CONFIG, ScanConfig
from feetracker.domain.models.chain import RawLog
from feetracker.domain.models.distributor import DistributorRecord
from feetracker.exceptions import EventDecodeError
from feetracker.infra.rpc.base import ChainProvider
from feetracker.scanner.classifier import is_reward_distributor
from feetracker.scanner.decoder import decode_owner_acts, get_distributor_type
from feetracker.utils.chunking import chunk_block_range
from feetracker.utils.retry import RetryOptions, with_retry

logger = logging.getLogger(__name__)


def timestamp_to_date(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, tz=UTC).strftime("%Y-%m-%d")


def build_log_filter(from_block: int, to_block: int, config: ScanConfig = DEFAULT_SCAN_CONFIG) -> dict:
    return {
        "address": config.precompile_address,
        "topics": config.topics,
        "fromBlock": from_block,
        "toBlock": to_block,
    }


async def parse_distributor_creation(
    provider: ChainProvider,
    log: RawLog,
    config: ScanConfig = DEFAULT_SCAN_CONFIG,
    retry_options: RetryOptions | None = None,
) -> DistributorRecord:
    """Turn one OwnerActs log into a draft record. Decode and block errors are fatal."""
    retry_options = retry_options or RetryOptions()
    decoded = decode_owner_acts(log)

    distributor_type = get_distributor_type(decoded.method, config)
    if distributor_type is None:
        raise EventDecodeError(f"Unknown distributor method signature: {decoded.method}")

    block = await with_retry(
        lambda: provider.get_block(log.block_number),
        replace(retry_options, operation_name=f"scanBlockRange.getBlock({log.block_number})"),
    )
    if block is None:
        raise EventDecodeError(f"Block {log.block_number} not found")

    is_reward = await is_reward_distributor(provider, decoded.distributor_address, config, retry_options)

    return DistributorRecord(
        type=distributor_type,
        block=log.block_number,
        date=timestamp_to_date(block.timestamp),
        tx_hash=log.transaction_hash,
        method=decoded.method,
        owner=decoded.owner,
        event_data=log.data,
        is_reward_distributor=is_reward,
        distributor_address=decoded.distributor_address,
    )


async def scan_block_range(
    provider: ChainProvider,
    from_block: int,
    to_block: int,
    config: ScanConfig = DEFAULT_SCAN_CONFIG,
    retry_options: RetryOptions | None = None,
) -> list[DistributorRecord]:
    """Return one draft record per distributor-creation event in [from_block, to_block].

    Chunks and logs are processed strictly in order; the result is ascending
    by block.
    """
    retry_options = retry_options or RetryOptions()
    chunks = chunk_block_range(from_block, to_block, config.chunk_size)
    logger.info("Scanning blocks %d-%d in %d chunk(s)", from_block, to_block, len(chunks))
    if not config.reward_distributor_bytecode:
        logger.warning(
            "No RewardDistributor bytecode configured (FEETRACKER_REWARD_DISTRIBUTOR_BYTECODE); "
            "every distributor in this scan will be recorded with is_reward_distributor=false"
        )

    records: list[DistributorRecord] = []
    for chunk in chunks:
        log_filter = build_log_filter(chunk.from_block, chunk.to_block, config)
        logs = await with_retry(
            lambda: provider.get_logs(log_filter),
            replace(retry_options, operation_name="scanBlockRange.getLogs"),
        )
        if logs:
            logger.info("Found %d OwnerActs log(s) in blocks %d-%d", len(logs), chunk.from_block, chunk.to_block)
        for log in logs:
            records.append(await parse_distributor_creation(provider, log, config, retry_options))

    records.sort(key=lambda r: r.block)
    return records
