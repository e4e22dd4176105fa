import logging
from dataclasses import replace

from feetracker.domain.constants import DEFAULT_SCAN_CONFIG, ScanConfig
from feetracker.infra.rpc.base import ChainProvider
from feetracker.utils.retry import RetryOptions, with_retry

logger = logging.getLogger(__name__)


async def is_reward_distributor(
    provider: ChainProvider,
    address: str,
    config: ScanConfig = DEFAULT_SCAN_CONFIG,
    retry_options: RetryOptions | None = None,
) -> bool:
    """True iff the code at `address` is byte-identical to the RewardDistributor runtime.

    Never raises: lookup failures are logged and reported as False.
    """
    if not config.reward_distributor_bytecode:
        return False

    options = replace(retry_options or RetryOptions(), operation_name=f"isRewardDistributor.getCode({address})")
    try:
        code = await with_retry(lambda: provider.get_code(address), options)
        return bytes.fromhex(code.removeprefix("0x")) == bytes.fromhex(
            config.reward_distributor_bytecode.removeprefix("0x")
        )
    except Exception as e:
        logger.warning("Bytecode check failed for %s, treating as plain distributor: %s", address, e)
        return False
