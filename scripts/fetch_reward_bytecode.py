"""Print the deployed runtime bytecode of a known RewardDistributor.

Usage:
    PYTHONPATH=src python scripts/fetch_reward_bytecode.py 0xRewardDistributorAddress >> .env

Output is a FEETRACKER_REWARD_DISTRIBUTOR_BYTECODE=... line for the classifier.
"""

import asyncio
import sys


async def main(address: str) -> None:
    from feetracker.config import settings
    from feetracker.infra.http.rate_limited_client import RateLimitedClient
    from feetracker.infra.rpc.provider import JsonRpcProvider
    from feetracker.store.file_manager import FileManager
    from feetracker.utils.retry import RetryOptions, with_retry

    checksummed = FileManager.validate_address(address)
    async with RateLimitedClient(rate_per_second=settings.rpc_rate_per_second) as http:
        provider = JsonRpcProvider(settings.rpc_url, http)
        code = await with_retry(
            lambda: provider.get_code(checksummed),
            RetryOptions(operation_name=f"getCode({checksummed})"),
        )
    if code in ("", "0x"):
        print(f"No code deployed at {checksummed}", file=sys.stderr)
        sys.exit(1)
    print(f"FEETRACKER_REWARD_DISTRIBUTOR_BYTECODE={code}")


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(1)
    asyncio.run(main(sys.argv[1]))
