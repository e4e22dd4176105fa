"""EVM JSON-RPC provider backed by RateLimitedClient."""

import logging

from feetracker.domain.models.chain import BlockHeader, NetworkInfo, RawLog
from feetracker.infra.http.rate_limited_client import RateLimitedClient
from feetracker.infra.rpc.base import ChainProvider

logger = logging.getLogger(__name__)


def _to_block_tag(value: int | str) -> str:
    return hex(value) if isinstance(value, int) else value


class JsonRpcProvider(ChainProvider):
    """Minimal eth_* client. Does not retry; wrap calls with with_retry."""

    def __init__(self, rpc_url: str, http_client: RateLimitedClient) -> None:
        self._rpc_url = rpc_url
        self._http = http_client

    async def _call(self, method: str, params: list) -> object:
        return await self._http.rpc(self._rpc_url, method, params)

    async def get_logs(self, log_filter: dict) -> list[RawLog]:
        params = {**log_filter}
        for key in ("fromBlock", "toBlock"):
            if key in params:
                params[key] = _to_block_tag(params[key])
        result = await self._call("eth_getLogs", [params])
        if not result:
            return []
        logger.debug("eth_getLogs %s..%s returned %d logs", params.get("fromBlock"), params.get("toBlock"), len(result))
        return [
            RawLog(
                address=raw["address"],
                topics=raw.get("topics", []),
                data=raw.get("data", "0x"),
                block_number=int(raw["blockNumber"], 16),
                transaction_hash=raw["transactionHash"],
                log_index=int(raw.get("logIndex", "0x0"), 16),
            )
            for raw in result  # type: ignore[union-attr]
        ]

    async def get_block(self, number: int) -> BlockHeader | None:
        result = await self._call("eth_getBlockByNumber", [hex(number), False])
        if result is None:
            return None
        return BlockHeader(
            number=int(result["number"], 16),  # type: ignore[index]
            timestamp=int(result["timestamp"], 16),  # type: ignore[index]
        )

    async def get_code(self, address: str) -> str:
        result = await self._call("eth_getCode", [address, "latest"])
        return result or "0x"  # type: ignore[return-value]

    async def get_network(self) -> NetworkInfo:
        result = await self._call("eth_chainId", [])
        return NetworkInfo(chain_id=int(result, 16))  # type: ignore[arg-type]

    async def get_balance(self, address: str, block_tag: int | str = "latest") -> int:
        result = await self._call("eth_getBalance", [address, _to_block_tag(block_tag)])
        return int(result, 16)  # type: ignore[arg-type]

    async def get_block_number(self) -> int:
        result = await self._call("eth_blockNumber", [])
        return int(result, 16)  # type: ignore[arg-type]
