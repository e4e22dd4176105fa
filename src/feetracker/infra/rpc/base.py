"""Capability interface the scanner, detector and block finder consume."""

from abc import ABC, abstractmethod

from feetracker.domain.models.chain import BlockHeader, NetworkInfo, RawLog


class ChainProvider(ABC):
    """Read-only view of an EVM chain."""

    @abstractmethod
    async def get_logs(self, log_filter: dict) -> list[RawLog]:
        """Return logs matching an eth_getLogs filter (fromBlock/toBlock as ints)."""

    @abstractmethod
    async def get_block(self, number: int) -> BlockHeader | None:
        """Return the block header, or None if the node does not know the block."""

    @abstractmethod
    async def get_code(self, address: str) -> str:
        """Return deployed bytecode as 0x-prefixed hex ("0x" for EOAs)."""

    @abstractmethod
    async def get_network(self) -> NetworkInfo: ...

    @abstractmethod
    async def get_balance(self, address: str, block_tag: int | str = "latest") -> int: ...

    @abstractmethod
    async def get_block_number(self) -> int: ...
