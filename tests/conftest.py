from typing import Callable

import pytest
from eth_abi import encode as abi_encode

from feetracker.domain.constants import OWNER_ACTS_EVENT_SIGNATURE, ScanConfig, pad_selector
from feetracker.domain.models.chain import BlockHeader, NetworkInfo, RawLog
from feetracker.infra.rpc.base import ChainProvider
from feetracker.store.file_manager import FileManager

OWNER = "0x" + "ab" * 20
DISTRIBUTOR = "0x" + "12" * 20
TX_HASH = "0x" + "aa" * 32


def make_owner_acts_log(
    selector: str = "0x57f585db",
    distributor: str = DISTRIBUTOR,
    owner: str = OWNER,
    block_number: int = 152,
    tx_hash: str = TX_HASH,
    log_index: int = 0,
) -> RawLog:
    """Build an OwnerActs log the way ArbOwner emits it for a fee-account setter."""
    calldata = bytes.fromhex(selector[2:]) + abi_encode(["address"], [distributor.lower()])
    data = abi_encode(["bytes"], [calldata])
    return RawLog(
        address="0x0000000000000000000000000000000000000070",
        topics=[
            OWNER_ACTS_EVENT_SIGNATURE,
            pad_selector(selector),
            "0x" + "0" * 24 + owner[2:].lower(),
        ],
        data="0x" + data.hex(),
        block_number=block_number,
        transaction_hash=tx_hash,
        log_index=log_index,
    )


class FakeChainProvider(ChainProvider):
    """In-memory chain. Blocks come from `blocks` or, failing that, `block_time`."""

    def __init__(
        self,
        logs: list[RawLog] | None = None,
        blocks: dict[int, int] | None = None,
        block_time: Callable[[int], int] | None = None,
        code: dict[str, str] | None = None,
        chain_id: int = 42161,
        head: int = 0,
    ) -> None:
        self.logs = list(logs or [])
        self.blocks = dict(blocks or {})
        self.block_time = block_time
        self.code = dict(code or {})
        self.chain_id = chain_id
        self.head = head
        self.calls: list[tuple[str, object]] = []

    async def get_logs(self, log_filter: dict) -> list[RawLog]:
        self.calls.append(("get_logs", (log_filter["fromBlock"], log_filter["toBlock"])))
        return [
            log for log in self.logs
            if log_filter["fromBlock"] <= log.block_number <= log_filter["toBlock"]
        ]

    async def get_block(self, number: int) -> BlockHeader | None:
        self.calls.append(("get_block", number))
        if number in self.blocks:
            return BlockHeader(number=number, timestamp=self.blocks[number])
        if self.block_time is not None and 0 <= number <= self.head:
            return BlockHeader(number=number, timestamp=self.block_time(number))
        return None

    async def get_code(self, address: str) -> str:
        self.calls.append(("get_code", address))
        return self.code.get(address, "0x")

    async def get_network(self) -> NetworkInfo:
        self.calls.append(("get_network", None))
        return NetworkInfo(chain_id=self.chain_id)

    async def get_balance(self, address: str, block_tag: int | str = "latest") -> int:
        self.calls.append(("get_balance", (address, block_tag)))
        return 0

    async def get_block_number(self) -> int:
        self.calls.append(("get_block_number", None))
        return self.head


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def scan_config() -> ScanConfig:
    return ScanConfig()


@pytest.fixture()
def file_manager(tmp_path) -> FileManager:
    return FileManager(store_dir=tmp_path / "store")


@pytest.fixture()
def make_log():
    return make_owner_acts_log


@pytest.fixture()
def make_provider():
    return FakeChainProvider
