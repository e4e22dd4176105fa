"""Shapes of the JSON documents owned by the store."""

from typing import TypedDict


class BlockNumberMetadata(TypedDict):
    chain_id: int


class BlockNumberData(TypedDict):
    metadata: BlockNumberMetadata
    blocks: dict[str, int]


class DistributorsMetadata(TypedDict):
    chain_id: int
    precompile_address: str
    last_scanned_block: int


class DistributorsData(TypedDict):
    metadata: DistributorsMetadata
    distributors: dict[str, dict]


class DistributorFileMetadata(TypedDict):
    chain_id: int
    reward_distributor: str


class DailyBalance(TypedDict):
    block_number: int
    balance_wei: str


class BalanceData(TypedDict):
    metadata: DistributorFileMetadata
    balances: dict[str, DailyBalance]


class OutflowEvent(TypedDict):
    recipient: str
    value_wei: str
    tx_hash: str


class DailyOutflow(TypedDict):
    block_number: int
    total_outflow_wei: str
    events: list[OutflowEvent]


class OutflowData(TypedDict):
    metadata: DistributorFileMetadata
    outflows: dict[str, DailyOutflow]
