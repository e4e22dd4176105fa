"""Normalized shapes returned by a ChainProvider."""

from pydantic import BaseModel


class RawLog(BaseModel):
    """An undecoded event log as returned by eth_getLogs."""

    address: str
    topics: list[str]
    data: str  # hex with 0x
    block_number: int
    transaction_hash: str
    log_index: int = 0


class BlockHeader(BaseModel):
    number: int
    timestamp: int  # unix seconds


class NetworkInfo(BaseModel):
    chain_id: int
