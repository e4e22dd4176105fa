"""Domain types for discovered fee distributors."""

from pydantic import BaseModel

from feetracker.domain.enums import DistributorType


class DistributorRecord(BaseModel):
    """A distributor discovered from one OwnerActs event.

    Drafts are produced by the scanner and only persisted when the detector
    adopts them into the registry.
    """

    type: DistributorType
    block: int
    date: str  # YYYY-MM-DD (UTC) of the creation block
    tx_hash: str
    method: str  # 4-byte selector, 0x-prefixed
    owner: str  # checksummed
    event_data: str  # raw log data, hex
    is_reward_distributor: bool
    distributor_address: str  # checksummed

    def to_document(self) -> dict:
        return self.model_dump(mode="json")
