from feetracker.domain.enums.chain import ChainId
from feetracker.domain.enums.distributor import DistributorType

__all__ = [
    "ChainId",
    "DistributorType",
]
