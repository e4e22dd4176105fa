from enum import Enum


class DistributorType(str, Enum):
    """Fee revenue category a distributor was registered for."""

    L2_BASE_FEE = "L2_BASE_FEE"
    L2_SURPLUS_FEE = "L2_SURPLUS_FEE"
    L1_SURPLUS_FEE = "L1_SURPLUS_FEE"
    L1_BASE_FEE = "L1_BASE_FEE"
