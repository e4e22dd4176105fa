from enum import IntEnum


class ChainId(IntEnum):
    """Arbitrum networks the tracker knows about."""

    ARBITRUM_ONE = 42161
    ARBITRUM_NOVA = 42170
