"""Fixed ArbOwner addresses, event signature and method selectors."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from feetracker.config import Settings, settings
from feetracker.domain.enums import DistributorType

# ArbOwner precompile, emitter of OwnerActs
ARBOWNER_PRECOMPILE_ADDRESS = "0x0000000000000000000000000000000000000070"

# keccak256("OwnerActs(bytes4,address,bytes)")
# event OwnerActs(bytes4 indexed method, address indexed owner, bytes data)
OWNER_ACTS_EVENT_SIGNATURE = "0x3c9e6a772755407311e3b35b3ee56799df8f87395941b3a658eee9e08a67ebda"

# ArbOwner setter selectors that register a fee distributor
DISTRIBUTOR_METHODS: Mapping[str, str] = MappingProxyType({
    "L2_BASE_FEE": "0x57f585db",
    "L2_SURPLUS_FEE": "0xfcdde2b4",
    "L1_SURPLUS_FEE": "0x934be07d",
})

METHOD_TO_DISTRIBUTOR_TYPE: Mapping[str, DistributorType] = MappingProxyType({
    selector: DistributorType(name) for name, selector in DISTRIBUTOR_METHODS.items()
})

MAX_BLOCK_RANGE = 10_000  # Blocks per eth_getLogs request
MAX_BLOCK_NUMBER = 1_000_000_000


def pad_selector(selector: str) -> str:
    """Right-pad a 4-byte selector to a 32-byte topic."""
    return "0x" + selector.removeprefix("0x").ljust(64, "0")


@dataclass(frozen=True)
class ScanConfig:
    """Immutable filter and classification tables for one scan."""

    precompile_address: str = ARBOWNER_PRECOMPILE_ADDRESS
    event_signature: str = OWNER_ACTS_EVENT_SIGNATURE
    method_types: Mapping[str, DistributorType] = field(default_factory=lambda: METHOD_TO_DISTRIBUTOR_TYPE)
    reward_distributor_bytecode: str = ""
    chunk_size: int = MAX_BLOCK_RANGE

    @property
    def padded_selectors(self) -> list[str]:
        return [pad_selector(sel) for sel in self.method_types]

    @property
    def topics(self) -> list:
        return [self.event_signature, self.padded_selectors]

    @classmethod
    def from_settings(cls, settings: Settings) -> "ScanConfig":
        return cls(reward_distributor_bytecode=settings.reward_distributor_bytecode)


DEFAULT_SCAN_CONFIG = ScanConfig.from_settings(settings)
