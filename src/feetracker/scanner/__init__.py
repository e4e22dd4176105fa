from feetracker.scanner.block_range import parse_distributor_creation, scan_block_range
from feetracker.scanner.classifier import is_reward_distributor
from feetracker.scanner.decoder import decode_owner_acts, get_distributor_type

__all__ = [
    "decode_owner_acts",
    "get_distributor_type",
    "is_reward_distributor",
    "parse_distributor_creation",
    "scan_block_range",
]
