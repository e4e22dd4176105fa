"""OwnerActs event decoding.

Layout of an OwnerActs log:
    topics[0]  event signature
    topics[1]  bytes4 method, right-padded
    topics[2]  address owner, left-padded
    data       abi.encode(bytes calldata), where calldata is the ArbOwner call:
               4-byte selector followed by the abi-encoded distributor address
"""

from typing import NamedTuple

from eth_abi import decode as abi_decode
from eth_abi.exceptions import DecodingError
from eth_utils import to_checksum_address

from feetracker.domain.constants import DEFAULT_SCAN_CONFIG, ScanConfig
from feetracker.domain.enums import DistributorType
from feetracker.domain.models.chain import RawLog
from feetracker.exceptions import EventDecodeError

SELECTOR_SIZE = 4
WORD_SIZE = 32
MIN_CALLDATA_SIZE = SELECTOR_SIZE + WORD_SIZE


class DecodedOwnerActs(NamedTuple):
    method: str
    owner: str
    distributor_address: str


def get_distributor_type(method: str, config: ScanConfig = DEFAULT_SCAN_CONFIG) -> DistributorType | None:
    return config.method_types.get(method.lower())


def _hex_to_bytes(value: str) -> bytes:
    return bytes.fromhex(value.removeprefix("0x"))


def decode_owner_acts(log: RawLog) -> DecodedOwnerActs:
    """Extract selector, owner and distributor address from one OwnerActs log.

    Raises EventDecodeError for any malformed payload; these logs come from a
    fixed filter, so a decode failure means the filter or ABI is wrong.
    """
    if len(log.topics) < 3:
        raise EventDecodeError(
            f"Failed to parse log as OwnerActs event: expected 3 topics, got {len(log.topics)} "
            f"(tx {log.transaction_hash})"
        )

    try:
        (calldata,) = abi_decode(["bytes"], _hex_to_bytes(log.data))
    except (DecodingError, ValueError) as e:
        raise EventDecodeError(f"Failed to decode OwnerActs data in tx {log.transaction_hash}: {e}") from e

    if len(calldata) < MIN_CALLDATA_SIZE:
        raise EventDecodeError(
            f"Event data field too short: expected at least {MIN_CALLDATA_SIZE} bytes, got {len(calldata)} "
            f"(tx {log.transaction_hash})"
        )

    method = "0x" + calldata[:SELECTOR_SIZE].hex()
    try:
        (distributor,) = abi_decode(["address"], calldata[SELECTOR_SIZE:MIN_CALLDATA_SIZE])
    except DecodingError as e:
        raise EventDecodeError(f"Failed to decode distributor address from event data: {e}") from e

    owner = "0x" + log.topics[2].removeprefix("0x")[-40:]
    return DecodedOwnerActs(
        method=method,
        owner=to_checksum_address(owner),
        distributor_address=to_checksum_address(distributor),
    )
