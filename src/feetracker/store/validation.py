"""Write-time validation for store documents.

Every check raises ValidationError on the first violation. Error wording is
relied upon by downstream tooling, so keep messages stable.
"""

import re
from datetime import date as date_cls
from typing import Iterable

from eth_utils import is_hex_address, to_checksum_address

from feetracker.domain.constants import MAX_BLOCK_NUMBER
from feetracker.domain.enums import DistributorType
from feetracker.exceptions import ValidationError

DATE_FORMAT_REGEX = re.compile(r"[0-9]{4}-(0[1-9]|1[0-2])-(0[1-9]|[12][0-9]|3[01])")
TX_HASH_REGEX = re.compile(r"0x[0-9a-fA-F]{64}")
SELECTOR_REGEX = re.compile(r"0x[0-9a-fA-F]{8}")
HEX_DATA_REGEX = re.compile(r"0x(?:[0-9a-fA-F]{2})*")
DIGITS_REGEX = re.compile(r"[0-9]+")
SCIENTIFIC_REGEX = re.compile(r"[+-]?[0-9]+(\.[0-9]*)?[eE][+-]?[0-9]+")

WEI_EXAMPLE = 'Decimal string (e.g., "1230000000000000000000")'

DISTRIBUTOR_RECORD_FIELDS = (
    "type",
    "block",
    "date",
    "tx_hash",
    "method",
    "owner",
    "event_data",
    "is_reward_distributor",
    "distributor_address",
)


def _detail_message(headline: str, value: object, expected: str, field: str | None, date: str | None) -> str:
    lines = [headline]
    if field:
        lines.append(f"  Field: {field}")
    if date:
        lines.append(f"  Date: {date}")
    lines.append(f"  Value: {value}")
    lines.append(f"  Expected: {expected}")
    return "\n".join(lines) + "\n"


def require_fields(obj: object, fields: Iterable[str], path: str) -> None:
    if not isinstance(obj, dict):
        raise ValidationError(f"Expected an object at {path}, got: {type(obj).__name__}", path, obj, "object")
    for name in fields:
        if name not in obj:
            raise ValidationError(f"Missing required field: {path}.{name}", f"{path}.{name}", None, "present")


def validate_date(value: object, field: str = "date") -> None:
    if not isinstance(value, str) or not DATE_FORMAT_REGEX.fullmatch(value):
        raise ValidationError(f"Invalid date format: {value}. Expected YYYY-MM-DD", field, value, "YYYY-MM-DD")
    try:
        date_cls.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Invalid calendar date: {value}", field, value, "calendar date") from None


def validate_block_number(value: object, field: str = "block_number") -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(
            f"Block number must be a positive integer, got: {value}", field, value, "positive integer"
        )
    if value > MAX_BLOCK_NUMBER:
        raise ValidationError(
            f"Block number exceeds reasonable maximum: {value} (max: {MAX_BLOCK_NUMBER})",
            field, value, f"<= {MAX_BLOCK_NUMBER}",
        )


def normalize_address(address: object, field: str = "address") -> str:
    """Checksum a well-formed address regardless of its casing."""
    if not isinstance(address, str) or not address.startswith("0x") or not is_hex_address(address):
        raise ValidationError(
            f"Invalid address format: {address}. Expected 0x followed by 40 hexadecimal characters",
            field, address, "0x + 40 hex characters",
        )
    return to_checksum_address(address)


def validate_checksum_address(address: object, field: str = "address") -> None:
    """Reject addresses that are not already in EIP-55 form."""
    checksummed = normalize_address(address, field)
    if address != checksummed:
        raise ValidationError(
            f"Invalid address checksum in {field}: {address}. Expected {checksummed}",
            field, address, checksummed,
        )


def validate_wei_value(value: object, field: str | None = None, date: str | None = None) -> None:
    if isinstance(value, str) and DIGITS_REGEX.fullmatch(value):
        return

    if isinstance(value, str) and SCIENTIFIC_REGEX.fullmatch(value):
        headline, expected = "Invalid numeric format", WEI_EXAMPLE
    elif isinstance(value, str) and "." in value:
        headline, expected = "Invalid wei value", "Integer string (no decimal points)"
    elif isinstance(value, str) and value.startswith("-"):
        headline, expected = "Invalid wei value", "Non-negative decimal string"
    else:
        headline, expected = "Invalid wei value", "Decimal string containing only digits"
    raise ValidationError(_detail_message(headline, value, expected, field, date), field or "wei", value, expected)


def validate_transaction_hash(value: object, field: str = "tx_hash") -> None:
    if not isinstance(value, str) or not TX_HASH_REGEX.fullmatch(value):
        raise ValidationError(
            f"Invalid transaction hash format: {value}. Expected 0x followed by 64 hexadecimal characters",
            field, value, "0x + 64 hex characters",
        )


def validate_enum_value(value: object, enum_name: str, valid_values: list[str], field: str = "type") -> None:
    if value not in valid_values:
        raise ValidationError(
            f"Invalid {enum_name} value: {value}. Valid values are: {', '.join(valid_values)}",
            field, value, ", ".join(valid_values),
        )


def _validate_chain_id(value: object, field: str = "metadata.chain_id") -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"Chain id must be a positive integer, got: {value}", field, value, "positive integer")


def validate_block_number_data(data: object) -> None:
    require_fields(data, ("metadata", "blocks"), "block_numbers")
    require_fields(data["metadata"], ("chain_id",), "block_numbers.metadata")
    _validate_chain_id(data["metadata"]["chain_id"])
    blocks = data["blocks"]
    if not isinstance(blocks, dict):
        raise ValidationError("blocks must be an object keyed by date", "blocks", blocks, "object")
    for day, block_number in blocks.items():
        validate_date(day, "blocks")
        validate_block_number(block_number, f"blocks.{day}")


def validate_distributor_record(key: str, record: object) -> None:
    path = f"distributors.{key}"
    require_fields(record, DISTRIBUTOR_RECORD_FIELDS, path)

    validate_enum_value(
        record["type"], "DistributorType", [t.value for t in DistributorType], f"{path}.type"
    )
    validate_block_number(record["block"], f"{path}.block")
    validate_date(record["date"], f"{path}.date")
    validate_transaction_hash(record["tx_hash"], f"{path}.tx_hash")
    method = record["method"]
    if not isinstance(method, str) or not SELECTOR_REGEX.fullmatch(method):
        raise ValidationError(
            f"Invalid method selector format: {method}. Expected 0x followed by 8 hexadecimal characters",
            f"{path}.method", method, "0x + 8 hex characters",
        )
    validate_checksum_address(record["owner"], f"{path}.owner")
    event_data = record["event_data"]
    if not isinstance(event_data, str) or not HEX_DATA_REGEX.fullmatch(event_data):
        raise ValidationError(
            f"Invalid event data: {event_data}. Expected 0x-prefixed hex string",
            f"{path}.event_data", event_data, "0x-prefixed hex",
        )
    if not isinstance(record["is_reward_distributor"], bool):
        raise ValidationError(
            f"is_reward_distributor must be a boolean, got: {record['is_reward_distributor']}",
            f"{path}.is_reward_distributor", record["is_reward_distributor"], "boolean",
        )
    validate_checksum_address(record["distributor_address"], f"{path}.distributor_address")


def validate_distributors_data(data: object, previous_last_scanned_block: int | None = None) -> None:
    require_fields(data, ("metadata", "distributors"), "distributors_file")
    metadata = data["metadata"]
    require_fields(metadata, ("chain_id", "precompile_address", "last_scanned_block"), "metadata")
    _validate_chain_id(metadata["chain_id"])
    validate_checksum_address(metadata["precompile_address"], "metadata.precompile_address")

    last_scanned = metadata["last_scanned_block"]
    if last_scanned != 0:
        validate_block_number(last_scanned, "metadata.last_scanned_block")
    if previous_last_scanned_block is not None and last_scanned < previous_last_scanned_block:
        raise ValidationError(
            f"last_scanned_block cannot decrease: {last_scanned} < {previous_last_scanned_block}",
            "metadata.last_scanned_block", last_scanned, f">= {previous_last_scanned_block}",
        )

    distributors = data["distributors"]
    if not isinstance(distributors, dict):
        raise ValidationError("distributors must be an object keyed by address", "distributors", distributors, "object")
    for key, record in distributors.items():
        validate_checksum_address(key, "distributors")
        validate_distributor_record(key, record)


def _validate_file_metadata(address: str, data: object, body: str, kind: str) -> None:
    require_fields(data, ("metadata", body), kind)
    metadata = data["metadata"]
    require_fields(metadata, ("chain_id", "reward_distributor"), f"{kind}.metadata")
    _validate_chain_id(metadata["chain_id"])
    declared = metadata["reward_distributor"]
    validate_checksum_address(declared, "metadata.reward_distributor")
    if declared != address:
        raise ValidationError(
            _detail_message("Distributor address mismatch", declared, address, "metadata.reward_distributor", None),
            "metadata.reward_distributor", declared, address,
        )
    if not isinstance(data[body], dict):
        raise ValidationError(f"{body} must be an object keyed by date", body, data[body], "object")


def validate_balance_data(address: str, data: object) -> None:
    _validate_file_metadata(address, data, "balances", "balances_file")
    for day, entry in data["balances"].items():
        validate_date(day, "balances")
        require_fields(entry, ("block_number", "balance_wei"), f"balances.{day}")
        validate_block_number(entry["block_number"], f"balances.{day}.block_number")
        validate_wei_value(entry["balance_wei"], "balance_wei", day)


def validate_outflow_data(address: str, data: object) -> None:
    _validate_file_metadata(address, data, "outflows", "outflows_file")
    for day, entry in data["outflows"].items():
        validate_date(day, "outflows")
        require_fields(entry, ("block_number", "total_outflow_wei", "events"), f"outflows.{day}")
        validate_block_number(entry["block_number"], f"outflows.{day}.block_number")
        validate_wei_value(entry["total_outflow_wei"], "total_outflow_wei", day)

        events = entry["events"]
        if not isinstance(events, list):
            raise ValidationError(f"events must be a list, got: {events}", f"outflows.{day}.events", events, "list")
        total = 0
        for i, event in enumerate(events):
            path = f"outflows.{day}.events[{i}]"
            require_fields(event, ("recipient", "value_wei", "tx_hash"), path)
            validate_checksum_address(event["recipient"], f"{path}.recipient")
            validate_wei_value(event["value_wei"], "event.value_wei", day)
            validate_transaction_hash(event["tx_hash"], f"{path}.tx_hash")
            total += int(event["value_wei"])

        if int(entry["total_outflow_wei"]) != total:
            raise ValidationError(
                _detail_message(
                    "Total outflow mismatch",
                    entry["total_outflow_wei"],
                    f"{total} (sum of event value_wei)",
                    "total_outflow_wei",
                    day,
                ),
                "total_outflow_wei", entry["total_outflow_wei"], str(total),
            )
