"""JSON file store for block numbers, distributors, balances and outflows.

Layout under the store directory:
    block_numbers.json
    distributors.json
    distributors/<ChecksumAddress>/balances.json
    distributors/<ChecksumAddress>/outflows.json
"""

import json
import logging
import os
from datetime import UTC, date, datetime
from pathlib import Path

from feetracker.domain.constants import ARBOWNER_PRECOMPILE_ADDRESS
from feetracker.domain.enums import ChainId
from feetracker.domain.models.documents import BalanceData, BlockNumberData, DistributorsData, OutflowData
from feetracker.exceptions import StoreError
from feetracker.store import validation

logger = logging.getLogger(__name__)

BLOCK_NUMBERS_FILE = "block_numbers.json"
DISTRIBUTORS_FILE = "distributors.json"
DISTRIBUTORS_DIR = "distributors"
BALANCES_FILE = "balances.json"
OUTFLOWS_FILE = "outflows.json"
JSON_INDENT = 2


class FileManager:
    """Validated read/write access to the on-disk store.

    Reads of absent files return the canonical empty document; the find_*
    variants return None instead so callers can tell absence apart.
    """

    def __init__(self, store_dir: str | Path = "store", chain_id: int = ChainId.ARBITRUM_ONE) -> None:
        self._store_dir = Path(store_dir)
        self._chain_id = int(chain_id)

    @property
    def store_dir(self) -> Path:
        return self._store_dir

    def ensure_store_directory(self) -> None:
        self._store_dir.mkdir(parents=True, exist_ok=True)

    # --- block numbers ---

    def find_block_numbers(self) -> BlockNumberData | None:
        return self._read_json(self._store_dir / BLOCK_NUMBERS_FILE)  # type: ignore[return-value]

    def read_block_numbers(self) -> BlockNumberData:
        return self.find_block_numbers() or {"metadata": {"chain_id": self._chain_id}, "blocks": {}}

    def write_block_numbers(self, data: BlockNumberData) -> None:
        validation.validate_block_number_data(data)
        self._write_json(self._store_dir / BLOCK_NUMBERS_FILE, data)

    # --- distributors registry ---

    def find_distributors(self) -> DistributorsData | None:
        return self._read_json(self._store_dir / DISTRIBUTORS_FILE)  # type: ignore[return-value]

    def read_distributors(self) -> DistributorsData:
        return self.find_distributors() or self.empty_distributors(self._chain_id)

    @staticmethod
    def empty_distributors(chain_id: int) -> DistributorsData:
        return {
            "metadata": {
                "chain_id": int(chain_id),
                "precompile_address": ARBOWNER_PRECOMPILE_ADDRESS,
                "last_scanned_block": 0,
            },
            "distributors": {},
        }

    def write_distributors(self, data: DistributorsData) -> None:
        existing = self.find_distributors()
        previous = existing["metadata"].get("last_scanned_block") if existing else None
        validation.validate_distributors_data(data, previous_last_scanned_block=previous)
        self._write_json(self._store_dir / DISTRIBUTORS_FILE, data)

    # --- per-distributor series ---

    def distributor_dir(self, address: str) -> Path:
        return self._store_dir / DISTRIBUTORS_DIR / self.validate_address(address)

    def read_distributor_balances(self, address: str) -> BalanceData:
        checksummed = self.validate_address(address)
        data = self._read_json(self.distributor_dir(checksummed) / BALANCES_FILE)
        if data is None:
            return {"metadata": {"chain_id": self._chain_id, "reward_distributor": checksummed}, "balances": {}}
        return data  # type: ignore[return-value]

    def write_distributor_balances(self, address: str, data: BalanceData) -> None:
        checksummed = self.validate_address(address)
        validation.validate_balance_data(checksummed, data)
        self._write_json(self.distributor_dir(checksummed) / BALANCES_FILE, data)

    def read_distributor_outflows(self, address: str) -> OutflowData:
        checksummed = self.validate_address(address)
        data = self._read_json(self.distributor_dir(checksummed) / OUTFLOWS_FILE)
        if data is None:
            return {"metadata": {"chain_id": self._chain_id, "reward_distributor": checksummed}, "outflows": {}}
        return data  # type: ignore[return-value]

    def write_distributor_outflows(self, address: str, data: OutflowData) -> None:
        checksummed = self.validate_address(address)
        validation.validate_outflow_data(checksummed, data)
        self._write_json(self.distributor_dir(checksummed) / OUTFLOWS_FILE, data)

    # --- helpers ---

    @staticmethod
    def validate_address(address: str) -> str:
        """Checksum-normalize an address used to name a store path."""
        return validation.normalize_address(address)

    @staticmethod
    def format_date(value: date | datetime) -> str:
        """UTC calendar date of `value` as YYYY-MM-DD. Naive datetimes are taken as UTC."""
        if isinstance(value, datetime):
            if value.tzinfo is not None:
                value = value.astimezone(UTC)
            return value.strftime("%Y-%m-%d")
        return value.isoformat()

    def _read_json(self, path: Path) -> dict | None:
        if not path.exists():
            return None
        try:
            with path.open(encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise StoreError(f"Failed to parse {path}: {e}", operation="read", path=str(path)) from e
        except OSError as e:
            raise StoreError(f"Failed to read {path}: {e}", operation="read", path=str(path)) from e

    def _write_json(self, path: Path, data: dict) -> None:
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as f:
                json.dump(data, f, indent=JSON_INDENT)
            os.replace(tmp_path, path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise StoreError(f"Failed to write {path}: {e}", operation="write", path=str(path)) from e
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise
        logger.debug("Wrote %s", path)
