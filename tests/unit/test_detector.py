"""Tests for DistributorDetector (incremental scan and merge)."""

from datetime import date, datetime, UTC
from unittest.mock import AsyncMock, patch

import pytest
from eth_utils import to_checksum_address

from feetracker.detector import DistributorDetector
from feetracker.domain.enums import DistributorType
from feetracker.exceptions import EventDecodeError, NotFoundError, RpcError
from feetracker.utils.retry import RetryOptions

JULY_12_NOON = 1657627200
DISTRIBUTOR = to_checksum_address("0x" + "12" * 20)
OTHER = to_checksum_address("0x" + "34" * 20)


@pytest.fixture()
def indexed_store(file_manager):
    file_manager.write_block_numbers({"metadata": {"chain_id": 42161}, "blocks": {"2022-07-12": 155, "2022-07-13": 400}})
    return file_manager


def _detector(file_manager, provider, scan_config, **kwargs):
    return DistributorDetector(file_manager, provider, scan_config, RetryOptions(max_retries=1), **kwargs)


class TestDetectDistributors:
    async def test_first_scan_creates_registry(self, indexed_store, make_provider, make_log, scan_config):
        provider = make_provider(logs=[make_log("0x57f585db", block_number=152)], blocks={152: JULY_12_NOON})
        detector = _detector(indexed_store, provider, scan_config)

        registry = await detector.detect_distributors("2022-07-12")
        assert registry["metadata"]["last_scanned_block"] == 155
        assert registry["metadata"]["chain_id"] == 42161
        assert list(registry["distributors"]) == [DISTRIBUTOR]
        record = registry["distributors"][DISTRIBUTOR]
        assert record["type"] == DistributorType.L2_BASE_FEE.value
        assert record["date"] == "2022-07-12"
        assert record["block"] == 152
        assert indexed_store.read_distributors() == registry

    async def test_scans_from_block_one_on_fresh_registry(self, indexed_store, make_provider, scan_config):
        provider = make_provider()
        detector = _detector(indexed_store, provider, scan_config)

        await detector.detect_distributors("2022-07-12")
        assert [c[1] for c in provider.calls if c[0] == "get_logs"] == [(1, 155)]

    async def test_accepts_date_and_datetime(self, indexed_store, make_provider, scan_config):
        detector = _detector(indexed_store, make_provider(), scan_config)

        registry = await detector.detect_distributors(date(2022, 7, 12))
        assert registry["metadata"]["last_scanned_block"] == 155
        registry = await detector.detect_distributors(datetime(2022, 7, 13, 8, 0, tzinfo=UTC))
        assert registry["metadata"]["last_scanned_block"] == 400

    async def test_second_run_is_idempotent(self, indexed_store, make_provider, make_log, scan_config):
        provider = make_provider(logs=[make_log(block_number=152)], blocks={152: JULY_12_NOON})
        detector = _detector(indexed_store, provider, scan_config)

        first = await detector.detect_distributors("2022-07-12")
        path = indexed_store.store_dir / "distributors.json"
        written = path.read_text()
        provider.calls.clear()

        second = await detector.detect_distributors("2022-07-12")
        assert second == first
        assert provider.calls == []
        assert path.read_text() == written

    async def test_earlier_date_is_noop(self, indexed_store, make_provider, scan_config):
        provider = make_provider()
        detector = _detector(indexed_store, provider, scan_config)
        await detector.detect_distributors("2022-07-13")
        provider.calls.clear()

        registry = await detector.detect_distributors("2022-07-12")
        assert registry["metadata"]["last_scanned_block"] == 400
        assert provider.calls == []

    async def test_incremental_scan_starts_after_last_block(self, indexed_store, make_provider, make_log, scan_config):
        logs = [
            make_log("0x57f585db", DISTRIBUTOR, block_number=152),
            make_log("0xfcdde2b4", OTHER, block_number=300),
        ]
        provider = make_provider(logs=logs, blocks={152: JULY_12_NOON, 300: JULY_12_NOON + 43200})
        detector = _detector(indexed_store, provider, scan_config)

        await detector.detect_distributors("2022-07-12")
        provider.calls.clear()
        registry = await detector.detect_distributors("2022-07-13")

        assert [c[1] for c in provider.calls if c[0] == "get_logs"] == [(156, 400)]
        assert list(registry["distributors"]) == [DISTRIBUTOR, OTHER]
        assert registry["distributors"][OTHER]["type"] == "L2_SURPLUS_FEE"
        assert registry["distributors"][OTHER]["date"] == "2022-07-13"
        assert registry["metadata"]["last_scanned_block"] == 400

    async def test_existing_record_not_overwritten(self, indexed_store, make_provider, make_log, scan_config):
        provider = make_provider(logs=[make_log("0x57f585db", block_number=152)], blocks={152: JULY_12_NOON})
        detector = _detector(indexed_store, provider, scan_config)
        await detector.detect_distributors("2022-07-12")

        registry = indexed_store.read_distributors()
        registry["distributors"][DISTRIBUTOR]["note"] = "verified manually"
        registry["distributors"][DISTRIBUTOR]["type"] = "L1_BASE_FEE"
        registry["metadata"]["last_scanned_block"] = 151
        (indexed_store.store_dir / "distributors.json").unlink()
        indexed_store.write_distributors(registry)

        merged = await detector.detect_distributors("2022-07-12")
        assert merged["distributors"][DISTRIBUTOR]["note"] == "verified manually"
        assert merged["distributors"][DISTRIBUTOR]["type"] == "L1_BASE_FEE"
        assert merged["metadata"]["last_scanned_block"] == 155

    async def test_first_discovery_wins_within_scan(self, indexed_store, make_provider, make_log, scan_config):
        logs = [
            make_log("0x57f585db", DISTRIBUTOR, block_number=10),
            make_log("0x934be07d", DISTRIBUTOR, block_number=20),
        ]
        provider = make_provider(logs=logs, blocks={10: JULY_12_NOON, 20: JULY_12_NOON})
        detector = _detector(indexed_store, provider, scan_config)

        registry = await detector.detect_distributors("2022-07-12")
        assert registry["distributors"][DISTRIBUTOR]["type"] == "L2_BASE_FEE"
        assert registry["distributors"][DISTRIBUTOR]["block"] == 10

    async def test_existing_chain_id_kept(self, indexed_store, make_provider, scan_config):
        registry = indexed_store.empty_distributors(42170)
        registry["metadata"]["last_scanned_block"] = 100
        indexed_store.write_distributors(registry)
        provider = make_provider(chain_id=42161)

        result = await _detector(indexed_store, provider, scan_config).detect_distributors("2022-07-12")
        assert result["metadata"]["chain_id"] == 42170
        assert ("get_network", None) not in provider.calls

    async def test_new_registry_takes_network_chain_id(self, indexed_store, make_provider, scan_config):
        provider = make_provider(chain_id=42170)

        result = await _detector(indexed_store, provider, scan_config).detect_distributors("2022-07-12")
        assert result["metadata"]["chain_id"] == 42170


class TestDetectDistributorsErrors:
    async def test_missing_index(self, file_manager, make_provider, scan_config):
        detector = _detector(file_manager, make_provider(), scan_config)

        with pytest.raises(NotFoundError, match="Block numbers data not found"):
            await detector.detect_distributors("2022-07-12")

    async def test_missing_date(self, indexed_store, make_provider, scan_config):
        provider = make_provider()
        detector = _detector(indexed_store, provider, scan_config)

        with pytest.raises(NotFoundError, match="Block number not found for date 2022-07-14"):
            await detector.detect_distributors("2022-07-14")
        assert provider.calls == []

    async def test_scan_failure_leaves_store_untouched(self, indexed_store, make_provider, scan_config):
        provider = make_provider()
        provider.get_logs = AsyncMock(side_effect=RpcError("RPC eth_getLogs failed: 503 Service Unavailable", "eth_getLogs", 503))
        detector = _detector(indexed_store, provider, scan_config)

        with pytest.raises(RpcError):
            await detector.detect_distributors("2022-07-12")
        assert indexed_store.find_distributors() is None

    async def test_decode_failure_keeps_previous_registry(self, indexed_store, make_provider, scan_config):
        registry = indexed_store.empty_distributors(42161)
        registry["metadata"]["last_scanned_block"] = 100
        indexed_store.write_distributors(registry)
        detector = _detector(indexed_store, make_provider(), scan_config)

        with patch("feetracker.detector.scan_block_range", AsyncMock(side_effect=EventDecodeError("Block 120 not found"))):
            with pytest.raises(EventDecodeError, match="Block 120 not found"):
                await detector.detect_distributors("2022-07-12")
        assert indexed_store.read_distributors() == registry

    async def test_scan_range_passed_to_scanner(self, indexed_store, make_provider, scan_config):
        provider = make_provider()
        detector = _detector(indexed_store, provider, scan_config)

        with patch("feetracker.detector.scan_block_range", AsyncMock(return_value=[])) as mock_scan:
            await detector.detect_distributors("2022-07-13")
        args = mock_scan.call_args[0]
        assert args[0] is provider
        assert args[1:3] == (1, 400)
