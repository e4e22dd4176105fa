"""Tests for OwnerActs log decoding."""

import pytest
from eth_abi import encode as abi_encode
from eth_utils import to_checksum_address

from feetracker.domain.constants import ScanConfig
from feetracker.domain.enums import DistributorType
from feetracker.exceptions import EventDecodeError
from feetracker.scanner.decoder import decode_owner_acts, get_distributor_type

DISTRIBUTOR = "0x" + "12" * 20
OWNER = "0x" + "ab" * 20


def _with_data(log, calldata: bytes):
    return log.model_copy(update={"data": "0x" + abi_encode(["bytes"], [calldata]).hex()})


class TestDecodeOwnerActs:
    def test_decodes_l2_base_fee(self, make_log):
        decoded = decode_owner_acts(make_log("0x57f585db", DISTRIBUTOR, OWNER))
        assert decoded.method == "0x57f585db"
        assert decoded.distributor_address == to_checksum_address(DISTRIBUTOR)
        assert decoded.owner == to_checksum_address(OWNER)

    def test_decodes_each_known_selector(self, make_log):
        for selector in ("0x57f585db", "0xfcdde2b4", "0x934be07d"):
            assert decode_owner_acts(make_log(selector)).method == selector

    def test_too_few_topics(self, make_log):
        log = make_log()
        log = log.model_copy(update={"topics": log.topics[:2]})
        with pytest.raises(EventDecodeError, match="Failed to parse log as OwnerActs event"):
            decode_owner_acts(log)

    def test_calldata_too_short(self, make_log):
        log = _with_data(make_log(), bytes.fromhex("57f585db") + b"\x00" * 10)
        with pytest.raises(EventDecodeError, match="expected at least 36 bytes, got 14"):
            decode_owner_acts(log)

    def test_undecodable_data(self, make_log):
        log = make_log().model_copy(update={"data": "0x1234"})
        with pytest.raises(EventDecodeError, match="Failed to decode OwnerActs data"):
            decode_owner_acts(log)

    def test_non_hex_data(self, make_log):
        log = make_log().model_copy(update={"data": "0xzz"})
        with pytest.raises(EventDecodeError):
            decode_owner_acts(log)

    def test_ignores_trailing_calldata(self, make_log):
        calldata = bytes.fromhex("57f585db") + abi_encode(["address"], [DISTRIBUTOR]) + b"\x00" * 32
        decoded = decode_owner_acts(_with_data(make_log(), calldata))
        assert decoded.distributor_address == to_checksum_address(DISTRIBUTOR)


class TestGetDistributorType:
    def test_known_selectors(self):
        assert get_distributor_type("0x57f585db") == DistributorType.L2_BASE_FEE
        assert get_distributor_type("0xfcdde2b4") == DistributorType.L2_SURPLUS_FEE
        assert get_distributor_type("0x934be07d") == DistributorType.L1_SURPLUS_FEE

    def test_case_insensitive(self):
        assert get_distributor_type("0x57F585DB") == DistributorType.L2_BASE_FEE

    def test_unknown_selector(self):
        assert get_distributor_type("0xdeadbeef") is None

    def test_custom_table(self):
        config = ScanConfig(method_types={"0xdeadbeef": DistributorType.L1_BASE_FEE})
        assert get_distributor_type("0xdeadbeef", config) == DistributorType.L1_BASE_FEE
        assert get_distributor_type("0x57f585db", config) is None
