"""Tests for DailyGM contract constants and helpers."""

from __future__ import annotations

from web3 import Web3

from daily_gm.chain.contract import (
    ALREADY_GM_TODAY,
    DAILY_GM_ABI,
    ERROR_SELECTORS,
    GM_SENT_TOPIC,
    INVALID_RECIPIENT,
    address_topic,
    revert_name,
)


class TestTopics:
    def test_gm_sent_topic_is_event_signature_hash(self) -> None:
        assert GM_SENT_TOPIC == Web3.to_hex(Web3.keccak(text="GMSent(address,address,uint256)"))
        assert len(GM_SENT_TOPIC) == 66

    def test_address_topic_left_pads(self) -> None:
        topic = address_topic("0xAb5801a7D398351b8bE11C439e05C5B3259aeC9B")
        assert topic == "0x" + "0" * 24 + "ab5801a7d398351b8be11c439e05c5b3259aec9b"
        assert len(topic) == 66


class TestRevertName:
    def test_known_selectors(self) -> None:
        for selector, name in ERROR_SELECTORS.items():
            assert revert_name(selector) == name
            assert revert_name(selector + "00" * 32) == name

    def test_both_errors_mapped(self) -> None:
        assert set(ERROR_SELECTORS.values()) == {ALREADY_GM_TODAY, INVALID_RECIPIENT}

    def test_unknown_or_empty(self) -> None:
        assert revert_name(None) is None
        assert revert_name("") is None
        assert revert_name("0xdeadbeef") is None


class TestABI:
    def test_contract_members_present(self) -> None:
        names = {entry["name"] for entry in DAILY_GM_ABI}
        assert {"streak", "lastGM", "gm", "gmTo", "GMSent"} <= names

    def test_abi_builds_contract(self) -> None:
        contract = Web3().eth.contract(abi=DAILY_GM_ABI)
        assert contract.events.GMSent is not None
