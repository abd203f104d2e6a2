"""Tests for ChainReader against a scripted JSON-RPC provider."""

from __future__ import annotations

from typing import Any

import pytest
from fakes import ALICE, CONTRACT, ScriptedProvider, uint_word
from web3 import AsyncWeb3

from daily_gm.chain.contract import GM_SENT_TOPIC, address_topic
from daily_gm.chain.reader import ChainReader
from daily_gm.errors.chain_errors import RemoteUnavailableError

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _reader(results: dict[str, Any]) -> tuple[ChainReader, ScriptedProvider]:
    provider = ScriptedProvider({"eth_chainId": "0x14a34", **results})
    reader = ChainReader("http://rpc.test", CONTRACT, w3=AsyncWeb3(provider))
    return reader, provider


def _block(value: Any) -> int:
    return int(value, 16) if isinstance(value, str) else int(value)


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestChainReaderLifecycle:
    async def test_not_connected_raises(self) -> None:
        reader = ChainReader("http://rpc.test", CONTRACT)
        assert reader.is_connected is False
        with pytest.raises(RemoteUnavailableError, match="not connected"):
            await reader.block_number()

    async def test_connect_builds_client(self) -> None:
        reader = ChainReader("http://rpc.test", CONTRACT)
        await reader.connect()
        assert reader.is_connected is True
        await reader.close()
        assert reader.is_connected is False

    def test_contract_address_checksummed(self) -> None:
        reader = ChainReader("http://rpc.test", CONTRACT.lower())
        assert reader.contract_address == AsyncWeb3.to_checksum_address(CONTRACT)


class TestChainReaderCalls:
    async def test_block_number(self) -> None:
        reader, _ = _reader({"eth_blockNumber": "0x1312d00"})
        assert await reader.block_number() == 20_000_000

    async def test_received_logs_filter(self) -> None:
        reader, provider = _reader({"eth_getLogs": []})

        logs = await reader.get_received_logs(ALICE, 18_000_000, 18_099_999)

        assert logs == []
        method, params = provider.requests[-1]
        assert method == "eth_getLogs"
        flt = params[0]
        assert flt["topics"] == [GM_SENT_TOPIC, None, address_topic(ALICE)]
        assert _block(flt["fromBlock"]) == 18_000_000
        assert _block(flt["toBlock"]) == 18_099_999

    async def test_rpc_error_wrapped(self) -> None:
        reader, _ = _reader(
            {"eth_getLogs": {"code": -32005, "message": "block range too large"}}
        )
        with pytest.raises(RemoteUnavailableError, match="block range too large"):
            await reader.get_received_logs(ALICE, 0, 10_000_000)

    async def test_streak_and_last_gm(self) -> None:
        reader, _ = _reader({"eth_call": uint_word(7)})
        assert await reader.streak(ALICE) == 7
        assert await reader.last_gm(ALICE) == 7
