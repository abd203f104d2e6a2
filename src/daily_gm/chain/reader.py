"""Read-only access to the DailyGM contract over JSON-RPC.

Wraps a web3.py ``AsyncWeb3`` instance and exposes the four calls the rest
of the package needs: chain height, ``GMSent`` logs filtered by recipient,
``streak(address)`` and ``lastGM(address)``. Every RPC failure is converted
to :class:`~daily_gm.errors.RemoteUnavailableError`.
"""

from __future__ import annotations

import logging
from typing import Any

from web3 import AsyncHTTPProvider, AsyncWeb3

from daily_gm.chain.contract import DAILY_GM_ABI, GM_SENT_TOPIC, address_topic
from daily_gm.errors.chain_errors import RemoteUnavailableError

logger = logging.getLogger(__name__)


class ChainReader:
    """Async JSON-RPC reader for one chain and one contract.

    Usage::

        reader = ChainReader("https://sepolia.base.org", "0xContract...")
        await reader.connect()
        try:
            height = await reader.block_number()
            logs = await reader.get_received_logs(addr, 18_000_000, height)
        finally:
            await reader.close()
    """

    def __init__(
        self,
        rpc_url: str,
        contract_address: str,
        *,
        timeout: float = 30.0,
        w3: AsyncWeb3 | None = None,
    ) -> None:
        """Initialize the reader.

        Args:
            rpc_url: JSON-RPC endpoint of the chain.
            contract_address: Deployed DailyGM contract address.
            timeout: Per-request timeout in seconds.
            w3: Pre-built ``AsyncWeb3`` (tests inject one with a fake provider).
        """
        self._rpc_url = rpc_url
        self._contract_address = AsyncWeb3.to_checksum_address(contract_address)
        self._timeout = timeout
        self._w3 = w3

    async def connect(self) -> None:  # noqa: ASYNC910
        """Create the underlying web3 client."""
        if self._w3 is not None:
            return
        provider = AsyncHTTPProvider(self._rpc_url, request_kwargs={"timeout": self._timeout})
        self._w3 = AsyncWeb3(provider)

    async def close(self) -> None:
        """Release the provider's HTTP session."""
        if self._w3 is None:
            return
        await disconnect_provider(self._w3)
        self._w3 = None

    @property
    def is_connected(self) -> bool:
        """Check if the web3 client exists."""
        return self._w3 is not None

    @property
    def contract_address(self) -> str:
        return self._contract_address

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def block_number(self) -> int:
        """Current chain height.

        Raises:
            RemoteUnavailableError: On RPC failure.
        """
        w3 = self._ensure_connected()
        try:
            return int(await w3.eth.block_number)
        except Exception as exc:  # noqa: BLE001
            raise RemoteUnavailableError(f"eth_blockNumber failed: {exc}") from exc

    async def get_received_logs(
        self, recipient: str, from_block: int, to_block: int
    ) -> list[Any]:
        """``GMSent`` logs whose indexed recipient is *recipient*, inclusive range.

        The recipient filter is applied server-side via the third topic.

        Raises:
            RemoteUnavailableError: On RPC failure.
        """
        w3 = self._ensure_connected()
        params = {
            "address": self._contract_address,
            "fromBlock": from_block,
            "toBlock": to_block,
            "topics": [GM_SENT_TOPIC, None, address_topic(recipient)],
        }
        try:
            logs = await w3.eth.get_logs(params)
        except Exception as exc:  # noqa: BLE001
            raise RemoteUnavailableError(
                f"eth_getLogs {from_block}-{to_block} failed: {exc}"
            ) from exc
        return list(logs)

    async def streak(self, address: str) -> int:
        """Current GM streak of *address*.

        Raises:
            RemoteUnavailableError: On RPC failure.
        """
        return await self._call_uint("streak", address)

    async def last_gm(self, address: str) -> int:
        """Unix timestamp of the last GM sent by *address* (0 if never).

        Raises:
            RemoteUnavailableError: On RPC failure.
        """
        return await self._call_uint("lastGM", address)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _call_uint(self, function_name: str, address: str) -> int:
        w3 = self._ensure_connected()
        contract = w3.eth.contract(address=self._contract_address, abi=DAILY_GM_ABI)
        try:
            fn = getattr(contract.functions, function_name)(AsyncWeb3.to_checksum_address(address))
            return int(await fn.call())
        except Exception as exc:  # noqa: BLE001
            raise RemoteUnavailableError(f"{function_name}({address}) failed: {exc}") from exc

    def _ensure_connected(self) -> AsyncWeb3:
        if self._w3 is None:
            msg = "Chain reader not connected. Call connect() first."
            raise RemoteUnavailableError(msg, status_code=500)
        return self._w3


async def disconnect_provider(w3: AsyncWeb3) -> None:
    """Close the provider's session, for providers that keep one."""
    disconnect = getattr(w3.provider, "disconnect", None)
    if disconnect is None:
        return
    try:
        await disconnect()
    except NotImplementedError:
        logger.debug("Provider %s has no session to close", type(w3.provider).__name__)
