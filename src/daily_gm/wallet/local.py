"""Local signing wallet: a private key plus a set of known networks.

Implements :class:`~daily_gm.wallet.base.WalletProvider` for headless use
(CLI, scripts). "Switching" moves the wallet to another configured RPC
endpoint; writes are built, gas-estimated, signed with eth-account and sent
as raw transactions. Reverts carrying one of the contract's custom errors are
reported by name so the submitter can classify them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from eth_account import Account
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import ContractLogicError

from daily_gm.chain.contract import DAILY_GM_ABI, revert_name
from daily_gm.chain.reader import disconnect_provider
from daily_gm.errors.chain_errors import WalletError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from eth_account.signers.local import LocalAccount

logger = logging.getLogger(__name__)

_RECEIPT_TIMEOUT = 120.0


def _default_w3_factory(rpc_url: str) -> AsyncWeb3:
    return AsyncWeb3(AsyncHTTPProvider(rpc_url))


class LocalAccountWallet:
    """Wallet provider backed by a local private key."""

    def __init__(
        self,
        private_key: str,
        rpc_urls: dict[int, str],
        *,
        initial_chain_id: int,
        w3_factory: Callable[[str], AsyncWeb3] = _default_w3_factory,
        receipt_timeout: float = _RECEIPT_TIMEOUT,
    ) -> None:
        self._account: LocalAccount | None = Account.from_key(private_key) if private_key else None
        self._rpc_urls = dict(rpc_urls)
        self._chain_id = initial_chain_id
        self._w3_factory = w3_factory
        self._receipt_timeout = receipt_timeout
        self._clients: dict[int, AsyncWeb3] = {}

    @property
    def account(self) -> str | None:
        return self._account.address if self._account is not None else None

    @property
    def can_switch_chain(self) -> bool:
        return len(self._rpc_urls) > 0

    async def get_chain_id(self) -> int | None:  # noqa: ASYNC910
        return self._chain_id

    async def switch_chain(self, chain_id: int) -> None:
        """Move to *chain_id*, checking the endpoint really serves that chain.

        Raises:
            WalletError: Unknown chain or endpoint failure.
        """
        if chain_id not in self._rpc_urls:
            msg = f"Unrecognized chain ID {chain_id}. Add an RPC URL for it first."
            raise WalletError(msg)
        w3 = self._client(chain_id)
        try:
            reported = await w3.eth.chain_id
        except Exception as exc:  # noqa: BLE001
            raise WalletError(f"RPC for chain {chain_id} unreachable: {exc}") from exc
        if reported != chain_id:
            msg = f"RPC for chain {chain_id} reports chain {reported}"
            raise WalletError(msg)
        logger.info("Wallet switched from chain %s to %s", self._chain_id, chain_id)
        self._chain_id = chain_id

    async def write_contract(
        self, address: str, function_name: str, args: Sequence[Any] = ()
    ) -> str:
        """Sign and send ``function_name(*args)`` on the active chain.

        Waits for the receipt so an on-chain revert surfaces as an error.

        Raises:
            WalletError: Not connected, simulation revert, send failure or
                reverted receipt.
        """
        if self._account is None:
            msg = "Wallet not connected"
            raise WalletError(msg)
        if self._chain_id not in self._rpc_urls:
            msg = f"No RPC configured for active chain {self._chain_id}"
            raise WalletError(msg)

        w3 = self._client(self._chain_id)
        sender = self._account.address
        contract = w3.eth.contract(address=AsyncWeb3.to_checksum_address(address), abi=DAILY_GM_ABI)
        fn = getattr(contract.functions, function_name)(*args)

        try:
            nonce = await w3.eth.get_transaction_count(sender)
            tx = await fn.build_transaction(
                {"from": sender, "nonce": nonce, "chainId": self._chain_id}
            )
        except ContractLogicError as exc:
            raise WalletError(_revert_message(exc)) from exc
        except Exception as exc:  # noqa: BLE001
            raise WalletError(f"Could not prepare {function_name}: {exc}") from exc

        signed = self._account.sign_transaction(tx)
        try:
            tx_hash = await w3.eth.send_raw_transaction(signed.raw_transaction)
            receipt = await w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self._receipt_timeout
            )
        except Exception as exc:  # noqa: BLE001
            raise WalletError(f"Sending {function_name} failed: {exc}") from exc

        tx_hex = AsyncWeb3.to_hex(tx_hash)
        if receipt["status"] != 1:
            msg = f"Transaction {tx_hex} reverted"
            raise WalletError(msg)
        logger.info("%s confirmed in block %s: %s", function_name, receipt["blockNumber"], tx_hex)
        return tx_hex

    async def close(self) -> None:
        """Release every provider session opened so far."""
        for w3 in self._clients.values():
            await disconnect_provider(w3)
        self._clients.clear()

    def _client(self, chain_id: int) -> AsyncWeb3:
        w3 = self._clients.get(chain_id)
        if w3 is None:
            w3 = self._w3_factory(self._rpc_urls[chain_id])
            self._clients[chain_id] = w3
        return w3


def _revert_message(exc: ContractLogicError) -> str:
    data = getattr(exc, "data", None)
    name = revert_name(data if isinstance(data, str) else None)
    if name is None and exc.args and isinstance(exc.args[0], str):
        name = revert_name(exc.args[0])
    if name is not None:
        return f"execution reverted: {name}"
    return f"execution reverted: {exc}"
