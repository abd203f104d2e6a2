"""Wallet capability protocol."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence


class WalletProvider(Protocol):
    """What the chain guard and submitter need from a wallet.

    ``switch_chain`` and ``write_contract`` report failure by raising
    :class:`~daily_gm.errors.WalletError` whose message is the wallet's own
    text (e.g. ``"User rejected the request"`` or a revert reason).
    """

    @property
    def account(self) -> str | None:
        """Connected account address, ``None`` when disconnected."""
        ...

    @property
    def can_switch_chain(self) -> bool:
        """Whether :meth:`switch_chain` is supported at all."""
        ...

    async def get_chain_id(self) -> int | None: ...

    async def switch_chain(self, chain_id: int) -> None: ...

    async def write_contract(
        self, address: str, function_name: str, args: Sequence[Any] = ()
    ) -> str:
        """Sign and send a contract call; returns the transaction hash."""
        ...
