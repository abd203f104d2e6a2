"""GM transaction submitter.

Sends ``gm()`` for the connected account or ``gmTo(address)`` for a friend,
after the recipient is resolved and the chain guard passed. Every attempt
ends in a :class:`SubmitOutcome`; failures are classified into a user-facing
message and never retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from daily_gm.chain.contract import ALREADY_GM_TODAY, INVALID_RECIPIENT
from daily_gm.errors.chain_errors import UserRejectedError
from daily_gm.errors.definitions import (
    ErrAlreadyGMToday,
    ErrInvalidAddressFormat,
    ErrInvalidRecipient,
    ErrNameStillResolving,
    ErrNameUnresolved,
    ErrRecipientMissing,
    ErrSendFailed,
    ErrTransactionRejected,
    ErrWalletNotConnected,
    ErrWritePending,
)
from daily_gm.errors.gm_errors import GMError
from daily_gm.names.models import InvalidQuery, ResolutionStatus

if TYPE_CHECKING:
    from collections.abc import Sequence

    from daily_gm.metrics.collector import GMMetrics
    from daily_gm.names.resolver import RecipientResolver
    from daily_gm.tx.guard import ChainGuard
    from daily_gm.wallet.base import WalletProvider

logger = logging.getLogger(__name__)

_USER_REJECTED = "User rejected"


@dataclass(frozen=True, slots=True)
class SubmitOutcome:
    """Result of one GM attempt."""

    function_name: str
    tx_hash: str | None = None
    recipient: str | None = None
    error: GMError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        if self.error is not None:
            return self.error.message
        return "GM sent successfully!"


def classify_write_error(exc: BaseException) -> GMError:
    """Map a wallet write failure to its user-facing error."""
    text = exc.message if isinstance(exc, GMError) else str(exc)
    if isinstance(exc, UserRejectedError) or _USER_REJECTED in text:
        return ErrTransactionRejected
    if ALREADY_GM_TODAY in text:
        return ErrAlreadyGMToday
    if INVALID_RECIPIENT in text:
        return ErrInvalidRecipient
    return ErrSendFailed


class GMSubmitter:
    """Issues GM writes through a wallet, one at a time."""

    def __init__(
        self,
        wallet: WalletProvider,
        guard: ChainGuard,
        resolver: RecipientResolver,
        *,
        contract_address: str,
        metrics: GMMetrics | None = None,
    ) -> None:
        self._wallet = wallet
        self._guard = guard
        self._resolver = resolver
        self._contract_address = contract_address
        self._metrics = metrics
        self._pending = False

    @property
    def is_pending(self) -> bool:
        """True while a write is awaiting the wallet."""
        return self._pending

    async def send_gm(self) -> SubmitOutcome:
        """GM from the connected account to itself."""
        if self._wallet.account is None:
            return self._fail("gm", ErrWalletNotConnected)
        return await self._submit("gm", ())

    async def send_gm_to(self, text: str) -> SubmitOutcome:
        """GM to a friend given as raw address, ``.eth`` name or Basename."""
        if self._wallet.account is None:
            return self._fail("gmTo", ErrWalletNotConnected)
        if not text.strip():
            return self._fail("gmTo", ErrRecipientMissing)
        if self._resolver.is_pending:
            return self._fail("gmTo", ErrNameStillResolving)
        if self._pending:
            return self._fail("gmTo", ErrWritePending)

        resolution = await self._resolver.resolve(text)
        if resolution.status is not ResolutionStatus.RESOLVED or resolution.address is None:
            if isinstance(resolution.query, InvalidQuery):
                return self._fail("gmTo", ErrInvalidAddressFormat)
            return self._fail("gmTo", ErrNameUnresolved)

        return await self._submit("gmTo", (resolution.address,), recipient=resolution.address)

    async def _submit(
        self, function_name: str, args: Sequence[str], *, recipient: str | None = None
    ) -> SubmitOutcome:
        if self._pending:
            return self._fail(function_name, ErrWritePending)
        self._pending = True
        try:
            guard = await self._guard.ensure(self._wallet)
            if not guard.ok:
                assert guard.error is not None
                return self._fail(function_name, guard.error)

            try:
                tx_hash = await self._wallet.write_contract(
                    self._contract_address, function_name, args
                )
            except Exception as exc:  # noqa: BLE001
                logger.error("Error sending %s: %s", function_name, exc)
                return self._fail(function_name, classify_write_error(exc))
        finally:
            self._pending = False

        logger.info("%s sent: %s", function_name, tx_hash)
        if self._metrics is not None:
            self._metrics.inc_submission("sent")
        return SubmitOutcome(function_name=function_name, tx_hash=tx_hash, recipient=recipient)

    def _fail(self, function_name: str, error: GMError) -> SubmitOutcome:
        if self._metrics is not None:
            self._metrics.inc_submission(error.code)
        return SubmitOutcome(function_name=function_name, error=error)
