"""Chain guard: make sure the wallet is on the target network before a write."""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from daily_gm.config.settings import chain_name
from daily_gm.errors.chain_errors import (
    NetworkMismatchError,
    NetworkSwitchCancelledError,
    NetworkSwitchFailedError,
    NetworkSwitchUnsupportedError,
    WalletError,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from daily_gm.wallet.base import WalletProvider

logger = logging.getLogger(__name__)

SETTLE_DELAY = 1.0


class GuardStatus(enum.StrEnum):
    READY = "ready"
    SWITCHING = "switching"
    SWITCHED = "switched"
    CANCELLED = "cancelled"
    FAILED = "failed"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True, slots=True)
class GuardOutcome:
    """Final state of one :meth:`ChainGuard.ensure` call."""

    status: GuardStatus
    error: NetworkMismatchError | None = None

    @property
    def ok(self) -> bool:
        return self.status in (GuardStatus.READY, GuardStatus.SWITCHED)


class ChainGuard:
    """Compares the wallet's active chain with the target and switches if needed.

    At most one switch request is made per :meth:`ensure` call. A successful
    switch is followed by a settle delay, since wallets may report the new
    chain asynchronously.
    """

    def __init__(
        self,
        target_chain_id: int,
        *,
        settle_delay: float = SETTLE_DELAY,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        on_status: Callable[[GuardStatus], None] | None = None,
    ) -> None:
        self._target = target_chain_id
        self._target_name = chain_name(target_chain_id)
        self._settle_delay = settle_delay
        self._sleep = sleep
        self._on_status = on_status
        self.status = GuardStatus.READY

    @property
    def target_chain_id(self) -> int:
        return self._target

    @property
    def target_name(self) -> str:
        return self._target_name

    async def ensure(self, wallet: WalletProvider) -> GuardOutcome:
        """Return once the wallet is on the target chain, or why it is not."""
        try:
            current = await wallet.get_chain_id()
        except Exception as exc:  # noqa: BLE001
            return self._switch_failed(f"could not read active chain: {exc}", exc)
        logger.debug("Current chain %s, target chain %s", current, self._target)
        if current == self._target:
            return self._finish(GuardStatus.READY)

        if not wallet.can_switch_chain:
            logger.error("Wallet cannot switch chains programmatically")
            return self._finish(
                GuardStatus.UNSUPPORTED, NetworkSwitchUnsupportedError(target=self._target_name)
            )

        logger.info("Wrong network (%s), switching to %s...", current, self._target_name)
        self._set_status(GuardStatus.SWITCHING)
        try:
            await wallet.switch_chain(self._target)
        except WalletError as exc:
            return self._switch_failed(exc.message, exc)
        except Exception as exc:  # noqa: BLE001
            return self._switch_failed(str(exc), exc)

        await self._sleep(self._settle_delay)
        logger.info("Switched to %s", self._target_name)
        return self._finish(GuardStatus.SWITCHED)

    def _switch_failed(self, detail: str, exc: Exception) -> GuardOutcome:
        logger.error("Error switching chain: %s", exc)
        if "rejected" in detail.lower():
            return self._finish(
                GuardStatus.CANCELLED, NetworkSwitchCancelledError(target=self._target_name)
            )
        return self._finish(
            GuardStatus.FAILED, NetworkSwitchFailedError(detail, target=self._target_name)
        )

    def _finish(
        self, status: GuardStatus, error: NetworkMismatchError | None = None
    ) -> GuardOutcome:
        self._set_status(status)
        return GuardOutcome(status=status, error=error)

    def _set_status(self, status: GuardStatus) -> None:
        self.status = status
        if self._on_status is not None:
            self._on_status(status)
