"""Recipient resolution: ENS and Basenames on the reference network.

``.eth`` names resolve through the ENS registry on Ethereum mainnet. Basenames
(``*.base.eth``) resolve on that same network, but through the ENSIP-19
multichain address record: the lookup passes the *target* chain's ENSIP-11
coin type, otherwise the resolver would return the name's mainnet address.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from ens import AsyncENS
from web3 import AsyncHTTPProvider, AsyncWeb3

from daily_gm.chain.reader import disconnect_provider
from daily_gm.errors.chain_errors import RemoteUnavailableError
from daily_gm.names.models import (
    BasenameName,
    DotEthName,
    InvalidQuery,
    RawAddress,
    Resolution,
    ResolutionStatus,
    classify,
    to_coin_type,
)

if TYPE_CHECKING:
    from daily_gm.config.settings import ReferenceNetworkConfig

logger = logging.getLogger(__name__)

_ZERO_ADDRESS = "0x" + "0" * 40


class NamingService(Protocol):
    """Name-to-address lookup on the reference network."""

    async def resolve(self, name: str, *, coin_type: int | None = None) -> str | None: ...


class ENSNamingService:
    """:class:`NamingService` backed by web3.py's ``AsyncENS``."""

    def __init__(
        self, config: ReferenceNetworkConfig, *, ns: AsyncENS | None = None
    ) -> None:
        self._config = config
        self._ns = ns
        self._w3: AsyncWeb3 | None = None

    async def connect(self) -> None:  # noqa: ASYNC910
        if self._ns is not None:
            return
        self._w3 = AsyncWeb3(AsyncHTTPProvider(self._config.rpc_url))
        self._ns = AsyncENS.from_web3(self._w3)

    async def close(self) -> None:
        if self._w3 is not None:
            await disconnect_provider(self._w3)
            self._w3 = None
        self._ns = None

    async def resolve(self, name: str, *, coin_type: int | None = None) -> str | None:
        """Address record of *name*, or ``None`` if it has none.

        Raises:
            RemoteUnavailableError: If the lookup itself failed.
        """
        if self._ns is None:
            msg = "Naming service not connected. Call connect() first."
            raise RemoteUnavailableError(msg, status_code=500)
        try:
            if coin_type is None:
                address = await self._ns.address(name)
            else:
                address = await self._ns.address(name, coin_type=coin_type)
        except Exception as exc:  # noqa: BLE001
            raise RemoteUnavailableError(f"ENS lookup for {name} failed: {exc}") from exc
        if not address or address == _ZERO_ADDRESS:
            return None
        return str(address)


class RecipientResolver:
    """Turns recipient input into an address, tracking lookup status.

    ``current`` always describes the most recent input; a lookup that
    finishes after a newer one started does not replace it.
    """

    def __init__(self, naming: NamingService, *, target_chain_id: int) -> None:
        self._naming = naming
        self._coin_type = to_coin_type(target_chain_id)
        self._generation = 0
        self.current = Resolution()

    @property
    def status(self) -> ResolutionStatus:
        return self.current.status

    @property
    def is_pending(self) -> bool:
        return self.current.status is ResolutionStatus.PENDING

    async def resolve(self, text: str) -> Resolution:
        """Classify *text* and resolve it."""
        query = classify(text)
        self._generation += 1
        generation = self._generation

        if isinstance(query, InvalidQuery):
            return self._publish(generation, Resolution(query, ResolutionStatus.UNRESOLVED))

        ens_address: str | None = None
        basename_address: str | None = None
        if isinstance(query, (DotEthName, BasenameName)):
            self._publish(generation, Resolution(query, ResolutionStatus.PENDING))
            try:
                if isinstance(query, DotEthName):
                    ens_address = await self._lookup(query.name, None)
                else:
                    basename_address = await self._lookup(query.name, self._coin_type)
            finally:
                # A cancelled lookup must not leave the resolver pending.
                if generation == self._generation and self.is_pending:
                    self.current = Resolution(query, ResolutionStatus.UNRESOLVED)

        raw_address = query.address if isinstance(query, RawAddress) else None
        address = ens_address or basename_address or raw_address
        status = ResolutionStatus.RESOLVED if address else ResolutionStatus.UNRESOLVED
        return self._publish(generation, Resolution(query, status, address))

    async def _lookup(self, name: str, coin_type: int | None) -> str | None:
        try:
            address = await self._naming.resolve(name, coin_type=coin_type)
        except RemoteUnavailableError as exc:
            logger.warning("Name lookup failed for %s: %s", name, exc)
            return None
        except Exception as exc:  # noqa: BLE001
            logger.error("Unexpected error looking up %s: %s", name, exc)
            return None
        if address is None:
            logger.info("No address record for %s", name)
        else:
            logger.debug("Resolved %s -> %s", name, address)
        return address

    def _publish(self, generation: int, resolution: Resolution) -> Resolution:
        if generation == self._generation:
            self.current = resolution
        return resolution
