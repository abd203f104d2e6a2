"""DailyGMEngine: central client owning every service of the application."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from daily_gm.config.settings import AggregatorMode
from daily_gm.gm.eligibility import can_gm, time_until_reset

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from daily_gm.cache.client import CacheClient
    from daily_gm.chain.aggregator import RPCAggregator
    from daily_gm.chain.reader import ChainReader
    from daily_gm.config.settings import AppConfig
    from daily_gm.gm.eligibility import Countdown
    from daily_gm.metrics.collector import GMMetrics
    from daily_gm.names.models import Resolution
    from daily_gm.names.resolver import NamingService, RecipientResolver
    from daily_gm.sync.synchronizer import (
        Aggregator,
        ReceivedCountSynchronizer,
        SyncOutcome,
    )
    from daily_gm.tx.guard import ChainGuard
    from daily_gm.tx.submitter import GMSubmitter, SubmitOutcome
    from daily_gm.wallet.base import WalletProvider

logger = logging.getLogger(__name__)

_ERR_NOT_INITIALIZED = "Engine not initialized. Call initialize() first."


@dataclass(frozen=True, slots=True)
class AccountStats:
    """Everything shown for one account: streak, eligibility and greetings received."""

    address: str
    streak: int
    last_gm: int
    can_gm: bool
    countdown: Countdown
    received: SyncOutcome

    def to_dict(self) -> dict[str, Any]:
        received: dict[str, Any] = {
            "count": self.received.count,
            "source": self.received.source.value if self.received.source else None,
        }
        if self.received.error is not None:
            received["error"] = self.received.error.message
        return {
            "address": self.address,
            "streak": self.streak,
            "lastGM": self.last_gm,
            "canGM": self.can_gm,
            "countdown": str(self.countdown),
            "secondsUntilReset": max(self.countdown.total_seconds, 0),
            "received": received,
        }


class DailyGMEngine:
    """Owns the cache, chain access, synchronizer, resolver and submitter.

    Collaborators that talk to the outside world (chain reader, aggregator,
    naming service, wallet) can be injected; anything not injected is built
    from the configuration in :meth:`initialize`. Only what the engine built
    itself is closed by :meth:`close`.
    """

    def __init__(
        self,
        config: AppConfig,
        *,
        reader: ChainReader | None = None,
        indexer: RPCAggregator | None = None,
        aggregator: Aggregator | None = None,
        naming: NamingService | None = None,
        wallet: WalletProvider | None = None,
        metrics: GMMetrics | None = None,
    ) -> None:
        self._config = config
        self._initialized = False
        self._closers: list[Callable[[], Awaitable[None]]] = []

        self._injected = (reader, indexer, aggregator, naming, wallet)
        self._reader, self._indexer, self._aggregator, self._naming, self._wallet = self._injected
        self._metrics = metrics

        self._cache: CacheClient | None = None
        self._synchronizer: ReceivedCountSynchronizer | None = None
        self._resolver: RecipientResolver | None = None
        self._guard: ChainGuard | None = None
        self._submitter: GMSubmitter | None = None

    async def initialize(self) -> None:
        """Connect the cache and remote clients, then wire the services.

        Raises:
            RuntimeError: If already initialized.
            ValueError: If no contract address is configured.
        """
        if self._initialized:
            msg = "Engine already initialized"
            raise RuntimeError(msg)

        config = self._config
        contract_address = config.chain.contract_address
        if not contract_address:
            msg = "No contract address configured (DAILYGM_CHAIN__CONTRACT_ADDRESS)"
            raise ValueError(msg)

        from daily_gm.cache.client import CacheClient
        from daily_gm.chain.aggregator import HTTPAggregator, RPCAggregator
        from daily_gm.chain.reader import ChainReader

        # Progress cache
        self._cache = CacheClient(config.cache)
        await self._cache.connect()
        self._closers.append(self._cache.close)

        # Target-chain reader
        if self._reader is None:
            self._reader = ChainReader(config.chain.effective_rpc_url, contract_address)
            await self._reader.connect()
            self._closers.append(self._reader.close)

        # Full-range indexer behind /api/fetch-gms
        if self._indexer is None:
            if config.aggregator.rpc_url:
                indexer_reader = ChainReader(config.aggregator.rpc_url, contract_address)
                await indexer_reader.connect()
                self._closers.append(indexer_reader.close)
            else:
                indexer_reader = self._reader
            self._indexer = RPCAggregator(
                indexer_reader, deployment_block=config.chain.deployment_block
            )

        # Fast path of the synchronizer
        if self._aggregator is None:
            if config.aggregator.mode is AggregatorMode.HTTP:
                http_aggregator = HTTPAggregator(config.aggregator)
                await http_aggregator.connect()
                self._closers.append(http_aggregator.close)
                self._aggregator = http_aggregator
            else:
                self._aggregator = self._indexer

        from daily_gm.sync.progress import CacheProgressStore
        from daily_gm.sync.scanner import ChunkedLogScanner
        from daily_gm.sync.synchronizer import ReceivedCountSynchronizer

        scanner = ChunkedLogScanner(
            self._reader,
            max_window=config.scan.max_window,
            window_delay=config.scan.window_delay,
            metrics=self._metrics,
        )
        self._synchronizer = ReceivedCountSynchronizer(
            self._aggregator,
            scanner,
            CacheProgressStore(self._cache),
            self._reader,
            deployment_block=config.chain.deployment_block,
            stale_after=config.scan.stale_after_seconds,
            metrics=self._metrics,
        )

        # Name resolution on the reference network
        from daily_gm.names.resolver import ENSNamingService, RecipientResolver

        if self._naming is None:
            ens = ENSNamingService(config.reference)
            await ens.connect()
            self._closers.append(ens.close)
            self._naming = ens
        self._resolver = RecipientResolver(self._naming, target_chain_id=config.chain.chain_id)

        # Wallet, network guard and submitter
        from daily_gm.tx.guard import ChainGuard
        from daily_gm.tx.submitter import GMSubmitter
        from daily_gm.wallet.local import LocalAccountWallet

        if self._wallet is None:
            local = LocalAccountWallet(
                config.wallet.private_key,
                config.wallet_rpc_urls(),
                initial_chain_id=config.wallet.initial_chain_id or config.chain.chain_id,
            )
            self._closers.append(local.close)
            self._wallet = local
        self._guard = ChainGuard(config.chain.chain_id, settle_delay=config.wallet.settle_delay)
        self._submitter = GMSubmitter(
            self._wallet,
            self._guard,
            self._resolver,
            contract_address=contract_address,
            metrics=self._metrics,
        )

        self._initialized = True
        logger.info(
            "DailyGM engine ready on %s (contract %s)", config.chain.name, contract_address
        )

    async def close(self) -> None:
        """Close everything :meth:`initialize` opened (idempotent)."""
        while self._closers:
            closer = self._closers.pop()
            await closer()

        # Drop what initialize() built so the next initialize() rebuilds it
        self._reader, self._indexer, self._aggregator, self._naming, self._wallet = self._injected
        self._synchronizer = None
        self._resolver = None
        self._guard = None
        self._submitter = None
        self._cache = None
        self._initialized = False

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    @property
    def is_initialized(self) -> bool:
        """Check if the engine is initialized."""
        return self._initialized

    @property
    def config(self) -> AppConfig:
        """Get the application configuration."""
        return self._config

    @property
    def metrics(self) -> GMMetrics | None:
        """Get the metrics (None when disabled)."""
        return self._metrics

    @property
    def cache(self) -> CacheClient:
        """Get the progress cache client.

        Raises:
            RuntimeError: If engine not initialized.
        """
        if self._cache is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._cache

    @property
    def reader(self) -> ChainReader:
        """Get the target-chain reader."""
        if not self._initialized or self._reader is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._reader

    @property
    def indexer(self) -> RPCAggregator:
        """Get the full-range indexer serving ``/api/fetch-gms``."""
        if not self._initialized or self._indexer is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._indexer

    @property
    def synchronizer(self) -> ReceivedCountSynchronizer:
        """Get the received-count synchronizer."""
        if self._synchronizer is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._synchronizer

    @property
    def resolver(self) -> RecipientResolver:
        """Get the recipient resolver."""
        if self._resolver is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._resolver

    @property
    def guard(self) -> ChainGuard:
        """Get the chain guard."""
        if self._guard is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._guard

    @property
    def wallet(self) -> WalletProvider:
        """Get the wallet provider."""
        if not self._initialized or self._wallet is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._wallet

    @property
    def submitter(self) -> GMSubmitter:
        """Get the GM submitter."""
        if self._submitter is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._submitter

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def indexed_count(self, address: str) -> int:
        """Received count from one full-range query (aggregator endpoint side).

        Raises:
            RemoteUnavailableError: If the indexer RPC fails.
        """
        return await self.indexer.fetch_count(address)

    async def received_count(self, address: str) -> SyncOutcome:
        """Best available received count for *address*. Never raises."""
        return await self.synchronizer.sync(address)

    async def stats(self, address: str, *, now: float | None = None) -> AccountStats:
        """Streak, last GM, eligibility and received count for *address*.

        Raises:
            RemoteUnavailableError: If the contract reads fail.
        """
        reader = self.reader
        streak = await reader.streak(address)
        last_gm = await reader.last_gm(address)
        received = await self.received_count(address)
        return AccountStats(
            address=address,
            streak=streak,
            last_gm=last_gm,
            can_gm=can_gm(last_gm, now),
            countdown=time_until_reset(last_gm, now),
            received=received,
        )

    async def resolve(self, text: str) -> Resolution:
        """Classify and resolve a recipient."""
        return await self.resolver.resolve(text)

    async def send_gm(self) -> SubmitOutcome:
        return await self.submitter.send_gm()

    async def send_gm_to(self, text: str) -> SubmitOutcome:
        return await self.submitter.send_gm_to(text)

    async def health_check(self) -> dict[str, str]:
        """Component statuses ('ok', 'error', 'not_initialized')."""
        status = {
            "engine": "ok" if self._initialized else "not_initialized",
            "cache": "unknown",
            "chain": "unknown",
        }
        if self._initialized:
            status["cache"] = "ok" if self._cache and self._cache.is_connected else "error"
            try:
                await self.reader.block_number()
                status["chain"] = "ok"
            except Exception as exc:  # noqa: BLE001
                logger.warning("Chain health check failed: %s", exc)
                status["chain"] = "error"
        return status
