"""Received-count synchronizer: aggregator first, chunked scan as fallback.

Pipeline for one address::

    aggregator ──ok──────────────────────────────▶ SyncOutcome(source=AGGREGATOR)
        │ failed
        ▼
    progress store ─▶ chain height ─▶ chunked scan ─▶ store.put ─▶ SyncOutcome(source=SCAN)
                                          │ failed
                                          ▼
                                    SyncOutcome(error=...)

The aggregator result is never cached: it is re-queried on every sync so it
cannot go stale after new on-chain activity. The cache only makes repeated
fallback passes incremental.
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from daily_gm.errors.chain_errors import RemoteUnavailableError
from daily_gm.errors.gm_errors import GMError
from daily_gm.sync.progress import ScanProgress

if TYPE_CHECKING:
    from collections.abc import Callable

    from daily_gm.metrics.collector import GMMetrics
    from daily_gm.sync.progress import ProgressStore
    from daily_gm.sync.scanner import ChunkedLogScanner

logger = logging.getLogger(__name__)


class Aggregator(Protocol):
    """Fast, fallible received-count lookup."""

    async def fetch_count(self, address: str) -> int: ...


class ChainHeight(Protocol):
    async def block_number(self) -> int: ...


class CountSource(enum.StrEnum):
    """Where a received count came from."""

    AGGREGATOR = "aggregator"
    SCAN = "scan"


@dataclass(frozen=True, slots=True)
class SyncOutcome:
    """Result of one synchronization.

    Exactly one of ``count`` / ``error`` is set.
    """

    address: str
    count: int | None = None
    source: CountSource | None = None
    error: GMError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ReceivedCountSynchronizer:
    """Produces the best available received count for an address."""

    def __init__(
        self,
        aggregator: Aggregator,
        scanner: ChunkedLogScanner,
        store: ProgressStore,
        chain: ChainHeight,
        *,
        deployment_block: int,
        stale_after: float | None = None,
        clock: Callable[[], float] = time.time,
        metrics: GMMetrics | None = None,
    ) -> None:
        self._aggregator = aggregator
        self._scanner = scanner
        self._store = store
        self._chain = chain
        self._deployment_block = deployment_block
        self._stale_after = stale_after
        self._clock = clock
        self._metrics = metrics

    async def sync(self, address: str) -> SyncOutcome:
        """Run the pipeline for *address*. Never raises."""
        outcome = await self._from_aggregator(address)
        if outcome is None:
            outcome = await self._from_scan(address)
        if self._metrics is not None:
            self._metrics.inc_sync(outcome.source.value if outcome.source else "failed")
        return outcome

    async def _from_aggregator(self, address: str) -> SyncOutcome | None:
        """Stage 1. ``None`` means "fall back"."""
        started = time.monotonic()
        try:
            count = await self._aggregator.fetch_count(address)
        except RemoteUnavailableError as exc:
            logger.warning(
                "Aggregator unavailable for %s, falling back to log scan: %s", address, exc
            )
            return None
        except Exception as exc:  # noqa: BLE001
            logger.warning("Aggregator failed for %s, falling back to log scan: %s", address, exc)
            return None
        finally:
            if self._metrics is not None:
                self._metrics.observe_aggregator(time.monotonic() - started)

        elapsed = time.monotonic() - started
        logger.info("Fetched %d GMs for %s via aggregator in %.2fs", count, address, elapsed)
        return SyncOutcome(address=address, count=count, source=CountSource.AGGREGATOR)

    async def _from_scan(self, address: str) -> SyncOutcome:
        """Stage 2: resume from cached progress and scan up to the chain head."""
        try:
            cached = await self._store.get(address)
            if cached is None:
                from_block, base_count = self._deployment_block, 0
            else:
                from_block, base_count = cached.last_block + 1, cached.count
                logger.info(
                    "Using cache: %d GMs, resuming from block %d", base_count, from_block
                )
                stale_after = self._stale_after
                if stale_after is not None and cached.is_stale(stale_after, self._clock()):
                    logger.debug("Cached progress for %s is older than %ss", address, stale_after)

            height = await self._chain.block_number()
            result = await self._scanner.scan(address, from_block, height)

            total = base_count + result.new_count
            last_block = max(result.final_block, cached.last_block if cached else 0, 0)
            await self._store.put(
                address,
                ScanProgress(count=total, last_block=last_block, updated_at=self._clock()),
            )
        except GMError as exc:
            logger.error("Received-count sync failed for %s: %s", address, exc)
            return SyncOutcome(address=address, error=exc)
        except Exception as exc:  # noqa: BLE001
            logger.error("Received-count sync failed for %s: %s", address, exc)
            error = RemoteUnavailableError(f"Received-count sync failed: {exc}")
            return SyncOutcome(address=address, error=error)

        logger.info("Fetched %d new GMs for %s, total: %d", result.new_count, address, total)
        return SyncOutcome(address=address, count=total, source=CountSource.SCAN)


class ReceivedCountTracker:
    """Holds the displayed received count for the address being observed.

    A refresh only publishes its result if, when it finishes, the same
    address is still observed and no later refresh has started. Failed
    refreshes leave the displayed count alone.
    """

    def __init__(self, synchronizer: ReceivedCountSynchronizer) -> None:
        self._synchronizer = synchronizer
        self._address: str | None = None
        self._generation = 0
        self.count = 0
        self.source: CountSource | None = None
        self.last_error: GMError | None = None

    @property
    def address(self) -> str | None:
        return self._address

    def observe(self, address: str | None) -> None:
        """Switch to *address*; the displayed count resets if it changed."""
        if _same_address(address, self._address):
            return
        self._address = address
        self._generation += 1
        self.count = 0
        self.source = None
        self.last_error = None

    async def refresh(self) -> SyncOutcome | None:
        """Sync the observed address; ``None`` when nothing is observed."""
        address = self._address
        if address is None:
            return None
        self._generation += 1
        generation = self._generation

        outcome = await self._synchronizer.sync(address)

        if generation != self._generation or not _same_address(address, self._address):
            logger.debug("Discarding stale received-count result for %s", address)
            return outcome
        if outcome.ok:
            self.count = outcome.count or 0
            self.source = outcome.source
            self.last_error = None
        else:
            self.last_error = outcome.error
        return outcome


def _same_address(a: str | None, b: str | None) -> bool:
    if a is None or b is None:
        return a is b
    return a.lower() == b.lower()
