"""Chunked log scanner: walks a block range in bounded windows.

RPC providers cap the block span of a single ``eth_getLogs`` call, so a
range is split into contiguous windows of at most ``max_window`` blocks that
are queried one after another, oldest first, with a short pause in between.
A window only counts once its query succeeded; the first failure aborts the
whole pass.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from daily_gm.errors.chain_errors import PartialScanFailureError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterator, Sequence

    from daily_gm.metrics.collector import GMMetrics

logger = logging.getLogger(__name__)

MAX_WINDOW = 100_000
WINDOW_DELAY = 0.1


class LogSource(Protocol):
    """Anything that can return recipient-filtered ``GMSent`` logs."""

    async def get_received_logs(
        self, recipient: str, from_block: int, to_block: int
    ) -> Sequence[Any]: ...


@dataclass(frozen=True, slots=True)
class LogWindow:
    """Inclusive block range ``[from_block, to_block]`` for one query."""

    from_block: int
    to_block: int

    @property
    def size(self) -> int:
        return self.to_block - self.from_block + 1


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Outcome of one scan pass.

    Attributes:
        new_count: Matching events seen in this pass.
        final_block: Last block covered (``from_block - 1`` when nothing ran).
    """

    new_count: int
    final_block: int


def iter_windows(
    from_block: int, to_block: int, max_window: int = MAX_WINDOW
) -> Iterator[LogWindow]:
    """Split ``[from_block, to_block]`` into contiguous, non-overlapping windows."""
    if max_window <= 0:
        msg = f"max_window must be positive, got {max_window}"
        raise ValueError(msg)
    start = from_block
    while start <= to_block:
        end = min(start + max_window - 1, to_block)
        yield LogWindow(start, end)
        start = end + 1


class ChunkedLogScanner:
    """Counts received GMs over a block range, one window at a time."""

    def __init__(
        self,
        source: LogSource,
        *,
        max_window: int = MAX_WINDOW,
        window_delay: float = WINDOW_DELAY,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        metrics: GMMetrics | None = None,
    ) -> None:
        self._source = source
        self._max_window = max_window
        self._window_delay = window_delay
        self._sleep = sleep
        self._metrics = metrics

    async def scan(self, address: str, from_block: int, current_height: int) -> ScanResult:
        """Count ``GMSent`` events to *address* in ``[from_block, current_height]``.

        Raises:
            PartialScanFailureError: If any window query fails. Earlier
                windows are discarded with it; the caller persists nothing.
        """
        if from_block > current_height:
            logger.debug(
                "No new blocks for %s (from %d > head %d)", address, from_block, current_height
            )
            return ScanResult(new_count=0, final_block=from_block - 1)

        logger.info("Scanning blocks %d-%d for GMs to %s", from_block, current_height, address)
        started = time.monotonic()
        total = 0
        last_completed = from_block - 1

        windows = iter_windows(from_block, current_height, self._max_window)
        for window in windows:
            try:
                logs = await self._source.get_received_logs(
                    address, window.from_block, window.to_block
                )
            except Exception as exc:  # noqa: BLE001
                logger.warning(
                    "Window %d-%d failed for %s: %s",
                    window.from_block,
                    window.to_block,
                    address,
                    exc,
                )
                raise PartialScanFailureError(
                    f"Log query for blocks {window.from_block}-{window.to_block} failed: {exc}",
                    from_block=window.from_block,
                    to_block=window.to_block,
                    last_completed_block=last_completed,
                ) from exc

            total += len(logs)
            last_completed = window.to_block
            if self._metrics is not None:
                self._metrics.inc_scan_window()
            logger.debug("Blocks %d-%d: %d GMs", window.from_block, window.to_block, len(logs))

            if window.to_block < current_height:
                await self._sleep(self._window_delay)

        if self._metrics is not None:
            self._metrics.observe_scan(time.monotonic() - started)
        return ScanResult(new_count=total, final_block=last_completed)
