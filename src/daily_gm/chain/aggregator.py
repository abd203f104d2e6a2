"""Received-count aggregators: the fast path of the synchronizer.

Two implementations of the same capability, ``fetch_count(address) -> int``:

- :class:`HTTPAggregator` calls a ``GET /api/fetch-gms?address=`` endpoint
  (the one served by :mod:`daily_gm.api.routes`) and expects ``{"count": n}``.
- :class:`RPCAggregator` answers from one full-range ``eth_getLogs`` against
  an indexer-grade RPC that accepts unbounded ranges for filtered queries.

Both raise :class:`~daily_gm.errors.RemoteUnavailableError` on any failure,
including malformed payloads.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from daily_gm.errors.chain_errors import RemoteUnavailableError

if TYPE_CHECKING:
    from daily_gm.chain.reader import ChainReader
    from daily_gm.config.settings import AggregatorConfig

logger = logging.getLogger(__name__)

FETCH_GMS_PATH = "/api/fetch-gms"


class HTTPAggregator:
    """Async HTTP client for a fetch-gms aggregator endpoint.

    Usage::

        aggregator = HTTPAggregator(config)
        await aggregator.connect()
        try:
            count = await aggregator.fetch_count("0xabc...")
        finally:
            await aggregator.close()
    """

    def __init__(self, config: AggregatorConfig) -> None:
        self._config = config
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:  # noqa: ASYNC910
        """Create the underlying HTTP client."""
        self._client = httpx.AsyncClient(
            base_url=self._config.url.rstrip("/"),
            headers={"Accept": "application/json"},
            timeout=self._config.timeout,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def is_connected(self) -> bool:
        """Check if the HTTP client is active."""
        return self._client is not None

    async def fetch_count(self, address: str) -> int:
        """Number of GMs received by *address*, straight from the aggregator.

        Raises:
            RemoteUnavailableError: On transport errors, non-200 responses
                or a payload without a non-negative integer ``count``.
        """
        client = self._ensure_connected()

        try:
            response = await client.get(FETCH_GMS_PATH, params={"address": address})
        except httpx.HTTPError as exc:
            raise RemoteUnavailableError(f"Aggregator request failed: {exc}") from exc

        if response.status_code != 200:
            self._raise_for_status(response)

        try:
            body = response.json()
        except ValueError as exc:
            raise RemoteUnavailableError("Aggregator returned invalid JSON") from exc

        return _parse_count(body)

    def _ensure_connected(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = "Aggregator not connected. Call connect() first."
            raise RemoteUnavailableError(msg, status_code=500)
        return self._client

    def _raise_for_status(self, response: httpx.Response) -> None:
        status = response.status_code
        try:
            body = response.json()
            detail = body.get("error", body.get("message", response.text))
        except Exception:  # noqa: BLE001
            detail = response.text or "API request failed"

        raise RemoteUnavailableError(f"Aggregator failed ({status}): {detail}", status_code=status)


class RPCAggregator:
    """Counts received GMs with a single unbounded ``eth_getLogs`` query."""

    def __init__(self, reader: ChainReader, *, deployment_block: int) -> None:
        self._reader = reader
        self._deployment_block = deployment_block

    async def connect(self) -> None:
        await self._reader.connect()

    async def close(self) -> None:
        await self._reader.close()

    async def fetch_count(self, address: str) -> int:
        """Number of GMs received by *address* from deployment to head.

        Raises:
            RemoteUnavailableError: If either RPC call fails.
        """
        height = await self._reader.block_number()
        if height < self._deployment_block:
            return 0
        logs = await self._reader.get_received_logs(address, self._deployment_block, height)
        logger.debug("RPC aggregator: %d GMs for %s up to block %d", len(logs), address, height)
        return len(logs)


def _parse_count(body: Any) -> int:
    if not isinstance(body, dict):
        raise RemoteUnavailableError("Aggregator payload is not an object")
    count = body.get("count")
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise RemoteUnavailableError(f"Aggregator payload has invalid count: {count!r}")
    return count
