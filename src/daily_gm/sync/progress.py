"""Scan progress records and the per-address progress store."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from daily_gm.cache.client import CacheClient

logger = logging.getLogger(__name__)

KEY_PREFIX = "gms-received-"


def progress_key(address: str) -> str:
    """Cache key for *address*; lower-cased so lookups ignore checksum case."""
    return f"{KEY_PREFIX}{address.lower()}"


@dataclass(frozen=True, slots=True)
class ScanProgress:
    """Greetings observed for one address through ``last_block``.

    Attributes:
        count: Received GMs counted so far.
        last_block: Last block covered by a successful scan pass.
        updated_at: Unix time (seconds) of the pass that wrote this record.
    """

    count: int
    last_block: int
    updated_at: float

    def __post_init__(self) -> None:
        if self.count < 0 or self.last_block < 0:
            msg = f"invalid scan progress: count={self.count} last_block={self.last_block}"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        return {"count": self.count, "lastBlock": self.last_block, "updatedAt": self.updated_at}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ScanProgress:
        """Parse a stored record; ``lastBlock`` may be a decimal string.

        Raises:
            ValueError: If a field is missing or malformed.
        """
        try:
            return cls(
                count=int(data.get("count", 0)),
                last_block=int(data["lastBlock"]),
                updated_at=float(data.get("updatedAt", data.get("timestamp", 0))),
            )
        except (KeyError, TypeError) as exc:
            msg = f"malformed scan progress: {data!r}"
            raise ValueError(msg) from exc

    def is_stale(self, max_age: float, now: float | None = None) -> bool:
        """Advisory: older than *max_age* seconds. The count stays valid."""
        current = time.time() if now is None else now
        return current - self.updated_at > max_age


class ProgressStore(Protocol):
    """Per-address persistence of :class:`ScanProgress`."""

    async def get(self, address: str) -> ScanProgress | None: ...
    async def put(self, address: str, progress: ScanProgress) -> None: ...


class CacheProgressStore:
    """:class:`ProgressStore` on top of a connected :class:`CacheClient`.

    Entries are written whole (never merged) and never deleted here.
    """

    def __init__(self, cache: CacheClient) -> None:
        self._cache = cache

    async def get(self, address: str) -> ScanProgress | None:
        raw = await self._cache.get(progress_key(address))
        if raw is None:
            return None
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError("not an object")
            return ScanProgress.from_dict(data)
        except ValueError as exc:
            logger.warning("Ignoring corrupt scan progress for %s: %s", address, exc)
            return None

    async def put(self, address: str, progress: ScanProgress) -> None:
        await self._cache.set(progress_key(address), json.dumps(progress.to_dict()))
