"""In-memory LRU cache backend."""

from __future__ import annotations

from collections import OrderedDict
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from daily_gm.config.settings import CacheConfig


class MemoryCache:
    """Process-local LRU cache.

    Lives as long as the process; used by tests and single-run servers.
    """

    def __init__(self, config: CacheConfig | None = None, max_size: int = 10000) -> None:
        """Initialize in-memory cache.

        Args:
            config: Cache configuration (unused for memory backend).
            max_size: Maximum number of keys to store before evicting LRU.
        """
        self._config = config
        self._max_size = max_size
        self._cache: OrderedDict[str, str] = OrderedDict()

    async def connect(self) -> None:  # noqa: ASYNC910
        """Connect (no-op for in-memory)."""

    async def close(self) -> None:  # noqa: ASYNC910
        """Close and clear the cache."""
        self._cache.clear()

    async def get(self, key: str) -> str | None:  # noqa: ASYNC910
        value = self._cache.get(key)
        if value is not None:
            self._cache.move_to_end(key)
        return value

    async def set(self, key: str, value: str) -> None:  # noqa: ASYNC910
        self._cache[key] = value
        self._cache.move_to_end(key)

        if len(self._cache) > self._max_size:
            self._cache.popitem(last=False)

    async def delete(self, key: str) -> None:  # noqa: ASYNC910
        self._cache.pop(key, None)

    async def exists(self, key: str) -> bool:  # noqa: ASYNC910
        return key in self._cache
