"""Cache client abstraction with memory, file and Redis backends."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from daily_gm.config.settings import CacheConfig


class CacheClient:
    """String key/value store that delegates to a configured backend.

    Values never expire; entries are only ever replaced. Eviction, when it
    happens, is the backend's business (LRU in memory, operator action in
    Redis, file deletion by the user).
    """

    def __init__(self, config: CacheConfig) -> None:
        """Initialize cache client with configuration.

        Args:
            config: Cache configuration with engine type and connection params.
        """
        self._config = config
        self._backend: CacheBackend | None = None
        self._connected = False

    async def connect(self) -> None:
        """Connect to the cache backend.

        Raises:
            ValueError: If cache engine type is invalid.
        """
        from daily_gm.cache.file import FileCache
        from daily_gm.cache.memory import MemoryCache
        from daily_gm.cache.redis import RedisCache

        engine = str(self._config.engine).lower()

        if engine == "redis":
            self._backend = RedisCache(self._config)
        elif engine == "file":
            self._backend = FileCache(self._config)
        elif engine == "memory":
            self._backend = MemoryCache(self._config)
        else:
            msg = f"Unsupported cache engine: {engine}"
            raise ValueError(msg)

        await self._backend.connect()
        self._connected = True

    async def close(self) -> None:
        """Close the cache connection (idempotent)."""
        if self._backend is not None:
            await self._backend.close()
            self._backend = None
        self._connected = False

    @property
    def is_connected(self) -> bool:
        """Check if the cache is connected."""
        return self._connected and self._backend is not None

    async def get(self, key: str) -> str | None:
        """Get a value from the cache.

        Returns:
            The cached value as a string, or None if not found.

        Raises:
            RuntimeError: If not connected.
        """
        backend = self._ensure_connected()
        return await backend.get(key)

    async def set(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value.

        Raises:
            RuntimeError: If not connected.
        """
        backend = self._ensure_connected()
        await backend.set(key, value)

    async def delete(self, key: str) -> None:
        """Delete a key from the cache.

        Raises:
            RuntimeError: If not connected.
        """
        backend = self._ensure_connected()
        await backend.delete(key)

    async def exists(self, key: str) -> bool:
        """Check if a key exists in the cache.

        Raises:
            RuntimeError: If not connected.
        """
        backend = self._ensure_connected()
        return await backend.exists(key)

    def _ensure_connected(self) -> CacheBackend:
        """Return the backend, raising RuntimeError if not connected."""
        if not self._connected or self._backend is None:
            msg = "Cache not connected. Call connect() first."
            raise RuntimeError(msg)
        return self._backend


class CacheBackend(Protocol):
    """Protocol for cache backend implementations."""

    async def connect(self) -> None: ...
    async def close(self) -> None: ...
    async def get(self, key: str) -> str | None: ...
    async def set(self, key: str, value: str) -> None: ...
    async def delete(self, key: str) -> None: ...
    async def exists(self, key: str) -> bool: ...
