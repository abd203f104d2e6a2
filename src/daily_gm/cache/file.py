"""JSON-file cache backend, scoped to a local profile directory.

Layout: ``<directory>/<profile>/cache.json`` holding one flat JSON object.
Every write rewrites the file through a temporary sibling and an atomic
rename, so a crash mid-write leaves the previous contents intact.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from daily_gm.config.settings import CacheConfig

logger = logging.getLogger(__name__)

_FILENAME = "cache.json"


class FileCache:
    """Durable per-profile key/value store backed by a single JSON file."""

    def __init__(self, config: CacheConfig) -> None:
        self._config = config
        self._path = Path(config.directory).expanduser() / config.profile / _FILENAME
        self._data: dict[str, str] = {}
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        """Location of the backing file."""
        return self._path

    async def connect(self) -> None:
        """Load the backing file, creating the profile directory if needed."""
        loop = asyncio.get_running_loop()
        self._data = await loop.run_in_executor(None, self._load_sync)

    async def close(self) -> None:  # noqa: ASYNC910
        """Drop the in-memory view; the file stays on disk."""
        self._data = {}

    async def get(self, key: str) -> str | None:  # noqa: ASYNC910
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            await self._commit({**self._data, key: value})

    async def delete(self, key: str) -> None:
        async with self._lock:
            if key not in self._data:
                return
            snapshot = dict(self._data)
            del snapshot[key]
            await self._commit(snapshot)

    async def exists(self, key: str) -> bool:  # noqa: ASYNC910
        return key in self._data

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _commit(self, snapshot: dict[str, str]) -> None:
        """Write *snapshot* to disk, then make it the in-memory view."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._write_sync, snapshot)
        self._data = snapshot

    def _load_sync(self) -> dict[str, str]:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable cache file %s: %s", self._path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring cache file %s: not a JSON object", self._path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_sync(self, snapshot: dict[str, str]) -> None:
        tmp = self._path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(snapshot, sort_keys=True), encoding="utf-8")
        os.replace(tmp, self._path)
