"""
Persistent key-value stores backing the template caches.
"""

import asyncio
import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from loguru import logger

from gitignore_client.services.errors import StorageError


class PersistentStore(ABC):
    """
    Abstract key-value store supplied by the host environment.

    Values must be JSON-compatible. Setting a key to ``None`` removes it.
    """

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Return the value stored under ``key`` or None."""
        ...

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``."""
        ...


class MemoryStore(PersistentStore):
    """Process-local store, mostly useful for tests and short-lived hosts."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, Any] = dict(initial or {})

    async def get(self, key: str) -> Any | None:
        return self._data.get(key)

    async def set(self, key: str, value: Any) -> None:
        if value is None:
            self._data.pop(key, None)
        else:
            self._data[key] = value

    def keys(self) -> list[str]:
        return list(self._data.keys())


class JsonFileStore(PersistentStore):
    """
    Store persisted as a single JSON document.

    The document is loaded lazily on first access and rewritten in full on
    every ``set`` through a temporary file, so readers never see a partial
    write.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._data: dict[str, Any] | None = None
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Any | None:
        async with self._lock:
            data = await self._load()
            return data.get(key)

    async def set(self, key: str, value: Any) -> None:
        async with self._lock:
            data = dict(await self._load())
            if value is None:
                data.pop(key, None)
            else:
                data[key] = value
            await asyncio.to_thread(self._write, data)
            self._data = data

    async def _load(self) -> dict[str, Any]:
        if self._data is None:
            self._data = await asyncio.to_thread(self._read)
        return self._data

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to read cache file {self.path}", cause=e) from e

        if not isinstance(data, dict):
            raise StorageError(f"Cache file {self.path} does not hold a JSON object")

        logger.debug(f"Loaded {len(data)} keys from {self.path}")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Failed to write cache file {self.path}", cause=e) from e
