"""
CacheManager - TTL validation and size-bounded eviction over a persistent store.

Two resources are cached:
- The template name list, stored as a list plus a separate timestamp key
- Gitignore bodies, stored as one map keyed by the canonical template key
"""

from dataclasses import dataclass
from typing import Any

from loguru import logger

from gitignore_client.constants import (
    ALL_STORAGE_KEYS,
    STORAGE_KEY_CONTENT_CACHE,
    STORAGE_KEY_TEMPLATE_LIST,
    STORAGE_KEY_TEMPLATE_LIST_TIMESTAMP,
)
from gitignore_client.services.store import PersistentStore


@dataclass(frozen=True)
class CacheEntry:
    """A cached gitignore body and the epoch-millisecond time it was written."""

    value: str
    timestamp: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted representation."""
        return {"content": self.value, "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, data: Any) -> "CacheEntry | None":
        """Build an entry from its persisted form, None if malformed."""
        if not isinstance(data, dict):
            return None
        content = data.get("content")
        timestamp = data.get("timestamp")
        if not isinstance(content, str) or not isinstance(timestamp, (int, float)):
            return None
        return cls(value=content, timestamp=int(timestamp))


CacheObject = dict[str, CacheEntry]


def is_cache_valid(
    cached: Any | None,
    timestamp: int | float | None,
    now: int | float,
    ttl: int | float,
) -> bool:
    """A cached value is valid iff present and strictly younger than ``ttl``."""
    return cached is not None and timestamp is not None and now - timestamp < ttl


def evict(cache: CacheObject, max_size: int) -> CacheObject:
    """
    Keep the ``max_size`` most recently written entries.

    Returns ``cache`` itself when it is already within bounds. Entries with
    equal timestamps keep their insertion order (stable sort).
    """
    if len(cache) <= max_size:
        return cache

    newest_first = sorted(
        cache.items(), key=lambda item: item[1].timestamp, reverse=True
    )
    return dict(newest_first[:max_size])


def make_cache_key(templates: list[str]) -> str:
    """Order-independent cache key for a template selection."""
    return ",".join(sorted(templates))


class CacheManager:
    """
    Typed access to the template caches held in a PersistentStore.

    Usage:
        cache = CacheManager(store)

        names, timestamp = await cache.get_template_list()
        if is_cache_valid(names, timestamp, now, ttl):
            return names
    """

    def __init__(self, store: PersistentStore, debug: bool = False):
        self._store = store
        self._debug = debug
        self._stats = CacheStats()

    async def get_template_list(self) -> tuple[list[str] | None, int | None]:
        """Return the cached template names and their timestamp."""
        names = await self._store.get(STORAGE_KEY_TEMPLATE_LIST)
        timestamp = await self._store.get(STORAGE_KEY_TEMPLATE_LIST_TIMESTAMP)
        if not isinstance(timestamp, (int, float)):
            timestamp = None
        # Callers get their own copy; the stored list is never handed out.
        return (list(names) if isinstance(names, list) else None), timestamp

    async def lookup_template_list(self, now: int, ttl: int) -> list[str] | None:
        """Return cached template names if still valid."""
        names, timestamp = await self.get_template_list()
        if is_cache_valid(names, timestamp, now, ttl):
            self._stats.hits += 1
            self._log("HIT: template list")
            return names

        self._stats.misses += 1
        self._log(f"{'EXPIRED' if names is not None else 'MISS'}: template list")
        return None

    async def update_template_list(self, names: list[str], timestamp: int) -> None:
        """Replace the cached template names."""
        await self._store.set(STORAGE_KEY_TEMPLATE_LIST, list(names))
        await self._store.set(STORAGE_KEY_TEMPLATE_LIST_TIMESTAMP, timestamp)
        self._log(f"SET: template list ({len(names)} names)")

    async def get_content_cache(self) -> CacheObject:
        """Return the gitignore content cache, skipping malformed entries."""
        raw = await self._store.get(STORAGE_KEY_CONTENT_CACHE)
        if not isinstance(raw, dict):
            return {}

        cache: CacheObject = {}
        for key, data in raw.items():
            entry = CacheEntry.from_dict(data)
            if entry is None:
                logger.warning(f"Dropping malformed content cache entry: {key[:50]}")
                continue
            cache[key] = entry
        return cache

    async def lookup_content(self, key: str, now: int, ttl: int) -> str | None:
        """Return cached content for ``key`` if still valid."""
        entry = (await self.get_content_cache()).get(key)
        if entry is not None and is_cache_valid(entry.value, entry.timestamp, now, ttl):
            self._stats.hits += 1
            self._log(f"HIT: {key[:50]}...")
            return entry.value

        self._stats.misses += 1
        self._log(f"{'EXPIRED' if entry else 'MISS'}: {key[:50]}...")
        return None

    async def update_content_cache(
        self,
        key: str,
        content: str,
        timestamp: int,
        max_size: int,
    ) -> CacheObject:
        """Merge a new entry into the content cache, evict and persist."""
        updated = dict(await self.get_content_cache())
        updated[key] = CacheEntry(value=content, timestamp=timestamp)

        cleaned = evict(updated, max_size)
        evicted = len(updated) - len(cleaned)
        if evicted:
            self._stats.evictions += evicted
            self._log(f"EVICT: {evicted} entries (max_size={max_size})")

        await self._store.set(
            STORAGE_KEY_CONTENT_CACHE,
            {k: entry.to_dict() for k, entry in cleaned.items()},
        )
        self._log(f"SET: {key[:50]}...")
        return cleaned

    async def clear_all(self) -> None:
        """Remove every cache key from the store."""
        for key in ALL_STORAGE_KEYS:
            await self._store.set(key, None)
        logger.info("Cleared all gitignore caches")

    def get_stats(self) -> "CacheStats":
        """Get cache statistics."""
        return self._stats

    def _log(self, message: str) -> None:
        """Log debug message if debug mode is enabled."""
        if self._debug:
            logger.debug(f"[CacheManager] {message}")


@dataclass
class CacheStats:
    """Cache statistics."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "hit_rate": f"{self.hit_rate:.2%}",
        }
