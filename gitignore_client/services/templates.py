"""
TemplateService - Read-through caching of the template list and gitignore bodies.

Flow for both resources:
    cache lookup -> (hit) return
                 -> (miss) dedupe -> fetch with retry -> update cache -> return
"""

import time
from typing import TYPE_CHECKING, Callable

from loguru import logger

from gitignore_client.services.api import fetch_gitignore_content, fetch_templates
from gitignore_client.services.cache import CacheManager, make_cache_key
from gitignore_client.services.client import ServiceClient
from gitignore_client.services.deduplicator import RequestDeduplicator
from gitignore_client.services.errors import ApiError
from gitignore_client.services.store import JsonFileStore, PersistentStore
from gitignore_client.types import TemplateConfig

if TYPE_CHECKING:
    from gitignore_client.settings import Settings


def _now_ms() -> int:
    return int(time.time() * 1000)


class TemplateService:
    """
    Fetches gitignore templates through the cache.

    Usage:
        service = TemplateService(JsonFileStore(".gitignore_cache.json"))
        names = await service.get_templates(config)
        body = await service.get_gitignore_content(config, ["python", "node"])
    """

    def __init__(
        self,
        store: PersistentStore,
        client: ServiceClient | None = None,
        clock: Callable[[], int] | None = None,
        deduplicator: RequestDeduplicator | None = None,
        debug: bool = False,
    ):
        self._cache = CacheManager(store, debug=debug)
        self._client = client or ServiceClient(debug=debug)
        self._clock = clock or _now_ms
        self._deduplicator = deduplicator or RequestDeduplicator(debug=debug)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TemplateService":
        """Build a service persisting to ``settings.cache_file``."""
        client = ServiceClient(
            default_timeout_ms=settings.request_timeout_ms,
            default_max_retries=settings.request_max_retries,
            debug=settings.debug,
        )
        return cls(JsonFileStore(settings.cache_file), client=client, debug=settings.debug)

    @property
    def cache(self) -> CacheManager:
        return self._cache

    async def get_templates(self, config: TemplateConfig) -> list[str]:
        """Return available template names, from cache while fresh."""
        cached = await self._cache.lookup_template_list(
            self._clock(), config.template_list_ttl
        )
        if cached is not None:
            return cached

        endpoint = config.custom_api_endpoint

        async def do_request() -> list[str]:
            fetched = await fetch_templates(self._client, endpoint)
            await self._cache.update_template_list(fetched, self._clock())
            return fetched

        return await self._deduplicator.dedupe(
            f"templates:{endpoint or 'default'}", do_request
        )

    async def get_gitignore_content(
        self, config: TemplateConfig, templates: list[str]
    ) -> str:
        """
        Return the combined gitignore body for ``templates``.

        Selections that differ only in order share one cache entry; the
        request itself keeps the caller's order.

        Raises:
            ApiError: If ``templates`` is empty, or on HTTP errors
            NetworkError: On timeouts and connection failures
            StorageError: If the store cannot be read or written
        """
        if not templates:
            raise ApiError("No templates provided")

        requested = list(templates)
        cache_key = make_cache_key(requested)

        cached = await self._cache.lookup_content(
            cache_key, self._clock(), config.gitignore_cache_ttl
        )
        if cached is not None:
            return cached

        endpoint = config.custom_api_endpoint

        async def do_request() -> str:
            fetched = await fetch_gitignore_content(self._client, requested, endpoint)
            await self._cache.update_content_cache(
                cache_key, fetched, self._clock(), config.max_cache_size
            )
            return fetched

        return await self._deduplicator.dedupe(
            f"gitignore:{cache_key}:{endpoint or 'default'}", do_request
        )

    async def clear_all_cache(self) -> None:
        """Drop both caches from the store."""
        await self._cache.clear_all()

    async def close(self) -> None:
        """Cancel pending fetches and close the HTTP client."""
        cancelled = self._deduplicator.cancel_all()
        if cancelled:
            logger.debug(f"Cancelled {cancelled} in-flight template requests")
        await self._client.close()

    async def __aenter__(self) -> "TemplateService":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
