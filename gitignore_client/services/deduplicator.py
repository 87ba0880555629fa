"""
RequestDeduplicator - Prevents duplicate concurrent requests.

When multiple callers request the same resource simultaneously,
only one actual request is made and the result is shared.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

from loguru import logger

T = TypeVar("T")


class RequestDeduplicator:
    """
    Deduplicates concurrent async requests.

    When multiple coroutines request the same key simultaneously,
    only one actual request is made. All callers await the same result,
    or observe the same exception.

    Usage:
        dedup = RequestDeduplicator()

        async def fetch_data(url: str):
            return await dedup.dedupe(
                key=url,
                request_fn=lambda: client.fetch_with_retry(url)
            )
    """

    def __init__(self, debug: bool = False):
        self._in_flight: dict[str, asyncio.Task[Any]] = {}
        self._debug = debug
        self._stats = DedupeStats()

    async def dedupe(
        self,
        key: str,
        request_fn: Callable[[], Awaitable[T]],
    ) -> T:
        """
        Execute request with deduplication.

        If a request with the same key is already in flight,
        wait for and return its result instead of making a new request.

        Args:
            key: Unique identifier for this request
            request_fn: Async function to execute if no duplicate exists

        Returns:
            Result from request_fn (either fresh or from in-flight request)
        """
        # Lookup and registration must not be separated by an await.
        task = self._in_flight.get(key)
        if task is not None:
            self._stats.joined += 1
            self._trace("JOIN", key)
        else:
            self._stats.started += 1
            self._trace("START", key)
            task = asyncio.ensure_future(request_fn())
            self._in_flight[key] = task
            task.add_done_callback(lambda done: self._settle(key, done))

        # A cancelled waiter must not cancel the request shared by the others.
        return await asyncio.shield(task)

    def _settle(self, key: str, task: asyncio.Task[Any]) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        if task.cancelled():
            self._trace("CANCELLED", key)
        elif task.exception() is not None:
            self._stats.failed += 1
            self._trace("FAILED", key)
        else:
            self._trace("SETTLED", key)

    def cancel(self, key: str) -> bool:
        """Cancel an in-flight request."""
        task = self._in_flight.pop(key, None)
        if task is None:
            return False
        task.cancel()
        return True

    def cancel_all(self) -> int:
        """Cancel all in-flight requests."""
        tasks = list(self._in_flight.values())
        self._in_flight.clear()
        for task in tasks:
            task.cancel()
        return len(tasks)

    def get_in_flight_count(self) -> int:
        return len(self._in_flight)

    def get_stats(self) -> "DedupeStats":
        return self._stats

    def _trace(self, event: str, key: str) -> None:
        if self._debug:
            logger.debug(f"[RequestDeduplicator] {event} {key[:50]}")


@dataclass
class DedupeStats:
    """Counts of fetches started, callers that joined one, and shared failures."""

    started: int = 0
    joined: int = 0
    failed: int = 0

    @property
    def fetches_saved(self) -> float:
        """Share of callers served by a fetch another caller started."""
        callers = self.started + self.joined
        return self.joined / callers if callers else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "started": self.started,
            "joined": self.joined,
            "failed": self.failed,
            "fetches_saved": f"{self.fetches_saved:.2%}",
        }
