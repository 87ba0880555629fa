"""
ServiceClient - Async HTTP GET with timeout, cancellation and retry/backoff.

Failures are classified into retryable and non-retryable:
- ApiError with a 4xx status (except 429) stops retrying immediately
- Cancellation via an asyncio.Event stops retrying immediately
- Everything else (timeouts, connection errors, 5xx, 429) is retried
"""

import asyncio
from typing import Any, Awaitable

import httpx
from loguru import logger

from gitignore_client.constants import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_DELAY_MS,
    DEFAULT_TIMEOUT_MS,
)
from gitignore_client.services.errors import (
    ApiError,
    NetworkError,
    NetworkErrorReason,
)


def calculate_backoff_delay(attempt: int, base_delay_ms: float) -> float:
    """Exponential backoff delay in milliseconds for a 0-based attempt index."""
    return base_delay_ms * 2**attempt


def is_non_retryable_client_error(error: BaseException) -> bool:
    """True for API errors with a 4xx status other than 429."""
    return isinstance(error, ApiError) and not error.is_retryable


def wrap_unknown_error(error: BaseException) -> ApiError | NetworkError:
    """Pass typed transport errors through, wrap anything else as NetworkError."""
    if isinstance(error, (ApiError, NetworkError)):
        return error
    return NetworkError(f"Request failed: {error}", cause=error)


async def _sleep(seconds: float) -> None:
    await asyncio.sleep(seconds)


async def _run_cancellable(
    aw: Awaitable[Any],
    cancel_event: asyncio.Event | None,
    timeout: float | None,
) -> Any:
    """
    Await ``aw`` until it finishes, ``cancel_event`` is set or ``timeout`` expires.

    Raises:
        NetworkError: with reason CANCELLED or TIMEOUT
    """
    task = asyncio.ensure_future(aw)
    waiters: set[asyncio.Future[Any]] = {task}
    cancel_waiter: asyncio.Future[Any] | None = None
    if cancel_event is not None:
        cancel_waiter = asyncio.ensure_future(cancel_event.wait())
        waiters.add(cancel_waiter)

    try:
        done, _ = await asyncio.wait(
            waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
        )
    finally:
        if cancel_waiter is not None:
            cancel_waiter.cancel()
        if not task.done():
            task.cancel()
            await asyncio.wait({task})

    if task in done:
        return task.result()

    if cancel_event is not None and cancel_event.is_set():
        raise NetworkError("Request was cancelled", reason=NetworkErrorReason.CANCELLED)

    raise NetworkError(
        f"Request timeout after {round((timeout or 0) * 1000)}ms",
        reason=NetworkErrorReason.TIMEOUT,
    )


class ServiceClient:
    """
    HTTP client with per-attempt timeouts, cancellation and exponential backoff.

    Usage:
        async with ServiceClient() as client:
            response = await client.fetch_with_retry(
                "https://www.toptal.com/developers/gitignore/api/list"
            )
            print(response.text)
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        default_timeout_ms: int = DEFAULT_TIMEOUT_MS,
        default_max_retries: int = DEFAULT_MAX_RETRIES,
        debug: bool = False,
    ):
        self._default_timeout_ms = default_timeout_ms
        self._default_max_retries = default_max_retries
        self._debug = debug

        # HTTP client (lazy initialization unless injected)
        self._http_client = http_client
        self._owns_http_client = http_client is None

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._default_timeout_ms / 1000),
                follow_redirects=True,
            )
        return self._http_client

    async def fetch_with_retry(
        self,
        url: str,
        *,
        timeout_ms: int | None = None,
        max_retries: int | None = None,
        base_delay_ms: float = DEFAULT_RETRY_DELAY_MS,
        cancel_event: asyncio.Event | None = None,
    ) -> httpx.Response:
        """
        GET ``url``, retrying transient failures with exponential backoff.

        Args:
            url: Full URL to request
            timeout_ms: Upper bound for a single attempt
            max_retries: Retries after the first attempt
            base_delay_ms: Delay before the first retry, doubled each time
            cancel_event: Setting this event aborts all attempts

        Returns:
            The successful (2xx) response

        Raises:
            ValueError: If max_retries is negative
            ApiError: Non-2xx status that was not retried or exhausted retries
            NetworkError: Timeout, cancellation or connection failure
        """
        attempt_timeout_ms = timeout_ms or self._default_timeout_ms
        if max_retries is None:
            max_retries = self._default_max_retries
        if max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {max_retries}")
        last_error: BaseException

        for attempt in range(max_retries + 1):
            if cancel_event is not None and cancel_event.is_set():
                last_error = NetworkError(
                    "Request was cancelled", reason=NetworkErrorReason.CANCELLED
                )
                break

            if attempt > 0:
                logger.debug(
                    f"Retrying fetch (attempt {attempt + 1}/{max_retries + 1}): {url}"
                )

            try:
                return await self._attempt(url, attempt_timeout_ms, cancel_event)
            except Exception as e:
                last_error = e

            if _is_cancellation(last_error):
                self._log(f"Request cancelled, stopping retries: {url}")
                break

            if attempt == max_retries:
                logger.debug(f"Max retries ({max_retries + 1}) reached for: {url}")
                break

            if is_non_retryable_client_error(last_error):
                logger.debug(f"Non-retryable client error, stopping retries: {url}")
                break

            delay = calculate_backoff_delay(attempt, base_delay_ms)
            logger.debug(
                f"Attempt {attempt + 1} failed ({last_error}), "
                f"waiting {delay:.0f}ms before retry"
            )
            try:
                await _run_cancellable(_sleep(delay / 1000), cancel_event, None)
            except NetworkError as e:
                last_error = e
                break

        raise wrap_unknown_error(last_error)

    async def _attempt(
        self,
        url: str,
        timeout_ms: int,
        cancel_event: asyncio.Event | None,
    ) -> httpx.Response:
        """Execute a single time-bounded GET."""
        client = await self._get_http_client()
        timeout = timeout_ms / 1000

        try:
            response: httpx.Response = await _run_cancellable(
                client.get(url, timeout=timeout), cancel_event, timeout
            )
            response.raise_for_status()
            self._log(f"GET {url} -> {response.status_code}")
            return response

        except httpx.TimeoutException as e:
            raise NetworkError(
                f"Request timeout after {timeout_ms}ms",
                cause=e,
                reason=NetworkErrorReason.TIMEOUT,
            ) from e

        except httpx.HTTPStatusError as e:
            raise ApiError(
                f"HTTP {e.response.status_code}: {e.response.reason_phrase}",
                status_code=e.response.status_code,
                cause=e,
            ) from e

        except httpx.RequestError as e:
            raise NetworkError(
                f"Network error: {e}",
                cause=e,
                reason=NetworkErrorReason.CONNECTION,
            ) from e

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._http_client is not None and self._owns_http_client:
            await self._http_client.aclose()
            self._http_client = None
        logger.debug("ServiceClient closed")

    async def __aenter__(self) -> "ServiceClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    def _log(self, message: str) -> None:
        """Log debug message if debug mode is enabled."""
        if self._debug:
            logger.debug(f"[ServiceClient] {message}")


def _is_cancellation(error: BaseException) -> bool:
    return (
        isinstance(error, NetworkError)
        and error.reason == NetworkErrorReason.CANCELLED
    )
