"""Outbound HTTP helpers: configured client, retries and a circuit breaker."""

from __future__ import annotations

import asyncio
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Awaitable, Callable, Iterable, Optional, TypeVar

import httpx

from storefront.config import settings

T = TypeVar("T")


class CircuitBreakerOpenError(RuntimeError):
    """Raised when the circuit breaker is open and rejects a call."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Circuit breaker '{name}' is open")
        self.name = name


class RetryableStatusError(httpx.HTTPError):
    """Marks a response whose status code should be retried."""

    def __init__(self, response: httpx.Response) -> None:
        super().__init__(f"Retryable response: {response.status_code}")
        self.response = response


@dataclass
class _CircuitState:
    failure_count: int = 0
    state: str = "closed"  # closed, open, half-open
    open_count: int = 0
    open_until: float = 0.0
    half_open_in_flight: bool = False


class AsyncCircuitBreaker:
    """Stops hammering a remote host after repeated failures."""

    def __init__(
        self,
        *,
        max_failures: int,
        base_delay: float,
        max_delay: float,
        name: str,
    ) -> None:
        if max_failures <= 0:
            raise ValueError("max_failures must be positive")
        if base_delay < 0 or max_delay < 0:
            raise ValueError("delay values must be non-negative")
        self._max_failures = max_failures
        self._base_delay = base_delay
        self._max_delay = max_delay
        self._name = name
        self._state = _CircuitState()
        self._lock = asyncio.Lock()

    @property
    def state(self) -> str:
        return self._state.state

    async def call(self, func: Callable[[], Awaitable[T]]) -> T:
        await self._acquire_permission()
        try:
            result = await func()
        except Exception:
            await self._record_failure()
            raise
        await self._record_success()
        return result

    async def _acquire_permission(self) -> None:
        async with self._lock:
            if self._state.state == "open":
                if time.monotonic() < self._state.open_until:
                    raise CircuitBreakerOpenError(self._name)
                self._state.state = "half-open"
                self._state.half_open_in_flight = False

            if self._state.state == "half-open":
                if self._state.half_open_in_flight:
                    raise CircuitBreakerOpenError(self._name)
                self._state.half_open_in_flight = True

    async def _record_failure(self) -> None:
        async with self._lock:
            if self._state.state == "half-open":
                self._trip()
                return
            self._state.failure_count += 1
            if self._state.failure_count >= self._max_failures:
                self._trip()

    async def _record_success(self) -> None:
        async with self._lock:
            self._state = _CircuitState()

    def _trip(self) -> None:
        self._state.state = "open"
        self._state.failure_count = self._max_failures
        self._state.open_count += 1
        delay = self._base_delay * (2 ** max(0, self._state.open_count - 1))
        if self._max_delay:
            delay = min(delay, self._max_delay)
        self._state.open_until = time.monotonic() + delay
        self._state.half_open_in_flight = False

    async def reset(self) -> None:
        async with self._lock:
            self._state = _CircuitState()


def breaker_from_settings(name: str) -> AsyncCircuitBreaker:
    return AsyncCircuitBreaker(
        max_failures=settings.HTTP_CIRCUIT_BREAKER_MAX_FAILURES,
        base_delay=settings.HTTP_CIRCUIT_BREAKER_BASE_DELAY,
        max_delay=settings.HTTP_CIRCUIT_BREAKER_MAX_DELAY,
        name=name,
    )


@asynccontextmanager
async def async_http_client(
    *,
    base_url: str | httpx.URL | None = None,
    follow_redirects: bool = True,
    additional_options: Optional[dict[str, Any]] = None,
) -> AsyncIterator[httpx.AsyncClient]:
    """Create an AsyncClient with the configured timeouts and proxy."""

    timeout = httpx.Timeout(
        timeout=settings.HTTP_TIMEOUT_TOTAL,
        connect=settings.HTTP_TIMEOUT_CONNECT,
        read=settings.HTTP_TIMEOUT_READ,
        write=settings.HTTP_TIMEOUT_WRITE,
    )
    options: dict[str, Any] = {
        "timeout": timeout,
        "follow_redirects": follow_redirects,
        "headers": {"Accept": "application/json"},
    }
    if base_url is not None:
        options["base_url"] = base_url
    if settings.HTTP_PROXY_URL:
        options["proxy"] = settings.HTTP_PROXY_URL
    if additional_options:
        options.update(additional_options)

    async with httpx.AsyncClient(**options) as client:
        yield client


async def request_with_retries(
    method: str,
    url: str,
    *,
    client: httpx.AsyncClient,
    circuit_breaker: AsyncCircuitBreaker,
    retries: int,
    backoff_factor: float,
    backoff_max: float,
    retry_statuses: Iterable[int] | None = None,
    **kwargs: Any,
) -> httpx.Response:
    """Execute a request with retry and circuit breaker protection.

    Only timeouts, network errors and ``retry_statuses`` are retried; any other
    response is returned to the caller as-is.
    """

    attempts = max(1, int(retries) + 1)
    delay = max(0.0, backoff_factor)
    retryable_statuses = set(retry_statuses or [])
    last_error: Exception | None = None

    for attempt in range(1, attempts + 1):
        async def _attempt() -> httpx.Response:
            response = await client.request(method, url, **kwargs)
            if response.status_code in retryable_statuses:
                raise RetryableStatusError(response)
            return response

        try:
            return await circuit_breaker.call(_attempt)
        except RetryableStatusError as exc:
            if attempt >= attempts:
                return exc.response
            last_error = exc
        except (httpx.TimeoutException, httpx.NetworkError) as exc:
            last_error = exc
            if attempt >= attempts:
                raise

        if delay > 0:
            await asyncio.sleep(delay)
            delay = min(delay * 2, backoff_max) if backoff_max > 0 else delay * 2

    assert last_error is not None
    raise last_error


async def get_with_settings(
    client: httpx.AsyncClient,
    url: str,
    circuit_breaker: AsyncCircuitBreaker,
) -> httpx.Response:
    """GET ``url`` using the retry policy from settings."""

    return await request_with_retries(
        "GET",
        url,
        client=client,
        circuit_breaker=circuit_breaker,
        retries=settings.HTTP_RETRY_ATTEMPTS,
        backoff_factor=settings.HTTP_RETRY_BACKOFF_INITIAL,
        backoff_max=settings.HTTP_RETRY_BACKOFF_MAX,
        retry_statuses=settings.HTTP_RETRY_STATUS_CODES,
    )


__all__ = [
    "AsyncCircuitBreaker",
    "CircuitBreakerOpenError",
    "async_http_client",
    "breaker_from_settings",
    "get_with_settings",
    "request_with_retries",
]
