import asyncio
import random
from collections.abc import Awaitable, Callable
from typing import TypeVar

from loguru import logger

from solguard.parsers.rpc.exceptions import RateLimitedError, RpcTimeoutError

T = TypeVar("T")

RETRYABLE_ERRORS: tuple[type[Exception], ...] = (RateLimitedError, RpcTimeoutError)


class RateLimiter:
    """Minimum-interval rate limiter for async HTTP clients."""

    def __init__(self, max_rps: float) -> None:
        self._min_interval = 1.0 / max_rps
        self._last_request = 0.0
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        async with self._lock:
            loop = asyncio.get_running_loop()
            now = loop.time()
            wait = self._min_interval - (now - self._last_request)
            if wait > 0:
                await asyncio.sleep(wait)
            self._last_request = loop.time()


class FetchExecutor:
    """Bounded, paced, retrying executor for gateway calls.

    Every RPC call issued by the analyzers goes through `call()`:
    - at most `max_concurrency` calls are in flight (semaphore slot held per attempt),
    - consecutive requests are spaced by the RateLimiter interval,
    - RateLimitedError / RpcTimeoutError are retried with exponential backoff + jitter,
      up to `max_attempts` total attempts; any other error propagates immediately.

    Backoff sleeps happen outside the semaphore so a throttled call does not
    starve the others.
    """

    def __init__(
        self,
        *,
        max_concurrency: int = 5,
        max_rps: float = 10.0,
        max_attempts: int = 3,
        backoff_base: float = 1.0,
        backoff_max: float = 8.0,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._rate_limiter = rate_limiter or RateLimiter(max_rps)
        self._max_concurrency = max_concurrency
        self._max_attempts = max_attempts
        self._backoff_base = backoff_base
        self._backoff_max = backoff_max
        self._in_flight = 0
        self.peak_in_flight = 0
        self.retries = 0

    @property
    def max_concurrency(self) -> int:
        return self._max_concurrency

    @property
    def in_flight(self) -> int:
        return self._in_flight

    def backoff_delay(self, attempt: int) -> float:
        """Delay before retry number `attempt` (1-based): base * 2^(attempt-1) plus jitter."""
        delay = min(self._backoff_base * (2 ** (attempt - 1)), self._backoff_max)
        return delay + random.uniform(0, self._backoff_base)

    async def call(self, fn: Callable[..., Awaitable[T]], *args, **kwargs) -> T:
        name = getattr(fn, "__name__", "call")
        attempt = 1
        while True:
            async with self._semaphore:
                await self._rate_limiter.acquire()
                self._in_flight += 1
                self.peak_in_flight = max(self.peak_in_flight, self._in_flight)
                try:
                    return await fn(*args, **kwargs)
                except RETRYABLE_ERRORS as e:
                    if attempt >= self._max_attempts:
                        logger.warning(
                            f"[EXECUTOR] {name} failed after {attempt} attempts: {e}"
                        )
                        raise
                    delay = self.backoff_delay(attempt)
                    logger.debug(
                        f"[EXECUTOR] {name} {type(e).__name__}, "
                        f"retry {attempt}/{self._max_attempts - 1} in {delay:.2f}s"
                    )
                finally:
                    self._in_flight -= 1

            self.retries += 1
            attempt += 1
            await asyncio.sleep(delay)
