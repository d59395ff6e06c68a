"""Tests for FetchExecutor — bounded concurrency, pacing and retry policy."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from solguard.parsers.rate_limiter import FetchExecutor, RateLimiter
from solguard.parsers.rpc.exceptions import (
    MintNotFoundError,
    RateLimitedError,
    RpcError,
    RpcTimeoutError,
)


class TestRetryPolicy:
    @pytest.mark.asyncio
    async def test_rate_limited_is_retried(self, executor: FetchExecutor) -> None:
        fn = AsyncMock(side_effect=[RateLimitedError("429", code=429), "ok"])

        assert await executor.call(fn, "arg") == "ok"
        assert fn.await_count == 2
        assert executor.retries == 1
        fn.assert_awaited_with("arg")

    @pytest.mark.asyncio
    async def test_timeout_is_retried_until_attempts_exhausted(self, executor: FetchExecutor) -> None:
        fn = AsyncMock(side_effect=RpcTimeoutError("timed out"))

        with pytest.raises(RpcTimeoutError):
            await executor.call(fn)
        assert fn.await_count == 3
        assert executor.retries == 2

    @pytest.mark.asyncio
    async def test_other_rpc_errors_propagate_immediately(self, executor: FetchExecutor) -> None:
        fn = AsyncMock(side_effect=RpcError("invalid params", code=-32602))

        with pytest.raises(RpcError):
            await executor.call(fn)
        assert fn.await_count == 1
        assert executor.retries == 0

    @pytest.mark.asyncio
    async def test_domain_errors_are_not_retried(self, executor: FetchExecutor) -> None:
        fn = AsyncMock(side_effect=MintNotFoundError("nope"))

        with pytest.raises(MintNotFoundError):
            await executor.call(fn)
        assert fn.await_count == 1

    @pytest.mark.asyncio
    async def test_kwargs_forwarded(self, executor: FetchExecutor) -> None:
        fn = AsyncMock(return_value=[])

        await executor.call(fn, "addr", limit=1000, before="x")

        fn.assert_awaited_once_with("addr", limit=1000, before="x")


class TestConcurrencyBound:
    @pytest.mark.asyncio
    async def test_in_flight_never_exceeds_limit(self) -> None:
        executor = FetchExecutor(max_concurrency=2, max_rps=10_000.0, backoff_base=0.0)

        async def slow(i: int) -> int:
            await asyncio.sleep(0.01)
            return i

        results = await asyncio.gather(*(executor.call(slow, i) for i in range(10)))

        assert results == list(range(10))
        assert executor.peak_in_flight == 2
        assert executor.in_flight == 0

    def test_invalid_limits_rejected(self) -> None:
        with pytest.raises(ValueError):
            FetchExecutor(max_concurrency=0)
        with pytest.raises(ValueError):
            FetchExecutor(max_attempts=0)


class TestBackoff:
    def test_exponential_with_cap(self) -> None:
        executor = FetchExecutor(backoff_base=1.0, backoff_max=8.0)

        assert 1.0 <= executor.backoff_delay(1) <= 2.0
        assert 2.0 <= executor.backoff_delay(2) <= 3.0
        assert 4.0 <= executor.backoff_delay(3) <= 5.0
        assert 8.0 <= executor.backoff_delay(10) <= 9.0


class TestRateLimiter:
    @pytest.mark.asyncio
    async def test_spaces_consecutive_requests(self) -> None:
        limiter = RateLimiter(max_rps=50.0)
        loop = asyncio.get_running_loop()

        start = loop.time()
        for _ in range(3):
            await limiter.acquire()
        elapsed = loop.time() - start

        # first acquire is free, the next two wait ~20ms each
        assert elapsed >= 0.035
