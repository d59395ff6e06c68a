"""DexScreener pair lookup — public REST API, no key required."""

import asyncio

import httpx
from loguru import logger

from solguard.parsers.dexscreener.models import DexScreenerPair
from solguard.parsers.rate_limiter import RateLimiter

BASE_URL = "https://api.dexscreener.com"
MAX_RETRIES = 3
RETRY_DELAYS = [1.0, 2.0, 4.0]


class DexScreenerClient:
    """Async client for the Solana pair endpoints."""

    def __init__(self, rate_limiter: RateLimiter | None = None, max_rps: float = 4.0) -> None:
        self._client = httpx.AsyncClient(
            base_url=BASE_URL,
            timeout=10.0,
            headers={"Accept": "application/json"},
        )
        self._rate_limiter = rate_limiter or RateLimiter(max_rps)

    async def close(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str) -> httpx.Response:
        """GET with backoff on 429 and connection trouble; other HTTP errors raise."""
        for attempt in range(MAX_RETRIES):
            await self._rate_limiter.acquire()
            delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
            try:
                response = await self._client.get(path)
            except (httpx.TimeoutException, httpx.ConnectError) as e:
                if attempt == MAX_RETRIES - 1:
                    raise
                logger.debug(f"[DEXSCREENER] {type(e).__name__}, retrying in {delay}s")
                await asyncio.sleep(delay)
                continue

            if response.status_code == 429 and attempt < MAX_RETRIES - 1:
                retry_after = response.headers.get("Retry-After")
                if retry_after:
                    delay = max(float(retry_after), delay)
                logger.debug(f"[DEXSCREENER] 429 rate limited, retrying in {delay}s")
                await asyncio.sleep(delay)
                continue

            response.raise_for_status()
            return response

        raise httpx.HTTPError(f"{path}: retries exhausted")

    async def get_token_pairs(self, token_address: str) -> list[DexScreenerPair]:
        """All Solana pairs trading `token_address` (empty when it has none)."""
        response = await self._get(f"/token-pairs/v1/solana/{token_address}")
        data = response.json()
        if isinstance(data, dict):
            data = data.get("pairs") or []
        if not isinstance(data, list):
            return []
        return [DexScreenerPair.model_validate(p) for p in data if isinstance(p, dict)]
