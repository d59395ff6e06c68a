"""Pump.fun coin lookup — resolves the real creator of shared-launch tokens.

Pump.fun mints all share one mint authority, so the on-chain authority says
nothing about who launched the coin. The frontend API (with PumpPortal as a
fallback) reports the creating wallet.
"""

import asyncio

import httpx
from loguru import logger

from solguard.parsers.pumpfun.models import CREATOR_FIELDS, PumpfunCoin
from solguard.parsers.rate_limiter import RateLimiter

COIN_ENDPOINTS = (
    ("pump.fun", "https://frontend-api.pump.fun/coins/{mint}"),
    ("pumpportal", "https://pumpportal.fun/api/data/token?address={mint}"),
)
MAX_RETRIES = 2
RETRY_DELAYS = [1.0, 3.0]


class PumpfunClient:
    """Async HTTP client for the public launch platform APIs (free, no key)."""

    def __init__(self, max_rps: float = 2.0, timeout: float = 5.0) -> None:
        self._rate_limiter = RateLimiter(max_rps)
        self._client = httpx.AsyncClient(
            timeout=timeout, headers={"User-Agent": "SolGuard/1.0"}
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def get_coin(self, mint: str) -> PumpfunCoin | None:
        """Query each endpoint in turn; first response naming a creator wins."""
        for source, template in COIN_ENDPOINTS:
            data = await self._get_json(template.format(mint=mint), source)
            if not isinstance(data, dict):
                continue
            coin = _parse_coin(mint, data, source)
            if coin.creator:
                return coin
        return None

    async def get_creator(self, mint: str) -> str | None:
        coin = await self.get_coin(mint)
        return coin.creator if coin else None

    async def _get_json(self, url: str, source: str) -> dict | list | None:
        for attempt in range(MAX_RETRIES + 1):
            try:
                await self._rate_limiter.acquire()
                resp = await self._client.get(url)

                if resp.status_code == 429:
                    delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
                    logger.debug(f"[PUMPFUN] {source} rate limited, waiting {delay}s")
                    await asyncio.sleep(delay)
                    continue

                if resp.status_code != 200:
                    logger.debug(f"[PUMPFUN] {source} HTTP {resp.status_code}")
                    return None

                return resp.json()

            except (httpx.TimeoutException, httpx.ConnectError) as e:
                if attempt < MAX_RETRIES:
                    delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
                    logger.debug(f"[PUMPFUN] {source} {type(e).__name__}, retry in {delay}s")
                    await asyncio.sleep(delay)
                else:
                    logger.warning(f"[PUMPFUN] {source} failed: {e}")
                    return None
            except ValueError as e:
                logger.debug(f"[PUMPFUN] {source} returned invalid JSON: {e}")
                return None

        return None


def _parse_coin(mint: str, data: dict, source: str) -> PumpfunCoin:
    creator = None
    for key in CREATOR_FIELDS:
        value = data.get(key)
        if value and isinstance(value, str):
            creator = value
            break

    return PumpfunCoin(
        mint=data.get("mint", mint) or mint,
        creator=creator,
        name=data.get("name", "") or "",
        symbol=data.get("symbol", "") or "",
        created_timestamp=int(data.get("created_timestamp", 0) or 0),
        source=source,
    )
