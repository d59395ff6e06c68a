"""Jupiter Quote API client — sell simulation for the honeypot signal.

A token -> SOL quote tells whether any route can absorb a sell and at what
price impact. The keyed gateway is used when an API key is configured,
the public lite endpoint otherwise.
"""

import asyncio
from decimal import Decimal

import httpx
from loguru import logger

from solguard.parsers.constants import LAMPORTS_PER_SOL, WSOL_MINT
from solguard.parsers.jupiter.models import SellSimResult
from solguard.parsers.rate_limiter import RateLimiter

QUOTE_URL = "https://api.jup.ag/swap/v1/quote"
LITE_QUOTE_URL = "https://lite-api.jup.ag/swap/v1/quote"
MAX_RETRIES = 2
RETRY_DELAYS = [1.0, 3.0]


class JupiterClient:
    def __init__(self, api_key: str = "", max_rps: float = 1.0, timeout: float = 10.0) -> None:
        self._quote_url = QUOTE_URL if api_key else LITE_QUOTE_URL
        self._rate_limiter = RateLimiter(max_rps)
        headers: dict[str, str] = {"Accept": "application/json"}
        if api_key:
            headers["x-api-key"] = api_key
        self._client = httpx.AsyncClient(timeout=timeout, headers=headers)

    async def close(self) -> None:
        await self._client.aclose()

    async def simulate_sell(
        self, mint: str, amount_tokens: int = 1000, decimals: int = 6
    ) -> SellSimResult:
        """Quote selling `amount_tokens` whole tokens for SOL.

        HTTP 400 means Jupiter found no route: the token cannot be sold.
        """
        params = {
            "inputMint": mint,
            "outputMint": WSOL_MINT,
            "amount": str(amount_tokens * (10 ** decimals)),
            "slippageBps": "5000",
        }

        for attempt in range(MAX_RETRIES + 1):
            delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
            try:
                await self._rate_limiter.acquire()
                resp = await self._client.get(self._quote_url, params=params)
            except (httpx.TimeoutException, httpx.ConnectError) as e:
                if attempt < MAX_RETRIES:
                    logger.debug(f"[JUPITER] Quote {type(e).__name__}, retry in {delay}s")
                    await asyncio.sleep(delay)
                    continue
                logger.warning(f"[JUPITER] Quote failed after retries: {e}")
                return SellSimResult(error=str(e), api_error=True)
            except httpx.HTTPError as e:
                logger.warning(f"[JUPITER] Quote transport error: {type(e).__name__}: {e}")
                return SellSimResult(error=f"{type(e).__name__}: {e}", api_error=True)

            if resp.status_code == 429 or (resp.status_code >= 500 and attempt < MAX_RETRIES):
                logger.debug(f"[JUPITER] Quote HTTP {resp.status_code}, retry in {delay}s")
                await asyncio.sleep(delay)
                continue

            if resp.status_code == 400:
                try:
                    data = resp.json()
                    error = data.get("error") or data.get("message") or "No route"
                except (ValueError, AttributeError):
                    error = "No route"
                return SellSimResult(sellable=False, error=str(error))

            if resp.status_code != 200:
                return SellSimResult(error=f"HTTP {resp.status_code}", api_error=True)

            try:
                data = resp.json()
                if not isinstance(data, dict):
                    raise ValueError(f"unexpected quote body: {type(data).__name__}")
                out_amount = int(data.get("outAmount", 0) or 0)
                impact = data.get("priceImpactPct")
                impact_pct = float(impact) if impact not in (None, "") else None
            except (ValueError, TypeError) as e:
                logger.warning(f"[JUPITER] Malformed quote for {mint[:12]}: {e}")
                return SellSimResult(error=f"Malformed quote: {e}", api_error=True)

            return SellSimResult(
                sellable=out_amount > 0,
                output_amount=Decimal(out_amount) / Decimal(LAMPORTS_PER_SOL),
                price_impact_pct=impact_pct,
                error=None if out_amount > 0 else "Empty quote",
            )

        return SellSimResult(error="Max retries exceeded", api_error=True)
