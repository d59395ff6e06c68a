"""Liquidity signal from DexScreener pairs.

The deepest pair decides the tier: no pair at all is Critical, under
$1k TVL is Critical, under $5k is Medium, anything deeper is Safe.
"""

import httpx
from loguru import logger
from pydantic import ValidationError

from solguard.models.audit import LiquiditySignal
from solguard.parsers.dexscreener.client import DexScreenerClient

CRITICAL_TVL_USD = 1_000.0
LOW_TVL_USD = 5_000.0
MODERATE_TVL_USD = 20_000.0


async def analyze_liquidity(client: DexScreenerClient, mint: str) -> LiquiditySignal:
    try:
        pairs = await client.get_token_pairs(mint)
    except (httpx.HTTPError, ValidationError, ValueError) as e:
        logger.debug(f"[LIQUIDITY] Pair lookup failed for {mint[:12]}: {e}")
        return LiquiditySignal(
            has_liquidity=False,
            risk_level="High",
            warnings=["⚠️ WARNING: Could not fetch pool data"],
        )

    if not pairs:
        return LiquiditySignal(
            has_liquidity=False,
            risk_level="Critical",
            warnings=["⚠️ WARNING: No liquidity pool found - Token cannot be traded"],
        )

    main = max(pairs, key=lambda p: p.tvl_usd)
    tvl = sum(p.tvl_usd for p in pairs)
    volume = sum(p.volume_24h_usd for p in pairs)

    warnings: list[str] = []
    if tvl < CRITICAL_TVL_USD:
        risk = "Critical"
        warnings.append(f"🚨 CRITICAL: Very low liquidity (${tvl:,.2f}) - High slippage risk")
    elif tvl < LOW_TVL_USD:
        risk = "Medium"
        warnings.append(f"⚠️ CAUTION: Low liquidity (${tvl:,.2f}) - Moderate slippage")
    elif tvl < MODERATE_TVL_USD:
        risk = "Safe"
        warnings.append(f"✅ SAFE: Moderate liquidity (${tvl:,.2f})")
    else:
        risk = "Safe"
        warnings.append(f"✅ SAFE: Good liquidity (${tvl:,.2f})")

    if volume <= 0:
        warnings.append("⚠️ WARNING: No trading volume in the last 24h")

    logger.debug(
        f"[LIQUIDITY] {mint[:12]}: {len(pairs)} pairs, tvl=${tvl:,.0f}, "
        f"vol24h=${volume:,.0f} -> {risk}"
    )
    return LiquiditySignal(
        has_liquidity=True,
        pool_count=len(pairs),
        dex_ids=sorted({p.dexId for p in pairs if p.dexId}),
        main_pool_address=main.pairAddress or None,
        tvl_usd=tvl,
        volume_24h_usd=volume,
        risk_level=risk,
        warnings=warnings,
    )
