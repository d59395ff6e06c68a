"""Honeypot signal — can the token actually be sold?

A Jupiter token -> SOL quote stands in for a sell. No route means nobody
can exit; a route with a huge price impact means exits are ruinous.
"""

from loguru import logger

from solguard.models.audit import HoneypotRiskLevel, HoneypotSignal
from solguard.parsers.jupiter.client import JupiterClient

HIGH_IMPACT_PCT = 50.0
MEDIUM_IMPACT_PCT = 20.0
LOW_IMPACT_PCT = 5.0


def impact_risk_level(price_impact_pct: float) -> HoneypotRiskLevel:
    if price_impact_pct > HIGH_IMPACT_PCT:
        return "High Risk"
    if price_impact_pct > MEDIUM_IMPACT_PCT:
        return "Medium Risk"
    if price_impact_pct > LOW_IMPACT_PCT:
        return "Low Risk"
    return "Safe"


async def detect_honeypot(
    client: JupiterClient, mint: str, *, decimals: int = 6
) -> HoneypotSignal | None:
    """Sell-quote honeypot check. None when the quote service is unavailable."""
    sim = await client.simulate_sell(mint, decimals=decimals)
    if sim.api_error:
        logger.debug(f"[HONEYPOT] Quote service unavailable for {mint[:12]}: {sim.error}")
        return None

    if not sim.sellable:
        logger.info(f"[HONEYPOT] {mint[:12]}: no sell route ({sim.error})")
        return HoneypotSignal(
            can_sell=False,
            risk_level="Honeypot",
            warnings=["💀 CRITICAL: This is a 100% scam - You cannot sell this token!"],
        )

    impact = sim.price_impact_pct or 0.0
    level = impact_risk_level(impact)
    if level == "High Risk":
        warning = f"🚨 CRITICAL: Extreme sell price impact ({impact:.1f}%) - Likely honeypot"
    elif level == "Medium Risk":
        warning = f"⚠️ WARNING: Very high sell price impact ({impact:.1f}%) - Suspicious"
    elif level == "Low Risk":
        warning = f"⚠️ CAUTION: Moderate price impact ({impact:.2f}%)"
    else:
        warning = "✅ SAFE: No honeypot detected, token is tradeable"

    return HoneypotSignal(
        can_sell=True,
        price_impact_pct=impact,
        risk_level=level,
        warnings=[warning],
    )
