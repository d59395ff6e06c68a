"""Holder distribution — how much of the supply sits in the top wallets."""

from solguard.models.holder import ConcentrationLevel, HolderDistribution, HolderRecord

HIGH_TOP1_PCT = 50.0
HIGH_TOP5_PCT = 70.0
CONCENTRATED_TOP10_PCT = 80.0
MODERATE_TOP20_PCT = 90.0


def gini_coefficient(balances: list[int] | list[float]) -> float:
    """Inequality of `balances`: 0 = all equal, 1 = one holder has everything."""
    n = len(balances)
    total = sum(balances)
    if n == 0 or total <= 0:
        return 0.0
    ordered = sorted(balances)
    weighted = sum((2 * (i + 1) - n - 1) * x for i, x in enumerate(ordered))
    return min(1.0, max(0.0, weighted / (n * total)))


def _concentration(
    top1: float, top5: float, top10: float, top20: float
) -> tuple[ConcentrationLevel, str]:
    if top1 > HIGH_TOP1_PCT:
        return "Highly Concentrated", "🚨 CRITICAL: Top holder controls >50% of supply - Extreme centralization!"
    if top5 > HIGH_TOP5_PCT:
        return "Highly Concentrated", "🚨 CRITICAL: Top 5 holders control >70% of supply - Very high risk!"
    if top10 > CONCENTRATED_TOP10_PCT:
        return "Concentrated", "⚠️ WARNING: Top 10 holders control >80% of supply - High concentration"
    if top20 > MODERATE_TOP20_PCT:
        return "Moderate", "⚠️ CAUTION: Top 20 holders control >90% of supply - Moderately concentrated"
    return "Decentralized", "✅ SAFE: Well-distributed token ownership"


def analyze_distribution(holders: list[HolderRecord], total_supply: int) -> HolderDistribution:
    """Bucket the ranked holders and grade their concentration."""
    if total_supply <= 0:
        return HolderDistribution(warnings=["⚠️ WARNING: Total supply is 0"])

    ranked = sorted(holders, key=lambda h: h.rank)[:20]
    pcts = [h.balance / total_supply * 100 for h in ranked]
    top1 = sum(pcts[:1])
    top5 = sum(pcts[:5])
    top10 = sum(pcts[:10])
    top20 = sum(pcts[:20])
    level, warning = _concentration(top1, top5, top10, top20)

    return HolderDistribution(
        top_holders=ranked,
        top1_percentage=top1,
        top5_percentage=top5,
        top10_percentage=top10,
        top20_percentage=top20,
        others_percentage=max(0.0, 100 - top20),
        gini_coefficient=gini_coefficient([h.balance for h in ranked]),
        concentration_level=level,
        warnings=[warning],
    )
