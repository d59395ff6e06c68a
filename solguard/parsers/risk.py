"""Risk aggregation — fold every signal into one 0-100 safety score.

Starts at 100 and subtracts a fixed penalty per finding. Every check adds a
warning line, positive outcomes included, so the report reads as a full
checklist. Signals that could not be computed add an "unavailable" line and
no penalty.
"""

from solguard.models.audit import HoneypotSignal, LiquiditySignal, RiskAssessment, RiskLevel
from solguard.models.holder import ClusterAnalysis, HolderDistribution
from solguard.models.token import AuthorityStatus, DeveloperProfile, MetadataInfo

INITIAL_SCORE = 100
SAFE_THRESHOLD = 80
CAUTION_THRESHOLD = 50

MINT_AUTHORITY_PENALTY = 50
FREEZE_AUTHORITY_PENALTY = 20
MUTABLE_METADATA_PENALTY = 10

LIQUIDITY_PENALTIES = {"Critical": 40, "High": 25, "Medium": 10, "Safe": 0}
HONEYPOT_PENALTIES = {"Honeypot": 50, "High Risk": 30, "Medium Risk": 15, "Low Risk": 5, "Safe": 0}
DEVELOPER_PENALTIES = {"Serial Scammer": 30, "High Risk": 15, "Medium Risk": 0, "Clean": 0}
CLUSTER_PENALTIES = {"Critical": 30, "High": 20, "Medium": 10, "Low": 0}
DISTRIBUTION_PENALTIES = {
    "Highly Concentrated": 15,
    "Concentrated": 10,
    "Moderate": 0,
    "Decentralized": 0,
}


def risk_level(score: int) -> RiskLevel:
    if score >= SAFE_THRESHOLD:
        return "Safe"
    if score >= CAUTION_THRESHOLD:
        return "Caution"
    return "Rug Pull Risk"


def _developer_warning(dev: DeveloperProfile) -> str:
    total, rugged = dev.tokens_created_count, dev.rugged_count
    if dev.risk_level == "Serial Scammer":
        return (
            f"🚨 CRITICAL: Deployer is a serial scammer - {rugged}/{total} previous tokens "
            f"rugged ({dev.win_rate:.2f}% win rate)"
        )
    if dev.risk_level == "High Risk":
        return f"⚠️ WARNING: Deployer has rugged before - {rugged}/{total} tokens rugged"
    if dev.risk_level == "Medium Risk":
        return f"⚠️ CAUTION: Limited deployer track record - {total} token(s), {rugged} rugged"
    return "✅ SAFE: Deployer has a clean track record"


def _cluster_warning(clusters: ClusterAnalysis) -> str:
    summary = clusters.summary
    pct = summary.suspicious_control_percentage
    count = len(clusters.suspicious_clusters)
    if summary.risk_level == "Critical":
        return f"🚨 CRITICAL: {count} wallet cluster(s) sharing a funder control {pct:.1f}% of supply"
    if summary.risk_level == "High":
        return f"⚠️ WARNING: {count} wallet cluster(s) sharing a funder control {pct:.1f}% of supply"
    if summary.risk_level == "Medium":
        return f"⚠️ CAUTION: {count} wallet cluster(s) sharing a funder control {pct:.1f}% of supply"
    return "✅ SAFE: No significant funding clusters among top holders"


def aggregate(
    authority: AuthorityStatus,
    metadata: MetadataInfo,
    liquidity: LiquiditySignal | None = None,
    developer: DeveloperProfile | None = None,
    clusters: ClusterAnalysis | None = None,
    distribution: HolderDistribution | None = None,
    honeypot: HoneypotSignal | None = None,
) -> RiskAssessment:
    score = INITIAL_SCORE
    warnings: list[str] = []

    if authority.mint_authority.is_active:
        score -= MINT_AUTHORITY_PENALTY
        warnings.append(
            "🚨 CRITICAL: Mint Authority is active - Developer can mint unlimited tokens, diluting supply"
        )
    else:
        warnings.append("✅ SAFE: Mint Authority has been revoked - Supply is fixed")

    if authority.freeze_authority.is_active:
        score -= FREEZE_AUTHORITY_PENALTY
        warnings.append("⚠️ WARNING: Freeze Authority is active - Developer can freeze token accounts")
    else:
        warnings.append("✅ SAFE: Freeze Authority has been revoked - Accounts cannot be frozen")

    if metadata.is_mutable:
        score -= MUTABLE_METADATA_PENALTY
        warnings.append("⚠️ CAUTION: Metadata is mutable - Name, symbol, or image can be changed")
    else:
        warnings.append("✅ SAFE: Metadata is immutable - Token identity is locked")

    if liquidity is not None:
        score -= LIQUIDITY_PENALTIES.get(liquidity.risk_level, 0)
        warnings.extend(liquidity.warnings)
    else:
        warnings.append("ℹ️ INFO: Liquidity analysis unavailable")

    if honeypot is not None:
        score -= HONEYPOT_PENALTIES.get(honeypot.risk_level, 0)
        warnings.extend(honeypot.warnings)
    else:
        warnings.append("ℹ️ INFO: Honeypot check unavailable")

    if developer is not None:
        score -= DEVELOPER_PENALTIES.get(developer.risk_level, 0)
        warnings.append(_developer_warning(developer))
    else:
        warnings.append("ℹ️ INFO: Developer analysis unavailable")

    if clusters is not None:
        score -= CLUSTER_PENALTIES.get(clusters.summary.risk_level, 0)
        warnings.append(_cluster_warning(clusters))
    else:
        warnings.append("ℹ️ INFO: Holder cluster analysis unavailable")

    if distribution is not None:
        score -= DISTRIBUTION_PENALTIES.get(distribution.concentration_level, 0)
        warnings.extend(distribution.warnings)
    else:
        warnings.append("ℹ️ INFO: Holder distribution unavailable")

    score = max(0, min(INITIAL_SCORE, score))
    return RiskAssessment(score=score, level=risk_level(score), warnings=warnings)
