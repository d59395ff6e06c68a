"""Holder clustering — top holders grouped by the wallet that funded them.

Several top holders funded by the same fresh wallet are very likely one
entity spreading supply across accounts. Clusters funded by a known
exchange or mixer are reported but never flagged, since those wallets fund
unrelated users.
"""

from loguru import logger

from solguard.models.holder import (
    ClusterAnalysis,
    ClusterMember,
    ClusterRiskLevel,
    ClusterSummary,
    FundingSource,
    HolderCluster,
    HolderRecord,
)
from solguard.parsers.funding_trace import DEFAULT_TOP_HOLDERS, FundingTracer, HolderTrace
from solguard.parsers.known_entities import KnownEntities

SUSPICIOUS_MIN_HOLDERS = 2
SUSPICIOUS_MIN_PERCENTAGE = 5.0

CRITICAL_CLUSTER_PCT = 30.0
HIGH_CLUSTER_PCT = 20.0
MEDIUM_CLUSTER_PCT = 10.0


def group_by_funder(
    holders: list[HolderRecord],
    funding: dict[str, FundingSource],
    known: KnownEntities | None = None,
) -> list[HolderCluster]:
    """One cluster per funder, largest aggregate share first.

    Holders without a funding source are left out. Equal shares keep the
    order in which their best-ranked holder appears.
    """
    groups: dict[str, list[tuple[HolderRecord, FundingSource]]] = {}
    for holder in sorted(holders, key=lambda h: h.rank):
        source = funding.get(holder.address)
        if source is None:
            continue
        groups.setdefault(source.funder, []).append((holder, source))

    clusters = []
    for funder, members in groups.items():
        sources = [s for _, s in members]
        if known is not None:
            is_exchange = known.is_exchange(funder)
            is_mixer = known.is_mixer(funder)
        else:
            is_exchange = any(s.is_known_exchange for s in sources)
            is_mixer = any(s.is_known_mixer for s in sources)

        clusters.append(
            HolderCluster(
                funder=funder,
                holders=[
                    ClusterMember(
                        address=h.address,
                        owner=h.owner,
                        balance=h.balance,
                        percentage=h.percentage,
                        rank=h.rank,
                        funding_signature=s.signature,
                    )
                    for h, s in members
                ],
                total_balance=sum(h.balance for h, _ in members),
                total_percentage=sum(h.percentage for h, _ in members),
                holder_count=len(members),
                is_known_exchange=is_exchange,
                is_known_mixer=is_mixer,
            )
        )

    clusters.sort(key=lambda c: c.total_percentage, reverse=True)
    return clusters


def is_suspicious(cluster: HolderCluster) -> bool:
    return (
        cluster.holder_count >= SUSPICIOUS_MIN_HOLDERS
        and not cluster.is_known_exchange
        and not cluster.is_known_mixer
        and cluster.total_percentage >= SUSPICIOUS_MIN_PERCENTAGE
    )


def identify_suspicious_clusters(clusters: list[HolderCluster]) -> list[HolderCluster]:
    return [c for c in clusters if is_suspicious(c)]


def cluster_risk_level(largest_suspicious_pct: float) -> ClusterRiskLevel:
    if largest_suspicious_pct > CRITICAL_CLUSTER_PCT:
        return "Critical"
    if largest_suspicious_pct > HIGH_CLUSTER_PCT:
        return "High"
    if largest_suspicious_pct > MEDIUM_CLUSTER_PCT:
        return "Medium"
    return "Low"


def summarize(
    clusters: list[HolderCluster], suspicious: list[HolderCluster]
) -> ClusterSummary:
    largest_suspicious = max((c.total_percentage for c in suspicious), default=0.0)
    return ClusterSummary(
        total_clusters=len(clusters),
        largest_cluster_size=max((c.holder_count for c in clusters), default=0),
        largest_cluster_percentage=max((c.total_percentage for c in clusters), default=0.0),
        suspicious_control_percentage=sum(c.total_percentage for c in suspicious),
        risk_level=cluster_risk_level(largest_suspicious),
    )


def build_cluster_analysis(
    trace: HolderTrace, known: KnownEntities | None = None
) -> ClusterAnalysis:
    clusters = group_by_funder(trace.holders, trace.funding, known)
    suspicious = identify_suspicious_clusters(clusters)
    summary = summarize(clusters, suspicious)

    if suspicious:
        logger.info(
            f"[CLUSTER] {trace.mint[:12]}: {len(suspicious)} suspicious clusters control "
            f"{summary.suspicious_control_percentage:.1f}% (risk={summary.risk_level})"
        )
    else:
        logger.debug(f"[CLUSTER] {trace.mint[:12]}: {len(clusters)} clusters, none suspicious")

    return ClusterAnalysis(
        token_address=trace.mint,
        total_supply=trace.total_supply,
        top_holders_analyzed=len(trace.holders),
        funding_sources_resolved=len(trace.funding),
        clusters=clusters,
        suspicious_clusters=suspicious,
        summary=summary,
    )


async def analyze_holder_clusters(
    mint: str,
    tracer: FundingTracer,
    known: KnownEntities | None = None,
    *,
    top_n: int = DEFAULT_TOP_HOLDERS,
) -> ClusterAnalysis:
    """Trace the top holders of `mint` and group them by funder.

    Raises TooManyHoldersError for tokens the node cannot rank.
    """
    trace = await tracer.trace_holders(mint, top_n)
    return build_cluster_analysis(trace, known)
