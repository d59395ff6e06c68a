"""Tests for holder clustering by common funder."""

from unittest.mock import AsyncMock

import pytest

from solguard.models.holder import FundingSource, HolderRecord
from solguard.parsers.funding_trace import HolderTrace
from solguard.parsers.holder_cluster import (
    analyze_holder_clusters,
    build_cluster_analysis,
    cluster_risk_level,
    group_by_funder,
    identify_suspicious_clusters,
)
from solguard.parsers.holder_distribution import analyze_distribution
from solguard.parsers.known_entities import KnownEntities

EXCHANGE = "5tzFkiKscXHK5ZXCGbXZxdw7gTjjD1mBwuoFbhUvuAi9"


def _holders(*pcts: float, supply: int = 1_000_000) -> list[HolderRecord]:
    return [
        HolderRecord(
            address=f"Acc{rank}",
            owner=f"Owner{rank}",
            balance=int(supply * pct / 100),
            percentage=pct,
            rank=rank,
        )
        for rank, pct in enumerate(pcts, start=1)
    ]


def _funded(mapping: dict[int, str], **flags: bool) -> dict[str, FundingSource]:
    return {
        f"Acc{rank}": FundingSource(funder=funder, signature=f"fund{rank}", **flags)
        for rank, funder in mapping.items()
    }


class TestGroupByFunder:
    def test_partition(self) -> None:
        holders = _holders(20, 15, 10, 8, 5, 2)
        funding = _funded({1: "F1", 2: "F2", 3: "F1", 5: "F2", 6: "F3"})

        clusters = group_by_funder(holders, funding)

        members = [m.address for c in clusters for m in c.holders]
        assert sorted(members) == sorted(funding)  # each funded holder exactly once
        assert len(members) == len(set(members))
        assert "Acc4" not in members  # unfunded holders are left out

    def test_aggregates_match_members(self) -> None:
        holders = _holders(12.5, 7.25, 3.125, 1.0625)
        funding = _funded({1: "F1", 2: "F1", 3: "F1", 4: "F2"})

        for cluster in group_by_funder(holders, funding):
            assert cluster.total_percentage == pytest.approx(
                sum(m.percentage for m in cluster.holders), abs=1e-6
            )
            assert cluster.total_balance == sum(m.balance for m in cluster.holders)
            assert cluster.holder_count == len(cluster.holders)

    def test_sorted_descending_with_rank_tiebreak(self) -> None:
        holders = _holders(10, 10, 30, 5)
        funding = _funded({1: "Early", 2: "Late", 3: "Big", 4: "Late"})

        # Late = 10 + 5 = 15, Early = 10, Big = 30
        assert [c.funder for c in group_by_funder(holders, funding)] == ["Big", "Late", "Early"]

        tied = _funded({1: "First", 2: "Second"})
        assert [c.funder for c in group_by_funder(holders, tied)] == ["First", "Second"]

    def test_idempotent(self) -> None:
        holders = _holders(25, 20, 15, 10)
        funding = _funded({1: "F1", 2: "F2", 3: "F1", 4: "F2"})

        assert group_by_funder(holders, funding) == group_by_funder(holders, funding)

    def test_members_keep_funding_signature(self) -> None:
        clusters = group_by_funder(_holders(10, 5), _funded({1: "F", 2: "F"}))

        assert [m.funding_signature for m in clusters[0].holders] == ["fund1", "fund2"]
        assert [m.rank for m in clusters[0].holders] == [1, 2]

    def test_injected_known_entities(self) -> None:
        holders = _holders(10, 10)
        funding = _funded({1: "Cex", 2: "Cex"})
        known = KnownEntities(exchanges=frozenset({"Cex"}))

        clusters = group_by_funder(holders, funding, known)

        assert clusters[0].is_known_exchange is True
        assert identify_suspicious_clusters(clusters) == []


class TestSuspiciousClusters:
    def test_rules(self) -> None:
        holders = _holders(10, 5, 3, 1, 1, 8, 8, 8, 8)
        funding = {
            **_funded({1: "Solo"}),  # single holder
            **_funded({2: "Small", 3: "Small"}),  # 8% suspicious
            **_funded({4: "Tiny", 5: "Tiny"}),  # 2% below threshold
            **_funded({6: EXCHANGE, 7: EXCHANGE}, is_known_exchange=True),
            **_funded({8: "Mixer", 9: "Mixer"}, is_known_mixer=True),
        }

        suspicious = identify_suspicious_clusters(group_by_funder(holders, funding))

        assert [c.funder for c in suspicious] == ["Small"]

    def test_threshold_is_inclusive(self) -> None:
        clusters = group_by_funder(_holders(3, 2), _funded({1: "F", 2: "F"}))

        assert len(identify_suspicious_clusters(clusters)) == 1


class TestClusterRiskLevel:
    @pytest.mark.parametrize(
        ("pct", "expected"),
        [(0, "Low"), (10, "Low"), (10.01, "Medium"), (20, "Medium"), (20.5, "High"), (30, "High"), (31, "Critical")],
    )
    def test_thresholds(self, pct: float, expected: str) -> None:
        assert cluster_risk_level(pct) == expected

    def test_monotonic(self) -> None:
        order = ["Low", "Medium", "High", "Critical"]
        levels = [order.index(cluster_risk_level(p / 2)) for p in range(0, 201)]

        assert levels == sorted(levels)


class TestClusterAnalysis:
    def test_summary(self) -> None:
        holders = _holders(20, 15, 10, 5)
        funding = _funded({1: "F1", 2: "F1", 3: "F2", 4: "F2"})
        trace = HolderTrace(mint="Mint", total_supply=1_000_000, holders=holders, funding=funding)

        analysis = build_cluster_analysis(trace)

        assert analysis.top_holders_analyzed == 4
        assert analysis.funding_sources_resolved == 4
        assert analysis.summary.total_clusters == 2
        assert analysis.summary.largest_cluster_size == 2
        assert analysis.summary.largest_cluster_percentage == 35
        assert analysis.summary.suspicious_control_percentage == pytest.approx(50)
        assert analysis.summary.risk_level == "Critical"

    def test_concentrated_token_without_funding(self) -> None:
        holders = _holders(60, 5, 5, 5, 5, 4, 4, 4, 4, 4)
        trace = HolderTrace(mint="Mint", total_supply=1_000_000, holders=holders)

        analysis = build_cluster_analysis(trace)
        distribution = analyze_distribution(trace.holders, trace.total_supply)

        assert analysis.clusters == []
        assert analysis.summary.total_clusters == 0
        assert analysis.summary.suspicious_control_percentage == 0
        assert analysis.summary.risk_level == "Low"
        assert distribution.concentration_level == "Highly Concentrated"

    @pytest.mark.asyncio
    async def test_analyze_holder_clusters_uses_tracer(self) -> None:
        holders = _holders(25, 10)
        tracer = AsyncMock()
        tracer.trace_holders.return_value = HolderTrace(
            mint="Mint",
            total_supply=1_000_000,
            holders=holders,
            funding=_funded({1: EXCHANGE, 2: EXCHANGE}),
        )

        analysis = await analyze_holder_clusters("Mint", tracer, KnownEntities.default(), top_n=5)

        tracer.trace_holders.assert_awaited_once_with("Mint", 5)
        assert analysis.clusters[0].is_known_exchange is True
        assert analysis.suspicious_clusters == []
        assert analysis.summary.risk_level == "Low"
