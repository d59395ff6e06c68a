"""Tests for holder distribution buckets, Gini coefficient and concentration grading."""

import pytest

from solguard.models.holder import HolderRecord
from solguard.parsers.holder_distribution import analyze_distribution, gini_coefficient


def _holders(*balances: int) -> list[HolderRecord]:
    return [
        HolderRecord(address=f"Acc{i}", balance=b, rank=i)
        for i, b in enumerate(balances, start=1)
    ]


class TestGini:
    def test_empty_and_zero(self) -> None:
        assert gini_coefficient([]) == 0.0
        assert gini_coefficient([0, 0, 0]) == 0.0

    def test_equal_balances(self) -> None:
        assert gini_coefficient([5, 5, 5, 5]) == pytest.approx(0.0)

    def test_bounds(self) -> None:
        for balances in ([1], [1, 1000], [1, 2, 3, 4, 5], [10**12, 1, 1, 1, 1, 1, 1]):
            assert 0.0 <= gini_coefficient(balances) <= 1.0

    def test_unequal_is_higher(self) -> None:
        assert gini_coefficient([1, 1, 1, 100]) > gini_coefficient([20, 25, 30, 35])

    def test_order_independent(self) -> None:
        assert gini_coefficient([3, 1, 2]) == gini_coefficient([1, 2, 3])


class TestAnalyzeDistribution:
    def test_zero_supply(self) -> None:
        result = analyze_distribution(_holders(10), 0)

        assert result.top_holders == []
        assert result.others_percentage == 100
        assert result.warnings == ["⚠️ WARNING: Total supply is 0"]

    def test_buckets(self) -> None:
        result = analyze_distribution(_holders(*([40] * 25)), 1000)

        assert len(result.top_holders) == 20
        assert result.top1_percentage == pytest.approx(4)
        assert result.top5_percentage == pytest.approx(20)
        assert result.top10_percentage == pytest.approx(40)
        assert result.top20_percentage == pytest.approx(80)
        assert result.others_percentage == pytest.approx(20)
        assert result.concentration_level == "Decentralized"
        assert result.warnings[0].startswith("✅ SAFE")

    @pytest.mark.parametrize(
        ("balances", "level"),
        [
            ([51] + [1] * 19, "Highly Concentrated"),  # top1 > 50
            ([20, 20, 15, 10, 6], "Highly Concentrated"),  # top5 = 71
            ([10] * 8 + [1] * 12, "Concentrated"),  # top10 = 82
            ([5] * 18 + [1] * 2, "Moderate"),  # top20 = 92
            ([4] * 20, "Decentralized"),
        ],
    )
    def test_levels(self, balances: list[int], level: str) -> None:
        assert analyze_distribution(_holders(*balances), 100).concentration_level == level

    def test_top_holder_warning(self) -> None:
        result = analyze_distribution(_holders(60, 5, 5), 100)

        assert "Top holder controls >50%" in result.warnings[0]
        assert result.gini_coefficient > 0
