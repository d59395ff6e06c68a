"""Tests for the DexScreener liquidity signal."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from solguard.parsers.dexscreener.client import DexScreenerClient
from solguard.parsers.dexscreener.models import DexScreenerPair
from solguard.parsers.liquidity import analyze_liquidity

MINT = "TokenMint1111"


def _pair(address: str, tvl: float | None, volume: float | None = 1000.0, dex: str = "raydium") -> DexScreenerPair:
    return DexScreenerPair.model_validate({
        "chainId": "solana",
        "dexId": dex,
        "pairAddress": address,
        "liquidity": {"usd": tvl} if tvl is not None else None,
        "volume": {"h24": volume} if volume is not None else None,
    })


def _client(pairs: list[DexScreenerPair] | None = None, error: Exception | None = None) -> AsyncMock:
    client = AsyncMock()
    if error is not None:
        client.get_token_pairs.side_effect = error
    else:
        client.get_token_pairs.return_value = pairs or []
    return client


class TestAnalyzeLiquidity:
    @pytest.mark.asyncio
    async def test_no_pool(self) -> None:
        signal = await analyze_liquidity(_client([]), MINT)

        assert signal.has_liquidity is False
        assert signal.risk_level == "Critical"
        assert "No liquidity pool found" in signal.warnings[0]

    @pytest.mark.asyncio
    async def test_lookup_error_is_high(self) -> None:
        signal = await analyze_liquidity(_client(error=httpx.ConnectError("down")), MINT)

        assert signal.risk_level == "High"
        assert signal.warnings == ["⚠️ WARNING: Could not fetch pool data"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("tvl", "level"),
        [(500.0, "Critical"), (999.99, "Critical"), (1000.0, "Medium"), (4999.0, "Medium"), (5000.0, "Safe"), (250_000.0, "Safe")],
    )
    async def test_tvl_tiers(self, tvl: float, level: str) -> None:
        signal = await analyze_liquidity(_client([_pair("P1", tvl)]), MINT)

        assert signal.has_liquidity is True
        assert signal.risk_level == level

    @pytest.mark.asyncio
    async def test_aggregates_pairs(self) -> None:
        pairs = [_pair("Small", 2000.0, 50.0, "meteora"), _pair("Main", 8000.0, 150.0)]

        signal = await analyze_liquidity(_client(pairs), MINT)

        assert signal.pool_count == 2
        assert signal.main_pool_address == "Main"
        assert signal.dex_ids == ["meteora", "raydium"]
        assert signal.tvl_usd == 10_000.0
        assert signal.volume_24h_usd == 200.0
        assert signal.risk_level == "Safe"

    @pytest.mark.asyncio
    async def test_zero_volume_warns(self) -> None:
        signal = await analyze_liquidity(_client([_pair("P1", 50_000.0, None)]), MINT)

        assert signal.volume_24h_usd == 0
        assert any("No trading volume" in w for w in signal.warnings)


class TestDexScreenerClient:
    @pytest.mark.asyncio
    async def test_parses_list_payload(self) -> None:
        client = DexScreenerClient(max_rps=1000.0)
        resp = MagicMock()
        resp.status_code = 200
        resp.json.return_value = [
            {"chainId": "solana", "dexId": "raydium", "pairAddress": "P1", "liquidity": {"usd": 1234.5}},
        ]
        client._client = AsyncMock()
        client._client.get = AsyncMock(return_value=resp)

        pairs = await client.get_token_pairs(MINT)

        assert len(pairs) == 1
        assert pairs[0].tvl_usd == 1234.5
        assert pairs[0].volume_24h_usd == 0.0
        client._client.get.assert_awaited_once_with(f"/token-pairs/v1/solana/{MINT}")
