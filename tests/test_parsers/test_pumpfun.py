"""Tests for the Pump.fun / PumpPortal creator lookup."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from solguard.parsers.pumpfun.client import PumpfunClient, _parse_coin

MINT = "PumpMint111pump"


def _resp(status: int, payload: dict | None = None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = payload or {}
    return resp


@pytest.fixture
def pumpfun() -> PumpfunClient:
    client = PumpfunClient(max_rps=1000.0)
    client._client = AsyncMock()
    return client


class TestParseCoin:
    def test_creator_field_priority(self) -> None:
        coin = _parse_coin(MINT, {"deployer": "Dep", "creator": "Creator", "name": "X"}, "pump.fun")

        assert coin.creator == "Creator"
        assert coin.name == "X"
        assert coin.source == "pump.fun"

    def test_fallback_fields(self) -> None:
        assert _parse_coin(MINT, {"user": "User1"}, "pumpportal").creator == "User1"
        assert _parse_coin(MINT, {"creator": ""}, "pump.fun").creator is None


class TestGetCreator:
    @pytest.mark.asyncio
    async def test_primary_endpoint(self, pumpfun: PumpfunClient) -> None:
        pumpfun._client.get = AsyncMock(return_value=_resp(200, {"mint": MINT, "creator": "Dev1"}))

        assert await pumpfun.get_creator(MINT) == "Dev1"
        assert pumpfun._client.get.await_count == 1

    @pytest.mark.asyncio
    async def test_falls_back_to_pumpportal(self, pumpfun: PumpfunClient) -> None:
        pumpfun._client.get = AsyncMock(
            side_effect=[_resp(404), _resp(200, {"creator_address": "Dev2"})]
        )

        coin = await pumpfun.get_coin(MINT)

        assert coin is not None
        assert coin.creator == "Dev2"
        assert coin.source == "pumpportal"

    @pytest.mark.asyncio
    async def test_nothing_found(self, pumpfun: PumpfunClient) -> None:
        pumpfun._client.get = AsyncMock(return_value=_resp(200, {"name": "no creator here"}))

        assert await pumpfun.get_creator(MINT) is None

    @pytest.mark.asyncio
    async def test_timeouts_give_up_quietly(self, pumpfun: PumpfunClient) -> None:
        pumpfun._client.get = AsyncMock(side_effect=httpx.ConnectTimeout("down"))

        with patch("solguard.parsers.pumpfun.client.asyncio.sleep", new=AsyncMock()):
            assert await pumpfun.get_creator(MINT) is None
        # two endpoints x three attempts
        assert pumpfun._client.get.await_count == 6
