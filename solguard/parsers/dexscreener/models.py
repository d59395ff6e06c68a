"""DexScreener pair payloads (only the fields the liquidity signal reads)."""

from decimal import Decimal

from pydantic import BaseModel


class PairVolume(BaseModel):
    h24: Decimal | None = None

    model_config = {"extra": "ignore"}


class PairLiquidity(BaseModel):
    usd: Decimal | None = None
    base: Decimal | None = None
    quote: Decimal | None = None

    model_config = {"extra": "ignore"}


class DexScreenerPair(BaseModel):
    chainId: str = ""
    dexId: str = ""
    pairAddress: str = ""
    priceUsd: str | None = None
    volume: PairVolume | None = None
    liquidity: PairLiquidity | None = None
    pairCreatedAt: int | None = None

    model_config = {"extra": "ignore"}

    @property
    def tvl_usd(self) -> float:
        if self.liquidity is None or self.liquidity.usd is None:
            return 0.0
        return float(self.liquidity.usd)

    @property
    def volume_24h_usd(self) -> float:
        if self.volume is None or self.volume.h24 is None:
            return 0.0
        return float(self.volume.h24)
