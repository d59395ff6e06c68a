"""Data models for Pump.fun / PumpPortal coin lookups."""

from dataclasses import dataclass

# Fields under which the launch APIs report the creating wallet, in priority order
CREATOR_FIELDS = ("creator", "creator_address", "deployer", "user")


@dataclass
class PumpfunCoin:
    """A coin as reported by the launch platform API."""

    mint: str
    creator: str | None = None
    name: str = ""
    symbol: str = ""
    created_timestamp: int = 0
    source: str = ""  # which endpoint answered
