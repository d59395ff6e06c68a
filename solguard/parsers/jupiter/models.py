"""Jupiter quote results."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass
class SellSimResult:
    """Outcome of a token -> SOL quote request."""

    sellable: bool = False
    output_amount: Decimal | None = None  # SOL
    price_impact_pct: float | None = None
    error: str | None = None
    api_error: bool = False  # quote service itself unavailable (401, 5xx, timeout)
