"""Known-entity allowlists consulted by the cluster grouper.

Holders funded by an exchange hot wallet share a funder without sharing an
owner, so such clusters are never flagged as suspicious. The sets are plain
configuration data passed into the analyzers; nothing reads them globally.
"""

from dataclasses import dataclass, field

# Partial list of centralized exchange hot wallets
DEFAULT_EXCHANGE_WALLETS: frozenset[str] = frozenset({
    # Binance
    "5tzFkiKscXHK5ZXCGbXZxdw7gTjjD1mBwuoFbhUvuAi9",
    "CuieVDEDtLo7FypA9SbLM9saXFdb1dsshEkyErMqkRQq",
    "3kvrNEkLiVZAh9u5URgdvMGqKZN7zMJj1D9bKrRMfT1Z",
    # Coinbase
    "2AQdpHJ2JpcEgPiATUXjQxA8QmafFegfQwSLWSprPicm",
    "GJRs4FwHtemZ5ZE9x3FNvJ8TMwitKTh21yxdRPqn7npE",
    "H8sMJSCQxfKiFTCfDR3DUMLPwcRbM61LGFJ8N4dK3WjS",
    # OKX
    "AC5RDfQFmDS1deWZos921JfqscXdByf8BKHs5ACWjtW2",
})

DEFAULT_MIXER_WALLETS: frozenset[str] = frozenset()


@dataclass(frozen=True)
class KnownEntities:
    exchanges: frozenset[str] = field(default_factory=frozenset)
    mixers: frozenset[str] = field(default_factory=frozenset)

    def is_exchange(self, address: str) -> bool:
        return address in self.exchanges

    def is_mixer(self, address: str) -> bool:
        return address in self.mixers

    @classmethod
    def default(
        cls,
        extra_exchanges: list[str] | None = None,
        extra_mixers: list[str] | None = None,
    ) -> "KnownEntities":
        """Built-in lists merged with any configured extras."""
        return cls(
            exchanges=DEFAULT_EXCHANGE_WALLETS | frozenset(extra_exchanges or []),
            mixers=DEFAULT_MIXER_WALLETS | frozenset(extra_mixers or []),
        )
