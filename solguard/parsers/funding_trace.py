"""Holder funding trace — who first sent SOL to each top holder?

For every top holder the owner wallet's signature history is paged back to
its oldest transaction (bounded to a few pages), which is usually the
funding transfer. The funder is the first other account that lost lamports
in that transaction; a parsed system `transfer` to the wallet is the
fallback. Wallets older than the scan window come back without a funder,
which is a normal outcome.
"""

import asyncio
from dataclasses import dataclass, field

from loguru import logger

from solguard.models.holder import FundingSource, HolderRecord
from solguard.parsers.constants import LAMPORTS_PER_SOL
from solguard.parsers.known_entities import KnownEntities
from solguard.parsers.rate_limiter import FetchExecutor
from solguard.parsers.rpc.client import MAX_SIGNATURES_PER_PAGE, SolanaRpcClient
from solguard.parsers.rpc.exceptions import RpcError
from solguard.parsers.rpc.models import ParsedTransaction, SignatureInfo

DEFAULT_TOP_HOLDERS = 20
MAX_FUNDING_PAGES = 3


@dataclass
class HolderTrace:
    """Top holders of a mint plus whatever funding sources could be found."""

    mint: str
    total_supply: int
    decimals: int = 0
    holders: list[HolderRecord] = field(default_factory=list)
    funding: dict[str, FundingSource] = field(default_factory=dict)  # token account -> source


async def find_oldest_signature(
    rpc: SolanaRpcClient,
    executor: FetchExecutor,
    address: str,
    *,
    max_pages: int = MAX_FUNDING_PAGES,
) -> SignatureInfo | None:
    """Oldest signature reachable within `max_pages` pages (may not be the first ever)."""
    before = ""
    oldest: SignatureInfo | None = None
    for _ in range(max_pages):
        sigs = await executor.call(
            rpc.get_signatures_for_address,
            address,
            limit=MAX_SIGNATURES_PER_PAGE,
            before=before,
        )
        if not sigs:
            break
        oldest = sigs[-1]
        if len(sigs) < MAX_SIGNATURES_PER_PAGE:
            break
        before = oldest.signature
    return oldest


def extract_funder(tx: ParsedTransaction, wallet: str) -> tuple[str, int] | None:
    """(funder, lamports) for the SOL that reached `wallet` in `tx`."""
    wallet_index = next(
        (i for i, key in enumerate(tx.account_keys) if key.pubkey == wallet), None
    )
    if wallet_index is not None:
        received = tx.balance_delta(wallet_index)
        if received > 0:
            for i, key in enumerate(tx.account_keys):
                if i != wallet_index and tx.balance_delta(i) < 0:
                    return key.pubkey, received

    for ix in tx.instructions:
        if ix.program != "system" or ix.parsed_type != "transfer":
            continue
        if ix.info.get("destination") == wallet and ix.info.get("source"):
            return ix.info["source"], int(ix.info.get("lamports", 0) or 0)

    return None


async def find_funding_source(
    rpc: SolanaRpcClient,
    executor: FetchExecutor,
    wallet: str,
    *,
    known: KnownEntities | None = None,
    max_pages: int = MAX_FUNDING_PAGES,
) -> FundingSource | None:
    """Funding source of `wallet` from its oldest reachable transaction, or None."""
    oldest = await find_oldest_signature(rpc, executor, wallet, max_pages=max_pages)
    if oldest is None:
        return None

    tx = await executor.call(rpc.get_parsed_transaction, oldest.signature)
    if tx is None:
        return None

    found = extract_funder(tx, wallet)
    if found is None:
        return None
    funder, lamports = found

    known = known or KnownEntities()
    return FundingSource(
        funder=funder,
        signature=oldest.signature,
        timestamp=tx.block_time or oldest.block_time,
        amount=lamports / LAMPORTS_PER_SOL,
        is_known_exchange=known.is_exchange(funder),
        is_known_mixer=known.is_mixer(funder),
    )


class FundingTracer:
    """Loads top holders and traces their funding concurrently through the executor."""

    def __init__(
        self,
        rpc: SolanaRpcClient,
        executor: FetchExecutor,
        known: KnownEntities | None = None,
        *,
        funding_scan_pages: int = MAX_FUNDING_PAGES,
    ) -> None:
        self._rpc = rpc
        self._executor = executor
        self._known = known or KnownEntities.default()
        self._pages = funding_scan_pages

    async def load_holders(self, mint: str, top_n: int = DEFAULT_TOP_HOLDERS) -> HolderTrace:
        """Largest holders with supply percentages and owner wallets.

        Raises TooManyHoldersError when the node refuses to rank the holders.
        """
        supply = await self._executor.call(self._rpc.get_token_supply, mint)
        total_supply = supply.amount if supply else 0
        decimals = supply.decimals if supply else 0

        accounts = await self._executor.call(self._rpc.get_token_largest_accounts, mint)
        accounts = accounts[:top_n]

        owners = await asyncio.gather(*(self._resolve_owner(acc.address) for acc in accounts))
        holders = [
            HolderRecord(
                address=acc.address,
                owner=owner,
                balance=acc.amount,
                percentage=acc.amount / total_supply * 100 if total_supply else 0.0,
                rank=rank,
            )
            for rank, (acc, owner) in enumerate(zip(accounts, owners, strict=True), start=1)
        ]
        return HolderTrace(mint=mint, total_supply=total_supply, decimals=decimals, holders=holders)

    async def trace_holders(self, mint: str, top_n: int = DEFAULT_TOP_HOLDERS) -> HolderTrace:
        trace = await self.load_holders(mint, top_n)
        sources = await asyncio.gather(*(self._trace_one(h) for h in trace.holders))
        trace.funding = {
            holder.address: source
            for holder, source in zip(trace.holders, sources, strict=True)
            if source is not None
        }
        logger.info(
            f"[FUNDING] {mint[:12]}: {len(trace.funding)}/{len(trace.holders)} "
            f"holder funding sources resolved"
        )
        return trace

    async def _trace_one(self, holder: HolderRecord) -> FundingSource | None:
        try:
            return await find_funding_source(
                self._rpc, self._executor, holder.wallet, known=self._known, max_pages=self._pages
            )
        except RpcError as e:
            logger.debug(f"[FUNDING] Trace failed for {holder.wallet[:12]}: {e}")
            return None

    async def _resolve_owner(self, token_account: str) -> str | None:
        try:
            value = await self._executor.call(self._rpc.get_account_info, token_account)
        except RpcError as e:
            logger.debug(f"[FUNDING] Owner lookup failed for {token_account[:12]}: {e}")
            return None
        if not value:
            return None
        data = value.get("data")
        if not isinstance(data, dict):
            return None
        parsed = data.get("parsed")
        if not isinstance(parsed, dict):
            return None
        return (parsed.get("info") or {}).get("owner")
