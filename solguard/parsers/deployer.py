"""Deployer identification — who launched this mint?

Resolution is an ordered list of named strategies. Each returns a tagged
StrategyResult; the first RESOLVED one wins:

1. mint_authority       — live mint authority, unless it is the Pump.fun shared authority
2. launch_platform_api  — Pump.fun/PumpPortal creator lookup for launch-platform mints
3. creation_signer      — first signer of a launch-platform creation tx
4. fee_payer            — fee payer of the creation tx

The creation tx is the oldest signature on the mint, found by paging the
signature history backwards. It is fetched at most once per identification.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum

import httpx
from loguru import logger

from solguard.parsers.constants import PUMPFUN_MINT_AUTHORITY, PUMPFUN_PROGRAM_IDS
from solguard.parsers.pumpfun.client import PumpfunClient
from solguard.parsers.rate_limiter import FetchExecutor
from solguard.parsers.rpc.client import MAX_SIGNATURES_PER_PAGE, SolanaRpcClient
from solguard.parsers.rpc.exceptions import DeployerUnresolvedError, RpcError
from solguard.parsers.rpc.models import MintState, ParsedTransaction, SignatureInfo


class StrategyStatus(Enum):
    RESOLVED = "resolved"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class StrategyResult:
    strategy: str
    status: StrategyStatus
    address: str | None = None
    reason: str = ""


@dataclass
class DeployerResolution:
    address: str
    strategy: str
    attempts: list[StrategyResult] = field(default_factory=list)


@dataclass
class DeployerContext:
    """State shared by the strategies of one identification run."""

    mint: str
    mint_state: MintState | None = None
    mint_state_loaded: bool = False
    creation_tx: ParsedTransaction | None = None
    creation_loaded: bool = False
    creation_error: str = ""

    @property
    def is_launch_platform(self) -> bool:
        if self.creation_tx is None:
            return False
        return any(ix.program_id in PUMPFUN_PROGRAM_IDS for ix in self.creation_tx.instructions)


Strategy = Callable[[DeployerContext], Awaitable[StrategyResult]]


async def find_creation_signature(
    rpc: SolanaRpcClient,
    executor: FetchExecutor,
    address: str,
    *,
    max_pages: int = 3,
) -> SignatureInfo | None:
    """Oldest signature touching `address`.

    Returns None when the address has no history, or when `max_pages` full
    pages were read without reaching the beginning (scan exhausted).
    """
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
            return oldest
        oldest = sigs[-1]
        if len(sigs) < MAX_SIGNATURES_PER_PAGE:
            return oldest
        before = oldest.signature

    logger.info(
        f"[DEPLOYER] Signature scan exhausted for {address[:12]} "
        f"after {max_pages} pages, creation tx out of reach"
    )
    return None


class DeployerIdentifier:
    """Identify the wallet that deployed a mint."""

    def __init__(
        self,
        rpc: SolanaRpcClient,
        executor: FetchExecutor,
        pumpfun: PumpfunClient | None = None,
        *,
        creation_scan_pages: int = 3,
    ) -> None:
        self._rpc = rpc
        self._executor = executor
        self._pumpfun = pumpfun
        self._creation_scan_pages = creation_scan_pages
        self.strategies: list[tuple[str, Strategy]] = [
            ("mint_authority", self._from_mint_authority),
            ("launch_platform_api", self._from_launch_platform_api),
            ("creation_signer", self._from_creation_signer),
            ("fee_payer", self._from_fee_payer),
        ]

    async def identify(
        self, mint: str, mint_state: MintState | None = None
    ) -> DeployerResolution:
        ctx = DeployerContext(
            mint=mint, mint_state=mint_state, mint_state_loaded=mint_state is not None
        )
        attempts: list[StrategyResult] = []

        for name, strategy in self.strategies:
            result = await strategy(ctx)
            attempts.append(result)
            if result.status is StrategyStatus.RESOLVED and result.address:
                logger.info(f"[DEPLOYER] {mint[:12]} deployed by {result.address[:12]} (via {name})")
                return DeployerResolution(address=result.address, strategy=name, attempts=attempts)
            logger.debug(f"[DEPLOYER] {name} {result.status.value}: {result.reason}")

        reason = ctx.creation_error or "no creation transaction found"
        raise DeployerUnresolvedError(f"Could not identify deployer of {mint}: {reason}")

    async def _load_mint_state(self, ctx: DeployerContext) -> MintState | None:
        if not ctx.mint_state_loaded:
            ctx.mint_state_loaded = True
            ctx.mint_state = await self._executor.call(self._rpc.get_mint_state, ctx.mint)
        return ctx.mint_state

    async def _load_creation_tx(self, ctx: DeployerContext) -> ParsedTransaction | None:
        if ctx.creation_loaded:
            return ctx.creation_tx
        ctx.creation_loaded = True
        try:
            sig = await find_creation_signature(
                self._rpc, self._executor, ctx.mint, max_pages=self._creation_scan_pages
            )
            if sig is None:
                ctx.creation_error = "no creation transaction within signature scan"
                return None
            logger.debug(f"[DEPLOYER] Creation tx for {ctx.mint[:12]}: {sig.signature[:16]}")
            ctx.creation_tx = await self._executor.call(
                self._rpc.get_parsed_transaction, sig.signature
            )
            if ctx.creation_tx is None:
                ctx.creation_error = f"creation transaction {sig.signature} not retrievable"
        except RpcError as e:
            ctx.creation_error = f"creation scan failed: {e}"
            logger.warning(f"[DEPLOYER] {ctx.creation_error}")
        return ctx.creation_tx

    async def _from_mint_authority(self, ctx: DeployerContext) -> StrategyResult:
        name = "mint_authority"
        try:
            state = await self._load_mint_state(ctx)
        except RpcError as e:
            return StrategyResult(name, StrategyStatus.FAILED, reason=str(e))

        if state is None:
            return StrategyResult(name, StrategyStatus.FAILED, reason="mint account not found")
        if not state.mint_authority:
            return StrategyResult(name, StrategyStatus.SKIPPED, reason="mint authority revoked")
        if state.mint_authority == PUMPFUN_MINT_AUTHORITY:
            return StrategyResult(name, StrategyStatus.SKIPPED, reason="shared launch authority")
        return StrategyResult(name, StrategyStatus.RESOLVED, address=state.mint_authority)

    async def _from_launch_platform_api(self, ctx: DeployerContext) -> StrategyResult:
        name = "launch_platform_api"
        if await self._load_creation_tx(ctx) is None:
            return StrategyResult(name, StrategyStatus.SKIPPED, reason="no creation tx")
        if not ctx.is_launch_platform:
            return StrategyResult(name, StrategyStatus.SKIPPED, reason="not a launch-platform mint")
        if self._pumpfun is None:
            return StrategyResult(name, StrategyStatus.SKIPPED, reason="launch platform lookup disabled")

        try:
            creator = await self._pumpfun.get_creator(ctx.mint)
        except httpx.HTTPError as e:
            return StrategyResult(name, StrategyStatus.FAILED, reason=f"lookup error: {e}")
        if not creator:
            return StrategyResult(name, StrategyStatus.FAILED, reason="lookup returned no creator")
        return StrategyResult(name, StrategyStatus.RESOLVED, address=creator)

    async def _from_creation_signer(self, ctx: DeployerContext) -> StrategyResult:
        name = "creation_signer"
        tx = await self._load_creation_tx(ctx)
        if tx is None:
            return StrategyResult(name, StrategyStatus.SKIPPED, reason="no creation tx")
        if not ctx.is_launch_platform:
            return StrategyResult(name, StrategyStatus.SKIPPED, reason="not a launch-platform mint")
        signers = tx.signers
        if not signers:
            return StrategyResult(name, StrategyStatus.FAILED, reason="creation tx has no signer")
        return StrategyResult(name, StrategyStatus.RESOLVED, address=signers[0])

    async def _from_fee_payer(self, ctx: DeployerContext) -> StrategyResult:
        name = "fee_payer"
        tx = await self._load_creation_tx(ctx)
        if tx is None:
            return StrategyResult(name, StrategyStatus.FAILED, reason=ctx.creation_error)
        if not tx.fee_payer:
            return StrategyResult(name, StrategyStatus.FAILED, reason="creation tx has no accounts")
        return StrategyResult(name, StrategyStatus.RESOLVED, address=tx.fee_payer)
