"""Deployment history: every mint a deployer created, and how each one ended.

Scans a bounded window of the deployer's recent signatures, finds mint
initialisations (SPL Token / Token-2022 `initializeMint*`, or a Pump.fun
instruction touching a fresh mint), then classifies each mint from its
current on-chain state. Classification is a liveness proxy:

    Rugged — mint authority still live (not the shared launch authority),
             zero supply, no holder accounts, or top holder > 95%
    Dead   — top holder > 80%, or mint state unreadable
    Active — anything else
"""

import asyncio
import time

from loguru import logger

from solguard.models.token import DeployedToken, DeveloperProfile, DeveloperRiskLevel, TokenStatus
from solguard.parsers.constants import (
    MINT_INIT_INSTRUCTIONS,
    PUMPFUN_MINT_AUTHORITY,
    PUMPFUN_PROGRAM_IDS,
    TOKEN_PROGRAM_IDS,
)
from solguard.parsers.deployer import DeployerIdentifier
from solguard.parsers.metadata import MetadataResolver
from solguard.parsers.rate_limiter import FetchExecutor
from solguard.parsers.rpc.client import MAX_SIGNATURES_PER_PAGE, SolanaRpcClient
from solguard.parsers.rpc.exceptions import RpcError, TooManyHoldersError
from solguard.parsers.rpc.models import MintState, ParsedTransaction, SignatureInfo

DEFAULT_MAX_SIGNATURES = 100
DEFAULT_BATCH_SIZE = 3
DEFAULT_BATCH_PAUSE_SEC = 0.5

RUGGED_TOP_HOLDER_PCT = 95.0
DEAD_TOP_HOLDER_PCT = 80.0

# Serial scammer: many launches, most of them rugged
SERIAL_SCAMMER_MIN_TOKENS = 3
SERIAL_SCAMMER_MIN_RUGGED = 2
SERIAL_SCAMMER_MAX_WIN_RATE = 50.0
HIGH_RISK_MIN_TOKENS = 2

# Launch-platform instructions carry many writable accounts; only the first few can be the mint
MAX_MINT_CANDIDATES = 4


def calculate_win_rate(total: int, rugged: int) -> float:
    if total == 0:
        return 100.0
    return round((total - rugged) / total * 100, 2)


def developer_risk_level(total: int, rugged: int, win_rate: float) -> DeveloperRiskLevel:
    if (
        total >= SERIAL_SCAMMER_MIN_TOKENS
        and rugged >= SERIAL_SCAMMER_MIN_RUGGED
        and win_rate < SERIAL_SCAMMER_MAX_WIN_RATE
    ):
        return "Serial Scammer"
    if total >= HIGH_RISK_MIN_TOKENS and rugged >= 1:
        return "High Risk"
    if total == 1 or rugged == 1:
        return "Medium Risk"
    return "Clean"


def build_developer_profile(deployer: str, tokens: list[DeployedToken]) -> DeveloperProfile:
    """Derive the developer statistics from the discovered deployments."""
    ordered = sorted(tokens, key=lambda t: t.timestamp, reverse=True)
    total = len(ordered)
    rugged = sum(1 for t in ordered if t.status == "Rugged")
    dead = sum(1 for t in ordered if t.status == "Dead")
    active = sum(1 for t in ordered if t.status == "Active")
    win_rate = calculate_win_rate(total, rugged)

    timestamps = [t.timestamp for t in ordered if t.timestamp > 0]
    oldest = min(timestamps) if timestamps else None
    newest = max(timestamps) if timestamps else None

    avg_hours = None
    total_days = 0
    if oldest is not None and newest is not None:
        span = newest - oldest
        total_days = span // 86400
        if len(timestamps) > 1:
            avg_hours = round(span / (len(timestamps) - 1) / 3600, 2)

    return DeveloperProfile(
        deployer_address=deployer,
        tokens_deployed=ordered,
        tokens_created_count=total,
        rugged_count=rugged,
        active_count=active,
        dead_count=dead,
        win_rate=win_rate,
        risk_level=developer_risk_level(total, rugged, win_rate),
        average_time_between_deploys_hours=avg_hours,
        oldest_deployment=oldest,
        newest_deployment=newest,
        total_deployment_days=total_days,
    )


def find_initialized_mints(tx: ParsedTransaction) -> list[str]:
    """Mints initialised by SPL Token / Token-2022 instructions in `tx`."""
    mints = []
    for ix in tx.instructions:
        if ix.program_id not in TOKEN_PROGRAM_IDS:
            continue
        if ix.parsed_type in MINT_INIT_INSTRUCTIONS and ix.info.get("mint"):
            mints.append(ix.info["mint"])
    return mints


def launch_mint_candidates(tx: ParsedTransaction) -> list[str]:
    """Writable, non-signer accounts of launch-platform instructions."""
    keys = {k.pubkey: k for k in tx.account_keys}
    candidates: list[str] = []
    for ix in tx.instructions:
        if ix.program_id not in PUMPFUN_PROGRAM_IDS:
            continue
        for account in ix.accounts:
            key = keys.get(account)
            if key is None or key.signer or not key.writable:
                continue
            if account not in candidates:
                candidates.append(account)
    return candidates[:MAX_MINT_CANDIDATES]


class DeploymentHistoryScanner:
    """Discovers and classifies the tokens a wallet has deployed."""

    def __init__(
        self,
        rpc: SolanaRpcClient,
        executor: FetchExecutor,
        metadata: MetadataResolver,
        *,
        max_signatures: int = DEFAULT_MAX_SIGNATURES,
        batch_size: int = DEFAULT_BATCH_SIZE,
        batch_pause_sec: float = DEFAULT_BATCH_PAUSE_SEC,
    ) -> None:
        self._rpc = rpc
        self._executor = executor
        self._metadata = metadata
        self._max_signatures = max_signatures
        self._batch_size = max(1, batch_size)
        self._batch_pause_sec = batch_pause_sec

    async def scan_deployments(
        self, deployer: str, max_signatures: int | None = None
    ) -> list[DeployedToken]:
        """Tokens created by `deployer` within its recent history, newest first."""
        limit = max_signatures or self._max_signatures
        sigs = await self._recent_signatures(deployer, limit)
        sigs = [s for s in sigs if s.err is None]
        logger.debug(f"[HISTORY] {deployer[:12]}: scanning {len(sigs)} signatures")

        found: dict[str, tuple[str, int]] = {}  # mint -> (signature, block_time)
        for start in range(0, len(sigs), self._batch_size):
            batch = sigs[start:start + self._batch_size]
            results = await asyncio.gather(
                *(self._mints_in_transaction(s.signature) for s in batch)
            )
            for sig, mints in zip(batch, results, strict=True):
                for mint, block_time in mints:
                    if mint not in found:
                        found[mint] = (sig.signature, block_time or sig.block_time)
            if start + self._batch_size < len(sigs):
                await asyncio.sleep(self._batch_pause_sec)

        now = int(time.time())
        tokens = await asyncio.gather(
            *(
                self._build_token(mint, signature, ts, now)
                for mint, (signature, ts) in found.items()
            )
        )
        tokens = sorted(tokens, key=lambda t: t.timestamp, reverse=True)
        logger.info(f"[HISTORY] {deployer[:12]}: {len(tokens)} deployed tokens found")
        return tokens

    async def _recent_signatures(self, deployer: str, limit: int) -> list[SignatureInfo]:
        """Newest `limit` signatures, paged with a `before` cursor past the node's page cap."""
        sigs: list[SignatureInfo] = []
        before = ""
        while len(sigs) < limit:
            want = min(limit - len(sigs), MAX_SIGNATURES_PER_PAGE)
            page = await self._executor.call(
                self._rpc.get_signatures_for_address, deployer, limit=want, before=before
            )
            sigs.extend(page)
            if len(page) < want:
                break
            before = page[-1].signature
        return sigs

    async def _mints_in_transaction(self, signature: str) -> list[tuple[str, int]]:
        try:
            tx = await self._executor.call(self._rpc.get_parsed_transaction, signature)
        except RpcError as e:
            logger.debug(f"[HISTORY] Skipping tx {signature[:16]}: {e}")
            return []
        if tx is None or tx.err is not None:
            return []

        mints = find_initialized_mints(tx)
        if not mints:
            for candidate in launch_mint_candidates(tx):
                if await self._is_mint(candidate):
                    mints.append(candidate)
                    break
        return [(mint, tx.block_time) for mint in mints]

    async def _is_mint(self, address: str) -> bool:
        try:
            return await self._executor.call(self._rpc.get_mint_state, address) is not None
        except RpcError:
            return False

    async def _build_token(self, mint: str, signature: str, timestamp: int, now: int) -> DeployedToken:
        status = await self.classify_token(mint)
        name, symbol = await self._metadata.get_names(mint)
        return DeployedToken(
            address=mint,
            signature=signature,
            timestamp=timestamp,
            status=status,
            is_rugged=status == "Rugged",
            name=name,
            symbol=symbol,
            age_days=max(0, (now - timestamp) // 86400) if timestamp else 0,
        )

    async def classify_token(self, mint: str) -> TokenStatus:
        try:
            state = await self._executor.call(self._rpc.get_mint_state, mint)
        except RpcError as e:
            logger.debug(f"[HISTORY] Mint state unreadable for {mint[:12]}: {e}")
            return "Dead"
        if state is None:
            return "Dead"

        if state.mint_authority and state.mint_authority != PUMPFUN_MINT_AUTHORITY:
            return "Rugged"
        if state.supply == 0:
            return "Rugged"

        try:
            accounts = await self._executor.call(self._rpc.get_token_largest_accounts, mint)
        except TooManyHoldersError:
            # Too widely held for the node to rank: certainly not a single-wallet token
            return "Active"
        except RpcError as e:
            logger.debug(f"[HISTORY] Holder lookup failed for {mint[:12]}: {e}")
            return "Dead"

        if not accounts:
            return "Rugged"
        top_pct = accounts[0].amount / state.supply * 100
        if top_pct > RUGGED_TOP_HOLDER_PCT:
            return "Rugged"
        if top_pct > DEAD_TOP_HOLDER_PCT:
            return "Dead"
        return "Active"


async def analyze_developer(
    mint: str,
    identifier: DeployerIdentifier,
    scanner: DeploymentHistoryScanner,
    *,
    mint_state: MintState | None = None,
    max_signatures: int | None = None,
) -> DeveloperProfile:
    """Identify the deployer of `mint` and profile their launch history.

    Raises DeployerUnresolvedError when no deployer can be attributed.
    """
    resolution = await identifier.identify(mint, mint_state)
    tokens = await scanner.scan_deployments(resolution.address, max_signatures)
    profile = build_developer_profile(resolution.address, tokens)
    logger.info(
        f"[HISTORY] Developer {resolution.address[:12]}: {profile.tokens_created_count} tokens, "
        f"{profile.rugged_count} rugged, win rate {profile.win_rate}% -> {profile.risk_level}"
    )
    return profile
