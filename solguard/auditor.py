"""Token auditor — runs every analysis for one mint and builds the report.

Only failing to read the mint itself is fatal. Developer history, holder
clusters and the market signals each degrade on their own: their error
is recorded on the result and the score is computed from what remains.
"""

import asyncio
from datetime import UTC, datetime

from loguru import logger

from config.settings import Settings, settings
from solguard.models.audit import AuditResult, HoneypotSignal, LiquiditySignal
from solguard.models.holder import ClusterAnalysis, HolderDistribution
from solguard.models.token import AuthorityState, AuthorityStatus, DeveloperProfile
from solguard.parsers.deployer import DeployerIdentifier
from solguard.parsers.deployment_history import DeploymentHistoryScanner, analyze_developer
from solguard.parsers.dexscreener.client import DexScreenerClient
from solguard.parsers.funding_trace import FundingTracer
from solguard.parsers.holder_cluster import build_cluster_analysis
from solguard.parsers.holder_distribution import analyze_distribution
from solguard.parsers.honeypot_detector import detect_honeypot
from solguard.parsers.jupiter.client import JupiterClient
from solguard.parsers.known_entities import KnownEntities
from solguard.parsers.liquidity import analyze_liquidity
from solguard.parsers.metadata import MetadataCache, MetadataResolver
from solguard.parsers.pumpfun.client import PumpfunClient
from solguard.parsers.rate_limiter import FetchExecutor
from solguard.parsers.risk import aggregate
from solguard.parsers.rpc.client import SolanaRpcClient
from solguard.parsers.rpc.exceptions import (
    DeployerUnresolvedError,
    MintNotFoundError,
    RpcError,
    TooManyHoldersError,
)
from solguard.parsers.rpc.models import MintState
from solguard.utils.validation import validate_token_address


class TokenAuditor:
    def __init__(
        self,
        config: Settings = settings,
        *,
        rpc: SolanaRpcClient | None = None,
        executor: FetchExecutor | None = None,
        pumpfun: PumpfunClient | None = None,
        dexscreener: DexScreenerClient | None = None,
        jupiter: JupiterClient | None = None,
        known: KnownEntities | None = None,
    ) -> None:
        self._config = config
        self._rpc = rpc or SolanaRpcClient(
            config.solana_rpc_url,
            helius_api_key=config.helius_api_key,
            commitment=config.rpc_commitment,
            timeout=config.rpc_timeout_sec,
        )
        self._executor = executor or FetchExecutor(
            max_concurrency=config.rpc_max_concurrency,
            max_rps=config.rpc_max_rps,
            max_attempts=config.rpc_max_attempts,
            backoff_base=config.rpc_backoff_base_sec,
        )
        self._pumpfun = pumpfun or PumpfunClient()
        self._dexscreener = dexscreener or DexScreenerClient(max_rps=config.dexscreener_max_rps)
        self._jupiter = jupiter or JupiterClient(api_key=config.jupiter_api_key)
        self._known = known or KnownEntities.default(
            config.known_exchange_wallets, config.known_mixer_wallets
        )
        self._tracer = FundingTracer(
            self._rpc,
            self._executor,
            self._known,
            funding_scan_pages=config.funding_scan_pages,
        )
        self._identifier = DeployerIdentifier(
            self._rpc,
            self._executor,
            self._pumpfun,
            creation_scan_pages=config.creation_scan_pages,
        )

    async def close(self) -> None:
        await self._rpc.close()
        await self._pumpfun.close()
        await self._dexscreener.close()
        await self._jupiter.close()

    async def audit(
        self,
        token_address: str,
        *,
        top_holders: int | None = None,
        include_developer: bool | None = None,
        include_clusters: bool | None = None,
    ) -> AuditResult:
        """Full audit of one mint.

        Raises InvalidAddressError before any network call, MintNotFoundError
        when the address is not a token mint, RpcError when the mint cannot
        be read at all.
        """
        cfg = self._config
        mint = validate_token_address(token_address)
        top_n = cfg.cluster_top_holders if top_holders is None else max(0, top_holders)
        with_developer = cfg.enable_developer_analysis if include_developer is None else include_developer
        with_clusters = cfg.enable_cluster_analysis if include_clusters is None else include_clusters

        mint_state = await self._executor.call(self._rpc.get_mint_state, mint)
        if mint_state is None:
            raise MintNotFoundError(f"{mint} is not an SPL token mint")
        logger.info(f"[AUDIT] Auditing {mint[:12]} ({mint_state.program})")

        # Metadata lookups are shared by every analysis of this audit only
        metadata = MetadataResolver(self._rpc, self._executor, MetadataCache())

        (
            token_info,
            metadata_info,
            (developer, developer_error),
            (distribution, clusters, cluster_error),
            liquidity,
            honeypot,
        ) = await asyncio.gather(
            metadata.get_token_info(mint_state),
            metadata.check_metadata(mint),
            self._developer(mint, mint_state, metadata) if with_developer else _skipped("disabled"),
            self._holders(mint, top_n, with_clusters),
            self._liquidity(mint),
            self._honeypot(mint, mint_state),
        )

        authority = AuthorityStatus(
            mint_authority=AuthorityState(
                is_active=mint_state.mint_authority is not None,
                address=mint_state.mint_authority,
            ),
            freeze_authority=AuthorityState(
                is_active=mint_state.freeze_authority is not None,
                address=mint_state.freeze_authority,
            ),
        )
        assessment = aggregate(
            authority,
            metadata_info,
            liquidity=liquidity,
            developer=developer,
            clusters=clusters,
            distribution=distribution,
            honeypot=honeypot,
        )
        logger.info(
            f"[AUDIT] {mint[:12]} score={assessment.score} level={assessment.level} "
            f"(rpc retries={self._executor.retries}, metadata lookups={len(metadata.cache)})"
        )

        return AuditResult(
            success=True,
            token_address=mint,
            token_info=token_info,
            authority_status=authority,
            metadata_info=metadata_info,
            developer_profile=developer,
            developer_error=developer_error,
            holder_distribution=distribution,
            cluster_analysis=clusters,
            cluster_error=cluster_error,
            liquidity=liquidity,
            honeypot=honeypot,
            risk_assessment=assessment,
            timestamp=datetime.now(UTC).isoformat(),
            cluster=cfg.solana_cluster,
        )

    async def _developer(
        self, mint: str, mint_state: MintState, metadata: MetadataResolver
    ) -> tuple[DeveloperProfile | None, str | None]:
        scanner = DeploymentHistoryScanner(
            self._rpc,
            self._executor,
            metadata,
            max_signatures=self._config.deployer_max_signatures,
            batch_size=self._config.deployment_batch_size,
            batch_pause_sec=self._config.deployment_batch_pause_sec,
        )
        try:
            profile = await analyze_developer(mint, self._identifier, scanner, mint_state=mint_state)
        except DeployerUnresolvedError as e:
            logger.info(f"[AUDIT] Developer analysis skipped: {e}")
            return None, str(e)
        except RpcError as e:
            logger.warning(f"[AUDIT] Developer analysis failed for {mint[:12]}: {e}")
            return None, f"Developer analysis failed: {e}"
        except Exception as e:
            logger.exception(f"[AUDIT] Developer analysis crashed for {mint[:12]}")
            return None, f"Developer analysis failed: {type(e).__name__}: {e}"
        return profile, None

    async def _holders(
        self, mint: str, top_n: int, with_clusters: bool
    ) -> tuple[HolderDistribution | None, ClusterAnalysis | None, str | None]:
        try:
            if with_clusters:
                trace = await self._tracer.trace_holders(mint, top_n)
            else:
                trace = await self._tracer.load_holders(mint, top_n)
        except TooManyHoldersError as e:
            logger.info(f"[AUDIT] {mint[:12]}: holder set too large for cluster analysis")
            return None, None, e.GUIDANCE
        except RpcError as e:
            logger.warning(f"[AUDIT] Holder analysis failed for {mint[:12]}: {e}")
            return None, None, f"Holder analysis failed: {e}"
        except Exception as e:
            logger.exception(f"[AUDIT] Holder analysis crashed for {mint[:12]}")
            return None, None, f"Holder analysis failed: {type(e).__name__}: {e}"

        distribution = analyze_distribution(trace.holders, trace.total_supply)
        if not with_clusters:
            return distribution, None, "Cluster analysis disabled"
        return distribution, build_cluster_analysis(trace, self._known), None

    async def _liquidity(self, mint: str) -> LiquiditySignal | None:
        if not self._config.enable_liquidity:
            return None
        try:
            return await asyncio.wait_for(
                analyze_liquidity(self._dexscreener, mint), self._config.signal_timeout_sec
            )
        except TimeoutError:
            logger.info(f"[AUDIT] Liquidity analysis timed out for {mint[:12]}")
            return None
        except Exception as e:
            logger.warning(f"[AUDIT] Liquidity analysis failed for {mint[:12]}: {type(e).__name__}: {e}")
            return None

    async def _honeypot(self, mint: str, mint_state: MintState) -> HoneypotSignal | None:
        if not self._config.enable_honeypot:
            return None
        try:
            return await asyncio.wait_for(
                detect_honeypot(self._jupiter, mint, decimals=mint_state.decimals),
                self._config.signal_timeout_sec,
            )
        except TimeoutError:
            logger.info(f"[AUDIT] Honeypot check timed out for {mint[:12]}")
            return None
        except Exception as e:
            logger.warning(f"[AUDIT] Honeypot check failed for {mint[:12]}: {type(e).__name__}: {e}")
            return None


async def _skipped(reason: str) -> tuple[None, str]:
    return None, f"Developer analysis {reason}"
