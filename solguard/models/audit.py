"""Audit-level result models: market signals, risk verdict, final artifact."""

from typing import Literal

from pydantic import BaseModel

from solguard.models.holder import ClusterAnalysis, HolderDistribution
from solguard.models.token import AuthorityStatus, DeveloperProfile, MetadataInfo, TokenInfo

RiskLevel = Literal["Safe", "Caution", "Rug Pull Risk"]
LiquidityRiskLevel = Literal["Safe", "Medium", "High", "Critical"]
HoneypotRiskLevel = Literal["Safe", "Low Risk", "Medium Risk", "High Risk", "Honeypot"]


class LiquiditySignal(BaseModel):
    has_liquidity: bool = False
    pool_count: int = 0
    dex_ids: list[str] = []
    main_pool_address: str | None = None
    tvl_usd: float = 0.0
    volume_24h_usd: float = 0.0
    risk_level: LiquidityRiskLevel = "Critical"
    warnings: list[str] = []


class HoneypotSignal(BaseModel):
    can_sell: bool = True
    price_impact_pct: float | None = None
    risk_level: HoneypotRiskLevel = "Safe"
    warnings: list[str] = []


class RiskAssessment(BaseModel):
    model_config = {"frozen": True}

    score: int  # 0-100, higher is safer
    level: RiskLevel
    warnings: list[str] = []


class AuditResult(BaseModel):
    success: bool = True
    token_address: str
    token_info: TokenInfo
    authority_status: AuthorityStatus
    metadata_info: MetadataInfo
    developer_profile: DeveloperProfile | None = None
    developer_error: str | None = None
    holder_distribution: HolderDistribution | None = None
    cluster_analysis: ClusterAnalysis | None = None
    cluster_error: str | None = None
    liquidity: LiquiditySignal | None = None
    honeypot: HoneypotSignal | None = None
    risk_assessment: RiskAssessment
    timestamp: str
    cluster: str = "mainnet-beta"  # Solana network name
