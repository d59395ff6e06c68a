from solguard.models.audit import AuditResult, HoneypotSignal, LiquiditySignal, RiskAssessment
from solguard.models.holder import (
    ClusterAnalysis,
    ClusterMember,
    ClusterSummary,
    FundingSource,
    HolderCluster,
    HolderDistribution,
    HolderRecord,
)
from solguard.models.token import (
    AuthorityState,
    AuthorityStatus,
    DeployedToken,
    DeveloperProfile,
    MetadataInfo,
    TokenInfo,
)

__all__ = [
    "AuditResult",
    "AuthorityState",
    "AuthorityStatus",
    "ClusterAnalysis",
    "ClusterMember",
    "ClusterSummary",
    "DeployedToken",
    "DeveloperProfile",
    "FundingSource",
    "HolderCluster",
    "HolderDistribution",
    "HolderRecord",
    "HoneypotSignal",
    "LiquiditySignal",
    "MetadataInfo",
    "RiskAssessment",
    "TokenInfo",
]
