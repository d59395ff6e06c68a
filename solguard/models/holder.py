"""Holder-level result models: top holders, funding sources, clusters, distribution."""

from typing import Literal

from pydantic import BaseModel, Field

ClusterRiskLevel = Literal["Low", "Medium", "High", "Critical"]
ConcentrationLevel = Literal["Decentralized", "Moderate", "Concentrated", "Highly Concentrated"]


class HolderRecord(BaseModel):
    address: str  # token account
    owner: str | None = None  # wallet owning the token account
    balance: int = 0  # raw units
    percentage: float = 0.0  # of total supply
    rank: int = 0  # 1 = largest

    @property
    def wallet(self) -> str:
        """Address whose funding is traced: the owner when known."""
        return self.owner or self.address


class FundingSource(BaseModel):
    funder: str
    signature: str
    timestamp: int = 0
    amount: float = 0.0  # SOL
    is_known_exchange: bool = False
    is_known_mixer: bool = False


class ClusterMember(BaseModel):
    address: str
    owner: str | None = None
    balance: int = 0
    percentage: float = 0.0
    rank: int = 0
    funding_signature: str = ""


class HolderCluster(BaseModel):
    funder: str
    holders: list[ClusterMember] = []
    total_balance: int = 0
    total_percentage: float = 0.0
    holder_count: int = 0
    is_known_exchange: bool = False
    is_known_mixer: bool = False


class ClusterSummary(BaseModel):
    total_clusters: int = 0
    largest_cluster_size: int = 0
    largest_cluster_percentage: float = 0.0
    suspicious_control_percentage: float = 0.0
    risk_level: ClusterRiskLevel = "Low"


class ClusterAnalysis(BaseModel):
    token_address: str
    total_supply: int = 0
    top_holders_analyzed: int = 0
    funding_sources_resolved: int = 0
    clusters: list[HolderCluster] = []
    suspicious_clusters: list[HolderCluster] = []
    summary: ClusterSummary = Field(default_factory=ClusterSummary)


class HolderDistribution(BaseModel):
    top_holders: list[HolderRecord] = []
    top1_percentage: float = 0.0
    top5_percentage: float = 0.0
    top10_percentage: float = 0.0
    top20_percentage: float = 0.0
    others_percentage: float = 100.0
    gini_coefficient: float = 0.0
    concentration_level: ConcentrationLevel = "Decentralized"
    warnings: list[str] = []
