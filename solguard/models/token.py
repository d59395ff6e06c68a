"""Token-level result models: mint facts, deployments, developer profile."""

from typing import Literal

from pydantic import BaseModel

TokenStatus = Literal["Active", "Dead", "Rugged"]
DeveloperRiskLevel = Literal["Serial Scammer", "High Risk", "Medium Risk", "Clean"]


class AuthorityState(BaseModel):
    is_active: bool
    address: str | None = None


class AuthorityStatus(BaseModel):
    mint_authority: AuthorityState
    freeze_authority: AuthorityState


class MetadataInfo(BaseModel):
    """Metaplex metadata mutability. Missing metadata is reported as immutable."""

    is_mutable: bool = False
    update_authority: str | None = None
    uri: str | None = None
    found: bool = False


class TokenInfo(BaseModel):
    mint_address: str
    name: str = "Unknown"
    symbol: str = "Unknown"
    decimals: int = 0
    supply: str = "0"  # UI amount, formatted with `decimals` places
    image: str | None = None
    description: str | None = None


class DeployedToken(BaseModel):
    """A mint discovered in the deployer's history (point-in-time snapshot)."""

    address: str
    signature: str
    timestamp: int  # unix seconds of the creation tx
    status: TokenStatus = "Active"
    is_rugged: bool = False
    name: str | None = None
    symbol: str | None = None
    age_days: int = 0


class DeveloperProfile(BaseModel):
    model_config = {"frozen": True}

    deployer_address: str
    tokens_deployed: list[DeployedToken] = []  # newest first
    tokens_created_count: int = 0
    rugged_count: int = 0
    active_count: int = 0
    dead_count: int = 0
    win_rate: float = 100.0  # percent
    risk_level: DeveloperRiskLevel = "Clean"
    average_time_between_deploys_hours: float | None = None
    oldest_deployment: int | None = None
    newest_deployment: int | None = None
    total_deployment_days: int = 0
