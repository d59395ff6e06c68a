from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Solana RPC (Helius URL is derived from the key when solana_rpc_url is empty)
    solana_rpc_url: str = ""
    helius_api_key: str = ""
    solana_cluster: str = "mainnet-beta"
    rpc_commitment: str = "confirmed"
    rpc_timeout_sec: float = 15.0

    # Fetch executor
    rpc_max_concurrency: int = 5
    rpc_max_rps: float = 5.0  # min spacing between requests = 1 / rps
    rpc_max_attempts: int = 3  # total attempts for 429 / timeout
    rpc_backoff_base_sec: float = 1.0

    # Deployer identification + deployment history
    creation_scan_pages: int = 3  # x1000 signatures when looking for the creation tx
    deployer_max_signatures: int = 100  # recent deployer txs scanned for mint creations
    deployment_batch_size: int = 3
    deployment_batch_pause_sec: float = 0.5

    # Holder cluster analysis
    cluster_top_holders: int = 20
    funding_scan_pages: int = 3  # x1000 signatures per holder wallet

    # Optional market signals (best effort, bounded by signal_timeout_sec)
    signal_timeout_sec: float = 5.0
    jupiter_api_key: str = ""
    dexscreener_max_rps: float = 4.0

    # Feature flags
    enable_developer_analysis: bool = True
    enable_cluster_analysis: bool = True
    enable_liquidity: bool = True
    enable_honeypot: bool = True

    # Known entities (JSON list in env, e.g. KNOWN_EXCHANGE_WALLETS='["addr1","addr2"]')
    known_exchange_wallets: list[str] = []
    known_mixer_wallets: list[str] = []

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False
    log_file: str = ""  # optional DEBUG file sink, e.g. logs/solguard.log


settings = Settings()
