from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Helius (Solana RPC)
    helius_api_key: str = ""
    helius_rpc_url: str = ""  # overrides the default mainnet URL built from the key
    helius_max_rps: float = 10.0

    # Holder report: enrichment of the top holders
    holders_history_timeout_sec: float = 10.0  # per getSignaturesForAddress call
    holders_enrich_concurrency: int = 10  # all top holders at once

    # Holder classification thresholds (percent of reported supply)
    holders_pool_pct_threshold: float = 20.0
    holders_whale_pct_threshold: float = 4.0

    # Dashboard
    dashboard_host: str = "0.0.0.0"
    dashboard_port: int = 8080
    dashboard_debug: bool = False
    cors_origins: str = "http://localhost:3000"  # comma-separated

    @property
    def helius_configured(self) -> bool:
        return bool(self.helius_api_key or self.helius_rpc_url)


settings = Settings()
