"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "BTC Tracker"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS (Dashboard URL)
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Weekly series persistence
    weekly_store_backend: str = "json"  # Options: json, sqlite
    data_dir: Optional[str] = None  # Defaults to ./data next to the package
    weekly_prices_path: Optional[str] = None  # Defaults to {data_dir}/weekly_prices.json
    sqlite_path: Optional[str] = None  # Defaults to {data_dir}/btc_tracker.db

    # Redis (snapshot cache)
    redis_url: str = "redis://localhost:6379"
    enable_redis_cache: bool = False
    snapshot_cache_ttl_seconds: int = 300

    # Refresh cycle
    enable_background_refresh: bool = True
    refresh_interval_seconds: int = 300  # Dashboard refreshes every 5 minutes

    # Kraken (daily OHLC, no auth)
    kraken_base_url: str = "https://api.kraken.com"
    kraken_pair: str = "XBTUSD"
    kraken_interval_minutes: int = 1440
    kraken_timeout_seconds: float = 30.0

    # Live Coin Watch (spot price)
    livecoinwatch_base_url: str = "https://api.livecoinwatch.com"
    livecoinwatch_api_key: Optional[str] = None
    livecoinwatch_timeout_seconds: float = 10.0

    # Fear & Greed Index
    fear_greed_url: str = "https://api.alternative.me/fng/"
    fear_greed_timeout_seconds: float = 10.0

    # Indicators
    rsi_period: int = 14
    ma_short_period: int = 50
    ma_long_period: int = 200
    ma_weekly_short_period: int = 50
    ma_weekly_long_period: int = 200
    weekly_merge_mode: str = "append_only"  # Options: append_only, replace_last

    # Signal thresholds
    buy_fear_greed_below: int = 20
    buy_rsi_below: float = 30.0
    sell_fear_greed_above: int = 80
    sell_rsi_above: float = 70.0

    # Dashboard payload sizing
    history_days_in_payload: int = 365
    weekly_table_rows: int = 50

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
