"""Centralized settings for the TradeMind journal.

Uses pydantic-settings to load from environment variables (prefixed TRADEMIND_)
with defaults suitable for local single-user use.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """TradeMind settings loaded from environment variables."""

    # --- Database ---
    database_url: str = "sqlite:///trademind.db"
    database_echo: bool = False

    # --- Redis / query cache ---
    redis_url: str = "redis://localhost:6379/0"
    use_redis: bool = False
    cache_ttl_seconds: int = 60
    cache_dedupe_seconds: float = 2.0
    cache_background_revalidate: bool = False

    # --- Locale ---
    timezone: str = "Asia/Kolkata"
    currency_symbol: str = "₹"

    # --- Identity (auth is external; this is the local dev user) ---
    default_user_id: str = "local-user"

    # --- Profile defaults for newly created users ---
    default_trading_capital: float = 100_000.0
    default_daily_loss_limit: float = 5_000.0
    default_per_trade_risk: float = 1_000.0
    default_max_trades_per_day: int = 10
    default_daily_target: float = 2_000.0
    default_weekly_target: float = 8_000.0
    default_monthly_target: float = 30_000.0

    # --- Trade Guardian fallbacks when no profile exists ---
    guardian_per_trade_risk: float = 5_000.0
    guardian_daily_loss_limit: float = 10_000.0
    guardian_enforce_risk_limits: bool = False

    # --- Analytics ---
    top_symbols: int = 8

    model_config = {
        "env_prefix": "TRADEMIND_",
        "env_file": ".env",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton."""
    return Settings()
