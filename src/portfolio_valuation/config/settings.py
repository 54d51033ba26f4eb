"""Application settings and configuration."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_default_seed_path() -> Path:
    """Return the packaged seed holdings file."""
    return Path(__file__).resolve().parent.parent / "data" / "holdings.json"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "Portfolio Valuation Service"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    # Upstream admission control
    max_concurrency: int = Field(default=5, ge=1)
    max_queue_depth: Optional[int] = Field(default=None, ge=0)

    # Retry policy
    retry_max_attempts: int = Field(default=3, ge=1)
    retry_base_delay_seconds: float = 0.25
    retry_max_delay_seconds: float = 5.0

    # Cache lifetimes per data kind
    quote_cache_ttl_seconds: float = 15
    fundamentals_cache_ttl_seconds: float = 12 * 60 * 60
    cache_sweep_interval_seconds: float = 60

    # Pause before each upstream call on a cache miss
    politeness_delay_min_seconds: float = 0.2
    politeness_delay_max_seconds: float = 0.4

    # Market data source
    market_data_provider: Literal["stub", "yfinance"] = "stub"
    stub_latency_seconds: float = 0.0

    # Fallback dataset used when a request carries no holdings
    seed_holdings_path: Optional[Path] = None

    def get_seed_holdings_path(self) -> Path:
        """Get the seed holdings file, falling back to the packaged one."""
        return self.seed_holdings_path or get_default_seed_path()


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
