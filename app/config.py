"""
Application configuration using Pydantic Settings.
"""

import os
from functools import lru_cache
from typing import Dict, List, Optional

from pydantic import BaseModel
from pydantic_settings import BaseSettings

from app.calculations.currency import DEFAULT_CURRENCY_RATES
from app.calculations.tax import DEFAULT_TAX_BRACKETS


def get_env_file() -> str:
    """Determine which env file to use based on environment."""
    env = os.getenv("APP_ENV", "development")
    if env == "production":
        return ".env.production"
    return ".env.development"


class TaxBracketSetting(BaseModel):
    """Bracket row as written in configuration (threshold null for the top bracket)."""

    threshold: Optional[float] = None
    rate: float


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App settings
    app_name: str = "Finance Calculators"
    debug: bool = False
    log_level: str = "INFO"
    app_env: str = "development"

    # Static rate tables, overridable with JSON-encoded env vars
    base_currency: str = "USD"
    currency_rates: Dict[str, float] = dict(DEFAULT_CURRENCY_RATES)
    tax_brackets: List[TaxBracketSetting] = [
        TaxBracketSetting(threshold=b.threshold, rate=b.rate) for b in DEFAULT_TAX_BRACKETS
    ]

    class Config:
        env_file = get_env_file()
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
