"""
Configuration Management

Uses Pydantic Settings for environment-based configuration.
Loads from .env file automatically.

Every provider credential is optional: an absent credential simply removes that
provider from its cascade.
"""

from typing import Optional
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Ahrefs (keywords + backlinks, first in both cascades)
    AHREFS_API_KEY: Optional[str] = None
    AHREFS_COUNTRY: str = "us"

    # DataForSEO (keywords + backlinks)
    DATAFORSEO_LOGIN: Optional[str] = None
    DATAFORSEO_PASSWORD: Optional[str] = None
    DATAFORSEO_LOCATION_CODE: int = 2840
    DATAFORSEO_LANGUAGE_NAME: str = "English"

    # Moz (backlinks)
    MOZ_API_TOKEN: Optional[str] = None

    # Google Search Console (keywords, verified properties only)
    GSC_ACCESS_TOKEN: Optional[str] = None
    GSC_SITE_URL: Optional[str] = None
    GSC_LOOKBACK_DAYS: int = 28

    # PageSpeed Insights (works without a key at a lower quota)
    GOOGLE_PAGESPEED_API_KEY: Optional[str] = None
    PAGESPEED_ENABLED: bool = True

    # Google Custom Search (brand rank)
    GOOGLE_CSE_API_KEY: Optional[str] = None
    GOOGLE_CSE_ID: Optional[str] = None

    # Application Settings
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Limits
    MAX_CONCURRENT_URLS: int = 5
    MAX_PRIMARY_URLS: int = 30
    MAX_COMPETITORS: int = 4
    MAX_COMPETITOR_URLS: int = 10
    MAX_LINK_CHECKS: int = 20

    # Rate limiting (per caller)
    RATE_LIMIT_PER_MINUTE: int = 10
    RATE_LIMIT_BURST: int = 3

    # Timeouts (seconds)
    API_TIMEOUT: float = 30.0
    PAGE_TIMEOUT: float = 15.0
    ANALYSIS_TIMEOUT: float = 120.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra fields in .env file
        case_sensitive = False  # Allow both UPPERCASE and lowercase


@lru_cache
def get_settings() -> Settings:
    """Get or create cached settings instance."""
    return Settings()
