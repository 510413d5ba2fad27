"""Shared utilities: settings, URL handling, rate limiting, logging."""

from .config import Settings, get_settings
from .urls import normalize_url, extract_domain, site_root
from .rate_limit import TokenBucketRateLimiter
from .logging_config import configure_logging

__all__ = [
    "Settings",
    "get_settings",
    "normalize_url",
    "extract_domain",
    "site_root",
    "TokenBucketRateLimiter",
    "configure_logging",
]
