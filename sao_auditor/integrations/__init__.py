"""
External API Integrations

Provider adapters used by the cascade orchestrator and the per-URL analysis:
- Ahrefs, DataForSEO, Google Search Console: keyword metrics
- Ahrefs, Moz, DataForSEO: backlink metrics
- PageSpeed Insights: Core Web Vitals
- Page inspector: on-page structure, llms.txt, sitemap, link sample
- Google Custom Search: brand rank
- Config: registry built from Settings
"""

from .base import BaseAPIClient, RetryConfig
from .ahrefs import AhrefsClient
from .dataforseo import DataForSEOClient, safe_get_result
from .moz import MozClient
from .search_console import SearchConsoleClient
from .pagespeed import PageSpeedClient, parse_pagespeed
from .page_inspector import PageInspector, parse_html, lexicon_sentiment
from .google_search import GoogleSearchClient, brand_from_domain
from .config import ProviderRegistry

__all__ = [
    "BaseAPIClient",
    "RetryConfig",
    "AhrefsClient",
    "DataForSEOClient",
    "safe_get_result",
    "MozClient",
    "SearchConsoleClient",
    "PageSpeedClient",
    "parse_pagespeed",
    "PageInspector",
    "parse_html",
    "lexicon_sentiment",
    "GoogleSearchClient",
    "brand_from_domain",
    "ProviderRegistry",
]
