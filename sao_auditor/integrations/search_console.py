"""
Google Search Console Client

Search Analytics query rows for a verified property. Only useful for sites the
token owner has verified, so it sits last in the keyword cascade.
"""

import logging
from datetime import date, timedelta
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from .base import BaseAPIClient, RetryConfig

logger = logging.getLogger(__name__)


class SearchConsoleClient(BaseAPIClient):
    """Async client for the Search Console searchAnalytics endpoint."""

    BASE_URL = "https://www.googleapis.com/webmasters/v3"
    name = "gsc"
    display_name = "Google Search Console"

    def __init__(
        self,
        access_token: Optional[str] = None,
        site_url: Optional[str] = None,
        lookback_days: int = 28,
        timeout: float = 30.0,
        retry_config: Optional[RetryConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(timeout=timeout, retry_config=retry_config, transport=transport)
        self.access_token = access_token
        self.site_url = site_url
        self.lookback_days = lookback_days

    def is_configured(self) -> bool:
        return bool(self.access_token)

    def _default_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token or ''}",
            "Content-Type": "application/json",
        }

    def property_for(self, domain: str) -> str:
        """Explicit property when set, otherwise the domain property."""
        return self.site_url or f"sc-domain:{domain}"

    async def fetch_keywords(self, domain: str) -> Dict[str, Any]:
        end = date.today()
        start = end - timedelta(days=self.lookback_days)
        site = quote(self.property_for(domain), safe="")
        return await self._request(
            "POST",
            f"/sites/{site}/searchAnalytics/query",
            json={
                "startDate": start.isoformat(),
                "endDate": end.isoformat(),
                "dimensions": ["query"],
                "rowLimit": 1000,
            },
        )
