"""
Ahrefs API v3 Client

Site Explorer lookups: organic keywords (with intent flags), domain rating and
backlink stats. First choice for both metric families when a key is present.
"""

import asyncio
import logging
from datetime import date, timedelta
from typing import Any, Dict, Optional

import httpx

from .base import BaseAPIClient, RetryConfig

logger = logging.getLogger(__name__)

KEYWORD_FIELDS = (
    "keyword,best_position,sum_traffic,"
    "is_informational,is_commercial,is_transactional,is_navigational"
)


class AhrefsClient(BaseAPIClient):
    """Async client for the Ahrefs Site Explorer API."""

    BASE_URL = "https://api.ahrefs.com/v3"
    name = "ahrefs"
    display_name = "Ahrefs"

    def __init__(
        self,
        api_key: Optional[str] = None,
        country: str = "us",
        timeout: float = 30.0,
        retry_config: Optional[RetryConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(timeout=timeout, retry_config=retry_config, transport=transport)
        self.api_key = api_key
        self.country = country

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _default_headers(self) -> Dict[str, str]:
        token = self.api_key or ""
        return {
            "Authorization": token if token.startswith("Bearer ") else f"Bearer {token}",
            "Accept": "application/json",
        }

    @staticmethod
    def _report_date() -> str:
        # Yesterday's index is the newest complete one
        return (date.today() - timedelta(days=1)).isoformat()

    async def fetch_keywords(self, domain: str) -> Dict[str, Any]:
        """Top 100 organic keywords by traffic."""
        return await self._request(
            "GET",
            "/site-explorer/organic-keywords",
            params={
                "target": domain,
                "mode": "domain",
                "country": self.country,
                "date": self._report_date(),
                "select": KEYWORD_FIELDS,
                "order_by": "sum_traffic:desc",
                "limit": 100,
            },
        )

    async def fetch_backlinks(self, domain: str) -> Dict[str, Any]:
        """Domain rating and backlink stats, fetched together."""
        params = {"target": domain, "date": self._report_date()}
        rating, stats = await asyncio.gather(
            self._request("GET", "/site-explorer/domain-rating", params=params),
            self._request("GET", "/site-explorer/backlinks-stats", params={**params, "mode": "domain"}),
        )
        return {"domain_rating": rating, "backlinks_stats": stats}
