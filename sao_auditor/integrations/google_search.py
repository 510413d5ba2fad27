"""
Google Custom Search Client

Looks up where a domain ranks when someone searches for its brand name.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ..models import BrandRank
from ..utils.urls import extract_domain
from .base import BaseAPIClient, RetryConfig

logger = logging.getLogger(__name__)


def brand_from_domain(domain: str) -> str:
    """'shop.acme-tools.co.uk' -> 'acme tools'."""
    labels = [l for l in domain.lower().split(".") if l and l != "www"]
    if not labels:
        return ""
    # Drop the TLD and a short second-level suffix such as "co" in co.uk
    candidates = labels[:-1] or labels
    if len(candidates) > 1 and len(candidates[-1]) <= 3:
        candidates = candidates[:-1]
    return candidates[-1].replace("-", " ")


class GoogleSearchClient(BaseAPIClient):
    """Async client for the Custom Search JSON API."""

    BASE_URL = "https://www.googleapis.com"
    name = "google_search"
    display_name = "Google Custom Search"

    def __init__(
        self,
        api_key: Optional[str] = None,
        engine_id: Optional[str] = None,
        timeout: float = 30.0,
        retry_config: Optional[RetryConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(timeout=timeout, retry_config=retry_config, transport=transport)
        self.api_key = api_key
        self.engine_id = engine_id

    def is_configured(self) -> bool:
        return bool(self.api_key and self.engine_id)

    async def search(self, query: str, num: int = 10) -> Dict[str, Any]:
        return await self._request(
            "GET",
            "/customsearch/v1",
            params={"key": self.api_key, "cx": self.engine_id, "q": query, "num": num},
        )

    async def fetch_brand_rank(self, domain: str) -> BrandRank:
        """1-based position of the domain in the top 10 for its brand query."""
        query = brand_from_domain(domain)
        data = await self.search(query)
        items = (data.get("items") or []) if isinstance(data, dict) else []

        for position, item in enumerate(items, start=1):
            link = item.get("link") or ""
            item_domain = extract_domain(link) if link else ""
            if item_domain == domain or item_domain.endswith(f".{domain}"):
                logger.info(f"Brand query '{query}' ranks {domain} at #{position}")
                return BrandRank(query=query, rank=position, checked_results=len(items))

        return BrandRank(query=query, rank=None, checked_results=len(items))
