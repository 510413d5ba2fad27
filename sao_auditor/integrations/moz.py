"""
Moz Links API v2 Client

URL metrics for the root of a domain: Domain Authority, spam score, linking
root domains.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from .base import BaseAPIClient, RetryConfig

logger = logging.getLogger(__name__)


class MozClient(BaseAPIClient):
    """Async client for the Moz url_metrics endpoint."""

    BASE_URL = "https://lsapi.seomoz.com/v2"
    name = "moz"
    display_name = "Moz"

    def __init__(
        self,
        api_token: Optional[str] = None,
        timeout: float = 30.0,
        retry_config: Optional[RetryConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(timeout=timeout, retry_config=retry_config, transport=transport)
        self.api_token = api_token

    def is_configured(self) -> bool:
        return bool(self.api_token)

    def _default_headers(self) -> Dict[str, str]:
        return {
            "x-moz-token": self.api_token or "",
            "Content-Type": "application/json",
        }

    async def fetch_backlinks(self, domain: str) -> Dict[str, Any]:
        """Metrics for https://{domain}/; Moz answers with one result per target."""
        data = await self._request("POST", "/url_metrics", json={"targets": [f"https://{domain}/"]})
        if isinstance(data, dict) and isinstance(data.get("results"), list):
            data = data["results"]
        if isinstance(data, list):
            return data[0] if data and isinstance(data[0], dict) else {}
        return data if isinstance(data, dict) else {}
