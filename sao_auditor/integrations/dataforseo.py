"""
DataForSEO API Client

Keyword and backlink lookups against DataForSEO Labs and the Backlinks API.
Responses are returned raw; sao_auditor.collector.normalizer maps them.
"""

import asyncio
import base64
import logging
from typing import Any, Dict, List, Optional

import httpx

from ..exceptions import ProviderError
from .base import BaseAPIClient, RetryConfig

logger = logging.getLogger(__name__)


def safe_get_result(response: Dict, get_items: bool = True) -> Any:
    """
    Safely extract result data from DataForSEO API response.

    Handles cases where result is None, empty, or malformed.

    Args:
        response: Raw API response dict
        get_items: If True, returns items list. If False, returns first result object.

    Returns:
        List of items, result dict, or empty list/dict on failure
    """
    try:
        tasks = response.get("tasks")
        if not tasks or not isinstance(tasks, list):
            return [] if get_items else {}

        result = tasks[0].get("result")
        if not result or not isinstance(result, list):
            return [] if get_items else {}

        first_result = result[0]
        if not first_result or not isinstance(first_result, dict):
            return [] if get_items else {}

        if get_items:
            items = first_result.get("items")
            return items if items and isinstance(items, list) else []
        return first_result
    except (AttributeError, TypeError, IndexError, KeyError) as e:
        logger.debug(f"Safe result extraction failed: {e}")
        return [] if get_items else {}


class DataForSEOClient(BaseAPIClient):
    """
    Async client for DataForSEO API.

    Usage:
        async with DataForSEOClient(login="your_login", password="your_password") as client:
            raw = await client.fetch_keywords("example.com")
    """

    BASE_URL = "https://api.dataforseo.com/v3"
    name = "dataforseo"
    display_name = "DataForSEO"

    def __init__(
        self,
        login: Optional[str] = None,
        password: Optional[str] = None,
        location_code: int = 2840,
        language_name: str = "English",
        timeout: float = 30.0,
        retry_config: Optional[RetryConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(timeout=timeout, retry_config=retry_config, transport=transport)
        self.login = login
        self.password = password
        self.location_code = location_code
        self.language_name = language_name

    def is_configured(self) -> bool:
        return bool(self.login and self.password)

    def _default_headers(self) -> Dict[str, str]:
        credentials = f"{self.login}:{self.password}"
        auth_token = base64.b64encode(credentials.encode()).decode()
        return {
            "Authorization": f"Basic {auth_token}",
            "Content-Type": "application/json",
        }

    def _check_payload(self, data: Any) -> Any:
        if not isinstance(data, dict):
            raise ProviderError("Unexpected response shape", provider=self.name)

        # Check for API-level errors
        if data.get("status_code") != 20000:
            raise ProviderError(
                f"API error: {data.get('status_message', 'Unknown error')}",
                status_code=data.get("status_code"),
                response=data,
                provider=self.name,
            )

        # Live endpoints carry a single task; its failure is the request's failure
        for task in data.get("tasks") or []:
            task_status = task.get("status_code")
            if task_status not in (20000, 20100):
                raise ProviderError(
                    f"Task error: {task.get('status_message', 'Task error')}",
                    status_code=task_status,
                    response=data,
                    provider=self.name,
                )
        return data

    async def post(self, endpoint: str, data: List[Dict[str, Any]]) -> Dict[str, Any]:
        """POST a task list to a live endpoint."""
        return await self._request("POST", f"/{endpoint}", json=data)

    def _task(self, domain: str, **extra) -> List[Dict[str, Any]]:
        return [{
            "target": domain,
            "location_code": self.location_code,
            "language_name": self.language_name,
            **extra,
        }]

    async def fetch_keywords(self, domain: str) -> Dict[str, Any]:
        """
        Domain rank overview plus the top ranked keywords.

        The overview carries counts and position buckets. The ranked keyword
        list feeds the intent breakdown; losing it only costs intent data.
        """
        overview, ranked = await asyncio.gather(
            self.post("dataforseo_labs/google/domain_rank_overview/live", self._task(domain)),
            self.post(
                "dataforseo_labs/google/ranked_keywords/live",
                self._task(
                    domain,
                    limit=100,
                    order_by=["keyword_data.keyword_info.search_volume,desc"],
                ),
            ),
            return_exceptions=True,
        )

        if isinstance(overview, BaseException):
            raise overview
        if isinstance(ranked, BaseException):
            if not isinstance(ranked, ProviderError):
                raise ranked
            logger.warning(f"DataForSEO ranked keywords failed for {domain}: {ranked}")
            ranked = {}

        return {
            "overview": safe_get_result(overview, get_items=True),
            "ranked_keywords": safe_get_result(ranked, get_items=True) if ranked else [],
        }

    async def fetch_backlinks(self, domain: str) -> Dict[str, Any]:
        """
        Backlink summary with a 0-100 domain rank.

        rank_scale="one_hundred" puts rank on the same scale as Ahrefs DR.
        """
        result = await self.post(
            "backlinks/summary/live",
            [{
                "target": domain,
                "internal_list_limit": 0,
                "backlinks_status_type": "live",
                "include_subdomains": True,
                "rank_scale": "one_hundred",
            }],
        )
        return safe_get_result(result, get_items=False)
