"""
Google PageSpeed Insights integration for Core Web Vitals and performance.

Mobile strategy only. INP comes from CrUX field data when Google has it;
otherwise lab Total Blocking Time stands in as a proxy.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ..models import PerfFacts
from .base import BaseAPIClient, RetryConfig

logger = logging.getLogger(__name__)

CATEGORIES = ("performance", "accessibility", "best-practices", "seo")


def _category_score(categories: Dict[str, Any], key: str) -> Optional[int]:
    score = (categories.get(key) or {}).get("score")
    if score is None:
        return None
    return round(float(score) * 100)


def _audit_value(audits: Dict[str, Any], key: str) -> Optional[float]:
    value = (audits.get(key) or {}).get("numericValue")
    return float(value) if value is not None else None


def parse_pagespeed(url: str, data: Dict[str, Any]) -> PerfFacts:
    """Map a runPagespeed response onto PerfFacts."""
    lighthouse = data.get("lighthouseResult") or {}
    categories = lighthouse.get("categories") or {}
    audits = lighthouse.get("audits") or {}
    field_metrics = (data.get("loadingExperience") or {}).get("metrics") or {}

    lcp_ms = _audit_value(audits, "largest-contentful-paint")
    cls = _audit_value(audits, "cumulative-layout-shift")

    inp_field = (field_metrics.get("INTERACTION_TO_NEXT_PAINT") or {}).get("percentile")
    if inp_field is not None:
        inp_ms, from_field = float(inp_field), True
    else:
        inp_ms, from_field = _audit_value(audits, "total-blocking-time"), False

    return PerfFacts(
        url=url,
        lcp_seconds=lcp_ms / 1000 if lcp_ms is not None else None,
        inp_ms=inp_ms,
        inp_from_field_data=from_field,
        cls=cls,
        mobile_score=_category_score(categories, "performance"),
        accessibility_score=_category_score(categories, "accessibility"),
        seo_score=_category_score(categories, "seo"),
        best_practices_score=_category_score(categories, "best-practices"),
    )


class PageSpeedClient(BaseAPIClient):
    """
    Client for the Google PageSpeed Insights API.

    Usage::

        async with PageSpeedClient(api_key="your-key") as psi:
            perf = await psi.analyze("https://example.com")
    """

    BASE_URL = "https://www.googleapis.com"
    name = "pagespeed"
    display_name = "PageSpeed Insights"

    def __init__(
        self,
        api_key: Optional[str] = None,
        enabled: bool = True,
        timeout: float = 60.0,
        retry_config: Optional[RetryConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(timeout=timeout, retry_config=retry_config, transport=transport)
        self.api_key = api_key
        self.enabled = enabled

    def is_configured(self) -> bool:
        # The API answers without a key, at a lower quota
        return self.enabled

    async def analyze(self, url: str, strategy: str = "mobile") -> PerfFacts:
        params = [("url", url), ("strategy", strategy)]
        params.extend(("category", c) for c in CATEGORIES)
        if self.api_key:
            params.append(("key", self.api_key))

        data = await self._request("GET", "/pagespeedonline/v5/runPagespeed", params=params)
        perf = parse_pagespeed(url, data if isinstance(data, dict) else {})
        logger.info(
            f"PageSpeed {url}: LCP={perf.lcp_seconds}s INP={perf.inp_ms}ms "
            f"CLS={perf.cls} mobile={perf.mobile_score}"
        )
        return perf
