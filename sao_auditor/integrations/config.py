"""
Provider Registry

Builds every adapter from one Settings object and reports which of them are
configured. One registry is shared by every URL of a batch so HTTP connection
pools are reused.
"""

import asyncio
import logging
from typing import Dict, Optional

from ..utils.config import Settings, get_settings
from .ahrefs import AhrefsClient
from .base import RetryConfig
from .dataforseo import DataForSEOClient
from .google_search import GoogleSearchClient
from .moz import MozClient
from .page_inspector import PageInspector
from .pagespeed import PageSpeedClient
from .search_console import SearchConsoleClient

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """All provider adapters for one process or one test."""

    def __init__(
        self,
        ahrefs: AhrefsClient,
        dataforseo: DataForSEOClient,
        moz: MozClient,
        gsc: SearchConsoleClient,
        pagespeed: PageSpeedClient,
        inspector: PageInspector,
        google_search: GoogleSearchClient,
    ):
        self.ahrefs = ahrefs
        self.dataforseo = dataforseo
        self.moz = moz
        self.gsc = gsc
        self.pagespeed = pagespeed
        self.inspector = inspector
        self.google_search = google_search

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        retry_config: Optional[RetryConfig] = None,
    ) -> "ProviderRegistry":
        s = settings or get_settings()
        timeout = s.API_TIMEOUT
        return cls(
            ahrefs=AhrefsClient(
                api_key=s.AHREFS_API_KEY,
                country=s.AHREFS_COUNTRY,
                timeout=timeout,
                retry_config=retry_config,
            ),
            dataforseo=DataForSEOClient(
                login=s.DATAFORSEO_LOGIN,
                password=s.DATAFORSEO_PASSWORD,
                location_code=s.DATAFORSEO_LOCATION_CODE,
                language_name=s.DATAFORSEO_LANGUAGE_NAME,
                timeout=timeout,
                retry_config=retry_config,
            ),
            moz=MozClient(api_token=s.MOZ_API_TOKEN, timeout=timeout, retry_config=retry_config),
            gsc=SearchConsoleClient(
                access_token=s.GSC_ACCESS_TOKEN,
                site_url=s.GSC_SITE_URL,
                lookback_days=s.GSC_LOOKBACK_DAYS,
                timeout=timeout,
                retry_config=retry_config,
            ),
            pagespeed=PageSpeedClient(
                api_key=s.GOOGLE_PAGESPEED_API_KEY,
                enabled=s.PAGESPEED_ENABLED,
                timeout=max(timeout, 60.0),
                retry_config=retry_config,
            ),
            inspector=PageInspector(timeout=s.PAGE_TIMEOUT, max_link_checks=s.MAX_LINK_CHECKS),
            google_search=GoogleSearchClient(
                api_key=s.GOOGLE_CSE_API_KEY,
                engine_id=s.GOOGLE_CSE_ID,
                timeout=timeout,
                retry_config=retry_config,
            ),
        )

    def status(self) -> Dict[str, bool]:
        """Configuration state per provider."""
        return {
            "ahrefs": self.ahrefs.is_configured(),
            "dataforseo": self.dataforseo.is_configured(),
            "moz": self.moz.is_configured(),
            "gsc": self.gsc.is_configured(),
            "pagespeed": self.pagespeed.is_configured(),
            "google_search": self.google_search.is_configured(),
        }

    def log_status(self):
        """Log configuration status."""
        for name, configured in self.status().items():
            logger.info(f"{name}: {'configured' if configured else 'NOT configured'}")

    async def close(self):
        """Close all clients."""
        await asyncio.gather(
            self.ahrefs.close(),
            self.dataforseo.close(),
            self.moz.close(),
            self.gsc.close(),
            self.pagespeed.close(),
            self.inspector.close(),
            self.google_search.close(),
        )
