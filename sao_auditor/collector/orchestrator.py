"""
Metrics Collection Orchestrator

Resolves keyword and backlink metrics for one domain. Each family runs its own
cascade; the two cascades run concurrently. Priority order is declared once,
below, and nowhere else.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Tuple, Union

from ..integrations.config import ProviderRegistry
from ..models import (
    BacklinkMetrics,
    KeywordMetrics,
    MetricFamily,
    MetricSources,
    PageFacts,
    ProviderName,
    UnifiedSEOMetrics,
)
from . import normalizer
from .cascade import CascadeOutcome, CascadeStep, run_cascade
from .estimates import estimate_backlinks, estimate_keywords

logger = logging.getLogger(__name__)


KEYWORD_PRIORITY: Tuple[ProviderName, ...] = (
    ProviderName.AHREFS,
    ProviderName.DATAFORSEO,
    ProviderName.GSC,
)

BACKLINK_PRIORITY: Tuple[ProviderName, ...] = (
    ProviderName.AHREFS,
    ProviderName.MOZ,
    ProviderName.DATAFORSEO,
)

# A finished inspection, a pending inspection task, or nothing
PageFactsSource = Optional[Union[PageFacts, asyncio.Future]]


class MetricsOrchestrator:
    """
    Cascade orchestrator over a ProviderRegistry.

    Usage:
        orchestrator = MetricsOrchestrator(registry)
        metrics = await orchestrator.collect("example.com")
    """

    def __init__(self, registry: ProviderRegistry, provider_timeout: float = 30.0):
        self.registry = registry
        self.provider_timeout = provider_timeout

    def keyword_steps(self) -> List[CascadeStep[KeywordMetrics]]:
        r = self.registry
        available: Dict[ProviderName, CascadeStep[KeywordMetrics]] = {
            ProviderName.AHREFS: CascadeStep(
                ProviderName.AHREFS, r.ahrefs.is_configured, r.ahrefs.fetch_keywords,
                normalizer.normalize_ahrefs_keywords,
            ),
            ProviderName.DATAFORSEO: CascadeStep(
                ProviderName.DATAFORSEO, r.dataforseo.is_configured, r.dataforseo.fetch_keywords,
                normalizer.normalize_dataforseo_keywords,
            ),
            ProviderName.GSC: CascadeStep(
                ProviderName.GSC, r.gsc.is_configured, r.gsc.fetch_keywords,
                normalizer.normalize_gsc_keywords,
            ),
        }
        return [available[p] for p in KEYWORD_PRIORITY]

    def backlink_steps(self) -> List[CascadeStep[BacklinkMetrics]]:
        r = self.registry
        available: Dict[ProviderName, CascadeStep[BacklinkMetrics]] = {
            ProviderName.AHREFS: CascadeStep(
                ProviderName.AHREFS, r.ahrefs.is_configured, r.ahrefs.fetch_backlinks,
                normalizer.normalize_ahrefs_backlinks,
            ),
            ProviderName.MOZ: CascadeStep(
                ProviderName.MOZ, r.moz.is_configured, r.moz.fetch_backlinks,
                normalizer.normalize_moz_backlinks,
            ),
            ProviderName.DATAFORSEO: CascadeStep(
                ProviderName.DATAFORSEO, r.dataforseo.is_configured, r.dataforseo.fetch_backlinks,
                normalizer.normalize_dataforseo_backlinks,
            ),
        }
        return [available[p] for p in BACKLINK_PRIORITY]

    @staticmethod
    async def _resolve_page(page_facts: PageFactsSource) -> Optional[PageFacts]:
        """Page facts for estimates; a failed inspection yields None."""
        if page_facts is None or isinstance(page_facts, PageFacts):
            return page_facts
        try:
            return await page_facts
        except Exception as e:
            logger.debug(f"Page facts unavailable for estimates: {e}")
            return None

    async def collect(self, domain: str, page_facts: PageFactsSource = None) -> UnifiedSEOMetrics:
        """
        Resolve both metric families for a domain.

        Args:
            domain: Bare domain, e.g. "example.com"
            page_facts: PageFacts, or a pending inspection task; awaited only if an
                estimate is needed

        Returns:
            UnifiedSEOMetrics. Never raises on provider failure.
        """
        keyword_outcome, backlink_outcome = await asyncio.gather(
            run_cascade(MetricFamily.KEYWORDS, self.keyword_steps(), domain, self.provider_timeout),
            run_cascade(MetricFamily.BACKLINKS, self.backlink_steps(), domain, self.provider_timeout),
        )

        keywords = keyword_outcome.value
        if keyword_outcome.exhausted:
            keywords = estimate_keywords(domain, await self._resolve_page(page_facts))

        backlinks = backlink_outcome.value
        if backlink_outcome.exhausted:
            backlinks = estimate_backlinks(domain, await self._resolve_page(page_facts))

        metrics = UnifiedSEOMetrics(
            keywords=keywords,
            backlinks=backlinks,
            source=MetricSources(
                keywords=self._source(keyword_outcome),
                backlinks=self._source(backlink_outcome),
            ),
            failures=keyword_outcome.failures + backlink_outcome.failures,
        )
        logger.info(
            f"Metrics for {domain}: keywords from {metrics.source.keywords.value}, "
            f"backlinks from {metrics.source.backlinks.value}"
        )
        return metrics

    @staticmethod
    def _source(outcome: CascadeOutcome) -> ProviderName:
        return outcome.source or ProviderName.ESTIMATE
