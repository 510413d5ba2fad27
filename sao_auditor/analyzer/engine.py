"""
Audit Engine

Entry points for analysing one URL or a batch of URLs with competitors.

Per URL, page inspection, performance analysis, brand lookup and the two metric
cascades fan out concurrently. Every branch settles into either a value or an
error message, so one URL always yields a scored UrlAnalysis. A batch drops URLs
whose page never loaded, averages the rest per domain and ranks the primary
domain against its competitors.
"""

import asyncio
import logging
import time
from typing import List, Optional, Sequence, Tuple

from ..collector.estimates import estimate_backlinks, estimate_keywords
from ..collector.orchestrator import MetricsOrchestrator
from ..exceptions import InvalidURLError, NoAnalyzableURLsError, ProviderError
from ..integrations.config import ProviderRegistry
from ..models import (
    BatchResult,
    BrandRank,
    DomainResult,
    PageFacts,
    PerfFacts,
    UnifiedSEOMetrics,
    UrlAnalysis,
)
from ..scoring import (
    average_scores,
    calculate_total_score,
    compare_scores,
    generate_recommendations,
)
from ..utils.config import Settings, get_settings
from ..utils.rate_limit import TokenBucketRateLimiter
from ..utils.urls import extract_domain, normalize_url
from . import warnings as impact

logger = logging.getLogger(__name__)

ANONYMOUS_CALLER = "anonymous"

# Page fetch and the post-fetch checks each get PAGE_TIMEOUT; the checks
# fall back on their own deadline so the outer bound only trips on the fetch
PAGE_INSPECTION_FACTOR = 3


class AuditEngine:
    """
    Usage:
        async with AuditEngine() as engine:
            analysis = await engine.analyze_url("example.com/pricing")
            batch = await engine.analyze_batch(
                ["example.com/", "example.com/blog"],
                competitor_groups=[["rival.com/"]],
            )
    """

    def __init__(
        self,
        registry: Optional[ProviderRegistry] = None,
        settings: Optional[Settings] = None,
        rate_limiter: Optional[TokenBucketRateLimiter] = None,
    ):
        self.settings = settings or get_settings()
        self.registry = registry or ProviderRegistry.from_settings(self.settings)
        self.orchestrator = MetricsOrchestrator(self.registry, provider_timeout=self.settings.API_TIMEOUT)
        self.rate_limiter = rate_limiter

    def provider_status(self):
        """Configuration state of every provider adapter."""
        return self.registry.status()

    async def close(self):
        await self.registry.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    # =========================================================================
    # SINGLE URL
    # =========================================================================

    async def analyze_url(self, url: str) -> UrlAnalysis:
        """
        Score one URL.

        Args:
            url: Page URL; a missing scheme defaults to https

        Returns:
            UrlAnalysis. Provider, page and timeout failures are reported in
            `errors` and `warnings`, never raised.

        Raises:
            InvalidURLError: if the URL cannot be normalized
        """
        normalized = normalize_url(url)
        started = time.monotonic()
        ceiling = self.settings.ANALYSIS_TIMEOUT
        try:
            return await asyncio.wait_for(self._analyze(normalized, started), timeout=ceiling)
        except asyncio.TimeoutError:
            logger.warning(f"Analysis of {normalized} timed out after {ceiling:g}s")
            return self._timed_out(normalized, started, ceiling)

    async def _analyze(self, url: str, started: float) -> UrlAnalysis:
        domain = extract_domain(url)
        logger.info(f"Analyzing {url}")

        page_task = asyncio.ensure_future(self._inspect(url))
        try:
            (page, page_error), (perf, perf_error), (brand, brand_error), metrics = await asyncio.gather(
                self._settle_page(page_task),
                self._performance(url),
                self._brand(domain),
                self.orchestrator.collect(domain, page_facts=page_task),
            )
        finally:
            if not page_task.done():
                page_task.cancel()

        score = calculate_total_score(metrics, page=page, perf=perf, brand=brand)

        errors = [e for e in (page_error, perf_error, brand_error) if e]
        errors.extend(metrics.errors)

        warnings = impact.cascade_warnings(metrics)
        if page is None:
            warnings.append(impact.page_warning(page_error))
        if perf is None:
            warnings.append(impact.performance_warning(self.registry.pagespeed.is_configured(), perf_error))
        if brand is None:
            warnings.append(impact.brand_warning(self.registry.google_search.is_configured(), brand_error))

        duration = time.monotonic() - started
        logger.info(f"Scored {url}: {score.total}/100 in {duration:.1f}s")

        return UrlAnalysis(
            url=url,
            score=score,
            metrics=metrics,
            page=page,
            performance=perf,
            brand=brand,
            errors=errors,
            warnings=warnings,
            duration_seconds=duration,
        )

    async def _inspect(self, url: str) -> PageFacts:
        timeout = self.settings.PAGE_TIMEOUT * PAGE_INSPECTION_FACTOR
        return await asyncio.wait_for(self.registry.inspector.inspect(url), timeout=timeout)

    @staticmethod
    async def _settle_page(page_task: asyncio.Future) -> Tuple[Optional[PageFacts], Optional[str]]:
        try:
            return await page_task, None
        except asyncio.TimeoutError:
            return None, "Page inspection timed out"
        except ProviderError as e:
            logger.warning(f"Page inspection failed: {e}")
            return None, f"Page could not be loaded: {e}"
        except Exception as e:
            logger.exception(f"Unexpected page inspection error: {e}")
            return None, f"Page inspection failed: {e}"

    async def _performance(self, url: str) -> Tuple[Optional[PerfFacts], Optional[str]]:
        client = self.registry.pagespeed
        if not client.is_configured():
            return None, None
        try:
            return await asyncio.wait_for(client.analyze(url), timeout=client.timeout), None
        except asyncio.TimeoutError:
            logger.warning(f"PageSpeed timed out for {url}")
            return None, f"PageSpeed timed out after {client.timeout:g}s"
        except ProviderError as e:
            logger.warning(f"PageSpeed failed for {url}: {e}")
            return None, f"PageSpeed: {e}"
        except Exception as e:
            logger.exception(f"Unexpected PageSpeed error for {url}: {e}")
            return None, f"PageSpeed: unexpected error: {e}"

    async def _brand(self, domain: str) -> Tuple[Optional[BrandRank], Optional[str]]:
        client = self.registry.google_search
        if not client.is_configured():
            return None, None
        try:
            return await asyncio.wait_for(client.fetch_brand_rank(domain), timeout=client.timeout), None
        except asyncio.TimeoutError:
            logger.warning(f"Brand rank lookup timed out for {domain}")
            return None, f"Google Search timed out after {client.timeout:g}s"
        except ProviderError as e:
            logger.warning(f"Brand rank lookup failed for {domain}: {e}")
            return None, f"Google Search: {e}"
        except Exception as e:
            logger.exception(f"Unexpected brand rank error for {domain}: {e}")
            return None, f"Google Search: unexpected error: {e}"

    def _timed_out(self, url: str, started: float, ceiling: float) -> UrlAnalysis:
        domain = extract_domain(url)
        metrics = UnifiedSEOMetrics(keywords=estimate_keywords(domain), backlinks=estimate_backlinks(domain))
        message = f"Analysis timed out after {ceiling:g}s"
        return UrlAnalysis(
            url=url,
            score=calculate_total_score(metrics),
            metrics=metrics,
            errors=[message],
            warnings=[impact.page_warning(message)],
            duration_seconds=time.monotonic() - started,
        )

    # =========================================================================
    # BATCH
    # =========================================================================

    @staticmethod
    def _prepare_urls(urls: Sequence[str], limit: int, label: str) -> Tuple[List[str], List[str], List[str]]:
        """Normalize and cap one URL list. Returns (kept, dropped, warnings)."""
        kept: List[str] = []
        dropped: List[str] = []
        warnings: List[str] = []
        for raw in urls:
            try:
                kept.append(normalize_url(raw))
            except InvalidURLError as e:
                logger.warning(f"Dropping {label} URL: {e}")
                dropped.append(str(raw))
                warnings.append(f"Dropped invalid URL {raw!r}: {e.reason}")
        if len(kept) > limit:
            warnings.append(f"Only the first {limit} of {len(kept)} {label} URLs were analyzed")
            logger.warning(f"Truncating {len(kept)} {label} URLs to {limit}")
            kept = kept[:limit]
        return kept, dropped, warnings

    @staticmethod
    def _domain_result(
        analyses: List[UrlAnalysis],
        warnings: List[str],
    ) -> Tuple[Optional[DomainResult], List[str]]:
        """Fold one domain's analyses; URLs whose page never loaded are dropped."""
        loaded = [a for a in analyses if a.page_loaded]
        dropped = [a.url for a in analyses if not a.page_loaded]
        notes = list(warnings)
        notes.extend(f"Dropped {url}: page could not be loaded" for url in dropped)
        if not loaded:
            return None, dropped

        average = average_scores([a.score for a in loaded])
        result = DomainResult(
            name=extract_domain(loaded[0].url),
            urls=[a.url for a in loaded],
            average=average,
            url_results=loaded,
            recommendations=generate_recommendations(average),
            warnings=notes,
        )
        return result, dropped

    async def analyze_batch(
        self,
        urls: Sequence[str],
        competitor_groups: Optional[Sequence[Sequence[str]]] = None,
        *,
        caller_id: Optional[str] = None,
        rate_limiter: Optional[TokenBucketRateLimiter] = None,
    ) -> BatchResult:
        """
        Analyze a primary domain's URLs and optional competitor groups.

        Args:
            urls: Primary domain URLs (at most MAX_PRIMARY_URLS are analyzed)
            competitor_groups: One URL list per competitor domain (at most
                MAX_COMPETITORS groups of MAX_COMPETITOR_URLS each)
            caller_id: Identity charged one rate-limit token
            rate_limiter: Overrides the engine's limiter for this call

        Returns:
            BatchResult whose URL order follows input order

        Raises:
            RateLimitExceeded: before any work starts
            NoAnalyzableURLsError: if no primary URL could be analyzed
        """
        limiter = rate_limiter or self.rate_limiter
        if limiter is not None:
            limiter.acquire(caller_id or ANONYMOUS_CALLER)

        s = self.settings
        primary_urls, dropped, primary_warnings = self._prepare_urls(urls, s.MAX_PRIMARY_URLS, "primary")

        groups = list(competitor_groups or [])
        if len(groups) > s.MAX_COMPETITORS:
            primary_warnings.append(f"Only the first {s.MAX_COMPETITORS} of {len(groups)} competitors were analyzed")
            groups = groups[:s.MAX_COMPETITORS]

        competitor_urls: List[List[str]] = []
        competitor_warnings: List[List[str]] = []
        for group in groups:
            kept, group_dropped, notes = self._prepare_urls(group, s.MAX_COMPETITOR_URLS, "competitor")
            competitor_urls.append(kept)
            competitor_warnings.append(notes)
            dropped.extend(group_dropped)

        if not primary_urls:
            raise NoAnalyzableURLsError("No valid primary URLs were supplied", dropped=dropped)

        semaphore = asyncio.Semaphore(s.MAX_CONCURRENT_URLS)

        async def bounded(url: str) -> UrlAnalysis:
            async with semaphore:
                return await self.analyze_url(url)

        all_urls = primary_urls + [u for group in competitor_urls for u in group]
        logger.info(
            f"Batch: {len(primary_urls)} primary URLs, {len(competitor_urls)} competitors, "
            f"{len(all_urls)} URLs total"
        )
        analyses = await asyncio.gather(*(bounded(u) for u in all_urls))

        # Competitors fold first so skip notes land in the primary result as it is built
        competitors: List[DomainResult] = []
        competitor_dropped: List[str] = []
        offset = len(primary_urls)
        for kept, notes in zip(competitor_urls, competitor_warnings):
            group_analyses = list(analyses[offset:offset + len(kept)])
            offset += len(kept)
            result, group_dropped = self._domain_result(group_analyses, notes)
            competitor_dropped.extend(group_dropped)
            if result is None:
                primary_warnings.append("A competitor was skipped: none of its URLs could be analyzed")
                continue
            competitors.append(result)

        primary, primary_dropped = self._domain_result(list(analyses[:len(primary_urls)]), primary_warnings)
        dropped.extend(primary_dropped)
        dropped.extend(competitor_dropped)
        if primary is None:
            raise NoAnalyzableURLsError("None of the primary URLs could be loaded", dropped=dropped)

        comparison = None
        if competitors:
            comparison = compare_scores(
                primary.name,
                primary.average,
                [(c.name, c.average) for c in competitors],
            )

        return BatchResult(primary=primary, competitors=competitors, comparison=comparison, dropped=dropped)
