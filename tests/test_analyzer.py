"""
Test Suite for the Audit Engine

Tests cover:
- Single-URL analysis with degraded collaborators
- Impact warnings for failed and unconfigured providers
- Batch normalization, caps, ordering and dropping
- Competitor comparison and rate-limit admission
"""

import asyncio
from unittest.mock import AsyncMock

import httpx
import pytest

from sao_auditor.analyzer import AuditEngine
from sao_auditor.analyzer.warnings import (
    brand_warning,
    cascade_warnings,
    page_warning,
    performance_warning,
)
from sao_auditor.exceptions import (
    InvalidURLError,
    NoAnalyzableURLsError,
    PageFetchError,
    ProviderError,
    RateLimitExceeded,
)
from sao_auditor.integrations import PageInspector
from sao_auditor.models import (
    BacklinkMetrics,
    BrandRank,
    KeywordMetrics,
    MetricFamily,
    MetricSources,
    PageFacts,
    ProviderFailure,
    ProviderName,
    UnifiedSEOMetrics,
)
from sao_auditor.utils import TokenBucketRateLimiter

pytestmark = pytest.mark.integration


def page_for(url: str, **overrides) -> PageFacts:
    facts = dict(
        url=url,
        final_url=url,
        status_code=200,
        has_ssl=True,
        h1_count=1,
        heading_sequence=(1,),
        word_count=350,
        intro_word_count=20,
    )
    facts.update(overrides)
    return PageFacts(**facts)


async def serve_pages(url: str) -> PageFacts:
    if "/broken" in url or "dead." in url:
        raise PageFetchError("Page returned HTTP 500", status_code=500)
    return page_for(url)


@pytest.fixture
def engine(registry, settings) -> AuditEngine:
    registry.inspector.inspect = AsyncMock(side_effect=serve_pages)
    return AuditEngine(registry=registry, settings=settings)


# ============================================================================
# Single URL
# ============================================================================

class TestAnalyzeUrl:
    """AuditEngine.analyze_url."""

    @pytest.mark.asyncio
    async def test_scenario_a(self, engine, plain_page, fast_perf):
        """No schema, one H1, HTTPS, LCP 1.8s, no keyword or backlink provider."""
        engine.registry.inspector.inspect = AsyncMock(return_value=plain_page)
        engine.registry.pagespeed.enabled = True
        engine.registry.pagespeed.analyze = AsyncMock(return_value=fast_perf)

        analysis = await engine.analyze_url("example.com")

        assert analysis.url == "https://example.com/"
        assert analysis.metrics.source.keywords == ProviderName.ESTIMATE
        assert analysis.metrics.source.backlinks == ProviderName.ESTIMATE
        assert 0 < analysis.score.total < 100
        assert analysis.score.total == 34
        assert analysis.score.data_source.moz is False
        assert analysis.errors == [], "Unconfigured providers must not produce errors"
        assert any(w.startswith("No keywords provider configured") for w in analysis.warnings)
        assert any(w.startswith("No backlinks provider configured") for w in analysis.warnings)
        assert any(w.startswith("Google Custom Search not configured") for w in analysis.warnings)

    @pytest.mark.asyncio
    async def test_invalid_url_raises(self, engine):
        with pytest.raises(InvalidURLError):
            await engine.analyze_url("not a url")

    @pytest.mark.asyncio
    async def test_page_failure_still_scores(self, engine):
        analysis = await engine.analyze_url("https://example.com/broken")

        assert analysis.page is None
        assert not analysis.page_loaded
        assert analysis.errors == ["Page could not be loaded: Page returned HTTP 500"]
        assert page_warning("Page could not be loaded: Page returned HTTP 500") in analysis.warnings
        assert analysis.score.total >= 0
        assert analysis.metrics.keywords.total == 50, "Domain-only estimate when the page is missing"

    @pytest.mark.asyncio
    async def test_provider_failure_reported(self, engine):
        engine.registry.moz.api_token = "token"
        engine.registry.moz.fetch_backlinks = AsyncMock(
            side_effect=ProviderError("API request failed: 401", status_code=401)
        )

        analysis = await engine.analyze_url("example.com")

        assert analysis.errors == ["Moz backlinks: API request failed: 401"]
        assert (
            "Moz backlinks lookup failed; fell back for AI Trust (backlinks, referring_domains)"
            in analysis.warnings
        )
        assert any(w.startswith("All backlinks providers failed") for w in analysis.warnings)

    @pytest.mark.asyncio
    async def test_performance_failure(self, engine):
        engine.registry.pagespeed.enabled = True
        engine.registry.pagespeed.analyze = AsyncMock(side_effect=ProviderError("API request failed: 500"))

        analysis = await engine.analyze_url("example.com")

        assert analysis.performance is None
        assert "PageSpeed: API request failed: 500" in analysis.errors
        assert performance_warning(True, "PageSpeed: API request failed: 500") in analysis.warnings
        assert analysis.score.data_source.pagespeed is False

    @pytest.mark.asyncio
    async def test_brand_lookup(self, engine):
        engine.registry.google_search.api_key = "key"
        engine.registry.google_search.engine_id = "cx"
        engine.registry.google_search.fetch_brand_rank = AsyncMock(
            return_value=BrandRank(query="example", rank=1, checked_results=10)
        )

        analysis = await engine.analyze_url("example.com")

        assert analysis.brand.rank == 1
        assert analysis.score.data_source.google_search is True
        assert not any("Google Custom Search" in w for w in analysis.warnings)
        engine.registry.google_search.fetch_brand_rank.assert_awaited_once_with("example.com")

    @pytest.mark.asyncio
    async def test_analysis_timeout(self, engine, settings):
        async def hang(_url):
            await asyncio.sleep(3600)

        engine.settings = settings.model_copy(update={"ANALYSIS_TIMEOUT": 0.05})
        engine.registry.inspector.inspect = hang

        analysis = await engine.analyze_url("example.com")

        assert analysis.page is None
        assert analysis.errors == ["Analysis timed out after 0.05s"]
        assert analysis.metrics.source.keywords == ProviderName.ESTIMATE

    @pytest.mark.slow
    @pytest.mark.asyncio
    async def test_slow_links_do_not_discard_page(self, engine, settings):
        """A loaded page is scored even when its outbound links answer slower than the page budget."""
        links = "".join(f'<a href="https://slow{i}.example.org/">x</a>' for i in range(20))
        html = f"<html><body><h1>Widgets</h1><p>{'word ' * 350}</p>{links}</body></html>"

        async def handler(request):
            if request.method == "HEAD":
                await asyncio.sleep(0.3)
                return httpx.Response(200)
            if request.url.path == "/":
                return httpx.Response(200, text=html, headers={"content-type": "text/html"})
            return httpx.Response(404)

        engine.settings = settings.model_copy(update={"PAGE_TIMEOUT": 0.2})
        engine.registry.inspector = PageInspector(timeout=0.2, transport=httpx.MockTransport(handler))

        analysis = await engine.analyze_url("https://example.com/")
        await engine.registry.inspector.close()

        assert analysis.page is not None
        assert analysis.page_loaded
        assert analysis.page.links_checked == 0
        assert analysis.score.content_structure > 0


# ============================================================================
# Batch
# ============================================================================

class TestAnalyzeBatch:
    """AuditEngine.analyze_batch."""

    @pytest.mark.asyncio
    async def test_input_order_and_invalid_urls(self, engine):
        result = await engine.analyze_batch(
            ["example.com/one", "example.com/two", "not a url", "example.com/three"]
        )

        assert result.primary.urls == [
            "https://example.com/one",
            "https://example.com/two",
            "https://example.com/three",
        ]
        assert result.primary.name == "example.com"
        assert result.dropped == ["not a url"]
        assert "Dropped invalid URL 'not a url': missing or invalid host" in result.primary.warnings
        assert result.comparison is None

    @pytest.mark.asyncio
    async def test_no_valid_urls(self, engine):
        with pytest.raises(NoAnalyzableURLsError) as exc_info:
            await engine.analyze_batch(["", "nope"])
        assert exc_info.value.dropped == ["", "nope"]
        engine.registry.inspector.inspect.assert_not_called()

    @pytest.mark.asyncio
    async def test_every_page_failed(self, engine):
        with pytest.raises(NoAnalyzableURLsError) as exc_info:
            await engine.analyze_batch(["example.com/broken", "example.com/broken-too"])
        assert exc_info.value.dropped == ["https://example.com/broken", "https://example.com/broken-too"]

    @pytest.mark.asyncio
    async def test_unloadable_url_dropped_from_average(self, engine):
        result = await engine.analyze_batch(["example.com/", "example.com/broken"])

        assert result.primary.urls == ["https://example.com/"]
        assert result.dropped == ["https://example.com/broken"]
        assert "Dropped https://example.com/broken: page could not be loaded" in result.primary.warnings
        assert result.primary.average == result.primary.url_results[0].score

    @pytest.mark.asyncio
    async def test_primary_cap(self, engine, settings):
        engine.settings = settings.model_copy(update={"MAX_PRIMARY_URLS": 2})
        result = await engine.analyze_batch(["example.com/a", "example.com/b", "example.com/c"])

        assert len(result.primary.urls) == 2
        assert "Only the first 2 of 3 primary URLs were analyzed" in result.primary.warnings

    @pytest.mark.asyncio
    async def test_competitor_caps(self, engine, settings):
        engine.settings = settings.model_copy(update={"MAX_COMPETITORS": 2, "MAX_COMPETITOR_URLS": 1})
        groups = [["rival.com/a", "rival.com/b"], ["other.org/"], ["third.net/"]]

        result = await engine.analyze_batch(["example.com/"], groups)

        assert [c.name for c in result.competitors] == ["rival.com", "other.org"]
        assert result.competitors[0].urls == ["https://rival.com/a"]
        assert "Only the first 2 of 3 competitors were analyzed" in result.primary.warnings
        assert "Only the first 1 of 2 competitor URLs were analyzed" in result.competitors[0].warnings

    @pytest.mark.asyncio
    async def test_comparison(self, engine, strong_page):
        async def pages(url):
            if "example.com" in url:
                return page_for(url, **{
                    k: getattr(strong_page, k)
                    for k in ("schema_types", "heading_sequence", "h2_count", "h3_count", "word_count",
                              "image_count", "images_with_alt", "table_count", "list_count", "video_count")
                })
            return page_for(url)

        engine.registry.inspector.inspect = AsyncMock(side_effect=pages)

        result = await engine.analyze_batch(
            ["example.com/"],
            [["rival.com/"], ["other.org/a", "other.org/b"]],
        )

        comparison = result.comparison
        assert comparison is not None
        assert comparison.total_entries == 3
        assert comparison.rank == 1
        assert [c.urls for c in result.competitors] == [
            ["https://rival.com/"],
            ["https://other.org/a", "https://other.org/b"],
        ]
        assert result.primary.recommendations, "A non-perfect domain gets recommendations"

    @pytest.mark.asyncio
    async def test_unloadable_competitor_skipped(self, engine):
        result = await engine.analyze_batch(["example.com/"], [["dead.com/"], ["rival.com/"]])

        assert [c.name for c in result.competitors] == ["rival.com"]
        assert "https://dead.com/" in result.dropped
        assert "A competitor was skipped: none of its URLs could be analyzed" in result.primary.warnings
        assert result.comparison.total_entries == 2

    @pytest.mark.asyncio
    async def test_primary_warnings_complete_when_built(self, engine):
        """Skip notes for competitors are part of the primary result from construction on."""
        result = await engine.analyze_batch(["example.com/", "example.com/broken"], [["dead.com/"]])

        assert result.primary.warnings == [
            "A competitor was skipped: none of its URLs could be analyzed",
            "Dropped https://example.com/broken: page could not be loaded",
        ]
        assert result.primary.to_dict()["warnings"] == result.primary.warnings
        assert result.dropped == ["https://example.com/broken", "https://dead.com/"]
        assert result.competitors == []
        assert result.comparison is None

    @pytest.mark.slow
    @pytest.mark.asyncio
    async def test_concurrency_bounded(self, engine, settings):
        running = 0
        peak = 0

        async def slow_page(url):
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.01)
            running -= 1
            return page_for(url)

        engine.registry.inspector.inspect = slow_page
        await engine.analyze_batch([f"example.com/{i}" for i in range(8)])

        assert peak <= settings.MAX_CONCURRENT_URLS

    @pytest.mark.asyncio
    async def test_rate_limit_checked_before_work(self, engine):
        limiter = TokenBucketRateLimiter(per_minute=1, burst=1)

        await engine.analyze_batch(["example.com/"], caller_id="10.0.0.1", rate_limiter=limiter)
        calls = engine.registry.inspector.inspect.await_count

        with pytest.raises(RateLimitExceeded) as exc_info:
            await engine.analyze_batch(["example.com/"], caller_id="10.0.0.1", rate_limiter=limiter)

        assert exc_info.value.caller_id == "10.0.0.1"
        assert engine.registry.inspector.inspect.await_count == calls, "No work after rejection"

        # Another caller has its own bucket
        await engine.analyze_batch(["example.com/"], caller_id="10.0.0.2", rate_limiter=limiter)


# ============================================================================
# Warnings
# ============================================================================

class TestImpactWarnings:
    """Translating provider failures into pillar impact."""

    def test_failed_then_estimated(self):
        metrics = UnifiedSEOMetrics(
            keywords=KeywordMetrics(total=50),
            backlinks=BacklinkMetrics(domain_authority=20),
            source=MetricSources(keywords=ProviderName.ESTIMATE, backlinks=ProviderName.MOZ),
            failures=(
                ProviderFailure(ProviderName.AHREFS, MetricFamily.KEYWORDS, "timed out after 5s", kind="timeout"),
                ProviderFailure(ProviderName.AHREFS, MetricFamily.BACKLINKS, "API request failed: 403"),
            ),
        )

        assert cascade_warnings(metrics) == [
            "Ahrefs keywords lookup timed out; fell back for Keyword Visibility (keywords, positions, intent_match)",
            "Ahrefs backlinks lookup failed; fell back for AI Trust (backlinks, referring_domains)",
            "All keywords providers failed; Keyword Visibility (keywords, positions, intent_match) scored from estimates",
        ]

    def test_nothing_to_report(self, provider_metrics):
        assert cascade_warnings(provider_metrics) == []

    def test_performance_and_brand(self):
        assert performance_warning(False) == (
            "Performance analysis disabled; Website Technical (lcp, inp, cls, mobile) scored 0"
        )
        assert brand_warning(True, "Google Search: quota") == (
            "Brand rank lookup failed (Google Search: quota); Brand Ranking (brand_search) scored 0"
        )
