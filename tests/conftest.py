"""
Pytest Configuration and Shared Fixtures

Provides common fixtures and configuration for all test modules.
"""

from typing import Callable, Dict, Optional, Sequence

import pytest

from sao_auditor.integrations import (
    AhrefsClient,
    DataForSEOClient,
    GoogleSearchClient,
    MozClient,
    PageInspector,
    PageSpeedClient,
    ProviderRegistry,
    SearchConsoleClient,
)
from sao_auditor.integrations.base import RetryConfig
from sao_auditor.models import (
    BacklinkMetrics,
    BrandRank,
    DataSource,
    KeywordMetrics,
    Metric,
    MetricSources,
    PageFacts,
    PerfFacts,
    Pillar,
    PILLAR_ORDER,
    PillarScore,
    ProviderName,
    ScoreResult,
    UnifiedSEOMetrics,
)
from sao_auditor.scoring import PILLAR_BUDGETS, build_score_result
from sao_auditor.utils import Settings


# ============================================================================
# Collaborator Facts
# ============================================================================

@pytest.fixture
def strong_page() -> PageFacts:
    """A well-built page that should max out most on-page metrics."""
    return PageFacts(
        url="https://example.com/guide",
        final_url="https://example.com/guide",
        status_code=200,
        has_ssl=True,
        title="The Complete Guide",
        h1_count=1,
        h2_count=4,
        h3_count=3,
        heading_sequence=(1, 2, 3, 2, 3, 2, 3, 2),
        schema_types=("Organization", "FAQPage", "AggregateRating", "LocalBusiness"),
        has_author_markup=True,
        has_local_signals=True,
        image_count=8,
        images_with_alt=8,
        table_count=1,
        list_count=4,
        video_count=2,
        word_count=1800,
        intro_word_count=40,
        sentiment=0.6,
        internal_links=30,
        external_links=6,
        citation_count=4,
        social_profiles=3,
        links_checked=20,
        broken_links=0,
        llms_txt_present=True,
        llms_txt_valid=True,
        sitemap_present=True,
        sitemap_valid=True,
    )


@pytest.fixture
def plain_page() -> PageFacts:
    """Scenario A page: no schema, one H1, HTTPS, nothing else of note."""
    return PageFacts(
        url="https://example.com/",
        final_url="https://example.com/",
        status_code=200,
        has_ssl=True,
        title="Example",
        h1_count=1,
        heading_sequence=(1,),
        word_count=350,
        intro_word_count=20,
    )


@pytest.fixture
def fast_perf() -> PerfFacts:
    return PerfFacts(
        url="https://example.com/",
        lcp_seconds=1.8,
        inp_ms=150,
        inp_from_field_data=True,
        cls=0.05,
        mobile_score=95,
    )


@pytest.fixture
def top_brand() -> BrandRank:
    return BrandRank(query="example", rank=1, checked_results=10)


@pytest.fixture
def provider_metrics() -> UnifiedSEOMetrics:
    """Cascade output with real provider data for both families."""
    return UnifiedSEOMetrics(
        keywords=KeywordMetrics(
            total=150,
            top10=40,
            top100=150,
            avg_position=2.5,
            estimated_traffic=12000,
            intent_match_percent=85.0,
            dominant_intent="commercial",
        ),
        backlinks=BacklinkMetrics(domain_rating=72, total_backlinks=90000, referring_domains=450),
        source=MetricSources(keywords=ProviderName.AHREFS, backlinks=ProviderName.AHREFS),
    )


# ============================================================================
# Score Builders
# ============================================================================

@pytest.fixture
def make_score() -> Callable[..., ScoreResult]:
    """
    Build a ScoreResult from five pillar scores in pillar order.

    Each pillar holds a single metric named "points" so averaging and ranking
    can be tested without going through page facts.
    """
    def _make(pillar_scores: Sequence[float], data_source: Optional[DataSource] = None) -> ScoreResult:
        pillars: Dict[Pillar, PillarScore] = {}
        for pillar, value in zip(PILLAR_ORDER, pillar_scores):
            budget = PILLAR_BUDGETS[pillar]
            pillars[pillar] = PillarScore.from_metrics(
                pillar,
                {"points": Metric(value=value, score=value, max_score=budget, recommendation="Do more")},
                budget,
            )
        return build_score_result(pillars, data_source or DataSource())

    return _make


# ============================================================================
# Providers
# ============================================================================

@pytest.fixture
def no_retry() -> RetryConfig:
    return RetryConfig(max_retries=0, initial_delay=0.0)


@pytest.fixture
def registry(no_retry) -> ProviderRegistry:
    """Registry with every provider unconfigured; tests patch in what they need."""
    return ProviderRegistry(
        ahrefs=AhrefsClient(retry_config=no_retry),
        dataforseo=DataForSEOClient(retry_config=no_retry),
        moz=MozClient(retry_config=no_retry),
        gsc=SearchConsoleClient(retry_config=no_retry),
        pagespeed=PageSpeedClient(enabled=False, timeout=5.0, retry_config=no_retry),
        inspector=PageInspector(timeout=5.0),
        google_search=GoogleSearchClient(timeout=5.0, retry_config=no_retry),
    )


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    return Settings(
        _env_file=None,
        AHREFS_API_KEY=None,
        DATAFORSEO_LOGIN=None,
        DATAFORSEO_PASSWORD=None,
        MOZ_API_TOKEN=None,
        GSC_ACCESS_TOKEN=None,
        GOOGLE_CSE_API_KEY=None,
        GOOGLE_CSE_ID=None,
        PAGESPEED_ENABLED=False,
        MAX_CONCURRENT_URLS=3,
        MAX_PRIMARY_URLS=30,
        MAX_COMPETITORS=4,
        MAX_COMPETITOR_URLS=10,
        API_TIMEOUT=5.0,
        PAGE_TIMEOUT=5.0,
        ANALYSIS_TIMEOUT=10.0,
    )


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
