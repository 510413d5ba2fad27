"""
Scoring Engine

Turns one URL's collected signals into a ScoreResult. Always produces a full
score: missing inputs score at the floor of their metrics, never abort.

Clamping happens in three places, in order: each Metric to its budget, each
pillar to its budget, and the total is rounded exactly once from the pillar sum.
"""

import logging
from typing import Dict, Optional

from ..models import (
    BrandRank,
    DataSource,
    PageFacts,
    PerfFacts,
    Pillar,
    PILLAR_ORDER,
    PillarScore,
    ProviderName,
    ScoreResult,
    UnifiedSEOMetrics,
)
from .brand import score_brand_ranking
from .content import score_content_structure
from .helpers import clamp, round_half_up, TOTAL_BUDGET
from .keywords import score_keyword_visibility
from .technical import score_website_technical
from .trust import score_ai_trust

logger = logging.getLogger(__name__)


def build_score_result(pillars: Dict[Pillar, PillarScore], data_source: DataSource) -> ScoreResult:
    """Assemble a ScoreResult, computing the total from the pillar scores."""
    ordered = {pillar: pillars[pillar] for pillar in PILLAR_ORDER}
    total = round_half_up(clamp(sum(p.score for p in ordered.values()), 0.0, TOTAL_BUDGET))
    return ScoreResult(total=total, pillars=ordered, data_source=data_source)


def derive_data_source(
    metrics: UnifiedSEOMetrics,
    page: Optional[PageFacts],
    perf: Optional[PerfFacts],
    brand: Optional[BrandRank],
) -> DataSource:
    """Flag each upstream that actually contributed a value."""
    winners = {metrics.source.keywords, metrics.source.backlinks}
    return DataSource(
        moz=ProviderName.MOZ in winners,
        dataforseo=ProviderName.DATAFORSEO in winners,
        gsc=ProviderName.GSC in winners,
        ahrefs=ProviderName.AHREFS in winners,
        pagespeed=perf is not None,
        scraping=page is not None,
        google_search=brand is not None,
    )


def calculate_total_score(
    metrics: UnifiedSEOMetrics,
    page: Optional[PageFacts] = None,
    perf: Optional[PerfFacts] = None,
    brand: Optional[BrandRank] = None,
) -> ScoreResult:
    """
    Score one URL across all five pillars.

    Args:
        metrics: Cascade output (keyword and backlink families with attribution)
        page: Page inspection result, None if the page could not be inspected
        perf: PageSpeed result, None if unavailable
        brand: Brand-rank lookup, None if unavailable

    Returns:
        ScoreResult with total in [0, 100]
    """
    pillars = {
        Pillar.CONTENT_STRUCTURE: score_content_structure(page),
        Pillar.BRAND_RANKING: score_brand_ranking(brand, page),
        Pillar.WEBSITE_TECHNICAL: score_website_technical(perf, page),
        Pillar.KEYWORD_VISIBILITY: score_keyword_visibility(metrics.keywords, metrics.source.keywords),
        Pillar.AI_TRUST: score_ai_trust(metrics.backlinks, metrics.source.backlinks, page),
    }
    result = build_score_result(pillars, derive_data_source(metrics, page, perf, brand))
    logger.debug(
        "Score %s: %s",
        result.total,
        ", ".join(f"{p.value}={result.pillar_score(p):g}" for p in PILLAR_ORDER),
    )
    return result


def score_label(total: int) -> str:
    """Human-readable band for a total score."""
    if total >= 80:
        return "Excellent"
    if total >= 60:
        return "Good"
    if total >= 40:
        return "Needs Improvement"
    return "Poor"
