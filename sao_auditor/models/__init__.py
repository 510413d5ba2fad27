"""
Value objects shared across the auditor.

All of them are frozen dataclasses with a to_dict() for JSON output.
"""

from .facts import (
    CWVCategory,
    PageFacts,
    PerfFacts,
    BrandRank,
    categorize_lcp,
    categorize_inp,
    categorize_cls,
)
from .metrics import (
    count,
    MetricFamily,
    ProviderName,
    PROVIDER_DISPLAY_NAMES,
    KeywordMetrics,
    BacklinkMetrics,
    ProviderFailure,
    MetricSources,
    UnifiedSEOMetrics,
)
from .scores import (
    Pillar,
    PILLAR_ORDER,
    PILLAR_LABELS,
    Priority,
    Metric,
    PillarScore,
    DataSource,
    ScoreResult,
    Recommendation,
    PillarRanking,
    ComparisonEntry,
    Comparison,
)
from .results import UrlAnalysis, DomainResult, BatchResult

__all__ = [
    # Facts
    "CWVCategory",
    "PageFacts",
    "PerfFacts",
    "BrandRank",
    "categorize_lcp",
    "categorize_inp",
    "categorize_cls",
    # Metrics
    "count",
    "MetricFamily",
    "ProviderName",
    "PROVIDER_DISPLAY_NAMES",
    "KeywordMetrics",
    "BacklinkMetrics",
    "ProviderFailure",
    "MetricSources",
    "UnifiedSEOMetrics",
    # Scores
    "Pillar",
    "PILLAR_ORDER",
    "PILLAR_LABELS",
    "Priority",
    "Metric",
    "PillarScore",
    "DataSource",
    "ScoreResult",
    "Recommendation",
    "PillarRanking",
    "ComparisonEntry",
    "Comparison",
    # Results
    "UrlAnalysis",
    "DomainResult",
    "BatchResult",
]
