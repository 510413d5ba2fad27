"""
Metrics collection: cascading provider fallback, normalization, estimates.
"""

from .cascade import CascadeStep, CascadeOutcome, run_cascade
from .orchestrator import MetricsOrchestrator, KEYWORD_PRIORITY, BACKLINK_PRIORITY
from .estimates import estimate_keywords, estimate_backlinks
from .normalizer import (
    normalize_ahrefs_keywords,
    normalize_dataforseo_keywords,
    normalize_gsc_keywords,
    normalize_ahrefs_backlinks,
    normalize_moz_backlinks,
    normalize_dataforseo_backlinks,
    weighted_average_position,
)

__all__ = [
    "CascadeStep",
    "CascadeOutcome",
    "run_cascade",
    "MetricsOrchestrator",
    "KEYWORD_PRIORITY",
    "BACKLINK_PRIORITY",
    "estimate_keywords",
    "estimate_backlinks",
    "normalize_ahrefs_keywords",
    "normalize_dataforseo_keywords",
    "normalize_gsc_keywords",
    "normalize_ahrefs_backlinks",
    "normalize_moz_backlinks",
    "normalize_dataforseo_backlinks",
    "weighted_average_position",
]
