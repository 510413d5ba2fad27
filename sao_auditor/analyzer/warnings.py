"""
Pillar-impact warnings.

Provider errors are raw ("Moz backlinks: HTTP 401"). Warnings translate them
into what the reader actually loses: which pillar and which metrics were scored
from an estimate or left at zero.
"""

from typing import Dict, List, Optional, Tuple

from ..models import (
    MetricFamily,
    Pillar,
    PILLAR_LABELS,
    PROVIDER_DISPLAY_NAMES,
    ProviderName,
    UnifiedSEOMetrics,
)

FAMILY_IMPACT: Dict[MetricFamily, Tuple[Pillar, Tuple[str, ...]]] = {
    MetricFamily.KEYWORDS: (Pillar.KEYWORD_VISIBILITY, ("keywords", "positions", "intent_match")),
    MetricFamily.BACKLINKS: (Pillar.AI_TRUST, ("backlinks", "referring_domains")),
}

# Which pillar metrics each provider feeds, per family
PROVIDER_IMPACT: Dict[Tuple[ProviderName, MetricFamily], Tuple[Pillar, Tuple[str, ...]]] = {
    (ProviderName.AHREFS, MetricFamily.KEYWORDS): FAMILY_IMPACT[MetricFamily.KEYWORDS],
    (ProviderName.DATAFORSEO, MetricFamily.KEYWORDS): FAMILY_IMPACT[MetricFamily.KEYWORDS],
    (ProviderName.GSC, MetricFamily.KEYWORDS): FAMILY_IMPACT[MetricFamily.KEYWORDS],
    (ProviderName.AHREFS, MetricFamily.BACKLINKS): FAMILY_IMPACT[MetricFamily.BACKLINKS],
    (ProviderName.MOZ, MetricFamily.BACKLINKS): FAMILY_IMPACT[MetricFamily.BACKLINKS],
    (ProviderName.DATAFORSEO, MetricFamily.BACKLINKS): FAMILY_IMPACT[MetricFamily.BACKLINKS],
}

PERFORMANCE_IMPACT: Tuple[Pillar, Tuple[str, ...]] = (
    Pillar.WEBSITE_TECHNICAL, ("lcp", "inp", "cls", "mobile"),
)
BRAND_IMPACT: Tuple[Pillar, Tuple[str, ...]] = (Pillar.BRAND_RANKING, ("brand_search",))


def describe_impact(impact: Tuple[Pillar, Tuple[str, ...]]) -> str:
    pillar, metric_names = impact
    return f"{PILLAR_LABELS[pillar]} ({', '.join(metric_names)})"


def cascade_warnings(metrics: UnifiedSEOMetrics) -> List[str]:
    """Warnings for every failed provider and every estimated family."""
    warnings: List[str] = []

    for failure in metrics.failures:
        impact = PROVIDER_IMPACT.get((failure.provider, failure.family))
        if impact is None:
            continue
        verb = "timed out" if failure.kind == "timeout" else "failed"
        warnings.append(
            f"{PROVIDER_DISPLAY_NAMES[failure.provider]} {failure.family.value} lookup {verb}; "
            f"fell back for {describe_impact(impact)}"
        )

    sources = {
        MetricFamily.KEYWORDS: metrics.source.keywords,
        MetricFamily.BACKLINKS: metrics.source.backlinks,
    }
    for family, source in sources.items():
        if source != ProviderName.ESTIMATE:
            continue
        impact = describe_impact(FAMILY_IMPACT[family])
        if any(f.family == family for f in metrics.failures):
            warnings.append(f"All {family.value} providers failed; {impact} scored from estimates")
        else:
            warnings.append(f"No {family.value} provider configured; {impact} scored from estimates")

    return warnings


def performance_warning(configured: bool, error: Optional[str] = None) -> str:
    impact = describe_impact(PERFORMANCE_IMPACT)
    if not configured:
        return f"Performance analysis disabled; {impact} scored 0"
    return f"Performance analysis failed ({error}); {impact} scored 0"


def brand_warning(configured: bool, error: Optional[str] = None) -> str:
    impact = describe_impact(BRAND_IMPACT)
    if not configured:
        return f"Google Custom Search not configured; {impact} scored 0"
    return f"Brand rank lookup failed ({error}); {impact} scored 0"


def page_warning(error: str) -> str:
    return f"Page could not be inspected ({error}); on-page metrics in every pillar scored 0"
