"""
Scoring Helper Functions and Constants

Point budgets, the step function every sub-metric is scored with, and the
clamping/rounding rules shared by the pillar scorers and the aggregator.
"""

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional, Sequence, Tuple, Union

from ..models import Metric, Pillar


# ============================================================================
# POINT BUDGETS
# ============================================================================

METRIC_BUDGETS: Dict[Pillar, Dict[str, float]] = {
    Pillar.CONTENT_STRUCTURE: {
        "schema": 6,
        "headings": 5,
        "table_lists": 2,
        "multimodal": 4,
        "image_alt": 2,
        "direct_answer": 4,
        "content_depth": 2,
    },
    Pillar.BRAND_RANKING: {
        "brand_search": 5,
        "brand_sentiment": 4,
    },
    Pillar.WEBSITE_TECHNICAL: {
        "lcp": 3,
        "inp": 1.5,
        "cls": 1.5,
        "mobile": 3,
        "ssl": 3,
        "broken_links": 2,
        "llms_txt": 1.5,
        "sitemap": 1.5,
    },
    Pillar.KEYWORD_VISIBILITY: {
        "keywords": 10,
        "positions": 6.5,
        "intent_match": 6.5,
    },
    Pillar.AI_TRUST: {
        "backlinks": 6,
        "referring_domains": 5,
        "sentiment": 4,
        "eeat": 4,
        "local": 3,
    },
}

PILLAR_BUDGETS: Dict[Pillar, float] = {
    Pillar.CONTENT_STRUCTURE: 25,
    Pillar.BRAND_RANKING: 9,
    Pillar.WEBSITE_TECHNICAL: 17,
    Pillar.KEYWORD_VISIBILITY: 23,
    Pillar.AI_TRUST: 22,
}

TOTAL_BUDGET: float = sum(PILLAR_BUDGETS.values())  # 96


# ============================================================================
# NUMERIC RULES
# ============================================================================

def clamp(value: Any, low: float, high: float) -> float:
    """Clamp to [low, high]; None and NaN map to low."""
    if value is None or isinstance(value, bool):
        return low
    try:
        number = float(value)
    except (TypeError, ValueError):
        return low
    if math.isnan(number):
        return low
    return min(max(number, low), high)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 away from zero (79.5 -> 80)."""
    return int(Decimal(repr(float(value))).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def is_missing(value: Any) -> bool:
    """None, NaN, non-numeric and negative inputs carry no signal."""
    if value is None or isinstance(value, bool):
        return True
    if not isinstance(value, (int, float)):
        return True
    return math.isnan(value) or value < 0


Band = Union[Tuple[float, float], Tuple[float, float, bool]]


def step_score(
    value: Any,
    bands: Sequence[Band],
    higher_is_better: bool = True,
    zero_is_missing: bool = False,
) -> float:
    """
    Score a value against bucketed thresholds.

    Bands are listed best first as (bound, points) or (bound, points, inclusive).
    The first band the value satisfies wins. A value that satisfies none, or is
    missing, scores 0.

    Args:
        value: Raw measurement
        bands: Thresholds, best first, points non-increasing
        higher_is_better: Compare with >= (True) or <= (False)
        zero_is_missing: Treat an exact 0 as "no data"

    Returns:
        Points for the first satisfied band, else 0.0
    """
    if is_missing(value):
        return 0.0
    if zero_is_missing and value == 0:
        return 0.0

    for band in bands:
        bound, points = band[0], band[1]
        inclusive = band[2] if len(band) > 2 else True
        if higher_is_better:
            hit = value >= bound if inclusive else value > bound
        else:
            hit = value <= bound if inclusive else value < bound
        if hit:
            return float(points)
    return 0.0


def metric(
    pillar: Pillar,
    key: str,
    value: Any,
    score: float,
    insight: str,
    recommendation: Optional[str] = None,
) -> Metric:
    """Build a Metric against its budget; the recommendation is dropped once full marks are reached."""
    max_score = METRIC_BUDGETS[pillar][key]
    bounded = clamp(score, 0.0, max_score)
    return Metric(
        value=value,
        score=bounded,
        max_score=max_score,
        insight=insight,
        recommendation=recommendation if bounded < max_score else None,
    )
