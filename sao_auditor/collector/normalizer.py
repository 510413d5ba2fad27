"""
Metrics Normalizer

Pure functions mapping each provider's raw response onto KeywordMetrics or
BacklinkMetrics. Every optional upstream field is null-coalesced to its zero
value; nothing here raises on a malformed payload.
"""

import math
from collections import Counter
from typing import Any, Dict, List, Optional

from ..models import KeywordMetrics, BacklinkMetrics

INTENT_TYPES = ("informational", "commercial", "transactional", "navigational")

# Representative position for each DataForSEO position bucket
POSITION_BUCKET_WEIGHTS = {
    "pos_1": 1,
    "pos_2_3": 2.5,
    "pos_4_10": 7,
    "pos_11_20": 15,
    "pos_21_30": 25,
    "pos_31_40": 35,
    "pos_41_50": 45,
    "pos_51_60": 55,
    "pos_61_70": 65,
    "pos_71_80": 75,
    "pos_81_90": 85,
    "pos_91_100": 95,
}


# ============================================================================
# COERCION HELPERS
# ============================================================================

def _num(value: Any, default: float = 0.0) -> float:
    """Finite float or the default; bools and strings are not numbers here."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if math.isnan(value) or math.isinf(value):
        return default
    return float(value)


def _count(value: Any) -> int:
    return max(0, int(_num(value)))


def _dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _intent_share(counts: Counter, total: int) -> tuple:
    """(dominant intent, share of keywords carrying it in percent)."""
    if total <= 0 or not counts:
        return None, 0.0
    dominant, dominant_count = max(
        ((intent, counts.get(intent, 0)) for intent in INTENT_TYPES),
        key=lambda pair: pair[1],
    )
    if dominant_count <= 0:
        return None, 0.0
    return dominant, round(dominant_count / total * 100, 1)


# ============================================================================
# KEYWORDS
# ============================================================================

def normalize_ahrefs_keywords(raw: Any) -> KeywordMetrics:
    """site-explorer/organic-keywords -> KeywordMetrics."""
    keywords = [k for k in _list(_dict(raw).get("keywords")) if isinstance(k, dict)]
    if not keywords:
        return KeywordMetrics()

    positions = [_num(k.get("best_position"), 100.0) or 100.0 for k in keywords]
    intents: Counter = Counter()
    for k in keywords:
        for intent in INTENT_TYPES:
            if k.get(f"is_{intent}") is True:
                intents[intent] += 1

    total = len(keywords)
    dominant, share = _intent_share(intents, total)
    return KeywordMetrics(
        total=total,
        top10=sum(1 for p in positions if p <= 10),
        top100=sum(1 for p in positions if p <= 100),
        avg_position=round(sum(positions) / total, 1),
        estimated_traffic=round(sum(_num(k.get("sum_traffic")) for k in keywords)),
        intent_match_percent=share,
        dominant_intent=dominant,
    )


def weighted_average_position(organic: Dict[str, Any]) -> float:
    """Average position estimated from DataForSEO position buckets."""
    counts = {bucket: _count(organic.get(bucket)) for bucket in POSITION_BUCKET_WEIGHTS}
    total = sum(counts.values())
    if total <= 0:
        return 0.0
    weighted = sum(POSITION_BUCKET_WEIGHTS[b] * c for b, c in counts.items())
    return round(weighted / total, 1)


def normalize_dataforseo_keywords(raw: Any) -> KeywordMetrics:
    """domain_rank_overview items (+ ranked_keywords items for intent) -> KeywordMetrics."""
    data = _dict(raw)
    overview = _list(data.get("overview"))
    first = _dict(overview[0]) if overview else {}
    organic = _dict(_dict(first.get("metrics")).get("organic"))

    total = _count(organic.get("count"))
    if total <= 0:
        return KeywordMetrics()

    intents: Counter = Counter()
    ranked = [item for item in _list(data.get("ranked_keywords")) if isinstance(item, dict)]
    for item in ranked:
        keyword_data = _dict(item.get("keyword_data"))
        main_intent = _dict(keyword_data.get("search_intent_info")).get("main_intent")
        if main_intent in INTENT_TYPES:
            intents[main_intent] += 1
    dominant, share = _intent_share(intents, len(ranked))

    return KeywordMetrics(
        total=total,
        top10=_count(organic.get("pos_1")) + _count(organic.get("pos_2_3")) + _count(organic.get("pos_4_10")),
        top100=total,
        avg_position=weighted_average_position(organic),
        estimated_traffic=round(_num(organic.get("etv"))),
        intent_match_percent=share,
        dominant_intent=dominant,
        trend=_trend(organic),
    )


def _trend(organic: Dict[str, Any]) -> Optional[str]:
    gained = _count(organic.get("is_new")) + _count(organic.get("is_up"))
    lost = _count(organic.get("is_lost")) + _count(organic.get("is_down"))
    if gained == 0 and lost == 0:
        return None
    if gained > lost:
        return "up"
    return "down" if lost > gained else "stable"


def normalize_gsc_keywords(raw: Any) -> KeywordMetrics:
    """searchAnalytics/query rows -> KeywordMetrics (impression-weighted position)."""
    rows = [r for r in _list(_dict(raw).get("rows")) if isinstance(r, dict)]
    if not rows:
        return KeywordMetrics()

    positions = [_num(r.get("position")) for r in rows]
    weights = [max(1.0, _num(r.get("impressions"))) for r in rows]
    ranked = [(p, w) for p, w in zip(positions, weights) if p > 0]
    avg_position = (
        round(sum(p * w for p, w in ranked) / sum(w for _, w in ranked), 1) if ranked else 0.0
    )

    return KeywordMetrics(
        total=len(rows),
        top10=sum(1 for p in positions if 0 < p <= 10),
        top100=sum(1 for p in positions if 0 < p <= 100),
        avg_position=avg_position,
        estimated_traffic=round(sum(_num(r.get("clicks")) for r in rows)),
    )


# ============================================================================
# BACKLINKS
# ============================================================================

def normalize_ahrefs_backlinks(raw: Any) -> BacklinkMetrics:
    """domain-rating + backlinks-stats -> BacklinkMetrics."""
    data = _dict(raw)
    rating = _dict(_dict(data.get("domain_rating")).get("domain_rating"))
    stats = _dict(_dict(data.get("backlinks_stats")).get("metrics"))
    return BacklinkMetrics(
        domain_rating=_num(rating.get("domain_rating")),
        total_backlinks=_count(stats.get("live")),
        referring_domains=_count(stats.get("live_refdomains")),
    )


def normalize_moz_backlinks(raw: Any) -> BacklinkMetrics:
    """url_metrics result -> BacklinkMetrics. Moz reports -1 for an unknown spam score."""
    data = _dict(raw)
    return BacklinkMetrics(
        domain_authority=_num(data.get("domain_authority")),
        total_backlinks=_count(data.get("external_pages_to_root_domain")),
        referring_domains=_count(data.get("root_domains_to_root_domain")),
        spam_score=max(0.0, _num(data.get("spam_score"))),
    )


def normalize_dataforseo_backlinks(raw: Any) -> BacklinkMetrics:
    """backlinks/summary result (rank on the 0-100 scale) -> BacklinkMetrics."""
    data = _dict(raw)
    return BacklinkMetrics(
        domain_rating=_num(data.get("rank")),
        total_backlinks=_count(data.get("backlinks")),
        referring_domains=_count(data.get("referring_domains")),
        spam_score=max(0.0, _num(data.get("backlinks_spam_score"))),
    )
