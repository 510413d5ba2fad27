"""
AI Trust pillar (22 points).

Signals an answer engine weighs before citing a source: link authority,
referring domains, on-page sentiment, E-E-A-T markup and local presence.
"""

import math
from typing import Any, Optional

from ..models import BacklinkMetrics, PageFacts, Pillar, PillarScore, ProviderName, count
from .helpers import PILLAR_BUDGETS, clamp, metric, step_score

PILLAR = Pillar.AI_TRUST

AUTHORITY_BANDS = [(60, 6), (40, 4), (20, 2), (0, 1, False)]
REFERRING_DOMAIN_BANDS = [(100, 5), (50, 3.5), (20, 2), (1, 1)]
SENTIMENT_BANDS = [(0.2, 4), (0.0, 2.5), (-0.2, 1)]
SPAM_THRESHOLD = 30
SPAM_PENALTY = 2


def _sentiment_reading(value: Any) -> Optional[float]:
    # Sentiment lives in [-1, 1], so the usual negative-means-missing rule does not apply
    if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
        return None
    return clamp(value, -1.0, 1.0)


def _sentiment_score(value: Optional[float]) -> float:
    if value is None:
        return 0.0
    return step_score(value + 1, [(bound + 1, points) for bound, points in SENTIMENT_BANDS])


def score_ai_trust(
    backlinks: BacklinkMetrics,
    source: ProviderName,
    page: Optional[PageFacts],
) -> PillarScore:
    estimated = " (estimated)" if source == ProviderName.ESTIMATE else ""
    authority = backlinks.authority

    authority_score = step_score(authority, AUTHORITY_BANDS)
    spam_note = ""
    spam = count(backlinks.spam_score)
    referring = count(backlinks.referring_domains)
    if spam > SPAM_THRESHOLD:
        authority_score -= SPAM_PENALTY
        spam_note = f", spam score {spam:g}"

    metrics = {
        "backlinks": metric(
            PILLAR, "backlinks", authority, authority_score,
            f"Authority {authority:g}/100{spam_note}{estimated}",
            "Earn links from authoritative sites in your niche",
        ),
        "referring_domains": metric(
            PILLAR, "referring_domains", referring,
            step_score(referring, REFERRING_DOMAIN_BANDS),
            f"{referring} referring domains{estimated}",
            "Broaden the link profile: more distinct domains linking to you",
        ),
    }

    if page is None:
        unreachable = "Page could not be inspected"
        for key in ("sentiment", "eeat", "local"):
            metrics[key] = metric(PILLAR, key, None, 0, unreachable, "Make sure the page is reachable")
        return PillarScore.from_metrics(PILLAR, metrics, PILLAR_BUDGETS[PILLAR])

    has_text = count(page.word_count) > 0
    sentiment = _sentiment_reading(page.sentiment) if has_text else None
    if sentiment is not None:
        sentiment_insight = f"On-page sentiment {sentiment:+.2f}"
    else:
        sentiment_insight = "Sentiment unavailable" if has_text else "No readable text"
    metrics["sentiment"] = metric(
        PILLAR, "sentiment", round(sentiment, 2) if sentiment is not None else None,
        _sentiment_score(sentiment),
        sentiment_insight,
        "Use confident, positive language and address objections directly",
    )

    citations = count(page.citation_count)
    eeat_score = (2.0 if page.has_author_markup else 0.0) + step_score(citations, [(3, 2), (1, 1)])
    metrics["eeat"] = metric(
        PILLAR, "eeat", {"author_markup": page.has_author_markup, "citations": citations},
        eeat_score,
        f"Author markup {'present' if page.has_author_markup else 'absent'}, {citations} external citations",
        "Add author bylines with credentials and cite reputable external sources",
    )

    local_score = (2.0 if page.has_local_schema else 0.0) + (1.0 if page.has_local_signals else 0.0)
    metrics["local"] = metric(
        PILLAR, "local", {"local_schema": page.has_local_schema, "local_signals": page.has_local_signals},
        local_score,
        f"LocalBusiness schema {'present' if page.has_local_schema else 'absent'}, "
        f"address/phone signals {'present' if page.has_local_signals else 'absent'}",
        "Add LocalBusiness schema with address, phone and geo coordinates",
    )

    return PillarScore.from_metrics(PILLAR, metrics, PILLAR_BUDGETS[PILLAR])
