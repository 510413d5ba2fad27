"""Keyword Visibility pillar (23 points): keyword footprint, average position, intent match."""

from ..models import KeywordMetrics, Pillar, PillarScore, ProviderName, count
from .helpers import PILLAR_BUDGETS, metric, step_score

PILLAR = Pillar.KEYWORD_VISIBILITY

KEYWORD_BANDS = [(100, 10), (50, 8), (20, 6), (10, 4), (1, 2)]
POSITION_BANDS = [(3, 6.5), (10, 4.5), (20, 2)]
INTENT_BANDS = [(80, 6.5), (60, 5), (40, 3.5), (20, 1.5)]


def score_keyword_visibility(keywords: KeywordMetrics, source: ProviderName) -> PillarScore:
    estimated = " (estimated)" if source == ProviderName.ESTIMATE else ""
    total, top10 = count(keywords.total), count(keywords.top10)
    position = count(keywords.avg_position)
    intent = count(keywords.intent_match_percent)

    metrics = {
        "keywords": metric(
            PILLAR, "keywords", total,
            step_score(total, KEYWORD_BANDS),
            f"{total} ranking keywords, {top10} in the top 10{estimated}",
            "Target more long-tail queries with dedicated, well-structured pages",
        ),
        "positions": metric(
            PILLAR, "positions", position,
            step_score(position, POSITION_BANDS, higher_is_better=False, zero_is_missing=True),
            f"Average position {position:g}{estimated}" if position else "Average position unknown",
            "Improve pages ranking 11-20 with better answers and internal links to push them onto page one",
        ),
        "intent_match": metric(
            PILLAR, "intent_match", intent,
            step_score(intent, INTENT_BANDS),
            (
                f"{intent:g}% of keywords share {keywords.dominant_intent} intent"
                if keywords.dominant_intent else "Search intent not available"
            ),
            "Align page content with one dominant search intent",
        ),
    }
    return PillarScore.from_metrics(PILLAR, metrics, PILLAR_BUDGETS[PILLAR])
