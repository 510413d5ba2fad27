"""
Aggregation & Comparison Engine

average_scores folds per-URL results into one domain result; compare_scores
ranks a primary domain against up to four competitors. Plain arithmetic means
and competition ranking, no statistics.
"""

import logging
from typing import Any, Dict, List, Sequence, Tuple

from ..models import (
    Comparison,
    ComparisonEntry,
    DataSource,
    Metric,
    Pillar,
    PILLAR_ORDER,
    PillarRanking,
    PillarScore,
    ScoreResult,
)
from .engine import build_score_result
from .helpers import clamp

logger = logging.getLogger(__name__)

MAX_COMPARED_COMPETITORS = 4


# ============================================================================
# AVERAGING
# ============================================================================

def _mean(values: Sequence[float]) -> float:
    return round(sum(values) / len(values), 2)


def _merged_value(values: List[Any]) -> Any:
    first = values[0]
    if all(v == first for v in values[1:]):
        return first
    if all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in values):
        return _mean(values)
    return None


def _average_metric(metrics: List[Metric]) -> Metric:
    first = metrics[0]
    insights = {m.insight for m in metrics}
    return Metric(
        value=_merged_value([m.value for m in metrics]),
        score=_mean([m.score for m in metrics]),
        max_score=first.max_score,
        insight=first.insight if len(insights) == 1 else f"Averaged across {len(metrics)} URLs",
        recommendation=next((m.recommendation for m in metrics if m.recommendation), None),
    )


def average_scores(results: Sequence[ScoreResult]) -> ScoreResult:
    """
    Mean of several ScoreResults, pillar by pillar and metric by metric.

    The total is recomputed once from the averaged pillars rather than averaged
    itself. Data-source flags are OR-reduced.

    Raises:
        ValueError: if results is empty
    """
    if not results:
        raise ValueError("Cannot average an empty list of scores")

    pillars: Dict[Pillar, PillarScore] = {}
    for pillar in PILLAR_ORDER:
        pillar_scores = [r.pillars[pillar] for r in results]
        budget = pillar_scores[0].max_score
        metric_names = list(pillar_scores[0].metrics)
        pillars[pillar] = PillarScore(
            pillar=pillar,
            metrics={
                name: _average_metric([p.metrics[name] for p in pillar_scores])
                for name in metric_names
            },
            score=clamp(_mean([p.score for p in pillar_scores]), 0.0, budget),
            max_score=budget,
        )

    data_source = DataSource()
    for r in results:
        data_source = data_source | r.data_source

    return build_score_result(pillars, data_source)


# ============================================================================
# COMPARISON
# ============================================================================

def compare_scores(
    primary_name: str,
    primary: ScoreResult,
    competitors: Sequence[Tuple[str, ScoreResult]],
) -> Comparison:
    """
    Rank the primary domain against competitor domains.

    Overall rank uses competition ranking on the total: 1 + the number of entries
    with a strictly greater total, so tied entries share a rank. Pillar rankings
    order entries by pillar score, then total, then input order (primary first).

    Args:
        primary_name: Label for the primary domain
        primary: Primary domain's averaged score
        competitors: (name, averaged score) pairs; only the first four are used
    """
    if len(competitors) > MAX_COMPARED_COMPETITORS:
        logger.warning(
            f"Comparing only the first {MAX_COMPARED_COMPETITORS} of {len(competitors)} competitors"
        )
        competitors = list(competitors)[:MAX_COMPARED_COMPETITORS]

    named: List[Tuple[str, ScoreResult, bool]] = [(primary_name, primary, True)]
    named.extend((name, score, False) for name, score in competitors)
    totals = [score.total for _, score, _ in named]

    entries = [
        ComparisonEntry(
            name=name,
            total=score.total,
            rank=1 + sum(1 for t in totals if t > score.total),
            is_primary=is_primary,
            pillars={p: score.pillar_score(p) for p in PILLAR_ORDER},
        )
        for name, score, is_primary in named
    ]
    # Stable sort keeps input order among ties
    ordered_entries = sorted(entries, key=lambda e: e.rank)

    pillar_rankings: Dict[Pillar, List[PillarRanking]] = {}
    for pillar in PILLAR_ORDER:
        order = sorted(
            range(len(named)),
            key=lambda i: (-named[i][1].pillar_score(pillar), -named[i][1].total, i),
        )
        pillar_rankings[pillar] = [
            PillarRanking(name=named[i][0], score=named[i][1].pillar_score(pillar), rank=position)
            for position, i in enumerate(order, start=1)
        ]

    competitor_scores = [score for _, score in competitors]
    average_competitor_total = (
        sum(s.total for s in competitor_scores) / len(competitor_scores) if competitor_scores else 0.0
    )
    gaps = {
        pillar: round(
            primary.pillar_score(pillar)
            - (sum(s.pillar_score(pillar) for s in competitor_scores) / len(competitor_scores)),
            2,
        ) if competitor_scores else 0.0
        for pillar in PILLAR_ORDER
    }

    return Comparison(
        rank=entries[0].rank,
        total_entries=len(entries),
        average_competitor_total=average_competitor_total,
        entries=ordered_entries,
        pillar_rankings=pillar_rankings,
        gaps=gaps,
    )
