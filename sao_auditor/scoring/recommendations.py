"""
Recommendation generation.

One recommendation per metric that lost points and carries advice. Priority
follows the points at stake, not the metric's identity.
"""

from typing import Dict, List, Tuple

from ..models import PILLAR_LABELS, PILLAR_ORDER, Priority, Recommendation, ScoreResult

HIGH_PRIORITY_POINTS = 3.0
MEDIUM_PRIORITY_POINTS = 1.5

PRIORITY_ORDER: Dict[Priority, int] = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}

METRIC_TITLES: Dict[str, str] = {
    "schema": "Add structured data",
    "headings": "Fix the heading outline",
    "table_lists": "Use tables and lists",
    "multimodal": "Add images and video",
    "image_alt": "Complete image alt text",
    "direct_answer": "Lead with a direct answer",
    "content_depth": "Deepen the content",
    "brand_search": "Own your brand search results",
    "brand_sentiment": "Surface reviews and social proof",
    "lcp": "Speed up Largest Contentful Paint",
    "inp": "Improve Interaction to Next Paint",
    "cls": "Reduce layout shift",
    "mobile": "Improve mobile performance",
    "ssl": "Enable HTTPS",
    "broken_links": "Fix broken links",
    "llms_txt": "Publish llms.txt",
    "sitemap": "Publish a valid sitemap",
    "keywords": "Grow keyword coverage",
    "positions": "Lift average ranking position",
    "intent_match": "Match search intent",
    "backlinks": "Build authoritative backlinks",
    "referring_domains": "Diversify referring domains",
    "sentiment": "Strengthen on-page sentiment",
    "eeat": "Add E-E-A-T signals",
    "local": "Add local business signals",
}


def priority_for(points_lost: float) -> Priority:
    if points_lost >= HIGH_PRIORITY_POINTS:
        return Priority.HIGH
    if points_lost >= MEDIUM_PRIORITY_POINTS:
        return Priority.MEDIUM
    return Priority.LOW


def generate_recommendations(score: ScoreResult) -> List[Recommendation]:
    """Recommendations sorted by priority, then points lost, then pillar order."""
    ranked: List[Tuple[int, float, int, Recommendation]] = []
    for pillar_index, pillar in enumerate(PILLAR_ORDER):
        for metric_name, m in score.pillars[pillar].metrics.items():
            lost = m.points_lost
            if lost <= 0 or not m.recommendation:
                continue
            priority = priority_for(lost)
            ranked.append((
                PRIORITY_ORDER[priority],
                -lost,
                pillar_index,
                Recommendation(
                    pillar=pillar,
                    priority=priority,
                    title=METRIC_TITLES.get(metric_name, metric_name.replace("_", " ").title()),
                    description=m.recommendation,
                    impact=f"{priority.value.title()} - up to {lost:g} points in {PILLAR_LABELS[pillar]}",
                    metric_name=metric_name,
                    current_score=m.score,
                    max_score=m.max_score,
                    points_lost=lost,
                ),
            ))

    ranked.sort(key=lambda entry: entry[:3])
    return [entry[3] for entry in ranked]
