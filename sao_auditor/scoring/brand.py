"""Brand Ranking pillar (9 points): brand-query rank and visible brand reputation."""

from typing import Optional

from ..models import BrandRank, PageFacts, Pillar, PillarScore, count
from .helpers import PILLAR_BUDGETS, is_missing, metric, step_score

PILLAR = Pillar.BRAND_RANKING


def score_brand_ranking(brand: Optional[BrandRank], page: Optional[PageFacts]) -> PillarScore:
    rank = brand.rank if brand and not is_missing(brand.rank) else None
    if rank is None:
        search_insight = "Brand rank unknown" if brand is None else f"Not in the top 10 for '{brand.query}'"
    else:
        search_insight = f"Ranks #{rank} for '{brand.query}'"

    brand_search = metric(
        PILLAR, "brand_search", rank,
        step_score(rank, [(1, 5), (3, 3), (10, 1.5)], higher_is_better=False, zero_is_missing=True),
        search_insight,
        "Strengthen the brand entity: consistent name, Organization schema and an About page",
    )

    if page is None:
        sentiment_score, social, has_reviews = 0.0, 0, False
    else:
        social, has_reviews = count(page.social_profiles), page.has_review_schema
        sentiment_score = (2.0 if has_reviews else 0.0) + step_score(social, [(2, 2), (1, 1)])

    brand_sentiment = metric(
        PILLAR, "brand_sentiment", {"review_schema": has_reviews, "social_profiles": social},
        sentiment_score,
        f"Review markup {'present' if has_reviews else 'absent'}, {social} social profiles linked",
        "Mark up reviews with Review/AggregateRating schema and link your social profiles",
    )

    return PillarScore.from_metrics(
        PILLAR,
        {"brand_search": brand_search, "brand_sentiment": brand_sentiment},
        PILLAR_BUDGETS[PILLAR],
    )
