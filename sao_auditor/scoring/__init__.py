"""
Scoring Module

Five capped pillars, 96 points in total:

1. **Content Structure** (25): schema, headings, tables/lists, media, alt text,
   direct answer, depth
2. **Brand Ranking** (9): brand-query rank, reviews and social proof
3. **Website Technical** (17): LCP, INP, CLS, mobile, SSL, broken links,
   llms.txt, sitemap
4. **Keyword Visibility** (23): keyword count, average position, intent match
5. **AI Trust** (22): authority, referring domains, sentiment, E-E-A-T, local

Example Usage:
    from sao_auditor.scoring import calculate_total_score, average_scores

    score = calculate_total_score(metrics, page=page_facts, perf=perf_facts)
    print(score.total, score.content_structure)
"""

from .helpers import (
    METRIC_BUDGETS,
    PILLAR_BUDGETS,
    TOTAL_BUDGET,
    clamp,
    round_half_up,
    step_score,
)
from .content import score_content_structure
from .brand import score_brand_ranking
from .technical import score_website_technical
from .keywords import score_keyword_visibility
from .trust import score_ai_trust
from .engine import (
    calculate_total_score,
    build_score_result,
    derive_data_source,
    score_label,
)
from .aggregation import average_scores, compare_scores
from .recommendations import generate_recommendations, priority_for

__all__ = [
    # Helpers
    "METRIC_BUDGETS",
    "PILLAR_BUDGETS",
    "TOTAL_BUDGET",
    "clamp",
    "round_half_up",
    "step_score",
    # Pillars
    "score_content_structure",
    "score_brand_ranking",
    "score_website_technical",
    "score_keyword_visibility",
    "score_ai_trust",
    # Engine
    "calculate_total_score",
    "build_score_result",
    "derive_data_source",
    "score_label",
    # Aggregation
    "average_scores",
    "compare_scores",
    "generate_recommendations",
    "priority_for",
]
