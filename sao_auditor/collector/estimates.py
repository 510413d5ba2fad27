"""
Heuristic estimates used when every provider in a cascade is exhausted.

Deliberately conservative: an estimated average position of 35 earns no
position points and estimated intent match is always zero.
"""

import logging
from typing import Optional

from ..models import KeywordMetrics, BacklinkMetrics, PageFacts, count

logger = logging.getLogger(__name__)

ESTABLISHED_TLDS = frozenset({"com", "org", "net", "edu", "gov"})
ESTIMATED_AVG_POSITION = 35.0


def is_established_tld(domain: str) -> bool:
    labels = domain.lower().rstrip(".").split(".")
    if labels[-1] in ESTABLISHED_TLDS:
        return True
    # Country-code second levels such as co.uk or com.au
    return len(labels) >= 3 and labels[-2] in ("co", "com", "org")


def estimate_keywords(domain: str, page: Optional[PageFacts] = None) -> KeywordMetrics:
    """Keyword footprint guessed from the TLD, halved for thin pages."""
    total = 50 if is_established_tld(domain) else 10
    if page is not None and count(page.word_count) < 300:
        total //= 2

    estimate = KeywordMetrics(
        total=total,
        top10=total // 10,
        top100=total * 3 // 5,
        avg_position=ESTIMATED_AVG_POSITION,
        estimated_traffic=total * 10,
        intent_match_percent=0.0,
        dominant_intent=None,
    )
    logger.debug(f"Keyword estimate for {domain}: {estimate.total} keywords")
    return estimate


def estimate_backlinks(domain: str, page: Optional[PageFacts] = None) -> BacklinkMetrics:
    """Link profile guessed from the TLD and visible trust signals on the page."""
    established = is_established_tld(domain)
    authority = 25.0 if established else 10.0
    referring = 20 if established else 5

    if page is not None:
        # Linked social profiles and structured data suggest an actively maintained brand
        referring += 5 * min(2, count(page.social_profiles))
        if page.has_schema:
            authority += 5.0

    estimate = BacklinkMetrics(
        domain_rating=authority,
        domain_authority=authority,
        total_backlinks=referring * 5,
        referring_domains=referring,
        spam_score=0.0,
    )
    logger.debug(f"Backlink estimate for {domain}: DR~{authority:g}, {referring} referring domains")
    return estimate
