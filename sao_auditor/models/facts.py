"""
Collaborator contracts: what the page inspector, performance analyzer and
brand-rank lookup hand to the scoring engine.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .metrics import count


class CWVCategory(str, Enum):
    """Core Web Vitals tier."""
    GOOD = "GOOD"
    NEEDS_IMPROVEMENT = "NEEDS_IMPROVEMENT"
    POOR = "POOR"


RICH_SCHEMA_TYPES = frozenset({"FAQPage", "HowTo", "Product", "Recipe", "Article", "NewsArticle", "BlogPosting"})
REVIEW_SCHEMA_TYPES = frozenset({"Review", "AggregateRating"})
LOCAL_SCHEMA_TYPES = frozenset({"LocalBusiness", "Restaurant", "Store", "ProfessionalService", "MedicalBusiness"})


@dataclass(frozen=True)
class PageFacts:
    """Structural signals extracted from one fetched page."""
    url: str
    final_url: Optional[str] = None
    status_code: Optional[int] = None
    has_ssl: bool = False
    title: str = ""

    # Headings
    h1_count: int = 0
    h2_count: int = 0
    h3_count: int = 0
    heading_sequence: Tuple[int, ...] = ()

    # Markup
    schema_types: Tuple[str, ...] = ()
    has_author_markup: bool = False
    has_local_signals: bool = False

    # Media and structure
    image_count: int = 0
    images_with_alt: int = 0
    table_count: int = 0
    list_count: int = 0
    video_count: int = 0

    # Text
    word_count: int = 0
    intro_word_count: int = 0
    sentiment: float = 0.0

    # Links
    internal_links: int = 0
    external_links: int = 0
    citation_count: int = 0
    social_profiles: int = 0
    links_checked: int = 0
    broken_links: Optional[int] = None

    # Site files
    llms_txt_present: bool = False
    llms_txt_valid: bool = False
    sitemap_present: bool = False
    sitemap_valid: bool = False

    @property
    def has_schema(self) -> bool:
        return bool(self.schema_types)

    @property
    def has_rich_schema(self) -> bool:
        return any(t in RICH_SCHEMA_TYPES for t in self.schema_types or ())

    @property
    def has_review_schema(self) -> bool:
        return any(t in REVIEW_SCHEMA_TYPES for t in self.schema_types or ())

    @property
    def has_local_schema(self) -> bool:
        return any(t in LOCAL_SCHEMA_TYPES for t in self.schema_types or ())

    @property
    def alt_coverage(self) -> Optional[float]:
        """Share of images with alt text, None when the page has no images."""
        images = count(self.image_count)
        if images <= 0:
            return None
        return min(1.0, count(self.images_with_alt) / images)

    @property
    def has_heading_skip(self) -> bool:
        """True when a heading jumps more than one level deeper than the previous one."""
        previous = None
        for level in self.heading_sequence or ():
            if count(level) <= 0:
                continue
            if previous is not None and level > previous + 1:
                return True
            previous = level
        return False

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["heading_sequence"] = list(self.heading_sequence or ())
        data["schema_types"] = list(self.schema_types or ())
        return data


def categorize_lcp(seconds: Optional[float]) -> Optional[CWVCategory]:
    """Tier boundaries match the lcp scoring bands: under 2.5s is GOOD, up to 4s NEEDS_IMPROVEMENT."""
    if seconds is None:
        return None
    if seconds < 2.5:
        return CWVCategory.GOOD
    return CWVCategory.NEEDS_IMPROVEMENT if seconds <= 4.0 else CWVCategory.POOR


def categorize_inp(ms: Optional[float]) -> Optional[CWVCategory]:
    if ms is None:
        return None
    if ms <= 200:
        return CWVCategory.GOOD
    return CWVCategory.NEEDS_IMPROVEMENT if ms <= 500 else CWVCategory.POOR


def categorize_cls(value: Optional[float]) -> Optional[CWVCategory]:
    """Under 0.1 is GOOD, up to 0.25 NEEDS_IMPROVEMENT, like the cls scoring bands."""
    if value is None:
        return None
    if value < 0.1:
        return CWVCategory.GOOD
    return CWVCategory.NEEDS_IMPROVEMENT if value <= 0.25 else CWVCategory.POOR


@dataclass(frozen=True)
class PerfFacts:
    """Core Web Vitals and Lighthouse category scores for the mobile strategy."""
    url: str
    lcp_seconds: Optional[float] = None
    inp_ms: Optional[float] = None
    inp_from_field_data: bool = False
    cls: Optional[float] = None
    mobile_score: Optional[int] = None
    accessibility_score: Optional[int] = None
    seo_score: Optional[int] = None
    best_practices_score: Optional[int] = None

    @property
    def lcp_category(self) -> Optional[CWVCategory]:
        return categorize_lcp(self.lcp_seconds)

    @property
    def inp_category(self) -> Optional[CWVCategory]:
        return categorize_inp(self.inp_ms)

    @property
    def cls_category(self) -> Optional[CWVCategory]:
        return categorize_cls(self.cls)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for name in ("lcp_category", "inp_category", "cls_category"):
            category = getattr(self, name)
            data[name] = category.value if category else None
        return data


@dataclass(frozen=True)
class BrandRank:
    """Where the domain ranks for a search on its own brand name."""
    query: str
    rank: Optional[int] = None
    checked_results: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
