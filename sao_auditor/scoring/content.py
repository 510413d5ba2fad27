"""
Content Structure pillar (25 points).

How easily a search engine or answer engine can lift structured answers from
the page: schema, heading outline, tables and lists, media, alt text, a
direct-answer intro and depth.
"""

from typing import Dict, Optional

from ..models import Metric, PageFacts, Pillar, PillarScore, count
from .helpers import PILLAR_BUDGETS, metric, step_score

PILLAR = Pillar.CONTENT_STRUCTURE

INTRO_IDEAL_RANGE = (15, 60)
INTRO_ACCEPTABLE_MAX = 120


def _schema(page: PageFacts) -> Metric:
    score = 0.0
    if page.has_schema:
        score += 3
    if page.has_rich_schema:
        score += 3
    schema_types = list(page.schema_types or ())
    types = ", ".join(schema_types) or "none"
    return metric(
        PILLAR, "schema", schema_types, score,
        f"Structured data types: {types}",
        "Add JSON-LD structured data, including a rich type such as FAQPage, HowTo or Article",
    )


def _headings(page: PageFacts) -> Metric:
    h1, h2, h3 = count(page.h1_count), count(page.h2_count), count(page.h3_count)
    score = 3.0 if h1 == 1 else 0.0
    if h2 > 0 and not page.has_heading_skip:
        score += 1.5
    if h3 > 0 and not page.has_heading_skip:
        score += 0.5
    skip_note = ", levels skipped" if page.has_heading_skip else ""
    return metric(
        PILLAR, "headings",
        {"h1": h1, "h2": h2, "h3": h3},
        score,
        f"{h1} H1, {h2} H2, {h3} H3{skip_note}",
        "Use exactly one H1 and nest H2/H3 sections without skipping levels",
    )


def _table_lists(page: PageFacts) -> Metric:
    tables, lists = count(page.table_count), count(page.list_count)
    score = step_score(tables, [(1, 1)])
    score += step_score(lists, [(3, 1), (1, 0.5)])
    return metric(
        PILLAR, "table_lists", {"tables": tables, "lists": lists}, score,
        f"{tables} tables, {lists} lists",
        "Present comparisons in tables and steps or features as lists",
    )


def _multimodal(page: PageFacts) -> Metric:
    images, videos = count(page.image_count), count(page.video_count)
    score = step_score(videos, [(2, 2), (1, 1)])
    if images >= 5 or videos >= 1:
        score += 1
    if images >= 1:
        score += 1
    return metric(
        PILLAR, "multimodal", {"images": images, "videos": videos}, score,
        f"{images} images, {videos} videos",
        "Add supporting images and at least one embedded video",
    )


def _image_alt(page: PageFacts) -> Metric:
    coverage = page.alt_coverage
    images = count(page.image_count)
    with_alt = min(count(page.images_with_alt), images)
    score = step_score(coverage, [(0.8, 2), (0.5, 1)])
    insight = "No images on the page" if coverage is None else f"{with_alt}/{images} images have alt text"
    return metric(
        PILLAR, "image_alt", round(coverage * 100, 1) if coverage is not None else None, score,
        insight,
        "Give every meaningful image descriptive alt text",
    )


def _direct_answer(page: PageFacts) -> Metric:
    words = count(page.intro_word_count)
    low, high = INTRO_IDEAL_RANGE
    if low <= words <= high:
        score = 4.0
    elif high < words <= INTRO_ACCEPTABLE_MAX:
        score = 2.0
    elif words > 0:
        score = 1.0
    else:
        score = 0.0
    return metric(
        PILLAR, "direct_answer", words, score,
        f"Opening paragraph has {words} words",
        f"Open with a {low}-{high} word paragraph that answers the page's main question directly",
    )


def _content_depth(page: PageFacts) -> Metric:
    words, sections = count(page.word_count), count(page.h2_count)
    if words >= 1000 and sections >= 3:
        score = 2.0
    else:
        score = step_score(words, [(500, 1), (200, 0.5)])
    return metric(
        PILLAR, "content_depth", words, score,
        f"{words} words across {sections} H2 sections",
        "Expand the page to 1000+ words organised under at least three H2 sections",
    )


def _unavailable() -> Dict[str, Metric]:
    reason = "Page could not be inspected"
    return {
        key: metric(PILLAR, key, None, 0, reason, "Make sure the page is reachable and returns HTML")
        for key in ("schema", "headings", "table_lists", "multimodal", "image_alt", "direct_answer", "content_depth")
    }


def score_content_structure(page: Optional[PageFacts]) -> PillarScore:
    """Content Structure pillar from page facts; a missing page scores 0 across the board."""
    if page is None:
        metrics = _unavailable()
    else:
        metrics = {
            "schema": _schema(page),
            "headings": _headings(page),
            "table_lists": _table_lists(page),
            "multimodal": _multimodal(page),
            "image_alt": _image_alt(page),
            "direct_answer": _direct_answer(page),
            "content_depth": _content_depth(page),
        }
    return PillarScore.from_metrics(PILLAR, metrics, PILLAR_BUDGETS[PILLAR])
