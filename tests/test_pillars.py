"""
Test Suite for the Five Pillar Scorers

Each pillar is exercised with a strong input, a weak input and missing data.
"""

import re
from dataclasses import replace

import pytest

from sao_auditor.models import (
    BacklinkMetrics,
    BrandRank,
    CWVCategory,
    KeywordMetrics,
    PageFacts,
    PerfFacts,
    ProviderName,
)
from sao_auditor.scoring import (
    score_ai_trust,
    score_brand_ranking,
    score_content_structure,
    score_keyword_visibility,
    score_website_technical,
)
from sao_auditor.scoring.helpers import METRIC_BUDGETS, PILLAR_BUDGETS

pytestmark = pytest.mark.unit


def scores(pillar):
    return {name: m.score for name, m in pillar.metrics.items()}


class TestContentStructure:
    """Content Structure (25 points)."""

    def test_strong_page_full_marks(self, strong_page):
        pillar = score_content_structure(strong_page)
        assert pillar.score == 25, f"Expected 25, got {scores(pillar)}"
        assert all(m.recommendation is None for m in pillar.metrics.values())

    def test_plain_page(self, plain_page):
        result = scores(score_content_structure(plain_page))
        assert result["schema"] == 0
        assert result["headings"] == 3
        assert result["image_alt"] == 0
        assert result["direct_answer"] == 4
        assert result["content_depth"] == 0.5

    def test_missing_page_scores_zero(self):
        pillar = score_content_structure(None)
        assert pillar.score == 0
        assert len(pillar.metrics) == 7

    def test_schema_without_rich_type(self, plain_page):
        page = replace(plain_page, schema_types=("Organization",))
        assert scores(score_content_structure(page))["schema"] == 3

    def test_heading_skip_loses_nesting_points(self, strong_page):
        page = replace(strong_page, heading_sequence=(1, 3, 2))
        assert scores(score_content_structure(page))["headings"] == 3

    def test_multiple_h1(self, strong_page):
        page = replace(strong_page, h1_count=2, heading_sequence=(1, 1, 2, 3))
        assert scores(score_content_structure(page))["headings"] == 2

    @pytest.mark.parametrize("tables,lists,expected", [(0, 0, 0), (1, 0, 1), (0, 1, 0.5), (0, 3, 1), (2, 5, 2)])
    def test_table_lists(self, plain_page, tables, lists, expected):
        page = replace(plain_page, table_count=tables, list_count=lists)
        assert scores(score_content_structure(page))["table_lists"] == expected

    @pytest.mark.parametrize("images,videos,expected", [
        (0, 0, 0), (1, 0, 1), (5, 0, 2), (0, 1, 2), (1, 1, 3), (6, 3, 4),
    ])
    def test_multimodal(self, plain_page, images, videos, expected):
        page = replace(plain_page, image_count=images, images_with_alt=images, video_count=videos)
        assert scores(score_content_structure(page))["multimodal"] == expected

    @pytest.mark.parametrize("with_alt,expected", [(10, 2), (8, 2), (7, 1), (5, 1), (4, 0), (0, 0)])
    def test_image_alt_coverage(self, plain_page, with_alt, expected):
        page = replace(plain_page, image_count=10, images_with_alt=with_alt)
        assert scores(score_content_structure(page))["image_alt"] == expected

    def test_no_images_scores_zero_alt(self, plain_page):
        pillar = score_content_structure(replace(plain_page, image_count=0))
        assert pillar.metrics["image_alt"].score == 0
        assert pillar.metrics["image_alt"].value is None

    @pytest.mark.parametrize("words,expected", [(0, 0), (5, 1), (15, 4), (60, 4), (61, 2), (120, 2), (121, 1)])
    def test_direct_answer(self, plain_page, words, expected):
        page = replace(plain_page, intro_word_count=words)
        assert scores(score_content_structure(page))["direct_answer"] == expected

    @pytest.mark.parametrize("words,h2,expected", [(1200, 3, 2), (1200, 2, 1), (500, 0, 1), (200, 0, 0.5), (199, 0, 0)])
    def test_content_depth(self, plain_page, words, h2, expected):
        page = replace(plain_page, word_count=words, h2_count=h2)
        assert scores(score_content_structure(page))["content_depth"] == expected


class TestBrandRanking:
    """Brand Ranking (9 points)."""

    def test_full_marks(self, strong_page, top_brand):
        pillar = score_brand_ranking(top_brand, strong_page)
        assert pillar.score == 9

    @pytest.mark.parametrize("rank,expected", [(1, 5), (2, 3), (3, 3), (4, 1.5), (10, 1.5), (None, 0)])
    def test_brand_search(self, plain_page, rank, expected):
        brand = BrandRank(query="example", rank=rank, checked_results=10)
        assert scores(score_brand_ranking(brand, plain_page))["brand_search"] == expected

    def test_unknown_brand(self, plain_page):
        pillar = score_brand_ranking(None, plain_page)
        assert pillar.metrics["brand_search"].score == 0
        assert pillar.metrics["brand_search"].insight == "Brand rank unknown"

    @pytest.mark.parametrize("schema,social,expected", [
        ((), 0, 0), ((), 1, 1), ((), 2, 2), (("Review",), 0, 2), (("AggregateRating",), 5, 4),
    ])
    def test_brand_sentiment(self, plain_page, schema, social, expected):
        page = replace(plain_page, schema_types=schema, social_profiles=social)
        assert scores(score_brand_ranking(None, page))["brand_sentiment"] == expected

    def test_missing_page(self, top_brand):
        pillar = score_brand_ranking(top_brand, None)
        assert pillar.score == 5


class TestWebsiteTechnical:
    """Website Technical (17 points)."""

    def test_full_marks(self, strong_page, fast_perf):
        pillar = score_website_technical(fast_perf, strong_page)
        assert pillar.score == 17, f"Expected 17, got {scores(pillar)}"

    @pytest.mark.parametrize("lcp,expected", [(1.8, 3), (2.49, 3), (2.5, 1.5), (4.0, 1.5), (4.01, 0), (0, 0)])
    def test_lcp(self, fast_perf, lcp, expected):
        perf = replace(fast_perf, lcp_seconds=lcp)
        assert scores(score_website_technical(perf, None))["lcp"] == expected

    @pytest.mark.parametrize("inp,expected", [(50, 1.5), (200, 1.5), (201, 0.5), (500, 0.5), (501, 0)])
    def test_inp(self, fast_perf, inp, expected):
        perf = replace(fast_perf, inp_ms=inp)
        assert scores(score_website_technical(perf, None))["inp"] == expected

    @pytest.mark.parametrize("cls,expected", [(0.0, 1.5), (0.09, 1.5), (0.1, 0.5), (0.25, 0.5), (0.3, 0)])
    def test_cls(self, fast_perf, cls, expected):
        perf = replace(fast_perf, cls=cls)
        assert scores(score_website_technical(perf, None))["cls"] == expected

    @pytest.mark.parametrize("lcp,tier", [
        (2.49, CWVCategory.GOOD), (2.5, CWVCategory.NEEDS_IMPROVEMENT),
        (4.0, CWVCategory.NEEDS_IMPROVEMENT), (4.01, CWVCategory.POOR),
    ])
    def test_lcp_tier_agrees_with_points(self, fast_perf, lcp, tier):
        perf = replace(fast_perf, lcp_seconds=lcp)
        lcp_metric = score_website_technical(perf, None).metrics["lcp"]
        assert perf.lcp_category == tier
        assert f"({tier.value})" in lcp_metric.insight
        assert lcp_metric.score == {"GOOD": 3, "NEEDS_IMPROVEMENT": 1.5, "POOR": 0}[tier.value]

    @pytest.mark.parametrize("cls,tier", [
        (0.09, CWVCategory.GOOD), (0.1, CWVCategory.NEEDS_IMPROVEMENT),
        (0.25, CWVCategory.NEEDS_IMPROVEMENT), (0.26, CWVCategory.POOR),
    ])
    def test_cls_tier_agrees_with_points(self, fast_perf, cls, tier):
        perf = replace(fast_perf, cls=cls)
        assert perf.cls_category == tier
        expected = {"GOOD": 1.5, "NEEDS_IMPROVEMENT": 0.5, "POOR": 0}[tier.value]
        assert scores(score_website_technical(perf, None))["cls"] == expected

    @pytest.mark.parametrize("mobile,expected", [(100, 3), (90, 3), (89, 1.5), (50, 1.5), (49, 0)])
    def test_mobile(self, fast_perf, mobile, expected):
        perf = replace(fast_perf, mobile_score=mobile)
        assert scores(score_website_technical(perf, None))["mobile"] == expected

    def test_missing_perf_scores_zero(self, strong_page):
        result = scores(score_website_technical(None, strong_page))
        assert result["lcp"] == result["inp"] == result["cls"] == result["mobile"] == 0
        assert result["ssl"] == 3

    def test_no_https(self, plain_page):
        page = replace(plain_page, has_ssl=False)
        assert scores(score_website_technical(None, page))["ssl"] == 0

    @pytest.mark.parametrize("checked,broken,expected", [(20, 0, 2), (20, 3, 1), (20, 4, 0), (0, None, 0)])
    def test_broken_links(self, plain_page, checked, broken, expected):
        page = replace(plain_page, links_checked=checked, broken_links=broken)
        assert scores(score_website_technical(None, page))["broken_links"] == expected

    @pytest.mark.parametrize("present,valid,expected", [(True, True, 1.5), (True, False, 0.5), (False, False, 0)])
    def test_site_files(self, plain_page, present, valid, expected):
        page = replace(
            plain_page,
            llms_txt_present=present, llms_txt_valid=valid,
            sitemap_present=present, sitemap_valid=valid,
        )
        result = scores(score_website_technical(None, page))
        assert result["llms_txt"] == expected
        assert result["sitemap"] == expected

    def test_nothing_available(self):
        assert score_website_technical(None, None).score == 0


class TestKeywordVisibility:
    """Keyword Visibility (23 points)."""

    def test_full_marks(self, provider_metrics):
        pillar = score_keyword_visibility(provider_metrics.keywords, ProviderName.AHREFS)
        assert pillar.score == 23

    @pytest.mark.parametrize("total,expected", [(0, 0), (1, 2), (10, 4), (20, 6), (50, 8), (99, 8), (100, 10)])
    def test_keyword_count(self, total, expected):
        result = scores(score_keyword_visibility(KeywordMetrics(total=total), ProviderName.GSC))
        assert result["keywords"] == expected

    @pytest.mark.parametrize("position,expected", [(0, 0), (1.2, 6.5), (3, 6.5), (3.1, 4.5), (10, 4.5), (20, 2), (35, 0)])
    def test_positions(self, position, expected):
        keywords = KeywordMetrics(total=10, avg_position=position)
        assert scores(score_keyword_visibility(keywords, ProviderName.GSC))["positions"] == expected

    @pytest.mark.parametrize("share,expected", [(0, 0), (19.9, 0), (20, 1.5), (40, 3.5), (60, 5), (80, 6.5)])
    def test_intent_match(self, share, expected):
        keywords = KeywordMetrics(total=10, intent_match_percent=share, dominant_intent="informational")
        assert scores(score_keyword_visibility(keywords, ProviderName.AHREFS))["intent_match"] == expected

    def test_estimate_flagged_in_insight(self):
        pillar = score_keyword_visibility(KeywordMetrics(total=50, avg_position=35), ProviderName.ESTIMATE)
        assert "(estimated)" in pillar.metrics["keywords"].insight


class TestAITrust:
    """AI Trust (22 points)."""

    def test_full_marks(self, provider_metrics, strong_page):
        pillar = score_ai_trust(provider_metrics.backlinks, ProviderName.AHREFS, strong_page)
        assert pillar.score == 22, f"Expected 22, got {scores(pillar)}"

    @pytest.mark.parametrize("authority,expected", [(0, 0), (5, 1), (20, 2), (40, 4), (60, 6), (100, 6)])
    def test_authority_tiers(self, authority, expected):
        backlinks = BacklinkMetrics(domain_rating=authority)
        assert scores(score_ai_trust(backlinks, ProviderName.AHREFS, None))["backlinks"] == expected

    def test_authority_uses_stronger_proxy(self):
        backlinks = BacklinkMetrics(domain_rating=10, domain_authority=45)
        assert scores(score_ai_trust(backlinks, ProviderName.MOZ, None))["backlinks"] == 4

    def test_spam_penalty(self):
        backlinks = BacklinkMetrics(domain_authority=45, spam_score=31)
        assert scores(score_ai_trust(backlinks, ProviderName.MOZ, None))["backlinks"] == 2

    def test_spam_penalty_never_negative(self):
        backlinks = BacklinkMetrics(domain_authority=5, spam_score=80)
        assert scores(score_ai_trust(backlinks, ProviderName.MOZ, None))["backlinks"] == 0

    @pytest.mark.parametrize("domains,expected", [(0, 0), (1, 1), (20, 2), (50, 3.5), (100, 5)])
    def test_referring_domains(self, domains, expected):
        backlinks = BacklinkMetrics(referring_domains=domains)
        assert scores(score_ai_trust(backlinks, ProviderName.MOZ, None))["referring_domains"] == expected

    @pytest.mark.parametrize("sentiment,expected", [(0.5, 4), (0.2, 4), (0.1, 2.5), (0.0, 2.5), (-0.2, 1), (-0.5, 0)])
    def test_sentiment(self, plain_page, sentiment, expected):
        page = replace(plain_page, sentiment=sentiment)
        assert scores(score_ai_trust(BacklinkMetrics(), ProviderName.MOZ, page))["sentiment"] == expected

    def test_sentiment_without_text(self, plain_page):
        page = replace(plain_page, word_count=0, sentiment=0.0)
        assert scores(score_ai_trust(BacklinkMetrics(), ProviderName.MOZ, page))["sentiment"] == 0

    @pytest.mark.parametrize("author,citations,expected", [(False, 0, 0), (False, 1, 1), (False, 3, 2), (True, 0, 2), (True, 5, 4)])
    def test_eeat(self, plain_page, author, citations, expected):
        page = replace(plain_page, has_author_markup=author, citation_count=citations)
        assert scores(score_ai_trust(BacklinkMetrics(), ProviderName.MOZ, page))["eeat"] == expected

    @pytest.mark.parametrize("schema,signals,expected", [((), False, 0), ((), True, 1), (("Restaurant",), False, 2), (("LocalBusiness",), True, 3)])
    def test_local(self, plain_page, schema, signals, expected):
        page = replace(plain_page, schema_types=schema, has_local_signals=signals)
        assert scores(score_ai_trust(BacklinkMetrics(), ProviderName.MOZ, page))["local"] == expected

    def test_missing_page(self, provider_metrics):
        pillar = score_ai_trust(provider_metrics.backlinks, ProviderName.AHREFS, None)
        assert pillar.score == 11


# ============================================================================
# Malformed inputs
# ============================================================================

BAD_READINGS = [None, float("nan"), -5]

PAGE_NUMBERS = [
    "h1_count", "h2_count", "h3_count", "image_count", "images_with_alt", "table_count",
    "list_count", "video_count", "word_count", "intro_word_count", "sentiment", "internal_links",
    "external_links", "citation_count", "social_profiles", "links_checked", "broken_links",
]
PERF_NUMBERS = ["lcp_seconds", "inp_ms", "cls", "mobile_score"]
BACKLINK_NUMBERS = ["domain_rating", "domain_authority", "spam_score", "referring_domains", "total_backlinks"]
KEYWORD_NUMBERS = ["total", "top10", "avg_position", "intent_match_percent"]


def all_pillars(page, perf, brand, keywords, backlinks):
    return [
        score_content_structure(page),
        score_brand_ranking(brand, page),
        score_website_technical(perf, page),
        score_keyword_visibility(keywords, ProviderName.AHREFS),
        score_ai_trust(backlinks, ProviderName.AHREFS, page),
    ]


def assert_within_budgets(pillars):
    for pillar in pillars:
        budgets = METRIC_BUDGETS[pillar.pillar]
        for key, m in pillar.metrics.items():
            assert 0 <= m.score <= budgets[key], f"{pillar.pillar.value}.{key} scored {m.score}"
            assert not re.search(r"\bnan\b|\bNone\b|-5\b", m.insight), f"{key} insight: {m.insight!r}"
        assert 0 <= pillar.score <= PILLAR_BUDGETS[pillar.pillar]


class TestMalformedInputs:
    """Missing, NaN and negative readings score as absent instead of raising."""

    @pytest.mark.parametrize("bad", BAD_READINGS)
    @pytest.mark.parametrize("field", PAGE_NUMBERS)
    def test_page_fields(self, strong_page, fast_perf, top_brand, provider_metrics, field, bad):
        page = replace(strong_page, **{field: bad})
        assert_within_budgets(all_pillars(
            page, fast_perf, top_brand, provider_metrics.keywords, provider_metrics.backlinks,
        ))

    @pytest.mark.parametrize("field", ["heading_sequence", "schema_types"])
    def test_page_sequences_missing(self, strong_page, fast_perf, top_brand, provider_metrics, field):
        page = replace(strong_page, **{field: None})
        assert_within_budgets(all_pillars(
            page, fast_perf, top_brand, provider_metrics.keywords, provider_metrics.backlinks,
        ))

    @pytest.mark.parametrize("bad", BAD_READINGS)
    @pytest.mark.parametrize("field", PERF_NUMBERS)
    def test_perf_fields(self, strong_page, fast_perf, top_brand, provider_metrics, field, bad):
        perf = replace(fast_perf, **{field: bad})
        assert_within_budgets(all_pillars(
            strong_page, perf, top_brand, provider_metrics.keywords, provider_metrics.backlinks,
        ))

    @pytest.mark.parametrize("bad", BAD_READINGS)
    @pytest.mark.parametrize("field", BACKLINK_NUMBERS)
    def test_backlink_fields(self, strong_page, fast_perf, top_brand, provider_metrics, field, bad):
        backlinks = replace(provider_metrics.backlinks, **{field: bad})
        assert_within_budgets(all_pillars(strong_page, fast_perf, top_brand, provider_metrics.keywords, backlinks))

    @pytest.mark.parametrize("bad", BAD_READINGS)
    @pytest.mark.parametrize("field", KEYWORD_NUMBERS)
    def test_keyword_fields(self, strong_page, fast_perf, top_brand, provider_metrics, field, bad):
        keywords = replace(provider_metrics.keywords, **{field: bad})
        assert_within_budgets(all_pillars(strong_page, fast_perf, top_brand, keywords, provider_metrics.backlinks))

    @pytest.mark.parametrize("bad", BAD_READINGS)
    def test_brand_rank(self, strong_page, fast_perf, provider_metrics, bad):
        brand = BrandRank(query="example", rank=bad, checked_results=10)
        pillars = all_pillars(strong_page, fast_perf, brand, provider_metrics.keywords, provider_metrics.backlinks)
        assert_within_budgets(pillars)
        assert pillars[1].metrics["brand_search"].score == 0

    def test_missing_counts_read_as_zero(self, strong_page):
        page = replace(strong_page, image_count=None, video_count=float("nan"))
        result = scores(score_content_structure(page))
        assert result["multimodal"] == 0
        assert result["image_alt"] == 0

    def test_unscored_intent_share(self):
        keywords = KeywordMetrics(total=10, intent_match_percent=None, dominant_intent="commercial")
        intent = score_keyword_visibility(keywords, ProviderName.DATAFORSEO).metrics["intent_match"]
        assert intent.score == 0
        assert intent.insight == "0% of keywords share commercial intent"

    def test_authority_ignores_unusable_proxy(self):
        backlinks = BacklinkMetrics(domain_rating=None, domain_authority=45)
        assert backlinks.authority == 45
        assert BacklinkMetrics(domain_rating=float("nan"), domain_authority=-3).authority == 0
        assert BacklinkMetrics(domain_rating=None, referring_domains=None).is_empty

    def test_unreadable_sentiment(self, plain_page):
        page = replace(plain_page, sentiment=float("nan"))
        sentiment = score_ai_trust(BacklinkMetrics(), ProviderName.MOZ, page).metrics["sentiment"]
        assert sentiment.score == 0
        assert sentiment.value is None
        assert sentiment.insight == "Sentiment unavailable"

    def test_heading_sequence_with_gaps_in_data(self, strong_page):
        page = replace(strong_page, heading_sequence=(1, None, 2, float("nan"), 3))
        assert page.has_heading_skip is False
        assert scores(score_content_structure(page))["headings"] == 5
