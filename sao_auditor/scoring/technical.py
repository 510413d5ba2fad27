"""
Website Technical pillar (17 points).

Core Web Vitals (LCP, INP, CLS), mobile performance, SSL, broken links and the
two machine-readable site files (llms.txt, sitemap.xml).
"""

from typing import Optional

from ..models import PageFacts, PerfFacts, Pillar, PillarScore, categorize_lcp, count
from .helpers import PILLAR_BUDGETS, is_missing, metric, step_score

PILLAR = Pillar.WEBSITE_TECHNICAL

LCP_BANDS = [(2.5, 3, False), (4.0, 1.5)]
INP_BANDS = [(200, 1.5), (500, 0.5)]
CLS_BANDS = [(0.1, 1.5, False), (0.25, 0.5)]
MOBILE_BANDS = [(90, 3), (50, 1.5)]
BROKEN_LINK_BANDS = [(0, 2), (3, 1)]


def _reading(perf: Optional[PerfFacts], field: str):
    value = getattr(perf, field, None)
    return None if is_missing(value) else value


def _site_file(present: bool, valid: bool, name: str, key: str, recommendation: str):
    score = 1.5 if valid else 0.5 if present else 0.0
    state = "valid" if valid else "present but invalid" if present else "missing"
    return metric(PILLAR, key, state, score, f"{name} {state}", recommendation)


def score_website_technical(perf: Optional[PerfFacts], page: Optional[PageFacts]) -> PillarScore:
    lcp = _reading(perf, "lcp_seconds")
    inp = _reading(perf, "inp_ms")
    cls = _reading(perf, "cls")
    mobile = _reading(perf, "mobile_score")
    no_perf = "Performance data unavailable"

    metrics = {
        "lcp": metric(
            PILLAR, "lcp", lcp,
            step_score(lcp, LCP_BANDS, higher_is_better=False, zero_is_missing=True),
            f"LCP {lcp:.2f}s ({categorize_lcp(lcp).value})" if lcp is not None else no_perf,
            "Bring Largest Contentful Paint under 2.5s: compress the hero image and trim render-blocking CSS",
        ),
        "inp": metric(
            PILLAR, "inp", inp,
            step_score(inp, INP_BANDS, higher_is_better=False),
            (
                f"INP {inp:.0f}ms{'' if perf.inp_from_field_data else ' (estimated from blocking time)'}"
                if inp is not None else no_perf
            ),
            "Reduce main-thread JavaScript so interactions respond within 200ms",
        ),
        "cls": metric(
            PILLAR, "cls", cls,
            step_score(cls, CLS_BANDS, higher_is_better=False),
            f"CLS {cls:.3f}" if cls is not None else no_perf,
            "Reserve space for images, embeds and ads to keep layout shift under 0.1",
        ),
        "mobile": metric(
            PILLAR, "mobile", mobile,
            step_score(mobile, MOBILE_BANDS),
            f"Mobile performance score {mobile}" if mobile is not None else no_perf,
            "Raise the mobile Lighthouse performance score to 90+",
        ),
    }

    if page is None:
        unreachable = "Page could not be inspected"
        for key in ("ssl", "broken_links", "llms_txt", "sitemap"):
            metrics[key] = metric(PILLAR, key, None, 0, unreachable, "Make sure the page is reachable")
    else:
        checked = count(page.links_checked)
        broken = page.broken_links if checked > 0 and not is_missing(page.broken_links) else None
        metrics["ssl"] = metric(
            PILLAR, "ssl", page.has_ssl, 3.0 if page.has_ssl else 0.0,
            "Served over HTTPS" if page.has_ssl else "Not served over HTTPS",
            "Serve the site over HTTPS with a valid certificate",
        )
        metrics["broken_links"] = metric(
            PILLAR, "broken_links", broken,
            step_score(broken, BROKEN_LINK_BANDS, higher_is_better=False),
            f"{broken}/{checked} sampled links broken" if broken is not None else "No links to check",
            "Fix or remove links that return errors",
        )
        metrics["llms_txt"] = _site_file(
            page.llms_txt_present, page.llms_txt_valid, "llms.txt", "llms_txt",
            "Publish /llms.txt: a markdown summary of the site starting with an H1",
        )
        metrics["sitemap"] = _site_file(
            page.sitemap_present, page.sitemap_valid, "sitemap.xml", "sitemap",
            "Publish a valid /sitemap.xml listing your indexable URLs",
        )

    return PillarScore.from_metrics(PILLAR, metrics, PILLAR_BUDGETS[PILLAR])
