"""
Page Inspector

Fetches the page under audit and extracts the structural signals the scoring
engine needs: headings, structured data, media, links, text statistics, plus
probes for /llms.txt, /sitemap.xml and a capped sample of outbound links.
"""

import asyncio
import json
import logging
import re
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional, Set, Tuple
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from ..exceptions import PageFetchError
from ..models import PageFacts
from ..utils.urls import extract_domain, site_root

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; SAOAuditor/0.1)"

SOCIAL_DOMAINS = {
    "facebook.com": "facebook",
    "twitter.com": "x",
    "x.com": "x",
    "linkedin.com": "linkedin",
    "instagram.com": "instagram",
    "youtube.com": "youtube",
    "tiktok.com": "tiktok",
    "pinterest.com": "pinterest",
}

VIDEO_HOSTS = ("youtube.com", "youtube-nocookie.com", "youtu.be", "vimeo.com", "wistia", "loom.com")

POSITIVE_WORDS = frozenset({
    "best", "great", "excellent", "trusted", "reliable", "easy", "fast", "love",
    "quality", "recommended", "award", "winning", "secure", "happy", "helpful",
    "expert", "proven", "leading", "free", "guarantee", "satisfied", "amazing",
    "professional", "friendly", "simple", "effective", "success", "safe",
})

NEGATIVE_WORDS = frozenset({
    "bad", "poor", "worst", "slow", "broken", "scam", "complaint", "problem",
    "fail", "failed", "failure", "error", "difficult", "expensive", "risk",
    "unreliable", "disappointed", "terrible", "awful", "fraud", "issue",
    "delay", "refund", "cancel", "hate", "angry", "unsafe", "warning",
})

_WORD_RE = re.compile(r"[a-zA-Z']+")


# ============================================================================
# PARSING
# ============================================================================

def _schema_types_from_jsonld(node: Any, found: List[str]) -> None:
    if isinstance(node, list):
        for item in node:
            _schema_types_from_jsonld(item, found)
        return
    if not isinstance(node, dict):
        return
    sd_type = node.get("@type")
    if isinstance(sd_type, str):
        found.append(sd_type)
    elif isinstance(sd_type, list):
        found.extend(t for t in sd_type if isinstance(t, str))
    for value in node.values():
        if isinstance(value, (dict, list)):
            _schema_types_from_jsonld(value, found)


def _jsonld_blocks(soup: BeautifulSoup) -> List[Any]:
    blocks = []
    for script_tag in soup.find_all("script", type="application/ld+json"):
        try:
            blocks.append(json.loads(script_tag.string or "{}"))
        except (json.JSONDecodeError, TypeError):
            logger.debug("Skipping unparseable JSON-LD block")
    return blocks


def _jsonld_has_key(node: Any, key: str) -> bool:
    if isinstance(node, list):
        return any(_jsonld_has_key(item, key) for item in node)
    if isinstance(node, dict):
        if key in node:
            return True
        return any(_jsonld_has_key(v, key) for v in node.values() if isinstance(v, (dict, list)))
    return False


def lexicon_sentiment(text: str) -> Tuple[float, int]:
    """Return (score in [-1, 1], word count) from a small sentiment lexicon."""
    words = [w.lower() for w in _WORD_RE.findall(text)]
    if not words:
        return 0.0, 0
    positive = sum(1 for w in words if w in POSITIVE_WORDS)
    negative = sum(1 for w in words if w in NEGATIVE_WORDS)
    if positive + negative == 0:
        return 0.0, len(words)
    return (positive - negative) / (positive + negative), len(words)


def _social_network(host: str) -> Optional[str]:
    for social_domain, network in SOCIAL_DOMAINS.items():
        if host == social_domain or host.endswith(f".{social_domain}"):
            return network
    return None


def parse_html(final_url: str, html: str) -> Dict[str, Any]:
    """Extract page-level signals from HTML. Pure: no network access."""
    soup = BeautifulSoup(html, "html.parser")
    domain = extract_domain(final_url)

    title_tag = soup.find("title")
    title = title_tag.get_text(strip=True) if title_tag else ""

    # Structured data
    blocks = _jsonld_blocks(soup)
    schema_types: List[str] = []
    for block in blocks:
        _schema_types_from_jsonld(block, schema_types)
    for el in soup.find_all(attrs={"itemtype": True}):
        schema_types.append(str(el["itemtype"]).rstrip("/").rsplit("/", 1)[-1])
    schema_types = list(dict.fromkeys(t for t in schema_types if t))

    # Headings
    heading_sequence = tuple(int(h.name[1]) for h in soup.find_all(re.compile(r"^h[1-6]$")))

    # Author and local markup
    has_author_markup = bool(
        soup.find("meta", attrs={"name": re.compile(r"^author$", re.I)})
        or soup.find(attrs={"rel": "author"})
        or soup.find(attrs={"itemprop": "author"})
        or any(_jsonld_has_key(b, "author") for b in blocks)
        or "Person" in schema_types
    )
    has_local_signals = bool(
        soup.find("address")
        or soup.find("a", href=re.compile(r"^tel:", re.I))
        or soup.find("meta", attrs={"name": re.compile(r"^geo\.", re.I)})
        or "PostalAddress" in schema_types
        or "GeoCoordinates" in schema_types
    )

    # Media
    images = soup.find_all("img")
    images_with_alt = sum(1 for img in images if (img.get("alt") or "").strip())
    video_count = len(soup.find_all("video")) + sum(
        1 for frame in soup.find_all("iframe")
        if any(host in (frame.get("src") or "") for host in VIDEO_HOSTS)
    )

    # Links
    internal: List[str] = []
    external: List[str] = []
    networks: Set[str] = set()
    citations = 0
    for a_tag in soup.find_all("a", href=True):
        href = a_tag["href"].strip()
        if href.startswith(("#", "mailto:", "tel:", "javascript:")):
            continue
        abs_href = urljoin(final_url, href)
        if urlparse(abs_href).scheme not in ("http", "https"):
            continue
        link_domain = extract_domain(abs_href)
        if link_domain == domain or link_domain.endswith(f".{domain}"):
            internal.append(abs_href)
            continue
        external.append(abs_href)
        network = _social_network(link_domain)
        if network:
            networks.add(network)
        else:
            citations += 1
    for block in blocks:
        for same_as in _collect_same_as(block):
            network = _social_network(extract_domain(same_as))
            if network:
                networks.add(network)

    # Text (scripts and styles excluded)
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    container = soup.find("main") or soup.find("article") or soup.body or soup
    body_text = container.get_text(separator=" ", strip=True)
    sentiment, word_count = lexicon_sentiment(body_text)

    intro_word_count = 0
    for p in container.find_all("p"):
        text = p.get_text(" ", strip=True)
        if text:
            intro_word_count = len(text.split())
            break

    return {
        "title": title,
        "schema_types": tuple(schema_types),
        "heading_sequence": heading_sequence,
        "h1_count": heading_sequence.count(1),
        "h2_count": heading_sequence.count(2),
        "h3_count": heading_sequence.count(3),
        "has_author_markup": has_author_markup,
        "has_local_signals": has_local_signals,
        "image_count": len(images),
        "images_with_alt": images_with_alt,
        "table_count": len(soup.find_all("table")),
        "list_count": len(soup.find_all(["ul", "ol"])),
        "video_count": video_count,
        "word_count": word_count,
        "intro_word_count": intro_word_count,
        "sentiment": sentiment,
        "internal_links": internal,
        "external_links": external,
        "citation_count": citations,
        "social_profiles": len(networks),
    }


def _collect_same_as(node: Any) -> List[str]:
    if isinstance(node, list):
        return [u for item in node for u in _collect_same_as(item)]
    if not isinstance(node, dict):
        return []
    found: List[str] = []
    same_as = node.get("sameAs")
    if isinstance(same_as, str):
        found.append(same_as)
    elif isinstance(same_as, list):
        found.extend(u for u in same_as if isinstance(u, str))
    for value in node.values():
        if isinstance(value, (dict, list)):
            found.extend(_collect_same_as(value))
    return found


def is_valid_llms_txt(text: str) -> bool:
    """llms.txt is markdown that opens with an H1 naming the site."""
    for line in text.splitlines():
        stripped = line.strip()
        if stripped:
            return stripped.startswith("# ") and len(stripped) > 2
    return False


def is_valid_sitemap(text: str) -> bool:
    """A urlset or sitemapindex with at least one <loc>."""
    try:
        root = ET.fromstring(text)
    except ET.ParseError:
        return False
    tag = root.tag.split("}")[-1]
    if tag not in ("urlset", "sitemapindex"):
        return False
    return any(el.tag.split("}")[-1] == "loc" and (el.text or "").strip() for el in root.iter())


# ============================================================================
# INSPECTOR
# ============================================================================

class PageInspector:
    """
    Fetches and inspects one page.

    Usage:
        async with PageInspector() as inspector:
            facts = await inspector.inspect("https://example.com/")
    """

    name = "scraping"
    display_name = "Page inspector"

    def __init__(
        self,
        timeout: float = 15.0,
        max_link_checks: int = 20,
        max_concurrent_checks: int = 5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        check_timeout: Optional[float] = None,
    ):
        self.timeout = timeout
        self.max_link_checks = max_link_checks
        self.max_concurrent_checks = max_concurrent_checks
        # Site-file probes and the link sample run after the page has loaded
        self.check_timeout = check_timeout if check_timeout is not None else timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def is_configured(self) -> bool:
        return True

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers={"User-Agent": USER_AGENT},
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def _fetch_page(self, url: str) -> httpx.Response:
        try:
            response = await self._get_client().get(url)
        except httpx.HTTPError as e:
            raise PageFetchError(f"Could not fetch {url}: {e}", provider=self.name)
        if response.status_code >= 400:
            raise PageFetchError(
                f"Page returned HTTP {response.status_code}",
                status_code=response.status_code,
                provider=self.name,
            )
        return response

    async def _probe_text(self, url: str) -> Optional[str]:
        """Body of a 200 non-HTML response, otherwise None."""
        try:
            response = await self._get_client().get(url)
        except httpx.HTTPError as e:
            logger.debug(f"Probe failed for {url}: {e}")
            return None
        if response.status_code != 200:
            return None
        if "text/html" in response.headers.get("content-type", ""):
            # Soft 404 pages served for every path
            return None
        return response.text

    async def check_llms_txt(self, root: str) -> Tuple[bool, bool]:
        text = await self._probe_text(f"{root}/llms.txt")
        if text is None:
            return False, False
        return True, is_valid_llms_txt(text)

    async def check_sitemap(self, root: str) -> Tuple[bool, bool]:
        text = await self._probe_text(f"{root}/sitemap.xml")
        if text is None:
            return False, False
        return True, is_valid_sitemap(text)

    async def check_links(self, links: List[str]) -> Tuple[int, Optional[int]]:
        """HEAD a capped sample of unique links. Returns (checked, broken)."""
        sample = list(dict.fromkeys(links))[: self.max_link_checks]
        if not sample:
            return 0, None

        semaphore = asyncio.Semaphore(self.max_concurrent_checks)

        async def _check(href: str) -> bool:
            async with semaphore:
                try:
                    response = await self._get_client().head(href)
                except httpx.HTTPError:
                    return True
                # Servers that refuse HEAD are not broken
                return response.status_code >= 400 and response.status_code != 405

        results = await asyncio.gather(*[_check(h) for h in sample])
        return len(sample), sum(1 for broken in results if broken)

    async def _bounded(self, check, fallback: Tuple, label: str) -> Tuple:
        """Run one post-fetch check within check_timeout, falling back when it overruns."""
        try:
            return await asyncio.wait_for(check, timeout=self.check_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"{label} exceeded {self.check_timeout:g}s, skipped")
            return fallback

    async def inspect(self, url: str) -> PageFacts:
        """Fetch, parse and probe. Raises PageFetchError when the page itself fails."""
        response = await self._fetch_page(url)
        final_url = str(response.url)
        parsed = parse_html(final_url, response.text)
        root = site_root(final_url)

        (llms_present, llms_valid), (sitemap_present, sitemap_valid), (checked, broken) = await asyncio.gather(
            self._bounded(self.check_llms_txt(root), (False, False), f"llms.txt check for {root}"),
            self._bounded(self.check_sitemap(root), (False, False), f"sitemap check for {root}"),
            self._bounded(
                self.check_links(parsed["internal_links"] + parsed["external_links"]),
                (0, None),
                f"link sample for {url}",
            ),
        )

        facts = PageFacts(
            url=url,
            final_url=final_url,
            status_code=response.status_code,
            has_ssl=urlparse(final_url).scheme == "https",
            title=parsed["title"],
            h1_count=parsed["h1_count"],
            h2_count=parsed["h2_count"],
            h3_count=parsed["h3_count"],
            heading_sequence=parsed["heading_sequence"],
            schema_types=parsed["schema_types"],
            has_author_markup=parsed["has_author_markup"],
            has_local_signals=parsed["has_local_signals"],
            image_count=parsed["image_count"],
            images_with_alt=parsed["images_with_alt"],
            table_count=parsed["table_count"],
            list_count=parsed["list_count"],
            video_count=parsed["video_count"],
            word_count=parsed["word_count"],
            intro_word_count=parsed["intro_word_count"],
            sentiment=parsed["sentiment"],
            internal_links=len(parsed["internal_links"]),
            external_links=len(parsed["external_links"]),
            citation_count=parsed["citation_count"],
            social_profiles=parsed["social_profiles"],
            links_checked=checked,
            broken_links=broken,
            llms_txt_present=llms_present,
            llms_txt_valid=llms_valid,
            sitemap_present=sitemap_present,
            sitemap_valid=sitemap_valid,
        )
        logger.info(
            f"Inspected {url}: {facts.word_count} words, {len(facts.schema_types)} schema types, "
            f"{facts.broken_links or 0}/{checked} broken links"
        )
        return facts

    async def close(self):
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
