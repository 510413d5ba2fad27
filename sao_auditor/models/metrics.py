"""
Canonical keyword and backlink metric families.

Every provider response is mapped into one of these structs by the normalizer;
raw provider JSON never travels further than that.
"""

import math
from dataclasses import dataclass, asdict, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class MetricFamily(str, Enum):
    KEYWORDS = "keywords"
    BACKLINKS = "backlinks"


class ProviderName(str, Enum):
    AHREFS = "ahrefs"
    DATAFORSEO = "dataforseo"
    GSC = "gsc"
    MOZ = "moz"
    ESTIMATE = "estimate"


def count(value: Any) -> float:
    """A non-negative reading, with None, NaN, negative and non-numeric values read as 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if math.isnan(value) or value < 0:
        return 0
    return value


PROVIDER_DISPLAY_NAMES: Dict[ProviderName, str] = {
    ProviderName.AHREFS: "Ahrefs",
    ProviderName.DATAFORSEO: "DataForSEO",
    ProviderName.GSC: "Google Search Console",
    ProviderName.MOZ: "Moz",
    ProviderName.ESTIMATE: "Estimate",
}


@dataclass(frozen=True)
class KeywordMetrics:
    """Organic keyword footprint of a domain."""
    total: int = 0
    top10: int = 0
    top100: int = 0
    avg_position: float = 0.0
    estimated_traffic: int = 0
    intent_match_percent: float = 0.0
    dominant_intent: Optional[str] = None
    trend: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return count(self.total) <= 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class BacklinkMetrics:
    """Link-graph strength of a domain."""
    domain_rating: float = 0.0
    domain_authority: float = 0.0
    total_backlinks: int = 0
    referring_domains: int = 0
    spam_score: float = 0.0

    @property
    def authority(self) -> float:
        """The stronger of the two 0-100 authority proxies."""
        return max(count(self.domain_rating), count(self.domain_authority))

    @property
    def is_empty(self) -> bool:
        return self.authority <= 0 and count(self.referring_domains) <= 0 and count(self.total_backlinks) <= 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ProviderFailure:
    """One failed cascade attempt."""
    provider: ProviderName
    family: MetricFamily
    message: str
    kind: str = "failure"  # "failure" or "timeout"

    def __str__(self) -> str:
        return f"{PROVIDER_DISPLAY_NAMES[self.provider]} {self.family.value}: {self.message}"


@dataclass(frozen=True)
class MetricSources:
    keywords: ProviderName = ProviderName.ESTIMATE
    backlinks: ProviderName = ProviderName.ESTIMATE

    def to_dict(self) -> Dict[str, str]:
        return {"keywords": self.keywords.value, "backlinks": self.backlinks.value}


@dataclass(frozen=True)
class UnifiedSEOMetrics:
    """Cascade output: one winning value per family plus everything that failed on the way."""
    keywords: KeywordMetrics
    backlinks: BacklinkMetrics
    source: MetricSources = field(default_factory=MetricSources)
    failures: Tuple[ProviderFailure, ...] = ()

    @property
    def errors(self) -> List[str]:
        return [str(f) for f in self.failures]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "keywords": self.keywords.to_dict(),
            "backlinks": self.backlinks.to_dict(),
            "source": self.source.to_dict(),
            "errors": self.errors,
        }
