"""Per-URL, per-domain and per-batch analysis results."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .facts import PageFacts, PerfFacts, BrandRank
from .metrics import UnifiedSEOMetrics
from .scores import ScoreResult, Recommendation, Comparison


@dataclass(frozen=True)
class UrlAnalysis:
    url: str
    score: ScoreResult
    metrics: UnifiedSEOMetrics
    page: Optional[PageFacts] = None
    performance: Optional[PerfFacts] = None
    brand: Optional[BrandRank] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def page_loaded(self) -> bool:
        return self.page is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "score": self.score.to_dict(),
            "metrics": self.metrics.to_dict(),
            "page": self.page.to_dict() if self.page else None,
            "performance": self.performance.to_dict() if self.performance else None,
            "brand": self.brand.to_dict() if self.brand else None,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "duration_seconds": round(self.duration_seconds, 2),
        }


@dataclass(frozen=True)
class DomainResult:
    """One domain's URLs folded into an average score."""
    name: str
    urls: List[str]
    average: ScoreResult
    url_results: List[UrlAnalysis]
    recommendations: List[Recommendation] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "urls": list(self.urls),
            "average": self.average.to_dict(),
            "url_results": [r.to_dict() for r in self.url_results],
            "recommendations": [r.to_dict() for r in self.recommendations],
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class BatchResult:
    primary: DomainResult
    competitors: List[DomainResult] = field(default_factory=list)
    comparison: Optional[Comparison] = None
    dropped: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "primary": self.primary.to_dict(),
            "competitors": [c.to_dict() for c in self.competitors],
            "comparison": self.comparison.to_dict() if self.comparison else None,
            "dropped": list(self.dropped),
        }
