"""
Score value objects.

A Metric can never hold a score outside [0, max_score]: the constructor clamps
it, so every code path that builds one inherits the bound.
"""

import math
from dataclasses import dataclass, asdict, fields
from enum import Enum
from typing import Any, Dict, List, Optional


class Pillar(str, Enum):
    CONTENT_STRUCTURE = "content_structure"
    BRAND_RANKING = "brand_ranking"
    WEBSITE_TECHNICAL = "website_technical"
    KEYWORD_VISIBILITY = "keyword_visibility"
    AI_TRUST = "ai_trust"


PILLAR_ORDER: List[Pillar] = list(Pillar)

PILLAR_LABELS: Dict[Pillar, str] = {
    Pillar.CONTENT_STRUCTURE: "Content Structure",
    Pillar.BRAND_RANKING: "Brand Ranking",
    Pillar.WEBSITE_TECHNICAL: "Website Technical",
    Pillar.KEYWORD_VISIBILITY: "Keyword Visibility",
    Pillar.AI_TRUST: "AI Trust",
}


class Priority(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


def _bounded(score: Any, max_score: float) -> float:
    try:
        value = float(score)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(value):
        return 0.0
    return min(max(value, 0.0), max_score)


@dataclass(frozen=True)
class Metric:
    """One scored sub-metric."""
    value: Any
    score: float
    max_score: float
    insight: str = ""
    recommendation: Optional[str] = None

    def __post_init__(self):
        max_score = _bounded(self.max_score, math.inf)
        object.__setattr__(self, "max_score", max_score)
        object.__setattr__(self, "score", _bounded(self.score, max_score))

    @property
    def points_lost(self) -> float:
        return self.max_score - self.score

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "score": round(self.score, 2),
            "max_score": self.max_score,
            "insight": self.insight,
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class PillarScore:
    """A pillar's metrics and its clamped sum."""
    pillar: Pillar
    metrics: Dict[str, Metric]
    score: float
    max_score: float

    @classmethod
    def from_metrics(cls, pillar: Pillar, metrics: Dict[str, Metric], max_score: float) -> "PillarScore":
        return cls(
            pillar=pillar,
            metrics=dict(metrics),
            score=_bounded(sum(m.score for m in metrics.values()), max_score),
            max_score=max_score,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": round(self.score, 2),
            "max_score": self.max_score,
            "metrics": {name: m.to_dict() for name, m in self.metrics.items()},
        }


@dataclass(frozen=True)
class DataSource:
    """Which upstreams actually contributed to a score."""
    moz: bool = False
    dataforseo: bool = False
    gsc: bool = False
    ahrefs: bool = False
    pagespeed: bool = False
    scraping: bool = False
    google_search: bool = False

    def __or__(self, other: "DataSource") -> "DataSource":
        return DataSource(**{
            f.name: getattr(self, f.name) or getattr(other, f.name) for f in fields(self)
        })

    def to_dict(self) -> Dict[str, bool]:
        return asdict(self)


@dataclass(frozen=True)
class ScoreResult:
    """Five pillar scores and the rounded total."""
    total: int
    pillars: Dict[Pillar, PillarScore]
    data_source: DataSource

    @property
    def content_structure(self) -> float:
        return self.pillars[Pillar.CONTENT_STRUCTURE].score

    @property
    def brand_ranking(self) -> float:
        return self.pillars[Pillar.BRAND_RANKING].score

    @property
    def website_technical(self) -> float:
        return self.pillars[Pillar.WEBSITE_TECHNICAL].score

    @property
    def keyword_visibility(self) -> float:
        return self.pillars[Pillar.KEYWORD_VISIBILITY].score

    @property
    def ai_trust(self) -> float:
        return self.pillars[Pillar.AI_TRUST].score

    @property
    def breakdown(self) -> Dict[Pillar, Dict[str, Metric]]:
        return {pillar: p.metrics for pillar, p in self.pillars.items()}

    def pillar_score(self, pillar: Pillar) -> float:
        return self.pillars[pillar].score

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"total": self.total}
        for pillar in PILLAR_ORDER:
            data[pillar.value] = round(self.pillars[pillar].score, 2)
        data["breakdown"] = {
            pillar.value: self.pillars[pillar].to_dict() for pillar in PILLAR_ORDER
        }
        data["data_source"] = self.data_source.to_dict()
        return data


@dataclass(frozen=True)
class Recommendation:
    """Actionable fix for a metric that lost points."""
    pillar: Pillar
    priority: Priority
    title: str
    description: str
    impact: str
    metric_name: str
    current_score: float
    max_score: float
    points_lost: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pillar": self.pillar.value,
            "priority": self.priority.value,
            "title": self.title,
            "description": self.description,
            "impact": self.impact,
            "metric_name": self.metric_name,
            "current_score": round(self.current_score, 2),
            "max_score": self.max_score,
            "points_lost": round(self.points_lost, 2),
        }


@dataclass(frozen=True)
class PillarRanking:
    name: str
    score: float
    rank: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "score": round(self.score, 2), "rank": self.rank}


@dataclass(frozen=True)
class ComparisonEntry:
    name: str
    total: int
    rank: int
    is_primary: bool
    pillars: Dict[Pillar, float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "total": self.total,
            "rank": self.rank,
            "is_primary": self.is_primary,
            "pillars": {p.value: round(s, 2) for p, s in self.pillars.items()},
        }


@dataclass(frozen=True)
class Comparison:
    """Primary domain ranked against up to four competitors."""
    rank: int
    total_entries: int
    average_competitor_total: float
    entries: List[ComparisonEntry]
    pillar_rankings: Dict[Pillar, List[PillarRanking]]
    gaps: Dict[Pillar, float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rank": self.rank,
            "total_entries": self.total_entries,
            "average_competitor_total": round(self.average_competitor_total, 2),
            "entries": [e.to_dict() for e in self.entries],
            "pillar_rankings": {
                p.value: [r.to_dict() for r in rankings]
                for p, rankings in self.pillar_rankings.items()
            },
            "gaps": {p.value: round(g, 2) for p, g in self.gaps.items()},
        }
