"""
Analysis entry points.

    from sao_auditor.analyzer import AuditEngine

    async with AuditEngine() as engine:
        result = await engine.analyze_batch(["example.com"])
"""

from .engine import AuditEngine
from .warnings import (
    FAMILY_IMPACT,
    PROVIDER_IMPACT,
    cascade_warnings,
    performance_warning,
    brand_warning,
    page_warning,
)

__all__ = [
    "AuditEngine",
    "FAMILY_IMPACT",
    "PROVIDER_IMPACT",
    "cascade_warnings",
    "performance_warning",
    "brand_warning",
    "page_warning",
]
