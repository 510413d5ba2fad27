"""
API Endpoint for AI-discovery audits

FastAPI app that:
1. Accepts a batch of primary URLs plus optional competitor URL groups
2. Admits the caller through a per-caller token bucket
3. Scores every URL, averages per domain and ranks against competitors
4. Returns the full result as JSON

Run with:
    uvicorn api.scan:app --reload
"""

import logging
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from pydantic import BaseModel, Field

from sao_auditor import __version__
from sao_auditor.analyzer import AuditEngine
from sao_auditor.exceptions import NoAnalyzableURLsError, RateLimitExceeded
from sao_auditor.scoring import score_label
from sao_auditor.utils import TokenBucketRateLimiter, configure_logging, get_settings

settings = get_settings()
configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="SAO Auditor",
    description="Search and AI-discovery scoring across five pillars",
    version=__version__,
)

# Built once; shared by every request
rate_limiter = TokenBucketRateLimiter(
    per_minute=settings.RATE_LIMIT_PER_MINUTE,
    burst=settings.RATE_LIMIT_BURST,
)

_engine: Optional[AuditEngine] = None


def get_engine() -> AuditEngine:
    """Lazily build the shared engine (and its HTTP connection pools)."""
    global _engine
    if _engine is None:
        _engine = AuditEngine(settings=settings)
        _engine.registry.log_status()
    return _engine


def get_rate_limiter() -> TokenBucketRateLimiter:
    return rate_limiter


def caller_identity(request: Request) -> str:
    """Rate-limit key for the request: the client host."""
    return request.client.host if request.client else "anonymous"


@app.on_event("shutdown")
async def shutdown_event():
    """Close provider HTTP clients."""
    if _engine is not None:
        await _engine.close()


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class ScanRequest(BaseModel):
    """Request to score a set of URLs."""
    urls: List[str] = Field(
        ...,
        min_length=1,
        description="Primary domain URLs (e.g., ['example.com/', 'example.com/pricing'])",
    )
    competitors: Optional[List[List[str]]] = Field(
        default=None,
        description="One list of URLs per competitor domain",
    )


# ============================================================================
# API ENDPOINTS
# ============================================================================

@app.get("/status")
async def status(
    request: Request,
    engine: AuditEngine = Depends(get_engine),
    limiter: TokenBucketRateLimiter = Depends(get_rate_limiter),
):
    """Health check, provider configuration and the caller's remaining scans."""
    return {
        "status": "ok",
        "service": "SAO Auditor",
        "version": __version__,
        "providers": engine.provider_status(),
        "rate_limit": {
            "per_minute": limiter.per_minute,
            "burst": limiter.burst,
            "remaining": limiter.get_remaining(caller_identity(request)),
        },
    }


@app.post("/scan")
async def scan(
    scan_request: ScanRequest,
    request: Request,
    response: Response,
    engine: AuditEngine = Depends(get_engine),
    limiter: TokenBucketRateLimiter = Depends(get_rate_limiter),
):
    """
    Score the primary URLs and rank them against competitors.

    Returns 429 when the caller is rate limited and 422 when none of the
    primary URLs could be analyzed. X-RateLimit-Remaining carries the scans
    the caller has left.
    """
    caller_id = caller_identity(request)

    try:
        result = await engine.analyze_batch(
            scan_request.urls,
            scan_request.competitors,
            caller_id=caller_id,
            rate_limiter=limiter,
        )
    except RateLimitExceeded as e:
        logger.info(f"Rejected scan from {caller_id}: {e}")
        raise HTTPException(
            status_code=429,
            detail=str(e),
            headers={
                "Retry-After": str(max(1, round(e.retry_after))),
                "X-RateLimit-Remaining": "0",
            },
        )
    except NoAnalyzableURLsError as e:
        logger.warning(f"Scan from {caller_id} had nothing to analyze: {e}")
        raise HTTPException(status_code=422, detail={"message": str(e), "dropped": e.dropped})

    response.headers["X-RateLimit-Remaining"] = str(limiter.get_remaining(caller_id))
    total = result.primary.average.total
    logger.info(f"Scan for {result.primary.name} complete: {total}/100")

    return {
        "label": score_label(total),
        **result.to_dict(),
    }


# ============================================================================
# RUN SERVER
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.scan:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
    )
