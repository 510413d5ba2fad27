"""
Exception hierarchy for the auditor.

Provider errors never cross the cascade boundary: the orchestrator records them
as failures and moves on. Only admission errors (rate limiting) and a batch with
nothing left to analyze reach the caller.
"""

from typing import Optional


class SAOAuditorError(Exception):
    """Base class for all auditor errors."""


class ProviderError(SAOAuditorError):
    """An upstream provider call failed."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Optional[dict] = None,
        provider: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response = response
        self.provider = provider


class ProviderNotConfigured(ProviderError):
    """Credentials for the provider are absent."""


class ProviderRateLimited(ProviderError):
    """The provider answered 429 after all retries."""


class PageFetchError(ProviderError):
    """The page under audit could not be fetched."""


class InvalidURLError(SAOAuditorError, ValueError):
    """A caller-supplied URL could not be normalized."""

    def __init__(self, url: str, reason: str = "malformed URL"):
        super().__init__(f"{reason}: {url!r}")
        self.url = url
        self.reason = reason


class NoAnalyzableURLsError(SAOAuditorError):
    """Every primary URL in a batch was dropped or failed to load."""

    def __init__(self, message: str, dropped: Optional[list] = None):
        super().__init__(message)
        self.dropped = dropped or []


class RateLimitExceeded(SAOAuditorError):
    """The caller exhausted its token bucket."""

    def __init__(self, caller_id: str, retry_after: float):
        super().__init__(
            f"Rate limit exceeded for {caller_id}. Retry in {retry_after:.1f}s"
        )
        self.caller_id = caller_id
        self.retry_after = retry_after
