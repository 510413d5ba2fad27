"""
Token bucket rate limiter.

Built once at process start and handed to the batch entry point. Buckets are
keyed by caller identity; a lock guards them because FastAPI may call in from
worker threads as well as the event loop.
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..exceptions import RateLimitExceeded


@dataclass
class _Bucket:
    tokens: float
    updated_at: float


class TokenBucketRateLimiter:
    """
    Per-caller token bucket.

    Each caller holds up to `burst` tokens, refilled at `per_minute / 60`
    tokens per second. One analysis batch costs one token.
    """

    def __init__(
        self,
        per_minute: int = 10,
        burst: int = 3,
        clock: Optional[Callable[[], float]] = None,
    ):
        if per_minute <= 0 or burst <= 0:
            raise ValueError("per_minute and burst must be positive")
        self.per_minute = per_minute
        self.burst = burst
        self._rate = per_minute / 60.0
        self._clock = clock or time.monotonic
        self._buckets: Dict[str, _Bucket] = {}
        self._lock = threading.Lock()

    def _refill(self, caller_id: str, now: float) -> _Bucket:
        bucket = self._buckets.get(caller_id)
        if bucket is None:
            bucket = _Bucket(tokens=float(self.burst), updated_at=now)
            self._buckets[caller_id] = bucket
            return bucket
        elapsed = max(0.0, now - bucket.updated_at)
        bucket.tokens = min(float(self.burst), bucket.tokens + elapsed * self._rate)
        bucket.updated_at = now
        return bucket

    def acquire(self, caller_id: str) -> None:
        """Take one token or raise RateLimitExceeded."""
        with self._lock:
            bucket = self._refill(caller_id, self._clock())
            if bucket.tokens >= 1.0:
                bucket.tokens -= 1.0
                return
            retry_after = (1.0 - bucket.tokens) / self._rate
        raise RateLimitExceeded(caller_id, retry_after)

    def get_remaining(self, caller_id: str) -> int:
        """Whole tokens currently available to the caller."""
        with self._lock:
            return int(self._refill(caller_id, self._clock()).tokens)
