"""
Cascading fallback over an ordered list of providers.

One generic driver serves every metric family. For each step in priority order:

    not configured      -> skipped, nothing recorded
    configured, data    -> normalized, cascade stops
    configured, no data -> failure "no data returned", next step
    error / timeout     -> failure recorded, next step

When every step is exhausted the caller substitutes an estimate. run_cascade
itself never raises except for cancellation.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, List, Optional, Sequence, Tuple, TypeVar

from ..exceptions import ProviderError, ProviderNotConfigured
from ..models import MetricFamily, ProviderFailure, ProviderName, PROVIDER_DISPLAY_NAMES

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CascadeStep(Generic[T]):
    """One provider's attempt at a metric family."""
    provider: ProviderName
    is_configured: Callable[[], bool]
    fetch: Callable[[str], Awaitable[Any]]
    normalize: Callable[[Any], T]


@dataclass(frozen=True)
class CascadeOutcome(Generic[T]):
    """Winner (if any) plus every failure on the way."""
    family: MetricFamily
    value: Optional[T]
    source: Optional[ProviderName]
    failures: Tuple[ProviderFailure, ...] = ()
    skipped: Tuple[ProviderName, ...] = ()

    @property
    def exhausted(self) -> bool:
        return self.source is None


def _is_empty(value: Any) -> bool:
    return value is None or bool(getattr(value, "is_empty", False))


async def run_cascade(
    family: MetricFamily,
    steps: Sequence[CascadeStep[T]],
    target: str,
    timeout: float = 30.0,
) -> CascadeOutcome[T]:
    """
    Try each step in order until one yields usable data.

    Args:
        family: Metric family being resolved (for attribution)
        steps: Providers in priority order
        target: Domain passed to every fetch
        timeout: Per-provider ceiling in seconds

    Returns:
        CascadeOutcome; `source` is None when every provider was skipped or failed
    """
    failures: List[ProviderFailure] = []
    skipped: List[ProviderName] = []

    for step in steps:
        name = PROVIDER_DISPLAY_NAMES[step.provider]
        if not step.is_configured():
            logger.debug(f"{name} not configured, skipping {family.value}")
            skipped.append(step.provider)
            continue

        logger.info(f"Trying {name} for {family.value} ({target})")
        try:
            raw = await asyncio.wait_for(step.fetch(target), timeout=timeout)
            value = step.normalize(raw)

        except ProviderNotConfigured:
            logger.debug(f"{name} reported missing credentials, skipping")
            skipped.append(step.provider)
            continue

        except asyncio.TimeoutError:
            failure = ProviderFailure(step.provider, family, f"timed out after {timeout:g}s", kind="timeout")
            logger.warning(str(failure))
            failures.append(failure)
            continue

        except ProviderError as e:
            failure = ProviderFailure(step.provider, family, str(e))
            logger.warning(str(failure))
            failures.append(failure)
            continue

        except Exception as e:
            failure = ProviderFailure(step.provider, family, f"unexpected error: {e}")
            logger.error(str(failure), exc_info=True)
            failures.append(failure)
            continue

        if _is_empty(value):
            failure = ProviderFailure(step.provider, family, "no data returned")
            logger.info(str(failure))
            failures.append(failure)
            continue

        logger.info(f"{family.value} for {target} from {name}")
        return CascadeOutcome(family, value, step.provider, tuple(failures), tuple(skipped))

    logger.info(f"All {family.value} providers exhausted for {target}")
    return CascadeOutcome(family, None, None, tuple(failures), tuple(skipped))
