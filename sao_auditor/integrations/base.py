"""
Shared async HTTP client for provider adapters.

Async HTTP client with:
- Automatic retry with exponential backoff on 429, 5xx and transport errors
- No retry on other 4xx responses
- Lazy httpx.AsyncClient creation (an injected transport makes adapters testable)
- Every failure surfaced as a ProviderError
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from ..exceptions import ProviderError, ProviderNotConfigured, ProviderRateLimited

logger = logging.getLogger(__name__)


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""
    max_retries: int = 2
    initial_delay: float = 1.0
    max_delay: float = 10.0
    exponential_base: float = 2.0
    retryable_status_codes: tuple = (429, 500, 502, 503, 504)


class BaseAPIClient:
    """
    Base for the JSON-over-HTTP provider adapters.

    Subclasses set BASE_URL, `name` and `display_name`, implement
    is_configured() and _default_headers(), and call _request().
    """

    BASE_URL = ""
    name = "provider"
    display_name = "Provider"

    def __init__(
        self,
        timeout: float = 30.0,
        retry_config: Optional[RetryConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def is_configured(self) -> bool:
        raise NotImplementedError

    def _default_headers(self) -> Dict[str, str]:
        return {"Accept": "application/json"}

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.BASE_URL,
                headers=self._default_headers(),
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            )
        return self._client

    def _check_payload(self, data: Any) -> Any:
        """Hook for providers that report errors inside a 200 response."""
        return data

    async def _make_request(self, method: str, path: str, **kwargs) -> Any:
        """Make a single HTTP request."""
        logger.debug(f"{self.display_name} {method} {path}")

        response = await self._get_client().request(method, path, **kwargs)

        if response.status_code != 200:
            try:
                body = response.json() if response.content else None
            except ValueError:
                body = None
            error_cls = ProviderRateLimited if response.status_code == 429 else ProviderError
            raise error_cls(
                f"API request failed: {response.status_code}",
                status_code=response.status_code,
                response=body if isinstance(body, dict) else None,
                provider=self.name,
            )

        try:
            data = response.json()
        except ValueError:
            raise ProviderError("Invalid JSON in response", status_code=200, provider=self.name)

        return self._check_payload(data)

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        """Make request with automatic retry on failure."""
        if not self.is_configured():
            raise ProviderNotConfigured(f"{self.display_name} is not configured", provider=self.name)

        last_exception: Optional[ProviderError] = None
        delay = self.retry_config.initial_delay

        for attempt in range(self.retry_config.max_retries + 1):
            try:
                return await self._make_request(method, path, **kwargs)

            except ProviderError as e:
                last_exception = e

                # Don't retry client errors (4xx except 429)
                if e.status_code and e.status_code not in self.retry_config.retryable_status_codes:
                    raise

            except httpx.TimeoutException as e:
                last_exception = ProviderError(f"Request timed out: {e}", provider=self.name)

            except httpx.HTTPError as e:
                last_exception = ProviderError(f"HTTP error: {e}", provider=self.name)

            if attempt < self.retry_config.max_retries:
                logger.warning(
                    f"{self.display_name} request failed (attempt {attempt + 1}/"
                    f"{self.retry_config.max_retries + 1}): {last_exception}. Retrying in {delay}s..."
                )
                await asyncio.sleep(delay)
                delay = min(delay * self.retry_config.exponential_base, self.retry_config.max_delay)

        raise last_exception

    async def close(self):
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
