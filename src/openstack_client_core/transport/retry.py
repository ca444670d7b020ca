"""Retry transport for OpenStack endpoints.

OpenStack services answer 429 when a rate limit (nova, swift ratelimit
middleware, the load balancer API) kicks in, usually with a ``Retry-After``
header, and 502/503/504 while an API worker restarts behind haproxy.

| Status | Methods retried | Delay |
|--------|-----------------|-------|
| 429 | all | `Retry-After` (seconds or HTTP date), else exponential backoff |
| 502, 503, 504 | GET, HEAD, PUT, DELETE, OPTIONS, TRACE | exponential backoff |
| transport errors | same idempotent set | exponential backoff |

```python
import httpx

from openstack_client_core.transport import RateLimitRetry

transport = RateLimitRetry(wrapped_transport=httpx.AsyncHTTPTransport(), max_retries=5)
```

`ServiceClient(max_retries=5)` installs it for you.
"""

import asyncio
import logging
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

import httpx

logger = logging.getLogger(__name__)


class RateLimitRetry(httpx.AsyncBaseTransport):
    """Retry rate-limited requests and idempotent requests hitting a restarting API.

    Args:
        wrapped_transport: The underlying transport to wrap
        max_retries: Maximum number of retry attempts (default: 5)
        backoff_factor: Multiplier for exponential backoff (default: 1.0)
        max_backoff: Maximum delay in seconds between attempts (default: 60)
        retry_status_codes: 5xx codes retried for idempotent methods
    """

    IDEMPOTENT_METHODS: frozenset[str] = frozenset(["HEAD", "GET", "PUT", "DELETE", "OPTIONS", "TRACE"])

    DEFAULT_RETRY_STATUS_CODES: frozenset[int] = frozenset([502, 503, 504])

    def __init__(
        self,
        *,
        wrapped_transport: httpx.AsyncBaseTransport,
        max_retries: int = 5,
        backoff_factor: float = 1.0,
        max_backoff: float = 60.0,
        retry_status_codes: frozenset[int] | None = None,
    ) -> None:
        self._wrapped_transport = wrapped_transport
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self.max_backoff = max_backoff
        self.retry_status_codes = retry_status_codes or self.DEFAULT_RETRY_STATUS_CODES

    async def aclose(self) -> None:
        await self._wrapped_transport.aclose()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        attempt = 0
        while True:
            try:
                response = await self._wrapped_transport.handle_async_request(request)
            except httpx.TransportError as e:
                if attempt >= self.max_retries or request.method not in self.IDEMPOTENT_METHODS:
                    raise
                attempt += 1
                delay = self._backoff(attempt)
                logger.warning(
                    f"{request.method} {request.url} failed with {e!r}, "
                    f"retrying in {delay}s (attempt {attempt}/{self.max_retries})"
                )
                await asyncio.sleep(delay)
                continue

            delay = self._delay_for(request, response, attempt)
            if delay is None:
                return response

            attempt += 1
            logger.warning(
                f"{request.method} {request.url} returned {response.status_code}, "
                f"retrying in {delay}s (attempt {attempt}/{self.max_retries})"
            )
            await response.aclose()
            await asyncio.sleep(delay)

    def _delay_for(self, request: httpx.Request, response: httpx.Response, attempt: int) -> float | None:
        """Return the delay before the next attempt, or None to hand back the response."""
        if attempt >= self.max_retries:
            return None

        if response.status_code == 429:
            delay = self._parse_retry_after(response)
            return delay if delay is not None else self._backoff(attempt + 1)

        if response.status_code in self.retry_status_codes and request.method in self.IDEMPOTENT_METHODS:
            return self._backoff(attempt + 1)

        return None

    def _parse_retry_after(self, response: httpx.Response) -> float | None:
        """Parse ``Retry-After`` as delay-seconds or an HTTP date, capped at max_backoff."""
        retry_after = response.headers.get("Retry-After")
        if not retry_after:
            return None

        try:
            delay = float(int(retry_after))
        except ValueError:
            try:
                delay = (parsedate_to_datetime(retry_after) - datetime.now(UTC)).total_seconds()
            except (ValueError, TypeError):
                return None

        # Negative values and dates in the past (clock skew) fall back to backoff
        if delay < 0:
            return None
        return min(delay, self.max_backoff)

    def _backoff(self, attempt: int) -> float:
        """Exponential backoff: backoff_factor * 2 ** (attempt - 1), capped at max_backoff."""
        return min(self.backoff_factor * (2 ** (attempt - 1)), self.max_backoff)
