"""Retry transport for resilient HTTP clients.

``RetryTransport`` re-invokes the wrapped transport when a call raises or
answers with a retryable status code. It sits outside the caching layer in
the stack built by :func:`request_facade.transport.create_transport_stack`,
so a retried GET can still be answered from cache.

## Which calls are retried

| Outcome | Retried when |
|---------|--------------|
| Exception (connection error, timeout, ...) | method in `retry_methods` |
| Status in `retry_status_codes` (502, 503, 504) | method in `retry_methods` |
| Any other response | never |

## Example

```python
import httpx

from request_facade.transport.retry import RetryOptions, RetryTransport

transport = RetryTransport(
    wrapped_transport=httpx.AsyncHTTPTransport(),
    options=RetryOptions(times=3, backoff_factor=0.5),
)

async with httpx.AsyncClient(transport=transport) as client:
    response = await client.get("https://api.example.com")
```

The number of retries can be changed for a single call through the
``retry_times`` request extension:

```python
await client.get("https://api.example.com", extensions={"retry_times": 0})
```
"""

import asyncio
import logging
from dataclasses import dataclass

import httpx

logger = logging.getLogger(__name__)

# Idempotent HTTP methods (per RFC 7231)
IDEMPOTENT_METHODS: frozenset[str] = frozenset(["HEAD", "GET", "PUT", "DELETE", "OPTIONS", "TRACE"])

# Server errors that warrant retry
DEFAULT_RETRY_STATUS_CODES: frozenset[int] = frozenset([502, 503, 504])

# Request extension overriding RetryOptions.times for one call
RETRY_TIMES_EXTENSION = "retry_times"


@dataclass(frozen=True)
class RetryOptions:
    """Configuration of RetryTransport.

    Attributes:
        times: Number of retries after the first attempt (default: 2)
        backoff_factor: Multiplier for exponential backoff (default: 0.5)
        max_backoff: Maximum backoff time in seconds (default: 30)
        retry_status_codes: Status codes that trigger retries (default: 502, 503, 504)
        retry_methods: Methods that may be retried (default: idempotent methods)
    """

    times: int = 2
    backoff_factor: float = 0.5
    max_backoff: float = 30.0
    retry_status_codes: frozenset[int] = DEFAULT_RETRY_STATUS_CODES
    retry_methods: frozenset[str] = IDEMPOTENT_METHODS


class RetryTransport(httpx.AsyncBaseTransport):
    """Transport that retries failed calls with exponential backoff.

    Args:
        wrapped_transport: The underlying transport to wrap
        options: Retry configuration (default: ``RetryOptions()``)
    """

    def __init__(
        self,
        *,
        wrapped_transport: httpx.AsyncBaseTransport,
        options: RetryOptions | None = None,
    ) -> None:
        self._wrapped_transport = wrapped_transport
        self.options = options or RetryOptions()

    async def aclose(self) -> None:
        """Close the wrapped transport."""
        await self._wrapped_transport.aclose()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Handle request, retrying on exceptions and retryable status codes.

        Args:
            request: The HTTP request to send

        Returns:
            HTTP response (the last one received when retries run out)
        """
        max_retries = self._max_retries(request)
        retries = 0

        while True:
            try:
                response = await self._wrapped_transport.handle_async_request(request)
            except Exception as e:
                # Network errors, timeouts, etc.
                if retries >= max_retries or request.method not in self.options.retry_methods:
                    raise

                retries += 1
                delay = self._calculate_backoff_delay(retries)

                logger.warning(
                    f"Request {request.method} {request.url} failed with {e}, "
                    f"retrying in {delay}s (attempt {retries}/{max_retries})"
                )

                await asyncio.sleep(delay)
                continue

            if not self._should_retry(request, response, retries, max_retries):
                # Success or non-retryable error
                return response

            retries += 1
            delay = self._calculate_backoff_delay(retries)

            logger.warning(
                f"Request {request.method} {request.url} failed with {response.status_code}, "
                f"retrying in {delay}s (attempt {retries}/{max_retries})"
            )

            # Release the connection of the response we are discarding
            await response.aclose()
            await asyncio.sleep(delay)

    def _max_retries(self, request: httpx.Request) -> int:
        override = request.extensions.get(RETRY_TIMES_EXTENSION)
        if override is None:
            return self.options.times
        return max(int(override), 0)

    def _should_retry(
        self,
        request: httpx.Request,
        response: httpx.Response,
        current_retries: int,
        max_retries: int,
    ) -> bool:
        """Determine if request should be retried.

        Args:
            request: The HTTP request
            response: The HTTP response received
            current_retries: Number of retries attempted so far
            max_retries: Number of retries allowed for this request

        Returns:
            True if should retry, False otherwise
        """
        if current_retries >= max_retries:
            return False

        if request.method not in self.options.retry_methods:
            return False

        return response.status_code in self.options.retry_status_codes

    def _calculate_backoff_delay(self, retry_number: int) -> float:
        """Calculate exponential backoff delay with max_backoff cap.

        Uses formula: min(backoff_factor * (2 ** (retry_number - 1)), max_backoff)

        Args:
            retry_number: Current retry attempt (1-indexed)

        Returns:
            Delay in seconds
        """
        delay = self.options.backoff_factor * (2 ** (retry_number - 1))
        return min(delay, self.options.max_backoff)
