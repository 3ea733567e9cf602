"""Transport layers composed around the base httpx transport.

Transport layers wrap an ``httpx.AsyncBaseTransport`` to add behavior
without changing how requests are issued:

Modules:
    cache: In-memory caching of successful GET responses
    retry: Retry with exponential backoff
    factory: Builds the base -> cache -> retry stack used by HttpClient

Example:
    ```python
    from request_facade.transport import create_transport_stack

    transport = create_transport_stack(enable_cache=True, enable_retry=True)
    ```
"""

from request_facade.transport.cache import CacheOptions, CachingTransport
from request_facade.transport.factory import TransportStage, apply_stages, create_transport_stack
from request_facade.transport.retry import RetryOptions, RetryTransport

__all__ = [
    "CacheOptions",
    "CachingTransport",
    "RetryOptions",
    "RetryTransport",
    "TransportStage",
    "apply_stages",
    "create_transport_stack",
]
