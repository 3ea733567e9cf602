"""Factory for the transport stack used by HttpClient."""

from collections.abc import Callable, Sequence

import httpx

from request_facade.transport.cache import CacheOptions, CachingTransport
from request_facade.transport.retry import RetryOptions, RetryTransport

# A stage wraps a transport and returns the wrapping transport
TransportStage = Callable[[httpx.AsyncBaseTransport], httpx.AsyncBaseTransport]


def apply_stages(
    base_transport: httpx.AsyncBaseTransport,
    stages: Sequence[TransportStage],
) -> httpx.AsyncBaseTransport:
    """Wrap the base transport with each stage in order.

    The first stage wraps the base transport, the last stage ends up
    outermost and sees each request first.

    Args:
        base_transport: Transport performing the actual network call
        stages: Wrapping stages, innermost first

    Returns:
        The outermost transport
    """
    transport = base_transport
    for stage in stages:
        transport = stage(transport)
    return transport


def create_transport_stack(
    *,
    base_transport: httpx.AsyncBaseTransport | None = None,
    enable_cache: bool = False,
    cache_options: CacheOptions | None = None,
    enable_retry: bool = False,
    retry_options: RetryOptions | None = None,
) -> httpx.AsyncBaseTransport:
    """Create the transport stack: base, then caching, then retrying.

    Retry wraps the cache so a retried call can still be answered from cache.

    Args:
        base_transport: Transport performing the network call
            (default: ``httpx.AsyncHTTPTransport()``)
        enable_cache: Wrap the base transport with CachingTransport
        cache_options: Options passed to CachingTransport
        enable_retry: Wrap the (cached) transport with RetryTransport
        retry_options: Options passed to RetryTransport

    Returns:
        The outermost transport

    Example:
        ```python
        transport = create_transport_stack(
            enable_cache=True,
            enable_retry=True,
            retry_options=RetryOptions(times=3),
        )
        client = httpx.AsyncClient(transport=transport)
        ```
    """
    stages: list[TransportStage] = []

    if enable_cache:
        stages.append(lambda inner: CachingTransport(wrapped_transport=inner, options=cache_options))

    if enable_retry:
        stages.append(lambda inner: RetryTransport(wrapped_transport=inner, options=retry_options))

    return apply_stages(base_transport or httpx.AsyncHTTPTransport(), stages)
