"""Configuration of HttpClient.

Options are set once, when the client is created. They can be given as an
``HttpClientOptions`` instance, as keyword arguments to ``HttpClient``, or
loaded from the environment:

```python
from request_facade import HttpClient, HttpClientOptions

# HTTP_CLIENT_ENABLE_RETRY=true HTTP_CLIENT_RETRY_TIMES=3
client = HttpClient(HttpClientOptions.from_env())
```

| Variable (default prefix `HTTP_CLIENT_`) | Option |
|------------------------------------------|--------|
| `ENABLE_CACHE` | `enable_cache` |
| `CACHE_MAX_AGE` | `cache_options.max_age` |
| `ENABLE_RETRY` | `enable_retry` |
| `RETRY_TIMES` | `retry_options.times` |
| `BASE_URL` | `base_url` |
| `TIMEOUT` | `timeout` |
"""

import uuid
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any

import httpx

from request_facade.auth.credentials import CredentialResolver
from request_facade.auth.tokens import TokenResolver
from request_facade.events import EventLogger
from request_facade.transport.cache import CacheOptions
from request_facade.transport.retry import RetryOptions

DEFAULT_ENV_PREFIX = "HTTP_CLIENT_"

_TRUE_VALUES = frozenset(["1", "true", "yes", "on"])
_FALSE_VALUES = frozenset(["0", "false", "no", "off", ""])


def default_request_id() -> str:
    """Return a new random correlation id."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class HttpClientOptions:
    """Options of HttpClient.

    Attributes:
        client: A pre-built ``httpx.AsyncClient``. When given, the transport
            options below (cache, retry, transport, base_url, timeout) are
            ignored and the caller keeps ownership of the client.
        token_resolver: Callable returning the bearer token to inject into
            every request.
        event_logger: Sink for the structured request events
            (default: ``LoggingEventLogger``).
        enable_cache: Wrap the base transport with CachingTransport.
        cache_options: Options of CachingTransport.
        enable_retry: Wrap the (cached) transport with RetryTransport.
        retry_options: Options of RetryTransport.
        transport: Base transport performing the network call
            (default: ``httpx.AsyncHTTPTransport``).
        base_url: Base URL of the built client.
        timeout: Timeout of the built client, in seconds or as ``httpx.Timeout``.
        raise_for_status: Turn 4xx/5xx responses into failures (default: True).
        request_id_factory: Produces the correlation id of each request.
    """

    client: httpx.AsyncClient | None = None
    token_resolver: TokenResolver | None = None
    event_logger: EventLogger | None = None
    enable_cache: bool = False
    cache_options: CacheOptions | None = None
    enable_retry: bool = False
    retry_options: RetryOptions | None = None
    transport: httpx.AsyncBaseTransport | None = None
    base_url: str = ""
    timeout: float | httpx.Timeout | None = 5.0
    raise_for_status: bool = True
    request_id_factory: Callable[[], str] = default_request_id

    def with_overrides(self, **overrides: Any) -> "HttpClientOptions":
        """Return a copy with the given options replaced."""
        if not overrides:
            return self
        return replace(self, **overrides)

    @classmethod
    def from_env(
        cls,
        prefix: str = DEFAULT_ENV_PREFIX,
        *,
        resolver: CredentialResolver | None = None,
        **overrides: Any,
    ) -> "HttpClientOptions":
        """Load options from environment variables (and the .env file).

        Args:
            prefix: Prefix of the variable names (default: ``HTTP_CLIENT_``)
            resolver: CredentialResolver to read values with
            **overrides: Options taking precedence over the environment

        Returns:
            HttpClientOptions

        Raises:
            ValueError: A variable holds a value of the wrong type.
        """
        credentials = resolver or CredentialResolver()

        def read(name: str) -> str | None:
            return credentials.resolve(env_var_name=f"{prefix}{name}")

        values: dict[str, Any] = {}

        enable_cache = _parse_bool(f"{prefix}ENABLE_CACHE", read("ENABLE_CACHE"))
        if enable_cache is not None:
            values["enable_cache"] = enable_cache

        cache_max_age = read("CACHE_MAX_AGE")
        if cache_max_age is not None:
            values["cache_options"] = CacheOptions(max_age=_parse_number(f"{prefix}CACHE_MAX_AGE", cache_max_age))

        enable_retry = _parse_bool(f"{prefix}ENABLE_RETRY", read("ENABLE_RETRY"))
        if enable_retry is not None:
            values["enable_retry"] = enable_retry

        retry_times = read("RETRY_TIMES")
        if retry_times is not None:
            values["retry_options"] = RetryOptions(times=int(_parse_number(f"{prefix}RETRY_TIMES", retry_times)))

        base_url = read("BASE_URL")
        if base_url is not None:
            values["base_url"] = base_url

        timeout = read("TIMEOUT")
        if timeout is not None:
            values["timeout"] = _parse_number(f"{prefix}TIMEOUT", timeout)

        values.update(overrides)
        return cls(**values)


def _parse_bool(name: str, raw: str | None) -> bool | None:
    if raw is None:
        return None
    normalized = raw.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _parse_number(name: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
