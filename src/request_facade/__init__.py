"""Request Facade - httpx wrapper with request logging, token injection, caching and retries.

This library wraps an ``httpx.AsyncClient`` and adds:
- Structured request/failure log events with a per-request correlation id
- Bearer token injection through a pluggable token resolver
- Optional response caching and retrying as composable transport layers
- Serialization of failed responses

Example:
    ```python
    from request_facade import HttpClient
    from request_facade.auth import env_token_resolver

    async with HttpClient(
        token_resolver=env_token_resolver("API_TOKEN"),
        enable_retry=True,
    ) as client:
        response = await client.get("https://api.example.com/items")
    ```
"""

from request_facade.client import REQUEST_ID_EXTENSION, HttpClient
from request_facade.config import HttpClientOptions
from request_facade.errors import (
    ConfigurationConflictError,
    HttpClientError,
    MissingURLError,
    RequestBuildError,
    SerializedError,
    TransportFailureError,
    serialize_error,
)
from request_facade.events import CallbackEventLogger, EventLogger, LogEvent, LoggingEventLogger
from request_facade.transport import CacheOptions, RetryOptions

__version__ = "0.1.0"

__all__ = [
    "REQUEST_ID_EXTENSION",
    "CacheOptions",
    "CallbackEventLogger",
    "ConfigurationConflictError",
    "EventLogger",
    "HttpClient",
    "HttpClientError",
    "HttpClientOptions",
    "LogEvent",
    "LoggingEventLogger",
    "MissingURLError",
    "RequestBuildError",
    "RetryOptions",
    "SerializedError",
    "TransportFailureError",
    "__version__",
    "serialize_error",
]
