"""HttpClient: an httpx.AsyncClient wrapper with logging and token injection.

Every verb method resolves the request headers (injecting a bearer token when
a token resolver is configured) and sends the request through the wrapped
``httpx.AsyncClient``. Two hooks are registered on that client:

- a request hook, emitting an ``HTTP Request`` event and rejecting requests
  without a target URL before they reach the transport,
- a response hook, turning 4xx/5xx responses into ``httpx.HTTPStatusError``
  (unless ``raise_for_status`` is disabled).

Failed calls emit an ``HTTP Response Error`` event (or ``HTTP call skipped due
to a token error`` when the failure message is ``"Invalid token"``) and are
re-raised as ``TransportFailureError`` carrying the original message.

Each call gets its own correlation id, stored in the request's
``extensions["request_id"]``, so the events of concurrent calls never mix.

Example:
    ```python
    from request_facade import HttpClient
    from request_facade.auth import env_token_resolver

    async with HttpClient(
        token_resolver=env_token_resolver("API_TOKEN"),
        enable_cache=True,
        enable_retry=True,
    ) as client:
        response = await client.get("https://api.example.com/items")
        items = response.json()
    ```
"""

import inspect
from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from request_facade.config import HttpClientOptions
from request_facade.errors.exceptions import (
    ConfigurationConflictError,
    HttpClientError,
    MissingURLError,
    RequestBuildError,
    TransportFailureError,
)
from request_facade.errors.handler import is_token_error
from request_facade.events import (
    REQUEST_ERROR_TITLE,
    REQUEST_TITLE,
    RESPONSE_ERROR_TITLE,
    TOKEN_ERROR_TITLE,
    EventLogger,
    LogEvent,
    LoggingEventLogger,
)
from request_facade.transport.factory import create_transport_stack

# Request extension carrying the correlation id of a call
REQUEST_ID_EXTENSION = "request_id"

# Keyword arguments consumed by httpx.AsyncClient.send rather than build_request
_SEND_KWARGS = ("auth", "follow_redirects")

MISSING_URL_MESSAGE = 'HttpClient Error: "url" must be defined'

_AUTHORIZATION = "Authorization"

HeaderTypes = httpx.Headers | Mapping[str, str] | Sequence[tuple[str, str]]


class HttpClient:
    """Wrapper around ``httpx.AsyncClient`` with request logging and bearer token injection.

    Args:
        options: Client options (default: ``HttpClientOptions()``)
        **overrides: Individual options replacing the ones in ``options``

    Raises:
        TypeError: An unknown option was given.
    """

    def __init__(self, options: HttpClientOptions | None = None, **overrides: Any) -> None:
        self.config = (options or HttpClientOptions()).with_overrides(**overrides)
        self._event_logger: EventLogger = self.config.event_logger or LoggingEventLogger()
        self._owns_client = self.config.client is None

        if self.config.client is not None:
            self.client = self.config.client
        else:
            transport = create_transport_stack(
                base_transport=self.config.transport,
                enable_cache=self.config.enable_cache,
                cache_options=self.config.cache_options,
                enable_retry=self.config.enable_retry,
                retry_options=self.config.retry_options,
            )
            self.client = httpx.AsyncClient(
                transport=transport,
                base_url=self.config.base_url,
                timeout=self.config.timeout,
            )

        self.client.event_hooks["request"].append(self._on_request)
        self.client.event_hooks["response"].append(self._on_response)

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the wrapped client, unless it was supplied by the caller."""
        if self._owns_client:
            await self.client.aclose()

    async def create_headers_with_resolved_token(self, headers: HeaderTypes | None = None) -> HeaderTypes:
        """Add the resolved bearer token to the headers.

        Args:
            headers: Headers supplied by the caller, as a mapping or a list of
                (name, value) pairs

        Returns:
            The headers unchanged when no token resolver is configured, otherwise
            a new ``httpx.Headers`` with ``Authorization: Bearer <token>`` added.

        Raises:
            ConfigurationConflictError: The headers already contain an
                Authorization header and a token resolver is configured.
        """
        if headers is None:
            headers = {}

        token_resolver = self.config.token_resolver
        if token_resolver is None:
            return headers

        resolved = httpx.Headers(headers)
        if _AUTHORIZATION in resolved:
            raise ConfigurationConflictError(
                "Authorization header already specified, please create a new HttpClient "
                "with a different (or without a) token_resolver"
            )

        token = token_resolver()
        if inspect.isawaitable(token):
            token = await token

        resolved[_AUTHORIZATION] = f"Bearer {token}"
        return resolved

    async def get(self, url: httpx.URL | str, **kwargs: Any) -> httpx.Response:
        """Get from the given url, asking for JSON unless an Accept header is given.

        Bearer token is automatically injected if a token resolver was configured.
        """
        headers = httpx.Headers(kwargs.pop("headers", None))
        if "accept" not in headers:
            headers["Accept"] = "application/json"
        return await self.request("GET", url, headers=headers, **kwargs)

    async def post(self, url: httpx.URL | str, data: Any = None, **kwargs: Any) -> httpx.Response:
        """Post data to the given url.

        Bearer token is automatically injected if a token resolver was configured.
        """
        return await self.request("POST", url, **_body_kwargs(data), **kwargs)

    async def put(self, url: httpx.URL | str, data: Any = None, **kwargs: Any) -> httpx.Response:
        """Put data to the given url.

        Bearer token is automatically injected if a token resolver was configured.
        """
        return await self.request("PUT", url, **_body_kwargs(data), **kwargs)

    async def patch(self, url: httpx.URL | str, data: Any = None, **kwargs: Any) -> httpx.Response:
        """Patch data on the given url.

        Bearer token is automatically injected if a token resolver was configured.
        """
        return await self.request("PATCH", url, **_body_kwargs(data), **kwargs)

    async def delete(self, url: httpx.URL | str, **kwargs: Any) -> httpx.Response:
        """Delete the resource on the given url.

        Bearer token is automatically injected if a token resolver was configured.
        """
        return await self.request("DELETE", url, **kwargs)

    async def head(self, url: httpx.URL | str, **kwargs: Any) -> httpx.Response:
        """Make a HEAD call to the given url.

        Bearer token is automatically injected if a token resolver was configured.
        """
        return await self.request("HEAD", url, **kwargs)

    async def options(self, url: httpx.URL | str, **kwargs: Any) -> httpx.Response:
        """Make an OPTIONS call to the given url.

        Bearer token is automatically injected if a token resolver was configured.
        """
        return await self.request("OPTIONS", url, **kwargs)

    async def request(self, method: str, url: httpx.URL | str | None, **kwargs: Any) -> httpx.Response:
        """Resolve headers, then build and send the request through the wrapped client.

        Args:
            method: HTTP method
            url: Target URL, relative to ``base_url`` when one is configured
            **kwargs: Per-call httpx options (headers, params, json, content,
                files, cookies, timeout, extensions, auth, follow_redirects)

        Returns:
            The httpx response, unmodified

        Raises:
            ConfigurationConflictError: Authorization header given while a
                token resolver is configured.
            MissingURLError: The request has no target URL.
            RequestBuildError: The request could not be built.
            TransportFailureError: The call failed.
        """
        headers = await self.create_headers_with_resolved_token(kwargs.pop("headers", None))

        request_id = self.config.request_id_factory()
        extensions = {**(kwargs.pop("extensions", None) or {}), REQUEST_ID_EXTENSION: request_id}
        send_kwargs = {name: kwargs.pop(name) for name in _SEND_KWARGS if name in kwargs}

        if url is None or str(url) == "":
            # Checked before base_url is merged in
            self._emit(LogEvent(title=REQUEST_TITLE, level="INFO", request_id=request_id, method=method.upper()))
            error = MissingURLError(MISSING_URL_MESSAGE)
            self._emit_failure(request_id, error)
            raise error

        try:
            request = self.client.build_request(
                method,
                url,
                headers=headers,
                extensions=extensions,
                **kwargs,
            )
        except Exception as exc:
            self._emit(
                LogEvent(
                    title=REQUEST_ERROR_TITLE,
                    level="WARN",
                    request_id=request_id,
                    exception=exc,
                )
            )
            raise RequestBuildError(str(exc)) from exc

        try:
            return await self.client.send(request, **send_kwargs)
        except MissingURLError as exc:
            self._emit_failure(request.extensions.get(REQUEST_ID_EXTENSION), exc)
            raise
        except HttpClientError:
            raise
        except Exception as exc:
            self._emit_failure(request.extensions.get(REQUEST_ID_EXTENSION), exc)
            raise TransportFailureError(str(exc)) from exc

    async def _on_request(self, request: httpx.Request) -> None:
        """Log the outgoing request and reject it when it has no target URL."""
        request_id = request.extensions.get(REQUEST_ID_EXTENSION)
        if request_id is None:
            # Sent through the wrapped client directly
            request_id = self.config.request_id_factory()
            request.extensions[REQUEST_ID_EXTENSION] = request_id

        self._emit(
            LogEvent(
                title=REQUEST_TITLE,
                level="INFO",
                request_id=request_id,
                method=request.method,
                url=str(request.url),
            )
        )

        if not request.url.host:
            raise MissingURLError(MISSING_URL_MESSAGE)

    async def _on_response(self, response: httpx.Response) -> None:
        if self.config.raise_for_status and response.is_error:
            # Keep the body available to serialize_error
            await response.aread()
            response.raise_for_status()

    def _emit(self, event: LogEvent) -> None:
        self._event_logger.emit(event)

    def _emit_failure(self, request_id: str | None, exc: Exception) -> None:
        title = TOKEN_ERROR_TITLE if is_token_error(exc) else RESPONSE_ERROR_TITLE
        self._emit(LogEvent(title=title, level="INFO", request_id=request_id, exception=exc))


def _body_kwargs(data: Any) -> dict[str, Any]:
    """Map a request body to the matching httpx keyword argument."""
    if data is None:
        return {}
    if isinstance(data, (str, bytes)):
        return {"content": data}
    return {"json": data}
