"""Exceptions raised by the request facade."""


class HttpClientError(Exception):
    """Base exception for errors raised by HttpClient."""

    pass


class ConfigurationConflictError(HttpClientError):
    """Raised when a token resolver and an explicit Authorization header are both given.

    This is a programming error: it is raised before any network activity and
    is never retried.
    """

    pass


class MissingURLError(HttpClientError):
    """Raised when an outgoing request has no target URL."""

    pass


class RequestBuildError(HttpClientError):
    """Raised when a request cannot be built (invalid URL, header value, ...).

    Only the original message is kept; the original exception is available
    as ``__cause__``.
    """

    pass


class TransportFailureError(HttpClientError):
    """Raised when the network call or one of the transport layers fails.

    Only the original message is kept. Use
    :func:`request_facade.errors.serialize_error` to get the status code and
    body of a failed response.
    """

    pass
