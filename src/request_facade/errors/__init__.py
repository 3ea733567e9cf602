"""Error taxonomy and failed-response serialization for HttpClient."""

from request_facade.errors.exceptions import (
    ConfigurationConflictError,
    HttpClientError,
    MissingURLError,
    RequestBuildError,
    TransportFailureError,
)
from request_facade.errors.handler import INVALID_TOKEN_MESSAGE, is_token_error, serialize_error
from request_facade.errors.models import SerializedError

__all__ = [
    "INVALID_TOKEN_MESSAGE",
    "ConfigurationConflictError",
    "HttpClientError",
    "MissingURLError",
    "RequestBuildError",
    "SerializedError",
    "TransportFailureError",
    "is_token_error",
    "serialize_error",
]
