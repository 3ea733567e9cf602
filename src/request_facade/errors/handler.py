"""Error handling utilities for failed HTTP calls."""

import httpx

from request_facade.errors.models import SerializedError

# Message that marks a call skipped because its token was rejected
INVALID_TOKEN_MESSAGE = "Invalid token"


def serialize_error(error: BaseException | None) -> SerializedError | None:
    """Extract the response details of a failed call.

    Walks the exception chain (``__cause__`` then ``__context__``) looking for
    an ``httpx.HTTPStatusError``, so both the facade's normalized
    ``TransportFailureError`` and raw httpx errors are accepted.

    Args:
        error: Exception raised by a failed call

    Returns:
        SerializedError when a response was received, None otherwise
        (network failure, timeout, missing URL, ...)
    """
    seen: set[int] = set()
    current = error

    while current is not None and id(current) not in seen:
        seen.add(id(current))

        if isinstance(current, httpx.HTTPStatusError):
            return SerializedError.from_response(current.response)

        current = current.__cause__ or current.__context__

    return None


def is_token_error(error: BaseException) -> bool:
    """Return True when the error message is exactly the invalid-token sentinel."""
    return str(error) == INVALID_TOKEN_MESSAGE
