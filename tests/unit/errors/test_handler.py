"""Tests for error handling utilities."""

import httpx
import pytest

from request_facade.errors.exceptions import MissingURLError, TransportFailureError
from request_facade.errors.handler import INVALID_TOKEN_MESSAGE, is_token_error, serialize_error


def status_error(response: httpx.Response) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://api.example.com/items")
    response.request = request
    return httpx.HTTPStatusError("failed", request=request, response=response)


def normalized(error: Exception) -> TransportFailureError:
    """Re-raise the error the way HttpClient does and return the result."""
    try:
        try:
            raise error
        except Exception as exc:
            raise TransportFailureError(str(exc)) from exc
    except TransportFailureError as wrapped:
        return wrapped


@pytest.mark.unit
def test_serialize_error_from_status_error():
    error = status_error(httpx.Response(422, json={"errors": ["name is required"]}))

    details = serialize_error(error)

    assert details is not None
    assert details.status == 422
    assert details.status_text == "Unprocessable Entity"
    assert details.data == {"errors": ["name is required"]}


@pytest.mark.unit
def test_serialize_error_follows_cause_chain():
    error = normalized(status_error(httpx.Response(503, text="down")))

    details = serialize_error(error)

    assert details is not None
    assert details.status == 503
    assert details.data == "down"


@pytest.mark.unit
def test_serialize_error_without_response_returns_none():
    request = httpx.Request("GET", "https://api.example.com/items")
    error = normalized(httpx.ConnectError("Connection refused", request=request))

    assert serialize_error(error) is None


@pytest.mark.unit
@pytest.mark.parametrize(
    "error",
    [None, MissingURLError('HttpClient Error: "url" must be defined'), ValueError("boom")],
)
def test_serialize_error_returns_none_for_other_errors(error):
    assert serialize_error(error) is None


@pytest.mark.unit
def test_serialize_error_stops_on_cycles():
    first = ValueError("first")
    second = ValueError("second")
    first.__cause__ = second
    second.__cause__ = first

    assert serialize_error(first) is None


@pytest.mark.unit
def test_is_token_error_matches_exact_message():
    assert is_token_error(Exception(INVALID_TOKEN_MESSAGE))
    assert is_token_error(TransportFailureError("Invalid token"))


@pytest.mark.unit
@pytest.mark.parametrize("message", ["invalid token", "Invalid token!", "Invalid token: expired", ""])
def test_is_token_error_rejects_other_messages(message):
    assert not is_token_error(Exception(message))
