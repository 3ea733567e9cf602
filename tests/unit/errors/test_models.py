"""Tests for the serialized error model."""

import httpx
import pytest

from request_facade.errors.models import SerializedError


@pytest.mark.unit
def test_from_response_with_json_body():
    response = httpx.Response(404, json={"message": "not found"})

    error = SerializedError.from_response(response)

    assert error.status == 404
    assert error.status_text == "Not Found"
    assert error.data == {"message": "not found"}


@pytest.mark.unit
def test_from_response_with_text_body():
    response = httpx.Response(500, text="Internal failure")

    error = SerializedError.from_response(response)

    assert error.status == 500
    assert error.status_text == "Internal Server Error"
    assert error.data == "Internal failure"


@pytest.mark.unit
def test_from_response_with_empty_body():
    error = SerializedError.from_response(httpx.Response(204))

    assert error.data is None


@pytest.mark.unit
def test_to_dict_uses_status_text_key():
    error = SerializedError(status=401, status_text="Unauthorized", data={"message": "no"})

    assert error.to_dict() == {
        "status": 401,
        "statusText": "Unauthorized",
        "data": {"message": "no"},
    }
