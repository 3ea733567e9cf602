"""Pytest configuration and shared fixtures for request-facade tests."""

import itertools

import httpx
import pytest

from request_facade.testing import CountingHandler, RecordingEventLogger


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear test-related environment variables before each test.

    This prevents test pollution when testing credential and option loading.
    """
    import os

    test_prefixes = ("TEST_", "API_", "HTTP_CLIENT_")

    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in test_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield


@pytest.fixture
def events():
    """Event logger collecting the events emitted by HttpClient."""
    return RecordingEventLogger()


@pytest.fixture
def json_handler():
    """Handler answering every request with ``{"a": 1}``."""
    return CountingHandler(lambda request: httpx.Response(200, json={"a": 1}))


@pytest.fixture
def request_ids():
    """Deterministic correlation id factory: req-1, req-2, ..."""
    counter = itertools.count(1)
    return lambda: f"req-{next(counter)}"
