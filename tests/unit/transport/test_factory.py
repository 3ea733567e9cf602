"""Tests for the transport stack factory."""

import httpx
import pytest

from request_facade.transport import (
    CacheOptions,
    CachingTransport,
    RetryOptions,
    RetryTransport,
    apply_stages,
    create_transport_stack,
)


def ok(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200)


@pytest.mark.unit
def test_stack_without_layers_is_the_base_transport():
    base = httpx.MockTransport(ok)

    assert create_transport_stack(base_transport=base) is base


@pytest.mark.unit
def test_default_base_transport_is_httpx_transport():
    assert isinstance(create_transport_stack(), httpx.AsyncHTTPTransport)


@pytest.mark.unit
def test_cache_wraps_base_transport():
    base = httpx.MockTransport(ok)
    options = CacheOptions(max_age=5)

    stack = create_transport_stack(base_transport=base, enable_cache=True, cache_options=options)

    assert isinstance(stack, CachingTransport)
    assert stack._wrapped_transport is base
    assert stack.options is options


@pytest.mark.unit
def test_retry_wraps_cache():
    base = httpx.MockTransport(ok)
    options = RetryOptions(times=4)

    stack = create_transport_stack(
        base_transport=base,
        enable_cache=True,
        enable_retry=True,
        retry_options=options,
    )

    assert isinstance(stack, RetryTransport)
    assert stack.options is options
    assert isinstance(stack._wrapped_transport, CachingTransport)
    assert stack._wrapped_transport._wrapped_transport is base


@pytest.mark.unit
def test_retry_alone_wraps_base_transport():
    base = httpx.MockTransport(ok)

    stack = create_transport_stack(base_transport=base, enable_retry=True)

    assert isinstance(stack, RetryTransport)
    assert stack._wrapped_transport is base


@pytest.mark.unit
def test_apply_stages_wraps_innermost_first():
    base = httpx.MockTransport(ok)
    applied = []

    def stage(name):
        def wrap(inner):
            applied.append((name, inner))
            return RetryTransport(wrapped_transport=inner)

        return wrap

    outer = apply_stages(base, [stage("first"), stage("second")])

    assert applied[0] == ("first", base)
    assert applied[1][0] == "second"
    assert outer._wrapped_transport is applied[1][1]


@pytest.mark.unit
async def test_closing_stack_closes_base_transport():
    closed = []

    class ClosingTransport(httpx.MockTransport):
        async def aclose(self) -> None:
            closed.append(True)

    stack = create_transport_stack(
        base_transport=ClosingTransport(ok),
        enable_cache=True,
        enable_retry=True,
    )

    await stack.aclose()

    assert closed == [True]
