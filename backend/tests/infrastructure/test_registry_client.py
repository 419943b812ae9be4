"""Registry client — timeout-only retry, header wiring and error mapping.

Invariants:
    - Timeouts retried up to 3 attempts total, then GATEWAY_UNAVAILABLE
    - Connection errors raised immediately, never retried
    - Received responses (any status) never retried

Design Decisions:
    - httpx.MockTransport plays scripted responses; retry delay set to 0
    - Delay tests record asyncio.sleep calls instead of waiting
"""

import asyncio

import httpx
import pytest

import vehicle_relay.infrastructure.registry_client as registry_module
from vehicle_relay.core.domain_types import ErrorKind, UpstreamFailure, UpstreamSuccess
from vehicle_relay.core.errors import UpstreamConnectionError
from vehicle_relay.infrastructure.registry_client import (
    ResilientRegistryClient,
    close_registry_client,
    get_registry_client,
    init_registry_client,
)

REGISTRY_URL = "https://registry.test/api/rc-vehicle/search-data"


# --- Request shape ------------------------------------------------------------

async def test_sends_rapidapi_headers_and_query(registry, upstream):
    await registry.lookup("KL18AB1234")

    assert len(upstream.calls) == 1
    request = upstream.calls[0]
    assert request.method == "GET"
    assert request.headers["X-RapidAPI-Key"] == "test-key"
    assert request.headers["X-RapidAPI-Host"] == "registry.test"
    assert str(request.url).startswith(REGISTRY_URL)
    assert request.url.params["vehicle_no"] == "KL18AB1234"


async def test_registration_number_is_url_encoded(registry, upstream):
    await registry.lookup("KL 18/AB&x=1")

    request = upstream.calls[0]
    assert request.url.params["vehicle_no"] == "KL 18/AB&x=1"
    assert "x" not in request.url.params
    assert b"&x=1" not in request.url.query


# --- Outcomes -----------------------------------------------------------------

async def test_success_returns_raw_body(registry, upstream):
    upstream.queue(httpx.Response(200, text='{"rc_maker_model": "MT 15"}'))

    result = await registry.lookup("KL18AB1234")

    assert result == UpstreamSuccess(raw_body='{"rc_maker_model": "MT 15"}', http_status=200)


async def test_error_status_is_classified_not_retried(registry, upstream):
    upstream.queue(httpx.Response(500, text="upstream broke"))

    result = await registry.lookup("KL18AB1234")

    assert len(upstream.calls) == 1
    assert isinstance(result, UpstreamFailure)
    assert result.kind is ErrorKind.UPSTREAM_ERROR
    assert result.http_status == 500
    assert result.detail == "upstream broke"


async def test_redirect_is_followed_and_final_response_classified(registry, upstream):
    upstream.queue(
        httpx.Response(301, headers={"Location": "https://registry.test/moved"}),
        httpx.Response(404, text="no record"),
    )

    result = await registry.lookup("KL18AB1234")

    assert len(upstream.calls) == 2
    assert result.kind is ErrorKind.NOT_FOUND
    assert result.http_status == 404


async def test_upstream_504_is_not_retried(registry, upstream):
    upstream.queue(httpx.Response(504))

    result = await registry.lookup("KL18AB1234")

    assert len(upstream.calls) == 1
    assert result.kind is ErrorKind.GATEWAY_UNAVAILABLE
    assert result.http_status == 504


# --- Retry policy -------------------------------------------------------------

async def test_two_timeouts_then_success(registry, upstream):
    upstream.queue(
        httpx.ReadTimeout,
        httpx.ConnectTimeout,
        httpx.Response(200, text='{"rc_maker_model": "METEOR 350"}'),
    )

    result = await registry.lookup("KL18AB1234")

    assert len(upstream.calls) == 3
    assert isinstance(result, UpstreamSuccess)


async def test_three_timeouts_exhaust_retries(registry, upstream):
    upstream.queue(httpx.ReadTimeout, httpx.ReadTimeout, httpx.ReadTimeout, httpx.Response(200))

    result = await registry.lookup("KL18AB1234")

    assert len(upstream.calls) == 3
    assert result == UpstreamFailure(kind=ErrorKind.GATEWAY_UNAVAILABLE)


async def test_connection_error_is_not_retried(registry, upstream):
    upstream.queue(httpx.ConnectError, httpx.Response(200))

    with pytest.raises(UpstreamConnectionError) as exc_info:
        await registry.lookup("KL18AB1234")

    assert len(upstream.calls) == 1
    assert exc_info.value.message.startswith("Error calling vehicle API: ")


async def test_transport_error_after_timeout_stops_retrying(registry, upstream):
    upstream.queue(httpx.ReadTimeout, httpx.RemoteProtocolError, httpx.Response(200))

    with pytest.raises(UpstreamConnectionError):
        await registry.lookup("KL18AB1234")

    assert len(upstream.calls) == 2


@pytest.fixture
def sleeps(monkeypatch):
    """Record inter-attempt delays instead of sleeping."""
    recorded = []

    async def fake_sleep(delay):
        recorded.append(delay)

    monkeypatch.setattr(registry_module.asyncio, "sleep", fake_sleep)
    return recorded


@pytest.fixture
async def delayed_registry(upstream):
    client = ResilientRegistryClient(
        api_key="k", api_host="h", base_url=REGISTRY_URL,
        max_retries=2, retry_delay_seconds=3.0,
        transport=httpx.MockTransport(upstream.handle),
    )
    yield client
    await client.aclose()


async def test_fixed_delay_between_timed_out_attempts(delayed_registry, upstream, sleeps):
    upstream.queue(httpx.ReadTimeout, httpx.ReadTimeout, httpx.ReadTimeout)

    result = await delayed_registry.lookup("KL18AB1234")

    assert result.kind is ErrorKind.GATEWAY_UNAVAILABLE
    assert sleeps == [3.0, 3.0]


async def test_delay_before_each_retry_that_succeeds(delayed_registry, upstream, sleeps):
    upstream.queue(httpx.ReadTimeout, httpx.ConnectTimeout, httpx.Response(200, text="{}"))

    result = await delayed_registry.lookup("KL18AB1234")

    assert isinstance(result, UpstreamSuccess)
    assert sleeps == [3.0, 3.0]


@pytest.mark.parametrize("first", [httpx.Response(200, text="{}"), httpx.Response(500)])
async def test_no_delay_when_a_response_arrives(delayed_registry, upstream, sleeps, first):
    upstream.queue(first)

    await delayed_registry.lookup("KL18AB1234")

    assert sleeps == []


async def test_no_delay_on_connection_error(delayed_registry, upstream, sleeps):
    upstream.queue(httpx.ConnectError)

    with pytest.raises(UpstreamConnectionError):
        await delayed_registry.lookup("KL18AB1234")

    assert sleeps == []


async def test_attempt_ceiling_counts_as_timeout():
    calls = []

    async def slow_then_fast(request):
        calls.append(request)
        if len(calls) == 1:
            await asyncio.sleep(1)
        return httpx.Response(200, text="{}")

    client = ResilientRegistryClient(
        api_key="k", api_host="h", base_url=REGISTRY_URL,
        timeout_seconds=0.05, max_retries=2, retry_delay_seconds=0,
        transport=httpx.MockTransport(slow_then_fast),
    )
    try:
        result = await client.lookup("KL18AB1234")
    finally:
        await client.aclose()

    assert len(calls) == 2
    assert isinstance(result, UpstreamSuccess)


async def test_zero_retries_makes_one_attempt(upstream):
    upstream.queue(httpx.ReadTimeout, httpx.Response(200))
    client = ResilientRegistryClient(
        api_key="k", api_host="h", base_url=REGISTRY_URL,
        max_retries=0, retry_delay_seconds=0,
        transport=httpx.MockTransport(upstream.handle),
    )
    try:
        result = await client.lookup("KL18AB1234")
    finally:
        await client.aclose()

    assert len(upstream.calls) == 1
    assert result.kind is ErrorKind.GATEWAY_UNAVAILABLE


# --- Lifecycle ----------------------------------------------------------------

def test_dependency_requires_initialization(monkeypatch):
    monkeypatch.setattr(registry_module, "registry_client", None)
    with pytest.raises(RuntimeError):
        get_registry_client()


async def test_init_and_close_lifecycle(monkeypatch):
    monkeypatch.setattr(registry_module, "registry_client", None)

    client = init_registry_client(api_key="k", api_host="h", base_url=REGISTRY_URL)
    assert get_registry_client() is client

    await close_registry_client()
    assert registry_module.registry_client is None
    assert client.client.is_closed
