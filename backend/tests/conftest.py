"""Root conftest — shared test configuration and a scripted fake registry API."""

import os

# Ensure tests never pick up a real RapidAPI key
os.environ.setdefault("RAPIDAPI_KEY", "test-rapidapi-key")

import httpx
import pytest

from vehicle_relay.infrastructure.registry_client import ResilientRegistryClient

REGISTRY_URL = "https://registry.test/api/rc-vehicle/search-data"


class FakeRegistry:
    """Plays back a script of responses for httpx.MockTransport.

    Script items are either httpx.Response objects or httpx exception
    classes (raised with the request attached). When the script runs out,
    `default` is returned.
    """

    def __init__(self):
        self.script: list = []
        self.calls: list[httpx.Request] = []
        self.default = httpx.Response(200, json={})

    def queue(self, *items) -> "FakeRegistry":
        self.script.extend(items)
        return self

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        item = self.script.pop(0) if self.script else self.default
        if isinstance(item, type) and issubclass(item, Exception):
            raise item("scripted failure", request=request)
        return item


@pytest.fixture
def upstream():
    return FakeRegistry()


@pytest.fixture
async def registry(upstream):
    """Registry client wired to the fake upstream, no inter-retry delay."""
    client = ResilientRegistryClient(
        api_key="test-key",
        api_host="registry.test",
        base_url=REGISTRY_URL,
        timeout_seconds=5,
        max_retries=2,
        retry_delay_seconds=0,
        transport=httpx.MockTransport(upstream.handle),
    )
    yield client
    await client.aclose()
