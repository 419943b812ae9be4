"""Service test fixtures — FastAPI test client with the registry dependency overridden.

Invariants:
    - Every test gets its own FakeRegistry script (see tests/conftest.py)
    - get_registry_client overridden; lifespan is not run by ASGITransport
    - raise_app_exceptions=False so the catch-all handler's 500 is observable
"""

import pytest
from httpx import ASGITransport, AsyncClient

from vehicle_relay.infrastructure.registry_client import get_registry_client
from vehicle_relay.main import app


@pytest.fixture
async def client(registry):
    """FastAPI test client backed by the fake registry."""
    app.dependency_overrides[get_registry_client] = lambda: registry

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
