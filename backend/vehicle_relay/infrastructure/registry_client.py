"""Resilient Registry Client — wraps httpx.AsyncClient with timeout, retry, and classification.

Invariants:
    - Timeouts (httpx.TimeoutException or the per-attempt ceiling): retried
      per RetryPolicy, fixed delay between attempts, 3 attempts by default
    - Other transport errors: immediate UpstreamConnectionError, no retry
    - A received response is never retried; it is classified
      (core/classify_upstream.py) and returned as an UpstreamResult
    - Every attempt exhausted → UpstreamFailure(GATEWAY_UNAVAILABLE)
    - Redirects followed; the final response is the one classified

Design Decisions:
    - One AsyncClient per process (created in lifespan): shared connection
      pool, headers set once
    - asyncio.wait_for around each attempt: httpx timeouts are per phase
      (connect/read/...), the ceiling must hold for the whole attempt
"""

import asyncio
import logging
import time

import httpx

from vehicle_relay.core.classify_upstream import classify_response, no_response
from vehicle_relay.core.domain_types import UpstreamResult
from vehicle_relay.core.errors import UpstreamConnectionError
from vehicle_relay.core.retry_policy import (
    AttemptOutcome, Attempting, Exhausted, RetryPolicy,
)

logger = logging.getLogger(__name__)


class ResilientRegistryClient:
    """Calls the registry lookup endpoint with timeout-only retry."""

    def __init__(
        self,
        api_key: str,
        api_host: str,
        base_url: str,
        timeout_seconds: float = 120.0,
        max_retries: int = 2,
        retry_delay_seconds: float = 3.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url
        self.timeout_seconds = timeout_seconds
        self.policy = RetryPolicy(
            max_retries=max_retries, delay_seconds=retry_delay_seconds,
        )
        self.client = httpx.AsyncClient(
            timeout=timeout_seconds,
            headers={
                "X-RapidAPI-Key": api_key,
                "X-RapidAPI-Host": api_host,
            },
            transport=transport,
            follow_redirects=True,
        )

    async def lookup(self, registration_number: str) -> UpstreamResult:
        """Fetch the registry record for one registration number."""
        state: Attempting = self.policy.start()
        while True:
            started = time.monotonic()
            try:
                response = await asyncio.wait_for(
                    self.client.get(
                        self.base_url,
                        params={"vehicle_no": registration_number},
                    ),
                    timeout=self.timeout_seconds,
                )
            except (httpx.TimeoutException, asyncio.TimeoutError):
                next_state = self.policy.advance(state, AttemptOutcome.TIMEOUT)
                if isinstance(next_state, Exhausted):
                    logger.error(
                        "Registry API timed out, retries exhausted",
                        extra={
                            "attempt": next_state.attempts,
                            "max_attempts": self.policy.max_attempts,
                        },
                    )
                    return no_response()
                logger.warning(
                    f"Registry API timeout, retry after "
                    f"{self.policy.delay_seconds}s",
                    extra={
                        "attempt": state.attempt,
                        "max_attempts": self.policy.max_attempts,
                    },
                )
                await asyncio.sleep(self.policy.delay_seconds)
                state = next_state
                continue
            except httpx.RequestError as e:
                logger.error(
                    f"Registry API transport error: {e}",
                    extra={"attempt": state.attempt},
                )
                raise UpstreamConnectionError(str(e)) from e

            done = self.policy.advance(state, AttemptOutcome.RESPONSE)
            logger.info(
                "Registry API responded",
                extra={
                    "attempt": done.attempt,
                    "status_code": response.status_code,
                    "duration_ms": round((time.monotonic() - started) * 1000, 2),
                },
            )
            return classify_response(response.status_code, response.text)

    async def aclose(self) -> None:
        await self.client.aclose()


# Singleton (initialized on startup)
registry_client: ResilientRegistryClient | None = None


def init_registry_client(**kwargs) -> ResilientRegistryClient:
    global registry_client
    registry_client = ResilientRegistryClient(**kwargs)
    return registry_client


async def close_registry_client() -> None:
    global registry_client
    if registry_client is not None:
        await registry_client.aclose()
        registry_client = None


def get_registry_client() -> ResilientRegistryClient:
    """FastAPI dependency for the shared registry client."""
    if registry_client is None:
        raise RuntimeError("Registry client not initialized")
    return registry_client
