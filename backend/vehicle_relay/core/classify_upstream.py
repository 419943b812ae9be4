"""Upstream Classification — maps an HTTP outcome onto the error taxonomy.

Invariants:
    - Runs before any body parsing
    - 404 → NOT_FOUND; 408/504 → GATEWAY_UNAVAILABLE; 403 → SUBSCRIPTION_ERROR;
      any other non-2xx → UPSTREAM_ERROR carrying status and body
    - 2xx → UpstreamSuccess (passed on to the mapper)
"""

from vehicle_relay.core.domain_types import (
    ErrorKind, UpstreamFailure, UpstreamResult, UpstreamSuccess,
)
from vehicle_relay.core.errors import (
    GatewayUnavailableError,
    SubscriptionError,
    UpstreamError,
    VehicleNotFoundError,
    VehicleRelayError,
)

_STATUS_KINDS: dict[int, ErrorKind] = {
    404: ErrorKind.NOT_FOUND,
    408: ErrorKind.GATEWAY_UNAVAILABLE,
    504: ErrorKind.GATEWAY_UNAVAILABLE,
    403: ErrorKind.SUBSCRIPTION_ERROR,
}

_STATUS_GATEWAY_DETAIL = (
    "The API service is currently unavailable or experiencing high traffic. "
    "Please wait a moment and try again."
)


def classify_response(status_code: int, body: str) -> UpstreamResult:
    """Classify a received upstream response."""
    if 200 <= status_code < 300:
        return UpstreamSuccess(raw_body=body, http_status=status_code)
    kind = _STATUS_KINDS.get(status_code, ErrorKind.UPSTREAM_ERROR)
    return UpstreamFailure(kind=kind, http_status=status_code, detail=body)


def no_response() -> UpstreamFailure:
    """Outcome when every attempt timed out."""
    return UpstreamFailure(kind=ErrorKind.GATEWAY_UNAVAILABLE)


def to_error(failure: UpstreamFailure) -> VehicleRelayError:
    """Build the exception the API layer renders for a failure."""
    if failure.kind is ErrorKind.NOT_FOUND:
        return VehicleNotFoundError()
    if failure.kind is ErrorKind.GATEWAY_UNAVAILABLE:
        if failure.http_status is None:
            return GatewayUnavailableError()
        return GatewayUnavailableError(_STATUS_GATEWAY_DETAIL)
    if failure.kind is ErrorKind.SUBSCRIPTION_ERROR:
        return SubscriptionError()
    return UpstreamError(failure.http_status or 502, failure.detail)
