"""Error Hierarchy — typed exceptions for every way a vehicle lookup can fail.

Invariants:
    - Every error has a code (str), kind (ErrorKind), severity (ErrorSeverity)
      and http_status (int)
    - InvalidInputError and VehicleNotFoundError render as {"error": message};
      every other error renders as an RFC 9457 problem detail
    - All errors are terminal for the current request (no retry above the
      upstream client)

Design Decisions:
    - Single hierarchy with VehicleRelayError base: one FastAPI handler catches all
    - Upstream status is echoed verbatim by UpstreamError, including non-standard codes
"""

from enum import Enum
from http import HTTPStatus

from vehicle_relay.core.domain_types import ErrorKind

RAW_EXCERPT_LIMIT = 500


class ErrorSeverity(str, Enum):
    """Error severity for observability (drives log level)."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def status_title(http_status: int) -> str:
    """Reason phrase for a status code, tolerant of non-standard codes."""
    try:
        return HTTPStatus(http_status).phrase
    except ValueError:
        return "Upstream Error"


class VehicleRelayError(Exception):
    """Base exception for all vehicle relay errors."""

    problem_detail = True

    def __init__(
        self,
        message: str,
        code: str,
        kind: ErrorKind,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.kind = kind
        self.severity = severity
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to the REST error body."""
        if not self.problem_detail:
            return {"error": self.message}
        return {
            "type": "about:blank",
            "title": status_title(self.http_status),
            "status": self.http_status,
            "detail": self.message,
            "code": self.code,
        }


# ─── Client Errors ──────────────────────────────────────────────

class InvalidInputError(VehicleRelayError):
    """Registration number missing, empty or whitespace."""
    problem_detail = False

    def __init__(self, message: str = "Registration number is required"):
        super().__init__(
            message, "INVALID_INPUT", ErrorKind.INVALID_INPUT,
            ErrorSeverity.WARNING, 400,
        )


class VehicleNotFoundError(VehicleRelayError):
    """Upstream registry has no record for the registration number."""
    problem_detail = False

    def __init__(self):
        super().__init__(
            "Vehicle not found", "NOT_FOUND", ErrorKind.NOT_FOUND,
            ErrorSeverity.WARNING, 404,
        )


# ─── Upstream Errors ────────────────────────────────────────────

class GatewayUnavailableError(VehicleRelayError):
    """Upstream timed out, or answered 408/504."""
    def __init__(
        self,
        message: str = (
            "The API service is currently unavailable or taking too long "
            "to respond. Please try again in a few moments."
        ),
    ):
        super().__init__(
            message, "GATEWAY_UNAVAILABLE", ErrorKind.GATEWAY_UNAVAILABLE,
            ErrorSeverity.ERROR, 504,
        )


class SubscriptionError(VehicleRelayError):
    """Upstream answered 403: the API key is not subscribed."""
    def __init__(
        self,
        message: str = (
            "API subscription error: You are not subscribed to this API. "
            "Please subscribe to the 'RTO Vehicle Details - RC - PUC - "
            "Insurance (mParivahan)' API on RapidAPI."
        ),
    ):
        super().__init__(
            message, "SUBSCRIPTION_ERROR", ErrorKind.SUBSCRIPTION_ERROR,
            ErrorSeverity.ERROR, 403,
        )


class UpstreamError(VehicleRelayError):
    """Any other non-2xx upstream status, echoed to the caller."""
    def __init__(self, upstream_status: int, body: str):
        super().__init__(
            f"API returned status code: {upstream_status} "
            f"({status_title(upstream_status)}). {body}",
            "UPSTREAM_ERROR", ErrorKind.UPSTREAM_ERROR,
            ErrorSeverity.ERROR, upstream_status,
        )
        self.upstream_status = upstream_status
        self.body = body


class MalformedUpstreamResponseError(VehicleRelayError):
    """Upstream 2xx body could not be parsed as a JSON object."""
    def __init__(self, parse_error: str, raw_body: str):
        self.raw_excerpt = raw_body[:RAW_EXCERPT_LIMIT]
        super().__init__(
            f"Failed to parse API response: {parse_error}. "
            f"Raw response: {self.raw_excerpt}",
            "MALFORMED_UPSTREAM_RESPONSE",
            ErrorKind.MALFORMED_UPSTREAM_RESPONSE,
            ErrorSeverity.CRITICAL, 500,
        )
        self.parse_error = parse_error


class UpstreamConnectionError(VehicleRelayError):
    """Transport failure other than a timeout (never retried)."""
    def __init__(self, message: str):
        super().__init__(
            f"Error calling vehicle API: {message}",
            "UPSTREAM_CONNECTION_ERROR", ErrorKind.UNEXPECTED_ERROR,
            ErrorSeverity.CRITICAL, 500,
        )


# ─── Internal Errors ────────────────────────────────────────────

class UnexpectedError(VehicleRelayError):
    """Anything not covered above."""
    def __init__(self, message: str):
        super().__init__(
            f"An error occurred: {message}",
            "INTERNAL_ERROR", ErrorKind.UNEXPECTED_ERROR,
            ErrorSeverity.CRITICAL, 500,
        )


class ConfigurationError(VehicleRelayError):
    """Required setting missing at startup."""
    def __init__(self, message: str):
        super().__init__(
            message, "CONFIGURATION_ERROR", ErrorKind.UNEXPECTED_ERROR,
            ErrorSeverity.CRITICAL, 500,
        )
