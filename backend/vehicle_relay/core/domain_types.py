"""Domain Types — error kinds and the per-request upstream outcome.

Invariants:
    - UpstreamResult is either UpstreamSuccess or UpstreamFailure, never both
    - UpstreamFailure.http_status is None only when no response was received
    - All error kinds encoded as a str Enum, no raw string matching

Design Decisions:
    - Frozen dataclasses: an upstream outcome is a value scoped to one request
    - str Enum: kind serializes into error envelopes without custom encoders
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class ErrorKind(str, Enum):
    """Failure taxonomy for a lookup request. Every kind is terminal."""
    INVALID_INPUT = "invalid_input"
    GATEWAY_UNAVAILABLE = "gateway_unavailable"
    NOT_FOUND = "not_found"
    SUBSCRIPTION_ERROR = "subscription_error"
    UPSTREAM_ERROR = "upstream_error"
    MALFORMED_UPSTREAM_RESPONSE = "malformed_upstream_response"
    UNEXPECTED_ERROR = "unexpected_error"


@dataclass(frozen=True)
class UpstreamSuccess:
    """2xx response from the registry API, body not yet parsed."""
    raw_body: str
    http_status: int = 200


@dataclass(frozen=True)
class UpstreamFailure:
    """Upstream outcome that ends the request before any body parsing."""
    kind: ErrorKind
    http_status: int | None = None
    detail: str = ""


UpstreamResult = Union[UpstreamSuccess, UpstreamFailure]

NOT_AVAILABLE = "N/A"
