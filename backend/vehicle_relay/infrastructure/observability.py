"""Structured Logging — JSON formatter and setup for production observability.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (error_code, error_kind, upstream_status, path, attempt,
      status_code, duration_ms) surfaced when present
    - A VehicleRelayError carried in exc_info fills error_code and error_kind
      when the caller did not pass them
    - Registration numbers are never passed as extra fields
    - JSON format in production, human-readable in development
"""

import json
import logging
from datetime import datetime, timezone

from vehicle_relay.core.errors import VehicleRelayError

_EXTRA_FIELDS = (
    "error_code", "error_kind", "upstream_status", "path", "attempt",
    "max_attempts", "status_code", "duration_ms",
)


def relay_error_fields(exc: VehicleRelayError) -> dict:
    """Log extras describing a relay error (taxonomy kind, upstream status)."""
    fields = {
        "error_code": exc.code,
        "error_kind": exc.kind.value,
        "status_code": exc.http_status,
    }
    upstream_status = getattr(exc, "upstream_status", None)
    if upstream_status is not None:
        fields["upstream_status"] = upstream_status
    return fields


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            exc = record.exc_info[1]
            if isinstance(exc, VehicleRelayError):
                for key, val in relay_error_fields(exc).items():
                    log.setdefault(key, val)
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application. Safe to call more than once."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    for existing in list(logging.root.handlers):
        if getattr(existing, "_vehicle_relay", False):
            logging.root.removeHandler(existing)
    handler._vehicle_relay = True
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
