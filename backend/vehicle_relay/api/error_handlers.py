"""Error Handlers — global exception handlers for the vehicle relay API.

Invariants:
    - VehicleRelayError → its own envelope and status ({"error": ...} or
      application/problem+json)
    - RequestValidationError → 400 {"error": ...}
    - Exception (catch-all) → 500 problem detail, logged with traceback

Design Decisions:
    - Three-layer handler: domain (VehicleRelayError), validation (Pydantic), catch-all (Exception)
    - Extracted from main.py to keep the app factory small
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from vehicle_relay.core.errors import (
    ErrorSeverity, UnexpectedError, VehicleRelayError,
)
from vehicle_relay.infrastructure.observability import relay_error_fields

logger = logging.getLogger(__name__)

PROBLEM_JSON = "application/problem+json"


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_relay_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def error_response(exc: VehicleRelayError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_response(),
        media_type=PROBLEM_JSON if exc.problem_detail else None,
    )


def _register_relay_error_handler(app: FastAPI) -> None:

    @app.exception_handler(VehicleRelayError)
    async def relay_error_handler(request: Request, exc: VehicleRelayError):
        """Handle all lookup, upstream and mapping errors."""
        log = (
            logger.warning if exc.severity is ErrorSeverity.WARNING
            else logger.error
        )
        log(
            f"VehicleRelayError: {exc.message}",
            extra={**relay_error_fields(exc), "path": request.url.path},
        )
        return error_response(exc)


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": _summarize_validation_errors(exc)},
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"path": request.url.path},
        )
        return error_response(UnexpectedError(str(exc)))


def _summarize_validation_errors(exc: RequestValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}"
        for e in exc.errors()
    )
