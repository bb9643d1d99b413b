"""
Translation of classified errors into HTTP responses.

This is the only place that decides a status code for a failure. Every
error response uses the same envelope:

  {"code": "<ErrorKind>", "message": "...", "timestamp": "<ISO-8601 UTC>", "details": {...}}

``details`` is omitted when empty. Unclassified exceptions become
INTERNAL_ERROR with a generic message; the traceback is only logged.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from connect_platform.engine.errors import BusinessError, processor_details
from connect_platform.models.enums import ErrorKind
from connect_platform.providers.errors import GatewayError, GatewayRateLimitError

logger = logging.getLogger("connect_platform.api.errors")

STATUS_BY_KIND: dict[ErrorKind, int] = {
    # Conflicts with current state
    ErrorKind.ONBOARDING_REQUIRED: 409,
    ErrorKind.INSUFFICIENT_FUNDS: 409,
    ErrorKind.CONFLICT: 409,
    # Request shape
    ErrorKind.VALIDATION_ERROR: 400,
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.CAPABILITY_NOT_SUPPORTED: 400,
    ErrorKind.CURRENCY_MISMATCH: 400,
    ErrorKind.AMOUNT_TOO_SMALL: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.RATE_LIMITED: 429,
    # Payment authentication / decline
    ErrorKind.PAYMENT_AUTHENTICATION_FAILED: 402,
    ErrorKind.PAYMENT_DECLINED: 402,
    # Upstream processor failure
    ErrorKind.PROCESSOR_API_ERROR: 502,
    ErrorKind.INTERNAL_ERROR: 500,
}


class ErrorEnvelope(BaseModel):
    code: str
    message: str
    timestamp: str
    details: Optional[dict[str, Any]] = None


def status_for(kind: ErrorKind) -> int:
    return STATUS_BY_KIND.get(kind, 500)


def error_response(
    kind: ErrorKind,
    message: str,
    details: Optional[dict[str, Any]] = None,
    status_code: Optional[int] = None,
    headers: Optional[dict[str, str]] = None,
) -> JSONResponse:
    envelope = ErrorEnvelope(
        code=kind.value,
        message=message,
        timestamp=datetime.now(timezone.utc).isoformat(),
        details=details or None,
    )
    return JSONResponse(
        status_code=status_code or status_for(kind),
        content=jsonable_encoder(envelope, exclude_none=True),
        headers=headers,
    )


async def handle_business_error(request: Request, exc: BusinessError) -> JSONResponse:
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.kind.value, exc.message)
    return error_response(exc.kind, exc.message, exc.details)


async def handle_gateway_error(request: Request, exc: GatewayError) -> JSONResponse:
    """Safety net for gateway failures that were not re-classified at the call site."""
    kind = ErrorKind.RATE_LIMITED if isinstance(exc, GatewayRateLimitError) else ErrorKind.PROCESSOR_API_ERROR
    logger.warning("%s %s -> unclassified gateway error: %s", request.method, request.url.path, exc)
    return error_response(kind, str(exc), processor_details(exc))


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields: dict[str, Any] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        fields[".".join(loc) or "request"] = err.get("msg", "invalid value")
    return error_response(ErrorKind.VALIDATION_ERROR, "Validation failed", fields)


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Framework-raised HTTP errors (unknown route, wrong method, bad media type).

    404 is NOT_FOUND and 5xx is INTERNAL_ERROR. Any other status is reported
    as BAD_REQUEST but keeps its own status code and headers, so a 405 still
    answers 405 with its ``Allow`` header.
    """
    if exc.status_code == 404:
        return error_response(ErrorKind.NOT_FOUND, str(exc.detail), headers=exc.headers)
    if exc.status_code >= 500:
        return error_response(ErrorKind.INTERNAL_ERROR, str(exc.detail), headers=exc.headers)
    return error_response(
        ErrorKind.BAD_REQUEST,
        str(exc.detail),
        status_code=exc.status_code,
        headers=exc.headers,
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(ErrorKind.INTERNAL_ERROR, "Internal server error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BusinessError, handle_business_error)
    app.add_exception_handler(GatewayError, handle_gateway_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
