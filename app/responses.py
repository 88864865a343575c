"""
Error responses.

Every failure reaches the caller as a generic body:
    {"request_id": ..., "error": <code>, "detail": <generic message>}
Internal detail is logged, never returned.
"""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from app.correlation import get_request_id
from history.errors import (
    HistoryError,
    MalformedInputError,
    NotFoundError,
)

_logger = logging.getLogger(__name__)

ERROR_CODES = {
    400: ("bad_request", "Bad request"),
    401: ("forbidden", "Forbidden"),
    403: ("forbidden", "Forbidden"),
    404: ("not_found", "Not found"),
    405: ("method_not_allowed", "Method not allowed"),
    413: ("payload_too_large", "Request entity too large"),
    500: ("internal_error", "Internal error"),
}


def error_response(request: Request, status_code: int) -> JSONResponse:
    """Build the generic error body for a status code."""
    default = ERROR_CODES[500] if status_code >= 500 else ("bad_request", "Bad request")
    error, detail = ERROR_CODES.get(status_code, default)
    return JSONResponse(
        status_code=status_code,
        content={
            "request_id": get_request_id(request) or "unknown",
            "error": error,
            "detail": detail,
        },
    )


def status_for_history_error(exc: HistoryError) -> int:
    """Map a history error to the HTTP status the caller sees."""
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, MalformedInputError):
        return 400
    return 500


def history_error_response(request: Request, exc: HistoryError) -> JSONResponse:
    """Log a history error with the request id and return its generic response."""
    status_code = status_for_history_error(exc)
    request_id = get_request_id(request) or "unknown"
    if status_code >= 500:
        _logger.error(f"[{request_id}] {request.method} {request.url.path} failed: {exc!r}")
    else:
        _logger.info(f"[{request_id}] {request.method} {request.url.path} -> {status_code}: {exc}")
    return error_response(request, status_code)
