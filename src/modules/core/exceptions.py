"""Error taxonomy base and the DRF exception handler.

Every domain error carries the HTTP status and the error kind it is
reported with.  ``api_exception_handler`` is the outermost boundary: it
renders domain errors, DRF errors and anything unexpected into the same
body::

    {"timestamp": ..., "status": 404, "error": "Not Found",
     "message": "...", "path": "/api/v1/products/..."}

Unexpected exceptions are logged with their traceback and reported with a
generic message; internal detail never reaches the client.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.http import Http404
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response

logger = structlog.get_logger(__name__)

UNEXPECTED_MESSAGE = "An unexpected internal error occurred."


class DomainError(Exception):
    """Base class for errors that map to a client-visible status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal Server Error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message or self.error


class UnexpectedFailure(DomainError):
    """Any condition not covered by a more specific error kind."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Internal Server Error"


def error_body(status_code: int, error: str, message: str, path: str) -> Dict[str, Any]:
    """Build the structured error body returned by every endpoint."""
    return {
        "timestamp": timezone.now().isoformat(),
        "status": status_code,
        "error": error,
        "message": message,
        "path": path,
    }


def _request_path(context: Dict[str, Any]) -> str:
    request = context.get("request")
    return request.path if request is not None else ""


def _api_exception_message(exc: APIException) -> str:
    detail = exc.detail
    if isinstance(detail, dict):
        return "; ".join(
            f"{field}: {' '.join(str(m) for m in messages) if isinstance(messages, list) else messages}"
            for field, messages in detail.items()
        )
    if isinstance(detail, list):
        return " ".join(str(item) for item in detail)
    return str(detail)


def api_exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    """DRF ``EXCEPTION_HANDLER`` rendering the structured error body."""
    path = _request_path(context)
    log = logger.bind(path=path, exception=type(exc).__name__)

    if isinstance(exc, DomainError):
        if exc.status_code >= 500:
            log.error("request.failed", error=exc.error, message=exc.message)
        else:
            log.warning("request.rejected", error=exc.error, message=exc.message)
        return Response(
            error_body(exc.status_code, exc.error, exc.message, path),
            status=exc.status_code,
        )

    if isinstance(exc, Http404):
        return Response(
            error_body(status.HTTP_404_NOT_FOUND, "Not Found", "Resource not found.", path),
            status=status.HTTP_404_NOT_FOUND,
        )

    if isinstance(exc, APIException):
        log.warning("request.rejected", status_code=exc.status_code)
        response = Response(
            error_body(
                exc.status_code,
                exc.default_code.replace("_", " ").title(),
                _api_exception_message(exc),
                path,
            ),
            status=exc.status_code,
        )
        wait = getattr(exc, "wait", None)
        if wait:
            response["Retry-After"] = str(int(wait))
        return response

    log.exception("request.unexpected_failure")
    failure = UnexpectedFailure(UNEXPECTED_MESSAGE)
    return Response(
        error_body(failure.status_code, failure.error, failure.message, path),
        status=failure.status_code,
    )
