"""
API exception handlers.

This module maps domain and framework exceptions onto the JSON error
envelope ``{"error": {"code": ..., "message": ...}}``.
"""

import logging
from typing import Any, Dict, Optional

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    ConcurrentUpdateError,
    DomainException,
    InvoiceNotFoundError,
    KeyGenerationFailedError,
    LicenseNotFoundError,
    PaymentInconsistencyError,
    StoreUnavailableError,
    TrialAlreadyActiveError,
    UnauthorizedError,
)
from core.instrumentation import current_trace_id
from core.metrics import errors_total

logger = logging.getLogger(__name__)

NOT_FOUND_ERRORS = (LicenseNotFoundError, InvoiceNotFoundError)
SERVER_ERRORS = (StoreUnavailableError, KeyGenerationFailedError, PaymentInconsistencyError)


def domain_status_code(exc: DomainException) -> int:
    """HTTP status for a domain exception."""
    if isinstance(exc, NOT_FOUND_ERRORS):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, UnauthorizedError):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(exc, ConcurrentUpdateError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, SERVER_ERRORS):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_400_BAD_REQUEST


def error_body(code: str, message: str, **extra) -> Dict[str, Any]:
    """Build the error envelope."""
    error = {"code": code, "message": message}
    error.update(extra)
    return {"error": error}


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    trace_id = _get_trace_id(context)
    endpoint = _get_endpoint(context)

    if isinstance(exc, DomainException):
        response = _handle_domain_exception(exc, trace_id)
    elif isinstance(exc, ValidationError):
        response = Response(
            error_body("INVALID_REQUEST", "Request validation failed", details=exc.detail),
            status=status.HTTP_400_BAD_REQUEST,
        )
    elif isinstance(exc, APIException):
        response = exception_handler(exc, context)
        code = exc.default_code.upper().replace("-", "_") if exc.default_code else "API_ERROR"
        response.data = error_body(code, str(exc.detail))
    elif isinstance(exc, Http404):
        response = Response(
            error_body("NOT_FOUND", "Resource not found"),
            status=status.HTTP_404_NOT_FOUND,
        )
    else:
        response = _handle_unexpected_exception(exc, trace_id)

    if response.status_code >= 500:
        error_code = response.data["error"]["code"]
        errors_total.labels(error_type=error_code.lower(), endpoint=endpoint).inc()
    if trace_id:
        response["X-Trace-ID"] = trace_id
    return response


def _get_trace_id(context: Dict[str, Any]) -> Optional[str]:
    """Extract trace ID from the active span or the request correlation id."""
    trace_id = current_trace_id()
    if trace_id:
        return trace_id
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "correlation_id", None)


def _get_endpoint(context: Dict[str, Any]) -> str:
    request = context.get("request")
    return request.path if request is not None else "unknown"


def _handle_domain_exception(exc: DomainException, trace_id: Optional[str]) -> Response:
    """Handle domain-specific exceptions."""
    status_code = domain_status_code(exc)
    extra = {}
    if isinstance(exc, TrialAlreadyActiveError) and exc.expires_at is not None:
        extra["expiresAt"] = exc.expires_at.isoformat()

    if status_code >= 500:
        logger.error("Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id})
    else:
        logger.warning(
            "Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id}
        )
    return Response(error_body(exc.code, exc.message, **extra), status=status_code)


def _handle_unexpected_exception(exc: Exception, trace_id: Optional[str]) -> Response:
    """Handle unexpected or untracked exceptions."""
    logger.error("Unexpected error: %s", exc, extra={"trace_id": trace_id}, exc_info=True)
    return Response(
        error_body("SERVER_ERROR", "An internal error occurred"),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
