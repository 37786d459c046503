from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


def _error_response(*, error_status: str, message: str, http_status: int) -> Response:
    return Response(
        {
            "error": {
                "status": error_status,
                "message": message,
            }
        },
        status=http_status,
    )


def _extract_first_message(data: Any) -> str | None:
    if isinstance(data, str):
        return data or None
    if isinstance(data, Sequence) and not isinstance(data, (str, bytes, bytearray)):
        for item in data:
            if isinstance(item, str) and item:
                return item
        return None
    if not isinstance(data, Mapping):
        return None

    detail = data.get("detail")
    if isinstance(detail, str) and detail:
        return detail
    for key, value in data.items():
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
            if value and isinstance(value[0], str):
                return f"{key}: {value[0]}"
        if isinstance(value, str) and value:
            return f"{key}: {value}"
    return None


def _drf_error_status(exc: Exception, response: Response) -> str:
    if isinstance(exc, drf_exceptions.ValidationError):
        return "validation_error"
    if isinstance(exc, (drf_exceptions.NotAuthenticated, drf_exceptions.AuthenticationFailed)):
        return "unauthorized"
    if isinstance(exc, drf_exceptions.PermissionDenied):
        return "forbidden"
    if isinstance(exc, drf_exceptions.NotFound):
        return "not_found"
    if isinstance(exc, drf_exceptions.MethodNotAllowed):
        return "method_not_allowed"
    if response.status_code >= 500:
        return "server_error"
    return "bad_request"


# Domain exception class -> (error status, HTTP status); first match wins.
def _domain_error_mapping():
    from config import domain_exceptions as domain

    return (
        (domain.ValidationError, "validation_error", status.HTTP_400_BAD_REQUEST),
        (domain.NotFoundError, "not_found", status.HTTP_404_NOT_FOUND),
        (domain.ConfigurationError, "configuration_error", status.HTTP_503_SERVICE_UNAVAILABLE),
        (domain.OperationTimeoutError, "timeout", status.HTTP_504_GATEWAY_TIMEOUT),
        (domain.DomainError, "bad_request", status.HTTP_400_BAD_REQUEST),
    )


def custom_exception_handler(exc: Exception, context):
    """
    Central exception->HTTP mapping for DRF and domain exceptions.

    Keep views thin: raise meaningful exceptions (e.g. TaskNotFoundError)
    and let this layer translate them into consistent API responses.
    """

    response = drf_exception_handler(exc, context)
    if response is not None:
        return _error_response(
            error_status=_drf_error_status(exc, response),
            message=_extract_first_message(response.data) or "Request failed.",
            http_status=response.status_code,
        )

    for exc_class, error_status, http_status in _domain_error_mapping():
        if isinstance(exc, exc_class):
            return _error_response(
                error_status=error_status,
                message=str(exc),
                http_status=http_status,
            )

    logger.exception(
        "Unhandled exception in API view: %s",
        context.get("view").__class__.__name__ if context.get("view") else "unknown",
        exc_info=exc,
    )
    return None
