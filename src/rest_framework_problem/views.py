"""Error responses in the ``application/problem+json`` format.

See: https://tools.ietf.org/html/rfc7807
"""
from __future__ import annotations

import logging
from typing import Union

from django.http import JsonResponse
from rest_framework import status
from rest_framework.exceptions import APIException, ErrorDetail, ValidationError
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)

PROBLEM_CONTENT_TYPE = "application/problem+json"


def exception_handler(exc, context):
    """Return the exceptions as 'application/problem+json'.

    The DRF handler also marks the database transaction for rollback.
    Server errors never include the exception details, these are only logged.
    """
    request = context.get("request")
    response = drf_exception_handler(exc, context)
    if response is None:
        return None

    instance = request.build_absolute_uri() if request else None

    if isinstance(exc, ValidationError):
        # response.data are the fields, or a list with a single message.
        invalid_params = get_invalid_params(exc, exc.detail)
        response.data = {
            "type": f"urn:apiexception:{exc.default_code}",
            "title": str(exc.default_detail),
            "detail": invalid_params[0]["reason"] if invalid_params else "",
            "status": response.status_code,
            "instance": instance,
            "invalid-params": invalid_params,
        }
    elif response.status_code >= 500:
        logger.error("Server error %s for %s: %r", response.status_code, instance, exc)
        response.data = {
            "type": f"urn:apiexception:{_get_code(exc)}",
            "title": "Server Error",
            "detail": str(getattr(exc, "default_detail", "")),
            "status": response.status_code,
            "instance": instance,
        }
    elif isinstance(response.data.get("detail"), ErrorDetail):
        # DRF parsed the exception as API
        detail = response.data["detail"]
        response.data = {
            "type": f"urn:apiexception:{detail.code}",
            "title": str(exc.default_detail) if hasattr(exc, "default_detail") else str(exc),
            "detail": str(detail),
            "status": response.status_code,
            "instance": instance,
        }

    response.content_type = PROBLEM_CONTENT_TYPE
    return response


def _get_code(exc) -> str:
    if isinstance(exc, APIException):
        return exc.default_code
    return "error"


def get_invalid_params(
    exc: ValidationError, detail: Union[ErrorDetail, dict, list], field_name=None
) -> list:
    """Flatten the DRF error messages into the RFC 7807 "invalid-params" list."""
    result = []
    if isinstance(detail, dict):
        for name, errors in detail.items():
            full_name = f"{field_name}.{name}" if field_name else name
            result.extend(get_invalid_params(exc, errors, field_name=full_name))
    elif isinstance(detail, list):
        for i, error in enumerate(detail):
            full_name = f"{field_name}[{i}]" if isinstance(error, dict) else field_name
            result.extend(get_invalid_params(exc, error, field_name=full_name))
    elif isinstance(detail, ErrorDetail):
        result.append(
            {
                "type": f"urn:apiexception:{exc.default_code}:{detail.code}",
                "name": field_name if field_name is not None else detail.code,
                "reason": str(detail),
            }
        )
    else:
        raise TypeError(f"Invalid value for get_invalid_params(): {detail!r}")

    return result


def _problem_response(request, status_code: int, title: str) -> JsonResponse:
    data = {
        "type": f"urn:apiexception:{status_code}",
        "title": title,
        "detail": "",
        "status": status_code,
        "instance": request.build_absolute_uri(),
    }
    return JsonResponse(data, status=status_code, content_type=PROBLEM_CONTENT_TYPE)


def server_error(request, *args, **kwargs):
    """Generic 500 error handler, for errors outside the REST views."""
    return _problem_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Server Error (500)")


def bad_request(request, exception, *args, **kwargs):
    """Generic 400 error handler."""
    return _problem_response(request, status.HTTP_400_BAD_REQUEST, "Bad Request (400)")


def not_found(request, exception, *args, **kwargs):
    """Generic 404 error handler."""
    return _problem_response(request, status.HTTP_404_NOT_FOUND, "Not Found (404)")
