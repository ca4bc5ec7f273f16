"""Maps domain errors to HTTP responses.

Installed as the DRF ``EXCEPTION_HANDLER``, so views just call services and
let domain errors propagate. Only the error code, the user-safe message and
the error's context reach the client.
"""

from datetime import datetime

from rest_framework import serializers, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from ticketing.domain.errors import DomainError, ErrorCode

STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.TICKET_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CERTIFICATE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.REGISTRATION_CLOSED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.DUPLICATE_REGISTRATION: status.HTTP_409_CONFLICT,
    ErrorCode.SEATS_EXHAUSTED: status.HTTP_409_CONFLICT,
    ErrorCode.ALREADY_USED: status.HTTP_409_CONFLICT,
    ErrorCode.TICKET_CANCELLED: status.HTTP_409_CONFLICT,
    ErrorCode.WRONG_EVENT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorCode.STORAGE_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
}

_datetime_field = serializers.DateTimeField()


def _render_context(context: dict) -> dict:
    return {
        key: _datetime_field.to_representation(value) if isinstance(value, datetime) else value
        for key, value in context.items()
    }


def domain_error_response(exc: DomainError) -> Response:
    body = {"code": exc.code.value, "message": exc.message, **_render_context(exc.context)}
    return Response(
        {"error": body},
        status=STATUS_BY_CODE.get(exc.code, status.HTTP_400_BAD_REQUEST),
    )


def exception_handler(exc, context):
    if isinstance(exc, DomainError):
        return domain_error_response(exc)
    return drf_exception_handler(exc, context)
