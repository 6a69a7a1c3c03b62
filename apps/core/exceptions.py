"""
Error types and the DRF exception handler for the UMKM Directory API.

Every error leaves the API as

    {"error": {"code": ..., "message": ..., "field"?: ..., "details"?: ...},
     "request_id": ...}

Domain code raises the DirectoryException subclasses below; Django and DRF
exceptions are translated into the same envelope by
directory_exception_handler.
"""

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import ProtectedError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, AuthenticationFailed
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Machine-readable error codes returned in error.code."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTHENTICATION_REQUIRED = "AUTHENTICATION_REQUIRED"

    # Activation gate
    ACCOUNT_DISABLED = "ACCOUNT_DISABLED"
    BUSINESS_NOT_LINKED = "BUSINESS_NOT_LINKED"
    BUSINESS_NOT_ACTIVE = "BUSINESS_NOT_ACTIVE"

    PERMISSION_DENIED = "PERMISSION_DENIED"
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# DRF status codes without a more specific translation
STATUS_ERROR_CODES = {
    status.HTTP_400_BAD_REQUEST: ErrorCode.VALIDATION_ERROR,
    status.HTTP_401_UNAUTHORIZED: ErrorCode.AUTHENTICATION_REQUIRED,
    status.HTTP_403_FORBIDDEN: ErrorCode.PERMISSION_DENIED,
    status.HTTP_404_NOT_FOUND: ErrorCode.NOT_FOUND,
    status.HTTP_405_METHOD_NOT_ALLOWED: ErrorCode.METHOD_NOT_ALLOWED,
}


@dataclass
class ErrorBody:
    """One rendered error envelope."""
    code: ErrorCode
    message: str
    request_id: str
    field: Optional[str] = None
    details: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        error = {"code": self.code.value, "message": self.message}
        if self.field:
            error["field"] = self.field
        if self.details:
            error["details"] = self.details
        return {"error": error, "request_id": self.request_id}

    def render(self, status_code: int) -> Response:
        return Response(self.to_dict(), status=status_code)


# =============================================================================
# Domain exceptions
# =============================================================================

class DirectoryException(APIException):
    """
    Base class for errors raised by directory code.

    Subclasses fix status_code, error_code and the default message; callers
    may override the message and point at the offending input field.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = ErrorCode.INTERNAL_ERROR
    default_detail = "An error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.default_detail
        self.field = field
        self.details = details
        super().__init__(detail=self.message)

    def to_body(self, request_id: str) -> ErrorBody:
        return ErrorBody(self.error_code, self.message, request_id, self.field, self.details)


class ValidationError(DirectoryException):
    """Malformed input to a create/update operation."""
    error_code = ErrorCode.VALIDATION_ERROR
    default_detail = "Validation failed"


class NotFoundError(DirectoryException):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = ErrorCode.NOT_FOUND
    default_detail = "Resource not found"


class UnauthenticatedError(DirectoryException):
    """No authenticated user on the request."""
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = ErrorCode.AUTHENTICATION_REQUIRED
    default_detail = "Authentication required"


class AccountDisabledError(DirectoryException):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = ErrorCode.ACCOUNT_DISABLED
    default_detail = "Your account has been disabled. Please contact the village administrator."


class BusinessNotLinkedError(DirectoryException):
    """Business owner account without a business record."""
    status_code = status.HTTP_403_FORBIDDEN
    error_code = ErrorCode.BUSINESS_NOT_LINKED
    default_detail = "Your account is not linked to a business. Please contact the village administrator."


class BusinessNotActiveError(DirectoryException):
    """Business owner whose business is inactive or suspended."""
    status_code = status.HTTP_403_FORBIDDEN
    error_code = ErrorCode.BUSINESS_NOT_ACTIVE
    default_detail = "Your business is inactive or suspended. Please contact the village administrator."


class ForbiddenError(DirectoryException):
    """Role or ownership guard failed."""
    status_code = status.HTTP_403_FORBIDDEN
    error_code = ErrorCode.PERMISSION_DENIED
    default_detail = "You do not have access to this resource."


class InvalidStateTransitionError(ForbiddenError):
    """Action not allowed from the object's current state."""
    error_code = ErrorCode.INVALID_STATE_TRANSITION
    default_detail = "This action is not allowed in the current state."


# =============================================================================
# Exception handler
# =============================================================================

def get_request_id(request) -> str:
    """request.request_id set by RequestContextMiddleware, or a fresh UUID."""
    return getattr(request, 'request_id', None) or str(uuid.uuid4())


def _drf_message(data):
    """Split a DRF error payload into (message, details)."""
    if isinstance(data, dict):
        if 'detail' in data:
            return str(data['detail']), None
        return "Validation failed", data
    if isinstance(data, list):
        return (str(data[0]) if data else "Error"), {"errors": data}
    return str(data), None


def _is_inactive_user(exc):
    """simplejwt sends a dict detail carrying its own 'code' entry."""
    codes = exc.get_codes()
    if isinstance(codes, dict):
        codes = codes.get('code')
    return codes == 'user_inactive'


def directory_exception_handler(exc, context):
    """
    REST_FRAMEWORK['EXCEPTION_HANDLER'].

    Guard failures are logged at WARNING; anything unexpected is logged with
    its traceback and returned as a generic 500.
    """
    request = context.get('request')
    request_id = get_request_id(request) if request is not None else str(uuid.uuid4())

    if isinstance(exc, DirectoryException):
        logger.warning(
            "%s: %s", exc.error_code.value, exc.message,
            extra={"error_code": exc.error_code.value, "field": exc.field},
        )
        return exc.to_body(request_id).render(exc.status_code)

    if isinstance(exc, DjangoValidationError):
        if hasattr(exc, 'message_dict'):
            body = ErrorBody(ErrorCode.VALIDATION_ERROR, "Validation failed", request_id,
                             details=exc.message_dict)
        else:
            body = ErrorBody(ErrorCode.VALIDATION_ERROR, exc.messages[0], request_id,
                             details={"errors": exc.messages})
        return body.render(status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, Http404):
        return ErrorBody(ErrorCode.NOT_FOUND, str(exc) or "Resource not found", request_id).render(
            status.HTTP_404_NOT_FOUND
        )

    # e.g. deleting a category that businesses still use
    if isinstance(exc, ProtectedError):
        return ErrorBody(
            ErrorCode.CONFLICT, "Resource is still referenced and cannot be deleted", request_id,
        ).render(status.HTTP_409_CONFLICT)

    response = drf_exception_handler(exc, context)
    if response is not None:
        code = STATUS_ERROR_CODES.get(response.status_code, ErrorCode.INTERNAL_ERROR)
        if isinstance(exc, AuthenticationFailed) and _is_inactive_user(exc):
            code = ErrorCode.ACCOUNT_DISABLED
        message, details = _drf_message(response.data)
        return ErrorBody(code, message, request_id, details=details).render(response.status_code)

    logger.exception("Unhandled %s", type(exc).__name__)
    return ErrorBody(ErrorCode.INTERNAL_ERROR, "An unexpected error occurred", request_id).render(
        status.HTTP_500_INTERNAL_SERVER_ERROR
    )


def success_response(data: Optional[Dict[str, Any]] = None, message: Optional[str] = None,
                     status_code: int = status.HTTP_200_OK) -> Response:
    """Plain success payload with an optional human-readable message."""
    payload = dict(data or {})
    if message:
        payload['message'] = message
    return Response(payload, status=status_code)
