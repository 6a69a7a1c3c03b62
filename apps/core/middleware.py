"""
Request context for logging and error responses.

RequestContextMiddleware gives every request an ID (reusing a well-formed
incoming X-Request-ID) and echoes it back in the response header.
PortalAccessPermission later binds the acting user and role, because JWT
users are only known once DRF has authenticated the request.

RequestContextFilter copies the context onto log records so the formatter
can print `[request_id user=... role=...]`.
"""

import logging
import threading
import uuid

from django.utils.deprecation import MiddlewareMixin

_context = threading.local()

FIELDS = ('request_id', 'user_id', 'role')


def get_request_id():
    """Current request ID, or None outside a request."""
    return getattr(_context, 'request_id', None)


def bind_actor(user, role):
    """Attach the authenticated user and role to the current request context."""
    _context.user_id = str(user.pk)
    _context.role = role


def clear_request_context():
    for name in FIELDS:
        setattr(_context, name, None)


def _clean_request_id(value):
    if value:
        try:
            return str(uuid.UUID(value))
        except (ValueError, TypeError):
            pass
    return str(uuid.uuid4())


class RequestContextMiddleware(MiddlewareMixin):
    """Assign request.request_id and return it as X-Request-ID."""

    RESPONSE_HEADER = 'X-Request-ID'

    def process_request(self, request):
        clear_request_context()
        request.request_id = _clean_request_id(request.META.get('HTTP_X_REQUEST_ID'))
        _context.request_id = request.request_id

    def process_response(self, request, response):
        request_id = getattr(request, 'request_id', None)
        if request_id:
            response[self.RESPONSE_HEADER] = request_id
        clear_request_context()
        return response


class RequestContextFilter(logging.Filter):
    """Adds request_id, user_id and role to every record ('-' when unset)."""

    def filter(self, record):
        for name in FIELDS:
            setattr(record, name, getattr(_context, name, None) or '-')
        return True
