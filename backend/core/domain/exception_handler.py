"""
Global DRF exception handler.

Turns the framework-agnostic errors of ``core.domain.exceptions`` into
HTTP responses, so services can raise and views stay free of
try/except blocks.  Wired up through ``REST_FRAMEWORK["EXCEPTION_HANDLER"]``.

Response body::

    {"detail": "<message>", "field": "<input name>"}   # field is optional
"""

from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_default_handler
from rest_framework.views import set_rollback

from core.domain.exceptions import (
    Conflict,
    DomainError,
    NotFound,
    PermissionDenied,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Looked up along the exception's MRO, so subclasses such as
# ``InvalidTransition`` inherit the code of their parent.
_STATUS_BY_CLASS: dict[type, int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    PermissionDenied: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_404_NOT_FOUND,
    Conflict: status.HTTP_409_CONFLICT,
    DomainError: status.HTTP_400_BAD_REQUEST,
}


def _status_for(exc: DomainError) -> int:
    for klass in type(exc).__mro__:
        if klass in _STATUS_BY_CLASS:
            return _STATUS_BY_CLASS[klass]
    return status.HTTP_400_BAD_REQUEST


def domain_exception_handler(exc: Exception, context: dict) -> Response | None:
    """
    DRF's own exceptions (serializer errors, authentication, throttling)
    go through the stock handler; domain errors are mapped here; anything
    else returns ``None`` and surfaces as a 500.
    """
    response = drf_default_handler(exc, context)
    if response is not None or not isinstance(exc, DomainError):
        return response

    code = _status_for(exc)
    logger.warning(
        "%s -> %d in %s: %s",
        type(exc).__name__, code, context.get("view", "unknown"), exc,
    )

    body = {"detail": str(exc)}
    field = getattr(exc, "field", None)
    if field:
        body["field"] = field

    set_rollback()
    return Response(body, status=code)
