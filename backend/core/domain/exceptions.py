"""
core.domain.exceptions — Domain-specific exception hierarchy.

These exceptions represent business-rule violations inside service layers.
They are deliberately **not** DRF exceptions so that the domain layer stays
framework-agnostic; ``core.domain.exception_handler`` turns them into
JSON error responses.

Mapping cheatsheet
------------------
┌─────────────────────┬──────────────────────────────┬──────┐
│ Domain Exception    │ DRF / HTTP equivalent        │ Code │
├─────────────────────┼──────────────────────────────┼──────┤
│ DomainError         │ ValidationError / 400        │ 400  │
│ ValidationError     │ ValidationError / 400        │ 400  │
│ PermissionDenied    │ PermissionDenied / 403       │ 403  │
│ NotFound            │ NotFound / 404               │ 404  │
│ Conflict            │ APIException / 409           │ 409  │
│ InvalidTransition   │ APIException / 409           │ 409  │
└─────────────────────┴──────────────────────────────┴──────┘

Recommended usage inside a service::

    from core.domain.exceptions import InvalidTransition

    if target not in ALLOWED_TARGETS[role]:
        raise InvalidTransition(
            current=complaint.status,
            target=target,
            reason="Target status is outside this role's tier.",
        )

The global handler lives in ``core.domain.exception_handler`` and is
registered through ``REST_FRAMEWORK["EXCEPTION_HANDLER"]``.

Authentication failures (no or invalid bearer token) are never raised
from the domain layer; DRF's authentication classes answer those with 401.
"""

from __future__ import annotations


class DomainError(Exception):
    """
    Base class for all domain / business-rule errors.

    Catch this at the view boundary and convert to a 400 Bad Request.
    """

    def __init__(self, message: str = "A business rule was violated.") -> None:
        self.message = message
        super().__init__(self.message)


class ValidationError(DomainError):
    """
    Input that is structurally valid but breaks a business rule, e.g. an
    empty rejection reason or a jurisdiction chain whose levels do not
    belong to each other.

    Maps to HTTP 400.  An optional ``field`` names the offending input.
    """

    def __init__(self, message: str = "Invalid input.", *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class PermissionDenied(DomainError):
    """
    The authenticated user does not have the required role or permission
    for this operation.

    Maps to HTTP 403.
    """

    def __init__(self, message: str = "You do not have permission to perform this action.") -> None:
        super().__init__(message)


class NotFound(DomainError):
    """
    The requested resource does not exist (or is not visible to the
    requesting user given their role scope).

    Maps to HTTP 404.
    """

    def __init__(self, message: str = "The requested resource was not found.") -> None:
        super().__init__(message)


class Conflict(DomainError):
    """
    The operation conflicts with the current state of the resource.

    Typical usage: duplicate creation attempt, optimistic-lock failure.
    Maps to HTTP 409.
    """

    def __init__(self, message: str = "The operation conflicts with the current state.") -> None:
        super().__init__(message)


class InvalidTransition(Conflict):
    """
    A state-machine transition that is not allowed from the current status.

    Inherits from ``Conflict`` because an invalid transition IS a conflict
    with the resource's current state.  Maps to HTTP 409.

    Example::

        raise InvalidTransition(
            current="UNDER_REVIEW_ACP",
            target="CLOSED",
            reason="Only the commissioner tier may close a complaint.",
        )
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        current: str | None = None,
        target: str | None = None,
        reason: str | None = None,
    ) -> None:
        if message is None:
            parts = ["Invalid state transition"]
            if current and target:
                parts.append(f"from '{current}' to '{target}'")
            if reason:
                parts.append(f"({reason})")
            message = " ".join(parts) + "."
        super().__init__(message)
        self.current = current
        self.target = target
        self.reason = reason
