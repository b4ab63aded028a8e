"""
core.domain.access — Role-scoped queryset selectors (shared patterns).

This module provides shared utilities that each app's service layer
calls to obtain querysets filtered by the requesting user's role, and
to guard operations that only certain roles may perform.

╔══════════════════════════════════════════════════════════════════╗
║  IMPORTANT — Per-app scoping logic does NOT live here.         ║
║  Each app's ``services.py`` owns its own scope-rules mapping.  ║
║  This module provides:                                         ║
║    1) ``apply_role_scope`` — role-keyed queryset dispatch.     ║
║    2) ``require_role`` — guard that checks the user's role.    ║
║    3) ``get_user_role`` — the role value (or ``None``).        ║
╚══════════════════════════════════════════════════════════════════╝

Roles are a fixed enumeration (``accounts.models.Role``); there is no
runtime-editable role/permission table.

Usage in an app's service layer::

    from core.domain.access import apply_role_scope

    COMPLAINT_SCOPE_RULES = {
        Role.SUPER_ADMIN:   lambda qs, u: qs,
        Role.FIELD_OFFICER: lambda qs, u: qs.filter(created_by=u),
    }

    qs = apply_role_scope(Complaint.objects.all(), user,
                          scope_rules=COMPLAINT_SCOPE_RULES)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Mapping

from django.db.models import QuerySet

from core.domain.exceptions import PermissionDenied

if TYPE_CHECKING:
    from accounts.models import User

# Takes (queryset, user) and returns a filtered queryset.
ScopeFilter = Callable[[QuerySet, "User"], QuerySet]


def get_user_role(user: User) -> str | None:
    """
    Return the role value held by ``user`` or ``None`` for anonymous users.

    Django superusers created from the CLI are treated as ``SUPER_ADMIN``
    so the admin account can drive every workflow.
    """
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    if user.is_superuser:
        return "SUPER_ADMIN"
    return getattr(user, "role", None) or None


def is_super_admin(user: User) -> bool:
    return get_user_role(user) == "SUPER_ADMIN"


def apply_role_scope(
    queryset: QuerySet,
    user: User,
    *,
    scope_rules: Mapping[str, ScopeFilter],
    fallback: ScopeFilter | None = None,
) -> QuerySet:
    """
    Apply the scope filter registered for the user's role.

    Args:
        queryset:    Base (unfiltered) queryset.
        user:        The authenticated user.
        scope_rules: ``{role_value: filter_fn}``.
        fallback:    Filter applied to roles without a rule.  ``None``
                     (default) yields an empty queryset.

    Returns:
        The (possibly filtered) queryset.
    """
    role = get_user_role(user)
    filter_fn = scope_rules.get(role) if role else None
    if filter_fn is not None:
        return filter_fn(queryset, user)
    if fallback is not None:
        return fallback(queryset, user)
    return queryset.none()


def require_role(user: User, *allowed_roles: str, message: str = "") -> str:
    """
    Guard that raises ``PermissionDenied`` unless the user's role is one
    of ``allowed_roles``.

    Returns:
        The user's role value, so callers can branch on it afterwards.

    Example::

        role = require_role(user, Role.DCP, Role.ACP, Role.SUPER_ADMIN)
    """
    role = get_user_role(user)
    if role is None or role not in allowed_roles:
        raise PermissionDenied(
            message
            or f"This action requires one of the roles: {', '.join(str(r) for r in allowed_roles)}."
        )
    return role
