"""
Accounts Service Layer.

This module is the **single source of truth** for all business logic
within the ``accounts`` app.  Views must remain *thin*: they validate
input through serializers, call a service function / method, and
return the result wrapped in a DRF ``Response``.

Architecture
------------
- ``UserManagementService``  — Super Admin user listing, creation and
                               role assignment.
- ``SuperAdminSetupService`` — one-time bootstrap of the first
                               Super Admin account.
- ``CurrentUserService``     — "Me" endpoint helpers.
- ``resolve_first_user_with_role`` — assignee lookup used by the
                               complaint workflow on forward.
"""

from __future__ import annotations

import logging
from typing import Any

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import Q, QuerySet

from core.domain.access import require_role
from core.domain.exceptions import Conflict, DomainError, NotFound

from .models import Role

User = get_user_model()

logger = logging.getLogger(__name__)

_UNIQUE_FIELDS = ("username", "email", "phone_number", "national_id")


def _create_account(validated_data: dict[str, Any], *, role: str) -> User:
    """
    Create a user after a deterministic, field-specific uniqueness check.

    Raises:
        Conflict: If any unique field is already taken.
    """
    data = dict(validated_data)
    password = data.pop("password")
    data.pop("role", None)

    conflicts = [
        field for field in _UNIQUE_FIELDS
        if data.get(field) and User.objects.filter(**{field: data[field]}).exists()
    ]
    if conflicts:
        raise Conflict(
            f"The following field(s) already exist: {', '.join(conflicts)}."
        )

    try:
        with transaction.atomic():
            user = User.objects.create_user(password=password, role=role, **data)
    except IntegrityError:
        raise Conflict("A user with one of the provided identifiers already exists.")
    return user


def resolve_first_user_with_role(role: str | None) -> User | None:
    """
    Return the first active user holding ``role`` (lowest PK), or ``None``.

    ``None`` is a valid outcome: the complaint workflow advances the
    status and simply leaves the assignee unset.
    """
    if not role:
        return None
    return (
        User.objects
        .filter(role=role, is_active=True)
        .order_by("pk")
        .first()
    )


# ═══════════════════════════════════════════════════════════════════
#  User Management Service
# ═══════════════════════════════════════════════════════════════════


class UserManagementService:
    """
    Administrative operations on users: listing, creation and role
    assignment.  Every operation is restricted to ``SUPER_ADMIN``.
    """

    @staticmethod
    def list_users(
        requesting_user: Any,
        *,
        role: str | None = None,
        is_active: bool | None = None,
        search: str | None = None,
    ) -> QuerySet:
        """
        Return a filtered queryset of users.

        ``search`` matches case-insensitively across username, email,
        national_id, phone_number, first_name and last_name.
        """
        require_role(requesting_user, Role.SUPER_ADMIN)

        qs = User.objects.all().order_by("pk")
        if role:
            qs = qs.filter(role=role)
        if is_active is not None:
            qs = qs.filter(is_active=is_active)
        if search:
            qs = qs.filter(
                Q(username__icontains=search)
                | Q(email__icontains=search)
                | Q(national_id__icontains=search)
                | Q(phone_number__icontains=search)
                | Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
            )
        return qs

    @staticmethod
    def get_user(requesting_user: Any, user_id: int) -> User:
        require_role(requesting_user, Role.SUPER_ADMIN)
        try:
            return User.objects.get(pk=user_id)
        except User.DoesNotExist:
            raise NotFound(f"User with id {user_id} not found.")

    @staticmethod
    def create_user(requesting_user: Any, validated_data: dict[str, Any]) -> User:
        """
        Create an account with the requested role.

        Raises:
            PermissionDenied: If the requester is not a Super Admin.
            Conflict:         If a unique identifier is already taken.
        """
        require_role(requesting_user, Role.SUPER_ADMIN)
        role = validated_data.get("role") or Role.COMPLAINANT
        user = _create_account(validated_data, role=role)
        logger.info(
            "User #%d (%s) created with role %s by user %s",
            user.pk, user.username, role, requesting_user.pk,
        )
        return user

    @staticmethod
    def assign_role(requesting_user: Any, *, user_id: int, role: str) -> User:
        """
        Change a user's role.

        A Super Admin may not demote themselves, so the system can never
        lose its last administrator through this endpoint.
        """
        require_role(requesting_user, Role.SUPER_ADMIN)
        try:
            target_user = User.objects.get(pk=user_id)
        except User.DoesNotExist:
            raise NotFound(f"User with id {user_id} not found.")

        if target_user.pk == requesting_user.pk and role != Role.SUPER_ADMIN:
            raise DomainError("You cannot remove your own Super Admin role.")

        previous = target_user.role
        target_user.role = role
        target_user.save(update_fields=["role"])
        logger.info(
            "User #%d role changed from %s to %s by user %s",
            target_user.pk, previous, role, requesting_user.pk,
        )
        return target_user


# ═══════════════════════════════════════════════════════════════════
#  Super Admin Bootstrap
# ═══════════════════════════════════════════════════════════════════


class SuperAdminSetupService:
    """
    Creates the very first ``SUPER_ADMIN``.  The endpoint is public, so
    it must refuse to run once any Super Admin exists.
    """

    @staticmethod
    def super_admin_exists() -> bool:
        return User.objects.filter(Q(role=Role.SUPER_ADMIN) | Q(is_superuser=True)).exists()

    @staticmethod
    @transaction.atomic
    def create_initial_super_admin(validated_data: dict[str, Any]) -> User:
        """
        Raises:
            Conflict: If a Super Admin already exists or an identifier
                      is taken.
        """
        if SuperAdminSetupService.super_admin_exists():
            raise Conflict("A Super Admin already exists; setup is closed.")

        user = _create_account(validated_data, role=Role.SUPER_ADMIN)
        user.is_staff = True
        user.save(update_fields=["is_staff"])
        logger.info("Initial Super Admin #%d (%s) created", user.pk, user.username)
        return user


# ═══════════════════════════════════════════════════════════════════
#  Current User Service
# ═══════════════════════════════════════════════════════════════════


class CurrentUserService:
    """
    Helpers for the "Me" endpoint, the way the frontend discovers who
    the logged-in user is and which role they hold.
    """

    @staticmethod
    def get_profile(user: User) -> User:
        return User.objects.get(pk=user.pk)

    @staticmethod
    def update_profile(user: User, validated_data: dict[str, Any]) -> User:
        """
        Update the authenticated user's own profile fields.

        The user may NOT change their own ``role``, ``is_active``,
        ``username``, or ``national_id`` via this endpoint; the
        serializer only exposes the editable subset.
        """
        if not validated_data:
            return user
        for field, value in validated_data.items():
            setattr(user, field, value)
        user.save(update_fields=list(validated_data.keys()))
        return User.objects.get(pk=user.pk)
