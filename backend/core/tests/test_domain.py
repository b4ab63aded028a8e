"""
Tests for the shared domain helpers in ``core.domain``.
"""

from __future__ import annotations

import pytest
from django.contrib.auth.models import AnonymousUser
from rest_framework import status

from accounts.models import Role
from core.domain.access import apply_role_scope, get_user_role, require_role
from core.domain.exception_handler import domain_exception_handler
from core.domain.exceptions import (
    Conflict,
    DomainError,
    InvalidTransition,
    NotFound,
    PermissionDenied,
    ValidationError,
)
from core.domain.transactions import bump_version, check_version, lock_for_update


class TestExceptionHandler:

    @pytest.mark.parametrize(
        "exc, expected",
        [
            (ValidationError("bad", field="name"), status.HTTP_400_BAD_REQUEST),
            (PermissionDenied(), status.HTTP_403_FORBIDDEN),
            (NotFound(), status.HTTP_404_NOT_FOUND),
            (Conflict(), status.HTTP_409_CONFLICT),
            (InvalidTransition(current="A", target="B"), status.HTTP_409_CONFLICT),
            (DomainError(), status.HTTP_400_BAD_REQUEST),
        ],
    )
    def test_status_mapping(self, exc, expected):
        resp = domain_exception_handler(exc, {})
        assert resp.status_code == expected
        assert resp.data["detail"] == str(exc)

    def test_field_is_reported(self):
        resp = domain_exception_handler(ValidationError("bad", field="reason"), {})
        assert resp.data == {"detail": "bad", "field": "reason"}

    def test_unknown_exception_propagates(self):
        assert domain_exception_handler(RuntimeError("boom"), {}) is None

    def test_invalid_transition_message(self):
        exc = InvalidTransition(current="PENDING", target="CLOSED", reason="nope")
        assert str(exc) == "Invalid state transition from 'PENDING' to 'CLOSED' (nope)."


@pytest.mark.django_db
class TestAccess:

    def test_superuser_is_super_admin(self, create_user):
        user = create_user(is_superuser=True)
        assert get_user_role(user) == "SUPER_ADMIN"

    def test_anonymous_has_no_role(self):
        assert get_user_role(AnonymousUser()) is None
        with pytest.raises(PermissionDenied):
            require_role(AnonymousUser(), Role.DCP)

    def test_require_role_returns_role(self, create_user):
        user = create_user(role=Role.ACP)
        assert require_role(user, Role.DCP, Role.ACP) == Role.ACP
        with pytest.raises(PermissionDenied):
            require_role(user, Role.DCP)

    def test_scope_without_rule_is_empty(self, create_user):
        from accounts.models import User

        user = create_user(role=Role.COMPLAINANT)
        qs = apply_role_scope(User.objects.all(), user, scope_rules={Role.DCP: lambda q, u: q})
        assert not qs.exists()
        qs = apply_role_scope(
            User.objects.all(), user, scope_rules={}, fallback=lambda q, u: q.filter(pk=u.pk),
        )
        assert list(qs) == [user]


@pytest.mark.django_db
class TestTransactions:

    def test_version_helpers(self, create_user):
        from django.db import transaction

        from jurisdiction.models import Commissionerate
        from complaints.models import Complaint

        comm = Commissionerate.objects.create(name="C")
        complaint = Complaint.objects.create(
            complaint_code="CMP-1-A",
            unique_code="UNIQUE-CMP-1-A",
            nature_of_complaint="n",
            place_of_complaint="p",
            complainant_name="c",
            brief_details="b",
            commissionerate=comm,
            created_by=create_user(),
        )
        with transaction.atomic():
            locked = lock_for_update(Complaint, complaint.pk)
            check_version(locked, None)
            check_version(locked, 1)
            with pytest.raises(Conflict):
                check_version(locked, 2)
            bump_version(locked)
            assert locked.version == 2

    def test_lock_missing_row(self, db):
        from django.db import transaction

        from complaints.models import Complaint

        with transaction.atomic(), pytest.raises(NotFound):
            lock_for_update(Complaint, 123456)
