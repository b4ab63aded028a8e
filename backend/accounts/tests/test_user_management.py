"""
Tests for Super Admin user management and the one-time bootstrap.

Endpoints under test:
    GET/POST  /api/accounts/users/
    GET       /api/accounts/users/{id}/
    PATCH     /api/accounts/users/{id}/assign-role/
    GET/POST  /api/accounts/setup-super-admin/
"""

from __future__ import annotations

import pytest
from django.urls import reverse

from accounts.models import Role, User
from accounts.services import resolve_first_user_with_role

_NEW_USER = {
    "username": "new_officer",
    "password": "Str0ng!Pass55",
    "email": "new_officer@example.com",
    "phone_number": "09125550001",
    "first_name": "New",
    "last_name": "Officer",
    "national_id": "5550000001",
}


@pytest.mark.django_db
class TestUserManagement:

    def test_super_admin_creates_user_with_role(self, api_client, auth_header):
        api_client.credentials(HTTP_AUTHORIZATION=auth_header(role=Role.SUPER_ADMIN)["Authorization"])
        resp = api_client.post(
            reverse("accounts:user-list"),
            {**_NEW_USER, "role": Role.FIELD_OFFICER},
            format="json",
        )
        assert resp.status_code == 201, resp.data
        assert resp.data["role"] == Role.FIELD_OFFICER
        assert User.objects.get(username="new_officer").check_password(_NEW_USER["password"])

    def test_created_user_defaults_to_complainant(self, api_client, auth_header):
        api_client.credentials(HTTP_AUTHORIZATION=auth_header(role=Role.SUPER_ADMIN)["Authorization"])
        resp = api_client.post(reverse("accounts:user-list"), _NEW_USER, format="json")
        assert resp.status_code == 201, resp.data
        assert resp.data["role"] == Role.COMPLAINANT

    def test_duplicate_identifier_is_conflict(self, api_client, auth_header, create_user):
        create_user(username="taken", email="new_officer@example.com")
        api_client.credentials(HTTP_AUTHORIZATION=auth_header(role=Role.SUPER_ADMIN)["Authorization"])
        resp = api_client.post(reverse("accounts:user-list"), _NEW_USER, format="json")
        assert resp.status_code == 409
        assert "email" in resp.data["detail"]

    @pytest.mark.parametrize("role", [Role.FIELD_OFFICER, Role.DCP, Role.COMMISSIONER, Role.COMPLAINANT])
    def test_non_admin_cannot_list_users(self, api_client, auth_header, role):
        api_client.credentials(HTTP_AUTHORIZATION=auth_header(role=role)["Authorization"])
        resp = api_client.get(reverse("accounts:user-list"))
        assert resp.status_code == 403

    def test_list_filters_by_role(self, api_client, auth_header, create_user):
        create_user(username="dcp_one", role=Role.DCP)
        create_user(username="acp_one", role=Role.ACP)
        api_client.credentials(HTTP_AUTHORIZATION=auth_header(role=Role.SUPER_ADMIN)["Authorization"])
        resp = api_client.get(reverse("accounts:user-list"), {"role": Role.DCP})
        assert resp.status_code == 200
        assert [u["username"] for u in resp.data] == ["dcp_one"]

    def test_assign_role(self, api_client, auth_header, create_user):
        target = create_user(username="promote_me")
        api_client.credentials(HTTP_AUTHORIZATION=auth_header(role=Role.SUPER_ADMIN)["Authorization"])
        resp = api_client.patch(
            reverse("accounts:user-assign-role", kwargs={"pk": target.pk}),
            {"role": Role.ACP},
            format="json",
        )
        assert resp.status_code == 200, resp.data
        target.refresh_from_db()
        assert target.role == Role.ACP

    def test_super_admin_cannot_demote_self(self, api_client, create_user):
        from rest_framework_simplejwt.tokens import AccessToken

        admin = create_user(username="root_admin", role=Role.SUPER_ADMIN)
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(admin)}")
        resp = api_client.patch(
            reverse("accounts:user-assign-role", kwargs={"pk": admin.pk}),
            {"role": Role.DCP},
            format="json",
        )
        assert resp.status_code == 400
        admin.refresh_from_db()
        assert admin.role == Role.SUPER_ADMIN

    def test_retrieve_missing_user_is_404(self, api_client, auth_header):
        api_client.credentials(HTTP_AUTHORIZATION=auth_header(role=Role.SUPER_ADMIN)["Authorization"])
        resp = api_client.get(reverse("accounts:user-detail", kwargs={"pk": 999999}))
        assert resp.status_code == 404


@pytest.mark.django_db
class TestSuperAdminSetup:

    def test_setup_required_until_first_admin(self, api_client):
        url = reverse("accounts:setup-super-admin")
        assert api_client.get(url).data == {"setup_required": True}

        resp = api_client.post(url, _NEW_USER, format="json")
        assert resp.status_code == 201, resp.data
        assert resp.data["role"] == Role.SUPER_ADMIN
        assert User.objects.get(username="new_officer").is_staff

        assert api_client.get(url).data == {"setup_required": False}

    def test_setup_closed_once_admin_exists(self, api_client, create_user):
        create_user(username="existing_admin", role=Role.SUPER_ADMIN)
        resp = api_client.post(reverse("accounts:setup-super-admin"), _NEW_USER, format="json")
        assert resp.status_code == 409
        assert not User.objects.filter(username="new_officer").exists()

    def test_setup_ignores_requested_role(self, api_client):
        resp = api_client.post(
            reverse("accounts:setup-super-admin"),
            {**_NEW_USER, "role": Role.COMPLAINANT},
            format="json",
        )
        assert resp.status_code == 201
        assert resp.data["role"] == Role.SUPER_ADMIN


@pytest.mark.django_db
class TestResolveFirstUserWithRole:

    def test_returns_lowest_pk_active_user(self, create_user):
        inactive = create_user(username="dcp_inactive", role=Role.DCP, is_active=False)
        first = create_user(username="dcp_first", role=Role.DCP)
        create_user(username="dcp_second", role=Role.DCP)
        assert inactive.pk < first.pk
        assert resolve_first_user_with_role(Role.DCP) == first

    def test_returns_none_when_nobody_holds_role(self, create_user):
        create_user(username="someone", role=Role.DCP)
        assert resolve_first_user_with_role(Role.COMMISSIONER) is None
        assert resolve_first_user_with_role(None) is None
