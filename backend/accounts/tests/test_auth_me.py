"""
Integration tests — current profile (Me) endpoint.

Endpoint under test:  GET  /api/accounts/me/   (named URL: accounts:me)
                      PATCH /api/accounts/me/
Access:               Authenticated only
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import Role

User = get_user_model()

_PASSWORD = "Str0ng!Pass77"


class TestMeEndpoint(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user(
            username="me_test_user",
            password=_PASSWORD,
            email="me_test_user@example.com",
            phone_number="09130000077",
            national_id="7700000077",
            first_name="Me",
            last_name="Tester",
            role=Role.FIELD_OFFICER,
        )
        User.objects.create_user(
            username="other_user",
            password=_PASSWORD,
            email="other@example.com",
            phone_number="09130000078",
            national_id="7700000078",
        )

    def setUp(self):
        self.client = APIClient()
        token = AccessToken.for_user(self.user)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        self.url = reverse("accounts:me")

    def test_get_returns_own_profile(self):
        resp = self.client.get(self.url)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["username"], "me_test_user")
        self.assertEqual(resp.data["role"], Role.FIELD_OFFICER)
        self.assertEqual(resp.data["role_display"], "Field Officer")

    def test_patch_updates_editable_fields(self):
        resp = self.client.patch(
            self.url,
            {"first_name": "Renamed", "phone_number": "+989121234567"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.user.refresh_from_db()
        self.assertEqual(self.user.first_name, "Renamed")
        self.assertEqual(self.user.phone_number, "+989121234567")

    def test_patch_cannot_change_role(self):
        resp = self.client.patch(self.url, {"role": Role.SUPER_ADMIN}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertEqual(self.user.role, Role.FIELD_OFFICER)

    def test_patch_rejects_email_of_another_account(self):
        resp = self.client.patch(self.url, {"email": "other@example.com"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("email", resp.data)

    def test_patch_rejects_malformed_phone(self):
        resp = self.client.patch(self.url, {"phone_number": "12ab"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
