"""
Integration tests — multi-field login.

Endpoint under test:  POST /api/accounts/auth/login/
                      (named URL: accounts:login)
Request payload:      {"identifier": "<username|email|phone|national_id>",
                       "password": "<password>"}
Success response:     HTTP 200, body contains {"access", "refresh", "user"}
Failure response:     HTTP 400 from CustomTokenObtainPairSerializer.validate
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

# ── Constants ────────────────────────────────────────────────────────────────
_PASSWORD = "Str0ng!Pass99"

_USER_FIELDS = {
    "username":     "login_test_user",
    "email":        "login_test_user@example.com",
    "phone_number": "09130000099",
    "national_id":  "8800000099",
    "first_name":   "Login",
    "last_name":    "Tester",
}


class TestAuthLoginMultiIdentifier(TestCase):
    """Any of the four unique identifiers plus the password logs the user in."""

    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user(
            password=_PASSWORD,
            role=Role.DCP,
            **_USER_FIELDS,
        )

    def setUp(self):
        self.client = APIClient()
        self.login_url = reverse("accounts:login")

    # ── Helpers ──────────────────────────────────────────────────────────────

    def _post_login(self, identifier: str, password: str):
        return self.client.post(
            self.login_url,
            {"identifier": identifier, "password": password},
            format="json",
        )

    def _assert_success(self, resp):
        self.assertEqual(
            resp.status_code,
            status.HTTP_200_OK,
            msg=f"Expected 200. Body: {resp.data}",
        )
        self.assertIn("access", resp.data)
        self.assertIn("refresh", resp.data)
        self.assertEqual(resp.data["user"]["id"], self.user.pk)
        self.assertEqual(resp.data["user"]["role"], Role.DCP)

    # ── Success: one test per identifier type ────────────────────────────────

    def test_login_with_username(self):
        self._assert_success(self._post_login(_USER_FIELDS["username"], _PASSWORD))

    def test_login_with_email(self):
        self._assert_success(self._post_login(_USER_FIELDS["email"], _PASSWORD))

    def test_login_with_phone_number(self):
        self._assert_success(self._post_login(_USER_FIELDS["phone_number"], _PASSWORD))

    def test_login_with_national_id(self):
        self._assert_success(self._post_login(_USER_FIELDS["national_id"], _PASSWORD))

    def test_access_token_carries_role_claim(self):
        resp = self._post_login(_USER_FIELDS["username"], _PASSWORD)
        token = AccessToken(resp.data["access"])
        self.assertEqual(token["role"], Role.DCP)

    # ── Failures ─────────────────────────────────────────────────────────────

    def test_wrong_password_is_rejected(self):
        resp = self._post_login(_USER_FIELDS["username"], "not-the-password")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertNotIn("access", resp.data)

    def test_unknown_identifier_is_rejected(self):
        resp = self._post_login("nobody@example.com", _PASSWORD)
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_inactive_user_cannot_log_in(self):
        User.objects.filter(pk=self.user.pk).update(is_active=False)
        resp = self._post_login(_USER_FIELDS["username"], _PASSWORD)
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_protected_endpoint_without_token_is_401(self):
        resp = self.client.get(reverse("accounts:me"))
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
