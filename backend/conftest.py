"""
Project-wide pytest fixtures.

``api_client``   an unauthenticated DRF ``APIClient``.
``create_user``  factory for users with unique identifiers and a role.
``auth_header``  factory returning a bearer header for a fresh user.

App-specific fixtures (review-tier users, complaints) live in each app's
``tests/conftest.py``.
"""

from __future__ import annotations

import itertools

import pytest
from rest_framework.test import APIClient


@pytest.fixture()
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture()
def create_user(db):
    """
    Create a user; every identifier not given is derived from a counter
    so repeated calls never collide on the unique columns.

    Usage::

        officer = create_user(role=Role.FIELD_OFFICER)
        dcp = create_user(username="dcp_north", role=Role.DCP, first_name="Anil")
    """
    from accounts.models import User

    counter = itertools.count(1)

    def _factory(
        *,
        username: str | None = None,
        password: str = "TestPass123!",
        role: str | None = None,
        **fields,
    ) -> User:
        n = next(counter)
        username = username or f"testuser{n}"
        fields.setdefault("email", f"{username}@test.local")
        fields.setdefault("national_id", f"{n:010d}")
        fields.setdefault("phone_number", f"0912{n:07d}")
        if role is not None:
            fields["role"] = role
        return User.objects.create_user(username=username, password=password, **fields)

    return _factory


@pytest.fixture()
def auth_header(create_user):
    """
    Create a user and return ``{"Authorization": "Bearer <access token>"}``.

    Usage::

        header = auth_header(role=Role.SUPER_ADMIN)
        api_client.credentials(HTTP_AUTHORIZATION=header["Authorization"])
    """
    from rest_framework_simplejwt.tokens import AccessToken

    def _make(*, role: str | None = None, **user_fields) -> dict[str, str]:
        user = create_user(role=role, **user_fields)
        return {"Authorization": f"Bearer {AccessToken.for_user(user)}"}

    return _make
