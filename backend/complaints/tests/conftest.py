"""
Fixtures shared by the complaints test modules.

Provides one user per review tier, a client factory that authenticates
as a given user, a minimal jurisdiction and a ``make_complaint`` factory
that goes through ``ComplaintCreationService``.
"""

from __future__ import annotations

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import Role
from complaints.services import ComplaintCreationService
from jurisdiction.models import Commissionerate


@pytest.fixture()
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path)
    return tmp_path


@pytest.fixture()
def officer(create_user):
    return create_user(username="officer", role=Role.FIELD_OFFICER)


@pytest.fixture()
def other_officer(create_user):
    return create_user(username="other_officer", role=Role.FIELD_OFFICER)


@pytest.fixture()
def dcp(create_user):
    return create_user(username="dcp", role=Role.DCP)


@pytest.fixture()
def acp(create_user):
    return create_user(username="acp", role=Role.ACP)


@pytest.fixture()
def commissioner(create_user):
    return create_user(username="commissioner", role=Role.COMMISSIONER)


@pytest.fixture()
def admin(create_user):
    return create_user(username="admin", role=Role.SUPER_ADMIN)


@pytest.fixture()
def client_for():
    """Return an ``APIClient`` authenticated with a JWT for ``user``."""

    def _make(user) -> APIClient:
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(user)}")
        return client

    return _make


@pytest.fixture()
def commissionerate(db):
    return Commissionerate.objects.create(name="Central", code="CEN")


@pytest.fixture()
def complaint_payload(commissionerate):
    return {
        "nature_of_complaint": "Encroachment",
        "place_of_complaint": "Market Road",
        "complainant_name": "Ravi Kumar",
        "complainant_phone": "+919800000001",
        "brief_details": "Shop extended onto the footpath.",
        "priority": "HIGH",
        "commissionerate": commissionerate.pk,
    }


@pytest.fixture()
def make_complaint(complaint_payload, officer):
    def _make(created_by=None, **overrides):
        data = {**complaint_payload, **overrides}
        return ComplaintCreationService.create_complaint(data, created_by or officer)

    return _make
