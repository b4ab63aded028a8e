"""
Tests for the jurisdiction master data.

Endpoints under test:
    GET/POST  /api/jurisdiction/commissionerates/   (jurisdiction:commissionerate-list)
    GET/POST  /api/jurisdiction/dcp-zones/          (jurisdiction:dcp-zone-list)
    GET/POST  /api/jurisdiction/acp-divisions/      (jurisdiction:acp-division-list)

Plus ``JurisdictionService.resolve_chain`` which the complaints app
uses to validate a complaint's jurisdiction references.
"""

from __future__ import annotations

import pytest
from django.urls import reverse

from accounts.models import Role
from core.domain.exceptions import NotFound, ValidationError
from jurisdiction.models import ACPDivision, Commissionerate, DCPZone, MunicipalZone
from jurisdiction.services import JurisdictionService


@pytest.fixture()
def hierarchy(db):
    """Two independent commissionerate trees, ``a`` and ``b``."""
    tree = {}
    for key in ("a", "b"):
        comm = Commissionerate.objects.create(name=f"Commissionerate {key.upper()}")
        dcp = DCPZone.objects.create(name=f"DCP {key.upper()}", commissionerate=comm)
        mz = MunicipalZone.objects.create(name=f"Zone {key.upper()}", dcp_zone=dcp)
        acp = ACPDivision.objects.create(name=f"ACP {key.upper()}", municipal_zone=mz)
        tree[key] = {"comm": comm, "dcp": dcp, "mz": mz, "acp": acp}
    return tree


@pytest.mark.django_db
class TestMasterDataEndpoints:

    def test_any_authenticated_user_can_list(self, api_client, auth_header, hierarchy):
        api_client.credentials(HTTP_AUTHORIZATION=auth_header(role=Role.COMPLAINANT)["Authorization"])
        resp = api_client.get(reverse("jurisdiction:commissionerate-list"))
        assert resp.status_code == 200
        assert {row["name"] for row in resp.data} == {"Commissionerate A", "Commissionerate B"}

    def test_list_requires_authentication(self, api_client):
        resp = api_client.get(reverse("jurisdiction:commissionerate-list"))
        assert resp.status_code == 401

    def test_dcp_zones_filtered_by_parent(self, api_client, auth_header, hierarchy):
        api_client.credentials(HTTP_AUTHORIZATION=auth_header(role=Role.DCP)["Authorization"])
        resp = api_client.get(
            reverse("jurisdiction:dcp-zone-list"),
            {"commissionerate": hierarchy["b"]["comm"].pk},
        )
        assert resp.status_code == 200
        assert [row["name"] for row in resp.data] == ["DCP B"]

    def test_non_integer_filter_is_400(self, api_client, auth_header):
        api_client.credentials(HTTP_AUTHORIZATION=auth_header(role=Role.DCP)["Authorization"])
        resp = api_client.get(reverse("jurisdiction:dcp-zone-list"), {"commissionerate": "abc"})
        assert resp.status_code == 400

    def test_super_admin_creates_entries(self, api_client, auth_header):
        api_client.credentials(HTTP_AUTHORIZATION=auth_header(role=Role.SUPER_ADMIN)["Authorization"])
        resp = api_client.post(
            reverse("jurisdiction:commissionerate-list"),
            {"name": "  Central  ", "code": "CEN"},
            format="json",
        )
        assert resp.status_code == 201, resp.data
        assert resp.data["name"] == "Central"

        resp = api_client.post(
            reverse("jurisdiction:dcp-zone-list"),
            {"name": "North", "commissionerate_id": resp.data["id"]},
            format="json",
        )
        assert resp.status_code == 201, resp.data
        assert resp.data["commissionerate_name"] == "Central"

    def test_unknown_parent_is_404(self, api_client, auth_header):
        api_client.credentials(HTTP_AUTHORIZATION=auth_header(role=Role.SUPER_ADMIN)["Authorization"])
        resp = api_client.post(
            reverse("jurisdiction:acp-division-list"),
            {"name": "Orphan", "municipal_zone_id": 424242},
            format="json",
        )
        assert resp.status_code == 404
        assert not ACPDivision.objects.filter(name="Orphan").exists()

    @pytest.mark.parametrize("role", [Role.FIELD_OFFICER, Role.DCP, Role.ACP, Role.COMMISSIONER])
    def test_only_super_admin_may_create(self, api_client, auth_header, role):
        api_client.credentials(HTTP_AUTHORIZATION=auth_header(role=role)["Authorization"])
        resp = api_client.post(
            reverse("jurisdiction:commissionerate-list"), {"name": "Nope"}, format="json",
        )
        assert resp.status_code == 403
        assert not Commissionerate.objects.filter(name="Nope").exists()


@pytest.mark.django_db
class TestResolveChain:

    def test_full_consistent_chain(self, hierarchy):
        a = hierarchy["a"]
        chain = JurisdictionService.resolve_chain(
            commissionerate_id=a["comm"].pk,
            dcp_zone_id=a["dcp"].pk,
            municipal_zone_id=a["mz"].pk,
            acp_division_id=a["acp"].pk,
        )
        assert chain.commissionerate == a["comm"]
        assert chain.acp_division == a["acp"]

    def test_optional_levels_may_be_omitted(self, hierarchy):
        a = hierarchy["a"]
        chain = JurisdictionService.resolve_chain(commissionerate_id=a["comm"].pk)
        assert chain.dcp_zone is None
        assert chain.municipal_zone is None
        assert chain.acp_division is None

    def test_dcp_zone_from_other_commissionerate(self, hierarchy):
        with pytest.raises(ValidationError) as exc:
            JurisdictionService.resolve_chain(
                commissionerate_id=hierarchy["a"]["comm"].pk,
                dcp_zone_id=hierarchy["b"]["dcp"].pk,
            )
        assert exc.value.field == "dcp_zone"

    def test_skipped_level_still_checked_against_commissionerate(self, hierarchy):
        with pytest.raises(ValidationError) as exc:
            JurisdictionService.resolve_chain(
                commissionerate_id=hierarchy["a"]["comm"].pk,
                acp_division_id=hierarchy["b"]["acp"].pk,
            )
        assert exc.value.field == "acp_division"

    def test_missing_commissionerate(self, db):
        with pytest.raises(NotFound):
            JurisdictionService.resolve_chain(commissionerate_id=987654)
