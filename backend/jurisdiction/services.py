"""
Jurisdiction app Service Layer.

Architecture
------------
- ``JurisdictionService`` — master-data listing and creation for the
  four hierarchy levels, plus ``resolve_chain`` which the complaints
  app calls to validate a complaint's jurisdiction references.

Master data is readable by every authenticated user; only a
``SUPER_ADMIN`` may create entries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from django.db import models, transaction
from django.db.models import QuerySet

from accounts.models import Role
from core.domain.access import require_role
from core.domain.exceptions import NotFound, ValidationError

from .models import ACPDivision, Commissionerate, DCPZone, MunicipalZone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JurisdictionChain:
    """The resolved (and parent-consistent) jurisdiction of a complaint."""

    commissionerate: Commissionerate
    dcp_zone: DCPZone | None = None
    municipal_zone: MunicipalZone | None = None
    acp_division: ACPDivision | None = None


def _get_or_not_found(model_class: type[models.Model], pk: Any, label: str) -> Any:
    try:
        return model_class.objects.get(pk=pk)
    except model_class.DoesNotExist:
        raise NotFound(f"{label} with id {pk} does not exist.")


class JurisdictionService:
    """
    Master-data operations for the jurisdiction hierarchy.
    """

    # ── Listing ─────────────────────────────────────────────────────

    @staticmethod
    def list_commissionerates() -> QuerySet:
        return Commissionerate.objects.all()

    @staticmethod
    def list_dcp_zones(commissionerate_id: int | None = None) -> QuerySet:
        qs = DCPZone.objects.select_related("commissionerate")
        if commissionerate_id is not None:
            qs = qs.filter(commissionerate_id=commissionerate_id)
        return qs

    @staticmethod
    def list_municipal_zones(dcp_zone_id: int | None = None) -> QuerySet:
        qs = MunicipalZone.objects.select_related("dcp_zone")
        if dcp_zone_id is not None:
            qs = qs.filter(dcp_zone_id=dcp_zone_id)
        return qs

    @staticmethod
    def list_acp_divisions(municipal_zone_id: int | None = None) -> QuerySet:
        qs = ACPDivision.objects.select_related("municipal_zone")
        if municipal_zone_id is not None:
            qs = qs.filter(municipal_zone_id=municipal_zone_id)
        return qs

    # ── Creation (Super Admin) ──────────────────────────────────────

    @staticmethod
    @transaction.atomic
    def create_commissionerate(requesting_user: Any, data: dict[str, Any]) -> Commissionerate:
        require_role(requesting_user, Role.SUPER_ADMIN)
        obj = Commissionerate.objects.create(name=data["name"], code=data.get("code", ""))
        logger.info("Commissionerate #%d created by user %s", obj.pk, requesting_user.pk)
        return obj

    @staticmethod
    @transaction.atomic
    def create_dcp_zone(requesting_user: Any, data: dict[str, Any]) -> DCPZone:
        require_role(requesting_user, Role.SUPER_ADMIN)
        parent = _get_or_not_found(Commissionerate, data["commissionerate_id"], "Commissionerate")
        obj = DCPZone.objects.create(
            name=data["name"], code=data.get("code", ""), commissionerate=parent,
        )
        logger.info("DCP zone #%d created by user %s", obj.pk, requesting_user.pk)
        return obj

    @staticmethod
    @transaction.atomic
    def create_municipal_zone(requesting_user: Any, data: dict[str, Any]) -> MunicipalZone:
        require_role(requesting_user, Role.SUPER_ADMIN)
        parent = _get_or_not_found(DCPZone, data["dcp_zone_id"], "DCP zone")
        obj = MunicipalZone.objects.create(
            name=data["name"], code=data.get("code", ""), dcp_zone=parent,
        )
        logger.info("Municipal zone #%d created by user %s", obj.pk, requesting_user.pk)
        return obj

    @staticmethod
    @transaction.atomic
    def create_acp_division(requesting_user: Any, data: dict[str, Any]) -> ACPDivision:
        require_role(requesting_user, Role.SUPER_ADMIN)
        parent = _get_or_not_found(MunicipalZone, data["municipal_zone_id"], "Municipal zone")
        obj = ACPDivision.objects.create(
            name=data["name"], code=data.get("code", ""), municipal_zone=parent,
        )
        logger.info("ACP division #%d created by user %s", obj.pk, requesting_user.pk)
        return obj

    # ── Chain validation ────────────────────────────────────────────

    @staticmethod
    def resolve_chain(
        *,
        commissionerate_id: int,
        dcp_zone_id: int | None = None,
        municipal_zone_id: int | None = None,
        acp_division_id: int | None = None,
    ) -> JurisdictionChain:
        """
        Load every referenced level and check that each belongs to the
        nearest level above it that was given.  Optional levels may be
        skipped; the check then walks through the skipped level, so a
        municipal zone given without a DCP zone must still sit under the
        complaint's commissionerate.

        Raises:
            NotFound:        A referenced record does not exist.
            ValidationError: A record does not belong to its parent.
        """
        commissionerate = _get_or_not_found(
            Commissionerate, commissionerate_id, "Commissionerate"
        )
        dcp_zone = municipal_zone = acp_division = None

        if dcp_zone_id is not None:
            dcp_zone = _get_or_not_found(DCPZone, dcp_zone_id, "DCP zone")
            if dcp_zone.commissionerate_id != commissionerate.pk:
                raise ValidationError(
                    f"DCP zone {dcp_zone.pk} does not belong to commissionerate "
                    f"{commissionerate.pk}.",
                    field="dcp_zone",
                )

        if municipal_zone_id is not None:
            municipal_zone = _get_or_not_found(MunicipalZone, municipal_zone_id, "Municipal zone")
            if dcp_zone is not None:
                consistent = municipal_zone.dcp_zone_id == dcp_zone.pk
            else:
                consistent = municipal_zone.dcp_zone.commissionerate_id == commissionerate.pk
            if not consistent:
                raise ValidationError(
                    f"Municipal zone {municipal_zone.pk} is outside the selected "
                    f"DCP zone / commissionerate.",
                    field="municipal_zone",
                )

        if acp_division_id is not None:
            acp_division = _get_or_not_found(ACPDivision, acp_division_id, "ACP division")
            parent_zone = acp_division.municipal_zone
            if municipal_zone is not None:
                consistent = parent_zone.pk == municipal_zone.pk
            elif dcp_zone is not None:
                consistent = parent_zone.dcp_zone_id == dcp_zone.pk
            else:
                consistent = parent_zone.dcp_zone.commissionerate_id == commissionerate.pk
            if not consistent:
                raise ValidationError(
                    f"ACP division {acp_division.pk} is outside the selected "
                    f"municipal zone / DCP zone / commissionerate.",
                    field="acp_division",
                )

        return JurisdictionChain(
            commissionerate=commissionerate,
            dcp_zone=dcp_zone,
            municipal_zone=municipal_zone,
            acp_division=acp_division,
        )
