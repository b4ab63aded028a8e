"""
Core app services — **Service Layer**.

Contains cross-app aggregation logic for the dashboard and the system
constants endpoint.  Views delegate all work to the service classes
defined here.

╔══════════════════════════════════════════════════════════════════════╗
║  CROSS-APP IMPORT RULEBOOK                                         ║
║                                                                    ║
║  The core app sits *below* every other app: ``complaints`` and     ║
║  ``accounts`` import ``core.domain``.  To prevent circular imports ║
║  at module load time:                                              ║
║                                                                    ║
║  1. NEVER import models or services from other apps at the         ║
║     **module level**.  Import inside the method that needs them.   ║
║                                                                    ║
║  2. Preferred pattern:                                             ║
║       from django.apps import apps                                 ║
║       Notice = apps.get_model("complaints", "Notice")              ║
║                                                                    ║
║  3. Prefer ``.aggregate()`` and ``.values().annotate()`` over      ║
║     Python-side loops.                                             ║
╚══════════════════════════════════════════════════════════════════════╝
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from django.apps import apps
from django.db.models import Count, Q, QuerySet

from core.constants import RECENT_COMPLAINTS_LIMIT
from core.domain.access import get_user_role

if TYPE_CHECKING:
    from accounts.models import User


# ═══════════════════════════════════════════════════════════════════
#  Dashboard Aggregation Service
# ═══════════════════════════════════════════════════════════════════

class DashboardAggregationService:
    """
    Produces an aggregated statistics dict consumed by
    ``DashboardStatsSerializer``.

    Every count is computed over the complaints the requesting user may
    see, so a Field Officer's dashboard only reflects complaints they
    filed while DCP and above see department-wide numbers.
    """

    #: Notice filters selecting the notices that wait on each role.
    _PENDING_STAGE_FILTERS: dict[str, Q] = {
        "DCP": Q(dcp_approved_at__isnull=True),
        "ACP": Q(dcp_approved_at__isnull=False, acp_approved_at__isnull=True),
        "COMMISSIONER": Q(acp_approved_at__isnull=False, commissioner_approved_at__isnull=True),
        "SUPER_ADMIN": Q(),
    }

    def __init__(self, user: User) -> None:
        self.user = user

    # ── Public API ──────────────────────────────────────────────────

    def get_stats(self) -> dict[str, Any]:
        """Return the full dashboard statistics dictionary."""
        from complaints.models import ComplaintPriority, ComplaintStatus
        from complaints.workflow import TERMINAL_STATUSES

        complaint_qs = self._get_complaint_queryset()

        aggregates = complaint_qs.aggregate(
            total_complaints=Count("id"),
            created_by_me=Count("id", filter=Q(created_by=self.user)),
            assigned_to_me=Count("id", filter=Q(assigned_to=self.user)),
            resolved=Count("id", filter=Q(status=ComplaintStatus.RESOLVED)),
            pending=Count("id", filter=~Q(status__in=TERMINAL_STATUSES)),
        )

        return {
            **aggregates,
            "complaints_by_status": self._group_by(complaint_qs, "status", ComplaintStatus),
            "complaints_by_priority": self._group_by(complaint_qs, "priority", ComplaintPriority),
            "pending_notice_approvals": self._get_pending_notice_approvals(complaint_qs),
            "recent_complaints": self._get_recent_complaints(complaint_qs),
        }

    # ── Private helpers ─────────────────────────────────────────────

    def _get_complaint_queryset(self) -> QuerySet:
        from complaints.services import ComplaintQueryService

        return ComplaintQueryService.scoped_queryset(self.user)

    @staticmethod
    def _group_by(
        complaint_qs: QuerySet,
        field_name: str,
        choices_class: type,
    ) -> list[dict[str, Any]]:
        """Group ``complaint_qs`` by ``field_name`` and label each value."""
        label_map = dict(choices_class.choices)
        rows = (
            complaint_qs
            .values(field_name)
            .annotate(count=Count("id"))
            .order_by(field_name)
        )
        return [
            {
                "value": row[field_name],
                "label": label_map.get(row[field_name], row[field_name]),
                "count": row["count"],
            }
            for row in rows
        ]

    def _get_pending_notice_approvals(self, complaint_qs: QuerySet) -> int:
        """Count pending notices whose next open stage belongs to the user's role."""
        stage_filter = self._PENDING_STAGE_FILTERS.get(get_user_role(self.user))
        if stage_filter is None:
            return 0
        Notice = apps.get_model("complaints", "Notice")
        return (
            Notice.objects
            .filter(status="PENDING", complaint__in=complaint_qs)
            .filter(stage_filter)
            .count()
        )

    @staticmethod
    def _get_recent_complaints(complaint_qs: QuerySet) -> list[dict[str, Any]]:
        rows = complaint_qs.order_by("-created_at")[:RECENT_COMPLAINTS_LIMIT]
        return [
            {
                "id": c.pk,
                "complaint_code": c.complaint_code,
                "complainant_name": c.complainant_name,
                "status": c.status,
                "created_at": c.created_at,
            }
            for c in rows
        ]


# ═══════════════════════════════════════════════════════════════════
#  System Constants Service
# ═══════════════════════════════════════════════════════════════════

class SystemConstantsService:
    """
    Gathers all system-wide choice enumerations into a single dict for
    the frontend.

    This service is **stateless**; it does not depend on the requesting
    user.
    """

    @staticmethod
    def get_constants() -> dict[str, Any]:
        """Return all system constants as a dict."""
        from accounts.models import Role
        from complaints.models import (
            ComplaintPriority,
            ComplaintStatus,
            FIRStatus,
            NoticeSlot,
            NoticeStage,
            NoticeStatus,
        )

        to_list = SystemConstantsService._choices_to_list

        return {
            "complaint_statuses": to_list(ComplaintStatus),
            "complaint_priorities": to_list(ComplaintPriority),
            "roles": to_list(Role),
            "fir_statuses": to_list(FIRStatus),
            "notice_statuses": to_list(NoticeStatus),
            "notice_stages": to_list(NoticeStage),
            "notice_slots": to_list(NoticeSlot),
        }

    @staticmethod
    def _choices_to_list(
        choices_class: type,
    ) -> list[dict[str, str]]:
        """
        Convert a Django ``TextChoices`` class to a list of
        ``{"value": ..., "label": ...}`` dicts.
        """
        return [
            {"value": str(value), "label": str(label)}
            for value, label in choices_class.choices
        ]
