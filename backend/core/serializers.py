"""
Core app serializers.

**Response-only** serializers for the aggregated endpoints served by the
core app.  They work exclusively with plain Python dicts / lists
produced by the service layer, keeping the core app decoupled from the
concrete models in ``complaints`` and ``accounts``.
"""

from __future__ import annotations

from rest_framework import serializers


# ════════════════════════════════════════════════════════════════════
#  Dashboard Statistics
# ════════════════════════════════════════════════════════════════════

class CountByChoiceSerializer(serializers.Serializer):
    """
    Complaint count for one choice value.

    Example::

        {"value": "UNDER_REVIEW_DCP", "label": "Under Review (DCP)", "count": 12}
    """

    value = serializers.CharField(help_text="Machine-readable choice value.")
    label = serializers.CharField(help_text="Human-readable display label.")
    count = serializers.IntegerField(help_text="Number of complaints with this value.")


class RecentComplaintSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    complaint_code = serializers.CharField()
    complainant_name = serializers.CharField()
    status = serializers.CharField()
    created_at = serializers.DateTimeField()


class DashboardStatsSerializer(serializers.Serializer):
    """
    Top-level response serializer for ``GET /api/core/dashboard/``.

    Response shape::

        {
            "total_complaints": 150,
            "created_by_me": 12,
            "assigned_to_me": 4,
            "resolved": 95,
            "pending": 42,
            "complaints_by_status": [...],
            "complaints_by_priority": [...],
            "pending_notice_approvals": 3,
            "recent_complaints": [...]
        }
    """

    # ── Scalar counters ──────────────────────────────────────────────
    total_complaints = serializers.IntegerField(
        help_text="Complaints visible to the caller.",
    )
    created_by_me = serializers.IntegerField(
        help_text="Visible complaints created by the caller.",
    )
    assigned_to_me = serializers.IntegerField(
        help_text="Visible complaints currently assigned to the caller.",
    )
    resolved = serializers.IntegerField(
        help_text="Visible complaints in RESOLVED status.",
    )
    pending = serializers.IntegerField(
        help_text="Visible complaints not yet in a terminal status.",
    )
    pending_notice_approvals = serializers.IntegerField(
        help_text="Pending notices whose next stage is the caller's to approve.",
    )

    # ── Nested breakdowns ────────────────────────────────────────────
    complaints_by_status = CountByChoiceSerializer(many=True)
    complaints_by_priority = CountByChoiceSerializer(many=True)
    recent_complaints = RecentComplaintSerializer(many=True)


# ════════════════════════════════════════════════════════════════════
#  System Constants / Enums
# ════════════════════════════════════════════════════════════════════

class ChoiceItemSerializer(serializers.Serializer):
    """
    A single key-label pair representing one choice/enum option.

    Example::

        {"value": "PENDING", "label": "Pending"}
    """

    value = serializers.CharField(
        help_text="Machine-readable value to send in API requests.",
    )
    label = serializers.CharField(
        help_text="Human-readable display label for the UI.",
    )


class SystemConstantsSerializer(serializers.Serializer):
    """
    Top-level response serializer for ``GET /api/core/constants/``.

    Provides all system-wide choice enumerations so the frontend can
    build dropdowns, filters, and labels **without** hardcoding values.
    """

    complaint_statuses = ChoiceItemSerializer(many=True)
    complaint_priorities = ChoiceItemSerializer(many=True)
    roles = ChoiceItemSerializer(many=True)
    fir_statuses = ChoiceItemSerializer(many=True)
    notice_statuses = ChoiceItemSerializer(many=True)
    notice_stages = ChoiceItemSerializer(many=True)
    notice_slots = ChoiceItemSerializer(many=True)
