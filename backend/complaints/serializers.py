"""
Complaints app serializers.

Contains all Request and Response serializers for the Complaints API.
Serializers handle field definitions, read/write constraints, and
field-level validation only.  **No workflow rules live here**; role
checks, state transitions and uniqueness of FIR numbers belong in
``services.py`` / ``workflow.py``.

Structure
---------
1. Filter / query-param serializers
2. Complaint read serializers (list, detail) and nested read models
3. Complaint write serializers (create, update, forward)
4. Notice workflow action serializers
5. FIR, comment and attachment serializers
"""

from __future__ import annotations

import re
from typing import Any

from rest_framework import serializers

from accounts.models import Role
from accounts.serializers import UserSummarySerializer

from . import workflow
from .models import (
    FIR,
    Comment,
    Complaint,
    ComplaintAttachment,
    ComplaintPriority,
    ComplaintStatus,
    Notice,
    NoticeStage,
)

# ── Phone number validation regex ───────────────────────────────────
_PHONE_REGEX = re.compile(r"^\+?\d{7,15}$")


# ═══════════════════════════════════════════════════════════════════
#  1. Filter / Query-Parameter Serializers
# ═══════════════════════════════════════════════════════════════════


class ComplaintFilterSerializer(serializers.Serializer):
    """
    Query parameters for ``GET /api/complaints/``.

    ``status``   : one of ``ComplaintStatus``
    ``priority`` : one of ``ComplaintPriority``
    ``search``   : free text over code, complainant, nature and place
    """

    status = serializers.ChoiceField(choices=ComplaintStatus.choices, required=False)
    priority = serializers.ChoiceField(choices=ComplaintPriority.choices, required=False)
    search = serializers.CharField(required=False, allow_blank=True)


# ═══════════════════════════════════════════════════════════════════
#  2. Read Serializers
# ═══════════════════════════════════════════════════════════════════


class NoticeSerializer(serializers.ModelSerializer):
    """Full approval state of one notice slot."""

    issued_by = UserSummarySerializer(read_only=True)
    dcp_approved_by = UserSummarySerializer(read_only=True)
    acp_approved_by = UserSummarySerializer(read_only=True)
    commissioner_approved_by = UserSummarySerializer(read_only=True)
    rejected_by = UserSummarySerializer(read_only=True)
    current_stage = serializers.SerializerMethodField()

    class Meta:
        model = Notice
        fields = [
            "id",
            "slot",
            "number",
            "issue_date",
            "status",
            "current_stage",
            "issued_by",
            "issued_at",
            "awaiting_higher_authority",
            "dcp_approved_by",
            "dcp_approved_at",
            "acp_approved_by",
            "acp_approved_at",
            "commissioner_approved_by",
            "commissioner_approved_at",
            "rejected_by",
            "rejected_at",
            "rejected_stage",
            "rejection_reason",
        ]
        read_only_fields = fields

    def get_current_stage(self, obj: Notice) -> str | None:
        if obj.status != "PENDING":
            return None
        return workflow.current_stage(obj)


class FIRSerializer(serializers.ModelSerializer):
    created_by = UserSummarySerializer(read_only=True)
    updated_by = UserSummarySerializer(read_only=True)
    status_display = serializers.CharField(source="get_status_display", read_only=True)

    class Meta:
        model = FIR
        fields = [
            "id",
            "complaint",
            "fir_number",
            "registration_date",
            "police_station",
            "investigating_officer",
            "investigating_officer_contact",
            "sections_applied",
            "status",
            "status_display",
            "details",
            "remarks",
            "created_by",
            "updated_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ComplaintAttachmentSerializer(serializers.ModelSerializer):
    uploaded_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = ComplaintAttachment
        fields = [
            "id",
            "file",
            "filename",
            "mime_type",
            "size",
            "uploaded_by",
            "created_at",
        ]
        read_only_fields = fields


class ComplaintListSerializer(serializers.ModelSerializer):
    """Compact representation for the list endpoint."""

    status_display = serializers.CharField(source="get_status_display", read_only=True)
    created_by = UserSummarySerializer(read_only=True)
    assigned_to = UserSummarySerializer(read_only=True)
    commissionerate_name = serializers.CharField(source="commissionerate.name", read_only=True)

    class Meta:
        model = Complaint
        fields = [
            "id",
            "complaint_code",
            "nature_of_complaint",
            "complainant_name",
            "place_of_complaint",
            "priority",
            "status",
            "status_display",
            "created_by",
            "assigned_to",
            "commissionerate",
            "commissionerate_name",
            "version",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ComplaintDetailSerializer(serializers.ModelSerializer):
    """
    Full complaint with notices, FIRs and attachments.

    Comments are served separately by the comments endpoint because
    their visibility depends on the reader's role.
    """

    status_display = serializers.CharField(source="get_status_display", read_only=True)
    created_by = UserSummarySerializer(read_only=True)
    assigned_to = UserSummarySerializer(read_only=True)
    updated_by = UserSummarySerializer(read_only=True)
    commissionerate_name = serializers.CharField(source="commissionerate.name", read_only=True)
    dcp_zone_name = serializers.CharField(source="dcp_zone.name", read_only=True, default=None)
    municipal_zone_name = serializers.CharField(source="municipal_zone.name", read_only=True, default=None)
    acp_division_name = serializers.CharField(source="acp_division.name", read_only=True, default=None)
    notices = NoticeSerializer(many=True, read_only=True)
    firs = FIRSerializer(many=True, read_only=True)
    attachments = ComplaintAttachmentSerializer(many=True, read_only=True)

    class Meta:
        model = Complaint
        fields = [
            "id",
            "complaint_code",
            "unique_code",
            "nature_of_complaint",
            "place_of_complaint",
            "complainant_name",
            "complainant_phone",
            "complainant_address",
            "respondent_details",
            "brief_details",
            "source",
            "mode",
            "priority",
            "status",
            "status_display",
            "version",
            "action_taken_details",
            "legal_issues",
            "investigation_officer_remarks",
            "field_visit_date",
            "pe_report",
            "pe_status",
            "commissionerate",
            "commissionerate_name",
            "dcp_zone",
            "dcp_zone_name",
            "municipal_zone",
            "municipal_zone_name",
            "acp_division",
            "acp_division_name",
            "created_by",
            "assigned_to",
            "updated_by",
            "notices",
            "firs",
            "attachments",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


# ═══════════════════════════════════════════════════════════════════
#  3. Complaint Write Serializers
# ═══════════════════════════════════════════════════════════════════


def _validate_phone(value: str) -> str:
    if value and not _PHONE_REGEX.match(value):
        raise serializers.ValidationError(
            "Phone number must contain 7 to 15 digits with an optional leading '+'."
        )
    return value


class ComplaintCreateSerializer(serializers.ModelSerializer):
    """
    Validates ``POST /api/complaints/``.

    Jurisdiction levels are plain ids; the service checks that they exist
    and form a consistent chain.  Files arrive separately in
    ``request.FILES`` under ``attachments``.
    """

    commissionerate = serializers.IntegerField()
    dcp_zone = serializers.IntegerField(required=False, allow_null=True)
    municipal_zone = serializers.IntegerField(required=False, allow_null=True)
    acp_division = serializers.IntegerField(required=False, allow_null=True)

    class Meta:
        model = Complaint
        fields = [
            "nature_of_complaint",
            "place_of_complaint",
            "complainant_name",
            "complainant_phone",
            "complainant_address",
            "respondent_details",
            "brief_details",
            "source",
            "mode",
            "priority",
            "commissionerate",
            "dcp_zone",
            "municipal_zone",
            "acp_division",
        ]

    def validate_complainant_phone(self, value: str) -> str:
        return _validate_phone(value)


class ComplaintUpdateSerializer(serializers.Serializer):
    """
    Validates ``PATCH /api/complaints/{id}/``.

    Every field is optional.  ``status`` and ``assigned_to_role`` are
    checked against the caller's role by the workflow service;
    ``version`` enables the optimistic-concurrency check.
    """

    nature_of_complaint = serializers.CharField(max_length=255, required=False)
    place_of_complaint = serializers.CharField(max_length=255, required=False)
    complainant_name = serializers.CharField(max_length=255, required=False)
    complainant_phone = serializers.CharField(max_length=16, required=False, allow_blank=True)
    complainant_address = serializers.CharField(required=False, allow_blank=True)
    respondent_details = serializers.CharField(required=False, allow_blank=True)
    brief_details = serializers.CharField(required=False)
    source = serializers.CharField(max_length=100, required=False, allow_blank=True)
    mode = serializers.CharField(max_length=100, required=False, allow_blank=True)
    priority = serializers.ChoiceField(choices=ComplaintPriority.choices, required=False)

    action_taken_details = serializers.CharField(required=False, allow_blank=True)
    legal_issues = serializers.CharField(required=False, allow_blank=True)
    investigation_officer_remarks = serializers.CharField(required=False, allow_blank=True)
    field_visit_date = serializers.DateField(required=False, allow_null=True)
    pe_report = serializers.CharField(required=False, allow_blank=True)
    pe_status = serializers.CharField(max_length=50, required=False, allow_blank=True)

    commissionerate = serializers.IntegerField(required=False)
    dcp_zone = serializers.IntegerField(required=False, allow_null=True)
    municipal_zone = serializers.IntegerField(required=False, allow_null=True)
    acp_division = serializers.IntegerField(required=False, allow_null=True)

    status = serializers.ChoiceField(choices=ComplaintStatus.choices, required=False)
    assigned_to_role = serializers.ChoiceField(choices=Role.choices, required=False)
    version = serializers.IntegerField(required=False, min_value=1)

    def validate_complainant_phone(self, value: str) -> str:
        return _validate_phone(value)


class VersionedActionSerializer(serializers.Serializer):
    """Body of actions that only carry an optional ``version``."""

    version = serializers.IntegerField(required=False, min_value=1)


# ═══════════════════════════════════════════════════════════════════
#  4. Notice Workflow Serializers
# ═══════════════════════════════════════════════════════════════════


class NoticeIssueSerializer(serializers.Serializer):
    number = serializers.CharField(max_length=100)
    issue_date = serializers.DateField()


class NoticeApproveSerializer(VersionedActionSerializer):
    stage = serializers.ChoiceField(choices=NoticeStage.choices)


class NoticeRejectSerializer(VersionedActionSerializer):
    """
    ``reason`` may arrive blank here; an empty reason is refused by the
    workflow so the error carries the domain message.
    """

    stage = serializers.ChoiceField(choices=NoticeStage.choices)
    reason = serializers.CharField(required=False, allow_blank=True, default="")


# ═══════════════════════════════════════════════════════════════════
#  5. FIR, Comment and Attachment Serializers
# ═══════════════════════════════════════════════════════════════════


class FIRCreateSerializer(serializers.ModelSerializer):
    class Meta:
        model = FIR
        fields = [
            "fir_number",
            "registration_date",
            "police_station",
            "investigating_officer",
            "investigating_officer_contact",
            "sections_applied",
            "status",
            "details",
            "remarks",
        ]
        extra_kwargs = {
            # uniqueness is reported as 409 by the service
            "fir_number": {"validators": []},
        }


class FIRUpdateSerializer(FIRCreateSerializer):
    class Meta(FIRCreateSerializer.Meta):
        extra_kwargs = {
            "fir_number": {"validators": [], "required": False},
            "registration_date": {"required": False},
            "police_station": {"required": False},
        }


class CommentCreateSerializer(serializers.Serializer):
    content = serializers.CharField(allow_blank=True)
    is_internal = serializers.BooleanField(required=False, default=False)
    parent_id = serializers.IntegerField(required=False, allow_null=True)


class CommentUpdateSerializer(serializers.Serializer):
    content = serializers.CharField(required=False, allow_blank=True)
    is_internal = serializers.BooleanField(required=False)


class CommentSerializer(serializers.ModelSerializer):
    created_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = Comment
        fields = [
            "id",
            "complaint",
            "parent",
            "content",
            "is_internal",
            "created_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CommentNodeSerializer(serializers.Serializer):
    """Serializes a ``CommentNode`` tree (comment fields plus ``replies``)."""

    def to_representation(self, node: Any) -> dict[str, Any]:
        data = CommentSerializer(node.comment).data
        data["replies"] = [self.to_representation(child) for child in node.replies]
        return data
