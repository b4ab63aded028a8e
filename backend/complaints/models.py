"""
Complaints app models.

Covers the complaint aggregate: the complaint row itself, its two
notice-approval workflows (one ``Notice`` row per slot), FIRs, the
threaded comment tree, and uploaded attachments.
"""

from django.conf import settings
from django.db import models

from core.constants import ATTACHMENT_UPLOAD_DIR
from core.models import TimeStampedModel


# ────────────────────────────────────────────────────────────────────
# Choice enumerations
# ────────────────────────────────────────────────────────────────────

class ComplaintStatus(models.TextChoices):
    """
    Lifecycle of a complaint.  The first five values are the review
    tiers in order; ``RESOLVED``, ``REJECTED`` and ``CLOSED`` are terminal.
    """

    PENDING = "PENDING", "Pending"
    UNDER_REVIEW_DCP = "UNDER_REVIEW_DCP", "Under Review (DCP)"
    UNDER_REVIEW_ACP = "UNDER_REVIEW_ACP", "Under Review (ACP)"
    UNDER_REVIEW_COMMISSIONER = "UNDER_REVIEW_COMMISSIONER", "Under Review (Commissioner)"
    INVESTIGATION_IN_PROGRESS = "INVESTIGATION_IN_PROGRESS", "Investigation In Progress"
    LEGAL_REVIEW = "LEGAL_REVIEW", "Legal Review"
    RESOLVED = "RESOLVED", "Resolved"
    REJECTED = "REJECTED", "Rejected"
    CLOSED = "CLOSED", "Closed"


class ComplaintPriority(models.TextChoices):
    LOW = "LOW", "Low"
    NORMAL = "NORMAL", "Normal"
    HIGH = "HIGH", "High"
    URGENT = "URGENT", "Urgent"


class NoticeSlot(models.TextChoices):
    """The two notices that can be issued against a respondent."""

    FIRST = "first", "Notice 1"
    SECOND = "second", "Notice 2"


class NoticeStage(models.TextChoices):
    """Approval stages, in the order they must be completed."""

    DCP = "dcp", "DCP"
    ACP = "acp", "ACP"
    COMMISSIONER = "commissioner", "Commissioner"


class NoticeStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    APPROVED = "APPROVED", "Approved"
    REJECTED = "REJECTED", "Rejected"


class FIRStatus(models.TextChoices):
    REGISTERED = "REGISTERED", "Registered"
    UNDER_INVESTIGATION = "UNDER_INVESTIGATION", "Under Investigation"
    CHARGESHEET_FILED = "CHARGESHEET_FILED", "Chargesheet Filed"
    COURT_PROCEEDINGS = "COURT_PROCEEDINGS", "Court Proceedings"
    CLOSED = "CLOSED", "Closed"
    WITHDRAWN = "WITHDRAWN", "Withdrawn"


# ────────────────────────────────────────────────────────────────────
# Models
# ────────────────────────────────────────────────────────────────────

class Complaint(TimeStampedModel):
    """
    Root of the complaint aggregate.

    * ``status`` moves through the review tiers
      (Field Officer → DCP → ACP → Commissioner).
    * ``version`` is incremented on every write to the row (including
      notice-workflow writes) and backs the optimistic-concurrency check.
    """

    complaint_code = models.CharField(
        max_length=40,
        unique=True,
        verbose_name="Complaint Code",
    )
    unique_code = models.CharField(
        max_length=50,
        unique=True,
        verbose_name="Unique Reference Code",
    )

    # ── Complaint details ───────────────────────────────────────────
    nature_of_complaint = models.CharField(
        max_length=255,
        verbose_name="Nature of Complaint",
    )
    place_of_complaint = models.CharField(
        max_length=255,
        verbose_name="Place of Complaint",
    )
    complainant_name = models.CharField(
        max_length=255,
        verbose_name="Name of the Complainant",
    )
    complainant_phone = models.CharField(
        max_length=16,
        blank=True,
        default="",
        verbose_name="Complainant Phone",
    )
    complainant_address = models.TextField(
        blank=True,
        default="",
        verbose_name="Complainant Address",
    )
    respondent_details = models.TextField(
        blank=True,
        default="",
        verbose_name="Details of Respondent",
    )
    brief_details = models.TextField(
        verbose_name="Brief Details of the Complaint",
    )
    source = models.CharField(
        max_length=100,
        blank=True,
        default="",
        verbose_name="Source",
    )
    mode = models.CharField(
        max_length=100,
        blank=True,
        default="",
        verbose_name="Mode",
    )
    priority = models.CharField(
        max_length=10,
        choices=ComplaintPriority.choices,
        default=ComplaintPriority.NORMAL,
        verbose_name="Priority",
        db_index=True,
    )
    status = models.CharField(
        max_length=30,
        choices=ComplaintStatus.choices,
        default=ComplaintStatus.PENDING,
        verbose_name="Status",
        db_index=True,
    )
    version = models.PositiveIntegerField(
        default=1,
        verbose_name="Version",
    )

    # ── Review outcome (editable by reviewers) ──────────────────────
    action_taken_details = models.TextField(
        blank=True,
        default="",
        verbose_name="Action Taken (Brief Details)",
    )
    legal_issues = models.TextField(
        blank=True,
        default="",
        verbose_name="Legal Issues",
    )
    investigation_officer_remarks = models.TextField(
        blank=True,
        default="",
        verbose_name="Investigation Officer Review Comments",
    )
    field_visit_date = models.DateField(
        null=True,
        blank=True,
        verbose_name="Field Visit Date",
    )
    pe_report = models.TextField(
        blank=True,
        default="",
        verbose_name="Preliminary Enquiry Report",
    )
    pe_status = models.CharField(
        max_length=50,
        blank=True,
        default="",
        verbose_name="Preliminary Enquiry Status",
    )

    # ── Ownership ───────────────────────────────────────────────────
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="created_complaints",
        verbose_name="Created By",
    )
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_complaints",
        verbose_name="Assigned To",
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="updated_complaints",
        verbose_name="Last Updated By",
    )

    # ── Jurisdiction ────────────────────────────────────────────────
    commissionerate = models.ForeignKey(
        "jurisdiction.Commissionerate",
        on_delete=models.PROTECT,
        related_name="complaints",
        verbose_name="Commissionerate",
    )
    dcp_zone = models.ForeignKey(
        "jurisdiction.DCPZone",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="complaints",
        verbose_name="DCP Zone",
    )
    municipal_zone = models.ForeignKey(
        "jurisdiction.MunicipalZone",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="complaints",
        verbose_name="Municipal Zone",
    )
    acp_division = models.ForeignKey(
        "jurisdiction.ACPDivision",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="complaints",
        verbose_name="ACP Division",
    )

    class Meta:
        verbose_name = "Complaint"
        verbose_name_plural = "Complaints"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.complaint_code} [{self.get_status_display()}]"


class Notice(TimeStampedModel):
    """
    One notice slot of a complaint with its three-stage approval state.

    The row is created on first issuance and fully reset on every
    reissuance.  Stage columns are named explicitly; the mapping from
    ``NoticeStage`` to columns lives in ``complaints.workflow``.
    """

    complaint = models.ForeignKey(
        Complaint,
        on_delete=models.CASCADE,
        related_name="notices",
        verbose_name="Complaint",
    )
    slot = models.CharField(
        max_length=10,
        choices=NoticeSlot.choices,
        verbose_name="Notice Slot",
    )
    number = models.CharField(
        max_length=100,
        verbose_name="Notice Number",
    )
    issue_date = models.DateField(
        verbose_name="Issue Date",
    )
    status = models.CharField(
        max_length=10,
        choices=NoticeStatus.choices,
        default=NoticeStatus.PENDING,
        verbose_name="Approval Status",
    )
    issued_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="issued_notices",
        verbose_name="Issued By",
    )
    issued_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name="Issued At",
    )
    awaiting_higher_authority = models.BooleanField(
        default=False,
        verbose_name="Awaiting Higher Authority",
        help_text="Set when a Field Officer issues the notice; cleared by the first approval.",
    )

    # ── Stage approvals ─────────────────────────────────────────────
    dcp_approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="DCP Approved By",
    )
    dcp_approved_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name="DCP Approved At",
    )
    acp_approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="ACP Approved By",
    )
    acp_approved_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name="ACP Approved At",
    )
    commissioner_approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="Commissioner Approved By",
    )
    commissioner_approved_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name="Commissioner Approved At",
    )

    # ── Rejection ───────────────────────────────────────────────────
    rejected_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="Rejected By",
    )
    rejected_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name="Rejected At",
    )
    rejected_stage = models.CharField(
        max_length=15,
        choices=NoticeStage.choices,
        blank=True,
        default="",
        verbose_name="Rejected At Stage",
    )
    rejection_reason = models.TextField(
        blank=True,
        default="",
        verbose_name="Rejection Reason",
    )

    class Meta:
        verbose_name = "Notice"
        verbose_name_plural = "Notices"
        ordering = ["complaint", "slot"]
        constraints = [
            models.UniqueConstraint(
                fields=["complaint", "slot"],
                name="unique_notice_slot_per_complaint",
            ),
        ]

    def __str__(self):
        return f"{self.get_slot_display()} of complaint #{self.complaint_id} [{self.status}]"


class FIR(TimeStampedModel):
    """First Information Report registered against a complaint."""

    complaint = models.ForeignKey(
        Complaint,
        on_delete=models.CASCADE,
        related_name="firs",
        verbose_name="Complaint",
    )
    fir_number = models.CharField(
        max_length=100,
        unique=True,
        verbose_name="FIR Number",
    )
    registration_date = models.DateField(
        verbose_name="Date of Registration",
    )
    police_station = models.CharField(
        max_length=255,
        verbose_name="Police Station",
    )
    investigating_officer = models.CharField(
        max_length=255,
        blank=True,
        default="",
        verbose_name="Investigating Officer",
    )
    investigating_officer_contact = models.CharField(
        max_length=50,
        blank=True,
        default="",
        verbose_name="Investigating Officer Contact",
    )
    sections_applied = models.TextField(
        blank=True,
        default="",
        verbose_name="Sections Applied",
    )
    status = models.CharField(
        max_length=30,
        choices=FIRStatus.choices,
        default=FIRStatus.REGISTERED,
        verbose_name="FIR Status",
    )
    details = models.TextField(
        blank=True,
        default="",
        verbose_name="FIR Details",
    )
    remarks = models.TextField(
        blank=True,
        default="",
        verbose_name="Remarks",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="created_firs",
        verbose_name="Created By",
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="updated_firs",
        verbose_name="Last Updated By",
    )

    class Meta:
        verbose_name = "FIR"
        verbose_name_plural = "FIRs"
        ordering = ["-created_at"]

    def __str__(self):
        return f"FIR {self.fir_number} ({self.get_status_display()})"


class Comment(TimeStampedModel):
    """
    A node of the per-complaint discussion tree.

    ``parent`` is ``None`` for root comments.  Internal comments are
    hidden from Field Officers.
    """

    complaint = models.ForeignKey(
        Complaint,
        on_delete=models.CASCADE,
        related_name="comments",
        verbose_name="Complaint",
    )
    parent = models.ForeignKey(
        "self",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="replies",
        verbose_name="Parent Comment",
    )
    content = models.TextField(verbose_name="Content")
    is_internal = models.BooleanField(
        default=False,
        verbose_name="Internal",
        help_text="Internal comments are visible to DCP and above only.",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="complaint_comments",
        verbose_name="Created By",
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="Last Updated By",
    )

    class Meta:
        verbose_name = "Comment"
        verbose_name_plural = "Comments"
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"Comment #{self.pk} on complaint #{self.complaint_id}"


class ComplaintAttachment(TimeStampedModel):
    """A file uploaded with (or later added to) a complaint.  Never edited."""

    complaint = models.ForeignKey(
        Complaint,
        on_delete=models.CASCADE,
        related_name="attachments",
        verbose_name="Complaint",
    )
    file = models.FileField(
        upload_to=ATTACHMENT_UPLOAD_DIR,
        verbose_name="File",
    )
    filename = models.CharField(
        max_length=255,
        verbose_name="Original Filename",
    )
    mime_type = models.CharField(
        max_length=100,
        blank=True,
        default="",
        verbose_name="MIME Type",
    )
    size = models.PositiveIntegerField(
        default=0,
        verbose_name="Size (bytes)",
    )
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="complaint_attachments",
        verbose_name="Uploaded By",
    )

    class Meta:
        verbose_name = "Complaint Attachment"
        verbose_name_plural = "Complaint Attachments"
        ordering = ["created_at"]

    def __str__(self):
        return self.filename
