"""
Complaints app Service Layer.

This module is the **single source of truth** for all business logic
within the ``complaints`` app.  Views must remain *thin*: they validate
input through serializers, call a service method, and return the result
wrapped in a DRF ``Response``.

Architecture
------------
- ``ComplaintQueryService``    — role-scoped listing / detail retrieval.
- ``ComplaintCreationService`` — complaint + attachments in one transaction.
- ``ComplaintWorkflowService`` — update, forward and delete (status state
                                 machine + aggregate consistency).
- ``NoticeWorkflowService``    — issue / approve / reject per notice slot.
- ``FIRService``               — FIR CRUD with global number uniqueness.
- ``CommentService``           — threaded comments, visibility filtering,
                                 subtree delete.
- ``AttachmentService``        — attachment validation, upload, listing.

Design Principles
-----------------
* **Pure rules, impure services**: every allow/deny decision comes from
  ``complaints.workflow``; this module only loads, locks and saves.
* **One writer per complaint**: every write to the complaint row or its
  notices runs inside ``transaction.atomic`` after
  ``lock_for_update(Complaint, pk)``, and bumps ``Complaint.version`` so
  clients holding a stale version get ``Conflict``.
* **Scope before permission**: a complaint the actor cannot see is
  reported as ``NotFound``, never as ``PermissionDenied``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable

from django.core.files.uploadedfile import UploadedFile
from django.db import IntegrityError, transaction
from django.db.models import Q, QuerySet
from django.utils import timezone
from django.utils.crypto import get_random_string

from accounts.models import Role
from accounts.services import resolve_first_user_with_role
from core.constants import (
    ALLOWED_ATTACHMENT_MIME_PREFIXES,
    COMPLAINT_CODE_PREFIX,
    COMPLAINT_CODE_SUFFIX_LENGTH,
    MAX_ATTACHMENT_SIZE,
    UNIQUE_CODE_PREFIX,
)
from core.domain.access import apply_role_scope, get_user_role, require_role
from core.domain.exceptions import (
    Conflict,
    InvalidTransition,
    NotFound,
    PermissionDenied,
    ValidationError,
)
from core.domain.transactions import bump_version, check_version, lock_for_update
from jurisdiction.services import JurisdictionService

from . import workflow
from .models import (
    FIR,
    Comment,
    Complaint,
    ComplaintAttachment,
    Notice,
)

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Role tables local to this app
# ═══════════════════════════════════════════════════════════════════

_SEE_ALL = lambda qs, u: qs  # noqa: E731

COMPLAINT_SCOPE_RULES = {
    Role.SUPER_ADMIN: _SEE_ALL,
    Role.COMMISSIONER: _SEE_ALL,
    Role.ACP: _SEE_ALL,
    Role.DCP: _SEE_ALL,
    Role.FIELD_OFFICER: lambda qs, u: qs.filter(created_by=u),
    Role.COMPLAINANT: lambda qs, u: qs.filter(Q(created_by=u) | Q(assigned_to=u)),
}

FIR_CREATE_ROLES = (
    Role.FIELD_OFFICER, Role.DCP, Role.ACP, Role.COMMISSIONER, Role.SUPER_ADMIN,
)
FIR_UPDATE_ROLES = (Role.DCP, Role.ACP, Role.COMMISSIONER, Role.SUPER_ADMIN)

COMMENT_CREATE_ROLES = (
    Role.FIELD_OFFICER, Role.DCP, Role.ACP, Role.COMMISSIONER, Role.SUPER_ADMIN,
)
INTERNAL_COMMENT_READERS = frozenset({
    Role.DCP, Role.ACP, Role.COMMISSIONER, Role.SUPER_ADMIN,
})

ATTACHMENT_UPLOAD_ROLES = frozenset({
    Role.DCP, Role.ACP, Role.COMMISSIONER, Role.SUPER_ADMIN,
})

_COMPLAINT_EDITABLE_FIELDS = (
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
    "action_taken_details",
    "legal_issues",
    "investigation_officer_remarks",
    "field_visit_date",
    "pe_report",
    "pe_status",
)

_JURISDICTION_FIELDS = ("commissionerate", "dcp_zone", "municipal_zone", "acp_division")


def _get_visible_complaint(user: Any, complaint_id: int, *, lock: bool = False) -> Complaint:
    """
    Load a complaint the user is allowed to see, optionally row-locked.

    Raises:
        NotFound: Missing or outside the user's scope.
    """
    scoped = ComplaintQueryService.scoped_queryset(user).filter(pk=complaint_id)
    if not scoped.exists():
        raise NotFound(f"Complaint with id {complaint_id} not found.")
    if lock:
        return lock_for_update(Complaint, complaint_id)
    return scoped.get()


def _touch_complaint(complaint: Complaint, user: Any) -> None:
    """Stamp ``updated_by`` and bump the version on a locked complaint."""
    complaint.updated_by = user
    bump_version(complaint)
    complaint.save(update_fields=["updated_by", "version", "updated_at"])


# ═══════════════════════════════════════════════════════════════════
#  Query Service
# ═══════════════════════════════════════════════════════════════════


class ComplaintQueryService:
    """
    Read-side access to complaints, filtered by the caller's role.

    * DCP / ACP / Commissioner / Super Admin: every complaint.
    * Field Officer: complaints they created.
    * Complainant: complaints they created or that are assigned to them.
    """

    @staticmethod
    def scoped_queryset(user: Any) -> QuerySet:
        return apply_role_scope(
            Complaint.objects.all(),
            user,
            scope_rules=COMPLAINT_SCOPE_RULES,
        )

    @staticmethod
    def get_filtered_queryset(user: Any, filters: dict[str, Any]) -> QuerySet:
        qs = (
            ComplaintQueryService.scoped_queryset(user)
            .select_related("created_by", "assigned_to", "commissionerate")
        )
        if filters.get("status"):
            qs = qs.filter(status=filters["status"])
        if filters.get("priority"):
            qs = qs.filter(priority=filters["priority"])
        search = (filters.get("search") or "").strip()
        if search:
            qs = qs.filter(
                Q(complaint_code__icontains=search)
                | Q(complainant_name__icontains=search)
                | Q(nature_of_complaint__icontains=search)
                | Q(place_of_complaint__icontains=search)
            )
        return qs.order_by("-created_at")

    @staticmethod
    def get_complaint_detail(user: Any, complaint_id: int) -> Complaint:
        """
        Return one complaint with notices, FIRs and attachments prefetched.

        Raises:
            NotFound: Missing or outside the caller's scope.
        """
        qs = (
            ComplaintQueryService.scoped_queryset(user)
            .select_related(
                "created_by", "assigned_to", "updated_by",
                "commissionerate", "dcp_zone", "municipal_zone", "acp_division",
            )
            .prefetch_related("notices", "firs", "attachments")
        )
        try:
            return qs.get(pk=complaint_id)
        except Complaint.DoesNotExist:
            raise NotFound(f"Complaint with id {complaint_id} not found.")


# ═══════════════════════════════════════════════════════════════════
#  Creation Service
# ═══════════════════════════════════════════════════════════════════


class ComplaintCreationService:
    """
    Creates a complaint in ``PENDING`` together with its attachments.
    Any failure rolls back the whole operation, so no complaint row is
    left without the attachments it was submitted with.
    """

    @staticmethod
    def generate_codes() -> tuple[str, str]:
        """Return ``(complaint_code, unique_code)`` not yet used by any complaint."""
        while True:
            millis = int(timezone.now().timestamp() * 1000)
            suffix = get_random_string(
                COMPLAINT_CODE_SUFFIX_LENGTH,
                allowed_chars="ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789",
            )
            code = f"{COMPLAINT_CODE_PREFIX}-{millis}-{suffix}"
            if not Complaint.objects.filter(complaint_code=code).exists():
                return code, f"{UNIQUE_CODE_PREFIX}-{code}"

    @staticmethod
    @transaction.atomic
    def create_complaint(
        validated_data: dict[str, Any],
        requesting_user: Any,
        files: Iterable[UploadedFile] = (),
    ) -> Complaint:
        """
        Raises:
            NotFound:        A referenced jurisdiction record is missing.
            ValidationError: The jurisdiction chain is inconsistent or an
                             attachment is too large / of a refused type.
        """
        data = dict(validated_data)
        chain = JurisdictionService.resolve_chain(
            commissionerate_id=data.pop("commissionerate"),
            dcp_zone_id=data.pop("dcp_zone", None),
            municipal_zone_id=data.pop("municipal_zone", None),
            acp_division_id=data.pop("acp_division", None),
        )
        complaint_code, unique_code = ComplaintCreationService.generate_codes()

        complaint = Complaint.objects.create(
            complaint_code=complaint_code,
            unique_code=unique_code,
            commissionerate=chain.commissionerate,
            dcp_zone=chain.dcp_zone,
            municipal_zone=chain.municipal_zone,
            acp_division=chain.acp_division,
            created_by=requesting_user,
            updated_by=requesting_user,
            **data,
        )
        files = list(files)
        if files:
            AttachmentService.store_files(complaint, files, requesting_user)

        logger.info(
            "Complaint #%d (%s) created by user %s with %d attachment(s)",
            complaint.pk, complaint.complaint_code, requesting_user.pk, len(files),
        )
        return complaint


# ═══════════════════════════════════════════════════════════════════
#  Workflow Service (status state machine)
# ═══════════════════════════════════════════════════════════════════


class ComplaintWorkflowService:
    """
    Every mutation of an existing complaint row goes through here.
    """

    @staticmethod
    @transaction.atomic
    def update_complaint(
        requesting_user: Any,
        complaint_id: int,
        validated_data: dict[str, Any],
    ) -> Complaint:
        """
        Apply a partial update.

        Steps:
            1. Lock the row and compare ``version`` (if sent).
            2. ``can_transition(role, current status)`` or ``PermissionDenied``.
            3. Validate an explicit ``status`` against the role's targets.
            4. Re-validate the jurisdiction chain if any level changes.
            5. Resolve the assignee from ``assigned_to_role``, or from
               ``next_assignee_role`` when the status changes.
            6. Stamp ``updated_by``, bump ``version``, save.

        Raises:
            NotFound, PermissionDenied, InvalidTransition, Conflict,
            ValidationError.
        """
        data = dict(validated_data)
        expected_version = data.pop("version", None)
        assigned_to_role = data.pop("assigned_to_role", None)
        target_status = data.pop("status", None)

        complaint = _get_visible_complaint(requesting_user, complaint_id, lock=True)
        check_version(complaint, expected_version)

        role = get_user_role(requesting_user)
        if not workflow.can_transition(role, complaint.status):
            raise PermissionDenied(
                f"Role {role or 'none'} cannot update a complaint in status "
                f"{complaint.status}."
            )

        previous_status = complaint.status
        status_changed = target_status is not None and target_status != previous_status
        if status_changed and not workflow.can_set_status(role, target_status):
            raise InvalidTransition(
                current=previous_status,
                target=target_status,
                reason=f"role {role} cannot set this status",
            )

        if any(name in data for name in _JURISDICTION_FIELDS):
            ids = {
                name: data.pop(name, getattr(complaint, f"{name}_id"))
                for name in _JURISDICTION_FIELDS
            }
            chain = JurisdictionService.resolve_chain(
                commissionerate_id=ids["commissionerate"],
                dcp_zone_id=ids["dcp_zone"],
                municipal_zone_id=ids["municipal_zone"],
                acp_division_id=ids["acp_division"],
            )
            complaint.commissionerate = chain.commissionerate
            complaint.dcp_zone = chain.dcp_zone
            complaint.municipal_zone = chain.municipal_zone
            complaint.acp_division = chain.acp_division

        for name in _COMPLAINT_EDITABLE_FIELDS:
            if name in data:
                setattr(complaint, name, data[name])

        if status_changed:
            complaint.status = target_status

        if assigned_to_role:
            # No holder of the role keeps the current assignee.
            assignee = resolve_first_user_with_role(assigned_to_role)
            if assignee is not None:
                complaint.assigned_to = assignee
        elif status_changed and role != Role.SUPER_ADMIN:
            complaint.assigned_to = resolve_first_user_with_role(
                workflow.next_assignee_role(role)
            )

        complaint.updated_by = requesting_user
        bump_version(complaint)
        complaint.save()

        if status_changed:
            logger.info(
                "Complaint #%d status %s -> %s by user %s (%s)",
                complaint.pk, previous_status, complaint.status,
                requesting_user.pk, role,
            )
        else:
            logger.info("Complaint #%d updated by user %s", complaint.pk, requesting_user.pk)
        return complaint

    @staticmethod
    @transaction.atomic
    def forward_complaint(
        requesting_user: Any,
        complaint_id: int,
        expected_version: int | None = None,
    ) -> Complaint:
        """
        Advance the complaint one review tier.

        The assignee becomes the first active user holding the next
        tier's role; if nobody holds it the status still advances and
        the assignment is left unset.
        """
        complaint = _get_visible_complaint(requesting_user, complaint_id, lock=True)
        check_version(complaint, expected_version)

        role = get_user_role(requesting_user)
        plan = workflow.plan_forward(role, complaint.status)
        previous_status = complaint.status

        complaint.status = plan.target_status
        complaint.assigned_to = resolve_first_user_with_role(plan.assignee_role)
        complaint.updated_by = requesting_user
        bump_version(complaint)
        complaint.save(
            update_fields=["status", "assigned_to", "updated_by", "version", "updated_at"]
        )

        logger.info(
            "Complaint #%d forwarded from %s to %s by user %s (assignee: %s)",
            complaint.pk, previous_status, complaint.status, requesting_user.pk,
            complaint.assigned_to_id,
        )
        return complaint

    @staticmethod
    @transaction.atomic
    def delete_complaint(requesting_user: Any, complaint_id: int) -> None:
        """
        Delete the complaint with its notices, FIRs, comment tree and
        attachments.  Attachment files are removed from storage only
        after the transaction commits.
        """
        require_role(requesting_user, Role.SUPER_ADMIN)
        complaint = lock_for_update(Complaint, complaint_id)

        stored_files = [
            (attachment.file.storage, attachment.file.name)
            for attachment in complaint.attachments.all()
            if attachment.file
        ]
        complaint.delete()

        def _release_files() -> None:
            for storage, name in stored_files:
                storage.delete(name)

        transaction.on_commit(_release_files)
        logger.info(
            "Complaint #%d deleted by user %s (%d attachment file(s) released)",
            complaint_id, requesting_user.pk, len(stored_files),
        )


# ═══════════════════════════════════════════════════════════════════
#  Notice Workflow Service
# ═══════════════════════════════════════════════════════════════════


class NoticeWorkflowService:
    """
    Drives the three-stage approval of each notice slot.  The two slots
    are independent; both share the complaint row lock.
    """

    @staticmethod
    def _get_notice(complaint: Complaint, slot: str) -> Notice:
        try:
            return Notice.objects.get(complaint=complaint, slot=slot)
        except Notice.DoesNotExist:
            raise NotFound(
                f"Notice '{slot}' has not been issued for complaint #{complaint.pk}."
            )

    @staticmethod
    @transaction.atomic
    def issue_notice(
        requesting_user: Any,
        complaint_id: int,
        *,
        slot: str,
        number: str,
        issue_date: date,
    ) -> Complaint:
        """
        Issue (or reissue) a notice; every approval mark is cleared.
        """
        complaint = _get_visible_complaint(requesting_user, complaint_id, lock=True)
        role = get_user_role(requesting_user)

        notice = (
            Notice.objects.filter(complaint=complaint, slot=slot).first()
            or Notice(complaint=complaint, slot=slot)
        )
        reissue = notice.pk is not None
        workflow.reset_notice(
            notice,
            number=number,
            issue_date=issue_date,
            issuer_id=requesting_user.pk,
            issuer_role=role,
            now=timezone.now(),
        )
        notice.save()
        _touch_complaint(complaint, requesting_user)

        logger.info(
            "Notice %s of complaint #%d %s (number %s) by user %s",
            slot, complaint.pk, "reissued" if reissue else "issued",
            number, requesting_user.pk,
        )
        return complaint

    @staticmethod
    @transaction.atomic
    def approve_stage(
        requesting_user: Any,
        complaint_id: int,
        *,
        slot: str,
        stage: str,
        expected_version: int | None = None,
    ) -> Complaint:
        complaint = _get_visible_complaint(requesting_user, complaint_id, lock=True)
        check_version(complaint, expected_version)
        notice = NoticeWorkflowService._get_notice(complaint, slot)

        workflow.approve_stage(
            notice,
            stage,
            actor_id=requesting_user.pk,
            actor_role=get_user_role(requesting_user),
            now=timezone.now(),
        )
        notice.save(update_fields=list(workflow.NOTICE_WORKFLOW_FIELDS))
        _touch_complaint(complaint, requesting_user)

        logger.info(
            "Notice %s of complaint #%d approved at stage %s by user %s (status %s)",
            slot, complaint.pk, stage, requesting_user.pk, notice.status,
        )
        return complaint

    @staticmethod
    @transaction.atomic
    def reject_stage(
        requesting_user: Any,
        complaint_id: int,
        *,
        slot: str,
        stage: str,
        reason: str,
        expected_version: int | None = None,
    ) -> Complaint:
        complaint = _get_visible_complaint(requesting_user, complaint_id, lock=True)
        check_version(complaint, expected_version)
        notice = NoticeWorkflowService._get_notice(complaint, slot)

        workflow.reject_stage(
            notice,
            stage,
            reason=reason,
            actor_id=requesting_user.pk,
            actor_role=get_user_role(requesting_user),
            now=timezone.now(),
        )
        notice.save(update_fields=list(workflow.NOTICE_WORKFLOW_FIELDS))
        _touch_complaint(complaint, requesting_user)

        logger.info(
            "Notice %s of complaint #%d rejected at stage %s by user %s",
            slot, complaint.pk, stage, requesting_user.pk,
        )
        return complaint


# ═══════════════════════════════════════════════════════════════════
#  FIR Service
# ═══════════════════════════════════════════════════════════════════


class FIRService:
    """
    FIRs attached to a complaint.  ``fir_number`` is unique across the
    whole system, not per complaint.
    """

    _REQUIRED = ("fir_number", "registration_date", "police_station")

    @staticmethod
    def list_firs(requesting_user: Any, complaint_id: int) -> QuerySet:
        complaint = _get_visible_complaint(requesting_user, complaint_id)
        return complaint.firs.select_related("created_by", "updated_by").order_by("-created_at")

    @staticmethod
    def get_fir(requesting_user: Any, complaint_id: int, fir_id: int) -> FIR:
        complaint = _get_visible_complaint(requesting_user, complaint_id)
        try:
            return complaint.firs.select_related("created_by", "updated_by").get(pk=fir_id)
        except FIR.DoesNotExist:
            raise NotFound(f"FIR with id {fir_id} not found on complaint #{complaint_id}.")

    @staticmethod
    def create_fir(
        requesting_user: Any,
        complaint_id: int,
        validated_data: dict[str, Any],
    ) -> FIR:
        """
        Raises:
            PermissionDenied: Role cannot register FIRs.
            ValidationError:  Number, date or police station missing.
            Conflict:         ``fir_number`` already exists anywhere.
        """
        require_role(requesting_user, *FIR_CREATE_ROLES)
        complaint = _get_visible_complaint(requesting_user, complaint_id)

        for name in FIRService._REQUIRED:
            value = validated_data.get(name)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise ValidationError(f"{name} is required.", field=name)

        fir_number = validated_data["fir_number"].strip()
        if FIR.objects.filter(fir_number=fir_number).exists():
            raise Conflict(f"FIR number '{fir_number}' already exists.")

        data = {**validated_data, "fir_number": fir_number}
        try:
            with transaction.atomic():
                fir = FIR.objects.create(
                    complaint=complaint,
                    created_by=requesting_user,
                    updated_by=requesting_user,
                    **data,
                )
        except IntegrityError:
            raise Conflict(f"FIR number '{fir_number}' already exists.")

        logger.info(
            "FIR %s registered on complaint #%d by user %s",
            fir.fir_number, complaint.pk, requesting_user.pk,
        )
        return fir

    @staticmethod
    def update_fir(
        requesting_user: Any,
        complaint_id: int,
        fir_id: int,
        validated_data: dict[str, Any],
    ) -> FIR:
        require_role(requesting_user, *FIR_UPDATE_ROLES)
        fir = FIRService.get_fir(requesting_user, complaint_id, fir_id)

        new_number = validated_data.get("fir_number")
        if new_number is not None:
            new_number = new_number.strip()
            if not new_number:
                raise ValidationError("fir_number cannot be blank.", field="fir_number")
            if FIR.objects.filter(fir_number=new_number).exclude(pk=fir.pk).exists():
                raise Conflict(f"FIR number '{new_number}' already exists.")
            validated_data = {**validated_data, "fir_number": new_number}

        for name, value in validated_data.items():
            setattr(fir, name, value)
        fir.updated_by = requesting_user
        try:
            with transaction.atomic():
                fir.save()
        except IntegrityError:
            raise Conflict(f"FIR number '{fir.fir_number}' already exists.")

        logger.info("FIR #%d updated by user %s", fir.pk, requesting_user.pk)
        return fir

    @staticmethod
    def delete_fir(requesting_user: Any, complaint_id: int, fir_id: int) -> None:
        require_role(requesting_user, Role.SUPER_ADMIN)
        fir = FIRService.get_fir(requesting_user, complaint_id, fir_id)
        fir.delete()
        logger.info("FIR #%d deleted by user %s", fir_id, requesting_user.pk)


# ═══════════════════════════════════════════════════════════════════
#  Comment Service
# ═══════════════════════════════════════════════════════════════════


@dataclass
class CommentNode:
    """A comment together with its (already filtered and ordered) replies."""

    comment: Comment
    replies: list[CommentNode] = field(default_factory=list)


def _children_index(comments: Iterable[Comment]) -> dict[int | None, list[Comment]]:
    index: dict[int | None, list[Comment]] = {}
    for comment in comments:
        index.setdefault(comment.parent_id, []).append(comment)
    return index


def _descendant_ids(root_id: int, index: dict[int | None, list[Comment]]) -> list[int]:
    """Reachability sweep from ``root_id`` over the parent → children index."""
    found: list[int] = []
    stack = [root_id]
    while stack:
        current = stack.pop()
        found.append(current)
        stack.extend(child.pk for child in index.get(current, ()))
    return found


class CommentService:
    """
    Discussion thread of a complaint.

    The tree is stored flat (each row points at its parent).  Reads load
    the whole thread once and assemble it in memory; deletes compute the
    subtree the same way and remove it in one statement.
    """

    @staticmethod
    def can_read_internal(user: Any) -> bool:
        return get_user_role(user) in INTERNAL_COMMENT_READERS

    @staticmethod
    def _can_modify(user: Any, comment: Comment) -> bool:
        return comment.created_by_id == user.pk or get_user_role(user) == Role.SUPER_ADMIN

    @staticmethod
    def _get_comment(user: Any, complaint: Complaint, comment_id: int) -> Comment:
        """
        Fetch a comment of ``complaint`` the user may see.  Without internal
        access a comment is hidden when it or any ancestor is internal.
        """
        not_found = NotFound(f"Comment with id {comment_id} not found on complaint #{complaint.pk}.")
        try:
            comment = Comment.objects.get(complaint=complaint, pk=comment_id)
        except Comment.DoesNotExist:
            raise not_found
        if CommentService.can_read_internal(user):
            return comment

        rows = {
            pk: (parent_id, is_internal)
            for pk, parent_id, is_internal in Comment.objects
            .filter(complaint=complaint)
            .values_list("pk", "parent_id", "is_internal")
        }
        current: int | None = comment.pk
        while current is not None:
            parent_id, is_internal = rows[current]
            if is_internal:
                raise not_found
            current = parent_id
        return comment

    @staticmethod
    def get_comment_tree(requesting_user: Any, complaint_id: int) -> list[CommentNode]:
        """
        Return root comments newest first, each with its full reply tree
        in ascending time order.  For readers without internal access an
        internal comment is dropped together with its whole subtree.
        """
        complaint = _get_visible_complaint(requesting_user, complaint_id)
        comments = list(
            Comment.objects
            .filter(complaint=complaint)
            .select_related("created_by")
            .order_by("created_at", "id")
        )
        index = _children_index(comments)
        show_internal = CommentService.can_read_internal(requesting_user)

        def build(comment: Comment) -> CommentNode:
            return CommentNode(
                comment=comment,
                replies=[
                    build(child)
                    for child in index.get(comment.pk, ())
                    if show_internal or not child.is_internal
                ],
            )

        roots = [
            build(comment)
            for comment in index.get(None, ())
            if show_internal or not comment.is_internal
        ]
        roots.reverse()
        return roots

    @staticmethod
    @transaction.atomic
    def create_comment(
        requesting_user: Any,
        complaint_id: int,
        *,
        content: str,
        is_internal: bool = False,
        parent_id: int | None = None,
    ) -> Comment:
        """
        Raises:
            PermissionDenied: Role cannot comment, or a Field Officer asked
                              for an internal comment.
            ValidationError:  Empty content.
            NotFound:         Parent missing, on another complaint, or
                              not visible to the author.
        """
        role = require_role(requesting_user, *COMMENT_CREATE_ROLES)
        complaint = _get_visible_complaint(requesting_user, complaint_id)

        content = (content or "").strip()
        if not content:
            raise ValidationError("Comment content is required.", field="content")
        if is_internal and role not in INTERNAL_COMMENT_READERS:
            raise PermissionDenied("Your role cannot post internal comments.")

        parent = None
        if parent_id is not None:
            parent = CommentService._get_comment(requesting_user, complaint, parent_id)

        comment = Comment.objects.create(
            complaint=complaint,
            parent=parent,
            content=content,
            is_internal=is_internal,
            created_by=requesting_user,
            updated_by=requesting_user,
        )
        logger.info(
            "Comment #%d added to complaint #%d by user %s (parent=%s, internal=%s)",
            comment.pk, complaint.pk, requesting_user.pk, parent_id, is_internal,
        )
        return comment

    @staticmethod
    @transaction.atomic
    def edit_comment(
        requesting_user: Any,
        complaint_id: int,
        comment_id: int,
        validated_data: dict[str, Any],
    ) -> Comment:
        complaint = _get_visible_complaint(requesting_user, complaint_id)
        comment = CommentService._get_comment(requesting_user, complaint, comment_id)
        if not CommentService._can_modify(requesting_user, comment):
            raise PermissionDenied("Only the author or a Super Admin may edit this comment.")

        update_fields = ["updated_by", "updated_at"]
        if "content" in validated_data:
            content = (validated_data["content"] or "").strip()
            if not content:
                raise ValidationError("Comment content is required.", field="content")
            comment.content = content
            update_fields.append("content")
        if "is_internal" in validated_data:
            is_internal = validated_data["is_internal"]
            if is_internal and not CommentService.can_read_internal(requesting_user):
                raise PermissionDenied("Your role cannot post internal comments.")
            comment.is_internal = is_internal
            update_fields.append("is_internal")

        comment.updated_by = requesting_user
        comment.save(update_fields=update_fields)
        logger.info("Comment #%d edited by user %s", comment.pk, requesting_user.pk)
        return comment

    @staticmethod
    @transaction.atomic
    def delete_comment(requesting_user: Any, complaint_id: int, comment_id: int) -> int:
        """
        Delete a comment and every reply beneath it.

        Returns:
            Number of comments removed.
        """
        complaint = _get_visible_complaint(requesting_user, complaint_id)
        comment = CommentService._get_comment(requesting_user, complaint, comment_id)
        if not CommentService._can_modify(requesting_user, comment):
            raise PermissionDenied("Only the author or a Super Admin may delete this comment.")

        index = _children_index(
            Comment.objects.filter(complaint=complaint).only("id", "parent_id")
        )
        doomed = _descendant_ids(comment.pk, index)
        Comment.objects.filter(pk__in=doomed).delete()

        logger.info(
            "Comment #%d and %d repl(ies) deleted from complaint #%d by user %s",
            comment_id, len(doomed) - 1, complaint.pk, requesting_user.pk,
        )
        return len(doomed)


# ═══════════════════════════════════════════════════════════════════
#  Attachment Service
# ═══════════════════════════════════════════════════════════════════


class AttachmentService:
    """Upload validation and storage of complaint attachments."""

    @staticmethod
    def validate_file(upload: UploadedFile) -> None:
        if upload.size > MAX_ATTACHMENT_SIZE:
            raise ValidationError(
                f"'{upload.name}' exceeds the {MAX_ATTACHMENT_SIZE} byte limit.",
                field="attachments",
            )
        content_type = getattr(upload, "content_type", "") or ""
        if not content_type.startswith(ALLOWED_ATTACHMENT_MIME_PREFIXES):
            raise ValidationError(
                f"'{upload.name}' has an unsupported type ({content_type or 'unknown'}).",
                field="attachments",
            )

    @staticmethod
    def store_files(
        complaint: Complaint,
        files: Iterable[UploadedFile],
        uploaded_by: Any,
    ) -> list[ComplaintAttachment]:
        """Validate every file first, then persist them all."""
        files = list(files)
        for upload in files:
            AttachmentService.validate_file(upload)
        return [
            ComplaintAttachment.objects.create(
                complaint=complaint,
                file=upload,
                filename=upload.name,
                mime_type=getattr(upload, "content_type", "") or "",
                size=upload.size,
                uploaded_by=uploaded_by,
            )
            for upload in files
        ]

    @staticmethod
    def list_attachments(requesting_user: Any, complaint_id: int) -> QuerySet:
        complaint = _get_visible_complaint(requesting_user, complaint_id)
        return complaint.attachments.select_related("uploaded_by")

    @staticmethod
    @transaction.atomic
    def upload(
        requesting_user: Any,
        complaint_id: int,
        files: Iterable[UploadedFile],
    ) -> list[ComplaintAttachment]:
        complaint = _get_visible_complaint(requesting_user, complaint_id)
        role = get_user_role(requesting_user)
        if complaint.created_by_id != requesting_user.pk and role not in ATTACHMENT_UPLOAD_ROLES:
            raise PermissionDenied("You cannot add attachments to this complaint.")
        files = list(files)
        if not files:
            raise ValidationError("At least one file is required.", field="attachments")

        attachments = AttachmentService.store_files(complaint, files, requesting_user)
        logger.info(
            "%d attachment(s) added to complaint #%d by user %s",
            len(attachments), complaint.pk, requesting_user.pk,
        )
        return attachments
