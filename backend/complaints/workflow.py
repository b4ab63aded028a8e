"""
Complaint workflow rules — pure functions over immutable tables.

Nothing in this module touches the database.  The service layer loads
and locks rows, then asks these functions whether a transition is
allowed and applies the resulting field changes.

Tables
------
``TRANSITION_PERMISSIONS``  role → complaint statuses the role may act on
``ALLOWED_TARGETS``         role → statuses the role may set explicitly
``NEXT_STATUS``             role → status reached by a forward action
``NEXT_ASSIGNEE_ROLE``      role → role that receives the complaint next
``STAGE_APPROVER``          notice stage → role that approves it
``STAGE_APPROVAL_FIELDS``   notice stage → the two ``Notice`` columns it owns

Notice state machine (per slot)::

    PENDING --approve(dcp)--> PENDING(dcp) --approve(acp)--> PENDING(dcp, acp)
        --approve(commissioner)--> APPROVED

    any not-yet-approved stage --reject(reason)--> REJECTED (terminal)
    reissue from any state --> PENDING with every stage mark cleared
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from types import MappingProxyType
from typing import Mapping

from accounts.models import Role
from core.domain.exceptions import InvalidTransition, PermissionDenied, ValidationError

from .models import ComplaintStatus, Notice, NoticeStage, NoticeStatus

S = ComplaintStatus


# ═══════════════════════════════════════════════════════════════════
#  Complaint status state machine
# ═══════════════════════════════════════════════════════════════════

TERMINAL_STATUSES: frozenset[str] = frozenset({S.RESOLVED, S.REJECTED, S.CLOSED})

TRANSITION_PERMISSIONS: Mapping[str, frozenset[str]] = MappingProxyType({
    Role.FIELD_OFFICER: frozenset({S.PENDING}),
    Role.DCP: frozenset({S.PENDING, S.UNDER_REVIEW_DCP}),
    Role.ACP: frozenset({S.UNDER_REVIEW_DCP, S.UNDER_REVIEW_ACP}),
    Role.COMMISSIONER: frozenset({S.UNDER_REVIEW_ACP, S.UNDER_REVIEW_COMMISSIONER}),
})

ALLOWED_TARGETS: Mapping[str, frozenset[str]] = MappingProxyType({
    Role.FIELD_OFFICER: frozenset({S.PENDING, S.UNDER_REVIEW_DCP}),
    Role.DCP: frozenset({S.UNDER_REVIEW_DCP, S.UNDER_REVIEW_ACP}),
    Role.ACP: frozenset({S.UNDER_REVIEW_ACP, S.UNDER_REVIEW_COMMISSIONER}),
    Role.COMMISSIONER: frozenset({
        S.UNDER_REVIEW_COMMISSIONER,
        S.INVESTIGATION_IN_PROGRESS,
        S.LEGAL_REVIEW,
        S.RESOLVED,
        S.REJECTED,
        S.CLOSED,
    }),
})

NEXT_STATUS: Mapping[str, str] = MappingProxyType({
    Role.FIELD_OFFICER: S.UNDER_REVIEW_DCP,
    Role.DCP: S.UNDER_REVIEW_ACP,
    Role.ACP: S.UNDER_REVIEW_COMMISSIONER,
    Role.COMMISSIONER: S.RESOLVED,
})

NEXT_ASSIGNEE_ROLE: Mapping[str, str] = MappingProxyType({
    Role.FIELD_OFFICER: Role.DCP,
    Role.DCP: Role.ACP,
    Role.ACP: Role.COMMISSIONER,
})

# Whose forward a Super Admin performs when advancing from each status.
FORWARD_ACTOR_FOR_STATUS: Mapping[str, str] = MappingProxyType({
    S.PENDING: Role.FIELD_OFFICER,
    S.UNDER_REVIEW_DCP: Role.DCP,
    S.UNDER_REVIEW_ACP: Role.ACP,
    S.UNDER_REVIEW_COMMISSIONER: Role.COMMISSIONER,
})


def can_transition(role: str | None, current_status: str | None) -> bool:
    """
    May ``role`` mutate a complaint currently in ``current_status``?

    An unset status (a complaint being created) is editable by anyone;
    ``SUPER_ADMIN`` may act on every status, terminal ones included.
    """
    if current_status is None:
        return True
    if role == Role.SUPER_ADMIN:
        return True
    return current_status in TRANSITION_PERMISSIONS.get(role, frozenset())


def next_status(role: str | None) -> str:
    """Status a forward action by ``role`` leads to (``PENDING`` for unknown roles)."""
    return NEXT_STATUS.get(role, S.PENDING)


def next_assignee_role(role: str | None) -> str | None:
    """Role that receives the complaint after ``role`` forwards it; ``None`` ends the chain."""
    return NEXT_ASSIGNEE_ROLE.get(role)


def can_set_status(role: str | None, target: str) -> bool:
    if role == Role.SUPER_ADMIN:
        return True
    return target in ALLOWED_TARGETS.get(role, frozenset())


@dataclass(frozen=True)
class ForwardPlan:
    """Outcome of a forward action: new status and the role to assign."""

    acting_as: str
    target_status: str
    assignee_role: str | None


def plan_forward(role: str | None, current_status: str) -> ForwardPlan:
    """
    Work out where a forward by ``role`` takes a complaint.

    A Super Admin forwards on behalf of the tier that owns the current
    status; from any other status there is nothing to forward to.

    Raises:
        PermissionDenied:  ``role`` may not act on ``current_status``.
        InvalidTransition: Super Admin forward from a non-review status.
    """
    if not can_transition(role, current_status):
        raise PermissionDenied(
            f"Role {role or 'none'} cannot act on a complaint in status {current_status}."
        )

    acting_as = role
    if role == Role.SUPER_ADMIN:
        acting_as = FORWARD_ACTOR_FOR_STATUS.get(current_status)
        if acting_as is None:
            raise InvalidTransition(
                current=current_status,
                reason="there is no next review tier from this status",
            )

    return ForwardPlan(
        acting_as=acting_as,
        target_status=next_status(acting_as),
        assignee_role=next_assignee_role(acting_as),
    )


# ═══════════════════════════════════════════════════════════════════
#  Notice approval workflow
# ═══════════════════════════════════════════════════════════════════

STAGE_ORDER: tuple[str, ...] = (NoticeStage.DCP, NoticeStage.ACP, NoticeStage.COMMISSIONER)

STAGE_APPROVER: Mapping[str, str] = MappingProxyType({
    NoticeStage.DCP: Role.DCP,
    NoticeStage.ACP: Role.ACP,
    NoticeStage.COMMISSIONER: Role.COMMISSIONER,
})

STAGE_APPROVAL_FIELDS: Mapping[str, tuple[str, str]] = MappingProxyType({
    NoticeStage.DCP: ("dcp_approved_by_id", "dcp_approved_at"),
    NoticeStage.ACP: ("acp_approved_by_id", "acp_approved_at"),
    NoticeStage.COMMISSIONER: ("commissioner_approved_by_id", "commissioner_approved_at"),
})

# Review tiers, lowest first; a tier may reject at its own stage or below.
_TIER_RANK: Mapping[str, int] = MappingProxyType({
    Role.DCP: 0,
    Role.ACP: 1,
    Role.COMMISSIONER: 2,
})

NOTICE_ISSUER_ROLES: frozenset[str] = frozenset({
    Role.FIELD_OFFICER,
    Role.DCP,
    Role.ACP,
    Role.COMMISSIONER,
    Role.SUPER_ADMIN,
})

NOTICE_WORKFLOW_FIELDS: tuple[str, ...] = (
    "number",
    "issue_date",
    "status",
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
    "updated_at",
)


def can_approve_stage(role: str | None, stage: str) -> bool:
    return role == Role.SUPER_ADMIN or STAGE_APPROVER.get(stage) == role


def can_reject_stage(role: str | None, stage: str) -> bool:
    if role == Role.SUPER_ADMIN:
        return True
    approver = STAGE_APPROVER.get(stage)
    if approver is None or role not in _TIER_RANK:
        return False
    return _TIER_RANK[role] >= _TIER_RANK[approver]


def can_issue_notice(role: str | None) -> bool:
    return role in NOTICE_ISSUER_ROLES


def stage_approval(notice: Notice, stage: str) -> tuple[int | None, datetime | None]:
    """Return ``(approver_id, approved_at)`` recorded for ``stage``."""
    by_field, at_field = STAGE_APPROVAL_FIELDS[stage]
    return getattr(notice, by_field), getattr(notice, at_field)


def is_stage_approved(notice: Notice, stage: str) -> bool:
    return stage_approval(notice, stage)[1] is not None


def current_stage(notice: Notice) -> str | None:
    """First stage still awaiting approval, or ``None`` once all are done."""
    for stage in STAGE_ORDER:
        if not is_stage_approved(notice, stage):
            return stage
    return None


def reset_notice(
    notice: Notice,
    *,
    number: str,
    issue_date: date,
    issuer_id: int,
    issuer_role: str,
    now: datetime,
) -> None:
    """
    (Re)issue a notice: store number and date, clear every stage and
    rejection mark, and start again at ``PENDING``.

    Raises:
        PermissionDenied: ``issuer_role`` may not issue notices.
    """
    if not can_issue_notice(issuer_role):
        raise PermissionDenied(f"Role {issuer_role or 'none'} cannot issue notices.")

    notice.number = number
    notice.issue_date = issue_date
    notice.status = NoticeStatus.PENDING
    notice.issued_by_id = issuer_id
    notice.issued_at = now
    notice.awaiting_higher_authority = issuer_role == Role.FIELD_OFFICER
    for by_field, at_field in STAGE_APPROVAL_FIELDS.values():
        setattr(notice, by_field, None)
        setattr(notice, at_field, None)
    notice.rejected_by_id = None
    notice.rejected_at = None
    notice.rejected_stage = ""
    notice.rejection_reason = ""


def _ensure_open(notice: Notice) -> None:
    if notice.status != NoticeStatus.PENDING:
        raise InvalidTransition(
            current=notice.status,
            reason="the notice must be reissued before it can be reviewed again",
        )


def approve_stage(
    notice: Notice,
    stage: str,
    *,
    actor_id: int,
    actor_role: str | None,
    now: datetime,
) -> None:
    """
    Record approval of ``stage``.  Only the commissioner stage moves the
    notice to ``APPROVED``; earlier stages leave it ``PENDING``.

    All checks run before any field is touched, so a refused approval
    leaves the notice exactly as it was.

    Raises:
        PermissionDenied:  ``actor_role`` does not own ``stage``.
        InvalidTransition: Notice is terminal, the stage is already
                           approved, or an earlier stage is outstanding.
    """
    if not can_approve_stage(actor_role, stage):
        raise PermissionDenied(
            f"Role {actor_role or 'none'} cannot approve the {stage} stage."
        )
    _ensure_open(notice)
    if is_stage_approved(notice, stage):
        raise InvalidTransition(reason=f"the {stage} stage is already approved")

    expected = current_stage(notice)
    if expected != stage:
        raise InvalidTransition(
            reason=f"the {expected} stage must be approved before the {stage} stage",
        )

    by_field, at_field = STAGE_APPROVAL_FIELDS[stage]
    setattr(notice, by_field, actor_id)
    setattr(notice, at_field, now)
    notice.awaiting_higher_authority = False
    if stage == NoticeStage.COMMISSIONER:
        notice.status = NoticeStatus.APPROVED


def reject_stage(
    notice: Notice,
    stage: str,
    *,
    reason: str | None,
    actor_id: int,
    actor_role: str | None,
    now: datetime,
) -> None:
    """
    Reject the notice at ``stage``.  Terminal until the notice is reissued.

    Raises:
        PermissionDenied:  ``actor_role`` is below the stage's tier.
        ValidationError:   ``reason`` is empty after trimming.
        InvalidTransition: Notice is terminal or the stage already passed.
    """
    if not can_reject_stage(actor_role, stage):
        raise PermissionDenied(
            f"Role {actor_role or 'none'} cannot reject at the {stage} stage."
        )
    cleaned = (reason or "").strip()
    if not cleaned:
        raise ValidationError("A rejection reason is required.", field="reason")
    _ensure_open(notice)
    if is_stage_approved(notice, stage):
        raise InvalidTransition(reason=f"the {stage} stage is already approved")

    notice.status = NoticeStatus.REJECTED
    notice.rejected_by_id = actor_id
    notice.rejected_at = now
    notice.rejected_stage = stage
    notice.rejection_reason = cleaned
