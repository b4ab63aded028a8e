"""
Unit tests for the pure workflow rules in ``complaints.workflow``.

No database access: notices are unsaved ``Notice`` instances.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from accounts.models import Role
from complaints import workflow
from complaints.models import ComplaintStatus as S
from complaints.models import Notice, NoticeStage, NoticeStatus
from core.domain.exceptions import InvalidTransition, PermissionDenied, ValidationError

NOW = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)

ALL_STATUSES = list(S.values)


def _issued_notice(issuer_role=Role.DCP) -> Notice:
    notice = Notice(slot="first")
    workflow.reset_notice(
        notice,
        number="N-1",
        issue_date=date(2024, 5, 1),
        issuer_id=1,
        issuer_role=issuer_role,
        now=NOW,
    )
    return notice


class TestCanTransition:

    @pytest.mark.parametrize(
        "role, allowed",
        [
            (Role.FIELD_OFFICER, {S.PENDING}),
            (Role.DCP, {S.PENDING, S.UNDER_REVIEW_DCP}),
            (Role.ACP, {S.UNDER_REVIEW_DCP, S.UNDER_REVIEW_ACP}),
            (Role.COMMISSIONER, {S.UNDER_REVIEW_ACP, S.UNDER_REVIEW_COMMISSIONER}),
            (Role.COMPLAINANT, set()),
            (None, set()),
        ],
    )
    def test_table(self, role, allowed):
        for current in ALL_STATUSES:
            assert workflow.can_transition(role, current) is (current in allowed), current

    def test_super_admin_acts_on_everything(self):
        assert all(workflow.can_transition(Role.SUPER_ADMIN, s) for s in ALL_STATUSES)

    def test_unset_status_is_open_to_anyone(self):
        assert workflow.can_transition(Role.COMPLAINANT, None)
        assert workflow.can_transition(None, None)

    def test_terminal_statuses_only_for_super_admin(self):
        for current in workflow.TERMINAL_STATUSES:
            for role in (Role.FIELD_OFFICER, Role.DCP, Role.ACP, Role.COMMISSIONER):
                assert not workflow.can_transition(role, current)


class TestForwardRules:

    @pytest.mark.parametrize(
        "role, status, target, assignee_role",
        [
            (Role.FIELD_OFFICER, S.PENDING, S.UNDER_REVIEW_DCP, Role.DCP),
            (Role.DCP, S.UNDER_REVIEW_DCP, S.UNDER_REVIEW_ACP, Role.ACP),
            (Role.ACP, S.UNDER_REVIEW_ACP, S.UNDER_REVIEW_COMMISSIONER, Role.COMMISSIONER),
            (Role.COMMISSIONER, S.UNDER_REVIEW_COMMISSIONER, S.RESOLVED, None),
        ],
    )
    def test_plan_forward(self, role, status, target, assignee_role):
        plan = workflow.plan_forward(role, status)
        assert plan.target_status == target
        assert plan.assignee_role == assignee_role

    def test_super_admin_forwards_as_owning_tier(self):
        plan = workflow.plan_forward(Role.SUPER_ADMIN, S.UNDER_REVIEW_ACP)
        assert plan.acting_as == Role.ACP
        assert plan.target_status == S.UNDER_REVIEW_COMMISSIONER

    def test_super_admin_cannot_forward_terminal(self):
        with pytest.raises(InvalidTransition):
            workflow.plan_forward(Role.SUPER_ADMIN, S.CLOSED)

    def test_out_of_tier_forward_is_denied(self):
        with pytest.raises(PermissionDenied):
            workflow.plan_forward(Role.FIELD_OFFICER, S.UNDER_REVIEW_ACP)

    def test_next_status_defaults_to_pending(self):
        assert workflow.next_status("UNKNOWN") == S.PENDING
        assert workflow.next_assignee_role(Role.COMMISSIONER) is None

    def test_complainant_has_no_forward(self):
        with pytest.raises(PermissionDenied):
            workflow.plan_forward(Role.COMPLAINANT, S.PENDING)
        assert workflow.next_status(Role.COMPLAINANT) == S.PENDING
        assert workflow.next_assignee_role(Role.COMPLAINANT) is None

    def test_can_set_status(self):
        assert workflow.can_set_status(Role.COMMISSIONER, S.CLOSED)
        assert not workflow.can_set_status(Role.DCP, S.RESOLVED)
        assert workflow.can_set_status(Role.SUPER_ADMIN, S.LEGAL_REVIEW)


class TestNoticeApproval:

    def test_reset_by_field_officer_awaits_higher_authority(self):
        notice = _issued_notice(Role.FIELD_OFFICER)
        assert notice.status == NoticeStatus.PENDING
        assert notice.awaiting_higher_authority is True
        assert workflow.current_stage(notice) == NoticeStage.DCP

    def test_complainant_cannot_issue(self):
        with pytest.raises(PermissionDenied):
            _issued_notice(Role.COMPLAINANT)

    def test_full_chain_approves(self):
        notice = _issued_notice(Role.FIELD_OFFICER)
        for actor_id, (stage, role) in enumerate(
            [
                (NoticeStage.DCP, Role.DCP),
                (NoticeStage.ACP, Role.ACP),
                (NoticeStage.COMMISSIONER, Role.COMMISSIONER),
            ],
            start=10,
        ):
            assert notice.status == NoticeStatus.PENDING
            workflow.approve_stage(notice, stage, actor_id=actor_id, actor_role=role, now=NOW)
            assert workflow.stage_approval(notice, stage) == (actor_id, NOW)
        assert notice.status == NoticeStatus.APPROVED
        assert notice.awaiting_higher_authority is False
        assert workflow.current_stage(notice) is None

    def test_stages_are_sequential(self):
        notice = _issued_notice()
        with pytest.raises(InvalidTransition):
            workflow.approve_stage(
                notice, NoticeStage.ACP, actor_id=1, actor_role=Role.ACP, now=NOW,
            )
        assert notice.acp_approved_at is None

    def test_wrong_role_leaves_notice_untouched(self):
        notice = _issued_notice()
        with pytest.raises(PermissionDenied):
            workflow.approve_stage(
                notice, NoticeStage.DCP, actor_id=1, actor_role=Role.ACP, now=NOW,
            )
        assert notice.dcp_approved_at is None
        assert notice.status == NoticeStatus.PENDING

    def test_stage_cannot_be_approved_twice(self):
        notice = _issued_notice()
        workflow.approve_stage(notice, NoticeStage.DCP, actor_id=1, actor_role=Role.DCP, now=NOW)
        with pytest.raises(InvalidTransition):
            workflow.approve_stage(
                notice, NoticeStage.DCP, actor_id=2, actor_role=Role.SUPER_ADMIN, now=NOW,
            )
        assert notice.dcp_approved_by_id == 1

    def test_reject_requires_reason(self):
        notice = _issued_notice()
        with pytest.raises(ValidationError):
            workflow.reject_stage(
                notice, NoticeStage.DCP, reason="   ",
                actor_id=1, actor_role=Role.DCP, now=NOW,
            )
        assert notice.status == NoticeStatus.PENDING
        assert notice.rejection_reason == ""

    def test_higher_tier_may_reject_lower_stage(self):
        notice = _issued_notice()
        workflow.approve_stage(notice, NoticeStage.DCP, actor_id=1, actor_role=Role.DCP, now=NOW)
        workflow.reject_stage(
            notice, NoticeStage.ACP, reason="  Insufficient documentation ",
            actor_id=3, actor_role=Role.COMMISSIONER, now=NOW,
        )
        assert notice.status == NoticeStatus.REJECTED
        assert notice.rejected_stage == NoticeStage.ACP
        assert notice.rejection_reason == "Insufficient documentation"

    def test_lower_tier_cannot_reject_higher_stage(self):
        notice = _issued_notice()
        with pytest.raises(PermissionDenied):
            workflow.reject_stage(
                notice, NoticeStage.COMMISSIONER, reason="no",
                actor_id=1, actor_role=Role.DCP, now=NOW,
            )

    def test_approved_stage_cannot_be_rejected(self):
        notice = _issued_notice()
        workflow.approve_stage(notice, NoticeStage.DCP, actor_id=1, actor_role=Role.DCP, now=NOW)
        with pytest.raises(InvalidTransition):
            workflow.reject_stage(
                notice, NoticeStage.DCP, reason="late",
                actor_id=2, actor_role=Role.ACP, now=NOW,
            )

    def test_rejected_notice_is_terminal_until_reissued(self):
        notice = _issued_notice()
        workflow.reject_stage(
            notice, NoticeStage.DCP, reason="bad", actor_id=1, actor_role=Role.DCP, now=NOW,
        )
        with pytest.raises(InvalidTransition):
            workflow.approve_stage(
                notice, NoticeStage.DCP, actor_id=1, actor_role=Role.DCP, now=NOW,
            )

        workflow.reset_notice(
            notice, number="N-2", issue_date=date(2024, 6, 1),
            issuer_id=1, issuer_role=Role.DCP, now=NOW,
        )
        assert notice.status == NoticeStatus.PENDING
        assert notice.rejected_stage == ""
        assert notice.rejection_reason == ""
        assert notice.rejected_by_id is None
        assert workflow.current_stage(notice) == NoticeStage.DCP
