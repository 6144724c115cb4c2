from __future__ import annotations

from datetime import datetime

import pytest

from src.mutabaah.mutabaah.core.enums import Decision, NotificationType, ReviewerRole, SubmissionStatus
from src.mutabaah.mutabaah.core.exceptions import ValidationError
from src.mutabaah.mutabaah.submissions import workflow
from src.mutabaah.mutabaah.submissions.model import REVIEW_ORDER, MonthlySubmission, initial_stages

AT = datetime(2024, 4, 2, 10, 0)


def fresh(**resolvers):
    defaults = {
        ReviewerRole.MENTOR: "MTR001",
        ReviewerRole.SUPERVISOR: "SPV001",
        ReviewerRole.KAUNIT: "KAU001",
        ReviewerRole.MANAGER: "MGR001",
    }
    defaults.update({ReviewerRole(k): v for k, v in resolvers.items()})
    return MonthlySubmission(
        submission_id=11,
        mentee_id="EMP001",
        month_key="2024-03",
        status=SubmissionStatus.PENDING_MENTOR,
        stages=initial_stages(defaults),
        mentee_name="Rina Marlina",
    )


def test_four_approvals_reach_approved():
    sub = fresh()
    seen = [sub.status]
    for role in REVIEW_ORDER:
        sub = workflow.advance(sub, role, Decision.APPROVED, f"ok {role.value}", reviewed_at=AT).submission
        seen.append(sub.status)

    assert seen == [
        SubmissionStatus.PENDING_MENTOR,
        SubmissionStatus.PENDING_SUPERVISOR,
        SubmissionStatus.PENDING_KAUNIT,
        SubmissionStatus.PENDING_MANAGER,
        SubmissionStatus.APPROVED,
    ]
    assert all(s.reviewed_at == AT for s in sub.stages)
    assert sub.stage(ReviewerRole.KAUNIT).notes == "ok kaunit"


def test_role_mismatch_is_invalid():
    with pytest.raises(ValidationError):
        workflow.advance(fresh(), ReviewerRole.SUPERVISOR, Decision.APPROVED, reviewed_at=AT)


@pytest.mark.parametrize("status", [SubmissionStatus.APPROVED, SubmissionStatus.REJECTED_MENTOR])
def test_terminal_states_accept_no_decision(status):
    sub = MonthlySubmission(11, "EMP001", "2024-03", status, initial_stages({}))
    for role in REVIEW_ORDER:
        with pytest.raises(ValidationError):
            workflow.advance(sub, role, Decision.APPROVED, reviewed_at=AT)


def test_rejection_stamps_only_the_current_stage():
    sub = workflow.advance(fresh(), ReviewerRole.MENTOR, Decision.APPROVED, reviewed_at=AT).submission
    t = workflow.advance(sub, ReviewerRole.SUPERVISOR, Decision.REJECTED, "  kurang lengkap ", reviewed_at=AT)

    assert t.before == SubmissionStatus.PENDING_SUPERVISOR
    assert t.submission.status == SubmissionStatus.REJECTED_SUPERVISOR
    assert t.submission.stage(ReviewerRole.SUPERVISOR).notes == "kurang lengkap"
    assert t.submission.stage(ReviewerRole.KAUNIT).reviewed_at is None
    assert t.submission.stage(ReviewerRole.MANAGER).reviewed_at is None


def test_approval_notifies_mentee_and_next_reviewer():
    t = workflow.advance(fresh(), ReviewerRole.MENTOR, Decision.APPROVED, reviewed_at=AT)

    assert [(n.user_id, n.type) for n in t.notifications] == [
        ("EMP001", NotificationType.MONTHLY_REPORT_APPROVED),
        ("SPV001", NotificationType.MONTHLY_REPORT_NEEDS_REVIEW),
    ]
    assert all(n.related_entity_id == "11" for n in t.notifications)


def test_next_reviewer_without_resolver_gets_no_notification():
    t = workflow.advance(fresh(supervisor=None), ReviewerRole.MENTOR, Decision.APPROVED, reviewed_at=AT)
    assert [n.type for n in t.notifications] == [NotificationType.MONTHLY_REPORT_APPROVED]


def test_rejection_notifies_mentee_with_notes():
    t = workflow.advance(fresh(), ReviewerRole.MENTOR, Decision.REJECTED, "isi ulang", reviewed_at=AT)

    assert len(t.notifications) == 1
    n = t.notifications[0]
    assert n.user_id == "EMP001"
    assert n.type == NotificationType.MONTHLY_REPORT_REJECTED
    assert "isi ulang" in n.message


def test_final_approval_has_no_next_reviewer():
    assert workflow.next_status(ReviewerRole.MANAGER) == SubmissionStatus.APPROVED
    assert workflow.next_status(ReviewerRole.MENTOR) == SubmissionStatus.PENDING_SUPERVISOR
