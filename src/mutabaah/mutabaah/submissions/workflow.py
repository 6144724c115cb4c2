"""Monthly submission approval state machine.

pending_mentor -> pending_supervisor -> pending_kaunit -> pending_manager -> approved,
and any pending stage may end in rejected_<role>. Terminal states never
re-enter a pending state; a resubmission is a new submission.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional, Tuple

from ..common.validators import optional_text
from ..core.enums import Decision, NotificationType, ReviewerRole, SubmissionStatus
from ..core.exceptions import ValidationError
from ..notifications import messages
from ..notifications.model import Notification
from .model import REVIEW_ORDER, MonthlySubmission, ReviewStage


@dataclass(frozen=True)
class Transition:
    before: SubmissionStatus
    submission: MonthlySubmission
    notifications: Tuple[Notification, ...] = ()


def next_status(role: ReviewerRole) -> SubmissionStatus:
    idx = REVIEW_ORDER.index(role)
    if idx + 1 >= len(REVIEW_ORDER):
        return SubmissionStatus.APPROVED
    return SubmissionStatus.pending_for(REVIEW_ORDER[idx + 1])


def advance(
    submission: MonthlySubmission,
    reviewer_role: ReviewerRole,
    decision: Decision,
    notes: Optional[str] = None,
    *,
    reviewed_at: datetime,
) -> Transition:
    """Apply one reviewer decision.

    The role must be the one implied by the current status; anything else
    (including acting on a terminal submission) is a ValidationError.
    """

    expected = submission.status.reviewer_role
    if expected is None:
        raise ValidationError(f"Laporan sudah final ({submission.status.value})")
    if reviewer_role != expected:
        raise ValidationError(
            f"Peran {reviewer_role.value} tidak dapat meninjau laporan berstatus {submission.status.value}"
        )

    stamped = submission.with_stage(
        ReviewStage(
            role=reviewer_role,
            resolver_id=submission.resolver_id(reviewer_role),
            notes=optional_text(notes),
            reviewed_at=reviewed_at,
        )
    )

    if decision == Decision.REJECTED:
        updated = replace(stamped, status=SubmissionStatus.rejected_by(reviewer_role))
    else:
        updated = replace(stamped, status=next_status(reviewer_role))

    return Transition(
        before=submission.status,
        submission=updated,
        notifications=tuple(_notifications_for(updated, reviewer_role, decision, notes)),
    )


def _notifications_for(sub: MonthlySubmission, role: ReviewerRole, decision: Decision, notes: Optional[str]):
    rid = str(sub.submission_id)
    if decision == Decision.REJECTED:
        yield Notification(
            user_id=sub.mentee_id,
            type=NotificationType.MONTHLY_REPORT_REJECTED,
            title=messages.REPORT_REJECTED_TITLE,
            message=messages.report_rejected(sub.month_key, role, notes),
            related_entity_id=rid,
        )
        return

    yield Notification(
        user_id=sub.mentee_id,
        type=NotificationType.MONTHLY_REPORT_APPROVED,
        title=messages.REPORT_APPROVED_TITLE,
        message=messages.report_approved(sub.month_key, role),
        related_entity_id=rid,
    )
    next_role = sub.status.reviewer_role
    if next_role is not None and sub.resolver_id(next_role):
        yield Notification(
            user_id=str(sub.resolver_id(next_role)),
            type=NotificationType.MONTHLY_REPORT_NEEDS_REVIEW,
            title=messages.NEEDS_REVIEW_TITLE,
            message=messages.needs_review(sub.mentee_name or sub.mentee_id, role),
            related_entity_id=rid,
        )
