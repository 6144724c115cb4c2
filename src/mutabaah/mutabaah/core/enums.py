from __future__ import annotations

from enum import Enum
from typing import Optional


class Role(str, Enum):
    """Session role used for authorization."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class ReviewerRole(str, Enum):
    """Stage of the monthly approval chain, in review order."""

    MENTOR = "mentor"
    SUPERVISOR = "supervisor"
    KAUNIT = "kaunit"
    MANAGER = "manager"


class Decision(str, Enum):
    APPROVED = "approved"
    REJECTED = "rejected"


class SubmissionStatus(str, Enum):
    PENDING_MENTOR = "pending_mentor"
    PENDING_SUPERVISOR = "pending_supervisor"
    PENDING_KAUNIT = "pending_kaunit"
    PENDING_MANAGER = "pending_manager"
    APPROVED = "approved"
    REJECTED_MENTOR = "rejected_mentor"
    REJECTED_SUPERVISOR = "rejected_supervisor"
    REJECTED_KAUNIT = "rejected_kaunit"
    REJECTED_MANAGER = "rejected_manager"

    @classmethod
    def pending_for(cls, role: ReviewerRole) -> "SubmissionStatus":
        return cls(f"pending_{role.value}")

    @classmethod
    def rejected_by(cls, role: ReviewerRole) -> "SubmissionStatus":
        return cls(f"rejected_{role.value}")

    @property
    def is_pending(self) -> bool:
        return self.value.startswith("pending_")

    @property
    def is_rejected(self) -> bool:
        return self.value.startswith("rejected_")

    @property
    def is_terminal(self) -> bool:
        return not self.is_pending

    @property
    def reviewer_role(self) -> Optional[ReviewerRole]:
        """Role allowed to act on this status (None for terminal states)."""
        if not self.is_pending:
            return None
        return ReviewerRole(self.value[len("pending_"):])


class RequestStatus(str, Enum):
    """Lifecycle of a manual request (tadarus / missed prayer)."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class RequestKind(str, Enum):
    TADARUS = "tadarus"
    MISSED_PRAYER = "missed_prayer"


class LockingMode(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class EvidenceSource(str, Enum):
    """Producers that feed the activity ledger."""

    ATTENDANCE = "attendance"
    TEAM_SESSION = "team_session"
    SCHEDULED_ACTIVITY = "scheduled_activity"
    MANUAL_REQUEST = "manual_request"
    SELF_REPORT = "self_report"


class NotificationType(str, Enum):
    MONTHLY_REPORT_SUBMITTED = "monthly_report_submitted"
    MONTHLY_REPORT_APPROVED = "monthly_report_approved"
    MONTHLY_REPORT_REJECTED = "monthly_report_rejected"
    MONTHLY_REPORT_NEEDS_REVIEW = "monthly_report_needs_review"
    TADARUS_REQUEST = "tadarus_request"
    TADARUS_APPROVED = "tadarus_approved"
    TADARUS_REJECTED = "tadarus_rejected"
    MISSED_PRAYER_REQUEST = "missed_prayer_request"
    MISSED_PRAYER_APPROVED = "missed_prayer_approved"
    MISSED_PRAYER_REJECTED = "missed_prayer_rejected"
