from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Mapping, Optional, Tuple

from ..core.enums import ReviewerRole, SubmissionStatus

REVIEW_ORDER: Tuple[ReviewerRole, ...] = (
    ReviewerRole.MENTOR,
    ReviewerRole.SUPERVISOR,
    ReviewerRole.KAUNIT,
    ReviewerRole.MANAGER,
)


@dataclass(frozen=True)
class ReviewStage:
    """One position in the approval chain and what its reviewer recorded."""

    role: ReviewerRole
    resolver_id: Optional[str] = None
    notes: Optional[str] = None
    reviewed_at: Optional[datetime] = None


@dataclass(frozen=True)
class MonthlySubmission:
    submission_id: int
    mentee_id: str
    month_key: str
    status: SubmissionStatus
    stages: Tuple[ReviewStage, ...]
    mentee_name: str = ""
    submitted_at: Optional[datetime] = None
    report: Mapping[str, Any] = field(default_factory=dict)

    def stage(self, role: ReviewerRole) -> ReviewStage:
        for s in self.stages:
            if s.role == role:
                return s
        return ReviewStage(role=role)

    def resolver_id(self, role: ReviewerRole) -> Optional[str]:
        return self.stage(role).resolver_id

    @property
    def mentor_id(self) -> Optional[str]:
        return self.resolver_id(ReviewerRole.MENTOR)

    @property
    def supervisor_id(self) -> Optional[str]:
        return self.resolver_id(ReviewerRole.SUPERVISOR)

    @property
    def ka_unit_id(self) -> Optional[str]:
        return self.resolver_id(ReviewerRole.KAUNIT)

    @property
    def manager_id(self) -> Optional[str]:
        return self.resolver_id(ReviewerRole.MANAGER)

    def with_stage(self, stage: ReviewStage) -> "MonthlySubmission":
        stages = tuple(stage if s.role == stage.role else s for s in self.stages)
        return replace(self, stages=stages)

    def to_dict(self) -> dict:
        out = {
            "id": self.submission_id,
            "menteeId": self.mentee_id,
            "menteeName": self.mentee_name,
            "monthKey": self.month_key,
            "status": self.status.value,
            "submittedAt": self.submitted_at.isoformat() if self.submitted_at else None,
            "report": dict(self.report),
        }
        for s in self.stages:
            prefix = {
                ReviewerRole.MENTOR: "mentor",
                ReviewerRole.SUPERVISOR: "supervisor",
                ReviewerRole.KAUNIT: "kaUnit",
                ReviewerRole.MANAGER: "manager",
            }[s.role]
            out[f"{prefix}Id"] = s.resolver_id
            out[f"{prefix}Notes"] = s.notes
            out[f"{prefix}ReviewedAt"] = s.reviewed_at.isoformat() if s.reviewed_at else None
        return out


def initial_stages(resolvers: Mapping[ReviewerRole, Optional[str]]) -> Tuple[ReviewStage, ...]:
    return tuple(ReviewStage(role=r, resolver_id=resolvers.get(r)) for r in REVIEW_ORDER)
