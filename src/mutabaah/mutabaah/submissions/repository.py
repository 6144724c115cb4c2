from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence, Tuple

from ..core.enums import ReviewerRole, SubmissionStatus
from .model import MonthlySubmission, ReviewStage


class SubmissionRepository(Protocol):
    def create(
        self,
        *,
        mentee_id: str,
        month_key: str,
        stages: Tuple[ReviewStage, ...],
        report: Mapping[str, Any],
    ) -> int:
        """Insert a `pending_mentor` submission.

        Raises ConflictError when the (mentee, month) pair already has a
        submission that is not rejected.
        """

        raise NotImplementedError

    def get(self, submission_id: int) -> Optional[MonthlySubmission]:
        raise NotImplementedError

    def list_for_employee(self, *, mentee_id: str) -> Sequence[MonthlySubmission]:
        raise NotImplementedError

    def list_for_reviewer(
        self,
        *,
        reviewer_id: str,
        role: Optional[ReviewerRole] = None,
        pending_only: bool = False,
        limit: int = 200,
    ) -> Sequence[MonthlySubmission]:
        raise NotImplementedError

    def save_transition(
        self,
        submission: MonthlySubmission,
        *,
        expected_status: SubmissionStatus,
        report: Optional[Mapping[str, Any]] = None,
    ) -> bool:
        """Persist status and stage stamps only if the stored status is still `expected_status`.

        A refreshed `report` is written under the same guard, so a losing
        reviewer never touches the stored snapshot.
        """

        raise NotImplementedError
