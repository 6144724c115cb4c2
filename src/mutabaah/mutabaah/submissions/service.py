from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, Optional, Sequence

from ..common.clock import TrustedClock
from ..common.datetime_utils import month_key_of, parse_month_key
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import Decision, NotificationType, ReviewerRole, Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..ledger.service import LedgerService
from ..notifications import messages
from ..notifications.model import Notification
from ..notifications.service import NotificationService
from . import workflow
from .model import REVIEW_ORDER, MonthlySubmission, initial_stages
from .repository import SubmissionRepository

logger = logging.getLogger(__name__)


class SubmissionService:
    """Use cases for monthly reports: creation and the review chain."""

    def __init__(
        self,
        submissions: SubmissionRepository,
        employees: EmployeeRepository,
        ledger: LedgerService,
        notifications: NotificationService,
        *,
        clock: TrustedClock,
    ):
        self._submissions = submissions
        self._employees = employees
        self._ledger = ledger
        self._notifications = notifications
        self._clock = clock

    def create(self, *, actor_id: str, employee_id: str, month_key: str) -> MonthlySubmission:
        """Submit a month for review.

        A month can only be submitted once while a submission for it is
        pending or approved; after a rejection a new submission (new id)
        starts again at the mentor.
        """

        if str(actor_id) != str(employee_id):
            raise AuthorizationError("Hanya karyawan bersangkutan yang dapat mengirim laporan")

        parse_month_key(month_key)
        check = self._clock.validate()
        if not check.is_valid:
            raise ValidationError("Waktu server tidak valid, coba lagi nanti")
        if month_key > month_key_of(check.corrected_time.date()):
            raise ValidationError("Tidak dapat mengirim laporan untuk bulan yang akan datang")

        employee = self._employees.get_by_id(str(employee_id))
        if not employee:
            raise NotFoundError("Karyawan tidak ditemukan")
        if month_key not in employee.activated_months:
            raise ValidationError("Bulan ini belum diaktifkan")
        if not employee.mentor_id:
            raise ValidationError("Mentor belum ditentukan")

        for existing in self._submissions.list_for_employee(mentee_id=employee.employee_id):
            if existing.month_key == month_key and not existing.status.is_rejected:
                raise ConflictError(f"Laporan bulan {month_key} sudah dikirim")

        submission_id = self._submissions.create(
            mentee_id=employee.employee_id,
            month_key=month_key,
            stages=initial_stages({r: employee.resolver_for(r) for r in REVIEW_ORDER}),
            report=self._snapshot(employee.employee_id, month_key),
        )
        submission = self._submissions.get(submission_id)
        if not submission:
            raise NotFoundError("Laporan tidak ditemukan")
        logger.info("monthly submission %s created for %s/%s", submission_id, employee.employee_id, month_key)

        self._notifications.emit(
            [
                Notification(
                    user_id=str(employee.mentor_id),
                    type=NotificationType.MONTHLY_REPORT_SUBMITTED,
                    title=messages.REPORT_SUBMITTED_TITLE,
                    message=messages.report_submitted(employee.full_name, month_key),
                    related_entity_id=str(submission_id),
                )
            ]
        )
        return submission

    def advance(
        self,
        *,
        actor_id: str,
        actor_role: Role,
        submission_id: int,
        reviewer_role: ReviewerRole,
        decision: Decision,
        notes: Optional[str] = None,
        refresh_snapshot: bool = False,
    ) -> MonthlySubmission:
        sub = self._submissions.get(int(submission_id))
        if not sub:
            raise NotFoundError("Laporan tidak ditemukan")

        transition = workflow.advance(sub, reviewer_role, decision, notes, reviewed_at=self._clock.now())

        if actor_role != Role.ADMIN and str(actor_id) != str(sub.resolver_id(reviewer_role) or ""):
            raise AuthorizationError("Anda bukan peninjau untuk tahap ini")

        updated = transition.submission
        report = None
        if refresh_snapshot:
            report = self._snapshot(sub.mentee_id, sub.month_key)
            updated = replace(updated, report=report)

        if not self._submissions.save_transition(updated, expected_status=transition.before, report=report):
            raise ConflictError("Laporan sudah diproses oleh peninjau lain")
        logger.info(
            "submission %s: %s -> %s by %s (%s)",
            sub.submission_id, transition.before.value, updated.status.value, actor_id, reviewer_role.value,
        )

        self._notifications.emit(transition.notifications)
        return updated

    def get(self, *, actor_id: str, current_role: Role, submission_id: int) -> MonthlySubmission:
        sub = self._submissions.get(int(submission_id))
        if not sub:
            raise NotFoundError("Laporan tidak ditemukan")
        viewers = {sub.mentee_id} | {str(s.resolver_id) for s in sub.stages if s.resolver_id}
        if current_role != Role.ADMIN and str(actor_id) not in viewers:
            raise AuthorizationError("Anda tidak memiliki akses ke laporan ini")
        return sub

    def list_for_employee(self, *, actor_id: str, current_role: Role, employee_id: str) -> Sequence[MonthlySubmission]:
        if current_role != Role.ADMIN and str(actor_id) != str(employee_id):
            raise AuthorizationError("Anda tidak memiliki akses ke data ini")
        return self._submissions.list_for_employee(mentee_id=str(employee_id))

    def list_for_reviewer(
        self,
        *,
        reviewer_id: str,
        role: Optional[ReviewerRole] = None,
        pending_only: bool = False,
    ) -> Sequence[MonthlySubmission]:
        return self._submissions.list_for_reviewer(
            reviewer_id=str(reviewer_id), role=role, pending_only=pending_only, limit=DEFAULT_LIST_LIMIT
        )

    def _snapshot(self, employee_id: str, month_key: str) -> Dict[str, Any]:
        view = self._ledger.month_view(employee_id=employee_id, month_key=month_key)
        return {
            "days": view.days,
            "totals": dict(view.totals),
            "lastMergedAt": view.last_merged_at.isoformat() if view.last_merged_at else None,
        }
