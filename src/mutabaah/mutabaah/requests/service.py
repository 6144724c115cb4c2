from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.clock import TrustedClock
from ..common.datetime_utils import month_key_of, parse_iso_date
from ..common.validators import optional_text, require_non_empty
from ..core.constants import DEFAULT_LIST_LIMIT, PRAYER_IDS
from ..core.enums import Decision, NotificationType, RequestKind, RequestStatus, Role
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    LockedError,
    NotFoundError,
    PartialFailure,
    ValidationError,
)
from ..employees.repository import EmployeeRepository
from ..ledger.factory import EvidenceTranslatorFactory
from ..ledger.model import Evidence
from ..ledger.service import FROZEN_MONTH, LedgerService
from ..notifications import messages
from ..notifications.model import Notification
from ..notifications.service import NotificationService
from .model import ManualRequest
from .repository import RequestRepository

logger = logging.getLogger(__name__)

_CREATED = {
    RequestKind.TADARUS: NotificationType.TADARUS_REQUEST,
    RequestKind.MISSED_PRAYER: NotificationType.MISSED_PRAYER_REQUEST,
}
_DECIDED = {
    (RequestKind.TADARUS, True): NotificationType.TADARUS_APPROVED,
    (RequestKind.TADARUS, False): NotificationType.TADARUS_REJECTED,
    (RequestKind.MISSED_PRAYER, True): NotificationType.MISSED_PRAYER_APPROVED,
    (RequestKind.MISSED_PRAYER, False): NotificationType.MISSED_PRAYER_REJECTED,
}


class ManualRequestService:
    """Tadarus and missed-prayer requests.

    A request is resolved exactly once. Approval first persists the status,
    then merges one `present` evidence item into the ledger; when the merge
    fails the caller gets PartialFailure and can call `retry_ledger_merge`.
    """

    def __init__(
        self,
        requests: RequestRepository,
        employees: EmployeeRepository,
        ledger: LedgerService,
        notifications: NotificationService,
        *,
        clock: TrustedClock,
        translator_factory: Optional[EvidenceTranslatorFactory] = None,
    ):
        self._requests = requests
        self._employees = employees
        self._ledger = ledger
        self._notifications = notifications
        self._clock = clock
        self._translators = translator_factory or EvidenceTranslatorFactory()

    # -------- Creation --------
    def create_tadarus(
        self,
        *,
        actor_id: str,
        employee_id: str,
        date_value: str,
        category: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> ManualRequest:
        ref = (category or "").strip() or "tadarus"
        return self._create(RequestKind.TADARUS, actor_id, employee_id, date_value, ref, notes)

    def create_missed_prayer(
        self,
        *,
        actor_id: str,
        employee_id: str,
        date_value: str,
        prayer_id: str,
        notes: Optional[str] = None,
    ) -> ManualRequest:
        prayer = require_non_empty(prayer_id, "Sholat").lower()
        if prayer not in PRAYER_IDS:
            raise ValidationError(f"Sholat tidak dikenal: {prayer_id!r}")
        return self._create(RequestKind.MISSED_PRAYER, actor_id, employee_id, date_value, prayer, notes)

    def _create(
        self,
        kind: RequestKind,
        actor_id: str,
        employee_id: str,
        date_value: str,
        activity_ref: str,
        notes: Optional[str],
    ) -> ManualRequest:
        if str(actor_id) != str(employee_id):
            raise AuthorizationError("Hanya karyawan bersangkutan yang dapat mengajukan")

        target = parse_iso_date(date_value)
        if target > self._clock.now().date():
            raise ValidationError("Tanggal tidak boleh di masa depan")

        translator = self._translators.for_request_kind(kind)
        if translator.resolve_activity(activity_ref) is None:
            raise ValidationError(f"Aktivitas tidak dikenal: {activity_ref!r}")

        employee = self._employees.get_by_id(str(employee_id))
        if not employee:
            raise NotFoundError("Karyawan tidak ditemukan")
        if not employee.mentor_id:
            raise ValidationError("Mentor belum ditentukan")
        if self._ledger.is_month_frozen(employee_id=employee.employee_id, month_key=month_key_of(target)):
            raise LockedError("Laporan bulan ini sudah disetujui")

        request_id = self._requests.create(
            kind=kind,
            mentee_id=employee.employee_id,
            mentor_id=employee.mentor_id,
            request_date=target,
            activity_ref=activity_ref,
            notes=optional_text(notes),
        )
        req = self._get(kind, request_id)
        logger.info("%s request %s created by %s for %s", kind.value, request_id, employee.employee_id, target)

        self._notifications.emit(
            [
                Notification(
                    user_id=str(employee.mentor_id),
                    type=_CREATED[kind],
                    title=messages.request_created_title(kind),
                    message=messages.request_created(kind, employee.full_name, target.isoformat()),
                    related_entity_id=str(request_id),
                )
            ]
        )
        return req

    # -------- Review --------
    def review(
        self,
        *,
        kind: RequestKind,
        actor_id: str,
        actor_role: Role,
        request_id: int,
        decision: Decision,
        reviewer_notes: Optional[str] = None,
    ) -> ManualRequest:
        req = self._get(kind, request_id)
        self._ensure_reviewer(req, actor_id=actor_id, actor_role=actor_role)
        if req.status != RequestStatus.PENDING:
            raise ConflictError("Pengajuan sudah diproses")

        approved = decision == Decision.APPROVED
        evidence = None
        if approved:
            self._ensure_month_open(req)
            evidence = self._evidence_for(req)

        decided = self._requests.decide(
            kind=kind,
            request_id=req.request_id,
            status=RequestStatus.APPROVED if approved else RequestStatus.REJECTED,
            reviewed_by=str(actor_id),
            reviewed_at=self._clock.now(),
            reviewer_notes=optional_text(reviewer_notes),
        )
        if not decided:
            raise ConflictError("Pengajuan sudah diproses")
        updated = self._get(kind, req.request_id)
        logger.info("%s request %s %s by %s", kind.value, req.request_id, updated.status.value, actor_id)

        self._notifications.emit(
            [
                Notification(
                    user_id=updated.mentee_id,
                    type=_DECIDED[(kind, approved)],
                    title=messages.request_decided_title(kind, approved),
                    message=messages.request_decided(kind, updated.date.isoformat(), approved, reviewer_notes),
                    related_entity_id=str(updated.request_id),
                )
            ]
        )

        if evidence is None:
            return updated
        return self._merge(updated, evidence)

    def retry_ledger_merge(self, *, kind: RequestKind, actor_id: str, actor_role: Role, request_id: int) -> ManualRequest:
        """Re-apply the ledger write of an approved request.

        Safe to call any number of times; the merge is an OR.
        """

        req = self._get(kind, request_id)
        self._ensure_reviewer(req, actor_id=actor_id, actor_role=actor_role)
        if req.status != RequestStatus.APPROVED:
            raise ValidationError("Hanya pengajuan yang disetujui yang dapat disinkronkan")
        self._ensure_month_open(req)
        return self._merge(req, self._evidence_for(req))

    def _merge(self, req: ManualRequest, evidence: Evidence) -> ManualRequest:
        try:
            report = self._ledger.apply([evidence])
            if not report.dropped:
                self._requests.mark_synced(kind=req.kind, request_id=req.request_id, synced_at=self._clock.now())
        except Exception as e:
            logger.exception("ledger merge failed for approved %s request %s", req.kind.value, req.request_id)
            raise PartialFailure(
                "Pengajuan disetujui tetapi data mutabaah belum tersimpan, silakan coba sinkronkan ulang",
                entity=req,
                cause=e,
            ) from e

        for dropped in report.dropped:
            logger.warning("%s request %s: evidence dropped (%s)", req.kind.value, req.request_id, dropped.reason)
        if any(d.reason == FROZEN_MONTH for d in report.dropped):
            raise LockedError("Laporan bulan ini sudah disetujui")
        return self._get(req.kind, req.request_id)

    def _ensure_month_open(self, req: ManualRequest) -> None:
        if self._ledger.is_month_frozen(employee_id=req.mentee_id, month_key=month_key_of(req.date)):
            raise LockedError("Laporan bulan ini sudah disetujui")

    def _evidence_for(self, req: ManualRequest) -> Evidence:
        return self._translators.for_request_kind(req.kind).for_request(req)

    # -------- Reads --------
    def list_for_employee(
        self,
        *,
        kind: RequestKind,
        actor_id: str,
        current_role: Role,
        employee_id: str,
    ) -> Sequence[ManualRequest]:
        if current_role != Role.ADMIN and str(actor_id) != str(employee_id):
            raise AuthorizationError("Anda tidak memiliki akses ke data ini")
        return self._requests.list(kind=kind, mentee_id=str(employee_id), limit=DEFAULT_LIST_LIMIT)

    def list_for_reviewer(
        self,
        *,
        kind: RequestKind,
        reviewer_id: str,
        status: Optional[RequestStatus] = None,
    ) -> Sequence[ManualRequest]:
        return self._requests.list(kind=kind, mentor_id=str(reviewer_id), status=status, limit=DEFAULT_LIST_LIMIT)

    def _get(self, kind: RequestKind, request_id: int) -> ManualRequest:
        req = self._requests.get(kind=kind, request_id=int(request_id))
        if not req:
            raise NotFoundError("Pengajuan tidak ditemukan")
        return req

    @staticmethod
    def _ensure_reviewer(req: ManualRequest, *, actor_id: str, actor_role: Role) -> None:
        if actor_role == Role.ADMIN:
            return
        if not req.mentor_id or str(actor_id) != str(req.mentor_id):
            raise AuthorizationError("Anda bukan mentor untuk pengajuan ini")
