from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..common.clock import TrustedClock
from ..common.datetime_utils import coerce_date, month_key_of, parse_iso_date, parse_month_key
from ..core.enums import EvidenceSource, LockingMode, Role
from ..core.exceptions import AuthorizationError, LockedError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..locking import policy
from ..submissions.repository import SubmissionRepository
from . import aggregator
from .catalog import SELF_REPORTABLE_TRIGGERS, get_activity
from .factory import EvidenceTranslatorFactory
from .model import DroppedEvidence, Evidence, IngestReport, Ledger, LedgerMonthView
from .repository import LedgerStore

logger = logging.getLogger(__name__)

FROZEN_MONTH = "frozen_month"
INVALID_PAYLOAD = "invalid_payload"

_LOCK_MESSAGES = {
    policy.FUTURE_DATE: "Tanggal berada di masa depan",
    policy.OUTSIDE_CURRENT_MONTH: "Hanya bulan berjalan yang dapat diubah",
    policy.MONTH_SUBMITTED: "Laporan bulan ini sudah dikirim untuk ditinjau",
}


class LedgerService:
    """Use cases around the monthly activity ledger.

    Producers reach the ledger only through `ingest`/`apply`, which OR-merge
    through the injected LedgerStore.
    """

    def __init__(
        self,
        store: LedgerStore,
        submissions: SubmissionRepository,
        employees: EmployeeRepository,
        *,
        clock: TrustedClock,
        locking_mode: LockingMode = LockingMode.WEEKLY,
        translator_factory: Optional[EvidenceTranslatorFactory] = None,
    ):
        self._store = store
        self._submissions = submissions
        self._employees = employees
        self._clock = clock
        self._locking_mode = locking_mode
        self._translators = translator_factory or EvidenceTranslatorFactory()

    # -------- Writes --------
    def ingest(self, source: EvidenceSource, payloads: Iterable[Mapping[str, Any]]) -> IngestReport:
        """Translate raw producer payloads and merge them.

        A payload that is not an object, or has no employee or date, is
        dropped on its own; the batch continues.
        """

        translator = self._translators.for_source(source)
        evidence: List[Evidence] = []
        rejected: List[DroppedEvidence] = []
        for payload in payloads:
            if not isinstance(payload, Mapping):
                logger.warning("dropping %s payload: not an object (%s)", source.value, type(payload).__name__)
                rejected.append(DroppedEvidence(INVALID_PAYLOAD, "payload harus berupa objek", payload=payload))
                continue
            try:
                evidence.append(translator.translate(payload))
            except ValidationError as e:
                logger.warning("dropping %s payload: %s", source.value, e)
                rejected.append(DroppedEvidence(INVALID_PAYLOAD, str(e), payload=payload))

        report = self.apply(evidence)
        return IngestReport(
            applied=report.applied,
            dropped=tuple(rejected) + report.dropped,
            last_merged_at=report.last_merged_at,
        )

    def apply(self, evidence: Sequence[Evidence]) -> IngestReport:
        by_employee: "OrderedDict[str, List[Evidence]]" = OrderedDict()
        for ev in evidence:
            by_employee.setdefault(str(ev.employee_id), []).append(ev)

        applied = 0
        dropped: List[DroppedEvidence] = []
        merged_at: Dict[Tuple[str, str], datetime] = {}

        for employee_id, items in by_employee.items():
            submissions = self._submissions.list_for_employee(mentee_id=employee_id)
            accepted: List[Evidence] = []
            for ev in items:
                mk = self._month_of(ev)
                if mk and policy.is_month_frozen(employee_id, mk, submissions):
                    logger.warning("dropping evidence for approved month %s (employee=%s)", mk, employee_id)
                    dropped.append(DroppedEvidence(FROZEN_MONTH, f"month {mk} approved", evidence=ev))
                    continue
                accepted.append(ev)

            if not accepted:
                continue
            result = self._store.merge(employee_id, accepted)
            applied += result.applied
            dropped.extend(result.dropped)
            for mk, month in result.months.items():
                if month.last_merged_at:
                    merged_at[(employee_id, mk)] = month.last_merged_at

        logger.info("ledger merge: applied=%d dropped=%d", applied, len(dropped))
        return IngestReport(applied=applied, dropped=tuple(dropped), last_merged_at=merged_at)

    def record_self_report(
        self,
        *,
        actor_id: str,
        employee_id: str,
        activity_id: str,
        date_value: str,
        present: bool = True,
    ) -> IngestReport:
        """Employee ticks a self-reported activity for a day."""

        if str(actor_id) != str(employee_id):
            raise AuthorizationError("Hanya karyawan bersangkutan yang dapat mengisi aktivitas")

        activity = get_activity(activity_id)
        if not activity or activity.trigger not in SELF_REPORTABLE_TRIGGERS:
            raise ValidationError(f"Aktivitas tidak dapat diisi manual: {activity_id!r}")

        target = parse_iso_date(date_value)
        employee = self._employees.get_by_id(str(employee_id))
        if not employee:
            raise NotFoundError("Karyawan tidak ditemukan")
        if month_key_of(target) not in employee.activated_months:
            raise ValidationError("Bulan ini belum diaktifkan")

        self.ensure_editable(employee_id=employee_id, target=target)
        return self.apply(
            [
                Evidence(
                    employee_id=str(employee_id),
                    activity_id=activity.activity_id,
                    date=target,
                    present=bool(present),
                    source=EvidenceSource.SELF_REPORT,
                )
            ]
        )

    # -------- Locking --------
    def check_editable(self, *, employee_id: str, target: date) -> policy.LockDecision:
        submissions = self._submissions.list_for_employee(mentee_id=str(employee_id))
        return policy.check_editable(target, str(employee_id), self._locking_mode, submissions, now=self._clock.now())

    def ensure_editable(self, *, employee_id: str, target: date) -> None:
        decision = self.check_editable(employee_id=employee_id, target=target)
        if not decision.editable:
            raise LockedError(_LOCK_MESSAGES.get(decision.reason or "", "Tanggal terkunci"))

    def is_month_frozen(self, *, employee_id: str, month_key: str) -> bool:
        submissions = self._submissions.list_for_employee(mentee_id=str(employee_id))
        return policy.is_month_frozen(str(employee_id), month_key, submissions)

    # -------- Reads --------
    def read_ledger(self, *, current_role: Role, actor_id: str, employee_id: str) -> Ledger:
        self._ensure_can_view(current_role=current_role, actor_id=actor_id, employee_id=employee_id)
        return {mk: m.days for mk, m in self._store.get_months(str(employee_id)).items()}

    def read_month(
        self,
        *,
        current_role: Role,
        actor_id: str,
        employee_id: str,
        month_key: str,
        known_merged_at: Optional[datetime] = None,
    ) -> LedgerMonthView:
        """Month matrix plus cache metadata.

        `changed` is True when the stored month was merged after
        `known_merged_at` (or when the caller has no timestamp yet).
        """

        parse_month_key(month_key)
        self._ensure_can_view(current_role=current_role, actor_id=actor_id, employee_id=employee_id)
        return self.month_view(employee_id=employee_id, month_key=month_key, known_merged_at=known_merged_at)

    def month_view(self, *, employee_id: str, month_key: str, known_merged_at: Optional[datetime] = None) -> LedgerMonthView:
        month = self._store.get_months(str(employee_id), [month_key]).get(month_key)
        days = month.days if month else {}
        last = month.last_merged_at if month else None
        if known_merged_at is None:
            changed = True
        else:
            changed = last is not None and last > known_merged_at
        return LedgerMonthView(
            month_key=month_key,
            days=days,
            last_merged_at=last,
            changed=changed,
            totals=aggregator.month_totals(days),
        )

    def _ensure_can_view(self, *, current_role: Role, actor_id: str, employee_id: str) -> None:
        if current_role == Role.ADMIN or str(actor_id) == str(employee_id):
            return
        employee = self._employees.get_by_id(str(employee_id))
        if not employee:
            raise NotFoundError("Karyawan tidak ditemukan")
        reviewers = {employee.mentor_id, employee.supervisor_id, employee.ka_unit_id, employee.manager_id}
        if str(actor_id) not in reviewers:
            raise AuthorizationError("Anda tidak memiliki akses ke data ini")

    @staticmethod
    def _month_of(ev: Evidence) -> Optional[str]:
        try:
            d = coerce_date(ev.date)
        except ValidationError:
            return None
        return month_key_of(d)
