from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from src.mutabaah.mutabaah.common.clock import FixedClock
from src.mutabaah.mutabaah.container import wire
from src.mutabaah.mutabaah.core.enums import LockingMode, RequestStatus, Role, SubmissionStatus
from src.mutabaah.mutabaah.core.exceptions import ConflictError
from src.mutabaah.mutabaah.employees.model import Employee
from src.mutabaah.mutabaah.ledger import aggregator
from src.mutabaah.mutabaah.ledger.model import LedgerMonth, StoreMergeResult
from src.mutabaah.mutabaah.requests.model import MissedPrayerRequest, TadarusRequest
from src.mutabaah.mutabaah.submissions.model import MonthlySubmission

NOW = datetime(2024, 3, 20, 9, 0, 0)


class FakeEmployeesRepo:
    def __init__(self, employees):
        self._by_id = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id):
        return self._by_id.get(str(employee_id))

    def list_mentees(self, *, reviewer_id):
        rid = str(reviewer_id)
        return [
            e
            for e in self._by_id.values()
            if rid in {e.mentor_id, e.supervisor_id, e.ka_unit_id, e.manager_id}
        ]

    def add_activated_month(self, *, employee_id, month_key):
        emp = self._by_id[str(employee_id)]
        if month_key in emp.activated_months:
            return False
        self._by_id[emp.employee_id] = replace(emp, activated_months=emp.activated_months | {month_key})
        return True


class InMemoryLedgerStore:
    def __init__(self):
        self.ledgers = {}
        self.merged_at = {}
        self.fail_with = None
        self._tick = 0

    def get_months(self, employee_id, month_keys=None):
        ledger = self.ledgers.get(str(employee_id), {})
        return {
            mk: LedgerMonth(
                employee_id=str(employee_id),
                month_key=mk,
                days=aggregator.sanitize_month(days),
                last_merged_at=self.merged_at.get((str(employee_id), mk)),
            )
            for mk, days in sorted(ledger.items())
            if not month_keys or mk in month_keys
        }

    def merge(self, employee_id, evidence):
        if self.fail_with is not None:
            raise self.fail_with
        employee_id = str(employee_id)
        merged, outcome = aggregator.merge_employee(employee_id, self.ledgers.get(employee_id, {}), evidence)
        self.ledgers[employee_id] = merged

        months = {}
        for _, mk in outcome.touched:
            self._tick += 1
            self.merged_at[(employee_id, mk)] = NOW + timedelta(microseconds=self._tick)
            months[mk] = LedgerMonth(employee_id, mk, merged[mk], self.merged_at[(employee_id, mk)])
        return StoreMergeResult(employee_id=employee_id, months=months, applied=outcome.applied, dropped=outcome.dropped)


class FakeSubmissionsRepo:
    def __init__(self):
        self._next_id = 1
        self.items = {}
        self.names = {}

    def create(self, *, mentee_id, month_key, stages, report):
        for s in self.items.values():
            if s.mentee_id == mentee_id and s.month_key == month_key and not s.status.is_rejected:
                raise ConflictError("duplicate")
        sid = self._next_id
        self._next_id += 1
        self.items[sid] = MonthlySubmission(
            submission_id=sid,
            mentee_id=str(mentee_id),
            month_key=month_key,
            status=SubmissionStatus.PENDING_MENTOR,
            stages=tuple(stages),
            mentee_name=self.names.get(str(mentee_id), ""),
            submitted_at=NOW,
            report=dict(report),
        )
        return sid

    def add(self, submission):
        self.items[submission.submission_id] = submission
        self._next_id = max(self._next_id, submission.submission_id + 1)

    def get(self, submission_id):
        return self.items.get(int(submission_id))

    def list_for_employee(self, *, mentee_id):
        return [s for s in self.items.values() if s.mentee_id == str(mentee_id)]

    def list_for_reviewer(self, *, reviewer_id, role=None, pending_only=False, limit=200):
        out = []
        for s in self.items.values():
            for stage in s.stages:
                if role is not None and stage.role != role:
                    continue
                if stage.resolver_id != str(reviewer_id):
                    continue
                if pending_only and s.status != SubmissionStatus.pending_for(stage.role):
                    continue
                out.append(s)
                break
        return out[:limit]

    def save_transition(self, submission, *, expected_status, report=None):
        current = self.items.get(submission.submission_id)
        if not current or current.status != expected_status:
            return False
        updated = replace(current, status=submission.status, stages=submission.stages)
        if report is not None:
            updated = replace(updated, report=dict(report))
        self.items[submission.submission_id] = updated
        return True


class FakeRequestsRepo:
    def __init__(self):
        self._next_id = 1
        self.items = {}

    def create(self, *, kind, mentee_id, mentor_id, request_date, activity_ref, notes):
        rid = self._next_id
        self._next_id += 1
        common = dict(
            request_id=rid,
            mentee_id=str(mentee_id),
            mentor_id=mentor_id,
            date=request_date,
            status=RequestStatus.PENDING,
            requested_at=NOW,
            notes=notes,
        )
        if kind.value == "tadarus":
            req = TadarusRequest(category=activity_ref, **common)
        else:
            req = MissedPrayerRequest(prayer_id=activity_ref, **common)
        self.items[(kind, rid)] = req
        return rid

    def get(self, *, kind, request_id):
        return self.items.get((kind, int(request_id)))

    def list(self, *, kind, mentee_id=None, mentor_id=None, status=None, limit=200):
        out = [
            r
            for (k, _), r in self.items.items()
            if k == kind
            and (mentee_id is None or r.mentee_id == mentee_id)
            and (mentor_id is None or r.mentor_id == mentor_id)
            and (status is None or r.status == status)
        ]
        return out[:limit]

    def decide(self, *, kind, request_id, status, reviewed_by, reviewed_at, reviewer_notes=None):
        req = self.items.get((kind, int(request_id)))
        if not req or req.status != RequestStatus.PENDING:
            return False
        self.items[(kind, int(request_id))] = replace(
            req, status=status, reviewed_by=reviewed_by, reviewed_at=reviewed_at, reviewer_notes=reviewer_notes
        )
        return True

    def mark_synced(self, *, kind, request_id, synced_at):
        req = self.items.get((kind, int(request_id)))
        if not req or req.status != RequestStatus.APPROVED:
            return False
        self.items[(kind, int(request_id))] = replace(req, ledger_synced_at=synced_at)
        return True


class FakeNotificationsRepo:
    def __init__(self):
        self.items = []
        self.fail = False

    def create(self, notification):
        if self.fail:
            raise RuntimeError("notification store unavailable")
        nid = len(self.items) + 1
        self.items.append(replace(notification, notification_id=nid, created_at=NOW))
        return nid

    def list_for_user(self, *, user_id, unread_only=False, limit=200):
        out = [n for n in self.items if n.user_id == str(user_id) and not (unread_only and n.is_read)]
        return list(reversed(out))[:limit]

    def mark_read(self, *, user_id, notification_id):
        for i, n in enumerate(self.items):
            if n.notification_id == int(notification_id) and n.user_id == str(user_id):
                self.items[i] = replace(n, is_read=True)
                return True
        return False

    def for_user(self, user_id):
        return [n for n in self.items if n.user_id == user_id]


def org():
    chain = dict(mentor_id="MTR001", supervisor_id="SPV001", ka_unit_id="KAU001", manager_id="MGR001")
    return [
        Employee("ADM001", "Admin Mutabaah", role=Role.ADMIN),
        Employee("MGR001", "Hj. Siti Aminah"),
        Employee("KAU001", "Ahmad Fauzi", manager_id="MGR001"),
        Employee("SPV001", "Dewi Lestari", ka_unit_id="KAU001", manager_id="MGR001"),
        Employee("MTR001", "Ustadz Hanif", supervisor_id="SPV001", ka_unit_id="KAU001", manager_id="MGR001"),
        Employee("EMP001", "Rina Marlina", activated_months=frozenset({"2024-02", "2024-03"}), **chain),
        Employee("EMP002", "Budi Santoso", activated_months=frozenset({"2024-03"})),
    ]


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def employees_repo():
    return FakeEmployeesRepo(org())


@pytest.fixture
def ledger_store():
    return InMemoryLedgerStore()


@pytest.fixture
def submissions_repo():
    repo = FakeSubmissionsRepo()
    repo.names = {"EMP001": "Rina Marlina", "EMP002": "Budi Santoso"}
    return repo


@pytest.fixture
def requests_repo():
    return FakeRequestsRepo()


@pytest.fixture
def notifications_repo():
    return FakeNotificationsRepo()


@pytest.fixture
def world(clock, employees_repo, ledger_store, submissions_repo, requests_repo, notifications_repo):
    return wire(
        clock=clock,
        employees_repo=employees_repo,
        ledger_store=ledger_store,
        submissions_repo=submissions_repo,
        requests_repo=requests_repo,
        notifications_repo=notifications_repo,
        locking_mode=LockingMode.WEEKLY,
    )
