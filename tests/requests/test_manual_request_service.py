from __future__ import annotations

from datetime import date

import pytest

from src.mutabaah.mutabaah.core.enums import Decision, NotificationType, RequestKind, RequestStatus, Role, SubmissionStatus
from src.mutabaah.mutabaah.core.exceptions import (
    AuthorizationError,
    ConflictError,
    LockedError,
    PartialFailure,
    ValidationError,
)
from src.mutabaah.mutabaah.submissions.model import MonthlySubmission, initial_stages


def _review(world, req, decision, actor="MTR001", role=Role.EMPLOYEE, notes=None):
    return world.manual_request_service.review(
        kind=req.kind,
        actor_id=actor,
        actor_role=role,
        request_id=req.request_id,
        decision=decision,
        reviewer_notes=notes,
    )


def test_create_tadarus_notifies_mentor(world, notifications_repo):
    req = world.manual_request_service.create_tadarus(
        actor_id="EMP001", employee_id="EMP001", date_value="2024-03-12", category="BBQ", notes=" lupa scan "
    )

    assert req.kind == RequestKind.TADARUS
    assert req.status == RequestStatus.PENDING
    assert req.mentor_id == "MTR001"
    assert req.notes == "lupa scan"
    assert [n.type for n in notifications_repo.for_user("MTR001")] == [NotificationType.TADARUS_REQUEST]


def test_approval_writes_the_ledger_once(world, ledger_store, notifications_repo):
    req = world.manual_request_service.create_missed_prayer(
        actor_id="EMP001", employee_id="EMP001", date_value="2024-03-12", prayer_id="subuh"
    )

    approved = _review(world, req, Decision.APPROVED)

    assert approved.status == RequestStatus.APPROVED
    assert approved.reviewed_by == "MTR001"
    assert approved.ledger_synced_at is not None
    assert ledger_store.ledgers["EMP001"]["2024-03"]["12"] == {"subuh-default": True}
    assert [n.type for n in notifications_repo.for_user("EMP001")] == [NotificationType.MISSED_PRAYER_APPROVED]


@pytest.mark.parametrize("second", [Decision.APPROVED, Decision.REJECTED])
def test_second_review_conflicts_regardless_of_decision(world, ledger_store, second):
    req = world.manual_request_service.create_tadarus(actor_id="EMP001", employee_id="EMP001", date_value="2024-03-12")
    _review(world, req, Decision.APPROVED)
    merged_at = dict(ledger_store.merged_at)

    with pytest.raises(ConflictError):
        _review(world, req, second)
    assert ledger_store.merged_at == merged_at


def test_rejection_has_no_ledger_effect(world, ledger_store, notifications_repo):
    req = world.manual_request_service.create_tadarus(actor_id="EMP001", employee_id="EMP001", date_value="2024-03-12")

    rejected = _review(world, req, Decision.REJECTED, notes="tidak ada di daftar hadir")

    assert rejected.status == RequestStatus.REJECTED
    assert rejected.reviewer_notes == "tidak ada di daftar hadir"
    assert "EMP001" not in ledger_store.ledgers
    assert [n.type for n in notifications_repo.for_user("EMP001")] == [NotificationType.TADARUS_REJECTED]


def test_failed_merge_is_partial_failure_and_retry_completes(world, ledger_store, requests_repo):
    req = world.manual_request_service.create_tadarus(actor_id="EMP001", employee_id="EMP001", date_value="2024-03-12")
    ledger_store.fail_with = RuntimeError("deadlock")

    with pytest.raises(PartialFailure) as exc:
        _review(world, req, Decision.APPROVED)

    assert exc.value.entity.status == RequestStatus.APPROVED
    assert isinstance(exc.value.cause, RuntimeError)
    stored = requests_repo.get(kind=RequestKind.TADARUS, request_id=req.request_id)
    assert stored.status == RequestStatus.APPROVED
    assert stored.ledger_synced_at is None

    with pytest.raises(ConflictError):
        _review(world, req, Decision.APPROVED)

    ledger_store.fail_with = None
    synced = world.manual_request_service.retry_ledger_merge(
        kind=RequestKind.TADARUS, actor_id="MTR001", actor_role=Role.EMPLOYEE, request_id=req.request_id
    )
    assert synced.ledger_synced_at is not None
    assert ledger_store.ledgers["EMP001"]["2024-03"]["12"] == {"tadarus": True}

    again = world.manual_request_service.retry_ledger_merge(
        kind=RequestKind.TADARUS, actor_id="ADM001", actor_role=Role.ADMIN, request_id=req.request_id
    )
    assert again.status == RequestStatus.APPROVED
    assert ledger_store.ledgers["EMP001"]["2024-03"]["12"] == {"tadarus": True}


def test_retry_requires_approved_request(world):
    req = world.manual_request_service.create_tadarus(actor_id="EMP001", employee_id="EMP001", date_value="2024-03-12")
    with pytest.raises(ValidationError):
        world.manual_request_service.retry_ledger_merge(
            kind=RequestKind.TADARUS, actor_id="MTR001", actor_role=Role.EMPLOYEE, request_id=req.request_id
        )


def test_only_the_mentor_or_admin_reviews(world):
    req = world.manual_request_service.create_tadarus(actor_id="EMP001", employee_id="EMP001", date_value="2024-03-12")

    with pytest.raises(AuthorizationError):
        _review(world, req, Decision.APPROVED, actor="SPV001")

    approved = _review(world, req, Decision.APPROVED, actor="ADM001", role=Role.ADMIN)
    assert approved.status == RequestStatus.APPROVED


@pytest.mark.parametrize(
    "kwargs, error",
    [
        (dict(actor_id="EMP002", employee_id="EMP001", date_value="2024-03-12", prayer_id="subuh"), AuthorizationError),
        (dict(actor_id="EMP001", employee_id="EMP001", date_value="2024-03-21", prayer_id="subuh"), ValidationError),
        (dict(actor_id="EMP001", employee_id="EMP001", date_value="12-03-2024", prayer_id="subuh"), ValidationError),
        (dict(actor_id="EMP001", employee_id="EMP001", date_value="2024-03-12", prayer_id="dhuha"), ValidationError),
        (dict(actor_id="EMP002", employee_id="EMP002", date_value="2024-03-12", prayer_id="isya"), ValidationError),
    ],
)
def test_missed_prayer_create_guards(world, kwargs, error):
    with pytest.raises(error):
        world.manual_request_service.create_missed_prayer(**kwargs)


def test_unknown_tadarus_category_is_rejected(world):
    with pytest.raises(ValidationError):
        world.manual_request_service.create_tadarus(
            actor_id="EMP001", employee_id="EMP001", date_value="2024-03-12", category="Senam Pagi"
        )


def test_request_for_approved_month_is_locked(world, submissions_repo):
    submissions_repo.add(
        MonthlySubmission(
            submission_id=5,
            mentee_id="EMP001",
            month_key="2024-02",
            status=SubmissionStatus.APPROVED,
            stages=initial_stages({}),
        )
    )
    with pytest.raises(LockedError):
        world.manual_request_service.create_tadarus(actor_id="EMP001", employee_id="EMP001", date_value="2024-02-12")


def test_approval_after_month_was_approved_is_locked(world, ledger_store, submissions_repo, requests_repo):
    req = world.manual_request_service.create_tadarus(actor_id="EMP001", employee_id="EMP001", date_value="2024-02-12")
    submissions_repo.add(
        MonthlySubmission(
            submission_id=5,
            mentee_id="EMP001",
            month_key="2024-02",
            status=SubmissionStatus.APPROVED,
            stages=initial_stages({}),
        )
    )

    with pytest.raises(LockedError):
        _review(world, req, Decision.APPROVED)

    stored = requests_repo.get(kind=RequestKind.TADARUS, request_id=req.request_id)
    assert stored.status == RequestStatus.PENDING
    assert stored.ledger_synced_at is None
    assert "EMP001" not in ledger_store.ledgers

    rejected = _review(world, req, Decision.REJECTED)
    assert rejected.status == RequestStatus.REJECTED



def test_lists(world):
    world.manual_request_service.create_tadarus(actor_id="EMP001", employee_id="EMP001", date_value="2024-03-12")
    world.manual_request_service.create_missed_prayer(
        actor_id="EMP001", employee_id="EMP001", date_value="2024-03-13", prayer_id="ashar"
    )

    mine = world.manual_request_service.list_for_employee(
        kind=RequestKind.MISSED_PRAYER, actor_id="EMP001", current_role=Role.EMPLOYEE, employee_id="EMP001"
    )
    assert [r.date for r in mine] == [date(2024, 3, 13)]

    pending = world.manual_request_service.list_for_reviewer(
        kind=RequestKind.TADARUS, reviewer_id="MTR001", status=RequestStatus.PENDING
    )
    assert len(pending) == 1
    assert pending[0].to_dict()["category"] == "tadarus"


def test_evidence_dropped_by_the_ledger_is_not_marked_synced(world, ledger_store, submissions_repo, requests_repo, monkeypatch):
    req = world.manual_request_service.create_tadarus(actor_id="EMP001", employee_id="EMP001", date_value="2024-02-12")
    submissions_repo.add(
        MonthlySubmission(
            submission_id=5,
            mentee_id="EMP001",
            month_key="2024-02",
            status=SubmissionStatus.APPROVED,
            stages=initial_stages({}),
        )
    )
    # the month gets approved between the review check and the merge
    monkeypatch.setattr(world.ledger_service, "is_month_frozen", lambda **kw: False)

    with pytest.raises(LockedError):
        _review(world, req, Decision.APPROVED)

    stored = requests_repo.get(kind=RequestKind.TADARUS, request_id=req.request_id)
    assert stored.status == RequestStatus.APPROVED
    assert stored.ledger_synced_at is None
    assert "EMP001" not in ledger_store.ledgers
