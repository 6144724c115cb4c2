from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .common.clock import TrustedClock
from .core.constants import DEFAULT_TIME_DRIFT_THRESHOLD_SECONDS
from .core.enums import LockingMode
from .database.connection import DBConfig, DatabaseConnection
from .database.mysql_base import server_now
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .ledger.factory import EvidenceTranslatorFactory
from .ledger.mysql_ledger_repository import MySQLLedgerStore
from .ledger.repository import LedgerStore
from .ledger.service import LedgerService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .requests.mysql_request_repository import MySQLRequestRepository
from .requests.repository import RequestRepository
from .requests.service import ManualRequestService
from .submissions.mysql_submission_repository import MySQLSubmissionRepository
from .submissions.repository import SubmissionRepository
from .submissions.service import SubmissionService


@dataclass(frozen=True)
class Container:
    clock: TrustedClock

    employees_repo: EmployeeRepository
    ledger_store: LedgerStore
    submissions_repo: SubmissionRepository
    requests_repo: RequestRepository
    notifications_repo: NotificationRepository

    employee_service: EmployeeService
    ledger_service: LedgerService
    submission_service: SubmissionService
    manual_request_service: ManualRequestService
    notification_service: NotificationService

    conn: Optional[DatabaseConnection] = None


def wire(
    *,
    clock: TrustedClock,
    employees_repo: EmployeeRepository,
    ledger_store: LedgerStore,
    submissions_repo: SubmissionRepository,
    requests_repo: RequestRepository,
    notifications_repo: NotificationRepository,
    locking_mode: LockingMode = LockingMode.WEEKLY,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build the services on top of any set of repositories."""

    translators = EvidenceTranslatorFactory()
    notification_service = NotificationService(notifications_repo)
    employee_service = EmployeeService(employees_repo, clock=clock)
    ledger_service = LedgerService(
        ledger_store,
        submissions_repo,
        employees_repo,
        clock=clock,
        locking_mode=locking_mode,
        translator_factory=translators,
    )
    submission_service = SubmissionService(
        submissions_repo,
        employees_repo,
        ledger_service,
        notification_service,
        clock=clock,
    )
    manual_request_service = ManualRequestService(
        requests_repo,
        employees_repo,
        ledger_service,
        notification_service,
        clock=clock,
        translator_factory=translators,
    )

    return Container(
        clock=clock,
        employees_repo=employees_repo,
        ledger_store=ledger_store,
        submissions_repo=submissions_repo,
        requests_repo=requests_repo,
        notifications_repo=notifications_repo,
        employee_service=employee_service,
        ledger_service=ledger_service,
        submission_service=submission_service,
        manual_request_service=manual_request_service,
        notification_service=notification_service,
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    locking_mode: LockingMode = LockingMode.WEEKLY,
    time_offset_seconds: float = 0.0,
    drift_threshold_seconds: float = DEFAULT_TIME_DRIFT_THRESHOLD_SECONDS,
    sync_time_with_db: bool = False,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    clock = TrustedClock(
        offset_seconds=time_offset_seconds,
        drift_threshold_seconds=drift_threshold_seconds,
        reference=(lambda: server_now(conn)) if sync_time_with_db else None,
    )

    return wire(
        clock=clock,
        employees_repo=MySQLEmployeeRepository(conn),
        ledger_store=MySQLLedgerStore(conn),
        submissions_repo=MySQLSubmissionRepository(conn),
        requests_repo=MySQLRequestRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        locking_mode=locking_mode,
        conn=conn,
    )
