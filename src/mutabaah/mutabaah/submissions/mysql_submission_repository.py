from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence, Tuple

from mysql.connector import errorcode
from mysql.connector import errors as mysql_errors

from ..core.enums import ReviewerRole, SubmissionStatus
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_datetime, db_cursor, dump_json, fetchall, fetchone, load_json
from .model import MonthlySubmission, ReviewStage
from .repository import SubmissionRepository

# Column prefix of each stage in monthly_submissions.
_PREFIX = {
    ReviewerRole.MENTOR: "mentor",
    ReviewerRole.SUPERVISOR: "supervisor",
    ReviewerRole.KAUNIT: "ka_unit",
    ReviewerRole.MANAGER: "manager",
}

_STAGE_COLUMNS = ", ".join(
    f"s.{p}_id, s.{p}_notes, s.{p}_reviewed_at" for p in _PREFIX.values()
)

_SELECT = f"""
    SELECT s.submission_id, s.mentee_id, e.full_name AS mentee_name, s.month_key,
           s.status, s.submitted_at, s.report, {_STAGE_COLUMNS}
    FROM monthly_submissions s
    LEFT JOIN employees e ON e.employee_id = s.mentee_id
"""


def _to_submission(r: dict) -> MonthlySubmission:
    stages = tuple(
        ReviewStage(
            role=role,
            resolver_id=r.get(f"{p}_id"),
            notes=r.get(f"{p}_notes"),
            reviewed_at=as_datetime(r.get(f"{p}_reviewed_at")),
        )
        for role, p in _PREFIX.items()
    )
    return MonthlySubmission(
        submission_id=int(r["submission_id"]),
        mentee_id=str(r["mentee_id"]),
        month_key=r["month_key"],
        status=SubmissionStatus(r["status"]),
        stages=stages,
        mentee_name=r.get("mentee_name") or "",
        submitted_at=as_datetime(r.get("submitted_at")),
        report=load_json(r.get("report"), {}),
    )


class MySQLSubmissionRepository(SubmissionRepository):
    """monthly_submissions has a generated `open_key` column (NULL once
    rejected) under a unique index, so at most one open submission exists
    per (mentee, month) even under concurrent creates."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        mentee_id: str,
        month_key: str,
        stages: Tuple[ReviewStage, ...],
        report: Mapping[str, Any],
    ) -> int:
        resolvers = {s.role: s.resolver_id for s in stages}
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO monthly_submissions(
                        mentee_id, month_key, status, report,
                        mentor_id, supervisor_id, ka_unit_id, manager_id
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        str(mentee_id),
                        month_key,
                        SubmissionStatus.PENDING_MENTOR.value,
                        dump_json(dict(report)),
                        resolvers.get(ReviewerRole.MENTOR),
                        resolvers.get(ReviewerRole.SUPERVISOR),
                        resolvers.get(ReviewerRole.KAUNIT),
                        resolvers.get(ReviewerRole.MANAGER),
                    ),
                )
                return int(cur.lastrowid)
        except mysql_errors.IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise ConflictError(f"Laporan bulan {month_key} sudah dikirim") from e
            raise

    def get(self, submission_id: int) -> Optional[MonthlySubmission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE s.submission_id=%s", (int(submission_id),))
            r = fetchone(cur)
            return _to_submission(r) if r else None

    def list_for_employee(self, *, mentee_id: str) -> Sequence[MonthlySubmission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE s.mentee_id=%s ORDER BY s.month_key DESC, s.submission_id DESC",
                (str(mentee_id),),
            )
            return [_to_submission(r) for r in fetchall(cur)]

    def list_for_reviewer(
        self,
        *,
        reviewer_id: str,
        role: Optional[ReviewerRole] = None,
        pending_only: bool = False,
        limit: int = 200,
    ) -> Sequence[MonthlySubmission]:
        roles = [role] if role is not None else list(_PREFIX)
        clauses: List[str] = []
        params: List[object] = []
        for r in roles:
            if pending_only:
                clauses.append(f"(s.{_PREFIX[r]}_id=%s AND s.status=%s)")
                params.extend([str(reviewer_id), SubmissionStatus.pending_for(r).value])
            else:
                clauses.append(f"s.{_PREFIX[r]}_id=%s")
                params.append(str(reviewer_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + f"""
                WHERE {" OR ".join(clauses)}
                ORDER BY s.submitted_at DESC, s.submission_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_submission(r) for r in fetchall(cur)]

    def save_transition(
        self,
        submission: MonthlySubmission,
        *,
        expected_status: SubmissionStatus,
        report: Optional[Mapping[str, Any]] = None,
    ) -> bool:
        sets = ["status=%s"]
        params: List[object] = [submission.status.value]
        if report is not None:
            sets.append("report=%s")
            params.append(dump_json(dict(report)))
        for stage in submission.stages:
            p = _PREFIX[stage.role]
            sets.append(f"{p}_notes=%s")
            sets.append(f"{p}_reviewed_at=%s")
            params.extend([stage.notes, stage.reviewed_at])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE monthly_submissions
                SET {", ".join(sets)}
                WHERE submission_id=%s AND status=%s
                """,
                tuple(params + [int(submission.submission_id), expected_status.value]),
            )
            return cur.rowcount > 0
