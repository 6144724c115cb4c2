from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional, Sequence

from ..core.enums import RequestKind, RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_datetime, db_cursor, fetchall, fetchone
from .model import ManualRequest, MissedPrayerRequest, TadarusRequest
from .repository import RequestRepository

# kind -> (table, activity column)
_TABLES = {
    RequestKind.TADARUS: ("tadarus_requests", "category"),
    RequestKind.MISSED_PRAYER: ("missed_prayer_requests", "prayer_id"),
}


def _select(kind: RequestKind) -> str:
    table, ref_col = _TABLES[kind]
    return f"""
        SELECT r.request_id, r.mentee_id, e.full_name AS mentee_name, r.mentor_id,
               r.request_date, r.{ref_col} AS activity_ref, r.notes, r.status,
               r.requested_at, r.reviewed_by, r.reviewed_at, r.reviewer_notes,
               r.ledger_synced_at
        FROM {table} r
        LEFT JOIN employees e ON e.employee_id = r.mentee_id
    """


def _to_request(kind: RequestKind, r: dict) -> ManualRequest:
    common = dict(
        request_id=int(r["request_id"]),
        mentee_id=str(r["mentee_id"]),
        date=r["request_date"],
        status=RequestStatus(r["status"]),
        requested_at=as_datetime(r["requested_at"]),
        mentee_name=r.get("mentee_name") or "",
        mentor_id=r.get("mentor_id"),
        notes=r.get("notes"),
        reviewed_by=r.get("reviewed_by"),
        reviewed_at=as_datetime(r.get("reviewed_at")),
        reviewer_notes=r.get("reviewer_notes"),
        ledger_synced_at=as_datetime(r.get("ledger_synced_at")),
    )
    if kind == RequestKind.TADARUS:
        return TadarusRequest(category=r["activity_ref"], **common)
    return MissedPrayerRequest(prayer_id=r["activity_ref"], **common)


class MySQLRequestRepository(RequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        kind: RequestKind,
        mentee_id: str,
        mentor_id: Optional[str],
        request_date: date,
        activity_ref: str,
        notes: Optional[str],
    ) -> int:
        table, ref_col = _TABLES[kind]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO {table}(mentee_id, mentor_id, request_date, {ref_col}, notes, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (str(mentee_id), mentor_id, request_date, activity_ref, notes, RequestStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get(self, *, kind: RequestKind, request_id: int) -> Optional[ManualRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_select(kind) + " WHERE r.request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(kind, r) if r else None

    def list(
        self,
        *,
        kind: RequestKind,
        mentee_id: Optional[str] = None,
        mentor_id: Optional[str] = None,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[ManualRequest]:
        clauses = ["1=1"]
        params: List[object] = []

        if mentee_id is not None:
            clauses.append("r.mentee_id=%s")
            params.append(str(mentee_id))
        if mentor_id is not None:
            clauses.append("r.mentor_id=%s")
            params.append(str(mentor_id))
        if status is not None:
            clauses.append("r.status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _select(kind)
                + f"""
                WHERE {where}
                ORDER BY r.requested_at DESC, r.request_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_request(kind, r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        kind: RequestKind,
        request_id: int,
        status: RequestStatus,
        reviewed_by: str,
        reviewed_at: datetime,
        reviewer_notes: Optional[str] = None,
    ) -> bool:
        table, _ = _TABLES[kind]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE {table}
                SET status=%s, reviewed_by=%s, reviewed_at=%s, reviewer_notes=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    status.value,
                    str(reviewed_by),
                    reviewed_at,
                    reviewer_notes,
                    int(request_id),
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def mark_synced(self, *, kind: RequestKind, request_id: int, synced_at: datetime) -> bool:
        table, _ = _TABLES[kind]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE {table} SET ledger_synced_at=%s WHERE request_id=%s AND status=%s",
                (synced_at, int(request_id), RequestStatus.APPROVED.value),
            )
            return cur.rowcount > 0
