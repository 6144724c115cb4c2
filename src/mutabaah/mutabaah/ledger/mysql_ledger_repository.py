from __future__ import annotations

from collections import OrderedDict
from typing import Dict, List, Mapping, Optional, Sequence

from ..common.datetime_utils import coerce_date, month_key_of
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_datetime, db_cursor, dump_json, fetchall, fetchone, load_json
from . import aggregator
from .model import Evidence, LedgerMonth, StoreMergeResult
from .repository import LedgerStore


class MySQLLedgerStore(LedgerStore):
    """One JSON day-matrix row per (employee, month).

    A merge runs in a single transaction: the month rows are created if
    missing, locked with SELECT ... FOR UPDATE, OR-merged, then written back.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_months(self, employee_id: str, month_keys: Optional[Sequence[str]] = None) -> Mapping[str, LedgerMonth]:
        clauses = ["employee_id=%s"]
        params: list[object] = [str(employee_id)]
        if month_keys:
            clauses.append("month_key IN (" + ",".join(["%s"] * len(month_keys)) + ")")
            params.extend(month_keys)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT employee_id, month_key, activities, last_merged_at
                FROM employee_monthly_activities
                WHERE {' AND '.join(clauses)}
                ORDER BY month_key
                """,
                tuple(params),
            )
            out: Dict[str, LedgerMonth] = OrderedDict()
            for r in fetchall(cur):
                out[r["month_key"]] = LedgerMonth(
                    employee_id=str(r["employee_id"]),
                    month_key=r["month_key"],
                    days=aggregator.sanitize_month(load_json(r["activities"], {})),
                    last_merged_at=as_datetime(r.get("last_merged_at")),
                )
            return out

    def merge(self, employee_id: str, evidence: Sequence[Evidence]) -> StoreMergeResult:
        employee_id = str(employee_id)
        items = [e for e in evidence if str(e.employee_id) == employee_id]
        month_keys = self._month_keys(items)

        with db_cursor(self._conn_factory) as (_, cur):
            current: Dict[str, dict] = {}
            for mk in month_keys:
                cur.execute(
                    """
                    INSERT IGNORE INTO employee_monthly_activities(employee_id, month_key, activities)
                    VALUES(%s,%s,%s)
                    """,
                    (employee_id, mk, "{}"),
                )
                cur.execute(
                    """
                    SELECT activities FROM employee_monthly_activities
                    WHERE employee_id=%s AND month_key=%s
                    FOR UPDATE
                    """,
                    (employee_id, mk),
                )
                row = fetchone(cur)
                current[mk] = load_json(row["activities"] if row else None, {})

            merged, outcome = aggregator.merge_employee(employee_id, current, items)

            months: Dict[str, LedgerMonth] = OrderedDict()
            for _, mk in outcome.touched:
                cur.execute(
                    """
                    UPDATE employee_monthly_activities
                    SET activities=%s, last_merged_at=CURRENT_TIMESTAMP(6)
                    WHERE employee_id=%s AND month_key=%s
                    """,
                    (dump_json(merged[mk]), employee_id, mk),
                )
                cur.execute(
                    "SELECT last_merged_at FROM employee_monthly_activities WHERE employee_id=%s AND month_key=%s",
                    (employee_id, mk),
                )
                row = fetchone(cur)
                months[mk] = LedgerMonth(
                    employee_id=employee_id,
                    month_key=mk,
                    days=merged[mk],
                    last_merged_at=as_datetime(row["last_merged_at"]) if row else None,
                )

        return StoreMergeResult(employee_id=employee_id, months=months, applied=outcome.applied, dropped=outcome.dropped)

    @staticmethod
    def _month_keys(items: Sequence[Evidence]) -> List[str]:
        # Month rows are always locked in sorted order.
        keys = set()
        for e in items:
            try:
                d = coerce_date(e.date)
            except ValidationError:
                continue
            keys.add(month_key_of(d))
        return sorted(keys)
