from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_SELECT = """
    SELECT e.employee_id, e.full_name, e.role, e.mentor_id, e.supervisor_id,
           e.ka_unit_id, e.manager_id, e.is_active,
           GROUP_CONCAT(a.month_key ORDER BY a.month_key) AS activated_months
    FROM employees e
    LEFT JOIN mutabaah_activations a ON a.employee_id = e.employee_id
"""


def _to_employee(r: dict) -> Employee:
    months = r.get("activated_months") or ""
    return Employee(
        employee_id=str(r["employee_id"]),
        full_name=r["full_name"],
        role=Role(r["role"]),
        mentor_id=r.get("mentor_id"),
        supervisor_id=r.get("supervisor_id"),
        ka_unit_id=r.get("ka_unit_id"),
        manager_id=r.get("manager_id"),
        activated_months=frozenset(m for m in months.split(",") if m),
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE e.employee_id=%s GROUP BY e.employee_id",
                (str(employee_id),),
            )
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_mentees(self, *, reviewer_id: str) -> Sequence[Employee]:
        rid = str(reviewer_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + """
                WHERE e.mentor_id=%s OR e.supervisor_id=%s OR e.ka_unit_id=%s OR e.manager_id=%s
                GROUP BY e.employee_id
                ORDER BY e.full_name
                """,
                (rid, rid, rid, rid),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def add_activated_month(self, *, employee_id: str, month_key: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO mutabaah_activations(employee_id, month_key) VALUES(%s,%s)",
                (str(employee_id), month_key),
            )
            return cur.rowcount > 0
