from __future__ import annotations

import logging
from typing import Sequence

from ..common.clock import TrustedClock
from ..common.datetime_utils import month_key_of, parse_month_key
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    """Use case: month activation and reviewer lookups."""

    def __init__(self, employees: EmployeeRepository, *, clock: TrustedClock):
        self._employees = employees
        self._clock = clock

    def get(self, employee_id: str) -> Employee:
        emp = self._employees.get_by_id(str(employee_id))
        if not emp or not emp.is_active:
            raise NotFoundError("Karyawan tidak ditemukan")
        return emp

    def activate_month(self, *, actor_id: str, employee_id: str, month_key: str) -> Sequence[str]:
        """Activate `month_key` for the employee; returns all activated months.

        Past months cannot be activated. Re-activating is a no-op.
        """

        if str(actor_id) != str(employee_id):
            raise AuthorizationError("Hanya karyawan bersangkutan yang dapat mengaktifkan bulan")

        emp = self.get(employee_id)
        first_day = parse_month_key(month_key)
        current = month_key_of(self._clock.now().date())
        if month_key in emp.activated_months:
            return sorted(emp.activated_months)
        if month_key_of(first_day) < current:
            raise ValidationError("Tidak dapat mengaktifkan bulan yang telah berlalu")

        if self._employees.add_activated_month(employee_id=emp.employee_id, month_key=month_key):
            logger.info("activated month %s for employee %s", month_key, emp.employee_id)
        return sorted(emp.activated_months | {month_key})

    def list_mentees(self, *, reviewer_id: str) -> Sequence[Employee]:
        return self._employees.list_mentees(reviewer_id=str(reviewer_id))
