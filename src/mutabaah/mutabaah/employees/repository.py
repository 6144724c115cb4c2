from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_mentees(self, *, reviewer_id: str) -> Sequence[Employee]:
        """Employees that name `reviewer_id` in any reviewer field."""

        raise NotImplementedError

    def add_activated_month(self, *, employee_id: str, month_key: str) -> bool:
        """Return False when the month was already activated."""

        raise NotImplementedError
