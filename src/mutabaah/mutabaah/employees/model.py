from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from ..core.enums import ReviewerRole, Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee taking part in the mutabaah programme.

    The reviewer fields point at other employees; any of them may be empty.
    """

    employee_id: str
    full_name: str
    role: Role = Role.EMPLOYEE
    mentor_id: Optional[str] = None
    supervisor_id: Optional[str] = None
    ka_unit_id: Optional[str] = None
    manager_id: Optional[str] = None
    activated_months: FrozenSet[str] = field(default_factory=frozenset)
    is_active: bool = True

    def resolver_for(self, role: ReviewerRole) -> Optional[str]:
        return {
            ReviewerRole.MENTOR: self.mentor_id,
            ReviewerRole.SUPERVISOR: self.supervisor_id,
            ReviewerRole.KAUNIT: self.ka_unit_id,
            ReviewerRole.MANAGER: self.manager_id,
        }[role]
