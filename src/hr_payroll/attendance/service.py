from __future__ import annotations

from typing import Optional

from ..core.enums import REVIEWER_ROLES, Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..employees.repository import EmployeeRepository
from .aggregator import AttendanceAggregator
from .model import AttendanceSummary
from .repository import AttendanceRepository


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        aggregator: Optional[AttendanceAggregator] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._aggregator = aggregator or AttendanceAggregator()

    def monthly_summary(
        self,
        *,
        current_role: Role,
        current_employee_id: Optional[str],
        employee_id: str,
        year: int,
        month: int,
    ) -> AttendanceSummary:
        if current_role not in REVIEWER_ROLES and current_employee_id != employee_id:
            raise AuthorizationError("You can only view your own attendance")

        if not self._employees.get_compensation(employee_id):
            raise NotFoundError(f"Employee {employee_id} not found")

        records = self._attendance.get_for_month(employee_id, int(year), int(month))
        return self._aggregator.summarize(employee_id, int(year), int(month), records)
