from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Iterable, Optional

from ..attendance.aggregator import AttendanceAggregator
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..common.validators import require_month
from ..core.constants import DEFAULT_PAYSLIP_HISTORY, MAX_PAYSLIP_HISTORY
from ..core.enums import REVIEWER_ROLES, Role
from ..core.exceptions import AuthorizationError, MissingCompensationError, NotFoundError, ValidationError
from ..core.logging import get_logger
from ..employees.model import Compensation
from ..employees.repository import EmployeeRepository
from ..leaves.repository import LeaveRepository
from .model import AvailablePeriod, PayrollSummary, PayslipResult
from .payslip import PayslipComputer

log = get_logger(__name__)


class PayslipService:
    """Use cases around payslips: gather inputs from the stores, then compute."""

    def __init__(
        self,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        *,
        computer: Optional[PayslipComputer] = None,
        aggregator: Optional[AttendanceAggregator] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._employees = employees
        self._attendance = attendance
        self._leaves = leaves
        self._computer = computer or PayslipComputer()
        self._aggregator = aggregator or AttendanceAggregator()
        self._clock = clock

    @staticmethod
    def _require_self_or_reviewer(current_role: Role, current_employee_id: Optional[str], employee_id: str) -> None:
        if current_role not in REVIEWER_ROLES and current_employee_id != employee_id:
            raise AuthorizationError("You can only view your own payslips")

    def _get_compensation(self, employee_id: str) -> Compensation:
        compensation = self._employees.get_compensation(employee_id)
        if not compensation:
            raise NotFoundError(f"Employee {employee_id} not found")
        return compensation

    def _compute(self, compensation: Compensation, year: int, month: int) -> PayslipResult:
        employee_id = compensation.employee_id
        records = self._attendance.get_for_month(employee_id, year, month)
        summary = self._aggregator.summarize(employee_id, year, month, records)
        approved = self._leaves.list_approved_for_employee(employee_id=employee_id)
        return self._computer.compute(compensation, summary, approved, generated_at=self._clock())

    def compute_payslip(
        self,
        *,
        current_role: Role,
        current_employee_id: Optional[str],
        employee_id: str,
        year: int,
        month: int,
    ) -> PayslipResult:
        self._require_self_or_reviewer(current_role, current_employee_id, employee_id)
        require_month(year, month)

        result = self._compute(self._get_compensation(employee_id), int(year), int(month))
        log.info(
            "payslip_computed",
            employee_id=employee_id,
            year=int(year),
            month=int(month),
            net_salary=str(result.net_salary),
        )
        return result

    def list_available_periods(
        self,
        *,
        current_role: Role,
        current_employee_id: Optional[str],
        employee_id: str,
        limit: int = DEFAULT_PAYSLIP_HISTORY,
        today: Optional[date] = None,
    ) -> list[AvailablePeriod]:
        """Most recent months first, never earlier than the hire month."""
        self._require_self_or_reviewer(current_role, current_employee_id, employee_id)
        if not 1 <= int(limit) <= MAX_PAYSLIP_HISTORY:
            raise ValidationError(f"limit must be between 1 and {MAX_PAYSLIP_HISTORY}")

        compensation = self._get_compensation(employee_id)
        today = today or self._clock().date()
        hire = compensation.hire_date

        periods: list[AvailablePeriod] = []
        year, month = today.year, today.month
        for _ in range(int(limit)):
            if hire and (year, month) < (hire.year, hire.month):
                break
            periods.append(AvailablePeriod(year=year, month=month))
            year, month = (year - 1, 12) if month == 1 else (year, month - 1)
        return periods

    def compute_payroll_summary(
        self,
        *,
        current_role: Role,
        year: int,
        month: int,
        employee_ids: Optional[Iterable[str]] = None,
    ) -> PayrollSummary:
        if current_role not in REVIEWER_ROLES:
            raise AuthorizationError("Only HR or Admin can view payroll summaries")
        require_month(year, month)
        if employee_ids is None:
            employee_ids = self._employees.list_employee_ids()

        total_gross = Decimal("0")
        total_net = Decimal("0")
        total_tax = Decimal("0")
        computed = 0
        missing: list[str] = []

        for employee_id in employee_ids:
            compensation = self._get_compensation(employee_id)
            try:
                result = self._compute(compensation, int(year), int(month))
            except MissingCompensationError:
                log.warning("payroll_summary_missing_compensation", employee_id=employee_id)
                missing.append(employee_id)
                continue
            computed += 1
            total_gross += result.earnings.gross
            total_net += result.net_salary
            total_tax += result.deductions.income_tax

        return PayrollSummary(
            year=int(year),
            month=int(month),
            total_employees=computed,
            total_gross_salary=total_gross,
            total_net_salary=total_net,
            total_income_tax=total_tax,
            missing_compensation=tuple(missing),
        )
