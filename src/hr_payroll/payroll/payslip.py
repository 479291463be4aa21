from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from ..attendance.model import AttendanceSummary
from ..common.calendar_math import inclusive_day_count, month_bounds
from ..core.enums import LeaveStatus
from ..core.exceptions import MissingCompensationError, ValidationError
from ..employees.model import Compensation
from ..leaves.model import LeaveRequest
from .calculator.base import TaxCalculator
from .calculator.progressive import ProgressiveTaxCalculator
from .model import AttendanceBreakdown, Deductions, Earnings, PayPeriod, PayslipResult
from .policy import PayrollPolicy

MONTHS_PER_YEAR = Decimal("12")
ZERO = Decimal("0")


class PayslipComputer:
    """Turn compensation, attendance and approved leave into a payslip.

    Pure computation: nothing is fetched or persisted here, and the same
    inputs (including ``generated_at``) always give an equal result.

    Income tax is computed on the un-prorated annual gross, not on the
    attendance-adjusted figure.
    """

    def __init__(
        self,
        policy: Optional[PayrollPolicy] = None,
        *,
        tax_calculator: Optional[TaxCalculator] = None,
    ):
        self._policy = policy or PayrollPolicy()
        self._tax = tax_calculator or ProgressiveTaxCalculator()

    def compute(
        self,
        compensation: Compensation,
        attendance: AttendanceSummary,
        approved_leaves: Iterable[LeaveRequest],
        *,
        generated_at: datetime,
    ) -> PayslipResult:
        if compensation.base_salary is None:
            raise MissingCompensationError(f"Employee {compensation.employee_id} has no base salary configured")
        if attendance.employee_id != compensation.employee_id:
            raise ValidationError("Attendance summary belongs to a different employee")

        policy = self._policy
        start, end = month_bounds(attendance.year, attendance.month)
        period = PayPeriod(year=attendance.year, month=attendance.month, start=start, end=end)

        basic = compensation.base_salary
        hra = basic * policy.hra_rate
        da = basic * policy.da_rate
        gross = basic + hra + da + policy.medical_allowance + policy.conveyance_allowance

        attended = (
            Decimal(attendance.present)
            + policy.half_day_weight * attendance.half_day
            + policy.late_weight * attendance.late
        )
        ratio = attended / attendance.working_days if attendance.working_days > 0 else ZERO
        salary_after_attendance = gross * ratio

        provident_fund = basic * policy.pf_rate
        state_insurance = gross * policy.esi_rate
        professional_tax = policy.professional_tax if gross > policy.professional_tax_threshold else ZERO
        income_tax = self._tax.annual_tax(gross * MONTHS_PER_YEAR) / MONTHS_PER_YEAR
        total_deductions = provident_fund + state_insurance + professional_tax + income_tax

        breakdown = AttendanceBreakdown(
            working_days=attendance.working_days,
            attended_days=attended,
            absent_days=attendance.absent,
            leave_days=self._leave_days_in_period(compensation.employee_id, approved_leaves, period),
            weekend_days=attendance.weekend_days,
            unrecorded_working_days=attendance.unrecorded_working_days,
            attendance_ratio=ratio,
        )

        return PayslipResult(
            employee=compensation,
            period=period,
            attendance=breakdown,
            earnings=Earnings(
                basic=basic,
                hra=hra,
                da=da,
                medical_allowance=policy.medical_allowance,
                conveyance_allowance=policy.conveyance_allowance,
                gross=gross,
                salary_after_attendance=salary_after_attendance,
            ),
            deductions=Deductions(
                provident_fund=provident_fund,
                state_insurance=state_insurance,
                professional_tax=professional_tax,
                income_tax=income_tax,
                total=total_deductions,
            ),
            net_salary=salary_after_attendance - total_deductions,
            generated_at=generated_at,
        )

    @staticmethod
    def _leave_days_in_period(employee_id: str, leaves: Iterable[LeaveRequest], period: PayPeriod) -> int:
        """Calendar days of approved leave that fall inside the pay period."""
        days = 0
        for leave in leaves:
            if leave.employee_id != employee_id or leave.status != LeaveStatus.APPROVED:
                continue
            clipped = leave.clipped_to(period.start, period.end)
            if clipped:
                days += inclusive_day_count(*clipped)
        return days
