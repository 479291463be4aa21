from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ..common.money import Number, to_decimal
from ..core.exceptions import InvalidAmountError, MissingCompensationError
from ..employees.model import Compensation
from .model import HourlyPay
from .policy import PayrollPolicy

MONTHS_PER_YEAR = Decimal("12")


def _non_negative(value: Number, field_name: str) -> Decimal:
    amount = to_decimal(value, field_name)
    if amount < 0:
        raise InvalidAmountError(f"{field_name} cannot be negative")
    return amount


class HourlyPayCalculator:
    """Pay for one hourly payroll record.

    Regular hours are capped at the policy's standard week; hours beyond the
    cap are only paid when passed as ``overtime_hours``. Net pay is not
    clamped, so deductions larger than gross give a negative result.
    """

    def __init__(self, policy: Optional[PayrollPolicy] = None):
        self._policy = policy or PayrollPolicy()

    def hourly_rate(self, compensation: Compensation) -> Decimal:
        if compensation.hourly_rate is not None:
            return compensation.hourly_rate
        if compensation.base_salary is None:
            raise MissingCompensationError(
                f"Employee {compensation.employee_id} has neither an hourly rate nor a base salary"
            )
        hours_per_year = self._policy.weeks_per_year * self._policy.standard_weekly_hours
        return compensation.base_salary * MONTHS_PER_YEAR / hours_per_year

    def compute(
        self,
        compensation: Compensation,
        *,
        hours_worked: Number,
        overtime_hours: Number = 0,
        bonuses: Number = 0,
        deductions: Number = 0,
        tax_deductions: Number = 0,
    ) -> HourlyPay:
        hours = _non_negative(hours_worked, "hours_worked")
        overtime = _non_negative(overtime_hours, "overtime_hours")
        bonus = _non_negative(bonuses, "bonuses")
        other = _non_negative(deductions, "deductions")
        tax = _non_negative(tax_deductions, "tax_deductions")

        rate = self.hourly_rate(compensation)
        regular_pay = min(hours, self._policy.standard_weekly_hours) * rate
        overtime_pay = overtime * rate * self._policy.overtime_multiplier
        gross = regular_pay + overtime_pay + bonus

        return HourlyPay(
            hours_worked=hours,
            overtime_hours=overtime,
            hourly_rate=rate,
            regular_pay=regular_pay,
            overtime_pay=overtime_pay,
            bonuses=bonus,
            gross_pay=gross,
            tax_deductions=tax,
            other_deductions=other,
            net_pay=gross - other - tax,
        )
