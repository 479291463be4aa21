from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..common.money import ratio_to_percent, round_cents, round_money
from ..core.enums import PayrollRecordStatus
from ..employees.model import Compensation


@dataclass(frozen=True)
class PayPeriod:
    year: int
    month: int
    start: date
    end: date

    @property
    def month_name(self) -> str:
        return calendar.month_name[self.month]

    @property
    def label(self) -> str:
        return f"{self.month_name} {self.year}"

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "month": self.month,
            "month_name": self.month_name,
            "start_date": self.start.isoformat(),
            "end_date": self.end.isoformat(),
        }


@dataclass(frozen=True)
class AttendanceBreakdown:
    working_days: int
    attended_days: Decimal
    absent_days: int
    leave_days: int
    weekend_days: int
    unrecorded_working_days: int
    attendance_ratio: Decimal

    def to_dict(self) -> dict:
        return {
            "total_working_days": self.working_days,
            "attended_days": float(self.attended_days),
            "absent_days": self.absent_days,
            "leave_days": self.leave_days,
            "weekends": self.weekend_days,
            "unrecorded_working_days": self.unrecorded_working_days,
            "attendance_percentage": ratio_to_percent(self.attendance_ratio),
        }


@dataclass(frozen=True)
class Earnings:
    basic: Decimal
    hra: Decimal
    da: Decimal
    medical_allowance: Decimal
    conveyance_allowance: Decimal
    gross: Decimal
    salary_after_attendance: Decimal

    def to_dict(self) -> dict:
        return {
            "basic_salary": round_money(self.basic),
            "hra": round_money(self.hra),
            "da": round_money(self.da),
            "medical_allowance": round_money(self.medical_allowance),
            "conveyance_allowance": round_money(self.conveyance_allowance),
            "gross_salary": round_money(self.gross),
            "salary_after_attendance": round_money(self.salary_after_attendance),
        }


@dataclass(frozen=True)
class Deductions:
    provident_fund: Decimal
    state_insurance: Decimal
    professional_tax: Decimal
    income_tax: Decimal
    total: Decimal

    def to_dict(self) -> dict:
        return {
            "pf": round_money(self.provident_fund),
            "esi": round_money(self.state_insurance),
            "professional_tax": round_money(self.professional_tax),
            "income_tax": round_money(self.income_tax),
            "total_deductions": round_money(self.total),
        }


@dataclass(frozen=True)
class PayslipResult:
    """Computed payslip. Amounts keep full precision; ``to_dict`` rounds them."""

    employee: Compensation
    period: PayPeriod
    attendance: AttendanceBreakdown
    earnings: Earnings
    deductions: Deductions
    net_salary: Decimal
    generated_at: datetime

    def to_dict(self) -> dict:
        return {
            "employee": self.employee.to_dict(),
            "pay_period": self.period.to_dict(),
            "attendance": self.attendance.to_dict(),
            "earnings": self.earnings.to_dict(),
            "deductions": self.deductions.to_dict(),
            "net_salary": round_money(self.net_salary),
            "generated_at": self.generated_at.isoformat(),
        }


@dataclass(frozen=True)
class AvailablePeriod:
    year: int
    month: int

    def to_dict(self) -> dict:
        month_name = calendar.month_name[self.month]
        return {
            "year": self.year,
            "month": self.month,
            "month_name": month_name,
            "period": f"{month_name} {self.year}",
        }


@dataclass(frozen=True)
class PayrollSummary:
    year: int
    month: int
    total_employees: int
    total_gross_salary: Decimal
    total_net_salary: Decimal
    total_income_tax: Decimal
    missing_compensation: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "month": self.month,
            "total_employees": self.total_employees,
            "total_gross_salary": round_money(self.total_gross_salary),
            "total_net_salary": round_money(self.total_net_salary),
            "total_income_tax": round_money(self.total_income_tax),
            "missing_compensation": list(self.missing_compensation),
        }


@dataclass(frozen=True)
class HourlyPay:
    hours_worked: Decimal
    overtime_hours: Decimal
    hourly_rate: Decimal
    regular_pay: Decimal
    overtime_pay: Decimal
    bonuses: Decimal
    gross_pay: Decimal
    tax_deductions: Decimal
    other_deductions: Decimal
    net_pay: Decimal

    def to_dict(self) -> dict:
        return {
            "hours_worked": round_cents(self.hours_worked),
            "overtime_hours": round_cents(self.overtime_hours),
            "hourly_rate": round_cents(self.hourly_rate),
            "regular_pay": round_money(self.regular_pay),
            "overtime_pay": round_money(self.overtime_pay),
            "bonuses": round_money(self.bonuses),
            "gross_pay": round_money(self.gross_pay),
            "tax_deductions": round_money(self.tax_deductions),
            "other_deductions": round_money(self.other_deductions),
            "net_pay": round_money(self.net_pay),
        }


@dataclass(frozen=True)
class PayrollRecord:
    """Stored hourly payroll record. ``pay`` is fixed when the record is created."""

    record_id: str
    employee_id: str
    period_start: date
    period_end: date
    pay: HourlyPay
    status: PayrollRecordStatus
    created_by: str
    created_at: datetime
    processed_at: Optional[datetime] = None
    processed_by: Optional[str] = None
    paid_at: Optional[datetime] = None
    paid_by: Optional[str] = None

    @property
    def pay_period(self) -> str:
        return self.period_start.strftime("%Y-%m")

    @property
    def pay_year(self) -> int:
        return self.period_start.year

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "employee_id": self.employee_id,
            "pay_period_start": self.period_start.isoformat(),
            "pay_period_end": self.period_end.isoformat(),
            "pay_period": self.pay_period,
            "pay_year": self.pay_year,
            **self.pay.to_dict(),
            "status": self.status.value,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat(),
            "processed_at": self.processed_at.isoformat() if self.processed_at else None,
            "processed_by": self.processed_by,
            "paid_at": self.paid_at.isoformat() if self.paid_at else None,
            "paid_by": self.paid_by,
        }
