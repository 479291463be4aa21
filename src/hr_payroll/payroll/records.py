from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local, parse_pay_period
from ..common.money import Number
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import REVIEWER_ROLES, PayrollRecordStatus, Role
from ..core.exceptions import (
    AuthorizationError,
    InvalidRangeError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from ..core.logging import get_logger
from ..employees.repository import EmployeeRepository
from .hourly import HourlyPayCalculator
from .model import PayrollRecord
from .repository import PayrollRecordRepository

log = get_logger(__name__)


class PayrollRecordService:
    """Hourly payroll records: draft -> processed -> paid.

    Pay is computed once, when the draft is created. Each step is a
    compare-and-swap in the store, so a record is processed or paid at most
    once even under concurrent requests.
    """

    def __init__(
        self,
        records: PayrollRecordRepository,
        employees: EmployeeRepository,
        *,
        calculator: Optional[HourlyPayCalculator] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._records = records
        self._employees = employees
        self._calculator = calculator or HourlyPayCalculator()
        self._clock = clock

    @staticmethod
    def _require_reviewer(current_role: Role) -> None:
        if current_role not in REVIEWER_ROLES:
            raise AuthorizationError("Only HR or Admin can manage payroll records")

    @staticmethod
    def _require_self_or_reviewer(current_role: Role, current_employee_id: Optional[str], employee_id: str) -> None:
        if current_role not in REVIEWER_ROLES and current_employee_id != employee_id:
            raise AuthorizationError("You can only view your own payroll records")

    def _load(self, record_id: str) -> PayrollRecord:
        record = self._records.get_record(record_id=str(record_id))
        if not record:
            raise NotFoundError(f"Payroll record {record_id} not found")
        return record

    def create(
        self,
        *,
        current_role: Role,
        created_by: str,
        employee_id: str,
        period_start: date,
        period_end: date,
        hours_worked: Number,
        overtime_hours: Number = 0,
        bonuses: Number = 0,
        deductions: Number = 0,
        tax_deductions: Number = 0,
    ) -> PayrollRecord:
        self._require_reviewer(current_role)
        if period_end < period_start:
            raise InvalidRangeError("Pay period end must be on or after its start")

        compensation = self._employees.get_compensation(employee_id)
        if not compensation:
            raise NotFoundError(f"Employee {employee_id} not found")

        pay = self._calculator.compute(
            compensation,
            hours_worked=hours_worked,
            overtime_hours=overtime_hours,
            bonuses=bonuses,
            deductions=deductions,
            tax_deductions=tax_deductions,
        )
        record = self._records.create_record(
            employee_id=employee_id,
            period_start=period_start,
            period_end=period_end,
            pay=pay,
            created_by=created_by,
            created_at=self._clock(),
        )
        log.info(
            "payroll_record_created",
            record_id=record.record_id,
            employee_id=employee_id,
            pay_period=record.pay_period,
            net_pay=str(pay.net_pay),
        )
        return record

    def _advance(
        self,
        *,
        current_role: Role,
        actor_id: str,
        record_id: str,
        from_status: PayrollRecordStatus,
    ) -> PayrollRecord:
        self._require_reviewer(current_role)
        current = self._load(record_id)
        if current.status is not from_status:
            raise InvalidTransitionError(
                f"Payroll record {record_id} is {current.status.value}, expected {from_status.value}"
            )

        to_status = from_status.next_status
        updated = self._records.transition_record(
            record_id=current.record_id,
            from_status=from_status,
            to_status=to_status,
            actor_id=actor_id,
            at=self._clock(),
        )
        if updated is None:
            raise InvalidTransitionError(f"Payroll record {record_id} changed status concurrently")

        log.info("payroll_record_transitioned", record_id=updated.record_id, status=updated.status.value, by=actor_id)
        return updated

    def process(self, *, current_role: Role, actor_id: str, record_id: str) -> PayrollRecord:
        return self._advance(
            current_role=current_role,
            actor_id=actor_id,
            record_id=record_id,
            from_status=PayrollRecordStatus.DRAFT,
        )

    def mark_paid(self, *, current_role: Role, actor_id: str, record_id: str) -> PayrollRecord:
        return self._advance(
            current_role=current_role,
            actor_id=actor_id,
            record_id=record_id,
            from_status=PayrollRecordStatus.PROCESSED,
        )

    def get(self, *, current_role: Role, current_employee_id: Optional[str], record_id: str) -> PayrollRecord:
        record = self._load(record_id)
        self._require_self_or_reviewer(current_role, current_employee_id, record.employee_id)
        return record

    def list_records(
        self,
        *,
        current_role: Role,
        current_employee_id: Optional[str],
        employee_id: Optional[str] = None,
        status: Optional[PayrollRecordStatus | str] = None,
        year: Optional[int] = None,
        pay_period: Optional[str] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[PayrollRecord]:
        """Employees only ever see their own records."""
        if current_role not in REVIEWER_ROLES:
            if employee_id is not None and employee_id != current_employee_id:
                raise AuthorizationError("You can only view your own payroll records")
            if not current_employee_id:
                raise AuthorizationError("No employee profile linked to this account")
            employee_id = current_employee_id

        if not 1 <= int(limit) <= DEFAULT_LIST_LIMIT:
            raise ValidationError(f"limit must be between 1 and {DEFAULT_LIST_LIMIT}")

        if status is not None and not isinstance(status, PayrollRecordStatus):
            try:
                status = PayrollRecordStatus(status)
            except ValueError:
                raise ValidationError(f"Unknown payroll record status: {status}")

        return self._records.list_records(
            status=status,
            employee_id=employee_id,
            year=int(year) if year is not None else None,
            pay_period=parse_pay_period(pay_period, "pay_period") if pay_period else None,
            limit=int(limit),
        )
