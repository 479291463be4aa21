from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence
from uuid import uuid4

from ..core.enums import PayrollRecordStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import HourlyPay, PayrollRecord
from .repository import PayrollRecordRepository

_COLUMNS = """
    record_id, employee_id, pay_period_start, pay_period_end, pay_period, pay_year,
    hours_worked, overtime_hours, hourly_rate, regular_pay, overtime_pay, bonuses,
    gross_pay, tax_deductions, other_deductions, net_pay,
    status, created_by, created_at, processed_at, processed_by, paid_at, paid_by
"""

_PAY_FIELDS = (
    "hours_worked",
    "overtime_hours",
    "hourly_rate",
    "regular_pay",
    "overtime_pay",
    "bonuses",
    "gross_pay",
    "tax_deductions",
    "other_deductions",
    "net_pay",
)

# Column pair stamped when a record enters each status.
_STAMP_COLUMNS = {
    PayrollRecordStatus.PROCESSED: ("processed_at", "processed_by"),
    PayrollRecordStatus.PAID: ("paid_at", "paid_by"),
}


def _row_to_record(r: dict) -> PayrollRecord:
    return PayrollRecord(
        record_id=str(r["record_id"]),
        employee_id=str(r["employee_id"]),
        period_start=r["pay_period_start"],
        period_end=r["pay_period_end"],
        pay=HourlyPay(**{name: Decimal(str(r[name])) for name in _PAY_FIELDS}),
        status=PayrollRecordStatus(r["status"]),
        created_by=str(r["created_by"]),
        created_at=r["created_at"],
        processed_at=r.get("processed_at"),
        processed_by=r.get("processed_by"),
        paid_at=r.get("paid_at"),
        paid_by=r.get("paid_by"),
    )


class MySQLPayrollRecordRepository(PayrollRecordRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_record(
        self,
        *,
        employee_id: str,
        period_start: date,
        period_end: date,
        pay: HourlyPay,
        created_by: str,
        created_at: datetime,
    ) -> PayrollRecord:
        record = PayrollRecord(
            record_id=str(uuid4()),
            employee_id=employee_id,
            period_start=period_start,
            period_end=period_end,
            pay=pay,
            status=PayrollRecordStatus.DRAFT,
            created_by=created_by,
            created_at=created_at,
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO payroll_records(
                    record_id, employee_id, pay_period_start, pay_period_end, pay_period, pay_year,
                    {", ".join(_PAY_FIELDS)}, status, created_by, created_at
                )
                VALUES({", ".join(["%s"] * (len(_PAY_FIELDS) + 9))})
                """,
                (
                    record.record_id,
                    record.employee_id,
                    record.period_start,
                    record.period_end,
                    record.pay_period,
                    record.pay_year,
                    *(getattr(pay, name) for name in _PAY_FIELDS),
                    record.status.value,
                    record.created_by,
                    record.created_at,
                ),
            )
        return record

    def get_record(self, *, record_id: str) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payroll_records WHERE record_id=%s", (record_id,))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def list_records(
        self,
        *,
        status: Optional[PayrollRecordStatus] = None,
        employee_id: Optional[str] = None,
        year: Optional[int] = None,
        pay_period: Optional[str] = None,
        limit: int = 200,
    ) -> Sequence[PayrollRecord]:
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(employee_id)
        if year is not None:
            clauses.append("pay_year=%s")
            params.append(int(year))
        if pay_period is not None:
            clauses.append("pay_period=%s")
            params.append(pay_period)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM payroll_records
                WHERE {where}
                ORDER BY created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def transition_record(
        self,
        *,
        record_id: str,
        from_status: PayrollRecordStatus,
        to_status: PayrollRecordStatus,
        actor_id: str,
        at: datetime,
    ) -> Optional[PayrollRecord]:
        at_column, by_column = _STAMP_COLUMNS[to_status]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE payroll_records
                SET status=%s, {at_column}=%s, {by_column}=%s
                WHERE record_id=%s AND status=%s
                """,
                (to_status.value, at, actor_id, record_id, from_status.value),
            )
            if cur.rowcount != 1:
                return None

            cur.execute(f"SELECT {_COLUMNS} FROM payroll_records WHERE record_id=%s", (record_id,))
            return _row_to_record(fetchone(cur))
