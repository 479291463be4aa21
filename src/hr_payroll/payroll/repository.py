from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import PayrollRecordStatus
from .model import HourlyPay, PayrollRecord


class PayrollRecordRepository(Protocol):
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
        """Persist a new record with status draft."""

        raise NotImplementedError

    def get_record(self, *, record_id: str) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def list_records(
        self,
        *,
        status: Optional[PayrollRecordStatus] = None,
        employee_id: Optional[str] = None,
        year: Optional[int] = None,
        pay_period: Optional[str] = None,
        limit: int = 200,
    ) -> Sequence[PayrollRecord]:
        """Newest records first. ``pay_period`` is YYYY-MM of the period start."""

        raise NotImplementedError

    def transition_record(
        self,
        *,
        record_id: str,
        from_status: PayrollRecordStatus,
        to_status: PayrollRecordStatus,
        actor_id: str,
        at: datetime,
    ) -> Optional[PayrollRecord]:
        """Compare-and-swap on status.

        Updates only while the stored status is still ``from_status`` and
        stamps the processed or paid columns. Returns None otherwise.
        """

        raise NotImplementedError
