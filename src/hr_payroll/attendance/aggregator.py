from __future__ import annotations

from collections import Counter
from typing import Iterable

from ..common.calendar_math import days_in_month, is_weekend, iter_days, month_bounds, weekend_days_in_month
from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceSummary


class AttendanceAggregator:
    """Reduce one month of attendance records into per-status counts.

    Records are counted as given: filtering to the month is the caller's job.
    Absent days are the records marked Absent; weekdays with no record at all
    are reported separately as ``unrecorded_working_days``.
    """

    def summarize(
        self,
        employee_id: str,
        year: int,
        month: int,
        records: Iterable[AttendanceRecord],
    ) -> AttendanceSummary:
        records = list(records)
        total_days = days_in_month(year, month)
        first, last = month_bounds(year, month)
        weekend_days = weekend_days_in_month(year, month)
        working_days = total_days - weekend_days

        counts = Counter(r.status for r in records)
        recorded_dates = {r.work_date for r in records}
        unrecorded = sum(
            1 for d in iter_days(first, last) if not is_weekend(d) and d not in recorded_dates
        )

        return AttendanceSummary(
            employee_id=employee_id,
            year=int(year),
            month=int(month),
            total_days=total_days,
            weekend_days=weekend_days,
            working_days=working_days,
            present=counts[AttendanceStatus.PRESENT],
            absent=counts[AttendanceStatus.ABSENT],
            half_day=counts[AttendanceStatus.HALF_DAY],
            late=counts[AttendanceStatus.LATE],
            leave=counts[AttendanceStatus.LEAVE],
            recorded_days=len(records),
            unrecorded_working_days=unrecorded,
        )
