from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar date."""

    attendance_id: int
    employee_id: str
    work_date: date
    status: AttendanceStatus
    check_in_time: Optional[time] = None
    check_out_time: Optional[time] = None
    note: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.status, AttendanceStatus):
            try:
                object.__setattr__(self, "status", AttendanceStatus(self.status))
            except ValueError:
                raise ValidationError(f"Unknown attendance status: {self.status!r}")
        if self.check_in_time is not None and self.check_out_time is not None and self.check_out_time < self.check_in_time:
            raise ValidationError("Check-out time cannot be earlier than check-in time")


@dataclass(frozen=True)
class AttendanceSummary:
    """Per-status counts for one employee and one month."""

    employee_id: str
    year: int
    month: int
    total_days: int
    weekend_days: int
    working_days: int
    present: int
    absent: int
    half_day: int
    late: int
    leave: int
    recorded_days: int
    unrecorded_working_days: int

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "year": self.year,
            "month": self.month,
            "total_days": self.total_days,
            "weekend_days": self.weekend_days,
            "working_days": self.working_days,
            "present": self.present,
            "absent": self.absent,
            "half_day": self.half_day,
            "late": self.late,
            "leave": self.leave,
            "recorded_days": self.recorded_days,
            "unrecorded_working_days": self.unrecorded_working_days,
        }
