from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple

from ..common.calendar_math import clip_range, inclusive_day_count
from ..common.validators import require_length
from ..core.constants import LEAVE_REASON_MAX_LENGTH, LEAVE_REASON_MIN_LENGTH
from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import InvalidRangeError, ValidationError


def _coerce_leave_type(value) -> LeaveType:
    if isinstance(value, LeaveType):
        return value
    try:
        return LeaveType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in LeaveType)
        raise ValidationError(f"Unknown leave type {value!r}; expected one of: {allowed}")


def _check_range(start_date: date, end_date: date) -> None:
    if not isinstance(start_date, date) or not isinstance(end_date, date):
        raise ValidationError("Start and end dates are required")
    if end_date < start_date:
        raise InvalidRangeError("End date must be after or equal to start date")


@dataclass(frozen=True)
class NewLeaveRequest:
    """Validated submission payload, before the store assigns an id."""

    employee_id: str
    start_date: date
    end_date: date
    leave_type: LeaveType
    reason: str

    def __post_init__(self) -> None:
        if not self.employee_id:
            raise ValidationError("Employee is required")
        _check_range(self.start_date, self.end_date)
        object.__setattr__(self, "leave_type", _coerce_leave_type(self.leave_type))
        object.__setattr__(
            self,
            "reason",
            require_length(self.reason, "Reason", LEAVE_REASON_MIN_LENGTH, LEAVE_REASON_MAX_LENGTH),
        )


@dataclass(frozen=True)
class LeaveRequest:
    """A stored leave request.

    Text lengths are checked once, on submission and review; stored rows are
    taken as they are so older records still load.
    """

    request_id: str
    employee_id: str
    start_date: date
    end_date: date
    leave_type: LeaveType
    reason: str
    status: LeaveStatus
    submitted_at: datetime
    admin_notes: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None

    def __post_init__(self) -> None:
        _check_range(self.start_date, self.end_date)
        object.__setattr__(self, "leave_type", _coerce_leave_type(self.leave_type))
        if not isinstance(self.status, LeaveStatus):
            try:
                object.__setattr__(self, "status", LeaveStatus(self.status))
            except ValueError:
                raise ValidationError(f"Unknown leave status: {self.status!r}")

    @property
    def day_count(self) -> int:
        return inclusive_day_count(self.start_date, self.end_date)

    def clipped_to(self, lower: date, upper: date) -> Optional[Tuple[date, date]]:
        return clip_range(self.start_date, self.end_date, lower, upper)

    def to_dict(self) -> dict:
        return {
            "id": self.request_id,
            "employee_id": self.employee_id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "leave_type": self.leave_type.value,
            "reason": self.reason,
            "status": self.status.value,
            "admin_notes": self.admin_notes,
            "submitted_at": self.submitted_at.isoformat(),
            "reviewed_at": self.reviewed_at.isoformat() if self.reviewed_at else None,
            "reviewed_by": self.reviewed_by,
            "days": self.day_count,
        }
