from __future__ import annotations

from enum import Enum
from typing import Optional


class Role(str, Enum):
    """Caller role used for capability checks at the service boundary."""

    ADMIN = "admin"
    HR = "hr"
    EMPLOYEE = "employee"


REVIEWER_ROLES = frozenset({Role.ADMIN, Role.HR})


class AttendanceStatus(str, Enum):
    """Daily attendance status, stored exactly as written."""

    PRESENT = "Present"
    ABSENT = "Absent"
    LEAVE = "Leave"
    HALF_DAY = "Half Day"
    LATE = "Late"


class LeaveType(str, Enum):
    ANNUAL = "Annual"
    SICK = "Sick"
    PERSONAL = "Personal"
    EMERGENCY = "Emergency"
    MATERNITY = "Maternity"
    PATERNITY = "Paternity"
    OTHER = "Other"


class LeaveStatus(str, Enum):
    """Leave approval lifecycle. Approved and Rejected are terminal."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not LeaveStatus.PENDING


class PayrollRecordStatus(str, Enum):
    """Hourly payroll record lifecycle: draft -> processed -> paid."""

    DRAFT = "draft"
    PROCESSED = "processed"
    PAID = "paid"

    @property
    def next_status(self) -> Optional["PayrollRecordStatus"]:
        if self is PayrollRecordStatus.DRAFT:
            return PayrollRecordStatus.PROCESSED
        if self is PayrollRecordStatus.PROCESSED:
            return PayrollRecordStatus.PAID
        return None
