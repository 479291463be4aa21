from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from ..core.enums import LeaveStatus
from ..core.exceptions import InvalidRangeError
from .model import LeaveRequest


def ranges_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """Inclusive ranges overlap when they share at least one day."""
    return start_a <= end_b and start_b <= end_a


@dataclass(frozen=True)
class ConflictReport:
    has_conflict: bool
    conflicts: tuple[LeaveRequest, ...] = ()

    @property
    def conflicting_ids(self) -> list[str]:
        return [c.request_id for c in self.conflicts]


class LeaveConflictChecker:
    """Find approved leave of the same employee that overlaps a proposed range.

    Pending and Rejected requests never conflict.
    """

    def check(
        self,
        employee_id: str,
        start_date: date,
        end_date: date,
        leaves: Iterable[LeaveRequest],
        *,
        exclude_request_id: Optional[str] = None,
    ) -> ConflictReport:
        if end_date < start_date:
            raise InvalidRangeError("End date must be after or equal to start date")

        conflicts = tuple(
            leave
            for leave in leaves
            if leave.employee_id == employee_id
            and leave.status == LeaveStatus.APPROVED
            and leave.request_id != exclude_request_id
            and ranges_overlap(start_date, end_date, leave.start_date, leave.end_date)
        )
        return ConflictReport(has_conflict=bool(conflicts), conflicts=conflicts)

    def has_conflict(
        self,
        employee_id: str,
        start_date: date,
        end_date: date,
        leaves: Iterable[LeaveRequest],
    ) -> bool:
        return self.check(employee_id, start_date, end_date, leaves).has_conflict
