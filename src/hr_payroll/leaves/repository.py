from __future__ import annotations

from datetime import datetime
from typing import Callable, Dict, Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveRequest, NewLeaveRequest

# Called with (request being decided, employee's currently approved leaves).
# May raise to abort the transition.
RecheckFn = Callable[[LeaveRequest, Sequence[LeaveRequest]], None]


class LeaveRepository(Protocol):
    def create_leave(self, *, request: NewLeaveRequest, submitted_at: datetime) -> LeaveRequest:
        """Persist a new request with status Pending."""

        raise NotImplementedError

    def get_leave(self, *, request_id: str) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_approved_for_employee(self, *, employee_id: str) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_leaves(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        employee_id: Optional[str] = None,
        leave_type: Optional[LeaveType] = None,
        year: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        """Newest submissions first. ``year`` filters on the start date."""

        raise NotImplementedError

    def transition_leave(
        self,
        *,
        request_id: str,
        status: LeaveStatus,
        reviewed_by: str,
        reviewed_at: datetime,
        admin_notes: Optional[str] = None,
        recheck: Optional[RecheckFn] = None,
    ) -> Optional[LeaveRequest]:
        """Move a Pending request to ``status`` as one atomic unit.

        Implementations must serialize transitions per employee: reload the
        request, run ``recheck`` against the employee's approved leaves, and
        update only while the stored status is still Pending. Returns the
        updated request, or None when it is missing or no longer Pending.
        """

        raise NotImplementedError

    def delete_leave(self, *, request_id: str) -> bool:
        raise NotImplementedError

    def count_by_status(self) -> Dict[LeaveStatus, int]:
        raise NotImplementedError
