from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_max_length, require_length
from ..core.constants import ADMIN_NOTES_MAX_LENGTH, DEFAULT_LIST_LIMIT, REJECTION_NOTES_MIN_LENGTH
from ..core.enums import REVIEWER_ROLES, LeaveStatus, LeaveType, Role
from ..core.exceptions import (
    AuthorizationError,
    InvalidTransitionError,
    NotFoundError,
    OverlapError,
    ValidationError,
)
from ..core.logging import get_logger
from ..employees.repository import EmployeeRepository
from .conflict import ConflictReport, LeaveConflictChecker
from .model import LeaveRequest, NewLeaveRequest
from .repository import LeaveRepository

log = get_logger(__name__)


class LeaveApprovalWorkflow:
    """Leave request lifecycle: Pending -> Approved | Rejected.

    Both decisions are terminal. Approval re-runs the conflict check inside the
    repository's atomic transition, so of two overlapping requests only the
    first one approved succeeds.
    """

    def __init__(
        self,
        leaves: LeaveRepository,
        employees: Optional[EmployeeRepository] = None,
        *,
        conflict_checker: Optional[LeaveConflictChecker] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._leaves = leaves
        self._employees = employees
        self._checker = conflict_checker or LeaveConflictChecker()
        self._clock = clock

    @staticmethod
    def _require_reviewer(current_role: Role) -> None:
        if current_role not in REVIEWER_ROLES:
            raise AuthorizationError("Only HR or Admin can review leave requests")

    @staticmethod
    def _require_self_or_reviewer(current_role: Role, current_employee_id: Optional[str], employee_id: str) -> None:
        if current_role not in REVIEWER_ROLES and current_employee_id != employee_id:
            raise AuthorizationError("You can only access your own leave requests")

    def _load_pending(self, request_id: str) -> LeaveRequest:
        req = self._leaves.get_leave(request_id=str(request_id))
        if not req:
            raise NotFoundError(f"Leave request {request_id} not found")
        if req.status.is_terminal:
            raise InvalidTransitionError(f"Leave request {request_id} is already {req.status.value}")
        return req

    def _conflicts(
        self,
        employee_id: str,
        start_date: date,
        end_date: date,
        exclude_request_id: Optional[str] = None,
    ) -> ConflictReport:
        approved = self._leaves.list_approved_for_employee(employee_id=employee_id)
        return self._checker.check(
            employee_id, start_date, end_date, approved, exclude_request_id=exclude_request_id
        )

    def find_conflicts(
        self,
        *,
        current_role: Role,
        current_employee_id: Optional[str],
        employee_id: str,
        start_date: date,
        end_date: date,
        exclude_request_id: Optional[str] = None,
    ) -> ConflictReport:
        self._require_self_or_reviewer(current_role, current_employee_id, employee_id)
        return self._conflicts(employee_id, start_date, end_date, exclude_request_id)

    def check_conflict(
        self,
        *,
        current_role: Role,
        current_employee_id: Optional[str],
        employee_id: str,
        start_date: date,
        end_date: date,
    ) -> bool:
        return self.find_conflicts(
            current_role=current_role,
            current_employee_id=current_employee_id,
            employee_id=employee_id,
            start_date=start_date,
            end_date=end_date,
        ).has_conflict

    def submit(
        self,
        *,
        current_role: Role,
        current_employee_id: Optional[str],
        employee_id: str,
        start_date: date,
        end_date: date,
        leave_type: LeaveType | str,
        reason: str,
    ) -> LeaveRequest:
        self._require_self_or_reviewer(current_role, current_employee_id, employee_id)

        new_request = NewLeaveRequest(
            employee_id=employee_id,
            start_date=start_date,
            end_date=end_date,
            leave_type=leave_type,
            reason=reason,
        )
        if self._employees is not None and not self._employees.get_compensation(employee_id):
            raise NotFoundError(f"Employee {employee_id} not found")

        report = self._conflicts(employee_id, start_date, end_date)
        if report.has_conflict:
            raise OverlapError(
                f"Leave request overlaps with existing approved leave: {', '.join(report.conflicting_ids)}"
            )

        created = self._leaves.create_leave(request=new_request, submitted_at=self._clock())
        log.info(
            "leave_submitted",
            request_id=created.request_id,
            employee_id=employee_id,
            start_date=start_date.isoformat(),
            end_date=end_date.isoformat(),
            leave_type=created.leave_type.value,
        )
        return created

    def approve(
        self,
        *,
        current_role: Role,
        reviewer_id: str,
        request_id: str,
        admin_notes: Optional[str] = None,
    ) -> LeaveRequest:
        self._require_reviewer(current_role)
        notes = optional_max_length(admin_notes, "Admin notes", ADMIN_NOTES_MAX_LENGTH)
        self._load_pending(request_id)

        def recheck(current: LeaveRequest, approved: Sequence[LeaveRequest]) -> None:
            report = self._checker.check(
                current.employee_id,
                current.start_date,
                current.end_date,
                approved,
                exclude_request_id=current.request_id,
            )
            if report.has_conflict:
                raise OverlapError(
                    f"Leave request overlaps with existing approved leave: {', '.join(report.conflicting_ids)}"
                )

        updated = self._leaves.transition_leave(
            request_id=str(request_id),
            status=LeaveStatus.APPROVED,
            reviewed_by=str(reviewer_id),
            reviewed_at=self._clock(),
            admin_notes=notes,
            recheck=recheck,
        )
        if updated is None:
            raise InvalidTransitionError(f"Leave request {request_id} was already processed")

        log.info("leave_approved", request_id=updated.request_id, reviewer_id=str(reviewer_id))
        return updated

    def reject(
        self,
        *,
        current_role: Role,
        reviewer_id: str,
        request_id: str,
        admin_notes: str,
    ) -> LeaveRequest:
        self._require_reviewer(current_role)
        notes = require_length(admin_notes, "Rejection reason", REJECTION_NOTES_MIN_LENGTH, ADMIN_NOTES_MAX_LENGTH)
        self._load_pending(request_id)

        updated = self._leaves.transition_leave(
            request_id=str(request_id),
            status=LeaveStatus.REJECTED,
            reviewed_by=str(reviewer_id),
            reviewed_at=self._clock(),
            admin_notes=notes,
        )
        if updated is None:
            raise InvalidTransitionError(f"Leave request {request_id} was already processed")

        log.info("leave_rejected", request_id=updated.request_id, reviewer_id=str(reviewer_id))
        return updated

    def delete(self, *, current_role: Role, request_id: str) -> None:
        """Administrative override; not a workflow transition."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only Admin can delete leave requests")
        if not self._leaves.delete_leave(request_id=str(request_id)):
            raise NotFoundError(f"Leave request {request_id} not found")
        log.warning("leave_deleted", request_id=str(request_id))

    def get(self, *, current_role: Role, current_employee_id: Optional[str], request_id: str) -> LeaveRequest:
        req = self._leaves.get_leave(request_id=str(request_id))
        if not req:
            raise NotFoundError(f"Leave request {request_id} not found")
        self._require_self_or_reviewer(current_role, current_employee_id, req.employee_id)
        return req

    def list_requests(
        self,
        *,
        current_role: Role,
        current_employee_id: Optional[str],
        status: Optional[LeaveStatus] = None,
        employee_id: Optional[str] = None,
        leave_type: Optional[LeaveType] = None,
        year: Optional[int] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[LeaveRequest]:
        if current_role not in REVIEWER_ROLES:
            if not current_employee_id or (employee_id and employee_id != current_employee_id):
                raise AuthorizationError("You can only access your own leave requests")
            employee_id = current_employee_id
        if not 1 <= int(limit) <= DEFAULT_LIST_LIMIT:
            raise ValidationError(f"limit must be between 1 and {DEFAULT_LIST_LIMIT}")

        return self._leaves.list_leaves(
            status=status,
            employee_id=employee_id,
            leave_type=leave_type,
            year=year,
            limit=int(limit),
        )

    def summary_stats(self, *, current_role: Role) -> dict:
        self._require_reviewer(current_role)
        counts = self._leaves.count_by_status()
        return {
            "total_requests": sum(counts.values()),
            "pending_requests": counts.get(LeaveStatus.PENDING, 0),
            "approved_requests": counts.get(LeaveStatus.APPROVED, 0),
            "rejected_requests": counts.get(LeaveStatus.REJECTED, 0),
        }
