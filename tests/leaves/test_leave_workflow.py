import threading
from datetime import date

import pytest

from fakes import FIXED_NOW, FakeLeaveRepo, make_leave
from hr_payroll.core.enums import LeaveStatus, LeaveType, Role
from hr_payroll.core.exceptions import (
    AuthorizationError,
    InvalidRangeError,
    InvalidTransitionError,
    NotFoundError,
    OverlapError,
    ValidationError,
)
from hr_payroll.leaves.workflow import LeaveApprovalWorkflow

REASON = "Visiting family out of town"


@pytest.fixture
def workflow(leaves_repo, employees_repo, clock):
    return LeaveApprovalWorkflow(leaves_repo, employees_repo, clock=clock)


def _submit(workflow, start, end, *, employee_id="E1", reason=REASON, leave_type="Annual"):
    return workflow.submit(
        current_role=Role.EMPLOYEE,
        current_employee_id=employee_id,
        employee_id=employee_id,
        start_date=start,
        end_date=end,
        leave_type=leave_type,
        reason=reason,
    )


def _approve(workflow, request_id, notes=None):
    return workflow.approve(current_role=Role.HR, reviewer_id="hr-1", request_id=request_id, admin_notes=notes)


def test_submit_creates_pending_request(workflow):
    leave = _submit(workflow, date(2024, 5, 1), date(2024, 5, 3), reason="  " + REASON + "  ")

    assert leave.status == LeaveStatus.PENDING
    assert leave.leave_type == LeaveType.ANNUAL
    assert leave.reason == REASON
    assert leave.submitted_at == FIXED_NOW
    assert leave.day_count == 3


def test_short_reason_is_rejected(workflow, leaves_repo):
    with pytest.raises(ValidationError):
        _submit(workflow, date(2024, 5, 1), date(2024, 5, 3), reason="Sick.")
    assert leaves_repo.count_by_status() == {}


def test_reversed_dates_are_rejected(workflow):
    with pytest.raises(InvalidRangeError):
        _submit(workflow, date(2024, 5, 3), date(2024, 5, 1))


def test_unknown_leave_type_is_rejected(workflow):
    with pytest.raises(ValidationError):
        _submit(workflow, date(2024, 5, 1), date(2024, 5, 3), leave_type="Sabbatical")


def test_employee_cannot_submit_for_someone_else(workflow):
    with pytest.raises(AuthorizationError):
        workflow.submit(
            current_role=Role.EMPLOYEE,
            current_employee_id="E1",
            employee_id="E2",
            start_date=date(2024, 5, 1),
            end_date=date(2024, 5, 3),
            leave_type="Annual",
            reason=REASON,
        )


def test_unknown_employee_cannot_submit(workflow):
    with pytest.raises(NotFoundError):
        workflow.submit(
            current_role=Role.HR,
            current_employee_id=None,
            employee_id="X",
            start_date=date(2024, 5, 1),
            end_date=date(2024, 5, 3),
            leave_type="Annual",
            reason=REASON,
        )


def test_submit_overlapping_approved_leave_fails(clock, employees_repo):
    repo = FakeLeaveRepo([make_leave("A", date(2024, 5, 1), date(2024, 5, 5))])
    workflow = LeaveApprovalWorkflow(repo, employees_repo, clock=clock)

    with pytest.raises(OverlapError):
        _submit(workflow, date(2024, 5, 5), date(2024, 5, 7))
    assert _submit(workflow, date(2024, 5, 6), date(2024, 5, 7)).status == LeaveStatus.PENDING


def test_approve_records_reviewer(workflow):
    leave = _submit(workflow, date(2024, 5, 1), date(2024, 5, 3))
    approved = _approve(workflow, leave.request_id, notes="Enjoy")

    assert approved.status == LeaveStatus.APPROVED
    assert approved.reviewed_by == "hr-1"
    assert approved.reviewed_at == FIXED_NOW
    assert approved.admin_notes == "Enjoy"
    assert workflow.check_conflict(
        current_role=Role.EMPLOYEE,
        current_employee_id="E1",
        employee_id="E1",
        start_date=date(2024, 5, 3),
        end_date=date(2024, 5, 4),
    )


def test_approving_twice_is_an_invalid_transition(workflow):
    leave = _submit(workflow, date(2024, 5, 1), date(2024, 5, 3))
    _approve(workflow, leave.request_id)

    with pytest.raises(InvalidTransitionError):
        _approve(workflow, leave.request_id)


def test_rejected_request_cannot_be_approved(workflow):
    leave = _submit(workflow, date(2024, 5, 1), date(2024, 5, 3))
    workflow.reject(current_role=Role.ADMIN, reviewer_id="admin", request_id=leave.request_id, admin_notes="Too busy this week")

    with pytest.raises(InvalidTransitionError):
        _approve(workflow, leave.request_id)


def test_employee_cannot_approve(workflow):
    leave = _submit(workflow, date(2024, 5, 1), date(2024, 5, 3))
    with pytest.raises(AuthorizationError):
        workflow.approve(current_role=Role.EMPLOYEE, reviewer_id="E1", request_id=leave.request_id)


def test_approving_missing_request(workflow):
    with pytest.raises(NotFoundError):
        _approve(workflow, "nope")


def test_approve_notes_max_length(workflow):
    leave = _submit(workflow, date(2024, 5, 1), date(2024, 5, 3))
    with pytest.raises(ValidationError):
        _approve(workflow, leave.request_id, notes="x" * 501)


@pytest.mark.parametrize("first, second", [(0, 1), (1, 0)])
def test_overlapping_pending_requests_approve_only_once(workflow, leaves_repo, first, second):
    requests = [
        _submit(workflow, date(2024, 5, 1), date(2024, 5, 5)),
        _submit(workflow, date(2024, 5, 5), date(2024, 5, 7)),
    ]

    _approve(workflow, requests[first].request_id)
    with pytest.raises(OverlapError):
        _approve(workflow, requests[second].request_id)

    assert leaves_repo.get_leave(request_id=requests[second].request_id).status == LeaveStatus.PENDING
    assert len(leaves_repo.list_approved_for_employee(employee_id="E1")) == 1


def test_concurrent_approvals_of_overlapping_requests(workflow, leaves_repo):
    requests = [
        _submit(workflow, date(2024, 5, 1), date(2024, 5, 5)),
        _submit(workflow, date(2024, 5, 3), date(2024, 5, 9)),
    ]
    barrier = threading.Barrier(len(requests))
    outcomes = []

    def approve(request_id):
        barrier.wait()
        try:
            _approve(workflow, request_id)
            outcomes.append("approved")
        except OverlapError:
            outcomes.append("overlap")

    threads = [threading.Thread(target=approve, args=(r.request_id,)) for r in requests]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(outcomes) == ["approved", "overlap"]
    assert len(leaves_repo.list_approved_for_employee(employee_id="E1")) == 1


@pytest.mark.parametrize("notes", ["", "Too short", "x" * 501])
def test_reject_notes_length(workflow, notes):
    leave = _submit(workflow, date(2024, 5, 1), date(2024, 5, 3))
    with pytest.raises(ValidationError):
        workflow.reject(current_role=Role.HR, reviewer_id="hr-1", request_id=leave.request_id, admin_notes=notes)


def test_reject_skips_overlap_check(clock, employees_repo):
    repo = FakeLeaveRepo([make_leave("A", date(2024, 5, 1), date(2024, 5, 5))])
    pending = make_leave("P", date(2024, 5, 4), date(2024, 5, 6), status=LeaveStatus.PENDING)
    repo._leaves[pending.request_id] = pending
    workflow = LeaveApprovalWorkflow(repo, employees_repo, clock=clock)

    rejected = workflow.reject(
        current_role=Role.HR, reviewer_id="hr-1", request_id="P", admin_notes="Overlaps approved leave"
    )
    assert rejected.status == LeaveStatus.REJECTED


def test_delete_is_admin_only(workflow, leaves_repo):
    leave = _submit(workflow, date(2024, 5, 1), date(2024, 5, 3))

    with pytest.raises(AuthorizationError):
        workflow.delete(current_role=Role.HR, request_id=leave.request_id)

    workflow.delete(current_role=Role.ADMIN, request_id=leave.request_id)
    assert leaves_repo.get_leave(request_id=leave.request_id) is None

    with pytest.raises(NotFoundError):
        workflow.delete(current_role=Role.ADMIN, request_id=leave.request_id)


def test_employee_list_is_scoped_to_self(workflow):
    _submit(workflow, date(2024, 5, 1), date(2024, 5, 3))
    _submit(workflow, date(2024, 5, 1), date(2024, 5, 3), employee_id="E2")

    own = workflow.list_requests(current_role=Role.EMPLOYEE, current_employee_id="E1")
    assert [l.employee_id for l in own] == ["E1"]

    with pytest.raises(AuthorizationError):
        workflow.list_requests(current_role=Role.EMPLOYEE, current_employee_id="E1", employee_id="E2")

    everyone = workflow.list_requests(current_role=Role.HR, current_employee_id=None, status=LeaveStatus.PENDING)
    assert len(everyone) == 2


def test_list_limit_bounds(workflow):
    with pytest.raises(ValidationError):
        workflow.list_requests(current_role=Role.HR, current_employee_id=None, limit=0)


def test_get_checks_ownership(workflow):
    leave = _submit(workflow, date(2024, 5, 1), date(2024, 5, 3), employee_id="E2")

    with pytest.raises(AuthorizationError):
        workflow.get(current_role=Role.EMPLOYEE, current_employee_id="E1", request_id=leave.request_id)
    assert workflow.get(current_role=Role.HR, current_employee_id=None, request_id=leave.request_id) == leave


def test_summary_stats(workflow):
    a = _submit(workflow, date(2024, 5, 1), date(2024, 5, 3))
    b = _submit(workflow, date(2024, 6, 1), date(2024, 6, 3))
    _submit(workflow, date(2024, 7, 1), date(2024, 7, 3))
    _approve(workflow, a.request_id)
    workflow.reject(current_role=Role.HR, reviewer_id="hr-1", request_id=b.request_id, admin_notes="Project deadline")

    assert workflow.summary_stats(current_role=Role.ADMIN) == {
        "total_requests": 3,
        "pending_requests": 1,
        "approved_requests": 1,
        "rejected_requests": 1,
    }
    with pytest.raises(AuthorizationError):
        workflow.summary_stats(current_role=Role.EMPLOYEE)


def test_employee_cannot_check_conflicts_of_someone_else(workflow):
    with pytest.raises(AuthorizationError):
        workflow.find_conflicts(
            current_role=Role.EMPLOYEE,
            current_employee_id="E2",
            employee_id="E1",
            start_date=date(2024, 5, 1),
            end_date=date(2024, 5, 31),
        )

    report = workflow.find_conflicts(
        current_role=Role.HR,
        current_employee_id=None,
        employee_id="E1",
        start_date=date(2024, 5, 1),
        end_date=date(2024, 5, 31),
    )
    assert not report.has_conflict


def test_stored_leave_with_short_reason_still_loads(employees_repo, clock):
    legacy = make_leave("OLD", date(2024, 6, 3), date(2024, 6, 4), reason="Sick")
    workflow = LeaveApprovalWorkflow(FakeLeaveRepo([legacy]), employees_repo, clock=clock)

    listed = workflow.list_requests(current_role=Role.HR, current_employee_id=None)
    assert [l.request_id for l in listed] == ["OLD"]
    assert listed[0].to_dict()["reason"] == "Sick"
