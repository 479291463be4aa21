from datetime import date
from decimal import Decimal

import pytest

from fakes import FIXED_NOW, FakeAttendanceRepo, FakeLeaveRepo, make_leave
from hr_payroll.attendance.model import AttendanceRecord
from hr_payroll.core.enums import Role
from hr_payroll.core.exceptions import (
    AuthorizationError,
    MissingCompensationError,
    NotFoundError,
    ValidationError,
)
from hr_payroll.payroll.service import PayslipService


def _june_present(employee_id, days):
    return [
        AttendanceRecord(attendance_id=i, employee_id=employee_id, work_date=date(2024, 6, d), status="Present")
        for i, d in enumerate(days, start=1)
    ]


@pytest.fixture
def service(employees_repo, clock):
    attendance = FakeAttendanceRepo(_june_present("E1", [3, 4, 5, 6, 7, 10, 11, 12, 13, 14]))
    leaves = FakeLeaveRepo([make_leave("L1", date(2024, 6, 17), date(2024, 6, 18))])
    return PayslipService(employees_repo, attendance, leaves, clock=clock)


def test_compute_payslip_gathers_inputs(service):
    result = service.compute_payslip(
        current_role=Role.EMPLOYEE, current_employee_id="E1", employee_id="E1", year=2024, month=6
    )

    assert result.attendance.working_days == 20
    assert result.attendance.attended_days == 10
    assert result.attendance.leave_days == 2
    assert result.earnings.salary_after_attendance == Decimal("39425")
    assert result.generated_at == FIXED_NOW


def test_employee_cannot_view_another_payslip(service):
    with pytest.raises(AuthorizationError):
        service.compute_payslip(
            current_role=Role.EMPLOYEE, current_employee_id="E1", employee_id="E2", year=2024, month=6
        )


def test_unknown_employee(service):
    with pytest.raises(NotFoundError):
        service.compute_payslip(current_role=Role.HR, current_employee_id=None, employee_id="X", year=2024, month=6)


def test_missing_salary(service):
    with pytest.raises(MissingCompensationError):
        service.compute_payslip(current_role=Role.HR, current_employee_id=None, employee_id="E3", year=2024, month=6)


def test_invalid_month(service):
    with pytest.raises(ValidationError):
        service.compute_payslip(current_role=Role.HR, current_employee_id=None, employee_id="E1", year=2024, month=0)


def test_available_periods_stop_at_hire_month(service):
    periods = service.list_available_periods(
        current_role=Role.EMPLOYEE,
        current_employee_id="E1",
        employee_id="E1",
        today=date(2024, 3, 15),
    )
    assert [(p.year, p.month) for p in periods] == [(2024, 3), (2024, 2), (2024, 1), (2023, 12)]
    assert periods[0].to_dict()["period"] == "March 2024"


def test_available_periods_respect_limit(service):
    periods = service.list_available_periods(
        current_role=Role.HR, current_employee_id=None, employee_id="E1", limit=2
    )
    assert [(p.year, p.month) for p in periods] == [(2024, 6), (2024, 5)]


@pytest.mark.parametrize("limit", [0, 51])
def test_available_periods_limit_bounds(service, limit):
    with pytest.raises(ValidationError):
        service.list_available_periods(current_role=Role.HR, current_employee_id=None, employee_id="E1", limit=limit)


def test_payroll_summary_skips_missing_compensation(service):
    summary = service.compute_payroll_summary(current_role=Role.ADMIN, year=2024, month=6)

    assert summary.total_employees == 2
    assert summary.missing_compensation == ("E3",)
    e1 = service.compute_payslip(current_role=Role.HR, current_employee_id=None, employee_id="E1", year=2024, month=6)
    e2 = service.compute_payslip(current_role=Role.HR, current_employee_id=None, employee_id="E2", year=2024, month=6)
    assert summary.total_gross_salary == e1.earnings.gross + e2.earnings.gross
    assert summary.total_net_salary == e1.net_salary + e2.net_salary


def test_payroll_summary_for_selected_employees(service):
    summary = service.compute_payroll_summary(current_role=Role.HR, year=2024, month=6, employee_ids=["E2"])
    assert summary.total_employees == 1
    assert summary.to_dict()["missing_compensation"] == []


def test_payroll_summary_requires_reviewer(service):
    with pytest.raises(AuthorizationError):
        service.compute_payroll_summary(current_role=Role.EMPLOYEE, year=2024, month=6)
