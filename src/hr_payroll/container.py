from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.workflow import LeaveApprovalWorkflow
from .payroll.hourly import HourlyPayCalculator
from .payroll.mysql_payroll_record_repository import MySQLPayrollRecordRepository
from .payroll.payslip import PayslipComputer
from .payroll.policy import PayrollPolicy
from .payroll.records import PayrollRecordService
from .payroll.repository import PayrollRecordRepository
from .payroll.service import PayslipService


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    leaves_repo: LeaveRepository
    payroll_records_repo: PayrollRecordRepository

    attendance_service: AttendanceService
    payslip_service: PayslipService
    leave_workflow: LeaveApprovalWorkflow
    payroll_record_service: PayrollRecordService

    conn: Optional[DatabaseConnection] = None


def build_services(
    *,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    leaves_repo: LeaveRepository,
    payroll_records_repo: PayrollRecordRepository,
    policy: Optional[PayrollPolicy] = None,
    conn: Optional[DatabaseConnection] = None,
    **service_kwargs,
) -> Container:
    """Wire services over any repositories (MySQL in the app, fakes in tests).

    ``service_kwargs`` (e.g. ``clock``) are forwarded to the services.
    """
    policy = policy or PayrollPolicy()
    computer = PayslipComputer(policy)
    return Container(
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        payroll_records_repo=payroll_records_repo,
        attendance_service=AttendanceService(attendance_repo, employees_repo),
        payslip_service=PayslipService(
            employees_repo, attendance_repo, leaves_repo, computer=computer, **service_kwargs
        ),
        leave_workflow=LeaveApprovalWorkflow(leaves_repo, employees_repo, **service_kwargs),
        payroll_record_service=PayrollRecordService(
            payroll_records_repo,
            employees_repo,
            calculator=HourlyPayCalculator(policy),
            **service_kwargs,
        ),
        conn=conn,
    )


def build_container(*, db_config: dict, policy_overrides: Optional[Mapping[str, object]] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    return build_services(
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        payroll_records_repo=MySQLPayrollRecordRepository(conn),
        policy=PayrollPolicy.from_mapping(policy_overrides),
        conn=conn,
    )
