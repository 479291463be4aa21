"""Example: compute a payslip through the service layer (no Flask).

Controllers are thin; the rules live in the services and the payslip computer.
"""

import importlib
import sys

from hr_payroll.container import build_container
from hr_payroll.core.enums import Role
from hr_payroll.settings import get_settings_module


def main(employee_id: str, year: int, month: int) -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, policy_overrides=settings.PAYROLL_POLICY)
    payslip = container.payslip_service.compute_payslip(
        current_role=Role.HR,
        current_employee_id=None,
        employee_id=employee_id,
        year=year,
        month=month,
    )
    print(payslip.to_dict())


if __name__ == "__main__":
    main(sys.argv[1], int(sys.argv[2]), int(sys.argv[3]))
