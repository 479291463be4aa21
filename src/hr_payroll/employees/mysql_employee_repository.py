from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Compensation
from .repository import EmployeeRepository


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_compensation(self, employee_id: str) -> Optional[Compensation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT e.employee_id, e.employee_number, e.first_name, e.last_name,
                       e.base_salary, e.hourly_rate, e.hire_date,
                       d.name AS department, p.title AS designation
                FROM employees e
                LEFT JOIN departments d ON d.department_id = e.department_id
                LEFT JOIN positions p ON p.position_id = e.position_id
                WHERE e.employee_id=%s
                """,
                (employee_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            full_name = " ".join(part for part in (r.get("first_name"), r.get("last_name")) if part)
            return Compensation(
                employee_id=str(r["employee_id"]),
                full_name=full_name,
                base_salary=r.get("base_salary"),
                hire_date=r.get("hire_date"),
                hourly_rate=r.get("hourly_rate"),
                employee_number=r.get("employee_number"),
                department=r.get("department"),
                designation=r.get("designation"),
            )

    def list_employee_ids(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT employee_id FROM employees WHERE is_active=1 ORDER BY employee_number, employee_id")
            return [str(r["employee_id"]) for r in fetchall(cur)]
