from __future__ import annotations

from typing import Sequence

from ..common.calendar_math import month_bounds
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_time
from .model import AttendanceRecord
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_month(self, employee_id: str, year: int, month: int) -> Sequence[AttendanceRecord]:
        first, last = month_bounds(year, month)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, employee_id, work_date, status, check_in_time, check_out_time, note
                FROM attendance
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date
                """,
                (employee_id, first, last),
            )
            rows = fetchall(cur)
            return [
                AttendanceRecord(
                    attendance_id=int(r["attendance_id"]),
                    employee_id=str(r["employee_id"]),
                    work_date=r["work_date"],
                    status=AttendanceStatus(r["status"]),
                    check_in_time=normalize_mysql_time(r.get("check_in_time")),
                    check_out_time=normalize_mysql_time(r.get("check_out_time")),
                    note=r.get("note"),
                )
                for r in rows
            ]
