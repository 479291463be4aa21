from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Dict, Optional, Sequence
from uuid import uuid4

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveRequest, NewLeaveRequest
from .repository import LeaveRepository, RecheckFn

_COLUMNS = """
    request_id, employee_id, start_date, end_date, leave_type, reason,
    status, admin_notes, submitted_at, reviewed_at, reviewed_by
"""


def _row_to_leave(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=str(r["request_id"]),
        employee_id=str(r["employee_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        leave_type=LeaveType(r["leave_type"]),
        reason=r["reason"],
        status=LeaveStatus(r["status"]),
        submitted_at=r["submitted_at"],
        admin_notes=r.get("admin_notes"),
        reviewed_at=r.get("reviewed_at"),
        reviewed_by=r.get("reviewed_by"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_leave(self, *, request: NewLeaveRequest, submitted_at: datetime) -> LeaveRequest:
        request_id = str(uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leaves(request_id, employee_id, start_date, end_date, leave_type, reason, status, submitted_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    request_id,
                    request.employee_id,
                    request.start_date,
                    request.end_date,
                    request.leave_type.value,
                    request.reason,
                    LeaveStatus.PENDING.value,
                    submitted_at,
                ),
            )
        return LeaveRequest(
            request_id=request_id,
            employee_id=request.employee_id,
            start_date=request.start_date,
            end_date=request.end_date,
            leave_type=request.leave_type,
            reason=request.reason,
            status=LeaveStatus.PENDING,
            submitted_at=submitted_at,
        )

    def get_leave(self, *, request_id: str) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leaves WHERE request_id=%s", (request_id,))
            r = fetchone(cur)
            return _row_to_leave(r) if r else None

    def list_approved_for_employee(self, *, employee_id: str) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM leaves
                WHERE employee_id=%s AND status=%s
                ORDER BY start_date
                """,
                (employee_id, LeaveStatus.APPROVED.value),
            )
            return [_row_to_leave(r) for r in fetchall(cur)]

    def list_leaves(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        employee_id: Optional[str] = None,
        leave_type: Optional[LeaveType] = None,
        year: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(employee_id)
        if leave_type is not None:
            clauses.append("leave_type=%s")
            params.append(leave_type.value)
        if year is not None:
            clauses.append("start_date BETWEEN %s AND %s")
            params.extend([date(int(year), 1, 1), date(int(year), 12, 31)])

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM leaves
                WHERE {where}
                ORDER BY submitted_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_row_to_leave(r) for r in fetchall(cur)]

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
        # One transaction: lock every leave row of the employee so concurrent
        # approvals for that employee queue behind each other.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT employee_id FROM leaves WHERE request_id=%s", (request_id,))
            owner = fetchone(cur)
            if not owner:
                return None

            cur.execute(
                f"SELECT {_COLUMNS} FROM leaves WHERE employee_id=%s FOR UPDATE",
                (owner["employee_id"],),
            )
            rows = [_row_to_leave(r) for r in fetchall(cur)]
            current = next((r for r in rows if r.request_id == request_id), None)
            if current is None or current.status != LeaveStatus.PENDING:
                return None

            if recheck is not None:
                recheck(current, [r for r in rows if r.status == LeaveStatus.APPROVED])

            cur.execute(
                """
                UPDATE leaves
                SET status=%s, admin_notes=%s, reviewed_by=%s, reviewed_at=%s
                WHERE request_id=%s AND status=%s
                """,
                (status.value, admin_notes, reviewed_by, reviewed_at, request_id, LeaveStatus.PENDING.value),
            )
            if cur.rowcount != 1:
                return None

        return replace(
            current,
            status=status,
            admin_notes=admin_notes,
            reviewed_at=reviewed_at,
            reviewed_by=reviewed_by,
        )

    def delete_leave(self, *, request_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leaves WHERE request_id=%s", (request_id,))
            return cur.rowcount == 1

    def count_by_status(self) -> Dict[LeaveStatus, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT status, COUNT(*) AS n FROM leaves GROUP BY status")
            return {LeaveStatus(r["status"]): int(r["n"]) for r in fetchall(cur)}
