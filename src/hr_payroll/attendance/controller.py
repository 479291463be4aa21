from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local
from ..common.http import ok
from ..common.session import (
    current_employee_id,
    current_role,
    login_required,
    parse_int,
    require_payroll_year,
)
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/summary/<employee_id>", methods=["GET"], endpoint="attendance_summary")
    @login_required
    def attendance_summary(employee_id: str):
        today = now_local().date()
        year = require_payroll_year(parse_int(request.args.get("year", today.year), "year"))
        month = parse_int(request.args.get("month", today.month), "month")

        summary = container.attendance_service.monthly_summary(
            current_role=current_role(),
            current_employee_id=current_employee_id(),
            employee_id=employee_id,
            year=year,
            month=month,
        )
        return ok(summary.to_dict())
