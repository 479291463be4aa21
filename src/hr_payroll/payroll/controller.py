from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import ok
from ..common.session import (
    current_employee_id,
    current_role,
    current_user_id,
    login_required,
    parse_int,
    require_payroll_year,
)
from ..container import Container
from ..core.constants import DEFAULT_LIST_LIMIT, DEFAULT_PAYSLIP_HISTORY
from ..core.exceptions import ValidationError


def _json_body() -> dict:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def register(app: Flask, container: Container) -> None:
    @app.route("/api/payslips/<employee_id>/<int:year>/<int:month>", methods=["GET"], endpoint="payslip_detail")
    @login_required
    def payslip_detail(employee_id: str, year: int, month: int):
        result = container.payslip_service.compute_payslip(
            current_role=current_role(),
            current_employee_id=current_employee_id(),
            employee_id=employee_id,
            year=require_payroll_year(year),
            month=month,
        )
        return ok(result.to_dict())

    @app.route("/api/payslips/<employee_id>", methods=["GET"], endpoint="payslip_periods")
    @login_required
    def payslip_periods(employee_id: str):
        limit = parse_int(request.args.get("limit", DEFAULT_PAYSLIP_HISTORY), "limit")
        periods = container.payslip_service.list_available_periods(
            current_role=current_role(),
            current_employee_id=current_employee_id(),
            employee_id=employee_id,
            limit=limit,
        )
        return ok([p.to_dict() for p in periods])

    @app.route("/api/payroll/summary/<int:year>/<int:month>", methods=["GET"], endpoint="payroll_summary")
    @login_required
    def payroll_summary(year: int, month: int):
        summary = container.payslip_service.compute_payroll_summary(
            current_role=current_role(),
            year=require_payroll_year(year),
            month=month,
        )
        return ok(summary.to_dict())

    records = container.payroll_record_service

    def _list_records(employee_id):
        year = request.args.get("year")
        rows = records.list_records(
            current_role=current_role(),
            current_employee_id=current_employee_id(),
            employee_id=employee_id,
            status=request.args.get("status") or None,
            year=require_payroll_year(parse_int(year, "year")) if year else None,
            pay_period=request.args.get("pay_period") or None,
            limit=parse_int(request.args.get("limit", DEFAULT_LIST_LIMIT), "limit"),
        )
        return ok([r.to_dict() for r in rows], count=len(rows))

    @app.route("/api/payroll/records", methods=["GET"], endpoint="list_payroll_records")
    @login_required
    def list_payroll_records():
        return _list_records(request.args.get("employee_id") or None)

    @app.route("/api/payroll/records/employee/<employee_id>", methods=["GET"], endpoint="employee_payroll_records")
    @login_required
    def employee_payroll_records(employee_id: str):
        return _list_records(employee_id)

    @app.route("/api/payroll/records", methods=["POST"], endpoint="create_payroll_record")
    @login_required
    def create_payroll_record():
        body = _json_body()
        if body.get("hours_worked") is None:
            raise ValidationError("hours_worked is required")
        record = records.create(
            current_role=current_role(),
            created_by=current_user_id(),
            employee_id=str(body.get("employee_id") or ""),
            period_start=parse_iso_date(body.get("pay_period_start", ""), "pay_period_start"),
            period_end=parse_iso_date(body.get("pay_period_end", ""), "pay_period_end"),
            hours_worked=body["hours_worked"],
            overtime_hours=body.get("overtime_hours", 0),
            bonuses=body.get("bonuses", 0),
            deductions=body.get("deductions", 0),
            tax_deductions=body.get("tax_deductions", 0),
        )
        return ok(record.to_dict(), status=201, message="Payroll record created successfully")

    @app.route("/api/payroll/records/<record_id>", methods=["GET"], endpoint="payroll_record_detail")
    @login_required
    def payroll_record_detail(record_id: str):
        record = records.get(
            current_role=current_role(),
            current_employee_id=current_employee_id(),
            record_id=record_id,
        )
        return ok(record.to_dict())

    @app.route("/api/payroll/records/<record_id>/process", methods=["PATCH"], endpoint="process_payroll_record")
    @login_required
    def process_payroll_record(record_id: str):
        record = records.process(current_role=current_role(), actor_id=current_user_id(), record_id=record_id)
        return ok(record.to_dict(), message="Payroll record processed successfully")

    @app.route("/api/payroll/records/<record_id>/pay", methods=["PATCH"], endpoint="pay_payroll_record")
    @login_required
    def pay_payroll_record(record_id: str):
        record = records.mark_paid(current_role=current_role(), actor_id=current_user_id(), record_id=record_id)
        return ok(record.to_dict(), message="Payroll record marked as paid successfully")
