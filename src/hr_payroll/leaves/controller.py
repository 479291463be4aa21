from __future__ import annotations

from enum import Enum
from typing import Optional, Type, TypeVar

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
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def _optional_enum(enum_type: Type[E], value: Optional[str], field_name: str) -> Optional[E]:
    if not value:
        return None
    try:
        return enum_type(value)
    except ValueError:
        raise ValidationError(f"Invalid {field_name}: {value}")


def _json_body() -> dict:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def register(app: Flask, container: Container) -> None:
    workflow = container.leave_workflow

    @app.route("/api/leaves", methods=["GET"], endpoint="list_leaves")
    @login_required
    def list_leaves():
        year = request.args.get("year")
        leaves = workflow.list_requests(
            current_role=current_role(),
            current_employee_id=current_employee_id(),
            status=_optional_enum(LeaveStatus, request.args.get("status"), "status"),
            employee_id=request.args.get("employee_id") or None,
            leave_type=_optional_enum(LeaveType, request.args.get("leave_type"), "leave_type"),
            year=require_payroll_year(parse_int(year, "year")) if year else None,
            limit=parse_int(request.args.get("limit", DEFAULT_LIST_LIMIT), "limit"),
        )
        return ok([leave.to_dict() for leave in leaves], count=len(leaves))

    @app.route("/api/leaves", methods=["POST"], endpoint="submit_leave")
    @login_required
    def submit_leave():
        body = _json_body()
        leave = workflow.submit(
            current_role=current_role(),
            current_employee_id=current_employee_id(),
            employee_id=str(body.get("employee_id") or current_employee_id() or ""),
            start_date=parse_iso_date(body.get("start_date", ""), "start_date"),
            end_date=parse_iso_date(body.get("end_date", ""), "end_date"),
            leave_type=body.get("leave_type", ""),
            reason=body.get("reason", ""),
        )
        return ok(leave.to_dict(), status=201, message="Leave request submitted successfully")

    @app.route("/api/leaves/conflicts", methods=["GET"], endpoint="check_leave_conflict")
    @login_required
    def check_leave_conflict():
        employee_id = request.args.get("employee_id") or current_employee_id() or ""
        report = workflow.find_conflicts(
            current_role=current_role(),
            current_employee_id=current_employee_id(),
            employee_id=employee_id,
            start_date=parse_iso_date(request.args.get("start_date", ""), "start_date"),
            end_date=parse_iso_date(request.args.get("end_date", ""), "end_date"),
        )
        return ok({"has_conflict": report.has_conflict, "conflicting_ids": report.conflicting_ids})

    @app.route("/api/leaves/summary/stats", methods=["GET"], endpoint="leave_stats")
    @login_required
    def leave_stats():
        return ok(workflow.summary_stats(current_role=current_role()))

    @app.route("/api/leaves/<request_id>", methods=["GET"], endpoint="get_leave")
    @login_required
    def get_leave(request_id: str):
        leave = workflow.get(
            current_role=current_role(),
            current_employee_id=current_employee_id(),
            request_id=request_id,
        )
        return ok(leave.to_dict())

    @app.route("/api/leaves/<request_id>/approve", methods=["PUT"], endpoint="approve_leave")
    @login_required
    def approve_leave(request_id: str):
        body = request.get_json(silent=True) or {}
        leave = workflow.approve(
            current_role=current_role(),
            reviewer_id=current_user_id(),
            request_id=request_id,
            admin_notes=body.get("admin_notes"),
        )
        return ok(leave.to_dict(), message="Leave request approved successfully")

    @app.route("/api/leaves/<request_id>/reject", methods=["PUT"], endpoint="reject_leave")
    @login_required
    def reject_leave(request_id: str):
        body = _json_body()
        leave = workflow.reject(
            current_role=current_role(),
            reviewer_id=current_user_id(),
            request_id=request_id,
            admin_notes=body.get("admin_notes", ""),
        )
        return ok(leave.to_dict(), message="Leave request rejected successfully")

    @app.route("/api/leaves/<request_id>", methods=["DELETE"], endpoint="delete_leave")
    @login_required
    def delete_leave(request_id: str):
        workflow.delete(current_role=current_role(), request_id=request_id)
        return ok(None, message="Leave request deleted successfully")
