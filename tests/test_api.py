from datetime import date

import pytest

from fakes import FakeAttendanceRepo, FakeLeaveRepo, FakePayrollRecordRepo, make_leave
from hr_payroll.attendance.model import AttendanceRecord
from hr_payroll.container import build_services
from hr_payroll.main import create_app

REASON = "Attending a wedding in my hometown"


@pytest.fixture
def leaves_repo():
    return FakeLeaveRepo([make_leave("A", date(2024, 5, 1), date(2024, 5, 5))])


@pytest.fixture
def app(monkeypatch, employees_repo, leaves_repo, clock):
    monkeypatch.setenv("APP_ENV", "testing")
    records = [
        AttendanceRecord(attendance_id=1, employee_id="E1", work_date=date(2024, 6, 3), status="Present"),
        AttendanceRecord(attendance_id=2, employee_id="E1", work_date=date(2024, 6, 4), status="Absent"),
    ]
    container = build_services(
        employees_repo=employees_repo,
        attendance_repo=FakeAttendanceRepo(records),
        leaves_repo=leaves_repo,
        payroll_records_repo=FakePayrollRecordRepo(),
        clock=clock,
    )
    return create_app(container)


def _client(app, role="hr", employee_id=None):
    client = app.test_client()
    with client.session_transaction() as sess:
        sess["user_id"] = f"{role}-user"
        sess["role"] = role
        if employee_id:
            sess["employee_id"] = employee_id
    return client


def test_requires_login(app):
    resp = app.test_client().get("/api/payslips/E1/2024/6")
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_payslip(app):
    resp = _client(app).get("/api/payslips/E1/2024/6")
    body = resp.get_json()

    assert resp.status_code == 200
    assert body["success"] is True
    assert body["data"]["earnings"]["gross_salary"] == 78850
    assert body["data"]["attendance"]["absent_days"] == 1
    assert body["data"]["employee"]["id"] == "E1"


@pytest.mark.parametrize(
    "path, status, code",
    [
        ("/api/payslips/E1/2019/6", 400, "VALIDATION_ERROR"),
        ("/api/payslips/E1/2024/13", 400, "VALIDATION_ERROR"),
        ("/api/payslips/X/2024/6", 404, "NOT_FOUND"),
        ("/api/payslips/E3/2024/6", 422, "MISSING_COMPENSATION"),
    ],
)
def test_payslip_errors(app, path, status, code):
    resp = _client(app).get(path)
    assert resp.status_code == status
    assert resp.get_json()["error"]["code"] == code


def test_employee_cannot_read_another_payslip(app):
    resp = _client(app, role="employee", employee_id="E1").get("/api/payslips/E2/2024/6")
    assert resp.status_code == 403
    assert resp.get_json()["error"]["code"] == "FORBIDDEN"


def test_available_periods(app):
    resp = _client(app, role="employee", employee_id="E1").get("/api/payslips/E1?limit=3")
    assert resp.status_code == 200
    assert [p["period"] for p in resp.get_json()["data"]] == ["June 2024", "May 2024", "April 2024"]


def test_payroll_summary(app):
    resp = _client(app, role="admin").get("/api/payroll/summary/2024/6")
    data = resp.get_json()["data"]

    assert resp.status_code == 200
    assert data["total_employees"] == 2
    assert data["missing_compensation"] == ["E3"]


def test_attendance_summary(app):
    resp = _client(app, role="employee", employee_id="E1").get("/api/attendance/summary/E1?year=2024&month=6")
    data = resp.get_json()["data"]

    assert resp.status_code == 200
    assert data["present"] == 1
    assert data["absent"] == 1
    assert data["working_days"] == 20


def test_submit_and_approve_leave(app):
    employee = _client(app, role="employee", employee_id="E1")
    resp = employee.post(
        "/api/leaves",
        json={"start_date": "2024-06-10", "end_date": "2024-06-12", "leave_type": "Sick", "reason": REASON},
    )
    assert resp.status_code == 201
    request_id = resp.get_json()["data"]["id"]

    hr = _client(app)
    resp = hr.put(f"/api/leaves/{request_id}/approve", json={"admin_notes": "Get well soon"})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["status"] == "Approved"

    resp = hr.put(f"/api/leaves/{request_id}/approve", json={})
    assert resp.status_code == 409
    assert resp.get_json()["error"]["code"] == "INVALID_TRANSITION"


@pytest.mark.parametrize(
    "payload, status, code",
    [
        ({"start_date": "2024-06-10", "end_date": "2024-06-12", "leave_type": "Sick", "reason": "Sick"}, 400, "VALIDATION_ERROR"),
        ({"start_date": "2024-06-12", "end_date": "2024-06-10", "leave_type": "Sick", "reason": REASON}, 400, "INVALID_RANGE"),
        ({"start_date": "10/06/2024", "end_date": "2024-06-12", "leave_type": "Sick", "reason": REASON}, 400, "VALIDATION_ERROR"),
        ({"start_date": "2024-05-05", "end_date": "2024-05-07", "leave_type": "Sick", "reason": REASON}, 409, "LEAVE_OVERLAP"),
    ],
)
def test_submit_leave_errors(app, payload, status, code):
    resp = _client(app, role="employee", employee_id="E1").post("/api/leaves", json=payload)
    assert resp.status_code == status
    assert resp.get_json()["error"]["code"] == code


def test_reject_requires_notes(app):
    resp = _client(app).put("/api/leaves/A/reject", json={"admin_notes": "no"})
    assert resp.status_code == 400


def test_delete_is_admin_only(app, leaves_repo):
    assert _client(app).delete("/api/leaves/A").status_code == 403
    assert _client(app, role="admin").delete("/api/leaves/A").status_code == 200
    assert leaves_repo.get_leave(request_id="A") is None
    assert _client(app, role="admin").delete("/api/leaves/A").status_code == 404


def test_conflict_check(app):
    client = _client(app, role="employee", employee_id="E1")
    resp = client.get("/api/leaves/conflicts?start_date=2024-05-05&end_date=2024-05-08")
    assert resp.get_json()["data"] == {"has_conflict": True, "conflicting_ids": ["A"]}

    resp = client.get("/api/leaves/conflicts?start_date=2024-05-06&end_date=2024-05-08")
    assert resp.get_json()["data"]["has_conflict"] is False


def test_conflict_check_of_another_employee_is_forbidden(app):
    client = _client(app, role="employee", employee_id="E2")
    resp = client.get("/api/leaves/conflicts?employee_id=E1&start_date=2024-05-01&end_date=2024-05-31")

    assert resp.status_code == 403
    assert resp.get_json()["error"]["code"] == "FORBIDDEN"
    assert "data" not in resp.get_json()


def test_list_and_stats(app):
    employee = _client(app, role="employee", employee_id="E2")
    resp = employee.get("/api/leaves")
    assert resp.status_code == 200
    assert resp.get_json()["data"] == []
    assert employee.get("/api/leaves/A").status_code == 403
    assert employee.get("/api/leaves/summary/stats").status_code == 403

    hr = _client(app)
    resp = hr.get("/api/leaves?status=Approved")
    assert [l["id"] for l in resp.get_json()["data"]] == ["A"]
    assert hr.get("/api/leaves?status=Done").status_code == 400

    stats = hr.get("/api/leaves/summary/stats").get_json()["data"]
    assert stats["approved_requests"] == 1


def _create_record(client, **overrides):
    payload = {
        "employee_id": "E1",
        "pay_period_start": "2024-06-01",
        "pay_period_end": "2024-06-07",
        "hours_worked": 45,
        "overtime_hours": 5,
    }
    payload.update(overrides)
    return client.post("/api/payroll/records", json=payload)


def test_payroll_record_lifecycle(app):
    hr = _client(app)
    resp = _create_record(hr)
    assert resp.status_code == 201
    record = resp.get_json()["data"]
    assert record["status"] == "draft"
    assert record["pay_period"] == "2024-06"
    assert record["hourly_rate"] == 288.46

    assert hr.patch(f"/api/payroll/records/{record['id']}/pay").status_code == 409

    resp = hr.patch(f"/api/payroll/records/{record['id']}/process")
    assert resp.status_code == 200
    assert resp.get_json()["data"]["processed_by"] == "hr-user"

    resp = hr.patch(f"/api/payroll/records/{record['id']}/process")
    assert resp.status_code == 409
    assert resp.get_json()["error"]["code"] == "INVALID_TRANSITION"

    resp = hr.patch(f"/api/payroll/records/{record['id']}/pay")
    assert resp.get_json()["data"]["status"] == "paid"


@pytest.mark.parametrize(
    "overrides, status, code",
    [
        ({"hours_worked": -1}, 400, "INVALID_AMOUNT"),
        ({"hours_worked": None}, 400, "VALIDATION_ERROR"),
        ({"pay_period_end": "2024-05-01"}, 400, "INVALID_RANGE"),
        ({"employee_id": "X"}, 404, "NOT_FOUND"),
        ({"employee_id": "E3"}, 422, "MISSING_COMPENSATION"),
    ],
)
def test_create_payroll_record_errors(app, overrides, status, code):
    resp = _create_record(_client(app), **overrides)
    assert resp.status_code == status
    assert resp.get_json()["error"]["code"] == code


def test_payroll_records_for_employee(app):
    hr = _client(app)
    record_id = _create_record(hr).get_json()["data"]["id"]
    _create_record(hr, employee_id="E2")

    employee = _client(app, role="employee", employee_id="E1")
    assert _create_record(employee).status_code == 403
    assert employee.patch(f"/api/payroll/records/{record_id}/process").status_code == 403
    assert employee.get(f"/api/payroll/records/{record_id}").status_code == 200
    assert [r["employee_id"] for r in employee.get("/api/payroll/records").get_json()["data"]] == ["E1"]
    assert employee.get("/api/payroll/records/employee/E2").status_code == 403

    resp = hr.get("/api/payroll/records/employee/E2?pay_period=2024-06")
    assert resp.get_json()["meta"]["count"] == 1
    assert hr.get("/api/payroll/records/missing").status_code == 404
