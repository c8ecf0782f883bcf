import pytest

from src.hr_engine.hr_engine.main import create_app


@pytest.fixture()
def client():
    app = create_app("config.testing")
    return app.test_client()


def _employee(client, **extra):
    payload = {"tenant_id": 1, "first_name": "Sami", "last_name": "Gharbi", "base_salary": 2000, **extra}
    resp = client.post("/api/employees", json=payload)
    assert resp.status_code == 201
    return resp.get_json()["data"]["id"]


def test_employee_roundtrip(client):
    employee_id = _employee(client, annual_leave_balance=20)

    body = client.get(f"/api/employees/{employee_id}").get_json()

    assert body["success"] is True
    assert body["data"]["annual_leave_balance"] == 20


def test_unknown_employee_is_404(client):
    resp = client.get("/api/employees/99")

    assert resp.status_code == 404
    assert resp.get_json()["error"]["code"] == "NOT_FOUND"


def test_validation_error_is_400(client):
    resp = client.post("/api/employees", json={"tenant_id": 1, "first_name": "", "last_name": "X"})

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_non_json_body_is_400(client):
    resp = client.post("/api/employees", data="nope", content_type="text/plain")

    assert resp.status_code == 400


def test_leave_request_reports_balance(client):
    employee_id = _employee(client, annual_leave_balance=20)

    resp = client.post(
        "/api/leave-requests",
        json={"employee_id": employee_id, "type": "Annual", "status": "Approved",
              "start_date": "2024-03-04", "end_date": "2024-03-08"},
    )

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["data"]["days_deducted"] == 5
    assert body["meta"]["annual_leave_balance"] == 15


def test_insufficient_balance_is_409(client):
    employee_id = _employee(client, annual_leave_balance=2)

    resp = client.post(
        "/api/leave-requests",
        json={"employee_id": employee_id, "type": "Annual", "status": "Approved",
              "start_date": "2024-03-04", "end_date": "2024-03-06"},
    )

    assert resp.status_code == 409
    assert resp.get_json()["error"]["code"] == "INSUFFICIENT_BALANCE"
    assert client.get(f"/api/employees/{employee_id}").get_json()["data"]["annual_leave_balance"] == 2


def test_schedule_defaults_until_saved(client):
    body = client.get("/api/settings/1/schedule").get_json()
    assert body["meta"]["configured"] is False
    assert len(body["data"]) == 7

    resp = client.put("/api/settings/1/schedule", json={"daily_settings": [{"day": "Saturday", "is_work_day": False}]})
    assert resp.status_code == 200

    body = client.get("/api/settings/1/schedule").get_json()
    assert body["meta"]["configured"] is True


def test_attendance_metrics_and_payroll(client):
    employee_id = _employee(client)
    assert client.put("/api/settings/1/schedule", json={"daily_settings": []}).status_code == 200

    resp = client.post(
        "/api/attendance",
        json={"employee_id": employee_id, "date": "2024-03-04", "check_in_time": "08:15",
              "check_out_time": "17:30", "status": "Present"},
    )
    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert (data["worked_hours"], data["late_minutes"], data["overtime_hours"]) == (8.25, 15, 0.25)

    resp = client.post("/api/payroll", json={"employee_id": employee_id, "month": 3, "year": 2024, "base_salary": 2000})
    assert resp.status_code == 201
    payroll = resp.get_json()["data"]
    assert payroll["overtime_pay"] == 0.38
    assert payroll["net_pay"] == 2000.38


def test_reports_require_a_tenant(client):
    resp = client.get("/api/reports/leave-types")

    assert resp.status_code == 400


def test_reports_are_tenant_scoped(client):
    mine = _employee(client, department="IT")
    theirs = _employee(client, tenant_id=2)
    for employee_id in (mine, theirs):
        client.post(
            "/api/leave-requests",
            json={"employee_id": employee_id, "type": "Sick", "start_date": "2024-03-04", "end_date": "2024-03-04"},
        )

    body = client.get("/api/reports/leave-types?tenant_id=1").get_json()
    assert body["data"] == [{"name": "Sick", "value": 1}]

    body = client.get("/api/reports/departments?tenant_id=1").get_json()
    assert body["data"] == [{"department": "IT", "count": 1}]

    body = client.get("/api/reports/totals?tenant_id=1").get_json()
    assert body["data"]["employees"] == 1
    assert body["data"]["leave_requests"] == 1


def test_holidays_crud(client):
    resp = client.post("/api/holidays", json={"tenant_id": 1, "name": "Evacuation Day", "date": "2024-10-15"})
    assert resp.status_code == 201
    holiday_id = resp.get_json()["data"]["id"]

    assert client.put(f"/api/holidays/{holiday_id}", json={"name": "Evacuation"}).status_code == 200
    body = client.get("/api/holidays?tenant_id=1").get_json()
    assert [h["name"] for h in body["data"]] == ["Evacuation"]

    assert client.delete(f"/api/holidays/{holiday_id}").status_code == 200
    assert client.get("/api/holidays?tenant_id=1").get_json()["data"] == []


def test_employee_edit_with_outdated_version_is_409(client):
    employee_id = _employee(client)
    assert client.put(f"/api/employees/{employee_id}", json={"position": "Clerk"}).status_code == 200

    resp = client.put(f"/api/employees/{employee_id}", json={"annual_leave_balance": 5, "version": 0})

    assert resp.status_code == 409
    assert resp.get_json()["error"]["code"] == "STALE_RECORD"


def test_employee_delete(client):
    employee_id = _employee(client)

    assert client.delete(f"/api/employees/{employee_id}").status_code == 200
    assert client.get(f"/api/employees/{employee_id}").status_code == 404
