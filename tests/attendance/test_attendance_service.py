from __future__ import annotations

from datetime import date

import pytest

from src.hr_engine.hr_engine.container import build_container
from src.hr_engine.hr_engine.core.constants import ATTENDANCE
from src.hr_engine.hr_engine.core.enums import AttendanceStatus
from src.hr_engine.hr_engine.core.exceptions import ValidationError


def _setup(with_schedule: bool = True):
    c = build_container()
    employee = c.employee_service.create({"tenant_id": 1, "first_name": "Amel", "last_name": "Ben Salah"})
    if with_schedule:
        c.settings_service.save_schedule(1, [])
    return c, employee


def test_present_record_stores_computed_metrics():
    c, employee = _setup()

    rec = c.attendance_service.create(
        {
            "employee_id": employee.employee_id,
            "date": "2024-01-01",
            "check_in_time": "08:15",
            "check_out_time": "17:30",
            "status": "Present",
        }
    )

    assert rec.worked_hours == 8.25
    assert rec.late_minutes == 15
    assert rec.overtime_hours == 0.25
    assert c.store.find_one(ATTENDANCE, rec.attendance_id)["late_minutes"] == 15


def test_non_present_status_stores_zeros():
    c, employee = _setup()

    rec = c.attendance_service.create(
        {
            "employee_id": employee.employee_id,
            "date": "2024-01-01",
            "check_in_time": "08:15",
            "check_out_time": "17:30",
            "status": "Leave",
        }
    )

    assert (rec.worked_hours, rec.late_minutes, rec.overtime_hours) == (0, 0, 0)
    assert rec.status == AttendanceStatus.LEAVE


def test_tenant_without_schedule_gets_zeros():
    c, employee = _setup(with_schedule=False)

    rec = c.attendance_service.create(
        {"employee_id": employee.employee_id, "date": "2024-01-01", "check_in_time": "08:00", "check_out_time": "18:00"}
    )

    assert rec.worked_hours == 0


def test_edit_recomputes_metrics():
    c, employee = _setup()
    rec = c.attendance_service.create(
        {"employee_id": employee.employee_id, "date": "2024-01-01", "check_in_time": "08:00", "check_out_time": "17:00"}
    )
    assert rec.worked_hours == 8.0

    rec = c.attendance_service.update(rec.attendance_id, {"check_out_time": "19:00"})

    assert rec.worked_hours == 10.0
    assert rec.overtime_hours == 2.0
    assert rec.check_in_time.strftime("%H:%M") == "08:00"


def test_approving_late_arrival_refreshes_that_day():
    c, employee = _setup()
    rec = c.attendance_service.create(
        {"employee_id": employee.employee_id, "date": "2024-01-01", "check_in_time": "08:40", "check_out_time": "17:00"}
    )
    assert rec.late_minutes == 40

    auth = c.authorization_service.create(
        {"employee_id": employee.employee_id, "type": "Late Arrival", "date": "2024-01-01", "status": "Submitted"}
    )
    assert c.attendance_service.get(rec.attendance_id).late_minutes == 40

    c.authorization_service.update(auth.authorization_id, {"status": "Approved"})
    assert c.attendance_service.get(rec.attendance_id).late_minutes == 0

    c.authorization_service.delete(auth.authorization_id)
    assert c.attendance_service.get(rec.attendance_id).late_minutes == 40


def test_moving_authorization_to_another_day_restores_the_first():
    c, employee = _setup()
    monday = c.attendance_service.create(
        {"employee_id": employee.employee_id, "date": "2024-01-01", "check_in_time": "08:30", "check_out_time": "17:00"}
    )
    tuesday = c.attendance_service.create(
        {"employee_id": employee.employee_id, "date": "2024-01-02", "check_in_time": "08:10", "check_out_time": "17:00"}
    )
    auth = c.authorization_service.create(
        {"employee_id": employee.employee_id, "type": "Late Arrival", "date": "2024-01-01", "status": "Approved"}
    )
    assert c.attendance_service.get(monday.attendance_id).late_minutes == 0

    c.authorization_service.update(auth.authorization_id, {"date": "2024-01-02"})

    assert c.attendance_service.get(monday.attendance_id).late_minutes == 30
    assert c.attendance_service.get(tuesday.attendance_id).late_minutes == 0


def test_find_in_month_filters_by_period():
    c, employee = _setup()
    for d in ("2024-01-31", "2024-02-01", "2023-02-15"):
        c.attendance_service.create(
            {"employee_id": employee.employee_id, "date": d, "check_in_time": "08:00", "check_out_time": "17:00"}
        )

    rows = c.attendance_service.find_in_month(employee.employee_id, month=2, year=2024)

    assert [r.work_date for r in rows] == [date(2024, 2, 1)]


def test_preview_computes_without_saving():
    c, employee = _setup()

    metrics = c.attendance_service.preview(
        {"employee_id": employee.employee_id, "date": "2024-01-01", "check_in_time": "08:15", "check_out_time": "17:30"}
    )

    assert (metrics.worked_hours, metrics.late_minutes, metrics.overtime_hours) == (8.25, 15, 0.25)
    assert c.store.find(ATTENDANCE) == []


def test_preview_rejects_unknown_status():
    c, employee = _setup()

    with pytest.raises(ValidationError):
        c.attendance_service.preview({"employee_id": employee.employee_id, "date": "2024-01-01", "status": "Remote"})
