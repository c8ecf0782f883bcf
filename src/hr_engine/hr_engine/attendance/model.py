from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Any, Mapping, Optional

from ..common.datetime_utils import format_hhmm, format_iso_date, parse_hhmm, parse_iso_date
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceMetrics:
    worked_hours: float = 0.0
    late_minutes: int = 0
    overtime_hours: float = 0.0


ZERO_METRICS = AttendanceMetrics()


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance day.

    ``worked_hours``, ``late_minutes`` and ``overtime_hours`` are a cache of
    the calculator output for the current inputs.
    """

    attendance_id: int
    employee_id: int
    work_date: date
    status: AttendanceStatus
    check_in_time: Optional[time] = None
    check_out_time: Optional[time] = None
    notes: Optional[str] = None
    worked_hours: float = 0.0
    late_minutes: int = 0
    overtime_hours: float = 0.0

    @property
    def metrics(self) -> AttendanceMetrics:
        return AttendanceMetrics(self.worked_hours, self.late_minutes, self.overtime_hours)

    @classmethod
    def from_record(cls, r: Mapping[str, Any]) -> "AttendanceRecord":
        return cls(
            attendance_id=int(r["id"]),
            employee_id=int(r["employee_id"]),
            work_date=parse_iso_date(r["date"]),
            status=AttendanceStatus(r["status"]),
            check_in_time=parse_hhmm(r.get("check_in_time")),
            check_out_time=parse_hhmm(r.get("check_out_time")),
            notes=r.get("notes"),
            worked_hours=float(r.get("worked_hours") or 0),
            late_minutes=int(r.get("late_minutes") or 0),
            overtime_hours=float(r.get("overtime_hours") or 0),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "employee_id": self.employee_id,
            "date": format_iso_date(self.work_date),
            "check_in_time": format_hhmm(self.check_in_time),
            "check_out_time": format_hhmm(self.check_out_time),
            "status": self.status.value,
            "notes": self.notes,
            "worked_hours": self.worked_hours,
            "late_minutes": self.late_minutes,
            "overtime_hours": self.overtime_hours,
        }
