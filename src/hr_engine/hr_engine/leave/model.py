from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional

from ..common.datetime_utils import format_iso_date, parse_iso_date
from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class LeaveRequest:
    """Domain entity: leave request.

    ``days_deducted`` is what the current persisted state charged against
    the annual-leave balance; it is the amount credited back when the
    request is edited or deleted.
    """

    request_id: int
    employee_id: int
    type: LeaveType
    start_date: date
    end_date: date
    status: LeaveStatus
    reason: Optional[str] = None
    compensation_applied: bool = False
    days_deducted: int = 0
    version: int = 0

    @classmethod
    def from_record(cls, r: Mapping[str, Any]) -> "LeaveRequest":
        return cls(
            request_id=int(r["id"]),
            employee_id=int(r["employee_id"]),
            type=LeaveType(r["type"]),
            start_date=parse_iso_date(r["start_date"]),
            end_date=parse_iso_date(r["end_date"]),
            status=LeaveStatus(r["status"]),
            reason=r.get("reason"),
            compensation_applied=bool(r.get("compensation_applied")),
            days_deducted=int(r.get("days_deducted") or 0),
            version=int(r.get("version") or 0),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.request_id,
            "employee_id": self.employee_id,
            "type": self.type.value,
            "start_date": format_iso_date(self.start_date),
            "end_date": format_iso_date(self.end_date),
            "reason": self.reason,
            "status": self.status.value,
            "compensation_applied": self.compensation_applied,
            "days_deducted": self.days_deducted,
            "version": self.version,
        }


@dataclass(frozen=True)
class LeaveValues:
    """Submitted state of a leave request (create or edit form)."""

    employee_id: int
    type: LeaveType
    start_date: date
    end_date: date
    status: LeaveStatus
    reason: Optional[str] = None
    compensation_applied: bool = False
