from __future__ import annotations

from typing import Iterable, Optional

from ...attendance.model import AttendanceRecord
from ...common.validators import round2
from ...core.constants import DEFAULT_OVERTIME_RATE_MULTIPLIER
from ...settings.model import WorkSchedule
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: net = base + overtime - deductions, not below 0.

    Overtime pay weights each record's overtime hours by the multiplier of
    its weekday (1 when the day has none).
    """

    def net_pay(self, base_salary: float, overtime_pay: float, deductions: float) -> float:
        return round2(max(base_salary + overtime_pay - deductions, 0))

    def overtime_pay(self, records: Iterable[AttendanceRecord], schedule: Optional[WorkSchedule]) -> float:
        total = 0.0
        for r in records:
            day = schedule.for_date(r.work_date) if schedule else None
            multiplier = DEFAULT_OVERTIME_RATE_MULTIPLIER
            if day is not None and day.overtime_rate_multiplier:
                multiplier = day.overtime_rate_multiplier
            total += (r.overtime_hours or 0) * multiplier
        return round2(total)


def compute_net_pay(base_salary: float, overtime_pay: float, deductions: float) -> float:
    return StandardPayrollCalculator().net_pay(base_salary, overtime_pay, deductions)
