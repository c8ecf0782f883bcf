from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from ...attendance.model import AttendanceRecord
from ...settings.model import WorkSchedule


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def net_pay(self, base_salary: float, overtime_pay: float, deductions: float) -> float:
        raise NotImplementedError

    @abstractmethod
    def overtime_pay(self, records: Iterable[AttendanceRecord], schedule: Optional[WorkSchedule]) -> float:
        raise NotImplementedError
