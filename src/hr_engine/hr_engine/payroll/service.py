from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..attendance.service import AttendanceService
from ..common.validators import require_id, require_non_negative, require_whole_number
from ..core.constants import MIN_PAYROLL_YEAR, PAYROLL
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.service import EmployeeService
from ..settings.service import SettingsService
from ..store.repository import RecordStore
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayrollRecord

log = logging.getLogger(__name__)


class PayrollService:
    def __init__(
        self,
        store: RecordStore,
        employees: EmployeeService,
        attendance: AttendanceService,
        settings: SettingsService,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._store = store
        self._employees = employees
        self._attendance = attendance
        self._settings = settings
        self._calculator = calculator or StandardPayrollCalculator()

    @staticmethod
    def _period(month: Any, year: Any) -> tuple[int, int]:
        month_i = require_whole_number(month, "Month")
        year_i = require_whole_number(year, "Year")
        if not 1 <= month_i <= 12:
            raise ValidationError("Month must be between 1 and 12")
        if year_i < MIN_PAYROLL_YEAR:
            raise ValidationError("Year is not valid")
        return month_i, year_i

    def automated_overtime_pay(self, employee_id: Optional[int], month: Any, year: Any) -> float:
        """Sum of the month's overtime hours weighted by each weekday's rate multiplier.

        Store failures propagate to the caller.
        """

        if not employee_id:
            return 0.0
        month_i, year_i = self._period(month, year)

        records = self._attendance.find_in_month(int(employee_id), month=month_i, year=year_i)
        if not records:
            return 0.0

        employee = self._employees.get(int(employee_id))
        schedule = self._settings.get_schedule(employee.tenant_id)
        total = self._calculator.overtime_pay(records, schedule)
        log.debug("automated overtime pay employee #%s %02d/%d: %s", employee_id, month_i, year_i, total)
        return total

    def get(self, payroll_id: int) -> PayrollRecord:
        r = self._store.find_one(PAYROLL, int(payroll_id))
        if not r:
            raise NotFoundError(f"Payroll record #{payroll_id} does not exist")
        return PayrollRecord.from_record(r)

    def list_for_employee(self, employee_id: int) -> Sequence[PayrollRecord]:
        return [PayrollRecord.from_record(r) for r in self._store.find(PAYROLL, {"employee_id": int(employee_id)})]

    def _build(self, values: Mapping[str, Any], *, automate_overtime: bool) -> dict:
        employee = self._employees.get(require_id(values.get("employee_id"), "Employee"))
        month, year = self._period(values.get("month"), values.get("year"))
        base_salary = require_non_negative(values.get("base_salary", 0), "Base salary")
        deductions = require_non_negative(values.get("deductions") or 0, "Deductions")

        overtime_raw = values.get("overtime_pay")
        if overtime_raw is None and automate_overtime:
            overtime_pay = self.automated_overtime_pay(employee.employee_id, month, year)
        else:
            overtime_pay = require_non_negative(overtime_raw or 0, "Overtime pay")

        return {
            "employee_id": employee.employee_id,
            "month": month,
            "year": year,
            "base_salary": base_salary,
            "overtime_pay": overtime_pay,
            "deductions": deductions,
            "net_pay": self._calculator.net_pay(base_salary, overtime_pay, deductions),
            "pdf_url": (values.get("pdf_url") or "").strip() or None,
        }

    def create(self, values: Mapping[str, Any]) -> PayrollRecord:
        record = PayrollRecord.from_record(self._store.insert(PAYROLL, self._build(values, automate_overtime=True)))
        log.info("payroll #%s for employee #%s %02d/%d net=%s", record.payroll_id, record.employee_id, record.month, record.year, record.net_pay)
        return record

    def update(self, payroll_id: int, values: Mapping[str, Any]) -> PayrollRecord:
        current = self.get(payroll_id)
        merged = {**current.to_dict(), **dict(values)}
        return PayrollRecord.from_record(
            self._store.update(PAYROLL, current.payroll_id, self._build(merged, automate_overtime=False))
        )

    def delete(self, payroll_id: int) -> None:
        current = self.get(payroll_id)
        self._store.delete(PAYROLL, current.payroll_id)
