from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.service import AttendanceService
from .authorizations.service import AuthorizationService
from .database.connection import DBConfig, DatabaseConnection
from .employees.balances import BalanceWriter
from .employees.service import EmployeeService
from .holidays.service import HolidayService
from .leave.service import LeaveRequestService
from .overtime.service import OvertimeCompensationService
from .payroll.service import PayrollService
from .reports.service import ReportService
from .settings.service import SettingsService
from .store.memory_store import InMemoryRecordStore
from .store.mysql_store import MySQLRecordStore
from .store.repository import RecordStore


@dataclass(frozen=True)
class Container:
    store: RecordStore

    employee_service: EmployeeService
    settings_service: SettingsService
    attendance_service: AttendanceService
    authorization_service: AuthorizationService
    payroll_service: PayrollService
    leave_service: LeaveRequestService
    overtime_service: OvertimeCompensationService
    report_service: ReportService
    holiday_service: HolidayService


def build_store(*, backend: str, db_config: Optional[dict] = None) -> RecordStore:
    if backend == "memory":
        return InMemoryRecordStore()
    if backend == "mysql":
        if not db_config:
            raise ValueError("DB_CONFIG is required for the mysql store backend")
        return MySQLRecordStore(DatabaseConnection.get_instance(DBConfig.from_dict(db_config)))
    raise ValueError(f"Unknown store backend: {backend!r}")


def build_container(
    *,
    store: Optional[RecordStore] = None,
    store_backend: str = "memory",
    db_config: Optional[dict] = None,
    allow_negative_overtime_balance: bool = False,
) -> Container:
    store = store if store is not None else build_store(backend=store_backend, db_config=db_config)

    balances = BalanceWriter(store)
    employee_service = EmployeeService(store)
    settings_service = SettingsService(store)
    attendance_service = AttendanceService(store, employee_service, settings_service)
    authorization_service = AuthorizationService(store, employee_service, attendance_service)
    payroll_service = PayrollService(store, employee_service, attendance_service, settings_service)
    leave_service = LeaveRequestService(store, employee_service, balances)
    overtime_service = OvertimeCompensationService(
        store,
        employee_service,
        balances,
        allow_negative_balance=allow_negative_overtime_balance,
    )
    report_service = ReportService(store)
    holiday_service = HolidayService(store)

    return Container(
        store=store,
        employee_service=employee_service,
        settings_service=settings_service,
        attendance_service=attendance_service,
        authorization_service=authorization_service,
        payroll_service=payroll_service,
        leave_service=leave_service,
        overtime_service=overtime_service,
        report_service=report_service,
        holiday_service=holiday_service,
    )
