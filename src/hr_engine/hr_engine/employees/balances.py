from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence, TypeVar, Union

from ..common.validators import round2
from ..core.constants import EMPLOYEES
from ..core.exceptions import PartialFailureError, StaleRecordError, StoreError
from ..store.repository import RecordStore
from .model import Employee

log = logging.getLogger(__name__)

T = TypeVar("T")

LEAVE_BALANCE = "annual_leave_balance"
OVERTIME_BALANCE = "overtime_hours_balance"


@dataclass(frozen=True)
class BalanceChange:
    employee: Employee
    field: str
    new_value: Union[int, float]

    @property
    def old_value(self) -> Union[int, float]:
        return getattr(self.employee, self.field)

    @property
    def delta(self) -> Union[int, float]:
        return self.new_value - self.old_value


class BalanceWriter:
    """Write employee balances, then the record that caused them.

    The store offers no multi-write transactions, so the writes are ordered:
    balances first (each conditional on the employee ``version`` read by the
    caller), then the record (which the caller makes conditional on the
    record's own version). When a later write fails, the balance writes
    already made are undone by applying the opposite delta to the current
    balance.

    Outcome on failure:

    * nothing was written, or everything written was undone and the record
      write never happened: the original ``StoreError`` is re-raised;
    * the record write lost a version race and the balances were undone:
      ``StaleRecordError`` is re-raised (a clean conflict);
    * anything else: ``PartialFailureError``.
    """

    def __init__(self, store: RecordStore):
        self._store = store

    def apply(self, changes: Sequence[BalanceChange], write_record: Callable[[], T]) -> T:
        applied: list[BalanceChange] = []
        try:
            for change in changes:
                if change.new_value == change.old_value:
                    continue
                self._store.update(
                    EMPLOYEES,
                    change.employee.employee_id,
                    {change.field: change.new_value, "version": change.employee.version + 1},
                    expected={"version": change.employee.version},
                )
                applied.append(change)
                log.info(
                    "employee #%s %s: %s -> %s",
                    change.employee.employee_id,
                    change.field,
                    change.old_value,
                    change.new_value,
                )
        except StoreError as e:
            if not applied:
                raise
            if self._restore(applied):
                log.warning("balance write failed, earlier balance writes undone: %s", e)
                raise
            raise self._partial(applied, False, e) from e

        try:
            return write_record()
        except StoreError as e:
            if not applied:
                raise
            restored = self._restore(applied)
            if restored and isinstance(e, StaleRecordError):
                log.warning("record changed concurrently, balance writes undone: %s", e)
                raise
            raise self._partial(applied, restored, e) from e

    @staticmethod
    def _partial(applied: Sequence[BalanceChange], restored: bool, cause: StoreError) -> PartialFailureError:
        employee_id = applied[0].employee.employee_id
        log.error(
            "record write failed after balance update for employee #%s (restored=%s): %s",
            employee_id,
            restored,
            cause,
        )
        return PartialFailureError(
            f"Balance was updated but the record could not be saved: {cause}",
            employee_id=employee_id,
            balance_restored=restored,
            cause=cause,
        )

    def _restore(self, applied: Sequence[BalanceChange]) -> bool:
        restored = True
        for change in reversed(applied):
            employee_id = change.employee.employee_id
            try:
                current = self._store.find_one(EMPLOYEES, employee_id)
                if current is None:
                    raise StoreError(f"{EMPLOYEES} #{employee_id} not found")
                value = current.get(change.field) or 0
                value = value - change.delta
                if not isinstance(value, int):
                    value = round2(value)
                version = int(current.get("version") or 0)
                self._store.update(
                    EMPLOYEES,
                    employee_id,
                    {change.field: value, "version": version + 1},
                    expected={"version": version},
                )
            except StoreError as e:
                log.error("could not restore %s of employee #%s: %s", change.field, employee_id, e)
                restored = False
        return restored
