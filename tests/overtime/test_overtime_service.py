import pytest

from src.hr_engine.hr_engine.container import build_container
from src.hr_engine.hr_engine.core.constants import EMPLOYEES, OVERTIME_COMPENSATIONS
from src.hr_engine.hr_engine.core.exceptions import InsufficientBalanceError, StaleRecordError, ValidationError
from src.hr_engine.hr_engine.store.memory_store import InMemoryRecordStore


class HookedStore(InMemoryRecordStore):
    def __init__(self):
        super().__init__()
        self._hooks = {}

    def before_next_write(self, collection, fn):
        self._hooks[collection] = fn

    def update(self, collection, record_id, changes, *, expected=None):
        fn = self._hooks.pop(collection, None)
        if fn is not None:
            fn()
        return super().update(collection, record_id, changes, expected=expected)


def _setup(balance=10, **kwargs):
    c = build_container(**kwargs)
    employee = c.employee_service.create(
        {"tenant_id": 1, "first_name": "Yassine", "last_name": "Trabelsi", "overtime_hours_balance": balance}
    )
    return c, employee


def _balance(c, employee_id):
    return c.employee_service.get(employee_id).overtime_hours_balance


def test_create_edit_delete_keep_balance_in_step():
    c, employee = _setup()

    comp = c.overtime_service.create({"employee_id": employee.employee_id, "date": "2024-03-15", "compensated_hours": 3})
    assert _balance(c, employee.employee_id) == 7.0

    comp = c.overtime_service.update(comp.compensation_id, {"compensated_hours": 5})
    assert comp.compensated_hours == 5.0
    assert _balance(c, employee.employee_id) == 5.0

    c.overtime_service.delete(comp.compensation_id)
    assert _balance(c, employee.employee_id) == 10.0
    assert c.overtime_service.list_for_employee(employee.employee_id) == []


def test_overdraw_is_refused_without_writes():
    c, employee = _setup(balance=2)

    with pytest.raises(InsufficientBalanceError):
        c.overtime_service.create({"employee_id": employee.employee_id, "date": "2024-03-15", "compensated_hours": 3})

    assert _balance(c, employee.employee_id) == 2.0
    assert c.store.find(OVERTIME_COMPENSATIONS) == []


def test_overdraw_allowed_when_configured():
    c, employee = _setup(balance=2, allow_negative_overtime_balance=True)

    c.overtime_service.create({"employee_id": employee.employee_id, "date": "2024-03-15", "compensated_hours": 3})

    assert _balance(c, employee.employee_id) == -1.0


@pytest.mark.parametrize("hours", [0, -1, "abc", None])
def test_hours_must_be_positive(hours):
    c, employee = _setup()

    with pytest.raises(ValidationError):
        c.overtime_service.create({"employee_id": employee.employee_id, "date": "2024-03-15", "compensated_hours": hours})


def test_reassignment_returns_hours_to_previous_employee():
    c, first = _setup()
    second = c.employee_service.create(
        {"tenant_id": 1, "first_name": "Amel", "last_name": "Ben Ali", "overtime_hours_balance": 4}
    )
    comp = c.overtime_service.create({"employee_id": first.employee_id, "date": "2024-03-15", "compensated_hours": 3})

    c.overtime_service.update(comp.compensation_id, {"employee_id": second.employee_id})

    assert _balance(c, first.employee_id) == 10.0
    assert _balance(c, second.employee_id) == 1.0


def test_overlapping_edits_keep_one_consumption():
    store = HookedStore()
    c, employee = _setup(store=store)
    comp = c.overtime_service.create({"employee_id": employee.employee_id, "date": "2024-03-15", "compensated_hours": 3})

    store.before_next_write(
        OVERTIME_COMPENSATIONS, lambda: c.overtime_service.update(comp.compensation_id, {"compensated_hours": 1})
    )

    with pytest.raises(StaleRecordError):
        c.overtime_service.update(comp.compensation_id, {"compensated_hours": 5})

    assert c.overtime_service.get(comp.compensation_id).compensated_hours == 1.0
    assert _balance(c, employee.employee_id) == 9.0


def test_balance_changed_since_read_is_a_conflict():
    store = HookedStore()
    c, employee = _setup(store=store)
    store.before_next_write(
        EMPLOYEES, lambda: c.employee_service.update(employee.employee_id, {"overtime_hours_balance": 4})
    )

    with pytest.raises(StaleRecordError):
        c.overtime_service.create({"employee_id": employee.employee_id, "date": "2024-03-15", "compensated_hours": 3})

    assert _balance(c, employee.employee_id) == 4.0
    assert c.store.find(OVERTIME_COMPENSATIONS) == []
