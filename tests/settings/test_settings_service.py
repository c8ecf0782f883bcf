from datetime import time

import pytest

from src.hr_engine.hr_engine.core.constants import APP_SETTINGS
from src.hr_engine.hr_engine.core.enums import Weekday
from src.hr_engine.hr_engine.core.exceptions import StoreError, ValidationError
from src.hr_engine.hr_engine.settings.model import default_schedule
from src.hr_engine.hr_engine.settings.service import SettingsService
from src.hr_engine.hr_engine.store.memory_store import InMemoryRecordStore


def test_default_schedule_shape():
    schedule = default_schedule()

    monday = schedule.for_weekday(Weekday.MONDAY)
    assert (monday.start_time, monday.end_time) == (time(8, 0), time(17, 0))
    assert monday.break_duration_minutes == 60
    assert monday.overtime_threshold_hours == 8.0

    saturday = schedule.for_weekday(Weekday.SATURDAY)
    assert saturday.end_time == time(13, 0)
    assert saturday.overtime_threshold_hours == 5.0

    sunday = schedule.for_weekday(Weekday.SUNDAY)
    assert sunday.is_work_day is False
    assert sunday.overtime_rate_multiplier is None
    assert len(schedule.to_list()) == 7


def test_unconfigured_tenant_has_no_schedule():
    svc = SettingsService(InMemoryRecordStore())

    assert svc.get_schedule(1) is None
    assert svc.get_schedule_or_default(1) == default_schedule()


def test_save_merges_over_defaults_then_over_stored():
    svc = SettingsService(InMemoryRecordStore())

    svc.save_schedule(1, [{"day": "Tuesday", "is_work_day": True, "start_time": "09:00", "end_time": "18:00",
                           "break_duration_minutes": 30, "overtime_threshold_hours": 8, "overtime_rate_multiplier": 2}])
    schedule = svc.save_schedule(1, [{"day": "Sunday", "is_work_day": False}])

    assert len(schedule.to_list()) == 7
    assert schedule.for_weekday(Weekday.TUESDAY).start_time == time(9, 0)
    assert schedule.for_weekday(Weekday.TUESDAY).overtime_rate_multiplier == 2.0
    assert schedule.for_weekday(Weekday.MONDAY) == default_schedule().for_weekday(Weekday.MONDAY)
    assert svc.get_schedule(1) == schedule


def test_tenants_are_isolated():
    svc = SettingsService(InMemoryRecordStore())
    svc.save_schedule(1, [{"day": "Saturday", "is_work_day": False}])

    assert svc.get_schedule(2) is None
    assert svc.get_schedule(1).for_weekday(Weekday.SATURDAY).is_work_day is False


@pytest.mark.parametrize(
    "item",
    [
        {"day": "Funday", "is_work_day": True},
        {"day": "Monday", "is_work_day": True, "start_time": "8h"},
        {"day": "Monday", "is_work_day": True, "start_time": "17:00", "end_time": "08:00"},
        {"day": "Monday", "is_work_day": True, "break_duration_minutes": -5},
        {"day": "Monday", "is_work_day": True, "overtime_threshold_hours": -1},
        {"day": "Monday", "is_work_day": True, "overtime_rate_multiplier": 0.5},
        {"day": "Monday", "is_work_day": True, "overtime_rate_multiplier": "fast"},
    ],
)
def test_invalid_day_settings_are_rejected(item):
    svc = SettingsService(InMemoryRecordStore())

    with pytest.raises(ValidationError):
        svc.save_schedule(1, [item])

    assert svc.get_schedule(1) is None


def test_duplicate_weekday_is_rejected():
    svc = SettingsService(InMemoryRecordStore())

    with pytest.raises(ValidationError):
        svc.save_schedule(1, [{"day": "Monday", "is_work_day": False}, {"day": "Monday", "is_work_day": True}])


def test_duplicate_settings_records_are_a_store_error():
    store = InMemoryRecordStore()
    store.insert(APP_SETTINGS, {"tenant_id": 1, "daily_settings": []})
    store.insert(APP_SETTINGS, {"tenant_id": 1, "daily_settings": []})

    with pytest.raises(StoreError):
        SettingsService(store).get_schedule(1)
