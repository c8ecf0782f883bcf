from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from typing import Any, Mapping, Optional

from ..common.datetime_utils import format_hhmm, parse_hhmm
from ..core.enums import Weekday


@dataclass(frozen=True)
class DaySetting:
    """Work policy for one weekday.

    When ``is_work_day`` is False the remaining fields are ignored by every
    calculation.
    """

    weekday: Weekday
    is_work_day: bool
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    break_duration_minutes: Optional[int] = None
    overtime_threshold_hours: Optional[float] = None
    overtime_rate_multiplier: Optional[float] = None

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "DaySetting":
        def _num(key: str, cast):
            v = d.get(key)
            return None if v is None or v == "" else cast(v)

        return cls(
            weekday=Weekday(d.get("day") or d.get("weekday")),
            is_work_day=bool(d.get("is_work_day")),
            start_time=parse_hhmm(d.get("start_time")),
            end_time=parse_hhmm(d.get("end_time")),
            break_duration_minutes=_num("break_duration_minutes", int),
            overtime_threshold_hours=_num("overtime_threshold_hours", float),
            overtime_rate_multiplier=_num("overtime_rate_multiplier", float),
        )

    def to_dict(self) -> dict:
        return {
            "day": self.weekday.value,
            "is_work_day": self.is_work_day,
            "start_time": format_hhmm(self.start_time),
            "end_time": format_hhmm(self.end_time),
            "break_duration_minutes": self.break_duration_minutes,
            "overtime_threshold_hours": self.overtime_threshold_hours,
            "overtime_rate_multiplier": self.overtime_rate_multiplier,
        }


@dataclass(frozen=True)
class WorkSchedule:
    """One DaySetting per weekday (lookup by weekday; order is irrelevant)."""

    days: Mapping[Weekday, DaySetting] = field(default_factory=dict)

    @classmethod
    def from_list(cls, items) -> "WorkSchedule":
        days: dict[Weekday, DaySetting] = {}
        for item in items or []:
            ds = item if isinstance(item, DaySetting) else DaySetting.from_dict(item)
            days[ds.weekday] = ds
        return cls(days=days)

    def for_weekday(self, weekday: Weekday) -> Optional[DaySetting]:
        return self.days.get(weekday)

    def for_date(self, value: date) -> Optional[DaySetting]:
        return self.for_weekday(Weekday.of(value))

    def to_list(self) -> list[dict]:
        return [self.days[w].to_dict() for w in Weekday if w in self.days]


def _work_day(weekday: Weekday, start: str, end: str, break_minutes: int, threshold: float) -> DaySetting:
    return DaySetting(
        weekday=weekday,
        is_work_day=True,
        start_time=parse_hhmm(start),
        end_time=parse_hhmm(end),
        break_duration_minutes=break_minutes,
        overtime_threshold_hours=threshold,
        overtime_rate_multiplier=1.5,
    )


def default_schedule() -> WorkSchedule:
    """Monday-Friday 08:00-17:00, Saturday morning, Sunday off."""
    days = [
        _work_day(w, "08:00", "17:00", 60, 8.0)
        for w in (Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY, Weekday.THURSDAY, Weekday.FRIDAY)
    ]
    days.append(_work_day(Weekday.SATURDAY, "08:00", "13:00", 0, 5.0))
    days.append(DaySetting(weekday=Weekday.SUNDAY, is_work_day=False))
    return WorkSchedule.from_list(days)
