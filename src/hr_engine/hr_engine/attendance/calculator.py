from __future__ import annotations

from datetime import date, time
from typing import Iterable, Optional, Union

from ..authorizations.model import Authorization
from ..common.datetime_utils import minutes_between, parse_hhmm
from ..common.validators import round2
from ..settings.model import WorkSchedule
from .model import ZERO_METRICS, AttendanceMetrics

TimeLike = Union[str, time, None]


def compute_attendance(
    work_date: date,
    check_in: TimeLike,
    check_out: TimeLike,
    schedule: Optional[WorkSchedule],
    authorizations: Iterable[Authorization] = (),
) -> AttendanceMetrics:
    """Worked hours, late minutes and overtime hours for one day.

    Returns all zeros when there is nothing to compute: no schedule, a
    missing time, a non-work day, an incomplete day setting, or a check-out
    before the check-in. Times are same-day wall clock; overnight shifts are
    not supported.

    Any approved Late Arrival authorization for the day cancels all
    lateness, whatever its requested time.
    """

    check_in_t = parse_hhmm(check_in)
    check_out_t = parse_hhmm(check_out)
    if schedule is None or check_in_t is None or check_out_t is None:
        return ZERO_METRICS

    day = schedule.for_date(work_date)
    if (
        day is None
        or not day.is_work_day
        or day.start_time is None
        or day.end_time is None
        or day.break_duration_minutes is None
        or day.overtime_threshold_hours is None
    ):
        return ZERO_METRICS

    span = minutes_between(check_in_t, check_out_t)
    if span < 0:
        return ZERO_METRICS

    worked_minutes = max(span - day.break_duration_minutes, 0)
    raw_hours = worked_minutes / 60

    late_minutes = max(minutes_between(day.start_time, check_in_t), 0)
    if any(a.is_approved_late_arrival and a.work_date == work_date for a in authorizations):
        late_minutes = 0

    overtime_hours = round2(max(raw_hours - day.overtime_threshold_hours, 0))

    return AttendanceMetrics(worked_hours=round2(raw_hours), late_minutes=late_minutes, overtime_hours=overtime_hours)
