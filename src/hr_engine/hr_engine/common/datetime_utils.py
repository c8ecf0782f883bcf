from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Optional, Union

from ..core.constants import DATE_FORMAT, TIME_FORMAT
from ..core.exceptions import ValidationError

# HH:MM, optionally followed by :SS as stored by TIME columns.
_HHMM = re.compile(r"^(\d{1,2}:\d{2})(:\d{2})?$")


def parse_iso_date(value: Union[str, date]) -> date:
    """Parse YYYY-MM-DD string into date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), DATE_FORMAT).date()
    except ValueError:
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def parse_hhmm(value: Union[str, time, None]) -> Optional[time]:
    """Parse an HH:MM (or HH:MM:SS) wall-clock time; blank means no time."""
    if value is None:
        return None
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    v = str(value).strip()
    if not v:
        return None
    m = _HHMM.match(v)
    if not m:
        raise ValidationError(f"Invalid time (HH:MM): {value!r}")
    try:
        return datetime.strptime(m.group(1), TIME_FORMAT).time()
    except ValueError:
        raise ValidationError(f"Invalid time (HH:MM): {value!r}")


def format_hhmm(value: Optional[time]) -> Optional[str]:
    return value.strftime(TIME_FORMAT) if value else None


def format_iso_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def minutes_between(start: time, end: time) -> int:
    """Signed wall-clock minutes from start to end on the same day."""
    return (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)


def inclusive_days(start: date, end: date) -> int:
    return (end - start).days + 1


def in_month(value: date, *, month: int, year: int) -> bool:
    return value.month == month and value.year == year
