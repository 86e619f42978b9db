from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Optional

from ..core.constants import DEFAULT_WEEKDAY_OFFSET, WEEKDAY_OFFSETS
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date (expected YYYY-MM-DD): {value!r}")


def parse_optional_date(value: Optional[str]) -> Optional[date]:
    if value is None or not str(value).strip():
        return None
    return parse_iso_date(value)


def parse_year_month(value: str) -> tuple[int, int]:
    """Parse YYYY-MM string into (year, month)."""
    try:
        parsed = datetime.strptime(str(value).strip(), "%Y-%m")
    except ValueError:
        raise ValidationError(f"Invalid month (expected YYYY-MM): {value!r}")
    return parsed.year, parsed.month


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def weekday_offset(day: str) -> int:
    # Sat and unknown values share offset 0 with Mon.
    return WEEKDAY_OFFSETS.get(day, DEFAULT_WEEKDAY_OFFSET)


def date_in_week(week_start: date, day: str) -> date:
    return week_start + timedelta(days=weekday_offset(day))


def weekday_name(value: date) -> str:
    """Short English weekday name ('Mon'..'Sun') for a date."""
    return value.strftime("%a")
