from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Iterable, Iterator

from ..core.constants import SUNDAY


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def format_iso(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()


def weekday_number(value: date) -> int:
    """Weekday as stored in ``weeklyDaysOff``: 0=Sunday .. 6=Saturday."""
    return (value.weekday() + 1) % 7


def is_non_working_day(value: date, weekly_days_off: Iterable[int] = ()) -> bool:
    day = weekday_number(value)
    if day == SUNDAY:
        return True
    return day in set(weekly_days_off)


def year_month(value: date | None = None) -> str:
    value = value or today_local()
    return f"{value.year}-{value.month:02d}"


def parse_year_month(value: str) -> tuple[int, int]:
    """Accept ``YYYY-MM`` or a full ``YYYY-MM-DD`` and return (year, month)."""
    parts = value.strip().split("-")
    if len(parts) < 2:
        raise ValueError(f"Invalid year-month: {value!r}")
    year, month = int(parts[0]), int(parts[1])
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month in {value!r}")
    return year, month


def month_days(year: int, month: int) -> list[date]:
    _, last_day = calendar.monthrange(year, month)
    return [date(year, month, d) for d in range(1, last_day + 1)]


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield each day from start to end inclusive (nothing if end < start)."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def format_spoken_date(value: str | date | None) -> str:
    """Render a date the way it is read out, e.g. ``June 1, 2024``.

    Unparseable strings are returned unchanged.
    """
    if value is None:
        return "an open end date"
    if isinstance(value, str):
        try:
            value = parse_iso_date(value)
        except ValueError:
            return value
    return f"{value.strftime('%B')} {value.day}, {value.year}"


def month_label(value: str) -> str:
    year, month = parse_year_month(value)
    return f"{calendar.month_name[month]} {year}"
