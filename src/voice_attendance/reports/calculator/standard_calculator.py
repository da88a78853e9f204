from __future__ import annotations

from datetime import date

from .base import AttendanceCalculator
from ...attendance.model import AttendanceDocument
from ...common.datetime_utils import format_iso, is_non_working_day


class StandardAttendanceCalculator(AttendanceCalculator):
    """Standard rule: skip Sundays, weekly days off, holidays and not-enrolled days."""

    def is_working_day(self, doc: AttendanceDocument, day: date) -> bool:
        if is_non_working_day(day, doc.weekly_days_off):
            return False
        day_str = format_iso(day)
        if doc.holiday_on(day_str) is not None:
            return False
        return not doc.is_not_enrolled(day_str)
