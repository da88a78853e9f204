from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from ..common.datetime_utils import format_iso, is_non_working_day, now_local
from ..core.constants import DEFAULT_HOLIDAY_NAME
from ..core.enums import MarkResult, StatusKind
from ..core.exceptions import NonWorkingDayError
from .model import DayStatus, Holiday
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkOutcome:
    result: MarkResult
    day: date
    requested: DayStatus
    existing: Optional[DayStatus] = None


class AttendanceService:
    """Use case: read and change the status of single days."""

    def __init__(self, attendance: AttendanceRepository, *, clock: Callable[[], datetime] = now_local):
        self._attendance = attendance
        self._clock = clock

    def get_day_status(self, key: str, day: date) -> Optional[DayStatus]:
        return self._attendance.get(key).status_on(format_iso(day))

    def set_day_status(self, key: str, day: date, status: DayStatus) -> None:
        """Store ``status`` for ``day`` after removing the day from every container.

        A day therefore lives in at most one of records / holidays / notEnrolled.
        """

        doc = self._attendance.get(key)
        day_str = format_iso(day)

        records = {d: v for d, v in doc.records.items() if d != day_str}
        holidays = [h for h in doc.holidays if h.date != day_str]
        not_enrolled = [d for d in doc.not_enrolled if d != day_str]

        if status.kind == StatusKind.PRESENT:
            records[day_str] = True
        elif status.kind == StatusKind.ABSENT:
            records[day_str] = False
        elif status.kind == StatusKind.HOLIDAY:
            holidays.append(Holiday(date=day_str, name=status.holiday_name or DEFAULT_HOLIDAY_NAME))
        elif status.kind == StatusKind.NOT_ENROLLED:
            not_enrolled.append(day_str)

        self._attendance.merge(
            key,
            {
                "records": records,
                "holidays": [h.to_dict() for h in holidays],
                "notEnrolled": not_enrolled,
                "updatedAt": self._clock().isoformat(),
            },
        )
        logger.debug("Set %s to %s for %s", day_str, status.label, key)

    def mark_today(self, key: str, status: DayStatus, *, today: Optional[date] = None) -> MarkOutcome:
        """Mark today unless it is a non-working day or already carries a status.

        A different existing status is not overwritten: the outcome asks for
        confirmation instead.
        """

        today = today or self._clock().date()
        doc = self._attendance.get(key)

        if status.kind in (StatusKind.PRESENT, StatusKind.ABSENT) and is_non_working_day(today, doc.weekly_days_off):
            raise NonWorkingDayError(f"{format_iso(today)} is a non-working day")

        existing = doc.status_on(format_iso(today))
        if existing is not None:
            if existing.kind == status.kind:
                return MarkOutcome(result=MarkResult.ALREADY_SET, day=today, requested=status, existing=existing)
            return MarkOutcome(result=MarkResult.NEEDS_CONFIRMATION, day=today, requested=status, existing=existing)

        self.set_day_status(key, today, status)
        return MarkOutcome(result=MarkResult.APPLIED, day=today, requested=status)
