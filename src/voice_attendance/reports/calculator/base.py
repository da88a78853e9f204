from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date

from ...attendance.model import AttendanceDocument
from ...common.datetime_utils import format_iso, iter_days


@dataclass(frozen=True)
class Tally:
    present_days: int
    working_days: int

    @property
    def percentage(self) -> int:
        return round_half_up_percent(self.present_days, self.working_days)


def round_half_up_percent(part: int, whole: int) -> int:
    """Integer percentage rounded half up; 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


class AttendanceCalculator(ABC):
    """Calculator interface (Strategy Pattern for working-day rules)."""

    @abstractmethod
    def is_working_day(self, doc: AttendanceDocument, day: date) -> bool:
        raise NotImplementedError

    def tally(self, doc: AttendanceDocument, *, start: date, end: date, today: date) -> Tally:
        """Count working and present days in [start, min(end, today)]."""

        present = 0
        working = 0
        for day in iter_days(start, min(end, today)):
            if not self.is_working_day(doc, day):
                continue
            working += 1
            if doc.records.get(format_iso(day)) is True:
                present += 1
        return Tally(present_days=present, working_days=working)
