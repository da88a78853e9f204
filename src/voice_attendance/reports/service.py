from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from ..attendance.model import AttendanceDocument, Session
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_days, now_local, parse_iso_date, parse_year_month
from ..core.constants import FALLBACK_SESSION_LABEL
from ..sessions.manager import find_by_name_or_code
from .calculator.base import AttendanceCalculator
from .calculator.standard_calculator import StandardAttendanceCalculator


@dataclass(frozen=True)
class SessionAttendance:
    percentage: int
    session_label: str
    present_days: int
    total_working_days: int


@dataclass(frozen=True)
class AttendanceWindow:
    start: date
    end: date
    label: str


class AttendanceReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        calculator: Optional[AttendanceCalculator] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._calculator = calculator or StandardAttendanceCalculator()
        self._clock = clock

    def _today(self, today: Optional[date]) -> date:
        return today or self._clock().date()

    def monthly_percentage(self, doc: AttendanceDocument, year_month: str, *, today: Optional[date] = None) -> int:
        """Percentage of working days marked present in ``year_month`` up to today.

        Future days are skipped rather than counted as absent.
        """

        year, month = parse_year_month(year_month)
        days = month_days(year, month)
        tally = self._calculator.tally(doc, start=days[0], end=days[-1], today=self._today(today))
        return tally.percentage

    def resolve_window(
        self, doc: AttendanceDocument, session_name: Optional[str] = None, *, today: Optional[date] = None
    ) -> AttendanceWindow:
        """Pick the date window: preset session, then the named session, then the current year."""

        today = self._today(today)

        session: Optional[Session] = doc.selected_session()
        if (session is None or not session.start_date) and session_name:
            session = find_by_name_or_code(doc.sessions, session_name)

        if session is not None and session.start_date:
            end = parse_iso_date(session.end_date) if session.end_date else today
            return AttendanceWindow(start=parse_iso_date(session.start_date), end=end, label=session.name)

        return AttendanceWindow(
            start=date(today.year, 1, 1),
            end=date(today.year, 12, 31),
            label=FALLBACK_SESSION_LABEL,
        )

    def session_percentage(
        self, doc: AttendanceDocument, session_name: Optional[str] = None, *, today: Optional[date] = None
    ) -> SessionAttendance:
        today = self._today(today)
        window = self.resolve_window(doc, session_name, today=today)
        tally = self._calculator.tally(doc, start=window.start, end=window.end, today=today)
        return SessionAttendance(
            percentage=tally.percentage,
            session_label=window.label,
            present_days=tally.present_days,
            total_working_days=tally.working_days,
        )

    def monthly_for_key(self, key: str, year_month: str) -> int:
        return self.monthly_percentage(self._attendance.get(key), year_month)

    def session_for_key(self, key: str, session_name: Optional[str] = None) -> SessionAttendance:
        return self.session_percentage(self._attendance.get(key), session_name)
