from datetime import date

from voice_attendance.attendance.model import AttendanceDocument
from voice_attendance.reports.calculator.base import Tally, round_half_up_percent
from voice_attendance.reports.calculator.standard_calculator import StandardAttendanceCalculator


def test_round_half_up_percent():
    assert round_half_up_percent(0, 0) == 0
    assert round_half_up_percent(1, 2) == 50
    assert round_half_up_percent(1, 3) == 33
    assert round_half_up_percent(2, 3) == 67
    # 12.5 rounds up
    assert round_half_up_percent(1, 8) == 13
    assert round_half_up_percent(5, 5) == 100


def test_tally_with_no_working_days_is_zero():
    assert Tally(present_days=0, working_days=0).percentage == 0


def test_standard_calculator_skips_sundays_days_off_holidays_and_not_enrolled():
    doc = AttendanceDocument.from_dict(
        {
            "holidays": [{"date": "2024-03-12", "name": "Holi"}],
            "notEnrolled": ["2024-03-13"],
            "weeklyDaysOff": [6],
        }
    )
    calc = StandardAttendanceCalculator()

    assert calc.is_working_day(doc, date(2024, 3, 11))
    assert not calc.is_working_day(doc, date(2024, 3, 10))  # Sunday
    assert not calc.is_working_day(doc, date(2024, 3, 9))  # Saturday, weekly off
    assert not calc.is_working_day(doc, date(2024, 3, 12))
    assert not calc.is_working_day(doc, date(2024, 3, 13))


def test_tally_stops_at_today():
    doc = AttendanceDocument.from_dict({"records": {"2024-03-11": True, "2024-03-12": True}})
    calc = StandardAttendanceCalculator()

    tally = calc.tally(doc, start=date(2024, 3, 11), end=date(2024, 3, 15), today=date(2024, 3, 11))

    assert tally == Tally(present_days=1, working_days=1)


def test_tally_counts_absent_and_unmarked_days_as_working():
    doc = AttendanceDocument.from_dict({"records": {"2024-03-11": True, "2024-03-12": False}})
    calc = StandardAttendanceCalculator()

    tally = calc.tally(doc, start=date(2024, 3, 11), end=date(2024, 3, 13), today=date(2024, 3, 20))

    assert tally.present_days == 1
    assert tally.working_days == 3
    assert tally.percentage == 33
