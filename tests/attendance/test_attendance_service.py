from __future__ import annotations

from datetime import date, datetime

import pytest

from voice_attendance.attendance.memory_repository import InMemoryAttendanceRepository
from voice_attendance.attendance.model import AttendanceDocument, DayStatus
from voice_attendance.attendance.service import AttendanceService
from voice_attendance.core.enums import MarkResult, StatusKind
from voice_attendance.core.exceptions import NonWorkingDayError


def _containers_holding(raw: dict, day: str) -> list[str]:
    found = []
    if day in raw.get("records", {}):
        found.append("records")
    if any(h["date"] == day for h in raw.get("holidays", [])):
        found.append("holidays")
    if day in raw.get("notEnrolled", []):
        found.append("notEnrolled")
    return found


@pytest.mark.parametrize(
    "status, container",
    [
        (DayStatus.present(), "records"),
        (DayStatus.absent(), "records"),
        (DayStatus.holiday("Diwali"), "holidays"),
        (DayStatus.not_enrolled(), "notEnrolled"),
    ],
)
def test_set_day_status_keeps_day_in_exactly_one_container(status, container):
    repo = InMemoryAttendanceRepository(
        {
            "k": {
                "records": {"2024-03-11": True},
                "holidays": [{"date": "2024-03-11", "name": "Old"}],
                "notEnrolled": ["2024-03-11"],
            }
        }
    )
    service = AttendanceService(repo, clock=lambda: datetime(2024, 3, 11, 8, 0))

    service.set_day_status("k", date(2024, 3, 11), status)

    raw = repo.raw("k")
    assert _containers_holding(raw, "2024-03-11") == [container]
    assert service.get_day_status("k", date(2024, 3, 11)) == status
    assert raw["updatedAt"] == "2024-03-11T08:00:00"


def test_set_day_status_leaves_other_days_and_fields_alone():
    repo = InMemoryAttendanceRepository(
        {
            "k": {
                "records": {"2024-03-08": True},
                "holidays": [{"date": "2024-03-01", "name": "Founders"}],
                "sessions": [{"name": "Spring", "code": "spring0001"}],
            }
        }
    )
    service = AttendanceService(repo)

    service.set_day_status("k", date(2024, 3, 11), DayStatus.absent())

    raw = repo.raw("k")
    assert raw["records"] == {"2024-03-08": True, "2024-03-11": False}
    assert raw["holidays"] == [{"date": "2024-03-01", "name": "Founders"}]
    assert raw["sessions"] == [{"name": "Spring", "code": "spring0001"}]


def test_holiday_without_name_uses_default():
    repo = InMemoryAttendanceRepository()
    AttendanceService(repo).set_day_status("k", date(2024, 3, 11), DayStatus.holiday())

    assert repo.raw("k")["holidays"] == [{"date": "2024-03-11", "name": "Holiday"}]


def test_mark_present_on_sunday_is_rejected_and_records_unchanged():
    repo = InMemoryAttendanceRepository({"k": {"records": {}, "weeklyDaysOff": []}})
    service = AttendanceService(repo)

    with pytest.raises(NonWorkingDayError):
        service.mark_today("k", DayStatus.present(), today=date(2024, 3, 10))

    assert repo.raw("k")["records"] == {}


def test_mark_absent_on_weekly_day_off_is_rejected():
    # 6 = Saturday
    repo = InMemoryAttendanceRepository({"k": {"weeklyDaysOff": [6]}})
    service = AttendanceService(repo)

    with pytest.raises(NonWorkingDayError):
        service.mark_today("k", DayStatus.absent(), today=date(2024, 3, 9))


def test_holiday_can_be_marked_on_sunday():
    repo = InMemoryAttendanceRepository()
    service = AttendanceService(repo)

    outcome = service.mark_today("k", DayStatus.holiday("Holi"), today=date(2024, 3, 10))

    assert outcome.result == MarkResult.APPLIED
    assert repo.raw("k")["holidays"] == [{"date": "2024-03-10", "name": "Holi"}]


def test_mark_today_applies_when_day_is_empty():
    repo = InMemoryAttendanceRepository()
    service = AttendanceService(repo)

    outcome = service.mark_today("k", DayStatus.present(), today=date(2024, 3, 11))

    assert outcome.result == MarkResult.APPLIED
    assert outcome.existing is None
    assert repo.raw("k")["records"] == {"2024-03-11": True}


def test_mark_today_same_status_is_already_set():
    repo = InMemoryAttendanceRepository({"k": {"records": {"2024-03-11": False}}})
    service = AttendanceService(repo)

    outcome = service.mark_today("k", DayStatus.absent(), today=date(2024, 3, 11))

    assert outcome.result == MarkResult.ALREADY_SET
    assert outcome.existing == DayStatus.absent()


def test_mark_today_different_status_needs_confirmation_and_writes_nothing():
    repo = InMemoryAttendanceRepository({"k": {"holidays": [{"date": "2024-03-11", "name": "Holi"}]}})
    service = AttendanceService(repo)

    outcome = service.mark_today("k", DayStatus.present(), today=date(2024, 3, 11))

    assert outcome.result == MarkResult.NEEDS_CONFIRMATION
    assert outcome.existing.kind == StatusKind.HOLIDAY
    assert "records" not in repo.raw("k")


def test_document_status_lookup_prefers_records():
    doc = AttendanceDocument.from_dict(
        {
            "records": {"2024-03-11": True},
            "holidays": [{"date": "2024-03-12", "name": "Holi"}],
            "notEnrolled": ["2024-03-13"],
        }
    )

    assert doc.status_on("2024-03-11") == DayStatus.present()
    assert doc.status_on("2024-03-12") == DayStatus.holiday("Holi")
    assert doc.status_on("2024-03-13") == DayStatus.not_enrolled()
    assert doc.status_on("2024-03-14") is None


def test_missing_document_reads_as_empty():
    doc = InMemoryAttendanceRepository().get("nobody")

    assert doc.records == {}
    assert doc.sessions == ()
    assert doc.weekly_days_off == ()
