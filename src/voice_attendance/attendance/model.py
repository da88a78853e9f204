from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional

from ..core.constants import DEFAULT_HOLIDAY_NAME
from ..core.enums import StatusKind


@dataclass(frozen=True)
class DayStatus:
    """Status of one calendar day. ``holiday_name`` is only set for holidays."""

    kind: StatusKind
    holiday_name: Optional[str] = None

    @classmethod
    def present(cls) -> "DayStatus":
        return cls(StatusKind.PRESENT)

    @classmethod
    def absent(cls) -> "DayStatus":
        return cls(StatusKind.ABSENT)

    @classmethod
    def holiday(cls, name: Optional[str] = None) -> "DayStatus":
        return cls(StatusKind.HOLIDAY, name or DEFAULT_HOLIDAY_NAME)

    @classmethod
    def not_enrolled(cls) -> "DayStatus":
        return cls(StatusKind.NOT_ENROLLED)

    @property
    def label(self) -> str:
        return self.kind.value


@dataclass(frozen=True)
class Holiday:
    date: str
    name: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Holiday":
        return cls(date=str(data["date"]), name=str(data.get("name") or DEFAULT_HOLIDAY_NAME))

    def to_dict(self) -> dict:
        return {"date": self.date, "name": self.name}


@dataclass(frozen=True)
class Session:
    """Named date range over which attendance is computed.

    ``end_date`` may be None for an ongoing session.
    """

    name: str
    code: str
    start_date: str
    end_date: Optional[str]
    created_at: str
    is_selected: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Session":
        return cls(
            name=str(data.get("name") or ""),
            code=str(data.get("code") or ""),
            start_date=str(data.get("startDate") or ""),
            end_date=data.get("endDate") or None,
            created_at=str(data.get("createdAt") or ""),
            is_selected=data.get("isSelected") is True,
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "code": self.code,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "createdAt": self.created_at,
            "isSelected": self.is_selected,
        }

    def with_selected(self, is_selected: bool) -> "Session":
        return replace(self, is_selected=is_selected)


@dataclass(frozen=True)
class AttendanceDocument:
    """Domain entity: everything stored under one attendance key."""

    records: dict[str, bool] = field(default_factory=dict)
    holidays: tuple[Holiday, ...] = ()
    not_enrolled: tuple[str, ...] = ()
    sessions: tuple[Session, ...] = ()
    weekly_days_off: tuple[int, ...] = ()

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "AttendanceDocument":
        data = data or {}
        return cls(
            records={str(k): bool(v) for k, v in (data.get("records") or {}).items()},
            holidays=tuple(Holiday.from_dict(h) for h in data.get("holidays") or []),
            not_enrolled=tuple(str(d) for d in data.get("notEnrolled") or []),
            sessions=tuple(Session.from_dict(s) for s in data.get("sessions") or []),
            weekly_days_off=tuple(int(d) for d in data.get("weeklyDaysOff") or []),
        )

    def to_dict(self) -> dict:
        return {
            "records": dict(self.records),
            "holidays": [h.to_dict() for h in self.holidays],
            "notEnrolled": list(self.not_enrolled),
            "sessions": [s.to_dict() for s in self.sessions],
            "weeklyDaysOff": list(self.weekly_days_off),
        }

    def holiday_on(self, day: str) -> Optional[Holiday]:
        return next((h for h in self.holidays if h.date == day), None)

    def is_not_enrolled(self, day: str) -> bool:
        return day in self.not_enrolled

    def selected_session(self) -> Optional[Session]:
        return next((s for s in self.sessions if s.is_selected), None)

    def status_on(self, day: str) -> Optional[DayStatus]:
        if day in self.records:
            return DayStatus.present() if self.records[day] else DayStatus.absent()

        holiday = self.holiday_on(day)
        if holiday:
            return DayStatus.holiday(holiday.name)

        if self.is_not_enrolled(day):
            return DayStatus.not_enrolled()
        return None
