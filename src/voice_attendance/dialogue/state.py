from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from ..attendance.model import DayStatus
from ..core.enums import CreationStep, DialoguePhase, StatusKind

# Keys this module owns inside the voice platform's session attributes.
PENDING_STATUS_CHANGE = "pendingStatusChange"
IN_SESSION_CREATION = "inSessionCreation"
SESSION_CREATION_STEP = "sessionCreationStep"
PENDING_SESSION_NAME = "pendingSessionName"
PENDING_START_DATE = "pendingStartDate"
SHOULD_SET_AS_PRESET = "shouldSetAsPreset"

OWNED_KEYS = (
    PENDING_STATUS_CHANGE,
    IN_SESSION_CREATION,
    SESSION_CREATION_STEP,
    PENDING_SESSION_NAME,
    PENDING_START_DATE,
    SHOULD_SET_AS_PRESET,
)


@dataclass(frozen=True)
class PendingStatusChange:
    """A status overwrite waiting for a yes/no answer."""

    date: str
    new_status: DayStatus
    old_status: DayStatus

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PendingStatusChange":
        new_kind = StatusKind(data["newStatus"])
        holiday_name = data.get("holidayName") if new_kind == StatusKind.HOLIDAY else None
        return cls(
            date=str(data["date"]),
            new_status=DayStatus(new_kind, holiday_name),
            old_status=DayStatus(StatusKind(data["oldStatus"])),
        )

    def to_dict(self) -> dict:
        out = {
            "date": self.date,
            "newStatus": self.new_status.label,
            "oldStatus": self.old_status.label,
        }
        if self.new_status.holiday_name:
            out["holidayName"] = self.new_status.holiday_name
        return out


@dataclass(frozen=True)
class SessionCreation:
    step: CreationStep
    name: Optional[str] = None
    start_date: Optional[str] = None
    set_as_preset: bool = False


@dataclass(frozen=True)
class DialogueState:
    """Conversation state carried between turns.

    Handlers never mutate it; each turn returns the next state.
    """

    pending_status_change: Optional[PendingStatusChange] = None
    creation: Optional[SessionCreation] = None

    @property
    def phase(self) -> DialoguePhase:
        if self.pending_status_change is not None:
            return DialoguePhase.AWAITING_STATUS_CONFIRMATION
        if self.creation is None:
            return DialoguePhase.IDLE
        return {
            CreationStep.NAME: DialoguePhase.AWAITING_SESSION_NAME,
            CreationStep.START_DATE: DialoguePhase.AWAITING_START_DATE,
            CreationStep.END_DATE: DialoguePhase.AWAITING_END_DATE,
        }[self.creation.step]

    @property
    def in_creation(self) -> bool:
        return self.creation is not None

    def with_pending(self, change: Optional[PendingStatusChange]) -> "DialogueState":
        return replace(self, pending_status_change=change)

    def with_creation(self, creation: Optional[SessionCreation]) -> "DialogueState":
        return replace(self, creation=creation)

    @classmethod
    def from_attributes(cls, attributes: Optional[Mapping[str, Any]]) -> "DialogueState":
        attributes = attributes or {}

        pending = None
        raw_pending = attributes.get(PENDING_STATUS_CHANGE)
        if isinstance(raw_pending, Mapping):
            try:
                pending = PendingStatusChange.from_dict(raw_pending)
            except (KeyError, ValueError):
                pending = None

        creation = None
        if attributes.get(IN_SESSION_CREATION):
            try:
                step = CreationStep(attributes.get(SESSION_CREATION_STEP) or CreationStep.NAME.value)
            except ValueError:
                step = CreationStep.NAME
            creation = SessionCreation(
                step=step,
                name=attributes.get(PENDING_SESSION_NAME) or None,
                start_date=attributes.get(PENDING_START_DATE) or None,
                set_as_preset=bool(attributes.get(SHOULD_SET_AS_PRESET)),
            )

        return cls(pending_status_change=pending, creation=creation)

    def to_attributes(self, base: Optional[Mapping[str, Any]] = None) -> dict:
        """Write this state over ``base``; unrelated attributes are preserved."""

        out = {k: v for k, v in (base or {}).items() if k not in OWNED_KEYS}
        if self.pending_status_change is not None:
            out[PENDING_STATUS_CHANGE] = self.pending_status_change.to_dict()
        if self.creation is not None:
            out[IN_SESSION_CREATION] = True
            out[SESSION_CREATION_STEP] = self.creation.step.value
            out[SHOULD_SET_AS_PRESET] = self.creation.set_as_preset
            if self.creation.name:
                out[PENDING_SESSION_NAME] = self.creation.name
            if self.creation.start_date:
                out[PENDING_START_DATE] = self.creation.start_date
        return out
