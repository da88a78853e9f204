from __future__ import annotations

from enum import Enum


class StatusKind(str, Enum):
    """Kind of status a single calendar day can carry."""

    PRESENT = "present"
    ABSENT = "absent"
    HOLIDAY = "holiday"
    NOT_ENROLLED = "not-enrolled"


class MarkResult(str, Enum):
    """Outcome of marking today's attendance."""

    APPLIED = "APPLIED"
    ALREADY_SET = "ALREADY_SET"
    NEEDS_CONFIRMATION = "NEEDS_CONFIRMATION"


class CreationStep(str, Enum):
    """Which answer the session creation dialogue is waiting for."""

    NAME = "name"
    START_DATE = "startDate"
    END_DATE = "endDate"


class DialoguePhase(str, Enum):
    IDLE = "Idle"
    AWAITING_STATUS_CONFIRMATION = "AwaitingStatusConfirmation"
    AWAITING_SESSION_NAME = "AwaitingSessionName"
    AWAITING_START_DATE = "AwaitingStartDate"
    AWAITING_END_DATE = "AwaitingEndDate"
