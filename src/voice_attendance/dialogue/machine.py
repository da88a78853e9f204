"""Multi-turn flows: status-change confirmation and session creation.

Each method takes the current ``DialogueState`` and returns a ``Turn`` holding
the next state and what to say. Store errors propagate; the caller keeps the
previous state when that happens.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..attendance.model import DayStatus
from ..attendance.service import AttendanceService
from ..common.datetime_utils import format_iso, format_spoken_date, parse_iso_date
from ..common.validators import require_date
from ..core.enums import CreationStep, MarkResult, StatusKind
from ..core.exceptions import AccountLinkingRequired, NonWorkingDayError, ValidationError
from ..sessions.service import SessionService
from .state import DialogueState, PendingStatusChange, SessionCreation

START_DATE_HINT = 'like "June 1st 2024" or "2024-06-01"'
END_DATE_HINT = 'like "August 31st 2024" or "2024-08-31"'


@dataclass(frozen=True)
class Turn:
    state: DialogueState
    speech: str
    reprompt: Optional[str] = None


def _describe(status: DayStatus) -> str:
    if status.kind == StatusKind.HOLIDAY and status.holiday_name:
        return f"holiday for {status.holiday_name}"
    return status.label


def _confirmation_prompts(change: PendingStatusChange) -> tuple[str, str]:
    speech = (
        f"Today is currently marked as {change.old_status.label}. "
        f"Would you like to change it to {_describe(change.new_status)}?"
    )
    return speech, f"Should I change today's status to {_describe(change.new_status)}?"


def _require_key(key: Optional[str]) -> str:
    if not key:
        raise AccountLinkingRequired("Caller has no attendance key")
    return key


class DialogueMachine:
    def __init__(self, attendance: AttendanceService, sessions: SessionService):
        self._attendance = attendance
        self._sessions = sessions

    # region Status confirmation
    def mark(self, state: DialogueState, key: str, status: DayStatus) -> Turn:
        pending = state.pending_status_change
        if pending is not None:
            # An unanswered confirmation is asked again before any new change.
            speech, reprompt = _confirmation_prompts(pending)
            return Turn(state=state, speech=f"Before that, please answer yes or no. {speech}", reprompt=reprompt)

        try:
            outcome = self._attendance.mark_today(key, status)
        except NonWorkingDayError:
            return Turn(
                state=state,
                speech="Today is a non-working day. You cannot mark attendance on non-working days.",
            )

        if outcome.result == MarkResult.ALREADY_SET:
            existing = outcome.existing or status
            if existing.kind == StatusKind.HOLIDAY:
                return Turn(state=state, speech=f"Today is already marked as holiday for {existing.holiday_name or 'a holiday'}.")
            return Turn(state=state, speech=f"Today is already marked as {existing.label}.")

        if outcome.result == MarkResult.NEEDS_CONFIRMATION:
            change = PendingStatusChange(
                date=format_iso(outcome.day),
                new_status=status,
                old_status=outcome.existing,
            )
            speech, reprompt = _confirmation_prompts(change)
            return Turn(state=state.with_pending(change), speech=speech, reprompt=reprompt)

        if status.kind == StatusKind.HOLIDAY:
            return Turn(state=state, speech=f"Successfully marked as holiday for {status.holiday_name}.")
        return Turn(state=state, speech=f"Successfully marked as {status.label} for today.")

    def confirm(self, state: DialogueState, key: Optional[str]) -> Turn:
        """Handle a yes.

        Applies a pending change; with nothing pending and no creation running,
        a yes starts creating a session.
        """

        change = state.pending_status_change
        if change is not None:
            self._attendance.set_day_status(_require_key(key), parse_iso_date(change.date), change.new_status)
            speech = f"Okay, I've changed {change.date} from {change.old_status.label} to {change.new_status.label}"
            if change.new_status.kind == StatusKind.HOLIDAY and change.new_status.holiday_name:
                speech += f" for {change.new_status.holiday_name}"
            return Turn(state=state.with_pending(None), speech=speech + ".")

        if not state.in_creation:
            return Turn(
                state=state.with_creation(SessionCreation(step=CreationStep.NAME)),
                speech='Great! What would you like to name this session? For example, "Summer 2024" or "Academic Year 2024-25".',
                reprompt="What should I call this session?",
            )

        return Turn(
            state=state,
            speech="Okay, what would you like to do next?",
            reprompt="Okay, what would you like to do next?",
        )

    def decline(self, state: DialogueState) -> Turn:
        return Turn(
            state=DialogueState(),
            speech="Okay, I won't make any changes. Let me know if you need anything else.",
        )

    # endregion

    # region Session creation
    def start_creation(self, state: DialogueState, *, set_as_preset: bool = False) -> Turn:
        speech = "Okay, let's create a new session. What would you like to name this session?"
        if set_as_preset:
            speech += " This session will be set as your Alexa preset."
        return Turn(
            state=state.with_creation(SessionCreation(step=CreationStep.NAME, set_as_preset=set_as_preset)),
            speech=speech,
            reprompt="What should I call this session?",
        )

    def provide_name(self, state: DialogueState, name: Optional[str], *, set_as_preset: bool = False) -> Turn:
        if not name or not name.strip():
            return Turn(
                state=state,
                speech='Please provide a session name. For example, say "create session called Summer 2024".',
                reprompt="What would you like to name this session?",
            )

        name = name.strip()
        keep_preset = bool(state.creation and state.creation.set_as_preset)
        creation = SessionCreation(
            step=CreationStep.START_DATE,
            name=name,
            set_as_preset=set_as_preset or keep_preset,
        )
        return Turn(
            state=state.with_creation(creation),
            speech=f'Okay, I\'ll create session "{name}". When does this session start? Please provide a start date {START_DATE_HINT}.',
            reprompt="Please tell me the start date for this session.",
        )

    def provide_date(self, state: DialogueState, key: Optional[str], value: Optional[str]) -> Turn:
        creation = state.creation
        if creation is None or creation.step == CreationStep.NAME:
            return self._loose_date(state, value)

        if creation.step == CreationStep.START_DATE:
            try:
                start = require_date(value, "Start date")
            except ValidationError:
                return Turn(
                    state=state,
                    speech=f"I didn't catch the start date. Please provide a start date {START_DATE_HINT}.",
                    reprompt="When does the session start?",
                )
            next_creation = SessionCreation(
                step=CreationStep.END_DATE,
                name=creation.name,
                start_date=format_iso(start),
                set_as_preset=creation.set_as_preset,
            )
            return Turn(
                state=state.with_creation(next_creation),
                speech=f"Okay, starting on {format_spoken_date(start)}. When does the session end?",
                reprompt="Please provide an end date for the session.",
            )

        try:
            end = require_date(value, "End date")
        except ValidationError:
            return Turn(
                state=state,
                speech=f"I didn't catch the end date. Please provide an end date {END_DATE_HINT}.",
                reprompt="When does the session end?",
            )

        start = parse_iso_date(creation.start_date)
        if end < start:
            return Turn(
                state=state,
                speech=f"The end date has to be on or after {format_spoken_date(start)}. When does the session end?",
                reprompt="When does the session end?",
            )

        saved = self._sessions.save_session(
            _require_key(key),
            name=creation.name or "",
            start_date=start,
            end_date=end,
            set_as_preset=creation.set_as_preset,
        )
        speech = (
            f'Successfully created session "{saved.name}" from '
            f"{format_spoken_date(start)} to {format_spoken_date(end)}."
        )
        if creation.set_as_preset:
            speech += " I've also set it as your Alexa preset session."
        return Turn(state=state.with_creation(None), speech=speech)

    def _loose_date(self, state: DialogueState, value: Optional[str]) -> Turn:
        if value:
            return Turn(
                state=state,
                speech=f"You said the date is {format_spoken_date(value)}. What would you like to do with this date?",
                reprompt="What would you like to do with this date?",
            )
        return Turn(state=state, speech="I'm not sure what date you're referring to. Please try again.")

    # endregion
