from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from ..attendance.model import DayStatus
from ..common.datetime_utils import format_spoken_date, month_label, now_local, parse_year_month, year_month
from ..common.validators import is_affirmative
from ..core.exceptions import (
    AccountLinkingRequired,
    AmbiguousSessionError,
    NoSessionsError,
    NotFoundError,
)
from ..dialogue.machine import DialogueMachine, Turn
from ..dialogue.state import DialogueState
from ..reports.service import AttendanceReportService
from ..sessions.service import SessionService
from ..users.service import IdentityService
from . import speech
from .request import VoiceRequest
from .response import VoiceResponse

logger = logging.getLogger(__name__)

Handler = Callable[[VoiceRequest, DialogueState], VoiceResponse]

GENERIC_APOLOGY = "Sorry, I had trouble doing what you asked. Please try again."
HELP_TEXT = (
    'You can mark your attendance by saying: "mark present", "mark absent", or "mark holiday for [holiday name]". '
    'You can also ask for "monthly attendance" or "session attendance" to get your percentage. '
    'To create a session, say "create session" or "create session Summer 2024". '
    'When asked for dates, you can say things like "June first 2024" or "2024-06-01". '
    'To switch sessions, say "use session [session name]" or "use session [session code]". '
    'You can also set an Alexa preset session by saying "set [session name] as Alexa preset". '
    "What would you like to do?"
)
FALLBACK_TEXT = (
    "Sorry, I didn't understand that. You can mark attendance, ask for percentages, "
    "or say help for more options. What would you like to do?"
)
WELCOME_TEXT = (
    "Welcome to Attendance Tracker! You can mark your attendance as present, absent, or holiday. "
    "You can also ask for monthly or session attendance percentages. What would you like to do?"
)

APOLOGIES = {
    "MarkPresentIntent": "Sorry, I encountered an error while marking attendance. Please try again.",
    "MarkAbsentIntent": "Sorry, I encountered an error while marking attendance. Please try again.",
    "MarkHolidayIntent": "Sorry, I encountered an error while marking holiday. Please try again.",
    "MonthlyAttendanceIntent": "Sorry, I encountered an error while fetching monthly attendance. Please try again.",
    "SessionAttendanceIntent": "Sorry, I encountered an error while fetching session attendance. Please try again.",
    "GetAttendancePercentageIntent": "Sorry, I encountered an error while fetching your attendance percentage. Please try again.",
    "SetAlexaPresetIntent": "Sorry, I encountered an error while setting Alexa preset session. Please try again.",
    "GetAlexaPresetIntent": "Sorry, I encountered an error while fetching your Alexa preset session. Please try again.",
    "ClearAlexaPresetIntent": "Sorry, I encountered an error while clearing your Alexa preset session. Please try again.",
    "SelectSessionIntent": "Sorry, I encountered an error while setting your session. Please try again.",
    "ListSessionsIntent": "Sorry, I encountered an error while listing your sessions. Please try again.",
    "CreateSessionIntent": "Sorry, I encountered an error while starting session creation. Please try again.",
    "CreateSessionWithNameIntent": "Sorry, I encountered an error while creating the session. Please try again.",
    "DateIntent": "Sorry, I encountered an error while creating the session. Please try again.",
    "AMAZON.YesIntent": "Sorry, I encountered an error while updating the status. Please try again.",
}


class IntentRouter:
    """Map one inbound voice request to a use case and render the reply."""

    def __init__(
        self,
        *,
        identity: IdentityService,
        reports: AttendanceReportService,
        sessions: SessionService,
        dialogue: DialogueMachine,
        clock: Callable[[], datetime] = now_local,
    ):
        self._identity = identity
        self._reports = reports
        self._sessions = sessions
        self._dialogue = dialogue
        self._clock = clock
        self._handlers: dict[str, Handler] = {
            "MarkPresentIntent": self._mark_present,
            "MarkAbsentIntent": self._mark_absent,
            "MarkHolidayIntent": self._mark_holiday,
            "MonthlyAttendanceIntent": self._monthly_attendance,
            "SessionAttendanceIntent": self._session_attendance,
            "GetAttendancePercentageIntent": self._attendance_percentage,
            "SetAlexaPresetIntent": self._set_preset,
            "GetAlexaPresetIntent": self._get_preset,
            "ClearAlexaPresetIntent": self._clear_preset,
            "SelectSessionIntent": self._select_session,
            "ListSessionsIntent": self._list_sessions,
            "CreateSessionIntent": self._create_session,
            "CreateSessionWithNameIntent": self._create_session_with_name,
            "DateIntent": self._date,
            "AMAZON.YesIntent": self._yes,
            "AMAZON.NoIntent": self._no,
            "AMAZON.HelpIntent": self._help,
            "AMAZON.CancelIntent": self._stop,
            "AMAZON.StopIntent": self._stop,
            "AMAZON.FallbackIntent": self._fallback,
        }

    # region Dispatch
    def handle(self, req: VoiceRequest) -> VoiceResponse:
        state = DialogueState.from_attributes(req.attributes)

        if req.request_type == "LaunchRequest":
            return self._launch(req, state)
        if req.request_type == "SessionEndedRequest":
            logger.info("Session ended with reason: %s", req.reason)
            return VoiceResponse(attributes=dict(req.attributes))

        handler = self._handlers.get(req.intent_name or "") if req.request_type == "IntentRequest" else None
        if handler is None:
            logger.warning("No handler for %s %s", req.request_type, req.intent_name)
            return VoiceResponse(
                speech=GENERIC_APOLOGY, reprompt="Please try again.", end_session=False, attributes=dict(req.attributes)
            )

        try:
            return handler(req, state)
        except AccountLinkingRequired:
            return self._link_account(req)
        except Exception:
            # The dialogue state stays as it was before the failing call.
            logger.exception("Error in %s", req.intent_name)
            return VoiceResponse(
                speech=APOLOGIES.get(req.intent_name or "", GENERIC_APOLOGY),
                attributes=dict(req.attributes),
            )

    def _key(self, req: VoiceRequest) -> str:
        return self._identity.resolve_caller(req.user_id or "", req.access_token)

    @staticmethod
    def _reply(
        req: VoiceRequest, state: DialogueState, text: str, reprompt: Optional[str] = None
    ) -> VoiceResponse:
        return VoiceResponse(
            speech=text,
            reprompt=reprompt,
            end_session=reprompt is None,
            attributes=state.to_attributes(req.attributes),
        )

    def _turn(self, req: VoiceRequest, turn: Turn) -> VoiceResponse:
        return self._reply(req, turn.state, turn.speech, turn.reprompt)

    @staticmethod
    def _link_account(req: VoiceRequest) -> VoiceResponse:
        return VoiceResponse(
            speech="Please link your account to continue. I sent a card to your Alexa app.",
            link_account=True,
            attributes=dict(req.attributes),
        )

    # endregion

    # region Launch & marking
    def _launch(self, req: VoiceRequest, state: DialogueState) -> VoiceResponse:
        if not req.access_token:
            return self._link_account(req)
        try:
            self._key(req)
        except Exception:
            logger.exception("Error in LaunchRequest")
            return self._reply(
                req,
                state,
                "Welcome to Attendance Tracker! What would you like to do?",
                "What would you like to do?",
            )
        return self._reply(
            req,
            state,
            WELCOME_TEXT,
            "What would you like to do? You can say mark present, mark absent, or ask for attendance percentage.",
        )

    def _mark_present(self, req: VoiceRequest, state: DialogueState) -> VoiceResponse:
        return self._turn(req, self._dialogue.mark(state, self._key(req), DayStatus.present()))

    def _mark_absent(self, req: VoiceRequest, state: DialogueState) -> VoiceResponse:
        return self._turn(req, self._dialogue.mark(state, self._key(req), DayStatus.absent()))

    def _mark_holiday(self, req: VoiceRequest, state: DialogueState) -> VoiceResponse:
        if not req.access_token:
            return self._link_account(req)
        holiday_name = req.slot("holidayName")
        if not holiday_name:
            return self._reply(
                req,
                state,
                'Please specify the holiday name. For example, say "mark holiday for Diwali".',
                "What is the name of the holiday?",
            )
        return self._turn(req, self._dialogue.mark(state, self._key(req), DayStatus.holiday(holiday_name)))

    # endregion

    # region Percentages
    def _monthly_attendance(self, req: VoiceRequest, state: DialogueState) -> VoiceResponse:
        key = self._key(req)
        month_slot = req.slot("month")
        if month_slot:
            try:
                year, month = parse_year_month(month_slot)
            except ValueError:
                return self._reply(
                    req, state, "I couldn't understand that month. Please name a month, like March 2024.", "Which month?"
                )
            target = f"{year}-{month:02d}"
        else:
            target = year_month(self._clock().date())

        percentage = self._reports.monthly_for_key(key, target)
        return self._reply(req, state, f"Your attendance for {month_label(target)} is {percentage} percent.")

    def _session_attendance(self, req: VoiceRequest, state: DialogueState) -> VoiceResponse:
        result = self._reports.session_for_key(self._key(req), req.slot("sessionName"))
        return self._reply(
            req,
            state,
            f"Your session attendance for {result.session_label} is {result.percentage} percent. "
            f"You have attended {result.present_days} out of {result.total_working_days} working days.",
        )

    def _attendance_percentage(self, req: VoiceRequest, state: DialogueState) -> VoiceResponse:
        result = self._reports.session_for_key(self._key(req))
        return self._reply(
            req,
            state,
            f"Your attendance percentage is {result.percentage} percent for {result.session_label}. "
            f"You have attended {result.present_days} out of {result.total_working_days} working days.",
        )

    # endregion

    # region Sessions
    def _set_preset(self, req: VoiceRequest, state: DialogueState) -> VoiceResponse:
        key = self._key(req)
        name = req.slot("sessionName")

        if not name:
            sessions = self._sessions.list_sessions(key)
            if not sessions:
                return self._reply(req, state, speech.NO_SESSIONS)
            text = f"Your available sessions are: {speech.session_names(sessions, mark_preset=True)}."
            preset = next((s for s in sessions if s.is_selected), None)
            if preset:
                text += f" Your current Alexa preset session is {preset.name}."
            text += " Which session would you like to set as Alexa preset?"
            return self._reply(req, state, text, "Please tell me which session you want to set as Alexa preset.")

        try:
            session = self._sessions.set_preset(key, name)
        except NoSessionsError:
            return self._reply(req, state, speech.NO_SESSIONS)
        except NotFoundError:
            return self._reply(
                req,
                state,
                f'Session "{name}" not found. Please tell me which session you want to set as Alexa preset.',
                "Which session should I set as Alexa preset?",
            )
        except AmbiguousSessionError as exc:
            return self._reply(
                req,
                state,
                speech.ambiguous_sessions(name, exc.matches),
                "Please tell me the session code to select the correct session.",
            )

        return self._reply(
            req,
            state,
            f"Okay, I've set {session.name} as your Alexa preset session. "
            "Now when you ask for session attendance, I'll automatically use this session.",
        )

    def _get_preset(self, req: VoiceRequest, state: DialogueState) -> VoiceResponse:
        preset = self._sessions.get_preset(self._key(req))
        if preset is None:
            return self._reply(
                req,
                state,
                "You don't have an Alexa preset session set. "
                'You can set one by saying "set [session name] as Alexa preset".',
            )
        return self._reply(
            req,
            state,
            f"Your current Alexa preset session is {preset.name}. "
            f"It runs from {format_spoken_date(preset.start_date)} to {format_spoken_date(preset.end_date)}.",
        )

    def _clear_preset(self, req: VoiceRequest, state: DialogueState) -> VoiceResponse:
        if not self._sessions.clear_preset(self._key(req)):
            return self._reply(req, state, "There was no Alexa preset session to clear.")
        return self._reply(
            req,
            state,
            "I've cleared your Alexa preset session. "
            "Next time you ask for attendance, I'll ask which session you want to use.",
        )

    def _select_session(self, req: VoiceRequest, state: DialogueState) -> VoiceResponse:
        key = self._key(req)
        name = req.slot("sessionName")
        reprompt = "Please tell me which session you want to use."

        if not name:
            sessions = self._sessions.list_sessions(key)
            if not sessions:
                return self._reply(req, state, speech.NO_SESSIONS)
            return self._reply(
                req, state, f"{speech.available_sessions(sessions)} Which session would you like to use?", reprompt
            )

        try:
            session = self._sessions.set_preset(key, name)
        except NoSessionsError:
            return self._reply(
                req,
                state,
                f'Session "{name}" not found. You don\'t have any sessions yet. '
                'Please create a session first by saying "create session".',
            )
        except NotFoundError:
            sessions = self._sessions.list_sessions(key)
            return self._reply(
                req,
                state,
                f'Session "{name}" not found. {speech.available_sessions(sessions)} Which session would you like to use?',
                reprompt,
            )
        except AmbiguousSessionError as exc:
            return self._reply(
                req,
                state,
                speech.ambiguous_sessions(name, exc.matches),
                "Please tell me the session code to select the correct session.",
            )

        return self._reply(req, state, f"Okay, I've set {session.name} as your current session and Alexa preset.")

    def _list_sessions(self, req: VoiceRequest, state: DialogueState) -> VoiceResponse:
        sessions = self._sessions.list_sessions(self._key(req))
        if not sessions:
            return self._reply(
                req, state, 'You don\'t have any sessions yet. You can create one by saying "create session".'
            )

        text = speech.session_count(sessions)
        preset = next((s for s in sessions if s.is_selected), None)
        if preset:
            text += f". Your Alexa preset session is {preset.name}."
        return self._reply(req, state, text)

    # endregion

    # region Session creation & confirmations
    def _create_session(self, req: VoiceRequest, state: DialogueState) -> VoiceResponse:
        self._key(req)
        turn = self._dialogue.start_creation(state, set_as_preset=is_affirmative(req.slot("setAsPreset")))
        return self._turn(req, turn)

    def _create_session_with_name(self, req: VoiceRequest, state: DialogueState) -> VoiceResponse:
        if not req.access_token:
            return self._link_account(req)
        name = req.slot("sessionName")
        if name:
            self._key(req)
        turn = self._dialogue.provide_name(state, name, set_as_preset=is_affirmative(req.slot("setAsPreset")))
        return self._turn(req, turn)

    def _date(self, req: VoiceRequest, state: DialogueState) -> VoiceResponse:
        key = self._key(req) if state.in_creation else None
        return self._turn(req, self._dialogue.provide_date(state, key, req.slot("date")))

    def _yes(self, req: VoiceRequest, state: DialogueState) -> VoiceResponse:
        key = self._key(req) if state.pending_status_change is not None else None
        return self._turn(req, self._dialogue.confirm(state, key))

    def _no(self, req: VoiceRequest, state: DialogueState) -> VoiceResponse:
        return self._turn(req, self._dialogue.decline(state))

    # endregion

    # region Built-ins
    def _help(self, req: VoiceRequest, state: DialogueState) -> VoiceResponse:
        return self._reply(req, state, HELP_TEXT, HELP_TEXT)

    def _stop(self, req: VoiceRequest, state: DialogueState) -> VoiceResponse:
        return self._reply(req, state, "Goodbye! Have a great day!")

    def _fallback(self, req: VoiceRequest, state: DialogueState) -> VoiceResponse:
        return self._reply(req, state, FALLBACK_TEXT, FALLBACK_TEXT)

    # endregion
