"""Spoken renderings of sessions and session lists."""
from __future__ import annotations

from typing import Sequence

from ..attendance.model import Session
from ..common.datetime_utils import format_spoken_date
from ..core.constants import MAX_SPOKEN_SESSIONS

NO_SESSIONS = 'You don\'t have any sessions yet. Please create a session first by saying "create session".'


def date_range(session: Session) -> str:
    return f"{format_spoken_date(session.start_date)} to {format_spoken_date(session.end_date)}"


def session_names(sessions: Sequence[Session], *, mark_preset: bool = False) -> str:
    """First few names joined with commas, e.g. ``Fall, Spring (Alexa preset)``."""

    names = []
    for s in sessions[:MAX_SPOKEN_SESSIONS]:
        names.append(f"{s.name} (Alexa preset)" if mark_preset and s.is_selected else s.name)
    return ", ".join(names)


def available_sessions(sessions: Sequence[Session]) -> str:
    listing = session_names(sessions)
    if len(sessions) > MAX_SPOKEN_SESSIONS:
        listing += ", and more"
    return f"Your available sessions are: {listing}."


def session_count(sessions: Sequence[Session]) -> str:
    plural = "s" if len(sessions) > 1 else ""
    text = f"You have {len(sessions)} session{plural}: {session_names(sessions, mark_preset=True)}"
    if len(sessions) > MAX_SPOKEN_SESSIONS:
        text += f", and {len(sessions) - MAX_SPOKEN_SESSIONS} more"
    return text


def ambiguous_sessions(identifier: str, matches: Sequence[Session]) -> str:
    ranges = " and ".join(date_range(s) for s in matches)
    codes = ", ".join(s.code for s in matches)
    return (
        f'I found {len(matches)} sessions named "{identifier}" with date ranges: {ranges}. '
        f"Please specify which one by using the session code: {codes}"
    )
