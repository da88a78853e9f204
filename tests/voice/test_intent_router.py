from __future__ import annotations

import importlib

import pytest

from conftest import FIXED_NOW, FakeProfileClient
from voice_attendance.attendance.memory_repository import InMemoryAttendanceRepository
from voice_attendance.container import build_container
from voice_attendance.users.memory_credential_repository import InMemoryCredentialRepository
from voice_attendance.users.model import Credential
from voice_attendance.voice.request import VoiceRequest

USER_ID = "amzn1.ask.account.U"


@pytest.fixture
def store():
    return InMemoryAttendanceRepository()


@pytest.fixture
def container(store):
    settings = importlib.import_module("voice_attendance.config.testing")
    return build_container(
        settings=settings,
        credentials_repo=InMemoryCredentialRepository([Credential(doc_id=f"alexa-{USER_ID}", key="key-u")]),
        attendance_repo=store,
        profiles=FakeProfileClient(),
        clock=lambda: FIXED_NOW,
    )


def _intent(name, slots=None, attributes=None, token="tok"):
    return VoiceRequest(
        request_type="IntentRequest",
        intent_name=name,
        slots=dict(slots or {}),
        user_id=USER_ID,
        access_token=token,
        attributes=dict(attributes or {}),
    )


def test_launch_without_token_sends_link_card(container):
    resp = container.router.handle(VoiceRequest(request_type="LaunchRequest", user_id=USER_ID))

    assert resp.link_account
    assert "link your account" in resp.speech


def test_launch_with_token_welcomes(container):
    resp = container.router.handle(VoiceRequest(request_type="LaunchRequest", user_id=USER_ID, access_token="tok"))

    assert resp.speech.startswith("Welcome to Attendance Tracker!")
    assert resp.end_session is False


def test_intent_without_token_sends_link_card(container):
    resp = container.router.handle(_intent("MarkPresentIntent", token=None))

    assert resp.link_account


def test_mark_present_writes_under_attendance_key(container, store):
    resp = container.router.handle(_intent("MarkPresentIntent"))

    assert resp.speech == "Successfully marked as present for today."
    assert resp.end_session is True
    assert store.raw("key-u")["records"] == {"2024-03-11": True}


def test_mark_holiday_needs_name(container):
    resp = container.router.handle(_intent("MarkHolidayIntent"))

    assert "holiday name" in resp.speech
    assert resp.end_session is False


def test_status_change_confirmation_round_trip(container, store):
    container.router.handle(_intent("MarkPresentIntent"))

    asked = container.router.handle(_intent("MarkAbsentIntent", attributes={"counter": 1}))
    assert asked.attributes["pendingStatusChange"]["newStatus"] == "absent"
    assert asked.attributes["counter"] == 1
    assert asked.end_session is False

    done = container.router.handle(_intent("AMAZON.YesIntent", attributes=asked.attributes))
    assert "from present to absent" in done.speech
    assert "pendingStatusChange" not in done.attributes
    assert store.raw("key-u")["records"] == {"2024-03-11": False}


def test_create_session_over_several_turns(container, store):
    first = container.router.handle(_intent("CreateSessionIntent"))
    named = container.router.handle(
        _intent("CreateSessionWithNameIntent", {"sessionName": "Term1"}, attributes=first.attributes)
    )
    started = container.router.handle(_intent("DateIntent", {"date": "2024-01-01"}, attributes=named.attributes))
    done = container.router.handle(_intent("DateIntent", {"date": "2024-01-05"}, attributes=started.attributes))

    assert done.speech.startswith('Successfully created session "Term1"')
    assert done.attributes == {}
    [session] = store.raw("key-u")["sessions"]
    assert (session["startDate"], session["endDate"]) == ("2024-01-01", "2024-01-05")


def test_session_attendance_speaks_counts(container, store):
    store.merge(
        "key-u",
        {
            "records": {"2024-01-01": True, "2024-01-02": False, "2024-01-04": True, "2024-01-05": False},
            "holidays": [{"date": "2024-01-03", "name": "New Year"}],
            "sessions": [
                {"name": "Term1", "code": "term1ab12", "startDate": "2024-01-01", "endDate": "2024-01-05"}
            ],
        },
    )

    resp = container.router.handle(_intent("SessionAttendanceIntent", {"sessionName": "Term1"}))

    assert resp.speech == (
        "Your session attendance for Term1 is 50 percent. You have attended 2 out of 4 working days."
    )


def test_monthly_attendance_defaults_to_current_month(container, store):
    store.merge("key-u", {"records": {"2024-03-11": True}})

    resp = container.router.handle(_intent("MonthlyAttendanceIntent"))

    assert resp.speech == "Your attendance for March 2024 is 11 percent."


def test_monthly_attendance_with_bad_month(container):
    resp = container.router.handle(_intent("MonthlyAttendanceIntent", {"month": "2024-W10"}))

    assert "couldn't understand that month" in resp.speech


def test_select_ambiguous_session_lists_codes(container, store):
    store.merge(
        "key-u",
        {
            "sessions": [
                {"name": "Fall", "code": "fall0001", "startDate": "2023-09-01", "endDate": "2023-12-20"},
                {"name": "Fall", "code": "fall0002", "startDate": "2024-09-01", "endDate": "2024-12-20"},
            ]
        },
    )

    resp = container.router.handle(_intent("SelectSessionIntent", {"sessionName": "fall"}))

    assert 'I found 2 sessions named "fall"' in resp.speech
    assert "fall0001, fall0002" in resp.speech

    picked = container.router.handle(_intent("SelectSessionIntent", {"sessionName": "fall0002"}))
    assert picked.speech == "Okay, I've set Fall as your current session and Alexa preset."
    assert [s["code"] for s in store.raw("key-u")["sessions"] if s["isSelected"]] == ["fall0002"]


def test_preset_get_and_clear(container, store):
    store.merge(
        "key-u",
        {"sessions": [{"name": "Fall", "code": "fall0001", "startDate": "2024-09-01", "endDate": None, "isSelected": True}]},
    )

    got = container.router.handle(_intent("GetAlexaPresetIntent"))
    assert got.speech == (
        "Your current Alexa preset session is Fall. It runs from September 1, 2024 to an open end date."
    )

    cleared = container.router.handle(_intent("ClearAlexaPresetIntent"))
    assert cleared.speech.startswith("I've cleared your Alexa preset session.")

    again = container.router.handle(_intent("ClearAlexaPresetIntent"))
    assert again.speech == "There was no Alexa preset session to clear."


def test_list_sessions_without_any(container):
    resp = container.router.handle(_intent("ListSessionsIntent"))

    assert resp.speech.startswith("You don't have any sessions yet.")


def test_store_failure_apologises_and_keeps_state(container, store, monkeypatch):
    def boom(key, partial):
        raise RuntimeError("store down")

    monkeypatch.setattr(store, "merge", boom)
    attributes = {
        "inSessionCreation": True,
        "sessionCreationStep": "endDate",
        "pendingSessionName": "Term1",
        "pendingStartDate": "2024-01-01",
        "shouldSetAsPreset": False,
    }

    resp = container.router.handle(_intent("DateIntent", {"date": "2024-01-05"}, attributes=attributes))

    assert resp.speech == "Sorry, I encountered an error while creating the session. Please try again."
    assert resp.attributes == attributes


def test_unknown_intent_and_session_end(container):
    unknown = container.router.handle(_intent("NoSuchIntent"))
    assert unknown.speech == "Sorry, I had trouble doing what you asked. Please try again."
    assert unknown.reprompt == "Please try again."

    ended = container.router.handle(VoiceRequest(request_type="SessionEndedRequest", reason="USER_INITIATED"))
    assert ended.speech is None


def test_help_and_stop(container):
    assert container.router.handle(_intent("AMAZON.HelpIntent")).end_session is False
    assert container.router.handle(_intent("AMAZON.StopIntent")).speech == "Goodbye! Have a great day!"
