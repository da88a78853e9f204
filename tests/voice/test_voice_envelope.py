import pytest

from voice_attendance.core.exceptions import ValidationError
from voice_attendance.voice.request import VoiceRequest
from voice_attendance.voice.response import VoiceResponse


def test_from_envelope_reads_intent_slots_user_and_attributes():
    body = {
        "session": {"attributes": {"inSessionCreation": True}, "user": {"userId": "session-user"}},
        "context": {"System": {"user": {"userId": "amzn1.ask.account.X", "accessToken": "tok"}}},
        "request": {
            "type": "IntentRequest",
            "intent": {
                "name": "MarkHolidayIntent",
                "slots": {"holidayName": {"name": "holidayName", "value": " Diwali "}, "empty": {"name": "empty"}},
            },
        },
    }

    req = VoiceRequest.from_envelope(body)

    assert req.request_type == "IntentRequest"
    assert req.intent_name == "MarkHolidayIntent"
    assert req.slot("holidayName") == "Diwali"
    assert req.slot("empty") is None
    assert req.user_id == "amzn1.ask.account.X"
    assert req.access_token == "tok"
    assert req.attributes == {"inSessionCreation": True}


def test_from_envelope_rejects_missing_request():
    with pytest.raises(ValidationError):
        VoiceRequest.from_envelope({"session": {}})

    with pytest.raises(ValidationError):
        VoiceRequest.from_envelope(None)


def test_response_envelope_with_reprompt_keeps_session_open():
    env = VoiceResponse(speech="Hi", reprompt="Again?", end_session=False, attributes={"a": 1}).to_envelope()

    assert env["version"] == "1.0"
    assert env["sessionAttributes"] == {"a": 1}
    assert env["response"]["outputSpeech"] == {"type": "PlainText", "text": "Hi"}
    assert env["response"]["reprompt"]["outputSpeech"]["text"] == "Again?"
    assert env["response"]["shouldEndSession"] is False


def test_link_account_response_has_card():
    env = VoiceResponse(speech="Please link", link_account=True).to_envelope()

    assert env["response"]["card"] == {"type": "LinkAccount"}
    assert env["response"]["shouldEndSession"] is True


def test_empty_response_has_no_speech():
    assert VoiceResponse().to_envelope()["response"] == {}
