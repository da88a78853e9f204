from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class VoiceResponse:
    speech: Optional[str] = None
    reprompt: Optional[str] = None
    end_session: bool = True
    link_account: bool = False
    attributes: dict[str, Any] = field(default_factory=dict)

    def to_envelope(self) -> dict:
        response: dict[str, Any] = {}
        if self.speech:
            response["outputSpeech"] = {"type": "PlainText", "text": self.speech}
        if self.reprompt:
            response["reprompt"] = {"outputSpeech": {"type": "PlainText", "text": self.reprompt}}
        if self.link_account:
            response["card"] = {"type": "LinkAccount"}
        if self.speech or self.reprompt:
            response["shouldEndSession"] = self.end_session

        return {
            "version": "1.0",
            "sessionAttributes": dict(self.attributes),
            "response": response,
        }
