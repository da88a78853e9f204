from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class VoiceRequest:
    """Structured inbound turn: intent, slot values and caller identity."""

    request_type: str
    intent_name: Optional[str] = None
    slots: dict[str, str] = field(default_factory=dict)
    user_id: Optional[str] = None
    access_token: Optional[str] = None
    attributes: dict[str, Any] = field(default_factory=dict)
    reason: Optional[str] = None

    def slot(self, name: str) -> Optional[str]:
        value = self.slots.get(name)
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @classmethod
    def from_envelope(cls, body: Mapping[str, Any]) -> "VoiceRequest":
        """Parse an Alexa-style request envelope."""

        if not isinstance(body, Mapping) or not isinstance(body.get("request"), Mapping):
            raise ValidationError("Request envelope is missing 'request'")

        request = body["request"]
        session = body.get("session") or {}
        system = (body.get("context") or {}).get("System") or {}
        user = system.get("user") or session.get("user") or {}

        intent = request.get("intent") or {}
        slots: dict[str, str] = {}
        for name, slot in (intent.get("slots") or {}).items():
            if isinstance(slot, Mapping) and slot.get("value") is not None:
                slots[name] = str(slot["value"])

        return cls(
            request_type=str(request.get("type") or ""),
            intent_name=intent.get("name"),
            slots=slots,
            user_id=user.get("userId"),
            access_token=user.get("accessToken"),
            attributes=dict(session.get("attributes") or {}),
            reason=request.get("reason"),
        )
