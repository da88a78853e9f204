from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class Credential:
    """Domain entity: a ``credentials/{doc_id}`` document.

    Web users are keyed by their uid; voice users by ``alexa-<platform id>``.
    Several credentials may share one attendance ``key``.
    """

    doc_id: str
    key: Optional[str]
    email: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    alexa_user_id: Optional[str] = None
    linked_google_uid: Optional[str] = None
    mapped_to_google: bool = False
    created_at: Optional[str] = None

    @classmethod
    def from_dict(cls, doc_id: str, data: Mapping[str, Any]) -> "Credential":
        key = data.get("key")
        return cls(
            doc_id=doc_id,
            key=str(key).strip() if key else None,
            email=data.get("email"),
            name=data.get("name") or data.get("username"),
            type=data.get("type"),
            alexa_user_id=data.get("alexaUserId"),
            linked_google_uid=data.get("linkedGoogleUid"),
            mapped_to_google=bool(data.get("mappedToGoogle")),
            created_at=data.get("createdAt"),
        )

    def to_dict(self) -> dict:
        return {
            "alexaUserId": self.alexa_user_id,
            "email": self.email,
            "name": self.name,
            "type": self.type,
            "key": self.key,
            "linkedGoogleUid": self.linked_google_uid,
            "mappedToGoogle": self.mapped_to_google,
            "createdAt": self.created_at,
        }
