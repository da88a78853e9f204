from __future__ import annotations

from typing import Iterable, Optional

from .model import Credential
from .repository import CredentialRepository


class InMemoryCredentialRepository(CredentialRepository):
    def __init__(self, credentials: Iterable[Credential] = ()):
        self._by_id: dict[str, Credential] = {c.doc_id: c for c in credentials}

    def get(self, doc_id: str) -> Optional[Credential]:
        return self._by_id.get(doc_id)

    def find_by_email(self, email: str) -> Optional[Credential]:
        return next((c for c in self._by_id.values() if c.email == email), None)

    def create(self, credential: Credential) -> None:
        self._by_id[credential.doc_id] = credential
