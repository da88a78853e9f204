from __future__ import annotations

from typing import Optional, Protocol

from .model import Credential


class CredentialRepository(Protocol):
    """Repository interface for ``credentials`` documents."""

    def get(self, doc_id: str) -> Optional[Credential]:
        raise NotImplementedError

    def find_by_email(self, email: str) -> Optional[Credential]:
        raise NotImplementedError

    def create(self, credential: Credential) -> None:
        raise NotImplementedError
