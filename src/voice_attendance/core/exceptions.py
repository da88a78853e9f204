from __future__ import annotations

from typing import Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when a required slot is missing or cannot be parsed."""


class NotFoundError(DomainError):
    """Raised when a session (or day) lookup has no match."""


class NoSessionsError(DomainError):
    """Raised when the user has not created any session yet."""


class AmbiguousSessionError(DomainError):
    """Raised when a session name matches more than one session.

    The matches are kept so the caller can read back every code and date range.
    """

    def __init__(self, identifier: str, matches: Sequence) -> None:
        super().__init__(f"{len(matches)} sessions named {identifier!r}")
        self.identifier = identifier
        self.matches = tuple(matches)


class NonWorkingDayError(DomainError):
    """Raised when attendance is marked on a Sunday or a weekly day off."""


class StoreError(DomainError):
    """Raised when the underlying document store call fails."""


class AccountLinkingRequired(DomainError):
    """Raised when the request carries no access token."""
