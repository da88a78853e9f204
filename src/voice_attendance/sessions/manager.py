"""Pure operations over a user's session list.

Every function returns a new list; callers persist it with a single merge of
the ``sessions`` field.
"""
from __future__ import annotations

import random
import re
import string
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from ..attendance.model import Session
from ..core.constants import SESSION_CODE_PREFIX_LENGTH, SESSION_CODE_SUFFIX_LENGTH
from ..core.exceptions import AmbiguousSessionError, NoSessionsError, NotFoundError

_CODE_ALPHABET = string.ascii_lowercase + string.digits


@dataclass(frozen=True)
class SessionResolution:
    identifier: str
    matches: tuple[Session, ...]
    by_code: bool = False

    @property
    def found(self) -> bool:
        return bool(self.matches)

    @property
    def is_ambiguous(self) -> bool:
        return len(self.matches) > 1

    @property
    def session(self) -> Optional[Session]:
        return self.matches[0] if len(self.matches) == 1 else None


def generate_session_code(name: str, *, rng: Optional[random.Random] = None) -> str:
    rng = rng or random.Random()
    base = re.sub(r"[^a-z0-9]", "", name.lower())[:SESSION_CODE_PREFIX_LENGTH]
    suffix = "".join(rng.choice(_CODE_ALPHABET) for _ in range(SESSION_CODE_SUFFIX_LENGTH))
    return base + suffix


def _same_name(session: Session, name: str) -> bool:
    return session.name.lower() == name.strip().lower()


def find_by_name_or_code(sessions: Sequence[Session], identifier: str) -> Optional[Session]:
    """First session whose name (case-insensitive) or code equals ``identifier``."""
    return next((s for s in sessions if _same_name(s, identifier) or s.code == identifier), None)


def resolve(sessions: Sequence[Session], identifier: str) -> SessionResolution:
    """Exact code first, then case-insensitive name.

    Several sessions can share a name; they all come back so the caller can ask
    for a code.
    """

    identifier = identifier.strip()
    by_code = [s for s in sessions if s.code == identifier]
    if by_code:
        return SessionResolution(identifier=identifier, matches=(by_code[0],), by_code=True)

    by_name = tuple(s for s in sessions if _same_name(s, identifier))
    return SessionResolution(identifier=identifier, matches=by_name)


def sort_newest_first(sessions: Sequence[Session]) -> list[Session]:
    return sorted(sessions, key=lambda s: s.created_at, reverse=True)


def set_preset(sessions: Sequence[Session], identifier: str) -> tuple[list[Session], Session]:
    if not sessions:
        raise NoSessionsError("No sessions found")

    resolution = resolve(sessions, identifier)
    if resolution.is_ambiguous:
        raise AmbiguousSessionError(resolution.identifier, resolution.matches)
    target = resolution.session
    if target is None:
        raise NotFoundError(f"Session {identifier!r} not found")

    updated = [s.with_selected(s.code == target.code) for s in sessions]
    return updated, target.with_selected(True)


def clear_preset(sessions: Sequence[Session]) -> list[Session]:
    return [s.with_selected(False) for s in sessions]


def upsert(
    sessions: Sequence[Session],
    *,
    name: str,
    start_date: str,
    end_date: Optional[str],
    set_as_preset: bool,
    now: datetime,
    rng: Optional[random.Random] = None,
) -> tuple[list[Session], Session]:
    """Insert a session, or replace the one with the same name or code.

    A replaced session keeps its code so earlier references stay valid.
    """

    name = name.strip()
    code = generate_session_code(name, rng=rng)
    existing = next((s for s in sessions if _same_name(s, name) or s.code == code), None)

    saved = Session(
        name=name,
        code=existing.code if existing else code,
        start_date=start_date,
        end_date=end_date,
        created_at=now.isoformat(),
        is_selected=set_as_preset,
    )

    updated = [s for s in sessions if s is not existing]
    updated.append(saved)
    if set_as_preset:
        updated = [s if s is saved else s.with_selected(False) for s in updated]

    return sort_newest_first(updated), saved
