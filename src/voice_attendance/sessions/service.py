from __future__ import annotations

import logging
import random
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..attendance.model import Session
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import format_iso, now_local
from ..common.validators import require_non_empty
from . import manager

logger = logging.getLogger(__name__)


class SessionService:
    """Use case: manage the sessions stored in a user's attendance document."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        clock: Callable[[], datetime] = now_local,
        rng: Optional[random.Random] = None,
    ):
        self._attendance = attendance
        self._clock = clock
        self._rng = rng

    def _save(self, key: str, sessions: Sequence[Session]) -> None:
        self._attendance.merge(key, {"sessions": [s.to_dict() for s in sessions]})

    def list_sessions(self, key: str) -> list[Session]:
        return list(self._attendance.get(key).sessions)

    def get_preset(self, key: str) -> Optional[Session]:
        return self._attendance.get(key).selected_session()

    def set_preset(self, key: str, identifier: str) -> Session:
        """Make the identified session the only preset.

        Raises NoSessionsError, NotFoundError or AmbiguousSessionError.
        """

        sessions, selected = manager.set_preset(self.list_sessions(key), identifier)
        self._save(key, sessions)
        logger.info("Preset session for %s is now %s", key, selected.code)
        return selected

    def clear_preset(self, key: str) -> bool:
        """Deselect every session. Returns whether a preset was set before."""

        sessions = self.list_sessions(key)
        had_preset = any(s.is_selected for s in sessions)
        self._save(key, manager.clear_preset(sessions))
        return had_preset

    def save_session(
        self,
        key: str,
        *,
        name: str,
        start_date: date,
        end_date: Optional[date],
        set_as_preset: bool = False,
    ) -> Session:
        name = require_non_empty(name, "Session name")
        sessions, saved = manager.upsert(
            self.list_sessions(key),
            name=name,
            start_date=format_iso(start_date),
            end_date=format_iso(end_date) if end_date else None,
            set_as_preset=set_as_preset,
            now=self._clock(),
            rng=self._rng,
        )
        self._save(key, sessions)
        logger.info("Saved session %s (%s) for %s", saved.name, saved.code, key)
        return saved
