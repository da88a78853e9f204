from __future__ import annotations

import copy
from typing import Any, Mapping

from .model import AttendanceDocument
from .repository import AttendanceRepository


class InMemoryAttendanceRepository(AttendanceRepository):
    """Process-local store used by the development/testing settings."""

    def __init__(self, documents: Mapping[str, Mapping[str, Any]] | None = None):
        self._documents: dict[str, dict[str, Any]] = {
            k: copy.deepcopy(dict(v)) for k, v in (documents or {}).items()
        }

    def get(self, key: str) -> AttendanceDocument:
        return AttendanceDocument.from_dict(self._documents.get(key))

    def merge(self, key: str, partial: Mapping[str, Any]) -> None:
        doc = self._documents.setdefault(key, {})
        doc.update(copy.deepcopy(dict(partial)))

    def raw(self, key: str) -> dict[str, Any]:
        return copy.deepcopy(self._documents.get(key, {}))
