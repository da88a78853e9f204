from __future__ import annotations

from typing import Any, Mapping, Protocol

from .model import AttendanceDocument


class AttendanceRepository(Protocol):
    """Document store for ``attendance/{key}``.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get(self, key: str) -> AttendanceDocument:
        """Return the document, or an empty-shaped one if nothing is stored."""

        raise NotImplementedError

    def merge(self, key: str, partial: Mapping[str, Any]) -> None:
        """Shallow merge-upsert: top-level fields missing from ``partial`` are kept."""

        raise NotImplementedError
