from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date

AFFIRMATIVE_SLOT_VALUES = {"yes", "true"}


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_date(value: Optional[str], field_name: str) -> date:
    value = require_non_empty(value, field_name)
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{field_name} is not a valid date")


def is_affirmative(value: Optional[str]) -> bool:
    return bool(value) and value.strip().lower() in AFFIRMATIVE_SLOT_VALUES
