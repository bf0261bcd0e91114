from __future__ import annotations

from datetime import time
from typing import Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_hhmm


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_time(value: str, field_name: str) -> time:
    try:
        return parse_hhmm(value)
    except ValueError:
        raise ValidationError(f"{field_name} must be a valid time (HH:MM)")
