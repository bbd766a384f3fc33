from __future__ import annotations

import re
from typing import Optional

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")
_PIN_RE = re.compile(r"^\d{4,6}$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must have at least {min_len} characters")
    return value


def require_email(value: str) -> str:
    value = require_non_empty(value, "Email").lower()
    if not _EMAIL_RE.match(value):
        raise ValidationError("Invalid email")
    return value


def require_color(value: str) -> str:
    value = (value or "").strip()
    if not _COLOR_RE.match(value):
        raise ValidationError("Colour must be #RRGGBB")
    return value.upper()


def require_pin(value: Optional[str]) -> str:
    value = (value or "").strip()
    if not _PIN_RE.match(value):
        raise ValidationError("PIN must have 4 to 6 digits")
    return value


def require_range(value: float, field_name: str, low: float, high: float) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not low <= v <= high:
        raise ValidationError(f"{field_name} must be between {low} and {high}")
    return v
