from __future__ import annotations

import math
import re
from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def optional_text(value: object, field_name: str, *, max_length: Optional[int] = None) -> Optional[str]:
    """Trimmed text or None when blank."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    text = value.strip()
    if max_length is not None and len(text) > max_length:
        raise ValidationError(f"{field_name} must be {max_length} characters or less")
    return text or None


def to_number(value: object) -> Optional[float]:
    """Lenient numeric coercion: None for missing, non-numeric or non-finite input."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def require_coordinate(value: object, field_name: str, *, limit: float) -> float:
    number = to_number(value)
    if number is None:
        raise ValidationError("Location coordinates are required")
    if not -limit <= number <= limit:
        raise ValidationError(f"{field_name} must be between -{limit:g} and {limit:g}")
    return number


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (29.5 -> 30), unlike round()."""
    return int(math.floor(value + 0.5))


EMAIL_PATTERN = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")


def require_email(value: object) -> str:
    if not isinstance(value, str) or not EMAIL_PATTERN.fullmatch(value.strip()):
        raise ValidationError("Enter a valid email")
    return value.strip().lower()
