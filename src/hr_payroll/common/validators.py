from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_length(value: Optional[str], field_name: str, min_len: int, max_len: int) -> str:
    text = (value or "").strip()
    if len(text) < min_len or len(text) > max_len:
        raise ValidationError(f"{field_name} must be between {min_len} and {max_len} characters")
    return text


def optional_max_length(value: Optional[str], field_name: str, max_len: int) -> Optional[str]:
    text = (value or "").strip()
    if not text:
        return None
    if len(text) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters")
    return text


def require_month(year: int, month: int) -> None:
    if not 1 <= int(month) <= 12:
        raise ValidationError("month must be between 1 and 12")
    if int(year) < 1:
        raise ValidationError("year must be positive")
