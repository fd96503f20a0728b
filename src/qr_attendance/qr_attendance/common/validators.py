from __future__ import annotations

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def require_non_empty(value: str | None, field_name: str) -> str:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def optional_iso_date(value: str | None, field_name: str = "date"):
    if not value:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be YYYY-MM-DD")
    try:
        return parse_iso_date(value.strip())
    except ValueError as exc:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD") from exc
