"""
Input coercion shared by the services.
"""

from datetime import date
from enum import Enum
from typing import Optional, Type, TypeVar, Union

from .errors import ValidationError

E = TypeVar("E", bound=Enum)


def coerce_enum(enum_cls: Type[E], value: Union[str, E], field: str) -> E:
    """Turn a raw status string into its enum member or raise ``ValidationError``."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {field} '{value}'. Expected one of: {allowed}", field=field)


def require_text(value: Optional[str], field: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{field} is required", field=field)
    return cleaned


def require_date_range(start_date: date, end_date: date) -> None:
    if end_date <= start_date:
        raise ValidationError("End date must be after start date", field="end_date")
