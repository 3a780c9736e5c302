"""Field constraint validators for store updates.

A validator receives the field name and candidate value and raises
``InvalidValueError`` when the value violates a domain constraint.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Callable

from core.errors import InvalidValueError

FieldValidator = Callable[[str, object], None]


def non_negative(field_name: str, value: object) -> None:
    """Reject numeric values below zero."""
    _require_number(field_name, value)
    if value < 0:  # type: ignore[operator]
        raise InvalidValueError(f"{_label(field_name)} cannot be negative, got {value}.")


def in_range(minimum: float, maximum: float) -> FieldValidator:
    """Build a validator accepting numbers within ``[minimum, maximum]``.

    Args:
        minimum: Inclusive lower bound.
        maximum: Inclusive upper bound.

    Returns:
        Field validator.
    """

    def _validate(field_name: str, value: object) -> None:
        _require_number(field_name, value)
        if not minimum <= value <= maximum:  # type: ignore[operator]
            raise InvalidValueError(
                f"{_label(field_name)} must be between {minimum} and {maximum}, got {value}."
            )

    return _validate


def non_blank(field_name: str, value: object) -> None:
    """Reject strings that are empty after trimming."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidValueError(f"{_label(field_name)} must be a non-empty string.")


def _require_number(field_name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise InvalidValueError(
            f"{_label(field_name)} must be numeric, got {type(value).__name__}."
        )


def _label(field_name: str) -> str:
    return field_name.replace("_", " ").capitalize()
