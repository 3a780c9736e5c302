"""Typed field value conversion.

This module converts single entity field values between Python objects,
JSON-safe payload values, and raw delimited text. Conversions raise
``ValueError`` or ``TypeError``; callers map them onto their own error kind.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Literal, get_args, get_origin

from core.constants import FALSE_VALUES, TRUE_VALUES

SUPPORTED_FIELD_TYPES: tuple[type, ...] = (bool, int, float, str, Decimal, datetime, date)


def ensure_supported_type(field_type: Any, field_name: str) -> Any:
    """Validate that a declared field type has a codec.

    Args:
        field_type: Resolved type annotation.
        field_name: Field name for error context.

    Returns:
        The field type.

    Raises:
        TypeError: If the annotation is neither a supported concrete type
            nor a ``Literal`` of strings.
    """
    if field_type in SUPPORTED_FIELD_TYPES:
        return field_type
    if _is_string_literal(field_type):
        return field_type
    raise TypeError(
        f"Unsupported type for field '{field_name}': {field_type!r}. "
        "Use int, str, float, bool, Decimal, date, datetime, or a Literal of strings."
    )


def type_name(field_type: Any) -> str:
    """Return a readable name for a supported field type."""
    if get_origin(field_type) is Literal:
        return "one of " + ", ".join(repr(choice) for choice in get_args(field_type))
    return field_type.__name__


def encode_value(value: object, field_type: Any) -> object:
    """Encode one field value into a JSON-safe payload value.

    Args:
        value: Field value.
        field_type: Declared field type.

    Returns:
        JSON-encodable value.

    Raises:
        TypeError: If the value does not match the field type.
        ValueError: If the value is not an allowed choice or not finite.
    """
    if get_origin(field_type) is Literal:
        return _require_choice(value, field_type)
    if field_type is Decimal:
        return str(_require_finite(_require(value, Decimal)))
    if field_type in (date, datetime):
        return _require(value, field_type).isoformat()
    if field_type is float and isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    return _require(value, field_type)


def check_field_value(value: object, field_type: Any) -> None:
    """Check that a Python value fits a declared field type.

    Types without a codec are not checked.

    Args:
        value: Candidate field value.
        field_type: Declared field type.

    Raises:
        TypeError: If the value has the wrong Python type.
        ValueError: If the value is not an allowed choice or not finite.
    """
    if get_origin(field_type) is Literal:
        _require_choice(value, field_type)
        return
    if field_type is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"expected number, got {type(value).__name__}")
        return
    if field_type is Decimal:
        _require_finite(_require(value, Decimal))
        return
    if field_type in SUPPORTED_FIELD_TYPES:
        _require(value, field_type)


def decode_value(raw_value: object, field_type: Any) -> object:
    """Decode one JSON payload value into a typed field value.

    Args:
        raw_value: Value parsed from JSON.
        field_type: Declared field type.

    Returns:
        Typed field value.

    Raises:
        TypeError: If the JSON type does not match the field type.
        ValueError: If the payload text does not parse.
    """
    if get_origin(field_type) is Literal:
        return _require_choice(raw_value, field_type)
    if field_type in (bool, int, str):
        return _require(raw_value, field_type)
    if field_type is float:
        if isinstance(raw_value, bool) or not isinstance(raw_value, (int, float)):
            raise TypeError(f"expected number, got {type(raw_value).__name__}")
        return float(raw_value)
    return parse_text(_require(raw_value, str), field_type)


def parse_text(raw_text: str, field_type: Any) -> object:
    """Parse trimmed delimited text into a typed field value.

    Args:
        raw_text: Field text.
        field_type: Declared field type.

    Returns:
        Typed field value.

    Raises:
        ValueError: If the text does not parse for the field type.
    """
    if get_origin(field_type) is Literal:
        if raw_text not in get_args(field_type):
            raise ValueError(f"'{raw_text}' is not {type_name(field_type)}")
        return raw_text
    if field_type is str:
        return raw_text
    if field_type is bool:
        return _parse_bool_text(raw_text)
    if field_type is int:
        return int(raw_text)
    if field_type is float:
        return float(raw_text)
    if field_type is Decimal:
        return _parse_decimal_text(raw_text)
    if field_type is datetime:
        return datetime.fromisoformat(raw_text)
    if field_type is date:
        return date.fromisoformat(raw_text)
    raise ValueError(f"no text parser for {type_name(field_type)}")


def _is_string_literal(field_type: Any) -> bool:
    if get_origin(field_type) is not Literal:
        return False
    return all(isinstance(choice, str) for choice in get_args(field_type))


def _require(value: object, expected_type: type) -> Any:
    # bool is an int subclass and datetime a date subclass; keep them distinct.
    if expected_type is int and isinstance(value, bool):
        raise TypeError("expected int, got bool")
    if expected_type is date and isinstance(value, datetime):
        raise TypeError("expected date, got datetime")
    if not isinstance(value, expected_type):
        raise TypeError(f"expected {expected_type.__name__}, got {type(value).__name__}")
    return value


def _require_choice(value: object, field_type: Any) -> str:
    if value not in get_args(field_type):
        raise ValueError(f"{value!r} is not {type_name(field_type)}")
    return str(value)


def _require_finite(value: Decimal) -> Decimal:
    if not value.is_finite():
        raise ValueError(f"decimal must be finite, got '{value}'")
    return value


def _parse_bool_text(raw_text: str) -> bool:
    normalized_text = raw_text.lower()
    if normalized_text in TRUE_VALUES:
        return True
    if normalized_text in FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean '{raw_text}'")


def _parse_decimal_text(raw_text: str) -> Decimal:
    try:
        value = Decimal(raw_text)
    except InvalidOperation as error:
        raise ValueError(f"invalid decimal '{raw_text}'") from error
    if not value.is_finite():
        raise ValueError(f"decimal must be finite, got '{raw_text}'")
    return value
