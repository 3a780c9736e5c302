"""Type-safe field parsing helpers for run-spec execution.

This module centralizes primitive parsing so run-spec executors can stay
concise and produce consistent validation errors across CLI and SDK flows.
"""

from __future__ import annotations

from typing import Mapping

from core.errors import StockroomRunSpecError


def required_string(args: Mapping[str, object], field_name: str) -> str:
    """Read a required string field from a run-spec step."""
    value = optional_string(args, field_name)
    if value is None:
        raise StockroomRunSpecError(f"Run-spec step is missing required field '{field_name}'.")
    return value


def optional_string(args: Mapping[str, object], field_name: str) -> str | None:
    """Read an optional string field from a run-spec step."""
    value = args.get(field_name)
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped if stripped else None
    raise StockroomRunSpecError(f"Run-spec field '{field_name}' must be a string when provided.")


def optional_text(args: Mapping[str, object], field_name: str) -> str | None:
    """Read an optional string field verbatim, without trimming whitespace."""
    value = args.get(field_name)
    if value is None or isinstance(value, str):
        return value
    raise StockroomRunSpecError(f"Run-spec field '{field_name}' must be a string when provided.")


def required_int(args: Mapping[str, object], field_name: str) -> int:
    """Read a required integer field from a run-spec step."""
    value = args.get(field_name)
    if value is None:
        raise StockroomRunSpecError(f"Run-spec step is missing required field '{field_name}'.")
    if isinstance(value, bool) or not isinstance(value, int):
        raise StockroomRunSpecError(f"Run-spec field '{field_name}' must be an integer.")
    return value


def required_value(args: Mapping[str, object], field_name: str) -> object:
    """Read a required scalar field of any type from a run-spec step."""
    if field_name not in args or args[field_name] is None:
        raise StockroomRunSpecError(f"Run-spec step is missing required field '{field_name}'.")
    return args[field_name]


def required_mapping(args: Mapping[str, object], field_name: str) -> Mapping[str, object]:
    """Read a required mapping field with string keys from a run-spec step."""
    value = args.get(field_name)
    if not isinstance(value, Mapping) or not value:
        raise StockroomRunSpecError(
            f"Run-spec field '{field_name}' must be a non-empty mapping of field names to values."
        )
    if not all(isinstance(key, str) for key in value):
        raise StockroomRunSpecError(f"Run-spec field '{field_name}' must use string keys.")
    return value
