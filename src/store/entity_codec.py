"""Entity serialization for snapshot and import flows.

This module centralizes dataclass entity conversion logic.
It is reused by snapshot persistence, delimited line import, and run-spec
steps so every entry point agrees on field names and value types.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, is_dataclass
from decimal import Decimal
from typing import Any, Generic, Mapping, Sequence, TypeVar, get_type_hints

from core.errors import BadFormatError, CorruptDataError, MissingFieldError
from store.field_codecs import (
    decode_value,
    encode_value,
    ensure_supported_type,
    parse_text,
    type_name,
)

V = TypeVar("V")


@dataclass(frozen=True)
class FieldSpec:
    """Name and declared type of one entity field."""

    name: str
    field_type: Any


class EntityCodec(Generic[V]):
    """Typed converter between one entity dataclass and its wire forms.

    Field order follows the dataclass declaration; it defines both the
    JSON object key order and the delimited column order.
    """

    def __init__(self, entity_type: type[V]) -> None:
        """Build codec field specs from an entity dataclass.

        Args:
            entity_type: Frozen dataclass exposing an ``id`` field.

        Raises:
            TypeError: If the type is not a dataclass or declares an
                unsupported field type.
        """
        if not is_dataclass(entity_type):
            raise TypeError(f"{entity_type!r} is not a dataclass entity type")
        type_hints = get_type_hints(entity_type)
        self._entity_type = entity_type
        self._fields = tuple(
            FieldSpec(
                name=field.name,
                field_type=ensure_supported_type(type_hints[field.name], field.name),
            )
            for field in fields(entity_type)
        )
        if "id" not in self.field_names:
            raise TypeError(f"{entity_type.__name__} must declare an 'id' field")

    @property
    def entity_type(self) -> type[V]:
        return self._entity_type

    @property
    def entity_name(self) -> str:
        return self._entity_type.__name__

    @property
    def field_specs(self) -> tuple[FieldSpec, ...]:
        return self._fields

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self._fields)

    @property
    def arity(self) -> int:
        """Number of delimited fields per record."""
        return len(self._fields)

    def field_type(self, field_name: str) -> Any:
        """Return the declared type of a field, or None when undeclared."""
        for spec in self._fields:
            if spec.name == field_name:
                return spec.field_type
        return None

    def to_payload(self, entity: V) -> dict[str, object]:
        """Serialize an entity into a JSON-safe payload.

        Args:
            entity: Entity instance of this codec's type.

        Returns:
            Dictionary payload in declared field order.
        """
        return {
            spec.name: encode_value(getattr(entity, spec.name), spec.field_type)
            for spec in self._fields
        }

    def from_payload(self, payload: object, position: int | None = None) -> V:
        """Deserialize a JSON payload into an entity.

        Args:
            payload: Parsed JSON value for one entity.
            position: Optional zero-based position in the snapshot.

        Returns:
            Parsed entity.

        Raises:
            CorruptDataError: If payload shape or values are invalid.
        """
        context = self._payload_context(position)
        if not isinstance(payload, Mapping):
            raise CorruptDataError(
                f"Invalid {context}: expected JSON object, got {type(payload).__name__}."
            )
        missing_fields = [name for name in self.field_names if name not in payload]
        unknown_fields = sorted(set(payload) - set(self.field_names))
        if missing_fields or unknown_fields:
            raise CorruptDataError(
                f"Invalid {context}: missing fields {missing_fields}, "
                f"unknown fields {unknown_fields}."
            )
        values: dict[str, Any] = {}
        for spec in self._fields:
            try:
                values[spec.name] = decode_value(payload[spec.name], spec.field_type)
            except (TypeError, ValueError) as error:
                raise CorruptDataError(
                    f"Invalid {context}: field '{spec.name}' could not be decoded "
                    f"as {type_name(spec.field_type)}: {error}."
                ) from error
        return self._entity_type(**values)

    def from_text_fields(self, raw_fields: Sequence[str], line_number: int) -> V:
        """Parse one delimited record into an entity.

        Args:
            raw_fields: Untrimmed field texts of one line.
            line_number: One-based line number for error context.

        Returns:
            Parsed entity.

        Raises:
            MissingFieldError: If the field count differs from ``arity``.
            BadFormatError: If any field does not parse for its type.
        """
        if len(raw_fields) != self.arity:
            raise MissingFieldError(
                f"Missing field(s) at line {line_number}: expected {self.arity} "
                f"fields ({', '.join(self.field_names)}), got {len(raw_fields)}.",
                line_number=line_number,
            )
        values: dict[str, Any] = {}
        for spec, raw_text in zip(self._fields, raw_fields):
            text = raw_text.strip()
            try:
                values[spec.name] = parse_text(text, spec.field_type)
            except ValueError as error:
                raise BadFormatError(
                    f"Invalid {spec.name} format at line {line_number}: "
                    f"'{text}' does not parse as {type_name(spec.field_type)}.",
                    line_number=line_number,
                ) from error
        return self._entity_type(**values)

    def coerce_field(self, field_name: str, value: object) -> object:
        """Coerce a text or payload value onto a field's declared type.

        Args:
            field_name: Target field.
            value: Raw value, typically from CLI or YAML input.

        Returns:
            Typed value, or the input unchanged for undeclared fields.

        Raises:
            ValueError: If the value cannot be converted.
        """
        field_type = self.field_type(field_name)
        if field_type is None:
            return value
        if type(value) is field_type:
            return value
        if field_type is Decimal and type(value) in (int, float):
            return Decimal(str(value))
        if isinstance(value, str):
            return parse_text(value.strip(), field_type)
        try:
            return decode_value(value, field_type)
        except TypeError as error:
            raise ValueError(str(error)) from error

    def _payload_context(self, position: int | None) -> str:
        if position is None:
            return f"{self.entity_name} payload"
        return f"{self.entity_name} payload at index {position}"
