"""Unit tests for entity codecs."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

import pytest

from core.errors import BadFormatError, CorruptDataError, MissingFieldError
from core.types import Account, GroceryItem, Transaction
from store.entity_codec import EntityCodec


def test_to_payload_encodes_typed_fields() -> None:
    """Decimal, datetime, and literal fields should encode as JSON-safe values."""
    codec = EntityCodec(Transaction)
    transaction = Transaction(
        id=1,
        date=datetime(2024, 5, 1, 9, 30),
        amount=Decimal("150.10"),
        category="Groceries",
    )

    payload = codec.to_payload(transaction)

    assert payload == {
        "id": 1,
        "date": "2024-05-01T09:30:00",
        "amount": "150.10",
        "category": "Groceries",
    }


def test_from_payload_restores_equal_entity() -> None:
    """Decoding an encoded payload should reproduce every field exactly."""
    codec = EntityCodec(Account)
    account = Account(id="ACC12345", balance=Decimal("1000.00"), kind="balance_limited")

    restored = codec.from_payload(codec.to_payload(account))

    assert restored == account and str(restored.balance) == "1000.00"


def test_from_payload_rejects_missing_and_unknown_fields() -> None:
    """Payload keys should match the dataclass fields exactly."""
    codec = EntityCodec(GroceryItem)

    with pytest.raises(CorruptDataError):
        codec.from_payload({"id": 1, "name": "Milk", "quantity": 3})
    with pytest.raises(CorruptDataError):
        codec.from_payload(
            {"id": 1, "name": "Milk", "quantity": 3, "expiry_date": "2030-01-01", "x": 1}
        )

    assert codec.field_names == ("id", "name", "quantity", "expiry_date")


@pytest.mark.parametrize(
    "bad_payload",
    [
        {"id": "1", "name": "Milk", "quantity": 3, "expiry_date": "2030-01-01"},
        {"id": 1, "name": "Milk", "quantity": True, "expiry_date": "2030-01-01"},
        {"id": 1, "name": "Milk", "quantity": 3, "expiry_date": "not-a-date"},
        ["not", "an", "object"],
    ],
)
def test_from_payload_rejects_mistyped_values(bad_payload: object) -> None:
    """Mistyped payload values should surface as corrupt data."""
    codec = EntityCodec(GroceryItem)

    with pytest.raises(CorruptDataError):
        codec.from_payload(bad_payload, position=0)

    assert codec.arity == 4


def test_from_payload_rejects_unknown_literal_choice() -> None:
    """Literal fields should only accept declared choices."""
    codec = EntityCodec(Account)

    with pytest.raises(CorruptDataError):
        codec.from_payload({"id": "A1", "balance": "5", "kind": "overdraft"})

    assert codec.field_type("kind") is not None


def test_from_text_fields_trims_and_parses() -> None:
    """Delimited fields should be trimmed and parsed by declared type."""
    codec = EntityCodec(GroceryItem)

    item = codec.from_text_fields([" 201", " Rice 5kg ", "40 ", "2030-01-01"], line_number=1)

    assert item == GroceryItem(id=201, name="Rice 5kg", quantity=40, expiry_date=date(2030, 1, 1))


def test_from_text_fields_wrong_arity_raises_missing_field() -> None:
    """Field count mismatches should raise MissingFieldError with the line number."""
    codec = EntityCodec(GroceryItem)

    with pytest.raises(MissingFieldError) as error_info:
        codec.from_text_fields(["201", "Rice"], line_number=7)

    assert error_info.value.line_number == 7


def test_from_text_fields_unparseable_number_raises_bad_format() -> None:
    """Non-numeric text in a numeric field should raise BadFormatError."""
    codec = EntityCodec(GroceryItem)

    with pytest.raises(BadFormatError) as error_info:
        codec.from_text_fields(["201", "Rice", "forty", "2030-01-01"], line_number=2)

    assert "quantity" in str(error_info.value)


def test_codec_rejects_non_dataclass_and_unsupported_fields() -> None:
    """Codec construction should fail fast for unusable entity types."""

    @dataclass(frozen=True)
    class _ListEntity:
        id: int
        tags: list

    with pytest.raises(TypeError):
        EntityCodec(dict)
    with pytest.raises(TypeError):
        EntityCodec(_ListEntity)

    assert True


def test_coerce_field_parses_text_and_keeps_typed_values() -> None:
    """Coercion should parse strings and pass through already-typed values."""
    codec = EntityCodec(Transaction)

    assert (
        codec.coerce_field("amount", "12.50") == Decimal("12.50")
        and codec.coerce_field("amount", 3) == Decimal("3")
        and codec.coerce_field("id", 4) == 4
        and codec.coerce_field("id", " 4 ") == 4
    )
