"""Entity type registry.

This module maps stable entity type names used by the CLI, run-specs,
and SDK onto their dataclass, codec, and field validators.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Hashable, Mapping

from core.errors import StockroomConfigError
from core.types import (
    Account,
    ElectronicItem,
    GroceryItem,
    InventoryItem,
    LedgerEntry,
    Patient,
    Prescription,
    Student,
    Transaction,
)
from store.entity_codec import EntityCodec
from store.entity_store import EntityStore
from store.field_validation import FieldValidator, in_range, non_blank, non_negative


@dataclass(frozen=True)
class EntityTypeSpec:
    """Registered entity type.

    Attributes:
        name: Stable registry name, e.g. ``grocery_item``.
        label: Singular label used in error messages.
        codec: Typed codec for the entity dataclass.
        validators: Field constraints applied by store updates.
    """

    name: str
    label: str
    codec: EntityCodec
    validators: Mapping[str, FieldValidator] = field(default_factory=dict)

    def new_store(self) -> EntityStore[Hashable, object]:
        """Create an empty store configured for this entity type."""
        return EntityStore(name=self.label, validators=self.validators)


_ITEM_VALIDATORS: Mapping[str, FieldValidator] = {"quantity": non_negative, "name": non_blank}

_ENTITY_TYPES: dict[str, EntityTypeSpec] = {
    spec.name: spec
    for spec in (
        EntityTypeSpec("inventory_item", "item", EntityCodec(InventoryItem), _ITEM_VALIDATORS),
        EntityTypeSpec("electronic_item", "item", EntityCodec(ElectronicItem), _ITEM_VALIDATORS),
        EntityTypeSpec("grocery_item", "item", EntityCodec(GroceryItem), _ITEM_VALIDATORS),
        EntityTypeSpec(
            "student",
            "student",
            EntityCodec(Student),
            {"score": in_range(0, 100), "full_name": non_blank},
        ),
        EntityTypeSpec("patient", "patient", EntityCodec(Patient), {"age": non_negative}),
        EntityTypeSpec(
            "prescription",
            "prescription",
            EntityCodec(Prescription),
            {"medication_name": non_blank},
        ),
        EntityTypeSpec(
            "transaction",
            "transaction",
            EntityCodec(Transaction),
            {"amount": non_negative, "category": non_blank},
        ),
        EntityTypeSpec("account", "account", EntityCodec(Account)),
        EntityTypeSpec("ledger_entry", "ledger entry", EntityCodec(LedgerEntry)),
    )
}


def supported_entity_types() -> tuple[str, ...]:
    """Return registered entity type names."""
    return tuple(_ENTITY_TYPES)


def get_entity_type(name: str) -> EntityTypeSpec:
    """Look up a registered entity type.

    Args:
        name: Registry name.

    Returns:
        Entity type spec.

    Raises:
        StockroomConfigError: If the name is not registered.
    """
    try:
        return _ENTITY_TYPES[name]
    except KeyError:
        raise StockroomConfigError(
            f"Unsupported entity type '{name}'. "
            f"Use one of: {', '.join(supported_entity_types())}."
        ) from None
