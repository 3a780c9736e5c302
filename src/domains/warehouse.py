"""Warehouse stock workflows.

This module keeps electronics and groceries in separate stores that
share one quantity policy, and applies stock movements through
validated quantity updates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, TypeVar

from core.types import ElectronicItem, GroceryItem, KeyedEntity
from domains.registry import get_entity_type
from store.entity_store import EntityStore

V = TypeVar("V", bound=KeyedEntity)


@dataclass(frozen=True)
class Warehouse:
    """Electronics and grocery stores of one warehouse."""

    electronics: EntityStore[int, ElectronicItem]
    groceries: EntityStore[int, GroceryItem]


def build_warehouse() -> Warehouse:
    """Create an empty warehouse with quantity validation on both stores."""
    return Warehouse(
        electronics=get_entity_type("electronic_item").new_store(),
        groceries=get_entity_type("grocery_item").new_store(),
    )


def increase_stock(store: EntityStore[Hashable, V], item_id: Hashable, amount: int) -> V:
    """Add ``amount`` units to an item's quantity.

    Args:
        store: Store holding items with a ``quantity`` field.
        item_id: Item id.
        amount: Units to add; a negative amount removes stock.

    Returns:
        The updated item.

    Raises:
        NotFoundError: If the item does not exist.
        InvalidValueError: If the resulting quantity is negative.
    """
    item = store.get_by_id(item_id)
    new_quantity = getattr(item, "quantity") + amount
    return store.update_quantity(item_id, new_quantity)


def total_units(store: EntityStore[Hashable, V]) -> int:
    """Return the sum of quantities across a store."""
    return sum(getattr(item, "quantity") for item in store.get_all())
