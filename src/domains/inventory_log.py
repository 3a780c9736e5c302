"""Persisted inventory log.

This module pairs an inventory item store with its snapshot file so a
session can add items, save them, clear memory, and load them back.
"""

from __future__ import annotations

from pathlib import Path

from core.config import StockroomConfig
from core.types import InventoryItem
from domains.registry import get_entity_type
from store.entity_store import EntityStore
from store.snapshot_io import load_store, save_store


class InventoryLog:
    """Inventory item store bound to one snapshot file."""

    def __init__(self, snapshot_path: Path, atomic_writes: bool = True) -> None:
        self._spec = get_entity_type("inventory_item")
        self._snapshot_path = snapshot_path
        self._atomic_writes = atomic_writes
        self._store: EntityStore[int, InventoryItem] = self._spec.new_store()

    @classmethod
    def from_config(cls, config: StockroomConfig, store_file: str) -> "InventoryLog":
        """Bind a log to ``store_file`` resolved under the data root."""
        return cls(config.resolve_store_path(store_file), atomic_writes=config.atomic_writes)

    @property
    def snapshot_path(self) -> Path:
        return self._snapshot_path

    def add(self, item: InventoryItem) -> None:
        """Add an item; raises ``DuplicateKeyError`` for a repeated id."""
        self._store.add(item)

    def get_all(self) -> tuple[InventoryItem, ...]:
        return self._store.get_all()

    def save(self) -> Path:
        """Write the log to its snapshot file."""
        return save_store(
            self._store,
            self._snapshot_path,
            self._spec.codec,
            atomic=self._atomic_writes,
        )

    def load(self) -> bool:
        """Replace the in-memory log with the snapshot contents.

        Returns:
            False when no snapshot file existed; the log is then empty.
        """
        result = load_store(
            self._snapshot_path,
            self._spec.codec,
            validators=self._spec.validators,
            name=self._spec.label,
        )
        self._store = result.store
        return result.found

    def clear(self) -> None:
        """Forget the in-memory items without touching the snapshot."""
        self._store.clear()
