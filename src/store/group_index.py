"""Secondary grouping index over a store snapshot.

The index is a derived, disposable view: it reflects the store state at
build time and is never kept in sync with later store mutations.
"""

from __future__ import annotations

from typing import Callable, Generic, Hashable, TypeVar

from core.types import KeyedEntity
from store.entity_store import EntityStore

G = TypeVar("G", bound=Hashable)
V = TypeVar("V", bound=KeyedEntity)


class GroupIndex(Generic[G, V]):
    """Entities grouped by a secondary key, in store enumeration order."""

    def __init__(self) -> None:
        self._groups: dict[G, tuple[V, ...]] = {}

    def build_from(
        self,
        store: EntityStore[Hashable, V],
        group_key_fn: Callable[[V], G],
    ) -> "GroupIndex[G, V]":
        """Replace the grouping with one computed from a store snapshot.

        Args:
            store: Source store; read once through ``get_all``.
            group_key_fn: Maps an entity to its group key.

        Returns:
            This index, for chaining.
        """
        grouped: dict[G, list[V]] = {}
        for entity in store.get_all():
            grouped.setdefault(group_key_fn(entity), []).append(entity)
        self._groups = {key: tuple(members) for key, members in grouped.items()}
        return self

    def lookup_group(self, group_key: G) -> tuple[V, ...]:
        """Return the entities in a group; empty when the key was never seen."""
        return self._groups.get(group_key, ())

    def lookup_ids(self, group_key: G) -> tuple[Hashable, ...]:
        """Return the ids of the entities in a group."""
        return tuple(entity.id for entity in self.lookup_group(group_key))

    def group_keys(self) -> tuple[G, ...]:
        """Return group keys in first-seen order."""
        return tuple(self._groups)

    def __len__(self) -> int:
        return len(self._groups)


def build_index(
    store: EntityStore[Hashable, V],
    group_key_fn: Callable[[V], G],
) -> GroupIndex[G, V]:
    """Build a fresh index from ``store`` grouped by ``group_key_fn``."""
    index: GroupIndex[G, V] = GroupIndex()
    return index.build_from(store, group_key_fn)
