"""In-memory keyed entity store.

This module owns the canonical ``id -> entity`` mapping and enforces
identifier uniqueness. Entities are frozen values; updates replace the
stored value through validated field updates.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass, replace
from typing import Callable, Generic, Hashable, Iterator, Mapping, TypeVar, get_type_hints

from core.constants import IDENTITY_FIELD_NAME, QUANTITY_FIELD_NAME
from core.errors import DuplicateKeyError, InvalidValueError, NotFoundError
from core.types import KeyedEntity
from store.field_codecs import check_field_value
from store.field_validation import FieldValidator

K = TypeVar("K", bound=Hashable)
V = TypeVar("V", bound=KeyedEntity)


class EntityStore(Generic[K, V]):
    """Insertion-ordered store of entities keyed by their ``id``.

    Enumeration follows insertion order; removing an entity never
    reorders the survivors.
    """

    def __init__(
        self,
        name: str = "item",
        validators: Mapping[str, FieldValidator] | None = None,
    ) -> None:
        """Create an empty store.

        Args:
            name: Singular entity label used in error messages.
            validators: Per-field constraints applied by ``update_field``.
        """
        self._name = name
        self._validators = dict(validators or {})
        self._entities: dict[K, V] = {}

    @property
    def name(self) -> str:
        return self._name

    @property
    def validators(self) -> Mapping[str, FieldValidator]:
        return dict(self._validators)

    def add(self, entity: V) -> None:
        """Insert a new entity.

        Args:
            entity: Entity with an id not yet stored.

        Raises:
            DuplicateKeyError: If an entity with the same id exists.
        """
        entity_id = entity.id
        if entity_id in self._entities:
            raise DuplicateKeyError(f"{self._label()} with ID {entity_id} already exists.")
        self._entities[entity_id] = entity

    def get_by_id(self, entity_id: K) -> V:
        """Return the entity stored under ``entity_id``.

        Raises:
            NotFoundError: If no entity has that id.
        """
        try:
            return self._entities[entity_id]
        except KeyError:
            raise NotFoundError(
                f"{self._label()} with ID {entity_id} was not found."
            ) from None

    def find(self, predicate: Callable[[V], bool]) -> V:
        """Return the first entity, in insertion order, matching ``predicate``.

        Raises:
            NotFoundError: If nothing matches.
        """
        for entity in self._entities.values():
            if predicate(entity):
                return entity
        raise NotFoundError(f"No {self._label().lower()} matches the requested criteria.")

    def find_all(self, predicate: Callable[[V], bool]) -> tuple[V, ...]:
        """Return every entity matching ``predicate``; empty when none do."""
        return tuple(entity for entity in self._entities.values() if predicate(entity))

    def remove(self, entity_id: K) -> None:
        """Delete the entity stored under ``entity_id``.

        Raises:
            NotFoundError: If no entity has that id.
        """
        if entity_id not in self._entities:
            raise NotFoundError(
                f"Cannot remove: {self._label().lower()} with ID {entity_id} does not exist."
            )
        del self._entities[entity_id]

    def update_field(self, entity_id: K, field_name: str, value: object) -> V:
        """Replace one non-identity field of a stored entity.

        Existence is checked before the value, so an unknown id always
        fails with ``NotFoundError`` whatever the candidate value is.

        Args:
            entity_id: Id of the stored entity.
            field_name: Field to replace.
            value: Candidate value.

        Returns:
            The updated entity now held by the store.

        Raises:
            NotFoundError: If no entity has that id.
            InvalidValueError: If the field is the identity, is unknown, the
                value does not fit the declared field type, or the value
                fails the field's validator.
        """
        current = self.get_by_id(entity_id)
        if field_name == IDENTITY_FIELD_NAME:
            raise InvalidValueError(
                f"Field '{IDENTITY_FIELD_NAME}' is immutable; remove and re-add the entity instead."
            )
        if field_name not in _field_names(current):
            raise InvalidValueError(
                f"{type(current).__name__} has no field '{field_name}'."
            )
        try:
            check_field_value(value, get_type_hints(type(current)).get(field_name))
        except (TypeError, ValueError) as error:
            raise InvalidValueError(
                f"Invalid {field_name} value {value!r} for {type(current).__name__}: {error}."
            ) from error
        validator = self._validators.get(field_name)
        if validator is not None:
            validator(field_name, value)
        updated = replace(current, **{field_name: value})
        self._entities[entity_id] = updated
        return updated

    def update_quantity(self, entity_id: K, quantity: int) -> V:
        """Shorthand for ``update_field(entity_id, "quantity", quantity)``."""
        return self.update_field(entity_id, QUANTITY_FIELD_NAME, quantity)

    def get_all(self) -> tuple[V, ...]:
        """Return a snapshot of all entities in insertion order."""
        return tuple(self._entities.values())

    def clear(self) -> None:
        """Forget every stored entity."""
        self._entities.clear()

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._entities

    def __iter__(self) -> Iterator[V]:
        return iter(self.get_all())

    def __len__(self) -> int:
        return len(self._entities)

    def _label(self) -> str:
        return self._name.capitalize()


def _field_names(entity: object) -> tuple[str, ...]:
    if not is_dataclass(entity):
        raise TypeError(
            f"{type(entity).__name__} is not a dataclass; field updates need dataclass entities."
        )
    return tuple(field.name for field in fields(entity))
