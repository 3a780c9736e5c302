"""Python SDK for entity store operations.

This module exposes high-level APIs that bind a registered entity type to
its snapshot file and accept loosely typed input from the CLI and
run-specs, coercing it through the entity codec.
"""

from __future__ import annotations

from dataclasses import replace
import json
from pathlib import Path
from typing import Any, Hashable, Mapping

from core.config import StockroomConfig, parse_delimiter
from core.constants import SNAPSHOT_FILE_SUFFIX
from core.errors import BadFormatError, MissingFieldError
from core.run_spec_execution import execute_run_spec_file
from domains.registry import EntityTypeSpec, get_entity_type
from domains.warehouse import increase_stock
from ingest.line_reader import import_entities, read_delimited_file
from store.entity_store import EntityStore
from store.group_index import GroupIndex, build_index
from store.snapshot_io import load_store, save_store


class StockroomClient:
    """Primary SDK entry point for store workflows."""

    def __init__(self, config: StockroomConfig | None = None) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
        """
        self._config = config or StockroomConfig.from_env()

    @property
    def config(self) -> StockroomConfig:
        return self._config

    def collection(self, entity_type: str, store_file: str | None = None) -> "EntityCollection":
        """Get a collection handle for an entity type.

        Args:
            entity_type: Registered entity type name.
            store_file: Snapshot file; defaults to ``<entity_type>.json``
                under the data root.

        Returns:
            Collection handle with an empty in-memory store.

        Raises:
            StockroomConfigError: If the entity type is not registered.
        """
        spec = get_entity_type(entity_type)
        snapshot_path = self._config.resolve_store_path(
            store_file or f"{entity_type}{SNAPSHOT_FILE_SUFFIX}"
        )
        return EntityCollection(spec, snapshot_path, self._config)

    def with_data_root(self, data_root: str) -> "StockroomClient":
        """Clone the client with a different local data root.

        Args:
            data_root: New data root path.

        Returns:
            New SDK client instance.
        """
        resolved_root = Path(data_root).expanduser().resolve()
        return StockroomClient(replace(self._config, data_root=resolved_root))

    def run_spec(self, spec_file: str) -> tuple[str, ...]:
        """Execute a YAML run-spec through the shared execution engine.

        Args:
            spec_file: Path to YAML run-spec file.

        Returns:
            Ordered output lines.
        """
        return execute_run_spec_file(self, spec_file)


class EntityCollection:
    """Entity store bound to a registered type and a snapshot file."""

    def __init__(
        self,
        spec: EntityTypeSpec,
        snapshot_path: Path,
        config: StockroomConfig,
    ) -> None:
        self._spec = spec
        self._snapshot_path = snapshot_path
        self._config = config
        self._store: EntityStore[Hashable, Any] = spec.new_store()

    @property
    def entity_type(self) -> str:
        return self._spec.name

    @property
    def snapshot_path(self) -> Path:
        return self._snapshot_path

    @property
    def store(self) -> EntityStore[Hashable, Any]:
        return self._store

    def load(self) -> bool:
        """Replace the in-memory store with the snapshot contents.

        Returns:
            False when the snapshot file does not exist yet.

        Raises:
            CorruptDataError: If the snapshot cannot be decoded.
            StockroomIOError: If the snapshot cannot be read.
        """
        result = load_store(
            self._snapshot_path,
            self._spec.codec,
            validators=self._spec.validators,
            name=self._spec.label,
        )
        self._store = result.store
        return result.found

    def save(self) -> Path:
        """Write the in-memory store to the snapshot file."""
        return save_store(
            self._store,
            self._snapshot_path,
            self._spec.codec,
            atomic=self._config.atomic_writes,
        )

    def add(self, values: Mapping[str, object]) -> Any:
        """Build an entity from loosely typed values and add it.

        Args:
            values: Field name to raw value; every field is required.

        Returns:
            The added entity.

        Raises:
            MissingFieldError: If a field is missing.
            BadFormatError: If a field is unknown or does not parse.
            DuplicateKeyError: If the id is already stored.
        """
        codec = self._spec.codec
        missing_fields = [name for name in codec.field_names if name not in values]
        if missing_fields:
            raise MissingFieldError(
                f"Cannot add {self._spec.label}: missing fields {', '.join(missing_fields)}."
            )
        unknown_fields = sorted(set(values) - set(codec.field_names))
        if unknown_fields:
            raise BadFormatError(
                f"Cannot add {self._spec.label}: unknown fields {', '.join(unknown_fields)}."
            )
        typed_values = {name: self._coerce(name, values[name]) for name in codec.field_names}
        entity = codec.entity_type(**typed_values)
        self._store.add(entity)
        return entity

    def get(self, entity_id: object) -> Any:
        """Return the entity with ``entity_id``; raises ``NotFoundError``."""
        return self._store.get_by_id(self._coerce("id", entity_id))

    def update(self, entity_id: object, field_name: str, value: object) -> Any:
        """Validate and apply one field update.

        Existence is checked before the value is coerced or validated.
        """
        typed_id = self._coerce("id", entity_id)
        self._store.get_by_id(typed_id)
        return self._store.update_field(typed_id, field_name, self._coerce(field_name, value))

    def increase_stock(self, entity_id: object, amount: int) -> Any:
        """Add ``amount`` units to an item's quantity."""
        return increase_stock(self._store, self._coerce("id", entity_id), amount)

    def remove(self, entity_id: object) -> None:
        """Remove the entity with ``entity_id``; raises ``NotFoundError``."""
        self._store.remove(self._coerce("id", entity_id))

    def get_all(self) -> tuple[Any, ...]:
        """Return all entities in insertion order."""
        return self._store.get_all()

    def group_by(self, field_name: str) -> GroupIndex[Any, Any]:
        """Build an index grouping entities by one field.

        Raises:
            BadFormatError: If the entity type has no such field.
        """
        if field_name not in self._spec.codec.field_names:
            raise BadFormatError(
                f"Cannot group {self._spec.label} by unknown field '{field_name}'. "
                f"Use one of: {', '.join(self._spec.codec.field_names)}."
            )
        return build_index(self._store, lambda entity: getattr(entity, field_name))

    def coerce_group_key(self, field_name: str, raw_key: object) -> object:
        """Coerce a raw group key onto the field's declared type."""
        return self._coerce(field_name, raw_key)

    def import_file(self, source_path: Path, delimiter: str | None = None) -> int:
        """Parse a delimited file and add every entity in order.

        Returns:
            Number of entities added.

        Raises:
            StockroomConfigError: If ``delimiter`` is not one character.
            StockroomIOError: If the file is missing or unreadable.
            MissingFieldError: If a line has the wrong number of fields.
            BadFormatError: If a field does not parse.
            DuplicateKeyError: If an id is already stored.
        """
        entities = read_delimited_file(
            source_path,
            self._spec.codec,
            self._config.import_delimiter
            if delimiter is None
            else parse_delimiter(delimiter, "delimiter"),
        )
        return import_entities(self._store, entities)

    def to_payload(self, entity: Any) -> dict[str, object]:
        """Serialize an entity into its JSON-safe payload."""
        return self._spec.codec.to_payload(entity)

    def render(self, entity: Any) -> str:
        """Render an entity as one JSON line in declared field order."""
        return json.dumps(self.to_payload(entity), ensure_ascii=False)

    def _coerce(self, field_name: str, value: object) -> object:
        try:
            return self._spec.codec.coerce_field(field_name, value)
        except ValueError as error:
            raise BadFormatError(
                f"Invalid {field_name} value {value!r} for {self._spec.label}: {error}."
            ) from error
