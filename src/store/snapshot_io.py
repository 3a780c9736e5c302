"""JSON snapshot persistence for entity stores.

This module saves a store's full ordered contents to a JSON array and
restores it into a fresh store. A missing snapshot file is reported as
"no prior data", never as an error.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path
from typing import Generic, Hashable, Mapping, TypeVar

from core.constants import SNAPSHOT_JSON_INDENT, TEMP_FILE_SUFFIX
from core.errors import (
    CorruptDataError,
    DuplicateKeyError,
    InvalidValueError,
    StockroomIOError,
)
from core.logging_config import get_logger
from core.types import KeyedEntity
from store.entity_codec import EntityCodec
from store.entity_store import EntityStore
from store.field_validation import FieldValidator

_LOGGER = get_logger(__name__)

V = TypeVar("V", bound=KeyedEntity)


@dataclass(frozen=True)
class LoadResult(Generic[V]):
    """Outcome of loading a snapshot.

    Attributes:
        store: Restored store; empty when no snapshot existed.
        found: False when the source file did not exist.
    """

    store: EntityStore[Hashable, V]
    found: bool


def save_store(
    store: EntityStore[Hashable, V],
    destination: Path,
    codec: EntityCodec[V],
    atomic: bool = True,
) -> Path:
    """Write every stored entity, in order, to a JSON snapshot.

    Args:
        store: Store to serialize through ``get_all``.
        destination: Snapshot file path; parent directories are created.
        codec: Codec for the store's entity type.
        atomic: Write a sibling temporary file and swap it into place.

    Returns:
        The written snapshot path.

    Raises:
        InvalidValueError: If a stored value cannot be encoded.
        StockroomIOError: If the filesystem rejects the write.
    """
    try:
        payload = [codec.to_payload(entity) for entity in store.get_all()]
    except (TypeError, ValueError) as error:
        raise InvalidValueError(
            f"Cannot save {codec.entity_name} snapshot to {destination}: {error}. "
            "Fix the stored value before saving."
        ) from error
    text = json.dumps(payload, indent=SNAPSHOT_JSON_INDENT, ensure_ascii=False) + "\n"
    target_path = destination if not atomic else _temp_path(destination)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        target_path.write_text(text, encoding="utf-8")
        if atomic:
            target_path.replace(destination)
    except OSError as error:
        raise StockroomIOError(
            f"Failed to save {codec.entity_name} snapshot to {destination}: {error}. "
            "Check that the directory exists and is writable."
        ) from error
    _LOGGER.info(
        "store_saved",
        path=str(destination),
        entity_type=codec.entity_name,
        entity_count=len(payload),
    )
    return destination


def load_store(
    source: Path,
    codec: EntityCodec[V],
    validators: Mapping[str, FieldValidator] | None = None,
    name: str = "item",
) -> LoadResult[V]:
    """Restore a store from a JSON snapshot.

    Args:
        source: Snapshot file path.
        codec: Codec for the snapshot's entity type.
        validators: Field validators for the restored store.
        name: Entity label for the restored store.

    Returns:
        Load result; ``found`` is False and the store empty when ``source``
        does not exist.

    Raises:
        CorruptDataError: If the snapshot exists but cannot be decoded.
        StockroomIOError: If the snapshot exists but cannot be read.
    """
    store: EntityStore[Hashable, V] = EntityStore(name=name, validators=validators)
    if not source.exists():
        _LOGGER.info("store_load_missing", path=str(source), entity_type=codec.entity_name)
        return LoadResult(store=store, found=False)
    for entity in _read_snapshot_entities(source, codec):
        try:
            store.add(entity)
        except DuplicateKeyError as error:
            raise CorruptDataError(
                f"Snapshot at {source} repeats an entity id: {error}. "
                "Remove the duplicate entry or restore the file from a backup."
            ) from error
    _LOGGER.info(
        "store_loaded",
        path=str(source),
        entity_type=codec.entity_name,
        entity_count=len(store),
    )
    return LoadResult(store=store, found=True)


def _read_snapshot_entities(source: Path, codec: EntityCodec[V]) -> list[V]:
    """Read and decode snapshot entities in file order.

    Raises:
        CorruptDataError: If JSON or entity payloads are invalid.
        StockroomIOError: If the file cannot be read.
    """
    try:
        text = source.read_text(encoding="utf-8")
    except UnicodeDecodeError as error:
        raise CorruptDataError(
            f"Failed to decode snapshot at {source}: {error}. Snapshots must be UTF-8 JSON."
        ) from error
    except OSError as error:
        raise StockroomIOError(
            f"Failed to read snapshot at {source}: {error}. Check file permissions and retry."
        ) from error
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as error:
        raise CorruptDataError(
            f"Failed to parse snapshot at {source}: {error.msg} "
            f"(line {error.lineno}). Fix the JSON syntax or restore the file."
        ) from error
    if not isinstance(payload, list):
        raise CorruptDataError(
            f"Failed to parse snapshot at {source}: expected JSON array at top level, "
            f"got {type(payload).__name__}."
        )
    return [codec.from_payload(row, position) for position, row in enumerate(payload)]


def _temp_path(destination: Path) -> Path:
    return destination.with_name(destination.name + TEMP_FILE_SUFFIX)
