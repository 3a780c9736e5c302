"""Delimited line import for entity stores.

This module parses fixed-arity delimited records into typed entities.
Parsing is fail-fast: the first malformed line aborts the whole call and
no partially parsed entities are returned.
"""

from __future__ import annotations

from pathlib import Path
from typing import Hashable, Iterable, TypeVar

from core.constants import DEFAULT_IMPORT_DELIMITER
from core.errors import StockroomIOError
from core.logging_config import get_logger
from core.types import KeyedEntity
from store.entity_codec import EntityCodec
from store.entity_store import EntityStore

_LOGGER = get_logger(__name__)

V = TypeVar("V", bound=KeyedEntity)


def parse_delimited_lines(
    lines: Iterable[str],
    codec: EntityCodec[V],
    delimiter: str = DEFAULT_IMPORT_DELIMITER,
) -> list[V]:
    """Parse delimited records into entities.

    Args:
        lines: Raw record lines; every line is a record, blank ones included.
        codec: Codec that defines arity, column order, and field types.
        delimiter: Single field separator character.

    Returns:
        Parsed entities in line order.

    Raises:
        MissingFieldError: If a line's field count differs from the arity.
        BadFormatError: If a field does not parse for its type.
    """
    entities: list[V] = []
    for line_number, line in enumerate(lines, 1):
        record_text = line.rstrip("\r\n")
        entities.append(codec.from_text_fields(record_text.split(delimiter), line_number))
    return entities


def read_delimited_file(
    source_path: Path,
    codec: EntityCodec[V],
    delimiter: str = DEFAULT_IMPORT_DELIMITER,
) -> list[V]:
    """Read and parse a delimited record file.

    Args:
        source_path: Input text file.
        codec: Codec for the file's entity type.
        delimiter: Single field separator character.

    Returns:
        Parsed entities in file order.

    Raises:
        StockroomIOError: If the file is missing or unreadable.
        MissingFieldError: If a line has the wrong number of fields.
        BadFormatError: If a field does not parse for its type.
    """
    if not source_path.is_file():
        raise StockroomIOError(
            f"Input file not found: {source_path}. Provide an existing delimited text file."
        )
    try:
        text = source_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        raise StockroomIOError(
            f"Failed to read input file {source_path}: {error}. "
            "Check file permissions and encoding."
        ) from error
    entities = parse_delimited_lines(text.splitlines(), codec, delimiter)
    _LOGGER.info(
        "lines_imported",
        path=str(source_path),
        entity_type=codec.entity_name,
        entity_count=len(entities),
    )
    return entities


def import_entities(store: EntityStore[Hashable, V], entities: Iterable[V]) -> int:
    """Add parsed entities to a store in order.

    Args:
        store: Destination store.
        entities: Entities to add.

    Returns:
        Number of entities added.

    Raises:
        DuplicateKeyError: If an entity id is already stored; entities
            before the duplicate stay added.
    """
    added_count = 0
    for entity in entities:
        store.add(entity)
        added_count += 1
    return added_count
